"""Step 5 of Glicko-2: re-estimate volatility with the Illinois algorithm."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from math import exp, log
from typing import Literal

SolverStage = Literal["bracket", "iterate"]


@dataclass(frozen=True)
class VolatilitySolution:
    """Outcome of one volatility solve.

    ``lower`` is the bracket end the new volatility is read from
    (``sigma' = exp(lower / 2)``). When ``converged`` is false, ``failed_stage``
    names the loop that ran out of iterations and ``volatility`` is the input sigma.
    """

    volatility: float
    lower: float
    upper: float
    iterations: int
    converged: bool
    failed_stage: SolverStage | None = None

    @property
    def width(self) -> float:
        return abs(self.upper - self.lower)


def volatility_objective(
    *,
    phi: float,
    sigma: float,
    delta: float,
    v: float,
    tau: float,
) -> Callable[[float], float]:
    """Return f(x) whose root is ln(sigma'^2)."""
    a = log(sigma**2)
    phi2 = phi**2
    delta2 = delta**2
    tau2 = tau**2

    def f(x: float) -> float:
        ex = exp(x)
        numerator = ex * (delta2 - phi2 - v - ex)
        denominator = 2.0 * (phi2 + v + ex) ** 2
        return (numerator / denominator) - ((x - a) / tau2)

    return f


def solve_volatility(
    *,
    phi: float,
    sigma: float,
    delta: float,
    v: float,
    tau: float,
    epsilon: float,
    max_bracket_steps: int = 1_000,
    max_iterations: int = 1_000,
) -> VolatilitySolution:
    f = volatility_objective(phi=phi, sigma=sigma, delta=delta, v=v, tau=tau)
    a = log(sigma**2)

    a_value = a
    if (delta**2) > ((phi**2) + v):
        b_value = log((delta**2) - (phi**2) - v)
    else:
        k = 1
        b_value = a_value - (k * tau)
        while f(b_value) < 0.0:
            k += 1
            if k > max_bracket_steps:
                return VolatilitySolution(
                    volatility=sigma,
                    lower=a_value,
                    upper=b_value,
                    iterations=k - 1,
                    converged=False,
                    failed_stage="bracket",
                )
            b_value = a_value - (k * tau)

    f_a = f(a_value)
    f_b = f(b_value)
    iterations = 0
    while abs(b_value - a_value) > epsilon:
        if iterations >= max_iterations:
            return VolatilitySolution(
                volatility=sigma,
                lower=a_value,
                upper=b_value,
                iterations=iterations,
                converged=False,
                failed_stage="iterate",
            )
        iterations += 1
        if f_b == f_a:
            c_value = (a_value + b_value) / 2.0
        else:
            c_value = a_value + (((a_value - b_value) * f_a) / (f_b - f_a))
        f_c = f(c_value)
        if f_c * f_b < 0.0:
            a_value = b_value
            f_a = f_b
        else:
            f_a /= 2.0
        b_value = c_value
        f_b = f_c

    return VolatilitySolution(
        volatility=exp(a_value / 2.0),
        lower=a_value,
        upper=b_value,
        iterations=iterations,
        converged=True,
    )


__all__ = ["SolverStage", "VolatilitySolution", "solve_volatility", "volatility_objective"]
