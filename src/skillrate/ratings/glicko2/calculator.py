"""Glicko-2 rating update for a single competitor."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from math import exp, isfinite, pi, sqrt

from skillrate.ratings.common import Competitor, Match, TeamEntry
from skillrate.ratings.errors import (
    DegenerateExpectedScoreError,
    InvalidInputError,
    SolverNonConvergenceError,
)
from skillrate.ratings.glicko2.team import update_team_ratings, update_team_ratings_single_pass
from skillrate.ratings.glicko2.volatility import solve_volatility
from skillrate.ratings.scale import DEFAULT_RATING, GLICKO2_SCALE, Glicko2Scale, Glicko2State
from skillrate.ratings.score import adjust_score


@dataclass(frozen=True)
class Glicko2Parameters:
    initial_rating: float = 1500.0
    initial_rd: float = 350.0
    initial_volatility: float = 0.06
    tau: float = 0.5
    epsilon: float = 1e-6
    scale: float = GLICKO2_SCALE
    min_rd: float = 30.0
    max_rd: float = 350.0
    max_bracket_steps: int = 1_000
    max_solver_iterations: int = 1_000

    @property
    def glicko2_scale(self) -> Glicko2Scale:
        return Glicko2Scale(center=DEFAULT_RATING, factor=self.scale)


@dataclass(frozen=True)
class OpponentTerm:
    """One match seen from the subject, on the Glicko-2 scale."""

    opponent_phi: float
    impact: float
    expected: float
    score: float

    @property
    def surprise(self) -> float:
        return self.score - self.expected


def g(phi: float) -> float:
    return 1.0 / sqrt(1.0 + ((3.0 * (phi**2)) / (pi**2)))


def expected(mu: float, opp_mu: float, opp_phi: float) -> float:
    exponent = -g(opp_phi) * (mu - opp_mu)
    if exponent >= 0.0:
        exp_term = exp(-exponent)
        return exp_term / (1.0 + exp_term)
    exp_term = exp(exponent)
    return 1.0 / (1.0 + exp_term)


def calculate_expected_score(
    *,
    rating: float,
    rd: float,
    opponent_rating: float,
    opponent_rd: float,
    scale: Glicko2Scale | None = None,
) -> float:
    """Compute expected score for one side under Glicko-2."""
    scale = scale or Glicko2Scale()
    return expected(
        scale.to_mu(rating),
        scale.to_mu(opponent_rating),
        scale.to_phi(opponent_rd),
    )


def build_opponent_terms(
    state: Glicko2State,
    matches: Sequence[Match],
    scale: Glicko2Scale,
) -> list[OpponentTerm]:
    if not matches:
        raise InvalidInputError("at least one match is required to update a rating")

    terms: list[OpponentTerm] = []
    for index, match in enumerate(matches):
        if not isfinite(match.result):
            raise InvalidInputError(f"match {index} has non-finite result {match.result!r}")
        opp_mu = scale.to_mu(match.opponent.rating)
        opp_phi = scale.to_phi(match.opponent.deviation)
        expected_score = expected(state.mu, opp_mu, opp_phi)
        if not 0.0 < expected_score < 1.0:
            raise DegenerateExpectedScoreError(
                f"match {index} has expected score {expected_score!r}; "
                f"rating gap {match.opponent.rating!r} vs {scale.from_mu(state.mu)!r} is too wide",
                expected_score=expected_score,
            )
        terms.append(
            OpponentTerm(
                opponent_phi=opp_phi,
                impact=g(opp_phi),
                expected=expected_score,
                score=match.result,
            )
        )
    return terms


def _most_extreme_expected(terms: Sequence[OpponentTerm]) -> float:
    return min((term.expected for term in terms), key=lambda value: min(value, 1.0 - value))


def estimate_variance(terms: Sequence[OpponentTerm]) -> float:
    """Step 3: estimated variance of the rating from game outcomes alone."""
    if not terms:
        raise InvalidInputError("variance is undefined without matches")
    v_inverse = 0.0
    for term in terms:
        v_inverse += (term.impact**2) * term.expected * (1.0 - term.expected)
    if v_inverse <= 0.0:
        raise DegenerateExpectedScoreError(
            "expected scores leave no information to estimate variance",
            expected_score=_most_extreme_expected(terms),
        )
    v = 1.0 / v_inverse
    if not isfinite(v):
        raise DegenerateExpectedScoreError(
            "expected scores are too close to 0 or 1 to estimate variance",
            expected_score=_most_extreme_expected(terms),
        )
    return v


def estimate_delta(terms: Sequence[OpponentTerm], v: float) -> float:
    """Step 4: estimated improvement, weighted by each opponent's phi."""
    delta = v * sum(term.opponent_phi * term.surprise for term in terms)
    if not isfinite(delta * delta):
        raise DegenerateExpectedScoreError(
            f"estimated improvement {delta!r} is out of range; rating gap is too wide",
            expected_score=_most_extreme_expected(terms),
        )
    return delta


class Glicko2Engine:
    """Applies Glicko-2 updates with one set of tuning parameters."""

    def __init__(self, params: Glicko2Parameters | None = None) -> None:
        self.params = params or Glicko2Parameters()
        self.scale = self.params.glicko2_scale

    def new_competitor(self) -> Competitor:
        return Competitor(
            rating=self.params.initial_rating,
            deviation=self.params.initial_rd,
            volatility=self.params.initial_volatility,
        )

    def update_rating(
        self,
        competitor: Competitor,
        matches: Sequence[Match],
        factor: float = 1.0,
    ) -> Competitor:
        """Return ``competitor`` after one rating period of ``matches``.

        ``factor`` in (0, 1] is the share of the full update that is applied to
        rating, deviation and volatility alike.
        """
        if not 0.0 < factor <= 1.0:
            raise InvalidInputError(f"factor must be in (0, 1], got {factor!r}")

        old = competitor.to_glicko2(self.scale)
        terms = build_opponent_terms(old, matches, self.scale)
        v = estimate_variance(terms)
        delta = estimate_delta(terms, v)

        try:
            solution = solve_volatility(
                phi=old.phi,
                sigma=old.sigma,
                delta=delta,
                v=v,
                tau=self.params.tau,
                epsilon=self.params.epsilon,
                max_bracket_steps=self.params.max_bracket_steps,
                max_iterations=self.params.max_solver_iterations,
            )
            if not solution.converged:
                raise SolverNonConvergenceError(
                    f"volatility solver did not converge during {solution.failed_stage} "
                    f"after {solution.iterations} iterations",
                    solution=solution,
                )
            sigma_prime = solution.volatility

            phi_star = sqrt((old.phi**2) + (sigma_prime**2))
            phi_prime = 1.0 / sqrt((1.0 / (phi_star**2)) + (1.0 / v))
            mu_prime = old.mu + (phi_prime**2) * sum(term.impact * term.surprise for term in terms)
        except OverflowError as exc:
            raise DegenerateExpectedScoreError(
                f"rating update overflowed (v={v!r}, delta={delta!r}); rating gap is too wide",
                expected_score=_most_extreme_expected(terms),
            ) from exc

        if not (isfinite(mu_prime) and isfinite(phi_prime)):
            raise DegenerateExpectedScoreError(
                "rating update produced a non-finite value",
                expected_score=_most_extreme_expected(terms),
            )

        updated = old.blend(Glicko2State(mu=mu_prime, phi=phi_prime, sigma=sigma_prime), factor)
        return Competitor.from_glicko2(updated, self.scale)

    def inflate_deviation(self, competitor: Competitor, periods: float = 1.0) -> Competitor:
        """Grow the deviation of a competitor who played no games for ``periods``."""
        if periods < 0.0:
            raise InvalidInputError(f"periods must be >= 0, got {periods!r}")
        state = competitor.to_glicko2(self.scale)
        inflated_phi = sqrt((state.phi**2) + ((state.sigma**2) * periods))
        return Competitor.from_glicko2(
            Glicko2State(mu=state.mu, phi=inflated_phi, sigma=state.sigma),
            self.scale,
        )

    def expected_score(self, competitor: Competitor, opponent: Competitor) -> float:
        return calculate_expected_score(
            rating=competitor.rating,
            rd=competitor.deviation,
            opponent_rating=opponent.rating,
            opponent_rd=opponent.deviation,
            scale=self.scale,
        )

    @staticmethod
    def adjust_score(rating_a: float, rating_b: float) -> float:
        return adjust_score(rating_a, rating_b)

    def update_team_ratings(self, entries: Sequence[TeamEntry]) -> list[Competitor]:
        return update_team_ratings(entries, self.update_rating)

    def update_team_ratings_single_pass(self, entries: Sequence[TeamEntry]) -> list[Competitor]:
        return update_team_ratings_single_pass(entries, self.update_rating)


__all__ = [
    "Glicko2Engine",
    "Glicko2Parameters",
    "OpponentTerm",
    "build_opponent_terms",
    "calculate_expected_score",
    "estimate_delta",
    "estimate_variance",
    "expected",
    "g",
]
