"""Conversion between the display rating scale and the Glicko-2 scale."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

GLICKO2_SCALE: Final[float] = 173.7178
DEFAULT_RATING: Final[float] = 1500.0


@dataclass(frozen=True)
class Glicko2Scale:
    """Linear map between display values (R, RD) and Glicko-2 values (mu, phi)."""

    center: float = DEFAULT_RATING
    factor: float = GLICKO2_SCALE

    def to_mu(self, rating: float) -> float:
        return (rating - self.center) / self.factor

    def to_phi(self, rd: float) -> float:
        return rd / self.factor

    def from_mu(self, mu: float) -> float:
        return (mu * self.factor) + self.center

    def from_phi(self, phi: float) -> float:
        return phi * self.factor


DEFAULT_SCALE: Final[Glicko2Scale] = Glicko2Scale()


@dataclass(frozen=True)
class Glicko2State:
    """Competitor state on the Glicko-2 scale."""

    mu: float
    phi: float
    sigma: float

    def blend(self, new: Glicko2State, factor: float) -> Glicko2State:
        """Move ``factor`` of the way from this state towards ``new``."""
        return Glicko2State(
            mu=self.mu + ((new.mu - self.mu) * factor),
            phi=self.phi + ((new.phi - self.phi) * factor),
            sigma=self.sigma + ((new.sigma - self.sigma) * factor),
        )


__all__ = [
    "DEFAULT_RATING",
    "DEFAULT_SCALE",
    "GLICKO2_SCALE",
    "Glicko2Scale",
    "Glicko2State",
]
