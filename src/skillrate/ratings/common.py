"""Shared value types for the rating engine."""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass, field
from math import isfinite

from skillrate.ratings.errors import InvalidInputError
from skillrate.ratings.scale import DEFAULT_RATING, DEFAULT_SCALE, Glicko2Scale, Glicko2State

DEFAULT_RD = 350.0
DEFAULT_VOLATILITY = 0.06


@dataclass(frozen=True)
class Competitor:
    """Rating, deviation and volatility of one competitor on the display scale.

    Instances are immutable: an update returns a new ``Competitor`` and never
    touches the one it was given, or any opponent referenced by a ``Match``.
    """

    rating: float = DEFAULT_RATING
    deviation: float = DEFAULT_RD
    volatility: float = DEFAULT_VOLATILITY

    def __post_init__(self) -> None:
        for name in ("rating", "deviation", "volatility"):
            value = getattr(self, name)
            if not isfinite(value):
                raise InvalidInputError(f"competitor {name} must be finite, got {value!r}")
        if self.deviation <= 0.0:
            raise InvalidInputError(f"competitor deviation must be > 0, got {self.deviation!r}")
        if self.volatility <= 0.0:
            raise InvalidInputError(f"competitor volatility must be > 0, got {self.volatility!r}")

    def to_glicko2(self, scale: Glicko2Scale = DEFAULT_SCALE) -> Glicko2State:
        return Glicko2State(
            mu=scale.to_mu(self.rating),
            phi=scale.to_phi(self.deviation),
            sigma=self.volatility,
        )

    @classmethod
    def from_glicko2(cls, state: Glicko2State, scale: Glicko2Scale = DEFAULT_SCALE) -> Competitor:
        return cls(
            rating=scale.from_mu(state.mu),
            deviation=scale.from_phi(state.phi),
            volatility=state.sigma,
        )


@dataclass(frozen=True)
class Match:
    """Outcome of a competitor against one opponent: 1.0 win, 0.0 loss, 0.5 draw."""

    opponent: Competitor
    result: float


@dataclass(frozen=True)
class TeamEntry:
    """A competitor and the matches it played as part of a team in one period."""

    competitor: Competitor
    matches: tuple[Match, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "matches", tuple(self.matches))


@dataclass(frozen=True)
class PeriodResult:
    """One game of a rating period between two registry competitors.

    ``score`` is the result for ``competitor_id``; the opponent receives ``1 - score``.
    """

    competitor_id: Hashable
    opponent_id: Hashable
    score: float


__all__ = [
    "Competitor",
    "DEFAULT_RD",
    "DEFAULT_VOLATILITY",
    "Match",
    "PeriodResult",
    "TeamEntry",
]
