"""Errors raised by the rating engine."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from skillrate.ratings.glicko2.volatility import VolatilitySolution


class RatingError(Exception):
    """Base class for every rating-engine failure."""


class InvalidInputError(RatingError, ValueError):
    """Raised for malformed caller input (empty matches, bad factor, bad values)."""


class DegenerateExpectedScoreError(RatingError, ArithmeticError):
    """Raised when an expected score rounds to exactly 0 or 1."""

    def __init__(self, message: str, *, expected_score: float) -> None:
        super().__init__(message)
        self.expected_score = expected_score


class SolverNonConvergenceError(RatingError, RuntimeError):
    """Raised when the volatility solver exhausts its iteration cap."""

    def __init__(self, message: str, *, solution: VolatilitySolution) -> None:
        super().__init__(message)
        self.solution = solution


__all__ = [
    "DegenerateExpectedScoreError",
    "InvalidInputError",
    "RatingError",
    "SolverNonConvergenceError",
]
