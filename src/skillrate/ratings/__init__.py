"""Rating-system domain modules."""

from skillrate.ratings.common import Competitor, Match, PeriodResult, TeamEntry
from skillrate.ratings.errors import (
    DegenerateExpectedScoreError,
    InvalidInputError,
    RatingError,
    SolverNonConvergenceError,
)
from skillrate.ratings.scale import Glicko2Scale, Glicko2State
from skillrate.ratings.score import adjust_score

__all__ = [
    "Competitor",
    "DegenerateExpectedScoreError",
    "Glicko2Scale",
    "Glicko2State",
    "InvalidInputError",
    "Match",
    "PeriodResult",
    "RatingError",
    "SolverNonConvergenceError",
    "TeamEntry",
    "adjust_score",
]
