"""Glicko-2 rating modules."""

from skillrate.ratings.glicko2.calculator import (
    Glicko2Engine,
    Glicko2Parameters,
    calculate_expected_score,
)
from skillrate.ratings.glicko2.config import Glicko2SystemConfig, load_glicko2_system_configs
from skillrate.ratings.glicko2.registry import Glicko2Calculator, Glicko2Event
from skillrate.ratings.glicko2.volatility import VolatilitySolution, solve_volatility

__all__ = [
    "Glicko2Calculator",
    "Glicko2Engine",
    "Glicko2Event",
    "Glicko2Parameters",
    "Glicko2SystemConfig",
    "VolatilitySolution",
    "calculate_expected_score",
    "load_glicko2_system_configs",
    "solve_volatility",
]
