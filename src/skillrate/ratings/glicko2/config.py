"""Load Glicko-2 system definitions from TOML files."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from skillrate.config_base import BaseSystemConfig, load_system_configs, parse_system_table
from skillrate.ratings.glicko2.calculator import Glicko2Parameters
from skillrate.ratings.scale import GLICKO2_SCALE


@dataclass(frozen=True)
class Glicko2SystemConfig(BaseSystemConfig):
    """One named Glicko-2 tuning."""

    parameters: Glicko2Parameters

    def as_config_json(self) -> dict[str, Any]:
        return {
            "initial_rating": self.parameters.initial_rating,
            "initial_rd": self.parameters.initial_rd,
            "initial_volatility": self.parameters.initial_volatility,
            "tau": self.parameters.tau,
            "epsilon": self.parameters.epsilon,
            "scale": self.parameters.scale,
            "min_rd": self.parameters.min_rd,
            "max_rd": self.parameters.max_rd,
            "max_bracket_steps": self.parameters.max_bracket_steps,
            "max_solver_iterations": self.parameters.max_solver_iterations,
        }


def load_glicko2_system_configs(config_dir: Path) -> list[Glicko2SystemConfig]:
    """Load and validate all Glicko-2 TOML config files in a directory."""
    return load_system_configs(config_dir, _parse_config, duplicate_name_label="glicko2")


def _parse_config(raw: dict[str, Any], file_path: Path) -> Glicko2SystemConfig:
    name, description = parse_system_table(raw, file_path)
    glicko2_raw = raw.get("glicko2", {})

    parameters = Glicko2Parameters(
        initial_rating=float(glicko2_raw.get("initial_rating", 1500.0)),
        initial_rd=float(glicko2_raw.get("initial_rd", 350.0)),
        initial_volatility=float(glicko2_raw.get("initial_volatility", 0.06)),
        tau=float(glicko2_raw.get("tau", 0.5)),
        epsilon=float(glicko2_raw.get("epsilon", 1e-6)),
        scale=float(glicko2_raw.get("scale", GLICKO2_SCALE)),
        min_rd=float(glicko2_raw.get("min_rd", 30.0)),
        max_rd=float(glicko2_raw.get("max_rd", 350.0)),
        max_bracket_steps=int(glicko2_raw.get("max_bracket_steps", 1_000)),
        max_solver_iterations=int(glicko2_raw.get("max_solver_iterations", 1_000)),
    )
    _validate_parameters(file_path=file_path, parameters=parameters)

    return Glicko2SystemConfig(
        name=name,
        description=description,
        file_path=file_path,
        parameters=parameters,
    )


def _validate_parameters(*, file_path: Path, parameters: Glicko2Parameters) -> None:
    if parameters.initial_rd <= 0.0:
        raise ValueError(f"{file_path}: [glicko2].initial_rd must be > 0")
    if parameters.initial_volatility <= 0.0:
        raise ValueError(f"{file_path}: [glicko2].initial_volatility must be > 0")
    if parameters.tau <= 0.0:
        raise ValueError(f"{file_path}: [glicko2].tau must be > 0")
    if parameters.epsilon <= 0.0:
        raise ValueError(f"{file_path}: [glicko2].epsilon must be > 0")
    if parameters.scale <= 0.0:
        raise ValueError(f"{file_path}: [glicko2].scale must be > 0")
    if parameters.min_rd <= 0.0:
        raise ValueError(f"{file_path}: [glicko2].min_rd must be > 0")
    if parameters.max_rd <= 0.0:
        raise ValueError(f"{file_path}: [glicko2].max_rd must be > 0")
    if parameters.min_rd > parameters.max_rd:
        raise ValueError(f"{file_path}: [glicko2].min_rd must be <= max_rd")
    if parameters.initial_rd < parameters.min_rd or parameters.initial_rd > parameters.max_rd:
        raise ValueError(f"{file_path}: [glicko2].initial_rd must be between min_rd and max_rd")
    if parameters.max_bracket_steps < 1:
        raise ValueError(f"{file_path}: [glicko2].max_bracket_steps must be >= 1")
    if parameters.max_solver_iterations < 1:
        raise ValueError(f"{file_path}: [glicko2].max_solver_iterations must be >= 1")


__all__ = ["Glicko2SystemConfig", "load_glicko2_system_configs"]
