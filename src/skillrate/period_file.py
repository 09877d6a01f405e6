"""Read one rating period from a TOML file."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any
import tomllib

from skillrate.ratings.common import DEFAULT_RD, DEFAULT_VOLATILITY, Competitor, PeriodResult
from skillrate.ratings.errors import InvalidInputError
from skillrate.ratings.scale import DEFAULT_RATING


@dataclass(frozen=True)
class RatingPeriod:
    """Starting competitors and the games played in one period."""

    competitors: dict[str, Competitor]
    results: tuple[PeriodResult, ...]


def load_period_file(file_path: Path) -> RatingPeriod:
    """Parse ``[competitors.<id>]`` tables and ``[[results]]`` entries."""
    if not file_path.exists():
        raise FileNotFoundError(f"Period file not found: {file_path}")

    with file_path.open("rb") as file:
        raw = tomllib.load(file)

    competitors = {
        str(competitor_id): _parse_competitor(file_path, str(competitor_id), values)
        for competitor_id, values in raw.get("competitors", {}).items()
    }
    results = tuple(
        _parse_result(file_path, index, entry)
        for index, entry in enumerate(raw.get("results", []))
    )
    if not results:
        raise ValueError(f"{file_path}: at least one [[results]] entry is required")

    return RatingPeriod(competitors=competitors, results=results)


def _parse_competitor(file_path: Path, competitor_id: str, values: dict[str, Any]) -> Competitor:
    try:
        return Competitor(
            rating=float(values.get("rating", DEFAULT_RATING)),
            deviation=float(values.get("rd", DEFAULT_RD)),
            volatility=float(values.get("volatility", DEFAULT_VOLATILITY)),
        )
    except InvalidInputError as exc:
        raise ValueError(f"{file_path}: [competitors.{competitor_id}] {exc}") from exc


def _parse_result(file_path: Path, index: int, entry: dict[str, Any]) -> PeriodResult:
    competitor = entry.get("competitor")
    opponent = entry.get("opponent")
    if competitor is None or opponent is None:
        raise ValueError(f"{file_path}: results[{index}] needs both competitor and opponent")
    if "score" not in entry:
        raise ValueError(f"{file_path}: results[{index}].score is required")
    return PeriodResult(
        competitor_id=str(competitor),
        opponent_id=str(opponent),
        score=float(entry["score"]),
    )


__all__ = ["RatingPeriod", "load_period_file"]
