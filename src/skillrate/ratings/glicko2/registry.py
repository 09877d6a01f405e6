"""Stateful Glicko-2 calculator keyed by competitor id."""

from __future__ import annotations

from collections.abc import Hashable, Sequence
from dataclasses import dataclass

from skillrate.ratings.common import Competitor, Match, PeriodResult
from skillrate.ratings.errors import InvalidInputError
from skillrate.ratings.glicko2.calculator import Glicko2Engine, Glicko2Parameters


@dataclass(frozen=True)
class Glicko2Event:
    competitor_id: Hashable
    games_played: int
    actual_score: float
    expected_score: float
    pre_rating: float
    pre_rd: float
    pre_volatility: float
    rating_delta: float
    rd_delta: float
    volatility_delta: float
    post_rating: float
    post_rd: float
    post_volatility: float


class Glicko2Calculator:
    """Period-by-period Glicko-2 calculator over a registry of competitors."""

    def __init__(self, params: Glicko2Parameters) -> None:
        self.params = params
        self.engine = Glicko2Engine(params)
        self._competitors: dict[Hashable, Competitor] = {}

    def _clamp_rd(self, competitor: Competitor) -> Competitor:
        rd = max(self.params.min_rd, min(competitor.deviation, self.params.max_rd))
        if rd == competitor.deviation:
            return competitor
        return Competitor(rating=competitor.rating, deviation=rd, volatility=competitor.volatility)

    def get_competitor(self, competitor_id: Hashable) -> Competitor:
        existing = self._competitors.get(competitor_id)
        if existing is not None:
            return existing
        competitor = self._clamp_rd(self.engine.new_competitor())
        self._competitors[competitor_id] = competitor
        return competitor

    def set_competitor(self, competitor_id: Hashable, competitor: Competitor) -> None:
        self._competitors[competitor_id] = competitor

    def tracked_entity_count(self) -> int:
        return len(self._competitors)

    def ratings(self) -> dict[Hashable, float]:
        """Return a snapshot of current ratings."""
        return {competitor_id: competitor.rating for competitor_id, competitor in self._competitors.items()}

    def _validate_result(self, result: PeriodResult) -> None:
        if result.competitor_id == result.opponent_id:
            raise InvalidInputError(
                f"period result has identical competitors ({result.competitor_id!r})"
            )
        if not 0.0 <= result.score <= 1.0:
            raise InvalidInputError(
                f"score={result.score!r} for {result.competitor_id!r} vs "
                f"{result.opponent_id!r} must be between 0 and 1"
            )

    def process_period(self, results: Sequence[PeriodResult]) -> list[Glicko2Event]:
        """Rate every competitor for one period, all against pre-period opponents.

        Nothing is stored unless every update succeeds. Tracked competitors
        without games in the period have their deviation inflated.
        """
        for result in results:
            self._validate_result(result)

        snapshot = dict(self._competitors)
        for result in results:
            for competitor_id in (result.competitor_id, result.opponent_id):
                if competitor_id not in snapshot:
                    snapshot[competitor_id] = self._clamp_rd(self.engine.new_competitor())

        matches: dict[Hashable, list[Match]] = {}
        for result in results:
            matches.setdefault(result.competitor_id, []).append(
                Match(opponent=snapshot[result.opponent_id], result=result.score)
            )
            matches.setdefault(result.opponent_id, []).append(
                Match(opponent=snapshot[result.competitor_id], result=1.0 - result.score)
            )

        updated: dict[Hashable, Competitor] = {}
        events: list[Glicko2Event] = []
        for competitor_id, competitor_matches in matches.items():
            pre = snapshot[competitor_id]
            post = self._clamp_rd(self.engine.update_rating(pre, competitor_matches))
            updated[competitor_id] = post
            events.append(
                Glicko2Event(
                    competitor_id=competitor_id,
                    games_played=len(competitor_matches),
                    actual_score=sum(match.result for match in competitor_matches),
                    expected_score=sum(
                        self.engine.expected_score(pre, match.opponent) for match in competitor_matches
                    ),
                    pre_rating=pre.rating,
                    pre_rd=pre.deviation,
                    pre_volatility=pre.volatility,
                    rating_delta=post.rating - pre.rating,
                    rd_delta=post.deviation - pre.deviation,
                    volatility_delta=post.volatility - pre.volatility,
                    post_rating=post.rating,
                    post_rd=post.deviation,
                    post_volatility=post.volatility,
                )
            )

        for competitor_id, competitor in snapshot.items():
            if competitor_id not in updated:
                updated[competitor_id] = self._clamp_rd(self.engine.inflate_deviation(competitor))

        self._competitors.update(updated)
        return events


__all__ = ["Glicko2Calculator", "Glicko2Event"]
