"""Apply per-competitor Glicko-2 updates across team members."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from skillrate.ratings.common import Competitor, Match, TeamEntry

RatingUpdate = Callable[[Competitor, Sequence[Match], float], Competitor]


def update_team_ratings(entries: Sequence[TeamEntry], update: RatingUpdate) -> list[Competitor]:
    """Nudge every member once per match it played, each time by 1/n of a full update.

    Each of the ``n`` steps re-runs the update over the member's whole match
    list, so the member moves ``n`` times against the same opponents. Members
    with no matches are returned unchanged.
    """
    updated: list[Competitor] = []
    for entry in entries:
        competitor = entry.competitor
        match_count = len(entry.matches)
        for _ in entry.matches:
            competitor = update(competitor, entry.matches, 1.0 / match_count)
        updated.append(competitor)
    return updated


def update_team_ratings_single_pass(
    entries: Sequence[TeamEntry], update: RatingUpdate
) -> list[Competitor]:
    """Apply exactly one full update per member over its match list."""
    updated: list[Competitor] = []
    for entry in entries:
        if entry.matches:
            updated.append(update(entry.competitor, entry.matches, 1.0))
        else:
            updated.append(entry.competitor)
    return updated


__all__ = ["RatingUpdate", "update_team_ratings", "update_team_ratings_single_pass"]
