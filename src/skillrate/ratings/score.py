"""Score adjustment for contests with more than two sides."""

from __future__ import annotations

from math import isfinite, pi, sin

from skillrate.ratings.errors import InvalidInputError


def adjust_score(rating_a: float, rating_b: float) -> float:
    """Turn the strength ratio of A over B into a score in [0, 1].

    ``adjust_score(a, b) + adjust_score(b, a) == 1`` and equal ratings give 0.5.
    Ratings are expected to be non-negative.
    """
    if not (isfinite(rating_a) and isfinite(rating_b)):
        raise InvalidInputError(f"ratings must be finite, got {rating_a!r} and {rating_b!r}")
    total = rating_a + rating_b
    if total == 0.0:
        raise InvalidInputError("cannot adjust a score when both ratings sum to zero")

    percent = rating_a / total
    return (sin((percent - 0.5) * pi) + 1.0) / 2.0


__all__ = ["adjust_score"]
