"""Unit tests for the single-competitor Glicko-2 update."""

from __future__ import annotations

from math import pi, sqrt

import pytest

from skillrate.ratings.common import Competitor, Match
from skillrate.ratings.errors import (
    DegenerateExpectedScoreError,
    InvalidInputError,
    RatingError,
)
from skillrate.ratings.glicko2.calculator import (
    Glicko2Engine,
    Glicko2Parameters,
    build_opponent_terms,
    calculate_expected_score,
    estimate_delta,
    estimate_variance,
    expected,
    g,
)
from skillrate.ratings.scale import GLICKO2_SCALE, Glicko2Scale


def _reference_competitor() -> Competitor:
    return Competitor(rating=1500.0, deviation=200.0, volatility=0.06)


def _reference_matches() -> list[Match]:
    return [
        Match(opponent=Competitor(rating=1400.0, deviation=30.0), result=1.0),
        Match(opponent=Competitor(rating=1550.0, deviation=100.0), result=0.0),
        Match(opponent=Competitor(rating=1700.0, deviation=300.0), result=0.0),
    ]


def test_glicko2_parameter_defaults_are_expected_constants() -> None:
    params = Glicko2Parameters()
    assert params.initial_rating == pytest.approx(1500.0)
    assert params.initial_rd == pytest.approx(350.0)
    assert params.initial_volatility == pytest.approx(0.06)
    assert params.tau == pytest.approx(0.5)
    assert params.epsilon == pytest.approx(1e-6)
    assert params.scale == pytest.approx(173.7178)
    assert params.min_rd == pytest.approx(30.0)
    assert params.max_rd == pytest.approx(350.0)


def test_g_shrinks_with_opponent_uncertainty() -> None:
    assert g(0.0) == pytest.approx(1.0)
    assert g(1.0) == pytest.approx(1.0 / sqrt(1.0 + 3.0 / (pi**2)))
    assert g(50.0) < 0.05
    assert g(0.5) > g(1.5)


def test_expected_score_equal_ratings_is_half() -> None:
    expected_score = calculate_expected_score(
        rating=1500.0,
        rd=200.0,
        opponent_rating=1500.0,
        opponent_rd=200.0,
    )
    assert expected_score == pytest.approx(0.5)


def test_expected_score_is_complementary() -> None:
    assert expected(0.4, -0.2, 0.8) + expected(-0.2, 0.4, 0.8) == pytest.approx(1.0)


def test_reference_intermediate_values() -> None:
    scale = Glicko2Scale()
    state = _reference_competitor().to_glicko2(scale)
    terms = build_opponent_terms(state, _reference_matches(), scale)

    assert [term.impact for term in terms] == pytest.approx([0.9955, 0.9531, 0.7242], abs=1e-4)
    assert [term.expected for term in terms] == pytest.approx([0.639, 0.432, 0.303], abs=1e-3)

    v = estimate_variance(terms)
    assert v == pytest.approx(1.7785, abs=2e-3)

    # delta is weighted by each opponent's raw phi rather than by g(phi)
    manual = v * sum((rd / GLICKO2_SCALE) * term.surprise for rd, term in zip((30.0, 100.0, 300.0), terms))
    assert estimate_delta(terms, v) == pytest.approx(manual)


def test_glicko2_reference_example_matches_expected_values() -> None:
    updated = Glicko2Engine().update_rating(_reference_competitor(), _reference_matches())

    assert updated.rating == pytest.approx(1464.06, abs=0.01)
    assert updated.deviation == pytest.approx(151.52, abs=0.01)
    assert updated.volatility == pytest.approx(0.05999, abs=1e-4)


def test_update_is_pure() -> None:
    competitor = _reference_competitor()
    matches = _reference_matches()
    opponents_before = [match.opponent for match in matches]

    Glicko2Engine().update_rating(competitor, matches)

    assert competitor == _reference_competitor()
    assert [match.opponent for match in matches] == opponents_before


def test_win_raises_and_loss_lowers_rating() -> None:
    engine = Glicko2Engine()
    opponent = Competitor()

    winner = engine.update_rating(Competitor(), [Match(opponent=opponent, result=1.0)])
    loser = engine.update_rating(Competitor(), [Match(opponent=opponent, result=0.0)])
    drawn = engine.update_rating(Competitor(), [Match(opponent=opponent, result=0.5)])

    assert winner.rating > 1500.0
    assert loser.rating < 1500.0
    assert drawn.rating == pytest.approx(1500.0)
    assert winner.deviation < 350.0


def test_factor_blends_towards_full_update() -> None:
    engine = Glicko2Engine()
    competitor = _reference_competitor()
    full = engine.update_rating(competitor, _reference_matches())

    quarter = engine.update_rating(competitor, _reference_matches(), factor=0.25)

    assert quarter.rating == pytest.approx(1500.0 + (full.rating - 1500.0) * 0.25)
    assert quarter.deviation == pytest.approx(200.0 + (full.deviation - 200.0) * 0.25)
    assert quarter.volatility == pytest.approx(0.06 + (full.volatility - 0.06) * 0.25)


@pytest.mark.parametrize("factor", [0.0, -0.5, 1.5])
def test_factor_outside_unit_interval_is_rejected(factor: float) -> None:
    with pytest.raises(InvalidInputError, match="factor"):
        Glicko2Engine().update_rating(_reference_competitor(), _reference_matches(), factor=factor)


def test_empty_matches_are_rejected() -> None:
    competitor = _reference_competitor()

    with pytest.raises(InvalidInputError, match="at least one match"):
        Glicko2Engine().update_rating(competitor, [])

    assert competitor == _reference_competitor()


def test_extreme_rating_gap_is_degenerate() -> None:
    favourite = Competitor(rating=9000.0, deviation=50.0)
    matches = [Match(opponent=Competitor(rating=1500.0, deviation=30.0), result=1.0)]

    with pytest.raises(DegenerateExpectedScoreError) as excinfo:
        Glicko2Engine().update_rating(favourite, matches)

    assert excinfo.value.expected_score == 1.0
    assert not isinstance(excinfo.value, InvalidInputError)
    assert isinstance(excinfo.value, RatingError)


@pytest.mark.parametrize(
    ("rating", "deviation", "volatility", "results"),
    [
        (1500.0, 200.0, 0.06, (1.0, 0.0, 0.0)),
        (1850.0, 60.0, 0.03, (0.0, 0.0, 0.0)),
        (1200.0, 340.0, 0.09, (1.0, 1.0, 1.0)),
        (1600.0, 120.0, 0.2, (0.5, 1.0, 0.0)),
    ],
)
def test_deviation_never_exceeds_step_six_bound(
    rating: float,
    deviation: float,
    volatility: float,
    results: tuple[float, float, float],
) -> None:
    competitor = Competitor(rating=rating, deviation=deviation, volatility=volatility)
    opponents = [
        Competitor(rating=1400.0, deviation=30.0),
        Competitor(rating=1550.0, deviation=100.0),
        Competitor(rating=1700.0, deviation=300.0),
    ]
    matches = [Match(opponent=opponent, result=result) for opponent, result in zip(opponents, results)]

    updated = Glicko2Engine().update_rating(competitor, matches)

    phi = deviation / GLICKO2_SCALE
    bound = sqrt(phi**2 + updated.volatility**2) * GLICKO2_SCALE
    assert updated.deviation <= bound


def test_engines_with_different_tau_coexist() -> None:
    calm = Glicko2Engine(Glicko2Parameters(tau=0.3))
    wild = Glicko2Engine(Glicko2Parameters(tau=1.2))
    competitor = Competitor(rating=1500.0, deviation=50.0, volatility=0.06)
    upset = [Match(opponent=Competitor(rating=2300.0, deviation=50.0), result=1.0)]

    assert calm.update_rating(competitor, upset).volatility < wild.update_rating(competitor, upset).volatility


def test_inactivity_inflates_deviation() -> None:
    engine = Glicko2Engine()
    competitor = Competitor(rating=1600.0, deviation=100.0, volatility=0.06)

    inflated = engine.inflate_deviation(competitor)

    assert inflated.rating == pytest.approx(1600.0)
    assert inflated.deviation == pytest.approx(sqrt(100.0**2 + (0.06 * GLICKO2_SCALE) ** 2))
    assert engine.inflate_deviation(competitor, periods=0.0).deviation == pytest.approx(100.0)


def test_new_competitor_uses_initial_parameters() -> None:
    engine = Glicko2Engine(Glicko2Parameters(initial_rating=1200.0, initial_rd=250.0, initial_volatility=0.04))
    assert engine.new_competitor() == Competitor(rating=1200.0, deviation=250.0, volatility=0.04)


@pytest.mark.parametrize("gap", [40_000.0, 100_000.0])
def test_huge_upset_is_degenerate_not_an_overflow(gap: float) -> None:
    underdog = Competitor(rating=1500.0, deviation=30.0)
    matches = [Match(opponent=Competitor(rating=1500.0 + gap, deviation=30.0), result=1.0)]

    with pytest.raises(DegenerateExpectedScoreError) as excinfo:
        Glicko2Engine().update_rating(underdog, matches)

    assert 0.0 < excinfo.value.expected_score < 1e-50
    assert underdog == Competitor(rating=1500.0, deviation=30.0)


def test_wide_but_representable_upset_still_updates() -> None:
    underdog = Competitor(rating=1500.0, deviation=30.0)
    matches = [Match(opponent=Competitor(rating=21_500.0, deviation=30.0), result=1.0)]

    updated = Glicko2Engine().update_rating(underdog, matches)

    assert updated.rating > 1500.0


@pytest.mark.parametrize("result", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_result_is_invalid_input(result: float) -> None:
    matches = [Match(opponent=Competitor(rating=1550.0, deviation=100.0), result=result)]

    with pytest.raises(InvalidInputError, match="non-finite result"):
        Glicko2Engine().update_rating(_reference_competitor(), matches)
