"""
Tests for the rating estimator.
"""

import pytest

from rankcalc.rating.estimator import (
    REFERENCE_RATINGS,
    difficulty_multiplier,
    estimate_rating,
    expected_rp_change,
    interpolate_division_rating,
    reference_rating,
)
from rankcalc.rating.models import MatchRecord, Outcome
from rankcalc.rating.tiers import DIVISIONS, map_rp_to_rank
from rankcalc.utils import ValidationError


def win(rp, **kwargs):
    return MatchRecord(Outcome.WIN, rp, **kwargs)


def loss(rp, **kwargs):
    return MatchRecord(Outcome.LOSS, rp, **kwargs)


class TestReferenceRatings:
    """Tests for the division reference table."""

    def test_covers_all_divisions(self):
        assert set(REFERENCE_RATINGS) == set(DIVISIONS)

    def test_strictly_increasing(self):
        values = [REFERENCE_RATINGS[d] for d in DIVISIONS]
        for i in range(len(values) - 1):
            assert values[i] < values[i + 1]

    def test_endpoints(self):
        assert reference_rating("BRONZE_1") == 0
        assert reference_rating("NIGHTMARE_1") == 2500


class TestInterpolation:
    """Tests for interpolate_division_rating."""

    def test_start_of_division(self):
        assert interpolate_division_rating("GOLD_2", 0) == 1800

    def test_midway(self):
        assert interpolate_division_rating("SILVER_2", 45) == pytest.approx(1511.5)

    def test_progress_clamped(self):
        assert interpolate_division_rating("GOLD_2", 250) == interpolate_division_rating("GOLD_2", 100)
        assert interpolate_division_rating("GOLD_2", -20) == 1800

    def test_nightmare_has_no_next(self):
        assert interpolate_division_rating("NIGHTMARE_1", 500) == 2500

    def test_diamond_three_towards_emerald(self):
        assert interpolate_division_rating("DIAMOND_3", 50) == pytest.approx(2335)


class TestExpectedChange:
    """Tests for difficulty_multiplier and expected_rp_change."""

    def test_multiplier_at_pivot(self):
        assert difficulty_multiplier(1800) == 1.0

    def test_multiplier_clamped(self):
        assert difficulty_multiplier(100) == 2.0
        assert difficulty_multiplier(5000) == 0.5

    def test_zero_rating_uses_cap(self):
        assert difficulty_multiplier(0) == 2.0

    def test_negative_rating_uses_floor(self):
        assert difficulty_multiplier(-10) == 0.5

    def test_expected_values(self):
        assert expected_rp_change(1800, Outcome.WIN) == 15
        assert expected_rp_change(1800, "loss") == -12
        assert expected_rp_change(900, Outcome.DRAW) == 4

    def test_unknown_outcome(self):
        with pytest.raises(ValidationError):
            expected_rp_change(1800, "forfeit")


class TestEstimateRating:
    """Tests for estimate_rating."""

    def test_no_history(self):
        estimate = estimate_rating("SILVER_2", 45, [])
        assert estimate.rating == 1512
        assert estimate.rating_deviation == pytest.approx(1.8)
        assert estimate.volatility == pytest.approx(0.08)

    def test_new_season_without_previous(self):
        estimate = estimate_rating("SILVER_2", 45, [], is_new_season=True)
        assert estimate.rating == 1512
        assert estimate.rating_deviation == pytest.approx(2.5)
        assert estimate.volatility == pytest.approx(0.08)

    def test_previous_rating_blends_on_new_season(self):
        estimate = estimate_rating("SILVER_2", 45, [], previous_season_rating=1600, is_new_season=True)
        assert estimate.rating == 1556
        assert estimate.rating_deviation == pytest.approx(2.2)
        assert estimate.volatility == pytest.approx(0.06)

    def test_previous_rating_outside_new_season(self):
        estimate = estimate_rating("SILVER_2", 45, [], previous_season_rating=1600)
        assert estimate.rating == 1512
        assert estimate.rating_deviation == pytest.approx(1.8)
        assert estimate.volatility == pytest.approx(0.06)

    def test_single_win(self):
        estimate = estimate_rating("SILVER_2", 45, [win(15)])
        # 1511.5 + max(5, 15 * 0.8)
        assert estimate.rating == 1524
        assert estimate.volatility == pytest.approx(0.081)

    def test_small_win_uses_minimum_step(self):
        estimate = estimate_rating("GOLD_2", 0, [win(3)])
        assert estimate.rating == 1805

    def test_small_loss_uses_minimum_step(self):
        estimate = estimate_rating("GOLD_2", 0, [loss(-2)])
        assert estimate.rating == 1795

    def test_draw(self):
        estimate = estimate_rating("GOLD_2", 0, [MatchRecord(Outcome.DRAW, 4)])
        assert estimate.rating == 1802

    def test_shielded_losses_still_lower_rating(self):
        history = [loss(0, was_shielded=True), loss(0, was_shielded=True)]
        estimate = estimate_rating("GOLD_2", 0, history)
        # Each shielded loss counts as -12 RP: 1800 - 9.6 - 9.6
        assert estimate.rating == 1781
        assert estimate.rating_deviation == pytest.approx(1.7)

    def test_deviation_floor(self):
        history = [win(15)] * 40
        estimate = estimate_rating("GOLD_2", 0, history)
        assert estimate.rating_deviation >= 0.8

    def test_replay_order_matters(self):
        oldest_first = estimate_rating("BRONZE_1", 0, [win(20), loss(-12)])
        newest_first = estimate_rating("BRONZE_1", 0, [loss(-12), win(20)])
        assert oldest_first.rating == newest_first.rating
        assert oldest_first.rating_deviation == pytest.approx(1.81)
        assert newest_first.rating_deviation == pytest.approx(1.82)

    def test_accepts_dict_matches(self):
        from_dicts = estimate_rating("SILVER_2", 45, [{"outcome": "win", "rpChange": 15}])
        from_records = estimate_rating("SILVER_2", 45, [win(15)])
        assert from_dicts == from_records

    def test_accepts_calculated_rank(self):
        rank = map_rp_to_rank(1250)
        assert estimate_rating(rank, rank.display_rp) == estimate_rating("PLATINUM_1", 50)

    def test_rating_unbounded_below(self):
        history = [loss(-20)] * 5
        estimate = estimate_rating("BRONZE_1", 0, history)
        assert estimate.rating < 0

    def test_unknown_division_raises(self):
        with pytest.raises(ValidationError):
            estimate_rating("PLATINUM_5", 10, [])
