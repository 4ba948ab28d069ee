"""
Tests for demotion shield tracking.
"""

from rankcalc.rating.estimator import estimate_rating
from rankcalc.rating.models import MatchRecord, Outcome
from rankcalc.rating.shield import compute_shield_state, count_shielded_losses

SHIELDED_LOSS = MatchRecord(Outcome.LOSS, 0, was_shielded=True)


class TestCountShieldedLosses:
    """Tests for count_shielded_losses."""

    def test_counts_flagged_and_zero_losses(self):
        history = [
            SHIELDED_LOSS,
            MatchRecord(Outcome.LOSS, 0),
            MatchRecord(Outcome.LOSS, -12),
            MatchRecord(Outcome.WIN, 0),
        ]
        assert count_shielded_losses(history) == 2

    def test_accepts_dicts(self):
        history = [{"outcome": "loss", "rpChange": 0, "wasShielded": True}]
        assert count_shielded_losses(history) == 1


class TestComputeShieldState:
    """Tests for compute_shield_state."""

    def test_two_shielded_losses_at_zero(self):
        state = compute_shield_state(0, [SHIELDED_LOSS, SHIELDED_LOSS])
        assert state.active is True
        assert state.warning is True
        assert state.games_used == 2
        assert state.games_remaining == 1

    def test_one_shielded_loss(self):
        state = compute_shield_state(0, [SHIELDED_LOSS])
        assert state.active is True
        assert state.warning is False

    def test_inactive_above_zero_rp(self):
        state = compute_shield_state(30, [SHIELDED_LOSS, SHIELDED_LOSS])
        assert state.active is False
        assert state.warning is True

    def test_no_shield_games(self):
        state = compute_shield_state(0, [MatchRecord(Outcome.LOSS, -10)])
        assert state.active is False
        assert state.games_used == 0

    def test_explicit_count_overrides_history(self):
        state = compute_shield_state(0, [SHIELDED_LOSS], explicit_games_used=3)
        assert state.games_used == 3
        assert state.warning is True
        assert state.games_remaining == 0

    def test_explicit_zero_is_respected(self):
        state = compute_shield_state(0, [SHIELDED_LOSS, SHIELDED_LOSS], explicit_games_used=0)
        assert state.games_used == 0
        assert state.active is False

    def test_rating_falls_while_rp_frozen(self):
        history = [SHIELDED_LOSS, SHIELDED_LOSS]
        state = compute_shield_state(0, history)
        before = estimate_rating("GOLD_2", 0, [])
        after = estimate_rating("GOLD_2", 0, history)
        assert state.active
        assert after.rating < before.rating
