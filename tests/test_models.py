"""
Tests for match records and outcome parsing.
"""

import pytest

from rankcalc.rating.models import MatchRecord, Outcome, parse_outcome
from rankcalc.utils import ValidationError


class TestMatchRecord:
    """Tests for MatchRecord construction."""

    def test_from_camel_case(self):
        match = MatchRecord.from_dict({"id": 7, "outcome": "loss", "rpChange": 0, "wasShielded": True})
        assert match.outcome is Outcome.LOSS
        assert match.id == "7"
        assert match.was_shielded is True
        assert match.effective_rp_change == -12

    def test_from_snake_case(self):
        match = MatchRecord.from_dict({"outcome": "WIN", "rp_change": 18})
        assert match.outcome is Outcome.WIN
        assert match.effective_rp_change == 18
        assert match.id is None

    def test_invalid_outcome(self):
        with pytest.raises(ValidationError, match="Invalid match outcome"):
            MatchRecord.from_dict({"outcome": "forfeit", "rpChange": 0})

    def test_parse_outcome_passthrough(self):
        assert parse_outcome(Outcome.DRAW) is Outcome.DRAW
