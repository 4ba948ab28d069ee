"""
Tests for shared utilities: validation, rounding and file helpers.
"""

import math

import numpy as np
import pandas as pd
import pytest

from rankcalc.utils import (
    ValidationError,
    atomic_write_csv,
    clamp,
    cleanup_old_files,
    is_valid_rp,
    round_half_up,
    validate_export_format,
    validate_rp,
)


class TestValidateRp:
    """Tests for RP validation at the caller boundary."""

    @pytest.mark.parametrize("rp", [0, 45, 399.5, 10_000, np.int64(1200)])
    def test_valid(self, rp):
        assert is_valid_rp(rp)
        validate_rp(rp)

    @pytest.mark.parametrize("rp", [-1, 10_001, math.nan, "400", None, True])
    def test_invalid(self, rp):
        assert not is_valid_rp(rp)
        with pytest.raises(ValidationError):
            validate_rp(rp)

    def test_error_message(self):
        with pytest.raises(ValidationError, match="Invalid RP"):
            validate_rp(20_000)


class TestRounding:
    """Tests for round_half_up and clamp."""

    def test_halves_round_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(-2.5) == -2
        assert round_half_up(1511.5) == 1512

    def test_digits(self):
        assert round_half_up(0.125, 2) == pytest.approx(0.13)
        assert round_half_up(1.625, 2) == pytest.approx(1.63)

    def test_clamp(self):
        assert clamp(3.0, 0.5, 2.0) == 2.0
        assert clamp(0.1, 0.5, 2.0) == 0.5
        assert clamp(1.0, 0.5, 2.0) == 1.0


class TestExportFormat:
    """Tests for validate_export_format."""

    def test_allowed(self):
        validate_export_format("json")
        validate_export_format("csv")

    def test_rejected(self):
        with pytest.raises(ValidationError, match="Allowed values: csv, json"):
            validate_export_format("xlsx")


class TestFileOperations:
    """Tests for atomic_write_csv and cleanup_old_files."""

    def test_atomic_write(self, tmp_path):
        path = tmp_path / "nested" / "out.csv"
        atomic_write_csv(pd.DataFrame({'a': [1, 2]}), path, index=False)
        assert path.read_text().splitlines() == ["a", "1", "2"]
        assert list(path.parent.glob("*.csv")) == [path]

    def test_cleanup_keeps_file(self, tmp_path):
        keep = tmp_path / "report_2.csv"
        old = tmp_path / "report_1.csv"
        other = tmp_path / "other.csv"
        for f in (keep, old, other):
            f.write_text("x")

        deleted = cleanup_old_files("report_*.csv", keep_file=keep, folder=tmp_path)
        assert deleted == [old]
        assert keep.exists()
        assert other.exists()
