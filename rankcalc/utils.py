"""
Shared utilities for the RankCalc rating engine.

This module provides common functions used across multiple modules
to avoid code duplication.
"""

import logging
import math
import shutil
import tempfile
from numbers import Real
from pathlib import Path

from rankcalc.config import ALLOWED_EXPORT_FORMATS, MAX_VALID_RP, OUTPUT_FOLDER


class RankingError(Exception):
    """Base exception for rating engine errors"""
    pass


class ValidationError(RankingError):
    """Validation-specific errors"""
    pass


# --- Logging Setup ---
def setup_logging(name: str | None = None, level: int = logging.INFO) -> logging.Logger:
    """
    Configure and return a logger with consistent formatting.

    Args:
        name: Logger name (usually __name__ from the calling module)
        level: Logging level (default: INFO)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(level)
    return logger


# --- Numeric Helpers ---
def clamp(value, low, high):
    """Clamp value into [low, high]."""
    return max(low, min(high, value))


def round_half_up(value: float, digits: int = 0) -> float:
    """
    Round with halves going up (2.5 -> 3, -2.5 -> -2).

    Python's built-in round() uses banker's rounding, which would move
    ratings on exact .5 boundaries in the wrong direction.
    """
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


# --- File Operations ---
def cleanup_old_files(pattern: str, keep_file: Path | None = None, folder: Path | None = None) -> list[Path]:
    """
    Remove old files matching pattern, optionally keeping one specific file.

    Args:
        pattern: Glob pattern to match files (e.g., "rank_difficulty_*.csv")
        keep_file: Path to the file that should NOT be deleted (usually the newest)
        folder: Folder to search in (default: OUTPUT_FOLDER)

    Returns:
        List of deleted file paths
    """
    logger = setup_logging(__name__)
    target_folder = folder or OUTPUT_FOLDER
    deleted = []

    for f in target_folder.glob(pattern):
        if keep_file and f.resolve() == keep_file.resolve():
            continue
        try:
            f.unlink()
            deleted.append(f)
            logger.debug(f"Deleted old file: {f}")
        except OSError as e:
            logger.warning(f"Could not delete {f}: {e}")

    return deleted


def atomic_write_csv(df, path: Path, **kwargs) -> None:
    """
    Write a DataFrame to CSV atomically using a temporary file.

    Args:
        df: pandas DataFrame to write
        path: Destination path for the CSV file
        **kwargs: Additional arguments to pass to df.to_csv()
    """
    logger = setup_logging(__name__)

    path.parent.mkdir(parents=True, exist_ok=True)

    tmp_path = None
    try:
        with tempfile.NamedTemporaryFile(
            mode='w',
            delete=False,
            suffix='.csv',
            dir=path.parent  # Same filesystem for atomic move
        ) as tmp:
            tmp_path = Path(tmp.name)
        df.to_csv(tmp_path, **kwargs)

        shutil.move(str(tmp_path), str(path))
        logger.debug(f"Atomically wrote {len(df)} rows to {path}")

    except Exception:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise


# --- Validation ---
def is_valid_rp(rp) -> bool:
    """Return True if rp is a finite number within [0, MAX_VALID_RP]."""
    if isinstance(rp, bool) or not isinstance(rp, Real):
        return False
    if math.isnan(rp):
        return False
    return 0 <= rp <= MAX_VALID_RP


def validate_rp(rp) -> None:
    """
    Validate an RP value at the caller boundary, before it reaches the engine.

    Args:
        rp: RP value to validate

    Raises:
        ValidationError: If rp is not a number, is NaN, negative, or above MAX_VALID_RP
    """
    if not is_valid_rp(rp):
        raise ValidationError(
            f"Invalid RP: {rp!r}. "
            f"Expected a number between 0 and {MAX_VALID_RP:,}"
        )


def validate_export_format(fmt: str) -> None:
    """
    Validate that an export format is supported.

    Raises:
        ValidationError: If fmt is not in ALLOWED_EXPORT_FORMATS
    """
    if fmt not in ALLOWED_EXPORT_FORMATS:
        raise ValidationError(
            f"Invalid export format: '{fmt}'. "
            f"Allowed values: {', '.join(sorted(ALLOWED_EXPORT_FORMATS))}"
        )


__all__ = [
    # Errors
    'RankingError',
    'ValidationError',
    # Logging
    'setup_logging',
    # Numeric helpers
    'clamp',
    'round_half_up',
    # File operations
    'cleanup_old_files',
    'atomic_write_csv',
    # Validation
    'is_valid_rp',
    'validate_rp',
    'validate_export_format',
]
