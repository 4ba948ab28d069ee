"""
Snapshot Report for RankCalc

This module reads the newest exported snapshot table and writes the
aggregate reports derived from it:
- Rank difficulty: average rating and RP swings per division
- User stats: snapshot count, peak rating, 30-day change per user

Usage:
    python -m rankcalc.history.report
    OR
    from rankcalc.history.report import process_snapshots
"""

import sys
from pathlib import Path

# Enable both `python rankcalc/history/report.py` and `python -m rankcalc.history.report` execution.
# Required for rankcalc.config/rankcalc.utils imports to resolve correctly.
_project_root = str(Path(__file__).parent.parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

import pandas as pd

from rankcalc.config import (
    DIFFICULTY_REPORT_PREFIX,
    OUTPUT_FOLDER,
    SNAPSHOT_PATTERN,
    USER_STATS_REPORT_PREFIX,
)
from rankcalc.history.analysis import compute_all_user_stats, rank_difficulty_analysis
from rankcalc.utils import atomic_write_csv, cleanup_old_files, setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)


def process_snapshots(folder: Path | None = None, pattern: str = SNAPSHOT_PATTERN):
    """
    Build the difficulty and user-stats reports from the newest snapshot file.

    Args:
        folder: Folder holding snapshot exports and receiving reports (default: OUTPUT_FOLDER)
        pattern: Glob pattern for snapshot files

    Returns:
        Tuple of (difficulty_df, user_stats_df), or (None, None) if no input exists
    """
    folder = folder or OUTPUT_FOLDER
    input_files = sorted(folder.glob(pattern))
    if not input_files:
        logger.error(f"No files matching {pattern} found in {folder}")
        return None, None

    input_csv = input_files[-1]
    logger.info("=" * 60)
    logger.info(f"Loading snapshots from {input_csv}")
    logger.info("=" * 60)
    df = pd.read_csv(input_csv, parse_dates=['created_at'])
    logger.info(f"Loaded {len(df)} snapshots")

    last_date = df['created_at'].max().strftime('%Y%m%d') if not df.empty else 'empty'

    difficulty = rank_difficulty_analysis(df)
    logger.info(f"Rank difficulty across {len(difficulty)} divisions:")
    if not difficulty.empty:
        logger.info("\n" + difficulty.to_string(index=False))

    user_stats = compute_all_user_stats(df) if 'user_id' in df.columns else pd.DataFrame()
    logger.info(f"Computed stats for {len(user_stats)} users")

    difficulty_csv = folder / f"{DIFFICULTY_REPORT_PREFIX}_{last_date}.csv"
    stats_csv = folder / f"{USER_STATS_REPORT_PREFIX}_{last_date}.csv"

    atomic_write_csv(difficulty, difficulty_csv, index=False)
    atomic_write_csv(user_stats, stats_csv, index=False)

    cleanup_old_files(f"{DIFFICULTY_REPORT_PREFIX}_*.csv", keep_file=difficulty_csv, folder=folder)
    cleanup_old_files(f"{USER_STATS_REPORT_PREFIX}_*.csv", keep_file=stats_csv, folder=folder)

    logger.info("Exported CSV files:")
    logger.info(f"  Rank difficulty: {difficulty_csv}")
    logger.info(f"  User stats: {stats_csv}")

    return difficulty, user_stats


def main():
    return process_snapshots()


if __name__ == "__main__":
    main()
