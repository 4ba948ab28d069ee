"""
Snapshot and Leaderboard Analytics

This module computes aggregate statistics over tabular snapshot and
leaderboard data:
- Per-user stats: snapshot count, peak rating, 30-day change, contribution level
- Rank difficulty: average rating and RP swings per division
- Leaderboard annotation with calculated rank columns
- Rank distribution across the ladder
- Rank change tracking between two RP values
"""

import numpy as np
import pandas as pd

from rankcalc.config import CONTRIBUTION_LEVELS, GLICKO_CHANGE_WINDOW_DAYS
from rankcalc.rating.cache import RankCache
from rankcalc.rating.tiers import TierMapper
from rankcalc.utils import ValidationError, setup_logging, validate_rp

# --- Module Logger ---
logger = setup_logging(__name__)

LEADERBOARD_RANK_COLUMNS = [
    'total_rp', 'calculated_rank_tier', 'calculated_rank_number',
    'display_rp', 'tier_index', 'calculated_rank',
]


def _require_columns(df: pd.DataFrame, columns, label: str) -> None:
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise ValidationError(f"{label} is missing required columns: {', '.join(missing)}")


def contribution_level(snapshot_count: int) -> int:
    for minimum, level in CONTRIBUTION_LEVELS:
        if snapshot_count >= minimum:
            return level
    return 0


def compute_user_stats(snapshots_df: pd.DataFrame) -> dict:
    """
    Compute statistics for one user's snapshots.

    Args:
        snapshots_df: DataFrame with columns [created_at, estimated_glicko, ...]

    Returns:
        dict with total_snapshots, peak_glicko, glicko_change_30d,
        data_contribution_level, last_snapshot_at
    """
    if snapshots_df.empty:
        return {
            'total_snapshots': 0,
            'peak_glicko': None,
            'glicko_change_30d': None,
            'data_contribution_level': 0,
            'last_snapshot_at': None,
        }

    _require_columns(snapshots_df, ['created_at', 'estimated_glicko'], "Snapshot data")
    df = snapshots_df.assign(created_at=pd.to_datetime(snapshots_df['created_at']))
    df = df.sort_values('created_at').reset_index(drop=True)

    latest = df.iloc[-1]
    cutoff = latest['created_at'] - pd.Timedelta(days=GLICKO_CHANGE_WINDOW_DAYS)
    older = df[df['created_at'] < cutoff]
    # No snapshot older than the window means no measurable change yet
    baseline = older['estimated_glicko'].iloc[-1] if not older.empty else latest['estimated_glicko']

    total = len(df)
    return {
        'total_snapshots': total,
        'peak_glicko': float(df['estimated_glicko'].max()),
        'glicko_change_30d': float(latest['estimated_glicko'] - baseline),
        'data_contribution_level': contribution_level(total),
        'last_snapshot_at': latest['created_at'],
    }


def compute_all_user_stats(snapshots_df: pd.DataFrame) -> pd.DataFrame:
    """Per-user statistics for a snapshot table containing a user_id column."""
    _require_columns(snapshots_df, ['user_id'], "Snapshot data")
    rows = []
    for user_id, group in snapshots_df.groupby('user_id', sort=True):
        stats = compute_user_stats(group)
        stats['user_id'] = user_id
        rows.append(stats)

    columns = ['user_id', 'total_snapshots', 'peak_glicko', 'glicko_change_30d',
               'data_contribution_level', 'last_snapshot_at']
    return pd.DataFrame(rows, columns=columns)


def rank_difficulty_analysis(snapshots_df: pd.DataFrame) -> pd.DataFrame:
    """
    Average rating and RP swings per division, easiest-rated division first.

    Only snapshots with both avg_rp_per_win and avg_rp_per_loss are counted.
    """
    required = ['current_rank', 'estimated_glicko', 'avg_rp_per_win', 'avg_rp_per_loss']
    _require_columns(snapshots_df, required, "Snapshot data")

    df = snapshots_df.dropna(subset=['avg_rp_per_win', 'avg_rp_per_loss'])
    if df.empty:
        logger.warning("No snapshots with RP averages found for difficulty analysis")
        return pd.DataFrame(columns=['rank_tier', 'avg_glicko', 'avg_rp_gain', 'avg_rp_loss', 'sample_size'])

    result = df.groupby('current_rank').agg(
        avg_glicko=('estimated_glicko', 'mean'),
        avg_rp_gain=('avg_rp_per_win', 'mean'),
        avg_rp_loss=('avg_rp_per_loss', 'mean'),
        sample_size=('estimated_glicko', 'size'),
    ).reset_index().rename(columns={'current_rank': 'rank_tier'})

    result[['avg_glicko', 'avg_rp_gain', 'avg_rp_loss']] = (
        result[['avg_glicko', 'avg_rp_gain', 'avg_rp_loss']].round(2)
    )
    return result.sort_values('avg_glicko').reset_index(drop=True)


def _default_mapper(mapper: TierMapper | None) -> TierMapper:
    return mapper if mapper is not None else TierMapper(RankCache())


def annotate_leaderboard(df: pd.DataFrame, rp_column: str = 'rp',
                         mapper: TierMapper | None = None) -> pd.DataFrame:
    """
    Add calculated rank columns to a leaderboard table.

    Every RP value is validated first; the table is rejected as a whole if
    any value is missing, negative or above the RP ceiling.

    Returns:
        A copy of df with LEADERBOARD_RANK_COLUMNS added
    """
    _require_columns(df, [rp_column], "Leaderboard data")
    mapper = _default_mapper(mapper)

    for rp in df[rp_column]:
        validate_rp(rp)

    ranks = [mapper.map(rp) for rp in df[rp_column]]
    result = df.copy()
    result['total_rp'] = [r.total_rp for r in ranks]
    result['calculated_rank_tier'] = [r.tier.value for r in ranks]
    result['calculated_rank_number'] = [r.level for r in ranks]
    result['display_rp'] = [r.display_rp for r in ranks]
    result['tier_index'] = [r.tier_index for r in ranks]
    result['calculated_rank'] = [r.calculated_rank for r in ranks]
    return result


def rank_distribution(df: pd.DataFrame, rp_column: str = 'rp') -> pd.DataFrame:
    """Player count and RP range per division, lowest division first."""
    if not set(LEADERBOARD_RANK_COLUMNS).issubset(df.columns):
        df = annotate_leaderboard(df, rp_column=rp_column)

    result = df.groupby(
        ['calculated_rank_tier', 'calculated_rank_number', 'tier_index']
    ).agg(
        player_count=('total_rp', 'size'),
        avg_rp=('total_rp', 'mean'),
        min_rp=('total_rp', 'min'),
        max_rp=('total_rp', 'max'),
    ).reset_index()

    result = result.sort_values('tier_index').reset_index(drop=True)
    return result.drop(columns=['tier_index'])


def annotate_rank_changes(df: pd.DataFrame, previous_column: str = 'previous_rp',
                          new_column: str = 'new_rp',
                          mapper: TierMapper | None = None) -> pd.DataFrame:
    """
    Track rank changes between two RP columns.

    Adds previous_calculated_rank, new_calculated_rank, rank_tier_change
    (ladder positions moved, positive for promotions) and rank_change_type.
    Both columns are validated like leaderboard RP.
    """
    _require_columns(df, [previous_column, new_column], "RP change data")
    mapper = _default_mapper(mapper)

    for column in (previous_column, new_column):
        for rp in df[column]:
            validate_rp(rp)

    old_ranks = [mapper.map(rp) for rp in df[previous_column]]
    new_ranks = [mapper.map(rp) for rp in df[new_column]]

    result = df.copy()
    result['previous_calculated_rank'] = [r.calculated_rank for r in old_ranks]
    result['new_calculated_rank'] = [r.calculated_rank for r in new_ranks]
    change = np.array(
        [new.division.position - old.division.position for old, new in zip(old_ranks, new_ranks)],
        dtype=int,
    )
    result['rank_tier_change'] = change
    result['rank_change_type'] = np.select(
        [change > 0, change < 0], ['promotion', 'demotion'], default='none'
    )
    return result
