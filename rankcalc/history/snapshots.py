"""
MMR Snapshots

This module combines the rating components into the snapshot payload that
the persistence layer stores and the presentation layer renders:
- A bounded, newest-first match history window
- Win rate and average RP per win/loss for the window
- The full pipeline: rank, rating estimate, projection, shield, confidence
- JSON/CSV export of a user's snapshots and matches

Usage:
    from rankcalc.history.snapshots import build_snapshot
    snapshot = build_snapshot(445, matches, is_new_season=False)
"""

import json
from datetime import datetime, timezone

import pandas as pd

from rankcalc.config import MATCH_HISTORY_LIMIT
from rankcalc.rating.confidence import score_confidence
from rankcalc.rating.estimator import estimate_rating
from rankcalc.rating.models import MatchRecord, MMRSnapshot, Outcome
from rankcalc.rating.projection import project_next_match_rp, rank_alignment
from rankcalc.rating.shield import compute_shield_state
from rankcalc.rating.tiers import TierMapper
from rankcalc.utils import round_half_up, setup_logging, validate_export_format

# --- Module Logger ---
logger = setup_logging(__name__)

EXPORT_CSV_COLUMNS = {
    'created_at': 'Date',
    'current_rank': 'Rank',
    'current_rp': 'RP',
    'estimated_glicko': 'MMR',
    'accuracy_score': 'Accuracy',
}


def coerce_matches(match_history) -> list[MatchRecord]:
    return [m if isinstance(m, MatchRecord) else MatchRecord.from_dict(m) for m in match_history]


def add_match(match_history, match, limit: int = MATCH_HISTORY_LIMIT) -> list[MatchRecord]:
    """Return a new history with match prepended (newest first), truncated to limit."""
    if not isinstance(match, MatchRecord):
        match = MatchRecord.from_dict(match)
    return [match] + coerce_matches(match_history)[:limit - 1]


def _rounded_mean(values) -> int:
    if not values:
        return 0
    return int(round_half_up(sum(values) / len(values)))


def summarize_matches(match_history) -> dict:
    """
    Summarize a match window.

    Returns:
        dict with wins, losses, draws, win_rate (percent), avg_rp_per_win and
        avg_rp_per_loss (displayed RP changes, so shielded losses count as 0)
    """
    matches = coerce_matches(match_history)
    wins = [m.rp_change for m in matches if m.outcome is Outcome.WIN]
    losses = [m.rp_change for m in matches if m.outcome is Outcome.LOSS]
    draws = len(matches) - len(wins) - len(losses)

    win_rate = int(round_half_up(len(wins) / len(matches) * 100)) if matches else 0

    return {
        'wins': len(wins),
        'losses': len(losses),
        'draws': draws,
        'win_rate': win_rate,
        'avg_rp_per_win': _rounded_mean(wins),
        'avg_rp_per_loss': _rounded_mean(losses),
    }


def build_snapshot(total_rp, match_history=(), previous_season_rating=None, is_new_season=False,
                   total_wins=0, shield_games_used=None, mapper: TierMapper | None = None,
                   created_at: str | None = None) -> MMRSnapshot:
    """
    Run every rating component for one player and assemble the display payload.

    Args:
        total_rp: Player's raw RP
        match_history: Recent matches in replay order
        previous_season_rating: Rating carried over from last season, if known
        is_new_season: Whether the season has just reset
        total_wins: Lifetime wins reported by the player (stored as-is)
        shield_games_used: Explicit shield count; derived from history when None
        mapper: TierMapper to use (pass one with a RankCache to memoize)
        created_at: ISO timestamp of the snapshot (default: now, UTC)

    Returns:
        MMRSnapshot
    """
    mapper = mapper or TierMapper()
    matches = coerce_matches(match_history)

    rank = mapper.map(total_rp)
    division = rank.division
    current_rp = rank.display_rp

    estimate = estimate_rating(division, current_rp, matches, previous_season_rating, is_new_season)
    projected = project_next_match_rp(estimate, division, current_rp)
    alignment = rank_alignment(estimate, division, current_rp)
    shield = compute_shield_state(current_rp, matches, shield_games_used)
    confidence = score_confidence(matches, is_new_season)
    summary = summarize_matches(matches)

    logger.debug(
        f"Snapshot for {rank.calculated_rank} ({rank.total_rp} RP): rating={estimate.rating} "
        f"status={alignment.status.value} confidence={confidence.percentage}%"
    )

    return MMRSnapshot(
        current_rank=division.key,
        current_rp=current_rp,
        total_rp=rank.total_rp,
        calculated_rank=rank.calculated_rank,
        estimated_glicko=estimate.rating,
        estimated_rd=estimate.rating_deviation,
        estimated_volatility=estimate.volatility,
        accuracy_score=confidence.percentage,
        accuracy_label=confidence.label.value,
        avg_rp_per_win=summary['avg_rp_per_win'],
        avg_rp_per_loss=summary['avg_rp_per_loss'],
        recent_win_rate=summary['win_rate'],
        total_wins=total_wins,
        shield_games_used=shield.games_used,
        shield_active=shield.active,
        shield_warning=shield.warning,
        is_new_season=is_new_season,
        previous_season_mmr=previous_season_rating,
        skill_gap=round_half_up(alignment.rating_diff, 2),
        ranking_status=alignment.status.value,
        projected_rp_gain=projected,
        matches=matches,
        created_at=created_at or datetime.now(timezone.utc).isoformat(),
    )


def _as_row(record) -> dict:
    if hasattr(record, 'to_dict'):
        return record.to_dict()
    return dict(record)


def export_user_data(user_id, snapshots, matches=(), fmt: str = "json", stats=None,
                     export_date: datetime | None = None) -> str:
    """
    Export a user's snapshots and matches.

    Args:
        user_id: Owner of the data
        snapshots: MMRSnapshot objects or stored snapshot rows (dicts); the
            CSV Date column comes from their created_at
        matches: MatchRecord objects or stored match rows
        fmt: "json" (full document) or "csv" (one line per snapshot)
        stats: Optional per-user statistics to embed in the JSON document
        export_date: Timestamp to record (default: now, UTC)

    Returns:
        The exported text

    Raises:
        ValidationError: If fmt is not a supported export format
    """
    validate_export_format(fmt)
    snapshot_rows = [_as_row(s) for s in snapshots]

    if fmt == "csv":
        df = pd.DataFrame(snapshot_rows, columns=list(EXPORT_CSV_COLUMNS))
        return df.rename(columns=EXPORT_CSV_COLUMNS).to_csv(index=False)

    export_date = export_date or datetime.now(timezone.utc)
    document = {
        'user_id': user_id,
        'export_date': export_date.isoformat(),
        'snapshots': snapshot_rows,
        'matches': [_as_row(m) for m in matches],
        'stats': stats,
    }
    return json.dumps(document, indent=2, default=str)
