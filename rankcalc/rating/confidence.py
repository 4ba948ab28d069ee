"""
Confidence scoring for rating estimates.

An additive heuristic in [0, 100] built from sample size, consistency of RP
swings, season freshness, and win-rate plausibility.
"""

import statistics

from rankcalc.config import (
    ESTABLISHED_SEASON_POINTS,
    HIGH_CONFIDENCE,
    MEDIUM_CONFIDENCE,
    MISSING_CONTEXT_PENALTY,
    NEW_SEASON_POINTS,
    SAMPLE_SIZE_FALLBACK,
    SAMPLE_SIZE_POINTS,
    SHIELD_SAMPLE_BONUS,
    VARIANCE_FALLBACK,
    VARIANCE_POINTS,
    WIN_RATE_FALLBACK,
    WIN_RATE_MIN_MATCHES,
    WIN_RATE_PLAUSIBLE,
    WIN_RATE_TOLERABLE,
)
from rankcalc.rating.models import ConfidenceLabel, ConfidenceResult, MatchRecord, Outcome
from rankcalc.utils import clamp


def sample_size_points(match_count: int) -> int:
    for minimum, points in SAMPLE_SIZE_POINTS:
        if match_count >= minimum:
            return points
    return SAMPLE_SIZE_FALLBACK


def variance_points(matches) -> int:
    """Points for consistent RP swings; 0 when there is nothing to measure."""
    if not matches:
        return 0
    swings = [abs(m.effective_rp_change) for m in matches]
    variance = statistics.pvariance(swings)
    for ceiling, points in VARIANCE_POINTS:
        if variance < ceiling:
            return points
    return VARIANCE_FALLBACK


def win_rate_points(matches) -> int:
    if len(matches) < WIN_RATE_MIN_MATCHES:
        return 0
    wins = sum(1 for m in matches if m.outcome is Outcome.WIN)
    win_rate = wins / len(matches)
    for low, high, points in (WIN_RATE_PLAUSIBLE, WIN_RATE_TOLERABLE):
        if low <= win_rate <= high:
            return points
    return WIN_RATE_FALLBACK


def confidence_label(percentage) -> ConfidenceLabel:
    if percentage >= HIGH_CONFIDENCE:
        return ConfidenceLabel.HIGH
    if percentage >= MEDIUM_CONFIDENCE:
        return ConfidenceLabel.MEDIUM
    return ConfidenceLabel.LOW


def score_confidence(match_history=(), is_new_season=False) -> ConfidenceResult:
    """Score how far a rating estimate from this history can be trusted."""
    matches = [m if isinstance(m, MatchRecord) else MatchRecord.from_dict(m) for m in match_history]

    score = sample_size_points(len(matches))
    score += variance_points(matches)
    score += NEW_SEASON_POINTS if is_new_season else ESTABLISHED_SEASON_POINTS
    score += win_rate_points(matches)
    score -= MISSING_CONTEXT_PENALTY
    if any(m.was_shielded for m in matches):
        score += SHIELD_SAMPLE_BONUS

    percentage = clamp(score, 0, 100)
    return ConfidenceResult(label=confidence_label(percentage), percentage=percentage)
