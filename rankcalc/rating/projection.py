"""
Next-match RP projection and rank/rating alignment.
"""

from rankcalc.config import (
    ALIGNMENT_THRESHOLD,
    BASE_PROJECTED_GAIN,
    MILD_DIFF,
    MILD_OVERRANKED_MULTIPLIER,
    MILD_UNDERRANKED_MULTIPLIER,
    STRONG_DIFF,
    STRONG_OVERRANKED_MULTIPLIER,
    STRONG_UNDERRANKED_MULTIPLIER,
)
from rankcalc.rating.estimator import interpolate_division_rating
from rankcalc.rating.models import AlignmentStatus, RankAlignment, RatingEstimate
from rankcalc.utils import round_half_up


def expected_division_rating(division, current_rp) -> float:
    """Rating a player at this division and RP would have if rank matched skill."""
    return interpolate_division_rating(division, current_rp)


def rating_difference(estimate: RatingEstimate, division, current_rp) -> float:
    return estimate.rating - expected_division_rating(division, current_rp)


def gain_multiplier(rating_diff: float) -> float:
    if rating_diff > STRONG_DIFF:
        return STRONG_UNDERRANKED_MULTIPLIER
    if rating_diff > MILD_DIFF:
        return MILD_UNDERRANKED_MULTIPLIER
    if rating_diff < -STRONG_DIFF:
        return STRONG_OVERRANKED_MULTIPLIER
    if rating_diff < -MILD_DIFF:
        return MILD_OVERRANKED_MULTIPLIER
    return 1.0


def project_next_match_rp(estimate: RatingEstimate, division, current_rp) -> int:
    """
    Project RP gained from winning the next match.

    Players whose estimated rating sits well above their division gain more,
    players below it gain less.
    """
    diff = rating_difference(estimate, division, current_rp)
    return int(round_half_up(BASE_PROJECTED_GAIN * gain_multiplier(diff)))


def alignment_status(rating_diff: float) -> AlignmentStatus:
    if rating_diff > ALIGNMENT_THRESHOLD:
        return AlignmentStatus.UNDERRANKED
    if rating_diff < -ALIGNMENT_THRESHOLD:
        return AlignmentStatus.OVERRANKED
    return AlignmentStatus.ALIGNED


def rank_alignment(estimate: RatingEstimate, division, current_rp) -> RankAlignment:
    diff = rating_difference(estimate, division, current_rp)
    return RankAlignment(rating_diff=diff, status=alignment_status(diff))
