"""
Rating Estimator

The tier ladder only resolves skill to within ~100 RP, which is too coarse
for matchmaking-quality comparisons. This module derives a smoother,
Glicko-inspired rating/deviation/volatility triple from a player's division
and recent match history.

The match history is replayed in exactly the order the caller supplies it;
the engine never re-sorts it.
"""

from rankcalc.config import (
    BASE_DRAW_RP,
    BASE_LOSS_RP,
    BASE_WIN_RP,
    CARRYOVER_RD,
    DIFFICULTY_MAX,
    DIFFICULTY_MIN,
    DIFFICULTY_PIVOT,
    DRAW_RATING_FACTOR,
    ESTABLISHED_RD,
    FRESH_VOLATILITY,
    LOSS_RATING_FACTOR,
    MIN_RATING_STEP,
    NEW_SEASON_RD,
    RD_DECAY,
    RD_FLOOR,
    RD_SURPRISE_WEIGHT,
    RETURNING_VOLATILITY,
    RP_PER_LEVEL,
    SURPRISE_SCALE,
    VOLATILITY_FLOOR,
    VOLATILITY_SURPRISE_WEIGHT,
    WIN_RATING_FACTOR,
)
from rankcalc.rating.models import MatchRecord, Outcome, RatingEstimate, parse_outcome
from rankcalc.rating.tiers import DIVISIONS, next_division, resolve_division
from rankcalc.utils import clamp, round_half_up, setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)

# Reference rating for each of the 21 divisions, Bronze 1 upward
REFERENCE_RATINGS = dict(zip(DIVISIONS, (
    0, 500, 900, 1100,          # Bronze 1-4
    1400, 1480, 1550, 1620,     # Silver 1-4
    1700, 1800, 1880, 1960,     # Gold 1-4
    2020, 2070, 2100, 2150,     # Platinum 1-4
    2170, 2230, 2300,           # Diamond 1-3
    2370,                       # Emerald
    2500,                       # Nightmare
)))

if len(REFERENCE_RATINGS) != len(DIVISIONS):
    raise ValueError("REFERENCE_RATINGS must cover all 21 divisions")
_ladder = [REFERENCE_RATINGS[d] for d in DIVISIONS]
if any(b <= a for a, b in zip(_ladder, _ladder[1:])):
    raise ValueError("REFERENCE_RATINGS must increase strictly up the ladder")

BASE_OUTCOME_RP = {
    Outcome.WIN: BASE_WIN_RP,
    Outcome.LOSS: BASE_LOSS_RP,
    Outcome.DRAW: BASE_DRAW_RP,
}


def reference_rating(division) -> int:
    """Fixed reference rating for a division (storage key, Division or CalculatedRank)."""
    return REFERENCE_RATINGS[resolve_division(division)]


def interpolate_division_rating(division, current_rp) -> float:
    """
    Linearly interpolate between this division's reference rating and the next one.

    current_rp is the display RP within the level; progress is clamped to [0, 1].
    At Nightmare the next division is the division itself.
    """
    division = resolve_division(division)
    upcoming = next_division(division.tier, division.level) or division
    progress = clamp(current_rp / RP_PER_LEVEL, 0, 1)
    current = REFERENCE_RATINGS[division]
    return current + (REFERENCE_RATINGS[upcoming] - current) * progress


def difficulty_multiplier(rating: float) -> float:
    """Higher-rated players are expected to gain less per win and lose more per loss."""
    if rating == 0:
        return DIFFICULTY_MAX
    return clamp(DIFFICULTY_PIVOT / rating, DIFFICULTY_MIN, DIFFICULTY_MAX)


def expected_rp_change(rating: float, outcome) -> int:
    """Expected RP change for an outcome at the given rating."""
    outcome = parse_outcome(outcome)
    return int(round_half_up(BASE_OUTCOME_RP[outcome] * difficulty_multiplier(rating)))


def _coerce_matches(match_history):
    return [m if isinstance(m, MatchRecord) else MatchRecord.from_dict(m) for m in match_history]


def estimate_rating(division, current_rp, match_history=(), previous_season_rating=None,
                    is_new_season=False) -> RatingEstimate:
    """
    Estimate the underlying rating for a player.

    Args:
        division: Current division (storage key such as "SILVER_2", Division or CalculatedRank)
        current_rp: Display RP within the current level (0-99)
        match_history: Ordered MatchRecords (or dicts), replayed in the order given
        previous_season_rating: Rating carried over from last season, if known
        is_new_season: Whether the season has just reset

    Returns:
        RatingEstimate with rating rounded to an integer, deviation to 2
        decimals and volatility to 3 decimals

    Raises:
        ValidationError: If division is not one of the 21 known divisions
    """
    division = resolve_division(division)
    matches = _coerce_matches(match_history)

    rating = interpolate_division_rating(division, current_rp)
    rd = NEW_SEASON_RD if is_new_season else ESTABLISHED_RD
    vol = RETURNING_VOLATILITY if previous_season_rating is not None else FRESH_VOLATILITY

    if is_new_season and previous_season_rating is not None:
        rating = (previous_season_rating + rating) / 2
        rd = CARRYOVER_RD

    for match in matches:
        effective = match.effective_rp_change
        expected = expected_rp_change(rating, match.outcome)
        surprise = abs(effective - expected) / SURPRISE_SCALE

        if match.outcome is Outcome.WIN:
            rating += max(MIN_RATING_STEP, effective * WIN_RATING_FACTOR)
        elif match.outcome is Outcome.LOSS:
            rating += min(-MIN_RATING_STEP, effective * LOSS_RATING_FACTOR)
        else:
            rating += effective * DRAW_RATING_FACTOR

        rd = max(RD_FLOOR, rd - RD_DECAY + surprise * RD_SURPRISE_WEIGHT)
        vol = max(VOLATILITY_FLOOR, vol + surprise * VOLATILITY_SURPRISE_WEIGHT)
        logger.debug(
            f"Replayed {match.outcome.value} ({effective:+} RP, expected {expected:+}): "
            f"rating={rating:.1f} rd={rd:.3f} vol={vol:.4f}"
        )

    return RatingEstimate(
        rating=int(round_half_up(rating)),
        rating_deviation=round_half_up(rd, 2),
        volatility=round_half_up(vol, 3),
    )
