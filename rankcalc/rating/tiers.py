"""
Tier Ladder Mapping

This module converts raw RP (rank points) into the 21-division tier ladder:
- Seven tiers, Bronze through Nightmare, partitioning RP space
- Multi-level tiers split into 100-RP levels with a 0-99 display RP
- Emerald and Nightmare have a single level (level 0)
- tier_index gives a strict total order across all divisions

Usage:
    from rankcalc.rating.tiers import map_rp_to_rank, TierMapper
    rank = map_rp_to_rank(1250)   # Platinum 1, 50 RP
"""

import math
from dataclasses import dataclass
from enum import Enum

from rankcalc.config import MAX_DISPLAY_RP, RP_PER_LEVEL
from rankcalc.rating.cache import RankCache
from rankcalc.utils import ValidationError, clamp, round_half_up, setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)


class Tier(str, Enum):
    BRONZE = "Bronze"
    SILVER = "Silver"
    GOLD = "Gold"
    PLATINUM = "Platinum"
    DIAMOND = "Diamond"
    EMERALD = "Emerald"
    NIGHTMARE = "Nightmare"


@dataclass(frozen=True)
class TierDefinition:
    tier: Tier
    min_rp: int
    max_rp: float  # Inclusive; math.inf for the top tier
    level_count: int

    @property
    def name(self) -> str:
        return self.tier.value

    @property
    def is_single_level(self) -> bool:
        return self.level_count == 1

    def contains(self, total_rp) -> bool:
        return self.min_rp <= total_rp <= self.max_rp


# Ascending, contiguous, non-overlapping; checked once below
TIER_TABLE = (
    TierDefinition(Tier.BRONZE, 0, 399, 4),
    TierDefinition(Tier.SILVER, 400, 799, 4),
    TierDefinition(Tier.GOLD, 800, 1199, 4),
    TierDefinition(Tier.PLATINUM, 1200, 1599, 4),
    TierDefinition(Tier.DIAMOND, 1600, 1899, 3),
    TierDefinition(Tier.EMERALD, 1900, 1999, 1),
    TierDefinition(Tier.NIGHTMARE, 2000, math.inf, 1),
)

TIER_DISPLAY_INFO = {
    Tier.BRONZE: {"color": "#CD7F32", "icon": "🥉"},
    Tier.SILVER: {"color": "#C0C0C0", "icon": "🥈"},
    Tier.GOLD: {"color": "#FFD700", "icon": "🥇"},
    Tier.PLATINUM: {"color": "#E5E4E2", "icon": "💎"},
    Tier.DIAMOND: {"color": "#B9F2FF", "icon": "💎"},
    Tier.EMERALD: {"color": "#50C878", "icon": "💚"},
    Tier.NIGHTMARE: {"color": "#8B0000", "icon": "👹"},
}


def check_tier_table(table) -> None:
    """
    Verify the tier table covers every Tier exactly once, in ascending,
    contiguous, non-overlapping order with an unbounded top tier.

    Raises:
        ValueError: If any invariant is violated
    """
    tiers = [d.tier for d in table]
    if tiers != list(Tier):
        raise ValueError(f"Tier table must list every tier once in ladder order, got {tiers}")
    if table[0].min_rp != 0:
        raise ValueError(f"Lowest tier must start at 0 RP, got {table[0].min_rp}")
    if table[-1].max_rp != math.inf:
        raise ValueError(f"Top tier must be unbounded, got max {table[-1].max_rp}")

    for prev, cur in zip(table, table[1:]):
        if cur.min_rp != prev.max_rp + 1:
            raise ValueError(
                f"{cur.name} starts at {cur.min_rp}, expected {prev.max_rp + 1} after {prev.name}"
            )
    for d in table:
        if d.level_count < 1:
            raise ValueError(f"{d.name} must have at least one level")
        if not d.is_single_level and d.max_rp - d.min_rp + 1 != d.level_count * RP_PER_LEVEL:
            raise ValueError(f"{d.name} spans {d.max_rp - d.min_rp + 1} RP for {d.level_count} levels")


check_tier_table(TIER_TABLE)

if set(TIER_DISPLAY_INFO) != set(Tier):
    raise ValueError("TIER_DISPLAY_INFO must cover every tier")

TIER_DEFINITIONS = {d.tier: d for d in TIER_TABLE}
TIER_ORDINAL = {d.tier: i for i, d in enumerate(TIER_TABLE, start=1)}


def parse_tier(value) -> Tier:
    """Resolve a Tier from a Tier, its display name, or its enum name (case-insensitive)."""
    if isinstance(value, Tier):
        return value
    text = str(value).strip()
    for tier in Tier:
        if text.lower() in (tier.value.lower(), tier.name.lower()):
            return tier
    raise ValidationError(
        f"Invalid tier: '{value}'. "
        f"Allowed values: {', '.join(t.value for t in Tier)}"
    )


# --- Divisions ---
@dataclass(frozen=True)
class Division:
    """One rung of the ladder. Single-level tiers use level 0."""
    tier: Tier
    level: int

    @property
    def key(self) -> str:
        """Storage key, e.g. SILVER_2, EMERALD_1."""
        return f"{self.tier.name}_{max(self.level, 1)}"

    @property
    def name(self) -> str:
        return display_name(self.tier, self.level)

    @property
    def position(self) -> int:
        """Ladder position, 0 (Bronze 1) to 20 (Nightmare)."""
        return DIVISION_POSITION[self]


def _build_divisions():
    divisions = []
    for d in TIER_TABLE:
        if d.is_single_level:
            divisions.append(Division(d.tier, 0))
        else:
            divisions.extend(Division(d.tier, level) for level in range(1, d.level_count + 1))
    return tuple(divisions)


DIVISIONS = _build_divisions()
DIVISION_POSITION = {division: i for i, division in enumerate(DIVISIONS)}
DIVISIONS_BY_KEY = {division.key: division for division in DIVISIONS}
# Single-level tiers may also be keyed by the bare tier name
DIVISIONS_BY_KEY.update({d.tier.name: d for d in DIVISIONS if d.level == 0})


def get_division(tier, level) -> Division:
    """
    Look up a known division.

    Level 1 is accepted as an alias for level 0 on single-level tiers.

    Raises:
        ValidationError: If (tier, level) is not one of the 21 divisions
    """
    tier = parse_tier(tier)
    if TIER_DEFINITIONS[tier].is_single_level and level == 1:
        level = 0
    division = Division(tier, level)
    if division not in DIVISION_POSITION:
        raise ValidationError(f"Unknown division: {tier.value} level {level}")
    return division


def resolve_division(value) -> Division:
    """
    Accept a Division, CalculatedRank, storage key ("GOLD_3") or (tier, level) pair.

    Raises:
        ValidationError: If the value does not name one of the 21 divisions
    """
    if isinstance(value, Division):
        return get_division(value.tier, value.level)
    if isinstance(value, CalculatedRank):
        return get_division(value.tier, value.level)
    if isinstance(value, str):
        division = DIVISIONS_BY_KEY.get(value.strip().upper().replace(" ", "_"))
        if division is None:
            raise ValidationError(
                f"Unknown division: '{value}'. "
                f"Allowed values: {', '.join(DIVISIONS_BY_KEY)}"
            )
        return division
    if isinstance(value, tuple) and len(value) == 2:
        return get_division(*value)
    raise ValidationError(f"Cannot interpret {value!r} as a division")


# --- Rank Mapping ---
@dataclass(frozen=True)
class CalculatedRank:
    tier: Tier
    level: int
    display_rp: int
    total_rp: int
    tier_index: int

    @property
    def calculated_rank(self) -> str:
        return display_name(self.tier, self.level)

    @property
    def division(self) -> Division:
        return Division(self.tier, self.level)


def display_name(tier, level: int) -> str:
    """Format a rank name: "Gold 3", or the bare tier for Emerald/Nightmare."""
    tier = parse_tier(tier)
    if TIER_DEFINITIONS[tier].is_single_level:
        return tier.value
    return f"{tier.value} {level}"


def tier_index(tier, level: int) -> int:
    return TIER_ORDINAL[parse_tier(tier)] * 1000 + level


def tier_display_info(tier) -> dict:
    """Presentational color and icon for a tier."""
    return dict(TIER_DISPLAY_INFO[parse_tier(tier)])


def map_rp_to_rank(total_rp) -> CalculatedRank:
    """
    Calculate rank from total RP.

    Fractional RP is floored (matching the RankCache key) and negative RP is
    clamped to 0. No upper-bound validation happens here; use
    rankcalc.utils.validate_rp at the caller boundary.
    """
    total_rp = max(math.floor(total_rp), 0)

    for definition in TIER_TABLE:
        if not definition.contains(total_rp):
            continue

        offset = total_rp - definition.min_rp
        if definition.is_single_level:
            # Uncapped: Nightmare display RP keeps counting past 99
            level = 0
            display_rp = offset
        else:
            level = clamp(math.floor(offset / RP_PER_LEVEL) + 1, 1, definition.level_count)
            display_rp = clamp(offset - (level - 1) * RP_PER_LEVEL, 0, MAX_DISPLAY_RP)

        return CalculatedRank(
            tier=definition.tier,
            level=level,
            display_rp=display_rp,
            total_rp=total_rp,
            tier_index=tier_index(definition.tier, level),
        )

    # Unreachable while the top tier is unbounded
    logger.error(f"No tier matched {total_rp} RP; falling back to Bronze 1")
    return CalculatedRank(
        tier=Tier.BRONZE,
        level=1,
        display_rp=min(total_rp, MAX_DISPLAY_RP),
        total_rp=total_rp,
        tier_index=tier_index(Tier.BRONZE, 1),
    )


class TierMapper:
    """
    RP-to-rank mapper with an optional injected RankCache.

    Without a cache every call recomputes; pass RankCache() to memoize.
    """

    def __init__(self, cache: RankCache | None = None):
        self.cache = cache

    def map(self, total_rp) -> CalculatedRank:
        if self.cache is None:
            return map_rp_to_rank(total_rp)

        rank = self.cache.get(total_rp)
        if rank is None:
            rank = map_rp_to_rank(total_rp)
            self.cache.put(total_rp, rank)
        return rank

    def clear_cache(self) -> None:
        if self.cache is not None:
            self.cache.clear()


# --- Ladder Navigation ---
def next_division(tier, level: int) -> Division | None:
    """Next division up the ladder, or None at Nightmare."""
    current = get_division(tier, level)
    position = DIVISION_POSITION[current]
    if position + 1 >= len(DIVISIONS):
        return None
    return DIVISIONS[position + 1]


def rp_needed_for_next(tier, level: int, display_rp) -> int:
    """RP still needed to reach the next division (0 at Nightmare)."""
    current = get_division(tier, level)
    upcoming = next_division(current.tier, current.level)
    if upcoming is None:
        return 0

    if upcoming.tier is current.tier:
        return RP_PER_LEVEL - display_rp

    definition = TIER_DEFINITIONS[current.tier]
    current_total = definition.min_rp + max(current.level - 1, 0) * RP_PER_LEVEL + display_rp
    return TIER_DEFINITIONS[upcoming.tier].min_rp - current_total


def progress_to_next(display_rp) -> float:
    """Progress through the current level as a percentage (0-100)."""
    return min(display_rp / RP_PER_LEVEL * 100, 100)


def is_promotion(old: CalculatedRank, new: CalculatedRank) -> bool:
    return new.tier_index > old.tier_index


def is_demotion(old: CalculatedRank, new: CalculatedRank) -> bool:
    return new.tier_index < old.tier_index


def rank_change_description(old: CalculatedRank, new: CalculatedRank) -> str:
    if is_promotion(old, new):
        return f"Promoted from {old.calculated_rank} to {new.calculated_rank}"
    if is_demotion(old, new):
        return f"Demoted from {old.calculated_rank} to {new.calculated_rank}"
    if old.level != new.level:
        return f"Changed from {old.calculated_rank} to {new.calculated_rank}"
    return f"Progressed in {new.calculated_rank}"


def sort_ranks_by_tier(ranks) -> list[CalculatedRank]:
    """Highest rank first. Returns a new list."""
    return sorted(ranks, key=lambda r: r.tier_index, reverse=True)


def rank_statistics(ranks) -> dict:
    """Tier distribution and RP summary for a collection of ranks."""
    ranks = list(ranks)
    stats = {
        'total_players': len(ranks),
        'tier_distribution': {},
        'average_rp': 0,
        'highest_rp': 0,
        'lowest_rp': 0,
    }
    if not ranks:
        return stats

    for rank in ranks:
        name = rank.tier.value
        stats['tier_distribution'][name] = stats['tier_distribution'].get(name, 0) + 1

    total = sum(r.total_rp for r in ranks)
    stats['average_rp'] = int(round_half_up(total / len(ranks)))
    stats['highest_rp'] = max(r.total_rp for r in ranks)
    stats['lowest_rp'] = min(r.total_rp for r in ranks)
    return stats
