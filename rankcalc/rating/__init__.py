"""
Rank and Rating Engine

Modules:
- tiers: RP to tier/level mapping and ladder navigation
- cache: Bounded FIFO cache for tier lookups
- estimator: Glicko-inspired rating estimate from division and match history
- projection: Next-match RP projection and rank alignment
- shield: Demotion shield state
- confidence: Confidence score for an estimate
- models: Shared record types
"""

_EXPORTS = {
    "map_rp_to_rank": "rankcalc.rating.tiers",
    "tier_display_info": "rankcalc.rating.tiers",
    "TierMapper": "rankcalc.rating.tiers",
    "RankCache": "rankcalc.rating.cache",
    "estimate_rating": "rankcalc.rating.estimator",
    "project_next_match_rp": "rankcalc.rating.projection",
    "rank_alignment": "rankcalc.rating.projection",
    "compute_shield_state": "rankcalc.rating.shield",
    "score_confidence": "rankcalc.rating.confidence",
    "MatchRecord": "rankcalc.rating.models",
}


def __getattr__(name):
    """Lazy imports to avoid RuntimeWarning when running modules directly."""
    if name in _EXPORTS:
        import importlib
        return getattr(importlib.import_module(_EXPORTS[name]), name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
