"""
Demotion shield tracking.

A shield holds a player at 0 RP in their level for a bounded number of
losses instead of demoting them. Those losses are stored with rp_change=0
and was_shielded=True. The rating estimator still counts each one as a
-12 RP loss, so the estimated rating keeps falling while the displayed RP
stays frozen at 0.
"""

from rankcalc.config import SHIELD_WARNING_GAMES
from rankcalc.rating.models import MatchRecord, Outcome, ShieldState


def count_shielded_losses(match_history) -> int:
    """Losses that were absorbed by the shield (0 RP change or flagged shielded)."""
    count = 0
    for match in match_history:
        if not isinstance(match, MatchRecord):
            match = MatchRecord.from_dict(match)
        if match.outcome is Outcome.LOSS and (match.rp_change == 0 or match.was_shielded):
            count += 1
    return count


def compute_shield_state(current_rp, match_history=(), explicit_games_used=None) -> ShieldState:
    """
    Derive demotion-shield state.

    Args:
        current_rp: Display RP within the current level
        match_history: Recent matches, used when explicit_games_used is None
        explicit_games_used: Shield games reported directly by the player, if known
    """
    if explicit_games_used is not None:
        games_used = explicit_games_used
    else:
        games_used = count_shielded_losses(match_history)

    return ShieldState(
        active=current_rp == 0 and games_used > 0,
        games_used=games_used,
        warning=games_used >= SHIELD_WARNING_GAMES,
    )
