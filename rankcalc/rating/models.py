"""
Record types shared by the rating components.

All records are computed fresh from caller-supplied inputs and are never
persisted by the engine.
"""

from dataclasses import dataclass, field
from enum import Enum

from rankcalc.config import SHIELD_MAX_GAMES, SHIELDED_LOSS_RP
from rankcalc.utils import ValidationError


class Outcome(str, Enum):
    WIN = "win"
    LOSS = "loss"
    DRAW = "draw"


class ConfidenceLabel(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class AlignmentStatus(str, Enum):
    UNDERRANKED = "underranked"  # Skill exceeds shown rank
    OVERRANKED = "overranked"
    ALIGNED = "aligned"


def parse_outcome(value) -> Outcome:
    """Convert an outcome string (or Outcome) to Outcome, rejecting unknown values."""
    if isinstance(value, Outcome):
        return value
    try:
        return Outcome(str(value).lower())
    except ValueError:
        raise ValidationError(
            f"Invalid match outcome: '{value}'. "
            f"Allowed values: {', '.join(o.value for o in Outcome)}"
        ) from None


@dataclass(frozen=True)
class MatchRecord:
    """One match in a player's recent history."""
    outcome: Outcome
    rp_change: int
    was_shielded: bool = False
    id: str | None = None

    def __post_init__(self):
        object.__setattr__(self, "outcome", parse_outcome(self.outcome))

    @property
    def effective_rp_change(self) -> int:
        """RP change as seen by the rating model; shielded losses count as a real loss."""
        return SHIELDED_LOSS_RP if self.was_shielded else self.rp_change

    @classmethod
    def from_dict(cls, data: dict) -> "MatchRecord":
        """
        Build a MatchRecord from a stored row or API payload.

        Accepts both camelCase (rpChange, wasShielded) and snake_case keys.
        """
        rp_change = data.get("rp_change", data.get("rpChange", 0))
        was_shielded = data.get("was_shielded", data.get("wasShielded", False))
        match_id = data.get("id")
        return cls(
            outcome=data.get("outcome"),
            rp_change=int(rp_change),
            was_shielded=bool(was_shielded),
            id=None if match_id is None else str(match_id),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "outcome": self.outcome.value,
            "rp_change": self.rp_change,
            "was_shielded": self.was_shielded,
        }


@dataclass(frozen=True)
class RatingEstimate:
    rating: int
    rating_deviation: float
    volatility: float


@dataclass(frozen=True)
class ShieldState:
    active: bool
    games_used: int
    warning: bool

    @property
    def games_remaining(self) -> int:
        return max(0, SHIELD_MAX_GAMES - self.games_used)


@dataclass(frozen=True)
class ConfidenceResult:
    label: ConfidenceLabel
    percentage: int


@dataclass(frozen=True)
class RankAlignment:
    rating_diff: float
    status: AlignmentStatus


@dataclass
class MMRSnapshot:
    """Display payload combining every rating component for one player."""
    current_rank: str
    current_rp: int
    total_rp: int
    calculated_rank: str
    estimated_glicko: int
    estimated_rd: float
    estimated_volatility: float
    accuracy_score: int
    accuracy_label: str
    avg_rp_per_win: int
    avg_rp_per_loss: int
    recent_win_rate: int
    total_wins: int
    shield_games_used: int
    shield_active: bool
    shield_warning: bool
    is_new_season: bool
    previous_season_mmr: float | None
    skill_gap: float
    ranking_status: str
    projected_rp_gain: int
    matches: list = field(default_factory=list)
    created_at: str | None = None

    def to_dict(self) -> dict:
        row = dict(self.__dict__)
        row["matches"] = [m.to_dict() for m in self.matches]
        return row
