"""
Central configuration for the RankCalc rating engine.

All shared constants and policy values should be defined here
to avoid duplication and ensure consistency across modules.
"""

from pathlib import Path

# --- Project Paths ---
PROJECT_ROOT = Path(__file__).parent.parent
DATA_FOLDER = PROJECT_ROOT / "data"
OUTPUT_FOLDER = DATA_FOLDER / "processed"

# Input/output file patterns
SNAPSHOT_PATTERN = "mmr_snapshots_*.csv"
DIFFICULTY_REPORT_PREFIX = "rank_difficulty"
USER_STATS_REPORT_PREFIX = "user_mmr_stats"

# --- RP Validation ---
MAX_VALID_RP = 10_000  # Caller-side ceiling, the mapper never checks it

# --- Tier Ladder ---
RP_PER_LEVEL = 100
MAX_DISPLAY_RP = 99

# --- Rank Cache ---
RANK_CACHE_SIZE = 1000  # FIFO eviction once exceeded

# --- Rating Estimator ---
NEW_SEASON_RD = 2.5
ESTABLISHED_RD = 1.8
CARRYOVER_RD = 2.2  # New season with a previous-season rating
RETURNING_VOLATILITY = 0.06
FRESH_VOLATILITY = 0.08

SHIELDED_LOSS_RP = -12  # Rating still drops while displayed RP is frozen
BASE_WIN_RP = 15
BASE_LOSS_RP = -12
BASE_DRAW_RP = 2
DIFFICULTY_PIVOT = 1800
DIFFICULTY_MIN = 0.5
DIFFICULTY_MAX = 2.0
SURPRISE_SCALE = 20

WIN_RATING_FACTOR = 0.8
LOSS_RATING_FACTOR = 0.8
DRAW_RATING_FACTOR = 0.5
MIN_RATING_STEP = 5

RD_DECAY = 0.05
RD_SURPRISE_WEIGHT = 0.1
RD_FLOOR = 0.8
VOLATILITY_SURPRISE_WEIGHT = 0.005
VOLATILITY_FLOOR = 0.04

# --- Projection ---
BASE_PROJECTED_GAIN = 15
STRONG_DIFF = 100
MILD_DIFF = 50
STRONG_UNDERRANKED_MULTIPLIER = 1.3
MILD_UNDERRANKED_MULTIPLIER = 1.15
STRONG_OVERRANKED_MULTIPLIER = 0.7
MILD_OVERRANKED_MULTIPLIER = 0.85
ALIGNMENT_THRESHOLD = 50

# --- Demotion Shield ---
SHIELD_MAX_GAMES = 3
SHIELD_WARNING_GAMES = 2

# --- Confidence Scoring ---
SAMPLE_SIZE_POINTS = ((8, 40), (5, 30), (3, 20))  # (min matches, points)
SAMPLE_SIZE_FALLBACK = 10
VARIANCE_POINTS = ((25, 30), (50, 20))  # (variance below, points)
VARIANCE_FALLBACK = 10
ESTABLISHED_SEASON_POINTS = 15
NEW_SEASON_POINTS = 10
WIN_RATE_MIN_MATCHES = 5
WIN_RATE_PLAUSIBLE = (0.4, 0.7, 15)
WIN_RATE_TOLERABLE = (0.3, 0.8, 10)
WIN_RATE_FALLBACK = 5
MISSING_CONTEXT_PENALTY = 10  # Always applied
SHIELD_SAMPLE_BONUS = 5
HIGH_CONFIDENCE = 75
MEDIUM_CONFIDENCE = 50

# --- Match History ---
MATCH_HISTORY_LIMIT = 10  # Newest first

# --- Snapshot Analytics ---
GLICKO_CHANGE_WINDOW_DAYS = 30
CONTRIBUTION_LEVELS = ((50, 3), (20, 2), (5, 1))  # (min snapshots, level)

# Export formats
ALLOWED_EXPORT_FORMATS = frozenset({"json", "csv"})
