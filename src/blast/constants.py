GRID_ROWS = 8
GRID_COLS = 8
PALETTE_SIZE = 5
MAX_MOVES = 30
DEFAULT_SEED = 1337

# Level validation ranges (inclusive).
MIN_GRID_SIZE = 1
# A playable board needs room for one adjacent pair.
MIN_BOARD_CELLS = 2
MIN_PALETTE_SIZE = 2
MAX_PALETTE_SIZE = 7

MIN_GROUP_SIZE = 2

# Visual tier thresholds for classified groups.
TIER_C_MIN_SIZE = 10
TIER_B_MIN_SIZE = 8
TIER_A_EXCLUSIVE_MIN = 4

# Combo multiplier tiers, advanced by fast consecutive moves.
MULTIPLIER_LEVELS = (1.0, 1.1, 1.2, 1.5, 2.0, 3.0, 5.0)
COMBO_TIMEOUT = 2.0

# Scoring: points per block and (min_count, bonus) breakpoints, highest first.
POINTS_PER_BLOCK = 10
SIZE_BONUS_BREAKPOINTS = ((8, 3.0), (6, 2.0), (4, 1.5))
BASE_SIZE_BONUS = 1.0

# Deadlock recovery
MAX_SHUFFLE_ATTEMPTS = 100

# Tween durations (seconds) used by the animation system.
BLAST_DURATION = 0.1
FALL_DURATION = 0.25
SPAWN_DURATION = 0.25
SHUFFLE_DURATION = 0.25
# Ack waits give up after twice the longest tween.
ACK_TIMEOUT = 2 * max(BLAST_DURATION, FALL_DURATION, SPAWN_DURATION, SHUFFLE_DURATION)

GAME_OVER_RESTART_DELAY = 3.0
HIGH_SCORE_KEY = "HighScore"

# Demo front-end geometry
TILE_SIZE = 64
BOTTOM_MARGIN = 20
HUD_HEIGHT = 80
BOARD_MAX_WIDTH_PCT = 0.90
BOARD_MAX_HEIGHT_PCT = 0.80
LOW_MOVES_WARNING = 5
