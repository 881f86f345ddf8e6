"""Centralized constants for lexiq.

All calibrated numbers live here so every layer imports from a single
source of truth. Anything a deployment may tune is re-exposed through
``lexiq.application.config.AppConfig``.
"""

# ---------- FSRS ----------
# FSRS-4 weights: initial stability by rating [0-3], difficulty [4-7],
# stability growth [8-10], lapse stability [11-14], hard/easy modifiers [15-16].
DEFAULT_WEIGHTS: tuple[float, ...] = (
    0.4, 0.6, 2.4, 5.8,
    4.93, 0.94, 0.86, 0.01,
    1.49, 0.14, 0.94,
    2.18, 0.05, 0.34, 1.26,
    0.29, 2.61,
)
WEIGHT_COUNT = 17
DEFAULT_REQUEST_RETENTION = 0.9
DEFAULT_MAXIMUM_INTERVAL = 36500  # 100 years
MIN_STABILITY = 0.1
MIN_DIFFICULTY = 1.0
MAX_DIFFICULTY = 10.0
NEW_CARD_DIFFICULTY = 5.0
SECONDS_PER_DAY = 86400.0

# ---------- Mastery ----------
SLOW_RESPONSE_MS = 5000
CUE_FREE_EMA_RATE = 0.3  # weight = 1 / (rate * n + 1)
CUE_ASSISTED_EMA_WEIGHT = 0.2
MAX_CUE_LEVEL = 3
# Scaffolding gap / minimum exposures for cue levels 0, 1 and 2; anything wider gets 3.
NO_CUE_MAX_GAP = 0.1
NO_CUE_MIN_EXPOSURES = 4
MINIMAL_CUE_MAX_GAP = 0.2
MINIMAL_CUE_MIN_EXPOSURES = 3
MODERATE_CUE_MAX_GAP = 0.3

# ---------- Priority ----------
COST_FLOOR = 0.1
IRT_MIN = -3.0
IRT_MAX = 3.0
DEFAULT_TRANSFER_GAIN = 0.1
BEGINNER_THETA_CEILING = -1.0
ADVANCED_THETA_FLOOR = 1.0

# ---------- Queue Builder ----------
NEW_ITEM_URGENCY = 1.5
URGENCY_BASE = 1.0
URGENCY_PER_OVERDUE_DAY = 0.5
MAX_URGENCY = 3.0
DEFAULT_SESSION_SIZE = 20
DEFAULT_NEW_ITEM_RATIO = 0.3
