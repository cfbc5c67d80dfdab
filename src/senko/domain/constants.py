"""Centralized constants for senko.

Rating scales, analytics windows and keyboard bindings live here so every
layer imports from a single source of truth.
"""

# ---------- Ratings ----------
RATING_AGAIN = 1
RATING_HARD = 2
RATING_GOOD = 3
RATING_EASY = 4
VALID_RATINGS = (RATING_AGAIN, RATING_HARD, RATING_GOOD, RATING_EASY)
RETAINED_RATINGS = (RATING_GOOD, RATING_EASY)

# ---------- Requeue ----------
HARD_MIN_POSITION = 1
GOOD_MIN_POSITION = 2

# ---------- Time ----------
MS_PER_SECOND = 1000
MS_PER_MINUTE = 60_000
MS_PER_DAY = 86_400_000

# ---------- Analytics ----------
RETENTION_MAX_DAYS = 90
HEATMAP_DAYS_BACK = 365
PROBLEM_CARD_MIN_REVIEWS = 3
PROBLEM_CARD_LOW_RATIO = 0.5
PROBLEM_CARD_LOW_RATING = RATING_HARD

# ---------- Keyboard ----------
FLIP_KEY = "space"
RATING_KEYS = {"1": 1, "2": 2, "3": 3, "4": 4}
SEQUENCE_PREFIX = "g"
RESET_SEQUENCE = ("g", "r")
SEQUENCE_TIMEOUT = 1.0  # seconds

# ---------- Storage ----------
SESSIONS_FILE = "sessions.json"
DAILY_STATS_FILE = "daily_stats.json"
