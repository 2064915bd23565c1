"""Centralized constants for deckwise.

All magic numbers and scheduling defaults live here so every layer
imports from a single source of truth.
"""

# ---------- Reporting ranges ----------
AVAILABLE_RANGES = (31, 91, 181, 361, 721, 1081)  # days
MAX_RANGE = max(AVAILABLE_RANGES)

# ---------- Deck defaults ----------
DEFAULT_NEW_CARDS_PER_DAY = 20
DEFAULT_ALGORITHM = "constant_coefficient"

# ---------- Card state bounds ----------
MIN_BASE_REVISION_TIME = 0.01
MIN_EASINESS_FACTOR = 1.3
MIN_INTERVAL_DAYS = 1
DEFAULT_BASE_REVISION_TIME = 1.0

# ---------- Hyperparameter minimums ----------
MIN_COEFFICIENT = 0.001
MIN_INCORRECT_THRESHOLD = 1

# ---------- SuperMemo-2 ----------
SM2_FIRST_INTERVAL = 1
SM2_SECOND_INTERVAL = 6
SM2_PASSING_GRADE = 3
SM2_MAX_GRADE = 5
