"""Constants for capaplan.

This module centralizes all magic numbers and default values used throughout the engine.
Category tables are keyed by the category's string value.
"""


# Task defaults
DEFAULT_DURATION_MINUTES = 30
DEFAULT_QUADRANT = 2

# Work window
WORK_START_HOUR = 8
WORK_END_HOUR = 16
# Python weekday numbers (Monday=0). Default work week runs Sunday to Thursday.
WORK_DAYS = (0, 1, 2, 3, 6)

# Capacity and splitting
MIN_WINDOW_MINUTES = 30
MIN_BLOCK_MINUTES = 15
# Gap left after each placed item
BREAK_MINUTES = 0
DEFAULT_BLOCK_MINUTES = 60
MAX_BLOCKS_PER_DAY = 3
CAPACITY_HORIZON_DAYS = 14
SPLIT_PARTS_PER_DAY_ESTIMATE = 2

# Rescheduling
RESCHEDULE_LOOKAHEAD_DAYS = 7
UNDERUTILIZED_PERCENT = 60

# Historical learning
MIN_LEARNING_SAMPLES = 2

# Priority rank (lower = scheduled first)
PRIORITY_ORDER = {
    "urgent": 1,
    "high": 2,
    "normal": 3,
    "low": 4,
}
UNKNOWN_PRIORITY_RANK = 3

# Movability: base score per Eisenhower quadrant (higher = easier to defer)
QUADRANT_BASE_MOVABILITY = {
    1: 2.0,
    2: 3.0,
    3: 3.0,
    4: 4.0,
}
UNKNOWN_QUADRANT_MOVABILITY = 3.0
MIN_MOVABILITY = 1.0
MAX_MOVABILITY = 5.0

# Movability deductions (each applies at most once)
MOVABILITY_DEADLINE_TODAY = 1.0
MOVABILITY_DEADLINE_TOMORROW = 0.5
MOVABILITY_STARTED = 0.5
MOVABILITY_REMINDER_SENT = 0.5
MOVABILITY_CLIENT_COMMUNICATION = 0.5

# Per-category defaults
CATEGORY_DEFAULT_DURATIONS = {
    "transcription": 60,
    "proofreading": 45,
    "typing": 45,
    "email": 25,
    "course": 90,
    "client_communication": 30,
    "unexpected": 30,
    "selfcare": 30,
    "family": 60,
    "reminders": 15,
    "other": 30,
}

# Longest single work session per category
CATEGORY_MAX_BLOCK_MINUTES = {
    "transcription": 45,
    "proofreading": 45,
    "email": 30,
    "client_communication": 30,
    "course": 60,
    "other": 60,
}

# Hours of the day each category is best done in (start, end), 24h clock.
# Placement tries these first and falls back to any free time.
CATEGORY_PREFERRED_HOURS = {
    "transcription": (8, 12),
    "proofreading": (10, 16),
    "typing": (8, 16),
    "email": (8, 10),
    "course": (14, 17),
    "client_communication": (9, 16),
    "unexpected": (8, 17),
    "selfcare": (12, 14),
    "family": (16, 20),
    "reminders": (8, 17),
    "other": (8, 17),
}
