"""Numeric policy for the monthly insight classifier.

Clock values are minutes from midnight. Sleep times before noon are shifted by
24h so that 00:30 orders after 23:30.
"""

MINUTES_PER_DAY = 24 * 60

# Fallbacks for absent or zero denominators and missing statistics
DEFAULT_TARGET_ROUNDS = 16
DEFAULT_TRACKED_DAYS = 30
MISSING_IQR = 999.0

# Sleep
SLEEP_LATE_RED = 23 * 60 + 30  # 23:30
SLEEP_LATE_WITH_EARLY_WAKE_RED = 23 * 60  # 23:00
SLEEP_IQR_RED = 120
SLEEP_DURATION_RED = 360  # 6h
EARLY_WAKE_PERCENT_RED = 70
SLEEP_WINDOW_GREEN = (21 * 60 + 15, 22 * 60 + 30)  # 21:15 - 22:30, inclusive
SLEEP_IQR_GREEN = 60
SLEEP_DURATION_GREEN = 390  # 6.5h

# Chanting
ZERO_ROUND_DAYS_RED = 5
CHANTING_MEDIAN_RATIO_RED = 0.50
CHANTING_IQR_RATIO_RED = 0.50
LATE_ROUNDS_PERCENT_RED = 40
ZERO_ROUND_DAYS_GREEN = 1
CHANTING_MEDIAN_RATIO_GREEN = 0.75
CHANTING_IQR_RATIO_GREEN = 0.25
EARLY_ROUNDS_PERCENT_GREEN = 50
LATE_ROUNDS_PERCENT_GREEN = 20
LATE_ROUNDS_PERCENT_DRAG = 25

# Reading
READING_DAY_RATIO_RED = 0.30
READING_MEDIAN_RED = 15
READING_DAY_RATIO_GREEN = 0.60
READING_MEDIAN_GREEN = 30

# Association
ASSOCIATION_DAY_RATIO_RED = 0.20
ASSOCIATION_MEDIAN_RED = 30
ASSOCIATION_DAY_RATIO_GREEN = 0.40
ASSOCIATION_MEDIAN_GREEN = 45

# Arati
ARATI_DAY_RATIO_RED = 0.30
ARATI_MORNING_SHARE_RED = 0.20
ARATI_DAY_RATIO_GREEN = 0.60
ARATI_MORNING_SHARE_GREEN = 0.40

# Exercise
EXERCISE_DAY_RATIO_RED = 0.25
EXERCISE_MEDIAN_RED = 10
EXERCISE_DAY_RATIO_GREEN = 0.50
EXERCISE_MEDIAN_GREEN = 20

# Shared burst rule: IQR above this multiple of a positive median
BURST_IQR_MULTIPLE = 2
