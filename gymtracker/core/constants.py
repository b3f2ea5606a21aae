"""Application constants."""

# Unit conversion (presentation boundary only)
KG_TO_LB = 2.2046226218

# Settings defaults (used when the settings row is created lazily)
DEFAULT_REST_SECONDS = 90
DEFAULT_WEIGHT_INCREMENT_KG = 2.5
DEFAULT_WEIGHT_INCREMENT_LB = 5.0
DEFAULT_DUMBBELL_INCREMENT_KG = 2.0
DEFAULT_DUMBBELL_INCREMENT_LB = 5.0
DEFAULT_PROGRESSION_PERCENT = 2.5

# Progression
DEFAULT_PLANNED_REPS = 8
REP_WINDOW = 2  # planned reps +/- this many
BACKOFF_FACTOR = 0.975
WARMUP_PERCENTS = (0.40, 0.55, 0.70, 0.80, 0.90)
WARMUP_REPS = (8, 5, 3, 2, 1)
WARMUP_REST_MIN_SECONDS = 45
WARMUP_REST_MAX_SECONDS = 60

# Personal records
RECENT_RECORDS_LIMIT = 10
OVERALL_RECENT_RECORDS = 5

# Rest timer
REST_ALERT_ID = "rest_end_notification"
ADD_MINUTE_SECONDS = 60
REST_ALERT_TITLE = "המנוחה הסתיימה"
REST_ALERT_BODY_DEFAULT = "הגיע הזמן לחזור לאימון"

# Monthly report
REPORT_FILE_PREFIX = "gymtracker"
REPORT_FILE_EXTENSION = "html"
