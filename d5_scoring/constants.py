"""Constants for accessibility scoring, legal thresholds and recommendations."""

# Points deducted per issue
SEVERITY_DEDUCTIONS = {
    "critical": 10,
    "serious": 3,
    "moderate": 1,
    "minor": 0.25,
}

MAX_SCORE = 100

# Bonus when the page has no critical/serious issues and few moderate ones
AAA_PRACTICES_BONUS = 5
AAA_PRACTICES_MAX_MODERATE = 5  # exclusive
CARE_SECTOR_BONUS = 2

# Legal thresholds
PUBLIC_SECTOR_MIN_SCORE = 75
EQUALITY_ACT_MIN_SCORE = 70
CQC_MIN_SCORE = 75
COMPLIANT_MIN_SCORE = 85
PARTIAL_COMPLIANCE_MIN_SCORE = 70

# Recommendation effort estimates
COMPLIANCE_TARGET_SCORE = 85
DAYS_PER_CRITICAL = 0.5
DAYS_PER_SERIOUS = 0.25
DAYS_PER_MODERATE = 0.1
POINTS_PER_COMPLIANCE_DAY = 5
MODERATE_RECOMMENDATION_THRESHOLD = 5  # exclusive
