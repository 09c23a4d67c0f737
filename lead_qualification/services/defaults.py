"""
lead_qualification/services/defaults.py — Every fallback value used when the
oracle fails or omits a field, in one place.

Both the fallback paths and the tests read these tables.
"""

from types import MappingProxyType

from lead_qualification.models import EngagementStrategy, TimingStrategy

# ── Dimensions ────────────────────────────────────────────────────────────────

NEUTRAL_DIMENSION_SCORE = 50.0
FAILED_DIMENSION_CONFIDENCE = 0.3       # oracle call failed outright
PARSED_DIMENSION_CONFIDENCE = 0.5       # oracle answered but gave no confidence and no factors
DEFAULT_FACTOR_IMPACT = 50.0
DEFAULT_FACTOR_RELIABILITY = 0.5
DEFAULT_FACTOR_SOURCE = "oracle"

# ── Predictive metrics ────────────────────────────────────────────────────────

DEFAULT_PREDICTIVE_METRICS = MappingProxyType({
    "conversion_probability": 0.5,
    "time_to_conversion_days": 90.0,
    "lifetime_value": 2400.0,
    "churn_risk": 0.2,
    "expansion_potential": 0.3,
    "referral_likelihood": 0.25,
})

# ── Risk ──────────────────────────────────────────────────────────────────────

DEFAULT_RISK_COMPONENTS = MappingProxyType({
    "payment_risk": 0.30,
    "implementation_risk": 0.30,
    "satisfaction_risk": 0.25,
    "compliance_risk": 0.20,
    "competitor_lock_in": 0.35,
})

# ── Engagement strategy ───────────────────────────────────────────────────────

DEFAULT_PRIMARY_APPROACH = "educational_value_first"
DEFAULT_MESSAGING_THEMES = ("roi_improvement", "compliance_safety")
DEFAULT_CONTENT_RECOMMENDATIONS = ("case_study", "free_audit")
DEFAULT_CHANNEL_PREFERENCES = ("email", "phone")


def default_timing_strategy() -> TimingStrategy:
    return TimingStrategy(
        optimal_contact_time="tuesday_10am",
        follow_up_cadence="weekly_for_4_weeks",
        preferred_days=["tuesday", "wednesday", "thursday"],
        preferred_times=["10am", "2pm"],
        seasonal_considerations=["avoid_holidays"],
        urgency_indicators=["business_crisis", "negative_reviews"],
    )


def default_engagement_strategy() -> EngagementStrategy:
    return EngagementStrategy(
        primary_approach=DEFAULT_PRIMARY_APPROACH,
        messaging_themes=list(DEFAULT_MESSAGING_THEMES),
        content_recommendations=list(DEFAULT_CONTENT_RECOMMENDATIONS),
        timing=default_timing_strategy(),
        channel_preferences=list(DEFAULT_CHANNEL_PREFERENCES),
        personalization_elements=[],
    )
