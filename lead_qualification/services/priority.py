"""
lead_qualification/services/priority.py — Maps (overall score, overall risk)
to a priority tier.

Rules are evaluated top to bottom and the first match wins, so high risk caps
the tier regardless of score. The last two tiers ignore risk.
"""

from lead_qualification.models import PriorityLevel

# (min overall score, max overall risk or None for "any", tier)
PRIORITY_RULES: tuple[tuple[float, float | None, PriorityLevel], ...] = (
    (85.0, 0.3, PriorityLevel.CRITICAL),
    (70.0, 0.5, PriorityLevel.HIGH),
    (55.0, 0.7, PriorityLevel.MEDIUM),
    (35.0, None, PriorityLevel.LOW),
)


def determine_priority_level(overall_score: float, overall_risk_score: float) -> PriorityLevel:
    for min_score, max_risk, level in PRIORITY_RULES:
        if overall_score >= min_score and (max_risk is None or overall_risk_score <= max_risk):
            return level
    return PriorityLevel.DISQUALIFIED
