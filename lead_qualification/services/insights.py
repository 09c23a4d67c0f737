"""
lead_qualification/services/insights.py — Rule-based actionable insights.

Insights are generated in a fixed order (dimensions first, then forecast and
risk rules) and stably sorted by bucket rank, so same-bucket insights keep
their generation order.
"""

import logging

from lead_qualification.models import (
    Dimension,
    Insight,
    Level,
    PredictiveMetrics,
    PriorityBucket,
)

logger = logging.getLogger(__name__)

BUCKET_RANK = {
    PriorityBucket.IMMEDIATE: 4,
    PriorityBucket.SHORT_TERM: 3,
    PriorityBucket.MEDIUM_TERM: 2,
    PriorityBucket.LONG_TERM: 1,
}

HIGH_DIMENSION_SCORE = 70.0
LOW_DIMENSION_SCORE = 30.0
HIGH_CONVERSION_PROBABILITY = 0.7
FAST_CONVERSION_DAYS = 30.0
HIGH_RISK_SCORE = 0.7


def _leverage_insight(dimension: Dimension) -> Insight:
    name = dimension.name.value
    return Insight(
        text=f"Strong {name} signals detected",
        recommended_action=f"Leverage {name} in primary messaging",
        priority_bucket=PriorityBucket.SHORT_TERM,
        effort=Level.LOW,
        impact=Level.MEDIUM,
        timeline="within_1_week",
    )


def _barrier_insight(dimension: Dimension) -> Insight:
    name = dimension.name.value
    return Insight(
        text=f"{name} presents challenges",
        recommended_action=f"Address {name} concerns before pitching",
        priority_bucket=PriorityBucket.MEDIUM_TERM,
        effort=Level.MEDIUM,
        impact=Level.MEDIUM,
        timeline="within_2_weeks",
    )


def generate_actionable_insights(
    dimensions: list[Dimension],
    predictive_metrics: PredictiveMetrics,
    overall_risk_score: float,
) -> list[Insight]:
    insights: list[Insight] = []

    for dimension in dimensions:
        if dimension.score >= HIGH_DIMENSION_SCORE:
            insights.append(_leverage_insight(dimension))
        elif dimension.score <= LOW_DIMENSION_SCORE:
            insights.append(_barrier_insight(dimension))

    if predictive_metrics.conversion_probability >= HIGH_CONVERSION_PROBABILITY:
        insights.append(Insight(
            text="High conversion probability detected",
            recommended_action="Prioritize immediate outreach with premium offering",
            priority_bucket=PriorityBucket.IMMEDIATE,
            effort=Level.MEDIUM,
            impact=Level.HIGH,
            timeline="within_24_hours",
        ))

    if predictive_metrics.time_to_conversion_days <= FAST_CONVERSION_DAYS:
        insights.append(Insight(
            text="Fast conversion timeline predicted",
            recommended_action="Accelerate engagement with decision-maker focused approach",
            priority_bucket=PriorityBucket.IMMEDIATE,
            effort=Level.HIGH,
            impact=Level.HIGH,
            timeline="within_1_week",
        ))

    if overall_risk_score >= HIGH_RISK_SCORE:
        insights.append(Insight(
            text="High overall risk detected",
            recommended_action="Implement risk mitigation strategies before proposal",
            priority_bucket=PriorityBucket.SHORT_TERM,
            effort=Level.MEDIUM,
            impact=Level.MEDIUM,
            timeline="within_2_weeks",
        ))

    logger.debug("Generated %d actionable insights", len(insights))
    # sorted() is stable, also with reverse=True
    return sorted(insights, key=lambda i: BUCKET_RANK[i.priority_bucket], reverse=True)
