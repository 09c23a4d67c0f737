"""
lead_qualification/services/strategy.py — Engagement strategy for a lead.

The oracle proposes the plan; this module only validates and defaults it.
The strategy is informational and never influences score or priority.
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from lead_qualification.ai_engine.oracle import AnalysisOracle
from lead_qualification.ai_engine.utils import clamp, coerce_number
from lead_qualification.models import (
    Dimension,
    EngagementStrategy,
    Lead,
    PersonalizationElement,
    PredictiveMetrics,
    TimingStrategy,
)
from lead_qualification.services.coordinator import call_oracle
from lead_qualification.services.defaults import (
    DEFAULT_CHANNEL_PREFERENCES,
    DEFAULT_CONTENT_RECOMMENDATIONS,
    DEFAULT_MESSAGING_THEMES,
    DEFAULT_PRIMARY_APPROACH,
    default_engagement_strategy,
    default_timing_strategy,
)

logger = logging.getLogger(__name__)


def _text(value: Any, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def _text_list(value: Any, default: Sequence[str]) -> list[str]:
    """Non-empty strings from `value`, or `default` if none survive."""
    if isinstance(value, list):
        items = [v.strip() for v in value if isinstance(v, str) and v.strip()]
        if items:
            return items
    return list(default)


def _normalize_timing(raw: Any) -> TimingStrategy:
    default = default_timing_strategy()
    if not isinstance(raw, Mapping):
        return default
    return TimingStrategy(
        optimal_contact_time=_text(raw.get("optimal_contact_time"), default.optimal_contact_time),
        follow_up_cadence=_text(raw.get("follow_up_cadence"), default.follow_up_cadence),
        preferred_days=_text_list(raw.get("preferred_days"), default.preferred_days),
        preferred_times=_text_list(raw.get("preferred_times"), default.preferred_times),
        seasonal_considerations=_text_list(
            raw.get("seasonal_considerations"), default.seasonal_considerations
        ),
        urgency_indicators=_text_list(raw.get("urgency_indicators"), default.urgency_indicators),
    )


def _normalize_personalization(raw: Any) -> list[PersonalizationElement]:
    if not isinstance(raw, list):
        return []
    elements = []
    for entry in raw:
        if not isinstance(entry, Mapping):
            continue
        element, value = entry.get("element"), entry.get("value")
        if not isinstance(element, str) or not element.strip() or value is None:
            continue
        confidence = coerce_number(entry.get("confidence"))
        elements.append(PersonalizationElement(
            element=element.strip(),
            value=str(value),
            source=_text(entry.get("source"), "oracle"),
            confidence=clamp(confidence if confidence is not None else 0.5, 0.0, 1.0),
        ))
    return elements


def normalize_engagement_strategy(raw: Mapping[str, Any] | None) -> EngagementStrategy:
    """Build a strategy from `raw`, defaulting every missing or mistyped field."""
    if not isinstance(raw, Mapping):
        return default_engagement_strategy()
    return EngagementStrategy(
        primary_approach=_text(raw.get("primary_approach"), DEFAULT_PRIMARY_APPROACH),
        messaging_themes=_text_list(raw.get("messaging_themes"), DEFAULT_MESSAGING_THEMES),
        content_recommendations=_text_list(
            raw.get("content_recommendations"), DEFAULT_CONTENT_RECOMMENDATIONS
        ),
        timing=_normalize_timing(raw.get("timing_optimization", raw.get("timing"))),
        channel_preferences=_text_list(raw.get("channel_preferences"), DEFAULT_CHANNEL_PREFERENCES),
        personalization_elements=_normalize_personalization(raw.get("personalization_elements")),
    )


async def optimize_engagement_strategy(
    lead: Lead,
    dimensions: list[Dimension],
    predictive_metrics: PredictiveMetrics,
    oracle: AnalysisOracle,
    timeout: float,
) -> EngagementStrategy:
    """Ask the oracle for an engagement plan; never raises on oracle failure."""
    raw = await call_oracle(
        "engagement_strategy",
        oracle.optimize_strategy(lead, dimensions, predictive_metrics),
        timeout,
    )
    return normalize_engagement_strategy(raw)
