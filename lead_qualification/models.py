"""
lead_qualification/models.py — Typed data model for one qualification run.

Every model is frozen: a Lead is never mutated by the engine and a
QualificationResult is immutable once produced. Numeric ranges are declared
on the fields; the services clamp values before constructing these models.
"""

import enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# ── Enums ────────────────────────────────────────────────────────────────────

class DimensionName(str, enum.Enum):
    """The ten qualification dimensions, in their fixed evaluation order."""

    PAIN_INTENSITY = "pain_intensity"
    FINANCIAL_CAPACITY = "financial_capacity"
    DECISION_AUTHORITY = "decision_authority"
    TECHNICAL_READINESS = "technical_readiness"
    COMPETITIVE_LANDSCAPE = "competitive_landscape"
    TIMING_URGENCY = "timing_urgency"
    IMPLEMENTATION_COMPLEXITY = "implementation_complexity"
    GROWTH_TRAJECTORY = "growth_trajectory"
    COMPLIANCE_RISK = "compliance_risk"
    MARKET_POSITIONING = "market_positioning"


class PriorityLevel(str, enum.Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    DISQUALIFIED = "disqualified"


class PriorityBucket(str, enum.Enum):
    IMMEDIATE = "immediate"
    SHORT_TERM = "short_term"
    MEDIUM_TERM = "medium_term"
    LONG_TERM = "long_term"


class Level(str, enum.Enum):
    """Effort / impact grading of an insight."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# ── Input ────────────────────────────────────────────────────────────────────

class Lead(BaseModel):
    """
    Snapshot of a prospect handed to the oracle.

    Only `id` is required. Unknown attributes (review counts, ratings, tech
    stack, ...) are kept as extras and forwarded to the oracle untouched.
    """

    model_config = ConfigDict(frozen=True, extra="allow", coerce_numbers_to_str=True)

    id: str = Field(..., min_length=1)
    name: str | None = None
    industry: str | None = None
    employee_count: int | None = None
    location: str | None = None
    website: str | None = None

    def snapshot(self) -> dict[str, Any]:
        """Plain-dict view of the lead (extras included, unset fields omitted)."""
        return self.model_dump(exclude_none=True)


# ── Dimensions ───────────────────────────────────────────────────────────────

class Factor(_Frozen):
    name: str
    impact: float = Field(ge=0, le=100)
    evidence: list[str] = Field(default_factory=list)
    source: str = "oracle"
    reliability: float = Field(ge=0, le=1)


class Dimension(_Frozen):
    name: DimensionName
    score: float = Field(ge=0, le=100)
    confidence: float = Field(ge=0, le=1)
    factors: list[Factor] = Field(default_factory=list)
    weight: float = Field(gt=0, le=1)


# ── Forecasts & risk ─────────────────────────────────────────────────────────

class PredictiveMetrics(_Frozen):
    conversion_probability: float = Field(ge=0, le=1)
    time_to_conversion_days: float = Field(ge=0)
    lifetime_value: float = Field(ge=0)
    churn_risk: float = Field(ge=0, le=1)
    expansion_potential: float = Field(ge=0, le=1)
    referral_likelihood: float = Field(ge=0, le=1)


class RiskAssessment(_Frozen):
    payment_risk: float = Field(ge=0, le=1)
    implementation_risk: float = Field(ge=0, le=1)
    satisfaction_risk: float = Field(ge=0, le=1)
    compliance_risk: float = Field(ge=0, le=1)
    competitor_lock_in: float = Field(ge=0, le=1)
    overall_risk_score: float = Field(ge=0, le=1)

    def components(self) -> tuple[float, float, float, float, float]:
        return (
            self.payment_risk,
            self.implementation_risk,
            self.satisfaction_risk,
            self.compliance_risk,
            self.competitor_lock_in,
        )


# ── Engagement strategy ──────────────────────────────────────────────────────

class TimingStrategy(_Frozen):
    optimal_contact_time: str
    follow_up_cadence: str
    preferred_days: list[str] = Field(default_factory=list)
    preferred_times: list[str] = Field(default_factory=list)
    seasonal_considerations: list[str] = Field(default_factory=list)
    urgency_indicators: list[str] = Field(default_factory=list)


class PersonalizationElement(_Frozen):
    element: str
    value: str
    source: str = "oracle"
    confidence: float = Field(default=0.5, ge=0, le=1)


class EngagementStrategy(_Frozen):
    primary_approach: str
    messaging_themes: list[str]
    content_recommendations: list[str]
    timing: TimingStrategy
    channel_preferences: list[str]
    personalization_elements: list[PersonalizationElement] = Field(default_factory=list)


# ── Output ───────────────────────────────────────────────────────────────────

class Insight(_Frozen):
    text: str
    recommended_action: str
    priority_bucket: PriorityBucket
    effort: Level
    impact: Level
    timeline: str


class QualificationResult(_Frozen):
    lead_id: str
    overall_score: float = Field(ge=0, le=100)
    confidence_level: float = Field(ge=0, le=1)
    dimensions: list[Dimension]
    predictive_metrics: PredictiveMetrics
    risk_assessment: RiskAssessment
    engagement_strategy: EngagementStrategy
    priority_level: PriorityLevel
    actionable_insights: list[Insight]
