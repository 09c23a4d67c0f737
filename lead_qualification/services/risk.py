"""
lead_qualification/services/risk.py — Risk assessment for a lead.

The five components come from the oracle (each defaulted on its own to a
heuristic baseline). The overall score is always recomputed here as their
unweighted mean; an overall value sent by the oracle is ignored.
"""

import logging
from collections.abc import Mapping
from typing import Any

from lead_qualification.ai_engine.oracle import AnalysisOracle
from lead_qualification.ai_engine.utils import clamp, coerce_number
from lead_qualification.models import Dimension, Lead, RiskAssessment
from lead_qualification.services.coordinator import call_oracle
from lead_qualification.services.defaults import DEFAULT_RISK_COMPONENTS

logger = logging.getLogger(__name__)


def calculate_overall_risk(risks: list[float]) -> float:
    return sum(risks) / len(risks)


def build_risk_assessment(
    payment_risk: float,
    implementation_risk: float,
    satisfaction_risk: float,
    compliance_risk: float,
    competitor_lock_in: float,
) -> RiskAssessment:
    """Clamp the five components and derive overall_risk_score from them."""
    components = [
        clamp(r, 0.0, 1.0)
        for r in (payment_risk, implementation_risk, satisfaction_risk, compliance_risk, competitor_lock_in)
    ]
    return RiskAssessment(
        payment_risk=components[0],
        implementation_risk=components[1],
        satisfaction_risk=components[2],
        compliance_risk=components[3],
        competitor_lock_in=components[4],
        overall_risk_score=calculate_overall_risk(components),
    )


def normalize_risk_assessment(raw: Mapping[str, Any] | None) -> RiskAssessment:
    if not isinstance(raw, Mapping):
        raw = {}
    components: dict[str, float] = {}
    for field, default in DEFAULT_RISK_COMPONENTS.items():
        value = coerce_number(raw.get(field))
        if value is None:
            logger.debug("Risk component %s missing — defaulting to %.2f.", field, default)
            value = default
        components[field] = value
    return build_risk_assessment(**components)


async def assess_risks(
    lead: Lead,
    dimensions: list[Dimension],
    oracle: AnalysisOracle,
    timeout: float,
) -> RiskAssessment:
    """Ask the oracle for risk components; never raises on oracle failure."""
    raw = await call_oracle("risk_assessment", oracle.assess_risks(lead, dimensions), timeout)
    return normalize_risk_assessment(raw)
