"""
lead_qualification/services/aggregator.py — Combines dimensions, forecasts and
risk into one bounded overall score and a confidence level.

    overall_score    = clamp(Σ score·weight + 10·conversion_probability
                             − 15·overall_risk, 0, 100)
    confidence_level = clamp(mean(confidence) · data_quality, 0, 1)
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from lead_qualification.ai_engine.utils import clamp
from lead_qualification.exceptions import AggregationInputMissing
from lead_qualification.models import Dimension, DimensionName, PredictiveMetrics, RiskAssessment
from lead_qualification.services.dimensions import DIMENSION_ORDER
from lead_qualification.services.risk import calculate_overall_risk

logger = logging.getLogger(__name__)

PREDICTIVE_BONUS_FACTOR = 10.0
RISK_PENALTY_FACTOR = 15.0


@dataclass(frozen=True)
class AggregateScore:
    overall_score: float        # 0.0 – 100.0
    confidence_level: float     # 0.0 – 1.0
    overall_risk_score: float   # mean of the five risk components


def validate_dimensions(
    dimensions: Sequence[Dimension],
    required: Sequence[DimensionName] = DIMENSION_ORDER,
) -> None:
    """
    Raise AggregationInputMissing unless `dimensions` holds exactly one entry
    per required name, in the required order.
    """
    names = [d.name for d in dimensions]
    if names == list(required):
        return
    missing = [n.value for n in required if n not in names]
    logger.error(
        "Aggregation aborted: got %d dimensions (missing=%s), expected %d in fixed order.",
        len(names), missing, len(required),
    )
    raise AggregationInputMissing(
        f"expected {len(required)} dimensions {[n.value for n in required]}, "
        f"got {[n.value for n in names]}"
    )


def calculate_overall_score(
    dimensions: Sequence[Dimension],
    predictive_metrics: PredictiveMetrics,
    overall_risk_score: float,
) -> float:
    dimension_score = sum(d.score * d.weight for d in dimensions)
    predictive_bonus = predictive_metrics.conversion_probability * PREDICTIVE_BONUS_FACTOR
    risk_penalty = overall_risk_score * RISK_PENALTY_FACTOR
    return clamp(dimension_score + predictive_bonus - risk_penalty, 0.0, 100.0)


def assess_data_quality(dimensions: Sequence[Dimension]) -> float:
    """Mean over dimensions of their mean factor reliability (1.0 for no factors)."""
    if not dimensions:
        return 0.0
    per_dimension = [
        sum(f.reliability for f in d.factors) / len(d.factors) if d.factors else 1.0
        for d in dimensions
    ]
    return sum(per_dimension) / len(per_dimension)


def calculate_confidence_level(dimensions: Sequence[Dimension]) -> float:
    if not dimensions:
        return 0.0
    avg_confidence = sum(d.confidence for d in dimensions) / len(dimensions)
    return clamp(avg_confidence * assess_data_quality(dimensions), 0.0, 1.0)


def aggregate(
    dimensions: Sequence[Dimension],
    predictive_metrics: PredictiveMetrics,
    risk_assessment: RiskAssessment,
) -> AggregateScore:
    """
    Join point of a qualification run.

    The overall risk is recomputed from the five components it is given, so
    the penalty always matches the parts.

    Raises:
        AggregationInputMissing: if the dimension set is incomplete.
    """
    validate_dimensions(dimensions)
    overall_risk = calculate_overall_risk(list(risk_assessment.components()))
    return AggregateScore(
        overall_score=calculate_overall_score(dimensions, predictive_metrics, overall_risk),
        confidence_level=calculate_confidence_level(dimensions),
        overall_risk_score=overall_risk,
    )
