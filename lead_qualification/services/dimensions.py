"""
lead_qualification/services/dimensions.py — Dimension names, weights and the
normalizer that turns a raw oracle estimate into a canonical Dimension.

The weight table is keyed by the closed DimensionName enum. Only seven of the
ten dimensions have an explicit weight; the others use DEFAULT_DIMENSION_WEIGHT.
"""

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from lead_qualification.ai_engine.utils import clamp, coerce_number
from lead_qualification.exceptions import OracleMalformedResponse
from lead_qualification.models import Dimension, DimensionName, Factor
from lead_qualification.services.defaults import (
    DEFAULT_FACTOR_IMPACT,
    DEFAULT_FACTOR_RELIABILITY,
    DEFAULT_FACTOR_SOURCE,
    FAILED_DIMENSION_CONFIDENCE,
    NEUTRAL_DIMENSION_SCORE,
    PARSED_DIMENSION_CONFIDENCE,
)

logger = logging.getLogger(__name__)

# Fixed evaluation order; results are always reported in this order.
DIMENSION_ORDER: tuple[DimensionName, ...] = tuple(DimensionName)

DIMENSION_WEIGHTS: Mapping[DimensionName, float] = MappingProxyType({
    DimensionName.PAIN_INTENSITY: 0.25,
    DimensionName.FINANCIAL_CAPACITY: 0.20,
    DimensionName.DECISION_AUTHORITY: 0.15,
    DimensionName.COMPETITIVE_LANDSCAPE: 0.15,
    DimensionName.TECHNICAL_READINESS: 0.10,
    DimensionName.TIMING_URGENCY: 0.10,
    DimensionName.IMPLEMENTATION_COMPLEXITY: 0.05,
})
DEFAULT_DIMENSION_WEIGHT = 0.05


def get_dimension_weight(
    name: DimensionName, weights: Mapping[DimensionName, float] = DIMENSION_WEIGHTS
) -> float:
    return weights.get(name, DEFAULT_DIMENSION_WEIGHT)


# ── Local score / confidence ─────────────────────────────────────────────────

def calculate_dimension_score(factors: list[Factor]) -> float:
    """Reliability-weighted mean of factor impacts; neutral 50 without usable factors."""
    total_reliability = sum(f.reliability for f in factors)
    if total_reliability <= 0:
        return NEUTRAL_DIMENSION_SCORE
    weighted_sum = sum(f.impact * f.reliability for f in factors)
    return weighted_sum / total_reliability


def calculate_dimension_confidence(factors: list[Factor], fallback: float) -> float:
    """Mean factor reliability, or `fallback` for an empty factor list."""
    if not factors:
        return fallback
    return sum(f.reliability for f in factors) / len(factors)


# ── Normalizer ───────────────────────────────────────────────────────────────

def _coerce_evidence(value: Any) -> list[str]:
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value if item is not None]
    return []


def normalize_factor(raw: Any) -> Factor | None:
    """Build a Factor from one raw entry, or None if it has no usable name."""
    if not isinstance(raw, Mapping):
        return None
    name = raw.get("name") or raw.get("factor")
    if not isinstance(name, str) or not name.strip():
        return None

    impact = coerce_number(raw.get("impact"))
    reliability = coerce_number(raw.get("reliability"))
    source = raw.get("source") or raw.get("data_source") or DEFAULT_FACTOR_SOURCE

    return Factor(
        name=name.strip(),
        impact=clamp(impact if impact is not None else DEFAULT_FACTOR_IMPACT, 0.0, 100.0),
        evidence=_coerce_evidence(raw.get("evidence")),
        source=str(source),
        reliability=clamp(
            reliability if reliability is not None else DEFAULT_FACTOR_RELIABILITY, 0.0, 1.0
        ),
    )


def normalize_dimension(
    name: DimensionName,
    raw: Any,
    weights: Mapping[DimensionName, float] = DIMENSION_WEIGHTS,
) -> Dimension:
    """
    Validate and default one raw dimension estimate.

    An explicit oracle score/confidence wins (clamped into range). When the
    oracle omits them they are computed locally from the factor list.

    Raises:
        OracleMalformedResponse: if `raw` is not a JSON object.
    """
    if not isinstance(raw, Mapping):
        raise OracleMalformedResponse(name.value, f"expected an object, got {type(raw).__name__}")

    raw_factors = raw.get("factors")
    if not isinstance(raw_factors, list):
        raw_factors = []

    factors: list[Factor] = []
    for entry in raw_factors:
        factor = normalize_factor(entry)
        if factor is None:
            logger.debug("Dropping unusable factor for %s: %r", name.value, entry)
            continue
        factors.append(factor)

    score = coerce_number(raw.get("score"))
    if score is None:
        score = calculate_dimension_score(factors)

    confidence = coerce_number(raw.get("confidence"))
    if confidence is None:
        confidence = calculate_dimension_confidence(factors, fallback=PARSED_DIMENSION_CONFIDENCE)

    return Dimension(
        name=name,
        score=clamp(score, 0.0, 100.0),
        confidence=clamp(confidence, 0.0, 1.0),
        factors=factors,
        weight=get_dimension_weight(name, weights),
    )


def neutral_dimension(
    name: DimensionName, weights: Mapping[DimensionName, float] = DIMENSION_WEIGHTS
) -> Dimension:
    """Stand-in used when the oracle could not estimate a dimension."""
    return Dimension(
        name=name,
        score=NEUTRAL_DIMENSION_SCORE,
        confidence=FAILED_DIMENSION_CONFIDENCE,
        factors=[],
        weight=get_dimension_weight(name, weights),
    )
