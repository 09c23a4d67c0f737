"""
lead_qualification/services/predictive.py — Forward-looking metrics for a lead.

Each of the six metrics is taken from the oracle when present and valid,
clamped into range, and otherwise defaulted on its own.
"""

import logging
from collections.abc import Mapping
from typing import Any

from lead_qualification.ai_engine.oracle import AnalysisOracle
from lead_qualification.ai_engine.utils import clamp, coerce_number
from lead_qualification.models import Dimension, Lead, PredictiveMetrics
from lead_qualification.services.benchmarks import get_industry_benchmark
from lead_qualification.services.coordinator import call_oracle
from lead_qualification.services.defaults import DEFAULT_PREDICTIVE_METRICS

logger = logging.getLogger(__name__)

_INF = float("inf")

# field → (accepted oracle keys, lower bound, upper bound)
_METRIC_FIELDS: dict[str, tuple[tuple[str, ...], float, float]] = {
    "conversion_probability": (("conversion_probability",), 0.0, 1.0),
    "time_to_conversion_days": (("time_to_conversion_days", "time_to_conversion"), 0.0, _INF),
    "lifetime_value": (("lifetime_value",), 0.0, _INF),
    "churn_risk": (("churn_risk",), 0.0, 1.0),
    "expansion_potential": (("expansion_potential",), 0.0, 1.0),
    "referral_likelihood": (("referral_likelihood",), 0.0, 1.0),
}


def default_predictive_metrics() -> PredictiveMetrics:
    return PredictiveMetrics(**DEFAULT_PREDICTIVE_METRICS)


def normalize_predictive_metrics(raw: Mapping[str, Any] | None) -> PredictiveMetrics:
    """Fill every metric from `raw` where valid, else from DEFAULT_PREDICTIVE_METRICS."""
    if not isinstance(raw, Mapping):
        return default_predictive_metrics()

    values: dict[str, float] = {}
    for field, (keys, lower, upper) in _METRIC_FIELDS.items():
        value = next(
            (v for v in (coerce_number(raw.get(k)) for k in keys) if v is not None),
            None,
        )
        if value is None:
            logger.debug("Predictive metric %s missing — defaulting.", field)
            value = DEFAULT_PREDICTIVE_METRICS[field]
        values[field] = clamp(value, lower, upper)
    return PredictiveMetrics(**values)


async def estimate_predictive_metrics(
    lead: Lead,
    dimensions: list[Dimension],
    oracle: AnalysisOracle,
    timeout: float,
) -> PredictiveMetrics:
    """Ask the oracle for forecasts; never raises on oracle failure."""
    benchmark = get_industry_benchmark(lead.industry)
    raw = await call_oracle(
        "predictive_metrics",
        oracle.predict_metrics(lead, dimensions, benchmark),
        timeout,
    )
    return normalize_predictive_metrics(raw)
