"""
lead_qualification/services/qualification_service.py — Orchestrates one
qualification run end to end.

    dimensions (10 concurrent oracle calls)
      → predictive metrics + risk assessment (concurrent)
      → aggregate score / confidence  (join point, may raise)
      → engagement strategy
      → priority tier + actionable insights
      → QualificationResult

Oracle failures are absorbed by the individual services. A run returns one
complete, range-valid result or raises; it never returns partial output.
"""

import asyncio
import logging
from collections.abc import Mapping, Sequence

from lead_qualification.ai_engine.oracle import AnalysisOracle, LangChainOracle
from lead_qualification.config import Settings, settings
from lead_qualification.exceptions import LeadQualificationError
from lead_qualification.models import DimensionName, Lead, QualificationResult
from lead_qualification.services.aggregator import aggregate
from lead_qualification.services.coordinator import analyze_dimensions
from lead_qualification.services.dimensions import DIMENSION_WEIGHTS
from lead_qualification.services.insights import generate_actionable_insights
from lead_qualification.services.predictive import estimate_predictive_metrics
from lead_qualification.services.priority import determine_priority_level
from lead_qualification.services.risk import assess_risks
from lead_qualification.services.strategy import optimize_engagement_strategy

logger = logging.getLogger(__name__)


async def qualify_lead(
    lead: Lead,
    oracle: AnalysisOracle | None = None,
    config: Settings | None = None,
    weights: Mapping[DimensionName, float] = DIMENSION_WEIGHTS,
) -> QualificationResult:
    """
    Run a full qualification for one lead.

    Args:
        lead:    The lead snapshot; never mutated.
        oracle:  Analysis oracle; defaults to the LangChain/OpenRouter oracle.
        config:  Settings for timeouts and the default oracle's model, key and
                 retries; defaults to the module singleton.
        weights: Dimension weight table; defaults to DIMENSION_WEIGHTS.

    Returns:
        The complete QualificationResult.

    Raises:
        AggregationInputMissing: if the dimension set could not be assembled.
    """
    config = config or settings
    oracle = oracle or LangChainOracle(config)
    timeout = config.oracle_timeout_seconds

    logger.info("Qualifying lead %s (%s)", lead.id, lead.name or "unnamed")

    dimensions = await analyze_dimensions(lead, oracle, timeout, weights=weights)

    predictive_metrics, risk_assessment = await asyncio.gather(
        estimate_predictive_metrics(lead, dimensions, oracle, timeout),
        assess_risks(lead, dimensions, oracle, timeout),
    )

    scores = aggregate(dimensions, predictive_metrics, risk_assessment)

    engagement_strategy = await optimize_engagement_strategy(
        lead, dimensions, predictive_metrics, oracle, timeout
    )

    priority_level = determine_priority_level(scores.overall_score, scores.overall_risk_score)
    insights = generate_actionable_insights(
        dimensions, predictive_metrics, scores.overall_risk_score
    )

    result = QualificationResult(
        lead_id=lead.id,
        overall_score=scores.overall_score,
        confidence_level=scores.confidence_level,
        dimensions=dimensions,
        predictive_metrics=predictive_metrics,
        risk_assessment=risk_assessment,
        engagement_strategy=engagement_strategy,
        priority_level=priority_level,
        actionable_insights=insights,
    )

    logger.info(
        "Lead %s qualified: score=%.1f confidence=%.2f risk=%.2f priority=%s insights=%d",
        lead.id, result.overall_score, result.confidence_level,
        scores.overall_risk_score, result.priority_level.value, len(insights),
    )
    return result


def qualify_lead_sync(
    lead: Lead,
    oracle: AnalysisOracle | None = None,
    config: Settings | None = None,
    weights: Mapping[DimensionName, float] = DIMENSION_WEIGHTS,
) -> QualificationResult:
    """Blocking wrapper around qualify_lead() for non-async callers."""
    return asyncio.run(qualify_lead(lead, oracle=oracle, config=config, weights=weights))


async def qualify_leads(
    leads: Sequence[Lead],
    oracle: AnalysisOracle | None = None,
    config: Settings | None = None,
    weights: Mapping[DimensionName, float] = DIMENSION_WEIGHTS,
) -> list[QualificationResult | LeadQualificationError]:
    """
    Qualify several leads concurrently, at most `config.max_concurrent_runs` at a time.

    Runs are independent: a failed run is returned in place as its
    LeadQualificationError, aligned with the input order.
    """
    config = config or settings
    oracle = oracle or LangChainOracle(config)
    semaphore = asyncio.Semaphore(config.max_concurrent_runs)

    async def _run(lead: Lead) -> QualificationResult:
        async with semaphore:
            return await qualify_lead(lead, oracle=oracle, config=config, weights=weights)

    results = await asyncio.gather(*(_run(lead) for lead in leads), return_exceptions=True)

    outcomes: list[QualificationResult | LeadQualificationError] = []
    for lead, result in zip(leads, results):
        if isinstance(result, LeadQualificationError):
            logger.error("Qualification failed for lead %s: %s", lead.id, result)
        elif isinstance(result, BaseException):
            raise result
        outcomes.append(result)
    return outcomes
