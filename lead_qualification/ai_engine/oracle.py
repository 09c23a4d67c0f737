"""
lead_qualification/ai_engine/oracle.py — The analysis oracle seam.

AnalysisOracle is the narrow interface the services depend on; every method
returns the parsed JSON object of one answer or raises OracleError.
LangChainOracle is the production implementation (ChatPromptTemplate | ChatOpenAI).

Tests inject deterministic stubs that satisfy the same protocol.
"""

import json
import logging
from typing import Any, Protocol

from langchain_core.prompts import ChatPromptTemplate

from lead_qualification.ai_engine.prompt_templates import (
    DIMENSION_ANALYSIS_PROMPT,
    ENGAGEMENT_STRATEGY_PROMPT,
    PREDICTIVE_METRICS_PROMPT,
    RISK_ASSESSMENT_PROMPT,
)
from lead_qualification.ai_engine.utils import (
    build_openrouter_llm,
    parse_json_safely,
    to_context_json,
    truncate_for_context,
)
from lead_qualification.config import Settings, settings
from lead_qualification.exceptions import OracleMalformedResponse, OracleUnavailable
from lead_qualification.models import Dimension, DimensionName, Lead, PredictiveMetrics

logger = logging.getLogger(__name__)

# Sampling temperatures per request type
DIMENSION_TEMPERATURE = 0.2
PREDICTION_TEMPERATURE = 0.3
RISK_TEMPERATURE = 0.2
STRATEGY_TEMPERATURE = 0.4

TOP_FACTORS_PER_DIMENSION = 3
MAX_FACTOR_NAME_CHARS = 60


class AnalysisOracle(Protocol):
    async def analyze_dimension(self, dimension: DimensionName, lead: Lead) -> dict[str, Any]:
        ...

    async def predict_metrics(
        self, lead: Lead, dimensions: list[Dimension], benchmark: dict | None
    ) -> dict[str, Any]:
        ...

    async def assess_risks(self, lead: Lead, dimensions: list[Dimension]) -> dict[str, Any]:
        ...

    async def optimize_strategy(
        self, lead: Lead, dimensions: list[Dimension], metrics: PredictiveMetrics
    ) -> dict[str, Any]:
        ...


def summarize_dimensions(dimensions: list[Dimension]) -> list[dict[str, Any]]:
    """
    Compact view of each dimension for follow-up prompts: name, score,
    confidence, weight and the names of its strongest factors.

    Its size is bounded by the number of dimensions, so it is never truncated.
    """
    summary = []
    for d in dimensions:
        strongest = sorted(d.factors, key=lambda f: f.impact * f.reliability, reverse=True)
        summary.append({
            "name": d.name.value,
            "score": round(d.score, 1),
            "confidence": round(d.confidence, 2),
            "weight": d.weight,
            "top_factors": [
                truncate_for_context(f.name, max_chars=MAX_FACTOR_NAME_CHARS)
                for f in strongest[:TOP_FACTORS_PER_DIMENSION]
            ],
        })
    return summary


def _dimensions_context(dimensions: list[Dimension]) -> str:
    return json.dumps(summarize_dimensions(dimensions), sort_keys=True)


class LangChainOracle:
    """AnalysisOracle backed by an OpenRouter chat model through LangChain."""

    def __init__(self, config: Settings | None = None):
        self._config = config or settings

    def _context(self, value: Any) -> str:
        return to_context_json(value, max_chars=self._config.max_context_chars)

    async def _ask(
        self,
        item: str,
        prompt: ChatPromptTemplate,
        temperature: float,
        variables: dict[str, Any],
    ) -> dict[str, Any]:
        llm = build_openrouter_llm(temperature=temperature, config=self._config)
        chain = prompt | llm

        logger.debug("Oracle request: %s", item)
        try:
            response = await chain.ainvoke(variables)
        except Exception as e:
            raise OracleUnavailable(item, f"LLM call failed: {e}") from e
        raw_text = response.content if hasattr(response, "content") else str(response)

        parsed = parse_json_safely(raw_text)
        if not isinstance(parsed, dict):
            raise OracleMalformedResponse(
                item, f"expected a JSON object, got {type(parsed).__name__}: {raw_text[:200]!r}"
            )
        return parsed

    async def analyze_dimension(self, dimension: DimensionName, lead: Lead) -> dict[str, Any]:
        return await self._ask(
            dimension.value,
            DIMENSION_ANALYSIS_PROMPT,
            DIMENSION_TEMPERATURE,
            {
                "dimension": dimension.value,
                "lead_data": self._context(lead.snapshot()),
                "industry": lead.industry or "unknown",
                "employee_count": lead.employee_count if lead.employee_count is not None else "unknown",
                "location": lead.location or "unknown",
            },
        )

    async def predict_metrics(
        self, lead: Lead, dimensions: list[Dimension], benchmark: dict | None
    ) -> dict[str, Any]:
        return await self._ask(
            "predictive_metrics",
            PREDICTIVE_METRICS_PROMPT,
            PREDICTION_TEMPERATURE,
            {
                "lead_data": self._context(lead.snapshot()),
                "dimensions": _dimensions_context(dimensions),
                "industry": lead.industry or "unknown",
                "benchmark": self._context(benchmark) if benchmark else "No benchmark available.",
            },
        )

    async def assess_risks(self, lead: Lead, dimensions: list[Dimension]) -> dict[str, Any]:
        return await self._ask(
            "risk_assessment",
            RISK_ASSESSMENT_PROMPT,
            RISK_TEMPERATURE,
            {
                "lead_data": self._context(lead.snapshot()),
                "dimensions": _dimensions_context(dimensions),
            },
        )

    async def optimize_strategy(
        self, lead: Lead, dimensions: list[Dimension], metrics: PredictiveMetrics
    ) -> dict[str, Any]:
        return await self._ask(
            "engagement_strategy",
            ENGAGEMENT_STRATEGY_PROMPT,
            STRATEGY_TEMPERATURE,
            {
                "lead_data": self._context(lead.snapshot()),
                "dimensions": _dimensions_context(dimensions),
                "metrics": self._context(metrics.model_dump(mode="json")),
            },
        )
