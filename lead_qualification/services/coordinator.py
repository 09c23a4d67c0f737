"""
lead_qualification/services/coordinator.py — Concurrent dimension fan-out.

One oracle request per dimension name, all in flight at once, each under its
own timeout. A failed, timed-out or malformed answer is replaced by the
neutral dimension, so the fan-out always yields one Dimension per name, in
the requested order.
"""

import asyncio
import logging
from collections.abc import Awaitable, Mapping, Sequence
from typing import Any

from lead_qualification.ai_engine.oracle import AnalysisOracle
from lead_qualification.exceptions import OracleError, OracleMalformedResponse
from lead_qualification.models import Dimension, DimensionName, Lead
from lead_qualification.services.dimensions import (
    DIMENSION_ORDER,
    DIMENSION_WEIGHTS,
    neutral_dimension,
    normalize_dimension,
)

logger = logging.getLogger(__name__)


async def call_oracle(
    item: str, request: Awaitable[dict[str, Any]], timeout: float
) -> dict[str, Any] | None:
    """
    Await one oracle request under `timeout`.

    Returns the parsed answer, or None on any oracle failure (timeout,
    transport error, malformed content). Cancellation is not intercepted.
    """
    try:
        return await asyncio.wait_for(request, timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning("Oracle request %s timed out after %.1fs — using defaults.", item, timeout)
    except OracleError as e:
        logger.warning("Oracle request %s failed (%s) — using defaults.", item, e)
    except Exception as e:
        logger.error("Unexpected error from oracle request %s: %r — using defaults.", item, e)
    return None


async def analyze_dimension(
    name: DimensionName,
    lead: Lead,
    oracle: AnalysisOracle,
    timeout: float,
    weights: Mapping[DimensionName, float] = DIMENSION_WEIGHTS,
) -> Dimension:
    raw = await call_oracle(name.value, oracle.analyze_dimension(name, lead), timeout)
    if raw is None:
        return neutral_dimension(name, weights)
    try:
        return normalize_dimension(name, raw, weights)
    except OracleMalformedResponse as e:
        logger.warning("Discarding malformed estimate for %s (%s) — using defaults.", name.value, e)
        return neutral_dimension(name, weights)


async def analyze_dimensions(
    lead: Lead,
    oracle: AnalysisOracle,
    timeout: float,
    weights: Mapping[DimensionName, float] = DIMENSION_WEIGHTS,
    names: Sequence[DimensionName] = DIMENSION_ORDER,
) -> list[Dimension]:
    """
    Estimate every dimension in `names` concurrently.

    Args:
        lead:    The lead being qualified.
        oracle:  Analysis oracle to query.
        timeout: Per-request timeout in seconds.
        weights: Weight table applied to each result.
        names:   Dimensions to request; output order follows this sequence.

    Returns:
        Exactly one Dimension per entry of `names`, in the same order.
    """
    logger.info("Analyzing %d dimensions for lead %s", len(names), lead.id)
    results = await asyncio.gather(
        *(analyze_dimension(name, lead, oracle, timeout, weights) for name in names)
    )
    return list(results)
