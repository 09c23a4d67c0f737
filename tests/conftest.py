"""
tests/conftest.py — Shared pytest configuration and fixtures.

Sets dummy environment variables BEFORE any package module is imported,
so that pydantic-settings doesn't fail on missing required fields, and
provides a deterministic stub oracle so no test ever calls a real LLM.
"""

import asyncio
import copy
import os

import pytest

# ── Set dummy env vars before any package module is imported ─────────────────
os.environ.setdefault("OPENROUTER_API_KEY", "test-key")
os.environ.setdefault("OPENROUTER_MODEL", "test-model")

from lead_qualification.exceptions import OracleUnavailable  # noqa: E402
from lead_qualification.models import Lead  # noqa: E402


class StubOracle:
    """
    AnalysisOracle with canned answers.

    Each answer is a dict (returned as a deep copy), an Exception instance
    (raised), or absent (raises OracleUnavailable). `delays` maps an item
    name to seconds slept before answering.
    """

    def __init__(self, dimensions=None, metrics=None, risks=None, strategy=None, delays=None):
        self.dimensions = dimensions or {}
        self.metrics = metrics
        self.risks = risks
        self.strategy = strategy
        self.delays = delays or {}
        self.calls: list[str] = []
        self.benchmarks: list = []

    async def _answer(self, item, answer):
        self.calls.append(item)
        delay = self.delays.get(item)
        if delay:
            await asyncio.sleep(delay)
        if answer is None:
            raise OracleUnavailable(item, "no stubbed answer")
        if isinstance(answer, Exception):
            raise answer
        return copy.deepcopy(answer)

    async def analyze_dimension(self, dimension, lead):
        return await self._answer(dimension.value, self.dimensions.get(dimension.value))

    async def predict_metrics(self, lead, dimensions, benchmark):
        self.benchmarks.append(benchmark)
        return await self._answer("predictive_metrics", self.metrics)

    async def assess_risks(self, lead, dimensions):
        return await self._answer("risk_assessment", self.risks)

    async def optimize_strategy(self, lead, dimensions, metrics):
        return await self._answer("engagement_strategy", self.strategy)


@pytest.fixture
def stub_oracle_cls():
    return StubOracle


@pytest.fixture
def failing_oracle():
    """Oracle whose every request fails."""
    return StubOracle()


@pytest.fixture
def lead():
    return Lead(
        id="lead-001",
        name="Bella Cucina",
        industry="Restaurant",
        employee_count=25,
        location="Austin, TX",
        website="https://bellacucina.example",
        review_count=38,
        average_rating=3.9,
    )
