"""
tests/test_ai_engine.py — Unit tests for the AI engine layer.

Tests helpers and output parsing WITHOUT making real LLM API calls.
LangChainOracle is exercised with mocked chains to keep tests fast and free.
"""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from lead_qualification.ai_engine.oracle import LangChainOracle, summarize_dimensions
from lead_qualification.ai_engine.utils import (
    clamp,
    coerce_number,
    parse_json_safely,
    to_context_json,
    truncate_for_context,
)
from lead_qualification.config import Settings
from lead_qualification.exceptions import OracleMalformedResponse, OracleUnavailable
from lead_qualification.models import Dimension, DimensionName, Factor
from lead_qualification.services.qualification_service import qualify_lead


# ── parse_json_safely ─────────────────────────────────────────────────────────

class TestParseJsonSafely:
    def test_parses_clean_json_object(self):
        text = '{"score": 85, "confidence": 0.7}'
        assert parse_json_safely(text) == {"score": 85, "confidence": 0.7}

    def test_strips_markdown_code_fence(self):
        text = '```json\n{"key": "value"}\n```'
        assert parse_json_safely(text) == {"key": "value"}

    def test_extracts_json_from_surrounding_text(self):
        text = 'Here is my analysis:\n{"score": 75}\nHope this helps.'
        assert parse_json_safely(text) == {"score": 75}

    def test_returns_none_for_invalid_json(self):
        assert parse_json_safely("This is not JSON at all.") is None

    def test_returns_none_for_empty_string(self):
        assert parse_json_safely("") is None

    def test_returns_none_for_none(self):
        assert parse_json_safely(None) is None


# ── context & number helpers ──────────────────────────────────────────────────

class TestContextHelpers:
    def test_truncate_long_string(self):
        result = truncate_for_context("a" * 3000, max_chars=2000)
        assert len(result) == 2003
        assert result.endswith("...")

    def test_truncate_none_returns_empty(self):
        assert truncate_for_context(None, max_chars=100) == ""

    def test_context_json_sorts_keys(self):
        assert to_context_json({"b": 1, "a": 2}) == '{"a": 2, "b": 1}'

    def test_context_json_truncates(self):
        assert to_context_json({"text": "x" * 100}, max_chars=20).endswith("...")


class TestCoerceNumber:
    @pytest.mark.parametrize("value,expected", [
        (85, 85.0),
        (0.7, 0.7),
        ("0.25", 0.25),
        (" 90 ", 90.0),
        (0, 0.0),
    ])
    def test_accepts_numbers_and_numeric_strings(self, value, expected):
        assert coerce_number(value) == expected

    @pytest.mark.parametrize("value", [
        None, True, False, "high", float("nan"), float("inf"), [1], {"v": 1},
    ])
    def test_rejects_everything_else(self, value):
        assert coerce_number(value) is None

    def test_clamp(self):
        assert clamp(120, 0, 100) == 100
        assert clamp(-3, 0, 100) == 0
        assert clamp(0.4, 0, 1) == 0.4


# ── LangChainOracle (mocked LLM) ──────────────────────────────────────────────

def _mock_chain(content: str = None, error: Exception = None):
    response = MagicMock()
    response.content = content
    chain = MagicMock()
    if error is not None:
        chain.ainvoke = AsyncMock(side_effect=error)
    else:
        chain.ainvoke = AsyncMock(return_value=response)
    return chain


class TestLangChainOracle:
    @pytest.mark.asyncio
    @patch("lead_qualification.ai_engine.oracle.build_openrouter_llm")
    async def test_dimension_answer_is_parsed(self, mock_build_llm, lead):
        answer = {"score": 82, "confidence": 0.8, "factors": []}
        mock_chain = _mock_chain("```json\n" + json.dumps(answer) + "\n```")
        mock_build_llm.return_value = MagicMock()

        with patch("lead_qualification.ai_engine.oracle.DIMENSION_ANALYSIS_PROMPT") as mock_prompt:
            mock_prompt.__or__ = MagicMock(return_value=mock_chain)
            result = await LangChainOracle().analyze_dimension(DimensionName.PAIN_INTENSITY, lead)

        assert result == answer
        assert mock_build_llm.call_args.kwargs["temperature"] == 0.2
        variables = mock_chain.ainvoke.call_args.args[0]
        assert variables["dimension"] == "pain_intensity"
        assert variables["industry"] == "Restaurant"
        assert '"id": "lead-001"' in variables["lead_data"]

    @pytest.mark.asyncio
    @patch("lead_qualification.ai_engine.oracle.build_openrouter_llm")
    async def test_unparseable_answer_raises_malformed(self, mock_build_llm, lead):
        mock_chain = _mock_chain("Sorry, I cannot help with that.")
        mock_build_llm.return_value = MagicMock()

        with patch("lead_qualification.ai_engine.oracle.RISK_ASSESSMENT_PROMPT") as mock_prompt:
            mock_prompt.__or__ = MagicMock(return_value=mock_chain)
            with pytest.raises(OracleMalformedResponse):
                await LangChainOracle().assess_risks(lead, [])

    @pytest.mark.asyncio
    @patch("lead_qualification.ai_engine.oracle.build_openrouter_llm")
    async def test_json_array_answer_raises_malformed(self, mock_build_llm, lead):
        mock_chain = _mock_chain('["not", "an", "object"]')
        mock_build_llm.return_value = MagicMock()

        with patch("lead_qualification.ai_engine.oracle.RISK_ASSESSMENT_PROMPT") as mock_prompt:
            mock_prompt.__or__ = MagicMock(return_value=mock_chain)
            with pytest.raises(OracleMalformedResponse):
                await LangChainOracle().assess_risks(lead, [])

    @pytest.mark.asyncio
    @patch("lead_qualification.ai_engine.oracle.build_openrouter_llm")
    async def test_transport_error_raises_unavailable(self, mock_build_llm, lead):
        mock_chain = _mock_chain(error=ConnectionError("connection reset"))
        mock_build_llm.return_value = MagicMock()

        with patch("lead_qualification.ai_engine.oracle.PREDICTIVE_METRICS_PROMPT") as mock_prompt:
            mock_prompt.__or__ = MagicMock(return_value=mock_chain)
            with pytest.raises(OracleUnavailable) as exc_info:
                await LangChainOracle().predict_metrics(lead, [], None)

        assert exc_info.value.item == "predictive_metrics"

    @pytest.mark.asyncio
    @patch("lead_qualification.ai_engine.oracle.build_openrouter_llm")
    async def test_predict_metrics_sends_benchmark(self, mock_build_llm, lead):
        mock_chain = _mock_chain('{"conversion_probability": 0.6}')
        mock_build_llm.return_value = MagicMock()

        with patch("lead_qualification.ai_engine.oracle.PREDICTIVE_METRICS_PROMPT") as mock_prompt:
            mock_prompt.__or__ = MagicMock(return_value=mock_chain)
            await LangChainOracle().predict_metrics(lead, [], {"avg_lifetime_value": 2400})

        variables = mock_chain.ainvoke.call_args.args[0]
        assert "avg_lifetime_value" in variables["benchmark"]
        assert mock_build_llm.call_args.kwargs["temperature"] == 0.3


# ── caller configuration ──────────────────────────────────────────────────────

@pytest.fixture
def caller_config():
    return Settings(
        openrouter_api_key="caller-key",
        openrouter_model="caller-model",
        oracle_max_retries=0,
        oracle_timeout_seconds=1.0,
    )


class TestOracleConfig:
    @pytest.mark.asyncio
    @patch("lead_qualification.ai_engine.utils.ChatOpenAI")
    async def test_oracle_uses_given_settings(self, mock_chat_openai, lead, caller_config):
        mock_chain = _mock_chain('{"score": 70}')

        with patch("lead_qualification.ai_engine.oracle.DIMENSION_ANALYSIS_PROMPT") as mock_prompt:
            mock_prompt.__or__ = MagicMock(return_value=mock_chain)
            await LangChainOracle(caller_config).analyze_dimension(DimensionName.PAIN_INTENSITY, lead)

        kwargs = mock_chat_openai.call_args.kwargs
        assert kwargs["model"] == "caller-model"
        assert kwargs["api_key"] == "caller-key"
        assert kwargs["max_retries"] == 0

    @pytest.mark.asyncio
    @patch("lead_qualification.ai_engine.utils.ChatOpenAI")
    async def test_qualify_lead_builds_client_from_caller_config(
        self, mock_chat_openai, lead, caller_config
    ):
        mock_chain = _mock_chain(error=RuntimeError("offline"))
        prompts = (
            "DIMENSION_ANALYSIS_PROMPT",
            "PREDICTIVE_METRICS_PROMPT",
            "RISK_ASSESSMENT_PROMPT",
            "ENGAGEMENT_STRATEGY_PROMPT",
        )
        patchers = [patch(f"lead_qualification.ai_engine.oracle.{name}") for name in prompts]
        for mock_prompt in (p.start() for p in patchers):
            mock_prompt.__or__ = MagicMock(return_value=mock_chain)
        try:
            result = await qualify_lead(lead, config=caller_config)
        finally:
            for p in patchers:
                p.stop()

        assert result.overall_score == pytest.approx(58.3)
        assert mock_chat_openai.call_count == 13
        for call in mock_chat_openai.call_args_list:
            assert call.kwargs["model"] == "caller-model"
            assert call.kwargs["api_key"] == "caller-key"
            assert call.kwargs["max_retries"] == 0


# ── dimension context for follow-up prompts ───────────────────────────────────

def _factor_heavy_dimensions():
    dims = []
    for name in DimensionName:
        factors = [
            Factor(
                name=f"{name.value}_factor_{i}",
                impact=10 * i,
                evidence=["long evidence " * 40] * 5,
                source="public_review_platforms",
                reliability=0.9 if i % 2 else 0.4,
            )
            for i in range(8)
        ]
        dims.append(Dimension(name=name, score=61.234, confidence=0.6789, factors=factors, weight=0.05))
    return dims


class TestDimensionSummary:
    def test_keeps_strongest_three_factor_names(self):
        summary = summarize_dimensions(_factor_heavy_dimensions())

        assert len(summary) == 10
        first = summary[0]
        assert first["name"] == "pain_intensity"
        assert (first["score"], first["confidence"], first["weight"]) == (61.2, 0.68, 0.05)
        # impact × reliability: 7 → 63, 5 → 45, 3 → 27
        assert first["top_factors"] == [
            "pain_intensity_factor_7",
            "pain_intensity_factor_5",
            "pain_intensity_factor_3",
        ]

    @pytest.mark.asyncio
    @patch("lead_qualification.ai_engine.oracle.build_openrouter_llm")
    async def test_factor_heavy_context_stays_valid_json(self, mock_build_llm, lead):
        mock_chain = _mock_chain('{"conversion_probability": 0.6}')
        mock_build_llm.return_value = MagicMock()
        config = Settings(openrouter_api_key="test-key", max_context_chars=4000)

        with patch("lead_qualification.ai_engine.oracle.PREDICTIVE_METRICS_PROMPT") as mock_prompt:
            mock_prompt.__or__ = MagicMock(return_value=mock_chain)
            await LangChainOracle(config).predict_metrics(lead, _factor_heavy_dimensions(), None)

        context = mock_chain.ainvoke.call_args.args[0]["dimensions"]
        parsed = json.loads(context)
        assert [d["name"] for d in parsed] == [d.value for d in DimensionName]
        assert parsed[-1]["name"] == "market_positioning"
        assert all(len(d["top_factors"]) == 3 for d in parsed)
        assert "long evidence" not in context
