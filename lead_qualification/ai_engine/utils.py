"""
lead_qualification/ai_engine/utils.py — Shared AI helper utilities.

Provides:
  - build_openrouter_llm()  : factory for the LangChain-compatible OpenRouter LLM
  - parse_json_safely()     : robust JSON extraction from messy LLM text
  - truncate_for_context()  : safely trim long strings to fit LLM context window
  - to_context_json()       : deterministic JSON rendering of prompt context
  - coerce_number()/clamp() : turn loosely-typed oracle values into bounded floats
"""

import json
import logging
import math
import re
from typing import Any

from langchain_openai import ChatOpenAI

from lead_qualification.config import Settings, settings

logger = logging.getLogger(__name__)

# OpenRouter's base URL (drop-in OpenAI-compatible API)
OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"


def build_openrouter_llm(temperature: float = 0.3, config: Settings | None = None) -> ChatOpenAI:
    """
    Build a LangChain ChatOpenAI client pointed at OpenRouter.

    Args:
        temperature: 0.0 = deterministic, 1.0 = creative.
                     Scoring requests use 0.2–0.3, strategy uses 0.4.
        config:      Settings providing model, key and retries; defaults to the singleton.

    Returns:
        A LangChain-compatible LLM instance.
    """
    config = config or settings
    return ChatOpenAI(
        model=config.openrouter_model,
        api_key=config.openrouter_api_key,
        base_url=OPENROUTER_BASE_URL,
        temperature=temperature,
        max_retries=config.oracle_max_retries,
        default_headers={
            "X-Title": "Lead Qualification Engine",
        },
    )


def parse_json_safely(text: str) -> dict[str, Any] | list[Any] | None:
    """
    Robustly extract and parse a JSON object or array from LLM output.

    Handles cases where the LLM wraps JSON in markdown code fences like:
        ```json
        { ... }
        ```

    Returns the parsed Python object, or None if parsing fails.
    """
    if not text:
        return None

    # Strip markdown code fences (```json ... ``` or ``` ... ```)
    cleaned = re.sub(r"```(?:json)?\s*([\s\S]*?)```", r"\1", text.strip())
    cleaned = cleaned.strip()

    try:
        return json.loads(cleaned)
    except json.JSONDecodeError:
        pass

    # Fall back to the first JSON object {...} or array [...]
    for pattern in (r"\{[\s\S]*\}", r"\[[\s\S]*\]"):
        match = re.search(pattern, cleaned)
        if match:
            try:
                return json.loads(match.group())
            except json.JSONDecodeError:
                continue

    logger.warning("Could not parse JSON from LLM output: %s", text[:200])
    return None


def truncate_for_context(text: str, max_chars: int = 2000) -> str:
    """
    Trim a string to max_chars to avoid exceeding LLM context window.
    Appends '...' if truncated.
    """
    if not text or len(text) <= max_chars:
        return text or ""
    return text[:max_chars] + "..."


def to_context_json(value: Any, max_chars: int | None = None) -> str:
    """Serialize prompt context with sorted keys, truncated to max_chars."""
    text = json.dumps(value, sort_keys=True, default=str)
    return truncate_for_context(text, max_chars=max_chars or settings.max_context_chars)


def coerce_number(value: Any) -> float | None:
    """
    Convert an oracle-supplied value to a finite float.

    Accepts ints, floats and numeric strings ("0.7", " 85 "). Booleans,
    NaN, infinities and anything unparseable return None (treated as missing).
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def clamp(value: float, lower: float, upper: float) -> float:
    """Bound value to [lower, upper]."""
    return max(lower, min(upper, value))
