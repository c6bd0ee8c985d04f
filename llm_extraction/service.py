"""Extraction service: instruction in, validated campaign candidates out."""

import logging
import os
from typing import List, Optional

from llm_extraction.adapter import (
    BaseLLMAdapter,
    ConfigurationMissing,
    GeminiLLMAdapter,
    MockLLMAdapter,
    OpenAILLMAdapter,
)
from llm_extraction.schema import ExtractedCampaign
from llm_extraction.validator import validate_extraction_output

logger = logging.getLogger(__name__)

_GEMINI_KEY_VARS = ("GEMINI_API_KEY", "API_KEY")
_OPENAI_KEY_VARS = ("LLM_API_KEY", "OPENAI_API_KEY")


class ExtractionService:
    """Sends one extraction instruction and validates the model's answer.

    The service is the only place semantic judgment happens; callers
    receive strictly typed campaigns or an ``ExtractionMalformed`` error.
    """

    def __init__(self, adapter: BaseLLMAdapter) -> None:
        self._adapter = adapter

    def extract(self, instruction: str) -> List[ExtractedCampaign]:
        raw = self._adapter.generate(instruction)
        campaigns = validate_extraction_output(raw)
        logger.debug("Extraction returned %d campaign(s)", len(campaigns))
        return campaigns


def _first_env(names: tuple) -> str:
    for name in names:
        value = os.getenv(name, "").strip()
        if value:
            return value
    return ""


def build_llm_adapter(
    adapter: str,
    *,
    model: str,
    temperature: float = 0.1,
    max_tokens: int = 8192,
    base_url: Optional[str] = None,
) -> BaseLLMAdapter:
    """Build the configured adapter, resolving its credential from the env.

    Raises:
        ConfigurationMissing: If the adapter needs a key and none is set.
        ValueError: If ``adapter`` is not a known adapter name.
    """
    name = adapter.strip().lower()
    if name == "mock":
        return MockLLMAdapter()

    if name == "gemini":
        api_key = _first_env(_GEMINI_KEY_VARS)
        if not api_key:
            raise ConfigurationMissing(
                "Extraction credential is not set. Provide GEMINI_API_KEY or API_KEY."
            )
        return GeminiLLMAdapter(
            api_key=api_key,
            model=model,
            temperature=temperature,
            max_output_tokens=max_tokens,
        )

    if name == "openai":
        api_key = _first_env(_OPENAI_KEY_VARS)
        if not api_key:
            raise ConfigurationMissing(
                "Extraction credential is not set. Provide LLM_API_KEY or OPENAI_API_KEY."
            )
        return OpenAILLMAdapter(
            api_key=api_key,
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
            base_url=base_url or os.getenv("LLM_BASE_URL") or None,
        )

    raise ValueError(f"Unknown LLM adapter '{adapter}'. Allowed: gemini, openai, mock.")
