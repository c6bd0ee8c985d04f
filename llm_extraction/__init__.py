"""Model-backed structured extraction of campaign records."""

from llm_extraction.adapter import (
    BaseLLMAdapter,
    ConfigurationMissing,
    GeminiLLMAdapter,
    MockLLMAdapter,
    OpenAILLMAdapter,
)
from llm_extraction.schema import ExtractedCampaign
from llm_extraction.service import ExtractionService, build_llm_adapter
from llm_extraction.validator import ExtractionMalformed, validate_extraction_output

__all__ = [
    "BaseLLMAdapter",
    "ConfigurationMissing",
    "ExtractedCampaign",
    "ExtractionMalformed",
    "ExtractionService",
    "GeminiLLMAdapter",
    "MockLLMAdapter",
    "OpenAILLMAdapter",
    "build_llm_adapter",
    "validate_extraction_output",
]
