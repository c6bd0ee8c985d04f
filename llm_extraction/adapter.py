"""LLM adapters for campaign extraction.

Provides a base interface, concrete adapters for the Gemini and
OpenAI-compatible APIs, and a deterministic mock for testing.
"""

import json
from abc import ABC, abstractmethod
from typing import Optional


class ConfigurationMissing(RuntimeError):
    """Raised when the extraction model has no usable credential."""


class BaseLLMAdapter(ABC):
    """Abstract base for all LLM adapters."""

    @abstractmethod
    def generate(self, prompt: str) -> str:
        """Send a prompt to the LLM and return the raw response text.

        Args:
            prompt: The fully formatted extraction instruction.

        Returns:
            Raw string response from the model (expected to be JSON).
        """


class GeminiLLMAdapter(BaseLLMAdapter):
    """Adapter for Google Gemini via the google-genai SDK.

    Requests ``application/json`` output so the model returns a bare
    JSON array instead of prose.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        temperature: float = 0.1,
        max_output_tokens: int = 8192,
    ) -> None:
        if not api_key:
            raise ConfigurationMissing("Gemini API key is not set.")

        from google import genai

        self._client = genai.Client(api_key=api_key)
        self._model = model
        self._temperature = temperature
        self._max_output_tokens = max_output_tokens

    def generate(self, prompt: str) -> str:
        from google.genai import types

        response = self._client.models.generate_content(
            model=self._model,
            contents=prompt,
            config=types.GenerateContentConfig(
                temperature=self._temperature,
                max_output_tokens=self._max_output_tokens,
                response_mime_type="application/json",
            ),
        )
        return response.text or ""


class OpenAILLMAdapter(BaseLLMAdapter):
    """Adapter for OpenAI-compatible chat completion APIs.

    Configured for non-streaming JSON-object output. Object mode cannot
    return a bare array, so the validator unwraps a single-array object.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        temperature: float = 0.1,
        max_tokens: int = 8192,
        base_url: Optional[str] = None,
    ) -> None:
        """Initialise the OpenAI adapter.

        Args:
            api_key: OpenAI API key.
            model: Model identifier.
            temperature: Sampling temperature; keep low for extraction.
            max_tokens: Maximum tokens in the completion.
            base_url: Optional base URL for OpenAI-compatible endpoints.
        """
        if not api_key:
            raise ConfigurationMissing("OpenAI API key is not set.")

        from openai import OpenAI

        client_kwargs: dict = {"api_key": api_key}
        if base_url:
            client_kwargs["base_url"] = base_url

        self._client = OpenAI(**client_kwargs)
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens

    def generate(self, prompt: str) -> str:
        response = self._client.chat.completions.create(
            model=self._model,
            messages=[
                {
                    "role": "system",
                    "content": 'Return a JSON object of the form {"campaigns": [...]}.',
                },
                {"role": "user", "content": prompt},
            ],
            temperature=self._temperature,
            max_tokens=self._max_tokens,
            response_format={"type": "json_object"},
            stream=False,
        )
        return response.choices[0].message.content or ""


# ---------------------------------------------------------------------------
# Fixed mock response used for local testing.
# ---------------------------------------------------------------------------
_MOCK_RESPONSE = [
    {
        "name": "Mock Seasonal Offer",
        "info": "Fixture campaign returned by the mock adapter.",
        "category": "seasonal",
        "isBanner": True,
    },
]

_MOCK_RESPONSE_JSON = json.dumps(_MOCK_RESPONSE, indent=2)


class MockLLMAdapter(BaseLLMAdapter):
    """Deterministic adapter that returns a fixed valid JSON array.

    Used for local runs and CI where no LLM API is available.
    """

    def generate(self, prompt: str) -> str:
        return _MOCK_RESPONSE_JSON
