"""
tests/test_extraction_validator.py

Pytest unit tests for the extraction layer: output validation, the
extraction service and the adapter factory.

All tests are offline; the adapter is either the mock or a scripted fake.
"""

from __future__ import annotations

import json

import pytest

from llm_extraction import (
    BaseLLMAdapter,
    ConfigurationMissing,
    ExtractedCampaign,
    ExtractionMalformed,
    ExtractionService,
    MockLLMAdapter,
    build_llm_adapter,
    validate_extraction_output,
)

SPRING_SALE = {
    "name": "Spring Sale",
    "info": "Save 20%",
    "category": "seasonal",
    "isBanner": True,
}


class ScriptedAdapter(BaseLLMAdapter):
    def __init__(self, response: str) -> None:
        self.response = response
        self.prompts: list[str] = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.response


# ---------------------------------------------------------------------------
# validate_extraction_output: accepted shapes
# ---------------------------------------------------------------------------


class TestAcceptedOutput:
    def test_bare_array(self) -> None:
        campaigns = validate_extraction_output(json.dumps([SPRING_SALE]))

        assert campaigns == [
            ExtractedCampaign(name="Spring Sale", info="Save 20%", category="seasonal", is_banner=True)
        ]

    def test_empty_array_is_valid(self) -> None:
        assert validate_extraction_output("[]") == []

    def test_markdown_fences_are_stripped(self) -> None:
        raw = "```json\n" + json.dumps([SPRING_SALE]) + "\n```"

        assert validate_extraction_output(raw)[0].name == "Spring Sale"

    def test_single_array_object_is_unwrapped(self) -> None:
        raw = json.dumps({"campaigns": [SPRING_SALE]})

        assert len(validate_extraction_output(raw)) == 1

    def test_model_supplied_url_is_ignored(self) -> None:
        item = dict(SPRING_SALE, url="https://attacker.example/phish")
        campaign = validate_extraction_output(json.dumps([item]))[0]

        assert not hasattr(campaign, "url")

    def test_text_fields_are_trimmed(self) -> None:
        item = dict(SPRING_SALE, name="  Spring Sale  ")

        assert validate_extraction_output(json.dumps([item]))[0].name == "Spring Sale"

    def test_order_is_preserved(self) -> None:
        items = [dict(SPRING_SALE, name=f"Offer {i}") for i in range(5)]
        names = [c.name for c in validate_extraction_output(json.dumps(items))]

        assert names == [f"Offer {i}" for i in range(5)]


# ---------------------------------------------------------------------------
# validate_extraction_output: rejected shapes
# ---------------------------------------------------------------------------


class TestRejectedOutput:
    @pytest.mark.parametrize("raw", ["", "   \n"])
    def test_empty_response(self, raw: str) -> None:
        with pytest.raises(ExtractionMalformed) as exc_info:
            validate_extraction_output(raw)
        assert exc_info.value.stage == "empty"

    def test_invalid_json(self) -> None:
        with pytest.raises(ExtractionMalformed) as exc_info:
            validate_extraction_output("[{'name': 'single quotes'}]")
        assert exc_info.value.stage == "json_parse"

    @pytest.mark.parametrize(
        "payload",
        [
            SPRING_SALE,
            {"a": [SPRING_SALE], "b": []},
            "just a string",
            42,
        ],
    )
    def test_non_array_top_level(self, payload) -> None:
        with pytest.raises(ExtractionMalformed) as exc_info:
            validate_extraction_output(json.dumps(payload))
        assert exc_info.value.stage == "schema"

    @pytest.mark.parametrize("missing", ["name", "info", "category", "isBanner"])
    def test_missing_required_field(self, missing: str) -> None:
        item = {k: v for k, v in SPRING_SALE.items() if k != missing}
        with pytest.raises(ExtractionMalformed) as exc_info:
            validate_extraction_output(json.dumps([item]))
        assert exc_info.value.stage == "schema"

    @pytest.mark.parametrize("value", ["true", "yes", 1, None])
    def test_banner_flag_must_be_boolean(self, value) -> None:
        item = dict(SPRING_SALE, isBanner=value)
        with pytest.raises(ExtractionMalformed):
            validate_extraction_output(json.dumps([item]))

    def test_blank_name_is_rejected(self) -> None:
        item = dict(SPRING_SALE, name="   ")
        with pytest.raises(ExtractionMalformed):
            validate_extraction_output(json.dumps([item]))

    def test_one_bad_item_rejects_whole_response(self) -> None:
        raw = json.dumps([SPRING_SALE, "not an object", dict(SPRING_SALE, info=None)])
        with pytest.raises(ExtractionMalformed) as exc_info:
            validate_extraction_output(raw)

        errors = exc_info.value.errors
        assert any(e.startswith("1:") for e in errors)
        assert any(e.startswith("2.info") for e in errors)
        assert exc_info.value.raw_response == raw


# ---------------------------------------------------------------------------
# ExtractionService
# ---------------------------------------------------------------------------


class TestExtractionService:
    def test_sends_instruction_verbatim(self) -> None:
        adapter = ScriptedAdapter(json.dumps([SPRING_SALE]))
        campaigns = ExtractionService(adapter).extract("INSTRUCTION")

        assert adapter.prompts == ["INSTRUCTION"]
        assert campaigns[0].category == "seasonal"

    def test_malformed_output_propagates(self) -> None:
        with pytest.raises(ExtractionMalformed):
            ExtractionService(ScriptedAdapter("Sorry, I cannot help.")).extract("x")

    def test_mock_adapter_output_is_valid(self) -> None:
        campaigns = ExtractionService(MockLLMAdapter()).extract("anything")

        assert len(campaigns) == 1
        assert campaigns[0].is_banner is True


# ---------------------------------------------------------------------------
# build_llm_adapter
# ---------------------------------------------------------------------------


_KEY_VARS = ("GEMINI_API_KEY", "API_KEY", "LLM_API_KEY", "OPENAI_API_KEY")


@pytest.fixture()
def no_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _KEY_VARS:
        monkeypatch.delenv(name, raising=False)


class TestAdapterFactory:
    def test_mock_needs_no_credential(self, no_credentials: None) -> None:
        assert isinstance(build_llm_adapter("mock", model="unused"), MockLLMAdapter)

    @pytest.mark.parametrize("adapter", ["gemini", "openai", " Gemini "])
    def test_missing_credential(self, no_credentials: None, adapter: str) -> None:
        with pytest.raises(ConfigurationMissing):
            build_llm_adapter(adapter, model="some-model")

    def test_blank_credential_counts_as_missing(
        self, no_credentials: None, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("GEMINI_API_KEY", "   ")
        with pytest.raises(ConfigurationMissing):
            build_llm_adapter("gemini", model="gemini-2.5-flash")

    def test_unknown_adapter(self, no_credentials: None) -> None:
        with pytest.raises(ValueError):
            build_llm_adapter("claude-local", model="x")


# ---------------------------------------------------------------------------
# GeminiLLMAdapter
# ---------------------------------------------------------------------------


class TestGeminiAdapter:
    def test_requests_json_output_at_low_temperature(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls: list[dict] = []

        class FakeModels:
            def generate_content(self, **kwargs):
                calls.append(kwargs)

                class _Response:
                    text = json.dumps([SPRING_SALE])

                return _Response()

        class FakeClient:
            def __init__(self, api_key: str) -> None:
                self.api_key = api_key
                self.models = FakeModels()

        monkeypatch.setattr("google.genai.Client", FakeClient)
        from llm_extraction import GeminiLLMAdapter

        adapter = GeminiLLMAdapter(api_key="test-key", model="gemini-2.5-flash")
        campaigns = ExtractionService(adapter).extract("INSTRUCTION")

        assert campaigns[0].name == "Spring Sale"
        (call,) = calls
        assert call["model"] == "gemini-2.5-flash"
        assert call["contents"] == "INSTRUCTION"
        assert call["config"].temperature == pytest.approx(0.1)
        assert call["config"].response_mime_type == "application/json"

    def test_empty_key_is_configuration_missing(self) -> None:
        from llm_extraction import GeminiLLMAdapter

        with pytest.raises(ConfigurationMissing):
            GeminiLLMAdapter(api_key="")
