"""Validation layer for raw LLM extraction output.

Parses and validates JSON strings into a list of ExtractedCampaign.
"""

import json
import re
from typing import Any, List

from pydantic import ValidationError

from llm_extraction.schema import ExtractedCampaign


class ExtractionMalformed(Exception):
    """Raised when LLM output fails parsing or schema validation.

    Attributes:
        stage: Which validation step failed ("empty", "json_parse" or "schema").
        errors: List of human-readable error descriptions.
        raw_response: The original string that failed validation.
    """

    def __init__(
        self,
        stage: str,
        errors: List[str],
        raw_response: str,
    ) -> None:
        self.stage = stage
        self.errors = errors
        self.raw_response = raw_response
        message = (
            f"Extraction output malformed at stage '{stage}': "
            + "; ".join(errors)
        )
        super().__init__(message)


def _strip_markdown_fences(text: str) -> str:
    """Remove optional markdown code fences wrapping JSON.

    Models sometimes wrap output in ```json ... ``` despite instructions.
    """
    stripped = text.strip()
    match = re.match(
        r"^```(?:json)?\s*\n?(.*?)\n?\s*```$",
        stripped,
        re.DOTALL,
    )
    if match:
        return match.group(1).strip()
    return stripped


def _unwrap_items(data: Any) -> Any:
    """Return the candidate array from a bare array or a single-array object."""
    if isinstance(data, dict):
        lists = [value for value in data.values() if isinstance(value, list)]
        if len(data) == 1 and len(lists) == 1:
            return lists[0]
    return data


def validate_extraction_output(raw_response: str) -> List[ExtractedCampaign]:
    """Parse and validate a raw extraction response string.

    Steps:
        1. Reject empty output.
        2. Strip optional markdown fences and parse as JSON.
        3. Require a JSON array (or an object wrapping exactly one array).
        4. Validate every item against ExtractedCampaign.

    Args:
        raw_response: The raw string returned by the LLM adapter.

    Returns:
        Validated campaigns in model order.

    Raises:
        ExtractionMalformed: If any step fails. One bad item rejects the
            whole response.
    """
    if not raw_response or not raw_response.strip():
        raise ExtractionMalformed(
            stage="empty",
            errors=["model returned an empty response"],
            raw_response=raw_response or "",
        )

    cleaned = _strip_markdown_fences(raw_response)

    try:
        data = json.loads(cleaned)
    except (json.JSONDecodeError, TypeError) as exc:
        raise ExtractionMalformed(
            stage="json_parse",
            errors=[str(exc)],
            raw_response=raw_response,
        ) from exc

    items = _unwrap_items(data)
    if not isinstance(items, list):
        raise ExtractionMalformed(
            stage="schema",
            errors=["top-level JSON must be an array"],
            raw_response=raw_response,
        )

    campaigns: List[ExtractedCampaign] = []
    errors: List[str] = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            errors.append(f"{index}: item must be an object")
            continue
        try:
            campaigns.append(ExtractedCampaign.model_validate(item))
        except ValidationError as exc:
            errors.extend(
                f"{index}.{'.'.join(str(loc) for loc in e['loc'])}: {e['msg']}"
                for e in exc.errors()
            )

    if errors:
        raise ExtractionMalformed(
            stage="schema",
            errors=errors,
            raw_response=raw_response,
        )
    return campaigns
