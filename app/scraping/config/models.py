"""
Campaign ingestion configuration models.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

InstructionTemplate = Callable[[str, str], str]


@dataclass(frozen=True)
class BrandConfig:
    """
    One monitored brand: display name, source page and extraction instruction.
    """

    key: str
    name: str
    source_url: str
    instruction: InstructionTemplate

    def build_instruction(self, page_text: str) -> str:
        return self.instruction(page_text, self.source_url)


@dataclass(frozen=True)
class CampaignIngestionSettings:
    """
    Runtime settings for campaign acquisition and extraction.
    """

    timeout_seconds: float
    user_agent: str
    min_body_length: int
    max_stream_chars: int
    campaign_cap: int
    log_cap: int
    cooldown_seconds: int
    llm_adapter: str
    llm_model: str
    llm_temperature: float
    llm_max_tokens: int
    state_backend: str
    state_path: str
    schedule_enabled: bool
    schedule_interval_minutes: int
    brand_keys: tuple[str, ...] = ()
