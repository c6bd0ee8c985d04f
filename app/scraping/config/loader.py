"""
Environment config loader for campaign ingestion.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from db.config import load_env_files

from app.scraping.config.models import CampaignIngestionSettings

_ALLOWED_LLM_ADAPTERS = {"gemini", "openai", "mock"}
_ALLOWED_STATE_BACKENDS = {"file", "database"}


def _get_bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    stripped = raw.strip()
    return stripped if stripped else default


def _get_choice_env(name: str, default: str, allowed: set[str]) -> str:
    value = _get_str_env(name, default).lower()
    if value not in allowed:
        raise ValueError(
            f"{name}='{value}' is not valid. Allowed values: {sorted(allowed)}."
        )
    return value


def _project_root() -> Path:
    return Path(__file__).resolve().parents[3]


def _resolve_path(raw_path: str) -> Path:
    candidate = Path(raw_path)
    if candidate.is_absolute():
        return candidate
    return (_project_root() / candidate).resolve()


def _parse_brand_keys(raw: str) -> tuple[str, ...]:
    return tuple(item.strip().lower() for item in raw.split(",") if item.strip())


@lru_cache(maxsize=1)
def get_campaign_ingestion_settings() -> CampaignIngestionSettings:
    """
    Return cached campaign ingestion settings from environment variables.
    """

    load_env_files()
    return CampaignIngestionSettings(
        timeout_seconds=max(1.0, _get_float_env("CAMPAIGN_FETCH_TIMEOUT_SECONDS", 15.0)),
        user_agent=_get_str_env(
            "CAMPAIGN_FETCH_USER_AGENT",
            "Mozilla/5.0 (compatible; CampaignIntelBot/1.0)",
        ),
        min_body_length=max(0, _get_int_env("CAMPAIGN_MIN_BODY_LENGTH", 200)),
        max_stream_chars=max(1, _get_int_env("CAMPAIGN_MAX_STREAM_CHARS", 48000)),
        campaign_cap=max(1, _get_int_env("CAMPAIGN_COLLECTION_CAP", 500)),
        log_cap=max(1, _get_int_env("CAMPAIGN_LOG_CAP", 100)),
        cooldown_seconds=max(0, _get_int_env("CAMPAIGN_COOLDOWN_SECONDS", 60)),
        llm_adapter=_get_choice_env("LLM_ADAPTER", "gemini", _ALLOWED_LLM_ADAPTERS),
        llm_model=_get_str_env("LLM_MODEL", "gemini-2.5-flash"),
        llm_temperature=min(2.0, max(0.0, _get_float_env("LLM_TEMPERATURE", 0.1))),
        llm_max_tokens=max(256, _get_int_env("LLM_MAX_TOKENS", 8192)),
        state_backend=_get_choice_env("CAMPAIGN_STATE_BACKEND", "file", _ALLOWED_STATE_BACKENDS),
        state_path=str(_resolve_path(_get_str_env("CAMPAIGN_STATE_PATH", "data/campaign_state.json"))),
        schedule_enabled=_get_bool_env("CAMPAIGN_SCHEDULE_ENABLED", False),
        schedule_interval_minutes=max(5, _get_int_env("CAMPAIGN_SCHEDULE_INTERVAL_MINUTES", 360)),
        brand_keys=_parse_brand_keys(_get_str_env("CAMPAIGN_BRANDS", "")),
    )
