"""
tests/test_startup_validation.py

Pytest tests for the API process's environment validation.

A missing LLM key must not stop the process from starting; the ingest
endpoint reports it per run instead.
"""

from __future__ import annotations

import pytest

_KEY_VARS = ("GEMINI_API_KEY", "API_KEY", "LLM_API_KEY", "OPENAI_API_KEY")


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in _KEY_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("CAMPAIGN_STATE_BACKEND", "file")
    monkeypatch.setenv("LLM_ADAPTER", "mock")
    return monkeypatch


class TestValidateEnv:
    @pytest.mark.parametrize("adapter", ["gemini", "openai", "mock"])
    def test_missing_api_key_does_not_block_startup(
        self, clean_env: pytest.MonkeyPatch, adapter: str
    ) -> None:
        from app.main import _validate_env

        clean_env.setenv("LLM_ADAPTER", adapter)

        _validate_env()

    def test_unknown_adapter_is_rejected(self, clean_env: pytest.MonkeyPatch) -> None:
        from app.main import _validate_env

        clean_env.setenv("LLM_ADAPTER", "claude")

        with pytest.raises(RuntimeError, match="LLM_ADAPTER='claude' is not valid"):
            _validate_env()

    def test_database_backend_requires_url(self, clean_env: pytest.MonkeyPatch) -> None:
        from app.main import _validate_env

        for name in ("DATABASE_URL", "CLOUD_DATABASE_URL", "LOCAL_DATABASE_URL"):
            clean_env.delenv(name, raising=False)
        clean_env.setenv("CAMPAIGN_STATE_BACKEND", "database")

        with pytest.raises(RuntimeError, match="no database URL"):
            _validate_env()
