"""
app/services/campaign_ingestion_service.py

Service wiring for the competitor campaign ingestion pipeline.
"""

from __future__ import annotations

import logging
from functools import lru_cache

import requests

from app.domain.campaigns import AuditLogEntry, CampaignRecord, PipelineRunSummary
from app.scraping.config import (
    CampaignIngestionSettings,
    get_campaign_ingestion_settings,
    select_brands,
)
from app.scraping.cooldown import CooldownTimer
from app.scraping.engine import IngestionPipeline
from app.scraping.normalization import ContentNormalizer
from app.scraping.retrieval import RetrievalRouter
from app.scraping.storage import (
    AUDIT_LOG_KEY,
    CAMPAIGNS_KEY,
    LAST_SYNC_KEY,
    JSONFileStateStore,
    MergeStore,
    StateStore,
)
from llm_extraction.service import ExtractionService, build_llm_adapter

logger = logging.getLogger(__name__)


def build_state_store(settings: CampaignIngestionSettings) -> StateStore:
    """
    Return the configured state backend.
    """

    if settings.state_backend == "database":
        from app.scraping.storage.sqlalchemy_storage import SQLAlchemyStateStore
        from db.session import SessionLocal

        return SQLAlchemyStateStore(session_factory=SessionLocal)
    return JSONFileStateStore(path=settings.state_path)


class CampaignIngestionService:
    """
    Owns the process-wide pipeline and keeps persisted state in sync with it.
    """

    def __init__(
        self,
        *,
        settings: CampaignIngestionSettings | None = None,
        state_store: StateStore | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self._settings = settings or get_campaign_ingestion_settings()
        self._state_store = state_store or build_state_store(self._settings)

        store = MergeStore.from_state(
            {
                CAMPAIGNS_KEY: self._state_store.get(CAMPAIGNS_KEY, []),
                AUDIT_LOG_KEY: self._state_store.get(AUDIT_LOG_KEY, []),
                LAST_SYNC_KEY: self._state_store.get(LAST_SYNC_KEY),
            },
            campaign_cap=self._settings.campaign_cap,
            log_cap=self._settings.log_cap,
        )
        router = RetrievalRouter(
            session=session or requests.Session(),
            timeout_seconds=self._settings.timeout_seconds,
            min_body_length=self._settings.min_body_length,
            user_agent=self._settings.user_agent,
        )
        self._pipeline = IngestionPipeline(
            brands=select_brands(self._settings.brand_keys),
            retrieval_router=router,
            normalizer=ContentNormalizer(max_chars=self._settings.max_stream_chars),
            extraction_service_factory=self._build_extraction_service,
            store=store,
            cooldown=CooldownTimer(),
            cooldown_seconds=self._settings.cooldown_seconds,
            on_brand_complete=self._persist,
        )
        logger.info(
            "Campaign ingestion ready: %d brand(s), %d stored campaign(s), backend=%s",
            len(self._pipeline.brands),
            len(store.campaigns),
            self._settings.state_backend,
        )

    @property
    def pipeline(self) -> IngestionPipeline:
        return self._pipeline

    def ingest(self) -> PipelineRunSummary:
        return self._pipeline.run()

    def campaigns(self) -> tuple[CampaignRecord, ...]:
        return self._pipeline.store.campaigns

    def logs(self) -> tuple[AuditLogEntry, ...]:
        return self._pipeline.store.logs

    def status(self) -> dict[str, object]:
        return {
            "running": self._pipeline.is_running,
            "current_brand": self._pipeline.current_brand,
            "cooldown_remaining": self._pipeline.cooldown.remaining,
            "last_sync": self._pipeline.store.last_sync,
            "brands": [brand.name for brand in self._pipeline.brands],
        }

    def _build_extraction_service(self) -> ExtractionService:
        adapter = build_llm_adapter(
            self._settings.llm_adapter,
            model=self._settings.llm_model,
            temperature=self._settings.llm_temperature,
            max_tokens=self._settings.llm_max_tokens,
        )
        return ExtractionService(adapter)

    def _persist(self, store: MergeStore) -> None:
        # favorites are owned by the presentation layer and left untouched
        self._state_store.set_many(store.to_state())


@lru_cache(maxsize=1)
def get_campaign_ingestion_service() -> CampaignIngestionService:
    """
    Build and cache the process-wide campaign ingestion service.
    """

    return CampaignIngestionService()
