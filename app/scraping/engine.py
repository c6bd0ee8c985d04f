"""
Campaign ingestion pipeline.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence
from datetime import datetime, timezone

from app.domain.campaigns import (
    AuditLogEntry,
    AuditStatus,
    BrandRunOutcome,
    CampaignRecord,
    PipelineRunSummary,
    new_identity,
)
from app.scraping.config.models import BrandConfig
from app.scraping.cooldown import CooldownTimer
from app.scraping.logging_utils import log_event
from app.scraping.normalization import ContentNormalizer
from app.scraping.retrieval import RetrievalRouter
from app.scraping.storage.merge_store import MergeStore
from llm_extraction.schema import ExtractedCampaign
from llm_extraction.service import ExtractionService

logger = logging.getLogger(__name__)

GROUNDED_RELIABILITY_SCORE = 100


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class IngestionPipeline:
    """
    Orchestrates retrieval, normalization, extraction and merge per brand.

    Owns all run-scoped state: the run-in-progress lock, the cooldown and the
    merge store. Brands run strictly in configuration order and one brand's
    failure never stops the rest.
    """

    def __init__(
        self,
        *,
        brands: Sequence[BrandConfig],
        retrieval_router: RetrievalRouter,
        normalizer: ContentNormalizer,
        extraction_service_factory: Callable[[], ExtractionService],
        store: MergeStore,
        cooldown: CooldownTimer | None = None,
        cooldown_seconds: int = 0,
        on_brand_complete: Callable[[MergeStore], None] | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._brands = tuple(brands)
        self._router = retrieval_router
        self._normalizer = normalizer
        self._extraction_service_factory = extraction_service_factory
        self._store = store
        self._cooldown = cooldown or CooldownTimer()
        self._cooldown_seconds = max(0, cooldown_seconds)
        self._on_brand_complete = on_brand_complete
        self._clock = clock
        self._run_lock = threading.Lock()
        self._current_brand: str | None = None

    @property
    def store(self) -> MergeStore:
        return self._store

    @property
    def cooldown(self) -> CooldownTimer:
        return self._cooldown

    @property
    def brands(self) -> tuple[BrandConfig, ...]:
        return self._brands

    @property
    def is_running(self) -> bool:
        return self._run_lock.locked()

    @property
    def current_brand(self) -> str | None:
        return self._current_brand

    def run(self) -> PipelineRunSummary:
        """
        Run every configured brand once.

        Returns a skipped summary when a run is already active or the cooldown
        has not expired. Raises ConfigurationMissing, before any brand is
        attempted, when the extraction service has no credential.
        """

        if not self._run_lock.acquire(blocking=False):
            log_event(logger, logging.INFO, "pipeline_run_skipped", reason="running")
            return PipelineRunSummary(status="skipped_running")

        try:
            if self._cooldown.active:
                log_event(
                    logger,
                    logging.INFO,
                    "pipeline_run_skipped",
                    reason="cooldown",
                    cooldown_remaining=self._cooldown.remaining,
                )
                return PipelineRunSummary(status="skipped_cooldown")

            extraction = self._extraction_service_factory()

            started_at = self._clock().isoformat()
            log_event(
                logger,
                logging.INFO,
                "pipeline_run_started",
                brands=[brand.name for brand in self._brands],
            )

            outcomes: list[BrandRunOutcome] = []
            for brand in self._brands:
                self._current_brand = brand.name
                outcomes.append(self._ingest_brand(brand, extraction))
                self._persist_state(stage=brand.name)

            finished_at = self._clock().isoformat()
            self._store.last_sync = finished_at
            self._persist_state(stage="last_sync")
            # armed while the run lock is still held
            self._cooldown.start(self._cooldown_seconds)
        finally:
            self._current_brand = None
            self._run_lock.release()

        log_event(
            logger,
            logging.INFO,
            "pipeline_run_completed",
            succeeded=sum(1 for o in outcomes if o.status is AuditStatus.SUCCESS),
            failed=sum(1 for o in outcomes if o.status is AuditStatus.FAILED),
            cooldown_seconds=self._cooldown_seconds,
        )
        return PipelineRunSummary(
            status="completed",
            started_at=started_at,
            finished_at=finished_at,
            outcomes=outcomes,
        )

    def _persist_state(self, *, stage: str) -> None:
        if self._on_brand_complete is None:
            return
        try:
            self._on_brand_complete(self._store)
        except Exception as exc:
            log_event(
                logger,
                logging.ERROR,
                "state_persist_failed",
                stage=stage,
                error=f"{type(exc).__name__}: {exc}",
            )

    def _ingest_brand(self, brand: BrandConfig, extraction: ExtractionService) -> BrandRunOutcome:
        try:
            retrieval = self._router.fetch(brand.source_url)
            page_text = self._normalizer.normalize(retrieval.content)
            candidates = extraction.extract(brand.build_instruction(page_text))
            records = self.shape_records(brand, candidates)
            inserted = self._store.insert_deduped(records)
            self._store.append_log(
                AuditLogEntry.success(
                    brand=brand.name,
                    found=len(records),
                    proxy_used=retrieval.path_name,
                    date=self._clock().isoformat(),
                )
            )
        except Exception as exc:
            message = f"{type(exc).__name__}: {exc}"
            self._store.append_log(
                AuditLogEntry.failed(
                    brand=brand.name,
                    error=message,
                    date=self._clock().isoformat(),
                )
            )
            log_event(
                logger,
                logging.ERROR,
                "brand_ingest_failed",
                brand=brand.name,
                source_url=brand.source_url,
                error=message,
            )
            return BrandRunOutcome(
                brand=brand.name,
                status=AuditStatus.FAILED,
                found=0,
                inserted=0,
                error=message,
            )

        log_event(
            logger,
            logging.INFO,
            "brand_ingest_completed",
            brand=brand.name,
            proxy_used=retrieval.path_name,
            stream_chars=len(page_text),
            found=len(records),
            inserted=inserted,
        )
        return BrandRunOutcome(
            brand=brand.name,
            status=AuditStatus.SUCCESS,
            found=len(records),
            inserted=inserted,
            proxy_used=retrieval.path_name,
        )

    def shape_records(
        self,
        brand: BrandConfig,
        candidates: Sequence[ExtractedCampaign],
    ) -> list[CampaignRecord]:
        """
        Stamp extracted candidates as fresh grounded records for `brand`.

        The brand's configured URL is authoritative; any URL the model
        returned was dropped by the extraction schema.
        """

        now = self._clock().isoformat()
        return [
            CampaignRecord(
                id=new_identity(),
                competitor=brand.name,
                name=candidate.name,
                info=candidate.info,
                url=brand.source_url,
                category=candidate.category,
                discovery_date=now,
                last_seen_date=now,
                is_active=True,
                is_banner=candidate.is_banner,
                reliability_score=GROUNDED_RELIABILITY_SCORE,
                is_grounded=True,
            )
            for candidate in candidates
        ]
