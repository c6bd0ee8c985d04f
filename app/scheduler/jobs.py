"""
app/scheduler/jobs.py

APScheduler-based trigger for periodic campaign ingestion.

Schedule
--------
  campaign_ingestion: every CAMPAIGN_SCHEDULE_INTERVAL_MINUTES (default 360)

The job calls the same process-wide pipeline as the manual HTTP trigger, so a
scheduled tick that lands during a manual run (or its cooldown) is a no-op.

Lifecycle
----------
Call ``build_scheduler()`` once to get a configured ``BackgroundScheduler``.
Start it on app boot; shut it down gracefully on app shutdown.
The scheduler is wired into FastAPI via the ``lifespan`` context in main.py.
"""

from __future__ import annotations

import logging

from apscheduler.schedulers.background import BackgroundScheduler

from app.scraping.config import CampaignIngestionSettings, get_campaign_ingestion_settings
from app.services.campaign_ingestion_service import get_campaign_ingestion_service
from llm_extraction.adapter import ConfigurationMissing

logger = logging.getLogger(__name__)


def run_campaign_ingestion() -> None:
    """
    Run one ingestion pass for every configured brand.
    """
    logger.info("Scheduler: campaign_ingestion starting")
    try:
        summary = get_campaign_ingestion_service().ingest()
    except ConfigurationMissing as exc:
        logger.error("Scheduler: campaign_ingestion aborted: %s", exc)
        return

    if summary.skipped:
        logger.info("Scheduler: campaign_ingestion skipped (%s)", summary.status)
        return

    failed = [o.brand for o in summary.outcomes if o.error is not None]
    logger.info(
        "Scheduler: campaign_ingestion complete brands=%d failed=%s",
        len(summary.outcomes),
        failed,
    )


def build_scheduler(settings: CampaignIngestionSettings | None = None) -> BackgroundScheduler:
    """
    Build and register periodic jobs.

    Returns a configured but *not yet started* ``BackgroundScheduler``. No job
    is registered when CAMPAIGN_SCHEDULE_ENABLED is false.
    """
    resolved = settings or get_campaign_ingestion_settings()
    scheduler = BackgroundScheduler(timezone="UTC")

    if resolved.schedule_enabled:
        scheduler.add_job(
            run_campaign_ingestion,
            trigger="interval",
            minutes=resolved.schedule_interval_minutes,
            id="campaign_ingestion",
            name="Competitor campaign ingestion",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
            misfire_grace_time=3600,
        )
    return scheduler
