from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI


def _validate_env() -> None:
    """
    Validate required environment variables at startup.

    Runs before any service or database connection is initialised.
    Raises RuntimeError listing every missing or invalid variable so the
    operator can fix all problems in one restart cycle.

    Rules:
    - LLM_ADAPTER must name a known adapter. Its API key is not checked
      here; a missing key fails each ingestion run with 503 instead.
    - A database URL is required only when CAMPAIGN_STATE_BACKEND=database.
    """

    from db.config import load_env_files

    load_env_files()

    errors: list[str] = []

    # --- LLM adapter ----------------------------------------------------
    adapter = os.getenv("LLM_ADAPTER", "gemini").strip().lower()
    if adapter not in ("gemini", "mock", "openai"):
        errors.append(
            f"LLM_ADAPTER='{adapter}' is not valid. Allowed values: ['gemini', 'mock', 'openai']."
        )

    # --- State backend --------------------------------------------------
    backend = os.getenv("CAMPAIGN_STATE_BACKEND", "file").strip().lower()
    if backend == "database":
        database_url = os.getenv("DATABASE_URL", "").strip()
        cloud_database_url = os.getenv("CLOUD_DATABASE_URL", "").strip()
        local_database_url = os.getenv("LOCAL_DATABASE_URL", "").strip()
        if not (database_url or cloud_database_url or local_database_url):
            errors.append(
                "CAMPAIGN_STATE_BACKEND=database but no database URL is configured. "
                "Set DATABASE_URL, CLOUD_DATABASE_URL or LOCAL_DATABASE_URL."
            )
    elif backend != "file":
        errors.append(
            f"CAMPAIGN_STATE_BACKEND='{backend}' is not valid. Allowed values: ['database', 'file']."
        )

    if errors:
        raise RuntimeError(
            "Startup validation failed: missing or invalid environment variables:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _check_schema() -> None:
    """
    Ensure the state table exists when the database backend is selected.

    Does NOT auto-migrate.
    """
    from sqlalchemy import inspect as sa_inspect

    import db.models  # noqa: F401  registers all ORM models on Base.metadata
    from db.base import Base
    from db.session import get_engine

    try:
        inspector = sa_inspect(get_engine())
        actual: set[str] = set(inspector.get_table_names())
    except Exception as exc:
        raise RuntimeError("Database unavailable.") from exc

    missing = set(Base.metadata.tables.keys()) - actual
    if missing:
        logging.getLogger(__name__).critical(
            "Schema mismatch: table(s) absent from the database: %s. "
            "Run 'alembic upgrade head' and restart.",
            ", ".join(sorted(missing)),
        )
        raise RuntimeError(
            f"Schema mismatch: {len(missing)} table(s) missing from the database "
            f"({', '.join(sorted(missing))}). Run migrations and restart."
        )


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Validate storage, load state and start the scheduler on boot; shut it down on exit."""
    from app.scraping.config import get_campaign_ingestion_settings
    from app.services.campaign_ingestion_service import get_campaign_ingestion_service

    log = logging.getLogger(__name__)
    settings = get_campaign_ingestion_settings()
    if settings.state_backend == "database":
        _check_schema()
        log.info("Database schema validated")

    get_campaign_ingestion_service()

    from app.scheduler.jobs import build_scheduler

    scheduler = build_scheduler(settings)
    scheduler.start()
    log.info("Scheduler started with %d jobs", len(scheduler.get_jobs()))
    try:
        yield
    finally:
        scheduler.shutdown(wait=True)
        log.info("Scheduler shut down")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    _validate_env()
    _configure_logging()

    application = FastAPI(
        title="Campaign Intelligence API",
        version="1.0.0",
        lifespan=_lifespan,
    )

    from app.api.routers import campaign_ingestion_router

    application.include_router(campaign_ingestion_router)

    @application.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return application


app = create_app()
