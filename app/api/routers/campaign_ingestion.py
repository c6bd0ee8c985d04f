"""
app/api/routers/campaign_ingestion.py

Competitor campaign ingestion endpoints.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.domain.campaigns import resolve_category
from app.schemas.campaign_ingestion import (
    AuditLogEntryResponse,
    CampaignResponse,
    CampaignStatsResponse,
    PipelineRunResponse,
    PipelineStatusResponse,
)
from app.services.campaign_ingestion_service import (
    CampaignIngestionService,
    get_campaign_ingestion_service,
)
from llm_extraction.adapter import ConfigurationMissing

router = APIRouter(prefix="/campaigns", tags=["campaign-ingestion"])

NEW_CAMPAIGN_WINDOW = timedelta(days=7)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@router.post("/ingest", response_model=PipelineRunResponse)
def ingest_campaigns(
    service: CampaignIngestionService = Depends(get_campaign_ingestion_service),
) -> PipelineRunResponse:
    """
    Run the acquisition pipeline once for every configured brand.
    """

    try:
        summary = service.ingest()
    except ConfigurationMissing as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(exc),
        ) from exc

    if summary.skipped:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Ingestion not started: {summary.status}.",
        )
    return PipelineRunResponse.from_summary(summary)


@router.get("", response_model=list[CampaignResponse], response_model_by_alias=True)
def list_campaigns(
    competitor: str | None = Query(default=None, description="Optional brand name filter"),
    category: str | None = Query(default=None, description="Optional category key filter"),
    active: bool | None = Query(default=None, description="Optional active-state filter"),
    q: str | None = Query(default=None, description="Case-insensitive search over name and info"),
    discovered_within_hours: int | None = Query(
        default=None,
        ge=1,
        description="Only campaigns first discovered within this many hours",
    ),
    service: CampaignIngestionService = Depends(get_campaign_ingestion_service),
) -> list[CampaignResponse]:
    records = service.campaigns()
    if q and q.strip():
        records = tuple(r for r in records if r.matches_text(q))
    if discovered_within_hours is not None:
        cutoff = _utc_now() - timedelta(hours=discovered_within_hours)
        records = tuple(r for r in records if r.discovered_since(cutoff))
    if competitor:
        wanted = competitor.strip().lower()
        records = tuple(r for r in records if r.competitor.lower() == wanted)
    if category:
        wanted_category = resolve_category(category)
        records = tuple(r for r in records if resolve_category(r.category) == wanted_category)
    if active is not None:
        records = tuple(r for r in records if r.is_active is active)
    return [CampaignResponse.from_record(record) for record in records]


@router.get("/stats", response_model=CampaignStatsResponse)
def campaign_stats(
    service: CampaignIngestionService = Depends(get_campaign_ingestion_service),
) -> CampaignStatsResponse:
    records = service.campaigns()
    cutoff = _utc_now() - NEW_CAMPAIGN_WINDOW
    return CampaignStatsResponse(
        total=len(records),
        active=sum(1 for r in records if r.is_active),
        banners=sum(1 for r in records if r.is_banner),
        new_this_week=sum(1 for r in records if r.discovered_since(cutoff)),
    )


@router.get("/logs", response_model=list[AuditLogEntryResponse], response_model_by_alias=True)
def list_ingestion_logs(
    service: CampaignIngestionService = Depends(get_campaign_ingestion_service),
) -> list[AuditLogEntryResponse]:
    return [AuditLogEntryResponse.from_entry(entry) for entry in service.logs()]


@router.get("/status", response_model=PipelineStatusResponse)
def ingestion_status(
    service: CampaignIngestionService = Depends(get_campaign_ingestion_service),
) -> PipelineStatusResponse:
    return PipelineStatusResponse(**service.status())
