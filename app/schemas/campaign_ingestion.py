"""
app/schemas/campaign_ingestion.py

Response schemas for campaign ingestion endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from app.domain.campaigns import (
    AuditLogEntry,
    BrandRunOutcome,
    CampaignRecord,
    PipelineRunSummary,
    category_label,
    resolve_category,
)


class CampaignResponse(BaseModel):
    """
    API response model for one stored campaign.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    competitor: str
    name: str
    info: str
    url: str
    category: str
    category_label: str = Field(..., alias="categoryLabel")
    discovery_date: str = Field(..., alias="discoveryDate")
    last_seen_date: str = Field(..., alias="lastSeenDate")
    is_active: bool = Field(..., alias="isActive")
    is_banner: bool = Field(..., alias="isBanner")
    reliability_score: int = Field(..., ge=0, le=100, alias="reliabilityScore")
    is_grounded: bool = Field(..., alias="isGrounded")

    @classmethod
    def from_record(cls, record: CampaignRecord) -> "CampaignResponse":
        return cls(
            id=record.id,
            competitor=record.competitor,
            name=record.name,
            info=record.info,
            url=record.url,
            category=resolve_category(record.category),
            category_label=category_label(record.category),
            discovery_date=record.discovery_date,
            last_seen_date=record.last_seen_date,
            is_active=record.is_active,
            is_banner=record.is_banner,
            reliability_score=record.reliability_score,
            is_grounded=record.is_grounded,
        )


class AuditLogEntryResponse(BaseModel):
    """
    API response model for one audit log row.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    date: str
    status: str
    brand: str
    found: int = Field(..., ge=0)
    error: str | None = None
    proxy_used: str | None = Field(default=None, alias="proxyUsed")

    @classmethod
    def from_entry(cls, entry: AuditLogEntry) -> "AuditLogEntryResponse":
        return cls(
            id=entry.id,
            date=entry.date,
            status=entry.status.value,
            brand=entry.brand,
            found=entry.found,
            error=entry.error,
            proxy_used=entry.proxy_used,
        )


class BrandRunOutcomeResponse(BaseModel):
    brand: str
    status: str
    found: int = Field(..., ge=0)
    inserted: int = Field(..., ge=0)
    proxy_used: str | None = None
    error: str | None = None

    @classmethod
    def from_outcome(cls, outcome: BrandRunOutcome) -> "BrandRunOutcomeResponse":
        return cls(
            brand=outcome.brand,
            status=outcome.status.value,
            found=outcome.found,
            inserted=outcome.inserted,
            proxy_used=outcome.proxy_used,
            error=outcome.error,
        )


class PipelineRunResponse(BaseModel):
    """
    API response model for one completed pipeline run.
    """

    status: str
    started_at: str | None = None
    finished_at: str | None = None
    outcomes: list[BrandRunOutcomeResponse] = Field(default_factory=list)

    @classmethod
    def from_summary(cls, summary: PipelineRunSummary) -> "PipelineRunResponse":
        return cls(
            status=summary.status,
            started_at=summary.started_at,
            finished_at=summary.finished_at,
            outcomes=[BrandRunOutcomeResponse.from_outcome(o) for o in summary.outcomes],
        )


class PipelineStatusResponse(BaseModel):
    running: bool
    current_brand: str | None = None
    cooldown_remaining: int = Field(..., ge=0)
    last_sync: str | None = None
    brands: list[str] = Field(default_factory=list)


class CampaignStatsResponse(BaseModel):
    """
    Headline counts over the stored campaign collection.
    """

    total: int = Field(..., ge=0)
    active: int = Field(..., ge=0)
    banners: int = Field(..., ge=0)
    new_this_week: int = Field(..., ge=0)
