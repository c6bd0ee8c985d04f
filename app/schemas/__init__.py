"""
app/schemas package marker.
"""

from app.schemas.campaign_ingestion import (
    AuditLogEntryResponse,
    BrandRunOutcomeResponse,
    CampaignResponse,
    CampaignStatsResponse,
    PipelineRunResponse,
    PipelineStatusResponse,
)

__all__ = [
    "AuditLogEntryResponse",
    "BrandRunOutcomeResponse",
    "CampaignResponse",
    "CampaignStatsResponse",
    "PipelineRunResponse",
    "PipelineStatusResponse",
]
