"""
app/services package marker.
"""

from app.services.campaign_ingestion_service import (
    CampaignIngestionService,
    build_state_store,
    get_campaign_ingestion_service,
)

__all__ = [
    "CampaignIngestionService",
    "build_state_store",
    "get_campaign_ingestion_service",
]
