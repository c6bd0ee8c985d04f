"""
app/api/routers package marker.
"""

from app.api.routers.campaign_ingestion import router as campaign_ingestion_router

__all__ = [
    "campaign_ingestion_router",
]
