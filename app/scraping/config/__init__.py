"""
Config helpers for campaign ingestion.
"""

from app.scraping.config.brands import DEFAULT_BRANDS, select_brands
from app.scraping.config.loader import get_campaign_ingestion_settings
from app.scraping.config.models import BrandConfig, CampaignIngestionSettings

__all__ = [
    "DEFAULT_BRANDS",
    "BrandConfig",
    "CampaignIngestionSettings",
    "get_campaign_ingestion_settings",
    "select_brands",
]
