"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.campaign_state_entry import CampaignStateEntry

__all__ = [
    "CampaignStateEntry",
]
