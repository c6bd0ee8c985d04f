"""
Storage layer exports.
"""

from app.scraping.storage.base import (
    AUDIT_LOG_KEY,
    CAMPAIGNS_KEY,
    FAVORITES_KEY,
    LAST_SYNC_KEY,
    STATE_KEYS,
    StateStore,
)
from app.scraping.storage.json_file_storage import JSONFileStateStore
from app.scraping.storage.merge_store import MergeStore
from app.scraping.storage.sqlalchemy_storage import SQLAlchemyStateStore

__all__ = [
    "AUDIT_LOG_KEY",
    "CAMPAIGNS_KEY",
    "FAVORITES_KEY",
    "LAST_SYNC_KEY",
    "STATE_KEYS",
    "JSONFileStateStore",
    "MergeStore",
    "SQLAlchemyStateStore",
    "StateStore",
]
