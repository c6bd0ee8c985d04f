"""
Storage layer interfaces for persisted campaign state.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

CAMPAIGNS_KEY = "campaigns"
AUDIT_LOG_KEY = "audit_log"
LAST_SYNC_KEY = "last_sync"
FAVORITES_KEY = "favorites"

STATE_KEYS = (CAMPAIGNS_KEY, AUDIT_LOG_KEY, LAST_SYNC_KEY, FAVORITES_KEY)


class StateStore(ABC):
    """
    Opaque key-value store holding JSON-serializable values.
    """

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """
        Return the stored value for `key`, or `default` when absent.
        """

    @abstractmethod
    def set_many(self, values: dict[str, Any]) -> None:
        """
        Persist several keys in one write.
        """
