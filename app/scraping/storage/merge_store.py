"""
In-memory campaign collection and audit log with dedup-aware insertion.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Any

from app.domain.campaigns import AuditLogEntry, CampaignRecord
from app.scraping.storage.base import AUDIT_LOG_KEY, CAMPAIGNS_KEY, LAST_SYNC_KEY

logger = logging.getLogger(__name__)

DEFAULT_CAMPAIGN_CAP = 500
DEFAULT_LOG_CAP = 100


class MergeStore:
    """
    Authoritative campaign collection and audit log.

    Both sequences are ordered newest first. `insert_deduped` and
    `append_log` are the only mutation paths.
    """

    def __init__(
        self,
        *,
        campaign_cap: int = DEFAULT_CAMPAIGN_CAP,
        log_cap: int = DEFAULT_LOG_CAP,
        campaigns: Iterable[CampaignRecord] = (),
        logs: Iterable[AuditLogEntry] = (),
        last_sync: str | None = None,
    ) -> None:
        self._campaign_cap = max(1, campaign_cap)
        self._log_cap = max(1, log_cap)
        self._campaigns: list[CampaignRecord] = _first_occurrences(campaigns, set())[
            : self._campaign_cap
        ]
        self._logs: list[AuditLogEntry] = list(logs)[: self._log_cap]
        self.last_sync = last_sync

    @property
    def campaigns(self) -> tuple[CampaignRecord, ...]:
        return tuple(self._campaigns)

    @property
    def logs(self) -> tuple[AuditLogEntry, ...]:
        return tuple(self._logs)

    def insert_deduped(self, records: Sequence[CampaignRecord]) -> int:
        """
        Prepend records whose (competitor, name) is not already present.

        Existing records are never replaced; within one batch the first
        occurrence of an identity wins. Returns the number inserted.
        """

        fresh = _first_occurrences(records, {record.identity for record in self._campaigns})
        self._campaigns = (fresh + self._campaigns)[: self._campaign_cap]
        if len(fresh) < len(records):
            logger.debug(
                "Dropped %d duplicate campaign(s) already in the collection",
                len(records) - len(fresh),
            )
        return len(fresh)

    def append_log(self, entry: AuditLogEntry) -> None:
        self._logs = [entry, *self._logs][: self._log_cap]

    def to_state(self) -> dict[str, Any]:
        return {
            CAMPAIGNS_KEY: [record.to_dict() for record in self._campaigns],
            AUDIT_LOG_KEY: [entry.to_dict() for entry in self._logs],
            LAST_SYNC_KEY: self.last_sync,
        }

    @classmethod
    def from_state(
        cls,
        state: dict[str, Any],
        *,
        campaign_cap: int = DEFAULT_CAMPAIGN_CAP,
        log_cap: int = DEFAULT_LOG_CAP,
    ) -> "MergeStore":
        campaigns = [
            CampaignRecord.from_dict(item)
            for item in state.get(CAMPAIGNS_KEY) or []
            if isinstance(item, dict)
        ]
        logs = [
            AuditLogEntry.from_dict(item)
            for item in state.get(AUDIT_LOG_KEY) or []
            if isinstance(item, dict)
        ]
        return cls(
            campaign_cap=campaign_cap,
            log_cap=log_cap,
            campaigns=campaigns,
            logs=logs,
            last_sync=state.get(LAST_SYNC_KEY),
        )


def _first_occurrences(
    records: Iterable[CampaignRecord],
    seen: set[tuple[str, str]],
) -> list[CampaignRecord]:
    unique: list[CampaignRecord] = []
    for record in records:
        if record.identity in seen:
            continue
        seen.add(record.identity)
        unique.append(record)
    return unique
