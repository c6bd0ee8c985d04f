"""
app/domain/campaigns.py

Domain models for competitor campaign records and the ingestion audit trail.
"""

from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

DEFAULT_CATEGORY = "general"

CATEGORY_LABELS: dict[str, str] = {
    "family": "Family & Kids",
    "dining": "Dining & Food",
    "rewards": "Member Rewards",
    "business": "Business Travel",
    "travel": "Leisure & Travel",
    "spa": "Spa & Wellness",
    "wedding": "Weddings & Events",
    "general": "General Promo",
    "partnership": "Partnership",
    "seasonal": "Seasonal Deals",
}


class AuditStatus(str, Enum):
    """
    Outcome of one brand acquisition attempt.
    """

    SUCCESS = "success"
    FAILED = "failed"
    PARTIAL = "partial"
    PROXY_RETRY = "proxy-retry"


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def new_identity() -> str:
    return str(uuid.uuid4())


def resolve_category(category: str | None) -> str:
    """
    Map a stored category onto the fixed label set, defaulting to 'general'.

    Read-side only: the pipeline stores whatever the extraction returned.
    """

    key = (category or "").strip().lower()
    return key if key in CATEGORY_LABELS else DEFAULT_CATEGORY


def category_label(category: str | None) -> str:
    return CATEGORY_LABELS[resolve_category(category)]


def parse_timestamp(value: str | None) -> datetime | None:
    """
    Parse a stored ISO-8601 stamp; naive values are taken as UTC.

    Returns None for empty or unparseable values.
    """

    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class CampaignRecord:
    """
    One extracted marketing campaign for a competitor brand.

    Identity for dedup is (competitor, name); `id` is a storage handle only.
    """

    id: str
    competitor: str
    name: str
    info: str
    url: str
    category: str
    discovery_date: str
    last_seen_date: str
    is_active: bool = True
    is_banner: bool = False
    reliability_score: int = 100
    is_grounded: bool = True

    @property
    def identity(self) -> tuple[str, str]:
        return (self.competitor, self.name)

    def matches_text(self, query: str) -> bool:
        needle = query.strip().lower()
        return needle in self.name.lower() or needle in self.info.lower()

    def discovered_since(self, cutoff: datetime) -> bool:
        discovered = parse_timestamp(self.discovery_date)
        return discovered is not None and discovered >= cutoff

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "competitor": self.competitor,
            "name": self.name,
            "info": self.info,
            "url": self.url,
            "category": self.category,
            "discoveryDate": self.discovery_date,
            "lastSeenDate": self.last_seen_date,
            "isActive": self.is_active,
            "isBanner": self.is_banner,
            "reliabilityScore": self.reliability_score,
            "isGrounded": self.is_grounded,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CampaignRecord":
        return cls(
            id=str(data.get("id") or new_identity()),
            competitor=str(data.get("competitor", "")),
            name=str(data.get("name", "")),
            info=str(data.get("info", "")),
            url=str(data.get("url", "")),
            category=str(data.get("category", DEFAULT_CATEGORY)),
            discovery_date=str(data.get("discoveryDate", "")),
            last_seen_date=str(data.get("lastSeenDate", "")),
            is_active=bool(data.get("isActive", True)),
            is_banner=bool(data.get("isBanner", False)),
            reliability_score=int(data.get("reliabilityScore", 100)),
            is_grounded=bool(data.get("isGrounded", False)),
        )


@dataclass(frozen=True)
class AuditLogEntry:
    """
    Audit row for one brand attempt within a pipeline run.
    """

    brand: str
    status: AuditStatus
    found: int = 0
    error: str | None = None
    proxy_used: str | None = None
    date: str = field(default_factory=utc_now_iso)
    id: str = field(default_factory=new_identity)

    @classmethod
    def success(
        cls,
        *,
        brand: str,
        found: int,
        proxy_used: str,
        date: str | None = None,
    ) -> "AuditLogEntry":
        return cls(
            brand=brand,
            status=AuditStatus.SUCCESS,
            found=found,
            proxy_used=proxy_used,
            date=date or utc_now_iso(),
        )

    @classmethod
    def failed(cls, *, brand: str, error: str, date: str | None = None) -> "AuditLogEntry":
        return cls(
            brand=brand,
            status=AuditStatus.FAILED,
            found=0,
            error=error,
            date=date or utc_now_iso(),
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "date": self.date,
            "status": self.status.value,
            "brand": self.brand,
            "found": self.found,
        }
        if self.error is not None:
            payload["error"] = self.error
        if self.proxy_used is not None:
            payload["proxyUsed"] = self.proxy_used
        return payload

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AuditLogEntry":
        return cls(
            id=str(data.get("id") or new_identity()),
            date=str(data.get("date", "")),
            status=AuditStatus(data.get("status", AuditStatus.FAILED.value)),
            brand=str(data.get("brand", "")),
            found=int(data.get("found", 0)),
            error=data.get("error"),
            proxy_used=data.get("proxyUsed"),
        )


@dataclass(frozen=True)
class BrandRunOutcome:
    """
    Result for one brand inside a pipeline run.
    """

    brand: str
    status: AuditStatus
    found: int
    inserted: int
    proxy_used: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class PipelineRunSummary:
    """
    Summary returned by one pipeline invocation.

    `status` is 'completed', 'skipped_running' or 'skipped_cooldown'.
    """

    status: str
    started_at: str | None = None
    finished_at: str | None = None
    outcomes: list[BrandRunOutcome] = field(default_factory=list)

    @property
    def skipped(self) -> bool:
        return self.status != "completed"

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        for outcome in payload["outcomes"]:
            outcome["status"] = AuditStatus(outcome["status"]).value
        return payload
