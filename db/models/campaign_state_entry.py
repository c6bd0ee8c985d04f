"""
db/models/campaign_state_entry.py

Key-value rows backing persisted campaign ingestion state.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin


class CampaignStateEntry(Base, TimestampMixin):
    __tablename__ = "campaign_state_entries"

    key: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
        comment="Logical state key, e.g. campaigns or audit_log",
    )
    value_json: Mapped[Any] = mapped_column(
        JSONB,
        nullable=True,
        comment="JSON value stored under the key",
    )
