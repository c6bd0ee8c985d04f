"""
SQLAlchemy-backed key-value state store.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.scraping.storage.base import StateStore
from db.models.campaign_state_entry import CampaignStateEntry


class SQLAlchemyStateStore(StateStore):
    """
    Persist state keys as rows of `campaign_state_entries`.

    A fresh session is opened per call so the store can outlive any one
    request or scheduler tick.
    """

    def __init__(self, *, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def get(self, key: str, default: Any = None) -> Any:
        with self._session_factory() as session:
            value = session.execute(
                select(CampaignStateEntry.value_json).where(CampaignStateEntry.key == key)
            ).scalar_one_or_none()
        return default if value is None else value

    def set_many(self, values: dict[str, Any]) -> None:
        if not values:
            return

        rows = [{"key": key, "value_json": value} for key, value in values.items()]
        statement = insert(CampaignStateEntry).values(rows)
        statement = statement.on_conflict_do_update(
            index_elements=[CampaignStateEntry.key],
            set_={"value_json": statement.excluded.value_json, "updated_at": func.now()},
        )

        with self._session_factory() as session:
            try:
                session.execute(statement)
                session.commit()
            except SQLAlchemyError:
                session.rollback()
                raise
