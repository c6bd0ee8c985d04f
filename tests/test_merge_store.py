"""
tests/test_merge_store.py

Pytest unit tests for MergeStore and the campaign/audit record codecs.

Coverage
--------
- Dedup on (competitor, name), across and within batches
- Existing records are never overwritten
- Campaign and audit log caps keep the newest entries
- State document round trip and load-time dedup
- Text and discovery-date queries on records
- Category resolution on the read side
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from app.domain.campaigns import (
    AuditLogEntry,
    AuditStatus,
    CampaignRecord,
    category_label,
    parse_timestamp,
    resolve_category,
)
from app.scraping.storage import AUDIT_LOG_KEY, CAMPAIGNS_KEY, LAST_SYNC_KEY, MergeStore


def _record(name: str, competitor: str = "Marriott", info: str = "info") -> CampaignRecord:
    return CampaignRecord(
        id=f"{competitor}-{name}-{info}",
        competitor=competitor,
        name=name,
        info=info,
        url="https://www.marriott.com/ja/offers.mi",
        category="seasonal",
        discovery_date="2026-03-01T00:00:00+00:00",
        last_seen_date="2026-03-01T00:00:00+00:00",
        is_banner=False,
    )


@pytest.fixture()
def store() -> MergeStore:
    return MergeStore()


# ---------------------------------------------------------------------------
# Dedup
# ---------------------------------------------------------------------------


class TestInsertDeduped:
    def test_inserts_new_records_newest_first(self, store: MergeStore) -> None:
        store.insert_deduped([_record("A")])
        store.insert_deduped([_record("B"), _record("C")])

        assert [r.name for r in store.campaigns] == ["B", "C", "A"]

    def test_reinsert_is_idempotent(self, store: MergeStore) -> None:
        batch = [_record("A"), _record("B")]
        assert store.insert_deduped(batch) == 2
        snapshot = store.campaigns

        assert store.insert_deduped(batch) == 0
        assert store.campaigns == snapshot

    def test_existing_record_is_not_overwritten(self, store: MergeStore) -> None:
        store.insert_deduped([_record("Spring Sale", info="original")])
        store.insert_deduped([_record("Spring Sale", info="updated")])

        assert len(store.campaigns) == 1
        assert store.campaigns[0].info == "original"

    def test_same_name_different_competitor_both_kept(self, store: MergeStore) -> None:
        inserted = store.insert_deduped(
            [_record("Spring Sale", competitor="Marriott"), _record("Spring Sale", competitor="IHG")]
        )

        assert inserted == 2
        assert {r.identity for r in store.campaigns} == {
            ("Marriott", "Spring Sale"),
            ("IHG", "Spring Sale"),
        }

    def test_duplicates_within_one_batch_keep_first(self, store: MergeStore) -> None:
        inserted = store.insert_deduped(
            [_record("A", info="first"), _record("A", info="second")]
        )

        assert inserted == 1
        assert store.campaigns[0].info == "first"

    def test_identity_is_case_sensitive(self, store: MergeStore) -> None:
        assert store.insert_deduped([_record("Spring Sale"), _record("spring sale")]) == 2


# ---------------------------------------------------------------------------
# Caps
# ---------------------------------------------------------------------------


class TestCaps:
    def test_campaign_cap_keeps_most_recent(self) -> None:
        store = MergeStore(campaign_cap=500)
        store.insert_deduped([_record(f"old-{i}") for i in range(300)])
        store.insert_deduped([_record(f"new-{i}") for i in range(300)])

        names = [r.name for r in store.campaigns]
        assert len(names) == 500
        assert names[:300] == [f"new-{i}" for i in range(300)]
        assert names[300:] == [f"old-{i}" for i in range(200)]

    def test_log_cap_keeps_most_recent(self) -> None:
        store = MergeStore(log_cap=100)
        for i in range(150):
            store.append_log(AuditLogEntry.success(brand=f"b{i}", found=i, proxy_used="CodeTabs"))

        assert len(store.logs) == 100
        assert store.logs[0].brand == "b149"
        assert store.logs[-1].brand == "b50"

    def test_initial_sequences_are_capped(self) -> None:
        store = MergeStore(campaign_cap=2, campaigns=[_record("A"), _record("B"), _record("C")])

        assert [r.name for r in store.campaigns] == ["A", "B"]


# ---------------------------------------------------------------------------
# State round trip
# ---------------------------------------------------------------------------


class TestStateDocument:
    def test_round_trip(self, store: MergeStore) -> None:
        store.insert_deduped([_record("A"), _record("B", competitor="Hyatt")])
        store.append_log(AuditLogEntry.failed(brand="IHG", error="RetrievalExhausted: boom"))
        store.append_log(AuditLogEntry.success(brand="Marriott", found=2, proxy_used="AllOrigins"))
        store.last_sync = "2026-03-01T00:00:00+00:00"

        restored = MergeStore.from_state(store.to_state())

        assert restored.campaigns == store.campaigns
        assert restored.logs == store.logs
        assert restored.last_sync == store.last_sync

    def test_state_uses_camel_case_keys(self, store: MergeStore) -> None:
        store.insert_deduped([_record("A")])
        store.append_log(AuditLogEntry.failed(brand="IHG", error="boom"))

        state = store.to_state()
        campaign = state[CAMPAIGNS_KEY][0]
        log = state[AUDIT_LOG_KEY][0]

        assert {"discoveryDate", "lastSeenDate", "isBanner", "reliabilityScore", "isGrounded"} <= set(
            campaign
        )
        assert log["status"] == "failed"
        assert log["found"] == 0
        assert "proxyUsed" not in log
        assert state[LAST_SYNC_KEY] is None

    def test_from_empty_state(self) -> None:
        restored = MergeStore.from_state({})

        assert restored.campaigns == ()
        assert restored.logs == ()
        assert restored.last_sync is None

    def test_duplicate_identities_on_load_keep_first(self) -> None:
        first = _record("Spring Sale", info="first").to_dict()
        second = _record("Spring Sale", info="second").to_dict()

        restored = MergeStore.from_state({CAMPAIGNS_KEY: [first, second, _record("B").to_dict()]})

        assert [(r.name, r.info) for r in restored.campaigns] == [
            ("Spring Sale", "first"),
            ("B", "info"),
        ]
        assert restored.insert_deduped([_record("Spring Sale", info="third")]) == 0

    def test_malformed_items_are_skipped(self) -> None:
        restored = MergeStore.from_state({CAMPAIGNS_KEY: ["garbage", None], AUDIT_LOG_KEY: [1]})

        assert restored.campaigns == ()
        assert restored.logs == ()


# ---------------------------------------------------------------------------
# Domain helpers
# ---------------------------------------------------------------------------


class TestAuditLogEntry:
    def test_failed_entry_has_zero_found(self) -> None:
        entry = AuditLogEntry.failed(brand="IHG", error="boom")

        assert entry.status is AuditStatus.FAILED
        assert entry.found == 0
        assert entry.proxy_used is None

    def test_entries_get_distinct_ids(self) -> None:
        first = AuditLogEntry.failed(brand="IHG", error="boom")
        second = AuditLogEntry.failed(brand="IHG", error="boom")

        assert first.id != second.id


class TestCampaignRecordQueries:
    def test_matches_text_over_name_and_info(self) -> None:
        record = _record("Spring Sale", info="Breakfast included")

        assert record.matches_text("spring")
        assert record.matches_text(" BREAKFAST ")
        assert not record.matches_text("spa")

    def test_discovered_since(self) -> None:
        record = _record("A")

        assert record.discovered_since(datetime(2026, 2, 28, tzinfo=timezone.utc))
        assert not record.discovered_since(datetime(2026, 3, 2, tzinfo=timezone.utc))

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("2026-03-01T00:00:00Z", datetime(2026, 3, 1, tzinfo=timezone.utc)),
            ("2026-03-01T00:00:00", datetime(2026, 3, 1, tzinfo=timezone.utc)),
            ("", None),
            ("yesterday", None),
        ],
    )
    def test_parse_timestamp(self, raw: str, expected) -> None:
        assert parse_timestamp(raw) == expected

    def test_unparseable_discovery_date_is_never_recent(self) -> None:
        record = CampaignRecord.from_dict({"competitor": "IHG", "name": "A", "discoveryDate": "n/a"})

        assert not record.discovered_since(datetime(2000, 1, 1, tzinfo=timezone.utc))


class TestCategories:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("dining", "dining"), (" Spa ", "spa"), ("LOYALTY", "general"), ("", "general"), (None, "general")],
    )
    def test_resolve_category(self, raw, expected: str) -> None:
        assert resolve_category(raw) == expected

    def test_unknown_category_uses_general_label(self) -> None:
        assert category_label("mystery") == category_label("general")
