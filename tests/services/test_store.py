"""Tests for the submission store backends."""

import asyncio
from datetime import UTC, datetime, timedelta

import pytest

from groupfinder.models.submission import SUBMISSIONS_TABLE, SubmissionStatus
from groupfinder.services.errors import TransientStoreError
from groupfinder.services.store import InMemorySubmissionStore

T0 = datetime(2025, 3, 1, 9, 0, tzinfo=UTC)


def _row(name: str, minutes: int, status: str = "pending") -> dict:
    created = T0 + timedelta(minutes=minutes)
    return {
        "community_name": name,
        "platform": "Discord",
        "category": "Tech",
        "short_description": f"{name} description",
        "long_description": "",
        "join_type": "free",
        "join_link": f"https://discord.gg/{name}",
        "price_inr": None,
        "owner_id": None,
        "founder_name": "Anonymous",
        "founder_bio": "",
        "show_founder_info": True,
        "logo_url": None,
        "status": status,
        "review_notes": None,
        "reviewed_at": None,
        "created_at": created,
        "updated_at": created,
    }


@pytest.fixture(params=["memory", "sql"])
def any_store(request, sql_store):
    if request.param == "memory":
        return InMemorySubmissionStore()
    return sql_store


@pytest.mark.asyncio
async def test_insert_assigns_unique_ids(any_store) -> None:
    first = await any_store.insert(SUBMISSIONS_TABLE, _row("alpha", 0))
    second = await any_store.insert(SUBMISSIONS_TABLE, _row("beta", 1))

    assert isinstance(first["id"], int)
    assert first["id"] != second["id"]
    assert first["community_name"] == "alpha"


@pytest.mark.asyncio
async def test_select_filters_and_orders_newest_first(any_store) -> None:
    await any_store.insert(SUBMISSIONS_TABLE, _row("old", 0, "approved"))
    await any_store.insert(SUBMISSIONS_TABLE, _row("pending", 5))
    await any_store.insert(SUBMISSIONS_TABLE, _row("new", 10, "approved"))

    rows = await any_store.select(
        SUBMISSIONS_TABLE,
        {"status": SubmissionStatus.APPROVED},
        order_by="created_at",
        descending=True,
    )

    assert [row["community_name"] for row in rows] == ["new", "old"]


@pytest.mark.asyncio
async def test_select_breaks_created_at_ties_by_id(any_store) -> None:
    first = await any_store.insert(SUBMISSIONS_TABLE, _row("first", 0))
    second = await any_store.insert(SUBMISSIONS_TABLE, _row("second", 0))

    rows = await any_store.select(
        SUBMISSIONS_TABLE, {}, order_by="created_at", descending=True
    )

    assert [row["id"] for row in rows] == [second["id"], first["id"]]


@pytest.mark.asyncio
async def test_update_is_conditional_on_every_filter(any_store) -> None:
    created = await any_store.insert(SUBMISSIONS_TABLE, _row("alpha", 0))

    hit = await any_store.update(
        SUBMISSIONS_TABLE,
        {"id": created["id"], "status": "pending"},
        {"status": SubmissionStatus.APPROVED},
    )
    miss = await any_store.update(
        SUBMISSIONS_TABLE,
        {"id": created["id"], "status": "pending"},
        {"status": SubmissionStatus.REJECTED},
    )

    assert hit == 1
    assert miss == 0
    rows = await any_store.select(SUBMISSIONS_TABLE, {"id": created["id"]})
    assert rows[0]["status"] == "approved"


@pytest.mark.asyncio
async def test_delete_reports_affected_rows(any_store) -> None:
    created = await any_store.insert(SUBMISSIONS_TABLE, _row("alpha", 0))

    assert await any_store.delete(SUBMISSIONS_TABLE, {"id": created["id"]}) == 1
    assert await any_store.delete(SUBMISSIONS_TABLE, {"id": created["id"]}) == 0
    assert await any_store.select(SUBMISSIONS_TABLE, {"id": created["id"]}) == []


@pytest.mark.asyncio
async def test_change_feed_delivers_matching_changes(any_store) -> None:
    feed = any_store.subscribe_to_changes(SUBMISSIONS_TABLE, {"status": "approved"})
    created = await any_store.insert(SUBMISSIONS_TABLE, _row("alpha", 0))
    await any_store.update(
        SUBMISSIONS_TABLE, {"id": created["id"]}, {"status": "approved"}
    )
    feed.close()

    changes = [change async for change in feed]

    # The pending insert does not match the filter; the approval does.
    assert [(c.kind, c.row["id"]) for c in changes] == [("update", created["id"])]


@pytest.mark.asyncio
async def test_closing_store_ends_subscriptions(any_store) -> None:
    feed = any_store.subscribe_to_changes(SUBMISSIONS_TABLE)
    await any_store.close()

    changes = await asyncio.wait_for(_drain(feed), timeout=1.0)
    assert changes == []


async def _drain(feed) -> list:
    return [change async for change in feed]


@pytest.mark.asyncio
async def test_memory_store_read_failures_are_transient() -> None:
    store = InMemorySubmissionStore()
    store.fail_reads = True

    with pytest.raises(TransientStoreError):
        await store.select(SUBMISSIONS_TABLE, {})


@pytest.mark.asyncio
async def test_sql_store_rejects_unknown_tables(sql_store) -> None:
    with pytest.raises(ValueError):
        await sql_store.select("no_such_table", {})
