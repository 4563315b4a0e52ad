"""Paged Feed tests: incremental loading driven by the visibility trigger.

Tests cover:
    - Initial load binds the trigger; sentinel entry loads the next page
    - At most one load_next in flight
    - Trigger torn down when the collection is exhausted
    - Cursor change rebinds the trigger to a new closure
    - Superseded results discarded after a new load()
    - Failed page fetch keeps accumulated records
    - Invalidation marks the feed stale; refresh() reloads
    - Scroll events while a new root query loads are ignored
    - Failed root reload restores the previous cursor binding
    - Trigger-driven page failures are logged and kept
"""

import asyncio
import logging

import pytest

from app.core.domain_types import ListingQuery
from app.core.errors import StoreError
from app.core.visibility_trigger import IncrementalLoadTrigger
from app.services.invalidation import InvalidationSignal
from app.services.listing_engine import ListingQueryEngine
from app.services.mutation_gateway import MutationGateway
from app.services.paged_feed import PagedFeed
from tests.services.fake_store import FakeRecordStore


@pytest.fixture
def store():
    return FakeRecordStore(count=45)


@pytest.fixture
def engine(store):
    return ListingQueryEngine(store)


@pytest.fixture
def trigger():
    return IncrementalLoadTrigger()


def _feed(engine, trigger, invalidation=None):
    return PagedFeed(engine.list, trigger, invalidation)


async def test_initial_load_binds_trigger(engine, trigger):
    feed = _feed(engine, trigger)
    assert await feed.load(ListingQuery())
    assert len(feed.records) == 20
    assert feed.next_offset == 20
    assert trigger.bound


async def test_sentinel_entry_loads_next_page(engine, trigger):
    feed = _feed(engine, trigger)
    await feed.load(ListingQuery())
    assert trigger.notify(0)
    await feed.last_task
    assert [r.id for r in feed.records] == list(range(1, 41))
    assert feed.next_offset == 40


async def test_cursor_change_rebinds_trigger(engine, trigger):
    feed = _feed(engine, trigger)
    await feed.load(ListingQuery())
    first_observer = trigger.observer
    trigger.notify(0)
    await feed.last_task
    assert trigger.observer is not first_observer
    assert not first_observer.active
    # fresh observer fires even though the sentinel never left the viewport
    assert trigger.notify(0)
    await feed.last_task
    assert len(feed.records) == 45


async def test_exhausted_feed_tears_down_trigger(engine, trigger):
    feed = _feed(engine, trigger)
    await feed.load(ListingQuery(offset=40))
    assert feed.next_offset is None
    assert not trigger.bound
    assert trigger.notify(0) is False
    assert await feed.load_next() is False


async def test_only_one_page_request_in_flight(store, trigger):
    gate = asyncio.Event()
    engine = ListingQueryEngine(store)

    async def slow_fetch(query):
        if query.offset:
            await gate.wait()
        return await engine.list(query)

    feed = PagedFeed(slow_fetch, trigger)
    await feed.load(ListingQuery())
    first = asyncio.ensure_future(feed.load_next())
    await asyncio.sleep(0)
    assert feed.loading
    assert await feed.load_next() is False
    gate.set()
    assert await first
    assert [c for c in store.calls if c[0] == "page"] == [("page", 0, 20), ("page", 20, 20)]


async def test_superseded_page_result_discarded(store, trigger):
    gate = asyncio.Event()
    engine = ListingQueryEngine(store)

    async def slow_fetch(query):
        if query.offset == 20:
            await gate.wait()
        return await engine.list(query)

    feed = PagedFeed(slow_fetch, trigger)
    await feed.load(ListingQuery())
    pending = asyncio.ensure_future(feed.load_next())
    await asyncio.sleep(0)
    await feed.load(ListingQuery(search_term="User 1"))
    gate.set()
    assert await pending is False
    assert all("User 1" in r.name for r in feed.records)
    assert feed.next_offset is None


async def test_failed_page_keeps_records(store, engine, trigger):
    feed = _feed(engine, trigger)
    await feed.load(ListingQuery())
    store.fail_on.add("page")
    with pytest.raises(StoreError):
        await feed.load_next()
    assert len(feed.records) == 20
    assert feed.next_offset == 20
    assert not feed.loading


async def test_invalidation_marks_stale_and_refresh_reloads(store, engine, trigger):
    signal = InvalidationSignal()
    feed = _feed(engine, trigger, signal)
    await feed.load(ListingQuery())
    await MutationGateway(store, signal).delete_record(1)
    assert feed.stale
    assert await feed.refresh()
    assert not feed.stale
    assert feed.records[0].id == 2


async def test_close_unsubscribes_and_tears_down(engine, trigger):
    signal = InvalidationSignal()
    feed = _feed(engine, trigger, signal)
    await feed.load(ListingQuery())
    feed.close()
    signal.emit("users")
    assert not feed.stale
    assert not trigger.bound


async def test_scroll_during_root_reload_is_ignored(store, trigger):
    search_gate = asyncio.Event()
    engine = ListingQueryEngine(store)

    async def gated_fetch(query):
        if query.is_search:
            await search_gate.wait()
        return await engine.list(query)

    feed = PagedFeed(gated_fetch, trigger)
    await feed.load(ListingQuery())
    reload = asyncio.ensure_future(feed.load(ListingQuery(search_term="User 1")))
    await asyncio.sleep(0)
    assert feed.loading
    assert not trigger.bound
    assert trigger.notify(0) is False
    assert await feed.load_next() is False
    search_gate.set()
    assert await reload
    assert len(feed.records) == 11
    assert all("User 1" in r.name for r in feed.records)
    assert feed.next_offset is None
    assert not trigger.bound
    assert [c for c in store.calls if c[0] == "page"] == [("page", 0, 20)]


async def test_failed_root_reload_rebinds_previous_cursor(store, engine, trigger):
    feed = _feed(engine, trigger)
    await feed.load(ListingQuery())
    store.fail_on.add("search")
    with pytest.raises(StoreError):
        await feed.load(ListingQuery(search_term="User"))
    assert not feed.loading
    assert feed.query == ListingQuery()
    assert trigger.bound
    assert trigger.notify(0)
    await feed.last_task
    assert len(feed.records) == 40


async def test_scroll_load_failure_is_logged_and_kept(store, engine, trigger, caplog):
    feed = _feed(engine, trigger)
    await feed.load(ListingQuery())
    store.fail_on.add("page")
    with caplog.at_level(logging.ERROR, logger="app.services.paged_feed"):
        trigger.notify(0)
        await asyncio.wait([feed.last_task])
        await asyncio.sleep(0)
    assert isinstance(feed.last_error, StoreError)
    failures = [r for r in caplog.records if "Failed to load next page" in r.message]
    assert len(failures) == 1
    assert failures[0].offset == 20
    assert failures[0].error_code == "STORE_ERROR"
    assert len(feed.records) == 20
