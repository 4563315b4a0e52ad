"""Search Input Controller tests: input -> query state, pending flag, last-write-wins.

Design Decisions:
    - navigate() fakes gate on asyncio.Event so tests control completion order
"""

import asyncio

import pytest

from app.core.domain_types import ListingQuery, ListingResult
from app.core.search_input import SearchInputController


class _GatedNavigate:
    def __init__(self):
        self.calls: list[ListingQuery] = []
        self.gates: dict[str, asyncio.Event] = {}

    def gate(self, term: str) -> asyncio.Event:
        return self.gates.setdefault(term, asyncio.Event())

    async def __call__(self, query: ListingQuery) -> ListingResult:
        self.calls.append(query)
        await self.gate(query.search_term).wait()
        return ListingResult(records=(), next_offset=None)


async def _instant(query: ListingQuery) -> ListingResult:
    return ListingResult()


async def test_none_input_is_noop():
    controller = SearchInputController(_instant)
    assert controller.on_input(None) is None
    assert not controller.pending
    assert controller.params == {}


async def test_value_sets_q_literally():
    controller = SearchInputController(_instant)
    await controller.on_input(" Ann ")
    assert controller.params == {"q": " Ann "}
    assert controller.settled_query == ListingQuery(" Ann ", 0)


async def test_empty_value_clears_q():
    controller = SearchInputController(_instant, ListingQuery("ann", 0))
    await controller.on_input("")
    assert "q" not in controller.params


async def test_pending_until_navigation_settles():
    navigate = _GatedNavigate()
    controller = SearchInputController(navigate)
    task = controller.on_input("a")
    await asyncio.sleep(0)
    assert controller.pending
    navigate.gate("a").set()
    await task
    await asyncio.sleep(0)
    assert not controller.pending


async def test_navigations_start_in_input_order():
    navigate = _GatedNavigate()
    controller = SearchInputController(navigate)
    for value in ("a", "an", "ann"):
        controller.on_input(value)
    await asyncio.sleep(0)
    assert [q.search_term for q in navigate.calls] == ["a", "an", "ann"]
    for term in ("a", "an", "ann"):
        navigate.gate(term).set()
    await controller.wait_settled()


async def test_older_result_arriving_late_is_not_observable():
    navigate = _GatedNavigate()
    controller = SearchInputController(navigate)
    controller.on_input("a")
    controller.on_input("ab")
    await asyncio.sleep(0)
    navigate.gate("ab").set()
    await asyncio.sleep(0)
    await asyncio.sleep(0)
    assert controller.settled_query.search_term == "ab"
    navigate.gate("a").set()
    await controller.wait_settled()
    assert controller.settled_query.search_term == "ab"
    assert controller.query.search_term == "ab"


async def test_navigation_failure_propagates():
    async def failing(query):
        raise RuntimeError("store down")

    controller = SearchInputController(failing)
    controller.on_input("a")
    with pytest.raises(RuntimeError):
        await controller.wait_settled()
    assert controller.result is None
