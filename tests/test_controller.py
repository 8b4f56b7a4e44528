"""Tests for crmsearch.fuzzy.controller"""
import asyncio
import threading

import pytest

from crmsearch.fuzzy import AsyncioScheduler, SearchController, SearchState, ThreadingScheduler, rank
from crmsearch.shared.config import SearchConfig


def ids(results):
    return [r.item["id"] for r in results]


@pytest.fixture
def controller(providers, scheduler):
    c = SearchController(providers, ["name", "email"], threshold=40, debounce_ms=150, scheduler=scheduler)
    yield c
    c.dispose()


@pytest.fixture
def events(controller):
    seen = {"pending": [], "results": []}
    controller.on("pending", seen["pending"].append)
    controller.on("results", seen["results"].append)
    return seen


class TestIdle:
    def test_initial_state(self, controller):
        assert controller.state is SearchState.IDLE
        assert controller.query == ""
        assert controller.committed_query == ""
        assert controller.is_pending is False
        assert controller.has_active_query is False
        assert ids(controller.results) == [1, 2, 3, 4]
        assert all(r.score == 100 and r.matched_field == "" for r in controller.results)


class TestDebounce:
    def test_commit_after_delay(self, controller, scheduler, events):
        controller.set_query("joão")
        assert controller.state is SearchState.PENDING
        assert controller.is_pending is True
        assert controller.committed_query == ""
        assert events["pending"] == ["joão"]

        scheduler.advance(0.1)
        assert controller.is_pending is True
        assert events["results"] == []

        scheduler.advance(0.1)
        assert controller.state is SearchState.SETTLED
        assert controller.is_pending is False
        assert controller.committed_query == "joão"
        assert controller.has_active_query is True
        assert ids(controller.results) == [1, 3]
        assert len(events["results"]) == 1

    def test_rapid_keystrokes_commit_once_with_last_value(self, controller, scheduler, events, providers):
        for q in ["j", "jo", "joa", "joão"]:
            controller.set_query(q)
            assert len(scheduler.live) == 1
            scheduler.advance(0.05)
        assert events["results"] == []

        scheduler.advance(0.2)
        assert len(events["results"]) == 1
        assert controller.committed_query == "joão"
        assert events["results"][0] == rank(providers, "joão", ["name", "email"], 40)

    def test_superseded_timers_are_cancelled(self, controller, scheduler):
        controller.set_query("ma")
        first = scheduler.live[0]
        controller.set_query("maria")
        assert first.cancelled is True
        scheduler.advance(1)
        assert controller.committed_query == "maria"

    def test_stale_results_stay_visible_while_pending(self, controller, scheduler):
        controller.set_query("joão")
        scheduler.advance(0.2)
        assert ids(controller.results) == [1, 3]

        controller.set_query("maria")
        assert controller.is_pending is True
        assert controller.committed_query == "joão"
        assert ids(controller.results) == [1, 3]

        scheduler.advance(0.2)
        assert ids(controller.results) == [2]

    def test_late_callback_from_superseded_timer_is_ignored(self, controller, scheduler):
        controller.set_query("joão")
        stale = scheduler.live[0]
        controller.set_query("maria")
        stale.callback()
        assert controller.committed_query == ""
        assert controller.is_pending is True


class TestClear:
    def test_clear_while_pending(self, controller, scheduler, events):
        controller.set_query("joão")
        controller.clear()
        assert controller.state is SearchState.IDLE
        assert controller.is_pending is False
        assert controller.query == ""
        assert controller.has_active_query is False
        assert ids(controller.results) == [1, 2, 3, 4]
        assert scheduler.live == []

        scheduler.advance(1)
        assert controller.committed_query == ""
        assert len(events["results"]) == 1

    def test_clear_after_settle(self, controller, scheduler):
        controller.set_query("maria")
        scheduler.advance(0.2)
        controller.clear()
        assert controller.committed_query == ""
        assert ids(controller.results) == [1, 2, 3, 4]

    def test_empty_query_clears_immediately(self, controller, scheduler):
        controller.set_query("maria")
        scheduler.advance(0.2)
        controller.set_query("")
        assert controller.state is SearchState.IDLE
        assert scheduler.live == []
        assert ids(controller.results) == [1, 2, 3, 4]


class TestItemsAndConfig:
    def test_set_items_reranks_committed_query(self, controller, scheduler, events):
        controller.set_query("lisboa")
        scheduler.advance(0.2)
        assert controller.results == []

        controller.set_items([{"id": 9, "name": "Lisboa Serviços", "email": ""}])
        assert ids(controller.results) == [9]
        assert len(events["results"]) == 2

    def test_set_items_while_idle_shows_all(self, controller):
        controller.set_items([{"id": 7, "name": "Ana"}])
        assert ids(controller.results) == [7]

    def test_from_config(self, providers, scheduler):
        config = SearchConfig(threshold=90, debounce_ms=300, fields=["name"])
        c = SearchController.from_config(config, providers, scheduler=scheduler)
        c.set_query("joão")
        scheduler.advance(0.2)
        assert c.is_pending is True
        scheduler.advance(0.2)
        assert ids(c.results) == [1]
        c.dispose()

    def test_unknown_event(self, controller):
        with pytest.raises(ValueError):
            controller.on("changed", print)


class TestDispose:
    def test_pending_commit_never_fires(self, controller, scheduler, events):
        controller.set_query("joão")
        controller.dispose()
        assert scheduler.live == []
        assert controller.is_pending is False
        scheduler.advance(1)
        assert controller.committed_query == ""
        assert events["results"] == []

    def test_calls_after_dispose_are_noops(self, controller, scheduler):
        controller.dispose()
        controller.set_query("joão")
        controller.clear()
        controller.set_items([])
        assert controller.query == ""
        assert scheduler.live == []
        assert controller.disposed is True

    def test_context_manager(self, providers, scheduler):
        with SearchController(providers, ["name"], scheduler=scheduler) as c:
            c.set_query("joão")
        assert c.disposed is True
        scheduler.advance(1)
        assert c.committed_query == ""


class TestRealSchedulers:
    def test_threading_scheduler(self, providers):
        settled = threading.Event()
        c = SearchController(providers, ["name"], debounce_ms=10, scheduler=ThreadingScheduler())
        c.on("results", lambda _results: settled.set())
        c.set_query("maria")
        assert settled.wait(2.0)
        assert ids(c.results) == [2]
        c.dispose()

    def test_clear_during_slow_listener_is_delivered_last(self, providers):
        started = threading.Event()
        calls = []
        seen = []

        def slow(_results):
            calls.append(1)
            if len(calls) == 1:
                started.set()
                threading.Event().wait(0.2)

        c = SearchController(providers, ["name"], debounce_ms=10, scheduler=ThreadingScheduler())
        c.on("results", slow)
        c.on("results", lambda results: seen.append(ids(results)))
        c.set_query("maria")
        assert started.wait(2.0)
        c.clear()

        assert seen == [[2], [1, 2, 3, 4]]
        assert ids(c.results) == [1, 2, 3, 4]
        assert c.state is SearchState.IDLE
        c.dispose()

    def test_asyncio_scheduler(self, providers):
        async def scenario():
            c = SearchController(providers, ["name"], debounce_ms=10, scheduler=AsyncioScheduler())
            c.set_query("pedro")
            c.set_query("maria")
            await asyncio.sleep(0.1)
            c.dispose()
            return c

        c = asyncio.run(scenario())
        assert c.committed_query == "maria"
        assert ids(c.results) == [2]
