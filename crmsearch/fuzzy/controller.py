"""Debounced, cancellable search over an in-memory record collection."""

from __future__ import annotations

import threading
from enum import Enum
from typing import Any, Callable, Dict, Generic, Iterable, List, Optional, Sequence, TypeVar

from crmsearch.fuzzy.rank import MatchResult, identity_results, rank
from crmsearch.fuzzy.scoring import DEFAULT_THRESHOLD
from crmsearch.fuzzy.timers import Scheduler, ThreadingScheduler, TimerHandle
from crmsearch.shared.config import SearchConfig

T = TypeVar("T")

DEFAULT_DEBOUNCE_MS = 150

EVENTS = ("pending", "results")


class SearchState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    SETTLED = "settled"


class SearchController(Generic[T]):
    """
    Owns one search box's query lifecycle.

    Every ``set_query`` restarts a debounce window; only when typing pauses
    for ``debounce_ms`` is the latest query committed and ranked. While a
    window is open the previously committed results stay visible.
    ``clear()`` resets to idle at once, and ``dispose()`` guarantees that no
    pending commit fires afterwards.

    Events (``on(event, callback)``):
      ``"pending"`` -- a debounce window opened; receives the raw query.
      ``"results"`` -- the visible results changed; receives the list.
    """

    def __init__(
        self,
        items: Iterable[T],
        field_paths: Sequence[str],
        threshold: int = DEFAULT_THRESHOLD,
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
        scheduler: Optional[Scheduler] = None,
    ) -> None:
        self._items: List[T] = list(items)
        self._field_paths = list(field_paths)
        self._threshold = threshold
        self._debounce_ms = debounce_ms
        self._scheduler: Scheduler = scheduler or ThreadingScheduler()

        self._lock = threading.RLock()
        self._query = ""
        self._committed_query = ""
        self._state = SearchState.IDLE
        self._results: List[MatchResult[T]] = identity_results(self._items)
        self._timer: TimerHandle | None = None
        # Bumped on every arm/cancel; a firing timer whose generation is stale is ignored.
        self._generation = 0
        self._disposed = False
        self._listeners: Dict[str, List[Callable[[Any], None]]] = {e: [] for e in EVENTS}

    @classmethod
    def from_config(
        cls,
        config: SearchConfig,
        items: Iterable[T],
        field_paths: Sequence[str] | None = None,
        scheduler: Optional[Scheduler] = None,
    ) -> "SearchController[T]":
        return cls(
            items,
            field_paths if field_paths is not None else config.fields,
            threshold=config.threshold,
            debounce_ms=config.debounce_ms,
            scheduler=scheduler,
        )

    # -- observers ---------------------------------------------------------

    def on(self, event: str, callback: Callable[[Any], None]) -> None:
        """Register a callback for 'pending' or 'results' events."""
        if event not in self._listeners:
            raise ValueError(f"unknown event: {event!r} (expected one of {', '.join(EVENTS)})")
        self._listeners[event].append(callback)

    def _emit(self, event: str, payload: Any) -> None:
        for cb in list(self._listeners.get(event, [])):
            cb(payload)

    # -- state -------------------------------------------------------------

    @property
    def query(self) -> str:
        return self._query

    @property
    def committed_query(self) -> str:
        return self._committed_query

    @property
    def state(self) -> SearchState:
        return self._state

    @property
    def is_pending(self) -> bool:
        return self._state is SearchState.PENDING

    @property
    def has_active_query(self) -> bool:
        return bool(self._committed_query.strip())

    @property
    def results(self) -> List[MatchResult[T]]:
        return list(self._results)

    @property
    def disposed(self) -> bool:
        return self._disposed

    # -- transitions -------------------------------------------------------

    def _cancel_timer(self) -> None:
        self._generation += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _rank(self) -> List[MatchResult[T]]:
        return rank(self._items, self._committed_query, self._field_paths, self._threshold)

    def set_query(self, query: str) -> None:
        """Record a keystroke and (re)start the debounce window."""
        if not query:
            self.clear()
            return
        with self._lock:
            if self._disposed:
                return
            self._query = query
            self._cancel_timer()
            generation = self._generation
            self._timer = self._scheduler.call_later(
                self._debounce_ms / 1000.0, lambda: self._settle(generation)
            )
            self._state = SearchState.PENDING
            self._emit("pending", query)

    def _settle(self, generation: int) -> None:
        with self._lock:
            if self._disposed or generation != self._generation:
                return
            self._timer = None
            self._committed_query = self._query
            self._results = self._rank()
            self._state = SearchState.SETTLED
            self._emit("results", list(self._results))

    def clear(self) -> None:
        """Reset to idle immediately, dropping any pending commit."""
        with self._lock:
            if self._disposed:
                return
            self._cancel_timer()
            self._query = ""
            self._committed_query = ""
            self._state = SearchState.IDLE
            self._results = identity_results(self._items)
            self._emit("results", list(self._results))

    def set_items(self, items: Iterable[T]) -> None:
        """Swap the collection and re-rank against the committed query."""
        with self._lock:
            if self._disposed:
                return
            self._items = list(items)
            self._results = self._rank()
            self._emit("results", list(self._results))

    def dispose(self) -> None:
        """Cancel any pending commit and detach all listeners."""
        with self._lock:
            self._cancel_timer()
            self._disposed = True
            if self._state is SearchState.PENDING:
                self._state = SearchState.SETTLED if self._committed_query else SearchState.IDLE
            for callbacks in self._listeners.values():
                callbacks.clear()

    def __enter__(self) -> "SearchController[T]":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.dispose()
