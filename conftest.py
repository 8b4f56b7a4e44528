"""
Root conftest.py -- shared fixtures.

FakeScheduler is a virtual clock for SearchController: timers only fire
when a test calls advance().
"""
from __future__ import annotations

import copy
from typing import Callable

import pytest


class FakeTimer:
    def __init__(self, when: float, callback: Callable[[], None]) -> None:
        self.when = when
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    def __init__(self) -> None:
        self.now = 0.0
        self.timers: list[FakeTimer] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> FakeTimer:
        timer = FakeTimer(self.now + delay, callback)
        self.timers.append(timer)
        return timer

    @property
    def live(self) -> list[FakeTimer]:
        return [t for t in self.timers if not t.cancelled and not t.fired]

    def advance(self, seconds: float) -> None:
        self.now += seconds
        due = sorted((t for t in self.live if t.when <= self.now), key=lambda t: t.when)
        for t in due:
            if t.cancelled:
                continue
            t.fired = True
            t.callback()


PROVIDERS = [
    {"id": 1, "name": "João Silva", "email": "joao@example.pt", "nif": "123456789", "address": {"city": "Lisboa"}},
    {"id": 2, "name": "Maria Santos", "email": "maria.santos@example.pt", "nif": "987654321", "address": {"city": "Porto"}},
    {"id": 3, "name": "Rua João", "email": "", "nif": None, "address": None},
    {"id": 4, "name": "Pedro Costa", "email": "pedro@example.pt", "nif": "555666777", "address": {"city": "Lisboa"}},
]


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def providers() -> list[dict]:
    return copy.deepcopy(PROVIDERS)


@pytest.fixture
def isolated_cwd(tmp_path, monkeypatch):
    """Run from an empty directory so no local crmsearch.yaml is picked up."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("CRMSEARCH_THRESHOLD", raising=False)
    monkeypatch.delenv("CRMSEARCH_DEBOUNCE_MS", raising=False)
    return tmp_path
