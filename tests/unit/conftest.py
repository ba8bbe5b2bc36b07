from typing import List, Sequence

import pytest

from page_matchers.core.options import FindOptions


class FakeClock:
    """Millisecond clock that only moves when something sleeps."""

    def __init__(self, start: int = 1_000) -> None:
        self.now = start
        self.sleeps: List[int] = []

    def __call__(self) -> int:
        return self.now

    def sleep(self, ms: int) -> None:
        self.sleeps.append(ms)
        self.now += ms


class ScriptedNode:
    """Live node whose match count follows a script; the last entry repeats."""

    supports_waiting = True

    def __init__(self, counts: Sequence[int]) -> None:
        self.counts = list(counts)
        self.calls: List[tuple] = []

    def query(self, selector: str, options: FindOptions) -> list:
        idx = min(len(self.calls), len(self.counts) - 1)
        self.calls.append((selector, options))
        return [object() for _ in range(self.counts[idx])]


class BrokenNode:
    supports_waiting = True

    def __init__(self, exc: Exception) -> None:
        self.exc = exc
        self.calls = 0

    def query(self, selector: str, options: FindOptions) -> list:
        self.calls += 1
        raise self.exc


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
