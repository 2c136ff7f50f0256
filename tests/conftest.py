"""
Shared fixtures: an in-memory view and a manually driven frame scheduler.
"""

from __future__ import annotations

from typing import Callable, Optional, Sequence

import pytest

from textcompare.core.exceptions import ViewDisposedError
from textcompare.core.models import Decoration, DecorationHandleSet, Side
from textcompare.core.views import FrameScheduler, ViewHandle


class FakeView(ViewHandle):
    """
    View that records what the core does to it.

    Like a Qt scroll bar, writing a new offset fires the scroll callbacks
    synchronously unless sync_echo is False; fire() then delivers the
    event later.
    """

    def __init__(self, name: str = "view", sync_echo: bool = True, max_offset: Optional[int] = None):
        self.name = name
        self.sync_echo = sync_echo
        self.max_offset = max_offset
        self.offset = 0
        self.writes: list[int] = []
        self.decorations: list[Decoration] = []
        self.replace_calls = 0
        self.previous_seen: list[DecorationHandleSet] = []
        self._callbacks: list[Callable[[], None]] = []
        self._next_id = 0
        self._live: set[str] = set()
        self.disposed = False

    def _check(self) -> None:
        if self.disposed:
            raise ViewDisposedError(f"{self.name} is disposed")

    def get_scroll_offset(self) -> int:
        self._check()
        return self.offset

    def set_scroll_offset(self, value: int) -> None:
        self._check()
        self.writes.append(value)
        if self.max_offset is not None:
            value = min(value, self.max_offset)
        changed = value != self.offset
        self.offset = value
        if changed and self.sync_echo:
            self.fire()

    def user_scroll(self, value: int) -> None:
        """Simulate the user moving this view."""
        self.offset = value
        self.fire()

    def fire(self) -> None:
        for callback in list(self._callbacks):
            callback()

    def on_scroll_changed(self, callback: Callable[[], None]):
        self._check()
        self._callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    @property
    def listener_count(self) -> int:
        return len(self._callbacks)

    def replace_decorations(
        self,
        previous: DecorationHandleSet,
        decorations: Sequence[Decoration]
    ) -> DecorationHandleSet:
        self._check()
        self.replace_calls += 1
        self.previous_seen.append(previous)
        self._live.difference_update(previous)

        ids = []
        for _ in decorations:
            self._next_id += 1
            ids.append(f"{self.name}-{self._next_id}")
        self._live.update(ids)
        self.decorations = list(decorations)
        return DecorationHandleSet(tuple(ids))

    @property
    def live_handles(self) -> set[str]:
        return set(self._live)

    def dispose(self) -> None:
        self.disposed = True
        self._callbacks.clear()


class ManualScheduler(FrameScheduler):
    """Scheduler whose callbacks run only when the test says so."""

    def __init__(self):
        self._pending: dict[int, Callable[[], None]] = {}
        self._next_token = 0
        self.scheduled: list[Callable[[], None]] = []
        self.cancelled: list[int] = []

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def schedule(self, callback: Callable[[], None]) -> int:
        self._next_token += 1
        self._pending[self._next_token] = callback
        self.scheduled.append(callback)
        return self._next_token

    def cancel(self, token: int) -> None:
        self.cancelled.append(token)
        self._pending.pop(token, None)

    def run_pending(self) -> int:
        """Run every callback scheduled so far; returns how many ran."""
        callbacks = list(self._pending.values())
        self._pending.clear()
        for callback in callbacks:
            callback()
        return len(callbacks)


class MemoryStore:
    """Buffer persistence kept in a dict; can be told to fail."""

    def __init__(self, initial: Optional[dict[Side, str]] = None, fail_saves: bool = False):
        self.data: dict[Side, str] = dict(initial or {})
        self.fail_saves = fail_saves
        self.saves: list[tuple[Side, str]] = []

    def load(self, side: Side) -> str:
        return self.data.get(side, "")

    def save(self, side: Side, content: str) -> bool:
        self.saves.append((side, content))
        if self.fail_saves:
            return False
        self.data[side] = content
        return True


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def left_view() -> FakeView:
    return FakeView("left")


@pytest.fixture
def right_view() -> FakeView:
    return FakeView("right")
