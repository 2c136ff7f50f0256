"""
Qt implementation of the frame scheduler.
"""

from __future__ import annotations

from functools import partial
from typing import Callable, Optional

from PyQt6.QtCore import QObject, QTimer

from textcompare.core.views import FrameScheduler


class QtFrameScheduler(FrameScheduler):
    """
    Defers callbacks to a later turn of the Qt event loop.

    Each scheduled callback gets its own single-shot timer; the timer is
    the cancellation token. Pending timers are held by the scheduler until
    they fire or are cancelled, so callers may drop the token.
    """

    def __init__(self, interval_ms: int = 16, parent: Optional[QObject] = None):
        self.interval_ms = interval_ms
        self._parent = parent
        self._timers: set[QTimer] = set()

    @property
    def pending_count(self) -> int:
        return len(self._timers)

    def schedule(self, callback: Callable[[], None]) -> QTimer:
        timer = QTimer(self._parent)
        timer.setSingleShot(True)
        timer.setInterval(max(0, self.interval_ms))
        timer.timeout.connect(partial(self._fire, timer, callback))
        self._timers.add(timer)
        timer.start()
        return timer

    def cancel(self, token: QTimer) -> None:
        if token not in self._timers:
            return
        self._timers.discard(token)
        token.stop()
        token.deleteLater()

    def _fire(self, timer: QTimer, callback: Callable[[], None]) -> None:
        if timer not in self._timers:
            return
        self._timers.discard(timer)
        timer.deleteLater()
        callback()
