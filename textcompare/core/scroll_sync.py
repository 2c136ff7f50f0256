"""
Synchronized vertical scrolling of two views.

Scrolling one view moves the other to the same offset on the next frame.
Writing a view's offset fires that view's own scroll event, so the
synchronizer is a two-state machine with a single pending callback:

    IDLE --scroll from X--> SYNCING --callback: write other view--> IDLE

While SYNCING, further events from X only update the recorded offset and
events from the view being driven are echoes and are dropped.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import Any, Optional

from textcompare.core.exceptions import ViewDisposedError
from textcompare.core.models import ScrollMode, Side
from textcompare.core.views import FrameScheduler, Unsubscribe, ViewHandle


class ScrollSynchronizer:
    """
    Mirrors the vertical scroll offset between a left and a right view.

    Best effort: a view that disappears mid-flight is ignored, never
    reported. After dispose() no offset is ever written.
    """

    def __init__(
        self,
        left: ViewHandle,
        right: ViewHandle,
        scheduler: FrameScheduler
    ):
        self._views: dict[Side, ViewHandle] = {Side.LEFT: left, Side.RIGHT: right}
        self._scheduler = scheduler

        # State
        self._mode = ScrollMode.IDLE
        self._source: Optional[Side] = None
        self._pending_offset: Optional[int] = None
        self._pending_token: Any = None
        self._echo: Optional[tuple[Side, int]] = None
        self._enabled = True
        self._disposed = False

        self._unsubscribers: list[Unsubscribe] = [
            view.on_scroll_changed(partial(self._on_scroll, side))
            for side, view in self._views.items()
        ]

    @property
    def mode(self) -> ScrollMode:
        return self._mode

    @property
    def is_pending(self) -> bool:
        """True while a deferred write is scheduled."""
        return self._pending_token is not None

    @property
    def is_enabled(self) -> bool:
        return self._enabled

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def set_enabled(self, enabled: bool) -> None:
        """Enable/disable synchronization; disabling drops a pending write."""
        self._enabled = enabled
        if not enabled:
            self._cancel_pending()
            self._reset()

    def dispose(self) -> None:
        """Detach listeners and cancel any pending write."""
        if self._disposed:
            return
        self._disposed = True
        self._cancel_pending()
        self._reset()

        for unsubscribe in self._unsubscribers:
            try:
                unsubscribe()
            except ViewDisposedError:
                pass
        self._unsubscribers.clear()
        logging.debug("ScrollSynchronizer - Disposed")

    def _on_scroll(self, side: Side) -> None:
        """Handle a scroll event from one view."""
        if self._disposed or not self._enabled:
            return

        if self._mode is ScrollMode.SYNCING:
            # Coalesce: only the driving view's latest offset matters
            if side is self._source:
                offset = self._read(side)
                if offset is not None:
                    self._pending_offset = offset
            return

        offset = self._read(side)
        if offset is None:
            return

        echo, self._echo = self._echo, None
        if echo == (side, offset):
            return

        self._source = side
        self._pending_offset = offset
        self._mode = ScrollMode.SYNCING
        self._pending_token = self._scheduler.schedule(self._apply)

    def _apply(self) -> None:
        """Deferred callback: write the recorded offset to the other view."""
        self._pending_token = None
        if self._disposed or self._source is None or self._pending_offset is None:
            self._reset()
            return

        target = self._source.other
        offset = self._pending_offset
        try:
            self._views[target].set_scroll_offset(offset)
            actual = self._read(target)
            if actual is not None:
                self._echo = (target, actual)
        except ViewDisposedError as e:
            logging.debug(f"ScrollSynchronizer - Failed to scroll {target.value} view: {e}")
        finally:
            self._reset()

    def _read(self, side: Side) -> Optional[int]:
        try:
            return self._views[side].get_scroll_offset()
        except ViewDisposedError as e:
            logging.debug(f"ScrollSynchronizer - Failed to read {side.value} view: {e}")
            return None

    def _cancel_pending(self) -> None:
        if self._pending_token is not None:
            self._scheduler.cancel(self._pending_token)
            self._pending_token = None

    def _reset(self) -> None:
        self._mode = ScrollMode.IDLE
        self._source = None
        self._pending_offset = None
