"""
Comparison view controller.

Owns the two buffers and the view handles. Every buffer change recomputes
the word diff from one snapshot pair and updates both views' highlights in
the same synchronous pass.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Protocol

from textcompare.core.decorations import StyleFor, default_style_for, reconcile
from textcompare.core.diff.spans import build_all_spans
from textcompare.core.diff.word_diff import DiffOracle, WordDiffEngine, verify_operations
from textcompare.core.exceptions import ViewDisposedError
from textcompare.core.models import (
    DecorationHandleSet,
    DiffSnapshot,
    Side,
    TextBuffer,
)
from textcompare.core.scroll_sync import ScrollSynchronizer
from textcompare.core.views import FrameScheduler, ViewHandle


SnapshotObserver = Callable[[DiffSnapshot], None]


class BufferPersistence(Protocol):
    """Load/save of one string per side."""

    def load(self, side: Side) -> str: ...

    def save(self, side: Side, content: str) -> bool: ...


class DiffViewController:
    """
    Top-level orchestrator of the comparison view.

    Decoration handle sets and the scroll synchronizer are owned here and
    threaded explicitly into the reconciler; nothing else keeps them.
    """

    def __init__(
        self,
        scheduler: FrameScheduler,
        oracle: Optional[DiffOracle] = None,
        store: Optional[BufferPersistence] = None,
        style_for: Optional[StyleFor] = None
    ):
        self._scheduler = scheduler
        self._engine = WordDiffEngine()
        self._oracle: DiffOracle = oracle or self._engine.diff
        self._store = store
        self._style_for = style_for or default_style_for

        self._buffers: dict[Side, TextBuffer] = {side: TextBuffer(side) for side in Side}
        self._views: dict[Side, ViewHandle] = {}
        self._handles: dict[Side, DecorationHandleSet] = {
            side: DecorationHandleSet.empty() for side in Side
        }
        self._synchronizer: Optional[ScrollSynchronizer] = None
        self._sync_enabled = True
        self._snapshot: Optional[DiffSnapshot] = None
        self._observers: list[SnapshotObserver] = []

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    def text(self, side: Side) -> str:
        return self._buffers[side].content

    def handles(self, side: Side) -> DecorationHandleSet:
        return self._handles[side]

    def view(self, side: Side) -> Optional[ViewHandle]:
        return self._views.get(side)

    @property
    def snapshot(self) -> Optional[DiffSnapshot]:
        """Result of the latest recomputation."""
        return self._snapshot

    @property
    def synchronizer(self) -> Optional[ScrollSynchronizer]:
        return self._synchronizer

    # -------------------------------------------------------------------------
    # Buffers
    # -------------------------------------------------------------------------

    def load(self) -> DiffSnapshot:
        """Read both buffers from the store and recompute."""
        if self._store is not None:
            for side in Side:
                try:
                    self._buffers[side].content = self._store.load(side)
                except Exception as e:
                    logging.error(f"DiffViewController - Failed to load {side.value} buffer: {e}", exc_info=True)
                    self._buffers[side].content = ""
        return self.recompute()

    def set_text(self, side: Side, content: str) -> Optional[DiffSnapshot]:
        """
        Apply a user edit to one buffer.

        The new content is saved first; a failing save is logged and the
        highlights are updated regardless.

        Returns:
            The new snapshot, or None if the content did not change
        """
        buffer = self._buffers[side]
        if buffer.content == content:
            return None

        buffer.content = content
        self._save(side, content)
        return self.recompute()

    def swap_sides(self) -> DiffSnapshot:
        """Exchange the contents of the two buffers."""
        left = self._buffers[Side.LEFT].content
        right = self._buffers[Side.RIGHT].content
        self._buffers[Side.LEFT].content = right
        self._buffers[Side.RIGHT].content = left
        self._save(Side.LEFT, right)
        self._save(Side.RIGHT, left)
        return self.recompute()

    def clear(self) -> DiffSnapshot:
        """Empty both buffers."""
        for side in Side:
            self._buffers[side].content = ""
            self._save(side, "")
        return self.recompute()

    def _save(self, side: Side, content: str) -> None:
        if self._store is None:
            return
        try:
            if not self._store.save(side, content):
                logging.warning(f"DiffViewController - {side.value} buffer was not saved")
        except Exception as e:
            logging.error(f"DiffViewController - Failed to save {side.value} buffer: {e}", exc_info=True)

    # -------------------------------------------------------------------------
    # Diff
    # -------------------------------------------------------------------------

    def recompute(self) -> DiffSnapshot:
        """
        Diff the current buffers and update every attached view.

        The oracle is called once; both sides' spans come from the same
        operation list and the same snapshot pair.
        """
        left = self._buffers[Side.LEFT].snapshot()
        right = self._buffers[Side.RIGHT].snapshot()

        operations = list(self._oracle(left.content, right.content))
        if not verify_operations(operations, left.content, right.content):
            logging.warning(
                "DiffViewController - Diff operations do not reconstruct the inputs; "
                "highlights may be inaccurate"
            )

        spans = build_all_spans(operations)
        snapshot = DiffSnapshot(
            left_text=left.content,
            right_text=right.content,
            operations=operations,
            left_spans=spans[Side.LEFT],
            right_spans=spans[Side.RIGHT],
            statistics=self._engine.statistics(operations),
        )
        self._snapshot = snapshot

        for side in list(self._views):
            self._apply(side, snapshot)

        self._notify_observers(snapshot)
        return snapshot

    def _apply(self, side: Side, snapshot: DiffSnapshot) -> None:
        """Reconcile one view against a snapshot."""
        self._handles[side] = reconcile(
            self._views[side],
            self._handles[side],
            snapshot.spans(side),
            snapshot.text(side),
            self._style_for,
        )

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    def attach_view(self, side: Side, view: ViewHandle) -> None:
        """
        Bind a view to one side.

        The view immediately shows the current highlights. Once both sides
        are bound, scroll synchronization starts.
        """
        if side in self._views:
            self.detach_view(side)

        self._views[side] = view
        self._handles[side] = DecorationHandleSet.empty()

        if self._snapshot is None:
            self.recompute()
        else:
            self._apply(side, self._snapshot)

        if len(self._views) == len(Side):
            self._start_scroll_sync()

    def detach_view(self, side: Side) -> None:
        """Unbind a view; scroll synchronization stops."""
        self._stop_scroll_sync()
        self._views.pop(side, None)
        self._handles[side] = DecorationHandleSet.empty()

    def set_scroll_sync_enabled(self, enabled: bool) -> None:
        """Enable/disable synchronized scrolling."""
        self._sync_enabled = enabled
        if self._synchronizer is not None:
            self._synchronizer.set_enabled(enabled)

    def _start_scroll_sync(self) -> None:
        self._stop_scroll_sync()
        try:
            self._synchronizer = ScrollSynchronizer(
                self._views[Side.LEFT],
                self._views[Side.RIGHT],
                self._scheduler,
            )
        except ViewDisposedError as e:
            logging.warning(f"DiffViewController - Scroll sync not started: {e}")
            return
        self._synchronizer.set_enabled(self._sync_enabled)

    def _stop_scroll_sync(self) -> None:
        if self._synchronizer is not None:
            self._synchronizer.dispose()
            self._synchronizer = None

    def dispose(self) -> None:
        """Detach both views."""
        for side in list(self._views):
            self.detach_view(side)

    # -------------------------------------------------------------------------
    # Observers
    # -------------------------------------------------------------------------

    def add_observer(self, callback: SnapshotObserver) -> None:
        """Add a callback notified after each recomputation."""
        self._observers.append(callback)

    def remove_observer(self, callback: SnapshotObserver) -> None:
        if callback in self._observers:
            self._observers.remove(callback)

    def _notify_observers(self, snapshot: DiffSnapshot) -> None:
        for callback in self._observers:
            try:
                callback(snapshot)
            except Exception as e:
                logging.error(f"DiffViewController - Snapshot observer failed: {e}", exc_info=True)
