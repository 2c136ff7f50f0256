"""
Boundary of the editing surface as seen by the core.

The core never touches widgets directly. It drives a pair of ViewHandle
objects and defers scroll writes through a FrameScheduler; the Qt layer
provides the concrete implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Sequence

from textcompare.core.models import ColumnUnit, Decoration, DecorationHandleSet


Unsubscribe = Callable[[], None]


class ViewHandle(ABC):
    """
    One scrollable, decoratable editor pane.

    Every method may raise ViewDisposedError once the underlying widget
    has been torn down.
    """

    column_unit: ColumnUnit = ColumnUnit.CODE_POINTS

    @abstractmethod
    def get_scroll_offset(self) -> int:
        """Current vertical scroll offset."""
        pass

    @abstractmethod
    def set_scroll_offset(self, value: int) -> None:
        """Scroll vertically; may fire the view's own scroll callbacks."""
        pass

    @abstractmethod
    def on_scroll_changed(self, callback: Callable[[], None]) -> Unsubscribe:
        """Register a vertical scroll listener; returns its detach function."""
        pass

    @abstractmethod
    def replace_decorations(
        self,
        previous: DecorationHandleSet,
        decorations: Sequence[Decoration]
    ) -> DecorationHandleSet:
        """Remove the previous decorations and show the new ones in one step."""
        pass

    @abstractmethod
    def dispose(self) -> None:
        """Release the view; later calls raise ViewDisposedError."""
        pass


class FrameScheduler(ABC):
    """Runs a callback once on a later event-loop tick."""

    @abstractmethod
    def schedule(self, callback: Callable[[], None]) -> Any:
        """Schedule callback; returns a token for cancel()."""
        pass

    @abstractmethod
    def cancel(self, token: Any) -> None:
        """Cancel a scheduled callback that has not run yet."""
        pass
