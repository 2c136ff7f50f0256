"""
UI-agnostic core of the comparison view.

Turns a word diff of two buffers into highlight ranges, reconciles them
against what each view displays, and keeps the views scrolled together.
"""

from textcompare.core.models import (
    Side,
    DiffOpKind,
    DiffOperation,
    HighlightSpan,
    Position,
    TextRange,
    StyleTag,
    Decoration,
    DecorationHandleSet,
    ScrollMode,
    ColumnUnit,
    DiffSnapshot,
)
from textcompare.core.exceptions import (
    TextCompareError,
    ViewDisposedError,
    StorageError,
)
from textcompare.core.views import ViewHandle, FrameScheduler
from textcompare.core.decorations import reconcile, default_style_for
from textcompare.core.scroll_sync import ScrollSynchronizer
from textcompare.core.controller import DiffViewController

__all__ = [
    # Models
    'Side',
    'DiffOpKind',
    'DiffOperation',
    'HighlightSpan',
    'Position',
    'TextRange',
    'StyleTag',
    'Decoration',
    'DecorationHandleSet',
    'ScrollMode',
    'ColumnUnit',
    'DiffSnapshot',
    # Errors
    'TextCompareError',
    'ViewDisposedError',
    'StorageError',
    # Collaborators
    'ViewHandle',
    'FrameScheduler',
    'reconcile',
    'default_style_for',
    'ScrollSynchronizer',
    'DiffViewController',
]
