"""
Decoration reconciliation.

Replaces everything a view currently highlights with the highlights implied
by a new span list, in a single call against the view.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from textcompare.core.diff.positions import span_to_range
from textcompare.core.exceptions import ViewDisposedError
from textcompare.core.models import (
    ColumnUnit,
    Decoration,
    DecorationHandleSet,
    HighlightSpan,
    Side,
    StyleTag,
)
from textcompare.core.views import ViewHandle


StyleFor = Callable[[Side], StyleTag]


def default_style_for(side: Side) -> StyleTag:
    """Text only on the left was removed; text only on the right was added."""
    return StyleTag.REMOVED if side is Side.LEFT else StyleTag.ADDED


def build_decorations(
    spans: Sequence[HighlightSpan],
    text: str,
    style_for: StyleFor = default_style_for,
    unit: ColumnUnit = ColumnUnit.CODE_POINTS
) -> list[Decoration]:
    """Convert spans into styled line/column decorations."""
    return [
        Decoration(range=span_to_range(text, span, unit), style=style_for(span.side))
        for span in spans
    ]


def reconcile(
    view: ViewHandle,
    previous_handles: DecorationHandleSet,
    spans: Sequence[HighlightSpan],
    text: str,
    style_for: StyleFor = default_style_for,
    unit: Optional[ColumnUnit] = None
) -> DecorationHandleSet:
    """
    Make a view display exactly the highlights for spans.

    Args:
        view: Target view
        previous_handles: Handles returned by the previous call for this view
        spans: Spans relative to text
        text: Buffer content the spans were computed against
        style_for: Style of each side's highlights
        unit: Column convention; defaults to the view's own

    Returns:
        Handles to pass back on the next call. If the view is gone the
        previous handles are returned unchanged.
    """
    if unit is None:
        unit = getattr(view, 'column_unit', ColumnUnit.CODE_POINTS)

    decorations = build_decorations(spans, text, style_for, unit)

    try:
        return view.replace_decorations(previous_handles, decorations)
    except ViewDisposedError as e:
        logging.debug(f"DecorationReconciler - View unavailable, skipping: {e}")
        return previous_handles
