"""
Highlight span building.

Walks a diff operation list once for one side and emits the offset ranges
of that side's text that are absent from the other side.
"""

from __future__ import annotations

from typing import Sequence

from textcompare.core.models import DiffOpKind, DiffOperation, HighlightSpan, Side


# Operation kind that exists only on the given side
_OWN_KIND = {
    Side.LEFT: DiffOpKind.DELETE,
    Side.RIGHT: DiffOpKind.INSERT,
}


def build_spans(operations: Sequence[DiffOperation], side: Side) -> list[HighlightSpan]:
    """
    Build the highlight spans for one side.

    Span boundaries mirror operation boundaries exactly: two consecutive
    operations of the highlighted kind give two spans.

    Args:
        operations: Ordered diff operations for the left/right pair
        side: Side whose text the spans refer to

    Returns:
        Spans in increasing offset order
    """
    own_kind = _OWN_KIND[side]
    other_kind = _OWN_KIND[side.other]

    spans: list[HighlightSpan] = []
    cursor = 0

    for op in operations:
        length = len(op.text)
        if op.kind is other_kind:
            continue
        if op.kind is own_kind and length:
            spans.append(HighlightSpan(side=side, start=cursor, end=cursor + length))
        cursor += length

    return spans


def build_all_spans(operations: Sequence[DiffOperation]) -> dict[Side, list[HighlightSpan]]:
    """Build spans for both sides from the same operation list."""
    return {side: build_spans(operations, side) for side in Side}
