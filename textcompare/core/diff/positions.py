"""
Offset to line/column mapping.

Editors address text by 1-based line and column; the diff works on flat
character offsets. Columns follow the editing surface's convention: Python
code points, or UTF-16 code units for Qt.
"""

from __future__ import annotations

import logging

from textcompare.core.models import ColumnUnit, HighlightSpan, Position, TextRange


def _utf16_length(text: str) -> int:
    """Number of UTF-16 code units needed to encode text."""
    return len(text) + sum(1 for ch in text if ord(ch) > 0xFFFF)


def clamp_offset(text: str, offset: int) -> int:
    """Clamp offset into 0..len(text)."""
    if offset < 0:
        logging.debug(f"PositionMapper - Offset {offset} below 0, clamped")
        return 0
    if offset > len(text):
        logging.debug(
            f"PositionMapper - Offset {offset} beyond end ({len(text)}), clamped"
        )
        return len(text)
    return offset


def offset_to_position(
    text: str,
    offset: int,
    unit: ColumnUnit = ColumnUnit.CODE_POINTS
) -> Position:
    """
    Convert a flat character offset into a 1-based position.

    Args:
        text: Buffer content the offset refers to
        offset: 0-based offset; out-of-range values are clamped
        unit: Column convention of the target editor

    Returns:
        Position of the character at offset (or end of text)
    """
    offset = clamp_offset(text, offset)

    line = text.count('\n', 0, offset) + 1
    line_start = text.rfind('\n', 0, offset) + 1

    if unit is ColumnUnit.UTF16:
        column = _utf16_length(text[line_start:offset]) + 1
    else:
        column = offset - line_start + 1

    return Position(line=line, column=column)


def span_to_range(
    text: str,
    span: HighlightSpan,
    unit: ColumnUnit = ColumnUnit.CODE_POINTS
) -> TextRange:
    """Convert a highlight span into a line/column range."""
    start = clamp_offset(text, span.start)
    end = max(start, clamp_offset(text, span.end))
    return TextRange(
        start=offset_to_position(text, start, unit),
        end=offset_to_position(text, end, unit),
    )
