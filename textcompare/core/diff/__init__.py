"""
Diff module for word comparison.

Provides:
- The word-level diff oracle
- Offset to line/column mapping
- Per-side highlight span building
"""

from textcompare.core.diff.word_diff import (
    DiffOracle,
    WordDiffEngine,
    WordDiffOptions,
    reconstruct,
    verify_operations,
)
from textcompare.core.diff.positions import (
    offset_to_position,
    span_to_range,
)
from textcompare.core.diff.spans import (
    build_spans,
    build_all_spans,
)

__all__ = [
    # Oracle
    'DiffOracle',
    'WordDiffEngine',
    'WordDiffOptions',
    'reconstruct',
    'verify_operations',
    # Positions
    'offset_to_position',
    'span_to_range',
    # Spans
    'build_spans',
    'build_all_spans',
]
