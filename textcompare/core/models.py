"""
Core data models for the text comparison core.

This module defines the data structures passed between the diff oracle,
span builder, decoration reconciler and scroll synchronizer:
- Diff operations and highlight spans
- Editor coordinates (positions, ranges)
- Decorations and opaque decoration handles
- Buffer snapshots and per-recomputation results

All models are UI-agnostic; the Qt layer only sees Decoration and
DecorationHandleSet.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterator


# =============================================================================
# Enumerations
# =============================================================================

class Side(Enum):
    """Which pane of the comparison a value belongs to."""
    LEFT = "left"
    RIGHT = "right"

    @property
    def other(self) -> 'Side':
        """The opposite pane."""
        return Side.RIGHT if self is Side.LEFT else Side.LEFT


class DiffOpKind(Enum):
    """Kind of a word-level diff operation."""
    EQUAL = auto()   # Present on both sides
    INSERT = auto()  # Present only on the right
    DELETE = auto()  # Present only on the left


class StyleTag(Enum):
    """Display style of a highlight."""
    ADDED = "added"
    REMOVED = "removed"


class ScrollMode(Enum):
    """State of a scroll synchronizer."""
    IDLE = auto()
    SYNCING = auto()


class ColumnUnit(Enum):
    """How an editing surface counts columns within a line."""
    CODE_POINTS = auto()  # Python str indexing
    UTF16 = auto()        # Qt, browsers


# =============================================================================
# Text Models
# =============================================================================

@dataclass
class TextBuffer:
    """Editable content of one pane."""
    side: Side
    content: str = ""

    def snapshot(self) -> 'TextBuffer':
        """Copy of the buffer, unaffected by later edits."""
        return TextBuffer(side=self.side, content=self.content)


@dataclass(frozen=True)
class DiffOperation:
    """
    One unit of a word-level comparison result.

    Concatenating the text of every non-DELETE operation gives the right
    input; every non-INSERT operation gives the left input.
    """
    kind: DiffOpKind
    text: str

    @property
    def length(self) -> int:
        return len(self.text)


@dataclass(frozen=True)
class HighlightSpan:
    """Half-open, 0-based offset range of one side's buffer to highlight."""
    side: Side
    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start

    def extract(self, text: str) -> str:
        """Characters of text covered by the span."""
        return text[self.start:self.end]


@dataclass(frozen=True)
class Position:
    """1-based line/column location within a buffer."""
    line: int
    column: int


@dataclass(frozen=True)
class TextRange:
    """Range between two positions, end exclusive."""
    start: Position
    end: Position

    @property
    def is_empty(self) -> bool:
        return self.start == self.end


# =============================================================================
# Decoration Models
# =============================================================================

@dataclass(frozen=True)
class Decoration:
    """A styled range the view is asked to display."""
    range: TextRange
    style: StyleTag


@dataclass(frozen=True)
class DecorationHandleSet:
    """
    Opaque identifiers of the decorations currently shown by one view.

    Returned by a view when decorations are replaced and handed back to
    it on the next replacement. Nothing else reads the identifiers.
    """
    handles: tuple[str, ...] = ()

    @classmethod
    def empty(cls) -> 'DecorationHandleSet':
        return cls()

    def __len__(self) -> int:
        return len(self.handles)

    def __iter__(self) -> Iterator[str]:
        return iter(self.handles)


# =============================================================================
# Result Models
# =============================================================================

@dataclass
class WordDiffStatistics:
    """Token and character counts of a word diff."""
    equal_tokens: int = 0
    inserted_tokens: int = 0
    deleted_tokens: int = 0
    equal_chars: int = 0
    inserted_chars: int = 0
    deleted_chars: int = 0

    @property
    def is_identical(self) -> bool:
        return self.inserted_chars == 0 and self.deleted_chars == 0

    @property
    def similarity_ratio(self) -> float:
        """
        Share of characters common to both sides (0.0 to 1.0).

        Two empty texts are identical and score 1.0.
        """
        total = 2 * self.equal_chars + self.inserted_chars + self.deleted_chars
        if total == 0:
            return 1.0
        return (2 * self.equal_chars) / total

    def __str__(self) -> str:
        return (f"+{self.inserted_tokens} -{self.deleted_tokens} "
                f"={self.equal_tokens}")


@dataclass
class DiffSnapshot:
    """Everything derived from one snapshot pair of the two buffers."""
    left_text: str
    right_text: str
    operations: list[DiffOperation] = field(default_factory=list)
    left_spans: list[HighlightSpan] = field(default_factory=list)
    right_spans: list[HighlightSpan] = field(default_factory=list)
    statistics: WordDiffStatistics = field(default_factory=WordDiffStatistics)

    def text(self, side: Side) -> str:
        return self.left_text if side is Side.LEFT else self.right_text

    def spans(self, side: Side) -> list[HighlightSpan]:
        return self.left_spans if side is Side.LEFT else self.right_spans
