"""
Word-level diff engine.

Provides the diff oracle used by the comparison view:
- Tokenization into words, whitespace runs and punctuation
- Token-level matching with difflib
- Merged, ordered Equal/Insert/Delete operations
- Summary statistics
"""

from __future__ import annotations

import difflib
import logging
import re
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from textcompare.core.models import DiffOpKind, DiffOperation, WordDiffStatistics


DiffOracle = Callable[[str, str], Sequence[DiffOperation]]

_TOKEN_PATTERN = re.compile(r'\w+|\s+|[^\w\s]')


@dataclass
class WordDiffOptions:
    """Options for word comparison."""
    max_tokens: int = 20000  # Above this, the texts are shown as fully replaced


class WordDiffEngine:
    """
    Engine for comparing two texts word by word.

    The result is deterministic: the same pair of texts always gives the
    same operation list.
    """

    def __init__(self, options: Optional[WordDiffOptions] = None):
        self.options = options or WordDiffOptions()

    def __call__(self, left: str, right: str) -> list[DiffOperation]:
        return self.diff(left, right)

    def tokenize(self, text: str) -> list[str]:
        """Tokenize text into words, whitespace runs and punctuation."""
        return _TOKEN_PATTERN.findall(text)

    def diff(self, left: str, right: str) -> list[DiffOperation]:
        """
        Compare two texts.

        Args:
            left: Original text
            right: Modified text

        Returns:
            Ordered operations; no operation has empty text
        """
        operations: list[DiffOperation] = []

        if left == right:
            self._append(operations, DiffOpKind.EQUAL, left)
            return operations

        left_tokens = self.tokenize(left)
        right_tokens = self.tokenize(right)

        if len(left_tokens) + len(right_tokens) > self.options.max_tokens:
            logging.info(
                f"WordDiffEngine - {len(left_tokens) + len(right_tokens)} tokens "
                f"exceed limit of {self.options.max_tokens}, skipping word matching"
            )
            self._append(operations, DiffOpKind.DELETE, left)
            self._append(operations, DiffOpKind.INSERT, right)
            return operations

        matcher = difflib.SequenceMatcher(None, left_tokens, right_tokens, autojunk=False)

        for tag, i1, i2, j1, j2 in matcher.get_opcodes():
            if tag == 'equal':
                self._append(operations, DiffOpKind.EQUAL, ''.join(left_tokens[i1:i2]))
            elif tag == 'delete':
                self._append(operations, DiffOpKind.DELETE, ''.join(left_tokens[i1:i2]))
            elif tag == 'insert':
                self._append(operations, DiffOpKind.INSERT, ''.join(right_tokens[j1:j2]))
            elif tag == 'replace':
                # Removed text precedes the text that replaces it
                self._append(operations, DiffOpKind.DELETE, ''.join(left_tokens[i1:i2]))
                self._append(operations, DiffOpKind.INSERT, ''.join(right_tokens[j1:j2]))

        return operations

    def statistics(self, operations: Sequence[DiffOperation]) -> WordDiffStatistics:
        """Calculate token and character counts for an operation list."""
        stats = WordDiffStatistics()

        for op in operations:
            tokens = len(self.tokenize(op.text))
            if op.kind is DiffOpKind.EQUAL:
                stats.equal_tokens += tokens
                stats.equal_chars += len(op.text)
            elif op.kind is DiffOpKind.INSERT:
                stats.inserted_tokens += tokens
                stats.inserted_chars += len(op.text)
            elif op.kind is DiffOpKind.DELETE:
                stats.deleted_tokens += tokens
                stats.deleted_chars += len(op.text)

        return stats

    def _append(
        self,
        operations: list[DiffOperation],
        kind: DiffOpKind,
        text: str
    ) -> None:
        """Append an operation, merging with a preceding one of the same kind."""
        if not text:
            return
        if operations and operations[-1].kind is kind:
            operations[-1] = DiffOperation(kind, operations[-1].text + text)
        else:
            operations.append(DiffOperation(kind, text))


def reconstruct(operations: Sequence[DiffOperation]) -> tuple[str, str]:
    """Rebuild the (left, right) inputs from an operation list."""
    left = ''.join(op.text for op in operations if op.kind is not DiffOpKind.INSERT)
    right = ''.join(op.text for op in operations if op.kind is not DiffOpKind.DELETE)
    return left, right


def verify_operations(operations: Sequence[DiffOperation], left: str, right: str) -> bool:
    """Check that operations reconstruct both inputs exactly."""
    return reconstruct(operations) == (left, right)
