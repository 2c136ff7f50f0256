"""
Editable text widget for one comparison pane.

Provides:
- Word highlight decorations (added/removed)
- Current line highlighting
- Line number display
- A ViewHandle adapter for the comparison core
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from PyQt6 import sip
from PyQt6.QtCore import Qt, QRect, QSize
from PyQt6.QtGui import (
    QColor, QFont, QPainter, QPaintEvent, QResizeEvent,
    QTextCursor, QTextFormat, QMouseEvent
)
from PyQt6.QtWidgets import QPlainTextEdit, QTextEdit, QWidget

from textcompare.core.exceptions import ViewDisposedError
from textcompare.core.models import (
    ColumnUnit,
    Decoration,
    DecorationHandleSet,
    Position,
    StyleTag,
)
from textcompare.core.views import Unsubscribe, ViewHandle
from textcompare.services.settings import ColorSettings, Theme


@dataclass
class DiffColors:
    """Color scheme for word highlighting."""
    added_bg: QColor = field(default_factory=lambda: QColor(172, 242, 189))    # #acf2bd
    removed_bg: QColor = field(default_factory=lambda: QColor(253, 184, 192))  # #fdb8c0

    # Line numbers
    line_number_bg: QColor = field(default_factory=lambda: QColor(245, 245, 245))
    line_number_fg: QColor = field(default_factory=lambda: QColor(128, 128, 128))
    current_line_bg: QColor = field(default_factory=lambda: QColor(255, 255, 220))

    @classmethod
    def dark_theme(cls) -> 'DiffColors':
        """Get dark theme colors."""
        return cls(
            added_bg=QColor(47, 94, 56),
            removed_bg=QColor(110, 47, 54),
            line_number_bg=QColor(50, 50, 50),
            line_number_fg=QColor(150, 150, 150),
            current_line_bg=QColor(60, 60, 50),
        )

    @classmethod
    def from_settings(cls, colors: ColorSettings, theme: Theme) -> 'DiffColors':
        """Build the scheme from stored color settings."""
        is_dark = theme is Theme.DARK
        base = cls.dark_theme() if is_dark else cls()
        if is_dark:
            base.added_bg = QColor(colors.dark_added_background)
            base.removed_bg = QColor(colors.dark_removed_background)
        else:
            base.added_bg = QColor(colors.added_background)
            base.removed_bg = QColor(colors.removed_background)
            base.line_number_fg = QColor(colors.line_number_color)
            base.line_number_bg = QColor(colors.line_number_background)
        return base

    def for_style(self, style: StyleTag) -> QColor:
        return self.added_bg if style is StyleTag.ADDED else self.removed_bg


class LineNumberArea(QWidget):
    """
    Widget for displaying line numbers alongside a text editor.

    Supports:
    - Click to select line
    - Current line highlighting
    """

    def __init__(self, editor: 'DiffTextEdit'):
        super().__init__(editor)
        self.editor = editor
        self._width = 40

    def sizeHint(self) -> QSize:
        return QSize(self._width, 0)

    def update_width(self) -> None:
        """Calculate and update width based on line count."""
        digits = max(len(str(max(1, self.editor.blockCount()))), 2)
        self._width = 10 + self.fontMetrics().horizontalAdvance('9') * digits
        self.setFixedWidth(self._width)

    def paintEvent(self, event: QPaintEvent) -> None:
        """Paint line numbers."""
        colors = self.editor.colors
        painter = QPainter(self)
        painter.fillRect(event.rect(), colors.line_number_bg)

        block = self.editor.firstVisibleBlock()
        block_number = block.blockNumber()
        top = int(self.editor.blockBoundingGeometry(block).translated(
            self.editor.contentOffset()).top())
        bottom = top + int(self.editor.blockBoundingRect(block).height())

        current_block = self.editor.textCursor().blockNumber()
        height = self.fontMetrics().height()

        while block.isValid() and top <= event.rect().bottom():
            if block.isVisible() and bottom >= event.rect().top():
                if block_number == current_block:
                    painter.fillRect(0, top, self._width, height, colors.current_line_bg)

                painter.setPen(colors.line_number_fg)
                painter.drawText(
                    0, top,
                    self._width - 5, height,
                    Qt.AlignmentFlag.AlignRight,
                    str(block_number + 1)
                )

            block = block.next()
            top = bottom
            bottom = top + int(self.editor.blockBoundingRect(block).height())
            block_number += 1

        painter.end()

    def mousePressEvent(self, event: QMouseEvent) -> None:
        """Handle click to select line."""
        if event.button() != Qt.MouseButton.LeftButton:
            return

        block = self.editor.firstVisibleBlock()
        top = int(self.editor.blockBoundingGeometry(block).translated(
            self.editor.contentOffset()).top())

        while block.isValid():
            bottom = top + int(self.editor.blockBoundingRect(block).height())
            if top <= event.position().y() < bottom:
                cursor = QTextCursor(block)
                cursor.select(QTextCursor.SelectionType.BlockUnderCursor)
                self.editor.setTextCursor(cursor)
                break
            block = block.next()
            top = bottom


class DiffTextEdit(QPlainTextEdit):
    """
    Plain text editor with word highlight decorations.

    Decorations are kept as extra selections keyed by an identifier, so a
    whole set can be swapped for another with a single repaint.
    """

    def __init__(
        self,
        parent: Optional[QWidget] = None,
        show_line_numbers: bool = True,
        colors: Optional[DiffColors] = None
    ):
        super().__init__(parent)

        self.colors = colors or DiffColors()
        self._decorations: dict[str, QTextEdit.ExtraSelection] = {}
        self._decoration_ids = itertools.count(1)

        self._setup_editor()
        if show_line_numbers:
            self.line_number_area: Optional[LineNumberArea] = LineNumberArea(self)
        else:
            self.line_number_area = None
        self._connect_signals()
        self._update_line_number_width()
        self._refresh_extra_selections()

    def _setup_editor(self) -> None:
        """Configure editor settings."""
        self.setLineWrapMode(QPlainTextEdit.LineWrapMode.NoWrap)

        font = QFont("Consolas", 12)
        font.setStyleHint(QFont.StyleHint.Monospace)
        self.setFont(font)

        self.setTabStopDistance(self.fontMetrics().horizontalAdvance(' ') * 4)

    def _connect_signals(self) -> None:
        """Connect internal signals."""
        self.blockCountChanged.connect(self._update_line_number_width)
        self.updateRequest.connect(self._update_line_number_area)
        self.cursorPositionChanged.connect(self._refresh_extra_selections)

    def set_colors(self, colors: DiffColors, styles: dict[str, StyleTag]) -> None:
        """
        Set color scheme and recolor existing decorations.

        Args:
            colors: New color scheme
            styles: Style of each existing decoration id
        """
        self.colors = colors
        for decoration_id, selection in self._decorations.items():
            style = styles.get(decoration_id)
            if style is not None:
                selection.format.setBackground(colors.for_style(style))
        self._refresh_extra_selections()
        if self.line_number_area:
            self.line_number_area.update()

    def set_word_wrap(self, enabled: bool) -> None:
        mode = (QPlainTextEdit.LineWrapMode.WidgetWidth if enabled
                else QPlainTextEdit.LineWrapMode.NoWrap)
        self.setLineWrapMode(mode)

    def set_editor_font(self, family: str, size: int) -> None:
        font = QFont(family, size)
        font.setStyleHint(QFont.StyleHint.Monospace)
        self.setFont(font)
        self.setTabStopDistance(self.fontMetrics().horizontalAdvance(' ') * 4)
        self._update_line_number_width()

    def plain_text(self) -> str:
        """
        Document text with only block separators turned into newlines.

        toPlainText() also rewrites U+2028 and other in-block separators,
        which would shift offsets against the block/column layout.
        """
        return self.document().toRawText().replace('\u2029', '\n')

    # -------------------------------------------------------------------------
    # Decorations
    # -------------------------------------------------------------------------

    def position_to_document_offset(self, position: Position) -> int:
        """Convert a 1-based line/column (UTF-16 columns) into a document position."""
        document = self.document()
        line_index = min(max(position.line - 1, 0), document.blockCount() - 1)
        block = document.findBlockByNumber(line_index)
        # length() includes the block separator
        column = min(max(position.column - 1, 0), block.length() - 1)
        return block.position() + column

    def replace_decorations(
        self,
        previous_ids: Sequence[str],
        decorations: Sequence[Decoration]
    ) -> list[str]:
        """
        Remove previous decorations and add new ones with one repaint.

        Returns:
            Identifiers of the new decorations
        """
        for decoration_id in previous_ids:
            self._decorations.pop(decoration_id, None)

        new_ids = []
        for decoration in decorations:
            start = self.position_to_document_offset(decoration.range.start)
            end = self.position_to_document_offset(decoration.range.end)

            selection = QTextEdit.ExtraSelection()
            cursor = QTextCursor(self.document())
            cursor.setPosition(start)
            cursor.setPosition(end, QTextCursor.MoveMode.KeepAnchor)
            selection.cursor = cursor
            selection.format.setBackground(self.colors.for_style(decoration.style))

            decoration_id = f"d{next(self._decoration_ids)}"
            self._decorations[decoration_id] = selection
            new_ids.append(decoration_id)

        self._refresh_extra_selections()
        return new_ids

    def decoration_ranges(self) -> list[tuple[int, int]]:
        """Document ranges of the displayed decorations, in order."""
        return sorted(
            (s.cursor.selectionStart(), s.cursor.selectionEnd())
            for s in self._decorations.values()
        )

    def _refresh_extra_selections(self) -> None:
        """Rebuild the extra selection list: current line, then decorations."""
        selections = []

        if not self.isReadOnly():
            selection = QTextEdit.ExtraSelection()
            selection.format.setBackground(self.colors.current_line_bg)
            selection.format.setProperty(
                QTextFormat.Property.FullWidthSelection, True
            )
            selection.cursor = self.textCursor()
            selection.cursor.clearSelection()
            selections.append(selection)

        selections.extend(self._decorations.values())
        self.setExtraSelections(selections)

    # -------------------------------------------------------------------------
    # Line numbers
    # -------------------------------------------------------------------------

    def _update_line_number_width(self) -> None:
        """Update line number area width."""
        if self.line_number_area:
            self.line_number_area.update_width()
            self.setViewportMargins(self.line_number_area.width(), 0, 0, 0)

    def _update_line_number_area(self, rect: QRect, dy: int) -> None:
        """Update line number area on scroll."""
        if not self.line_number_area:
            return

        if dy:
            self.line_number_area.scroll(0, dy)
        else:
            self.line_number_area.update(
                0, rect.y(),
                self.line_number_area.width(), rect.height()
            )

    def resizeEvent(self, event: QResizeEvent) -> None:
        """Handle resize."""
        super().resizeEvent(event)

        if self.line_number_area:
            cr = self.contentsRect()
            self.line_number_area.setGeometry(
                QRect(cr.left(), cr.top(), self.line_number_area.width(), cr.height())
            )


class EditorViewHandle(ViewHandle):
    """
    ViewHandle over a DiffTextEdit.

    Qt positions count UTF-16 code units, so columns are produced in that
    unit. Any use after dispose() or after the widget was deleted raises
    ViewDisposedError.
    """

    column_unit = ColumnUnit.UTF16

    def __init__(self, editor: DiffTextEdit):
        self._editor = editor
        self._styles: dict[str, StyleTag] = {}
        self._slots: list[Callable[[int], None]] = []
        self._disposed = False

    @property
    def editor(self) -> DiffTextEdit:
        self._check()
        return self._editor

    def get_scroll_offset(self) -> int:
        self._check()
        try:
            return self._editor.verticalScrollBar().value()
        except RuntimeError as e:
            raise ViewDisposedError(str(e)) from e

    def set_scroll_offset(self, value: int) -> None:
        self._check()
        try:
            self._editor.verticalScrollBar().setValue(value)
        except RuntimeError as e:
            raise ViewDisposedError(str(e)) from e

    def on_scroll_changed(self, callback: Callable[[], None]) -> Unsubscribe:
        self._check()

        def slot(_value: int) -> None:
            callback()

        self._editor.verticalScrollBar().valueChanged.connect(slot)
        self._slots.append(slot)

        def unsubscribe() -> None:
            if slot not in self._slots:
                return
            self._slots.remove(slot)
            if not sip.isdeleted(self._editor):
                try:
                    self._editor.verticalScrollBar().valueChanged.disconnect(slot)
                except (TypeError, RuntimeError):
                    # Already disconnected by Qt during widget teardown
                    pass

        return unsubscribe

    def replace_decorations(
        self,
        previous: DecorationHandleSet,
        decorations: Sequence[Decoration]
    ) -> DecorationHandleSet:
        self._check()
        try:
            new_ids = self._editor.replace_decorations(list(previous), decorations)
        except RuntimeError as e:
            raise ViewDisposedError(str(e)) from e

        for decoration_id in previous:
            self._styles.pop(decoration_id, None)
        for decoration_id, decoration in zip(new_ids, decorations):
            self._styles[decoration_id] = decoration.style

        return DecorationHandleSet(tuple(new_ids))

    def set_colors(self, colors: DiffColors) -> None:
        """Recolor the editor and its current decorations."""
        self._check()
        self._editor.set_colors(colors, self._styles)

    def dispose(self) -> None:
        if self._disposed:
            return
        if not sip.isdeleted(self._editor):
            scroll_bar = self._editor.verticalScrollBar()
            for slot in self._slots:
                try:
                    scroll_bar.valueChanged.disconnect(slot)
                except (TypeError, RuntimeError):
                    pass
        self._slots.clear()
        self._styles.clear()
        self._disposed = True

    def _check(self) -> None:
        if self._disposed or sip.isdeleted(self._editor):
            raise ViewDisposedError("Editor view has been disposed")
