"""
Text comparison view.

Two editable panes side by side, word differences highlighted, vertical
scrolling kept in lockstep.
"""

from __future__ import annotations

import logging
from typing import Optional

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QSplitter, QLabel, QFrame,
)

from textcompare.core.controller import BufferPersistence, DiffViewController
from textcompare.core.exceptions import ViewDisposedError
from textcompare.core.models import DiffSnapshot, Side
from textcompare.services.settings import ApplicationSettings
from textcompare.ui.scheduler import QtFrameScheduler
from textcompare.ui.widgets.diff_legend import DiffLegend
from textcompare.ui.widgets.diff_text_edit import DiffColors, DiffTextEdit, EditorViewHandle


class TextCompareView(QWidget):
    """
    View for comparing two texts word by word.

    Supports:
    - Live re-highlighting on every edit
    - Synchronized vertical scrolling
    - Persisted buffer contents
    """

    # Signals
    snapshot_changed = pyqtSignal(object)  # DiffSnapshot

    def __init__(
        self,
        settings: ApplicationSettings,
        store: Optional[BufferPersistence] = None,
        parent: Optional[QWidget] = None
    ):
        super().__init__(parent)

        self._settings = settings
        self._diff_colors = DiffColors.from_settings(settings.colors, settings.ui.theme)
        self._editors: dict[Side, DiffTextEdit] = {}
        self._handles: dict[Side, EditorViewHandle] = {}
        self._suppress_edits = False

        self._controller = DiffViewController(
            QtFrameScheduler(settings.sync.scroll_sync_interval_ms, self),
            store=store,
        )
        self._controller.set_scroll_sync_enabled(settings.sync.scroll_sync_enabled)
        self._controller.add_observer(self._on_snapshot)

        self._setup_ui()

        # Editors must hold the stored text before their handles are attached
        self._controller.load()
        for side, editor in self._editors.items():
            editor.setPlainText(self._controller.text(side))
            # The document may normalize stored separators; diff what it shows
            self._controller.set_text(side, editor.plain_text())

        self._setup_connections()
        for side, editor in self._editors.items():
            handle = EditorViewHandle(editor)
            self._handles[side] = handle
            self._controller.attach_view(side, handle)

    @property
    def controller(self) -> DiffViewController:
        return self._controller

    def editor(self, side: Side) -> DiffTextEdit:
        return self._editors[side]

    def _setup_ui(self) -> None:
        """Set up the UI."""
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        layout.addWidget(self._create_header())

        self._splitter = QSplitter(Qt.Orientation.Horizontal)
        for side in Side:
            self._splitter.addWidget(self._create_editor_panel(side))

        position = self._settings.ui.splitter_position
        self._splitter.setSizes([position, position])
        layout.addWidget(self._splitter, 1)

        self._legend = DiffLegend(colors=self._diff_colors)
        layout.addWidget(self._legend)

    def _create_header(self) -> QWidget:
        """Create the header with pane titles."""
        header = QFrame()
        header.setObjectName("DiffHeader")
        header.setStyleSheet("""
            QLabel {
                font-family: 'Segoe UI', system-ui, sans-serif;
                font-size: 10pt;
                font-weight: 600;
                padding: 4px;
            }
        """)

        layout = QHBoxLayout(header)
        layout.setContentsMargins(12, 8, 12, 8)

        self._left_title = QLabel("Original")
        self._right_title = QLabel("Modified")
        self._right_title.setAlignment(Qt.AlignmentFlag.AlignRight)

        layout.addWidget(self._left_title, 1)
        layout.addWidget(self._right_title, 1)

        return header

    def _create_editor_panel(self, side: Side) -> QWidget:
        """Create an editor panel."""
        panel = QFrame()
        panel.setFrameShape(QFrame.Shape.StyledPanel)
        layout = QVBoxLayout(panel)
        layout.setContentsMargins(0, 0, 0, 0)

        editor = DiffTextEdit(
            show_line_numbers=self._settings.ui.show_line_numbers,
            colors=self._diff_colors,
        )
        editor.setObjectName(f"{side.value}_editor")
        editor.set_editor_font(self._settings.ui.font_family, self._settings.ui.font_size)
        editor.set_word_wrap(self._settings.ui.word_wrap)
        layout.addWidget(editor)

        self._editors[side] = editor
        return panel

    def _setup_connections(self) -> None:
        """Set up signal connections."""
        self._editors[Side.LEFT].textChanged.connect(
            lambda: self._on_text_changed(Side.LEFT)
        )
        self._editors[Side.RIGHT].textChanged.connect(
            lambda: self._on_text_changed(Side.RIGHT)
        )

    def _on_text_changed(self, side: Side) -> None:
        if self._suppress_edits:
            return
        self._controller.set_text(side, self._editors[side].plain_text())

    def _on_snapshot(self, snapshot: DiffSnapshot) -> None:
        self._legend.set_statistics(snapshot.statistics)
        self.snapshot_changed.emit(snapshot)

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def set_text(self, side: Side, text: str) -> None:
        """Replace the content of one pane."""
        self._editors[side].setPlainText(text)

    def set_titles(self, left: str, right: str) -> None:
        self._left_title.setText(left)
        self._right_title.setText(right)

    def swap_sides(self) -> None:
        """Exchange the contents of the two panes."""
        left = self._editors[Side.LEFT].plain_text()
        right = self._editors[Side.RIGHT].plain_text()
        self._set_texts_silently({Side.LEFT: right, Side.RIGHT: left})
        self._controller.swap_sides()

    def clear(self) -> None:
        """Empty both panes."""
        self._set_texts_silently({Side.LEFT: "", Side.RIGHT: ""})
        self._controller.clear()

    def _set_texts_silently(self, texts: dict[Side, str]) -> None:
        """Set editor contents without routing each change to the controller."""
        self._suppress_edits = True
        try:
            for side, text in texts.items():
                self._editors[side].setPlainText(text)
        finally:
            self._suppress_edits = False

    def set_scroll_sync_enabled(self, enabled: bool) -> None:
        self._controller.set_scroll_sync_enabled(enabled)

    def set_word_wrap(self, enabled: bool) -> None:
        for editor in self._editors.values():
            editor.set_word_wrap(enabled)

    def apply_settings(self, settings: ApplicationSettings) -> None:
        """Apply changed colors/theme and sync settings."""
        self._settings = settings
        self._diff_colors = DiffColors.from_settings(settings.colors, settings.ui.theme)
        for handle in self._handles.values():
            try:
                handle.set_colors(self._diff_colors)
            except ViewDisposedError as e:
                logging.warning(f"TextCompareView - Failed to recolor editor: {e}")
        self._legend.update_colors(self._diff_colors)
        self._controller.set_scroll_sync_enabled(settings.sync.scroll_sync_enabled)
        self.set_word_wrap(settings.ui.word_wrap)

    def splitter_position(self) -> int:
        sizes = self._splitter.sizes()
        return sizes[0] if sizes else self._settings.ui.splitter_position

    def teardown(self) -> None:
        """Stop scroll sync and release the editor handles."""
        self._controller.remove_observer(self._on_snapshot)
        self._controller.dispose()
        for handle in self._handles.values():
            handle.dispose()
        self._handles.clear()
