"""
Main application window.

Provides the primary UI container with:
- Menu bar
- Central comparison view
- Status bar
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from PyQt6.QtGui import QAction, QActionGroup, QKeySequence, QCloseEvent
from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QStatusBar, QFileDialog, QMessageBox,
    QApplication, QLabel,
)

from textcompare.core.models import DiffSnapshot, Side
from textcompare.services.file_io import FileIOService
from textcompare.services.settings import ApplicationSettings, SettingsManager, Theme
from textcompare.services.storage import BufferStore, StorageKeys
from textcompare.ui.compare_view import TextCompareView
from textcompare.ui.theme import apply_theme
from main import APP_NAME, APP_VERSION


class MainWindow(QMainWindow):
    """
    Main application window.

    Hosts a single TextCompareView and maps menu actions onto it.
    """

    def __init__(
        self,
        settings_manager: Optional[SettingsManager] = None,
        store: Optional[BufferStore] = None,
        parent: Optional[QWidget] = None
    ):
        super().__init__(parent)

        self._settings_manager = settings_manager or SettingsManager()
        self._settings = self._settings_manager.settings
        self._file_io = FileIOService()
        self._store = store or self._create_store(self._settings)
        self._stats_label: Optional[QLabel] = None

        self._settings_manager.add_observer(self._on_settings_changed)

        self._setup_ui()
        self._setup_menus()
        self._setup_statusbar()
        self._setup_connections()
        self._load_settings()

    @staticmethod
    def _create_store(settings: ApplicationSettings) -> BufferStore:
        storage = settings.storage
        keys = StorageKeys(left=storage.left_key, right=storage.right_key)
        path = Path(storage.buffers_path) if storage.buffers_path else None
        return BufferStore(path, keys)

    @property
    def compare_view(self) -> TextCompareView:
        return self._compare_view

    def _setup_ui(self) -> None:
        """Set up the main UI layout."""
        self.setWindowTitle(APP_NAME)
        self.setMinimumSize(800, 600)

        self._compare_view = TextCompareView(self._settings, self._store, self)
        self.setCentralWidget(self._compare_view)

    def _setup_menus(self) -> None:
        """Set up the menu bar."""
        menubar = self.menuBar()

        # File menu
        file_menu = menubar.addMenu("&File")

        self._action_open_left = QAction("Open &Left...", self)
        self._action_open_left.setShortcut(QKeySequence("Ctrl+O"))
        self._action_open_left.triggered.connect(lambda: self._on_open_file(Side.LEFT))
        file_menu.addAction(self._action_open_left)

        self._action_open_right = QAction("Open &Right...", self)
        self._action_open_right.setShortcut(QKeySequence("Ctrl+Shift+O"))
        self._action_open_right.triggered.connect(lambda: self._on_open_file(Side.RIGHT))
        file_menu.addAction(self._action_open_right)

        file_menu.addSeparator()

        self._recent_menu = file_menu.addMenu("&Recent")
        self._update_recent_menu()

        file_menu.addSeparator()

        self._action_exit = QAction("E&xit", self)
        self._action_exit.setShortcut(QKeySequence.StandardKey.Quit)
        self._action_exit.triggered.connect(self.close)
        file_menu.addAction(self._action_exit)

        # Edit menu
        edit_menu = menubar.addMenu("&Edit")

        self._action_swap = QAction("&Swap Sides", self)
        self._action_swap.setShortcut(QKeySequence("Ctrl+Shift+S"))
        self._action_swap.triggered.connect(self._compare_view.swap_sides)
        edit_menu.addAction(self._action_swap)

        self._action_clear = QAction("&Clear Both", self)
        self._action_clear.setShortcut(QKeySequence("Ctrl+Shift+Del"))
        self._action_clear.triggered.connect(self._on_clear)
        edit_menu.addAction(self._action_clear)

        # View menu
        view_menu = menubar.addMenu("&View")

        self._action_sync_scroll = QAction("&Synchronize Scrolling", self)
        self._action_sync_scroll.setCheckable(True)
        self._action_sync_scroll.setChecked(self._settings.sync.scroll_sync_enabled)
        self._action_sync_scroll.toggled.connect(self._on_sync_scroll_toggled)
        view_menu.addAction(self._action_sync_scroll)

        self._action_word_wrap = QAction("&Word Wrap", self)
        self._action_word_wrap.setCheckable(True)
        self._action_word_wrap.setChecked(self._settings.ui.word_wrap)
        self._action_word_wrap.toggled.connect(self._on_word_wrap_toggled)
        view_menu.addAction(self._action_word_wrap)

        view_menu.addSeparator()

        theme_menu = view_menu.addMenu("&Theme")
        self._theme_group = QActionGroup(self)
        self._theme_group.setExclusive(True)
        for theme in Theme:
            action = QAction(theme.name.capitalize(), self)
            action.setCheckable(True)
            action.setChecked(theme == self._settings.ui.theme)
            action.triggered.connect(lambda checked, t=theme: self._on_theme_selected(t))
            self._theme_group.addAction(action)
            theme_menu.addAction(action)

        # Help menu
        help_menu = menubar.addMenu("&Help")

        self._action_about = QAction("&About", self)
        self._action_about.triggered.connect(self._on_about)
        help_menu.addAction(self._action_about)

    def _setup_statusbar(self) -> None:
        """Set up the status bar."""
        self._statusbar = QStatusBar()
        self.setStatusBar(self._statusbar)

        self._status_label = QLabel("Ready")
        self._statusbar.addWidget(self._status_label, 1)

        self._stats_label = QLabel()
        self._statusbar.addPermanentWidget(self._stats_label)

        snapshot = self._compare_view.controller.snapshot
        if snapshot is not None:
            self._on_snapshot_changed(snapshot)

    def _setup_connections(self) -> None:
        """Set up signal connections."""
        self._compare_view.snapshot_changed.connect(self._on_snapshot_changed)

    def _load_settings(self) -> None:
        """Load application settings."""
        if self._settings.ui.window_maximized:
            self.showMaximized()
        else:
            self.resize(self._settings.ui.window_width, self._settings.ui.window_height)

    def _save_settings(self) -> None:
        """Save application settings."""
        self._settings.ui.window_width = self.width()
        self._settings.ui.window_height = self.height()
        self._settings.ui.window_maximized = self.isMaximized()
        self._settings.ui.splitter_position = self._compare_view.splitter_position()

        self._settings_manager.save()

    def _update_recent_menu(self) -> None:
        """Rebuild the recent files menu."""
        self._recent_menu.clear()

        recent_files = list(self._settings.recent_files)
        if not recent_files:
            placeholder = QAction("No recent files", self)
            placeholder.setEnabled(False)
            self._recent_menu.addAction(placeholder)
            return

        for path in recent_files:
            menu = self._recent_menu.addMenu(Path(path).name)
            menu.setToolTip(path)
            for side in Side:
                action = QAction(f"Open in {side.value.capitalize()}", self)
                action.triggered.connect(lambda checked, p=path, s=side: self.open_file(s, p))
                menu.addAction(action)

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def open_file(self, side: Side, path: str) -> bool:
        """Load a file into one pane. Returns True on success."""
        result = self._file_io.read_text(path)
        if not result.success:
            logging.error(f"MainWindow - Failed to open {path}: {result.error}")
            QMessageBox.warning(self, "Open File", f"Could not open {path}:\n\n{result.error}")
            return False

        self._compare_view.set_text(side, result.content)
        self._settings.last_directory = str(Path(path).parent)
        self._settings_manager.add_recent_file(str(path))
        self._status_label.setText(f"Loaded {Path(path).name} ({result.encoding})")
        return True

    def compare_files(self, left_path: str, right_path: str) -> None:
        """Load both panes from files."""
        left_ok = self.open_file(Side.LEFT, left_path)
        right_ok = self.open_file(Side.RIGHT, right_path)
        if left_ok and right_ok:
            self._compare_view.set_titles(Path(left_path).name, Path(right_path).name)

    # -------------------------------------------------------------------------
    # Slots
    # -------------------------------------------------------------------------

    def _on_open_file(self, side: Side) -> None:
        path, _ = QFileDialog.getOpenFileName(
            self,
            f"Open {side.value.capitalize()} File",
            self._settings.last_directory,
            "Text Files (*.txt *.md *.csv *.log);;All Files (*)"
        )
        if path:
            self.open_file(side, path)

    def _on_clear(self) -> None:
        self._compare_view.clear()
        self._compare_view.set_titles("Original", "Modified")
        self._status_label.setText("Cleared")

    def _on_sync_scroll_toggled(self, checked: bool) -> None:
        self._settings.sync.scroll_sync_enabled = checked
        self._compare_view.set_scroll_sync_enabled(checked)

    def _on_word_wrap_toggled(self, checked: bool) -> None:
        self._settings.ui.word_wrap = checked
        self._compare_view.set_word_wrap(checked)

    def _on_theme_selected(self, theme: Theme) -> None:
        if theme == self._settings.ui.theme:
            return
        self._settings.ui.theme = theme
        self._settings_manager.save()

    def _on_snapshot_changed(self, snapshot: DiffSnapshot) -> None:
        self._stats_label.setText(str(snapshot.statistics))

    def _on_settings_changed(self, new_settings: ApplicationSettings) -> None:
        """Handle application settings changes."""
        self._settings = new_settings

        apply_theme(QApplication.instance(), self._settings.ui.theme, self._settings.colors)

        self._update_recent_menu()
        self._compare_view.apply_settings(self._settings)

    def _on_about(self) -> None:
        QMessageBox.about(
            self,
            f"About {APP_NAME}",
            f"{APP_NAME} {APP_VERSION}\n\n"
            "Side-by-side word comparison with synchronized scrolling."
        )

    def closeEvent(self, event: QCloseEvent) -> None:
        """Handle window close."""
        self._settings_manager.remove_observer(self._on_settings_changed)
        self._save_settings()
        self._compare_view.teardown()
        event.accept()
