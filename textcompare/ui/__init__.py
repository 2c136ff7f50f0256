"""
PyQt6 User Interface module.

Provides the main application window and the comparison view:
- Side-by-side editable panes with word highlighting
- Synchronized vertical scrolling
"""

from textcompare.ui.scheduler import QtFrameScheduler
from textcompare.ui.theme import apply_theme
from textcompare.ui.compare_view import TextCompareView
from textcompare.ui.main_window import MainWindow

__all__ = [
    'QtFrameScheduler',
    'apply_theme',
    'TextCompareView',
    'MainWindow',
]
