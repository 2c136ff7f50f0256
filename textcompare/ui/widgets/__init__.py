"""
Reusable UI widgets for the comparison view.

Provides specialized widgets for:
- Editable panes with word highlighting
- Line numbers
- Legend and statistics display
"""

from textcompare.ui.widgets.diff_text_edit import (
    DiffColors,
    DiffTextEdit,
    EditorViewHandle,
    LineNumberArea,
)
from textcompare.ui.widgets.diff_legend import (
    DiffLegend,
)

__all__ = [
    # Editor
    'DiffColors',
    'DiffTextEdit',
    'EditorViewHandle',
    'LineNumberArea',
    # Legend
    'DiffLegend',
]
