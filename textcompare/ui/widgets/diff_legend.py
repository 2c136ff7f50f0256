from typing import Optional

from PyQt6.QtWidgets import QWidget, QHBoxLayout, QLabel
from PyQt6.QtGui import QPixmap

from textcompare.core.models import WordDiffStatistics
from textcompare.ui.widgets.diff_text_edit import DiffColors


class DiffLegend(QWidget):
    def __init__(self, parent=None, colors: Optional[DiffColors] = None):
        super().__init__(parent)

        self._colors = colors or DiffColors()
        self._color_boxes = []  # Store references to color boxes

        self._layout = QHBoxLayout(self)
        self._layout.setContentsMargins(15, 5, 15, 5)
        self._layout.setSpacing(15)

        # Similarity label (Match %)
        self._similarity_label = QLabel("")
        self._similarity_label.setStyleSheet("""
            QLabel {
                font-weight: bold;
                color: #2da44e;
                background-color: #dafbe1;
                border: 1px solid #2da44e;
                border-radius: 4px;
                padding: 2px 8px;
                margin-right: 15px;
            }
        """)
        self._similarity_label.hide()  # Hidden until set
        self._layout.addWidget(self._similarity_label)

        self._counts_label = QLabel("")
        self._layout.addWidget(self._counts_label)

        self._create_legend_items()

    def _create_legend_items(self):
        """Create or recreate legend items with current colors."""
        # Reverse order so indices stay valid while removing
        for i in reversed(range(self._layout.count())):
            item = self._layout.itemAt(i)
            if item.widget() in (self._similarity_label, self._counts_label):
                continue

            self._layout.takeAt(i)
            if item.widget():
                item.widget().deleteLater()

        self._color_boxes.clear()

        self._add_legend_item(self._colors.removed_bg, "Removed Text")
        self._add_legend_item(self._colors.added_bg, "Added Text")

        self._layout.addStretch()

    def _add_legend_item(self, color, text):
        """Add a single legend item."""
        color_box = QLabel()
        pixmap = QPixmap(16, 16)
        pixmap.fill(color)
        color_box.setPixmap(pixmap)
        self._layout.addWidget(color_box)
        self._color_boxes.append(color_box)

        label = QLabel(text)
        self._layout.addWidget(label)

    def update_colors(self, colors: DiffColors):
        """Update the legend with new colors."""
        self._colors = colors
        self._create_legend_items()

    def set_statistics(self, stats: Optional[WordDiffStatistics]):
        """Show similarity and word counts, or hide them when None."""
        if stats is None:
            self._similarity_label.hide()
            self._counts_label.setText("")
            return

        if stats.is_identical:
            self._similarity_label.setText("Identical")
        else:
            self._similarity_label.setText(f"Match: {stats.similarity_ratio:.0%}")
        self._similarity_label.show()
        self._counts_label.setText(
            f"{stats.deleted_tokens} removed, {stats.inserted_tokens} added"
        )
