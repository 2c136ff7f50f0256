"""
Qt adapter tests, run against the offscreen platform.
"""

import gc
import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

QtWidgets = pytest.importorskip("PyQt6.QtWidgets")

from PyQt6.QtCore import QEventLoop, QTimer
from PyQt6.QtGui import QTextCursor

from conftest import MemoryStore

from textcompare.core.decorations import reconcile
from textcompare.core.exceptions import ViewDisposedError
from textcompare.core.models import DecorationHandleSet, HighlightSpan, Side
from textcompare.services.settings import ApplicationSettings
from textcompare.ui.compare_view import TextCompareView
from textcompare.ui.scheduler import QtFrameScheduler
from textcompare.ui.widgets.diff_text_edit import DiffTextEdit, EditorViewHandle


@pytest.fixture(scope="module")
def qapp():
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])
    yield app


def wait(ms: int = 50) -> None:
    loop = QEventLoop()
    QTimer.singleShot(ms, loop.quit)
    loop.exec()


@pytest.fixture
def editor(qapp):
    widget = DiffTextEdit()
    yield widget
    widget.deleteLater()


def test_decorations_map_to_document_ranges(editor):
    editor.setPlainText("the cat sat")
    handle = EditorViewHandle(editor)

    handles = reconcile(
        handle, DecorationHandleSet.empty(), [HighlightSpan(Side.LEFT, 4, 7)], editor.toPlainText()
    )

    assert len(handles) == 1
    assert editor.decoration_ranges() == [(4, 7)]


def test_multiline_and_utf16_columns(editor):
    text = "ab\n\U0001F600 cat"
    editor.setPlainText(text)
    handle = EditorViewHandle(editor)

    reconcile(handle, DecorationHandleSet.empty(), [HighlightSpan(Side.RIGHT, 5, 8)], text)

    # Block two starts at 3; the emoji takes two UTF-16 units
    assert editor.decoration_ranges() == [(3 + 3, 3 + 6)]


def test_replacement_drops_previous_decorations(editor):
    editor.setPlainText("one two three")
    handle = EditorViewHandle(editor)
    text = editor.toPlainText()

    first = reconcile(handle, DecorationHandleSet.empty(), [HighlightSpan(Side.LEFT, 0, 3)], text)
    reconcile(handle, first, [HighlightSpan(Side.LEFT, 8, 13)], text)

    assert editor.decoration_ranges() == [(8, 13)]


def test_disposed_handle_raises(editor):
    handle = EditorViewHandle(editor)
    handle.dispose()

    with pytest.raises(ViewDisposedError):
        handle.get_scroll_offset()
    with pytest.raises(ViewDisposedError):
        handle.replace_decorations(DecorationHandleSet.empty(), [])


def test_scroll_listener_and_unsubscribe(editor):
    editor.setPlainText("\n".join(f"line {i}" for i in range(300)))
    editor.resize(300, 100)
    editor.show()
    wait()

    scroll_bar = editor.verticalScrollBar()
    if scroll_bar.maximum() < 10:
        pytest.skip("editor did not lay out a scroll range")

    handle = EditorViewHandle(editor)
    calls = []
    unsubscribe = handle.on_scroll_changed(lambda: calls.append(handle.get_scroll_offset()))

    handle.set_scroll_offset(5)
    unsubscribe()
    handle.set_scroll_offset(8)

    assert calls == [5]
    assert handle.get_scroll_offset() == 8


def test_scheduler_runs_and_cancels(qapp):
    scheduler = QtFrameScheduler(interval_ms=0)
    ran = []

    scheduler.schedule(lambda: ran.append("kept"))
    token = scheduler.schedule(lambda: ran.append("cancelled"))
    scheduler.cancel(token)
    wait()

    assert ran == ["kept"]
    assert scheduler.pending_count == 0


def test_scheduler_keeps_timer_when_token_is_dropped(qapp):
    scheduler = QtFrameScheduler(interval_ms=0)
    ran = []

    scheduler.schedule(lambda: ran.append("fired"))
    gc.collect()
    wait()

    assert ran == ["fired"]
    assert scheduler.pending_count == 0


def test_scheduler_cancel_after_fire_is_harmless(qapp):
    scheduler = QtFrameScheduler(interval_ms=0)
    ran = []

    token = scheduler.schedule(lambda: ran.append("fired"))
    wait()
    scheduler.cancel(token)

    assert ran == ["fired"]


@pytest.fixture
def compare_view(qapp):
    store = MemoryStore({Side.LEFT: "the cat sat", Side.RIGHT: "the dog sat"})
    view = TextCompareView(ApplicationSettings(), store)
    yield view, store
    view.teardown()
    view.deleteLater()


def test_compare_view_loads_store_and_highlights(compare_view):
    view, _ = compare_view

    assert view.editor(Side.LEFT).toPlainText() == "the cat sat"
    assert view.editor(Side.LEFT).decoration_ranges() == [(4, 7)]
    assert view.editor(Side.RIGHT).decoration_ranges() == [(4, 7)]


def test_line_separator_inside_a_line_keeps_highlights_aligned(qapp):
    store = MemoryStore({Side.LEFT: "aa\u2028the cat sat", Side.RIGHT: "aa\u2028the dog sat"})
    view = TextCompareView(ApplicationSettings(), store)
    try:
        left = view.editor(Side.LEFT)
        assert left.plain_text() == "aa\u2028the cat sat"
        assert left.decoration_ranges() == [(7, 10)]
        assert view.editor(Side.RIGHT).decoration_ranges() == [(7, 10)]

        view.editor(Side.RIGHT).setPlainText("aa\u2028the cow sat")

        assert store.data[Side.RIGHT] == "aa\u2028the cow sat"
        cursor = left.textCursor()
        cursor.setPosition(7)
        cursor.setPosition(10, QTextCursor.MoveMode.KeepAnchor)
        assert cursor.selectedText() == "cat"
        assert view.editor(Side.RIGHT).decoration_ranges() == [(7, 10)]
    finally:
        view.teardown()
        view.deleteLater()


def test_compare_view_edit_updates_both_panes(compare_view):
    view, store = compare_view

    view.editor(Side.RIGHT).setPlainText("the cat sat")

    assert store.data[Side.RIGHT] == "the cat sat"
    assert view.editor(Side.LEFT).decoration_ranges() == []
    assert view.editor(Side.RIGHT).decoration_ranges() == []
    assert view.controller.snapshot.statistics.is_identical


def test_compare_view_swap(compare_view):
    view, store = compare_view

    view.swap_sides()

    assert view.editor(Side.LEFT).toPlainText() == "the dog sat"
    assert view.editor(Side.RIGHT).toPlainText() == "the cat sat"
    assert view.controller.text(Side.LEFT) == "the dog sat"
    assert store.data[Side.LEFT] == "the dog sat"


def test_compare_view_clear(compare_view):
    view, store = compare_view

    view.clear()

    assert view.editor(Side.LEFT).toPlainText() == ""
    assert view.editor(Side.RIGHT).decoration_ranges() == []
    assert store.data == {Side.LEFT: "", Side.RIGHT: ""}


def test_teardown_stops_scroll_sync(compare_view):
    view, _ = compare_view
    synchronizer = view.controller.synchronizer
    assert synchronizer is not None

    view.teardown()

    assert synchronizer.is_disposed
