from textcompare.core.diff.spans import build_all_spans, build_spans
from textcompare.core.diff.word_diff import WordDiffEngine
from textcompare.core.models import DiffOpKind, DiffOperation, HighlightSpan, Side


def ops(*pairs):
    return [DiffOperation(kind, text) for kind, text in pairs]


def test_cat_dog_scenario():
    left, right = "the cat sat", "the dog sat"
    operations = WordDiffEngine().diff(left, right)

    spans = build_all_spans(operations)

    assert spans[Side.LEFT] == [HighlightSpan(Side.LEFT, 4, 7)]
    assert spans[Side.RIGHT] == [HighlightSpan(Side.RIGHT, 4, 7)]
    assert spans[Side.LEFT][0].extract(left) == "cat"
    assert spans[Side.RIGHT][0].extract(right) == "dog"


def test_other_side_operations_do_not_advance_cursor():
    operations = ops(
        (DiffOpKind.INSERT, "new "),
        (DiffOpKind.EQUAL, "keep "),
        (DiffOpKind.DELETE, "old"),
    )
    assert build_spans(operations, Side.LEFT) == [HighlightSpan(Side.LEFT, 5, 8)]
    assert build_spans(operations, Side.RIGHT) == [HighlightSpan(Side.RIGHT, 0, 4)]


def test_adjacent_operations_give_adjacent_spans():
    operations = ops(
        (DiffOpKind.DELETE, "a"),
        (DiffOpKind.DELETE, "bc"),
    )
    assert build_spans(operations, Side.LEFT) == [
        HighlightSpan(Side.LEFT, 0, 1),
        HighlightSpan(Side.LEFT, 1, 3),
    ]


def test_empty_operations_are_skipped():
    operations = ops(
        (DiffOpKind.EQUAL, "x"),
        (DiffOpKind.DELETE, ""),
        (DiffOpKind.INSERT, ""),
    )
    assert build_spans(operations, Side.LEFT) == []
    assert build_spans(operations, Side.RIGHT) == []


def test_identical_texts_have_no_spans():
    operations = WordDiffEngine().diff("same text", "same text")
    assert build_all_spans(operations) == {Side.LEFT: [], Side.RIGHT: []}


def test_spans_extract_removed_and_added_text_in_order():
    left = "one two three four five"
    right = "one 2 three four 5 six"
    operations = WordDiffEngine().diff(left, right)
    spans = build_all_spans(operations)

    removed = [span.extract(left) for span in spans[Side.LEFT]]
    added = [span.extract(right) for span in spans[Side.RIGHT]]

    assert removed == [op.text for op in operations if op.kind is DiffOpKind.DELETE]
    assert added == [op.text for op in operations if op.kind is DiffOpKind.INSERT]
    for side_spans in spans.values():
        starts = [span.start for span in side_spans]
        assert starts == sorted(starts)
        assert all(span.length > 0 for span in side_spans)


def test_rebuilding_from_the_same_operations_gives_the_same_spans():
    operations = ops(
        (DiffOpKind.EQUAL, "the "),
        (DiffOpKind.DELETE, "big "),
        (DiffOpKind.DELETE, "cat"),
        (DiffOpKind.INSERT, "dog"),
        (DiffOpKind.INSERT, "s"),
        (DiffOpKind.EQUAL, " sat"),
    )

    for side in Side:
        first = build_spans(operations, side)
        second = build_spans(operations, side)
        assert first == second

    assert build_all_spans(operations) == build_all_spans(operations)
    assert build_spans(operations, Side.LEFT) == [
        HighlightSpan(Side.LEFT, 4, 8),
        HighlightSpan(Side.LEFT, 8, 11),
    ]
    assert build_spans(operations, Side.RIGHT) == [
        HighlightSpan(Side.RIGHT, 4, 7),
        HighlightSpan(Side.RIGHT, 7, 8),
    ]
