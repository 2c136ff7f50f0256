import json

from textcompare.core.models import Side
from textcompare.services.storage import BufferStore, StorageKeys


def test_missing_file_loads_empty(tmp_path):
    store = BufferStore(tmp_path / "buffers.json")
    assert store.load(Side.LEFT) == ""
    assert store.load(Side.RIGHT) == ""


def test_save_and_reload(tmp_path):
    path = tmp_path / "nested" / "buffers.json"
    store = BufferStore(path)

    assert store.save(Side.LEFT, "the cat sat")
    assert store.save(Side.RIGHT, "the dög sat")

    reopened = BufferStore(path)
    assert reopened.load(Side.LEFT) == "the cat sat"
    assert reopened.load(Side.RIGHT) == "the dög sat"


def test_default_keys(tmp_path):
    path = tmp_path / "buffers.json"
    BufferStore(path).save(Side.LEFT, "x")

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data == {"text-compare-left": "x"}


def test_custom_keys(tmp_path):
    path = tmp_path / "buffers.json"
    keys = StorageKeys(left="a", right="b")
    store = BufferStore(path, keys)

    store.save(Side.RIGHT, "y")

    assert keys.key_for(Side.RIGHT) == "b"
    assert json.loads(path.read_text(encoding="utf-8")) == {"b": "y"}


def test_corrupt_file_loads_empty_and_is_rewritten(tmp_path, caplog):
    path = tmp_path / "buffers.json"
    path.write_text("{not json", encoding="utf-8")
    store = BufferStore(path)

    assert store.load(Side.LEFT) == ""
    assert "Failed to read" in caplog.text

    assert store.save(Side.LEFT, "recovered")
    assert BufferStore(path).load(Side.LEFT) == "recovered"


def test_non_string_value_loads_empty(tmp_path):
    path = tmp_path / "buffers.json"
    path.write_text(json.dumps({"text-compare-left": 42}), encoding="utf-8")
    assert BufferStore(path).load(Side.LEFT) == ""


def test_unwritable_location_returns_false(tmp_path, caplog):
    blocker = tmp_path / "file"
    blocker.write_text("", encoding="utf-8")
    store = BufferStore(blocker / "buffers.json")

    assert store.save(Side.LEFT, "lost") is False
    assert "Failed to write" in caplog.text


def test_interrupted_write_keeps_previous_content(tmp_path, monkeypatch):
    path = tmp_path / "buffers.json"
    store = BufferStore(path)
    assert store.save(Side.LEFT, "the cat sat")

    def failing_dump(data, f, **kwargs):
        f.write('{"text-compare-left": "the d')
        raise OSError("disk full")

    monkeypatch.setattr(json, "dump", failing_dump)

    assert store.save(Side.LEFT, "the dog sat") is False
    monkeypatch.undo()

    assert BufferStore(path).load(Side.LEFT) == "the cat sat"
    assert [p.name for p in tmp_path.iterdir()] == ["buffers.json"]
