import json
import os

import pytest

from textcompare.services.settings import (
    ApplicationSettings,
    SettingsManager,
    Theme,
    get_config_dir,
)


@pytest.fixture
def manager(tmp_path):
    return SettingsManager(tmp_path / "settings.json")


def test_defaults(manager):
    settings = manager.settings
    assert settings.sync.scroll_sync_enabled is True
    assert settings.sync.scroll_sync_interval_ms == 16
    assert settings.storage.left_key == "text-compare-left"
    assert settings.storage.right_key == "text-compare-right"


def test_round_trip(manager, tmp_path):
    settings = manager.settings
    settings.ui.theme = Theme.DARK
    settings.ui.word_wrap = True
    settings.sync.scroll_sync_enabled = False
    settings.colors.added_background = "#00ff00"
    assert manager.save()

    data = json.loads((tmp_path / "settings.json").read_text(encoding="utf-8"))
    assert data["ui"]["theme"] == "DARK"

    loaded = SettingsManager(tmp_path / "settings.json").settings
    assert loaded.ui.theme is Theme.DARK
    assert loaded.ui.word_wrap is True
    assert loaded.sync.scroll_sync_enabled is False
    assert loaded.colors.added_background == "#00ff00"


def test_unknown_keys_ignored(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({
        "ui": {"theme": "dark", "obsolete_option": 1},
        "sync": {"scroll_sync_interval_ms": 32},
    }), encoding="utf-8")

    settings = SettingsManager(path).settings

    assert settings.ui.theme is Theme.DARK
    assert settings.sync.scroll_sync_interval_ms == 32


def test_corrupt_file_falls_back_to_defaults(tmp_path, caplog):
    path = tmp_path / "settings.json"
    path.write_text("[1, 2", encoding="utf-8")

    settings = SettingsManager(path).settings

    assert settings == ApplicationSettings()
    assert "using defaults" in caplog.text


def test_observers_notified_on_save(manager):
    seen = []
    manager.add_observer(seen.append)
    manager.settings.ui.font_size = 14
    manager.save()
    manager.remove_observer(seen.append)
    manager.save()

    assert len(seen) == 1
    assert seen[0].ui.font_size == 14


def test_reset(manager):
    manager.settings.ui.font_size = 30
    manager.save()
    assert manager.reset().ui.font_size == ApplicationSettings().ui.font_size


def test_recent_files(manager):
    for name in ("a.txt", "b.txt", "a.txt"):
        manager.add_recent_file(name, limit=2)
    assert manager.settings.recent_files == ["a.txt", "b.txt"]


@pytest.mark.parametrize("value, expected", [
    ("dark", Theme.DARK),
    ("LIGHT", Theme.LIGHT),
    ("system", Theme.SYSTEM),
    ("neon", Theme.SYSTEM),
])
def test_theme_from_string(value, expected):
    assert Theme.from_string(value) is expected


@pytest.mark.skipif(os.name == "nt", reason="XDG paths apply outside Windows")
def test_config_dir_follows_xdg(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    assert get_config_dir() == tmp_path / "textcompare"
