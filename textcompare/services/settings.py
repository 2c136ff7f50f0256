"""
Application settings management.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, asdict, fields
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Optional


APP_CONFIG_NAME = "textcompare"


def get_config_dir() -> Path:
    """Per-user configuration directory."""
    if os.name == 'nt':
        # Windows
        app_data = os.environ.get('APPDATA', os.path.expanduser('~'))
        return Path(app_data) / 'TextCompare'
    else:
        # Linux/Mac
        config_home = os.environ.get('XDG_CONFIG_HOME',
                                     os.path.expanduser('~/.config'))
        return Path(config_home) / APP_CONFIG_NAME


class Theme(Enum):
    """UI theme options."""
    SYSTEM = "system"
    LIGHT = "light"
    DARK = "dark"

    @classmethod
    def from_string(cls, value: str) -> 'Theme':
        """Create from string value."""
        try:
            # Try to match by value
            for theme in cls:
                if theme.value == value.lower():
                    return theme
            # Try to match by name
            return cls[value.upper()]
        except (KeyError, AttributeError):
            return cls.SYSTEM


@dataclass
class UISettings:
    """User interface settings."""
    theme: Theme = Theme.LIGHT
    font_family: str = "Consolas"
    font_size: int = 12
    window_width: int = 1200
    window_height: int = 800
    window_maximized: bool = False
    splitter_position: int = 600
    show_line_numbers: bool = True
    word_wrap: bool = False


@dataclass
class ColorSettings:
    """Color settings for word highlighting."""
    added_background: str = "#acf2bd"
    removed_background: str = "#fdb8c0"

    line_number_color: str = "#999999"
    line_number_background: str = "#f5f5f5"

    # Palette highlight for selections and menus
    selection_background: str = "#0078d7"

    # Dark theme overrides
    dark_added_background: str = "#2f5e38"
    dark_removed_background: str = "#6e2f36"
    dark_selection_background: str = "#2a82da"


@dataclass
class SyncSettings:
    """Settings for synchronized scrolling."""
    scroll_sync_enabled: bool = True
    scroll_sync_interval_ms: int = 16  # One frame at 60 Hz


@dataclass
class StorageSettings:
    """Where buffer contents are kept between sessions."""
    left_key: str = "text-compare-left"
    right_key: str = "text-compare-right"
    buffers_path: str = ""  # Empty means the default location


@dataclass
class ApplicationSettings:
    """Main application settings container."""
    ui: UISettings = field(default_factory=UISettings)
    colors: ColorSettings = field(default_factory=ColorSettings)
    sync: SyncSettings = field(default_factory=SyncSettings)
    storage: StorageSettings = field(default_factory=StorageSettings)

    recent_files: list[str] = field(default_factory=list)
    last_directory: str = ""


SettingsObserver = Callable[[ApplicationSettings], None]


class SettingsManager:
    """Manager for loading/saving application settings."""

    def __init__(self, settings_path: Optional[Path] = None):
        self.settings_path = settings_path or self._get_default_path()
        self._settings: Optional[ApplicationSettings] = None
        self._observers: list[SettingsObserver] = []

    @staticmethod
    def _get_default_path() -> Path:
        """Get the default settings file path."""
        return get_config_dir() / 'settings.json'

    @property
    def settings(self) -> ApplicationSettings:
        """Get current settings, loading from disk if needed."""
        if self._settings is None:
            self._settings = self.load()
        return self._settings

    def load(self) -> ApplicationSettings:
        """Load settings from disk."""
        if not self.settings_path.exists():
            return ApplicationSettings()

        try:
            with open(self.settings_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            return self._from_dict(data)
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logging.warning(f"SettingsManager - Failed to load {self.settings_path}, using defaults: {e}")
            return ApplicationSettings()

    def save(self, settings: Optional[ApplicationSettings] = None) -> bool:
        """Save settings to disk."""
        settings = settings or self._settings
        if settings is None:
            return False

        try:
            self.settings_path.parent.mkdir(parents=True, exist_ok=True)

            data = self._to_dict(settings)

            with open(self.settings_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            logging.error(f"SettingsManager - Failed to save {self.settings_path}: {e}")
            return False

        self._settings = settings
        self._notify_observers()
        return True

    def reset(self) -> ApplicationSettings:
        """Reset to default settings."""
        self._settings = ApplicationSettings()
        self.save()
        return self._settings

    def add_observer(self, callback: SettingsObserver) -> None:
        """Add a callback to be notified of settings changes."""
        self._observers.append(callback)

    def remove_observer(self, callback: SettingsObserver) -> None:
        """Remove a settings change observer."""
        if callback in self._observers:
            self._observers.remove(callback)

    def _notify_observers(self) -> None:
        """Notify all observers of settings change."""
        for callback in self._observers:
            try:
                callback(self._settings)
            except Exception as e:
                logging.error(f"SettingsManager - Settings observer failed: {e}", exc_info=True)

    def add_recent_file(self, path: str, limit: int = 10) -> None:
        """Add a path to the recent files list."""
        recent = self.settings.recent_files

        # Remove if already exists
        if path in recent:
            recent.remove(path)

        # Add to front
        recent.insert(0, path)
        self.settings.recent_files = recent[:limit]

        self.save()

    def _to_dict(self, settings: ApplicationSettings) -> dict:
        """Convert settings to dictionary for JSON serialization."""
        def convert(obj: Any) -> Any:
            if isinstance(obj, Enum):
                return obj.name
            elif isinstance(obj, dict):
                return {k: convert(v) for k, v in obj.items()}
            elif isinstance(obj, list):
                return [convert(item) for item in obj]
            else:
                return obj

        return convert(asdict(settings))

    def _from_dict(self, data: dict) -> ApplicationSettings:
        """Convert dictionary back to settings objects."""
        ui_data = dict(data.get('ui', {}))
        theme = ui_data.get('theme', 'LIGHT')
        if isinstance(theme, str):
            try:
                ui_data['theme'] = Theme[theme]
            except KeyError:
                ui_data['theme'] = Theme.from_string(theme)

        return ApplicationSettings(
            ui=self._section(UISettings, ui_data),
            colors=self._section(ColorSettings, data.get('colors', {})),
            sync=self._section(SyncSettings, data.get('sync', {})),
            storage=self._section(StorageSettings, data.get('storage', {})),
            recent_files=list(data.get('recent_files', [])),
            last_directory=data.get('last_directory', ''),
        )

    @staticmethod
    def _section(section_class: type, values: dict) -> Any:
        """Build a settings section, ignoring unknown keys."""
        known = {f.name for f in fields(section_class)}
        return section_class(**{k: v for k, v in values.items() if k in known})
