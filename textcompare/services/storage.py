"""
Persistence of the two buffers between sessions.

Contents are stored as strings in a small JSON file, one entry per side,
keyed by a fixed identifier.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from textcompare.core.exceptions import StorageError
from textcompare.core.models import Side
from textcompare.services.settings import get_config_dir


@dataclass(frozen=True)
class StorageKeys:
    """Identifiers under which each side's content is stored."""
    left: str = "text-compare-left"
    right: str = "text-compare-right"

    def key_for(self, side: Side) -> str:
        return self.left if side is Side.LEFT else self.right


class BufferStore:
    """
    Load/save buffer contents.

    Failures never propagate: load() falls back to an empty string and
    save() reports False.
    """

    def __init__(
        self,
        path: Optional[Path] = None,
        keys: Optional[StorageKeys] = None
    ):
        self.path = Path(path) if path else self._get_default_path()
        self.keys = keys or StorageKeys()
        self._data: Optional[dict[str, str]] = None

    @staticmethod
    def _get_default_path() -> Path:
        """Get the default buffer file path."""
        return get_config_dir() / 'buffers.json'

    def load(self, side: Side) -> str:
        """Stored content for a side, or empty string."""
        try:
            data = self._read_all()
        except StorageError as e:
            logging.warning(f"BufferStore - {e}")
            return ""
        value = data.get(self.keys.key_for(side), "")
        return value if isinstance(value, str) else ""

    def save(self, side: Side, content: str) -> bool:
        """Persist content for a side."""
        try:
            data = dict(self._read_all())
        except StorageError as e:
            # Unreadable file: start over rather than lose the new content
            logging.warning(f"BufferStore - {e}; rewriting store")
            data = {}

        data[self.keys.key_for(side)] = content

        try:
            self._write_all(data)
        except StorageError as e:
            logging.error(f"BufferStore - {e}")
            return False

        self._data = data
        return True

    def _read_all(self) -> dict[str, str]:
        if self._data is not None:
            return self._data

        if not self.path.exists():
            self._data = {}
            return self._data

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise StorageError(f"Failed to read {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise StorageError(f"Unexpected content in {self.path}")

        self._data = data
        return self._data

    def _write_all(self, data: dict[str, str]) -> None:
        """Write to a temporary file then move it over the store."""
        temp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(temp_path, self.path)
        except OSError as e:
            if temp_path is not None and os.path.exists(temp_path):
                os.unlink(temp_path)
            raise StorageError(f"Failed to write {self.path}: {e}") from e
