"""
Application services: settings, buffer persistence and file reading.
"""

from textcompare.services.settings import (
    ApplicationSettings,
    SettingsManager,
    Theme,
    get_config_dir,
)
from textcompare.services.storage import (
    BufferStore,
    StorageKeys,
)
from textcompare.services.file_io import (
    FileIOService,
    ReadResult,
)

__all__ = [
    'ApplicationSettings',
    'SettingsManager',
    'Theme',
    'get_config_dir',
    'BufferStore',
    'StorageKeys',
    'FileIOService',
    'ReadResult',
]
