"""
Exception types shared by the core and its collaborators.
"""


class TextCompareError(Exception):
    """Base class for application errors."""
    pass


class ViewDisposedError(TextCompareError):
    """Raised when a view handle is used after its widget was torn down."""
    pass


class StorageError(TextCompareError):
    """Raised when buffer contents cannot be read or written."""
    pass
