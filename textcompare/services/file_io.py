"""
File reading for loading text into a comparison pane.

Handles:
- Encoding detection
- Binary file rejection
- Line ending normalization
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import chardet


@dataclass
class ReadResult:
    """Result of a file read operation."""
    success: bool
    content: str = ""
    encoding: str = ""
    error: Optional[str] = None
    is_binary: bool = False


class FileIOService:
    """Service for reading text files into buffers."""

    # Binary file signatures (magic bytes)
    BINARY_SIGNATURES = [
        b'\x89PNG',        # PNG
        b'\xff\xd8\xff',   # JPEG
        b'GIF8',           # GIF
        b'PK\x03\x04',     # ZIP
        b'\x1f\x8b',       # GZIP
        b'%PDF',           # PDF
        b'\x7fELF',        # ELF
    ]

    def __init__(
        self,
        default_encoding: str = 'utf-8',
        fallback_encoding: str = 'latin-1',
        binary_check_size: int = 8192
    ):
        self.default_encoding = default_encoding
        self.fallback_encoding = fallback_encoding
        self.binary_check_size = binary_check_size

    def read_text(
        self,
        path: Path | str,
        encoding: Optional[str] = None,
        max_text_size: int = 10 * 1024 * 1024
    ) -> ReadResult:
        """
        Read a text file with automatic encoding detection.

        Line endings are normalized to \\n, the convention of the editor.

        Args:
            path: Path to the file
            encoding: Force specific encoding (auto-detect if None)
            max_text_size: Maximum file size in bytes

        Returns:
            ReadResult with content or error information
        """
        path = Path(path)

        if not path.is_file():
            return ReadResult(success=False, error=f"Not a file: {path}")

        try:
            file_size = path.stat().st_size
            if file_size > max_text_size:
                return ReadResult(
                    success=False,
                    error=f"File too large ({file_size / 1024 / 1024:.2f} MB). "
                          f"Max size is {max_text_size / 1024 / 1024:.2f} MB."
                )

            raw_content = path.read_bytes()
        except PermissionError:
            return ReadResult(success=False, error=f"Permission denied: {path}")
        except OSError as e:
            logging.error(f"FileIOService - Failed to read {path}: {e}")
            return ReadResult(success=False, error=f"OS error: {e}")

        if self._is_binary(raw_content[:self.binary_check_size]):
            return ReadResult(success=False, is_binary=True, error="File appears to be binary")

        detected_encoding = encoding or self._detect_encoding(raw_content)
        if raw_content.startswith(b'\xef\xbb\xbf'):
            detected_encoding = 'utf-8-sig'

        try:
            content = raw_content.decode(detected_encoding)
        except (UnicodeDecodeError, LookupError):
            logging.debug(
                f"FileIOService - {path} is not valid {detected_encoding}, "
                f"falling back to {self.fallback_encoding}"
            )
            content = raw_content.decode(self.fallback_encoding, errors='replace')
            detected_encoding = self.fallback_encoding

        content = content.replace('\r\n', '\n').replace('\r', '\n')
        return ReadResult(success=True, content=content, encoding=detected_encoding)

    def _is_binary(self, chunk: bytes) -> bool:
        """Check if a chunk of file content is binary."""
        for sig in self.BINARY_SIGNATURES:
            if chunk.startswith(sig):
                return True

        if b'\x00' in chunk:
            return True

        # Check ratio of non-text bytes
        non_text = sum(1 for b in chunk if b < 9 or (13 < b < 32))
        return len(chunk) > 0 and non_text / len(chunk) > 0.3

    def _detect_encoding(self, content: bytes) -> str:
        """Detect encoding of content."""
        if not content:
            return self.default_encoding

        result = chardet.detect(content)

        if result['confidence'] > 0.7 and result['encoding']:
            detected = result['encoding'].lower()
            if detected == 'ascii':
                return 'utf-8'  # ASCII is subset of UTF-8
            return detected

        return self.default_encoding
