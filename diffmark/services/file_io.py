"""
File I/O service for reading and writing files safely.

Handles:
- Encoding detection
- Binary file rejection
- Atomic writes
- Stat, copy and rename with uniform errors
"""

from __future__ import annotations

import os
import shutil
import tempfile
import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum, auto
from pathlib import Path
from typing import Optional

import chardet


class FileServiceError(Exception):
    """Raised when a file system operation fails."""

    def __init__(self, message: str, path: Optional[Path | str] = None):
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class LineEnding(Enum):
    """Line ending style."""
    LF = auto()      # Unix: \n
    CRLF = auto()    # Windows: \r\n
    CR = auto()      # Old Mac: \r
    MIXED = auto()   # Mixed endings
    NONE = auto()    # No line endings (single line)


@dataclass
class FileContent:
    """Container for file content with metadata."""
    content: str
    encoding: str
    line_ending: LineEnding
    bom: bool
    size: int


@dataclass
class ReadResult:
    """Result of a file read operation."""
    success: bool
    content: Optional[FileContent] = None
    error: Optional[str] = None
    is_binary: bool = False

    @property
    def text(self) -> str:
        return self.content.content if self.content else ""

    @property
    def encoding(self) -> Optional[str]:
        return self.content.encoding if self.content else None


@dataclass
class WriteResult:
    """Result of a file write operation."""
    success: bool
    bytes_written: int = 0
    error: Optional[str] = None


@dataclass
class FileStats:
    """Type and permission information about a path."""
    is_directory: bool
    is_file: bool
    is_symlink: bool
    readable: bool
    writable: bool
    executable: bool
    last_access_time: datetime
    size: int = 0


class FileIOService:
    """Service for safe file I/O operations."""

    # Binary file signatures (magic bytes)
    BINARY_SIGNATURES = [
        b'\x00',           # Null byte (strong indicator)
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
        detect_encoding: bool = False,
        atomic_writes: bool = True,
        binary_check_size: int = 8192
    ):
        self.default_encoding = default_encoding
        self.fallback_encoding = fallback_encoding
        self.detect_encoding = detect_encoding
        self.atomic_writes = atomic_writes
        self.binary_check_size = binary_check_size

    def read_text_file(
        self,
        path: Path | str,
        encoding: Optional[str] = None
    ) -> ReadResult:
        """
        Read a text file.

        Line endings are kept as they are: the caller sees exactly the
        characters stored in the file.

        Args:
            path: Path to the file
            encoding: Force specific encoding (configured default, or
                detection when enabled, if None)

        Returns:
            ReadResult with content or error information
        """
        path = Path(path)

        if not path.exists():
            return ReadResult(success=False, error=f"File not found: {path}")

        if not path.is_file():
            return ReadResult(success=False, error=f"Not a file: {path}")

        try:
            raw_content = path.read_bytes()
        except PermissionError:
            return ReadResult(success=False, error=f"Permission denied: {path}")
        except OSError as e:
            return ReadResult(success=False, error=f"OS error: {e}")

        if self._is_binary(raw_content[:self.binary_check_size]):
            return ReadResult(success=False, is_binary=True,
                              error=f"File appears to be binary: {path}")

        if encoding:
            detected_encoding = encoding
        elif self.detect_encoding:
            detected_encoding = self._detect_encoding(raw_content)
        else:
            detected_encoding = self.default_encoding

        # Check for BOM
        bom = False
        if raw_content.startswith(b'\xef\xbb\xbf'):
            bom = True
            detected_encoding = 'utf-8-sig'

        try:
            content = raw_content.decode(detected_encoding)
        except (UnicodeDecodeError, LookupError):
            logging.warning(
                f"FileIOService - Could not decode {path} as {detected_encoding}, "
                f"falling back to {self.fallback_encoding}"
            )
            content = raw_content.decode(self.fallback_encoding, errors='replace')
            detected_encoding = self.fallback_encoding

        return ReadResult(
            success=True,
            content=FileContent(
                content=content,
                encoding=detected_encoding,
                line_ending=self._detect_line_ending(content),
                bom=bom,
                size=len(raw_content)
            )
        )

    def write_text_file(
        self,
        path: Path | str,
        content: str,
        encoding: Optional[str] = None
    ) -> WriteResult:
        """
        Write text to a file, replacing it.

        Args:
            path: Path to write to
            content: Text to write, written as is
            encoding: Encoding to use (service default if None)

        Returns:
            WriteResult with success status
        """
        path = Path(path)
        encoding = encoding or self.default_encoding

        try:
            encoded = content.encode(encoding)
        except (UnicodeEncodeError, LookupError) as e:
            return WriteResult(success=False, error=f"Cannot encode as {encoding}: {e}")

        try:
            path.parent.mkdir(parents=True, exist_ok=True)

            if self.atomic_writes:
                self._write_atomic(path, encoded)
            else:
                path.write_bytes(encoded)

            return WriteResult(success=True, bytes_written=len(encoded))

        except PermissionError:
            return WriteResult(success=False, error=f"Permission denied: {path}")
        except OSError as e:
            return WriteResult(success=False, error=f"OS error: {e}")

    def exists(self, path: Path | str) -> bool:
        return Path(path).exists()

    def stats(self, path: Path | str) -> FileStats:
        """
        Get type and permission information for a path.

        Raises:
            FileServiceError: If the path cannot be inspected
        """
        path = Path(path)

        try:
            st = path.stat()
            is_symlink = path.is_symlink()
        except OSError as e:
            raise FileServiceError(f"Failed to get stats for {path}: {e}", path) from e

        return FileStats(
            is_directory=path.is_dir(),
            is_file=path.is_file(),
            is_symlink=is_symlink,
            readable=os.access(path, os.R_OK),
            writable=os.access(path, os.W_OK),
            executable=os.access(path, os.X_OK),
            last_access_time=datetime.fromtimestamp(st.st_atime),
            size=st.st_size
        )

    def copy_file(self, src: Path | str, dst: Path | str) -> None:
        """
        Copy a file, keeping its metadata.

        Raises:
            FileServiceError: If the copy fails
        """
        try:
            shutil.copy2(src, dst)
        except OSError as e:
            raise FileServiceError(f"Failed to copy {src} to {dst}: {e}", src) from e

    def rename(self, src: Path | str, dst: Path | str) -> None:
        """
        Rename a file, replacing the destination if it exists.

        Raises:
            FileServiceError: If the rename fails
        """
        try:
            os.replace(src, dst)
        except OSError as e:
            raise FileServiceError(f"Failed to rename {src} to {dst}: {e}", src) from e

    def _write_atomic(self, path: Path, encoded: bytes) -> None:
        # Write to temporary file then move
        fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.")
        try:
            with os.fdopen(fd, 'wb') as f:
                f.write(encoded)
            if path.exists():
                shutil.copymode(path, temp_path)
            os.replace(temp_path, path)
        except BaseException:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise

    def _is_binary(self, chunk: bytes) -> bool:
        """Check if a leading chunk of file content looks binary."""
        for sig in self.BINARY_SIGNATURES:
            if chunk.startswith(sig):
                return True

        if b'\x00' in chunk:
            return True

        # Check ratio of non-text bytes
        non_text = sum(1 for b in chunk if b < 9 or (b > 13 and b < 32))
        return len(chunk) > 0 and non_text / len(chunk) > 0.3

    def _detect_encoding(self, content: bytes) -> str:
        """Detect encoding of content."""
        if not content:
            return self.default_encoding

        result = chardet.detect(content)

        if result['confidence'] > 0.7 and result['encoding']:
            encoding = result['encoding'].lower()
            if encoding == 'ascii':
                return 'utf-8'  # ASCII is subset of UTF-8
            return encoding

        return self.default_encoding

    def _detect_line_ending(self, content: str) -> LineEnding:
        """Detect line ending style in content."""
        crlf_count = content.count('\r\n')
        lf_count = content.count('\n') - crlf_count
        cr_count = content.count('\r') - crlf_count

        total = crlf_count + lf_count + cr_count
        if total == 0:
            return LineEnding.NONE

        if crlf_count == total:
            return LineEnding.CRLF
        elif lf_count == total:
            return LineEnding.LF
        elif cr_count == total:
            return LineEnding.CR
        else:
            return LineEnding.MIXED
