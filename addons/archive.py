"""Streaming access to zip-packaged add-ons.

ArchiveReader walks the members of a zip container once, front to back,
and streams the data of the current member. ArchiveWriter is its disk-side
partner: it materializes entries (already relocated by the caller) as real
files and directories.

Example:
    >>> with ArchiveReader(zip_path) as reader, ArchiveWriter(root=dest) as writer:
    ...     for entry in reader:
    ...         writer.write_entry(entry.with_path(str(dest / entry.path)), reader)
"""

from __future__ import annotations

import io
import logging
import os
import time
import zipfile
import zlib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import BinaryIO, Iterator

from addons.errors import ArchiveOpenError, ArchiveReadError, ArchiveWriteError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024

# Failures zipfile can surface while decompressing a member
_READ_ERRORS = (
    zipfile.BadZipFile,
    zlib.error,
    EOFError,
    OSError,
    NotImplementedError,
    RuntimeError,
)


@dataclass(frozen=True)
class ArchiveEntry:
    """A member of an archive.

    Attributes:
        path: Path of the member inside the archive ("/" separated), or its
            destination on disk once rewritten with with_path().
        is_dir: True for directory members.
        size: Uncompressed size in bytes.
        modified: Modification time as stored in the archive.
    """

    path: str
    is_dir: bool
    size: int
    modified: tuple[int, int, int, int, int, int]
    _info: zipfile.ZipInfo = field(repr=False, compare=False)

    @classmethod
    def from_zipinfo(cls, info: zipfile.ZipInfo) -> ArchiveEntry:
        return cls(
            path=info.filename,
            is_dir=info.is_dir(),
            size=info.file_size,
            modified=info.date_time,
            _info=info,
        )

    @property
    def name(self) -> str:
        """Last component of the path (empty for directory members)."""
        return self.path.rsplit("/", 1)[-1]

    @property
    def timestamp(self) -> float:
        """Modification time as a POSIX timestamp (local time)."""
        return time.mktime(self.modified + (0, 0, -1))

    def with_path(self, path: str) -> ArchiveEntry:
        """Return a copy of this entry pointing at another path."""
        return replace(self, path=path)


class ArchiveReader:
    """Forward-only reader over the members of a zip container.

    The reader is not rewindable: once next_entry() returns None the
    archive has to be reopened to be walked again.
    """

    def __init__(self, archive_path: Path | str):
        """Open an archive for reading.

        Args:
            archive_path: Path to the .zip file.

        Raises:
            ArchiveOpenError: If the file is missing, unreadable, or not a
                zip container.
        """
        self.archive_path = Path(archive_path)
        try:
            self._zip = zipfile.ZipFile(self.archive_path, "r")
        except (OSError, zipfile.BadZipFile, zipfile.LargeZipFile) as e:
            raise ArchiveOpenError(
                f"Error loading archive {self.archive_path}: {e}"
            ) from e

        self._members = iter(self._zip.infolist())
        self._current: zipfile.ZipInfo | None = None
        self._consumed = False
        self._closed = False

    def __enter__(self) -> ArchiveReader:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __iter__(self) -> Iterator[ArchiveEntry]:
        while True:
            entry = self.next_entry()
            if entry is None:
                return
            yield entry

    def close(self) -> None:
        """Release the underlying file. Safe to call more than once."""
        if not self._closed:
            self._zip.close()
            self._closed = True

    def next_entry(self) -> ArchiveEntry | None:
        """Advance to the next member.

        Returns:
            The next entry, or None at the end of the archive.
        """
        if self._closed:
            raise ArchiveReadError(f"Archive {self.archive_path} is closed")

        info = next(self._members, None)
        self._current = info
        self._consumed = False
        if info is None:
            return None
        return ArchiveEntry.from_zipinfo(info)

    def copy_entry_data(self, sink: BinaryIO) -> int:
        """Stream the current entry's data into a writable binary sink.

        Data is copied in CHUNK_SIZE blocks. An entry's data can only be
        consumed once; copying it again writes nothing.

        Args:
            sink: Any object with a write(bytes) method.

        Returns:
            Number of bytes written to the sink.

        Raises:
            ArchiveReadError: If there is no current entry or its data is
                corrupt.
        """
        if self._current is None:
            raise ArchiveReadError(
                f"No current entry in {self.archive_path}; call next_entry() first"
            )
        if self._consumed or self._current.is_dir():
            return 0

        self._consumed = True
        total = 0
        try:
            src = self._zip.open(self._current, "r")
        except _READ_ERRORS as e:
            raise ArchiveReadError(
                f"Error uncompressing {self._current.filename}: {e}"
            ) from e

        with src:
            while True:
                try:
                    chunk = src.read(CHUNK_SIZE)
                except _READ_ERRORS as e:
                    raise ArchiveReadError(
                        f"Error uncompressing {self._current.filename}: {e}"
                    ) from e
                if not chunk:
                    break
                sink.write(chunk)
                total += len(chunk)

        return total

    def read_entry_data(self) -> bytes:
        """Read the current entry's data into memory."""
        buffer = io.BytesIO()
        self.copy_entry_data(buffer)
        return buffer.getvalue()


class ArchiveWriter:
    """Write archive entries straight to the filesystem.

    Entries must already carry their destination path (see
    ArchiveEntry.with_path). When a root is given, any entry resolving
    outside of it is rejected.
    """

    def __init__(self, root: Path | str | None = None):
        self.root = Path(root).resolve() if root is not None else None
        self.written = 0
        self._closed = False

    def __enter__(self) -> ArchiveWriter:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            logger.debug("Archive writer finished: %d entries written", self.written)

    def write_entry(self, entry: ArchiveEntry, reader: ArchiveReader) -> None:
        """Create the file or directory for an entry and fill it.

        Args:
            entry: Entry whose path is the final destination on disk.
            reader: The reader positioned on that entry.

        Raises:
            ArchiveWriteError: If the destination escapes the root, cannot be
                created, or a write fails. A partial file may remain.
            ArchiveReadError: If the entry data is corrupt.
        """
        if self._closed:
            raise ArchiveWriteError("Archive writer is closed")

        target = Path(entry.path)
        self._check_confined(target)

        try:
            if entry.is_dir:
                target.mkdir(parents=True, exist_ok=True)
            else:
                target.parent.mkdir(parents=True, exist_ok=True)
                with open(target, "wb") as f:
                    size = reader.copy_entry_data(f)
                mtime = entry.timestamp
                os.utime(target, (mtime, mtime))
                logger.debug("Wrote %s (%d bytes)", target, size)
        except OSError as e:
            raise ArchiveWriteError(f"Error writing {target} to disk: {e}") from e

        self.written += 1

    def _check_confined(self, target: Path) -> None:
        if self.root is None:
            return
        resolved = target.resolve()
        if resolved != self.root and not resolved.is_relative_to(self.root):
            raise ArchiveWriteError(
                f"Refusing to write {target}: outside of {self.root}"
            )
