"""Stores that hold compressed Git objects in memory or on disk."""

from __future__ import annotations

import io
import os
import shutil
import tempfile
import threading
from collections.abc import Mapping
from typing import Any, BinaryIO

from gitobj.errors import NoSuchObject

_CHUNK = 64 * 1024


def _read_all(stream: Any) -> bytes:
    parts = []
    while chunk := stream.read(_CHUNK):
        parts.append(chunk)
    return b"".join(parts)


class MemoryStorer:
    """Holds compressed objects in memory, keyed by hex object ID."""

    def __init__(self, entries: Mapping[str, Any] | None = None) -> None:
        self._lock = threading.Lock()
        self._objects: dict[str, bytes] = {}
        self.closed = False
        for key, value in (entries or {}).items():
            if hasattr(value, "read"):
                value = _read_all(value)
            self._objects[key] = bytes(value)

    def store(self, sha: bytes, stream: Any) -> int:
        """Copy ``stream`` into the entry for ``sha``; return bytes copied."""
        data = _read_all(stream)
        with self._lock:
            self._objects[sha.hex()] = data
        return len(data)

    def open(self, sha: bytes) -> BinaryIO:
        """Return a reader over the stored data for ``sha``."""
        with self._lock:
            try:
                data = self._objects[sha.hex()]
            except KeyError:
                raise NoSuchObject(sha) from None
        return io.BytesIO(data)

    def close(self) -> None:
        """Mark the store as closed; no resources are held open."""
        with self._lock:
            self.closed = True

    def is_compressed(self) -> bool:
        """Objects are stored zlib-compressed."""
        return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._objects)

    def __contains__(self, key: object) -> bool:
        if isinstance(key, (bytes, bytearray)):
            key = bytes(key).hex()
        with self._lock:
            return key in self._objects


class FileStorer:
    """Stores compressed objects in a loose-object directory on disk."""

    def __init__(self, root: str | os.PathLike[str], tmp: str | os.PathLike[str] = "") -> None:
        self.root = os.fspath(root)
        self.tmp = os.fspath(tmp) if tmp else ""
        self.closed = False

    def _path(self, sha: bytes) -> str:
        encoded = sha.hex()
        return os.path.join(self.root, encoded[:2], encoded[2:])

    def open(self, sha: bytes) -> BinaryIO:
        """Open the object file for ``sha``; the caller must close it."""
        try:
            return open(self._path(sha), "rb")
        except FileNotFoundError:
            raise NoSuchObject(sha) from None

    def store(self, sha: bytes, stream: Any) -> int:
        """Write ``stream`` as the object ``sha``; return bytes written.

        An object that already exists is left alone and ``stream`` is drained.
        """
        path = self._path(sha)
        if os.path.exists(path):
            _read_all(stream)
            return 0

        fd, tmp_name = tempfile.mkstemp(dir=self.tmp or None)
        try:
            written = 0
            with os.fdopen(fd, "wb") as tmp:
                while chunk := stream.read(_CHUNK):
                    tmp.write(chunk)
                    written += len(chunk)
            os.makedirs(os.path.dirname(path), mode=0o755, exist_ok=True)
            try:
                os.replace(tmp_name, path)
            except OSError:
                shutil.move(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.remove(tmp_name)
            raise
        return written

    def close(self) -> None:
        """Mark the store as closed; no files are held open."""
        self.closed = True

    def is_compressed(self) -> bool:
        """Objects are stored zlib-compressed."""
        return True