"""Git blob objects."""

from __future__ import annotations

import io
import os
from dataclasses import dataclass
from typing import Any, BinaryIO, Callable, ClassVar

from gitobj.object_type import GitObject, ObjectType

_COPY_CHUNK = 64 * 1024


class _LimitedReader:
    """Reads at most ``remaining`` bytes from an underlying stream."""

    def __init__(self, stream: Any, limit: int) -> None:
        self._stream = stream
        self._remaining = max(limit, 0)

    def read(self, size: int = -1) -> bytes:
        if self._remaining <= 0:
            return b""
        if size is None or size < 0 or size > self._remaining:
            size = self._remaining
        data = self._stream.read(size)
        self._remaining -= len(data)
        return data


@dataclass(eq=False)
class Blob(GitObject):
    """A Git object of type "blob".

    ``contents`` yields the uncompressed contents and may only be read once.
    """

    object_type: ClassVar[ObjectType] = ObjectType.BLOB

    size: int = 0
    contents: Any = None
    close_fn: Callable[[], None] | None = None

    def decode(self, hasher: Any, stream: Any, size: int) -> int:
        """Take the blob contents lazily from ``stream``; consumes nothing now."""
        self.size = size
        self.contents = _LimitedReader(stream, size)

        def _close() -> None:
            close = getattr(stream, "close", None)
            if close is not None:
                close()

        self.close_fn = _close
        return 0

    def encode(self, to: BinaryIO) -> int:
        """Copy the blob contents into ``to`` and return the number of bytes."""
        if self.contents is None:
            return 0
        written = 0
        while chunk := self.contents.read(_COPY_CHUNK):
            to.write(chunk)
            written += len(chunk)
        return written

    def close(self) -> None:
        """Release any resources held by the blob."""
        if self.close_fn is not None:
            self.close_fn()

    def __enter__(self) -> Blob:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Blob):
            return NotImplemented
        return self.contents is other.contents and self.size == other.size


def blob_from_bytes(contents: bytes) -> Blob:
    """Return a blob that yields ``contents``."""
    return Blob(size=len(contents), contents=io.BytesIO(contents))


def blob_from_file(path: str | os.PathLike[str]) -> Blob:
    """Return a blob reading lazily from the file at ``path``.

    Closing the blob closes the file.
    """
    try:
        handle = open(path, "rb")
    except OSError as err:
        raise OSError(f"gitobj: could not open: {path}: {err}") from err
    try:
        size = os.fstat(handle.fileno()).st_size
    except OSError as err:
        handle.close()
        raise OSError(f"gitobj: could not stat {path}: {err}") from err

    def _close() -> None:
        try:
            handle.close()
        except OSError as err:
            raise OSError(f"gitobj: could not close {path}: {err}") from err

    return Blob(size=size, contents=handle, close_fn=_close)