"""Writing zlib-compressed Git objects while hashing their contents."""

from __future__ import annotations

import hashlib
import zlib
from typing import Any

from gitobj.object_type import ObjectType


def _fresh_hash(hasher: Any) -> Any:
    name = hasher if isinstance(hasher, str) else hasher.name
    return hashlib.new(name)


class ObjectWriter:
    """Compresses an object into ``stream`` and tracks the hash of its data.

    The hash starts fresh whatever state ``hasher`` is in; only its algorithm
    is used. Set ``close_stream`` to true to have closing the writer also
    close ``stream``.
    """

    def __init__(self, stream: Any, hasher: Any) -> None:
        self._stream = stream
        self._sum = _fresh_hash(hasher)
        self._compressor = zlib.compressobj()
        self.close_stream = False
        self._wrote_header = False
        self._closed = False

    def _write(self, data: bytes) -> int:
        if self._closed:
            raise ValueError("gitobj: write to closed object writer")
        compressed = self._compressor.compress(data)
        if compressed:
            self._stream.write(compressed)
        self._sum.update(data)
        return len(data)

    def write_header(self, object_type: ObjectType, length: int) -> int:
        """Write the object header; may be called only once."""
        if self._wrote_header:
            raise RuntimeError("gitobj: cannot write headers more than once")
        self._wrote_header = True
        return self._write(f"{object_type} {length}\x00".encode("ascii"))

    def write(self, data: bytes) -> int:
        """Write uncompressed body bytes; the header must come first."""
        if not self._wrote_header:
            raise RuntimeError("gitobj: cannot write data without header")
        return self._write(bytes(data))

    def sha(self) -> bytes:
        """Return the hash of the uncompressed data written so far."""
        return self._sum.digest()

    def close(self) -> None:
        """Flush the compressed data and, if asked, close the stream."""
        if self._closed:
            return
        self._closed = True
        tail = self._compressor.flush()
        if tail:
            self._stream.write(tail)
        if self.close_stream:
            self._stream.close()

    def __enter__(self) -> ObjectWriter:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()