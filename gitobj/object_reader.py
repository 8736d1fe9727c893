"""Reading Git object headers and bodies from raw or zlib-compressed streams."""

from __future__ import annotations

import re
import zlib
from typing import Any

from gitobj.object_type import ObjectType, object_type_from_string

_CHUNK = 64 * 1024
_SIZE_PATTERN = re.compile(r"[+-]?[0-9]+")


def _check_zlib_header(prefix: bytes) -> None:
    if len(prefix) < 2:
        raise EOFError("zlib: unexpected end of stream")
    cmf, flg = prefix[0], prefix[1]
    if cmf & 0x0F != 8 or ((cmf << 8) | flg) % 31 != 0:
        raise ValueError("zlib: invalid header")
    if flg & 0x20:
        raise ValueError("zlib: invalid dictionary")


class ObjectReader:
    """Reads a Git object's header and gives a view of its uncompressed body.

    The header is parsed lazily and cached, so ``header()`` may be called at
    any time and any number of times. ``read()`` always skips the header.
    """

    def __init__(self, stream: Any, compressed: bool = True) -> None:
        self._stream = stream
        self._buffer = bytearray()
        self._exhausted = False
        self._closed = False
        self._header: tuple[ObjectType, int] | None = None
        self._inflater: Any = None
        if compressed:
            prefix = stream.read(2)
            _check_zlib_header(prefix)
            self._inflater = zlib.decompressobj()
            self._inflate(prefix)

    def _inflate(self, data: bytes) -> None:
        try:
            self._buffer += self._inflater.decompress(data)
        except zlib.error as err:
            raise ValueError(f"zlib: {err}") from err

    def _fill(self) -> bool:
        """Append more uncompressed data to the buffer; False at end of data."""
        if self._exhausted:
            return False
        if self._inflater is not None and self._inflater.eof:
            self._exhausted = True
            return False
        chunk = self._stream.read(_CHUNK)
        if not chunk:
            self._exhausted = True
            if self._inflater is not None and not self._inflater.eof:
                raise EOFError("zlib: unexpected end of compressed stream")
            return False
        if self._inflater is None:
            self._buffer += chunk
        else:
            self._inflate(chunk)
        return True

    def _read_until(self, delimiter: bytes) -> bytes:
        start = 0
        while True:
            index = self._buffer.find(delimiter, start)
            if index >= 0:
                taken = bytes(self._buffer[: index + 1])
                del self._buffer[: index + 1]
                return taken
            start = len(self._buffer)
            if not self._fill():
                raise EOFError("gitobj: unexpected end of object header")

    def header(self) -> tuple[ObjectType, int]:
        """Return the object's type and uncompressed body size."""
        if self._header is not None:
            return self._header

        type_name = self._read_until(b" ")[:-1].decode("ascii", "replace")
        size_text = self._read_until(b"\x00")[:-1].decode("ascii", "replace")
        if not _SIZE_PATTERN.fullmatch(size_text):
            raise ValueError(f"gitobj: invalid object size: {size_text!r}")

        self._header = (object_type_from_string(type_name), int(size_text))
        return self._header

    def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` uncompressed body bytes, or all when negative."""
        self.header()
        if size is None or size < 0:
            while self._fill():
                pass
            size = len(self._buffer)
        else:
            while len(self._buffer) < size and self._fill():
                pass
        taken = bytes(self._buffer[:size])
        del self._buffer[:size]
        return taken

    def close(self) -> None:
        """Close the underlying stream."""
        if self._closed:
            return
        self._closed = True
        close = getattr(self._stream, "close", None)
        if close is not None:
            close()

    def __enter__(self) -> ObjectReader:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()