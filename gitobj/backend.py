"""Storage backends that tie together the stores an object database reads from."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from typing import Any, BinaryIO

from gitobj.errors import NoSuchObject
from gitobj.storage import FileStorer, MemoryStorer

# Separator between directories in an alternates string.
ALTERNATES_SEPARATOR = os.pathsep

_OCTAL_ESCAPE = re.compile(rb"\\[0-7]{1,3}")
_HEX_ESCAPE = re.compile(rb"\\x[0-9a-fA-F]{2}")
_REPLACEMENTS = (
    (rb"\a", b"\a"),
    (rb"\b", b"\b"),
    (rb"\t", b"\t"),
    (rb"\n", b"\n"),
    (rb"\v", b"\v"),
    (rb"\f", b"\f"),
    (rb"\r", b"\r"),
    (b"\\\\", b"\\"),
    (b'\\"', b'"'),
    (b"\\'", b"'"),
)
_ENCODING = "utf-8"
_ERRORS = "surrogateescape"


def _unquote(entry: str) -> str:
    raw = entry[1:-1].encode(_ENCODING, _ERRORS)
    for old, new in _REPLACEMENTS:
        raw = raw.replace(old, new)
    raw = _OCTAL_ESCAPE.sub(lambda m: bytes([int(m.group()[1:], 8) & 0xFF]), raw)
    raw = _HEX_ESCAPE.sub(lambda m: bytes([int(m.group()[2:], 16)]), raw)
    return raw.decode(_ENCODING, _ERRORS)


def split_alternate_string(env: str, separator: str = ALTERNATES_SEPARATOR) -> list[str]:
    """Split an alternates string into directories, unquoting quoted entries."""
    return [
        _unquote(entry) if entry.startswith('"') and entry.endswith('"') else entry
        for entry in env.split(separator)
    ]


class _MultiStorage:
    """Reads objects from the first of several stores that holds them."""

    def __init__(self, stores: list[Any]) -> None:
        self.stores = list(stores)

    def open(self, sha: bytes) -> BinaryIO:
        for store in self.stores:
            try:
                return store.open(sha)
            except NoSuchObject:
                continue
        raise NoSuchObject(sha)

    def close(self) -> None:
        for store in self.stores:
            store.close()

    def is_compressed(self) -> bool:
        return True


class FilesystemBackend:
    """A backend reading from loose-object directories and writing to the main one."""

    def __init__(self, fs: FileStorer, stores: list[Any]) -> None:
        self.fs = fs
        self.stores = list(stores)

    def storage(self) -> tuple[_MultiStorage, FileStorer]:
        """Return the readable storage and the writable storage."""
        return _MultiStorage(self.stores), self.fs


class MemoryBackend:
    """A backend holding every object in memory."""

    def __init__(self, storer: MemoryStorer) -> None:
        self.storer = storer

    def storage(self) -> tuple[MemoryStorer, MemoryStorer]:
        """Return the same memory store for reading and for writing."""
        return self.storer, self.storer


def _alternates_from_file(root: str) -> list[str]:
    try:
        with open(os.path.join(root, "info", "alternates"), encoding=_ENCODING,
                  errors=_ERRORS, newline="") as handle:
            text = handle.read()
    except OSError:
        return []
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def new_filesystem_backend(
    root: str | os.PathLike[str],
    tmp: str | os.PathLike[str] = "",
    alternates: str = "",
) -> FilesystemBackend:
    """Build a backend over ``root`` plus any alternate object directories.

    Alternates come from ``root/info/alternates`` and from ``alternates``,
    which uses the syntax of GIT_ALTERNATE_OBJECT_DIRECTORIES.
    """
    root = os.fspath(root)
    main = FileStorer(root, tmp)
    stores: list[Any] = [main]
    stores.extend(FileStorer(directory, "") for directory in _alternates_from_file(root))
    if alternates:
        stores.extend(
            FileStorer(directory, "") for directory in split_alternate_string(alternates)
        )
    return FilesystemBackend(main, stores)


def new_memory_backend(entries: Mapping[str, Any] | None = None) -> MemoryBackend:
    """Build a memory backend, optionally seeded with hex-keyed entries."""
    return MemoryBackend(MemoryStorer(entries))