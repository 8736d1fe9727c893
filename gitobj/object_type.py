"""Object type enumeration and the interface shared by Git objects."""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from typing import Any, BinaryIO, ClassVar


class ObjectType(enum.IntEnum):
    """The kind of a Git object."""

    UNKNOWN = 0
    BLOB = 1
    TREE = 2
    COMMIT = 3
    TAG = 4

    def __str__(self) -> str:
        return self.name.lower()


def object_type_from_string(s: str) -> ObjectType:
    """Map a type name such as ``"blob"`` to its ``ObjectType``."""
    try:
        return ObjectType[s.upper()] if s.lower() != "unknown" else ObjectType.UNKNOWN
    except KeyError:
        return ObjectType.UNKNOWN


class GitObject(ABC):
    """A loose Git object that can be encoded to and decoded from a stream."""

    object_type: ClassVar[ObjectType]

    @abstractmethod
    def encode(self, to: BinaryIO) -> int:
        """Write the uncompressed object body to ``to``; return bytes written."""

    @abstractmethod
    def decode(self, hasher: Any, stream: Any, size: int) -> int:
        """Read the object body of ``size`` bytes from ``stream``; return bytes consumed."""