"""Exceptions raised while reading and writing Git objects."""

from __future__ import annotations


class NoSuchObject(LookupError):
    """Raised when no object with the given object ID is available."""

    def __init__(self, oid: bytes) -> None:
        self.oid = bytes(oid)
        super().__init__(f"gitobj: no such object: {self.oid.hex()}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NoSuchObject):
            return NotImplemented
        return self.oid == other.oid

    def __hash__(self) -> int:
        return hash((NoSuchObject, self.oid))


class UnexpectedObjectType(TypeError):
    """Raised when an object was read as one type but requested as another."""

    def __init__(self, got: object, wanted: object) -> None:
        self.got = got
        self.wanted = wanted
        super().__init__(
            f'gitobj: unexpected object type, got: "{got}", wanted: "{wanted}"'
        )


def is_no_such_object(error: BaseException | None) -> bool:
    """Tell whether ``error`` reports a missing object."""
    return isinstance(error, NoSuchObject)