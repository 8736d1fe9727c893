"""Git commit objects."""

from __future__ import annotations

import binascii
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, BinaryIO, ClassVar

from gitobj.object_type import GitObject, ObjectType

# Longest line, including its newline, that a commit may contain.
_MAX_LINE = 10 * 1024 * 1024
_READ_CHUNK = 64 * 1024
_ENCODING = "utf-8"
_ERRORS = "surrogateescape"


@dataclass
class Signature:
    """Name, e-mail and time of an author or committer."""

    name: str
    email: str
    when: datetime

    def __str__(self) -> str:
        when = self.when if self.when.tzinfo is not None else self.when.astimezone()
        seconds = math.floor(when.timestamp())
        zone = when.strftime("%z")[:5]
        return f"{self.name} <{self.email}> {seconds} {zone}"


@dataclass
class ExtraHeader:
    """A commit header other than tree, parent, author and committer."""

    key: str
    value: str


def _read_all(stream: Any) -> bytes:
    parts = []
    while chunk := stream.read(_READ_CHUNK):
        parts.append(chunk)
    return b"".join(parts)


def _split_lines(data: bytes) -> list[bytes]:
    lines = data.split(b"\n")
    if lines and lines[-1] == b"":
        lines.pop()
    result = []
    for line in lines:
        if len(line) + 1 > _MAX_LINE:
            raise ValueError("failed to parse commit buffer: token too long")
        result.append(line[:-1] if line.endswith(b"\r") else line)
    return result


def _parse_oid(fields: list[str], what: str) -> bytes:
    if len(fields) < 2:
        raise ValueError(f"error parsing {what}: missing object id")
    try:
        return binascii.unhexlify(fields[1])
    except (binascii.Error, ValueError) as err:
        raise ValueError(f"error parsing {what}: {err}") from err


@dataclass
class Commit(GitObject):
    """A Git commit. Author and committer are kept verbatim."""

    object_type: ClassVar[ObjectType] = ObjectType.COMMIT

    author: str = ""
    committer: str = ""
    parent_ids: list[bytes] = field(default_factory=list)
    tree_id: bytes = b""
    extra_headers: list[ExtraHeader] = field(default_factory=list)
    message: str = ""

    def decode(self, hasher: Any, stream: Any, size: int) -> int:
        """Parse a commit body from ``stream``; return the bytes consumed."""
        consumed = 0
        finished_headers = False
        message_parts: list[str] = []

        for raw in _split_lines(_read_all(stream)):
            consumed += len(raw) + 1
            text = raw.decode(_ENCODING, _ERRORS)

            if finished_headers:
                message_parts.append(text)
                continue
            if not text:
                finished_headers = True
                continue

            fields = text.split(" ")
            keyword = fields[0]
            if keyword == "tree":
                self.tree_id = _parse_oid(fields, "tree")
            elif keyword == "parent":
                self.parent_ids.append(_parse_oid(fields, "parent"))
            elif keyword == "author":
                self.author = text[7:]
            elif keyword == "committer":
                self.committer = text[10:]
            elif text.startswith(" "):
                if not self.extra_headers:
                    raise ValueError(
                        "failed to parse commit buffer: continuation line without header"
                    )
                last = self.extra_headers[-1]
                last.value = f"{last.value}\n{text[1:]}"
            else:
                self.extra_headers.append(ExtraHeader(keyword, " ".join(fields[1:])))

        self.message = "\n".join(message_parts)
        return consumed

    def encode(self, to: BinaryIO) -> int:
        """Write the commit body to ``to`` and return the number of bytes."""
        lines = [f"tree {self.tree_id.hex()}"]
        lines.extend(f"parent {pid.hex()}" for pid in self.parent_ids)
        lines.append(f"author {self.author}")
        lines.append(f"committer {self.committer}")
        lines.extend(
            f"{hdr.key} {hdr.value.replace(chr(10), chr(10) + ' ')}"
            for hdr in self.extra_headers
        )
        text = "\n".join(lines) + f"\n\n{self.message}\n"
        data = text.encode(_ENCODING, _ERRORS)
        to.write(data)
        return len(data)