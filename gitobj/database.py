"""The object database: reading and writing Git objects against a backend."""

from __future__ import annotations

import enum
import hashlib
import io
import os
import tempfile
import threading
from typing import Any

from gitobj.backend import new_filesystem_backend
from gitobj.blob import Blob
from gitobj.commit import Commit
from gitobj.errors import UnexpectedObjectType
from gitobj.object_reader import ObjectReader
from gitobj.object_type import GitObject, ObjectType
from gitobj.object_writer import ObjectWriter

_CHUNK = 64 * 1024


class ObjectFormat(str, enum.Enum):
    """The hash algorithm a repository uses for object IDs."""

    SHA1 = "sha1"
    SHA256 = "sha256"


class ObjectDatabase:
    """Reads objects from one storage and writes them to another."""

    def __init__(
        self,
        ro: Any = None,
        rw: Any = None,
        *,
        tmp: str | os.PathLike[str] = "",
        object_format: ObjectFormat | str = ObjectFormat.SHA1,
    ) -> None:
        self.ro = ro
        self.rw = rw
        self.tmp = os.fspath(tmp) if tmp else ""
        self.object_format = ObjectFormat(object_format)
        self._closed = False
        self._lock = threading.Lock()

    def close(self) -> None:
        """Close the database and its storages; closing twice is an error."""
        with self._lock:
            if self._closed:
                raise ValueError("gitobj: *ObjectDatabase already closed")
            self._closed = True
        self.ro.close()
        self.rw.close()

    def __enter__(self) -> ObjectDatabase:
        return self

    def __exit__(self, *exc_info: object) -> None:
        if not self._closed:
            self.close()

    def object(self, sha: bytes) -> GitObject:
        """Return the object named ``sha``, of whatever type it has."""
        reader = self._open(sha)
        try:
            typ, _ = reader.header()
        except BaseException:
            reader.close()
            raise
        if typ == ObjectType.BLOB:
            into: GitObject = Blob()
        elif typ == ObjectType.COMMIT:
            into = Commit()
        else:
            reader.close()
            raise ValueError(f"gitobj: unknown object type: {typ}")
        self._decode(reader, into)
        return into

    def blob(self, sha: bytes) -> Blob:
        """Return the blob named ``sha``; close it when done."""
        blob = Blob()
        self._decode(self._open(sha), blob)
        return blob

    def commit(self, sha: bytes) -> Commit:
        """Return the commit named ``sha``."""
        commit = Commit()
        self._decode(self._open(sha), commit)
        return commit

    def write_blob(self, blob: Blob) -> bytes:
        """Store ``blob``, close it, and return its object ID."""
        with tempfile.TemporaryFile(dir=self.tmp or None) as buf:
            sha = self._encode(blob, buf)
        blob.close()
        return sha

    def write_commit(self, commit: Commit) -> bytes:
        """Store ``commit`` and return its object ID."""
        return self._encode(commit, io.BytesIO())

    def root(self) -> tuple[str, bool]:
        """Return the on-disk root of the writable store and whether there is one."""
        root = getattr(self.rw, "root", None)
        if isinstance(root, str):
            return root, True
        return "", False

    def hasher(self) -> Any:
        """Return a new hash object for this database's object format."""
        return hashlib.new(self.object_format.value)

    def _encode(self, obj: GitObject, buf: Any) -> bytes:
        length = obj.encode(buf)
        buf.seek(0)
        with tempfile.TemporaryFile(dir=self.tmp or None) as compressed:
            writer = ObjectWriter(compressed, self.hasher())
            writer.write_header(obj.object_type, length)
            while chunk := buf.read(_CHUNK):
                writer.write(chunk)
            writer.close()
            sha = writer.sha()
            compressed.seek(0)
            self.rw.store(sha, compressed)
        return sha

    def _open(self, sha: bytes) -> ObjectReader:
        if self._closed:
            raise ValueError("gitobj: cannot use closed *pack.Set")
        handle = self.ro.open(sha)
        try:
            return ObjectReader(handle, compressed=self.ro.is_compressed())
        except BaseException:
            handle.close()
            raise

    def _decode(self, reader: ObjectReader, into: GitObject) -> None:
        # Blobs keep reading from the reader lazily, so only Blob.close() may
        # close it.
        try:
            typ, size = reader.header()
            if typ != into.object_type:
                raise UnexpectedObjectType(got=typ, wanted=into.object_type)
            into.decode(self.hasher(), reader, size)
        except BaseException:
            reader.close()
            raise
        if into.object_type != ObjectType.BLOB:
            reader.close()


def from_backend(backend: Any, *, object_format: ObjectFormat | str = ObjectFormat.SHA1) -> ObjectDatabase:
    """Build a database over the storages of ``backend``."""
    ro, rw = backend.storage()
    return ObjectDatabase(ro, rw, object_format=object_format)


def from_filesystem(
    root: str | os.PathLike[str],
    tmp: str | os.PathLike[str] = "",
    *,
    alternates: str = "",
    object_format: ObjectFormat | str = ObjectFormat.SHA1,
) -> ObjectDatabase:
    """Build a database over an objects directory such as ``repo/.git/objects``."""
    backend = new_filesystem_backend(root, tmp, alternates)
    database = from_backend(backend, object_format=object_format)
    database.tmp = os.fspath(tmp) if tmp else ""
    return database