# gitobj

A small library for reading and writing Git blobs and commits against a
loose-object directory on disk or an in-memory store. Objects are stored
zlib-compressed with the standard `<type> <size>\0` header and are named by
SHA-1 or SHA-256 digests.

## Installing

```
pip install .
```

## Opening a database

An object database is usually backed by a repository's `.git/objects`
directory:

```python
from gitobj.database import from_filesystem, ObjectFormat

db = from_filesystem("/path/to/repo/.git/objects", "/path/to/repo/.git/tmp")
root, has_root = db.root()
```

Pass `object_format=ObjectFormat.SHA256` for SHA-256 repositories.
`alternates` takes extra object directories in the syntax of
`GIT_ALTERNATE_OBJECT_DIRECTORIES`: separated by `os.pathsep` (`:`, or `;` on
Windows), with optional double-quoted entries that may use C-style escapes
(`\n`, `\t`, `\\`, `\"`, octal `\302` and hex `\xc2`). The directories listed
in the repository's own `info/alternates` file are read as well. New objects
are always written to the main directory.

For tests or scratch work, an in-memory backend does the same job:

```python
from gitobj.backend import new_memory_backend
from gitobj.database import from_backend

db = from_backend(new_memory_backend(None))
```

`new_memory_backend` also accepts a mapping from hex object ID to compressed
object data (bytes or a readable stream) to seed the store.

## Writing and reading objects

```python
from gitobj.blob import blob_from_bytes
from gitobj.commit import Commit

blob_sha = db.write_blob(blob_from_bytes(b"Hello, world!\n"))
print(blob_sha.hex())   # af5626b4a114abcb82d63db7c8082c3c4756e51b

blob = db.blob(blob_sha)
print(blob.contents.read())
blob.close()

commit_sha = db.write_commit(Commit(
    author="John Doe <john@example.com> 1257894000 +0000",
    committer="Jane Doe <jane@example.com> 1257894000 +0000",
    tree_id=bytes.fromhex("fcb545d5746547a597811b7441ed8eba307be1ff"),
    message="initial commit",
))
commit = db.commit(commit_sha)
```

`blob_from_file(path)` builds a blob that reads a file lazily; `write_blob`
closes the blob once it has been stored. A blob read from the database keeps
its stream open until `close()` is called (or the blob is used as a context
manager).

`db.object(sha)` returns a `Blob` or a `Commit`, whichever is stored under
that name. Asking for an object that is not there raises
`gitobj.errors.NoSuchObject`; asking for the wrong kind raises
`gitobj.errors.UnexpectedObjectType`.

Commits keep their author and committer lines verbatim, along with any extra
headers (such as `gpgsig` or `mergetag`) in their original order, so a
decoded commit encodes back byte for byte. `gitobj.commit.Signature` formats a
name, e-mail and time as such a line.

Close the database with `db.close()` when finished (it is also a context
manager). Closing it twice raises `ValueError`, as does reading from a closed
database.

## Lower-level pieces

- `gitobj.object_reader.ObjectReader` reads an object's header and body from
  a compressed or uncompressed stream.
- `gitobj.object_writer.ObjectWriter` compresses an object to a stream while
  hashing it.
- `gitobj.storage.FileStorer` and `gitobj.storage.MemoryStorer` store raw
  object data by name.
- `gitobj.object_type.ObjectType` and `object_type_from_string` name the
  kinds of objects.

## What it does not do

- Only blobs and commits can be read and written. Trees and tags are
  recognised in object headers, but `db.object()` raises `ValueError` for
  them.
- Only loose objects are read. Objects held in pack files are not found.

## Running the tests

```
pip install .[test]
pytest
```