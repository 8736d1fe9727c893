import io
import os

import pytest

from gitobj.errors import NoSuchObject
from gitobj.storage import FileStorer, MemoryStorer

SHA_HEX = "aaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa"
SHA = bytes.fromhex(SHA_HEX)


def test_memory_storer_includes_given_entries():
    storer = MemoryStorer({SHA_HEX: io.BytesIO(b"\x01")})
    assert storer.open(SHA).read() == b"\x01"


def test_memory_storer_accepts_no_entries():
    storer = MemoryStorer(None)
    assert len(storer) == 0
    assert storer.close() is None
    assert storer.is_compressed() is True


def test_memory_storer_doesnt_open_missing_entries():
    storer = MemoryStorer(None)
    with pytest.raises(NoSuchObject) as info:
        storer.open(SHA)
    assert info.value == NoSuchObject(SHA)


def test_memory_storer_stores_new_entries():
    storer = MemoryStorer(None)
    assert len(storer) == 0

    assert storer.store(SHA, io.BytesIO(b"hello")) == 5
    assert len(storer) == 1
    assert SHA_HEX in storer
    assert storer.open(SHA).read() == b"hello"


def test_memory_storer_stores_existing_entries():
    storer = MemoryStorer(None)
    storer.store(SHA, io.BytesIO())
    assert len(storer) == 1

    assert storer.store(SHA, io.BytesIO()) == 0
    assert len(storer) == 1


def test_file_storer_round_trip(tmp_path):
    storer = FileStorer(tmp_path / "objects", tmp_path)
    assert storer.store(SHA, io.BytesIO(b"compressed")) == 10

    expected = tmp_path / "objects" / "aa" / SHA_HEX[2:]
    assert expected.read_bytes() == b"compressed"
    with storer.open(SHA) as handle:
        assert handle.read() == b"compressed"


def test_file_storer_missing_object(tmp_path):
    storer = FileStorer(tmp_path, "")
    with pytest.raises(NoSuchObject):
        storer.open(SHA)


def test_file_storer_keeps_existing_object(tmp_path):
    storer = FileStorer(tmp_path, tmp_path)
    storer.store(SHA, io.BytesIO(b"first"))

    replacement = io.BytesIO(b"second")
    assert storer.store(SHA, replacement) == 0
    assert replacement.read() == b""
    with storer.open(SHA) as handle:
        assert handle.read() == b"first"


def test_file_storer_leaves_no_temporary_files(tmp_path):
    scratch = tmp_path / "scratch"
    scratch.mkdir()
    storer = FileStorer(tmp_path / "objects", scratch)
    storer.store(SHA, io.BytesIO(b"data"))
    assert os.listdir(scratch) == []
    assert storer.root == os.fspath(tmp_path / "objects")
    assert storer.is_compressed() is True