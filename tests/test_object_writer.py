import hashlib
import io
import zlib

import pytest

from gitobj.object_type import ObjectType
from gitobj.object_writer import ObjectWriter


def test_writes_headers():
    buf = io.BytesIO()
    writer = ObjectWriter(buf, hashlib.sha1())

    assert writer.write_header(ObjectType.BLOB, 1) == 7
    writer.close()

    assert zlib.decompress(buf.getvalue()) == b"blob 1\x00"


@pytest.mark.parametrize(
    "hasher, expected",
    [
        (hashlib.sha1(), "56a6051ca2b02b04ef92d5150c9ef600403cb1de"),
        (
            hashlib.sha256(),
            "36456d9b87f21fc54ed5babf1222a9ab0fbbd0c4ad239a7933522d5e4447049c",
        ),
    ],
)
def test_writes_data(hasher, expected):
    buf = io.BytesIO()
    writer = ObjectWriter(buf, hasher)
    writer.write_header(ObjectType.BLOB, 1)

    assert writer.write(b"\x31") == 1
    writer.close()

    assert zlib.decompress(buf.getvalue()) == b"blob 1\x001"
    assert writer.sha().hex() == expected


def test_raises_on_write_without_header():
    writer = ObjectWriter(io.BytesIO(), hashlib.sha1())
    with pytest.raises(RuntimeError, match="cannot write data without header"):
        writer.write(b"")


def test_raises_on_multiple_header_writes():
    writer = ObjectWriter(io.BytesIO(), hashlib.sha1())
    writer.write_header(ObjectType.BLOB, 1)
    with pytest.raises(RuntimeError, match="cannot write headers more than once"):
        writer.write_header(ObjectType.TREE, 2)


def test_keeps_track_of_hash():
    writer = ObjectWriter(io.BytesIO(), hashlib.sha1())
    assert writer.write_header(ObjectType.BLOB, 1) == 7
    assert writer.sha().hex() == "bb6ca78b66403a67c6281df142de5ef472186283"

    writer = ObjectWriter(io.BytesIO(), hashlib.sha256())
    assert writer.write_header(ObjectType.BLOB, 1) == 7
    assert (
        writer.sha().hex()
        == "3a68c454a6eb75cc55bda147a53756f0f581497eb80b9b67156fb8a8d3931cd7"
    )


def test_hash_starts_fresh():
    used = hashlib.sha1(b"previous data")
    writer = ObjectWriter(io.BytesIO(), used)
    writer.write_header(ObjectType.BLOB, 1)
    assert writer.sha().hex() == "bb6ca78b66403a67c6281df142de5ef472186283"


def test_does_not_close_stream_by_default():
    buf = io.BytesIO()
    with ObjectWriter(buf, hashlib.sha1()) as writer:
        writer.write_header(ObjectType.BLOB, 0)
    assert not buf.closed
    assert zlib.decompress(buf.getvalue()) == b"blob 0\x00"