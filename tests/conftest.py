import json
import zlib
from binascii import crc32
from struct import pack

import pytest

from ocfreader.const import MAGIC

SYNC_MARKER = bytes(range(16))

WEATHER_SCHEMA = {
    "doc": "A weather reading.",
    "name": "Weather",
    "namespace": "test",
    "type": "record",
    "fields": [
        {"name": "station", "type": "string"},
        {"name": "time", "type": "long"},
        {"name": "temp", "type": "int"},
    ],
}

WEATHER_RECORDS = [
    {"station": "011990-99999", "temp": 0, "time": 1433269388},
    {"station": "011990-99999", "temp": 22, "time": 1433270389},
    {"station": "011990-99999", "temp": -11, "time": 1433273379},
    {"station": "012650-99999", "temp": 111, "time": 1433275478},
]


def encode_long(n):
    n = (n << 1) ^ (n >> 63)
    out = bytearray()
    while n & ~0x7F:
        out.append((n & 0x7F) | 0x80)
        n >>= 7
    out.append(n)
    return bytes(out)


def encode_bytes(data):
    return encode_long(len(data)) + data


def encode_string(s):
    return encode_bytes(s.encode())


def encode_weather(record):
    return (
        encode_string(record["station"])
        + encode_long(record["time"])
        + encode_long(record["temp"])
    )


def encode_header(metadata, sync_marker=SYNC_MARKER):
    meta = encode_long(len(metadata)) if metadata else b""
    for key, value in metadata.items():
        meta += encode_string(key) + encode_bytes(value)
    return MAGIC + meta + encode_long(0) + sync_marker


def encode_block(records, compress=None, sync_marker=SYNC_MARKER):
    payload = b"".join(records)
    if compress is not None:
        payload = compress(payload)
    block = encode_long(len(records)) + encode_long(len(payload)) + payload
    if sync_marker is not None:
        block += sync_marker
    return block


def deflate_compress(data):
    compressor = zlib.compressobj(9, zlib.DEFLATED, -15)
    return compressor.compress(data) + compressor.flush()


def snappy_compress(data):
    snappy = pytest.importorskip("cramjam").snappy
    return bytes(snappy.compress_raw(data)) + pack(">I", crc32(data) & 0xFFFFFFFF)


def zstandard_compress(data):
    zstd = pytest.importorskip("zstandard")
    return zstd.ZstdCompressor().compress(data)


COMPRESSORS = {
    "null": None,
    "deflate": deflate_compress,
    "snappy": snappy_compress,
    "zstandard": zstandard_compress,
}


def make_container(
    blocks, schema=WEATHER_SCHEMA, codec=None, encode=encode_weather, metadata=None
):
    """Assemble a container file from a list of blocks of records."""
    meta = {"avro.schema": json.dumps(schema).encode()}
    if codec is not None:
        meta["avro.codec"] = codec.encode()
    meta.update(metadata or {})

    compress = COMPRESSORS.get(codec)
    body = b"".join(
        encode_block([encode(r) for r in block], compress) for block in blocks
    )
    return encode_header(meta) + body
