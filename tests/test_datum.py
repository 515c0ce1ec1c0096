from struct import pack

import pytest

import ocfreader
from ocfreader import ContainerReader
from ocfreader.datum import DatumReader
from ocfreader.errors import SchemaResolutionError, TruncatedStream, UnknownType
from ocfreader.io.binary_decoder import BinaryDecoder
from ocfreader.io.source import BytesSource

from .conftest import (
    WEATHER_RECORDS,
    WEATHER_SCHEMA,
    encode_bytes,
    encode_long,
    encode_string,
    make_container,
)

NODE_SCHEMA = {
    "type": "record",
    "name": "Node",
    "namespace": "tree",
    "fields": [
        {"name": "label", "type": "string"},
        {
            "name": "kind",
            "type": {"type": "enum", "name": "Kind", "symbols": ["LEAF", "BRANCH"]},
        },
        {"name": "digest", "type": {"type": "fixed", "name": "Digest", "size": 4}},
        {"name": "weight", "type": ["null", "double"]},
        {"name": "tags", "type": {"type": "map", "values": "boolean"}},
        {"name": "children", "type": {"type": "array", "items": "Node"}},
        {"name": "previous", "type": ["null", "tree.Digest"]},
    ],
}


def encode_node(node):
    out = encode_string(node["label"])
    out += encode_long(["LEAF", "BRANCH"].index(node["kind"]))
    out += node["digest"]
    if node["weight"] is None:
        out += encode_long(0)
    else:
        out += encode_long(1) + pack("<d", node["weight"])
    if node["tags"]:
        out += encode_long(len(node["tags"]))
        for key, value in node["tags"].items():
            out += encode_string(key) + bytes([value])
    out += encode_long(0)
    if node["children"]:
        # Negative count, followed by the block size in bytes
        items = b"".join(encode_node(child) for child in node["children"])
        out += encode_long(-len(node["children"])) + encode_long(len(items)) + items
    out += encode_long(0)
    if node["previous"] is None:
        out += encode_long(0)
    else:
        out += encode_long(1) + node["previous"]
    return out


def make_node(label, children=(), weight=None, previous=None):
    return {
        "label": label,
        "kind": "BRANCH" if children else "LEAF",
        "digest": label.encode().ljust(4, b"-")[:4],
        "weight": weight,
        "tags": {"root": not label.startswith("n")},
        "children": list(children),
        "previous": previous,
    }


def test_recursive_named_types():
    tree = make_node(
        "top",
        [make_node("n1", weight=1.5), make_node("n2", [make_node("n3")])],
        previous=b"abcd",
    )
    binary = make_container(
        [[tree, make_node("solo")]], NODE_SCHEMA, encode=encode_node
    )

    assert ContainerReader(binary).data() == [tree, make_node("solo")]


def decode(schema, binary, reader_schema=None):
    reader = DatumReader(reader_schema)
    reader.set_writer_schema(schema)
    return reader.read(BinaryDecoder(BytesSource(binary)))


@pytest.mark.parametrize(
    "schema,binary,expected",
    [
        ("null", b"", None),
        ("boolean", b"\x01", True),
        ("boolean", b"\x00", False),
        ("int", b"\x7f", -64),
        ("long", encode_long(-(1 << 63)), -(1 << 63)),
        ("long", encode_long((1 << 63) - 1), (1 << 63) - 1),
        ("float", pack("<f", 0.5), 0.5),
        ("double", pack("<d", -2.25), -2.25),
        ("bytes", encode_bytes(b"\x00\xff"), b"\x00\xff"),
        ("string", encode_string("héllo"), "héllo"),
        ({"type": "string"}, encode_string("x"), "x"),
        (["null", "string"], b"\x02" + encode_string("x"), "x"),
        ({"type": "array", "items": "int"}, b"\x04\x02\x04\x00", [1, 2]),
        (
            {"type": "map", "values": "int"},
            b"\x02" + encode_string("a") + b"\x02\x00",
            {"a": 1},
        ),
    ],
)
def test_primitive_and_complex_values(schema, binary, expected):
    assert decode(schema, binary) == expected


def test_reader_schema_promotion():
    assert decode("int", b"\x04", reader_schema="double") == 2.0
    assert decode("bytes", encode_bytes(b"abc"), reader_schema="string") == "abc"
    assert decode("string", encode_string("abc"), reader_schema="bytes") == b"abc"


def test_reader_schema_mismatch():
    binary = make_container([WEATHER_RECORDS])
    with pytest.raises(SchemaResolutionError):
        ocfreader.reader(binary, reader_schema="string")


def test_reader_schema_matching_record():
    reader_schema = dict(WEATHER_SCHEMA, namespace="other")
    binary = make_container([WEATHER_RECORDS])
    reader = ocfreader.reader(binary, reader_schema=reader_schema)
    assert reader.data() == WEATHER_RECORDS


def test_union_index_out_of_range():
    with pytest.raises(SchemaResolutionError, match="union index"):
        decode(["null", "int"], b"\x04")


def test_enum_index_out_of_range():
    schema = {"type": "enum", "name": "E", "symbols": ["A"]}
    with pytest.raises(SchemaResolutionError, match="enum index"):
        decode(schema, b"\x02")


def test_unknown_named_type_in_writer_schema():
    schema = {
        "type": "record",
        "name": "R",
        "fields": [{"name": "f", "type": "Missing"}],
    }
    binary = make_container([], schema)
    with pytest.raises(UnknownType) as exc:
        ContainerReader(binary)
    assert exc.value.name == "Missing"


def test_truncated_value():
    with pytest.raises(TruncatedStream):
        decode("string", encode_long(10) + b"abc")


def test_int_and_long_fields():
    schema = {
        "type": "record",
        "name": "Pair",
        "fields": [{"name": "small", "type": "int"}, {"name": "big", "type": "long"}],
    }
    binary = encode_long(-(1 << 31)) + encode_long(1 << 40)
    assert decode(schema, binary) == {"small": -(1 << 31), "big": 1 << 40}
