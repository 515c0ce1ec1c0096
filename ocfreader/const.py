VERSION = 1
MAGIC = b"Obj" + chr(VERSION).encode()
MAGIC_SIZE = len(MAGIC)
SYNC_SIZE = 16

SCHEMA_KEY = "avro.schema"
CODEC_KEY = "avro.codec"

# Header metadata is always a map of bytes, whatever the writer schema is
METADATA_SCHEMA = {"type": "map", "values": "bytes"}

PRIMITIVES = {
    "boolean",
    "bytes",
    "double",
    "float",
    "int",
    "long",
    "null",
    "string",
}

NAMED_TYPES = {"record", "enum", "fixed", "error"}

AVRO_TYPES = {
    "boolean",
    "bytes",
    "double",
    "float",
    "int",
    "long",
    "null",
    "string",
    "fixed",
    "enum",
    "record",
    "error",
    "array",
    "map",
    "union",
}
