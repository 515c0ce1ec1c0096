"""Decoding of single records once their bytes are reachable by a decoder"""

from abc import ABC, abstractmethod
from typing import Optional

from .const import AVRO_TYPES, NAMED_TYPES
from .errors import SchemaResolutionError
from .io.binary_decoder import BinaryDecoder
from .schema import extract_record_type, parse_schema
from .types import AvroMessage, NamedSchemas, Schema


def match_types(writer_type, reader_type):
    if writer_type == reader_type:
        return True
    # promotion cases
    elif writer_type == "int" and reader_type in ["long", "float", "double"]:
        return True
    elif writer_type == "long" and reader_type in ["float", "double"]:
        return True
    elif writer_type == "float" and reader_type == "double":
        return True
    elif writer_type == "string" and reader_type == "bytes":
        return True
    elif writer_type == "bytes" and reader_type == "string":
        return True
    return False


def match_schemas(w_schema, r_schema, named_schemas):
    """Check that the top level of a reader schema can read what the writer
    schema wrote. Nested types are not resolved."""
    w_type = extract_record_type(w_schema)
    r_type = extract_record_type(r_schema)
    if w_type not in AVRO_TYPES:
        w_schema = named_schemas[w_type]
        w_type = w_schema["type"]
    if r_type not in AVRO_TYPES or "union" in (w_type, r_type):
        return

    if w_type in NAMED_TYPES and r_type in NAMED_TYPES:
        w_unqual_name = w_schema["name"].split(".")[-1]
        r_unqual_name = r_schema["name"].split(".")[-1]
        if w_unqual_name == r_unqual_name or w_schema["name"] in r_schema.get(
            "aliases", []
        ):
            return
    elif match_types(w_type, r_type):
        return
    raise SchemaResolutionError(f"Schema mismatch: {w_schema} is not {r_schema}")


def maybe_promote(data, writer_type, reader_type):
    if writer_type in ("int", "long"):
        # No need to promote int to long since they are the same type in Python
        if reader_type == "float" or reader_type == "double":
            return float(data)
    if writer_type == "string" and reader_type == "bytes":
        return data.encode()
    if writer_type == "bytes" and reader_type == "string":
        return data.decode()
    return data


def read_null(decoder, writer_schema, named_schemas):
    return decoder.read_null()


def read_boolean(decoder, writer_schema, named_schemas):
    return decoder.read_boolean()


def read_int(decoder, writer_schema, named_schemas):
    return decoder.read_int()


def read_long(decoder, writer_schema, named_schemas):
    return decoder.read_long()


def read_float(decoder, writer_schema, named_schemas):
    return decoder.read_float()


def read_double(decoder, writer_schema, named_schemas):
    return decoder.read_double()


def read_bytes(decoder, writer_schema, named_schemas):
    return decoder.read_bytes()


def read_utf8(decoder, writer_schema, named_schemas):
    return decoder.read_utf8()


def read_fixed(decoder, writer_schema, named_schemas):
    return decoder.read_fixed(writer_schema["size"])


def read_enum(decoder, writer_schema, named_schemas):
    index = decoder.read_enum()
    symbols = writer_schema["symbols"]
    if not 0 <= index < len(symbols):
        raise SchemaResolutionError(
            f"enum index {index} out of range for {writer_schema['name']}"
        )
    return symbols[index]


def read_array(decoder, writer_schema, named_schemas):
    items_schema = writer_schema["items"]
    return [
        read_data(decoder, items_schema, named_schemas)
        for _ in decoder.iter_blocks()
    ]


def read_map(decoder, writer_schema, named_schemas):
    values_schema = writer_schema["values"]
    read_items = {}
    for _ in decoder.iter_blocks():
        key = decoder.read_utf8()
        read_items[key] = read_data(decoder, values_schema, named_schemas)
    return read_items


def read_union(decoder, writer_schema, named_schemas):
    index = decoder.read_index()
    if not 0 <= index < len(writer_schema):
        raise SchemaResolutionError(
            f"union index {index} out of range for {writer_schema}"
        )
    return read_data(decoder, writer_schema[index], named_schemas)


def read_record(decoder, writer_schema, named_schemas):
    return {
        field["name"]: read_data(decoder, field["type"], named_schemas)
        for field in writer_schema["fields"]
    }


READERS = {
    "null": read_null,
    "boolean": read_boolean,
    "string": read_utf8,
    "int": read_int,
    "long": read_long,
    "float": read_float,
    "double": read_double,
    "bytes": read_bytes,
    "fixed": read_fixed,
    "enum": read_enum,
    "array": read_array,
    "map": read_map,
    "union": read_union,
    "record": read_record,
    "error": read_record,
}


def read_data(decoder, writer_schema, named_schemas):
    """Read data from decoder according to schema."""
    record_type = extract_record_type(writer_schema)

    reader_fn = READERS.get(record_type)
    if reader_fn:
        return reader_fn(decoder, writer_schema, named_schemas)
    return read_data(decoder, named_schemas[record_type], named_schemas)


class RecordDecoder(ABC):
    """Decodes one record at a time from a :class:`BinaryDecoder`.

    The container reader hands the writer schema over once, right after the
    header has been read, and then calls :meth:`read` once per record.
    """

    def __init__(self, reader_schema: Optional[Schema] = None):
        self.reader_schema = reader_schema
        self.writer_schema: Optional[Schema] = None

    def set_writer_schema(self, writer_schema: Schema):
        self.writer_schema = writer_schema

    @abstractmethod
    def read_data(
        self,
        writer_schema: Schema,
        reader_schema: Optional[Schema],
        decoder: BinaryDecoder,
    ) -> AvroMessage:
        pass

    def read(self, decoder: BinaryDecoder) -> AvroMessage:
        return self.read_data(self.writer_schema, self.reader_schema, decoder)


class DatumReader(RecordDecoder):
    """Schema driven :class:`RecordDecoder` for avro binary data.

    Values are decoded with the writer schema. A reader schema, if given, is
    only checked for compatibility at the top level and used to promote
    primitive values (int to double, bytes to string, ...).

    Parameters
    ----------
    reader_schema
        Reader schema
    """

    def __init__(self, reader_schema: Optional[Schema] = None):
        super().__init__(reader_schema)
        self._named_schemas: NamedSchemas = {}
        self._reader_named_schemas: NamedSchemas = {}
        if reader_schema is not None:
            self.reader_schema = parse_schema(
                reader_schema, self._reader_named_schemas
            )

    def set_writer_schema(self, writer_schema):
        self._named_schemas = {}
        super().set_writer_schema(parse_schema(writer_schema, self._named_schemas))
        if self.reader_schema is not None:
            match_schemas(self.writer_schema, self.reader_schema, self._named_schemas)

    def read_data(self, writer_schema, reader_schema, decoder):
        data = read_data(decoder, writer_schema, self._named_schemas)
        if reader_schema is not None and reader_schema != writer_schema:
            return maybe_promote(
                data,
                extract_record_type(writer_schema),
                extract_record_type(reader_schema),
            )
        return data
