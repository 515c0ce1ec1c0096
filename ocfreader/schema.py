"""Normalisation of writer schemas read from a container header"""

import json
from typing import Optional, Tuple

from .const import PRIMITIVES, NAMED_TYPES
from .errors import SchemaParseException, UnknownType
from .types import DictSchema, NamedSchemas, Schema


def extract_record_type(schema):
    if isinstance(schema, dict):
        return schema["type"]

    if isinstance(schema, list):
        return "union"

    return schema


def schema_name(schema: DictSchema, parent_ns: str) -> Tuple[str, str]:
    try:
        name = schema["name"]
    except KeyError:
        raise SchemaParseException(
            f'"name" is a required field missing from the schema: {schema}'
        )

    namespace = schema.get("namespace", parent_ns)
    if "." in name:
        return name.rsplit(".", 1)[0], name
    elif namespace:
        return namespace, f"{namespace}.{name}"
    else:
        return "", name


def load_schema_json(schema_bytes: bytes) -> Schema:
    """Decode the JSON text stored under ``avro.schema``"""
    try:
        return json.loads(schema_bytes)
    except ValueError as exc:
        raise SchemaParseException(f"writer schema is not valid JSON: {exc}")


def parse_schema(
    schema: Schema, named_schemas: Optional[NamedSchemas] = None
) -> Schema:
    """Returns a parsed avro schema

    Named types are replaced by their full name wherever they are referenced
    and their definitions are stored in `named_schemas`.

    Parameters
    ----------
    schema
        Input schema
    named_schemas
        Dictionary of named schemas to their schema definition, populated as
        named types are found


    Example::

        from ocfreader.schema import parse_schema

        named_schemas = {}
        parsed = parse_schema(
            {
                "type": "record",
                "name": "Weather",
                "namespace": "test",
                "fields": [{"name": "station", "type": "string"}],
            },
            named_schemas,
        )
        assert parsed["name"] == "test.Weather"
        assert "test.Weather" in named_schemas
    """
    if named_schemas is None:
        named_schemas = {}
    return _parse_schema(schema, "", named_schemas)


def _parse_schema(schema: Schema, namespace: str, named_schemas: NamedSchemas):
    # union schemas
    if isinstance(schema, list):
        return [_parse_schema(s, namespace, named_schemas) for s in schema]

    # string schemas; this could be either a named schema or a primitive type
    elif not isinstance(schema, dict):
        if schema in PRIMITIVES:
            return schema

        if not isinstance(schema, str):
            raise SchemaParseException(f"invalid schema: {schema!r}")

        if "." not in schema and namespace:
            schema = namespace + "." + schema

        if schema not in named_schemas:
            raise UnknownType(schema)
        return schema

    try:
        schema_type = schema["type"]
    except KeyError:
        raise SchemaParseException(
            f'"type" is a required field missing from the schema: {schema}'
        )

    # {"type": "string"} and friends
    if schema_type in PRIMITIVES:
        return {**schema, "type": schema_type}

    parsed_schema = dict(schema)

    if schema_type == "array":
        parsed_schema["items"] = _parse_schema(
            schema["items"], namespace, named_schemas
        )

    elif schema_type == "map":
        parsed_schema["values"] = _parse_schema(
            schema["values"], namespace, named_schemas
        )

    elif schema_type in NAMED_TYPES:
        namespace, fullname = schema_name(schema, namespace)
        if fullname in named_schemas:
            raise SchemaParseException(f"redefined named type: {fullname}")
        parsed_schema.pop("namespace", None)
        parsed_schema["name"] = fullname

        # Register before the fields so recursive references resolve
        named_schemas[fullname] = parsed_schema

        if schema_type in ("record", "error"):
            parsed_schema["fields"] = [
                _parse_field(field, namespace, named_schemas)
                for field in schema["fields"]
            ]
        elif schema_type == "enum" and not isinstance(schema.get("symbols"), list):
            raise SchemaParseException(f"enum {fullname} has no symbols list")
        elif schema_type == "fixed" and not isinstance(schema.get("size"), int):
            raise SchemaParseException(f"fixed {fullname} has no integer size")

    else:
        # A dict whose type is a reference to a named type
        return _parse_schema(schema_type, namespace, named_schemas)

    return parsed_schema


def _parse_field(field, namespace, named_schemas):
    parsed_field = dict(field)
    try:
        parsed_field["type"] = _parse_schema(field["type"], namespace, named_schemas)
    except KeyError:
        raise SchemaParseException(f"field is missing a type: {field}")
    return parsed_field
