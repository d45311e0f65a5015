"""
Serialization helpers for bound records and resolved schemas.

Renders records and schemas as plain dicts, JSON or YAML. Used by the CLI
to print a populated configuration; also handy for logging a config at
startup without reaching into the record by hand.

Values that are not plain scalars (custom-parseable fields) are rendered
with str().
"""
from __future__ import annotations

import json
from typing import Any, Dict

import yaml

from envcfg.model import FieldDescriptor, RecordSchema
from envcfg.schema import resolve


def value_to_plain(value: Any) -> Any:
    # subclasses of int/str are reduced to the base type so YAML stays safe
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, int):
        return int(value)
    if isinstance(value, str):
        return str(value)
    if isinstance(value, (list, tuple)):
        return [value_to_plain(v) for v in value]
    return str(value)


def record_to_dict(record: Any) -> Dict[str, Any]:
    """Field name → plain value, in declaration order."""
    schema = resolve(record)
    return {d.name: value_to_plain(getattr(record, d.name, None)) for d in schema}


def record_to_json(record: Any) -> str:
    return json.dumps(record_to_dict(record), sort_keys=True)


def record_to_yaml(record: Any) -> str:
    return yaml.safe_dump(record_to_dict(record), sort_keys=False)


def field_to_dict(d: FieldDescriptor) -> Dict[str, Any]:
    return {
        "name": d.name,
        "key": d.key,
        "kind": d.kind.value,
        "keep_on_clear": d.keep_on_clear,
        "settable": d.settable,
    }


def schema_to_dict(schema: RecordSchema) -> Dict[str, Any]:
    return {
        "record": schema.record_type.__name__,
        "fields": [field_to_dict(d) for d in schema],
    }


def schema_to_json(schema: RecordSchema) -> str:
    return json.dumps(schema_to_dict(schema), sort_keys=True)


def schema_to_yaml(schema: RecordSchema) -> str:
    return yaml.safe_dump(schema_to_dict(schema), sort_keys=False)


__all__ = [
    "value_to_plain",
    "record_to_dict",
    "record_to_json",
    "record_to_yaml",
    "field_to_dict",
    "schema_to_dict",
    "schema_to_json",
    "schema_to_yaml",
]
