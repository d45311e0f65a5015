"""
Field Schema Resolver.

Turns a dataclass record type into a RecordSchema: one FieldDescriptor per
field, in declaration order, each with its kind, lookup key and
keep-on-clear flag.

Declaring fields:
    Plain annotations use the field name as the environment key:

        @dataclass
        class Cfg:
            DEBUG: bool = False
            DB_HOSTS: List[str] = field(default_factory=list)

    Key tags, keep markers and custom parsers go into field metadata,
    either directly or through ``env_field``:

        db_port: int = env_field(key="DB_PORT", default=5432)
        home: str = field(default="", metadata={"envcfgkeep": ""})
        level: Level = env_field(parser=Level.parse, default=Level.INFO)
        nodes: List[Endpoint] = env_field(element_parser=Endpoint.parse,
                                          default_factory=list)

    ``parser`` converts the whole value, whatever the declared shape (a list
    field with a parser reads one variable, like a scalar). ``element_parser``
    converts each element of a list field.

Resolution validates every field before anything else happens. The first
unsupported field raises UnsupportedFieldError; nothing is read or written.
"""

import dataclasses
import logging
from functools import lru_cache
from typing import Any, Callable, Dict, Optional, get_args, get_origin, get_type_hints

from envcfg.errors import InvalidTargetError, UnsupportedFieldError
from envcfg.kinds import FieldKind, make_coercer, scalar_kind_of
from envcfg.model import FieldDescriptor, RecordSchema

logger = logging.getLogger(__name__)

KEY_TAG = "envcfg"
KEEP_TAG = "envcfgkeep"
PARSER_TAG = "envcfgparser"
ELEMENT_PARSER_TAG = "envcfgelementparser"

SCHEMA_CACHE_SIZE = 256


def env_field(key: Optional[str] = None, *, keep: bool = False,
              parser: Optional[Callable[[str], Any]] = None,
              element_parser: Optional[Callable[[str], Any]] = None,
              metadata: Optional[Dict[str, Any]] = None, **kwargs: Any) -> Any:
    """
    dataclasses.field() with envcfg metadata filled in.

    Args:
        key: Environment variable name (defaults to the field name)
        keep: Exempt the field from clear()
        parser: ``str -> value`` function for the whole value; makes the
            field custom-parseable
        element_parser: ``str -> element`` function for list fields
        metadata: Extra metadata merged with the envcfg entries
        **kwargs: Passed through to dataclasses.field (default, default_factory, ...)
    """
    merged = dict(metadata or {})
    if key is not None:
        merged[KEY_TAG] = key
    if keep:
        merged[KEEP_TAG] = ""
    if parser is not None:
        merged[PARSER_TAG] = parser
    if element_parser is not None:
        merged[ELEMENT_PARSER_TAG] = element_parser
    return dataclasses.field(metadata=merged, **kwargs)


def record_type_of(target: Any) -> type:
    """
    Return the dataclass class behind a target (class or instance).

    Raises:
        InvalidTargetError: If target is not a dataclass class or instance
    """
    if isinstance(target, type):
        if dataclasses.is_dataclass(target):
            return target
    elif dataclasses.is_dataclass(target):
        return type(target)
    raise InvalidTargetError(
        f"we need a dataclass instance or dataclass type, got {type(target).__name__}"
    )


def resolve(target: Any) -> RecordSchema:
    """
    Resolve the schema of a record type.

    Args:
        target: Dataclass class or instance (only its shape is used)

    Returns:
        RecordSchema, cached per record type

    Raises:
        InvalidTargetError: If target is not a dataclass
        UnsupportedFieldError: On the first field with an unsupported type
    """
    return _resolve_type(record_type_of(target))


@lru_cache(maxsize=SCHEMA_CACHE_SIZE)
def _resolve_type(record_type: type) -> RecordSchema:
    hints = get_type_hints(record_type)
    descriptors = tuple(
        resolve_field(f, hints.get(f.name, f.type)) for f in dataclasses.fields(record_type)
    )
    logger.debug("Resolved %s: %d field(s)", record_type.__name__, len(descriptors))
    return RecordSchema(record_type=record_type, fields=descriptors)


def resolve_field(f: dataclasses.Field, declared_type: Any) -> FieldDescriptor:
    """
    Build the descriptor for a single dataclass field.

    Raises:
        UnsupportedFieldError: If the declared type has no supported kind
    """
    parser = f.metadata.get(PARSER_TAG)
    element_parser = f.metadata.get(ELEMENT_PARSER_TAG)
    kind, element_type = _kind_of(declared_type, parser, element_parser)
    if kind is None:
        raise UnsupportedFieldError(f.name, declared_type)

    return FieldDescriptor(
        name=f.name,
        declared_type=declared_type,
        kind=kind,
        key=f.metadata.get(KEY_TAG) or f.name,
        keep_on_clear=KEEP_TAG in f.metadata,
        settable=not f.name.startswith("_"),
        coerce=make_coercer(kind, element_type, parser or element_parser),
        element_type=element_type,
    )


def _kind_of(declared_type: Any, parser, element_parser):
    """Return (kind, element_type), or (None, None) if unsupported."""
    if parser is not None:
        return FieldKind.CUSTOM, declared_type

    if _is_list(declared_type):
        args = get_args(declared_type)
        element_type = args[0] if args else None
        if element_parser is not None:
            return FieldKind.CUSTOM_SEQUENCE, element_type
        element_kind = scalar_kind_of(element_type)
        if element_kind is None:
            return None, None
        return element_kind.sequence(), element_type

    if element_parser is not None:
        # element parsers only apply to list fields
        return None, None

    kind = scalar_kind_of(declared_type)
    if kind is None:
        return None, None
    return kind, declared_type


def _is_list(tp: Any) -> bool:
    return tp is list or get_origin(tp) is list


__all__ = [
    "KEY_TAG",
    "KEEP_TAG",
    "PARSER_TAG",
    "ELEMENT_PARSER_TAG",
    "SCHEMA_CACHE_SIZE",
    "env_field",
    "record_type_of",
    "resolve",
    "resolve_field",
]
