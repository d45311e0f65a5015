"""
Field Kinds for envcfg

Every record field resolves to exactly one FieldKind. The set is closed:
three built-in scalar kinds, one kind for fields that bring their own
parser, and a sequence variant of each.

Each kind owns its string conversion. Conversions take the lookup key
alongside the raw value so that errors can name the variable that failed.

ARCHITECTURAL RULE:
    Conversion is strict.
        - Booleans accept exactly "true" and "false" (case-sensitive)
        - Integers are base-10 with an optional sign, nothing else
    No trimming, no guessing, no locale handling.
"""

import re
from enum import Enum
from typing import Any, Callable, Optional

from envcfg.errors import (
    CustomParseError,
    EnvcfgError,
    InvalidBooleanError,
    InvalidIntegerError,
    InvalidValueError,
)


Coercer = Callable[[str, str], Any]
"""Converts ``(key, raw_value)`` to a typed value or raises InvalidValueError."""

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


class FieldKind(Enum):
    """
    Semantic kind of a record field.

    Scalar kinds read one variable by exact key.
    Sequence kinds collect every variable sharing the key as a prefix.
    """

    TEXT = "text"
    BOOLEAN = "boolean"
    WHOLE_NUMBER = "whole-number"
    CUSTOM = "custom-parseable"

    TEXT_SEQUENCE = "sequence-of-text"
    BOOLEAN_SEQUENCE = "sequence-of-boolean"
    WHOLE_NUMBER_SEQUENCE = "sequence-of-whole-number"
    CUSTOM_SEQUENCE = "sequence-of-custom-parseable"

    @property
    def is_sequence(self) -> bool:
        return self in _SEQUENCE_OF.values()

    @property
    def element_kind(self) -> "FieldKind":
        """Scalar kind of a single element (a scalar kind is its own element)."""
        for scalar, sequence in _SEQUENCE_OF.items():
            if self is sequence:
                return scalar
        return self

    def sequence(self) -> "FieldKind":
        """Sequence variant of a scalar kind."""
        if self.is_sequence:
            raise ValueError(f"{self.value} is already a sequence kind")
        return _SEQUENCE_OF[self]


_SEQUENCE_OF = {
    FieldKind.TEXT: FieldKind.TEXT_SEQUENCE,
    FieldKind.BOOLEAN: FieldKind.BOOLEAN_SEQUENCE,
    FieldKind.WHOLE_NUMBER: FieldKind.WHOLE_NUMBER_SEQUENCE,
    FieldKind.CUSTOM: FieldKind.CUSTOM_SEQUENCE,
}


def scalar_kind_of(tp: Any) -> Optional[FieldKind]:
    """
    Map a Python type to a built-in scalar kind.

    bool is checked before int because bool subclasses int.
    Subclasses of str and int keep their kind (e.g. ``class Port(int)``).
    Enum subclasses (StrEnum, IntEnum, ...) have no built-in kind; give them
    a parser.

    Returns:
        FieldKind or None if the type has no built-in kind
    """
    if not isinstance(tp, type) or issubclass(tp, Enum):
        return None
    if issubclass(tp, bool):
        return FieldKind.BOOLEAN
    if issubclass(tp, int):
        return FieldKind.WHOLE_NUMBER
    if issubclass(tp, str):
        return FieldKind.TEXT
    return None


def parse_text(key: str, value: str) -> str:
    return value


def parse_bool(key: str, value: str) -> bool:
    """Accept exactly 'true' or 'false'."""
    if value == "true":
        return True
    if value == "false":
        return False
    raise InvalidBooleanError(key, value)


def parse_int(key: str, value: str) -> int:
    """Accept a base-10 integer with optional leading sign."""
    # int() alone would also accept whitespace, underscores and non-ASCII digits
    if not _INTEGER_RE.fullmatch(value):
        raise InvalidIntegerError(key, value)
    return int(value)


def make_coercer(kind: FieldKind, target_type: Any = None,
                 parser: Optional[Callable[[str], Any]] = None) -> Coercer:
    """
    Build the element coercer for a kind.

    Args:
        kind: Scalar or sequence kind (sequences coerce one element at a time)
        target_type: Declared scalar/element type; str and int subclasses
            are constructed from the parsed value
        parser: Caller-supplied ``str -> value`` function for custom kinds

    Returns:
        Callable taking ``(key, raw_value)``
    """
    element = kind.element_kind

    if element is FieldKind.CUSTOM:
        if parser is None:
            raise ValueError("custom kinds need a parser")
        return _custom_coercer(parser)

    if element is FieldKind.BOOLEAN:
        return parse_bool

    base = parse_int if element is FieldKind.WHOLE_NUMBER else parse_text
    builtin = int if element is FieldKind.WHOLE_NUMBER else str
    if target_type is None or target_type is builtin:
        return base

    error = InvalidIntegerError if element is FieldKind.WHOLE_NUMBER else InvalidValueError

    def coerce(key: str, value: str) -> Any:
        parsed = base(key, value)
        try:
            return target_type(parsed)
        except (TypeError, ValueError) as e:
            raise error(key, value) from e

    return coerce


def _custom_coercer(parser: Callable[[str], Any]) -> Coercer:
    def coerce(key: str, value: str) -> Any:
        try:
            return parser(value)
        except EnvcfgError:
            raise
        except Exception as e:
            raise CustomParseError(key, value) from e

    return coerce


def zero_value(kind: FieldKind, target_type: Any = None) -> Any:
    """
    Zero value used when allocating a record without a declared default.

    Custom scalars have no generic zero and get None, as do declared
    types that cannot be built without arguments.
    """
    if kind.is_sequence:
        return []
    if kind is FieldKind.CUSTOM:
        return None
    if target_type is not None and isinstance(target_type, type):
        try:
            return target_type()
        except (TypeError, ValueError):
            return None
    return {FieldKind.TEXT: "", FieldKind.BOOLEAN: False, FieldKind.WHOLE_NUMBER: 0}[kind]


__all__ = [
    "Coercer",
    "FieldKind",
    "scalar_kind_of",
    "parse_text",
    "parse_bool",
    "parse_int",
    "make_coercer",
    "zero_value",
]
