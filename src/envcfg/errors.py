"""
Error taxonomy for envcfg.

Every failure surfaced by the resolver, the binder or the snapshot builder
is an ``EnvcfgError``. All of them are terminal: the call that raised
stops at the first problem and nothing is retried.

Hierarchy:
    EnvcfgError
        InvalidTargetError
        UnsupportedFieldError
        UndefinedVariableError
        InvalidValueError
            InvalidBooleanError
            InvalidIntegerError
            CustomParseError
        EnvironFormatError
"""

from typing import Any


class EnvcfgError(Exception):
    """Base class for all envcfg errors."""
    pass


class InvalidTargetError(EnvcfgError):
    """Raised when the bind/clear target is not a (mutable) dataclass record."""
    pass


class UnsupportedFieldError(EnvcfgError):
    """Raised when a field's declared type is outside the supported kinds."""

    def __init__(self, field_name: str, declared_type: Any):
        self.field_name = field_name
        self.declared_type = declared_type
        super().__init__(
            f"unsupported field type for {field_name!r}: {_type_name(declared_type)}"
        )


class UndefinedVariableError(EnvcfgError):
    """Raised in strict mode when a key (or key prefix) is missing."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"field not found in environment: {key}")


class InvalidValueError(EnvcfgError):
    """Raised when a present value cannot be converted to its field's kind."""

    reason = "invalid value"

    def __init__(self, key: str, value: str):
        self.key = key
        self.value = value
        super().__init__(f"{self.reason} for {key}: {value!r}")


class InvalidBooleanError(InvalidValueError):
    """Raised for boolean values other than the literals 'true' and 'false'."""

    reason = "pass string 'true' or 'false' for boolean fields"


class InvalidIntegerError(InvalidValueError):
    """Raised for values that are not base-10 signed integers."""

    reason = "invalid integer"


class CustomParseError(InvalidValueError):
    """Raised when a field's own parser rejects a value."""

    reason = "custom parser rejected value"


class EnvironFormatError(EnvcfgError):
    """Raised when a raw environment entry is not in KEY=VALUE form."""

    def __init__(self, entry: str):
        self.entry = entry
        super().__init__(
            f"unknown environ condition - env variable not in k=v format: {entry}"
        )


def _type_name(tp: Any) -> str:
    if isinstance(tp, type):
        return tp.__name__
    return repr(tp)


__all__ = [
    "EnvcfgError",
    "InvalidTargetError",
    "UnsupportedFieldError",
    "UndefinedVariableError",
    "InvalidValueError",
    "InvalidBooleanError",
    "InvalidIntegerError",
    "CustomParseError",
    "EnvironFormatError",
]
