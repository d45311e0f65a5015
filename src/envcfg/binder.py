"""
Binder: populate a record from an Environment Snapshot, and clear the
environment variables a record is bound to.

Targets:
    - A dataclass instance is populated in place and returned.
    - A dataclass class stands for an unset optional record: a zero-valued
      instance is allocated first, populated, and returned.
    Frozen dataclasses cannot be written and are rejected.

Order of checks (nothing is written until all of them pass):
    1. Target shape           → InvalidTargetError
    2. Schema resolution      → UnsupportedFieldError
    3. Fields, in declaration order; the first failing field aborts the
       call. Fields bound before it keep their new values.

Sequence fields collect every variable whose name starts with the field's
key, sorted lexicographically, and append to whatever the field already
holds. Binding twice therefore accumulates.
"""

import dataclasses
import logging
import os
from dataclasses import dataclass
from typing import Any, Mapping, MutableMapping, Optional

from envcfg.environ import snapshot
from envcfg.errors import InvalidTargetError, UndefinedVariableError
from envcfg.kinds import zero_value
from envcfg.model import FieldDescriptor, RecordSchema
from envcfg.schema import record_type_of, resolve

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Binder:
    """
    Binding settings.

    Properties:
        fail_on_undefined:
            If True, a field whose key (or key prefix, for sequences) is
            missing from the snapshot raises UndefinedVariableError instead
            of keeping its current value.
    """

    fail_on_undefined: bool = False

    def fail_on_undefined_variables(self) -> "Binder":
        """Return a strict copy of this binder."""
        return dataclasses.replace(self, fail_on_undefined=True)

    def bind(self, target: Any, environ: Optional[Mapping[str, str]] = None) -> Any:
        """
        Populate a record from environment variables.

        Args:
            target: Dataclass instance, or dataclass class to allocate
            environ: Snapshot to read (defaults to a fresh process snapshot)

        Returns:
            The populated record

        Raises:
            InvalidTargetError: If target is not a mutable dataclass record
            UnsupportedFieldError: If any field type is unsupported
            UndefinedVariableError: In strict mode, for a missing key
            InvalidValueError: If a present value fails to convert
        """
        record_type = record_type_of(target)
        if record_type.__dataclass_params__.frozen:
            raise InvalidTargetError(f"{record_type.__name__} is frozen and cannot be populated")
        schema = resolve(record_type)

        record = allocate(schema) if isinstance(target, type) else target
        if environ is None:
            environ = snapshot()

        for descriptor in schema:
            self._bind_field(record, descriptor, environ)
        return record

    def _bind_field(self, record: Any, descriptor: FieldDescriptor,
                    environ: Mapping[str, str]) -> None:
        if not descriptor.settable:
            return

        names = descriptor.matching_keys(environ)
        if not names:
            if self.fail_on_undefined:
                raise UndefinedVariableError(descriptor.key)
            return

        if not descriptor.is_sequence:
            value = descriptor.coerce(descriptor.key, environ[descriptor.key])
            setattr(record, descriptor.name, value)
            logger.debug("Bound %s from %s", descriptor.name, descriptor.key)
            return

        items = getattr(record, descriptor.name)
        if items is None:
            items = []
            setattr(record, descriptor.name, items)
        for name in names:
            items.append(descriptor.coerce(name, environ[name]))
        logger.debug("Bound %s from %d variable(s) with prefix %s",
                     descriptor.name, len(names), descriptor.key)


def allocate(schema: RecordSchema) -> Any:
    """
    Construct a zero-valued record.

    Declared defaults and default factories are honoured; every other
    field gets the zero value of its kind.
    """
    fields = {f.name: f for f in dataclasses.fields(schema.record_type)}
    kwargs = {}
    missing = []
    for descriptor in schema:
        f = fields[descriptor.name]
        if f.default is not dataclasses.MISSING or f.default_factory is not dataclasses.MISSING:
            continue
        zero = zero_value(descriptor.kind, descriptor.element_type)
        if f.init:
            kwargs[descriptor.name] = zero
        else:
            missing.append((descriptor.name, zero))

    record = schema.record_type(**kwargs)
    for name, zero in missing:
        setattr(record, name, zero)
    logger.debug("Allocated zero-valued %s", schema.record_type.__name__)
    return record


def bind(target: Any, environ: Optional[Mapping[str, str]] = None,
         fail_on_undefined: bool = False) -> Any:
    """
    Populate a record from environment variables.

    Shorthand for ``Binder(fail_on_undefined).bind(target, environ)``.
    """
    return Binder(fail_on_undefined=fail_on_undefined).bind(target, environ)


def clear(target: Any, environ: Optional[MutableMapping[str, str]] = None) -> None:
    """
    Blank the environment variables a record binds to.

    Each field's variable is set to the empty string (it stays defined).
    Fields marked keep-on-clear are left untouched. Sequence fields clear
    their exact key only.

    Args:
        target: Dataclass class or instance (only its shape is used)
        environ: Mapping to write to (defaults to os.environ)

    Raises:
        InvalidTargetError: If target is not a dataclass
        UnsupportedFieldError: If any field type is unsupported; raised
            before any variable is touched
    """
    schema = resolve(target)
    if environ is None:
        environ = os.environ
    for key in schema.clearable_keys():
        environ[key] = ""
        logger.debug("Cleared %s", key)


__all__ = ["Binder", "allocate", "bind", "clear"]
