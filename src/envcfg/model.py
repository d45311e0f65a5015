"""
Resolved Schema Objects

Defines the metadata the resolver produces for a record type:
    - FieldDescriptor (one per dataclass field)
    - RecordSchema (ordered collection for a whole record)

ARCHITECTURAL RULE:
    These objects:
        - Are produced once per record type and cached
        - Are immutable
        - Carry everything the binder needs, so the binder never
          inspects type annotations itself
"""

from dataclasses import dataclass
from typing import Any, Iterator, List, Optional, Tuple

from envcfg.kinds import Coercer, FieldKind


@dataclass(frozen=True)
class FieldDescriptor:
    """
    Resolved metadata for one record field.

    Properties:
        name:
            Attribute name on the record (e.g. "DB_PORT")

        declared_type:
            Annotation as written on the dataclass (e.g. int, List[str])

        kind:
            Semantic FieldKind

        key:
            Environment variable name, or prefix for sequence kinds.
            Explicit key tag if non-empty, else the field name.

        keep_on_clear:
            True if clear() must leave this variable alone

        settable:
            False for private fields (leading underscore); bind skips them

        coerce:
            Converts one raw value (one element, for sequences)

        element_type:
            Scalar type for scalars, element type for sequences
    """

    name: str
    declared_type: Any
    kind: FieldKind
    key: str
    keep_on_clear: bool = False
    settable: bool = True
    coerce: Optional[Coercer] = None
    element_type: Any = None

    @property
    def is_sequence(self) -> bool:
        return self.kind.is_sequence

    def matching_keys(self, environ) -> List[str]:
        """
        Environment names this field reads, in binding order.

        Scalars match their key exactly. Sequences match every name that
        starts with the key (the key itself included), sorted
        lexicographically, so "K_10" comes before "K_2".
        """
        if not self.is_sequence:
            return [self.key] if self.key in environ else []
        return sorted(name for name in environ if name.startswith(self.key))


@dataclass(frozen=True)
class RecordSchema:
    """
    Resolved schema of a record type.

    Properties:
        record_type: The dataclass class
        fields: Descriptors in declaration order

    INVARIANTS:
        - Every descriptor has a supported kind
        - Keys are not required to be unique
    """

    record_type: type
    fields: Tuple[FieldDescriptor, ...] = ()

    def __iter__(self) -> Iterator[FieldDescriptor]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def get_field(self, name: str) -> Optional[FieldDescriptor]:
        """
        Retrieve a descriptor by field name.

        Returns:
            FieldDescriptor or None if not found
        """
        for descriptor in self.fields:
            if descriptor.name == name:
                return descriptor
        return None

    def keys(self) -> List[str]:
        """Lookup keys in declaration order (duplicates kept)."""
        return [descriptor.key for descriptor in self.fields]

    def clearable_keys(self) -> List[str]:
        """Keys clear() blanks, in declaration order."""
        return [d.key for d in self.fields if not d.keep_on_clear]
