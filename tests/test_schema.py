"""
Tests for the Field Schema Resolver.

These tests verify:
    - Supported and unsupported field types
    - Key tag resolution (explicit tag, empty tag, default name)
    - Keep-on-clear marker (presence only)
    - Private fields are not settable
    - Whole-value and per-element custom parsers
    - Caching per record type, bounded in size
"""

from __future__ import annotations

from dataclasses import dataclass, field, make_dataclass
from enum import Enum
from typing import Dict, List, Optional

import pytest

from envcfg.errors import InvalidTargetError, UnsupportedFieldError
from envcfg.kinds import FieldKind
from envcfg.model import RecordSchema
from envcfg.schema import (
    KEEP_TAG,
    KEY_TAG,
    SCHEMA_CACHE_SIZE,
    _resolve_type,
    env_field,
    record_type_of,
    resolve,
)


class ValidType(int):
    pass


class Level(str, Enum):
    DEBUG = "debug"
    INFO = "info"


@dataclass
class CfgValid1:
    STRING: str = ""
    INT: int = 0
    BOOL: bool = False
    STRING_SLICE: List[str] = field(default_factory=list)
    INT_SLICE: List[int] = field(default_factory=list)
    BOOL_SLICE: List[bool] = field(default_factory=list)


@dataclass
class CfgValid2:
    INT_SLICE: List[ValidType] = field(default_factory=list)
    INT: ValidType = ValidType(0)


@dataclass
class CfgInvalid1:
    FLOAT: float = 0.0


@dataclass
class CfgInvalid2:
    FLOAT_SLICE: List[float] = field(default_factory=list)


@dataclass
class Tagged:
    THIS: str = ""
    THAT: str = field(default="", metadata={KEEP_TAG: ""})
    Foo: str = field(default="", metadata={KEY_TAG: "FOO"})
    Bar: str = env_field(key="BAR", keep=True, default="")
    EMPTY_TAG: str = field(default="", metadata={KEY_TAG: ""})
    _private: int = 0


class TestRecordTypeOf:
    """Test target → record type."""

    def test_class_and_instance(self):
        assert record_type_of(CfgValid1) is CfgValid1
        assert record_type_of(CfgValid1()) is CfgValid1

    @pytest.mark.parametrize("target", [0, "text", None, int, [CfgValid1()]])
    def test_non_dataclass_rejected(self, target):
        with pytest.raises(InvalidTargetError):
            record_type_of(target)


class TestSupportedTypes:
    """Test which declared types are supported."""

    def test_all_builtin_kinds(self):
        schema = resolve(CfgValid1)
        kinds = [d.kind for d in schema]
        assert kinds == [
            FieldKind.TEXT,
            FieldKind.WHOLE_NUMBER,
            FieldKind.BOOLEAN,
            FieldKind.TEXT_SEQUENCE,
            FieldKind.WHOLE_NUMBER_SEQUENCE,
            FieldKind.BOOLEAN_SEQUENCE,
        ]

    def test_int_subclass_supported(self):
        schema = resolve(CfgValid2)
        assert schema.get_field("INT").kind is FieldKind.WHOLE_NUMBER
        assert schema.get_field("INT_SLICE").element_type is ValidType

    def test_float_rejected(self):
        with pytest.raises(UnsupportedFieldError) as exc_info:
            resolve(CfgInvalid1)
        assert exc_info.value.field_name == "FLOAT"
        assert "float" in str(exc_info.value)

    def test_float_sequence_rejected(self):
        with pytest.raises(UnsupportedFieldError) as exc_info:
            resolve(CfgInvalid2)
        assert exc_info.value.field_name == "FLOAT_SLICE"

    def test_other_unsupported_types(self):
        @dataclass
        class Mapped:
            MAP: Dict[str, str] = field(default_factory=dict)

        @dataclass
        class Optional_:
            MAYBE: Optional[str] = None

        @dataclass
        class BareList:
            ITEMS: list = field(default_factory=list)

        for record_type in (Mapped, Optional_, BareList):
            with pytest.raises(UnsupportedFieldError):
                resolve(record_type)

    def test_first_unsupported_field_reported(self):
        """Resolution stops at the first unsupported field in declaration order."""
        @dataclass
        class TwoBad:
            OK: str = ""
            FIRST: float = 0.0
            SECOND: Dict[str, str] = field(default_factory=dict)

        with pytest.raises(UnsupportedFieldError) as exc_info:
            resolve(TwoBad)
        assert exc_info.value.field_name == "FIRST"

    def test_parser_makes_any_type_supported(self):
        @dataclass
        class WithParser:
            RATIO: float = env_field(parser=float, default=0.0)
            RATIOS: List[float] = env_field(element_parser=float, default_factory=list)

        schema = resolve(WithParser)
        assert schema.get_field("RATIO").kind is FieldKind.CUSTOM
        assert schema.get_field("RATIOS").kind is FieldKind.CUSTOM_SEQUENCE
        assert schema.get_field("RATIOS").element_type is float

    def test_enum_rejected_without_parser(self):
        @dataclass
        class WithEnum:
            LEVEL: Level = Level.INFO

        with pytest.raises(UnsupportedFieldError) as exc_info:
            resolve(WithEnum)
        assert exc_info.value.field_name == "LEVEL"

    def test_enum_with_parser_is_custom(self):
        @dataclass
        class WithEnum:
            LEVEL: Level = env_field(parser=Level, default=Level.INFO)
            LEVELS: List[Level] = env_field(element_parser=Level, default_factory=list)

        schema = resolve(WithEnum)
        assert schema.get_field("LEVEL").kind is FieldKind.CUSTOM
        assert schema.get_field("LEVELS").kind is FieldKind.CUSTOM_SEQUENCE

    def test_parser_on_list_reads_whole_value(self):
        """A list field with a parser is one custom value, not a sequence."""
        @dataclass
        class WholeList:
            HOSTS: List[str] = env_field(parser=lambda s: s.split(","), default_factory=list)

        descriptor = resolve(WholeList).get_field("HOSTS")
        assert descriptor.kind is FieldKind.CUSTOM
        assert not descriptor.is_sequence

    def test_element_parser_needs_list_field(self):
        @dataclass
        class Misplaced:
            RATIO: float = env_field(element_parser=float, default=0.0)

        with pytest.raises(UnsupportedFieldError) as exc_info:
            resolve(Misplaced)
        assert exc_info.value.field_name == "RATIO"


class TestKeysAndMarkers:
    """Test key tags and keep markers."""

    def test_default_key_is_field_name(self):
        assert resolve(Tagged).get_field("THIS").key == "THIS"

    def test_explicit_key_tag(self):
        assert resolve(Tagged).get_field("Foo").key == "FOO"
        assert resolve(Tagged).get_field("Bar").key == "BAR"

    def test_empty_key_tag_falls_back_to_name(self):
        assert resolve(Tagged).get_field("EMPTY_TAG").key == "EMPTY_TAG"

    def test_keep_marker_presence_only(self):
        schema = resolve(Tagged)
        assert schema.get_field("THAT").keep_on_clear
        assert schema.get_field("Bar").keep_on_clear
        assert not schema.get_field("THIS").keep_on_clear

    def test_private_field_not_settable(self):
        schema = resolve(Tagged)
        assert not schema.get_field("_private").settable
        assert schema.get_field("THIS").settable

    def test_clearable_keys(self):
        assert resolve(Tagged).clearable_keys() == ["THIS", "FOO", "EMPTY_TAG", "_private"]

    def test_duplicate_keys_allowed(self):
        @dataclass
        class Duplicated:
            A: int = env_field(key="LABEL_INT", default=0)
            B: int = env_field(key="LABEL_INT", default=0)

        assert resolve(Duplicated).keys() == ["LABEL_INT", "LABEL_INT"]

    def test_env_field_keeps_other_metadata(self):
        @dataclass
        class Documented:
            X: str = env_field(key="XX", default="", metadata={"doc": "an x"})

        f = Documented.__dataclass_fields__["X"]
        assert f.metadata["doc"] == "an x"
        assert f.metadata[KEY_TAG] == "XX"


class TestResolveResult:
    """Test the RecordSchema returned by resolve."""

    def test_declaration_order(self):
        schema = resolve(CfgValid1)
        assert isinstance(schema, RecordSchema)
        assert [d.name for d in schema] == [
            "STRING", "INT", "BOOL", "STRING_SLICE", "INT_SLICE", "BOOL_SLICE",
        ]
        assert len(schema) == 6

    def test_cached_per_type(self):
        assert resolve(CfgValid1) is resolve(CfgValid1())

    def test_cache_is_bounded(self):
        """Record types created at runtime do not grow the cache without limit."""
        for i in range(SCHEMA_CACHE_SIZE + 10):
            record_type = make_dataclass(f"Runtime{i}", [("NAME", str, field(default=""))])
            resolve(record_type)
        info = _resolve_type.cache_info()
        assert info.maxsize == SCHEMA_CACHE_SIZE
        assert info.currsize <= SCHEMA_CACHE_SIZE

    def test_get_missing_field(self):
        assert resolve(CfgValid1).get_field("NOPE") is None

    def test_postponed_annotations_resolved(self):
        """Annotations are strings under `from __future__ import annotations`."""
        schema = resolve(CfgValid1)
        assert schema.get_field("INT_SLICE").declared_type == List[int]
