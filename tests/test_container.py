"""Tests for qparams.container — KeyedContainer field access."""

from datetime import date, datetime
from enum import Enum, StrEnum

import pytest

from qparams.container import KeyedContainer, key_name
from qparams.dates import Custom, Formatted
from qparams.errors import (
    DataCorrupted,
    KeyNotFound,
    MissingConfiguration,
    UnsupportedOperation,
    UnsupportedType,
)
from qparams.http.query import ParamMap
from qparams.kinds import FieldKind, Int8, UInt8


class Keys(StrEnum):
    INT_PARAM = "intParam"
    STR_PARAM = "strParam"
    FLAG = "flag"
    FLAG2 = "flag2"
    DATE = "date"
    EMPTY = "empty"
    MISSING = "missing"


class NamedKeys(Enum):
    page = 1
    size = 2


def _container(
    query: str, strategy: Formatted | Custom | None = None
) -> KeyedContainer[Keys]:
    return KeyedContainer(Keys, ParamMap(query), date_strategy=strategy)


class TestKeyName:
    def test_string_value(self) -> None:
        assert key_name(Keys.INT_PARAM) == "intParam"

    def test_non_string_value_uses_member_name(self) -> None:
        assert key_name(NamedKeys.page) == "page"


class TestPresence:
    def test_contains_value_and_flag(self) -> None:
        c = _container("intParam=5&flag2&empty=")
        assert c.contains(Keys.INT_PARAM)
        assert c.contains(Keys.FLAG2)
        assert c.contains(Keys.EMPTY)
        assert not c.contains(Keys.MISSING)

    def test_contains_case_insensitive(self) -> None:
        assert _container("INTPARAM=5").contains(Keys.INT_PARAM)

    def test_all_keys_skips_unknown(self) -> None:
        c = _container("intParam=5&Flag&unrelated=1")
        assert c.all_keys() == frozenset({Keys.INT_PARAM, Keys.FLAG})

    def test_all_keys_member_names(self) -> None:
        c = KeyedContainer(NamedKeys, ParamMap("PAGE=1&other"))
        assert c.all_keys() == frozenset({NamedKeys.page})

    def test_decode_is_absent(self) -> None:
        c = _container("intParam=5&flag2&empty=")
        assert not c.decode_is_absent(Keys.INT_PARAM)
        assert c.decode_is_absent(Keys.FLAG2)
        assert c.decode_is_absent(Keys.EMPTY)
        assert c.decode_is_absent(Keys.MISSING)

    def test_decode_is_absent_matches_contains_casing(self) -> None:
        c = _container("IntParam=5")
        assert c.contains(Keys.INT_PARAM)
        assert not c.decode_is_absent(Keys.INT_PARAM)


class TestPrimitives:
    def test_decode_int(self) -> None:
        assert _container("intParam=5").decode_int(Keys.INT_PARAM) == 5

    def test_decode_int_not_numeric(self) -> None:
        with pytest.raises(DataCorrupted) as exc_info:
            _container("intParam=abc").decode_int(Keys.INT_PARAM)
        assert exc_info.value.key == "intParam"
        assert exc_info.value.target == "int"
        assert exc_info.value.coding_path == ("intParam",)

    def test_missing_key(self) -> None:
        with pytest.raises(KeyNotFound) as exc_info:
            _container("").decode_int(Keys.INT_PARAM)
        assert exc_info.value.key == "intParam"

    def test_decode_str(self) -> None:
        c = _container("strParam=test&empty=")
        assert c.decode_str(Keys.STR_PARAM) == "test"
        assert c.decode_str(Keys.EMPTY) == ""

    def test_flag_as_bool_is_true(self) -> None:
        assert _container("flag2").decode_bool(Keys.FLAG2) is True

    def test_explicit_false(self) -> None:
        assert _container("flag=false").decode_bool(Keys.FLAG) is False

    def test_bool_case_insensitive_value_and_key(self) -> None:
        assert _container("Flag=TRUE").decode_bool(Keys.FLAG) is True
        assert _container("flag=true").decode_bool(Keys.FLAG) is True

    def test_bool_garbage(self) -> None:
        with pytest.raises(DataCorrupted):
            _container("flag=yes").decode_bool(Keys.FLAG)

    def test_empty_bool_is_corrupted(self) -> None:
        with pytest.raises(DataCorrupted):
            _container("flag=").decode_bool(Keys.FLAG)

    @pytest.mark.parametrize(
        "method",
        ["decode_str", "decode_int", "decode_float", "decode_uint8", "decode_float32"],
    )
    def test_flag_as_non_bool_is_corrupted(self, method: str) -> None:
        with pytest.raises(DataCorrupted, match="flag key has no value"):
            getattr(_container("flag"), method)(Keys.FLAG)

    @pytest.mark.parametrize(
        ("method", "raw", "expected"),
        [
            ("decode_int8", "-128", -128),
            ("decode_int16", "300", 300),
            ("decode_int32", "-70000", -70000),
            ("decode_int64", "9000000000", 9000000000),
            ("decode_uint", "7", 7),
            ("decode_uint8", "255", 255),
            ("decode_uint16", "65535", 65535),
            ("decode_uint32", "4000000000", 4000000000),
            ("decode_uint64", "18446744073709551615", 18446744073709551615),
            ("decode_float", "2.5", 2.5),
            ("decode_float32", "0.5", 0.5),
        ],
    )
    def test_widths(self, method: str, raw: str, expected: object) -> None:
        assert getattr(_container(f"intParam={raw}"), method)(Keys.INT_PARAM) == expected

    def test_width_overflow_is_corrupted(self) -> None:
        with pytest.raises(DataCorrupted, match="out of range"):
            _container("intParam=256").decode_uint8(Keys.INT_PARAM)

    def test_reads_are_idempotent(self) -> None:
        c = _container("intParam=5")
        assert c.decode_int(Keys.INT_PARAM) == c.decode_int(Keys.INT_PARAM) == 5

    def test_coding_path_prefix(self) -> None:
        c = KeyedContainer(Keys, ParamMap(""), coding_path=("filters",))
        with pytest.raises(KeyNotFound) as exc_info:
            c.decode_str(Keys.STR_PARAM)
        assert exc_info.value.coding_path == ("filters", "strParam")


class TestDates:
    def test_formatted(self) -> None:
        c = _container("date=2023-01-13", Formatted("yyyy-MM-dd"))
        assert c.decode_date(Keys.DATE) == datetime(2023, 1, 13)

    def test_explicit_strategy_overrides_configured(self) -> None:
        c = _container("date=13.01.2023", Formatted("yyyy-MM-dd"))
        assert c.decode_date(Keys.DATE, Formatted("dd.MM.yyyy")) == datetime(2023, 1, 13)

    def test_format_mismatch(self) -> None:
        c = _container("date=13/01/2023", Formatted("yyyy-MM-dd"))
        with pytest.raises(DataCorrupted) as exc_info:
            c.decode_date(Keys.DATE)
        assert exc_info.value.target == "date"

    def test_flag_date_is_corrupted(self) -> None:
        with pytest.raises(DataCorrupted):
            _container("date", Formatted("yyyy-MM-dd")).decode_date(Keys.DATE)

    def test_missing_date(self) -> None:
        with pytest.raises(KeyNotFound):
            _container("", Formatted("yyyy-MM-dd")).decode_date(Keys.DATE)

    def test_no_strategy(self) -> None:
        with pytest.raises(MissingConfiguration):
            _container("date=2023-01-13").decode_date(Keys.DATE)

    def test_custom_returning_date_is_widened(self) -> None:
        c = _container("date=2023-01-13", Custom(date.fromisoformat))
        assert c.decode_date(Keys.DATE) == datetime(2023, 1, 13, 0, 0)

    def test_custom_returning_none(self) -> None:
        c = _container("date=soon", Custom(lambda s: None))
        with pytest.raises(DataCorrupted):
            c.decode_date(Keys.DATE)

    def test_custom_raising(self) -> None:
        def explode(s: str) -> date:
            raise LookupError(s)

        c = _container("date=soon", Custom(explode))
        with pytest.raises(DataCorrupted) as exc_info:
            c.decode_date(Keys.DATE)
        assert isinstance(exc_info.value.__cause__, LookupError)

    def test_custom_returning_non_date(self) -> None:
        c = _container("date=soon", Custom(lambda s: "tomorrow"))  # type: ignore[arg-type,return-value]
        with pytest.raises(DataCorrupted, match="not a date"):
            c.decode_date(Keys.DATE)

    def test_decode_kind_date_truncates(self) -> None:
        c = _container("date=2023-01-13T10:30", Formatted("yyyy-MM-dd'T'HH:mm"))
        assert c.decode(FieldKind.DATE, Keys.DATE) == date(2023, 1, 13)
        assert c.decode(FieldKind.DATETIME, Keys.DATE) == datetime(2023, 1, 13, 10, 30)


class TestDecodeTyped:
    @pytest.mark.parametrize(
        ("target", "expected"),
        [(int, 5), (str, "5"), (float, 5.0), (Int8, 5), (UInt8, 5), (FieldKind.INT16, 5)],
    )
    def test_primitive_annotations(self, target: object, expected: object) -> None:
        assert _container("intParam=5").decode_typed(target, Keys.INT_PARAM) == expected

    def test_date_type(self) -> None:
        c = _container("date=2023-01-13", Formatted("yyyy-MM-dd"))
        assert c.decode_typed(date, Keys.DATE) == date(2023, 1, 13)

    def test_date_type_without_strategy(self) -> None:
        with pytest.raises(MissingConfiguration):
            _container("date=2023-01-13").decode_typed(date, Keys.DATE)

    @pytest.mark.parametrize("target", [list[int], dict[str, str], bytes, Keys])
    def test_unsupported(self, target: object) -> None:
        with pytest.raises(UnsupportedType):
            _container("intParam=5").decode_typed(target, Keys.INT_PARAM)


class TestDecodeOptional:
    def test_present(self) -> None:
        assert _container("flag=false").decode_optional(bool, Keys.FLAG) is False

    def test_missing_is_none(self) -> None:
        assert _container("").decode_optional(int, Keys.INT_PARAM) is None

    def test_corrupted_is_none(self) -> None:
        assert _container("intParam=abc").decode_optional(int, Keys.INT_PARAM) is None

    def test_missing_configuration_is_none(self) -> None:
        assert _container("date=2023-01-13").decode_optional(date, Keys.DATE) is None

    def test_unsupported_is_none(self) -> None:
        assert _container("intParam=5").decode_optional(list[int], Keys.INT_PARAM) is None

    def test_accepts_field_kind(self) -> None:
        assert _container("intParam=7").decode_optional(FieldKind.UINT8, Keys.INT_PARAM) == 7


class TestUnsupportedShapes:
    def test_nested_keyed(self) -> None:
        with pytest.raises(UnsupportedOperation):
            _container("").nested_keyed_container(NamedKeys, Keys.FLAG)

    def test_nested_unkeyed(self) -> None:
        with pytest.raises(UnsupportedOperation):
            _container("").nested_unkeyed_container(Keys.FLAG)

    def test_parent_decoder(self) -> None:
        with pytest.raises(UnsupportedOperation):
            _container("").parent_decoder()
        with pytest.raises(UnsupportedOperation):
            _container("").parent_decoder(Keys.FLAG)
