import pytest

from pqcore.schema_types import (
    ConvertedType,
    LogicalType,
    SchemaElement,
    TimeUnit,
    Type,
    converted_type_from_string,
    type_from_string,
)


@pytest.mark.parametrize("ptype", list(Type))
def test_type_from_string_round_trip(ptype):
    assert type_from_string(ptype.name) is ptype


@pytest.mark.parametrize("text", ["", "SLICE", "int32", "MAP"])
def test_type_from_string_rejects_unknown(text):
    with pytest.raises(ValueError):
        type_from_string(text)


@pytest.mark.parametrize("ctype", list(ConvertedType))
def test_converted_type_from_string_round_trip(ctype):
    assert converted_type_from_string(ctype.name) is ctype


@pytest.mark.parametrize("text", ["", "STRING", "utf8"])
def test_converted_type_from_string_rejects_unknown(text):
    with pytest.raises(ValueError):
        converted_type_from_string(text)


def test_type_from_string_matches_decimal_converted():
    assert converted_type_from_string("DECIMAL") is ConvertedType.DECIMAL
    assert type_from_string("FIXED_LEN_BYTE_ARRAY") is Type.FIXED_LEN_BYTE_ARRAY


def test_logical_type_rejects_unknown_kind():
    with pytest.raises(ValueError):
        LogicalType("SLICE")


def test_logical_type_equality_and_fields():
    a = LogicalType("TIMESTAMP", is_adjusted_to_utc=True, unit=TimeUnit.MICROS)
    b = LogicalType("TIMESTAMP", is_adjusted_to_utc=True, unit=TimeUnit.MICROS)
    assert a == b
    assert a.unit is TimeUnit.MICROS
    assert a != LogicalType("TIMESTAMP", is_adjusted_to_utc=True, unit=TimeUnit.MILLIS)


def test_schema_element_holds_assigned_fields():
    element = SchemaElement(name="Age", type=Type.INT32, converted_type=ConvertedType.INT_8)
    assert element.name == "Age"
    assert element.type is Type.INT32
    assert element.logical_type is None
    assert element.num_children is None