import pytest

from pqcore.schema_types import (
    ConvertedType,
    Encoding,
    FieldRepetitionType,
    LogicalType,
    SchemaElement,
    TimeUnit,
    Type,
)
from pqcore.tag import (
    Tag,
    TagError,
    head_to_upper,
    key_tag,
    logical_type_from_converted_type,
    logical_type_from_fields,
    new_schema_element,
    str_to_bool,
    str_to_int32,
    string_to_tag,
    string_to_variable_name,
    value_tag,
)


@pytest.mark.parametrize(
    "text, expected",
    [("", ""), ("hello", "Hello"), ("HeHH", "HeHH"), ("a", "A"), ("_x", "PARGO_PREFIX__x")],
)
def test_head_to_upper(text, expected):
    assert head_to_upper(text) == expected


def test_string_to_variable_name():
    assert string_to_variable_name("a.b") == "A46b"
    assert string_to_variable_name("name") == "Name"
    assert string_to_variable_name("1x") == "PARGO_PREFIX_1x"
    assert string_to_variable_name("") == ""


def test_str_to_int32():
    assert str_to_int32("12") == 12
    assert str_to_int32("-7") == -7
    assert str_to_int32("+3") == 3
    assert str_to_int32("4294967297") == 1
    with pytest.raises(TagError):
        str_to_int32("1.5")
    with pytest.raises(TagError):
        str_to_int32("")


def test_str_to_bool():
    assert str_to_bool("T") is True
    assert str_to_bool("true") is True
    assert str_to_bool("0") is False
    assert str_to_bool("False") is False
    with pytest.raises(TagError):
        str_to_bool("yes")


def test_string_to_tag_basic():
    tag = string_to_tag("name=Name, type=FIXED_LEN_BYTE_ARRAY, length=12")
    assert tag.in_name == "Name"
    assert tag.ex_name == "Name"
    assert tag.type == "FIXED_LEN_BYTE_ARRAY"
    assert tag.length == 12


def test_string_to_tag_inname_and_options():
    tag = string_to_tag(
        "inname=NameIn,\tname=name, type=BYTE_ARRAY, convertedtype=UTF8, "
        "encoding=PLAIN_DICTIONARY, repetitiontype=OPTIONAL, omitstats=true, fieldid=5"
    )
    assert tag.in_name == "NameIn"
    assert tag.ex_name == "name"
    assert tag.converted_type == "UTF8"
    assert tag.encoding == Encoding.PLAIN_DICTIONARY
    assert tag.repetition_type == FieldRepetitionType.OPTIONAL
    assert tag.omit_stats is True
    assert tag.field_id == 5


def test_string_to_tag_map_settings():
    tag = string_to_tag(
        "name=score, type=MAP, keytype=BYTE_ARRAY, keyconvertedtype=UTF8, valuetype=INT32, "
        "valuerepetitiontype=repeated, keyencoding=rle, valueencoding=delta_binary_packed"
    )
    assert tag.key_type == "BYTE_ARRAY"
    assert tag.key_converted_type == "UTF8"
    assert tag.value_type == "INT32"
    assert tag.value_repetition_type == FieldRepetitionType.REPEATED
    assert tag.key_encoding == Encoding.RLE
    assert tag.value_encoding == Encoding.DELTA_BINARY_PACKED


def test_string_to_tag_logical_fields():
    tag = string_to_tag(
        "name=t, type=INT64, logicaltype=TIMESTAMP, logicaltype.unit=MILLIS, "
        "keylogicaltype=STRING, valuelogicaltype.unit=NANOS"
    )
    assert tag.logical_type_fields == {"logicaltype": "TIMESTAMP", "logicaltype.unit": "MILLIS"}
    assert tag.key_logical_type_fields == {"logicaltype": "STRING"}
    assert tag.value_logical_type_fields == {"logicaltype.unit": "NANOS"}


@pytest.mark.parametrize(
    "text",
    [
        "name=a, bogus=1",
        "name=a, repetitiontype=sometimes",
        "name=a, encoding=zip",
        "name=a, keyencoding=plain",
        "name=a, valueencoding=rle_dictionary",
        "name=a, length=x",
        "justname",
    ],
)
def test_string_to_tag_errors(text):
    with pytest.raises(TagError):
        string_to_tag(text)


def test_key_and_value_tag():
    tag = string_to_tag(
        "name=m, type=MAP, keytype=BYTE_ARRAY, keyconvertedtype=UTF8, keylength=3, "
        "valuetype=INT32, valuerepetitiontype=OPTIONAL, valuescale=2"
    )
    key = key_tag(tag)
    assert (key.in_name, key.ex_name) == ("Key", "key")
    assert key.type == "BYTE_ARRAY"
    assert key.converted_type == "UTF8"
    assert key.length == 3
    assert key.repetition_type == FieldRepetitionType.REQUIRED
    value = value_tag(tag)
    assert (value.in_name, value.ex_name) == ("Value", "value")
    assert value.type == "INT32"
    assert value.scale == 2
    assert value.repetition_type == FieldRepetitionType.OPTIONAL


def test_logical_type_from_fields():
    assert logical_type_from_fields({}) is None
    assert logical_type_from_fields({"logicaltype": "STRING"}) == LogicalType("STRING")
    decimal = logical_type_from_fields(
        {"logicaltype": "DECIMAL", "logicaltype.precision": "10", "logicaltype.scale": "2"}
    )
    assert (decimal.precision, decimal.scale) == (10, 2)
    time = logical_type_from_fields(
        {"logicaltype": "TIME", "logicaltype.isadjustedtoutc": "true", "logicaltype.unit": "MILLIS"}
    )
    assert time == LogicalType("TIME", is_adjusted_to_utc=True, unit=TimeUnit.MILLIS)
    integer = logical_type_from_fields(
        {"logicaltype": "INTEGER", "logicaltype.bitwidth": "16", "logicaltype.issigned": "false"}
    )
    assert (integer.bit_width, integer.is_signed) == (16, False)


def test_logical_type_from_fields_errors():
    with pytest.raises(TagError):
        logical_type_from_fields({"logicaltype": "NOPE"})
    with pytest.raises(TagError):
        logical_type_from_fields(
            {"logicaltype": "TIMESTAMP", "logicaltype.isadjustedtoutc": "true", "logicaltype.unit": "DAYS"}
        )


def test_logical_type_from_converted_type():
    tag = Tag(precision=9, scale=2, is_adjusted_to_utc=True)
    assert logical_type_from_converted_type(SchemaElement(), tag) is None
    uint = logical_type_from_converted_type(SchemaElement(converted_type=ConvertedType.UINT_16), tag)
    assert (uint.kind, uint.bit_width, uint.is_signed) == ("INTEGER", 16, False)
    dec = logical_type_from_converted_type(SchemaElement(converted_type=ConvertedType.DECIMAL), tag)
    assert (dec.kind, dec.precision, dec.scale) == ("DECIMAL", 9, 2)
    ts = logical_type_from_converted_type(SchemaElement(converted_type=ConvertedType.TIMESTAMP_MICROS), tag)
    assert ts == LogicalType("TIMESTAMP", is_adjusted_to_utc=True, unit=TimeUnit.MICROS)
    utf8 = logical_type_from_converted_type(SchemaElement(converted_type=ConvertedType.UTF8), tag)
    assert utf8.kind == "STRING"
    assert logical_type_from_converted_type(SchemaElement(converted_type=ConvertedType.INTERVAL), tag) is None


def test_new_schema_element_from_converted_type():
    element = new_schema_element(string_to_tag("name=day, type=INT32, convertedtype=DATE"))
    assert element.name == "Day"
    assert element.type == Type.INT32
    assert element.converted_type == ConvertedType.DATE
    assert element.logical_type == LogicalType("DATE")
    assert element.repetition_type == FieldRepetitionType.REQUIRED
    assert element.num_children is None
    assert element.type_length == 0


def test_new_schema_element_logical_fields_win():
    element = new_schema_element(
        string_to_tag(
            "name=d, type=INT32, convertedtype=DECIMAL, scale=1, precision=5, "
            "logicaltype=DECIMAL, logicaltype.precision=10, logicaltype.scale=2"
        )
    )
    assert (element.scale, element.precision) == (1, 5)
    assert (element.logical_type.precision, element.logical_type.scale) == (10, 2)


def test_new_schema_element_unknown_converted_type_is_ignored():
    element = new_schema_element(string_to_tag("name=x, type=INT64, convertedtype=SLICE"))
    assert element.converted_type is None
    assert element.logical_type is None


def test_new_schema_element_bad_type():
    with pytest.raises(TagError):
        new_schema_element(string_to_tag("name=m, type=MAP"))