"""Field tags of the form ``name=x, type=INT32, ...`` and the schema elements built from them."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from pqcore.schema_types import (
    ConvertedType,
    Encoding,
    FieldRepetitionType,
    LogicalType,
    SchemaElement,
    TimeUnit,
    converted_type_from_string,
    type_from_string,
)

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1

_TRUE_WORDS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_WORDS = frozenset({"0", "f", "F", "FALSE", "false", "False"})

_ASCII_LETTERS = frozenset(b"abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ")
_NAME_BYTES = _ASCII_LETTERS | frozenset(b"0123456789_")

_REPETITIONS = {
    "repeated": FieldRepetitionType.REPEATED,
    "required": FieldRepetitionType.REQUIRED,
    "optional": FieldRepetitionType.OPTIONAL,
}

_ENCODINGS = {
    "plain": Encoding.PLAIN,
    "rle": Encoding.RLE,
    "delta_binary_packed": Encoding.DELTA_BINARY_PACKED,
    "delta_length_byte_array": Encoding.DELTA_LENGTH_BYTE_ARRAY,
    "delta_byte_array": Encoding.DELTA_BYTE_ARRAY,
    "plain_dictionary": Encoding.PLAIN_DICTIONARY,
    "rle_dictionary": Encoding.RLE_DICTIONARY,
    "byte_stream_split": Encoding.BYTE_STREAM_SPLIT,
}

# Key and value encodings accept neither PLAIN nor RLE_DICTIONARY.
_KEY_VALUE_ENCODINGS = {
    name: encoding
    for name, encoding in _ENCODINGS.items()
    if name not in ("plain", "rle_dictionary")
}


class TagError(ValueError):
    """Raised for a malformed or unrecognised field tag."""


@dataclass
class Tag:
    """Parsed settings of a field tag, with separate settings for map keys and values."""

    in_name: str = ""
    ex_name: str = ""

    type: str = ""
    key_type: str = ""
    value_type: str = ""

    converted_type: str = ""
    key_converted_type: str = ""
    value_converted_type: str = ""

    length: int = 0
    key_length: int = 0
    value_length: int = 0

    scale: int = 0
    key_scale: int = 0
    value_scale: int = 0

    precision: int = 0
    key_precision: int = 0
    value_precision: int = 0

    is_adjusted_to_utc: bool = False
    key_is_adjusted_to_utc: bool = False
    value_is_adjusted_to_utc: bool = False

    field_id: int = 0
    key_field_id: int = 0
    value_field_id: int = 0

    encoding: Encoding = Encoding.PLAIN
    key_encoding: Encoding = Encoding.PLAIN
    value_encoding: Encoding = Encoding.PLAIN

    omit_stats: bool = False
    key_omit_stats: bool = False
    value_omit_stats: bool = False

    repetition_type: FieldRepetitionType = FieldRepetitionType.REQUIRED
    key_repetition_type: FieldRepetitionType = FieldRepetitionType.REQUIRED
    value_repetition_type: FieldRepetitionType = FieldRepetitionType.REQUIRED

    logical_type_fields: dict[str, str] = field(default_factory=dict)
    key_logical_type_fields: dict[str, str] = field(default_factory=dict)
    value_logical_type_fields: dict[str, str] = field(default_factory=dict)


def str_to_int32(text: str) -> int:
    """Parse a decimal integer and truncate it to a signed 32-bit value."""
    if not _INT_PATTERN.fullmatch(text):
        raise TagError(f"invalid integer: {text!r}")
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise TagError(f"integer out of range: {text!r}")
    return ((value + (1 << 31)) & 0xFFFFFFFF) - (1 << 31)


def str_to_bool(text: str) -> bool:
    """Parse a boolean written as 1, t, true, 0, f, false and their capitalised forms."""
    if text in _TRUE_WORDS:
        return True
    if text in _FALSE_WORDS:
        return False
    raise TagError(f"invalid boolean: {text!r}")


def head_to_upper(text: str) -> str:
    """Upper-case a leading ASCII letter; prefix names that do not start with one."""
    if not text:
        return text
    first = text[0]
    if first.isascii() and first.isalpha():
        return first.upper() + text[1:]
    return "PARGO_PREFIX_" + text


def string_to_variable_name(text: str) -> str:
    """Turn an arbitrary name into an identifier; other bytes become their decimal codes."""
    if not text:
        return text
    parts = []
    for byte in text.encode("utf-8"):
        parts.append(chr(byte) if byte in _NAME_BYTES else str(byte))
    return head_to_upper("".join(parts))


def _choose(table: dict, val: str, what: str):
    try:
        return table[val.lower()]
    except KeyError:
        raise TagError(f"Unknown {what}: {val!r}") from None


def string_to_tag(text: str) -> Tag:
    """Parse a comma-separated ``key=value`` tag string."""
    tag = Tag()
    for item in text.replace("\t", "").split(","):
        item = item.strip()
        key, sep, val = item.partition("=")
        if not sep:
            raise TagError(f"tag item without '=': {item!r}")
        key = key.lower().strip()
        val = val.strip()

        if key in ("type", "keytype", "valuetype", "convertedtype", "keyconvertedtype", "valueconvertedtype"):
            attr = {
                "type": "type",
                "keytype": "key_type",
                "valuetype": "value_type",
                "convertedtype": "converted_type",
                "keyconvertedtype": "key_converted_type",
                "valueconvertedtype": "value_converted_type",
            }[key]
            setattr(tag, attr, val)
        elif key in _INT_KEYS:
            setattr(tag, _INT_KEYS[key], str_to_int32(val))
        elif key in _BOOL_KEYS:
            setattr(tag, _BOOL_KEYS[key], str_to_bool(val))
        elif key == "name":
            if not tag.in_name:
                tag.in_name = string_to_variable_name(val)
            tag.ex_name = val
        elif key == "inname":
            tag.in_name = val
        elif key == "repetitiontype":
            tag.repetition_type = _choose(_REPETITIONS, val, "repetitiontype")
        elif key == "keyrepetitiontype":
            tag.key_repetition_type = _choose(_REPETITIONS, val, "keyrepetitiontype")
        elif key == "valuerepetitiontype":
            tag.value_repetition_type = _choose(_REPETITIONS, val, "valuerepetitiontype")
        elif key == "encoding":
            tag.encoding = _choose(_ENCODINGS, val, "encoding type")
        elif key == "keyencoding":
            tag.key_encoding = _choose(_KEY_VALUE_ENCODINGS, val, "keyencoding type")
        elif key == "valueencoding":
            tag.value_encoding = _choose(_KEY_VALUE_ENCODINGS, val, "valueencoding type")
        elif key.startswith("logicaltype"):
            tag.logical_type_fields[key] = val
        elif key.startswith("keylogicaltype"):
            tag.key_logical_type_fields[key[3:]] = val
        elif key.startswith("valuelogicaltype"):
            tag.value_logical_type_fields[key[5:]] = val
        else:
            raise TagError(f"Unrecognized tag {key!r}")
    return tag


_INT_KEYS = {
    "length": "length",
    "keylength": "key_length",
    "valuelength": "value_length",
    "scale": "scale",
    "keyscale": "key_scale",
    "valuescale": "value_scale",
    "precision": "precision",
    "keyprecision": "key_precision",
    "valueprecision": "value_precision",
    "fieldid": "field_id",
    "keyfieldid": "key_field_id",
    "valuefieldid": "value_field_id",
}

_BOOL_KEYS = {
    "isadjustedtoutc": "is_adjusted_to_utc",
    "keyisadjustedtoutc": "key_is_adjusted_to_utc",
    "valueisadjustedtoutc": "value_is_adjusted_to_utc",
    "omitstats": "omit_stats",
    "keyomitstats": "key_omit_stats",
    "valueomitstats": "value_omit_stats",
}


def key_tag(tag: Tag) -> Tag:
    """Build the tag of the key field of a map from its parent's key settings."""
    return Tag(
        in_name="Key",
        ex_name="key",
        type=tag.key_type,
        converted_type=tag.key_converted_type,
        is_adjusted_to_utc=tag.key_is_adjusted_to_utc,
        length=tag.key_length,
        scale=tag.key_scale,
        precision=tag.key_precision,
        field_id=tag.key_field_id,
        encoding=tag.key_encoding,
        omit_stats=tag.key_omit_stats,
        repetition_type=FieldRepetitionType.REQUIRED,
    )


def value_tag(tag: Tag) -> Tag:
    """Build the tag of the value field of a map from its parent's value settings."""
    return Tag(
        in_name="Value",
        ex_name="value",
        type=tag.value_type,
        converted_type=tag.value_converted_type,
        is_adjusted_to_utc=tag.value_is_adjusted_to_utc,
        length=tag.value_length,
        scale=tag.value_scale,
        precision=tag.value_precision,
        field_id=tag.value_field_id,
        encoding=tag.value_encoding,
        omit_stats=tag.value_omit_stats,
        repetition_type=tag.value_repetition_type,
    )


def _time_unit(fields: dict[str, str]) -> TimeUnit:
    try:
        return TimeUnit(fields.get("logicaltype.unit", ""))
    except ValueError:
        raise TagError("logicaltype time error") from None


def logical_type_from_fields(fields: dict[str, str]) -> LogicalType | None:
    """Build a logical type from ``logicaltype*`` tag entries; None without ``logicaltype``."""
    kind = fields.get("logicaltype")
    if kind is None:
        return None
    if kind in ("STRING", "MAP", "LIST", "ENUM", "DATE", "JSON", "BSON", "UUID"):
        return LogicalType(kind)
    if kind == "DECIMAL":
        return LogicalType(
            kind,
            precision=str_to_int32(fields.get("logicaltype.precision", "")),
            scale=str_to_int32(fields.get("logicaltype.scale", "")),
        )
    if kind in ("TIME", "TIMESTAMP"):
        adjusted = str_to_bool(fields.get("logicaltype.isadjustedtoutc", ""))
        return LogicalType(kind, is_adjusted_to_utc=adjusted, unit=_time_unit(fields))
    if kind == "INTEGER":
        width = str_to_int32(fields.get("logicaltype.bitwidth", ""))
        return LogicalType(
            kind,
            bit_width=((width + 128) & 0xFF) - 128,
            is_signed=str_to_bool(fields.get("logicaltype.issigned", "")),
        )
    raise TagError(f"unknown logicaltype: {kind}")


_INTEGER_CONVERSIONS = {
    ConvertedType.INT_8: (8, True),
    ConvertedType.INT_16: (16, True),
    ConvertedType.INT_32: (32, True),
    ConvertedType.INT_64: (64, True),
    ConvertedType.UINT_8: (8, False),
    ConvertedType.UINT_16: (16, False),
    ConvertedType.UINT_32: (32, False),
    ConvertedType.UINT_64: (64, False),
}

_TIME_CONVERSIONS = {
    ConvertedType.TIME_MICROS: ("TIME", TimeUnit.MICROS),
    ConvertedType.TIME_MILLIS: ("TIME", TimeUnit.MILLIS),
    ConvertedType.TIMESTAMP_MICROS: ("TIMESTAMP", TimeUnit.MICROS),
    ConvertedType.TIMESTAMP_MILLIS: ("TIMESTAMP", TimeUnit.MILLIS),
}

_SIMPLE_CONVERSIONS = {
    ConvertedType.DATE: "DATE",
    ConvertedType.BSON: "BSON",
    ConvertedType.ENUM: "ENUM",
    ConvertedType.JSON: "JSON",
    ConvertedType.LIST: "LIST",
    ConvertedType.MAP: "MAP",
    ConvertedType.UTF8: "STRING",
}


def logical_type_from_converted_type(element: SchemaElement, tag: Tag) -> LogicalType | None:
    """Derive the logical type equivalent to the element's converted type, if any."""
    converted = element.converted_type
    if converted is None:
        return None
    if converted in _INTEGER_CONVERSIONS:
        width, signed = _INTEGER_CONVERSIONS[converted]
        return LogicalType("INTEGER", bit_width=width, is_signed=signed)
    if converted == ConvertedType.DECIMAL:
        return LogicalType("DECIMAL", precision=tag.precision, scale=tag.scale)
    if converted in _TIME_CONVERSIONS:
        kind, unit = _TIME_CONVERSIONS[converted]
        return LogicalType(kind, is_adjusted_to_utc=tag.is_adjusted_to_utc, unit=unit)
    if converted in _SIMPLE_CONVERSIONS:
        return LogicalType(_SIMPLE_CONVERSIONS[converted])
    return None


def new_schema_element(tag: Tag) -> SchemaElement:
    """Build the schema element of a leaf field described by ``tag``."""
    try:
        ptype = type_from_string(tag.type)
    except ValueError as exc:
        raise TagError(f"type {tag.type}: {exc}") from None
    element = SchemaElement(
        name=tag.in_name,
        type=ptype,
        type_length=tag.length,
        scale=tag.scale,
        precision=tag.precision,
        field_id=tag.field_id,
        repetition_type=tag.repetition_type,
        num_children=None,
    )
    try:
        element.converted_type = converted_type_from_string(tag.converted_type)
    except ValueError:
        element.converted_type = None
    if tag.logical_type_fields:
        element.logical_type = logical_type_from_fields(tag.logical_type_fields)
    else:
        element.logical_type = logical_type_from_converted_type(element, tag)
    return element