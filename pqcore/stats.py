"""Ordering and size rules for column statistics, plus schema path helpers."""

from __future__ import annotations

import array
import dataclasses
from dataclasses import dataclass
from typing import Any, Callable

from pqcore.schema_types import ConvertedType, LogicalType, Type

PATH_DELIMITER = "\x01"

_MASK32 = (1 << 32) - 1
_MASK64 = (1 << 64) - 1


def _as_bytes(value: object) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise TypeError(f"expected bytes or str, got {type(value).__name__}")


@dataclass(frozen=True)
class FuncTable:
    """Comparison and size rules for the values of one column type."""

    name: str
    compare: Callable[[Any, Any], bool]
    size: Callable[[Any], int]

    def less_than(self, a: Any, b: Any) -> bool:
        """Return True if ``a`` sorts before ``b``."""
        return self.compare(a, b)

    def min_max_size(self, min_value: Any, max_value: Any, value: Any) -> tuple[Any, Any, int]:
        """Fold ``value`` into the running minimum and maximum and report its size."""
        return (
            minimum(self, min_value, value),
            maximum(self, max_value, value),
            self.size(value),
        )


def minimum(table: FuncTable, a: Any, b: Any) -> Any:
    """The smaller of ``a`` and ``b``; a None argument yields the other one."""
    if a is None:
        return b
    if b is None:
        return a
    return a if table.less_than(a, b) else b


def maximum(table: FuncTable, a: Any, b: Any) -> Any:
    """The larger of ``a`` and ``b``; a None argument yields the other one."""
    if a is None:
        return b
    if b is None:
        return a
    return b if table.less_than(a, b) else a


def cmp_int_binary(a: bytes | str, b: bytes | str, order: str, signed: bool) -> bool:
    """Compare two binary integers of possibly different widths; True if ``a < b``.

    ``order`` is ``"LittleEndian"`` or anything else for big-endian. Signed
    values are two's complement and sign-extended to a common width.
    """
    abytes, bbytes = _as_bytes(a), _as_bytes(b)
    if signed and (not abytes or not bbytes):
        raise ValueError("signed binary integers must not be empty")
    byteorder = "little" if order == "LittleEndian" else "big"
    return int.from_bytes(abytes, byteorder, signed=signed) < int.from_bytes(
        bbytes, byteorder, signed=signed
    )


def _fixed(width: int) -> Callable[[Any], int]:
    return lambda _value: width


def _byte_length(value: Any) -> int:
    return len(_as_bytes(value))


def _twelve(value: Any) -> bytes:
    data = _as_bytes(value)
    if len(data) < 12:
        raise ValueError(f"expected at least 12 bytes, got {len(data)}")
    return data


def _int96_less(a: Any, b: Any) -> bool:
    abytes, bbytes = _twelve(a), _twelve(b)
    sign_a, sign_b = abytes[11] >> 7, bbytes[11] >> 7
    if sign_a != sign_b:
        return sign_a > sign_b
    return abytes[11::-1] < bbytes[11::-1]


def _interval_less(a: Any, b: Any) -> bool:
    abytes, bbytes = _twelve(a), _twelve(b)
    return abytes[11::-1] < bbytes[11::-1]


_BOOL = FuncTable("bool", lambda a, b: (not a) and bool(b), _fixed(1))
_INT32 = FuncTable("int32", lambda a, b: a < b, _fixed(4))
_UINT32 = FuncTable("uint32", lambda a, b: (a & _MASK32) < (b & _MASK32), _fixed(4))
_INT64 = FuncTable("int64", lambda a, b: a < b, _fixed(8))
_UINT64 = FuncTable("uint64", lambda a, b: (a & _MASK64) < (b & _MASK64), _fixed(8))
_INT96 = FuncTable("int96", _int96_less, _byte_length)
_FLOAT32 = FuncTable("float32", lambda a, b: a < b, _fixed(4))
_FLOAT64 = FuncTable("float64", lambda a, b: a < b, _fixed(8))
_STRING = FuncTable("string", lambda a, b: _as_bytes(a) < _as_bytes(b), _byte_length)
_INTERVAL = FuncTable("interval", _interval_less, _byte_length)
_DECIMAL_STRING = FuncTable(
    "decimal_string",
    lambda a, b: cmp_int_binary(a, b, "BigEndian", True),
    _byte_length,
)

_PHYSICAL_TABLES = {
    Type.BOOLEAN: _BOOL,
    Type.INT32: _INT32,
    Type.INT64: _INT64,
    Type.INT96: _INT96,
    Type.FLOAT: _FLOAT32,
    Type.DOUBLE: _FLOAT64,
    Type.BYTE_ARRAY: _STRING,
    Type.FIXED_LEN_BYTE_ARRAY: _STRING,
}

_CONVERTED_TABLES = {
    ConvertedType.UTF8: _STRING,
    ConvertedType.BSON: _STRING,
    ConvertedType.JSON: _STRING,
    ConvertedType.INT_8: _INT32,
    ConvertedType.INT_16: _INT32,
    ConvertedType.INT_32: _INT32,
    ConvertedType.DATE: _INT32,
    ConvertedType.TIME_MILLIS: _INT32,
    ConvertedType.UINT_8: _UINT32,
    ConvertedType.UINT_16: _UINT32,
    ConvertedType.UINT_32: _UINT32,
    ConvertedType.INT_64: _INT64,
    ConvertedType.TIME_MICROS: _INT64,
    ConvertedType.TIMESTAMP_MILLIS: _INT64,
    ConvertedType.TIMESTAMP_MICROS: _INT64,
    ConvertedType.UINT_64: _UINT64,
    ConvertedType.INTERVAL: _INTERVAL,
}


def _decimal_table(ptype: Type) -> FuncTable | None:
    if ptype in (Type.BYTE_ARRAY, Type.FIXED_LEN_BYTE_ARRAY):
        return _DECIMAL_STRING
    if ptype == Type.INT32:
        return _INT32
    if ptype == Type.INT64:
        return _INT64
    return None


def _logical_table(ptype: Type, logical_type: LogicalType) -> FuncTable | None:
    kind = logical_type.kind
    if kind in ("TIME", "TIMESTAMP"):
        return find_func_table(ptype, None, None)
    if kind == "DATE":
        return _INT32
    if kind == "INTEGER":
        if logical_type.is_signed:
            return find_func_table(ptype, None, None)
        if ptype == Type.INT32:
            return _UINT32
        if ptype == Type.INT64:
            return _UINT64
        return None
    if kind == "DECIMAL":
        return _decimal_table(ptype)
    if kind in ("BSON", "JSON", "STRING", "UUID"):
        return _STRING
    return None


def find_func_table(
    ptype: Type,
    converted_type: ConvertedType | None,
    logical_type: LogicalType | None,
) -> FuncTable:
    """Choose the statistics rules for a column of the given types."""
    table: FuncTable | None = None
    if converted_type is None and logical_type is None:
        table = _PHYSICAL_TABLES.get(ptype)
    if table is None and converted_type is not None:
        if converted_type == ConvertedType.DECIMAL:
            table = _decimal_table(ptype)
        else:
            table = _CONVERTED_TABLES.get(converted_type)
    if table is None and logical_type is not None:
        table = _logical_table(ptype, logical_type)
    if table is None:
        raise ValueError("No known func table in FindFuncTable")
    return table


def size_of(value: Any) -> int:
    """Estimate the stored size of a value in bytes.

    None counts 0, bool 1, int and float 8, text and bytes their byte length,
    ``array.array`` its item size times its length; containers and dataclasses
    count the sum of their parts, and anything else counts 4.
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        return 1
    if isinstance(value, (int, float)):
        return 8
    if isinstance(value, str):
        return len(value.encode("utf-8"))
    if isinstance(value, (bytes, bytearray, memoryview)):
        return len(bytes(value))
    if isinstance(value, array.array):
        return value.itemsize * len(value)
    if isinstance(value, dict):
        return sum(size_of(key) + size_of(item) for key, item in value.items())
    if isinstance(value, (list, tuple, set, frozenset)):
        return sum(size_of(item) for item in value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return sum(size_of(getattr(value, f.name)) for f in dataclasses.fields(value))
    return 4


def reform_path_str(path_str: str) -> str:
    """Replace dots in a dotted path with the path delimiter."""
    return path_str.replace(".", PATH_DELIMITER)


def path_to_str(path: list[str]) -> str:
    """Join path components with the path delimiter."""
    return PATH_DELIMITER.join(path)


def str_to_path(text: str) -> list[str]:
    """Split a delimited path string into its components."""
    return text.split(PATH_DELIMITER)


def path_str_index(text: str) -> int:
    """Number of components in a delimited path string."""
    return len(text.split(PATH_DELIMITER))