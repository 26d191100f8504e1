"""Encoders for Parquet page values: plain, RLE, bit-packing, delta and byte-stream-split."""

from __future__ import annotations

import struct
from typing import Callable, Iterable, Sequence

from pqcore import binary
from pqcore.schema_types import Type

_MASK32 = (1 << 32) - 1
_MASK64 = (1 << 64) - 1

_DELTA_BLOCK_SIZE = 128
_DELTA_MINIBLOCKS = 4
_DELTA_MINIBLOCK_VALUES = _DELTA_BLOCK_SIZE // _DELTA_MINIBLOCKS


def _wrap32(value: int) -> int:
    return ((value + (1 << 31)) & _MASK32) - (1 << 31)


def _wrap64(value: int) -> int:
    return ((value + (1 << 63)) & _MASK64) - (1 << 63)


def _as_bytes(value: object) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise TypeError(f"expected bytes or str, got {type(value).__name__}")


def to_int64(values: Iterable[object]) -> list[int]:
    """Convert booleans and integers to plain integers (True -> 1, False -> 0)."""
    result = []
    for value in values:
        if not isinstance(value, int):
            raise TypeError(f"expected bool or int, got {type(value).__name__}")
        result.append(int(value))
    return result


def write_plain_boolean(values: Sequence[bool]) -> bytes:
    """Pack booleans one bit each, least significant bit first."""
    out = bytearray((len(values) + 7) // 8)
    for index, value in enumerate(values):
        if value:
            out[index // 8] |= 1 << (index % 8)
    return bytes(out)


def write_plain_int32(values: Iterable[int]) -> bytes:
    """Plain-encode 32-bit integers."""
    return binary.write_int32(values)


def write_plain_int64(values: Iterable[int]) -> bytes:
    """Plain-encode 64-bit integers."""
    return binary.write_int64(values)


def write_plain_int96(values: Iterable[object]) -> bytes:
    """Plain-encode 12-byte INT96 values by concatenation."""
    return b"".join(_as_bytes(value) for value in values)


def write_plain_float(values: Iterable[float]) -> bytes:
    """Plain-encode single-precision floats."""
    return binary.write_float32(values)


def write_plain_double(values: Iterable[float]) -> bytes:
    """Plain-encode double-precision floats."""
    return binary.write_float64(values)


def write_plain_byte_array(values: Iterable[object]) -> bytes:
    """Plain-encode byte arrays, each prefixed with its 4-byte length."""
    out = bytearray()
    for value in values:
        data = _as_bytes(value)
        out += struct.pack("<I", len(data))
        out += data
    return bytes(out)


def write_plain_fixed_len_byte_array(values: Iterable[object]) -> bytes:
    """Plain-encode fixed-length byte arrays by concatenation."""
    return b"".join(_as_bytes(value) for value in values)


_PLAIN_WRITERS: dict[Type, Callable[[Sequence], bytes]] = {
    Type.BOOLEAN: write_plain_boolean,
    Type.INT32: write_plain_int32,
    Type.INT64: write_plain_int64,
    Type.INT96: write_plain_int96,
    Type.FLOAT: write_plain_float,
    Type.DOUBLE: write_plain_double,
    Type.BYTE_ARRAY: write_plain_byte_array,
    Type.FIXED_LEN_BYTE_ARRAY: write_plain_fixed_len_byte_array,
}


def write_plain(values: Sequence[object], ptype: Type) -> bytes:
    """Plain-encode ``values`` of physical type ``ptype``; empty input gives b''."""
    values = list(values)
    if not values:
        return b""
    writer = _PLAIN_WRITERS.get(ptype)
    if writer is None:
        return b""
    return writer(values)


def write_unsigned_varint(num: int) -> bytes:
    """Encode ``num`` as an unsigned LEB128 varint, taken modulo 2**64."""
    num &= _MASK64
    out = bytearray()
    while num >= 0x80:
        out.append((num & 0x7F) | 0x80)
        num >>= 7
    out.append(num)
    return bytes(out)


def _runs(values: Sequence[object]):
    start = 0
    while start < len(values):
        end = start + 1
        while end < len(values) and values[end] == values[start]:
            end += 1
        yield values[start], end - start
        start = end


def write_rle(values: Sequence[object], bit_width: int, ptype: Type) -> bytes:
    """Encode runs of equal values as RLE runs without a length prefix."""
    byte_num = (bit_width + 7) // 8
    out = bytearray()
    for value, count in _runs(list(values)):
        value_buf = write_plain([value], ptype)
        if len(value_buf) < byte_num:
            raise ValueError(f"value {value!r} is narrower than bit width {bit_width}")
        out += write_unsigned_varint(count << 1)
        out += value_buf[:byte_num]
    return bytes(out)


def write_rle_bit_packed_hybrid(values: Sequence[object], bit_width: int, ptype: Type) -> bytes:
    """RLE-encode ``values`` and prefix the result with its 4-byte length."""
    rle = write_rle(values, bit_width, ptype)
    return write_plain_int32([len(rle)]) + rle


def write_rle_int32(values: Sequence[int], bit_width: int) -> bytes:
    """RLE-encode 32-bit integers without a length prefix."""
    byte_num = (bit_width + 7) // 8
    if byte_num > 4:
        raise ValueError(f"bit width {bit_width} exceeds 32")
    out = bytearray()
    for value, count in _runs(list(values)):
        out += write_unsigned_varint(count << 1)
        out += (value & _MASK32).to_bytes(4, "little")[:byte_num]
    return bytes(out)


def write_rle_bit_packed_hybrid_int32(values: Sequence[int], bit_width: int) -> bytes:
    """RLE-encode 32-bit integers and prefix the result with its 4-byte length."""
    rle = write_rle_int32(values, bit_width)
    return write_plain_int32([len(rle)]) + rle


def write_bit_packed(values: Sequence[object], bit_width: int, with_header: bool) -> bytes:
    """Bit-pack values LSB first; only whole bytes are emitted."""
    ints = to_int64(values)
    if not ints:
        return b""
    mask = (1 << bit_width) - 1
    packed = 0
    for index, value in enumerate(ints):
        packed |= (value & mask) << (index * bit_width)
    byte_count = len(ints) * bit_width // 8
    packed &= (1 << (byte_count * 8)) - 1
    body = packed.to_bytes(byte_count, "little")
    if with_header:
        return write_unsigned_varint((len(ints) // 8) << 1 | 1) + body
    return body


def write_bit_packed_deprecated(values: Sequence[int], bit_width: int) -> bytes:
    """Bit-pack values MSB first (the deprecated BIT_PACKED layout); only whole bytes are emitted."""
    ints = to_int64(values)
    if not ints:
        return b""
    mask = (1 << bit_width) - 1
    packed = 0
    for value in ints:
        packed = (packed << bit_width) | (value & mask)
    total_bits = len(ints) * bit_width
    byte_count = total_bits // 8
    packed >>= total_bits - byte_count * 8
    return packed.to_bytes(byte_count, "big")


def _write_delta(values: Sequence[int], bits: int) -> bytes:
    wrap = _wrap32 if bits == 32 else _wrap64
    nums = [int(value) for value in values]
    if not nums:
        raise ValueError("delta encoding needs at least one value")

    def zigzag(value: int) -> int:
        return wrap((value >> (bits - 1)) ^ wrap(value << 1)) & _MASK64

    out = bytearray()
    out += write_unsigned_varint(_DELTA_BLOCK_SIZE)
    out += write_unsigned_varint(_DELTA_MINIBLOCKS)
    out += write_unsigned_varint(len(nums))
    out += write_unsigned_varint(zigzag(nums[0]))

    deltas = [wrap(cur - prev) for prev, cur in zip(nums, nums[1:])]
    for start in range(0, len(deltas), _DELTA_BLOCK_SIZE):
        block = deltas[start : start + _DELTA_BLOCK_SIZE]
        min_delta = min(block)
        block += [min_delta] * (_DELTA_BLOCK_SIZE - len(block))
        block = [wrap(delta - min_delta) for delta in block]

        miniblocks = [
            block[j * _DELTA_MINIBLOCK_VALUES : (j + 1) * _DELTA_MINIBLOCK_VALUES]
            for j in range(_DELTA_MINIBLOCKS)
        ]
        bit_widths = [max(0, *mini).bit_length() for mini in miniblocks]

        out += write_unsigned_varint(zigzag(min_delta))
        out += bytes(bit_widths)
        for mini, width in zip(miniblocks, bit_widths):
            out += write_bit_packed(mini, width, False)
    return bytes(out)


def write_delta_int32(values: Sequence[int]) -> bytes:
    """DELTA_BINARY_PACKED encoding of 32-bit integers."""
    return _write_delta(values, 32)


def write_delta_int64(values: Sequence[int]) -> bytes:
    """DELTA_BINARY_PACKED encoding of 64-bit integers."""
    return _write_delta(values, 64)


def write_delta(values: Sequence[int], ptype: Type) -> bytes:
    """Delta-encode INT32 or INT64 values; other types and empty input give b''."""
    values = list(values)
    if not values:
        return b""
    if ptype == Type.INT32:
        return write_delta_int32(values)
    if ptype == Type.INT64:
        return write_delta_int64(values)
    return b""


def write_delta_length_byte_array(values: Sequence[object]) -> bytes:
    """Delta-encode the lengths, then append all byte arrays."""
    arrays = [_as_bytes(value) for value in values]
    return write_delta_int32([len(array) for array in arrays]) + b"".join(arrays)


def _common_prefix_length(first: bytes, second: bytes) -> int:
    length = 0
    for a, b in zip(first, second):
        if a != b:
            break
        length += 1
    return length


def write_delta_byte_array(values: Sequence[object]) -> bytes:
    """Encode byte arrays as shared-prefix lengths plus delta-length suffixes."""
    arrays = [_as_bytes(value) for value in values]
    if not arrays:
        return b""
    prefix_lengths = [0]
    suffixes = [arrays[0]]
    for previous, current in zip(arrays, arrays[1:]):
        shared = _common_prefix_length(previous, current)
        prefix_lengths.append(shared)
        suffixes.append(current[shared:])
    return write_delta_int32(prefix_lengths) + write_delta_length_byte_array(suffixes)


def _byte_stream_split(values: Sequence[float], code: str, width: int) -> bytes:
    items = list(values)
    if not items:
        return b""
    packed = struct.pack(f"<{len(items)}{code}", *items)
    return b"".join(packed[k::width] for k in range(width))


def write_byte_stream_split_float32(values: Sequence[float]) -> bytes:
    """BYTE_STREAM_SPLIT encoding of single-precision floats."""
    return _byte_stream_split(values, "f", 4)


def write_byte_stream_split_float64(values: Sequence[float]) -> bytes:
    """BYTE_STREAM_SPLIT encoding of double-precision floats."""
    return _byte_stream_split(values, "d", 8)


def write_byte_stream_split(values: Sequence[float], ptype: Type) -> bytes:
    """Byte-stream-split FLOAT or DOUBLE values; other types and empty input give b''."""
    values = list(values)
    if not values:
        return b""
    if ptype == Type.FLOAT:
        return write_byte_stream_split_float32(values)
    if ptype == Type.DOUBLE:
        return write_byte_stream_split_float64(values)
    return b""