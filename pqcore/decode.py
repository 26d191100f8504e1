"""Decoders for Parquet page values: plain, RLE, bit-packing, delta and byte-stream-split."""

from __future__ import annotations

import io
import struct
from typing import BinaryIO, Callable

from pqcore import binary
from pqcore.schema_types import Type

_MASK32 = (1 << 32) - 1
_MASK64 = (1 << 64) - 1


def _wrap32(value: int) -> int:
    return ((value + (1 << 31)) & _MASK32) - (1 << 31)


def _wrap64(value: int) -> int:
    return ((value + (1 << 63)) & _MASK64) - (1 << 63)


def _unzigzag(value: int) -> int:
    return (value >> 1) ^ -(value & 1)


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    data = stream.read(size) if size > 0 else b""
    if len(data) != size:
        raise EOFError(f"expected {size} bytes, got {len(data)}")
    return data


def _read_some(stream: BinaryIO, size: int) -> bytes:
    """Read up to ``size`` bytes, zero-padding a short read; fails only when nothing is left."""
    if size <= 0:
        return b""
    data = stream.read(size)
    if not data:
        raise EOFError("unexpected end of stream")
    return data.ljust(size, b"\x00")


def read_plain_boolean(stream: BinaryIO, count: int) -> list[bool]:
    """Read ``count`` bit-packed booleans."""
    values = read_bit_packed(stream, count << 1, 1)
    return [value > 0 for value in values[:count]]


def read_plain_int32(stream: BinaryIO, count: int) -> list[int]:
    """Read ``count`` plain 32-bit integers."""
    return binary.read_int32(stream, count)


def read_plain_int64(stream: BinaryIO, count: int) -> list[int]:
    """Read ``count`` plain 64-bit integers."""
    return binary.read_int64(stream, count)


def read_plain_int96(stream: BinaryIO, count: int) -> list[bytes]:
    """Read ``count`` 12-byte INT96 values."""
    return [_read_some(stream, 12) for _ in range(count)]


def read_plain_float(stream: BinaryIO, count: int) -> list[float]:
    """Read ``count`` plain single-precision floats."""
    return binary.read_float32(stream, count)


def read_plain_double(stream: BinaryIO, count: int) -> list[float]:
    """Read ``count`` plain double-precision floats."""
    return binary.read_float64(stream, count)


def read_plain_byte_array(stream: BinaryIO, count: int) -> list[bytes]:
    """Read ``count`` length-prefixed byte arrays."""
    result = []
    for _ in range(count):
        (length,) = struct.unpack("<I", _read_some(stream, 4))
        result.append(_read_some(stream, length))
    return result


def read_plain_fixed_len_byte_array(stream: BinaryIO, count: int, fixed_length: int) -> list[bytes]:
    """Read ``count`` byte arrays of ``fixed_length`` bytes each."""
    return [_read_some(stream, fixed_length) for _ in range(count)]


_PLAIN_READERS: dict[Type, Callable[[BinaryIO, int], list]] = {
    Type.BOOLEAN: read_plain_boolean,
    Type.INT32: read_plain_int32,
    Type.INT64: read_plain_int64,
    Type.INT96: read_plain_int96,
    Type.FLOAT: read_plain_float,
    Type.DOUBLE: read_plain_double,
    Type.BYTE_ARRAY: read_plain_byte_array,
}


def read_plain(stream: BinaryIO, ptype: Type, count: int, bit_width: int) -> list:
    """Read ``count`` plain values of physical type ``ptype``.

    ``bit_width`` is the byte length of FIXED_LEN_BYTE_ARRAY values.
    """
    if ptype == Type.FIXED_LEN_BYTE_ARRAY:
        return read_plain_fixed_len_byte_array(stream, count, bit_width)
    reader = _PLAIN_READERS.get(ptype)
    if reader is None:
        raise ValueError("Unknown parquet type")
    return reader(stream, count)


def read_unsigned_varint(stream: BinaryIO) -> int:
    """Read an unsigned LEB128 varint, keeping the low 64 bits."""
    result = 0
    shift = 0
    while True:
        chunk = stream.read(1)
        if not chunk:
            raise EOFError("truncated varint")
        byte = chunk[0]
        result |= (byte & 0x7F) << shift
        if not byte & 0x80:
            return result & _MASK64
        shift += 7


def read_rle(stream: BinaryIO, header: int, bit_width: int) -> list[int]:
    """Read one RLE run whose header has already been consumed."""
    count = header >> 1
    width = (bit_width + 7) // 8
    data = _read_some(stream, width) if width > 0 else b""
    value = int.from_bytes(data[:4], "little")
    return [value] * count


def read_bit_packed(stream: BinaryIO, header: int, bit_width: int) -> list[int]:
    """Read one bit-packed run (groups of 8 values, LSB first) whose header has been consumed."""
    count = (header >> 1) * 8
    if count == 0:
        return []
    if bit_width == 0:
        return [0] * count
    data = _read_some(stream, count * bit_width // 8)
    packed = int.from_bytes(data, "little")
    mask = (1 << bit_width) - 1
    return [_wrap64((packed >> (index * bit_width)) & mask) for index in range(count)]


def read_rle_bit_packed_hybrid(stream: BinaryIO, bit_width: int, length: int) -> list[int]:
    """Read an RLE/bit-packed hybrid run sequence.

    A ``length`` of zero or less means the data carries its own 4-byte length prefix.
    """
    if length <= 0:
        (length,) = read_plain_int32(stream, 1)
        if length < 0:
            raise ValueError(f"negative hybrid run length: {length}")
    data = _read_some(stream, length)
    section = io.BytesIO(data)
    result: list[int] = []
    while section.tell() < len(data):
        header = read_unsigned_varint(section)
        if header & 1 == 0:
            result.extend(read_rle(section, header, bit_width))
        else:
            result.extend(read_bit_packed(section, header, bit_width))
    return result


def _read_delta(stream: BinaryIO, bits: int) -> list[int]:
    mask = (1 << bits) - 1
    wrap = _wrap32 if bits == 32 else _wrap64

    block_size = read_unsigned_varint(stream)
    num_miniblocks = read_unsigned_varint(stream)
    num_values = read_unsigned_varint(stream)
    first_value = _unzigzag(read_unsigned_varint(stream) & mask)

    if num_miniblocks == 0:
        raise ValueError("delta block has no miniblocks")
    per_miniblock = block_size // num_miniblocks
    if num_values > 1 and per_miniblock < 8:
        raise ValueError(f"miniblock of {per_miniblock} values is too small")
    miniblock_header = (per_miniblock // 8) << 1

    result = [first_value]
    while len(result) < num_values:
        min_delta = _unzigzag(read_unsigned_varint(stream) & mask)
        widths = _read_exact(stream, num_miniblocks)
        for width in widths:
            if len(result) >= num_values:
                break
            for delta in read_bit_packed(stream, miniblock_header, width):
                result.append(wrap(result[-1] + delta + min_delta))
    return result[:num_values]


def read_delta_binary_packed_int32(stream: BinaryIO) -> list[int]:
    """Read DELTA_BINARY_PACKED 32-bit integers."""
    return _read_delta(stream, 32)


def read_delta_binary_packed_int64(stream: BinaryIO) -> list[int]:
    """Read DELTA_BINARY_PACKED 64-bit integers."""
    return _read_delta(stream, 64)


def read_delta_length_byte_array(stream: BinaryIO) -> list[bytes]:
    """Read DELTA_LENGTH_BYTE_ARRAY values: delta-packed lengths, then the bytes."""
    result = []
    for length in read_delta_binary_packed_int64(stream):
        if length < 0:
            raise ValueError(f"negative byte array length: {length}")
        if length == 0:
            result.append(b"")
        else:
            result.append(read_plain_fixed_len_byte_array(stream, 1, length)[0])
    return result


def read_delta_byte_array(stream: BinaryIO) -> list[bytes]:
    """Read DELTA_BYTE_ARRAY values: shared-prefix lengths plus suffixes."""
    prefix_lengths = read_delta_binary_packed_int64(stream)
    suffixes = read_delta_length_byte_array(stream)
    if not prefix_lengths:
        return []
    if len(suffixes) < len(prefix_lengths):
        raise ValueError("fewer suffixes than prefix lengths")
    result = [suffixes[0]]
    for prefix_length, suffix in zip(prefix_lengths[1:], suffixes[1:]):
        previous = result[-1]
        if prefix_length < 0 or prefix_length > len(previous):
            raise ValueError(f"prefix length {prefix_length} out of range")
        result.append(previous[:prefix_length] + suffix)
    return result


def _read_byte_stream_split(stream: BinaryIO, count: int, code: str, width: int) -> list[float]:
    if count < 0:
        raise ValueError("count must not be negative")
    if count == 0:
        return []
    data = _read_exact(stream, count * width)
    streams = [data[k * count : (k + 1) * count] for k in range(width)]
    joined = bytes(byte for group in zip(*streams) for byte in group)
    return list(struct.unpack(f"<{count}{code}", joined))


def read_byte_stream_split_float32(stream: BinaryIO, count: int) -> list[float]:
    """Read ``count`` BYTE_STREAM_SPLIT single-precision floats."""
    return _read_byte_stream_split(stream, count, "f", 4)


def read_byte_stream_split_float64(stream: BinaryIO, count: int) -> list[float]:
    """Read ``count`` BYTE_STREAM_SPLIT double-precision floats."""
    return _read_byte_stream_split(stream, count, "d", 8)