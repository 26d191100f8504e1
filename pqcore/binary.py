"""Little-endian fixed-width number packing."""

from __future__ import annotations

import struct
from typing import BinaryIO, Iterable


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    chunks = []
    remaining = size
    while remaining > 0:
        chunk = stream.read(remaining)
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    data = b"".join(chunks)
    if len(data) != size:
        raise EOFError(f"expected {size} bytes, got {len(data)}")
    return data


def _read(stream: BinaryIO, count: int, code: str) -> list:
    if count < 0:
        raise ValueError("count must not be negative")
    size = struct.calcsize("<" + code) * count
    data = _read_exact(stream, size)
    return list(struct.unpack(f"<{count}{code}", data))


def _write(values: Iterable, code: str) -> bytes:
    items = list(values)
    return struct.pack(f"<{len(items)}{code}", *items)


def read_int32(stream: BinaryIO, count: int) -> list[int]:
    """Read ``count`` signed 32-bit integers."""
    return _read(stream, count, "i")


def read_int64(stream: BinaryIO, count: int) -> list[int]:
    """Read ``count`` signed 64-bit integers."""
    return _read(stream, count, "q")


def read_float32(stream: BinaryIO, count: int) -> list[float]:
    """Read ``count`` IEEE single-precision floats."""
    return _read(stream, count, "f")


def read_float64(stream: BinaryIO, count: int) -> list[float]:
    """Read ``count`` IEEE double-precision floats."""
    return _read(stream, count, "d")


def write_int32(values: Iterable[int]) -> bytes:
    """Pack signed 32-bit integers."""
    return _write(values, "i")


def write_int64(values: Iterable[int]) -> bytes:
    """Pack signed 64-bit integers."""
    return _write(values, "q")


def write_float32(values: Iterable[float]) -> bytes:
    """Pack IEEE single-precision floats."""
    return _write(values, "f")


def write_float64(values: Iterable[float]) -> bytes:
    """Pack IEEE double-precision floats."""
    return _write(values, "d")