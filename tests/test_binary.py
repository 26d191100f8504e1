import io
import struct

import pytest

from pqcore import binary


def test_write_int32_little_endian():
    assert binary.write_int32([0, 1, 2]) == bytes([0, 0, 0, 0, 1, 0, 0, 0, 2, 0, 0, 0])


def test_write_int64_little_endian():
    assert binary.write_int64([1]) == bytes([1, 0, 0, 0, 0, 0, 0, 0])


def test_write_empty():
    assert binary.write_int32([]) == b""
    assert binary.write_float64([]) == b""


def test_write_negative_int32_is_twos_complement():
    assert binary.write_int32([-1]) == b"\xff\xff\xff\xff"


@pytest.mark.parametrize(
    "write, read, values",
    [
        (binary.write_int32, binary.read_int32, [0, 1, -1, 2**31 - 1, -(2**31)]),
        (binary.write_int64, binary.read_int64, [0, 5, -7, 2**63 - 1, -(2**63)]),
        (binary.write_float32, binary.read_float32, [0.0, 0.5, -2.25, 1024.0]),
        (binary.write_float64, binary.read_float64, [0.0, 0.1, -3.75, 1e300]),
    ],
)
def test_round_trip(write, read, values):
    assert read(io.BytesIO(write(values)), len(values)) == values


def test_read_advances_stream():
    stream = io.BytesIO(binary.write_int32([7, 8, 9]))
    assert binary.read_int32(stream, 2) == [7, 8]
    assert binary.read_int32(stream, 1) == [9]


def test_read_zero_count():
    assert binary.read_int64(io.BytesIO(b""), 0) == []


@pytest.mark.parametrize(
    "read, size", [(binary.read_int32, 4), (binary.read_int64, 8), (binary.read_float32, 4), (binary.read_float64, 8)]
)
def test_read_short_input_raises(read, size):
    with pytest.raises(EOFError):
        read(io.BytesIO(b"\x00" * (size * 2 - 1)), 2)


def test_read_empty_input_raises():
    with pytest.raises(EOFError):
        binary.read_int32(io.BytesIO(b""), 1)


def test_write_int32_out_of_range():
    with pytest.raises(struct.error):
        binary.write_int32([2**31])