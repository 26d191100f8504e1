"""Snappy block format encoder and decoder."""

from __future__ import annotations

_MAX_BLOCK = 65536
_MIN_MATCH = 4
_MIN_BLOCK_FOR_MATCHES = 17
_MAX_DECODED = 0xFFFFFFFF

_TAG_LITERAL = 0
_TAG_COPY1 = 1
_TAG_COPY2 = 2
_TAG_COPY4 = 3


def _put_uvarint(value: int) -> bytes:
    out = bytearray()
    while value >= 0x80:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def _read_uvarint(data: bytes) -> tuple[int, int]:
    value = 0
    for index, byte in enumerate(data[:5]):
        value |= (byte & 0x7F) << (7 * index)
        if byte < 0x80:
            if value > _MAX_DECODED:
                raise ValueError("snappy: decoded block is too large")
            return value, index + 1
    raise ValueError("snappy: corrupt input")


def _emit_literal(out: bytearray, literal: bytes) -> None:
    if not literal:
        return
    n = len(literal) - 1
    if n < 60:
        out.append(n << 2 | _TAG_LITERAL)
    else:
        width = (n.bit_length() + 7) // 8
        out.append((59 + width) << 2 | _TAG_LITERAL)
        out += n.to_bytes(width, "little")
    out += literal


def _emit_copy(out: bytearray, offset: int, length: int) -> None:
    while length >= 68:
        out.append((64 - 1) << 2 | _TAG_COPY2)
        out += offset.to_bytes(2, "little")
        length -= 64
    if length > 64:
        out.append((60 - 1) << 2 | _TAG_COPY2)
        out += offset.to_bytes(2, "little")
        length -= 60
    if length >= 12 or offset >= 2048:
        out.append((length - 1) << 2 | _TAG_COPY2)
        out += offset.to_bytes(2, "little")
    else:
        out.append((offset >> 8) << 5 | (length - 4) << 2 | _TAG_COPY1)
        out.append(offset & 0xFF)


def _encode_block(out: bytearray, block: bytes) -> None:
    size = len(block)
    if size < _MIN_BLOCK_FOR_MATCHES:
        _emit_literal(out, block)
        return
    seen: dict[bytes, int] = {}
    literal_start = 0
    pos = 0
    while pos <= size - _MIN_MATCH:
        key = block[pos : pos + _MIN_MATCH]
        candidate = seen.get(key)
        seen[key] = pos
        if candidate is None:
            pos += 1
            continue
        length = _MIN_MATCH
        while pos + length < size and block[candidate + length] == block[pos + length]:
            length += 1
        _emit_literal(out, block[literal_start:pos])
        _emit_copy(out, pos - candidate, length)
        pos += length
        literal_start = pos
    _emit_literal(out, block[literal_start:])


def encode(data: bytes) -> bytes:
    """Compress ``data`` into a snappy block."""
    data = bytes(data)
    out = bytearray(_put_uvarint(len(data)))
    for start in range(0, len(data), _MAX_BLOCK):
        _encode_block(out, data[start : start + _MAX_BLOCK])
    return bytes(out)


def _copy(out: bytearray, offset: int, length: int) -> None:
    start = len(out) - offset
    if offset >= length:
        out += out[start : start + length]
    else:
        pattern = bytes(out[start:])
        out += (pattern * (length // offset + 1))[:length]


def decode(data: bytes) -> bytes:
    """Decompress a snappy block; raises ValueError on corrupt input."""
    data = bytes(data)
    expected, pos = _read_uvarint(data)
    size = len(data)
    out = bytearray()
    while pos < size:
        tag = data[pos]
        kind = tag & 3
        if kind == _TAG_LITERAL:
            length = tag >> 2
            pos += 1
            if length >= 60:
                width = length - 59
                if pos + width > size:
                    raise ValueError("snappy: corrupt input")
                length = int.from_bytes(data[pos : pos + width], "little")
                pos += width
            length += 1
            if pos + length > size or len(out) + length > expected:
                raise ValueError("snappy: corrupt input")
            out += data[pos : pos + length]
            pos += length
            continue
        if kind == _TAG_COPY1:
            if pos + 2 > size:
                raise ValueError("snappy: corrupt input")
            length = 4 + ((tag >> 2) & 7)
            offset = ((tag & 0xE0) << 3) | data[pos + 1]
            pos += 2
        elif kind == _TAG_COPY2:
            if pos + 3 > size:
                raise ValueError("snappy: corrupt input")
            length = 1 + (tag >> 2)
            offset = int.from_bytes(data[pos + 1 : pos + 3], "little")
            pos += 3
        else:
            if pos + 5 > size:
                raise ValueError("snappy: corrupt input")
            length = 1 + (tag >> 2)
            offset = int.from_bytes(data[pos + 1 : pos + 5], "little")
            pos += 5
        if offset <= 0 or offset > len(out) or len(out) + length > expected:
            raise ValueError("snappy: corrupt input")
        _copy(out, offset, length)
    if len(out) != expected:
        raise ValueError("snappy: corrupt input")
    return bytes(out)