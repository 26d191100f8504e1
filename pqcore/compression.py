"""Codec registry for compressing and uncompressing page data."""

from __future__ import annotations

import gzip
import io
import zlib
from dataclasses import dataclass
from typing import Callable

import zstandard

from pqcore import snappy
from pqcore.schema_types import CompressionCodec


class UnsupportedCodecError(ValueError):
    """Raised when no compressor is registered for a codec."""


@dataclass(frozen=True)
class Compressor:
    """A pair of functions that compress and uncompress bytes."""

    compress: Callable[[bytes], bytes]
    uncompress: Callable[[bytes], bytes]


_compressors: dict[CompressionCodec, Compressor] = {}


def register(codec: CompressionCodec, compressor: Compressor) -> None:
    """Register ``compressor`` for ``codec``, replacing any earlier one."""
    _compressors[codec] = compressor


def _lookup(codec: CompressionCodec) -> Compressor:
    try:
        return _compressors[codec]
    except KeyError:
        raise UnsupportedCodecError("unsupported compress method") from None


def compress(data: bytes, codec: CompressionCodec) -> bytes:
    """Compress ``data`` with ``codec``."""
    return _lookup(codec).compress(bytes(data))


def uncompress(data: bytes, codec: CompressionCodec) -> bytes:
    """Uncompress ``data`` with ``codec``."""
    return _lookup(codec).uncompress(bytes(data))


def _gzip_uncompress(data: bytes) -> bytes:
    try:
        return gzip.decompress(data)
    except (OSError, EOFError, zlib.error) as exc:
        raise ValueError(f"gzip: {exc}") from exc


def _zstd_compress(data: bytes) -> bytes:
    return zstandard.ZstdCompressor().compress(data)


def _zstd_uncompress(data: bytes) -> bytes:
    reader = zstandard.ZstdDecompressor().stream_reader(io.BytesIO(data), read_across_frames=True)
    try:
        with reader:
            return reader.read()
    except zstandard.ZstdError as exc:
        raise ValueError(f"zstd: {exc}") from exc


register(CompressionCodec.UNCOMPRESSED, Compressor(compress=bytes, uncompress=bytes))
register(CompressionCodec.GZIP, Compressor(compress=gzip.compress, uncompress=_gzip_uncompress))
register(CompressionCodec.SNAPPY, Compressor(compress=snappy.encode, uncompress=snappy.decode))
register(CompressionCodec.ZSTD, Compressor(compress=_zstd_compress, uncompress=_zstd_uncompress))