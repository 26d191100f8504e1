"""Parquet value encodings, compression codecs, schema tags and column statistics."""

__version__ = "0.1.0"

__all__ = ["binary", "compression", "decode", "encode", "schema_types", "snappy", "stats", "tag"]