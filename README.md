# pqcore

Low-level building blocks for the Parquet file format in pure Python.

## Modules

- `pqcore.schema_types`: the enumerations `Type`, `ConvertedType`,
  `Encoding`, `FieldRepetitionType`, `CompressionCodec` and `TimeUnit`, the
  records `LogicalType` and `SchemaElement`, and `type_from_string` /
  `converted_type_from_string`, which look a member up by its exact name and
  raise `ValueError` otherwise.
- `pqcore.binary`: little-endian fixed-width numbers. `read_int32`,
  `read_int64`, `read_float32`, `read_float64` read a count of values from a
  binary stream; `write_int32`, `write_int64`, `write_float32`,
  `write_float64` pack values into bytes.
- `pqcore.encode`: PLAIN (`write_plain` and one `write_plain_*` per physical
  type), unsigned varints (`write_unsigned_varint`), RLE runs (`write_rle`,
  `write_rle_int32` and their length-prefixed `*_bit_packed_hybrid*` forms),
  bit-packing (`write_bit_packed`, LSB first, and
  `write_bit_packed_deprecated`, MSB first; both emit whole bytes only),
  DELTA_BINARY_PACKED (`write_delta`, `write_delta_int32`,
  `write_delta_int64`), DELTA_LENGTH_BYTE_ARRAY, DELTA_BYTE_ARRAY and
  BYTE_STREAM_SPLIT. Byte-array writers take `bytes` or `str` (encoded as
  UTF-8).
- `pqcore.decode`: the matching readers. They take a binary stream such as
  `io.BytesIO`; byte-array readers return `bytes`.
  `read_rle_bit_packed_hybrid(stream, bit_width, length)` reads its own 4-byte
  length prefix when `length` is zero or less.
- `pqcore.snappy`: a pure-Python snappy block `encode` / `decode`.
- `pqcore.compression`: `compress(data, codec)` and `uncompress(data, codec)`
  for UNCOMPRESSED, GZIP, SNAPPY and ZSTD, and `register(codec, Compressor(...))`
  to add or replace a codec.
- `pqcore.tag`: `string_to_tag` parses tag strings such as
  `"name=name, type=BYTE_ARRAY, convertedtype=UTF8"` into a `Tag`;
  `key_tag` / `value_tag` derive the tags of a map's key and value;
  `new_schema_element` builds a `SchemaElement`, taking its logical type from
  `logicaltype*` entries (`logical_type_from_fields`) or else from the
  converted type (`logical_type_from_converted_type`). Also
  `string_to_variable_name`, `head_to_upper`, `str_to_int32`, `str_to_bool`.
- `pqcore.stats`: `find_func_table(ptype, converted_type, logical_type)` picks
  a `FuncTable` whose `less_than` and `min_max_size` order and size values of
  that column type; `minimum` / `maximum` treat `None` as absent;
  `cmp_int_binary` compares two's-complement or unsigned binary integers of
  different widths; `size_of` estimates the size of a value; `reform_path_str`,
  `path_to_str`, `str_to_path` and `path_str_index` handle column paths joined
  with `"\x01"`.

## Examples

```python
import io
from pqcore import encode, decode

data = encode.write_delta_int64([1, 2, 3, 4])
assert decode.read_delta_binary_packed_int64(io.BytesIO(data)) == [1, 2, 3, 4]

plain = encode.write_plain_byte_array([b"hello", b"world"])
assert decode.read_plain_byte_array(io.BytesIO(plain), 2) == [b"hello", b"world"]
```

```python
from pqcore.compression import compress, uncompress
from pqcore.schema_types import CompressionCodec

packed = compress(b"test data", CompressionCodec.GZIP)
assert uncompress(packed, CompressionCodec.GZIP) == b"test data"
```

```python
from pqcore.tag import string_to_tag, new_schema_element

tag = string_to_tag("name=name, type=BYTE_ARRAY, convertedtype=UTF8")
element = new_schema_element(tag)
assert element.name == "Name"
assert element.logical_type.kind == "STRING"
```

```python
from pqcore.stats import find_func_table, minimum, maximum
from pqcore.schema_types import Type

table = find_func_table(Type.INT32, None, None)
assert minimum(table, 1, 2) == 1
assert maximum(table, None, 2) == 2
```

## Errors

Short reads raise `EOFError`. An unregistered codec raises
`pqcore.compression.UnsupportedCodecError` (a `ValueError`); corrupt snappy,
gzip or zstd data raises `ValueError`. Invalid tags raise `pqcore.tag.TagError`
(a `ValueError`), and `find_func_table` raises `ValueError` for a type
combination it has no rules for.

## What it does not do

pqcore works on individual values, pages' byte payloads and schema fields. It
does not read or write whole Parquet files: there is no file footer or
metadata serialisation, no row groups or column chunks, no record
shredding or assembly, and no command-line tool. Only the UNCOMPRESSED, GZIP,
SNAPPY and ZSTD codecs are registered; the others can be added with
`register`.

## Installation

```
pip install .
```

Python 3.10 or newer is required. ZSTD support uses the `zstandard` package,
installed as a dependency.

## Running the tests

```
pip install -e .[test]
pytest
```