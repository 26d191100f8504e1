[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pqcore"
version = "0.1.0"
description = "Low-level building blocks for the Parquet file format: value encodings, compression codecs, schema tags and column statistics"
requires-python = ">=3.10"
dependencies = [
    "zstandard",
]
keywords = ["parquet", "columnar", "encoding", "rle", "delta", "bit-packing", "compression", "snappy", "zstd"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: File Formats",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["pqcore"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
