"""
Core NES compression functionality.

This package contains the template expression evaluator, the format tables,
the table-driven decompressor, the run-length compressors and the PPU
memory layout.
"""

from .compressor import ENCODERS, compress, compress_kemko_rle, compress_konami_rle
from .decompressor import DecodeStats, Decompressor, decompress
from .errors import (
    InvalidOperationError,
    MalformedExpressionError,
    NesCompressError,
    UnknownFormatError,
)
from .formats import DEFAULT_CATALOG, build_catalog
from .operations import FormatCatalog, FormatDefinition, Operation, OpKind
from .ppu import extract_regions

__all__ = [
    "ENCODERS",
    "compress",
    "compress_kemko_rle",
    "compress_konami_rle",
    "DecodeStats",
    "Decompressor",
    "decompress",
    "InvalidOperationError",
    "MalformedExpressionError",
    "NesCompressError",
    "UnknownFormatError",
    "DEFAULT_CATALOG",
    "build_catalog",
    "FormatCatalog",
    "FormatDefinition",
    "Operation",
    "OpKind",
    "extract_regions",
]
