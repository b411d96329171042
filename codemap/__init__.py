"""
Rust public surface mapper.

Tree-sitter-based extraction of the externally visible items of a Rust
source file, rendered as a compact, body-free summary.
"""

from codemap.errors import (
    CodemapError,
    MissingStructuralField,
    ParseFailure,
    UnsupportedConstruct,
)
from codemap.models import Declaration, DeclarationKind, FileSurface, ImplIndex
from codemap.parser import create_parser, parse_bytes, parse_file, parse_source, count_error_nodes
from codemap.impl_index import build_impl_index
from codemap.surface import codemap, codemap_tree
from codemap.extractor import (
    map_file,
    map_directory,
    discover_rust_files,
    CodemapStats,
)
from codemap.report import render_report

__all__ = [
    # Errors
    "CodemapError",
    "MissingStructuralField",
    "ParseFailure",
    "UnsupportedConstruct",
    # Data models
    "Declaration",
    "DeclarationKind",
    "FileSurface",
    "ImplIndex",
    "CodemapStats",
    # Low-level parsing
    "create_parser",
    "parse_bytes",
    "parse_file",
    "parse_source",
    "count_error_nodes",
    # Core transformation
    "build_impl_index",
    "codemap",
    "codemap_tree",
    # High-level orchestration
    "map_file",
    "map_directory",
    "discover_rust_files",
    "render_report",
]
