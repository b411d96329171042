"""
Tree-sitter parser initialization and file parsing utilities.

This module provides functions to initialize the Rust parser and parse
source text, bytes and files.
"""

import logging
from typing import Tuple
import tree_sitter_rust as tsrust
from tree_sitter import Language, Parser, Tree

from codemap.errors import ParseFailure

# Configure logging
logger = logging.getLogger(__name__)

# Module-level language constant
RUST_LANGUAGE = Language(tsrust.language())


def create_parser() -> Parser:
    """Create and configure a tree-sitter parser for Rust.

    Returns:
        A Parser instance configured with the Rust language.

    Example:
        >>> parser = create_parser()
        >>> tree = parser.parse(b"pub fn main() {}")
    """
    parser = Parser(RUST_LANGUAGE)
    logger.debug("Created tree-sitter Rust parser")
    return parser


def count_error_nodes(tree: Tree) -> int:
    """Count ERROR and MISSING nodes in a parsed tree.

    Args:
        tree: The parsed tree.

    Returns:
        Number of error or missing nodes, 0 for a clean parse.
    """
    if not tree.root_node.has_error:
        return 0

    count = 0
    stack = [tree.root_node]
    while stack:
        node = stack.pop()
        if node.is_error or node.is_missing:
            count += 1
        # Only subtrees flagged with errors need visiting
        stack.extend(child for child in node.children if child.has_error or child.is_missing)
    return count


def parse_bytes(source: bytes) -> Tree:
    """Parse raw bytes of Rust source code.

    Args:
        source: UTF-8 encoded bytes of Rust source code.

    Returns:
        A Tree object representing the parsed AST.

    Raises:
        TypeError: If source is not bytes.

    Example:
        >>> tree = parse_bytes(b"pub struct Foo;")
        >>> tree.root_node.type
        'source_file'
    """
    if not isinstance(source, bytes):
        raise TypeError(f"Source must be bytes, got {type(source).__name__}")

    parser = create_parser()
    tree = parser.parse(source)

    if tree.root_node.has_error:
        logger.warning("Parsed tree contains syntax errors")

    logger.debug(f"Parsed {len(source)} bytes of Rust code")
    return tree


def parse_source(source: str, allow_errors: bool = False) -> Tuple[Tree, bytes]:
    """Parse Rust source text.

    Args:
        source: Source text of one Rust file.
        allow_errors: Return trees containing syntax errors instead of raising.

    Returns:
        A tuple of (Tree, source_bytes).

    Raises:
        ParseFailure: If the source does not parse and allow_errors is False.
    """
    source_bytes = source.encode("utf-8")
    tree = parse_bytes(source_bytes)

    if tree.root_node.has_error and not allow_errors:
        raise ParseFailure(count_error_nodes(tree))
    return tree, source_bytes


def parse_file(file_path: str) -> Tuple[Tree, bytes]:
    """Parse a Rust source file from disk.

    Args:
        file_path: Path to the .rs file.

    Returns:
        A tuple of (Tree, source_bytes) where:
        - Tree is the parsed AST
        - source_bytes is the raw file content as bytes

    Raises:
        FileNotFoundError: If the file does not exist.
        IOError: If the file cannot be read.
    """
    try:
        with open(file_path, "rb") as f:
            source_bytes = f.read()
    except FileNotFoundError:
        logger.error(f"File not found: {file_path}")
        raise
    except IOError as e:
        logger.error(f"Error reading file {file_path}: {e}")
        raise

    tree = parse_bytes(source_bytes)

    if tree.root_node.has_error:
        logger.warning(f"File {file_path} contains syntax errors")

    logger.debug(f"Successfully parsed file: {file_path}")
    return tree, source_bytes
