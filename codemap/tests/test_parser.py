"""
Unit tests for parser.py

Tests tree-sitter parser initialization, byte parsing, and file parsing.
"""

import os
import tempfile
import unittest

from codemap.errors import ParseFailure
from codemap.parser import (
    count_error_nodes,
    create_parser,
    parse_bytes,
    parse_file,
    parse_source,
)


class TestParserInitialization(unittest.TestCase):
    """Test parser creation and initialization."""

    def test_create_parser(self):
        """Test that create_parser returns a parser with a language set."""
        parser = create_parser()
        self.assertIsNotNone(parser)
        self.assertIsNotNone(parser.language)


class TestParseBytes(unittest.TestCase):
    """Test parsing raw bytes of Rust code."""

    def test_parse_simple_function(self):
        tree = parse_bytes(b"pub fn main() { let x = 1; }")
        self.assertEqual(tree.root_node.type, "source_file")
        self.assertFalse(tree.root_node.has_error)

    def test_parse_empty(self):
        tree = parse_bytes(b"")
        self.assertEqual(tree.root_node.type, "source_file")
        self.assertEqual(len(tree.root_node.children), 0)

    def test_parse_rejects_str(self):
        with self.assertRaises(TypeError):
            parse_bytes("pub fn main() {}")


class TestParseSource(unittest.TestCase):
    """Test text parsing with the error check."""

    def test_clean_source(self):
        tree, source_bytes = parse_source("pub struct Foo;")
        self.assertEqual(source_bytes, b"pub struct Foo;")
        self.assertEqual(count_error_nodes(tree), 0)

    def test_broken_source_raises(self):
        with self.assertRaises(ParseFailure) as ctx:
            parse_source("pub fn broken( {")
        self.assertGreater(ctx.exception.error_count, 0)

    def test_broken_source_allowed(self):
        tree, _ = parse_source("pub fn broken( {", allow_errors=True)
        self.assertTrue(tree.root_node.has_error)
        self.assertGreater(count_error_nodes(tree), 0)

    def test_non_ascii_source(self):
        tree, source_bytes = parse_source('pub const GREETING: &str = "héllo";')
        self.assertFalse(tree.root_node.has_error)
        self.assertEqual(len(source_bytes), len('pub const GREETING: &str = "héllo";') + 1)


class TestParseFile(unittest.TestCase):
    """Test parsing from disk."""

    def test_parse_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "lib.rs")
            with open(path, "wb") as f:
                f.write(b"pub mod a;\n")
            tree, source_bytes = parse_file(path)
        self.assertEqual(source_bytes, b"pub mod a;\n")
        self.assertEqual(tree.root_node.named_children[0].type, "mod_item")

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            parse_file("/definitely/missing/lib.rs")


if __name__ == "__main__":
    unittest.main()
