"""Exceptions raised while building a file's surface."""

from __future__ import annotations


class CodemapError(RuntimeError):
    """Base class for fatal per-file surface extraction failures."""


class ParseFailure(CodemapError):
    """Raised when the source does not conform to the Rust grammar."""

    def __init__(self, error_count: int, message: str | None = None) -> None:
        self.error_count = error_count
        super().__init__(
            message or f"Source contains {error_count} syntax error node(s)"
        )


class UnsupportedConstruct(CodemapError):
    """Raised for a visible top-level item that has no rendering rule."""

    def __init__(self, node_type: str, line: int, text: str) -> None:
        self.node_type = node_type
        self.line = line
        self.text = text
        super().__init__(f"Unsupported item kind '{node_type}' at line {line}: {text}")


class MissingStructuralField(CodemapError):
    """Raised when a declaration lacks a field the grammar guarantees."""

    def __init__(self, node_type: str, field_name: str, line: int) -> None:
        self.node_type = node_type
        self.field_name = field_name
        self.line = line
        super().__init__(
            f"{node_type} at line {line} has no '{field_name}' field"
        )
