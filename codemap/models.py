"""
Data models for surface extraction.
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

from tree_sitter import Node

from codemap.config import DECLARATION_KIND_MAP

# Implemented type name -> rendered impl blocks, in source order
ImplIndex = Mapping[str, Tuple[str, ...]]


class DeclarationKind(Enum):
    """Closed catalogue of top-level Rust items with a rendering rule."""

    STRUCT = "struct"
    ENUM = "enum"
    CONST = "const"
    IMPL = "impl"
    FUNCTION = "function"
    MODULE = "module"
    TYPE_ALIAS = "type_alias"
    TRAIT = "trait"
    USE = "use"
    OTHER = "other"

    @classmethod
    def from_node_type(cls, node_type: str) -> "DeclarationKind":
        member = DECLARATION_KIND_MAP.get(node_type)
        if member is None:
            return cls.OTHER
        return cls[member]


@dataclass(frozen=True)
class Declaration:
    """A classified top-level node.

    Attributes:
        node: The tree-sitter node, borrowed from the parsed tree.
        kind: Declaration kind the node maps to.
        raw_kind: The tree-sitter node type, kept for ``OTHER`` diagnostics.
    """

    node: Node
    kind: DeclarationKind
    raw_kind: str

    @classmethod
    def from_node(cls, node: Node) -> "Declaration":
        return cls(
            node=node,
            kind=DeclarationKind.from_node_type(node.type),
            raw_kind=node.type,
        )


@dataclass
class FileSurface:
    """Surface extraction result for one file.

    Attributes:
        file_path: Path relative to the walk root, used in the report.
        surface: Trimmed rendered surface, empty if nothing is visible.
        parse_error_count: Number of error/missing nodes in the parsed tree.
        error: Message of the fatal condition that aborted the file, or None.
    """

    file_path: str
    surface: str = ""
    parse_error_count: int = 0
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert the result to a dictionary suitable for JSON serialization."""
        return asdict(self)
