"""Visibility predicates over tree-sitter Rust nodes."""

from tree_sitter import Node

from codemap.config import PUBLIC_MARKER, ROOT_NODE, VISIBILITY_NODE
from codemap.models import Declaration, DeclarationKind


def node_text(node: Node, source_bytes: bytes) -> str:
    """Return the source text covered by ``node``."""
    return source_bytes[node.start_byte:node.end_byte].decode("utf-8")


def has_visibility_modifier(node: Node) -> bool:
    return any(child.type == VISIBILITY_NODE for child in node.children)


def is_public(node: Node, source_bytes: bytes) -> bool:
    """Check for a direct, unrestricted ``pub`` marker.

    Scoped markers such as ``pub(crate)`` or ``pub(super)`` do not count.
    """
    return any(
        child.type == VISIBILITY_NODE
        and node_text(child, source_bytes) == PUBLIC_MARKER
        for child in node.children
    )


def is_implicitly_public_trait(node: Node) -> bool:
    """A trait with no visibility marker declared at file top level."""
    if has_visibility_modifier(node):
        return False
    return node.parent is not None and node.parent.type == ROOT_NODE


def is_visible(declaration: Declaration, source_bytes: bytes) -> bool:
    """Decide whether a top-level declaration belongs to the surface."""
    node = declaration.node
    if declaration.kind is DeclarationKind.TRAIT:
        return is_public(node, source_bytes) or is_implicitly_public_trait(node)
    # Enums and every other kind need the explicit marker
    return is_public(node, source_bytes)
