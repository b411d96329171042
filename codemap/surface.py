"""
Surface assembly: the public entry point of the extraction core.

Runs the impl-block pre-pass, then walks top-level items once in source
order, rendering the visible ones and attaching impl blocks after the
struct they extend.
"""

import logging
from typing import Callable, Dict, List

from tree_sitter import Node, Tree

from codemap.config import ITEM_SEPARATOR
from codemap.errors import UnsupportedConstruct
from codemap.impl_index import build_impl_index
from codemap.models import Declaration, DeclarationKind, ImplIndex
from codemap.parser import parse_source
from codemap.renderers import (
    render_const,
    render_enum,
    render_function,
    render_module,
    render_struct,
    render_trait,
    render_type_alias,
    render_use_declaration,
)
from codemap.visibility import is_visible, node_text

logger = logging.getLogger(__name__)

Renderer = Callable[[Node, bytes], str]

RENDERERS: Dict[DeclarationKind, Renderer] = {
    DeclarationKind.STRUCT: render_struct,
    DeclarationKind.ENUM: render_enum,
    DeclarationKind.CONST: render_const,
    DeclarationKind.FUNCTION: render_function,
    DeclarationKind.MODULE: render_module,
    DeclarationKind.TYPE_ALIAS: render_type_alias,
    DeclarationKind.TRAIT: render_trait,
    DeclarationKind.USE: render_use_declaration,
}


def _attach_impls(rendered: str, node: Node, source_bytes: bytes, impls: ImplIndex) -> str:
    name = node_text(node.child_by_field_name("name"), source_bytes)
    return ITEM_SEPARATOR.join([rendered, *impls.get(name, ())])


def render_declaration(
    declaration: Declaration,
    source_bytes: bytes,
    impls: ImplIndex,
) -> str:
    """Render one visible top-level declaration.

    Raises:
        UnsupportedConstruct: If the declaration has no rendering rule.
    """
    kind = declaration.kind
    node = declaration.node

    # Impl blocks only surface through the index
    if kind is DeclarationKind.IMPL:
        return ""

    renderer = RENDERERS.get(kind)
    if renderer is None:
        raise UnsupportedConstruct(
            declaration.raw_kind,
            node.start_point.row + 1,
            node_text(node, source_bytes),
        )

    rendered = renderer(node, source_bytes)
    if kind is DeclarationKind.STRUCT:
        rendered = _attach_impls(rendered, node, source_bytes, impls)
    return rendered


def codemap_tree(tree: Tree, source_bytes: bytes) -> str:
    """Build the surface of an already-parsed Rust file.

    Args:
        tree: The parsed tree.
        source_bytes: The exact bytes the tree was parsed from.

    Returns:
        Visible declarations separated by blank lines, or ``""``.
    """
    root = tree.root_node
    impls = build_impl_index(root, source_bytes)

    surface: List[str] = []
    for child in root.named_children:
        declaration = Declaration.from_node(child)
        if not is_visible(declaration, source_bytes):
            continue
        rendered = render_declaration(declaration, source_bytes, impls)
        if rendered:
            surface.append(rendered)

    logger.debug("Rendered %d visible top-level item(s)", len(surface))
    return ITEM_SEPARATOR.join(surface)


def codemap(source_code: str, allow_parse_errors: bool = False) -> str:
    """Render the externally visible surface of one Rust source file.

    Args:
        source_code: UTF-8 text of the file.
        allow_parse_errors: Render trees containing syntax errors instead of
            raising ``ParseFailure``.

    Returns:
        The body-free surface, or ``""`` when nothing is visible. Leading and
        trailing whitespace is left to the caller.

    Raises:
        ParseFailure: If the source does not parse.
        UnsupportedConstruct: If a visible top-level item has no rendering rule.
        MissingStructuralField: If an item lacks a field the grammar guarantees.

    Example:
        >>> codemap("pub fn add(a: i32, b: i32) -> i32 { a + b }")
        'pub fn add(a: i32, b: i32) -> i32;'
    """
    tree, source_bytes = parse_source(source_code, allow_errors=allow_parse_errors)
    return codemap_tree(tree, source_bytes)
