"""
Body-free renderers for top-level Rust items.

Each renderer takes a tree-sitter node plus the raw source bytes and returns
the canonical surface text for that item, or an empty string when the item
contributes nothing. Renderers never mutate the tree and never look at other
items; cross-item merging happens in ``codemap.surface``.
"""

import logging
import re
from typing import List, Optional

from tree_sitter import Node

from codemap.config import (
    ASYNC_KEYWORD,
    FIELD_NODE,
    FUNCTION_NODE,
    GENERIC_TYPE_NODE,
    INDENT,
    PARAMETER_NODE,
    POSITIONAL_FIELD_LIST,
    PUBLIC_MARKER,
    RECEIVER_NODE,
    SCOPED_TYPE_NODE,
    SIGNATURE_NODE,
    VARIANT_NODE,
)
from codemap.errors import MissingStructuralField
from codemap.visibility import is_public, node_text

logger = logging.getLogger(__name__)
_ASYNC_RE = re.compile(rf"\b{ASYNC_KEYWORD}\b")


def required_field(node: Node, field_name: str) -> Node:
    """Fetch a field the grammar guarantees for this item.

    Raises:
        MissingStructuralField: If the field is absent.
    """
    child = node.child_by_field_name(field_name)
    if child is None:
        raise MissingStructuralField(node.type, field_name, node.start_point.row + 1)
    return child


def extract_generics(node: Node, source_bytes: bytes) -> str:
    """Return the verbatim ``<...>`` generic parameter list, or ``""``."""
    type_params = node.child_by_field_name("type_parameters")
    if type_params is None:
        return ""
    return node_text(type_params, source_bytes)


def is_async_function(node: Node, source_bytes: bytes) -> bool:
    """Check the signature text ahead of the function name for ``async``.

    Only the qualifier region is scanned so that ``async fn`` appearing in a
    body or string literal does not leak into the signature.
    """
    name_node = node.child_by_field_name("name")
    end = name_node.start_byte if name_node is not None else node.end_byte
    prefix = source_bytes[node.start_byte:end].decode("utf-8")
    return _ASYNC_RE.search(prefix) is not None


def render_parameters(
    parameters: Node,
    source_bytes: bytes,
    include_receiver: bool = False,
) -> str:
    """Render ``(receiver, a: A, b: B)`` from a ``parameters`` node.

    Args:
        parameters: The function's ``parameters`` node.
        source_bytes: The raw source file bytes.
        include_receiver: Keep the ``self`` parameter, verbatim, as the first
            entry. Used for methods inside impl blocks.
    """
    params: List[str] = []
    if include_receiver:
        for child in parameters.children:
            if child.type == RECEIVER_NODE:
                params.append(node_text(child, source_bytes))
                break

    for child in parameters.children:
        if child.type == PARAMETER_NODE:
            params.append(node_text(child, source_bytes))

    return f"({', '.join(params)})"


def render_signature(
    node: Node,
    source_bytes: bytes,
    include_receiver: bool = False,
) -> str:
    """Render ``pub [async ]fn name<G>(params)[ -> Ret];`` for a function item."""
    name = node_text(required_field(node, "name"), source_bytes)
    parameters = required_field(node, "parameters")
    generics = extract_generics(node, source_bytes)

    return_type = ""
    return_node = node.child_by_field_name("return_type")
    if return_node is not None:
        return_type = f" -> {node_text(return_node, source_bytes)}"

    qualifier = f"{ASYNC_KEYWORD} " if is_async_function(node, source_bytes) else ""
    params = render_parameters(parameters, source_bytes, include_receiver)
    return f"{PUBLIC_MARKER} {qualifier}fn {name}{generics}{params}{return_type};"


def _uses_terminator(node: Node) -> bool:
    return any(child.type == ";" for child in node.children)


def render_struct(node: Node, source_bytes: bytes) -> str:
    """Render a public struct keeping only its public named fields.

    Unit structs keep their ``;`` terminator (or ``{}`` body), tuple structs
    are emitted verbatim, and named-field structs are rebuilt one field per
    line.
    """
    name = node_text(required_field(node, "name"), source_bytes)
    generics = extract_generics(node, source_bytes)
    header = f"{PUBLIC_MARKER} struct {name}{generics}"
    body = node.child_by_field_name("body")

    if body is None:
        if _uses_terminator(node):
            return f"{header};"
        return f"{header} {{}}"

    # Positional fields are not filtered by visibility
    if body.type == POSITIONAL_FIELD_LIST:
        return node_text(node, source_bytes)

    fields = [
        child
        for child in body.children
        if child.type == FIELD_NODE and is_public(child, source_bytes)
    ]
    if not fields:
        return f"{header} {{}}"

    lines = []
    for index, field in enumerate(fields):
        field_text = node_text(field, source_bytes).strip()
        if index < len(fields) - 1 or field_text.endswith(","):
            field_text = f"{field_text},"
        lines.append(f"{INDENT}{field_text}")

    return f"{header} {{\n" + "\n".join(lines) + "\n}"


def render_enum(node: Node, source_bytes: bytes) -> str:
    """Render a public enum with every variant verbatim.

    Variants carry no visibility of their own, so none are dropped.
    """
    name = node_text(required_field(node, "name"), source_bytes)
    generics = extract_generics(node, source_bytes)
    header = f"{PUBLIC_MARKER} enum {name}{generics}"
    body = node.child_by_field_name("body")

    variants = []
    if body is not None:
        variants = [
            f"{INDENT}{node_text(child, source_bytes).strip()},"
            for child in body.children
            if child.type == VARIANT_NODE
        ]

    if not variants:
        return f"{header} {{}}"
    return f"{header} {{\n" + "\n".join(variants) + "\n}"


def render_verbatim(node: Node, source_bytes: bytes) -> str:
    """Pass the whole declaration through unchanged."""
    return node_text(node, source_bytes)


render_const = render_verbatim
render_type_alias = render_verbatim
render_use_declaration = render_verbatim


def render_function(node: Node, source_bytes: bytes) -> str:
    """Render a free function signature; the body is always stripped."""
    return render_signature(node, source_bytes, include_receiver=False)


def render_module(node: Node, source_bytes: bytes) -> str:
    """Render ``pub mod name;``, discarding any inline module body."""
    name = node_text(required_field(node, "name"), source_bytes)
    return f"{PUBLIC_MARKER} mod {name};"


def render_trait(node: Node, source_bytes: bytes) -> str:
    """Render a trait with its required (bodiless) methods only.

    Methods with a default body are dropped.
    """
    name = node_text(required_field(node, "name"), source_bytes)
    body = required_field(node, "body")
    generics = extract_generics(node, source_bytes)
    header = f"{PUBLIC_MARKER} trait {name}{generics}"

    methods = [
        f"{INDENT}{node_text(child, source_bytes).strip()}"
        for child in body.children
        if child.type == SIGNATURE_NODE
    ]

    if not methods:
        return f"{header} {{}}"
    return f"{header} {{\n" + "\n".join(methods) + "\n}"


def impl_type_name(node: Node, source_bytes: bytes) -> Optional[str]:
    """Return the base name of the type an impl block extends.

    ``impl<T> Wrapper<T>`` and ``impl crate::Wrapper`` both key as
    ``Wrapper``. Returns None when the impl has no ``type`` field.
    """
    type_node = node.child_by_field_name("type")
    if type_node is None:
        return None

    while type_node.type in (GENERIC_TYPE_NODE, SCOPED_TYPE_NODE):
        field_name = "type" if type_node.type == GENERIC_TYPE_NODE else "name"
        inner = type_node.child_by_field_name(field_name)
        if inner is None:
            break
        type_node = inner
    return node_text(type_node, source_bytes)


def render_impl(node: Node, source_bytes: bytes) -> str:
    """Render the public methods of an impl block.

    Missing ``type`` or ``body`` fields are tolerated: the block simply
    contributes nothing. A block without public methods also renders as an
    empty string, never as an empty ``impl {}``.
    """
    type_node = node.child_by_field_name("type")
    body = node.child_by_field_name("body")
    if type_node is None or body is None:
        logger.debug(
            "Skipping impl block at line %d without type or body",
            node.start_point.row + 1,
        )
        return ""

    methods = []
    for child in body.children:
        if child.type != FUNCTION_NODE or not is_public(child, source_bytes):
            continue
        if child.child_by_field_name("name") is None or child.child_by_field_name("parameters") is None:
            logger.debug("Skipping malformed method at line %d", child.start_point.row + 1)
            continue
        methods.append(
            INDENT + render_signature(child, source_bytes, include_receiver=True)
        )

    if not methods:
        return ""

    generics = extract_generics(node, source_bytes)
    type_text = node_text(type_node, source_bytes)
    return f"impl{generics} {type_text} {{\n" + "\n".join(methods) + "\n}"
