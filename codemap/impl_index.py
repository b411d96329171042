"""
Implementation-block index built before any top-level rendering.

Impl blocks may appear before or after the struct they extend, so they are
rendered in a first pass and grouped by the name of the implemented type.
The assembler then reads the finished index while rendering structs.
"""

import logging
from types import MappingProxyType
from typing import Dict, List

from tree_sitter import Node

from codemap.config import IMPL_NODE
from codemap.models import ImplIndex
from codemap.renderers import impl_type_name, render_impl

logger = logging.getLogger(__name__)


def build_impl_index(root: Node, source_bytes: bytes) -> ImplIndex:
    """Render every top-level impl block and group the results by type name.

    Impl blocks carry no visibility of their own, so every block is
    considered; blocks with no public method are left out.

    Args:
        root: The ``source_file`` node.
        source_bytes: The raw source file bytes.

    Returns:
        Read-only mapping of type name to rendered blocks in source order.
    """
    grouped: Dict[str, List[str]] = {}

    for child in root.children:
        if child.type != IMPL_NODE:
            continue

        rendered = render_impl(child, source_bytes)
        if not rendered:
            continue

        type_name = impl_type_name(child, source_bytes)
        if type_name is None:
            continue
        grouped.setdefault(type_name, []).append(rendered)

    logger.debug(
        "Indexed %d impl block(s) across %d type(s)",
        sum(len(blocks) for blocks in grouped.values()),
        len(grouped),
    )
    return MappingProxyType({name: tuple(blocks) for name, blocks in grouped.items()})
