"""Report envelope wrapping per-file surfaces."""

from typing import Iterable
from xml.sax.saxutils import escape, quoteattr

from codemap.models import FileSurface

REPORT_OPEN = "<codemap>"
REPORT_CLOSE = "</codemap>"


def render_file_block(result: FileSurface) -> str:
    """Render one file entry; ``""`` for files with nothing visible.

    Errored files become ``<error>`` entries so that no partial surface is
    ever shown for them.
    """
    path = quoteattr(result.file_path)
    if result.failed:
        return f"<error path={path}>{escape(result.error)}</error>"
    if not result.surface:
        return ""
    return f"<file path={path}>\n{result.surface}\n</file>"


def render_report(results: Iterable[FileSurface]) -> str:
    """Wrap all non-empty file entries in the ``<codemap>`` envelope."""
    blocks = [block for block in map(render_file_block, results) if block]
    return "\n".join([REPORT_OPEN, *blocks, REPORT_CLOSE]) + "\n"
