"""Run artifact helpers for operational reporting."""

from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from typing import Any, Iterable


def build_run_report(
    root: str,
    stats: dict[str, int],
    failures: Iterable[dict[str, Any]],
) -> dict[str, Any]:
    """Assemble the JSON-serializable summary of one codemap run.

    Args:
        root: Walk root the run was started on.
        stats: Counters from ``CodemapStats.to_dict()``.
        failures: ``FileSurface.to_dict()`` payloads of errored files.
    """
    return {
        "root": os.path.abspath(root),
        "stats": dict(stats),
        "failures": [
            {"file_path": item["file_path"], "error": item["error"]}
            for item in failures
        ],
    }


def write_run_report(
    report: dict[str, Any],
    run_id: str,
    output_dir: str = "output/run_reports",
) -> str:
    """Write a run report as ``codemap-<run_id>.json`` and return its path."""
    os.makedirs(output_dir, exist_ok=True)
    payload = dict(report)
    payload.setdefault("run_id", run_id)
    payload.setdefault("timestamp_utc", datetime.now(timezone.utc).isoformat())
    path = os.path.join(output_dir, f"codemap-{run_id}.json")
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, sort_keys=True)
    return path
