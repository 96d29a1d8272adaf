"""Run report helpers for inspection runs."""

from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from typing import Any, Optional


def write_run_report(
    stats: dict[str, Any],
    run_id: str,
    source: str,
    output_dir: str = "output/run_reports",
    error: Optional[str] = None,
) -> str:
    """Write a JSON report of one inspection run and return its path.

    Args:
        stats: Counters collected during the run.
        run_id: Run correlation ID, also used as the file name.
        source: File or directory that was inspected.
        output_dir: Directory receiving the report.
        error: Message of the error that stopped the run, if any.
    """
    os.makedirs(output_dir, exist_ok=True)
    payload: dict[str, Any] = {
        "run_id": run_id,
        "source": os.path.abspath(source),
        "timestamp_utc": datetime.now(timezone.utc).isoformat(),
        "status": "failed" if error else "ok",
        "stats": dict(stats),
    }
    if error:
        payload["error"] = error
    path = os.path.join(output_dir, f"{run_id}.json")
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, sort_keys=True)
    return path
