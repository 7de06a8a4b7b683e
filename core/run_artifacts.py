"""Run report writer for extraction runs."""

from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from typing import Any, Mapping


def write_run_report(
    stats: Mapping[str, Any],
    run_id: str,
    source_dir: str,
    output_dir: str = "output/run_reports",
    status: str = "success",
) -> str:
    """Write a JSON report for one extraction run and return its path."""
    os.makedirs(output_dir, exist_ok=True)
    payload = {
        "run_id": run_id,
        "status": status,
        "source_dir": os.path.abspath(source_dir),
        "stats": dict(stats),
        "timestamp_utc": datetime.now(timezone.utc).isoformat(),
    }
    path = os.path.join(output_dir, f"{run_id}.json")
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, sort_keys=True)
    return path
