from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

from ..models.layout import LayoutResult


def layout_json(layout: LayoutResult, validation: Dict[str, object] | None = None) -> Dict[str, Any]:
    """Offsets and slot table in the shape a dispatch-table generator consumes."""
    out = layout.as_dict()
    if validation is not None:
        out["validation"] = validation
    return out


def sweep_json(runs: List[Dict[str, Any]]) -> Dict[str, Any]:
    best = [r for r in runs if r.get("layout")]
    best.sort(key=lambda r: r["layout"]["table_bound"])
    return {
        "runs": runs,
        "best_timeout_ms": best[0]["timeout_ms"] if best else None,
    }


def write_json(data: Dict[str, Any], outputs_dir: Path, name: str = "layout.json") -> Path:
    outputs_dir.mkdir(parents=True, exist_ok=True)
    path = outputs_dir / name
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
    return path
