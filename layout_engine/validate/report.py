from __future__ import annotations

import json
from pathlib import Path
from typing import Dict


def write_validation_report(report: Dict[str, object], outputs_dir: Path, name: str = "validation.json") -> Path:
    outputs_dir.mkdir(parents=True, exist_ok=True)
    path = outputs_dir / name
    with path.open("w", encoding="utf-8") as f:
        json.dump(report, f, indent=2)
    return path


def format_validation_report(report: Dict[str, object]) -> str:
    lines: list[str] = []
    lines.append(f"collision_count: {report.get('collision_count')}")
    violations = report.get("violations_by_rule", {})
    lines.append("violations_by_rule:")
    if isinstance(violations, dict):
        for k, v in violations.items():
            lines.append(f"  - {k}: {len(v)}")
    lines.append(f"table_bound: {report.get('table_bound')} (top slot {report.get('top_slot')})")
    lines.append(f"unused_slots: {report.get('unused_slots')}")
    return "\n".join(lines)
