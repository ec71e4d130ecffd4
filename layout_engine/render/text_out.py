from __future__ import annotations

from pathlib import Path
from typing import List

from ..models.layout import LayoutResult
from ..models.program import Program

RULE_WIDTH = 40


def _rule(title: str) -> str:
    head = "-" * 12 + title
    return head + "-" * max(0, RULE_WIDTH - len(head))


def program_listing(program: Program) -> str:
    lines: List[str] = [_rule("Program")]
    for cd in program.classes:
        lines.append(f"{cd.name}{{{'; '.join(cd.methods)}}}")
    return "\n".join(lines)


def layout_report(layout: LayoutResult) -> str:
    lines: List[str] = [_rule("Search")]
    proof = "optimal" if layout.optimal else "not proven optimal"
    lines.append(
        f"Time Taken: {layout.elapsed_ms:.0f}ms (budget {layout.timeout_ms}ms, {layout.backend}, {proof})"
    )
    lines.append(_rule("Class Offsets"))
    for cls, off in layout.class_offsets.items():
        lines.append(f"{cls} = {off}")
    for cls in layout.empty_classes:
        lines.append(f"{cls} = - (no entries)")
    lines.append(_rule("Method Offsets"))
    for mth, off in layout.method_offsets.items():
        lines.append(f"{mth} = {off}")
    lines.append(_rule("Big table "))
    for s in layout.slots:
        lines.append(f"{s.slot}: {s.label}")
    lines.append(f"Table bound = {layout.table_bound}")
    lines.append(f"Occupancy = {layout.occupancy:g}")
    lines.append(f"Density = {layout.density:.3f}")
    return "\n".join(lines)


def write_text_report(text: str, outputs_dir: Path, name: str = "layout.txt") -> Path:
    outputs_dir.mkdir(parents=True, exist_ok=True)
    path = outputs_dir / name
    with path.open("w", encoding="utf-8") as f:
        f.write(text)
    return path
