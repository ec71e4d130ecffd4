from __future__ import annotations

from collections import Counter, defaultdict
from typing import Dict, List

from ..models.layout import LayoutResult
from ..models.program import Program


def validate_layout(
    program: Program,
    layout: LayoutResult,
    *,
    distinct_class_offsets: bool = True,
) -> Dict[str, object]:
    report: Dict[str, object] = {}
    violations_by_rule: Dict[str, List[str]] = defaultdict(list)

    # Every declared entry must be in the table exactly once
    expected = Counter((e.class_name, e.method) for e in program.entries)
    placed = Counter((s.class_name, s.method) for s in layout.slots)
    for key, n in expected.items():
        if placed.get(key, 0) != n:
            violations_by_rule["missing_entry"].append(f"{key[0]}::{key[1]}")
    for key in placed:
        if key not in expected:
            violations_by_rule["unknown_entry"].append(f"{key[0]}::{key[1]}")

    # Slots must match the offsets they were derived from
    for s in layout.slots:
        c_off = layout.class_offsets.get(s.class_name)
        m_off = layout.method_offsets.get(s.method)
        if c_off is None or m_off is None or c_off + m_off != s.slot:
            violations_by_rule["slot_mismatch"].append(f"{s.label}@{s.slot}")

    # Collisions
    by_slot: Dict[int, List[str]] = defaultdict(list)
    for s in layout.slots:
        by_slot[s.slot].append(s.label)
    collisions = {slot: labels for slot, labels in by_slot.items() if len(labels) > 1}
    report["collision_count"] = len(collisions)
    for slot, labels in sorted(collisions.items()):
        violations_by_rule["slot_collision"].append(f"{slot}: {', '.join(labels)}")

    if distinct_class_offsets:
        by_offset: Dict[int, List[str]] = defaultdict(list)
        for c, off in layout.class_offsets.items():
            by_offset[off].append(c)
        for off, names in sorted(by_offset.items()):
            if len(names) > 1:
                violations_by_rule["class_offset_collision"].append(f"{off}: {', '.join(names)}")

    for c, off in layout.class_offsets.items():
        if off < 0:
            violations_by_rule["negative_class_offset"].append(f"{c}={off}")
    for s in layout.slots:
        if s.slot < 0 or s.slot > layout.table_bound:
            violations_by_rule["out_of_bounds"].append(f"{s.label}@{s.slot} bound={layout.table_bound}")

    report["violations_by_rule"] = dict(violations_by_rule)
    report["violation_count"] = sum(len(v) for v in violations_by_rule.values())
    report["entries"] = len(layout.slots)
    report["table_bound"] = layout.table_bound
    report["top_slot"] = layout.top_slot
    report["unused_slots"] = max(0, layout.top_slot + 1 - len(by_slot)) if layout.slots else 0
    report["occupancy"] = layout.occupancy
    report["density"] = layout.density
    report["optimal"] = layout.optimal
    return report


def is_valid(report: Dict[str, object]) -> bool:
    return report.get("violation_count", 1) == 0
