from pathlib import Path

from layout_engine.data.parser import parse_program
from layout_engine.models.layout import LayoutResult, SlotEntry
from layout_engine.validate.checks import is_valid, validate_layout
from layout_engine.validate.report import format_validation_report, write_validation_report


def _layout(class_offsets, method_offsets, bound) -> LayoutResult:
    program = parse_program("A { f; g } B { g; h }")
    slots = sorted(
        (SlotEntry(class_offsets[e.class_name] + method_offsets[e.method], e.class_name, e.method) for e in program.entries),
        key=lambda s: s.slot,
    )
    return LayoutResult(class_offsets, method_offsets, slots, bound, 1.0, 1.0, True)


def test_valid_layout_has_no_violations() -> None:
    program = parse_program("A { f; g } B { g; h }")
    report = validate_layout(program, _layout({"A": 0, "B": 1}, {"f": 2, "g": 0, "h": 2}, 3))
    assert is_valid(report)
    assert report["collision_count"] == 0
    assert report["unused_slots"] == 0


def test_collisions_and_bounds_are_reported() -> None:
    program = parse_program("A { f; g } B { g; h }")
    report = validate_layout(program, _layout({"A": 0, "B": 0}, {"f": 1, "g": 0, "h": 5}, 3))
    rules = report["violations_by_rule"]
    assert report["collision_count"] == 1
    assert "slot_collision" in rules
    assert "class_offset_collision" in rules
    assert rules["out_of_bounds"] == ["B::h@5 bound=3"]
    assert not is_valid(report)


def test_shared_class_offsets_allowed_when_relaxed() -> None:
    program = parse_program("A { f; g } B { g; h }")
    layout = _layout({"A": 0, "B": 0}, {"f": 0, "g": 1, "h": 2}, 3)
    # g collides: A::g and B::g both at 1
    report = validate_layout(program, layout, distinct_class_offsets=False)
    assert "class_offset_collision" not in report["violations_by_rule"]
    assert "slot_collision" in report["violations_by_rule"]


def test_missing_entry_and_mismatch() -> None:
    program = parse_program("A { f; g } B { g; h }")
    layout = _layout({"A": 0, "B": 1}, {"f": 2, "g": 0, "h": 2}, 3)
    layout.slots = layout.slots[:-1] + [SlotEntry(9, "B", "h")]
    rules = validate_layout(program, layout)["violations_by_rule"]
    assert rules["slot_mismatch"] == ["B::h@9"]

    layout.slots = layout.slots[:-1]
    rules = validate_layout(program, layout)["violations_by_rule"]
    assert rules["missing_entry"] == ["B::h"]


def test_report_sections(tmp_path: Path) -> None:
    program = parse_program("A { f; g } B { g; h }")
    report = validate_layout(program, _layout({"A": 0, "B": 0}, {"f": 1, "g": 0, "h": 5}, 3))
    text = format_validation_report(report)
    assert "collision_count: 1" in text
    assert "violations_by_rule:" in text
    path = write_validation_report(report, tmp_path)
    assert path.exists()
