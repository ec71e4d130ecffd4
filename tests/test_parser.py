from __future__ import annotations

from pathlib import Path

import pytest

from layout_engine.data.loader import load_program
from layout_engine.data.parser import parse_blocks, parse_program
from layout_engine.errors import DuplicateClassError, DuplicateMethodError, MalformedInputError

DEMO = Path(__file__).resolve().parents[1] / "examples" / "verona.vt"


def test_demo_program_shape() -> None:
    program = load_program(DEMO)
    assert len(program.class_names) == 15
    assert program.class_def("C1").methods == ("m1", "m2", "m3", "m4", "m5", "trace", "size")
    assert len(program.method_names) == 11
    assert len(program.entries) == 53


def test_whitespace_and_trailing_separators() -> None:
    pairs = parse_blocks("A{f;g}B {  h ; }\n\n  C {x;;y}")
    assert pairs == [("A", ["f", "g"]), ("B", ["h"]), ("C", ["x", "y"])]


def test_comments_and_trailing_blank_text_are_skipped() -> None:
    text = "# header\nA { f }  \nB { g }  # trailing note\n\n"
    assert parse_blocks(text) == [("A", ["f"]), ("B", ["g"])]
    assert parse_blocks("  \n# only a comment\n") == []


@pytest.mark.parametrize("text", ["A { f } } B { g }", "A { f } }"])
def test_stray_closing_brace_is_rejected(text: str) -> None:
    with pytest.raises(MalformedInputError, match="opening"):
        parse_blocks(text)


def test_empty_class_has_no_entries() -> None:
    program = parse_program("A { } B { f }")
    assert program.class_names == ("B",)
    assert program.empty_classes == ("A",)
    assert len(program.entries) == 1


@pytest.mark.parametrize(
    "text",
    [
        "A f; g }",
        "A { f; g",
        "A { f } B { g",
        "A { f { g }",
        "{ f }",
        "A B { f }",
        "A { f g }",
        "} A { f }",
    ],
)
def test_malformed_blocks_fail_fast(text: str) -> None:
    with pytest.raises(MalformedInputError) as exc:
        parse_blocks(text)
    assert exc.value.block.strip()


def test_duplicate_method_rejected() -> None:
    with pytest.raises(DuplicateMethodError):
        parse_program("A { f; g; f }")


def test_duplicate_class_rejected() -> None:
    with pytest.raises(DuplicateClassError):
        parse_program("A { f } A { g }")
