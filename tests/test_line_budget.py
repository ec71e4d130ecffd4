from __future__ import annotations

from pathlib import Path
from typing import List

import pytest

ROOT = Path(__file__).resolve().parents[1]
PACKAGES = ("layout_engine", "scripts", "tests")
MAX_LINES = 500


def _modules() -> List[Path]:
    found = [p for pkg in PACKAGES for p in (ROOT / pkg).rglob("*.py") if p.name != "__init__.py"]
    return sorted(found)


def test_modules_are_collected() -> None:
    names = {p.name for p in _modules()}
    assert {"builder.py", "cpsat.py", "parser.py"} <= names


@pytest.mark.parametrize("path", _modules(), ids=lambda p: p.relative_to(ROOT).as_posix())
def test_module_stays_small(path: Path) -> None:
    lines = len(path.read_text(encoding="utf-8").splitlines())
    assert lines <= MAX_LINES, f"{path.relative_to(ROOT)} has {lines} lines"
