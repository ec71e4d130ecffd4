from __future__ import annotations

from layout_engine.data.parser import parse_program
from layout_engine.layout.builder import build_problem
from layout_engine.layout.projector import density, occupancy, project
from layout_engine.models.variables import TABLE_BOUND, class_var, method_var
from layout_engine.solvers.base import SolveOutcome, SolveStatus
from layout_engine.solvers.search import SearchBackend


def test_occupancy_degenerate_cases() -> None:
    assert occupancy(0, 0) == 0.0
    assert occupancy(1, 0) == 1.0
    assert occupancy(4, 3) == 4 / 3
    assert occupancy(2, 4) == 0.5


def test_density() -> None:
    assert density(0, 0) == 0.0
    assert density(1, 0) == 1.0
    assert density(4, 3) == 1.0
    assert density(3, 5) == 0.5


def test_project_normalises_and_sorts() -> None:
    problem = build_problem(parse_program("A { f; g } B { g; h }"))
    model = {
        TABLE_BOUND: 3,
        class_var("A"): 5,
        class_var("B"): 6,
        method_var("f"): -3,
        method_var("g"): -5,
        method_var("h"): -4,
    }
    outcome = SolveOutcome(SolveStatus.FEASIBLE, model, 3, 12.5)
    res = project(problem, SearchBackend(), outcome)
    assert res.class_offsets == {"A": 0, "B": 1}
    assert res.method_offsets == {"f": 2, "g": 0, "h": 1}
    assert [(s.slot, s.label) for s in res.slots] == [
        (0, "A::g"),
        (1, "B::g"),
        (2, "A::f"),
        (2, "B::h"),
    ]
    assert res.table_bound == 3
    assert not res.optimal
    assert res.elapsed_ms == 12.5
    assert res.occupancy == 2.0
