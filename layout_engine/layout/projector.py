from __future__ import annotations

from typing import Dict, List

from ..models.layout import LayoutResult, SlotEntry
from ..models.variables import class_var, method_var
from ..solvers.base import SolveOutcome, SolverBackend, SolveStatus
from .builder import LayoutProblem


def occupancy(entry_count: int, top_slot: int) -> float:
    # Entries per top slot index. A single entry (top slot 0) would divide by zero.
    if entry_count == 0:
        return 0.0
    if top_slot <= 0:
        return 1.0
    return entry_count / top_slot


def density(entry_count: int, top_slot: int) -> float:
    if entry_count == 0:
        return 0.0
    return entry_count / (top_slot + 1)


def project(problem: LayoutProblem, backend: SolverBackend, outcome: SolveOutcome) -> LayoutResult:
    program = problem.program
    class_offsets: Dict[str, int] = {
        c: backend.evaluate(outcome, class_var(c)) for c in program.class_names
    }
    method_offsets: Dict[str, int] = {
        m: backend.evaluate(outcome, method_var(m)) for m in program.method_names
    }
    # Shifting every class down and every method up by the same amount moves no slot;
    # anchor the smallest class offset at 0
    shift = min(class_offsets.values(), default=0)
    if shift:
        class_offsets = {c: off - shift for c, off in class_offsets.items()}
        method_offsets = {m: off + shift for m, off in method_offsets.items()}
    slots: List[SlotEntry] = [
        SlotEntry(class_offsets[e.class_name] + method_offsets[e.method], e.class_name, e.method)
        for e in program.entries
    ]
    slots.sort(key=lambda s: (s.slot, s.class_name, s.method))
    top = slots[-1].slot if slots else 0
    bound = outcome.objective if outcome.objective is not None else top
    return LayoutResult(
        class_offsets=class_offsets,
        method_offsets=method_offsets,
        slots=slots,
        table_bound=bound,
        occupancy=occupancy(len(slots), top),
        density=density(len(slots), top),
        optimal=outcome.status is SolveStatus.OPTIMAL,
        backend=backend.name,
        elapsed_ms=outcome.elapsed_ms,
        upper_bound=problem.upper_bound,
        empty_classes=list(program.empty_classes),
    )
