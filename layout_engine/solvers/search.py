from __future__ import annotations

import logging
import time
from typing import Dict, List, Set, Tuple

from ..models.variables import VarKey
from .base import AllDifferent, Constraint, InRange, SolveOutcome, SolverBackend, SolverConfig, SolveStatus, Term


class _OutOfTime(Exception):
    pass


class SearchBackend(SolverBackend):
    """Exhaustive branch-and-bound in pure Python.

    The objective is fixed first and raised one step at a time from the bottom
    of its domain, so the first feasible value is the optimum. Every other
    variable is assigned in declaration order; a constraint is checked as soon
    as its last variable is assigned, and range constraints narrow that last
    variable's candidate interval directly. Only practical for small programs.
    """

    name = "search"

    def __init__(self, config: SolverConfig | None = None) -> None:
        super().__init__(config)
        self.domains: Dict[VarKey, Tuple[int, int]] = {}
        self.constraints: List[Constraint] = []
        self._objective: VarKey | None = None
        self.nodes = 0

    def declare(self, var: VarKey, lo: int, hi: int) -> None:
        self.domains[var] = (lo, hi)

    def add(self, constraint: Constraint) -> None:
        if not isinstance(constraint, (InRange, AllDifferent)):
            raise TypeError(f"unsupported constraint {constraint!r}")
        self.constraints.append(constraint)

    def minimize(self, var: VarKey) -> None:
        self._objective = var

    def solve(self, timeout_ms: int) -> SolveOutcome:
        logger = logging.getLogger(__name__)
        deadline = time.monotonic() + timeout_ms / 1000.0
        t0 = time.perf_counter()

        order = list(self.domains)
        if self._objective is not None:
            order.remove(self._objective)
            order.insert(0, self._objective)
        pos = {v: i for i, v in enumerate(order)}

        ranges_at: List[List[InRange]] = [[] for _ in order]
        diffs_at: List[List[Tuple[int, Term]]] = [[] for _ in order]
        groups = 0
        for c in self.constraints:
            if isinstance(c, InRange):
                vs = list(c.term) + ([c.upper] if isinstance(c.upper, VarKey) else [])
                ranges_at[max(pos[v] for v in vs)].append(c)
            else:
                for t in c.terms:
                    diffs_at[max(pos[v] for v in t)].append((groups, t))
                groups += 1
        used: List[Set[int]] = [set() for _ in range(groups)]
        assignment: Dict[VarKey, int] = {}

        def interval(i: int) -> Tuple[int, int]:
            v = order[i]
            lo, hi = self.domains[v]
            for c in ranges_at[i]:
                rest = sum(assignment[x] for x in c.term if x != v)
                if v in c.term:
                    upper = assignment[c.upper] if isinstance(c.upper, VarKey) and c.upper != v else c.upper
                    lo = max(lo, c.lower - rest)
                    if not isinstance(upper, VarKey):
                        hi = min(hi, upper - rest)
                else:
                    # v is the upper bound of an already complete term
                    if rest < c.lower:
                        return 1, 0
                    lo = max(lo, rest)
            return lo, hi

        def place(i: int) -> bool:
            if i == len(order):
                return True
            self.nodes += 1
            if self.nodes % 4096 == 0 and time.monotonic() > deadline:
                raise _OutOfTime()
            v = order[i]
            lo, hi = interval(i)
            for val in range(lo, hi + 1):
                assignment[v] = val
                taken: List[Tuple[int, int]] = []
                ok = True
                for g, t in diffs_at[i]:
                    s = sum(assignment[x] for x in t)
                    if s in used[g]:
                        ok = False
                        break
                    used[g].add(s)
                    taken.append((g, s))
                if ok and place(i + 1):
                    return True
                for g, s in taken:
                    used[g].discard(s)
            assignment.pop(v, None)
            return False

        status = SolveStatus.INFEASIBLE
        try:
            if self._objective is None:
                if place(0):
                    status = SolveStatus.OPTIMAL
            else:
                obj_lo, obj_hi = self.domains[self._objective]
                try:
                    for bound in range(obj_lo, obj_hi + 1):
                        self.domains[self._objective] = (bound, bound)
                        if place(0):
                            status = SolveStatus.OPTIMAL
                            break
                finally:
                    self.domains[self._objective] = (obj_lo, obj_hi)
        except _OutOfTime:
            status = SolveStatus.UNKNOWN
        elapsed = (time.perf_counter() - t0) * 1000.0
        logger.debug(f"search status={status.value} nodes={self.nodes} wall={elapsed:.1f}ms")

        if not status.has_model:
            return SolveOutcome(status, elapsed_ms=elapsed)
        model = dict(assignment)
        objective = model[self._objective] if self._objective is not None else None
        return SolveOutcome(status, model, objective, elapsed)
