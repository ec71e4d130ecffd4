from __future__ import annotations

import logging
import time
from typing import Any, Dict

from ..models.variables import VarKey
from .base import AllDifferent, Constraint, InRange, SolveOutcome, SolverBackend, SolverConfig, SolveStatus, Term


class CpSatBackend(SolverBackend):
    """Google OR-Tools CP-SAT."""

    name = "cpsat"

    def __init__(self, config: SolverConfig | None = None) -> None:
        super().__init__(config)
        try:
            from ortools.sat.python import cp_model
        except Exception as e:
            raise RuntimeError(
                "OR-Tools (ortools) is not installed. Please install it: python -m pip install ortools"
            ) from e
        self._cp = cp_model
        self.model = cp_model.CpModel()
        self.vars: Dict[VarKey, Any] = {}
        self._domains: Dict[VarKey, tuple[int, int]] = {}
        # Multi-variable sums get a channelled slot variable so AllDifferent sees affine terms
        self._sums: Dict[Term, Any] = {}
        self._objective: VarKey | None = None

    def declare(self, var: VarKey, lo: int, hi: int) -> None:
        self.vars[var] = self.model.new_int_var(lo, hi, var.ident)
        self._domains[var] = (lo, hi)

    def _expr(self, term: Term) -> Any:
        if len(term) == 1:
            return self.vars[term[0]]
        aux = self._sums.get(term)
        if aux is None:
            lo = sum(self._domains[v][0] for v in term)
            hi = sum(self._domains[v][1] for v in term)
            aux = self.model.new_int_var(lo, hi, "sum[" + "+".join(v.ident for v in term) + "]")
            self.model.add(aux == sum(self.vars[v] for v in term))
            self._sums[term] = aux
        return aux

    def add(self, constraint: Constraint) -> None:
        if isinstance(constraint, InRange):
            expr = self._expr(constraint.term)
            self.model.add(expr >= constraint.lower)
            upper = constraint.upper
            self.model.add(expr <= (self.vars[upper] if isinstance(upper, VarKey) else upper))
        elif isinstance(constraint, AllDifferent):
            if len(constraint.terms) > 1:
                self.model.add_all_different([self._expr(t) for t in constraint.terms])
        else:
            raise TypeError(f"unsupported constraint {constraint!r}")

    def minimize(self, var: VarKey) -> None:
        self._objective = var
        self.model.minimize(self.vars[var])

    def solve(self, timeout_ms: int) -> SolveOutcome:
        logger = logging.getLogger(__name__)
        cp_model = self._cp
        solver = cp_model.CpSolver()
        solver.parameters.max_time_in_seconds = max(timeout_ms, 1) / 1000.0
        solver.parameters.num_workers = int(self.config.workers)
        solver.parameters.log_search_progress = bool(self.config.log_search_progress)

        t0 = time.perf_counter()
        status = solver.solve(self.model)
        elapsed = (time.perf_counter() - t0) * 1000.0
        logger.debug(f"cpsat status={solver.status_name(status)} wall={elapsed:.1f}ms")

        if status == cp_model.MODEL_INVALID:
            raise RuntimeError(f"CP-SAT rejected the model: {self.model.validate()}")
        mapped = {
            cp_model.OPTIMAL: SolveStatus.OPTIMAL,
            cp_model.FEASIBLE: SolveStatus.FEASIBLE,
            cp_model.INFEASIBLE: SolveStatus.INFEASIBLE,
        }.get(status, SolveStatus.UNKNOWN)
        if not mapped.has_model:
            return SolveOutcome(mapped, elapsed_ms=elapsed)

        values: Dict[VarKey, int] = {k: int(solver.value(v)) for k, v in self.vars.items()}
        objective = values[self._objective] if self._objective is not None else None
        return SolveOutcome(mapped, values, objective, elapsed)
