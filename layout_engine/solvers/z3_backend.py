from __future__ import annotations

import logging
import time
from typing import Any, Dict

from ..models.variables import VarKey
from .base import AllDifferent, Constraint, InRange, SolveOutcome, SolverBackend, SolverConfig, SolveStatus, Term


class Z3Backend(SolverBackend):
    """Z3 ``Optimize``. After a timeout the best incumbent model, if any, is reported as FEASIBLE."""

    name = "z3"

    def __init__(self, config: SolverConfig | None = None) -> None:
        super().__init__(config)
        try:
            import z3
        except Exception as e:
            raise RuntimeError(
                "Z3 (z3-solver) is not installed. Please install it: python -m pip install z3-solver"
            ) from e
        self._z3 = z3
        self.opt = z3.Optimize()
        self.vars: Dict[VarKey, Any] = {}
        self._objective: VarKey | None = None

    def declare(self, var: VarKey, lo: int, hi: int) -> None:
        v = self._z3.Int(var.ident)
        self.vars[var] = v
        self.opt.add(v >= lo, v <= hi)

    def _expr(self, term: Term) -> Any:
        if len(term) == 1:
            return self.vars[term[0]]
        return self._z3.Sum([self.vars[v] for v in term])

    def add(self, constraint: Constraint) -> None:
        if isinstance(constraint, InRange):
            expr = self._expr(constraint.term)
            upper = constraint.upper
            self.opt.add(expr >= constraint.lower)
            self.opt.add(expr <= (self.vars[upper] if isinstance(upper, VarKey) else upper))
        elif isinstance(constraint, AllDifferent):
            if len(constraint.terms) > 1:
                self.opt.add(self._z3.Distinct(*[self._expr(t) for t in constraint.terms]))
        else:
            raise TypeError(f"unsupported constraint {constraint!r}")

    def minimize(self, var: VarKey) -> None:
        self._objective = var
        self.opt.minimize(self.vars[var])

    def solve(self, timeout_ms: int) -> SolveOutcome:
        logger = logging.getLogger(__name__)
        z3 = self._z3
        self.opt.set("timeout", max(int(timeout_ms), 1))

        t0 = time.perf_counter()
        result = self.opt.check()
        elapsed = (time.perf_counter() - t0) * 1000.0
        logger.debug(f"z3 result={result} wall={elapsed:.1f}ms")

        if result == z3.unsat:
            return SolveOutcome(SolveStatus.INFEASIBLE, elapsed_ms=elapsed)
        if result == z3.sat:
            status = SolveStatus.OPTIMAL
        else:
            status = SolveStatus.FEASIBLE
            reason = self.opt.reason_unknown()
            logger.info(f"z3 stopped without proof ({reason}); trying incumbent model")
        try:
            model = self.opt.model()
        except z3.Z3Exception:
            return SolveOutcome(SolveStatus.UNKNOWN, elapsed_ms=elapsed)
        if status is SolveStatus.FEASIBLE and len(model) == 0:
            return SolveOutcome(SolveStatus.UNKNOWN, elapsed_ms=elapsed)

        values = {k: model.eval(v, model_completion=True).as_long() for k, v in self.vars.items()}
        objective = values[self._objective] if self._objective is not None else None
        return SolveOutcome(status, values, objective, elapsed)
