from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
from typing import Iterable, List

from ..errors import LayoutDefectError, LayoutError, LayoutTimeoutError, UnsatisfiableLayoutError
from ..models.layout import LayoutResult
from ..models.program import Program
from ..solvers import make_backend
from ..solvers.base import SolverConfig, SolveStatus
from ..validate.checks import is_valid, validate_layout
from .builder import build_problem, load_problem
from .projector import project


@dataclass
class SweepRun:
    timeout_ms: int
    result: LayoutResult | None = None
    error: LayoutTimeoutError | None = None


def compute_layout(
    program: Program,
    config: SolverConfig | None = None,
    *,
    upper_bound: int | None = None,
) -> LayoutResult:
    """Solve one layout: build the constraints, run the backend, project the model.

    Raises LayoutTimeoutError when the backend finds no model in time,
    UnsatisfiableLayoutError when a caller-supplied upper_bound is below the
    minimum, and LayoutDefectError if the guaranteed bound is ever reported
    unsatisfiable.
    """
    cfg = config or SolverConfig()
    logger = logging.getLogger(__name__)

    if not program.entries:
        logger.info("Program has no entries; nothing to lay out")
        return LayoutResult(
            class_offsets={},
            method_offsets={},
            slots=[],
            table_bound=0,
            occupancy=0.0,
            density=0.0,
            optimal=True,
            backend=cfg.backend,
            timeout_ms=cfg.timeout_ms,
            empty_classes=list(program.empty_classes),
        )

    problem = build_problem(program, cfg, upper_bound=upper_bound)
    backend = load_problem(problem, make_backend(cfg))
    logger.info(f"Solving with {backend.name} timeout={cfg.timeout_ms}ms")
    outcome = backend.solve(cfg.timeout_ms)
    logger.info(
        f"{backend.name} status={outcome.status.value} objective={outcome.objective} "
        f"time={outcome.elapsed_ms:.1f}ms"
    )

    if outcome.status is SolveStatus.INFEASIBLE:
        if problem.witness_bound:
            raise LayoutDefectError(problem.upper_bound)
        raise UnsatisfiableLayoutError(problem.upper_bound)
    if outcome.status is SolveStatus.UNKNOWN:
        raise LayoutTimeoutError(cfg.timeout_ms, backend.name)

    result = project(problem, backend, outcome)
    result.timeout_ms = cfg.timeout_ms
    report = validate_layout(program, result, distinct_class_offsets=cfg.distinct_class_offsets)
    if not is_valid(report):
        if outcome.status is SolveStatus.FEASIBLE:
            # An incumbent that breaks the constraints is no better than no model
            logger.warning(f"Discarding invalid incumbent: {report['violations_by_rule']}")
            raise LayoutTimeoutError(cfg.timeout_ms, backend.name)
        raise LayoutError(f"{backend.name} returned an invalid layout: {report['violations_by_rule']}")
    if not result.optimal:
        logger.warning(
            f"Layout with bound {result.table_bound} is not proven minimal within {cfg.timeout_ms}ms"
        )
    return result


def sweep_timeouts(
    program: Program,
    timeouts: Iterable[int],
    config: SolverConfig | None = None,
    *,
    parallel: bool = False,
) -> List[SweepRun]:
    """Solve the same program once per budget. Each run gets its own backend."""
    cfg = config or SolverConfig()
    budgets = [int(t) for t in timeouts]

    def _one(timeout_ms: int) -> SweepRun:
        try:
            return SweepRun(timeout_ms, compute_layout(program, replace(cfg, timeout_ms=timeout_ms)))
        except LayoutTimeoutError as e:
            logging.getLogger(__name__).warning(str(e))
            return SweepRun(timeout_ms, error=e)

    if parallel and len(budgets) > 1:
        with ThreadPoolExecutor(max_workers=len(budgets)) as pool:
            return list(pool.map(_one, budgets))
    return [_one(t) for t in budgets]
