from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from ..models.classdef import Entry
from ..models.program import Program
from ..models.variables import TABLE_BOUND, VarKey, class_var, method_var
from ..solvers.base import AllDifferent, Constraint, InRange, SolverBackend, SolverConfig, Term


@dataclass
class LayoutProblem:
    program: Program
    domains: Dict[VarKey, Tuple[int, int]]
    constraints: List[Constraint]
    objective: VarKey
    entry_terms: Dict[Entry, Term] = field(default_factory=dict)
    success_size: int = 0  # guaranteed feasible
    fail_size: int = 0  # guaranteed infeasible
    upper_bound: int = 0
    witness_bound: bool = True  # upper_bound is the guaranteed-feasible size


def size_hints(program: Program) -> Tuple[int, int]:
    # Class i at i*|methods| and method j at j never collide, so success_size always works.
    # n distinct non-negative slots need a bound of at least n-1, so n-2 never does.
    success_size = len(program.class_names) * len(program.method_names)
    fail_size = len(program.entries) - 2
    return success_size, fail_size


def build_problem(
    program: Program,
    config: SolverConfig | None = None,
    *,
    upper_bound: int | None = None,
) -> LayoutProblem:
    cfg = config or SolverConfig()
    logger = logging.getLogger(__name__)
    success_size, fail_size = size_hints(program)
    witness = upper_bound is None or upper_bound >= success_size
    ub = success_size if upper_bound is None else int(upper_bound)

    domains: Dict[VarKey, Tuple[int, int]] = {}
    # Starts just above the infeasible hint; an override below that leaves the
    # InRange on the bound itself to report infeasibility
    bound_lo = max(0, fail_size + 1)
    domains[TABLE_BOUND] = (bound_lo, max(ub, bound_lo))
    # Connected groups of classes (linked by shared methods) can be shifted
    # independently without moving any slot, so class offsets never need to
    # exceed one (ub + 1) span per class. Methods follow from 0 <= c + m <= ub.
    span = max(ub, 0)
    class_cap = len(program.class_names) * (span + 1)
    for c in program.class_names:
        domains[class_var(c)] = (0, class_cap)
    for m in program.method_names:
        domains[method_var(m)] = (-class_cap, span)

    constraints: List[Constraint] = []
    entry_terms: Dict[Entry, Term] = {}
    for e in program.entries:
        term: Term = (class_var(e.class_name), method_var(e.method))
        entry_terms[e] = term
        constraints.append(InRange(term, 0, TABLE_BOUND))
    constraints.append(AllDifferent(tuple(entry_terms.values())))

    cvars = [class_var(c) for c in program.class_names]
    for v in cvars:
        constraints.append(InRange((v,), 0, class_cap))
    if cfg.distinct_class_offsets:
        constraints.append(AllDifferent(tuple((v,) for v in cvars)))
    constraints.append(InRange((TABLE_BOUND,), 0, ub))

    logger.info(
        f"Built layout problem: classes={len(cvars)} methods={len(program.method_names)} "
        f"entries={len(entry_terms)} success_size={success_size} fail_size={fail_size} "
        f"upper_bound={ub} distinct_class_offsets={cfg.distinct_class_offsets}"
    )
    return LayoutProblem(
        program=program,
        domains=domains,
        constraints=constraints,
        objective=TABLE_BOUND,
        entry_terms=entry_terms,
        success_size=success_size,
        fail_size=fail_size,
        upper_bound=ub,
        witness_bound=witness,
    )


def load_problem(problem: LayoutProblem, backend: SolverBackend) -> SolverBackend:
    for var, (lo, hi) in problem.domains.items():
        backend.declare(var, lo, hi)
    for c in problem.constraints:
        backend.add(c)
    backend.minimize(problem.objective)
    return backend
