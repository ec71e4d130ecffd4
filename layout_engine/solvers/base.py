from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Tuple, Union

from ..models.variables import VarKey

# A term is the sum of its variables; an entry slot is (class var, method var)
Term = Tuple[VarKey, ...]


@dataclass
class SolverConfig:
    timeout_ms: int = 300
    workers: int = 8
    backend: str = "cpsat"
    distinct_class_offsets: bool = True
    log_search_progress: bool = False


@dataclass(frozen=True)
class InRange:
    """lower <= sum(term) <= upper, where upper is a constant or a variable."""

    term: Term
    lower: int
    upper: Union[int, VarKey]


@dataclass(frozen=True)
class AllDifferent:
    terms: Tuple[Term, ...]


Constraint = Union[InRange, AllDifferent]


class SolveStatus(enum.Enum):
    OPTIMAL = "OPTIMAL"
    FEASIBLE = "FEASIBLE"  # incumbent without optimality proof
    INFEASIBLE = "INFEASIBLE"
    UNKNOWN = "UNKNOWN"

    @property
    def has_model(self) -> bool:
        return self in (SolveStatus.OPTIMAL, SolveStatus.FEASIBLE)


@dataclass
class SolveOutcome:
    status: SolveStatus
    model: Dict[VarKey, int] = field(default_factory=dict)
    objective: int | None = None
    elapsed_ms: float = 0.0


class SolverBackend(ABC):
    """Integer optimisation oracle.

    Callers declare every variable with a finite domain, assert constraints,
    name one variable to minimise, then call :meth:`solve` once. A backend
    instance is single use; build a fresh one per solve.
    """

    name = "abstract"

    def __init__(self, config: SolverConfig | None = None) -> None:
        self.config = config or SolverConfig()

    @abstractmethod
    def declare(self, var: VarKey, lo: int, hi: int) -> None:
        ...

    @abstractmethod
    def add(self, constraint: Constraint) -> None:
        ...

    @abstractmethod
    def minimize(self, var: VarKey) -> None:
        ...

    @abstractmethod
    def solve(self, timeout_ms: int) -> SolveOutcome:
        ...

    def evaluate(self, outcome: SolveOutcome, var: VarKey) -> int:
        if not outcome.status.has_model:
            raise ValueError(f"no model to evaluate (status={outcome.status.value})")
        return outcome.model[var]
