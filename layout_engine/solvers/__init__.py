from __future__ import annotations

from typing import Callable, Dict

from .base import (
    AllDifferent,
    InRange,
    SolveOutcome,
    SolverBackend,
    SolverConfig,
    SolveStatus,
)
from .cpsat import CpSatBackend
from .search import SearchBackend
from .z3_backend import Z3Backend

BACKENDS: Dict[str, Callable[[SolverConfig], SolverBackend]] = {
    CpSatBackend.name: CpSatBackend,
    Z3Backend.name: Z3Backend,
    SearchBackend.name: SearchBackend,
}


def make_backend(config: SolverConfig) -> SolverBackend:
    try:
        factory = BACKENDS[config.backend]
    except KeyError:
        raise ValueError(
            f"unknown solver backend {config.backend!r}; choose from {', '.join(sorted(BACKENDS))}"
        ) from None
    return factory(config)


__all__ = [
    "AllDifferent",
    "InRange",
    "SolveOutcome",
    "SolverBackend",
    "SolverConfig",
    "SolveStatus",
    "CpSatBackend",
    "Z3Backend",
    "SearchBackend",
    "BACKENDS",
    "make_backend",
]
