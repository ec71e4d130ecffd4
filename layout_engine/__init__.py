"""Flat dispatch-table layout by selector coloring and row displacement."""

from .data.parser import parse_program
from .errors import (
    LayoutDefectError,
    LayoutError,
    LayoutTimeoutError,
    MalformedInputError,
    UnsatisfiableLayoutError,
)
from .layout.engine import compute_layout, sweep_timeouts
from .models import ClassDef, LayoutResult, Program
from .solvers.base import SolverConfig

__all__ = [
    "ClassDef",
    "Program",
    "LayoutResult",
    "SolverConfig",
    "parse_program",
    "compute_layout",
    "sweep_timeouts",
    "LayoutError",
    "MalformedInputError",
    "UnsatisfiableLayoutError",
    "LayoutDefectError",
    "LayoutTimeoutError",
]
