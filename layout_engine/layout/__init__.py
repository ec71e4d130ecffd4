from .builder import LayoutProblem, build_problem, load_problem, size_hints
from .engine import SweepRun, compute_layout, sweep_timeouts
from .projector import density, occupancy, project

__all__ = [
    "LayoutProblem",
    "build_problem",
    "load_problem",
    "size_hints",
    "project",
    "occupancy",
    "density",
    "compute_layout",
    "sweep_timeouts",
    "SweepRun",
]
