from __future__ import annotations

import logging
import tomllib
from dataclasses import fields, replace
from pathlib import Path
from typing import Any, Dict

from ..models.program import Program
from ..solvers.base import SolverConfig
from .parser import parse_program


def load_program(path: Path) -> Program:
    with path.open("r", encoding="utf-8") as f:
        return parse_program(f.read())


def load_toml(path: Path) -> Dict[str, Any]:
    with path.open("rb") as f:
        return tomllib.load(f)


def load_config(path: Path | None, base: SolverConfig | None = None) -> SolverConfig:
    """Overlay the ``[solver]`` table of a TOML file onto ``base``.

    A missing file leaves ``base`` untouched; unknown keys are logged and ignored.
    A value whose TOML type differs from the option's type raises ValueError.
    """
    cfg = base or SolverConfig()
    if path is None or not path.exists():
        return cfg
    logger = logging.getLogger(__name__)
    table = load_toml(path).get("solver", {}) or {}
    known = {f.name for f in fields(SolverConfig)}
    updates: Dict[str, Any] = {}
    for key, value in table.items():
        if key not in known:
            logger.warning(f"Ignoring unknown solver option {key!r} in {path}")
            continue
        expected = type(getattr(cfg, key))
        # Exact match: bool is an int subclass, and "false" must not become True
        if type(value) is not expected:
            raise ValueError(
                f"solver option {key!r} in {path} must be {expected.__name__}, "
                f"got {type(value).__name__} {value!r}"
            )
        updates[key] = value
    return replace(cfg, **updates)
