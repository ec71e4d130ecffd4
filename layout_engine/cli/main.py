from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import typer

from ..data.loader import load_config, load_program
from ..errors import LayoutError
from ..layout.builder import size_hints
from ..layout.engine import sweep_timeouts
from ..models.program import Program
from ..render.json_out import layout_json, sweep_json, write_json
from ..render.text_out import layout_report, program_listing, write_text_report
from ..solvers.base import SolverConfig
from ..validate.checks import validate_layout
from ..validate.report import format_validation_report, write_validation_report

DEFAULT_TIMEOUTS = [300, 600, 900]


def _setup_logging(logs_dir: Path, level: int = logging.INFO) -> None:
    logs_dir.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[
            logging.FileHandler(logs_dir / "layout.log", encoding="utf-8"),
            logging.StreamHandler(),
        ],
    )
    logging.getLogger().setLevel(level)


def run_pipeline(
    program: Program,
    config: SolverConfig,
    *,
    timeouts: List[int] | None = None,
    parallel: bool = False,
    outputs_dir: Path | None = None,
) -> Tuple[str, str, Dict[str, Any]]:
    """Solve ``program`` once per timeout and render every run.

    Returns the text report, the validation summary of the best run and the
    JSON document; when ``outputs_dir`` is given they are also written there.
    """
    runs = sweep_timeouts(program, timeouts or [config.timeout_ms], config, parallel=parallel)

    text_parts: List[str] = [program_listing(program)]
    json_runs: List[Dict[str, Any]] = []
    validations: Dict[int, Dict[str, object]] = {}
    for run in runs:
        if run.result is None:
            text_parts.append(f"Timeout {run.timeout_ms}ms: {run.error}")
            json_runs.append({"timeout_ms": run.timeout_ms, "error": str(run.error)})
            continue
        report = validate_layout(
            program, run.result, distinct_class_offsets=config.distinct_class_offsets
        )
        validations[run.timeout_ms] = report
        text_parts.append(layout_report(run.result))
        json_runs.append({"timeout_ms": run.timeout_ms, "layout": layout_json(run.result, report)})

    doc = sweep_json(json_runs)
    best = doc["best_timeout_ms"]
    validation_text = format_validation_report(validations[best]) if best is not None else "no layout"
    text = "\n".join(text_parts)

    if outputs_dir is not None:
        write_text_report(text, outputs_dir)
        write_json(doc, outputs_dir)
        if best is not None:
            write_validation_report(validations[best], outputs_dir)
    return text, validation_text, doc


app = typer.Typer(add_completion=False, help="Flat vtable layout by selector coloring and row displacement")


@app.command("solve")
def cli_solve(
    program_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Class/method description"),
    timeout: Optional[List[int]] = typer.Option(
        None, "--timeout", "-t", help="Solve budget in ms (repeatable; default 300, 600, 900)"
    ),
    backend: Optional[str] = typer.Option(None, help="Solver backend: cpsat, z3 or search"),
    workers: Optional[int] = typer.Option(None, help="CP-SAT search workers"),
    config: Path = typer.Option(Path("configs/solver.toml"), help="Optional TOML config ([solver] table)"),
    relax_class_offsets: bool = typer.Option(
        False, help="Allow classes to share a base offset (denser, slower)"
    ),
    parallel: bool = typer.Option(False, help="Run the timeout budgets concurrently"),
    out: Optional[Path] = typer.Option(None, help="Write layout.txt, layout.json and validation.json here"),
    log_level: str = typer.Option("INFO", help="Log level"),
    log_dir: Path = typer.Option(Path("logs"), help="Directory for layout.log"),
) -> None:
    _setup_logging(log_dir, getattr(logging, log_level.upper(), logging.INFO))
    try:
        # TOMLDecodeError is a ValueError
        cfg = load_config(config)
        if backend is not None:
            cfg = replace(cfg, backend=backend)
        if workers is not None:
            cfg = replace(cfg, workers=workers)
        if relax_class_offsets:
            cfg = replace(cfg, distinct_class_offsets=False)
        program = load_program(program_file)
        text, validation, doc = run_pipeline(
            program, cfg, timeouts=timeout or DEFAULT_TIMEOUTS, parallel=parallel, outputs_dir=out
        )
    except (LayoutError, ValueError, RuntimeError) as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(code=1)
    typer.echo(text)
    typer.echo(validation)
    if doc["best_timeout_ms"] is None:
        raise typer.Exit(code=2)


@app.command("check")
def cli_check(
    program_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Class/method description"),
) -> None:
    try:
        program = load_program(program_file)
    except LayoutError as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(code=1)
    success_size, fail_size = size_hints(program)
    typer.echo(program_listing(program))
    typer.echo(
        f"classes={len(program.class_names)} methods={len(program.method_names)} "
        f"entries={len(program.entries)} feasible_bound={success_size} infeasible_bound={fail_size}"
    )


if __name__ == "__main__":  # pragma: no cover
    app()
