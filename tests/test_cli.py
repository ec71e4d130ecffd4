from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from layout_engine.cli.main import app, run_pipeline
from layout_engine.data.loader import load_config
from layout_engine.data.parser import parse_program
from layout_engine.solvers.base import SolverConfig

runner = CliRunner()


def _program_file(tmp_path: Path, text: str) -> Path:
    p = tmp_path / "prog.vt"
    p.write_text(text, encoding="utf-8")
    return p


def test_solve_writes_outputs(tmp_path: Path) -> None:
    prog = _program_file(tmp_path, "A { f; g } B { g; h }")
    out = tmp_path / "outputs"
    result = runner.invoke(
        app,
        [
            "solve",
            str(prog),
            "--timeout",
            "2000",
            "--workers",
            "1",
            "--out",
            str(out),
            "--log-dir",
            str(tmp_path / "logs"),
            "--config",
            str(tmp_path / "missing.toml"),
        ],
    )
    assert result.exit_code == 0, result.output
    assert "Big table" in result.output
    assert "collision_count: 0" in result.output

    doc = json.loads((out / "layout.json").read_text(encoding="utf-8"))
    assert doc["best_timeout_ms"] == 2000
    layout = doc["runs"][0]["layout"]
    assert layout["table_bound"] == 3
    assert layout["validation"]["violation_count"] == 0
    assert (out / "validation.json").exists()
    assert (out / "layout.txt").exists()


def test_solve_reports_malformed_input(tmp_path: Path) -> None:
    prog = _program_file(tmp_path, "A { f; g")
    result = runner.invoke(app, ["solve", str(prog), "--log-dir", str(tmp_path / "logs")])
    assert result.exit_code == 1


def test_check_prints_hints(tmp_path: Path) -> None:
    prog = _program_file(tmp_path, "A { x } B { y }")
    result = runner.invoke(app, ["check", str(prog)])
    assert result.exit_code == 0, result.output
    assert "feasible_bound=4 infeasible_bound=0" in result.output


def test_run_pipeline_with_several_budgets() -> None:
    program = parse_program("A { f } B { f; g }")
    text, validation, doc = run_pipeline(program, SolverConfig(workers=1), timeouts=[500, 1000])
    assert text.count("Big table") == 2
    assert [r["timeout_ms"] for r in doc["runs"]] == [500, 1000]
    assert "collision_count: 0" in validation


def test_load_config_overlays_toml(tmp_path: Path) -> None:
    cfg_path = tmp_path / "solver.toml"
    cfg_path.write_text(
        '[solver]\nbackend = "search"\ntimeout_ms = 50\nbogus = 1\n', encoding="utf-8"
    )
    cfg = load_config(cfg_path, SolverConfig(workers=2))
    assert cfg.backend == "search"
    assert cfg.timeout_ms == 50
    assert cfg.workers == 2
    assert load_config(tmp_path / "nope.toml") == SolverConfig()


@pytest.mark.parametrize(
    "body",
    [
        'distinct_class_offsets = "false"\n',
        'workers = "eight"\n',
        "timeout_ms = true\n",
    ],
)
def test_load_config_rejects_mistyped_values(tmp_path: Path, body: str) -> None:
    cfg_path = tmp_path / "solver.toml"
    cfg_path.write_text("[solver]\n" + body, encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(cfg_path)


@pytest.mark.parametrize("body", ["[solver\nworkers = 1\n", '[solver]\nworkers = "many"\n'])
def test_solve_reports_bad_config(tmp_path: Path, body: str) -> None:
    prog = _program_file(tmp_path, "A { f }")
    cfg_path = tmp_path / "solver.toml"
    cfg_path.write_text(body, encoding="utf-8")
    result = runner.invoke(
        app, ["solve", str(prog), "--config", str(cfg_path), "--log-dir", str(tmp_path / "logs")]
    )
    assert result.exit_code == 1
    assert result.exception is None or isinstance(result.exception, SystemExit)
