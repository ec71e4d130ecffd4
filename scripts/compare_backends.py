from __future__ import annotations

import argparse
import json
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List

root = Path(__file__).resolve().parents[1]
if str(root) not in sys.path:
    sys.path.insert(0, str(root))

from layout_engine.data.loader import load_config, load_program  # type: ignore
from layout_engine.errors import LayoutError  # type: ignore
from layout_engine.layout.engine import compute_layout  # type: ignore
from layout_engine.solvers import BACKENDS  # type: ignore


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Solve one program with several backends and compare bounds")
    p.add_argument("program", type=str, help="Class/method description file")
    p.add_argument("--timeout", type=int, default=2000, help="Time limit per backend (ms)")
    p.add_argument(
        "--backends",
        type=str,
        default="cpsat,z3",
        help=f"Comma-separated backends ({', '.join(sorted(BACKENDS))})",
    )
    p.add_argument("--config", type=str, default="configs/solver.toml", help="Optional TOML config")
    p.add_argument("--relax-class-offsets", action="store_true", help="Allow shared class offsets")
    return p.parse_args()


def main() -> int:
    args = parse_args()
    program = load_program(Path(args.program))
    cfg = replace(load_config(Path(args.config)), timeout_ms=args.timeout)
    if args.relax_class_offsets:
        cfg = replace(cfg, distinct_class_offsets=False)

    rows: List[Dict[str, Any]] = []
    for name in [b.strip() for b in args.backends.split(",") if b.strip()]:
        try:
            res = compute_layout(program, replace(cfg, backend=name))
        except (LayoutError, RuntimeError, ValueError) as e:
            rows.append({"backend": name, "error": str(e)})
            continue
        rows.append(
            {
                "backend": name,
                "table_bound": res.table_bound,
                "optimal": res.optimal,
                "occupancy": res.occupancy,
                "elapsed_ms": round(res.elapsed_ms, 1),
            }
        )
    print(json.dumps({"program": args.program, "timeout_ms": args.timeout, "results": rows}, indent=2))
    bounds = {r["table_bound"] for r in rows if r.get("optimal")}
    # Backends that proved optimality must agree
    return 0 if len(bounds) <= 1 else 1


if __name__ == "__main__":
    raise SystemExit(main())
