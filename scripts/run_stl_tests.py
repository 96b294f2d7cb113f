#!/usr/bin/env python3
"""Export every lamp part to STL and verify watertightness."""

from __future__ import annotations

import json
import os
import subprocess
import time
from datetime import UTC, datetime
from pathlib import Path

import pyvista as pv

PROJECT_ROOT = Path(__file__).resolve().parents[1]
DIST_DIR = PROJECT_ROOT / "dist" / "stl-tests"
RESULTS_FILE = DIST_DIR / "results.json"
SUITE_NAME = "stl-tests"

CASES = [
    {"name": "stl-lens", "part": "lens"},
    {"name": "stl-lid", "part": "lid"},
    {"name": "stl-quadrant-5", "part": "quadrant-5"},
    {"name": "stl-quadrant-3", "part": "quadrant-3"},
    {"name": "stl-quadrant-lenses", "part": "quadrant-3", "args": ["--lenses"]},
    {"name": "stl-base", "part": "base"},
    {"name": "stl-base-cap", "part": "base-cap"},
    {"name": "stl-lid-thick-wall", "part": "lid", "args": ["--set", "wall_width=1.6"]},
]


def _isoformat(dt: datetime) -> str:
    return dt.isoformat().replace("+00:00", "Z")


def _is_watertight(mesh: pv.DataSet) -> tuple[bool, int]:
    edges = mesh.extract_feature_edges(
        boundary_edges=True,
        feature_edges=False,
        non_manifold_edges=True,
        manifold_edges=False,
    )
    open_edges = edges.n_cells
    return open_edges == 0, open_edges


def run_case(case: dict, verbose: bool = False) -> dict:
    output = DIST_DIR / f"{case['name']}.stl"
    output.parent.mkdir(parents=True, exist_ok=True)
    cmd = ["icolamp", "build", case["part"], "--output", str(output), "--overwrite", *case.get("args", [])]
    started_at = datetime.now(UTC)
    start_monotonic = time.perf_counter()
    if verbose:
        print(f"{case['name']} - {_isoformat(started_at)}")
    proc = subprocess.run(cmd, cwd=PROJECT_ROOT, env=os.environ.copy(), capture_output=True, text=True)
    ended_at = datetime.now(UTC)
    duration = time.perf_counter() - start_monotonic

    watertight = None
    open_edges = None
    analysis_error = None
    n_cells = None
    volume = None

    if proc.returncode == 0 and output.exists():
        try:
            mesh = pv.read(output)
            n_cells = mesh.n_cells
            volume = float(mesh.volume)
            watertight, open_edges = _is_watertight(mesh)
        except Exception as exc:  # pragma: no cover - pyvista read failure
            watertight = False
            analysis_error = str(exc)

    success = proc.returncode == 0 and watertight is True
    if verbose:
        status = "PASS" if success else "FAIL"
        print(f"{status} - {_isoformat(ended_at)} ({duration:.2f}s)")
        if watertight is False:
            print(f"  {analysis_error or f'open edges: {open_edges}'}")
        elif proc.returncode != 0:
            print(f"  {proc.stderr.strip() or proc.stdout.strip()}")
        print()

    return {
        "name": case["name"],
        "part": case["part"],
        "args": case.get("args", []),
        "returncode": proc.returncode,
        "stdout": proc.stdout.strip(),
        "stderr": proc.stderr.strip(),
        "stl_path": str(output.relative_to(PROJECT_ROOT)),
        "stl_exists": output.exists(),
        "watertight": watertight,
        "open_edge_count": open_edges,
        "analysis_error": analysis_error,
        "n_cells": n_cells,
        "volume_mm3": volume,
        "started_at": _isoformat(started_at),
        "ended_at": _isoformat(ended_at),
        "duration_seconds": duration,
    }


def main() -> int:
    DIST_DIR.mkdir(parents=True, exist_ok=True)
    suite_start = datetime.now(UTC)
    print(f"Starting test suite {SUITE_NAME}")
    print(f"time: {_isoformat(suite_start)}")
    print("--")
    results = [run_case(case, verbose=True) for case in CASES]
    suite_end = datetime.now(UTC)
    RESULTS_FILE.write_text(
        json.dumps(
            {
                "suite": SUITE_NAME,
                "suite_started_at": _isoformat(suite_start),
                "suite_ended_at": _isoformat(suite_end),
                "cases": results,
            },
            indent=2,
        )
    )

    failures = [case for case in results if case["returncode"] != 0 or case["watertight"] is not True]
    print(f"suite end - {_isoformat(suite_end)} ({'PASS' if not failures else 'FAIL'})")
    print(f"Wrote results to {RESULTS_FILE}")
    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
