# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dffbench/tools/dv_report.py

"""dffbench-report: summarize the run manifests under <outdir>/tests.

Every dffbench-dv seed leaves a manifest.json with its status, the expected
status and a replay command. Runs are listed by outcome, unexpected ones
last, and the exit status is 1 when any run did not go as expected.

    $ dffbench-report --outdir out_dv
    PASS (EXPECTED)   DffRandomTest seed=42   dffbench-dv --testcase=... --seeds 42
    FAIL (UNEXPECTED) all seed=7              dffbench-dv --seeds 7
"""

from __future__ import annotations

import argparse
import json
import sys
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from dffbench import utils

_OUTCOMES = (
    "PASS (EXPECTED)",
    "FAIL (EXPECTED)",
    "PASS (UNEXPECTED)",
    "FAIL (UNEXPECTED)",
)


@dataclass(frozen=True)
class TestRun:
    __test__ = False  # not a pytest class

    path: Path
    status: str
    expect: str
    replay_cmd: str
    testcase: str = "all"
    seed: int | None = None

    @property
    def expected(self) -> bool:
        return self.status == self.expect

    @property
    def outcome(self) -> str:
        return f"{self.status} ({'EXPECTED' if self.expected else 'UNEXPECTED'})"


def load_run(run_dir: Path) -> TestRun | None:
    """Read run_dir/manifest.json; None when it is missing or incomplete."""
    try:
        data = json.loads((run_dir / "manifest.json").read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return None
    if not isinstance(data, dict):
        return None
    status = str(data.get("status", "")).upper()
    expect = str(data.get("expect", "PASS")).upper()
    replay_cmd = str(data.get("replay_cmd", "")).strip()
    if {status, expect} - {"PASS", "FAIL"} or not replay_cmd:
        return None
    seed = data.get("seed")
    return TestRun(
        path=run_dir,
        status=status,
        expect=expect,
        replay_cmd=replay_cmd,
        testcase=str(data.get("testcase", "all")),
        seed=seed if isinstance(seed, int) else None,
    )


def collect(tests_root: Path) -> list[TestRun]:
    """Every readable run below tests_root, ordered by directory."""
    if not tests_root.is_dir():
        print(f"dffbench-report: {tests_root} does not exist", file=sys.stderr)
        return []
    runs = (load_run(m.parent) for m in sorted(tests_root.rglob("manifest.json")))
    return [r for r in runs if r is not None]


def print_report(tests_root: Path, runs: Sequence[TestRun]) -> int:
    """Print runs grouped by outcome; return 1 on any unexpected outcome."""
    if not runs:
        print(f"dffbench-report: no runs found in {tests_root}", file=sys.stderr)
        return 1
    print(f"[dv_report] {len(runs)} run(s) in {tests_root}\n")
    rank = {label: i for i, label in enumerate(_OUTCOMES)}
    for r in sorted(runs, key=lambda r: (rank[r.outcome], str(r.path))):
        colour = utils.green if r.expected else utils.red
        where = f"{r.testcase} seed={r.seed if r.seed is not None else '?'}"
        print(f"{colour(f'{r.outcome:<17}')} {where:<28} {r.replay_cmd}")

    counts = Counter(r.outcome for r in runs)
    print()
    for label in _OUTCOMES:
        if counts[label]:
            colour = utils.green if "UNEXPECTED" not in label else utils.red
            print(f"{colour(label)}: {counts[label]}")
    unexpected = sum(1 for r in runs if not r.expected)
    verdict = utils.red("FAIL") if unexpected else utils.green("PASS")
    print(f"\n[dv_report] {verdict}: {unexpected} unexpected outcome(s)")
    return 1 if unexpected else 0


def main(argv: Sequence[str] | None = None) -> int:
    ap = argparse.ArgumentParser(
        prog="dffbench-report", description="Summarize dffbench-dv runs"
    )
    ap.add_argument("--outdir", default="out_dv")
    args = ap.parse_args(argv)
    tests_root = (Path(args.outdir) / "tests").resolve()
    return print_report(tests_root, collect(tests_root))


if __name__ == "__main__":
    raise SystemExit(main())
