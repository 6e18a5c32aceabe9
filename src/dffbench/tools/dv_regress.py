# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dffbench/tools/dv_regress.py

"""dffbench-regress: run a list of dffbench-dv jobs described in YAML.

File format (the packaged dffbench/dv/dv_regress.yaml is the default):

    defaults:
      args: ["--sim=icarus"]          # put in front of every job's args
    jobs:
      - name: random
        args: ["--testcase=DffRandomTest", "--nseeds=4"]
      - name: idle
        args: --testcase=DffIdleTest   # a string is split like a shell would

Jobs run one after another as subprocesses. The summary lists every job with
the exact command that reruns it; the exit status is 1 if any job failed.
"""

from __future__ import annotations

import argparse
import shlex
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Sequence

import yaml

from dffbench import utils

REGRESS_FILE = Path(__file__).resolve().parents[1] / "dv" / "dv_regress.yaml"


@dataclass(frozen=True)
class Job:
    name: str
    args: tuple[str, ...]

    def command(self, defaults: Sequence[str], outdir: str) -> list[str]:
        """dffbench-dv argv; job args follow the defaults so they win."""
        return ["dffbench-dv", *defaults, *self.args, f"--outdir={outdir}"]


@dataclass(frozen=True)
class Regression:
    defaults: tuple[str, ...]
    jobs: tuple[Job, ...]

    @classmethod
    def load(cls, path: Path) -> Regression:
        """Parse a regression file; ValueError names the first bad entry."""
        doc = yaml.safe_load(path.read_text(encoding="utf-8"))
        if not isinstance(doc, dict):
            raise ValueError(f"{path}: top level must be a mapping")
        defaults = doc.get("defaults") or {}
        if not isinstance(defaults, dict):
            raise ValueError(f"{path}: 'defaults' must be a mapping")
        entries = doc.get("jobs")
        if not isinstance(entries, list) or not entries:
            raise ValueError(f"{path}: 'jobs' must be a non-empty list")
        jobs = []
        for i, entry in enumerate(entries):
            if not isinstance(entry, dict):
                raise ValueError(f"{path}: jobs[{i}] must be a mapping")
            name = str(entry.get("name") or f"job{i}")
            jobs.append(Job(name, _argv(entry.get("args"))))
        names = [j.name for j in jobs]
        dupes = sorted({n for n in names if names.count(n) > 1})
        if dupes:
            raise ValueError(f"{path}: duplicate job names {dupes}")
        return cls(_argv(defaults.get("args")), tuple(jobs))

    def select(self, names: Sequence[str]) -> tuple[Job, ...]:
        """Jobs with the given names (all jobs if names is empty)."""
        if not names:
            return self.jobs
        unknown = set(names) - {j.name for j in self.jobs}
        if unknown:
            raise ValueError(f"unknown job(s): {sorted(unknown)}")
        return tuple(j for j in self.jobs if j.name in names)


def _argv(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return tuple(shlex.split(value))
    return tuple(str(v) for v in value)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(
        prog="dffbench-regress",
        description="Run the dffbench-dv jobs listed in a YAML file",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    ap.add_argument("--file", type=Path, default=REGRESS_FILE)
    ap.add_argument("--outdir", default="out_dv")
    ap.add_argument(
        "--job", dest="jobs", action="append", default=[], help="only this job"
    )
    return ap.parse_args(argv)


def run_regress(args: argparse.Namespace) -> int:
    path = args.file.resolve()
    if not path.is_file():
        print(f"dffbench-regress: {path} does not exist", file=sys.stderr)
        return 1
    reg = Regression.load(path)
    jobs = reg.select(args.jobs)
    print(f"[dv_regress] {len(jobs)} job(s) from {path}")

    results: list[tuple[bool, str]] = []
    for job in jobs:
        cmd = job.command(reg.defaults, args.outdir)
        line = utils.pretty_cmd(cmd)
        print(f"\n[dv_regress] {job.name}: {line}\n", flush=True)
        ok = subprocess.run(cmd, check=False).returncode == 0
        results.append((ok, line))

    print("\n[dv_regress] summary")
    for ok, line in sorted(results, key=lambda r: r[0], reverse=True):
        print(f"{utils.green('PASS') if ok else utils.red('FAIL')}: {line}")
    failed = sum(1 for ok, _ in results if not ok)
    print(f"\n[dv_regress] {len(results) - failed} passed, {failed} failed")
    report = f"dffbench-report --outdir={args.outdir}"
    print(f"[dv_regress] per-seed detail: {utils.yellow(report)}")
    return 1 if failed else 0


def main(argv: Sequence[str] | None = None) -> int:
    return run_regress(parse_args(argv))


if __name__ == "__main__":
    raise SystemExit(main())
