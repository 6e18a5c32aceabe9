# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dffbench/tools/dv.py

"""dffbench-dv: compile the register and run its pyuvm tests, once per seed.

Each seed is one pytest session that calls back into test_framework() below.
That keeps pytest's reporting and -x behaviour around the cocotb runner while
the run settings travel in-process as a RunContext. The compiled design is
cached under <outdir>/builds/dff.<fingerprint>; every seed gets its own run
directory under <outdir>/tests with test.log, results.xml, coverage.yaml and a
manifest.json that records the outcome and a command to replay it.

Icarus Verilog is the default simulator; Verilator also works. Waves are FST
or VCD (Icarus always writes FST).

Usage:
    dffbench-dv                                    # build, run all tests, seed 42
    dffbench-dv --testcase DffRandomTest --seeds 1 0x2a
    dffbench-dv --nseeds 8 --num-items 1000
    dffbench-dv --plusarg +DRIVE_FALLING_EDGE=0    # any bench setting
"""

from __future__ import annotations

import argparse
import dataclasses
import hashlib
import json
import logging
import os
import random
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final, Sequence

import pytest
from cocotb_tools.runner import get_results, get_runner

from dffbench import rtl, utils

OUT_DIR: Final[str] = "out_dv"
BUILDS_DIR: Final[str] = "builds"
RUNS_DIR: Final[str] = "tests"
TEST_MODULE: Final[str] = "dffbench.dv.test_dff"
DEFAULT_SEED: Final[int] = 42
FRAMEWORK_NODE: Final[str] = f"{Path(__file__).resolve()}::test_framework"
PYTEST_OPTS: Final[tuple[str, ...]] = ("-vv", "-s", "-ra", "-x")

_log = logging.getLogger("dffbench.dv")


@dataclass(frozen=True)
class RunContext:  # pylint: disable=too-many-instance-attributes
    """Everything one dffbench-dv invocation needs, for one seed at a time."""

    cmd: str = "both"
    sim: str = "icarus"
    outdir: str = OUT_DIR
    verbosity: str = "info"
    waves: bool = False
    waves_fmt: str = "fst"
    build_force: bool = False
    build_args: tuple[str, ...] = ()
    testcase: str | None = None
    expect: str = "PASS"
    num_items: int | None = None
    check_en: bool = True
    coverage_en: bool = True
    plusargs: tuple[str, ...] = ()
    argv: tuple[str, ...] = ()
    seed: int = DEFAULT_SEED
    run_tag: str | None = field(default=None, compare=False)

    @classmethod
    def from_args(cls, args: argparse.Namespace, argv: Sequence[str]) -> RunContext:
        return cls(
            cmd=args.cmd,
            sim=args.sim,
            outdir=args.outdir,
            verbosity=args.verbosity,
            waves=args.waves == "1",
            waves_fmt=args.waves_fmt,
            build_force=args.build_force,
            build_args=tuple(args.build_args),
            testcase=args.testcase,
            expect=args.expect,
            num_items=args.num_items,
            check_en=args.check_en == "1",
            coverage_en=args.coverage_en == "1",
            plusargs=tuple(args.plusargs),
            argv=tuple(argv),
        )

    def for_seed(self, seed: int, *, cmd: str | None = None) -> RunContext:
        return dataclasses.replace(self, seed=seed, cmd=cmd or self.cmd)

    @property
    def wave_ext(self) -> str:
        # the cocotb Icarus flow only dumps FST
        return "fst" if self.sim == "icarus" else self.waves_fmt

    @property
    def fingerprint(self) -> str:
        """Hash of the settings that change the compiled design."""
        knobs = {
            "sim": self.sim,
            "waves": self.waves,
            "wave_ext": self.wave_ext if self.waves else "",
            "build_args": list(self.build_args),
        }
        blob = json.dumps(knobs, sort_keys=True).encode()
        return hashlib.sha1(blob).hexdigest()[:10]

    @property
    def build_dir(self) -> Path:
        leaf = f"{rtl.TOPLEVEL}.{self.fingerprint}"
        return (Path(self.outdir) / BUILDS_DIR / leaf).resolve()

    @property
    def run_dir(self) -> Path:
        tag = self.run_tag or (
            f"{rtl.TOPLEVEL}.{self.fingerprint}.{self.testcase or 'all'}.{self.seed}"
        )
        return (Path(self.outdir) / RUNS_DIR / tag).resolve()

    @property
    def wave_file(self) -> Path:
        return self.run_dir / f"waves.{self.wave_ext}"


# --- command line ---


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse dffbench-dv options; defaults may come from the environment."""
    env = os.environ.get
    ap = argparse.ArgumentParser(
        prog="dffbench-dv",
        description="Compile the dff register and run its cocotb/pyuvm tests",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    ap.add_argument(
        "--cmd", choices=["build", "test", "both"], default=env("CMD", "both")
    )
    ap.add_argument(
        "--sim", choices=["icarus", "verilator"], default=env("SIM", "icarus")
    )
    ap.add_argument("--outdir", default=OUT_DIR, help="where builds and runs go")
    ap.add_argument(
        "--verbosity",
        choices=["debug", "info", "warning", "error", "critical"],
        default=env("VERBOSITY", "info"),
        help="log level for the runner and the simulated bench",
    )
    ap.add_argument("--waves", choices=["0", "1"], default=env("WAVES", "0"))
    ap.add_argument(
        "--waves_fmt", choices=["fst", "vcd"], default=env("WAVES_FMT", "fst")
    )

    ap.add_argument("--build-force", action="store_true", help="rebuild even if cached")
    ap.add_argument(
        "--build-arg",
        dest="build_args",
        action="append",
        default=[],
        metavar="ARG",
        help="passed to the simulator compile step (repeatable)",
    )

    ap.add_argument("--testcase", help="one pyuvm test class (default: all)")
    ap.add_argument(
        "--expect",
        choices=["PASS", "FAIL"],
        default="PASS",
        help="outcome that counts as success",
    )
    ap.add_argument(
        "--seeds", nargs="+", metavar="SEED", help="decimal, 0x.. or random"
    )
    ap.add_argument("--nseeds", type=int, default=0, help="random seeds to draw")
    ap.add_argument(
        "--seed-base", type=int, default=1999, help="seeds the --nseeds draw"
    )
    ap.add_argument("--num-items", type=int, help="records per test (GEN_NUM_ITEMS)")
    ap.add_argument("--check-en", choices=["0", "1"], default=env("CHECK_EN", "1"))
    ap.add_argument(
        "--coverage-en", choices=["0", "1"], default=env("COVERAGE_EN", "1")
    )
    ap.add_argument(
        "--plusarg",
        dest="plusargs",
        action="append",
        default=[],
        metavar="+NAME[=VALUE]",
        help="extra bench setting for the simulator (repeatable)",
    )
    return ap.parse_args(argv)


def validate_args(args: argparse.Namespace) -> None:
    """Exit with a message on option values argparse cannot check."""
    if args.num_items is not None and args.num_items < 0:
        raise SystemExit("dffbench-dv: --num-items must be >= 0")
    if args.nseeds < 0:
        raise SystemExit("dffbench-dv: --nseeds must be >= 0")
    bad = [p for p in args.plusargs if not p.startswith("+")]
    if bad:
        raise SystemExit(f"dffbench-dv: --plusarg values must start with '+': {bad}")


def replay_argv(argv: Sequence[str], seed: int) -> list[str]:
    """argv with every seed option removed and ``--seeds <seed>`` appended."""
    out: list[str] = []
    in_seed_list = False
    skip_next = False
    for tok in argv:
        if skip_next:
            skip_next = False
            continue
        if in_seed_list and not tok.startswith("-"):
            continue
        in_seed_list = False
        if tok == "--seeds":
            in_seed_list = True
        elif tok == "--nseeds":
            skip_next = True
        elif not tok.startswith(("--seeds=", "--nseeds=")):
            out.append(tok)
    return [*out, "--seeds", str(seed)]


def derive_seeds(
    seeds: Sequence[str] | None, nseeds: int, seed_base: int
) -> list[int]:
    """Explicit seeds win; else nseeds random ones from seed_base; else [42]."""
    rng = random.Random(seed_base & 0xFFFF_FFFF)
    if seeds:
        return [utils.normalize_seed(rng, s) for s in seeds]
    if nseeds > 0:
        return [utils.normalize_seed(rng, "random") for _ in range(nseeds)]
    return [DEFAULT_SEED]


def configure_logging(verbosity: str) -> None:
    """Root logger setup shared by the runner and pytest's capture."""
    level = logging.getLevelName(verbosity.upper())
    if not isinstance(level, int):
        level = logging.INFO
    if os.getenv("COCOTB_REDUCED_LOG_FMT") == "1":
        logging.basicConfig(level=level, format="%(levelname).1s %(name)s: %(message)s")
    else:
        logging.basicConfig(
            level=level,
            format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    logging.getLogger().setLevel(level)


# --- simulator inputs ---


def simulator_plusargs(ctx: RunContext) -> list[str]:
    """Bench settings as plusargs (read in the simulator by utils_cli)."""
    plusargs = [
        f"+CHECK_EN={int(ctx.check_en)}",
        f"+COVERAGE_EN={int(ctx.coverage_en)}",
    ]
    if ctx.num_items is not None:
        plusargs.append(f"+GEN_NUM_ITEMS={ctx.num_items}")
    plusargs.extend(ctx.plusargs)
    if ctx.sim == "icarus" and ctx.waves:
        # read by the runner's dump module, so it has to be a plusarg
        plusargs.append(f"+dumpfile_path={ctx.wave_file}")
    return plusargs


def simulator_env(ctx: RunContext) -> dict[str, str]:
    """Environment for the simulator process only.

    The bench reads its settings from COCOTB_PLUSARGS, so the plusargs are
    repeated there.
    """
    return {
        "COCOTB_RANDOM_SEED": str(ctx.seed),
        "COCOTB_LOG_LEVEL": ctx.verbosity.upper(),
        "COCOTB_PLUSARGS": " ".join(simulator_plusargs(ctx)),
        "COV_YAML": str(ctx.run_dir / "coverage.yaml"),
    }


def compile_args(ctx: RunContext) -> list[str]:
    args: list[str] = []
    if ctx.sim == "verilator":
        args += ["--timing", "--autoflush"]
        if ctx.waves:
            args.append("--trace-fst" if ctx.wave_ext == "fst" else "--trace")
    # last, so users can override the defaults above
    return args + list(ctx.build_args)


def _write_json(path: Path, data: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, default=str), encoding="utf-8")


# --- actions ---


def build(ctx: RunContext) -> Path:
    """Compile the DUT into ctx.build_dir and record how it went."""
    build_dir = ctx.build_dir
    record = {
        "toplevel": rtl.TOPLEVEL,
        "sources": [str(p) for p in rtl.sources()],
        "sim": ctx.sim,
        "waves": ctx.waves,
        "wave_ext": ctx.wave_ext,
        "build_args": compile_args(ctx),
        "fingerprint": ctx.fingerprint,
    }
    _write_json(build_dir / "manifest.json", {**record, "status": "started"})
    _log.info("building %s in %s", rtl.TOPLEVEL, build_dir)
    try:
        get_runner(ctx.sim).build(
            sources=rtl.sources(),
            hdl_toplevel=rtl.TOPLEVEL,
            timescale=("1ns", "1ps"),
            waves=ctx.waves,
            build_dir=build_dir,
            build_args=compile_args(ctx),
            log_file=build_dir / "build.log",
            always=ctx.build_force,
        )
    except Exception:
        _write_json(
            build_dir / "manifest.json",
            {**record, "status": "failed", "at": utils.iso_utc()},
        )
        raise
    built = {**record, "status": "built", "at": utils.iso_utc()}
    _write_json(build_dir / "manifest.json", built)
    return build_dir


def simulate(ctx: RunContext) -> tuple[int, int]:
    """Run the pyuvm tests for ctx.seed; return (tests, failures).

    Raises AssertionError when any test failed, so pytest marks the run.
    """
    run_dir = ctx.run_dir
    run_dir.mkdir(parents=True, exist_ok=True)
    test_args: list[str] = []
    if ctx.sim == "verilator" and ctx.waves:
        test_args = ["--trace-file", str(ctx.wave_file)]
    _log.info("running %s seed=%d in %s", ctx.testcase or "all", ctx.seed, run_dir)
    results_xml = get_runner(ctx.sim).test(
        hdl_toplevel=rtl.TOPLEVEL,
        hdl_toplevel_lang="verilog",
        test_module=TEST_MODULE,
        testcase=ctx.testcase,
        seed=ctx.seed,
        waves=ctx.waves,
        build_dir=ctx.build_dir,
        test_dir=run_dir,
        test_args=test_args,
        plusargs=simulator_plusargs(ctx),
        extra_env=simulator_env(ctx),
        log_file=run_dir / "test.log",
        results_xml=run_dir / "results.xml",
    )
    num_tests, num_failed = get_results(Path(results_xml))
    _log.info("%d test(s), %d failure(s)", num_tests, num_failed)
    assert num_failed == 0, f"{num_failed} of {num_tests} test(s) failed, see {run_dir}"
    return num_tests, num_failed


# --- pytest session per seed ---


class _Session:
    ctx: RunContext | None = None


def test_framework() -> None:
    """Collected by the per-seed pytest session: build and/or simulate."""
    ctx = _Session.ctx
    if ctx is None:
        raise RuntimeError("test_framework runs only under dffbench-dv")
    if ctx.cmd in ("build", "both"):
        build(ctx)
    elif not ctx.build_dir.is_dir():
        raise RuntimeError(f"no build at {ctx.build_dir}; run with --cmd build first")
    if ctx.cmd in ("test", "both"):
        simulate(ctx)


def run_seed(ctx: RunContext) -> int:
    """One pytest session for ctx; writes the run manifest, returns 0 if expected."""
    _Session.ctx = ctx
    started = time.monotonic()
    pytest_rc = pytest.main([*PYTEST_OPTS, FRAMEWORK_NODE])
    elapsed = time.monotonic() - started

    status = "PASS" if pytest_rc == 0 else "FAIL"
    replay = utils.pretty_cmd(["dffbench-dv", *replay_argv(ctx.argv, ctx.seed)])
    _write_json(
        ctx.run_dir / "manifest.json",
        {
            "status": status,
            "expect": ctx.expect,
            "seed": ctx.seed,
            "testcase": ctx.testcase or "all",
            "duration_s": round(elapsed, 3),
            "finished_at": utils.iso_utc(),
            "build_dir": ctx.build_dir,
            "replay_cmd": replay,
            "context": dataclasses.asdict(ctx),
        },
    )
    ok = status == ctx.expect
    tag = f"{status} ({'EXPECTED' if ok else 'UNEXPECTED'})"
    print(f"{(utils.green if ok else utils.red)(tag)}: {replay}  [{elapsed:.1f}s]")
    return 0 if ok else 1


def main(argv: Sequence[str] | None = None) -> int:
    """Build once, then run every seed; non-zero if any outcome was unexpected."""
    argv = list(sys.argv[1:] if argv is None else argv)
    args = parse_args(argv)
    validate_args(args)
    configure_logging(args.verbosity)
    base = RunContext.from_args(args, argv)
    if base.waves and base.wave_ext != base.waves_fmt:
        _log.warning(
            "%s writes %s waves, not %s", base.sim, base.wave_ext, base.waves_fmt
        )

    if base.cmd == "build":
        tag = f"{base.build_dir.name}.build"
        return run_seed(dataclasses.replace(base, run_tag=tag))

    seeds = derive_seeds(args.seeds, args.nseeds, args.seed_base)
    _log.info("seeds: %s", seeds)
    rc = 0
    for i, seed in enumerate(seeds):
        # compile with the first seed only
        cmd = "test" if base.cmd == "both" and i > 0 else None
        rc |= run_seed(base.for_seed(seed, cmd=cmd))
    return rc


if __name__ == "__main__":
    # pytest imports this file as dffbench.tools.dv; share one _Session
    sys.modules.setdefault("dffbench.tools.dv", sys.modules[__name__])
    raise SystemExit(main())
