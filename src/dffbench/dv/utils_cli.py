# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dffbench/dv/utils_cli.py

"""Bench settings from the environment and plusargs.

A setting NAME is looked up, first match wins, in:

1. environment variable NAME, then DFF_NAME
2. plusarg +NAME=value (a bare +NAME means true), taken from the first
   non-empty of PLUSARGS, COCOTB_PLUSARGS, DFF_PLUSARGS
3. the caller's default

A value that does not parse as the requested type is skipped, so a bad
environment value falls back to the plusarg and then to the default.

Ints accept 0x/0o/0b prefixes; bools accept 1/0, true/false, yes/no, on/off.

Factory overrides use the UVM plusarg names:
    +uvm_set_type_override=<requested>,<override>[,<replace 0|1>]
    +uvm_set_inst_override=<requested>,<override>,<instance path>
"""

from __future__ import annotations

import logging
import os
from typing import Callable, Iterator, TypeVar

import pyuvm

T = TypeVar("T")

ENV_PREFIX = "DFF_"
PLUSARG_VARS: tuple[str, ...] = ("PLUSARGS", "COCOTB_PLUSARGS", "DFF_PLUSARGS")

_BOOL_WORDS = {
    "1": True, "true": True, "yes": True, "y": True, "on": True,
    "0": False, "false": False, "no": False, "n": False, "off": False,
}  # fmt: skip


def _to_bool(text: str) -> bool | None:
    return _BOOL_WORDS.get(text.strip().lower())


def _to_int(text: str) -> int | None:
    try:
        return int(text.strip(), 0)
    except ValueError:
        return None


def iter_plusargs() -> Iterator[str]:
    """Tokens of the first non-empty plusarg variable."""
    for var in PLUSARG_VARS:
        text = os.environ.get(var)
        if text:
            yield from text.split()
            return


def _plusarg(name: str) -> str | None:
    for tok in iter_plusargs():
        key, sep, value = tok.partition("=")
        if key == f"+{name}":
            return value if sep else "1"
    return None


def _setting(name: str, convert: Callable[[str], T | None], default: T) -> T:
    candidates = (
        os.environ.get(name),
        os.environ.get(ENV_PREFIX + name),
        _plusarg(name),
    )
    for raw in candidates:
        if raw is None:
            continue
        value = convert(raw)
        if value is not None:
            return value
    return default


def get_bool_setting(name: str, default: bool) -> bool:
    return _setting(name, _to_bool, default)


def get_int_setting(name: str, default: int) -> int:
    return _setting(name, _to_int, default)


def get_str_setting(name: str, default: str) -> str:
    return _setting(name, str, default)


def apply_factory_overrides_from_plusargs(logger: logging.Logger | None = None) -> None:
    """Register every +uvm_set_*_override plusarg with pyuvm's factory.

    Malformed or rejected overrides are logged and skipped.
    """
    log = logger or logging.getLogger("uvm.factory_overrides")
    factory = pyuvm.uvm_factory()
    for tok in iter_plusargs():
        kind, _, body = tok.partition("=")
        fields = [f.strip() for f in body.split(",")]
        try:
            if kind == "+uvm_set_type_override" and len(fields) in (2, 3):
                replace = len(fields) == 2 or fields[2] != "0"
                factory.set_type_override_by_name(fields[0], fields[1], replace=replace)
            elif kind == "+uvm_set_inst_override" and len(fields) == 3:
                factory.set_inst_override_by_name(fields[0], fields[1], fields[2])
            elif kind in ("+uvm_set_type_override", "+uvm_set_inst_override"):
                log.warning("ignoring malformed %s", tok)
                continue
            else:
                continue
        except (KeyError, ValueError, TypeError) as e:
            log.warning("factory rejected %s: %s", tok, e)
            continue
        log.debug("factory override %s", tok)
