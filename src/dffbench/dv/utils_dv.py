# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dffbench/dv/utils_dv.py

"""Helpers shared by the bench components.

- Errors: ProtocolError for broken bench wiring, ConfigKeyError for a missing
  config_db entry.
- Config DB: typed reads (pull_int, pull_bool) and plain get/set wrappers
  around pyuvm's ConfigDB.
- Signals: DUT handle lookup and X/Z-aware bit reads.
- Logging: every bench logger follows COCOTB_LOG_LEVEL.
"""

from __future__ import annotations

import logging
import os
from typing import Any, cast

import pyuvm
from cocotb.handle import SimHandleBase
from cocotb.types import Logic
from pyuvm import error_classes


class ProtocolError(RuntimeError):
    """The bench broke one of its own rules (bad bit, second writer, X/Z)."""


class ConfigKeyError(KeyError):
    """A config_db entry the bench cannot run without is missing."""


# --- logging ---


def desired_log_level(default: int = logging.INFO) -> int:
    level = logging.getLevelName((os.getenv("COCOTB_LOG_LEVEL") or "").upper())
    return level if isinstance(level, int) else default


def configure_component_logger(comp: pyuvm.uvm_component) -> None:
    comp.set_logging_level(desired_log_level())


def configure_non_component_logger(logger: logging.Logger) -> None:
    """Level from the environment; records go to cocotb's root handlers."""
    logger.setLevel(desired_log_level())
    logger.propagate = True


# --- config DB ---


def uvm_config_db() -> Any:
    # Looked up on every call: pyuvm builds a new ConfigDB for each test.
    return pyuvm.ConfigDB()


def uvm_config_db_get_try(comp: pyuvm.uvm_component, key: str) -> Any | None:
    """Value visible to comp under key, or None."""
    try:
        return uvm_config_db().get(comp, "", key)
    except error_classes.UVMConfigItemNotFound:
        return None


def uvm_config_db_get(comp: pyuvm.uvm_component, key: str) -> Any:
    value = uvm_config_db_get_try(comp, key)
    if value is None:
        raise ConfigKeyError(
            f"{comp.get_full_name()}: config_db has no {key!r} "
            "(the test's build_phase publishes it)"
        )
    return value


def uvm_config_db_set(
    ctx: pyuvm.uvm_component | None, inst_name: str, key: str, value: Any
) -> None:
    uvm_config_db().set(ctx, inst_name, key, value)


def pull_int(comp: pyuvm.uvm_component, key: str, default: int) -> int:
    """Int from config_db; default when unset or not an int (bools excluded)."""
    value = uvm_config_db_get_try(comp, key)
    if isinstance(value, bool) or not isinstance(value, int):
        return default
    return value


def pull_bool(comp: pyuvm.uvm_component, key: str, default: bool) -> bool:
    value = uvm_config_db_get_try(comp, key)
    return value if isinstance(value, bool) else default


# --- signals ---


def get_signal(dut: Any, signal_name: str) -> SimHandleBase:
    """dut.<signal_name>, or RuntimeError naming the missing port."""
    handle = getattr(dut, signal_name, None)
    if handle is None or not hasattr(handle, "value"):
        raise RuntimeError(f"Signal '{signal_name}' not found on DUT")
    return cast(SimHandleBase, handle)


def get_signal_value_int(value: Logic) -> int | None:
    """0/1 for a resolved bit, None for X/Z."""
    return int(value) if value.is_resolvable else None


def as_bit(name: str, value: Any) -> int:
    """Return value as 0/1 or raise ProtocolError."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int) and value in (0, 1):
        return value
    raise ProtocolError(f"{name} must be a bit (0 or 1), got {value!r}")
