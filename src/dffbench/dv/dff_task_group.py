# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dffbench/dv/dff_task_group.py

"""Named set of cocotb tasks with explicit, bounded shutdown."""

from __future__ import annotations

import logging
from typing import Any, Coroutine

import cocotb
from cocotb.task import Task
from cocotb.triggers import Combine, First, Timer

from . import utils_dv


class DffTaskGroup:
    """Supervise the bench's concurrent stages.

    Every stage coroutine is started through start() under a unique name, so
    the env can later wait for a particular stage, list what is still
    running, and tear everything down deterministically with shutdown().

    Example:
        >>> group = DffTaskGroup("env.group")
        >>> group.start("mon", mon.run())
        >>> await group.wait("mon")
        >>> await group.shutdown(grace_ps=20_000)
        >>> group.pending()
        []
    """

    def __init__(self, name: str = "group") -> None:
        self.name: str = name
        self._tasks: dict[str, Task] = {}
        self.logger: logging.Logger = logging.getLogger(f"uvm.{name}")
        utils_dv.configure_non_component_logger(self.logger)

    def __contains__(self, name: str) -> bool:
        return name in self._tasks

    def start(self, name: str, coro: Coroutine[Any, Any, Any]) -> Task:
        """Schedule coro as a new task; names must be unique in the group."""
        if name in self._tasks:
            coro.close()
            raise ValueError(f"{self.name}: task {name!r} already started")
        task = cocotb.start_soon(coro)
        self._tasks[name] = task
        self.logger.debug("started %s", name)
        return task

    async def wait(self, name: str) -> None:
        """Block until the named task finishes."""
        task = self._tasks[name]
        if not task.done():
            await task

    def pending(self) -> list[str]:
        """Names of tasks that have not finished, in start order."""
        return [name for name, task in self._tasks.items() if not task.done()]

    def cancel(self) -> None:
        """Cancel every task still pending."""
        for name in self.pending():
            self.logger.debug("cancelling %s", name)
            self._tasks[name].cancel()

    async def shutdown(self, grace_ps: int = 0) -> None:
        """Give pending tasks up to grace_ps to finish, then cancel the rest."""
        names = self.pending()
        if names and grace_ps > 0:
            waiting = [self._tasks[n] for n in names]
            await First(Timer(grace_ps, unit="ps"), Combine(*waiting))
        stragglers = self.pending()
        if stragglers:
            self.logger.debug("shutdown: cancelling %s", ", ".join(stragglers))
            self.cancel()
            # Let the scheduler deliver the cancellations
            await Timer(1, unit="step")
