# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dffbench/dv/dff_channel.py

"""Typed, closable point-to-point channel between bench stages."""

from __future__ import annotations

import logging
from typing import Final, Generic, TypeVar

from cocotb.queue import Queue

from . import utils_dv
from .utils_dv import ProtocolError

T = TypeVar("T")


class ChannelClosed(Exception):
    """Raised by send() after close(), and by receives once closed and drained."""


class _Closed:  # pylint: disable=too-few-public-methods
    def __repr__(self) -> str:
        return "<closed>"


_CLOSED: Final = _Closed()


class DffChannel(Generic[T]):
    """Unbounded FIFO with one producer, one consumer, and an end-of-stream mark.

    The channel sits on top of ``cocotb.queue.Queue`` so a blocked receive
    suspends the calling cocotb task until an item (or the close mark) is
    queued. Sends never block. Items come out in the order they went in; the
    channel never drops, duplicates or reorders.

    Closing appends an end-of-stream mark behind anything still queued, so the
    consumer drains pending items first and then sees ChannelClosed on every
    further receive.

    Attributes:
        name: Label used in log messages and errors
        item_type: When set, send() rejects anything that is not an instance
        sent_count: Items accepted by send()
        recv_count: Items handed out by recv()/recv_nowait()

    Example:
        >>> ch = DffChannel[DffItem]("gen2drv", item_type=DffItem)
        >>> ch.send(DffItem.expected(1, 0))
        >>> ch.close()
        >>> ch.recv_nowait()
        DffItem(d=1, reset=0, q=0)
    """

    def __init__(self, name: str, item_type: type[T] | None = None) -> None:
        self.name: str = name
        self.item_type: type[T] | None = item_type
        self.sent_count: int = 0
        self.recv_count: int = 0
        self._closed: bool = False
        self._queue: Queue[T | _Closed] = Queue()
        self.logger: logging.Logger = logging.getLogger(f"uvm.{name}")
        utils_dv.configure_non_component_logger(self.logger)

    @property
    def closed(self) -> bool:
        """True once close() has been called."""
        return self._closed

    def __len__(self) -> int:
        n = self._queue.qsize()
        return n - 1 if self._closed and n else n

    def send(self, item: T) -> None:
        """Enqueue item; never blocks."""
        if self._closed:
            raise ChannelClosed(f"{self.name}: send on closed channel")
        if self.item_type is not None and not isinstance(item, self.item_type):
            raise ProtocolError(
                f"{self.name}: expected {self.item_type.__name__}, "
                f"got {type(item).__name__}"
            )
        self._queue.put_nowait(item)
        self.sent_count += 1

    def close(self) -> None:
        """Mark end of stream. Idempotent."""
        if self._closed:
            return
        self._closed = True
        self._queue.put_nowait(_CLOSED)
        self.logger.debug(
            "%s closed: sent=%d received=%d",
            self.name,
            self.sent_count,
            self.recv_count,
        )

    async def recv(self) -> T:
        """Return the next item, waiting if none is queued."""
        return self._take(await self._queue.get())

    def recv_nowait(self) -> T:
        """Return the next item or raise cocotb.queue.QueueEmpty."""
        return self._take(self._queue.get_nowait())

    def _take(self, item: T | _Closed) -> T:
        if isinstance(item, _Closed):
            # Leave the mark in place so later receives also see the close
            self._queue.put_nowait(item)
            raise ChannelClosed(f"{self.name}: closed and drained")
        self.recv_count += 1
        return item
