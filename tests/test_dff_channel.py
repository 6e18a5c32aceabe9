# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: tests/test_dff_channel.py

"""DffChannel ordering and close semantics (non-blocking paths only)."""

from __future__ import annotations

import pytest
from cocotb.queue import QueueEmpty

from dffbench.dv.dff_channel import ChannelClosed, DffChannel
from dffbench.dv.dff_item import DffItem
from dffbench.dv.utils_dv import ProtocolError


def _items(n: int) -> list[DffItem]:
    return [DffItem.expected(d=i % 2, reset=(i // 2) % 2) for i in range(n)]


def test_fifo_order_is_preserved() -> None:
    ch: DffChannel[DffItem] = DffChannel("t", item_type=DffItem)
    items = _items(7)
    for tr in items:
        ch.send(tr)
    assert len(ch) == 7
    assert [ch.recv_nowait() for _ in items] == items
    assert (ch.sent_count, ch.recv_count) == (7, 7)


def test_same_instance_comes_out() -> None:
    ch: DffChannel[DffItem] = DffChannel("t")
    tr = DffItem.expected(1, 0)
    ch.send(tr)
    assert ch.recv_nowait() is tr


def test_empty_open_channel_raises_queue_empty() -> None:
    ch: DffChannel[DffItem] = DffChannel("t")
    with pytest.raises(QueueEmpty):
        ch.recv_nowait()


def test_close_drains_then_raises_every_time() -> None:
    ch: DffChannel[DffItem] = DffChannel("t")
    items = _items(2)
    for tr in items:
        ch.send(tr)
    ch.close()
    assert ch.closed
    assert len(ch) == 2
    assert ch.recv_nowait() == items[0]
    assert ch.recv_nowait() == items[1]
    for _ in range(3):
        with pytest.raises(ChannelClosed):
            ch.recv_nowait()
    assert len(ch) == 0


def test_close_is_idempotent() -> None:
    ch: DffChannel[DffItem] = DffChannel("t")
    ch.close()
    ch.close()
    assert len(ch) == 0
    with pytest.raises(ChannelClosed):
        ch.recv_nowait()


def test_send_after_close_raises() -> None:
    ch: DffChannel[DffItem] = DffChannel("t")
    ch.close()
    with pytest.raises(ChannelClosed):
        ch.send(DffItem.expected(0, 0))
    assert ch.sent_count == 0


def test_typed_channel_rejects_other_types() -> None:
    ch: DffChannel[DffItem] = DffChannel("t", item_type=DffItem)
    with pytest.raises(ProtocolError, match="expected DffItem"):
        ch.send((1, 0))  # type: ignore[arg-type]
    assert len(ch) == 0


def test_untyped_channel_accepts_anything() -> None:
    ch: DffChannel[object] = DffChannel("t")
    ch.send((1, 0))
    assert ch.recv_nowait() == (1, 0)
