"""
Pytest configuration for rd03d tests.

Provides a fake byte source, a hand-driven clock and a frame builder so
nothing here needs a radar on the bench.
"""
import struct
import sys
from collections import deque
from pathlib import Path

import pytest

# Ensure rd03d package is importable
sys.path.insert(0, str(Path(__file__).parent.parent))

from rd03d.constants import HEADER, TAIL  # noqa: E402


class FakeSource:
    """Deque-backed byte source that records everything written to it."""

    def __init__(self, data=b""):
        self.rx = deque(data)
        self.tx = bytearray()

    def push(self, data):
        self.rx.extend(data)

    def available(self):
        return len(self.rx)

    def read(self):
        return self.rx.popleft()

    def write(self, data):
        self.tx += data


class ManualClock:
    def __init__(self, start=10_000):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms


def _slot(raw_x=0, raw_y=0, raw_speed=0, raw_dist=0):
    return struct.pack("<4H", raw_x, raw_y, raw_speed, raw_dist)


def _frame(*slots, tail=TAIL):
    slots = list(slots) + [_slot()] * (3 - len(slots))
    return HEADER + b"".join(slots) + tail


@pytest.fixture
def slot():
    """slot(raw_x, raw_y, raw_speed, raw_dist) -> 8 wire bytes."""
    return _slot


@pytest.fixture
def frame():
    """frame(slot0, slot1, slot2, tail=...) -> 30 wire bytes."""
    return _frame


@pytest.fixture
def source():
    return FakeSource()


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def no_sleep(monkeypatch):
    """Skip the settle delay after mode commands."""
    monkeypatch.setattr("rd03d.link.time.sleep", lambda s: None)


@pytest.fixture
def radar(source, clock, no_sleep):
    from rd03d.link import RD03D
    r = RD03D(clock=clock)
    r.initialize(source)
    return r
