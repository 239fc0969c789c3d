"""
rd03d.link
==========

`RD03D` – the component the host talks to.  Wraps a `FrameDecoder` with
link-health bookkeeping and the byte-source plumbing.

Byte source
-----------
Anything with

    available() -> int        bytes ready to read
    read()      -> int        next byte (0-255)
    write(data: bytes)        outbound command

`rd03d.serial_reader.SerialByteSource` adapts a pyserial port.

Usage
-----
    radar = RD03D()
    radar.initialize(SerialByteSource.open("/dev/ttyUSB0"))
    radar.on_frame(lambda targets, count: ...)
    while True:
        radar.drain()          # poll often; never blocks

Callback signature
------------------
    callback(targets, count)

`targets` is the live list of three `Target` objects (slot order is the
wire order, empty slots have `valid=False`); `count` is how many are
valid.  The callback runs inside `drain()` and must not call it again.
Use `snapshot()` to keep a frame beyond the callback.
"""
from __future__ import annotations

import logging
import time
from typing import Callable, List, Optional

from rd03d.constants import (MULTI_TARGET_CMD, DEFAULT_TIMEOUT_MS,
                             CONNECTED_WINDOW_MS, COMMAND_SETTLE_S,
                             MAX_TARGETS)
from rd03d.decoder import FrameDecoder, ParserState
from rd03d.target import Target

log = logging.getLogger(__name__)

FrameCallback = Callable[[List[Target], int], None]


def monotonic_ms() -> int:
    return int(time.monotonic() * 1000)


class RD03D:
    def __init__(self, clock: Callable[[], int] = monotonic_ms) -> None:
        self._clock = clock
        self._src = None
        self._cb: Optional[FrameCallback] = None
        self._decoder = FrameDecoder()

        self._timeout_ms = DEFAULT_TIMEOUT_MS
        self._last_byte_ms = 0
        self._last_frame_ms: Optional[int] = None

    # ───────────────────────── lifecycle
    def initialize(self, byte_source, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> bool:
        """
        Attach the byte source, discard whatever the sensor sent before
        we were listening, put it into multi-target mode and arm the
        parser.
        """
        self._src = byte_source
        self.set_timeout_ms(timeout_ms)

        stale = 0
        while self._src.available():
            self._src.read()
            stale += 1
        if stale:
            log.debug("flushed %d stale byte(s)", stale)

        self.enable_multi_target()

        self._decoder.reset()
        self._last_byte_ms = self._clock()
        return True

    def enable_multi_target(self) -> None:
        """Send the mode-select command (safe to repeat)."""
        if self._src is None:
            log.warning("enable_multi_target() before initialize(); ignored")
            return
        self._src.write(MULTI_TARGET_CMD)
        log.info("multi-target mode command sent")
        time.sleep(COMMAND_SETTLE_S)

    # ───────────────────────── polling
    def drain(self) -> int:
        """
        Feed every byte currently available through the parser.

        A body left hanging for longer than the timeout is dropped (and
        counted) first.  Returns the number of frames completed.
        """
        if self._src is None:
            return 0

        now = self._clock()
        if (self._decoder.state is ParserState.READ_BODY
                and now - self._last_byte_ms > self._timeout_ms):
            self._decoder.abort()
            log.debug("mid-frame timeout (%d ms)", now - self._last_byte_ms)

        frames = 0
        while self._src.available():
            b = self._src.read()
            self._last_byte_ms = self._clock()
            if self._decoder.feed(b):
                frames += 1
                self._last_frame_ms = self._last_byte_ms
                if self._cb is not None:
                    self._cb(self._decoder.targets, self._decoder.target_count)
        return frames

    update = drain

    def on_frame(self, callback: Optional[FrameCallback]) -> None:
        """Register the (single) frame observer; replaces any previous one."""
        self._cb = callback

    # ───────────────────────── queries
    def get_target(self, index: int) -> Optional[Target]:
        if 0 <= index < MAX_TARGETS:
            return self._decoder.targets[index]
        return None

    def get_targets(self) -> List[Target]:
        return self._decoder.targets

    def get_target_count(self) -> int:
        return self._decoder.target_count

    def snapshot(self) -> List[Target]:
        return [t.copy() for t in self._decoder.targets]

    def get_frame_count(self) -> int:
        return self._decoder.frame_count

    def get_error_count(self) -> int:
        return self._decoder.error_count

    def is_connected(self) -> bool:
        if self._last_frame_ms is None:
            return False
        return self._clock() - self._last_frame_ms < CONNECTED_WINDOW_MS

    @property
    def state(self) -> ParserState:
        return self._decoder.state

    @property
    def last_frame(self) -> bytes:
        return self._decoder.last_frame

    # ───────────────────────── config
    def get_timeout_ms(self) -> int:
        return self._timeout_ms

    def set_timeout_ms(self, ms: int) -> None:
        if ms < 0:
            raise ValueError(f"timeout must be >= 0 ms, got {ms}")
        self._timeout_ms = int(ms)
