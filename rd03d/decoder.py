"""
rd03d.decoder
=============

Byte-at-a-time RD-03D frame synchroniser.

Frame layout (30 bytes, fixed)
------------------------------
    0-3    header  AA FF 03 00
    4-27   three 8-byte target slots
    28-29  tail    55 CC

Two states only:

    SYNC_HEADER ──header matched──▶ READ_BODY
    READ_BODY   ──30 bytes (tail ok / tail bad)──▶ SYNC_HEADER

The buffer and the three `Target` objects are allocated once and reused.
Nothing here raises for stream content; a bad tail just bumps
`error_count`.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, List

from rd03d.constants import (HEADER, HEADER_LEN, TAIL, TAIL_OFFSET,
                             FRAME_LEN, TARGET_LEN, MAX_TARGETS)
from rd03d.target import Target

log = logging.getLogger(__name__)


class ParserState(Enum):
    SYNC_HEADER = 0     # scanning for AA FF 03 00
    READ_BODY   = 1     # collecting the remaining 26 bytes


class FrameDecoder:
    def __init__(self) -> None:
        self._buf = bytearray(FRAME_LEN)
        self._view = memoryview(self._buf)
        self._sync_idx = 0
        self._frame_idx = 0
        self.state = ParserState.SYNC_HEADER

        self.targets: List[Target] = [Target() for _ in range(MAX_TARGETS)]
        self.frame_count = 0
        self.error_count = 0
        self._last_frame = b""

    # ───────────────────────── public API
    def feed(self, b: int) -> bool:
        """Consume one byte.  Returns True iff it completed a valid frame."""
        if self.state is ParserState.SYNC_HEADER:
            if b == HEADER[self._sync_idx]:
                self._buf[self._sync_idx] = b
                self._sync_idx += 1
                if self._sync_idx == HEADER_LEN:
                    self.state = ParserState.READ_BODY
                    self._frame_idx = HEADER_LEN
            elif b == HEADER[0]:
                # one byte of look-back: this may be a fresh header start
                self._buf[0] = b
                self._sync_idx = 1
            else:
                self._sync_idx = 0
            return False

        self._buf[self._frame_idx] = b
        self._frame_idx += 1
        if self._frame_idx < FRAME_LEN:
            return False

        ok = (self._buf[TAIL_OFFSET] == TAIL[0]
              and self._buf[TAIL_OFFSET + 1] == TAIL[1])
        if ok:
            self._decode_frame()
        else:
            self.error_count += 1
            log.debug("bad tail %s, frame dropped",
                      self._buf[TAIL_OFFSET:FRAME_LEN].hex())
        self.reset()
        return ok

    def feed_bytes(self, data: Iterable[int]) -> int:
        """Feed a chunk; returns the number of frames it completed."""
        return sum(self.feed(b) for b in data)

    def reset(self) -> None:
        self.state = ParserState.SYNC_HEADER
        self._sync_idx = 0
        self._frame_idx = 0

    def abort(self) -> bool:
        """
        Drop a partially received frame.  Counts as one error when a body
        was being collected; returns whether anything was discarded.
        """
        if self.state is not ParserState.READ_BODY:
            self.reset()
            return False
        self.error_count += 1
        log.debug("partial frame dropped after %d bytes", self._frame_idx)
        self.reset()
        return True

    @property
    def target_count(self) -> int:
        return sum(t.valid for t in self.targets)

    @property
    def last_frame(self) -> bytes:
        """Raw 30 bytes of the most recently accepted frame (b"" before any)."""
        return self._last_frame

    # ───────────────────────── internals
    def _decode_frame(self) -> None:
        self.frame_count += 1
        self._last_frame = bytes(self._buf)
        for i, t in enumerate(self.targets):
            off = HEADER_LEN + i * TARGET_LEN
            t.decode(self._view[off:off + TARGET_LEN])
        log.debug("frame #%d: %d target(s)", self.frame_count,
                  self.target_count)
