"""
rd03d.target
============

One tracked reflection, decoded in place from an 8-byte target slot.

Slot layout (four little-endian 16-bit words)
---------------------------------------------
    x        inverted sign-magnitude, mm   (MSB=1 → positive / right)
    y        offset 0x8000, mm             (forward distance)
    speed    inverted sign-magnitude, cm/s (MSB=1 → receding)
    dist     resolution code, passed through untouched

An all-zero x/y pair means "no target in this slot".
"""
from __future__ import annotations

import math
import struct
from typing import Tuple

_SLOT = struct.Struct("<4H")


def s15(u: int) -> int:
    """
    Convert an RD-03D sign-magnitude word to Python int.

    Rule: MSB=1 → positive, MSB=0 → negative.
    """
    return (u & 0x7FFF) if (u & 0x8000) else -(u & 0x7FFF)


def offset16(u: int) -> int:
    """Remove the 0x8000 bias and wrap the result to signed 16 bit."""
    v = (u - 0x8000) & 0xFFFF
    return v - 0x10000 if v & 0x8000 else v


class Target:
    __slots__ = ("x_mm", "y_mm", "speed_cm_s", "distance_raw", "valid")

    def __init__(self) -> None:
        self.clear()

    # ───────────────────────── derived geometry
    @property
    def distance_cm(self) -> float:
        return math.hypot(self.x_mm, self.y_mm) / 10.0

    @property
    def angle_deg(self) -> float:
        """Angle from the forward (y) axis; positive = right."""
        return math.degrees(math.atan2(self.x_mm, self.y_mm))

    # ───────────────────────── mutation
    def clear(self) -> None:
        self.x_mm = 0
        self.y_mm = 0
        self.speed_cm_s = 0
        self.distance_raw = 0
        self.valid = False

    def decode(self, slot) -> bool:
        """
        Decode one 8-byte slot (any buffer, e.g. a memoryview into the
        frame) into this target.  Returns the new `valid` flag.
        """
        raw_x, raw_y, raw_speed, raw_dist = _SLOT.unpack(slot)

        if not (raw_x or raw_y):
            self.clear()
            return False

        self.x_mm = s15(raw_x)
        self.y_mm = offset16(raw_y)
        self.speed_cm_s = s15(raw_speed)
        self.distance_raw = raw_dist
        self.valid = True
        return True

    # ───────────────────────── helpers
    def copy(self) -> "Target":
        t = Target()
        t.x_mm, t.y_mm = self.x_mm, self.y_mm
        t.speed_cm_s, t.distance_raw = self.speed_cm_s, self.distance_raw
        t.valid = self.valid
        return t

    def as_tuple(self) -> Tuple[int, int, int, int]:
        return (self.x_mm, self.y_mm, self.speed_cm_s, self.distance_raw)

    def __repr__(self) -> str:
        if not self.valid:
            return "Target(empty)"
        return (f"Target(x={self.x_mm}mm, y={self.y_mm}mm, "
                f"speed={self.speed_cm_s}cm/s, dist={self.distance_cm:.1f}cm, "
                f"angle={self.angle_deg:.1f}°)")
