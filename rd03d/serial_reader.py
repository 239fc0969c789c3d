"""
rd03d.serial_reader
===================

pyserial glue for the RD-03D.

* `SerialByteSource` adapts a `serial.Serial` to the byte-source
  interface `RD03D.initialize()` expects.
* `RadarSerial` is an optional host-side poller: a background thread
  that keeps calling `radar.drain()`.  The decoder itself never spawns
  threads; use this only if the host has no loop of its own.

Usage
-----
    radar  = RD03D()
    radar.initialize(SerialByteSource.open("/dev/ttyUSB0"))
    radar.on_frame(on_frame)
    reader = RadarSerial(radar)
    reader.start()     # spawns a background thread
    reader.stop()      # clean shutdown
"""
from __future__ import annotations

import logging
import threading

import serial

from rd03d.constants import BAUD_RATE, DEFAULT_RX_BUFFER

log = logging.getLogger(__name__)


class SerialByteSource:
    def __init__(self, ser) -> None:
        self.ser = ser
        self._chunk = b""
        self._pos = 0

    @classmethod
    def open(cls, port: str, baud: int = BAUD_RATE,
             rx_buffer_size: int = DEFAULT_RX_BUFFER) -> "SerialByteSource":
        """Open *port* 8N1, non-blocking.  SerialException propagates."""
        ser = serial.Serial(port, baud,
                            bytesize=serial.EIGHTBITS,
                            parity=serial.PARITY_NONE,
                            stopbits=serial.STOPBITS_ONE,
                            timeout=0)
        if hasattr(ser, "set_buffer_size"):      # Windows only
            ser.set_buffer_size(rx_size=rx_buffer_size)
        log.info("opened %s @ %d baud", port, baud)
        return cls(ser)

    # ───────────────────────── byte-source interface
    def available(self) -> int:
        return len(self._chunk) - self._pos + self.ser.in_waiting

    def read(self) -> int:
        # pull everything waiting in one syscall, hand it out byte by byte
        if self._pos >= len(self._chunk):
            self._chunk = self.ser.read(self.ser.in_waiting or 1)
            self._pos = 0
        b = self._chunk[self._pos]
        self._pos += 1
        return b

    def write(self, data: bytes) -> None:
        self.ser.write(data)
        self.ser.flush()

    def close(self) -> None:
        if self.ser.is_open:
            self.ser.close()
            log.info("serial port closed")


class RadarSerial:
    def __init__(self, radar, poll_interval: float = 0.005):
        self.radar = radar
        self.poll_interval = poll_interval
        self._stop    = threading.Event()
        self._thread  = threading.Thread(target=self._loop, daemon=True)

    # ───────────────────────── public API
    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        if self._thread.is_alive():
            self._thread.join(timeout=1)

    @property
    def running(self) -> bool:
        return self._thread.is_alive()

    # ───────────────────────── background poller thread
    def _loop(self):
        try:
            while not self._stop.is_set():
                self.radar.drain()
                self._stop.wait(self.poll_interval)
        except serial.SerialException as exc:
            log.error("serial link failed, poller stopped: %s", exc)
