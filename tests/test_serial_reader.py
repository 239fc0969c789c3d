from __future__ import annotations

import threading

import serial

from rd03d.constants import MULTI_TARGET_CMD
from rd03d.link import RD03D
from rd03d.serial_reader import SerialByteSource, RadarSerial


class FakeSerial:
    """Just enough of serial.Serial for the byte-source adapter."""

    def __init__(self, *args, **kwargs):
        self.args, self.kwargs = args, kwargs
        self.rx = bytearray()
        self.tx = bytearray()
        self.is_open = True
        self.reads = 0

    @property
    def in_waiting(self):
        return len(self.rx)

    def read(self, n=1):
        self.reads += 1
        out, self.rx = bytes(self.rx[:n]), self.rx[n:]
        return out

    def write(self, data):
        self.tx += data
        return len(data)

    def flush(self):
        pass

    def close(self):
        self.is_open = False


def test_byte_source_reads_in_bulk() -> None:
    ser = FakeSerial()
    ser.rx += b"\x01\x02\x03"
    src = SerialByteSource(ser)

    assert src.available() == 3
    assert [src.read() for _ in range(3)] == [1, 2, 3]
    assert src.available() == 0
    assert ser.reads == 1


def test_open_configures_port(monkeypatch) -> None:
    monkeypatch.setattr(serial, "Serial", FakeSerial)
    src = SerialByteSource.open("/dev/ttyFAKE")
    assert src.ser.args == ("/dev/ttyFAKE", 256000)
    assert src.ser.kwargs["timeout"] == 0
    assert src.ser.kwargs["parity"] == serial.PARITY_NONE

    src.close()
    assert not src.ser.is_open


def test_radar_over_fake_serial(monkeypatch, frame, slot) -> None:
    monkeypatch.setattr("rd03d.link.time.sleep", lambda s: None)
    ser = FakeSerial()
    ser.rx += b"\xDE\xAD"                      # stale, flushed on init
    radar = RD03D()
    radar.initialize(SerialByteSource(ser))
    assert bytes(ser.tx) == MULTI_TARGET_CMD

    ser.rx += frame(slot(0x8000 | 300, 0x8000 + 400)) * 2
    assert radar.drain() == 2
    assert radar.get_target(0).distance_cm == 50.0


class CountingRadar:
    def __init__(self, fail_after=None):
        self.calls = 0
        self.fail_after = fail_after
        self.polled = threading.Event()

    def drain(self):
        self.calls += 1
        self.polled.set()
        if self.fail_after is not None and self.calls >= self.fail_after:
            raise serial.SerialException("device unplugged")
        return 0


def test_poller_start_stop() -> None:
    radar = CountingRadar()
    reader = RadarSerial(radar, poll_interval=0.001)
    reader.start()
    assert radar.polled.wait(1)
    reader.stop()
    assert not reader.running
    assert radar.calls >= 1


def test_poller_exits_on_serial_error(caplog) -> None:
    radar = CountingRadar(fail_after=1)
    reader = RadarSerial(radar, poll_interval=0.001)
    reader.start()
    reader._thread.join(timeout=1)
    assert not reader.running
    assert "poller stopped" in caplog.text
