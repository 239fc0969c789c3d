"""
Entry-point.  Keeps top-level script tiny: open the port, poll, print.
"""
import logging
import time

from rd03d import config, RD03D
from rd03d.serial_reader import SerialByteSource

log = logging.getLogger("rd03d.main")


def print_targets(targets, count):
    for slot, t in enumerate(targets, 1):
        if t.valid:
            print(f"T{slot}: {t.distance_cm:7.1f} cm @ {t.angle_deg:6.1f}°  "
                  f"x={t.x_mm:6d} y={t.y_mm:6d} v={t.speed_cm_s:5d} cm/s")
    if not count:
        print("-- no targets")


def main():
    cfg = config.load()
    logging.basicConfig(
        level=cfg["log_level"],
        format="%(asctime)s %(levelname)-5s %(name)s: %(message)s",
    )

    src = SerialByteSource.open(cfg["serial_port"], cfg["serial_baud"],
                                cfg["rx_buffer_size"])
    radar = RD03D()
    radar.initialize(src, cfg["timeout_ms"])
    radar.on_frame(print_targets)

    was_connected = False
    try:
        while True:
            radar.drain()
            connected = radar.is_connected()
            if connected != was_connected:
                log.info("link %s (frames=%d errors=%d)",
                         "up" if connected else "lost",
                         radar.get_frame_count(), radar.get_error_count())
                was_connected = connected
            time.sleep(cfg["poll_interval"])
    except KeyboardInterrupt:
        pass
    finally:
        src.close()
        log.info("frames=%d errors=%d", radar.get_frame_count(),
                 radar.get_error_count())


if __name__ == "__main__":
    main()
