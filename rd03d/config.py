"""
rd03d.config
============

Tiny helper that loads / saves *rd03d_config.json* and injects sensible
defaults for any missing keys.
"""

from __future__ import annotations
import json
from pathlib import Path

from rd03d.constants import (CFG_PATH, BAUD_RATE, DEFAULT_TIMEOUT_MS,
                             DEFAULT_RX_BUFFER)

_DEFAULT = {
    # serial link
    "serial_port": "/dev/ttyUSB0",
    "serial_baud": BAUD_RATE,
    "rx_buffer_size": DEFAULT_RX_BUFFER,

    # parser
    "timeout_ms": DEFAULT_TIMEOUT_MS,   # mid-frame inter-byte gap

    # host loop
    "poll_interval": 0.005,             # seconds between drain() calls
    "log_level": "INFO",
}


def load(path: Path = CFG_PATH) -> dict:
    try:
        with open(path) as fh:
            return {**_DEFAULT, **json.load(fh)}
    except FileNotFoundError:
        save(_DEFAULT, path)
        return dict(_DEFAULT)


def save(cfg: dict, path: Path = CFG_PATH) -> None:
    Path(path).write_text(json.dumps(cfg, indent=2))
