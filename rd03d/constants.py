"""
Hard-coded protocol constants & paths so every module can import them
without circular dependencies.
"""
from pathlib import Path

# -------- inbound data frame --------
HEADER      = bytes.fromhex("AAFF0300")     # frame header
TAIL        = bytes.fromhex("55CC")         # frame footer
HEADER_LEN  = len(HEADER)
TARGET_LEN  = 8                             # bytes per target slot
MAX_TARGETS = 3
FRAME_LEN   = HEADER_LEN + MAX_TARGETS * TARGET_LEN + len(TAIL)   # 30
TAIL_OFFSET = FRAME_LEN - len(TAIL)         # 28

# -------- outbound commands --------
#                                preamble    len   cmd   postamble
MULTI_TARGET_CMD = bytes.fromhex("FD FC FB FA 02 00 90 00 04 03 02 01")

# -------- link --------
BAUD_RATE           = 256000                # fixed by the sensor, 8N1
DEFAULT_TIMEOUT_MS  = 100                   # mid-frame inter-byte gap
CONNECTED_WINDOW_MS = 1000                  # liveness window
COMMAND_SETTLE_S    = 0.1                   # pause after a mode command
DEFAULT_RX_BUFFER   = 512

# -------- dirs --------
ROOT     = Path(__file__).resolve().parent.parent
CFG_PATH = ROOT / "rd03d_config.json"
