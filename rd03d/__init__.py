"""
rd03d package
=============

Frame decoder & link monitor for the Ai-Thinker RD-03D 24 GHz radar.
"""

from rd03d.decoder import FrameDecoder, ParserState
from rd03d.link import RD03D
from rd03d.target import Target

__all__ = [
    "constants",
    "config",
    "target",
    "decoder",
    "link",
    "serial_reader",
    "FrameDecoder",
    "ParserState",
    "RD03D",
    "Target",
]

__version__ = "1.0.0"
