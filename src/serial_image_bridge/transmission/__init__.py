"""
Transmission Module
===================

Sequential decode-and-transmit control loop.

Components:
    - TransmissionSequencer: State machine driving one run
"""

from serial_image_bridge.transmission.sequencer import (
    DEFAULT_PACING_SECONDS,
    TransmissionSequencer,
)


__all__ = [
    "DEFAULT_PACING_SECONDS",
    "TransmissionSequencer",
]
