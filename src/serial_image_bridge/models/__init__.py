"""
Data Models
===========

Data types shared by the decoder, the link and the sequencer.

Models:
    - Image: Decoded square raster (numpy uint8, width x width)
    - TransmissionFrame: Image payload plus trailing delimiter byte
    - SequencerState: Lifecycle states of a run
    - SequenceReport: Progress and outcome of a run
"""

from serial_image_bridge.models.image import Image
from serial_image_bridge.models.frame import TransmissionFrame
from serial_image_bridge.models.state import SequenceReport, SequencerState

__all__ = [
    "Image",
    "TransmissionFrame",
    "SequencerState",
    "SequenceReport",
]
