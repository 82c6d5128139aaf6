"""
Transmission Frame
==================

The unit written to the serial link once per image.

Wire format:
    <width * width raw bytes><0x0A>

There is no length prefix and no checksum. The trailing newline is the
only framing signal the device firmware looks for.
"""

from dataclasses import dataclass
from typing import ClassVar

from serial_image_bridge.models.image import Image


@dataclass(frozen=True, slots=True)
class TransmissionFrame:
    """
    One image payload plus its delimiter byte.
    
    Attributes:
        index: Sequence index of the image this frame carries
        payload: Raw image bytes (without delimiter)
    """
    
    DELIMITER: ClassVar[bytes] = b"\n"
    
    index: int
    payload: bytes
    
    @classmethod
    def from_image(cls, image: Image) -> "TransmissionFrame":
        """Frame a decoded image."""
        return cls(index=image.index, payload=image.to_bytes())
    
    def to_bytes(self) -> bytes:
        """Full frame as written to the link."""
        return self.payload + self.DELIMITER
    
    def __len__(self) -> int:
        return len(self.payload) + len(self.DELIMITER)
    
    def __repr__(self) -> str:
        return f"TransmissionFrame(index={self.index}, length={len(self)})"
