"""
Hex Grid Renderer
=================

Human-readable console dump of a decoded image.

Output (one block per image):
    Image: <index>
    <width rows of space-separated lowercase hex samples>
    <blank line>

Samples are printed without zero padding, as they will appear on the wire
(so a zero sample prints as 30). This is diagnostic output only and is not
part of the wire contract.
"""

import sys
from typing import Optional, TextIO

from serial_image_bridge.models.image import Image


def render_hex_grid(image: Image) -> str:
    """Render an image as a hex grid block."""
    lines = [f"Image: {image.index}"]
    for row in image.pixels:
        lines.append(" ".join(f"{int(value):x}" for value in row) + " ")
    return "\n".join(lines) + "\n\n"


class GridPrinter:
    """
    Print decoded images as hex grids.
    
    GATED: Does nothing when disabled.
    
    Attributes:
        enabled: Whether grids are printed
    """
    
    def __init__(self, enabled: bool = True, stream: Optional[TextIO] = None) -> None:
        self.enabled = enabled
        self._stream = stream
    
    def __call__(self, image: Image) -> None:
        if not self.enabled:
            return
        stream = self._stream if self._stream is not None else sys.stdout
        stream.write(render_hex_grid(image))
        stream.flush()
