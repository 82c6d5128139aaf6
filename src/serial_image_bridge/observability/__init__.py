"""
Observability Module
====================

Diagnostic output for decoded images.

This module provides:
    - render_hex_grid / GridPrinter: Console hex dump per image
    - PreviewWriter: Optional PNG per image (gated)

DESIGN RULES:
    - Does NOT touch the link
    - Does NOT change what is transmitted
"""

from serial_image_bridge.observability.grid import GridPrinter, render_hex_grid
from serial_image_bridge.observability.preview import PreviewWriter


__all__ = [
    "GridPrinter",
    "render_hex_grid",
    "PreviewWriter",
]
