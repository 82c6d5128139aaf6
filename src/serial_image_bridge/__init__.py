"""
Serial Image Bridge
===================

Host-side bridge that streams hex-dump encoded images to an embedded
device over a serial link.

Each image file (images/img<N>.raw) is decoded to width x width raw bytes
and written as one frame, terminated by a single newline byte, at a fixed
pace of one frame per second by default.

Components:
    - images: Hex-dump decoder and image directory
    - link: pyserial link (115200 8N1, raw, no flow control)
    - transmission: Sequencer state machine driving the run
    - observability: Hex-grid dump and PNG previews
    - config: YAML / environment / CLI settings

Example:
    from serial_image_bridge.config import load_config
    from serial_image_bridge.main import build_sequencer

    report = build_sequencer(load_config()).run()
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
