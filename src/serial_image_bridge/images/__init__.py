"""
Images Module
=============

Encoded image files: decoding, encoding and directory layout.

Components:
    - load_image / decode_stream / decode_tokens: Hex-dump decoder
    - encode_image / write_image_file: Hex-dump writer
    - ImageDirectory: img<N>.raw naming and per-index loading
"""

from serial_image_bridge.images.decoder import (
    ZERO_SUBSTITUTE,
    decode_stream,
    decode_token,
    decode_tokens,
    load_image,
)
from serial_image_bridge.images.encoder import encode_image, write_image_file
from serial_image_bridge.images.directory import ImageDirectory


__all__ = [
    "ZERO_SUBSTITUTE",
    "decode_token",
    "decode_tokens",
    "decode_stream",
    "load_image",
    "encode_image",
    "write_image_file",
    "ImageDirectory",
]
