"""
Image Encoder
=============

Writes raw image bytes in the hex-dump text format read by the decoder.

Each sample becomes two lowercase hex digits; one image row per line.
No zero substitution happens here: the encoder writes what it is given.
"""

from pathlib import Path
from typing import Union

import numpy as np


def encode_image(data: Union[bytes, np.ndarray], width: int) -> str:
    """
    Encode raw samples as hex-dump text.
    
    Args:
        data: width * width samples (bytes or uint8 array)
        width: Image side length
        
    Returns:
        Text with one row of space-separated tokens per line
        
    Raises:
        ValueError: If the sample count is not width²
    """
    if isinstance(data, (bytes, bytearray)):
        samples = np.frombuffer(bytes(data), dtype=np.uint8)
    else:
        samples = np.asarray(data, dtype=np.uint8).ravel()

    if samples.size != width * width:
        raise ValueError(f"Expected {width * width} samples, got {samples.size}")
    
    rows = samples.reshape(width, width)
    return "".join(" ".join(f"{value:02x}" for value in row) + "\n" for row in rows)


def write_image_file(path: Union[str, Path], data: Union[bytes, np.ndarray], width: int) -> Path:
    """Encode samples and write them to path, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(encode_image(data, width), encoding="ascii")
    return path
