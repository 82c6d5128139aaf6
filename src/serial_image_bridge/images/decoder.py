"""
Image Decoder
=============

Decodes text hex-dump image files into raw image samples.

File format:
    Whitespace-separated hexadecimal tokens, one per sample, row-major,
    wrapped across arbitrary lines. Each token is 1-2 hex digits (00-FF).

Design Rules:
    - This is the ONLY place in the codebase that parses encoded images
    - Exactly width * width tokens, otherwise FormatError
    - Never writes past the image buffer: stops at the first surplus token
    - A sample that decodes to 0 is stored as ASCII '0' (0x30). The device
      firmware expects this substitution, so it is part of the wire contract
"""

import logging
import re
from pathlib import Path
from typing import Iterable, TextIO, Union

import numpy as np

from serial_image_bridge.errors import FormatError, ImageIOError
from serial_image_bridge.models.image import Image


logger = logging.getLogger(__name__)


ZERO_SUBSTITUTE = ord("0")

_TOKEN_RE = re.compile(r"[0-9A-Fa-f]{1,2}")


def decode_token(token: str, source: str = "<stream>", position: int = 0) -> int:
    """
    Decode one hex token to its wire byte value.
    
    Args:
        token: Text token (1-2 hex digits)
        source: Label used in error messages
        position: 1-based token position used in error messages
        
    Returns:
        Byte value, with 0 replaced by ord('0')
        
    Raises:
        FormatError: If the token is not 1-2 hex digits
    """
    if not _TOKEN_RE.fullmatch(token):
        raise FormatError(
            f"Invalid hex token {token!r} at position {position} in {source}",
            source=source,
            position=position,
        )
    value = int(token, 16)
    if value == 0:
        return ZERO_SUBSTITUTE
    return value


def decode_tokens(
    tokens: Iterable[str],
    width: int,
    source: str = "<stream>",
) -> np.ndarray:
    """
    Decode a token sequence into a flat sample array.
    
    Args:
        tokens: Hex tokens in row-major order
        width: Image side length
        source: Label used in error messages
        
    Returns:
        Flat np.ndarray of width * width samples, dtype=uint8
        
    Raises:
        FormatError: On an invalid token or a token count other than width²
    """
    expected = width * width
    samples = np.empty(expected, dtype=np.uint8)
    count = 0
    
    for token in tokens:
        if count == expected:
            raise FormatError(
                f"Too many tokens in {source}: expected {expected}",
                source=source,
                position=count + 1,
            )
        samples[count] = decode_token(token, source, count + 1)
        count += 1
    
    if count < expected:
        raise FormatError(
            f"Too few tokens in {source}: got {count}, expected {expected}",
            source=source,
            position=count,
        )
    
    return samples


def _iter_stream_tokens(stream: TextIO) -> Iterable[str]:
    for line in stream:
        yield from line.split()


def decode_stream(stream: TextIO, width: int, source: str = "<stream>") -> np.ndarray:
    """
    Decode an open text stream line by line.
    
    Tokens may be wrapped across any number of lines; spaces, tabs and
    newlines all separate tokens.
    """
    return decode_tokens(_iter_stream_tokens(stream), width, source)


def load_image(path: Union[str, Path], width: int, index: int) -> Image:
    """
    Read and decode one encoded image file.
    
    The file is opened, fully decoded and closed within the call.
    
    Args:
        path: Encoded image file
        width: Image side length
        index: Sequence index recorded on the returned Image
        
    Returns:
        Decoded Image
        
    Raises:
        ImageIOError: If the file cannot be opened or read
        FormatError: If its contents do not decode to exactly one image
    """
    source = str(path)
    try:
        with open(path, "r", encoding="ascii") as f:
            samples = decode_stream(f, width, source)
    except UnicodeDecodeError as e:
        raise FormatError(f"Non-ASCII content in {source}: {e}", source=source) from e
    except OSError as e:
        raise ImageIOError(f"Error opening image file {source}: {e.strerror or e}", path=source) from e
    
    logger.debug(f"Decoded {source}: {width}x{width} samples")
    return Image.from_samples(index=index, width=width, samples=samples)
