"""
Image Data Model
================

In-memory representation of one decoded raster image.

Design Rules:
    - Always square: width x width samples, row-major
    - Always complete: a partial image cannot be constructed
    - Immutable once built (frozen dataclass, read-only pixel array)
"""

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True, slots=True)
class Image:
    """
    Decoded square image, ready to be framed for the link.
    
    Attributes:
        index: 1-based sequence index of the source file (img<index>)
        width: Side length in samples
        pixels: uint8 array of shape (width, width)
    """
    
    index: int
    width: int
    pixels: np.ndarray
    
    def __post_init__(self) -> None:
        if self.width < 1:
            raise ValueError(f"Image width must be >= 1, got {self.width}")
        if self.pixels.dtype != np.uint8:
            raise ValueError(f"Invalid dtype for image {self.index}: {self.pixels.dtype}")
        if self.pixels.shape != (self.width, self.width):
            raise ValueError(
                f"Invalid shape for image {self.index}: {self.pixels.shape}, "
                f"expected ({self.width}, {self.width})"
            )
        self.pixels.setflags(write=False)
    
    @classmethod
    def from_samples(cls, index: int, width: int, samples: np.ndarray) -> "Image":
        """Build an image from a flat row-major sample array."""
        return cls(index=index, width=width, pixels=samples.reshape(width, width))
    
    @property
    def size(self) -> int:
        """Number of samples (width squared)."""
        return self.width * self.width
    
    def to_bytes(self) -> bytes:
        """Raw row-major payload bytes."""
        return self.pixels.tobytes()
    
    def __len__(self) -> int:
        return self.size
    
    def __repr__(self) -> str:
        """Compact repr that doesn't dump the pixels."""
        return f"Image(index={self.index}, width={self.width})"
