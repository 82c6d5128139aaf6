"""
Image Preview
=============

Writes each decoded image as a grayscale PNG for visual inspection.

GATED BY CONFIG FLAG. Zero cost when disabled.
The PNG shows the bytes as transmitted, zero substitution included.
"""

import logging
from pathlib import Path
from typing import Optional, Union

import cv2

from serial_image_bridge.errors import SettingsError
from serial_image_bridge.models.image import Image


logger = logging.getLogger(__name__)


class PreviewWriter:
    """
    Save decoded images as PNG files.
    
    Attributes:
        directory: Output directory (None disables previews)
        scale: Integer upscaling factor (nearest neighbour)
    """
    
    def __init__(self, directory: Optional[Union[str, Path]] = None, scale: int = 1) -> None:
        if scale < 1:
            raise ValueError("scale must be >= 1")
        
        self.directory = Path(directory) if directory is not None else None
        self.scale = scale
        
        if self.directory is not None:
            try:
                self.directory.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise SettingsError(
                    f"Cannot create preview directory {self.directory}: {e.strerror or e}"
                ) from e
            logger.info(f"PreviewWriter enabled: {self.directory} (scale={scale})")
    
    @property
    def is_enabled(self) -> bool:
        return self.directory is not None
    
    def path_for(self, image: Image) -> Optional[Path]:
        if self.directory is None:
            return None
        return self.directory / f"img{image.index}.png"
    
    def __call__(self, image: Image) -> Optional[Path]:
        path = self.path_for(image)
        if path is None:
            return None
        
        pixels = image.pixels.copy()
        if self.scale > 1:
            side = image.width * self.scale
            pixels = cv2.resize(pixels, (side, side), interpolation=cv2.INTER_NEAREST)
        
        if not cv2.imwrite(str(path), pixels):
            logger.warning(f"Failed to write preview {path}")
            return None
        
        logger.debug(f"Wrote preview {path}")
        return path
