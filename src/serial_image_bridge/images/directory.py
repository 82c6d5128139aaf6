"""
Image Directory
===============

Maps 1-based sequence indices to encoded image files on disk.

Naming convention:
    <directory>/img<N>.raw for N = 1 .. count
"""

import logging
from pathlib import Path
from typing import Iterator, Union

from serial_image_bridge.images.decoder import load_image
from serial_image_bridge.models.image import Image


logger = logging.getLogger(__name__)


DEFAULT_TEMPLATE = "img{index}.raw"


class ImageDirectory:
    """
    Read-only view of a directory of encoded images.
    
    Files are never modified or deleted. Each index is read when
    load() is called for it, not before.
    
    Attributes:
        directory: Directory holding the encoded files
        width: Image side length
        count: Number of images (indices 1 .. count)
        template: File name template, formatted with index=N
    """
    
    def __init__(
        self,
        directory: Union[str, Path],
        width: int,
        count: int,
        template: str = DEFAULT_TEMPLATE,
    ) -> None:
        if width < 1:
            raise ValueError("width must be >= 1")
        if count < 0:
            raise ValueError("count must be >= 0")
        if "{index}" not in template:
            raise ValueError("template must contain '{index}'")
        try:
            template.format(index=1)
        except (KeyError, IndexError, ValueError) as e:
            raise ValueError(f"template is not formattable with index only: {e}") from e

        self.directory = Path(directory)
        self.width = width
        self.count = count
        self.template = template
    
    def path_for(self, index: int) -> Path:
        """File path for a sequence index."""
        if not 1 <= index <= self.count:
            raise IndexError(f"Image index {index} outside 1..{self.count}")
        return self.directory / self.template.format(index=index)
    
    def indices(self) -> Iterator[int]:
        """Sequence indices in transmission order."""
        return iter(range(1, self.count + 1))
    
    def load(self, index: int) -> Image:
        """Decode the image for a sequence index."""
        return load_image(self.path_for(index), self.width, index)
    
    def __len__(self) -> int:
        return self.count
    
    def __repr__(self) -> str:
        return (
            f"ImageDirectory({str(self.directory)!r}, width={self.width}, "
            f"count={self.count})"
        )
