#!/usr/bin/env python3
"""
Test Image Generator
====================

Writes a set of hex-dump encoded images for bench testing the bridge.

Each image is a diagonal gradient shifted by its index, so consecutive
frames are easy to tell apart on the device display.

Usage:
    python scripts/make_images.py --out images --width 16 --count 10
"""

import argparse
import logging
import os
import sys

import numpy as np

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from serial_image_bridge.images import ImageDirectory, write_image_file


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S",
)
logger = logging.getLogger(__name__)


def gradient(width: int, index: int) -> np.ndarray:
    y, x = np.mgrid[0:width, 0:width]
    return (((x + y) * 255 // max(1, 2 * (width - 1)) + index * 8) % 256).astype(np.uint8)


def main() -> int:
    parser = argparse.ArgumentParser(description="Generate hex-dump test images")
    parser.add_argument("--out", default="images", help="Output directory")
    parser.add_argument("--width", type=int, default=16, help="Image side length")
    parser.add_argument("--count", type=int, default=10, help="Number of images")
    args = parser.parse_args()

    images = ImageDirectory(args.out, width=args.width, count=args.count)
    for index in images.indices():
        path = write_image_file(images.path_for(index), gradient(args.width, index), args.width)
        logger.info(f"Wrote {path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
