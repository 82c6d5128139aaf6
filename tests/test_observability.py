"""
Observability Tests
===================

Hex grid dump and PNG previews.
"""

import io

import cv2
import numpy as np
import pytest

from serial_image_bridge.errors import SettingsError
from serial_image_bridge.models import Image
from serial_image_bridge.observability import GridPrinter, PreviewWriter, render_hex_grid


def make_image(index=1):
    return Image.from_samples(index, 2, np.array([0x30, 0xFF, 0x01, 0x10], dtype=np.uint8))


class TestHexGrid:
    """Console grid rendering."""
    
    def test_render(self):
        assert render_hex_grid(make_image()) == "Image: 1\n30 ff \n1 10 \n\n"
    
    def test_printer_writes_to_stream(self):
        stream = io.StringIO()
        GridPrinter(stream=stream)(make_image(4))
        assert stream.getvalue().startswith("Image: 4\n")
    
    def test_disabled_printer_is_silent(self):
        stream = io.StringIO()
        GridPrinter(enabled=False, stream=stream)(make_image())
        assert stream.getvalue() == ""


class TestPreviewWriter:
    """PNG previews (gated)."""
    
    def test_disabled(self):
        writer = PreviewWriter()
        assert not writer.is_enabled
        assert writer(make_image()) is None
    
    def test_writes_png(self, tmp_path):
        writer = PreviewWriter(tmp_path / "preview")
        
        path = writer(make_image(3))
        
        assert path == tmp_path / "preview" / "img3.png"
        restored = cv2.imread(str(path), cv2.IMREAD_GRAYSCALE)
        assert np.array_equal(restored, make_image().pixels)
    
    def test_directory_path_is_a_file(self, tmp_path):
        blocker = tmp_path / "preview"
        blocker.write_text("")
        with pytest.raises(SettingsError):
            PreviewWriter(blocker)

    def test_upscaled_png(self, tmp_path):
        path = PreviewWriter(tmp_path, scale=4)(make_image())
        restored = cv2.imread(str(path), cv2.IMREAD_GRAYSCALE)
        assert restored.shape == (8, 8)
        assert restored[0, 0] == 0x30
        assert restored[7, 7] == 0x10
