"""
Decoder Tests
=============

Hex-dump tokenization, zero substitution and size enforcement.
"""

import io

import numpy as np
import pytest

from serial_image_bridge.errors import FormatError, ImageIOError
from serial_image_bridge.images import (
    ZERO_SUBSTITUTE,
    decode_stream,
    decode_token,
    decode_tokens,
    encode_image,
    load_image,
)


class TestDecodeToken:
    """Single token decoding."""
    
    @pytest.mark.parametrize("token,expected", [
        ("ff", 255),
        ("FF", 255),
        ("a", 10),
        ("7f", 127),
        ("01", 1),
        ("1", 1),
    ])
    def test_valid_tokens(self, token, expected):
        assert decode_token(token) == expected
    
    @pytest.mark.parametrize("token", ["00", "0"])
    def test_zero_becomes_ascii_zero(self, token):
        assert decode_token(token) == ZERO_SUBSTITUTE == 48
    
    @pytest.mark.parametrize("token", ["0x1f", "fff", "zz", "-1", "1g", ""])
    def test_invalid_tokens(self, token):
        with pytest.raises(FormatError) as exc_info:
            decode_token(token, source="img1.raw", position=5)
        assert exc_info.value.position == 5
        assert exc_info.value.source == "img1.raw"


class TestDecodeStream:
    """Whole-image decoding from text."""
    
    def test_round_trip_substitutes_zero(self):
        """Encoding then decoding reproduces the data except 0 → '0'."""
        data = bytes(range(256))
        text = encode_image(data, 16)
        
        decoded = decode_stream(io.StringIO(text), 16)
        
        expected = bytes(48 if b == 0 else b for b in data)
        assert decoded.tobytes() == expected
        assert decoded[0] == 48
        assert decoded[48] == 48
        assert 0 not in decoded
    
    def test_tokens_wrapped_across_arbitrary_lines(self):
        text = "01 02\n03\t04 05 06 07\n\n08 09 0a 0b 0c 0d 0e\n0f 10\n"
        decoded = decode_stream(io.StringIO(text), 4)
        assert decoded.tolist() == list(range(1, 17))
    
    def test_output_is_flat_uint8_of_width_squared(self):
        decoded = decode_stream(io.StringIO("ff " * 9), 3)
        assert decoded.dtype == np.uint8
        assert decoded.shape == (9,)
    
    def test_decoding_is_deterministic(self):
        text = encode_image(bytes(range(100, 125)), 5)
        first = decode_stream(io.StringIO(text), 5)
        second = decode_stream(io.StringIO(text), 5)
        assert np.array_equal(first, second)
    
    def test_too_few_tokens(self):
        with pytest.raises(FormatError) as exc_info:
            decode_stream(io.StringIO("01 02 03"), 2)
        assert "Too few tokens" in str(exc_info.value)
        assert exc_info.value.position == 3
    
    def test_too_many_tokens_stops_at_first_surplus(self):
        def tokens():
            yield from ["01", "02", "03", "04", "05"]
            raise AssertionError("decoder read past the first surplus token")
        
        with pytest.raises(FormatError) as exc_info:
            decode_tokens(tokens(), 2)
        assert "Too many tokens" in str(exc_info.value)
        assert exc_info.value.position == 5
    
    def test_empty_input(self):
        with pytest.raises(FormatError):
            decode_stream(io.StringIO(""), 2)
    
    def test_invalid_token_reports_position(self):
        with pytest.raises(FormatError) as exc_info:
            decode_stream(io.StringIO("01 02\nxx 04\n"), 2, source="img7.raw")
        assert exc_info.value.position == 3
        assert "img7.raw" in str(exc_info.value)


class TestLoadImage:
    """File-level decoding."""
    
    def test_load_image(self, tmp_path):
        path = tmp_path / "img1.raw"
        path.write_text("00 01\n02 03\n")
        
        image = load_image(path, width=2, index=1)
        
        assert image.index == 1
        assert len(image) == 4
        assert image.to_bytes() == b"0\x01\x02\x03"
        assert image.pixels.shape == (2, 2)
    
    def test_missing_file_raises_image_io_error(self, tmp_path):
        path = tmp_path / "img9.raw"
        with pytest.raises(ImageIOError) as exc_info:
            load_image(path, width=2, index=9)
        assert exc_info.value.path == str(path)
        assert isinstance(exc_info.value.__cause__, OSError)
    
    def test_directory_instead_of_file(self, tmp_path):
        with pytest.raises(ImageIOError):
            load_image(tmp_path, width=2, index=1)
    
    def test_non_ascii_content(self, tmp_path):
        path = tmp_path / "img1.raw"
        path.write_bytes("01 02 03 éé".encode("utf-8"))
        with pytest.raises(FormatError):
            load_image(path, width=2, index=1)
    
    def test_wrong_size_file(self, tmp_path):
        path = tmp_path / "img1.raw"
        path.write_text(encode_image(bytes(9), 3))
        with pytest.raises(FormatError):
            load_image(path, width=2, index=1)


class TestImageDirectory:
    """img<N>.raw naming and index range."""
    
    def test_paths_and_indices(self, tmp_path):
        from serial_image_bridge.images import ImageDirectory
        
        images = ImageDirectory(tmp_path, width=4, count=3)
        
        assert list(images.indices()) == [1, 2, 3]
        assert images.path_for(2) == tmp_path / "img2.raw"
        assert len(images) == 3
    
    @pytest.mark.parametrize("index", [0, 4])
    def test_index_out_of_range(self, tmp_path, index):
        from serial_image_bridge.images import ImageDirectory
        
        with pytest.raises(IndexError):
            ImageDirectory(tmp_path, width=4, count=3).path_for(index)
    
    def test_template_requires_index(self, tmp_path):
        from serial_image_bridge.images import ImageDirectory
        
        with pytest.raises(ValueError):
            ImageDirectory(tmp_path, width=4, count=3, template="image.raw")

    def test_template_with_extra_placeholder(self, tmp_path):
        from serial_image_bridge.images import ImageDirectory

        with pytest.raises(ValueError):
            ImageDirectory(tmp_path, width=4, count=3, template="img{index}{x}.raw")

    def test_load(self, tmp_path, write_images):
        from serial_image_bridge.images import ImageDirectory
        
        payloads = write_images(width=4, count=2, directory=tmp_path)
        image = ImageDirectory(tmp_path, width=4, count=2).load(2)
        
        assert image.index == 2
        assert image.to_bytes() == payloads[2]
