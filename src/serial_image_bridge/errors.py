"""
Bridge Errors
=============

Exception hierarchy for the image decode-and-transmit pipeline.

Every error raised by this package derives from BridgeError. None of them
are retried locally: the CLI reports the message and exits non-zero.

Taxonomy:
    - ConfigError: Serial link could not be opened or configured
    - ImageIOError: Encoded image file could not be opened or read
    - FormatError: Token stream is malformed or has the wrong size
    - LinkError: Write to the device failed or was incomplete
    - SettingsError: Configuration file or values are invalid
"""

from typing import Optional


class BridgeError(Exception):
    """Base class for all bridge failures."""
    pass


class ConfigError(BridgeError):
    """Raised when the serial link cannot be opened or configured."""

    def __init__(self, message: str, device_path: Optional[str] = None) -> None:
        super().__init__(message)
        self.device_path = device_path


class ImageIOError(BridgeError):
    """Raised when an encoded image file cannot be opened or read."""

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path = path


class FormatError(BridgeError):
    """
    Raised when an encoded image does not decode to exactly one image.

    Attributes:
        source: File path (or stream label) being decoded
        position: 1-based token position where decoding stopped, if known
    """

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        position: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.source = source
        self.position = position


class LinkError(BridgeError):
    """
    Raised when a frame cannot be fully written to the link.

    Attributes:
        bytes_written: Bytes accepted by the link before the failure
        expected: Bytes that should have been written
    """

    def __init__(self, message: str, bytes_written: int = 0, expected: int = 0) -> None:
        super().__init__(message)
        self.bytes_written = bytes_written
        self.expected = expected


class SettingsError(BridgeError):
    """Raised when configuration cannot be loaded or validated."""
    pass
