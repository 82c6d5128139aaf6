"""
Serial Link
===========

pyserial-backed serial link and the write discipline used on it.

Line discipline:
    115200 baud, 8 data bits, no parity, 1 stop bit, no hardware or
    software flow control. pyserial configures a POSIX port in raw mode
    (no canonical input, echo, signal characters or output processing).
    Reads return whatever arrived once read_timeout has elapsed.

The device path is passed to serial.serial_for_url, so pyserial URLs such
as loop:// can stand in for real hardware.

Example:
    with open_serial_link(settings.link) as link:
        write_all(link, frame.to_bytes())
"""

import logging
from typing import Optional, Protocol

import serial

from serial_image_bridge.errors import ConfigError, LinkError


logger = logging.getLogger(__name__)


DEFAULT_BAUD_RATE = 115200
DEFAULT_READ_TIMEOUT = 1.0


class Link(Protocol):
    """Operations the sequencer needs from an opened, configured link."""
    
    def write(self, data: bytes) -> Optional[int]:
        ...
    
    def read(self, size: int) -> bytes:
        ...
    
    def close(self) -> None:
        ...


def write_all(link: Link, data: bytes) -> int:
    """
    Write every byte of data to the link.
    
    Short writes are retried with the remaining bytes until the link
    accepts all of them.
    
    Args:
        link: Open link
        data: Bytes to write
        
    Returns:
        Number of bytes written (always len(data))
        
    Raises:
        LinkError: If the link raises, or accepts no bytes on a write
    """
    view = memoryview(data)
    expected = len(view)
    written = 0
    
    while written < expected:
        try:
            n = link.write(view[written:])
        except LinkError:
            raise
        except Exception as e:
            raise LinkError(
                f"Write failed after {written}/{expected} bytes: {e}",
                bytes_written=written,
                expected=expected,
            ) from e
        
        if n is None or n <= 0:
            raise LinkError(
                f"Link accepted no bytes after {written}/{expected} bytes",
                bytes_written=written,
                expected=expected,
            )
        
        written += n
        if written < expected:
            logger.debug(f"Short write: {written}/{expected} bytes, retrying")
    
    return written


class SerialLink:
    """
    Serial port opened with the bridge's fixed line discipline.
    
    Attributes:
        device_path: Device node or pyserial URL
        baud_rate: Line speed in both directions
        read_timeout: Seconds a read waits for data
        write_timeout: Seconds a write may block (None = no limit)
        
    Example:
        link = SerialLink("/dev/ttyACM0").open()
        try:
            write_all(link, payload)
        finally:
            link.close()
    """
    
    def __init__(
        self,
        device_path: str,
        baud_rate: int = DEFAULT_BAUD_RATE,
        read_timeout: float = DEFAULT_READ_TIMEOUT,
        write_timeout: Optional[float] = None,
    ) -> None:
        self.device_path = device_path
        self.baud_rate = baud_rate
        self.read_timeout = read_timeout
        self.write_timeout = write_timeout
        
        self._serial: Optional[serial.SerialBase] = None
    
    @property
    def is_open(self) -> bool:
        return self._serial is not None and self._serial.is_open
    
    def open(self) -> "SerialLink":
        """
        Open and configure the port.
        
        Returns:
            self, for chaining
            
        Raises:
            ConfigError: If the device cannot be opened or configured
        """
        if self.is_open:
            return self
        
        try:
            self._serial = serial.serial_for_url(
                self.device_path,
                baudrate=self.baud_rate,
                bytesize=serial.EIGHTBITS,
                parity=serial.PARITY_NONE,
                stopbits=serial.STOPBITS_ONE,
                timeout=self.read_timeout,
                write_timeout=self.write_timeout,
                xonxoff=False,
                rtscts=False,
                dsrdtr=False,
            )
        except (serial.SerialException, ValueError, OSError) as e:
            raise ConfigError(
                f"Cannot open serial device {self.device_path}: {e}",
                device_path=self.device_path,
            ) from e
        
        logger.info(f"Opened {self.device_path} at {self.baud_rate} 8N1")
        return self
    
    def _require_open(self) -> serial.SerialBase:
        if self._serial is None or not self._serial.is_open:
            raise LinkError(f"Serial link {self.device_path} is not open")
        return self._serial
    
    def write(self, data: bytes) -> int:
        """Write data and wait until it has been transmitted."""
        port = self._require_open()
        try:
            n = port.write(data)
            port.flush()
        except serial.SerialTimeoutException as e:
            raise LinkError(
                f"Write to {self.device_path} timed out",
                expected=len(data),
            ) from e
        except serial.SerialException as e:
            raise LinkError(f"Write to {self.device_path} failed: {e}", expected=len(data)) from e
        return n
    
    def read(self, size: int) -> bytes:
        """Read up to size bytes, waiting at most read_timeout."""
        port = self._require_open()
        try:
            return port.read(size)
        except serial.SerialException as e:
            raise LinkError(f"Read from {self.device_path} failed: {e}") from e
    
    def close(self) -> None:
        """Close the port. Safe to call more than once."""
        if self._serial is None:
            return
        port, self._serial = self._serial, None
        try:
            port.close()
        except (serial.SerialException, OSError) as e:
            raise LinkError(f"Closing {self.device_path} failed: {e}") from e
        logger.info(f"Closed {self.device_path}")
    
    def __enter__(self) -> "SerialLink":
        return self.open()
    
    def __exit__(self, *args) -> None:
        self.close()
    
    def __repr__(self) -> str:
        state = "open" if self.is_open else "closed"
        return f"SerialLink({self.device_path!r}, {self.baud_rate}, {state})"


def open_serial_link(link_config) -> SerialLink:
    """
    Open a SerialLink from a LinkConfig.
    
    Args:
        link_config: serial_image_bridge.config.LinkConfig
        
    Returns:
        Opened SerialLink
    """
    return SerialLink(
        device_path=link_config.device_path,
        baud_rate=link_config.baud_rate,
        read_timeout=link_config.read_timeout_seconds,
        write_timeout=link_config.write_timeout_seconds,
    ).open()
