"""
Link Module
===========

Boundary to the serial device.

Components:
    - Link: Protocol of the operations the sequencer uses
    - SerialLink: pyserial implementation (8N1, raw, no flow control)
    - write_all: Write discipline that survives short writes
    - open_serial_link: Factory from LinkConfig
"""

from serial_image_bridge.link.serial_link import (
    DEFAULT_BAUD_RATE,
    DEFAULT_READ_TIMEOUT,
    Link,
    SerialLink,
    open_serial_link,
    write_all,
)


__all__ = [
    "DEFAULT_BAUD_RATE",
    "DEFAULT_READ_TIMEOUT",
    "Link",
    "SerialLink",
    "open_serial_link",
    "write_all",
]
