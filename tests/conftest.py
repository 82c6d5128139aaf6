"""
Test Configuration
==================

Pytest fixtures and test doubles for the serial image bridge.
"""

from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

import numpy as np
import pytest

from serial_image_bridge.errors import LinkError
from serial_image_bridge.images import write_image_file


ENV_VARS = (
    "BRIDGE_DEVICE_PATH",
    "BRIDGE_BAUD_RATE",
    "BRIDGE_IMAGE_DIR",
    "BRIDGE_IMAGE_WIDTH",
    "BRIDGE_IMAGE_COUNT",
    "BRIDGE_PACING_SECONDS",
    "BRIDGE_LOG_LEVEL",
)


class FakeLink:
    """
    In-memory link that records every write.
    
    Args:
        events: Shared list receiving ("write", nbytes) entries
        max_chunk: Accept at most this many bytes per write (short writes)
        fail_on_write: 1-based write call that raises LinkError
        incoming: Bytes returned by read()
    """
    
    def __init__(
        self,
        events: Optional[list] = None,
        max_chunk: Optional[int] = None,
        fail_on_write: Optional[int] = None,
        incoming: bytes = b"",
        fail_on_close: bool = False,
    ) -> None:
        self.events = events if events is not None else []
        self.max_chunk = max_chunk
        self.fail_on_write = fail_on_write
        self.incoming = incoming
        self.fail_on_close = fail_on_close
        self.writes: List[bytes] = []
        self.reads: List[int] = []
        self.write_calls = 0
        self.close_count = 0
    
    @property
    def closed(self) -> bool:
        return self.close_count > 0
    
    @property
    def data(self) -> bytes:
        return b"".join(self.writes)
    
    def write(self, data) -> int:
        self.write_calls += 1
        if self.fail_on_write == self.write_calls:
            raise LinkError("device unplugged")
        chunk = bytes(data)
        if self.max_chunk is not None:
            chunk = chunk[: self.max_chunk]
        self.writes.append(chunk)
        self.events.append(("write", len(chunk)))
        return len(chunk)
    
    def read(self, size: int) -> bytes:
        self.reads.append(size)
        data, self.incoming = self.incoming[:size], self.incoming[size:]
        return data
    
    def close(self) -> None:
        self.close_count += 1
        self.events.append(("close",))
        if self.fail_on_close:
            raise LinkError("close failed")


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep BRIDGE_* variables from the host out of every test."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def events() -> list:
    """Shared, ordered record of link and sleep activity."""
    return []


@pytest.fixture
def fake_sleep(events) -> Callable[[float], None]:
    """Sleep replacement that records instead of blocking."""
    def sleep(seconds: float) -> None:
        events.append(("sleep", seconds))
    return sleep


def sample_image(width: int, index: int) -> np.ndarray:
    """Deterministic image content for an index, zeros included."""
    values = (np.arange(width * width) * 7 + index * 31) % 256
    values[0] = 0
    return values.astype(np.uint8)


def wire_bytes(samples: np.ndarray) -> bytes:
    """Bytes the decoder should produce for samples."""
    return bytes(48 if value == 0 else int(value) for value in samples)


@pytest.fixture
def write_images(tmp_path) -> Callable[..., Dict[int, bytes]]:
    """
    Write img<N>.raw files and return the expected payload per index.
    
    Usage:
        payloads = write_images(width=4, count=3, skip=(2,))
    """
    def _write(
        width: int = 4,
        count: int = 3,
        skip: Iterable[int] = (),
        directory: Optional[Path] = None,
    ) -> Dict[int, bytes]:
        directory = directory or tmp_path / "images"
        directory.mkdir(parents=True, exist_ok=True)
        payloads = {}
        for index in range(1, count + 1):
            samples = sample_image(width, index)
            payloads[index] = wire_bytes(samples)
            if index not in skip:
                write_image_file(directory / f"img{index}.raw", samples, width)
        return payloads
    return _write
