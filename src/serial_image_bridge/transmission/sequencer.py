"""
Transmission Sequencer
======================

Drives the decode-frame-write-pace loop over a bounded index range.

States:
    IDLE → CONFIGURING → STREAMING ⇄ DRAINING → DONE
    Any non-terminal state → FAILED

Loop body, for index i = 1 .. count:
    1. Decode img<i> (failure → FAILED)
    2. Hand the image to the diagnostic callback
    3. Write <payload><0x0A> as one frame, retrying short writes
    4. Wait pacing_seconds (DRAINING)
    5. i += 1

Rules:
    - Frames go out strictly in increasing index order
    - Every error is fatal; nothing is retried
    - The link is closed on every exit path
    - No acknowledgment is expected from the device
"""

import logging
import time
from typing import Callable, Optional

from serial_image_bridge.images.directory import ImageDirectory
from serial_image_bridge.link.serial_link import Link, write_all
from serial_image_bridge.models.frame import TransmissionFrame
from serial_image_bridge.models.image import Image
from serial_image_bridge.models.state import SequenceReport, SequencerState


logger = logging.getLogger(__name__)


DEFAULT_PACING_SECONDS = 1.0
DEVICE_READ_SIZE = 256


class TransmissionSequencer:
    """
    Sequential image transmitter.
    
    Owns the link for the duration of run(): the link is created by
    link_factory when the run starts and closed when it ends.
    
    Attributes:
        images: Source of decoded images, by index
        pacing_seconds: Wait after each frame
        state: Current SequencerState
        report: Live SequenceReport for this run
        
    Example:
        sequencer = TransmissionSequencer(
            link_factory=lambda: open_serial_link(settings.link),
            images=ImageDirectory("images", width=16, count=10),
        )
        report = sequencer.run()
    """
    
    def __init__(
        self,
        link_factory: Callable[[], Link],
        images: ImageDirectory,
        pacing_seconds: float = DEFAULT_PACING_SECONDS,
        on_image: Optional[Callable[[Image], object]] = None,
        log_device_output: bool = False,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if pacing_seconds < 0:
            raise ValueError("pacing_seconds must be >= 0")
        
        self.images = images
        self.pacing_seconds = pacing_seconds
        self.report = SequenceReport()
        
        self._link_factory = link_factory
        self._on_image = on_image
        self._log_device_output = log_device_output
        self._sleep = sleep
        
        logger.info(
            f"TransmissionSequencer initialized: "
            f"count={images.count}, width={images.width}, "
            f"pacing={pacing_seconds}s"
        )
    
    @property
    def state(self) -> SequencerState:
        return self.report.state
    
    def _transition(self, new_state: SequencerState) -> None:
        logger.debug(f"Sequencer: {self.report.state.value} → {new_state.value}")
        self.report.state = new_state
    
    def run(self) -> SequenceReport:
        """
        Transmit every image once, in index order.
        
        Returns:
            Final report (state DONE)
            
        Raises:
            ConfigError: Link could not be opened (zero frames written)
            ImageIOError, FormatError: An image could not be decoded
            LinkError: A frame could not be fully written
            RuntimeError: run() was already called
        """
        if self.state is not SequencerState.IDLE:
            raise RuntimeError(f"Sequencer already ran (state={self.state.value})")
        
        self.report.started_at = time.monotonic()
        link: Optional[Link] = None
        
        try:
            self._transition(SequencerState.CONFIGURING)
            link = self._link_factory()
            
            self._transition(SequencerState.STREAMING)
            for index in self.images.indices():
                self._send_index(link, index)
            
            opened, link = link, None
            opened.close()
            self._transition(SequencerState.DONE)
        except BaseException as e:
            self._transition(SequencerState.FAILED)
            self.report.error = str(e) or type(e).__name__
            if link is not None:
                self._close_after_failure(link)
            raise
        finally:
            self.report.finished_at = time.monotonic()
        
        logger.info(
            f"Transmission complete: {self.report.frames_sent} frames, "
            f"{self.report.bytes_written} bytes"
        )
        return self.report
    
    def _send_index(self, link: Link, index: int) -> None:
        self.report.current_index = index
        
        image = self.images.load(index)
        if self._on_image is not None:
            self._on_image(image)
        
        frame = TransmissionFrame.from_image(image)
        written = write_all(link, frame.to_bytes())
        self.report.bytes_written += written
        self.report.indices_sent.append(index)
        logger.info(f"Sent image {index}/{self.images.count} ({written} bytes)")
        
        self._transition(SequencerState.DRAINING)
        self._sleep(self.pacing_seconds)
        if self._log_device_output:
            self._drain_device_output(link, index)
        self._transition(SequencerState.STREAMING)
    
    def _drain_device_output(self, link: Link, index: int) -> None:
        data = link.read(DEVICE_READ_SIZE)
        if data:
            logger.debug(f"Device output after image {index}: {data!r}")
    
    def _close_after_failure(self, link: Link) -> None:
        # must not mask the error that stopped the run
        try:
            link.close()
        except Exception as e:
            logger.warning(f"Error closing link after failure: {e}")
