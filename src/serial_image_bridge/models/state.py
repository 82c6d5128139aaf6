"""
Sequencer State Models
======================

Lifecycle states and the running report of a transmission run.

Transitions:
    IDLE → CONFIGURING → STREAMING ⇄ DRAINING → DONE
    Any non-terminal state → FAILED

    DRAINING is the paced wait after frame i has been written and before
    frame i+1 is decoded.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class SequencerState(str, Enum):
    """
    Discrete states of the transmission sequencer.
    
    Attributes:
        IDLE: Constructed, not yet started
        CONFIGURING: Opening and configuring the serial link
        STREAMING: Decoding and writing the current index
        DRAINING: Waiting out the pacing interval after a write
        DONE: Every index was transmitted (terminal)
        FAILED: A fatal error stopped the run (terminal)
    """
    
    IDLE = "IDLE"
    CONFIGURING = "CONFIGURING"
    STREAMING = "STREAMING"
    DRAINING = "DRAINING"
    DONE = "DONE"
    FAILED = "FAILED"
    
    @property
    def is_terminal(self) -> bool:
        return self in (SequencerState.DONE, SequencerState.FAILED)


@dataclass
class SequenceReport:
    """Progress and outcome of one run, updated as it happens."""
    
    state: SequencerState = SequencerState.IDLE
    current_index: Optional[int] = None
    indices_sent: List[int] = field(default_factory=list)
    bytes_written: int = 0
    started_at: Optional[float] = None
    finished_at: Optional[float] = None
    error: Optional[str] = None
    
    @property
    def frames_sent(self) -> int:
        return len(self.indices_sent)
    
    @property
    def duration_seconds(self) -> Optional[float]:
        if self.started_at is None or self.finished_at is None:
            return None
        return self.finished_at - self.started_at
    
    def to_dict(self) -> dict:
        """Export report as dict."""
        return {
            "state": self.state.value,
            "current_index": self.current_index,
            "frames_sent": self.frames_sent,
            "bytes_written": self.bytes_written,
            "duration_seconds": self.duration_seconds,
            "error": self.error,
        }
