"""
Export session data models.

ExportSession is the controller-owned value describing the one export being
tracked; the UI renders it and never mutates it. ProgressEvent is what the
encode service reports on its event channel.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Tuple

from .export_parameters import ExportParameters


class ExportPhase(Enum):
    """Lifecycle of an export session."""
    IDLE = "idle"
    SUBMITTING = "submitting"
    ACTIVE = "active"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (ExportPhase.COMPLETED, ExportPhase.FAILED, ExportPhase.CANCELLED)

    @property
    def is_busy(self) -> bool:
        return self in (ExportPhase.SUBMITTING, ExportPhase.ACTIVE)


class ProgressPhase(Enum):
    """Phase tag carried by a progress event."""
    PROGRESSING = "progressing"
    END = "end"
    ERROR = "error"

    @classmethod
    def from_ffmpeg(cls, value: str) -> 'ProgressPhase':
        """Map ffmpeg's ``progress=`` value onto a phase."""
        value = value.strip().lower()
        if value == "end":
            return cls.END
        if value == "error":
            return cls.ERROR
        return cls.PROGRESSING


@dataclass(frozen=True)
class ProgressEvent:
    """One notification from the encode service."""
    session_id: str
    phase: ProgressPhase
    processed_time_us: Optional[int] = None  # microseconds
    message: Optional[str] = None
    percent: Optional[float] = None  # only when the service knows the target duration

    @property
    def processed_seconds(self) -> Optional[float]:
        if self.processed_time_us is None:
            return None
        return self.processed_time_us / 1_000_000

    @property
    def is_terminal(self) -> bool:
        return self.phase in (ProgressPhase.END, ProgressPhase.ERROR)


@dataclass(frozen=True)
class ExportStarted:
    """Acknowledgment returned by the encode service on submission."""
    session_id: str
    output_path: str
    command: str = ""


@dataclass(frozen=True)
class ApproximateProgressPolicy:
    """
    Fallback progress estimate for a backend that only reports elapsed time.

    Each progress event without a percentage advances the indicator by
    ``increment``; nothing but a terminal ``end`` event moves it past
    ``ceiling``.
    """
    increment: float = 1.0
    ceiling: float = 95.0

    def __post_init__(self):
        if self.increment <= 0:
            raise ValueError(f"increment must be positive, got {self.increment}")
        if not (0 < self.ceiling < 100):
            raise ValueError(f"ceiling must be between 0 and 100 exclusive, got {self.ceiling}")

    def advance(self, current: float) -> float:
        """Next estimate when the event carries no percentage."""
        return min(self.ceiling, current + self.increment)

    def apply(self, current: float, percent: float) -> float:
        """Next estimate for an explicit percentage; never moves backwards."""
        return max(current, min(self.ceiling, percent))


@dataclass(frozen=True)
class ExportSession:
    """
    Snapshot of the tracked export.

    ``session_id`` is None until the encode service acknowledges a
    submission, and stays None when the submission is rejected.
    """
    phase: ExportPhase = ExportPhase.IDLE
    session_id: Optional[str] = None
    parameters: Optional[ExportParameters] = None
    output_path: Optional[str] = None
    command: Optional[str] = None
    progress_percent: float = 0.0
    processed_seconds: Optional[float] = None
    error_message: Optional[str] = None
    status_message: str = ""
    status_is_error: bool = False
    advisories: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def can_cancel(self) -> bool:
        return self.phase is ExportPhase.ACTIVE

    @property
    def can_reveal_output(self) -> bool:
        return self.phase is ExportPhase.COMPLETED and bool(self.output_path)

    @property
    def is_terminal(self) -> bool:
        return self.phase.is_terminal

    @property
    def progress_text(self) -> str:
        """Status text for the progress indicator."""
        if self.phase is ExportPhase.COMPLETED:
            return "Done"
        if self.phase is ExportPhase.SUBMITTING:
            return "Starting export..."
        if self.processed_seconds is not None:
            return f"Processed {self.processed_seconds:.1f}s"
        return ""

    def evolve(self, **changes) -> 'ExportSession':
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)
