"""
Export parameters data model.

Defines the user-selected configuration of one export request.
"""

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Tuple


class ExportMode(Enum):
    """Which inputs feed the export."""
    SINGLE_A = "single-a"
    SINGLE_B = "single-b"
    SIDE_BY_SIDE = "side-by-side"


class VideoCodec(Enum):
    """Output video codecs offered by the tool."""
    H264 = "h264"
    H265 = "h265"

    @property
    def encoder(self) -> str:
        """ffmpeg encoder name."""
        return "libx265" if self is VideoCodec.H265 else "libx264"


CONTAINERS = ("mp4", "mkv", "mov")


@dataclass(frozen=True)
class ExportParameters:
    """
    Configuration for one export.

    Optional numeric fields use None for "empty". In side-by-side mode the
    per-axis fields (resize, fps, trim) are cleared and ``stack_height``
    carries the common output height instead.
    """

    # === Inputs & Mode ===
    mode: ExportMode = ExportMode.SINGLE_A
    input_a: str = ""
    input_b: str = ""

    # === Output ===
    output_path: str = ""
    container: str = "mp4"

    # === Encoding ===
    codec: VideoCodec = VideoCodec.H264
    crf: int = 23  # 0-51, lower = better quality
    audio_copy: bool = True

    # === Geometry ===
    resize_width: Optional[int] = None
    resize_height: Optional[int] = None
    keep_aspect: bool = True
    stack_height: Optional[int] = None

    # === Timing ===
    fps: Optional[float] = None
    source_fps: Optional[float] = None  # rate the trim frame numbers refer to
    trim_start_frame: Optional[int] = None
    trim_end_frame: Optional[int] = None

    # === Overlay labels ===
    label_a: Optional[str] = None
    label_b: Optional[str] = None

    def __post_init__(self):
        """Validate value ranges after initialization."""
        if not (0 <= self.crf <= 51):
            raise ValueError(f"CRF must be between 0 and 51, got {self.crf}")
        if self.container not in CONTAINERS:
            raise ValueError(f"Unsupported container: {self.container}")
        for name in ("resize_width", "resize_height", "stack_height"):
            value = getattr(self, name)
            if value is not None and value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")
        for name in ("fps", "source_fps"):
            value = getattr(self, name)
            if value is not None and (value <= 0 or not math.isfinite(value)):
                raise ValueError(f"{name} must be a positive finite number, got {value}")
        for name in ("trim_start_frame", "trim_end_frame"):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise ValueError(f"{name} must not be negative, got {value}")

    @property
    def is_side_by_side(self) -> bool:
        return self.mode is ExportMode.SIDE_BY_SIDE

    @property
    def selected_inputs(self) -> Tuple[str, ...]:
        """Input paths this mode reads from."""
        if self.mode is ExportMode.SINGLE_A:
            return (self.input_a,)
        if self.mode is ExportMode.SINGLE_B:
            return (self.input_b,)
        return (self.input_a, self.input_b)

    def with_changes(self, **changes) -> 'ExportParameters':
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def cleared_for_side_by_side(self) -> 'ExportParameters':
        """Copy with every per-axis geometry, fps and trim field cleared."""
        return replace(
            self,
            resize_width=None,
            resize_height=None,
            fps=None,
            source_fps=None,
            trim_start_frame=None,
            trim_end_frame=None,
        )

    def to_dict(self) -> dict:
        """Convert parameters to dictionary for logging and serialization."""
        return {
            'mode': self.mode.value,
            'input_a': self.input_a,
            'input_b': self.input_b,
            'output_path': self.output_path,
            'container': self.container,
            'codec': self.codec.value,
            'crf': self.crf,
            'audio_copy': self.audio_copy,
            'resize_width': self.resize_width,
            'resize_height': self.resize_height,
            'keep_aspect': self.keep_aspect,
            'stack_height': self.stack_height,
            'fps': self.fps,
            'source_fps': self.source_fps,
            'trim_start_frame': self.trim_start_frame,
            'trim_end_frame': self.trim_end_frame,
            'label_a': self.label_a,
            'label_b': self.label_b,
        }
