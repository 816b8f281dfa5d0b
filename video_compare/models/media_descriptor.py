"""
Media descriptor data model.

Immutable probe result for one input file. A descriptor is produced once per
probe and replaced wholesale on re-probe; it is never mutated in place.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ContainerInfo:
    """Container-level (format) information."""
    format_name: Optional[str] = None
    duration_sec: Optional[float] = None
    bitrate: Optional[int] = None  # bps


@dataclass(frozen=True)
class VideoStreamInfo:
    """First video stream of a file."""
    codec_name: Optional[str] = None
    profile: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    pix_fmt: Optional[str] = None
    color_space: Optional[str] = None
    color_range: Optional[str] = None
    color_transfer: Optional[str] = None
    color_primaries: Optional[str] = None
    bit_rate: Optional[int] = None
    avg_frame_rate: Optional[str] = None  # raw ffprobe fraction, e.g. "30000/1001"
    r_frame_rate: Optional[str] = None
    fps: Optional[float] = None
    frame_count: Optional[int] = None

    @property
    def has_geometry(self) -> bool:
        """True when both dimensions are known and positive."""
        return bool(self.width) and bool(self.height)

    @property
    def aspect_ratio(self) -> Optional[float]:
        """width / height, or None without geometry."""
        if not self.has_geometry:
            return None
        return self.width / self.height


@dataclass(frozen=True)
class AudioStreamInfo:
    """First audio stream of a file."""
    codec_name: Optional[str] = None
    channels: Optional[int] = None
    sample_rate: Optional[int] = None
    bit_rate: Optional[int] = None


@dataclass(frozen=True)
class MediaDescriptor:
    """
    Probe results for one input.

    Every leaf field is optional because ffprobe omits what it cannot
    determine. ``video`` and ``audio`` are None when the file has no
    stream of that type.
    """
    file: str
    size_bytes: Optional[int] = None
    container: ContainerInfo = ContainerInfo()
    video: Optional[VideoStreamInfo] = None
    audio: Optional[AudioStreamInfo] = None

    @property
    def width(self) -> Optional[int]:
        return self.video.width if self.video else None

    @property
    def height(self) -> Optional[int]:
        return self.video.height if self.video else None

    @property
    def aspect_ratio(self) -> Optional[float]:
        return self.video.aspect_ratio if self.video else None
