"""
Probe service.

Runs ffprobe on one file and normalizes its JSON output into a
MediaDescriptor.
"""

import json
import os
import subprocess
from pathlib import Path
from typing import Any, Dict, Optional

from core.exceptions import MediaProbeError, FFmpegNotFoundError
from core.result_types import Result

from .base_service import BaseService
from .interfaces import IProbeService
from ..core.binary_manager import binary_manager
from ..models.media_descriptor import (
    AudioStreamInfo, ContainerInfo, MediaDescriptor, VideoStreamInfo
)


def parse_rate(value: Optional[str]) -> Optional[float]:
    """
    Parse an ffprobe frame rate fraction ("30000/1001", "25/1", "25").

    Returns None for "0/0", a zero denominator or a malformed value.
    """
    if not value:
        return None
    try:
        if "/" in value:
            num, den = value.split("/", 1)
            num, den = float(num), float(den)
            if den == 0:
                return None
            rate = num / den
        else:
            rate = float(value)
    except ValueError:
        return None
    return rate if rate > 0 else None


def _to_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return None


def _to_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _first_stream(streams, codec_type: str) -> Optional[Dict[str, Any]]:
    for stream in streams:
        if stream.get("codec_type") == codec_type:
            return stream
    return None


def build_descriptor(file_path: str, data: Dict[str, Any]) -> MediaDescriptor:
    """
    Build a MediaDescriptor from ffprobe ``-show_format -show_streams`` JSON.

    Args:
        file_path: Probed file
        data: Decoded ffprobe output

    Returns:
        MediaDescriptor; fields ffprobe did not report stay None
    """
    fmt = data.get("format") or {}
    streams = data.get("streams") or []

    duration = _to_float(fmt.get("duration"))
    container = ContainerInfo(
        format_name=fmt.get("format_name"),
        duration_sec=duration,
        bitrate=_to_int(fmt.get("bit_rate")),
    )

    video = None
    video_stream = _first_stream(streams, "video")
    if video_stream is not None:
        avg_rate = video_stream.get("avg_frame_rate")
        r_rate = video_stream.get("r_frame_rate")
        fps = parse_rate(avg_rate) or parse_rate(r_rate)

        frame_count = _to_int(video_stream.get("nb_frames"))
        if frame_count is None and duration is not None and fps:
            frame_count = int(round(duration * fps))

        video = VideoStreamInfo(
            codec_name=video_stream.get("codec_name"),
            profile=video_stream.get("profile"),
            width=_to_int(video_stream.get("width")),
            height=_to_int(video_stream.get("height")),
            pix_fmt=video_stream.get("pix_fmt"),
            color_space=video_stream.get("color_space"),
            color_range=video_stream.get("color_range"),
            color_transfer=video_stream.get("color_transfer"),
            color_primaries=video_stream.get("color_primaries"),
            bit_rate=_to_int(video_stream.get("bit_rate")),
            avg_frame_rate=avg_rate,
            r_frame_rate=r_rate,
            fps=fps,
            frame_count=frame_count,
        )

    audio = None
    audio_stream = _first_stream(streams, "audio")
    if audio_stream is not None:
        audio = AudioStreamInfo(
            codec_name=audio_stream.get("codec_name"),
            channels=_to_int(audio_stream.get("channels")),
            sample_rate=_to_int(audio_stream.get("sample_rate")),
            bit_rate=_to_int(audio_stream.get("bit_rate")),
        )

    size_bytes = _to_int(fmt.get("size"))
    if size_bytes is None:
        try:
            size_bytes = os.path.getsize(file_path)
        except OSError:
            size_bytes = None

    return MediaDescriptor(
        file=file_path,
        size_bytes=size_bytes,
        container=container,
        video=video,
        audio=audio,
    )


class FFprobeService(BaseService, IProbeService):
    """Probe service backed by the ffprobe binary."""

    def __init__(self, ffprobe_path: Optional[str] = None, timeout: float = 30.0):
        """
        Args:
            ffprobe_path: Explicit ffprobe path; located on demand when None
            timeout: Seconds before a probe is abandoned
        """
        super().__init__()
        self._ffprobe_path = ffprobe_path
        self.timeout = timeout

    def build_command(self, path: str) -> list:
        return [
            self._ffprobe_path or binary_manager.require("ffprobe"),
            "-v", "error",
            "-print_format", "json",
            "-show_format",
            "-show_streams",
            path,
        ]

    def probe(self, path: str) -> Result[MediaDescriptor]:
        name = Path(path).name
        if not path or not Path(path).is_file():
            error = MediaProbeError(
                f"File not found: {path}",
                file_path=path,
                user_message=f"File not found: {name or path}"
            )
            self._handle_error(error, {'method': 'probe'})
            return Result.error(error)

        try:
            cmd = self.build_command(path)
        except FFmpegNotFoundError as e:
            self._handle_error(e, {'method': 'probe'})
            return Result.error(e)

        self._log_operation("probe", name, level="debug")

        try:
            completed = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False
            )
        except subprocess.TimeoutExpired:
            error = MediaProbeError(
                f"Timeout probing {name}",
                file_path=path,
                user_message=f"Probing {name} took too long and was cancelled."
            )
            self._handle_error(error, {'method': 'probe'})
            return Result.error(error)
        except OSError as e:
            error = MediaProbeError(
                f"Could not run ffprobe on {name}: {e}",
                file_path=path,
                user_message=f"Could not run ffprobe: {e}"
            )
            self._handle_error(error, {'method': 'probe'})
            return Result.error(error)

        if completed.returncode != 0:
            stderr = (completed.stderr or "").strip()
            error = MediaProbeError(
                f"ffprobe failed on {name}: {stderr or 'unknown error'}",
                file_path=path,
                probe_output=stderr,
                user_message=f"ffprobe failed: {stderr or 'unknown error'}"
            )
            self._handle_error(error, {'method': 'probe'})
            return Result.error(error)

        try:
            data = json.loads(completed.stdout or "{}")
        except json.JSONDecodeError as e:
            error = MediaProbeError(
                f"Invalid JSON from ffprobe for {name}: {e}",
                file_path=path,
                user_message="Failed to parse ffprobe output."
            )
            self._handle_error(error, {'method': 'probe'})
            return Result.error(error)

        if not data.get("format") and not data.get("streams"):
            error = MediaProbeError(
                f"No metadata found in {name}",
                file_path=path,
                user_message="File contains no media metadata."
            )
            self._handle_error(error, {'method': 'probe'})
            return Result.error(error)

        descriptor = build_descriptor(path, data)
        self._log_operation(
            "probe complete",
            f"{name}: {descriptor.width}x{descriptor.height}"
        )
        return Result.success(descriptor)
