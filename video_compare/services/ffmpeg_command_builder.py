"""
FFmpeg command builder service.

Translates ExportParameters into an ffmpeg argument list and a display
string. Single-input exports use a ``-vf`` chain; side-by-side exports scale
both inputs to the common stack height and join them with ``hstack``.
"""

from pathlib import Path
from typing import List, Optional, Tuple

from core.exceptions import FFmpegNotFoundError

from ..core.binary_manager import binary_manager
from ..models.export_parameters import ExportParameters, ExportMode


LABEL_FONT = "Segoe UI"
MAX_UNIQUE_SUFFIX = 999


def escape_drawtext(text: str) -> str:
    """Escape a label for use inside a drawtext ``text='...'`` value."""
    return (
        text.replace("\\", "\\\\")
        .replace(":", "\\:")
        .replace("%", "\\%")
        .replace("'", "\\'")
    )


def build_label_filter(label: Optional[str]) -> Optional[str]:
    """
    Translucent bar along the bottom edge with the label centered on it.

    Returns None for an empty label.
    """
    if not label or not label.strip():
        return None
    text = escape_drawtext(label.strip())
    return (
        "drawbox=x=0:y=ih*0.86:w=iw:h=ih*0.14:color=black@0.45:t=fill,"
        f"drawtext=font='{LABEL_FONT}':text='{text}':fontcolor=white:"
        "fontsize=h*0.055:x=(w-text_w)/2:y=h-(text_h*1.6)"
    )


def build_trim_filter(start: Optional[int], end: Optional[int]) -> Optional[str]:
    """Frame-accurate trim; only emitted when an end frame is set."""
    if end is None:
        return None
    start = start or 0
    end = max(end, start)
    return f"select=between(n\\,{start}\\,{end}),setpts=N/FRAME_RATE/TB"


def build_scale_filter(width: Optional[int], height: Optional[int], keep_aspect: bool) -> Optional[str]:
    if width is None and height is None:
        return None
    w = str(width) if width is not None else "-1"
    h = str(height) if height is not None else "-1"
    scale = f"scale={w}:{h}:flags=lanczos"
    if keep_aspect:
        scale += ":force_original_aspect_ratio=decrease"
    return scale


def unique_output_path(path: str) -> str:
    """
    Path that does not exist yet.

    ``clip.mp4`` becomes ``clip (1).mp4``, ``clip (2).mp4`` and so on. After
    the last suffix the original path is returned and will be overwritten.
    """
    candidate = Path(path)
    if not candidate.exists():
        return path

    stem = candidate.stem
    suffix = candidate.suffix
    for index in range(1, MAX_UNIQUE_SUFFIX + 1):
        alternative = candidate.with_name(f"{stem} ({index}){suffix}")
        if not alternative.exists():
            return str(alternative)
    return path


def format_command(cmd: List[str]) -> str:
    """Display form of an argument list; arguments with spaces are double-quoted."""
    parts = []
    for arg in cmd:
        if " " in arg or "\t" in arg:
            parts.append('"' + arg.replace('"', '\\"') + '"')
        else:
            parts.append(arg)
    return " ".join(parts)


def expected_duration_seconds(params: ExportParameters) -> Optional[float]:
    """
    Output duration implied by the trim range.

    Trim frame numbers count source frames and the selected range keeps the
    source timing, so the span is measured at ``source_fps``; a different
    target fps only resamples within it. None when the trim end or the
    source rate is unknown, in which case progress can only be approximated.
    """
    if params.is_side_by_side:
        return None
    if params.trim_end_frame is None or not params.source_fps:
        return None
    start = params.trim_start_frame or 0
    frames = max(params.trim_end_frame, start) - start + 1
    return frames / params.source_fps


class FFmpegCommandBuilder:
    """
    Service for building ffmpeg export commands.

    Commands are returned both as a list for subprocess execution and as a
    string for display and copying.
    """

    def __init__(self, ffmpeg_path: Optional[str] = None):
        """
        Args:
            ffmpeg_path: Explicit ffmpeg path; located via the binary manager when None

        Raises:
            FFmpegNotFoundError: If no ffmpeg binary can be found
        """
        self.ffmpeg_path = ffmpeg_path or binary_manager.get_ffmpeg_path()
        if not self.ffmpeg_path:
            raise FFmpegNotFoundError("ffmpeg")

    def build_export_command(
        self,
        params: ExportParameters,
        output_path: Optional[str] = None
    ) -> Tuple[List[str], str]:
        """
        Build the ffmpeg command for one export.

        Args:
            params: Export request
            output_path: Final output path; defaults to ``params.output_path``

        Returns:
            Tuple of (command_array, command_string)
        """
        output = output_path or params.output_path
        cmd = [self.ffmpeg_path]

        if params.is_side_by_side:
            cmd.extend(self._build_side_by_side_args(params))
        else:
            cmd.extend(self._build_single_args(params))

        # === Encoding ===
        cmd.extend(['-c:v', params.codec.encoder])
        cmd.extend(['-crf', str(params.crf)])
        cmd.extend(['-c:a', 'copy' if params.audio_copy else 'aac'])

        # === Output ===
        cmd.extend(['-y', '-progress', 'pipe:1', '-nostats', output])

        return cmd, format_command(cmd)

    def _build_single_args(self, params: ExportParameters) -> List[str]:
        if params.mode is ExportMode.SINGLE_B:
            input_path, label = params.input_b, params.label_b
        else:
            input_path, label = params.input_a, params.label_a

        args = ['-i', input_path]

        trim = build_trim_filter(params.trim_start_frame, params.trim_end_frame)
        filters = [
            trim,
            f"fps=fps={params.fps:g}" if params.fps else None,
            build_scale_filter(params.resize_width, params.resize_height, params.keep_aspect),
            build_label_filter(label),
        ]
        filters = [f for f in filters if f]

        if filters:
            args.extend(['-vf', ",".join(filters)])
        if trim:
            args.extend(['-vsync', 'vfr'])
        return args

    def _build_side_by_side_args(self, params: ExportParameters) -> List[str]:
        args = ['-i', params.input_a, '-i', params.input_b]

        def side_chain(label: Optional[str]) -> str:
            filters = []
            if params.stack_height:
                filters.append(f"scale=-2:{params.stack_height}:flags=lanczos")
            label_filter = build_label_filter(label)
            if label_filter:
                filters.append(label_filter)
            return ",".join(filters) if filters else "null"

        graph = (
            f"[0:v]{side_chain(params.label_a)}[left];"
            f"[1:v]{side_chain(params.label_b)}[right];"
            "[left][right]hstack=inputs=2[vout]"
        )
        args.extend(['-filter_complex', graph, '-map', '[vout]'])
        if params.audio_copy:
            args.extend(['-map', '0:a?'])
        return args
