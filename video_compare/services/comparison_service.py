"""
Comparison service.

Formats descriptor fields for display and diffs two descriptors field by
field. Equality is decided on the formatted strings, so two missing values
("—") compare equal and formatting differences compare unequal.
"""

from typing import Any, Callable, List, Optional, Tuple

from ..models.media_descriptor import MediaDescriptor, VideoStreamInfo
from ..models.comparison import ComparisonRow, ComparisonResult, ResolutionLabel


MISSING = "—"


# === Formatters ===

def format_maybe(value: Any, fallback: str = MISSING) -> str:
    """Plain display value, or the fallback for None/empty."""
    if value is None or value == "":
        return fallback
    return str(value)


def format_bitrate(value: Optional[int]) -> str:
    if not value:
        return MISSING
    return f"{value / 1000:.0f} kbps"


def format_duration(value: Optional[float]) -> str:
    if value is None:
        return MISSING
    return f"{value:.2f} s"


def format_resolution(video: Optional[VideoStreamInfo]) -> str:
    if video is None or not video.width or not video.height:
        return MISSING
    return f"{video.width}×{video.height}"


def format_fps(value: Optional[float]) -> str:
    if not value:
        return MISSING
    return f"{value:.3f} fps"


def format_sample_rate(value: Optional[int]) -> str:
    if not value:
        return MISSING
    return f"{value} Hz"


def format_size(value: Optional[int]) -> str:
    if not value:
        return MISSING
    return f"{value} bytes"


def _video(d: MediaDescriptor, attr: str):
    return getattr(d.video, attr) if d.video else None


def _audio(d: MediaDescriptor, attr: str):
    return getattr(d.audio, attr) if d.audio else None


# Ordered (label, formatter) pairs shared by the single-input table and the diff
_FIELDS: List[Tuple[str, Callable[[MediaDescriptor], str]]] = [
    ("Container", lambda d: format_maybe(d.container.format_name)),
    ("Duration", lambda d: format_duration(d.container.duration_sec)),
    ("Bitrate", lambda d: format_bitrate(d.container.bitrate)),
    ("Video Codec", lambda d: format_maybe(_video(d, "codec_name"))),
    ("Profile", lambda d: format_maybe(_video(d, "profile"))),
    ("Resolution", lambda d: format_resolution(d.video)),
    ("Pixel Format", lambda d: format_maybe(_video(d, "pix_fmt"))),
    ("Color Space", lambda d: format_maybe(_video(d, "color_space"))),
    ("Frame Rate", lambda d: format_fps(_video(d, "fps"))),
    ("Frame Count", lambda d: format_maybe(_video(d, "frame_count"))),
    ("Audio Codec", lambda d: format_maybe(_audio(d, "codec_name"))),
    ("Channels", lambda d: format_maybe(_audio(d, "channels"))),
    ("Sample Rate", lambda d: format_sample_rate(_audio(d, "sample_rate"))),
    ("Audio Bitrate", lambda d: format_bitrate(_audio(d, "bit_rate"))),
]


def describe_descriptor(descriptor: Optional[MediaDescriptor]) -> List[Tuple[str, str]]:
    """
    Display rows for one probed input.

    Returns:
        (label, value) pairs, or an empty list when nothing was probed yet
    """
    if descriptor is None:
        return []

    rows = [
        ("File", descriptor.file),
        ("Size", format_size(descriptor.size_bytes)),
    ]
    rows.extend((label, formatter(descriptor)) for label, formatter in _FIELDS)
    return rows


def has_odd_dimensions(*descriptors: Optional[MediaDescriptor]) -> bool:
    """True when any given descriptor has an odd width or height."""
    for descriptor in descriptors:
        if descriptor is None or descriptor.video is None:
            continue
        for dimension in (descriptor.video.width, descriptor.video.height):
            if dimension and dimension % 2 != 0:
                return True
    return False


def build_resolution_label(a: MediaDescriptor, b: MediaDescriptor) -> ResolutionLabel:
    resolution_a = format_resolution(a.video)
    resolution_b = format_resolution(b.video)
    equal = resolution_a == resolution_b
    return ResolutionLabel(
        text=resolution_a if equal else f"{resolution_a} vs {resolution_b}",
        value_a=resolution_a,
        value_b=resolution_b,
        equal=equal,
        odd_dimensions=has_odd_dimensions(a, b),
    )


def compare_descriptors(
    a: Optional[MediaDescriptor],
    b: Optional[MediaDescriptor]
) -> ComparisonResult:
    """
    Diff two descriptors field by field.

    Args:
        a: Descriptor for Input A
        b: Descriptor for Input B

    Returns:
        ComparisonResult with ordered rows and the resolution label, or a
        "not enough data" result when either descriptor is missing
    """
    if a is None or b is None:
        return ComparisonResult.not_enough_data()

    rows = []
    for label, formatter in _FIELDS:
        value_a = formatter(a)
        value_b = formatter(b)
        rows.append(ComparisonRow(label=label, value_a=value_a, value_b=value_b,
                                  equal=value_a == value_b))

    return ComparisonResult(rows=rows, resolution_label=build_resolution_label(a, b))
