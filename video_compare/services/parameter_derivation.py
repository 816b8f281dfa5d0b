"""
Parameter derivation service.

Keeps dependent export fields consistent as inputs change, without
overwriting explicit user edits. ``derive_parameters`` is a pure function of
the current parameters, the tag of the field that changed and the probed
descriptors; the UI feeds edits in and renders the returned parameters out.
"""

import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from ..models.export_parameters import ExportParameters, ExportMode
from ..models.media_descriptor import MediaDescriptor


ODD_WIDTH_ADVISORY = "Warning: width is odd; consider using an even number."
ODD_HEIGHT_ADVISORY = "Warning: height is odd; consider using an even number."


class ChangedField(Enum):
    """Which input triggered a re-derivation."""
    MODE = "mode"
    DESCRIPTOR_A = "descriptor_a"
    DESCRIPTOR_B = "descriptor_b"
    RESIZE_WIDTH = "resize_width"
    RESIZE_HEIGHT = "resize_height"
    KEEP_ASPECT = "keep_aspect"
    CONTAINER = "container"
    OTHER = "other"


@dataclass(frozen=True)
class DerivedParameters:
    """Parameters after derivation plus what the UI needs to render them."""
    parameters: ExportParameters
    advisories: Tuple[str, ...] = field(default_factory=tuple)
    geometry_editable: bool = True


# === Numeric helpers ===

def evenize(n: int) -> int:
    """Round a dimension down to the nearest even integer."""
    return n if n % 2 == 0 else n - 1


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def linked_height(width: int, ratio: float) -> int:
    """Height matching ``width`` at ``ratio`` (width / height), at least 1."""
    return max(1, round_half_up(width / ratio))


def linked_width(height: int, ratio: float) -> int:
    """Width matching ``height`` at ``ratio`` (width / height), at least 1."""
    return max(1, round_half_up(height * ratio))


def compute_stack_height(
    descriptor_a: Optional[MediaDescriptor],
    descriptor_b: Optional[MediaDescriptor]
) -> Optional[int]:
    """
    Common output height for a side-by-side export.

    Returns:
        evenize(min(heightA, heightB)), or None unless both descriptors
        carry a video height
    """
    if descriptor_a is None or descriptor_b is None:
        return None
    height_a = descriptor_a.height
    height_b = descriptor_b.height
    if not height_a or not height_b:
        return None
    return evenize(min(height_a, height_b))


def active_target(
    mode: ExportMode,
    descriptor_a: Optional[MediaDescriptor],
    descriptor_b: Optional[MediaDescriptor]
) -> Optional[MediaDescriptor]:
    """Descriptor of the single input being exported; None for side-by-side."""
    if mode is ExportMode.SINGLE_A:
        return descriptor_a
    if mode is ExportMode.SINGLE_B:
        return descriptor_b
    return None


def sync_output_extension(output_path: str, container: str) -> str:
    """Replace the output path's extension with the container's."""
    current = output_path.strip()
    if not current:
        return output_path
    without_ext = re.sub(r'\.[^/\\.]+$', '', current)
    return f"{without_ext}.{container}"


def seed_defaults(params: ExportParameters, descriptor: Optional[MediaDescriptor]) -> ExportParameters:
    """
    Fill empty fields from the source media.

    Resize from the source resolution, fps from the source rate (3 decimal
    places), trim start 0 and trim end from the frame count. Fields that
    already hold a value are left alone.
    """
    if descriptor is None or descriptor.video is None:
        return params

    video = descriptor.video
    changes = {}

    if params.resize_width is None and video.width:
        changes['resize_width'] = video.width
    if params.resize_height is None and video.height:
        changes['resize_height'] = video.height
    if params.fps is None and video.fps:
        changes['fps'] = float(f"{video.fps:.3f}")
    if params.trim_start_frame is None:
        changes['trim_start_frame'] = 0
    if params.trim_end_frame is None and video.frame_count is not None:
        changes['trim_end_frame'] = video.frame_count

    if not changes:
        return params
    return params.with_changes(**changes)


def odd_dimension_advisories(params: ExportParameters) -> Tuple[str, ...]:
    """Non-fatal warnings for odd resize dimensions."""
    advisories = []
    if params.resize_width and params.resize_width % 2 != 0:
        advisories.append(ODD_WIDTH_ADVISORY)
    if params.resize_height and params.resize_height % 2 != 0:
        advisories.append(ODD_HEIGHT_ADVISORY)
    return tuple(advisories)


def _link_aspect(
    params: ExportParameters,
    changed: ChangedField,
    ratio: Optional[float]
) -> ExportParameters:
    if not params.keep_aspect or not ratio:
        return params

    if changed is ChangedField.RESIZE_WIDTH and params.resize_width:
        return params.with_changes(resize_height=linked_height(params.resize_width, ratio))
    if changed is ChangedField.RESIZE_HEIGHT and params.resize_height:
        return params.with_changes(resize_width=linked_width(params.resize_height, ratio))
    return params


def derive_parameters(
    params: ExportParameters,
    changed: ChangedField,
    descriptor_a: Optional[MediaDescriptor] = None,
    descriptor_b: Optional[MediaDescriptor] = None
) -> DerivedParameters:
    """
    Recompute linked export fields after one input changed.

    Args:
        params: Current parameters, including the user's edit
        changed: Which field or descriptor changed
        descriptor_a: Probe result for Input A, if any
        descriptor_b: Probe result for Input B, if any

    Returns:
        DerivedParameters with updated parameters and advisories
    """
    if changed is ChangedField.CONTAINER:
        params = params.with_changes(
            output_path=sync_output_extension(params.output_path, params.container)
        )

    if params.mode is ExportMode.SIDE_BY_SIDE:
        stack_height = compute_stack_height(descriptor_a, descriptor_b)
        if stack_height is not None and stack_height <= 0:
            stack_height = None
        params = params.cleared_for_side_by_side().with_changes(stack_height=stack_height)
        return DerivedParameters(parameters=params, advisories=(), geometry_editable=False)

    if params.stack_height is not None:
        params = params.with_changes(stack_height=None)

    target = active_target(params.mode, descriptor_a, descriptor_b)

    target_changed = (
        changed is ChangedField.MODE
        or (changed is ChangedField.DESCRIPTOR_A and params.mode is ExportMode.SINGLE_A)
        or (changed is ChangedField.DESCRIPTOR_B and params.mode is ExportMode.SINGLE_B)
    )
    if target_changed:
        params = seed_defaults(params, target)

    params = _link_aspect(params, changed, target.aspect_ratio if target else None)

    return DerivedParameters(
        parameters=params,
        advisories=odd_dimension_advisories(params),
        geometry_editable=True,
    )
