"""
Video Compare data models.

This package contains all data models and enums used throughout the tool.
"""

from .media_descriptor import (
    MediaDescriptor,
    ContainerInfo,
    VideoStreamInfo,
    AudioStreamInfo,
)

from .export_parameters import (
    ExportParameters,
    ExportMode,
    VideoCodec,
    CONTAINERS,
)

from .export_session import (
    ExportSession,
    ExportPhase,
    ExportStarted,
    ProgressEvent,
    ProgressPhase,
    ApproximateProgressPolicy,
)

from .comparison import (
    ComparisonRow,
    ComparisonResult,
    ResolutionLabel,
    NOT_ENOUGH_DATA_MESSAGE,
)

__all__ = [
    # Descriptors
    'MediaDescriptor',
    'ContainerInfo',
    'VideoStreamInfo',
    'AudioStreamInfo',

    # Export parameters
    'ExportParameters',
    'ExportMode',
    'VideoCodec',
    'CONTAINERS',

    # Export session
    'ExportSession',
    'ExportPhase',
    'ExportStarted',
    'ProgressEvent',
    'ProgressPhase',
    'ApproximateProgressPolicy',

    # Comparison
    'ComparisonRow',
    'ComparisonResult',
    'ResolutionLabel',
    'NOT_ENOUGH_DATA_MESSAGE',
]
