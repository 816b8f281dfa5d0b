"""
Video Compare services.

Pure engines (comparison, parameter derivation, validation) and the
ffprobe/ffmpeg backed probe and encode services.
"""

from .comparison_service import compare_descriptors, describe_descriptor
from .parameter_derivation import ChangedField, DerivedParameters, derive_parameters
from .export_validator import validate_export, validate_request
from .interfaces import IProbeService, EncodeServiceBase
from .probe_service import FFprobeService
from .ffmpeg_command_builder import FFmpegCommandBuilder
from .encode_service import FFmpegEncodeService

__all__ = [
    'compare_descriptors',
    'describe_descriptor',
    'ChangedField',
    'DerivedParameters',
    'derive_parameters',
    'validate_export',
    'validate_request',
    'IProbeService',
    'EncodeServiceBase',
    'FFprobeService',
    'FFmpegCommandBuilder',
    'FFmpegEncodeService',
]
