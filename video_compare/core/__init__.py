"""
Video Compare core utilities.

Binary discovery for the ffmpeg/ffprobe collaborators.
"""

from .binary_manager import FFmpegBinaryManager, binary_manager

__all__ = [
    'FFmpegBinaryManager',
    'binary_manager',
]
