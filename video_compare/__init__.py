"""
Video Compare Tool

Probe two videos, compare them field by field and export either input or
both side by side through ffmpeg.

Components:
- models: MediaDescriptor, ExportParameters, ExportSession, comparison rows
- services: comparison, parameter derivation, validation, probe and encode
- controllers: probe state and the export session lifecycle
- workers: QThread workers for probing and following ffmpeg
- ui: PySide6 tab and main window
"""

__version__ = "1.0.0"
