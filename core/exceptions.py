#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Exception hierarchy for the Video Compare Tool

Every error carries a technical message for the logs, a user-facing message
for the status line, a severity and free-form context.
"""

from typing import Dict, Any, Optional
from datetime import datetime
from enum import Enum


class ErrorSeverity(Enum):
    """Error severity levels for categorization and UI display"""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class VideoToolError(Exception):
    """
    Base exception for all Video Compare Tool errors

    Captures context information and provides user-friendly messages
    for UI display.
    """

    def __init__(self,
                 message: str,
                 error_code: Optional[str] = None,
                 user_message: Optional[str] = None,
                 recoverable: bool = False,
                 severity: ErrorSeverity = ErrorSeverity.ERROR,
                 context: Optional[Dict[str, Any]] = None):
        """
        Initialize error

        Args:
            message: Technical error message for logging
            error_code: Unique error code for categorization
            user_message: User-friendly message for UI display
            recoverable: Whether operation can be retried
            severity: Error severity level
            context: Additional context information
        """
        super().__init__(message)

        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.user_message = user_message or self._generate_user_message()
        self.recoverable = recoverable
        self.severity = severity
        self.timestamp = datetime.now()
        self.context = context or {}

    def _generate_user_message(self) -> str:
        """Generate user-friendly message from technical message"""
        return "An error occurred during the operation. Please check the logs for details."

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for logging and serialization"""
        return {
            'error_code': self.error_code,
            'message': self.message,
            'user_message': self.user_message,
            'severity': self.severity.value,
            'recoverable': self.recoverable,
            'timestamp': self.timestamp.isoformat(),
            'context': self.context
        }


class ValidationError(VideoToolError):
    """Export request precondition failures

    The message is short and actionable and is shown verbatim.
    """

    def __init__(self, message: str, field: Optional[str] = None, **kwargs):
        """
        Initialize validation error

        Args:
            message: Message shown to the user
            field: Name of the offending parameter
            **kwargs: Additional VideoToolError arguments
        """
        self.field = field
        context = kwargs.get('context', {})
        if field:
            context['field'] = field
        kwargs['context'] = context
        kwargs.setdefault('user_message', message)
        kwargs.setdefault('recoverable', True)

        super().__init__(message, severity=ErrorSeverity.WARNING, **kwargs)


class ConfigurationError(VideoToolError):
    """Configuration and settings errors"""

    def __init__(self, message: str, setting_key: Optional[str] = None, **kwargs):
        context = kwargs.get('context', {})
        if setting_key:
            context['setting_key'] = setting_key
        kwargs['context'] = context

        super().__init__(message, severity=ErrorSeverity.WARNING, **kwargs)

    def _generate_user_message(self) -> str:
        return "Configuration error. Please check application settings."


class MediaProbeError(VideoToolError):
    """Failed to probe a media file"""

    def __init__(self, message: str, file_path: Optional[str] = None,
                 probe_output: Optional[str] = None, **kwargs):
        """
        Initialize media probe error

        Args:
            message: Technical error message
            file_path: Path to media file that caused error
            probe_output: Raw ffprobe stderr, if any
            **kwargs: Additional VideoToolError arguments
        """
        self.probe_output = probe_output

        context = kwargs.get('context', {})
        if file_path:
            context['media_file'] = file_path
        if probe_output:
            context['probe_output'] = probe_output
        kwargs['context'] = context

        super().__init__(message, **kwargs)

    def _generate_user_message(self) -> str:
        return "Failed to probe media file. Please check the file format and try again."


class FFmpegNotFoundError(VideoToolError):
    """ffmpeg or ffprobe binary not available"""

    def __init__(self, binary_name: str = "ffmpeg", **kwargs):
        self.binary_name = binary_name
        kwargs['severity'] = ErrorSeverity.CRITICAL
        super().__init__(f"{binary_name} not found", **kwargs)

    def _generate_user_message(self) -> str:
        return (f"{self.binary_name} is required but was not found. "
                "Install FFmpeg or place the binaries in the 'bin' folder.")


class ExportError(VideoToolError):
    """Encode service rejected or failed an export"""

    def __init__(self, message: str, session_id: Optional[str] = None,
                 output_path: Optional[str] = None, **kwargs):
        """
        Initialize export error

        Args:
            message: Error text, surfaced to the user verbatim
            session_id: Export session the error belongs to
            output_path: Intended output path
            **kwargs: Additional VideoToolError arguments
        """
        self.session_id = session_id

        context = kwargs.get('context', {})
        if session_id:
            context['session_id'] = session_id
        if output_path:
            context['output_path'] = output_path
        kwargs['context'] = context
        kwargs.setdefault('user_message', message)

        super().__init__(message, **kwargs)
