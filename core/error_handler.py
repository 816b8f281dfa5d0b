#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Centralized error handling for the Video Compare Tool

Logs every reported error by severity and routes it to registered UI
callbacks on the main thread.
"""

from PySide6.QtCore import QObject, Signal, QThread, Qt
from typing import Callable, List, Dict, Any, Optional
import logging
from datetime import datetime

from .exceptions import VideoToolError, ErrorSeverity


class ErrorHandler(QObject):
    """
    Thread-safe centralized error handling system

    Logs immediately in the reporting thread and uses a queued signal to
    notify UI callbacks in the main thread.
    """

    error_occurred = Signal(VideoToolError, dict)  # error, context

    def __init__(self, parent=None):
        super().__init__(parent)

        self.logger = logging.getLogger('VideoCompareTool.errors')

        self._ui_callbacks: List[Callable[[VideoToolError, dict], None]] = []

        self._error_counts = {severity: 0 for severity in ErrorSeverity}

        self.error_occurred.connect(
            self._handle_error_main_thread,
            Qt.QueuedConnection  # Ensure main thread execution
        )

    def register_ui_callback(self, callback: Callable[[VideoToolError, dict], None]):
        """
        Register UI callback for error notifications

        Args:
            callback: Function to call with (error, context) parameters
        """
        self._ui_callbacks.append(callback)

    def unregister_ui_callback(self, callback: Callable[[VideoToolError, dict], None]):
        """Unregister UI callback"""
        try:
            self._ui_callbacks.remove(callback)
        except ValueError:
            self.logger.warning("Attempted to unregister non-existent UI callback")

    def handle_error(self, error: VideoToolError, context: Optional[dict] = None):
        """
        Handle error from any thread

        Args:
            error: The error that occurred
            context: Additional context information
        """
        context = dict(context or {})
        context['timestamp'] = datetime.now().isoformat()

        self._log_error(error, context)
        self._error_counts[error.severity] += 1

        current_thread = QThread.currentThread()
        if current_thread is not None and not current_thread.isMainThread():
            self.error_occurred.emit(error, context)
        else:
            self._handle_error_main_thread(error, context)

    def _handle_error_main_thread(self, error: VideoToolError, context: dict):
        """Notify all UI callbacks"""
        for callback in list(self._ui_callbacks):
            try:
                callback(error, context)
            except Exception as callback_error:
                self.logger.error(f"UI callback failed: {callback_error}")

    def _log_error(self, error: VideoToolError, context: dict):
        """Log the error at a level matching its severity"""
        context_items = [
            f"{key}={value}" for key, value in context.items() if key != 'timestamp'
        ]

        log_msg = f"[{error.error_code}] {error.message}"
        if context_items:
            log_msg += f" | Context: {', '.join(context_items)}"

        if error.severity == ErrorSeverity.CRITICAL:
            self.logger.critical(log_msg)
        elif error.severity == ErrorSeverity.ERROR:
            self.logger.error(log_msg)
        elif error.severity == ErrorSeverity.WARNING:
            self.logger.warning(log_msg)
        else:
            self.logger.info(log_msg)

    def get_error_statistics(self) -> Dict[str, int]:
        """
        Get error count statistics

        Returns:
            Dictionary with error counts by severity
        """
        return {severity.value: count for severity, count in self._error_counts.items()}


# Global error handler instance
_error_handler: Optional[ErrorHandler] = None


def get_error_handler() -> ErrorHandler:
    """Get the global error handler, creating it on first use"""
    global _error_handler
    if _error_handler is None:
        _error_handler = ErrorHandler()
    return _error_handler


def handle_error(error: VideoToolError, context: Optional[Dict[str, Any]] = None):
    """Report an error through the global error handler"""
    get_error_handler().handle_error(error, context)
