#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Centralized logging system with Qt signal support
"""

import logging
import sys
from pathlib import Path
from datetime import datetime
from typing import Optional
from PySide6.QtCore import QObject, Signal


LOG_DIRECTORY = Path.home() / '.video_compare_tool' / 'logs'


class _SignalHandler(logging.Handler):
    """Forwards records to AppLogger.log_message"""

    def __init__(self, app_logger: 'AppLogger'):
        super().__init__(logging.INFO)
        self._app_logger = app_logger
        self.setFormatter(logging.Formatter('%(message)s'))

    def emit(self, record: logging.LogRecord):
        try:
            message = self.format(record)
        except Exception:
            self.handleError(record)
            return
        self._app_logger.log_message.emit(record.levelname, message)


class AppLogger(QObject):
    """Centralized logging with Qt signal support for UI integration"""

    # Qt signal for UI components to receive log messages
    log_message = Signal(str, str)  # level, message

    _instance = None

    def __new__(cls):
        """Singleton pattern ensures single logger instance"""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        """Initialize the logger (only once due to singleton)"""
        if self._initialized:
            return

        super().__init__()
        self._initialized = True

        self.logger = logging.getLogger('VideoCompareTool')
        self.logger.setLevel(logging.DEBUG)

        # Remove any existing handlers to avoid duplicates
        self.logger.handlers.clear()

        self._setup_console_handler()
        self._setup_file_handler()

        # Every record, including child loggers, reaches the UI signal
        self._signal_handler = _SignalHandler(self)
        self.logger.addHandler(self._signal_handler)

        self._debug_enabled = False

    def _setup_console_handler(self):
        """Setup console (stdout) handler"""
        console_handler = logging.StreamHandler(sys.stdout)

        # DEBUG messages hidden unless debug mode
        console_handler.setLevel(logging.INFO)

        formatter = logging.Formatter(
            '%(asctime)s - %(levelname)s - %(message)s',
            datefmt='%H:%M:%S'
        )
        console_handler.setFormatter(formatter)

        self.logger.addHandler(console_handler)
        self._console_handler = console_handler

    def _setup_file_handler(self):
        """Setup file handler for persistent logs"""
        try:
            LOG_DIRECTORY.mkdir(parents=True, exist_ok=True)
        except OSError:
            # Read-only home: console logging only
            return

        log_filename = f"app_{datetime.now().strftime('%Y%m%d')}.log"
        log_file = LOG_DIRECTORY / log_filename

        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)  # File always gets all levels

        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
        )
        file_handler.setFormatter(formatter)

        self.logger.addHandler(file_handler)
        self._file_handler = file_handler

    def enable_debug(self, enabled: bool = True):
        """Enable or disable debug logging to console

        Args:
            enabled: Whether to show debug messages in console
        """
        self._debug_enabled = enabled
        if enabled:
            self._console_handler.setLevel(logging.DEBUG)
            self._signal_handler.setLevel(logging.DEBUG)
            self.info("Debug logging enabled")
        else:
            self._console_handler.setLevel(logging.INFO)
            self._signal_handler.setLevel(logging.INFO)
            self.info("Debug logging disabled")

    @property
    def debug_enabled(self) -> bool:
        return self._debug_enabled

    def debug(self, message: str):
        """Log debug message"""
        self.logger.debug(message)

    def info(self, message: str):
        """Log info message"""
        self.logger.info(message)

    def warning(self, message: str):
        """Log warning message"""
        self.logger.warning(message)

    def error(self, message: str, exc_info: bool = False):
        """Log error message

        Args:
            message: Error message to log
            exc_info: Whether to include exception traceback
        """
        self.logger.error(message, exc_info=exc_info)

    def exception(self, message: str):
        """Log exception with automatic traceback"""
        self.logger.exception(message)

    def get_log_file_path(self) -> Optional[Path]:
        """Get the current log file path

        Returns:
            Path to current log file, or None if file handler not setup
        """
        if hasattr(self, '_file_handler'):
            return Path(self._file_handler.baseFilename)
        return None

    def cleanup_old_logs(self, days_to_keep: int = 30):
        """Clean up log files older than specified days

        Args:
            days_to_keep: Number of days of logs to keep
        """
        if not LOG_DIRECTORY.exists():
            return

        cutoff_date = datetime.now().timestamp() - (days_to_keep * 24 * 60 * 60)

        for log_file in LOG_DIRECTORY.glob('app_*.log'):
            try:
                if log_file.stat().st_mtime < cutoff_date:
                    log_file.unlink()
                    self.debug(f"Deleted old log file: {log_file.name}")
            except OSError as e:
                self.warning(f"Failed to delete old log {log_file.name}: {e}")


# Global logger instance
logger = AppLogger()
