"""
Base service class with common functionality
"""

from typing import Optional, Dict, Any
import logging

from core.error_handler import handle_error
from core.exceptions import VideoToolError


class BaseService:
    """Base class for all services with common functionality"""

    def __init__(self, logger_name: Optional[str] = None):
        self.logger = logging.getLogger(logger_name or f"VideoCompareTool.{self.__class__.__name__}")

    def _handle_error(self, error: VideoToolError, context: Optional[Dict[str, Any]] = None):
        """Handle error with consistent logging and reporting"""
        if context is None:
            context = {}

        context.update({
            'service': self.__class__.__name__,
            'service_method': context.get('method', 'unknown')
        })

        handle_error(error, context)

    def _log_operation(self, operation: str, details: str = "", level: str = "info"):
        """Log service operation with consistent format"""
        message = f"[{self.__class__.__name__}] {operation}"
        if details:
            message += f" - {details}"

        if level == "debug":
            self.logger.debug(message)
        elif level == "warning":
            self.logger.warning(message)
        elif level == "error":
            self.logger.error(message)
        else:
            self.logger.info(message)
