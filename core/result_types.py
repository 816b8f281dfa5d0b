#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Result objects for the Video Compare Tool

Fallible service calls return a Result instead of raising across layers,
so controllers can branch on success and surface the error message verbatim.
"""

from typing import TypeVar, Generic, Optional, List, Dict, Any
from dataclasses import dataclass, field

from .exceptions import VideoToolError

# Type variable for generic result values
T = TypeVar('T')


@dataclass
class Result(Generic[T]):
    """
    Universal result object that replaces boolean returns

    Provides type-safe error handling with rich context information
    and support for warnings and metadata.
    """
    success: bool
    value: Optional[T] = None
    error: Optional[VideoToolError] = None
    warnings: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def success(cls, value: T, warnings: Optional[List[str]] = None, **metadata) -> 'Result[T]':
        """
        Create a successful result

        Args:
            value: The successful result value
            warnings: Optional list of warnings
            **metadata: Additional metadata to store

        Returns:
            Result object indicating success
        """
        return cls(
            success=True,
            value=value,
            warnings=warnings or [],
            metadata=metadata
        )

    @classmethod
    def error(cls, error: VideoToolError, warnings: Optional[List[str]] = None) -> 'Result[T]':
        """
        Create an error result

        Args:
            error: The error that occurred
            warnings: Optional list of warnings that occurred before the error

        Returns:
            Result object indicating failure
        """
        return cls(
            success=False,
            error=error,
            warnings=warnings or []
        )

    def unwrap(self) -> T:
        """
        Get value or raise error

        Raises:
            VideoToolError: If the result indicates failure
        """
        if not self.success:
            raise self.error
        return self.value

    def unwrap_or(self, default: T) -> T:
        """Get value or return default"""
        return self.value if self.success else default

    @property
    def error_message(self) -> Optional[str]:
        """Message to surface for a failed result"""
        if self.success or self.error is None:
            return None
        return self.error.user_message or self.error.message

    def has_warnings(self) -> bool:
        """Check if result has warnings"""
        return len(self.warnings) > 0

    def add_warning(self, warning: str) -> 'Result[T]':
        """Add a warning to this result"""
        self.warnings.append(warning)
        return self

    def add_metadata(self, key: str, value: Any) -> 'Result[T]':
        """Add metadata to this result"""
        self.metadata[key] = value
        return self
