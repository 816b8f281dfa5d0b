#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Centralized settings management
"""

from typing import Any
from PySide6.QtCore import QSettings


SUPPORTED_CONTAINERS = ('mp4', 'mkv', 'mov')
SUPPORTED_CODECS = ('h264', 'h265')


class SettingsManager:
    """Centralized settings management over QSettings"""

    # Canonical keys for all settings
    KEYS = {
        # Export defaults
        'DEFAULT_CONTAINER': 'export.default_container',
        'DEFAULT_CODEC': 'export.default_codec',
        'DEFAULT_CRF': 'export.default_crf',
        'AUDIO_COPY': 'export.audio_copy',
        'KEEP_ASPECT': 'export.keep_aspect',

        # Debug settings
        'DEBUG_LOGGING': 'debug.enable_logging',

        # Path settings
        'LAST_OUTPUT_DIR': 'paths.last_output_directory',
        'LAST_INPUT_DIR': 'paths.last_input_directory'
    }

    _instance = None

    def __new__(cls):
        """Singleton pattern for settings manager"""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        """Initialize settings manager"""
        if self._initialized:
            return

        self._initialized = True
        self._settings = QSettings('VideoCompareTool', 'Settings')

        self._set_defaults()

    def _set_defaults(self):
        """Set default values for missing keys"""
        defaults = {
            self.KEYS['DEFAULT_CONTAINER']: 'mp4',
            self.KEYS['DEFAULT_CODEC']: 'h264',
            self.KEYS['DEFAULT_CRF']: 23,
            self.KEYS['AUDIO_COPY']: True,
            self.KEYS['KEEP_ASPECT']: True,
            self.KEYS['DEBUG_LOGGING']: False,
        }

        for key, default in defaults.items():
            if not self._settings.contains(key):
                self._settings.setValue(key, default)

    def get(self, key: str, default: Any = None) -> Any:
        """Get setting value

        Args:
            key: Either a KEYS constant or direct key string
            default: Default value if key not found
        """
        canonical_key = self.KEYS.get(key, key)
        return self._settings.value(canonical_key, default)

    def set(self, key: str, value: Any):
        """Set setting value

        Args:
            key: Either a KEYS constant or direct key string
            value: Value to set
        """
        canonical_key = self.KEYS.get(key, key)
        self._settings.setValue(canonical_key, value)

    def sync(self):
        """Force settings to disk"""
        self._settings.sync()

    def contains(self, key: str) -> bool:
        canonical_key = self.KEYS.get(key, key)
        return self._settings.contains(canonical_key)

    @staticmethod
    def _as_bool(value: Any) -> bool:
        # QSettings INI backends hand booleans back as strings
        if isinstance(value, str):
            return value.strip().lower() in ('true', '1', 'yes')
        return bool(value)

    @property
    def default_container(self) -> str:
        """Output container for new exports"""
        value = str(self.get('DEFAULT_CONTAINER', 'mp4')).lower()
        if value not in SUPPORTED_CONTAINERS:
            return 'mp4'
        return value

    @default_container.setter
    def default_container(self, value: str):
        value = str(value).lower()
        if value not in SUPPORTED_CONTAINERS:
            raise ValueError(f"Unsupported container: {value}. Must be one of {SUPPORTED_CONTAINERS}")
        self.set('DEFAULT_CONTAINER', value)

    @property
    def default_codec(self) -> str:
        """Video codec for new exports (h264 or h265)"""
        value = str(self.get('DEFAULT_CODEC', 'h264')).lower()
        if value not in SUPPORTED_CODECS:
            return 'h264'
        return value

    @default_codec.setter
    def default_codec(self, value: str):
        value = str(value).lower()
        if value not in SUPPORTED_CODECS:
            raise ValueError(f"Unsupported codec: {value}. Must be one of {SUPPORTED_CODECS}")
        self.set('DEFAULT_CODEC', value)

    @property
    def default_crf(self) -> int:
        """CRF quality factor (clamped to 0-51)"""
        try:
            crf = int(self.get('DEFAULT_CRF', 23))
        except (TypeError, ValueError):
            return 23
        return min(max(crf, 0), 51)

    @property
    def audio_copy(self) -> bool:
        return self._as_bool(self.get('AUDIO_COPY', True))

    @property
    def keep_aspect(self) -> bool:
        return self._as_bool(self.get('KEEP_ASPECT', True))

    @property
    def debug_logging(self) -> bool:
        return self._as_bool(self.get('DEBUG_LOGGING', False))

    @property
    def last_input_directory(self) -> str:
        return str(self.get('LAST_INPUT_DIR', '') or '')

    @last_input_directory.setter
    def last_input_directory(self, value: str):
        self.set('LAST_INPUT_DIR', str(value))

    @property
    def last_output_directory(self) -> str:
        return str(self.get('LAST_OUTPUT_DIR', '') or '')

    @last_output_directory.setter
    def last_output_directory(self, value: str):
        self.set('LAST_OUTPUT_DIR', str(value))


# Global settings instance
settings = SettingsManager()
