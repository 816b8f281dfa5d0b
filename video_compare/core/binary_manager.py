"""
Binary manager for FFmpeg and FFprobe executables.

Locates, validates and caches the ffmpeg/ffprobe paths used by the probe
and encode services. Bundled binaries under the project ``bin/`` directory
win over PATH, which wins over common install locations.
"""

import os
import platform
import shutil
import subprocess
from pathlib import Path
from typing import Dict, List, Optional

from core.exceptions import FFmpegNotFoundError


class FFmpegBinaryManager:
    """
    Singleton manager for FFmpeg and FFprobe binary detection.

    Results are cached per binary name; ``refresh()`` forces a new search.
    """

    _instance: Optional["FFmpegBinaryManager"] = None

    def __new__(cls):
        """Ensure singleton pattern."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        """Initialize binary manager (only once)."""
        if self._initialized:
            return
        self._initialized = True
        self._paths: Dict[str, Optional[str]] = {}
        self._versions: Dict[str, Optional[str]] = {}
        self.bin_directory = Path(__file__).resolve().parent.parent.parent / "bin"

    def refresh(self):
        """Forget cached lookups."""
        self._paths.clear()
        self._versions.clear()

    def get_path(self, name: str) -> Optional[str]:
        """
        Locate a binary, using the cache when possible.

        Args:
            name: 'ffmpeg' or 'ffprobe'

        Returns:
            Full path to the binary or None if not found
        """
        if name not in self._paths:
            self._paths[name] = self._find_binary(name)
        return self._paths[name]

    def require(self, name: str) -> str:
        """
        Locate a binary or raise.

        Raises:
            FFmpegNotFoundError: If the binary cannot be found
        """
        path = self.get_path(name)
        if not path:
            raise FFmpegNotFoundError(name)
        return path

    def get_ffmpeg_path(self) -> Optional[str]:
        return self.get_path("ffmpeg")

    def get_ffprobe_path(self) -> Optional[str]:
        return self.get_path("ffprobe")

    def get_version(self, name: str) -> Optional[str]:
        """Version string from ``<binary> -version`` (e.g. '6.1.1')."""
        if name not in self._versions:
            path = self.get_path(name)
            self._versions[name] = self._read_version(path) if path else None
        return self._versions[name]

    def _find_binary(self, name: str) -> Optional[str]:
        system = platform.system()
        binary_name = f"{name}.exe" if system == "Windows" else name

        local = self.bin_directory / binary_name
        if local.exists() and self._test_binary(str(local)):
            return str(local)

        on_path = shutil.which(binary_name)
        if on_path:
            return on_path

        for candidate in self._get_common_paths(binary_name, system):
            if os.path.exists(candidate) and self._test_binary(candidate):
                return candidate

        return None

    def _get_common_paths(self, binary_name: str, system: str) -> List[str]:
        """Get list of common installation paths for binary."""
        if system == "Windows":
            return [
                rf"C:\ffmpeg\bin\{binary_name}",
                rf"C:\Program Files\ffmpeg\bin\{binary_name}",
                os.path.expanduser(rf"~\ffmpeg\bin\{binary_name}"),
            ]
        elif system == "Darwin":  # macOS
            return [
                f"/usr/local/bin/{binary_name}",
                f"/opt/homebrew/bin/{binary_name}",
            ]
        else:  # Linux
            return [
                f"/usr/bin/{binary_name}",
                f"/usr/local/bin/{binary_name}",
                f"/snap/bin/{binary_name}",
            ]

    def _test_binary(self, path: str) -> bool:
        """Test if binary exists and is executable."""
        try:
            result = subprocess.run([path, "-version"], capture_output=True, check=False, timeout=5)
            return result.returncode == 0
        except (subprocess.TimeoutExpired, OSError):
            return False

    def _read_version(self, path: str) -> Optional[str]:
        try:
            result = subprocess.run(
                [path, "-version"], capture_output=True, text=True, check=False, timeout=5
            )
        except (subprocess.TimeoutExpired, OSError):
            return None

        if result.returncode == 0 and result.stdout:
            # First line reads e.g. "ffmpeg version 6.1.1 Copyright ..."
            parts = result.stdout.split("\n")[0].split()
            if len(parts) >= 3:
                return parts[2]
        return None


# Global singleton instance
binary_manager = FFmpegBinaryManager()
