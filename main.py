#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Video Compare Tool - Application Entry Point

Probe two videos, compare them and export one or both through ffmpeg.
"""

import sys
from PySide6.QtWidgets import QApplication

from core.logger import logger
from core.settings_manager import settings
from video_compare.core.binary_manager import binary_manager
from video_compare.ui.main_window import MainWindow


def check_binaries():
    """Log where ffmpeg and ffprobe were found"""
    for name in ("ffmpeg", "ffprobe"):
        path = binary_manager.get_path(name)
        if path:
            logger.info(f"{name} found: {path} (version {binary_manager.get_version(name) or 'unknown'})")
        else:
            logger.warning(f"{name} not found; install FFmpeg or place it in the 'bin' folder")


def main():
    """Application entry point"""
    app = QApplication(sys.argv)
    app.setApplicationName("Video Compare Tool")
    app.setOrganizationName("VideoCompareTool")

    if settings.debug_logging:
        logger.enable_debug(True)
    logger.cleanup_old_logs()

    check_binaries()

    window = MainWindow()
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
