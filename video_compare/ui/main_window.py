#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Main application window - coordinator only
"""

from PySide6.QtGui import QAction
from PySide6.QtWidgets import QMainWindow, QStatusBar, QMessageBox

from core.settings_manager import settings
from core.logger import logger
from core.error_handler import get_error_handler
from core.exceptions import VideoToolError, ErrorSeverity
from ..core.binary_manager import binary_manager
from .video_compare_tab import VideoCompareTab


class MainWindow(QMainWindow):
    """Main application window - coordinator only"""

    def __init__(self):
        super().__init__()

        self.settings = settings
        self.error_handler = get_error_handler()

        self.setWindowTitle("Video Compare Tool")
        self.resize(1200, 850)
        self.setMinimumSize(900, 600)

        self._setup_ui()
        self._setup_error_notifications()

        self.status_bar.showMessage("Ready")

    def _setup_ui(self):
        self._create_menu_bar()

        self.compare_tab = VideoCompareTab(parent=self)
        self.compare_tab.log_message.connect(self.log)
        self.setCentralWidget(self.compare_tab)

        self.status_bar = QStatusBar()
        self.setStatusBar(self.status_bar)

    def _create_menu_bar(self):
        menubar = self.menuBar()

        file_menu = menubar.addMenu("File")
        exit_action = QAction("Exit", self)
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

        settings_menu = menubar.addMenu("Settings")
        self.debug_action = QAction("Debug Logging", self)
        self.debug_action.setCheckable(True)
        self.debug_action.setChecked(self.settings.debug_logging)
        self.debug_action.toggled.connect(self._on_debug_toggled)
        settings_menu.addAction(self.debug_action)

        help_menu = menubar.addMenu("Help")
        about_action = QAction("About", self)
        about_action.triggered.connect(self.show_about)
        help_menu.addAction(about_action)

    def log(self, message):
        """Status bar only - the tab keeps its own console"""
        self.status_bar.showMessage(message, 3000)

    def _on_debug_toggled(self, enabled: bool):
        self.settings.set('DEBUG_LOGGING', enabled)
        logger.enable_debug(enabled)

    def show_about(self):
        ffmpeg = binary_manager.get_version("ffmpeg") or "not found"
        ffprobe = binary_manager.get_version("ffprobe") or "not found"
        QMessageBox.about(
            self,
            "About Video Compare Tool",
            "Video Compare Tool\n\n"
            "Compare two videos field by field and export either one or both side by side.\n\n"
            f"ffmpeg: {ffmpeg}\nffprobe: {ffprobe}"
        )

    def _setup_error_notifications(self):
        self.error_handler.register_ui_callback(self._handle_error_notification)

    def _handle_error_notification(self, error: VideoToolError, context: dict):
        if error.severity == ErrorSeverity.CRITICAL:
            QMessageBox.critical(self, "Error", error.user_message)
        else:
            self.status_bar.showMessage(error.user_message, 5000)

    def closeEvent(self, event):
        """Stop running exports, then save settings"""
        self.compare_tab.shutdown()
        self.error_handler.unregister_ui_callback(self._handle_error_notification)
        self.settings.sync()
        logger.info("Application closing normally")
        event.accept()
