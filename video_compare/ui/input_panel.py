"""
Input panel.

One input selector (path, browse, probe) with the probe result table.
"""

from pathlib import Path
from typing import Optional
from PySide6.QtWidgets import (
    QGroupBox, QVBoxLayout, QHBoxLayout, QLineEdit, QPushButton, QLabel,
    QTableWidget, QTableWidgetItem, QHeaderView, QFileDialog, QAbstractItemView
)
from PySide6.QtCore import Signal

from core.settings_manager import settings
from ..models.media_descriptor import MediaDescriptor
from ..services.comparison_service import describe_descriptor


VIDEO_FILE_FILTER = "Video Files (*.mp4 *.mkv *.mov *.avi *.webm *.m4v *.ts);;All Files (*.*)"


class InputPanel(QGroupBox):
    """
    Selector and probe results for one input.

    Signals:
        probe_requested: (path: str)
        path_changed: (path: str)
    """

    probe_requested = Signal(str)
    path_changed = Signal(str)

    def __init__(self, title: str, parent=None):
        super().__init__(title, parent)
        self._init_ui()

    def _init_ui(self):
        layout = QVBoxLayout(self)

        path_layout = QHBoxLayout()
        self.path_edit = QLineEdit()
        self.path_edit.setPlaceholderText("Select a video file...")
        self.path_edit.textChanged.connect(self.path_changed.emit)
        path_layout.addWidget(self.path_edit)

        self.browse_btn = QPushButton("Browse...")
        self.browse_btn.clicked.connect(self._on_browse)
        path_layout.addWidget(self.browse_btn)

        self.probe_btn = QPushButton("Probe")
        self.probe_btn.clicked.connect(self._on_probe)
        path_layout.addWidget(self.probe_btn)
        layout.addLayout(path_layout)

        self.status_label = QLabel("")
        self.status_label.setWordWrap(True)
        layout.addWidget(self.status_label)

        self.result_table = QTableWidget(0, 2)
        self.result_table.setHorizontalHeaderLabels(["Field", "Value"])
        self.result_table.horizontalHeader().setSectionResizeMode(0, QHeaderView.ResizeMode.ResizeToContents)
        self.result_table.horizontalHeader().setStretchLastSection(True)
        self.result_table.verticalHeader().setVisible(False)
        self.result_table.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
        layout.addWidget(self.result_table)

    @property
    def path(self) -> str:
        return self.path_edit.text().strip()

    def set_path(self, path: str):
        self.path_edit.setText(path)

    def set_probing(self, probing: bool):
        self.probe_btn.setEnabled(not probing)
        self.browse_btn.setEnabled(not probing)
        if probing:
            self.status_label.setStyleSheet("")
            self.status_label.setText("Probing...")

    def show_descriptor(self, descriptor: Optional[MediaDescriptor]):
        rows = describe_descriptor(descriptor)
        self.result_table.setRowCount(len(rows))
        for row, (label, value) in enumerate(rows):
            self.result_table.setItem(row, 0, QTableWidgetItem(label))
            self.result_table.setItem(row, 1, QTableWidgetItem(value))
        self.status_label.setStyleSheet("")
        self.status_label.setText("")

    def show_error(self, message: str):
        self.status_label.setStyleSheet("color: #ff4d4f;")
        self.status_label.setText(message)

    def _on_browse(self):
        path, _ = QFileDialog.getOpenFileName(
            self,
            f"Select {self.title()}",
            self.path or settings.last_input_directory,
            VIDEO_FILE_FILTER
        )
        if path:
            self.set_path(path)
            settings.last_input_directory = str(Path(path).parent)
            self.probe_requested.emit(path)

    def _on_probe(self):
        if self.path:
            self.probe_requested.emit(self.path)
        else:
            self.show_error("Select a file first.")
