"""
Video Compare Tab - Main UI Component

Coordinates the input panels, the comparison table, the export form and
the export session display. Parameter rules live in the derivation engine
and session rules in the export session controller; this widget only feeds
edits in and renders values out.
"""

import html
from datetime import datetime
from pathlib import Path
from typing import Optional
from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QPushButton, QLabel, QProgressBar,
    QTextEdit, QSplitter, QFileDialog, QGroupBox, QLineEdit, QTableWidget,
    QTableWidgetItem, QHeaderView, QAbstractItemView, QApplication
)
from PySide6.QtCore import Qt, Signal, QUrl
from PySide6.QtGui import QFont, QColor, QDesktopServices

from core.logger import logger
from core.settings_manager import settings
from ..controllers.export_session_controller import ExportSessionController
from ..controllers.probe_controller import ProbeController, SLOT_A, SLOT_B
from ..models.export_parameters import ExportParameters, VideoCodec
from ..models.export_session import ExportPhase, ExportSession
from ..models.media_descriptor import MediaDescriptor
from ..services.encode_service import FFmpegEncodeService
from ..services.interfaces import EncodeServiceBase, IProbeService
from ..services.parameter_derivation import ChangedField, active_target, derive_parameters
from ..services.probe_service import FFprobeService
from .export_settings_widget import ExportSettingsWidget
from .input_panel import InputPanel


DIFFERENCE_COLOR = QColor("#5c2b29")

DESCRIPTOR_CHANGES = {
    SLOT_A: ChangedField.DESCRIPTOR_A,
    SLOT_B: ChangedField.DESCRIPTOR_B,
}


def default_parameters() -> ExportParameters:
    """Export parameters seeded from the saved defaults."""
    return ExportParameters(
        container=settings.default_container,
        codec=VideoCodec(settings.default_codec),
        crf=settings.default_crf,
        audio_copy=settings.audio_copy,
        keep_aspect=settings.keep_aspect,
    )


class VideoCompareTab(QWidget):
    """
    Main widget for comparing two videos and exporting one or both.

    Provides UI for:
    - Selecting and probing Input A and Input B
    - Field-by-field comparison
    - Export parameters, progress, cancel and reveal output
    """

    # Signals for main window integration
    log_message = Signal(str)

    def __init__(
        self,
        probe_service: Optional[IProbeService] = None,
        encode_service: Optional[EncodeServiceBase] = None,
        parent=None
    ):
        super().__init__(parent)

        self.encode_service = encode_service or FFmpegEncodeService(parent=self)
        self.probe_controller = ProbeController(probe_service or FFprobeService(), self)
        self.session_controller = ExportSessionController(self.encode_service, parent=self)

        self._params = default_parameters()
        self._last_phase = ExportPhase.IDLE

        self._init_ui()
        self._connect_signals()
        self._apply_derived(ChangedField.OTHER)
        self._render_session(self.session_controller.session)

    def _init_ui(self):
        layout = QVBoxLayout(self)
        layout.setSpacing(8)
        layout.setContentsMargins(10, 10, 10, 10)

        # Inputs side by side
        inputs_splitter = QSplitter(Qt.Horizontal)
        inputs_splitter.setChildrenCollapsible(False)
        self.panel_a = InputPanel("Input A")
        self.panel_b = InputPanel("Input B")
        inputs_splitter.addWidget(self.panel_a)
        inputs_splitter.addWidget(self.panel_b)
        layout.addWidget(inputs_splitter, stretch=2)

        lower_splitter = QSplitter(Qt.Horizontal)
        lower_splitter.setChildrenCollapsible(False)
        lower_splitter.addWidget(self._create_comparison_section())
        lower_splitter.addWidget(self._create_export_section())
        lower_splitter.setSizes([500, 500])
        layout.addWidget(lower_splitter, stretch=3)

        layout.addWidget(self._create_command_section())
        layout.addWidget(self._create_console_section())

    def _create_comparison_section(self) -> QGroupBox:
        group = QGroupBox("Comparison")
        layout = QVBoxLayout(group)

        self.resolution_label = QLabel("")
        font = self.resolution_label.font()
        font.setBold(True)
        self.resolution_label.setFont(font)
        layout.addWidget(self.resolution_label)

        self.comparison_table = QTableWidget(0, 3)
        self.comparison_table.setHorizontalHeaderLabels(["Field", "Input A", "Input B"])
        header = self.comparison_table.horizontalHeader()
        header.setSectionResizeMode(0, QHeaderView.ResizeMode.ResizeToContents)
        header.setSectionResizeMode(1, QHeaderView.ResizeMode.Stretch)
        header.setSectionResizeMode(2, QHeaderView.ResizeMode.Stretch)
        self.comparison_table.verticalHeader().setVisible(False)
        self.comparison_table.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
        layout.addWidget(self.comparison_table)

        return group

    def _create_export_section(self) -> QGroupBox:
        group = QGroupBox("Export")
        layout = QVBoxLayout(group)

        output_layout = QHBoxLayout()
        output_layout.addWidget(QLabel("Output:"))
        self.output_edit = QLineEdit()
        self.output_edit.setPlaceholderText("Choose an output file...")
        output_layout.addWidget(self.output_edit)
        self.output_browse_btn = QPushButton("Browse...")
        output_layout.addWidget(self.output_browse_btn)
        layout.addLayout(output_layout)

        self.settings_widget = ExportSettingsWidget()
        layout.addWidget(self.settings_widget)

        button_layout = QHBoxLayout()
        self.export_btn = QPushButton("Export")
        self.export_btn.setObjectName("primaryAction")
        self.export_btn.setMinimumHeight(36)
        button_layout.addWidget(self.export_btn)

        self.cancel_btn = QPushButton("Cancel")
        self.cancel_btn.setMinimumHeight(36)
        button_layout.addWidget(self.cancel_btn)

        self.reveal_btn = QPushButton("Reveal Output")
        self.reveal_btn.setMinimumHeight(36)
        button_layout.addWidget(self.reveal_btn)
        layout.addLayout(button_layout)

        self.progress_bar = QProgressBar()
        self.progress_bar.setRange(0, 100)
        layout.addWidget(self.progress_bar)

        self.progress_label = QLabel("")
        layout.addWidget(self.progress_label)

        self.status_label = QLabel("")
        self.status_label.setWordWrap(True)
        layout.addWidget(self.status_label)

        return group

    def _create_command_section(self) -> QGroupBox:
        group = QGroupBox("FFmpeg Command")
        layout = QHBoxLayout(group)

        self.command_display = QTextEdit()
        self.command_display.setReadOnly(True)
        self.command_display.setMaximumHeight(70)
        self.command_display.setFont(QFont("Consolas", 9))
        self.command_display.setPlaceholderText("The ffmpeg command appears here once an export starts.")
        layout.addWidget(self.command_display)

        self.copy_command_btn = QPushButton("Copy")
        layout.addWidget(self.copy_command_btn, alignment=Qt.AlignTop)

        return group

    def _create_console_section(self) -> QGroupBox:
        group = QGroupBox("Console")
        layout = QVBoxLayout(group)

        self.console = QTextEdit()
        self.console.setReadOnly(True)
        self.console.setMaximumHeight(120)
        self.console.setFont(QFont("Consolas", 9))
        layout.addWidget(self.console)

        self._log("INFO", "Video Compare ready. Select Input A and Input B to begin.")
        return group

    def _connect_signals(self):
        self.panel_a.probe_requested.connect(lambda path: self._start_probe(SLOT_A, path))
        self.panel_b.probe_requested.connect(lambda path: self._start_probe(SLOT_B, path))
        self.panel_a.path_changed.connect(lambda _: self._on_field_edited(ChangedField.OTHER))
        self.panel_b.path_changed.connect(lambda _: self._on_field_edited(ChangedField.OTHER))

        self.probe_controller.descriptor_changed.connect(self._on_descriptor_changed)
        self.probe_controller.probe_failed.connect(self._on_probe_failed)

        self.settings_widget.field_edited.connect(self._on_field_edited)
        self.output_edit.textEdited.connect(lambda _: self._on_field_edited(ChangedField.OTHER))
        self.output_browse_btn.clicked.connect(self._on_browse_output)

        self.export_btn.clicked.connect(self._on_export)
        self.cancel_btn.clicked.connect(self._on_cancel)
        self.reveal_btn.clicked.connect(self._on_reveal_output)
        self.copy_command_btn.clicked.connect(self._on_copy_command)

        self.session_controller.session_changed.connect(self._render_session)
        logger.log_message.connect(self._on_app_log)

    # === Logging ===

    def _log(self, level: str, message: str):
        """Log message to console."""
        self._append_console(level, message)
        self.log_message.emit(f"[VideoCompare] {message}")

    def _on_app_log(self, level: str, message: str):
        """Show records from the application logger."""
        self._append_console(level, html.escape(message))

    def _append_console(self, level: str, message: str):
        timestamp = datetime.now().strftime("%H:%M:%S")

        colors = {
            "INFO": "#4B9CD3",
            "SUCCESS": "#52c41a",
            "WARNING": "#faad14",
            "ERROR": "#ff4d4f",
            "CRITICAL": "#ff4d4f"
        }

        color = colors.get(level, "#e8e8e8")
        formatted = f'<span style="color: #6b6b6b;">{timestamp}</span> <span style="color: {color}; font-weight: bold;">[{level}]</span> {message}'

        self.console.append(formatted)

    # === Probing ===

    def _panel(self, slot: str) -> InputPanel:
        return self.panel_a if slot == SLOT_A else self.panel_b

    def _start_probe(self, slot: str, path: str):
        if self.probe_controller.is_probing(slot):
            self._log("WARNING", f"Input {slot.upper()} is still being probed.")
            return
        self._panel(slot).set_probing(True)
        self._log("INFO", f"Probing input {slot.upper()}: {Path(path).name}")
        self.probe_controller.start_probe(slot, path)

    def _on_descriptor_changed(self, slot: str, descriptor: MediaDescriptor):
        panel = self._panel(slot)
        panel.set_probing(False)
        panel.show_descriptor(descriptor)
        self._log("SUCCESS", f"Input {slot.upper()} probed.")

        if slot == SLOT_A and not self.output_edit.text().strip():
            self._suggest_output_path(descriptor.file)

        self._refresh_comparison()
        self._on_field_edited(DESCRIPTOR_CHANGES[slot])

    def _on_probe_failed(self, slot: str, message: str):
        panel = self._panel(slot)
        panel.set_probing(False)
        panel.show_error(message)
        self._log("ERROR", f"Probe of input {slot.upper()} failed: {message}")

    def _refresh_comparison(self):
        result = self.probe_controller.comparison()
        if not result.has_data:
            self.resolution_label.setText(result.message or "")
            self.comparison_table.setRowCount(0)
            return

        label = result.resolution_label
        self.resolution_label.setText(f"Resolution: {label.display_text}")
        self.resolution_label.setStyleSheet("color: #faad14;" if label.odd_dimensions else "")

        self.comparison_table.setRowCount(len(result.rows))
        for row, item in enumerate(result.rows):
            cells = [QTableWidgetItem(item.label), QTableWidgetItem(item.value_a), QTableWidgetItem(item.value_b)]
            for column, cell in enumerate(cells):
                if not item.equal:
                    cell.setBackground(DIFFERENCE_COLOR)
                self.comparison_table.setItem(row, column, cell)

    # === Parameters ===

    def _current_parameters(self) -> ExportParameters:
        base = self._params.with_changes(
            input_a=self.panel_a.path,
            input_b=self.panel_b.path,
            output_path=self.output_edit.text().strip(),
        )
        return self.settings_widget.read_parameters(base)

    def _on_field_edited(self, changed: ChangedField):
        self._params = self._current_parameters()
        self._apply_derived(changed)

    def _apply_derived(self, changed: ChangedField):
        derived = derive_parameters(
            self._params,
            changed,
            self.probe_controller.descriptor_a,
            self.probe_controller.descriptor_b,
        )
        self._params = derived.parameters
        self.settings_widget.apply_parameters(
            derived.parameters, derived.geometry_editable, derived.advisories
        )
        if self.output_edit.text().strip() != derived.parameters.output_path:
            self.output_edit.setText(derived.parameters.output_path)

    def _suggest_output_path(self, input_path: str):
        source = Path(input_path)
        suggestion = source.with_name(f"{source.stem}_export.{self._params.container}")
        self.output_edit.setText(str(suggestion))

    def _on_browse_output(self):
        start = self.output_edit.text().strip() or settings.last_output_directory
        container = self._params.container
        path, _ = QFileDialog.getSaveFileName(
            self,
            "Choose Output File",
            start,
            f"{container.upper()} Files (*.{container});;All Files (*.*)"
        )
        if path:
            self.output_edit.setText(path)
            settings.last_output_directory = str(Path(path).parent)
            self._on_field_edited(ChangedField.OTHER)

    # === Export session ===

    def _on_export(self):
        self._params = self._current_parameters()
        target = active_target(
            self._params.mode,
            self.probe_controller.descriptor_a,
            self.probe_controller.descriptor_b,
        )
        source_fps = target.video.fps if target is not None and target.video is not None else None
        result = self.session_controller.submit(self._params.with_changes(source_fps=source_fps))
        if result.success:
            self._log("INFO", f"Export started: {result.value.output_path}")
        else:
            self._log("ERROR", result.error_message or "Export rejected.")

    def _on_cancel(self):
        if self.session_controller.cancel():
            self._log("WARNING", "Export cancelled.")

    def _on_reveal_output(self):
        session = self.session_controller.session
        if not session.can_reveal_output:
            return
        folder = Path(session.output_path).parent
        QDesktopServices.openUrl(QUrl.fromLocalFile(str(folder)))

    def _on_copy_command(self):
        text = self.command_display.toPlainText()
        if text:
            QApplication.clipboard().setText(text)
            self._log("INFO", "Command copied to clipboard.")

    def _render_session(self, session: ExportSession):
        busy = session.phase.is_busy

        self.export_btn.setEnabled(not busy)
        self.cancel_btn.setEnabled(session.can_cancel)
        self.reveal_btn.setEnabled(session.can_reveal_output)
        self.settings_widget.setEnabled(not busy)
        self.output_edit.setEnabled(not busy)
        self.output_browse_btn.setEnabled(not busy)

        self.progress_bar.setValue(int(session.progress_percent))
        self.progress_label.setText(session.progress_text)

        self.status_label.setStyleSheet("color: #ff4d4f;" if session.status_is_error else "")
        self.status_label.setText(session.status_message)

        self.command_display.setPlainText(session.command or "")

        if session.phase is not self._last_phase:
            if session.phase is ExportPhase.COMPLETED:
                self._log("SUCCESS", session.status_message)
            elif session.phase is ExportPhase.FAILED and session.error_message:
                self._log("ERROR", session.error_message)
        self._last_phase = session.phase

    def shutdown(self):
        """Stop running exports before the window closes."""
        logger.log_message.disconnect(self._on_app_log)
        if self.session_controller.is_busy():
            self.session_controller.cancel()
        if isinstance(self.encode_service, FFmpegEncodeService):
            self.encode_service.shutdown()
