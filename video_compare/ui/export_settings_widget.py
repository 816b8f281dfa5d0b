"""
Export settings widget.

Form for the export parameters. Numeric fields are line edits so that an
empty field means "not set". Every edit is reported with the field tag the
derivation engine expects.
"""

import math
from typing import Optional
from PySide6.QtWidgets import (
    QWidget, QFormLayout, QHBoxLayout, QComboBox, QSpinBox, QCheckBox,
    QLineEdit, QLabel
)
from PySide6.QtCore import Signal
from PySide6.QtGui import QIntValidator, QDoubleValidator

from ..models.export_parameters import ExportParameters, ExportMode, VideoCodec, CONTAINERS
from ..services.parameter_derivation import ChangedField


MODE_LABELS = [
    (ExportMode.SINGLE_A, "Input A only"),
    (ExportMode.SINGLE_B, "Input B only"),
    (ExportMode.SIDE_BY_SIDE, "Side by side (A | B)"),
]

CODEC_LABELS = [
    (VideoCodec.H264, "H.264 (libx264)"),
    (VideoCodec.H265, "H.265 (libx265)"),
]


def _parse_int(text: str) -> Optional[int]:
    text = text.strip()
    if not text:
        return None
    try:
        value = int(text)
    except ValueError:
        return None
    return value if value > 0 else None


def _parse_frame(text: str) -> Optional[int]:
    text = text.strip()
    if not text:
        return None
    try:
        value = int(text)
    except ValueError:
        return None
    return value if value >= 0 else None


def _parse_float(text: str) -> Optional[float]:
    text = text.strip().replace(",", ".")
    if not text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value if value > 0 else None


def _text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)


class ExportSettingsWidget(QWidget):
    """
    Export parameter form.

    Signals:
        field_edited: (changed: ChangedField)
    """

    field_edited = Signal(object)  # ChangedField

    def __init__(self, parent=None):
        super().__init__(parent)
        self._updating = False
        self._create_widgets()
        self._connect_signals()

    def _create_widgets(self):
        layout = QFormLayout(self)

        self.mode_combo = QComboBox()
        for mode, label in MODE_LABELS:
            self.mode_combo.addItem(label, mode.value)
        layout.addRow("Mode:", self.mode_combo)

        self.container_combo = QComboBox()
        for container in CONTAINERS:
            self.container_combo.addItem(container.upper(), container)
        layout.addRow("Container:", self.container_combo)

        self.codec_combo = QComboBox()
        for codec, label in CODEC_LABELS:
            self.codec_combo.addItem(label, codec.value)
        layout.addRow("Codec:", self.codec_combo)

        self.crf_spin = QSpinBox()
        self.crf_spin.setRange(0, 51)
        self.crf_spin.setValue(23)
        self.crf_spin.setToolTip("Lower = better quality, larger file")
        layout.addRow("CRF:", self.crf_spin)

        self.audio_copy_check = QCheckBox("Copy audio stream (otherwise AAC)")
        self.audio_copy_check.setChecked(True)
        layout.addRow("", self.audio_copy_check)

        # Geometry
        size_layout = QHBoxLayout()
        self.width_edit = QLineEdit()
        self.width_edit.setValidator(QIntValidator(1, 16384, self))
        self.width_edit.setPlaceholderText("width")
        self.height_edit = QLineEdit()
        self.height_edit.setValidator(QIntValidator(1, 16384, self))
        self.height_edit.setPlaceholderText("height")
        size_layout.addWidget(self.width_edit)
        size_layout.addWidget(QLabel("×"))
        size_layout.addWidget(self.height_edit)
        layout.addRow("Resize:", size_layout)

        self.keep_aspect_check = QCheckBox("Keep aspect ratio")
        self.keep_aspect_check.setChecked(True)
        layout.addRow("", self.keep_aspect_check)

        self.stack_height_label = QLabel("—")
        layout.addRow("Stack height:", self.stack_height_label)

        # Timing
        self.fps_edit = QLineEdit()
        fps_validator = QDoubleValidator(0.001, 1000.0, 3, self)
        fps_validator.setNotation(QDoubleValidator.Notation.StandardNotation)
        self.fps_edit.setValidator(fps_validator)
        self.fps_edit.setPlaceholderText("source")
        layout.addRow("FPS:", self.fps_edit)

        trim_layout = QHBoxLayout()
        self.trim_start_edit = QLineEdit()
        self.trim_start_edit.setValidator(QIntValidator(0, 2_000_000_000, self))
        self.trim_start_edit.setPlaceholderText("start frame")
        self.trim_end_edit = QLineEdit()
        self.trim_end_edit.setValidator(QIntValidator(0, 2_000_000_000, self))
        self.trim_end_edit.setPlaceholderText("end frame")
        trim_layout.addWidget(self.trim_start_edit)
        trim_layout.addWidget(QLabel("to"))
        trim_layout.addWidget(self.trim_end_edit)
        layout.addRow("Frames:", trim_layout)

        # Labels
        self.label_a_edit = QLineEdit()
        self.label_a_edit.setPlaceholderText("Overlay label for A (optional)")
        layout.addRow("Label A:", self.label_a_edit)
        self.label_b_edit = QLineEdit()
        self.label_b_edit.setPlaceholderText("Overlay label for B (optional)")
        layout.addRow("Label B:", self.label_b_edit)

        self.advisory_label = QLabel("")
        self.advisory_label.setStyleSheet("color: #faad14;")
        self.advisory_label.setWordWrap(True)
        layout.addRow("", self.advisory_label)

        self._geometry_widgets = [
            self.width_edit, self.height_edit, self.keep_aspect_check,
            self.fps_edit, self.trim_start_edit, self.trim_end_edit,
        ]

    def _connect_signals(self):
        self.mode_combo.currentIndexChanged.connect(lambda _: self._emit(ChangedField.MODE))
        self.container_combo.currentIndexChanged.connect(lambda _: self._emit(ChangedField.CONTAINER))
        self.width_edit.textEdited.connect(lambda _: self._emit(ChangedField.RESIZE_WIDTH))
        self.height_edit.textEdited.connect(lambda _: self._emit(ChangedField.RESIZE_HEIGHT))
        self.keep_aspect_check.toggled.connect(lambda _: self._emit(ChangedField.KEEP_ASPECT))

        for edit in (self.fps_edit, self.trim_start_edit, self.trim_end_edit,
                     self.label_a_edit, self.label_b_edit):
            edit.textEdited.connect(lambda _: self._emit(ChangedField.OTHER))
        self.codec_combo.currentIndexChanged.connect(lambda _: self._emit(ChangedField.OTHER))
        self.crf_spin.valueChanged.connect(lambda _: self._emit(ChangedField.OTHER))
        self.audio_copy_check.toggled.connect(lambda _: self._emit(ChangedField.OTHER))

    def _emit(self, changed: ChangedField):
        if not self._updating:
            self.field_edited.emit(changed)

    # === Form <-> parameters ===

    def read_parameters(self, base: ExportParameters) -> ExportParameters:
        """Copy of ``base`` with every form field applied."""
        label_a = self.label_a_edit.text().strip() or None
        label_b = self.label_b_edit.text().strip() or None
        return base.with_changes(
            mode=ExportMode(self.mode_combo.currentData()),
            container=self.container_combo.currentData(),
            codec=VideoCodec(self.codec_combo.currentData()),
            crf=self.crf_spin.value(),
            audio_copy=self.audio_copy_check.isChecked(),
            resize_width=_parse_int(self.width_edit.text()),
            resize_height=_parse_int(self.height_edit.text()),
            keep_aspect=self.keep_aspect_check.isChecked(),
            fps=_parse_float(self.fps_edit.text()),
            trim_start_frame=_parse_frame(self.trim_start_edit.text()),
            trim_end_frame=_parse_frame(self.trim_end_edit.text()),
            label_a=label_a,
            label_b=label_b,
        )

    def apply_parameters(self, params: ExportParameters, geometry_editable: bool, advisories=()):
        """Render derived parameters without re-emitting edits."""
        self._updating = True
        try:
            self._select_data(self.mode_combo, params.mode.value)
            self._select_data(self.container_combo, params.container)
            self._select_data(self.codec_combo, params.codec.value)
            self.crf_spin.setValue(params.crf)
            self.audio_copy_check.setChecked(params.audio_copy)
            self.keep_aspect_check.setChecked(params.keep_aspect)

            self._set_text(self.width_edit, _text(params.resize_width))
            self._set_text(self.height_edit, _text(params.resize_height))
            self._set_text(self.fps_edit, _text(params.fps))
            self._set_text(self.trim_start_edit, _text(params.trim_start_frame))
            self._set_text(self.trim_end_edit, _text(params.trim_end_frame))

            self.stack_height_label.setText(
                str(params.stack_height) if params.stack_height else "—"
            )
            for widget in self._geometry_widgets:
                widget.setEnabled(geometry_editable)

            self.advisory_label.setText("\n".join(advisories))
        finally:
            self._updating = False

    @staticmethod
    def _select_data(combo: QComboBox, data):
        index = combo.findData(data)
        if index >= 0 and index != combo.currentIndex():
            combo.setCurrentIndex(index)

    @staticmethod
    def _set_text(edit: QLineEdit, text: str):
        if edit.text() != text:
            edit.setText(text)
