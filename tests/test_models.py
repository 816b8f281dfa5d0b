#!/usr/bin/env python3
"""
Unit tests for the data models
Parameter validation, progress policy and session snapshot properties
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from video_compare.models.export_parameters import ExportParameters, ExportMode, VideoCodec
from video_compare.models.export_session import (
    ApproximateProgressPolicy, ExportPhase, ExportSession, ProgressEvent, ProgressPhase
)


class TestExportParameters:
    """Field validation and mode helpers"""

    def test_defaults(self):
        params = ExportParameters()
        assert params.mode is ExportMode.SINGLE_A
        assert params.codec is VideoCodec.H264
        assert params.crf == 23
        assert params.container == "mp4"
        assert params.audio_copy
        assert params.keep_aspect

    @pytest.mark.parametrize("changes", [
        {"crf": -1},
        {"crf": 52},
        {"container": "avi"},
        {"resize_width": 0},
        {"stack_height": -2},
        {"fps": 0.0},
        {"fps": float("inf")},
        {"fps": float("nan")},
        {"source_fps": -1.0},
        {"trim_start_frame": -1},
    ])
    def test_invalid_values_rejected(self, changes):
        with pytest.raises(ValueError):
            ExportParameters(**changes)

    def test_selected_inputs(self):
        params = ExportParameters(input_a="/a.mp4", input_b="/b.mp4")
        assert params.selected_inputs == ("/a.mp4",)
        assert params.with_changes(mode=ExportMode.SINGLE_B).selected_inputs == ("/b.mp4",)
        assert params.with_changes(mode=ExportMode.SIDE_BY_SIDE).selected_inputs == ("/a.mp4", "/b.mp4")

    def test_cleared_for_side_by_side(self):
        params = ExportParameters(
            resize_width=1280, resize_height=720, fps=30.0, trim_start_frame=1, trim_end_frame=9,
            stack_height=720, label_a="A",
        )
        cleared = params.cleared_for_side_by_side()
        assert cleared.resize_width is None
        assert cleared.resize_height is None
        assert cleared.fps is None
        assert cleared.trim_start_frame is None
        assert cleared.trim_end_frame is None
        assert cleared.stack_height == 720
        assert cleared.label_a == "A"

    def test_encoder_names(self):
        assert VideoCodec.H264.encoder == "libx264"
        assert VideoCodec.H265.encoder == "libx265"

    def test_to_dict_uses_plain_values(self):
        data = ExportParameters(mode=ExportMode.SIDE_BY_SIDE, codec=VideoCodec.H265).to_dict()
        assert data["mode"] == "side-by-side"
        assert data["codec"] == "h265"


class TestApproximateProgressPolicy:
    """Progress estimation without a known duration"""

    def test_advance_stops_at_ceiling(self):
        policy = ApproximateProgressPolicy()
        value = 0.0
        for _ in range(200):
            value = policy.advance(value)
        assert value == 95.0

    def test_apply_is_monotonic_and_capped(self):
        policy = ApproximateProgressPolicy()
        assert policy.apply(10.0, 50.0) == 50.0
        assert policy.apply(50.0, 20.0) == 50.0
        assert policy.apply(50.0, 100.0) == 95.0

    @pytest.mark.parametrize("increment,ceiling", [(0, 95), (1, 0), (1, 100)])
    def test_invalid_policy(self, increment, ceiling):
        with pytest.raises(ValueError):
            ApproximateProgressPolicy(increment=increment, ceiling=ceiling)


class TestProgressModels:

    def test_phase_from_ffmpeg(self):
        assert ProgressPhase.from_ffmpeg("continue") is ProgressPhase.PROGRESSING
        assert ProgressPhase.from_ffmpeg("end\n") is ProgressPhase.END
        assert ProgressPhase.from_ffmpeg("ERROR") is ProgressPhase.ERROR

    def test_event_seconds(self):
        event = ProgressEvent(session_id="s", phase=ProgressPhase.PROGRESSING, processed_time_us=1_500_000)
        assert event.processed_seconds == 1.5
        assert not event.is_terminal
        assert ProgressEvent(session_id="s", phase=ProgressPhase.END).is_terminal


class TestExportSession:
    """Derived properties of the session snapshot"""

    def test_phase_flags(self):
        assert ExportPhase.ACTIVE.is_busy
        assert ExportPhase.SUBMITTING.is_busy
        assert not ExportPhase.IDLE.is_busy
        assert all(phase.is_terminal for phase in
                   (ExportPhase.COMPLETED, ExportPhase.FAILED, ExportPhase.CANCELLED))

    def test_cancel_only_when_active(self):
        for phase in ExportPhase:
            session = ExportSession(phase=phase, session_id="s")
            assert session.can_cancel == (phase is ExportPhase.ACTIVE)

    def test_reveal_needs_completed_output(self):
        assert ExportSession(phase=ExportPhase.COMPLETED, output_path="/out.mp4").can_reveal_output
        assert not ExportSession(phase=ExportPhase.COMPLETED).can_reveal_output
        assert not ExportSession(phase=ExportPhase.FAILED, output_path="/out.mp4").can_reveal_output

    def test_progress_text(self):
        assert ExportSession(phase=ExportPhase.COMPLETED).progress_text == "Done"
        assert ExportSession(phase=ExportPhase.SUBMITTING).progress_text == "Starting export..."
        assert ExportSession(phase=ExportPhase.ACTIVE, processed_seconds=3.25).progress_text == "Processed 3.2s"
        assert ExportSession(phase=ExportPhase.ACTIVE).progress_text == ""

    def test_evolve_returns_copy(self):
        session = ExportSession()
        active = session.evolve(phase=ExportPhase.ACTIVE)
        assert session.phase is ExportPhase.IDLE
        assert active.phase is ExportPhase.ACTIVE
