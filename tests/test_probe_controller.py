#!/usr/bin/env python3
"""
Tests for the probe controller
Results are applied directly; the worker thread path is covered by one slow test
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from core.exceptions import MediaProbeError
from core.result_types import Result
from tests.helpers.descriptors import make_descriptor
from tests.helpers.fake_services import FakeProbeService
from video_compare.controllers.probe_controller import SLOT_A, SLOT_B, ProbeController


class TestProbeController:
    """Descriptor bookkeeping for Input A and Input B"""

    @pytest.fixture(autouse=True)
    def setup(self, qapp):
        self.service = FakeProbeService()
        self.controller = ProbeController(self.service)
        self.changed = []
        self.failed = []
        self.controller.descriptor_changed.connect(lambda slot, d: self.changed.append((slot, d)))
        self.controller.probe_failed.connect(lambda slot, msg: self.failed.append((slot, msg)))
        yield
        self.controller.deleteLater()

    def test_success_stores_descriptor(self):
        descriptor = make_descriptor("/videos/a.mp4")
        self.controller.apply_probe_result(SLOT_A, Result.success(descriptor))

        assert self.controller.descriptor_a is descriptor
        assert self.controller.descriptor_b is None
        assert self.changed == [(SLOT_A, descriptor)]

    def test_failure_keeps_previous_descriptor(self):
        descriptor = make_descriptor("/videos/b.mp4")
        self.controller.apply_probe_result(SLOT_B, Result.success(descriptor))

        error = MediaProbeError(
            "ffprobe failed on c.mp4", file_path="/videos/c.mp4",
            user_message="ffprobe failed: moov atom not found"
        )
        self.controller.apply_probe_result(SLOT_B, Result.error(error))

        assert self.controller.descriptor_b is descriptor
        assert self.failed == [(SLOT_B, "ffprobe failed: moov atom not found")]

    def test_comparison_needs_both(self):
        self.controller.apply_probe_result(SLOT_A, Result.success(make_descriptor("/a.mp4")))
        assert not self.controller.comparison().has_data

        self.controller.apply_probe_result(
            SLOT_B, Result.success(make_descriptor("/b.mp4", width=1280, height=720))
        )
        comparison = self.controller.comparison()
        assert comparison.has_data
        assert comparison.resolution_label.text == "1920×1080 vs 1280×720"

    def test_unknown_slot_rejected(self):
        with pytest.raises(ValueError):
            self.controller.start_probe("c", "/videos/a.mp4")

    def test_background_probe(self, qapp):
        descriptor = make_descriptor("/videos/a.mp4")
        self.service.descriptors["/videos/a.mp4"] = descriptor

        started = []
        self.controller.probe_started.connect(lambda slot, path: started.append((slot, path)))
        self.controller.start_probe(SLOT_A, "/videos/a.mp4")

        worker = self.controller._workers[SLOT_A]
        assert worker.wait(5000)
        qapp.processEvents()

        assert started == [(SLOT_A, "/videos/a.mp4")]
        assert self.controller.descriptor_a is descriptor
        assert not self.controller.is_probing(SLOT_A)
