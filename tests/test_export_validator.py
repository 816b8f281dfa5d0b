#!/usr/bin/env python3
"""
Unit tests for the export validator
Check order, messages and the side-by-side stack height requirement
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from core.exceptions import ValidationError, ErrorSeverity
from video_compare.models.export_parameters import ExportParameters, ExportMode
from video_compare.services.export_validator import (
    MSG_CHOOSE_OUTPUT, MSG_OUTPUT_IS_INPUT, MSG_SELECT_BOTH_INPUTS, MSG_SELECT_INPUT_A,
    MSG_SELECT_INPUT_B, MSG_STACK_HEIGHT, validate_export, validate_request
)


class TestValidateExport:
    """The five ordered checks"""

    def test_single_a_requires_input_a(self):
        error = validate_export("", "/b.mp4", "/out.mp4", ExportMode.SINGLE_A)
        assert isinstance(error, ValidationError)
        assert error.message == MSG_SELECT_INPUT_A == "Select an Input A file."
        assert error.user_message == MSG_SELECT_INPUT_A
        assert error.severity == ErrorSeverity.WARNING

    def test_single_b_requires_input_b(self):
        error = validate_export("/a.mp4", "  ", "/out.mp4", ExportMode.SINGLE_B)
        assert error.message == MSG_SELECT_INPUT_B

    def test_side_by_side_requires_both(self):
        for a, b in (("", "/b.mp4"), ("/a.mp4", ""), ("", "")):
            error = validate_export(a, b, "/out.mp4", ExportMode.SIDE_BY_SIDE)
            assert error.message == MSG_SELECT_BOTH_INPUTS

    def test_output_required(self):
        error = validate_export("/a.mp4", None, "", ExportMode.SINGLE_A)
        assert error.message == MSG_CHOOSE_OUTPUT
        assert error.field == 'output_path'

    def test_output_must_differ_from_selected_input(self):
        error = validate_export("/videos/a.mp4", "", "/videos/a.mp4", ExportMode.SINGLE_A)
        assert error.message == MSG_OUTPUT_IS_INPUT

        error = validate_export("/a.mp4", "/b.mp4", "/b.mp4", ExportMode.SIDE_BY_SIDE)
        assert error.message == MSG_OUTPUT_IS_INPUT

    def test_unselected_input_may_match_output(self):
        assert validate_export("/a.mp4", "/b.mp4", "/b.mp4", ExportMode.SINGLE_A) is None

    def test_equivalent_paths_detected(self):
        error = validate_export("/videos/a.mp4", "", "/videos/./a.mp4", ExportMode.SINGLE_A)
        assert error.message == MSG_OUTPUT_IS_INPUT

    def test_valid_request(self):
        assert validate_export("/a.mp4", "/b.mp4", "/out.mp4", ExportMode.SIDE_BY_SIDE) is None

    def test_first_failure_wins(self):
        # Missing input and missing output: the input check runs first
        error = validate_export("", "", "", ExportMode.SINGLE_A)
        assert error.message == MSG_SELECT_INPUT_A

        error = validate_export("", "", "", ExportMode.SIDE_BY_SIDE)
        assert error.message == MSG_SELECT_BOTH_INPUTS

        error = validate_export("/a.mp4", "", "", ExportMode.SINGLE_A)
        assert error.message == MSG_CHOOSE_OUTPUT


class TestValidateRequest:
    """Full request validation returns a Result"""

    def test_success_returns_parameters(self):
        params = ExportParameters(input_a="/a.mp4", output_path="/out.mp4")
        result = validate_request(params)
        assert result.success
        assert result.value is params

    def test_failure_carries_message(self):
        result = validate_request(ExportParameters(output_path="/out.mp4"))
        assert not result.success
        assert result.error_message == MSG_SELECT_INPUT_A

    def test_side_by_side_requires_stack_height(self):
        params = ExportParameters(
            mode=ExportMode.SIDE_BY_SIDE, input_a="/a.mp4", input_b="/b.mp4", output_path="/out.mp4"
        )
        result = validate_request(params)
        assert not result.success
        assert result.error_message == MSG_STACK_HEIGHT

    def test_side_by_side_odd_stack_height_rejected(self):
        params = ExportParameters(
            mode=ExportMode.SIDE_BY_SIDE, input_a="/a.mp4", input_b="/b.mp4",
            output_path="/out.mp4", stack_height=721
        )
        assert not validate_request(params).success

    def test_side_by_side_with_stack_height(self):
        params = ExportParameters(
            mode=ExportMode.SIDE_BY_SIDE, input_a="/a.mp4", input_b="/b.mp4",
            output_path="/out.mp4", stack_height=720
        )
        assert validate_request(params).success
