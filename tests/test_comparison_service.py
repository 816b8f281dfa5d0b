#!/usr/bin/env python3
"""
Unit tests for the comparison service
Field formatting, row order, equality and the resolution label
"""

import sys
from dataclasses import replace
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from tests.helpers.descriptors import make_descriptor
from video_compare.models.comparison import NOT_ENOUGH_DATA_MESSAGE
from video_compare.models.media_descriptor import MediaDescriptor
from video_compare.services.comparison_service import (
    MISSING, compare_descriptors, describe_descriptor, format_bitrate,
    format_duration, format_fps, format_sample_rate, format_size, has_odd_dimensions
)


EXPECTED_LABELS = [
    "Container", "Duration", "Bitrate", "Video Codec", "Profile", "Resolution",
    "Pixel Format", "Color Space", "Frame Rate", "Frame Count", "Audio Codec",
    "Channels", "Sample Rate", "Audio Bitrate",
]


class TestFormatters:
    """Display formatting of single values"""

    def test_bitrate_in_kbps(self):
        assert format_bitrate(8_000_000) == "8000 kbps"
        assert format_bitrate(128_499) == "128 kbps"

    def test_missing_values_use_dash(self):
        assert format_bitrate(None) == MISSING
        assert format_duration(None) == MISSING
        assert format_fps(None) == MISSING
        assert format_sample_rate(None) == MISSING
        assert format_size(None) == MISSING

    def test_duration_two_decimals(self):
        assert format_duration(10.0) == "10.00 s"
        assert format_duration(3.14159) == "3.14 s"

    def test_fps_three_decimals(self):
        assert format_fps(30000 / 1001) == "29.970 fps"

    def test_sample_rate_and_size(self):
        assert format_sample_rate(48000) == "48000 Hz"
        assert format_size(1024) == "1024 bytes"


class TestCompareDescriptors:
    """Field-by-field comparison of two descriptors"""

    def setup_method(self):
        self.a = make_descriptor("/videos/a.mp4")
        self.b = make_descriptor("/videos/b.mp4", width=1280, height=720)

    def test_missing_descriptor_is_not_enough_data(self):
        for a, b in ((None, self.b), (self.a, None), (None, None)):
            result = compare_descriptors(a, b)
            assert result.rows == []
            assert result.resolution_label is None
            assert not result.has_data
            assert result.message == NOT_ENOUGH_DATA_MESSAGE

    def test_rows_are_ordered(self):
        result = compare_descriptors(self.a, self.b)
        assert [row.label for row in result.rows] == EXPECTED_LABELS

    def test_equality_on_display_strings(self):
        result = compare_descriptors(self.a, self.b)
        rows = {row.label: row for row in result.rows}

        assert rows["Video Codec"].equal
        assert not rows["Resolution"].equal
        assert rows["Resolution"].value_a == "1920×1080"
        assert rows["Resolution"].value_b == "1280×720"

    def test_both_missing_compare_equal(self):
        a = replace(self.a, audio=None)
        b = replace(self.b, audio=None)
        rows = {row.label: row for row in compare_descriptors(a, b).rows}

        assert rows["Audio Codec"].value_a == MISSING
        assert rows["Audio Codec"].equal

    def test_comparison_is_symmetric(self):
        forward = compare_descriptors(self.a, self.b)
        backward = compare_descriptors(self.b, self.a)

        for f_row, b_row in zip(forward.rows, backward.rows):
            assert f_row.label == b_row.label
            assert f_row.equal == b_row.equal
            assert f_row.value_a == b_row.value_b
            assert f_row.value_b == b_row.value_a

    def test_differences_lists_unequal_rows(self):
        result = compare_descriptors(self.a, self.b)
        assert [row.label for row in result.differences] == ["Resolution"]

    def test_identical_inputs_have_no_differences(self):
        result = compare_descriptors(self.a, make_descriptor("/videos/copy.mp4"))
        assert result.differences == []


class TestResolutionLabel:
    """Resolution row and odd-dimension flag"""

    def test_equal_resolution_shows_single_value(self):
        label = compare_descriptors(make_descriptor(), make_descriptor("/b.mp4")).resolution_label
        assert label.equal
        assert label.text == "1920×1080"
        assert not label.odd_dimensions

    def test_different_resolution_shows_both(self):
        label = compare_descriptors(
            make_descriptor(), make_descriptor("/b.mp4", width=1280, height=720)
        ).resolution_label
        assert label.text == "1920×1080 vs 1280×720"

    def test_odd_dimension_on_either_side_sets_flag(self):
        even = make_descriptor()
        odd = make_descriptor("/b.mp4", width=1280, height=721)

        for a, b in ((even, odd), (odd, even)):
            label = compare_descriptors(a, b).resolution_label
            assert label.odd_dimensions
            assert label.display_text.endswith("(odd dimensions detected)")

    def test_odd_flag_independent_of_equality(self):
        label = compare_descriptors(
            make_descriptor(width=721, height=405), make_descriptor("/b.mp4", width=721, height=405)
        ).resolution_label
        assert label.equal
        assert label.odd_dimensions

    def test_has_odd_dimensions_ignores_missing_video(self):
        no_video = MediaDescriptor(file="/audio.m4a")
        assert not has_odd_dimensions(no_video, None)


class TestDescribeDescriptor:
    """Rows for a single input pane"""

    def test_none_gives_no_rows(self):
        assert describe_descriptor(None) == []

    def test_file_and_size_lead(self):
        rows = describe_descriptor(make_descriptor("/videos/a.mp4"))
        assert rows[0] == ("File", "/videos/a.mp4")
        assert rows[1] == ("Size", "10000000 bytes")
        assert [label for label, _ in rows[2:]] == EXPECTED_LABELS

    def test_values_formatted(self):
        rows = dict(describe_descriptor(make_descriptor()))
        assert rows["Duration"] == "10.01 s"
        assert rows["Bitrate"] == "8000 kbps"
        assert rows["Frame Rate"] == "29.970 fps"
        assert rows["Sample Rate"] == "48000 Hz"
        assert rows["Audio Bitrate"] == "128 kbps"
