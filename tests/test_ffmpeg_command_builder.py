#!/usr/bin/env python3
"""
Unit tests for FFmpegCommandBuilder
Single-input filter chains, side-by-side graphs, labels and output naming
"""

import sys
from pathlib import Path
from unittest.mock import patch

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from core.exceptions import FFmpegNotFoundError
from video_compare.models.export_parameters import ExportParameters, ExportMode, VideoCodec
from video_compare.services.ffmpeg_command_builder import (
    FFmpegCommandBuilder, build_label_filter, build_trim_filter, escape_drawtext,
    expected_duration_seconds, format_command, unique_output_path
)


def arg_after(cmd, flag):
    return cmd[cmd.index(flag) + 1]


class TestFilterHelpers:
    """Individual filter strings"""

    def test_trim_filter(self):
        assert build_trim_filter(10, 20) == "select=between(n\\,10\\,20),setpts=N/FRAME_RATE/TB"

    def test_trim_without_end_is_omitted(self):
        assert build_trim_filter(10, None) is None

    def test_trim_start_defaults_to_zero_and_end_not_before_start(self):
        assert "between(n\\,0\\,5)" in build_trim_filter(None, 5)
        assert "between(n\\,30\\,30)" in build_trim_filter(30, 10)

    def test_escape_drawtext(self):
        assert escape_drawtext("a:b") == "a\\:b"
        assert escape_drawtext("100%") == "100\\%"
        assert escape_drawtext("it's") == "it\\'s"
        assert escape_drawtext("c:\\x") == "c\\:\\\\x"

    def test_label_filter(self):
        label = build_label_filter("Camera 1")
        assert label.startswith("drawbox=x=0:y=ih*0.86:w=iw:h=ih*0.14:color=black@0.45:t=fill,")
        assert "drawtext=font='Segoe UI':text='Camera 1'" in label

    def test_blank_label_omitted(self):
        assert build_label_filter(None) is None
        assert build_label_filter("   ") is None


class TestSingleInputCommand:
    """-vf chain for one input"""

    def setup_method(self):
        self.builder = FFmpegCommandBuilder(ffmpeg_path="/usr/bin/ffmpeg")

    def test_minimal_command(self):
        params = ExportParameters(input_a="/in/a.mp4", output_path="/out/x.mp4")
        cmd, _ = self.builder.build_export_command(params)

        assert cmd == [
            "/usr/bin/ffmpeg", "-i", "/in/a.mp4",
            "-c:v", "libx264", "-crf", "23", "-c:a", "copy",
            "-y", "-progress", "pipe:1", "-nostats", "/out/x.mp4",
        ]

    def test_full_filter_chain(self):
        params = ExportParameters(
            input_a="/in/a.mp4", output_path="/out/x.mp4",
            trim_start_frame=0, trim_end_frame=299, fps=29.97,
            resize_width=1280, resize_height=720, keep_aspect=True,
        )
        cmd, _ = self.builder.build_export_command(params)

        assert arg_after(cmd, "-vf") == (
            "select=between(n\\,0\\,299),setpts=N/FRAME_RATE/TB,"
            "fps=fps=29.97,"
            "scale=1280:720:flags=lanczos:force_original_aspect_ratio=decrease"
        )
        assert arg_after(cmd, "-vsync") == "vfr"

    def test_scale_missing_axis(self):
        params = ExportParameters(
            input_a="/in/a.mp4", output_path="/out/x.mp4", resize_width=640, keep_aspect=False
        )
        cmd, _ = self.builder.build_export_command(params)
        assert arg_after(cmd, "-vf") == "scale=640:-1:flags=lanczos"
        assert "-vsync" not in cmd

    def test_single_b_uses_input_b_and_label_b(self):
        params = ExportParameters(
            mode=ExportMode.SINGLE_B, input_a="/in/a.mp4", input_b="/in/b.mp4",
            output_path="/out/x.mp4", label_a="A side", label_b="B side",
        )
        cmd, _ = self.builder.build_export_command(params)

        assert arg_after(cmd, "-i") == "/in/b.mp4"
        assert "text='B side'" in arg_after(cmd, "-vf")
        assert "A side" not in " ".join(cmd)

    def test_h265_aac_and_crf(self):
        params = ExportParameters(
            input_a="/in/a.mp4", output_path="/out/x.mkv", container="mkv",
            codec=VideoCodec.H265, crf=18, audio_copy=False,
        )
        cmd, _ = self.builder.build_export_command(params)
        assert arg_after(cmd, "-c:v") == "libx265"
        assert arg_after(cmd, "-crf") == "18"
        assert arg_after(cmd, "-c:a") == "aac"

    def test_output_path_override(self):
        params = ExportParameters(input_a="/in/a.mp4", output_path="/out/x.mp4")
        cmd, _ = self.builder.build_export_command(params, "/out/x (1).mp4")
        assert cmd[-1] == "/out/x (1).mp4"


class TestSideBySideCommand:
    """filter_complex graph joining both inputs"""

    def setup_method(self):
        self.builder = FFmpegCommandBuilder(ffmpeg_path="/usr/bin/ffmpeg")
        self.params = ExportParameters(
            mode=ExportMode.SIDE_BY_SIDE, input_a="/in/a.mp4", input_b="/in/b.mp4",
            output_path="/out/sbs.mp4", stack_height=720,
        )

    def test_graph(self):
        cmd, _ = self.builder.build_export_command(self.params)

        assert cmd[1:5] == ["-i", "/in/a.mp4", "-i", "/in/b.mp4"]
        assert arg_after(cmd, "-filter_complex") == (
            "[0:v]scale=-2:720:flags=lanczos[left];"
            "[1:v]scale=-2:720:flags=lanczos[right];"
            "[left][right]hstack=inputs=2[vout]"
        )
        assert "-vf" not in cmd
        assert "[vout]" in cmd
        assert cmd[cmd.index("[vout]") + 1:cmd.index("[vout]") + 3] == ["-map", "0:a?"]

    def test_no_audio_map_without_copy(self):
        cmd, _ = self.builder.build_export_command(self.params.with_changes(audio_copy=False))
        assert "0:a?" not in cmd

    def test_labels_per_side(self):
        params = self.params.with_changes(label_a="Original", label_b="Re-encode")
        graph = arg_after(self.builder.build_export_command(params)[0], "-filter_complex")

        left, right, _ = graph.split(";")
        assert "text='Original'" in left
        assert "text='Re-encode'" in right

    def test_empty_side_uses_null(self):
        params = self.params.with_changes(stack_height=None)
        graph = arg_after(self.builder.build_export_command(params)[0], "-filter_complex")
        assert graph.startswith("[0:v]null[left];[1:v]null[right];")


class TestCommandString:
    """Display form of the command"""

    def test_quotes_arguments_with_spaces(self):
        assert format_command(["ffmpeg", "-i", "/my videos/a.mp4"]) == 'ffmpeg -i "/my videos/a.mp4"'

    def test_plain_arguments_unquoted(self):
        assert format_command(["ffmpeg", "-y"]) == "ffmpeg -y"

    def test_builder_returns_matching_string(self):
        builder = FFmpegCommandBuilder(ffmpeg_path="/usr/bin/ffmpeg")
        params = ExportParameters(input_a="/in/a b.mp4", output_path="/out/x.mp4")
        cmd, command_string = builder.build_export_command(params)
        assert command_string == format_command(cmd)
        assert '"/in/a b.mp4"' in command_string


class TestUniqueOutputPath:
    """Existing outputs are never overwritten"""

    def test_unused_path_kept(self, tmp_path):
        target = tmp_path / "clip.mp4"
        assert unique_output_path(str(target)) == str(target)

    def test_numbered_suffix(self, tmp_path):
        (tmp_path / "clip.mp4").write_bytes(b"")
        (tmp_path / "clip (1).mp4").write_bytes(b"")

        assert unique_output_path(str(tmp_path / "clip.mp4")) == str(tmp_path / "clip (2).mp4")


class TestExpectedDuration:
    """Output duration used for explicit percentages"""

    def test_from_trim_and_source_fps(self):
        params = ExportParameters(trim_start_frame=0, trim_end_frame=249, source_fps=25.0)
        assert expected_duration_seconds(params) == pytest.approx(10.0)

    def test_target_fps_does_not_change_duration(self):
        # 300 frames of a 30 fps source last 10 s whatever the output rate
        for target in (15.0, 30.0, 60.0):
            params = ExportParameters(
                trim_start_frame=0, trim_end_frame=299, fps=target, source_fps=30.0
            )
            assert expected_duration_seconds(params) == pytest.approx(10.0)

    def test_partial_range(self):
        params = ExportParameters(trim_start_frame=120, trim_end_frame=179, fps=24.0, source_fps=60.0)
        assert expected_duration_seconds(params) == pytest.approx(1.0)

    def test_unknown_without_source_fps_or_trim(self):
        assert expected_duration_seconds(ExportParameters(trim_end_frame=100)) is None
        assert expected_duration_seconds(ExportParameters(trim_end_frame=100, fps=60.0)) is None
        assert expected_duration_seconds(ExportParameters(source_fps=25.0)) is None

    def test_side_by_side_has_no_duration(self):
        params = ExportParameters(
            mode=ExportMode.SIDE_BY_SIDE, trim_end_frame=100, source_fps=25.0
        )
        assert expected_duration_seconds(params) is None


class TestBinaryLookup:

    def test_missing_ffmpeg_raises(self):
        with patch("video_compare.services.ffmpeg_command_builder.binary_manager.get_ffmpeg_path",
                   return_value=None):
            with pytest.raises(FFmpegNotFoundError):
                FFmpegCommandBuilder()
