"""Unit tests for splitting recordings with ffmpeg.

WHY: The segment naming decides the order in which transcripts are
merged later, and ffmpeg failures must reach the user with something
they can act on.

HOW: subprocess.run is patched with unittest.mock, so no ffmpeg is
needed. Tests check the command line, the output pattern and how
failures are translated.
"""

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from f4merge.split import (
    FfmpegError,
    FfmpegNotFoundError,
    NoInterviewsError,
    SplitError,
    build_ffmpeg_command,
    segment_pattern,
    split_interview,
    split_interviews,
)


class TestSegmentPattern:
    """Output names for the segments."""

    def test_next_to_recording(self):
        assert segment_pattern(Path("rec/interview.mp3")) == Path("rec/interview-%03d.mp3")

    def test_in_output_dir(self):
        assert segment_pattern(Path("rec/interview.wav"), Path("out")) == Path("out/interview-%03d.wav")

    def test_command(self):
        cmd = build_ffmpeg_command(Path("a.mp3"), Path("a-%03d.mp3"), "ffmpeg", "00:05:00")
        assert cmd == [
            "ffmpeg", "-i", "a.mp3", "-c", "copy", "-map", "0",
            "-segment_time", "00:05:00", "-f", "segment", "a-%03d.mp3",
        ]


class TestSplitInterview:
    """Running ffmpeg for one recording."""

    def test_runs_ffmpeg(self, tmp_path):
        rec = tmp_path / "interview.mp3"
        rec.write_bytes(b"")
        with patch("f4merge.split.subprocess.run") as run:
            pattern = split_interview(rec, ffmpeg="/opt/ffmpeg", segment_time="00:10:00")

        assert pattern == tmp_path / "interview-%03d.mp3"
        cmd = run.call_args[0][0]
        assert cmd[0] == "/opt/ffmpeg"
        assert cmd[cmd.index("-segment_time") + 1] == "00:10:00"
        assert cmd[-1] == str(pattern)
        assert run.call_args[1]["check"] is True

    def test_creates_output_dir(self, tmp_path):
        rec = tmp_path / "interview.mp3"
        out = tmp_path / "segments" / "nested"
        with patch("f4merge.split.subprocess.run"):
            pattern = split_interview(rec, output_dir=out)
        assert out.is_dir()
        assert pattern.parent == out

    def test_missing_ffmpeg(self, tmp_path):
        with patch("f4merge.split.subprocess.run", side_effect=FileNotFoundError("ffmpeg")):
            with pytest.raises(FfmpegNotFoundError, match="ffmpeg.org/download.html"):
                split_interview(tmp_path / "interview.mp3")

    def test_ffmpeg_failure_carries_stderr(self, tmp_path):
        error = subprocess.CalledProcessError(1, ["ffmpeg"], output="", stderr="Invalid data found\n")
        with patch("f4merge.split.subprocess.run", side_effect=error):
            with pytest.raises(FfmpegError) as excinfo:
                split_interview(tmp_path / "interview.mp3")

        assert excinfo.value.returncode == 1
        assert "Invalid data found" in str(excinfo.value)
        assert "splitting interviews with ffmpeg failed" in str(excinfo.value)
        assert isinstance(excinfo.value, SplitError)


class TestSplitInterviews:
    """Splitting everything found in the inputs."""

    def test_splits_each_recording_in_order(self, tmp_path):
        for name in ("b.mp3", "a.wav", "notes.txt"):
            (tmp_path / name).write_bytes(b"")
        with patch("f4merge.split.subprocess.run") as run:
            split = split_interviews([tmp_path])

        assert split == [tmp_path / "a.wav", tmp_path / "b.mp3"]
        inputs = [c[0][0][2] for c in run.call_args_list]
        assert inputs == [str(tmp_path / "a.wav"), str(tmp_path / "b.mp3")]

    def test_no_recordings(self, tmp_path):
        with patch("f4merge.split.subprocess.run") as run:
            with pytest.raises(NoInterviewsError, match="no interview recordings found"):
                split_interviews([tmp_path])
        run.assert_not_called()

    def test_stops_at_first_failure(self, tmp_path):
        for name in ("a.mp3", "b.mp3"):
            (tmp_path / name).write_bytes(b"")
        error = subprocess.CalledProcessError(1, ["ffmpeg"], stderr="boom")
        with patch("f4merge.split.subprocess.run", side_effect=error) as run:
            with pytest.raises(FfmpegError):
                split_interviews([tmp_path])
        assert run.call_count == 1
