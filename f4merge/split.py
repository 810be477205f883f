"""Splitting interview recordings into fixed-length segments with ffmpeg.

WHY: F4 works best on short recordings, so interviews are cut into
segments of a few minutes, transcribed one by one and merged again
afterwards. The segment length must match what the merge assumes: each
transcript's length is its last timestamp rounded up to the minute.

HOW: ffmpeg's segment muxer copies the streams without re-encoding and
numbers the parts, e.g. ``interview.mp3`` becomes ``interview-000.mp3``,
``interview-001.mp3`` and so on, next to the original or in a chosen
output directory.

RULES:
- Streams are copied (``-c copy -map 0``), never re-encoded
- Output pattern: ``<dir>/<stem>-%03d<suffix>``
- A missing ffmpeg raises FfmpegNotFoundError with install hints
- A failing ffmpeg raises FfmpegError carrying its stderr
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Iterable, List, Optional

from f4merge import config
from f4merge.discovery import collect_interviews
from f4merge.errors import F4MergeError

logger = logging.getLogger(__name__)


class SplitError(F4MergeError):
    """Base class for failures while splitting recordings."""


class NoInterviewsError(SplitError):
    def __init__(self) -> None:
        super().__init__("no interview recordings found")


class FfmpegNotFoundError(SplitError):
    """The ffmpeg executable could not be started."""

    def __init__(self, executable: str) -> None:
        self.executable = executable
        super().__init__(
            f"failed to invoke {executable} to split the interview files, install "
            "ffmpeg with your favorite package manager or on Windows download it "
            "from https://ffmpeg.org/download.html#build-windows and add it to "
            'your "Path" environment variable'
        )


class FfmpegError(SplitError):
    """ffmpeg ran but exited with an error."""

    def __init__(self, cmd: List[str], returncode: int, stderr: str) -> None:
        self.cmd = cmd
        self.returncode = returncode
        self.stderr = stderr
        msg = [
            f"splitting interviews with ffmpeg failed (exit status {returncode}):",
            "  " + " ".join(cmd),
        ]
        if stderr:
            msg.append("--- stderr ---")
            msg.append(stderr.strip())
        super().__init__("\n".join(msg))


def segment_pattern(interview: Path, output_dir: Optional[Path] = None) -> Path:
    """The ffmpeg output pattern for the segments of ``interview``."""
    directory = output_dir if output_dir is not None else interview.parent
    return directory / f"{interview.stem}-%03d{interview.suffix}"


def build_ffmpeg_command(
    interview: Path,
    pattern: Path,
    ffmpeg: str = config.FFMPEG_EXECUTABLE,
    segment_time: str = config.SEGMENT_TIME,
) -> List[str]:
    return [
        ffmpeg,
        "-i",
        str(interview),
        "-c",
        "copy",
        "-map",
        "0",
        "-segment_time",
        segment_time,
        "-f",
        "segment",
        str(pattern),
    ]


def split_interview(
    interview: str | Path,
    output_dir: Optional[str | Path] = None,
    ffmpeg: str = config.FFMPEG_EXECUTABLE,
    segment_time: str = config.SEGMENT_TIME,
) -> Path:
    """Split one recording into segments.

    Args:
        interview: The recording to split.
        output_dir: Where segments go. Defaults to the recording's folder
            and is created if missing.
        ffmpeg: ffmpeg executable name or path.
        segment_time: Segment length in ffmpeg duration syntax.

    Returns:
        The output pattern passed to ffmpeg.

    Raises:
        FfmpegNotFoundError: ffmpeg could not be started.
        FfmpegError: ffmpeg exited with a non-zero status.
    """
    interview = Path(interview)
    out = Path(output_dir) if output_dir is not None else None
    if out is not None:
        out.mkdir(parents=True, exist_ok=True)

    pattern = segment_pattern(interview, out)
    cmd = build_ffmpeg_command(interview, pattern, ffmpeg, segment_time)
    logger.info("Splitting %s into %s segments", interview, segment_time)
    logger.debug("Running %s", " ".join(cmd))

    try:
        subprocess.run(
            cmd,
            check=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
        )
    except FileNotFoundError as exc:
        raise FfmpegNotFoundError(ffmpeg) from exc
    except subprocess.CalledProcessError as exc:
        raise FfmpegError(cmd, exc.returncode, exc.stderr or "") from exc
    return pattern


def split_interviews(
    inputs: Iterable[str | Path],
    recursive: bool = False,
    output_dir: Optional[str | Path] = None,
    ffmpeg: str = config.FFMPEG_EXECUTABLE,
    segment_time: str = config.SEGMENT_TIME,
) -> List[Path]:
    """Split every recording found in ``inputs``.

    Returns:
        The recordings that were split, in order.

    Raises:
        NoInterviewsError: No recording was found.
        FfmpegNotFoundError, FfmpegError: See split_interview. The first
            failure stops the run.
    """
    interviews = collect_interviews(inputs, recursive)
    if not interviews:
        raise NoInterviewsError()
    for interview in interviews:
        split_interview(interview, output_dir, ffmpeg, segment_time)
    return interviews
