"""Configuration constants, file-type tables, and .env loading.

WHY: Encoding, segment length, the ffmpeg executable and the log level
differ between machines and projects. Keeping them in one module, with
environment overrides, means nobody has to edit code to change them.

HOW: python-dotenv loads the .env file on import. Constants are
module-level values read from os.environ with sensible defaults. File
extension tables are plain sets, not buried in the discovery logic.

RULES:
- Every tunable can be overridden with an F4MERGE_* environment variable
- Extension sets hold lowercase suffixes with a leading dot
- Nothing in this module performs I/O beyond reading .env
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

# Load .env from the working directory (where the tool is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Transcripts
# ---------------------------------------------------------------------------

TRANSCRIPT_EXTENSION = ".rtf"
"""F4 transcripts are saved as RTF documents."""

TRANSCRIPT_SNIFF_BYTES = 4096
"""How far into a candidate file discovery looks for an F4 timestamp."""

TRANSCRIPT_ENCODING = os.getenv("F4MERGE_ENCODING", "utf-8")
"""Text encoding used to read transcripts and write the merged result."""

# ---------------------------------------------------------------------------
# Interview recordings
# ---------------------------------------------------------------------------

SOUND_FILE_EXTENSIONS: set[str] = {".mp3", ".wav", ".m4a", ".aac"}
"""Recording suffixes accepted by ``split`` (compared case-insensitively)."""

SEGMENT_TIME = os.getenv("F4MERGE_SEGMENT_TIME", "00:05:00")
"""Length of each recording segment, in ffmpeg duration syntax."""

FFMPEG_EXECUTABLE = os.getenv("F4MERGE_FFMPEG", "ffmpeg")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

LOG_LEVEL = os.getenv("F4MERGE_LOG_LEVEL", "WARNING").upper()
"""Default log level; each ``-v`` on the command line lowers it one step."""
