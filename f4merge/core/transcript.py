"""Loading F4 transcript documents.

WHY: An F4 transcript is an RTF file whose header (fonts, page setup)
must be kept exactly as it is, followed by the transcript lines and a
closing brace. Merging only touches the lines, so the document is cut
into those three parts once, when it is loaded.

HOW: The header ends with ``\\jexpand`` and a line break; everything up
to and including it is the preamble. The file must end with a line
break and ``}``, the epilogue. The body in between is handed out as a
lazy Lines view. While the whole text is at hand, the last timestamp is
found and rounded up to estimate the length of the recording segment.

RULES:
- Preamble ends after the first ``\\jexpand\\r\\n``
- Epilogue is always exactly ``\\r\\n}``
- A transcript without any timestamp is rejected; its length is unknown
- So is one whose rounded length would not fit in 4095 hours
- Read and decode failures surface as TranscriptReadError
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from f4merge import config
from f4merge.core.lines import Lines
from f4merge.core.timestamp import Timestamp, TimestampOverflowError
from f4merge.errors import F4MergeError

logger = logging.getLogger(__name__)

PREAMBLE_END = "\\jexpand\r\n"
EPILOGUE = "\r\n}"


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class TranscriptError(F4MergeError):
    """Base class for transcripts that cannot be loaded."""


class TranscriptFormatError(TranscriptError):
    """The file was read but is not a transcript this tool understands."""

    reason = "corrupt transcript"

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = path
        super().__init__(f"Corrupt transcript: {self.reason}")


class NoTimestampsFoundError(TranscriptFormatError):
    """Nothing in the transcript was recognized as a timestamp."""

    reason = "no timestamps found"


class MalformedPreambleError(TranscriptFormatError):
    """The RTF header does not end with ``\\jexpand`` and a line break."""

    reason = "malformed transcript RTF preamble"


class MalformedEpilogueError(TranscriptFormatError):
    """The file does not end with a line break and a closing brace."""

    reason = "malformed transcript RTF epilogue"


class EndTimeOutOfRangeError(TranscriptFormatError):
    """The last timestamp cannot be rounded up without passing 4095 hours."""

    reason = "end time out of range"


class TranscriptReadError(TranscriptError):
    """The file could not be read or decoded."""

    def __init__(self, path: Path, cause: Exception) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"I/O error: {cause}")


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Transcript:
    """One loaded F4 transcript.

    RULES:
    - preamble + content + EPILOGUE gives back the loaded text exactly
    - end_time is the last timestamp in the file, rounded up
    - path is only used for log messages and may be None
    """

    preamble: str
    content: str
    end_time: Timestamp
    path: Optional[Path] = None

    @property
    def epilogue(self) -> str:
        return EPILOGUE

    @classmethod
    def from_text(cls, text: str, path: Optional[Path] = None) -> Transcript:
        """Split the text of a transcript file into its parts.

        Raises:
            MalformedPreambleError: ``\\jexpand`` and a line break not found.
            MalformedEpilogueError: Text does not end with ``\\r\\n}``, or
                the ending overlaps the preamble.
            NoTimestampsFoundError: No timestamp anywhere in the text.
            EndTimeOutOfRangeError: The rounded end time would pass 4095
                hours.
        """
        marker = text.find(PREAMBLE_END)
        if marker == -1:
            raise MalformedPreambleError(path)
        content_start = marker + len(PREAMBLE_END)

        content_end = len(text) - len(EPILOGUE)
        if not text.endswith(EPILOGUE) or content_end < content_start:
            raise MalformedEpilogueError(path)

        last = Timestamp.last_in(text)
        if last is None:
            raise NoTimestampsFoundError(path)
        try:
            end_time = last.round_up()
        except TimestampOverflowError as exc:
            raise EndTimeOutOfRangeError(path) from exc

        return cls(
            preamble=text[:content_start],
            content=text[content_start:content_end],
            end_time=end_time,
            path=path,
        )

    @classmethod
    def from_file(cls, path: str | Path, encoding: str = config.TRANSCRIPT_ENCODING) -> Transcript:
        """Read and split a transcript file.

        Newlines are read untranslated, so ``\\r\\n`` line breaks stay intact.

        Raises:
            TranscriptReadError: The file could not be read or decoded.
            TranscriptFormatError: See from_text.
        """
        path = Path(path)
        try:
            with open(path, encoding=encoding, newline="") as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise TranscriptReadError(path, exc) from exc

        transcript = cls.from_text(text, path)
        logger.debug("Loaded %s, estimated length %s", path, transcript.end_time)
        return transcript

    def lines(self) -> Lines:
        return Lines(self.content)

    def __str__(self) -> str:
        return f"{self.preamble}{self.content}{EPILOGUE}"
