"""Merging consecutive F4 transcripts into one document.

WHY: Long interviews are recorded or transcribed in segments of a few
minutes each, and F4 restarts its timestamps at zero for every segment.
A merged transcript must read as if it had been typed in one go: the
timestamps of each segment continue where the previous one ended, and a
speaker turn cut in two by a segment boundary becomes one line again.

HOW: TranscriptMerger is a small state machine fed one transcript at a
time. It writes the preamble of the first transcript, then every line
of every transcript with its timestamps shifted by the summed lengths
of the transcripts before it. The last line of each transcript is held
back in a pending slot until the first line of the next transcript is
known. If both lines are utterances of the same speaker, the speech of
the new line is appended to the pending one instead of being written
on a line of its own.

RULES:
- The shift starts at zero and grows by each transcript's end_time
- Only the first transcript's preamble is written; the epilogue once
- Splicing compares trimmed speaker labels, case-sensitively
- Spliced speech keeps the shift of the transcript it came from
- A transcript without lines only flushes the pending line
- Lines are separated by ``\\r\\n``; no separator before the epilogue
- Merging nothing writes nothing
- A shift or shifted timestamp past 4095 hours stops the merge with
  TimestampOverflowError
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Iterable, Iterator, List, Optional, Tuple

from f4merge import config
from f4merge.core.lines import Line, Utterance
from f4merge.core.timestamp import Timestamp
from f4merge.core.transcript import Transcript, TranscriptError
from f4merge.errors import F4MergeError

logger = logging.getLogger(__name__)

LINE_SEPARATOR = "\r\n"


class NoTranscriptsError(F4MergeError):
    """None of the inputs could be loaded as a transcript."""

    def __init__(self) -> None:
        super().__init__("no transcripts found for merging")


@dataclass
class _PendingLine:
    """The withheld last line of the previous transcript.

    extra_speech collects the speech of following first lines that were
    spliced into it, each with the shift of its own transcript.
    """

    line: Line
    shift: Timestamp
    extra_speech: List[Tuple[str, Timestamp]] = field(default_factory=list)

    def can_absorb(self, line: Line) -> bool:
        return (
            isinstance(self.line, Utterance)
            and isinstance(line, Utterance)
            and self.line.speaker == line.speaker
        )

    def render(self) -> str:
        if isinstance(self.line, Utterance):
            return self.line.render_with_extra_speech(self.shift, self.extra_speech)
        return self.line.render(self.shift)


class TranscriptMerger:
    """Writes transcripts added one by one as a single merged document.

    Usage::

        merger = TranscriptMerger(sink)
        for transcript in transcripts:
            merger.add(transcript)
        merger.finish()

    The sink is any binary file-like object with ``write``. Text is
    encoded with ``encoding`` as it is written.
    """

    def __init__(self, sink: BinaryIO, encoding: str = config.TRANSCRIPT_ENCODING) -> None:
        self._sink = sink
        self._encoding = encoding
        self._shift = Timestamp.zero()
        self._pending: Optional[_PendingLine] = None
        self._epilogue: Optional[str] = None
        self._lines_written = 0
        self.transcripts_added = 0

    @property
    def shift(self) -> Timestamp:
        """The shift the next added transcript will receive."""
        return self._shift

    def add(self, transcript: Transcript) -> None:
        if self._epilogue is None:
            self._write(transcript.preamble)
            self._epilogue = transcript.epilogue

        shift = self._shift
        logger.info(
            "Merging %s with timestamps shifted by %s",
            transcript.path or "transcript", shift,
        )

        lines: Iterator[Line] = iter(transcript.lines())
        first = next(lines, None)
        if first is None:
            self._flush_pending()
        elif self._pending is not None and self._pending.can_absorb(first):
            logger.debug("Splicing speech of %s across transcript boundary", first.speaker)
            self._pending.extra_speech.append((first.speech, shift))
        else:
            self._flush_pending()
            self._pending = _PendingLine(first, shift)

        for line in lines:
            self._flush_pending()
            self._pending = _PendingLine(line, shift)

        self._shift = shift + transcript.end_time
        self.transcripts_added += 1

    def finish(self) -> None:
        """Write the withheld line and the epilogue.

        Does nothing if no transcript was added.
        """
        if self._epilogue is None:
            return
        self._flush_pending()
        self._sink.write(self._epilogue.encode(self._encoding))

    def _flush_pending(self) -> None:
        if self._pending is None:
            return
        if self._lines_written:
            self._write(LINE_SEPARATOR)
        self._write(self._pending.render())
        self._lines_written += 1
        self._pending = None

    def _write(self, text: str) -> None:
        self._sink.write(text.encode(self._encoding))


def write_merged_transcript(
    sink: BinaryIO,
    transcripts: Iterable[Transcript],
    encoding: str = config.TRANSCRIPT_ENCODING,
) -> int:
    """Merge transcripts in iteration order into ``sink``.

    Transcripts are pulled from the iterable one at a time, so a lazy
    loader keeps at most one of them in memory.

    Returns:
        The number of transcripts merged. Nothing is written for zero.
    """
    merger = TranscriptMerger(sink, encoding)
    for transcript in transcripts:
        merger.add(transcript)
    merger.finish()
    return merger.transcripts_added


def load_transcripts(
    paths: Iterable[Path],
    encoding: str = config.TRANSCRIPT_ENCODING,
) -> Iterator[Transcript]:
    """Load transcripts lazily, skipping (and logging) those that fail."""
    for path in paths:
        try:
            yield Transcript.from_file(path, encoding)
        except TranscriptError as exc:
            logger.warning("failed to load transcript %s, skipping, cause: %s", path, exc)


def merge_transcript_files(
    paths: Iterable[Path],
    sink: BinaryIO,
    encoding: str = config.TRANSCRIPT_ENCODING,
) -> int:
    """Load and merge transcript files into ``sink``.

    Raises:
        NoTranscriptsError: Not a single path could be loaded. Nothing
            has been written to ``sink`` in that case.
    """
    merged = write_merged_transcript(sink, load_transcripts(paths, encoding), encoding)
    if merged == 0:
        raise NoTranscriptsError()
    logger.info("Merged %d transcripts", merged)
    return merged
