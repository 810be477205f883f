"""Classification of transcript lines into utterances, paragraphs and the rest.

WHY: Merging needs to know who speaks on the first and last line of
each transcript, so that a turn interrupted by the end of a recording
segment can be glued back together. Everything else about a line must
survive the merge byte for byte, apart from its shifted timestamps.

HOW: A line is first checked for the fixed F4 wrapper
``{\\f0 \\fs24 \\ul0 \\b0 \\i0 \\cf0 `` ... ``\\par}``. Lines without it
are Other and are re-emitted untouched. The content inside the wrapper
is tokenized on its own, and its text runs are searched for a speaker
label followed by a colon. A hit gives an Utterance, a miss a Paragraph.

F4 writes the speaker label in a few variations:

    {\\f1 ... Z:}{\\f0 ... speech}          colon glued to the speaker
    Z: speech                                speaker and speech in one run
    {\\f0 ... Z}{\\f0 ... : speech}          colon starts the speech run
    {\\f0 ... Z}{\\f0 ... :}{\\f0 ... speech} colon in a run of its own

RULES:
- The six wrapper control words must be ``\\f \\fs \\ul \\b \\i \\cf``, in
  that order; their parameter values are not checked
- Rendering keeps the wrapper exactly as it was read
- Utterances keep all markup around speaker and speech verbatim
- speaker and speech are exposed trimmed
- Lines split on ``\\n``; one ``\\r`` before each ``\\n`` is dropped and a
  trailing ``\\n`` does not start another line
"""

from __future__ import annotations

from dataclasses import dataclass
from itertools import islice
from typing import Iterator, Optional, Sequence, Tuple, Union

from f4merge.core.rtf import RtfTokenizer, TokenKind, tokenize
from f4merge.core.timestamp import Timestamp

LINE_PREAMBLE = "{\\f0 \\fs24 \\ul0 \\b0 \\i0 \\cf0 "
"""The wrapper F4 writes at the start of an ordinary line."""

LINE_EPILOGUE = "\\par}"

_WRAPPER_CONTROL_WORDS = ("\\f", "\\fs", "\\ul", "\\b", "\\i", "\\cf")

# "{" plus one (control word, parameter, delimiter) triple per control word
_WRAPPER_TOKEN_COUNT = 1 + 3 * len(_WRAPPER_CONTROL_WORDS)


# ---------------------------------------------------------------------------
# Line variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Other:
    """A line without the F4 wrapper, re-emitted exactly as read."""

    line: str

    def render(self, shift: Timestamp) -> str:
        return self.line


@dataclass(frozen=True)
class Paragraph:
    """A wrapped line with no recognizable speaker, e.g. an empty line.

    ``content`` excludes the wrapper and the closing ``\\par}``.
    """

    wrapper: str
    content: str

    def render(self, shift: Timestamp) -> str:
        rewritten, _ = Timestamp.rewrite_with_shift(self.content, shift)
        return f"{self.wrapper}{rewritten}{LINE_EPILOGUE}"


@dataclass(frozen=True)
class Utterance:
    """A wrapped line in which a speaker says something.

    WHY: The merge engine compares speakers across transcript
    boundaries and may append the speech of the next transcript's first
    line to this one. Both need the speaker and speech isolated from
    the surrounding markup, while the markup must be written back
    unchanged.

    HOW: The inner content is cut into five consecutive slices. Joined
    in order they give back the content exactly.

    RULES:
    - speaker_before: markup before the speaker label
    - speaker_text: the label as written, possibly with spaces
    - speaker_after: the colon and any markup up to the speech
    - speech_text: from the start of the speech to the end of the last
      text run of the line
    - speech_after: trailing markup, usually ``}``
    """

    wrapper: str
    speaker_before: str
    speaker_text: str
    speaker_after: str
    speech_text: str
    speech_after: str

    @property
    def speaker(self) -> str:
        return self.speaker_text.strip()

    @property
    def speech(self) -> str:
        return self.speech_text.strip()

    @property
    def content(self) -> str:
        return (
            self.speaker_before + self.speaker_text + self.speaker_after
            + self.speech_text + self.speech_after
        )

    @classmethod
    def from_content(cls, content: str, wrapper: str = LINE_PREAMBLE) -> Optional[Utterance]:
        """Find speaker and speech in the content of a wrapped line.

        Returns:
            The utterance, or None if no speaker label could be found.
        """
        runs = [t for t in tokenize(content) if t.kind is TokenKind.TEXT]
        if not runs:
            return None

        first = runs[0]
        speaker_start = first.start
        speech_start: Optional[int] = None
        speech_end: Optional[int] = None
        rest = 1

        if first.text.endswith(":") and len(first) > 1:
            speaker_end = first.end - 1
            if len(runs) < 2:
                return None
            speech_start, speech_end = runs[1].start, runs[1].end
            rest = 2
        elif ": " in first.text:
            speaker_end = first.start + first.text.index(": ")
            speech_start, speech_end = speaker_end + 2, first.end
        else:
            speaker_end = first.end
            if len(runs) < 2:
                return None
            after_colon = runs[1]
            rest = 2
            if after_colon.text in (":", ": "):
                if len(runs) < 3:
                    return None
                speech_start, speech_end = runs[2].start, runs[2].end
                rest = 3
            elif len(after_colon) > 2 and after_colon.text.startswith(": "):
                speech_start, speech_end = after_colon.start + 2, after_colon.end

        if len(runs) > rest:
            speech_end = runs[-1].end

        if speech_start is None or speech_end is None:
            return None

        return cls(
            wrapper=wrapper,
            speaker_before=content[:speaker_start],
            speaker_text=content[speaker_start:speaker_end],
            speaker_after=content[speaker_end:speech_start],
            speech_text=content[speech_start:speech_end],
            speech_after=content[speech_end:],
        )

    def render(self, shift: Timestamp) -> str:
        return self.render_with_extra_speech(shift, ())

    def render_with_extra_speech(
        self,
        shift: Timestamp,
        extra_speech: Sequence[Tuple[str, Timestamp]],
    ) -> str:
        """Render this utterance with speech spliced in from later lines.

        Each extra span is trimmed, rewritten under its own shift and
        appended after a single space, inside the markup that closes
        this utterance's speech.
        """
        parts = [
            self.wrapper,
            self.speaker_before,
            self.speaker_text,
            self.speaker_after,
            Timestamp.rewrite_with_shift(self.speech, shift)[0],
        ]
        for speech, speech_shift in extra_speech:
            speech = speech.strip()
            if speech:
                parts.append(" ")
            parts.append(Timestamp.rewrite_with_shift(speech, speech_shift)[0])
        parts.append(self.speech_after)
        parts.append(LINE_EPILOGUE)
        return "".join(parts)


Line = Union[Utterance, Paragraph, Other]


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


def classify_line(line: str) -> Line:
    """Classify one line of transcript content (without its line break)."""
    content_start = _wrapper_end(line)
    if content_start is None or not line.endswith(LINE_EPILOGUE):
        return Other(line)
    content_end = len(line) - len(LINE_EPILOGUE)
    if content_end < content_start:
        return Other(line)

    wrapper = line[:content_start]
    content = line[content_start:content_end]
    utterance = Utterance.from_content(content, wrapper)
    if utterance is not None:
        return utterance
    return Paragraph(wrapper, content)


def _wrapper_end(line: str) -> Optional[int]:
    """Offset just past the wrapper's last delimiter, or None if it is missing."""
    tokens = list(islice(RtfTokenizer(line), _WRAPPER_TOKEN_COUNT))
    if len(tokens) < _WRAPPER_TOKEN_COUNT or tokens[0].kind is not TokenKind.GROUP_START:
        return None
    for i, name in enumerate(_WRAPPER_CONTROL_WORDS):
        word, parameter, delimiter = tokens[1 + 3 * i:4 + 3 * i]
        if word.kind is not TokenKind.CONTROL_WORD or word.text != name:
            return None
        if parameter.kind is not TokenKind.PARAMETER:
            return None
        if delimiter.kind is not TokenKind.DELIMITER:
            return None
    return tokens[-1].end


# ---------------------------------------------------------------------------
# Line sequences
# ---------------------------------------------------------------------------


class Lines:
    """Lazily classified lines of a transcript body, in either direction.

    Each line is tokenized and classified only when it is reached, so
    peeking at the last line of a long transcript costs one line.
    """

    def __init__(self, content: str) -> None:
        self._content = content

    def __iter__(self) -> Iterator[Line]:
        for raw in _split_forward(self._content):
            yield classify_line(raw)

    def __reversed__(self) -> Iterator[Line]:
        for raw in _split_backward(self._content):
            yield classify_line(raw)

    def first(self) -> Optional[Line]:
        return next(iter(self), None)

    def last(self) -> Optional[Line]:
        return next(reversed(self), None)


def _strip_cr(piece: str) -> str:
    return piece[:-1] if piece.endswith("\r") else piece


def _split_forward(text: str) -> Iterator[str]:
    pos = 0
    while pos < len(text):
        end = text.find("\n", pos)
        if end == -1:
            yield text[pos:]
            return
        yield _strip_cr(text[pos:end])
        pos = end + 1


def _split_backward(text: str) -> Iterator[str]:
    if not text:
        return
    end = len(text)
    terminated = text.endswith("\n")
    if terminated:
        end -= 1
    while True:
        start = text.rfind("\n", 0, end) + 1
        piece = text[start:end]
        yield _strip_cr(piece) if terminated else piece
        if start == 0:
            return
        end = start - 1
        terminated = True
