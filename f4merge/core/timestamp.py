"""F4 timestamp parsing, formatting, arithmetic and in-text rewriting.

WHY: F4 marks elapsed recording time inline, e.g. ``#00:00:17-5#``.
When transcripts of consecutive recording segments are merged, every
timestamp of a later segment must be shifted by the length of all
segments before it, without disturbing a single other byte of the text.

HOW: Timestamp is a frozen dataclass holding hours, minutes, seconds and
one sub-second digit, plus the digit widths seen in the source text (so
a rewrite knows exactly how many characters it replaces). A bounded
regular expression is tried at every ``#`` of a text to find matches,
which is the same as sliding a 14-character window over every offset.

RULES:
- Notation: ``#H{1,4}:M{1,2}:S{1,2}-D#`` with ASCII digits only
- Bounds: hours <= 4095, minutes <= 59, seconds <= 59, subseconds <= 9
- Canonical output: ``#HH:MM:SS-D#``, more hour digits only when >= 100
- Equality and ordering look at values only, never at digit widths
- Addition carries subseconds at 10, seconds and minutes at 60; hours
  never wrap, and a sum past 4095 hours raises TimestampOverflowError
- Rewriting skips a match that overlaps the previous one
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from f4merge.errors import F4MergeError

HOURS_MAX = 4095
MINUTES_MAX = 59
SECONDS_MAX = 59
SUBSECS_MAX = 9

HOURS_WIDTH_MAX = 4
MINUTES_WIDTH_MAX = 2
SECONDS_WIDTH_MAX = 2

# Longest possible notation: "#4095:59:59-9#"
MAX_TIMESTAMP_LEN = 1 + HOURS_WIDTH_MAX + 1 + MINUTES_WIDTH_MAX + 1 + SECONDS_WIDTH_MAX + 1 + 1 + 1

_TIMESTAMP_RE = re.compile(r"#([0-9]{1,4}):([0-9]{1,2}):([0-9]{1,2})-([0-9])#")


class TimestampError(F4MergeError, ValueError):
    """Raised when a text is not an F4 timestamp.

    WHY: Callers that parse a single timestamp need to tell "not a
    timestamp" apart from other failures. Scanning functions never
    raise it; a failed attempt there simply is not a match.
    """

    def __init__(self, not_a_timestamp: str) -> None:
        self.text = not_a_timestamp
        super().__init__(f"{not_a_timestamp!r} was not recognized as a timestamp")


class TimestampOverflowError(F4MergeError, ValueError):
    """Raised when arithmetic goes past the largest representable time.

    WHY: F4 cannot write more than four hour digits, so a shifted
    timestamp beyond ``#4095:59:59-9#`` could not be read back. The merge
    stops with a readable error instead of writing such a value.
    """

    def __init__(self, hours: int) -> None:
        self.hours = hours
        super().__init__(
            f"timestamp out of range: {hours} hours exceed the maximum of {HOURS_MAX}"
        )


def _canonical_hours_width(hours: int) -> int:
    return max(2, len(str(hours)))


@dataclass(frozen=True, order=True)
class Timestamp:
    """Elapsed recording time as written in an F4 transcript.

    WHY: The merge engine needs exact arithmetic on recording time and
    must know how long the original notation was, because F4 also writes
    single-digit components like ``#0:1:2-3#``.

    HOW: Values are validated on construction. Widths default to the
    canonical ones and are excluded from comparisons and hashing.

    RULES:
    - hours 0..4095 (width 1..4), minutes and seconds 0..59 (width 1..2)
    - subsecs 0..9, always exactly one digit
    - Out-of-range values raise ValueError
    - Sums and roundings past 4095 hours raise TimestampOverflowError
    """

    hours: int = 0
    minutes: int = 0
    seconds: int = 0
    subsecs: int = 0
    hours_width: Optional[int] = field(default=None, compare=False)
    minutes_width: Optional[int] = field(default=None, compare=False)
    seconds_width: Optional[int] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        _check_range("hours", self.hours, HOURS_MAX)
        _check_range("minutes", self.minutes, MINUTES_MAX)
        _check_range("seconds", self.seconds, SECONDS_MAX)
        _check_range("subsecs", self.subsecs, SUBSECS_MAX)

        if self.hours_width is None:
            object.__setattr__(self, "hours_width", _canonical_hours_width(self.hours))
        if self.minutes_width is None:
            object.__setattr__(self, "minutes_width", 2)
        if self.seconds_width is None:
            object.__setattr__(self, "seconds_width", 2)

        _check_range("hours_width", self.hours_width, HOURS_WIDTH_MAX, minimum=1)
        _check_range("minutes_width", self.minutes_width, MINUTES_WIDTH_MAX, minimum=1)
        _check_range("seconds_width", self.seconds_width, SECONDS_WIDTH_MAX, minimum=1)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def zero(cls) -> Timestamp:
        return cls(0, 0, 0, 0)

    @classmethod
    def parse(cls, text: str) -> Timestamp:
        """Parse a timestamp at the start of ``text``.

        Text after the closing ``#`` is ignored, so a scanner can hand in
        a window that runs past the match.

        Raises:
            TimestampError: If ``text`` does not start with a valid timestamp.
        """
        parsed = _match_at(text, 0)
        if parsed is None:
            raise TimestampError(text)
        return parsed

    @classmethod
    def is_timestamp(cls, text: str) -> bool:
        return _match_at(text, 0) is not None

    def canonical(self) -> Timestamp:
        """The same time with canonical digit widths, as it would be formatted."""
        return Timestamp(self.hours, self.minutes, self.seconds, self.subsecs)

    # ------------------------------------------------------------------
    # Formatting
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return "#{:02d}:{:02d}:{:02d}-{}#".format(
            self.hours, self.minutes, self.seconds, self.subsecs
        )

    @property
    def text_length(self) -> int:
        """Characters this timestamp occupied in its source text.

        For timestamps created in code this is the canonical length that
        ``str()`` produces.
        """
        # '#' + hours + ':' + minutes + ':' + seconds + '-' + digit + '#'
        return self.hours_width + self.minutes_width + self.seconds_width + 6

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def __add__(self, other: object) -> Timestamp:
        if not isinstance(other, Timestamp):
            return NotImplemented
        subsecs, carry = _carrying_add(self.subsecs, other.subsecs, 10)
        seconds, carry = _carrying_add(self.seconds + carry, other.seconds, 60)
        minutes, carry = _carrying_add(self.minutes + carry, other.minutes, 60)
        hours = self.hours + other.hours + carry
        if hours > HOURS_MAX:
            raise TimestampOverflowError(hours)
        return Timestamp(hours, minutes, seconds, subsecs)

    def round_up(self) -> Timestamp:
        """Round up at the most significant non-zero unit, zeroing the rest.

        WHY: F4 transcripts do not record the length of their recording.
        Rounding the last timestamp up is a conservative estimate of the
        segment length, because segments are cut at whole minutes.

        RULES:
        - 58:58:57-9 -> 59:00:00-0, 00:14:57-9 -> 00:15:00-0
        - Already whole hours or minutes stay as they are
        - Seconds only -> one minute; subseconds only -> zero
        - 00:59:30-0 -> 01:00:00-0; the next unit carries like addition

        Raises:
            TimestampOverflowError: Rounding up would pass 4095 hours.
        """
        if self.hours > 0:
            if self.minutes == 0 and self.seconds == 0 and self.subsecs == 0:
                return self
            return Timestamp(self.hours, 0, 0, 0) + Timestamp(1, 0, 0, 0)
        if self.minutes > 0:
            if self.seconds == 0 and self.subsecs == 0:
                return self
            return Timestamp(0, self.minutes, 0, 0) + Timestamp(0, 1, 0, 0)
        if self.seconds > 0:
            return Timestamp(0, 1, 0, 0)
        return Timestamp.zero()

    # ------------------------------------------------------------------
    # Scanning text
    # ------------------------------------------------------------------

    @staticmethod
    def extract_all(text: str) -> List[Tuple[int, Timestamp]]:
        """Find every timestamp in ``text`` as ``(offset, timestamp)`` pairs.

        A parse is attempted at every offset, so in contrived input two
        matches may share a ``#``. Rewriting skips such overlaps.
        """
        found: List[Tuple[int, Timestamp]] = []
        pos = text.find("#")
        while pos != -1:
            parsed = _match_at(text, pos)
            if parsed is not None:
                found.append((pos, parsed))
            pos = text.find("#", pos + 1)
        return found

    @staticmethod
    def last_in(text: str) -> Optional[Timestamp]:
        """The rightmost timestamp in ``text``, or None if there is none."""
        pos = text.rfind("#")
        while pos != -1:
            parsed = _match_at(text, pos)
            if parsed is not None:
                return parsed
            pos = text.rfind("#", 0, pos)
        return None

    @staticmethod
    def rewrite_with_shift(text: str, shift: Timestamp) -> Tuple[str, Optional[Timestamp]]:
        """Copy ``text`` with every timestamp shifted by ``shift``.

        WHY: This is the only place merged output differs from its input
        apart from splicing, so everything between matches is copied
        verbatim.

        HOW: Walk the matches left to right, emit the text before each,
        then the canonical form of the shifted timestamp, and resume
        after the original notation's own length.

        Returns:
            The rewritten text and the last shifted timestamp written,
            or None if ``text`` held no timestamps.
        """
        parts: List[str] = []
        last_offset = 0
        last_shifted: Optional[Timestamp] = None
        for offset, timestamp in Timestamp.extract_all(text):
            if offset < last_offset:
                continue
            parts.append(text[last_offset:offset])
            last_shifted = timestamp + shift
            parts.append(str(last_shifted))
            last_offset = offset + timestamp.text_length
        parts.append(text[last_offset:])
        return "".join(parts), last_shifted

    @staticmethod
    def sniff_file(path: Path, limit: int) -> bool:
        """Check whether a timestamp occurs in the first ``limit`` bytes of a file.

        Raises:
            OSError: If the file cannot be read.
        """
        with open(path, "rb") as f:
            head = f.read(limit)
        # latin-1 maps bytes 1:1, timestamps are pure ASCII
        return bool(Timestamp.extract_all(head.decode("latin-1")))


def _check_range(name: str, value: int, maximum: int, minimum: int = 0) -> None:
    if not minimum <= value <= maximum:
        raise ValueError(f"{name} out of bounds: {value} (expected {minimum}..{maximum})")


def _carrying_add(lhs: int, rhs: int, wrap_at: int) -> Tuple[int, int]:
    total = lhs + rhs
    return total % wrap_at, total // wrap_at


def _match_at(text: str, pos: int) -> Optional[Timestamp]:
    """Try to read a timestamp starting exactly at ``pos``."""
    m = _TIMESTAMP_RE.match(text, pos, pos + MAX_TIMESTAMP_LEN)
    if m is None:
        return None
    hours, minutes, seconds, subsecs = m.group(1, 2, 3, 4)
    if int(hours) > HOURS_MAX or int(minutes) > MINUTES_MAX or int(seconds) > SECONDS_MAX:
        return None
    return Timestamp(
        int(hours),
        int(minutes),
        int(seconds),
        int(subsecs),
        hours_width=len(hours),
        minutes_width=len(minutes),
        seconds_width=len(seconds),
    )
