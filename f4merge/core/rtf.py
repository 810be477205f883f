"""Lexer for the small subset of RTF that F4 writes per line.

WHY: F4 transcripts wrap every line in the same formatting group, e.g.
``{\\f0 \\fs24 \\ul0 \\b0 \\i0 \\cf0 I: Hallo. #00:00:01-2#\\par}``. To
find speaker and speech inside it, the line has to be split into
control words, their parameters and the plain text runs in between.

HOW: RtfTokenizer walks a single line left to right, remembering only
the kind of the token it emitted last (a parameter or a delimiter can
only follow a control word). Tokens store offsets into the line, not
copies of the text.

RULES:
- ``{`` and ``}`` are group tokens
- ``\\`` + lowercase letters is a control word; a directly following
  digit or ``-`` starts its parameter
- ``\\'XX`` escapes are part of text runs, never control words
- ``\\`` + any other character is a two-character control symbol
- One character directly after a control word, symbol or parameter is
  its delimiter
- Everything else is text up to the next ``\\``, ``{`` or ``}``
- The tokenizer never fails; any input yields some token sequence
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterator, List, Optional


class TokenKind(enum.Enum):
    GROUP_START = "group_start"
    GROUP_END = "group_end"
    CONTROL_WORD = "control_word"
    CONTROL_SYMBOL = "control_symbol"
    PARAMETER = "parameter"
    DELIMITER = "delimiter"
    TEXT = "text"


# Kinds after which a single character is a delimiter rather than text.
_DELIMITED_KINDS = frozenset({
    TokenKind.CONTROL_WORD,
    TokenKind.CONTROL_SYMBOL,
    TokenKind.PARAMETER,
})


@dataclass(frozen=True)
class Token:
    """A classified slice ``source[start:end]`` of a markup line."""

    kind: TokenKind
    source: str
    start: int
    end: int

    @property
    def text(self) -> str:
        return self.source[self.start:self.end]

    def __len__(self) -> int:
        return self.end - self.start

    def __repr__(self) -> str:
        return f"Token({self.kind.name}, {self.text!r})"


class RtfTokenizer:
    """Forward-only iterator over the tokens of one markup line.

    HOW: Each call to ``__next__`` looks at the character under the
    cursor (and at most one after it), decides the token kind and
    advances past the token.
    """

    def __init__(self, line: str) -> None:
        self._line = line
        self._pos = 0
        self._previous: Optional[TokenKind] = None

    def __iter__(self) -> Iterator[Token]:
        return self

    def __next__(self) -> Token:
        line = self._line
        start = self._pos
        if start >= len(line):
            raise StopIteration

        kind, end = self._scan(start)
        self._pos = end
        self._previous = kind
        return Token(kind, line, start, end)

    def _scan(self, start: int) -> tuple[TokenKind, int]:
        line = self._line
        char = line[start]

        if self._previous is TokenKind.CONTROL_WORD and ("0" <= char <= "9" or char == "-"):
            return TokenKind.PARAMETER, _skip_digits(line, start + 1)

        if char == "{":
            return TokenKind.GROUP_START, start + 1
        if char == "}":
            return TokenKind.GROUP_END, start + 1

        if char == "\\":
            if start + 1 >= len(line):
                return TokenKind.TEXT, start + 1
            following = line[start + 1]
            if following == "'":
                return TokenKind.TEXT, _consume_plain_text(line, start + 2)
            if "a" <= following <= "z":
                return TokenKind.CONTROL_WORD, _skip_lowercase(line, start + 1)
            return TokenKind.CONTROL_SYMBOL, start + 2

        if self._previous in _DELIMITED_KINDS:
            return TokenKind.DELIMITER, start + 1

        return TokenKind.TEXT, _consume_plain_text(line, start + 1)


def tokenize(line: str) -> List[Token]:
    """Tokenize a whole line at once."""
    return list(RtfTokenizer(line))


def _skip_digits(line: str, pos: int) -> int:
    while pos < len(line) and "0" <= line[pos] <= "9":
        pos += 1
    return pos


def _skip_lowercase(line: str, pos: int) -> int:
    while pos < len(line) and "a" <= line[pos] <= "z":
        pos += 1
    return pos


def _consume_plain_text(line: str, pos: int) -> int:
    """Advance to the next ``\\``, ``{`` or ``}`` that is not a ``\\'`` escape."""
    while pos < len(line):
        char = line[pos]
        if char in "{}":
            return pos
        if char == "\\":
            if pos + 1 < len(line) and line[pos + 1] == "'":
                pos += 2
                continue
            return pos
        pos += 1
    return pos
