"""Sample F4 transcripts for the f4merge test suite.

WHY: Most test modules need realistic F4 transcripts: the exact RTF
wrapper F4 writes around every line, ``\\r\\n`` line breaks, a header
ending in ``\\jexpand`` and German interview text with ``\\'XX`` escapes.
Building them in one place keeps every test on the same data.

HOW: Helper functions assemble lines and whole documents as strings.
INTERVIEW_01 and INTERVIEW_02 are two consecutive segments of the same
interview: the first ends with speaker Z mid-turn, the second starts
with Z continuing.

RULES:
- Documents are built from LINE_PREAMBLE-wrapped lines joined by CRLF
- Timestamps in the samples are canonical, so an unshifted merge of a
  single document reproduces it exactly
- INTERVIEW_01 ends at #00:04:50-3#, which rounds up to five minutes
"""

from typing import List

from f4merge.core.lines import LINE_PREAMBLE

# ---------------------------------------------------------------------------
# Document building blocks
# ---------------------------------------------------------------------------

PREAMBLE = (
    "{\\rtf1\\ansi\\ansicpg1252\\deff0{\\fonttbl{\\f0\\fswiss\\fcharset0 Arial;}"
    "{\\f1\\fswiss\\fcharset0 Arial;}}\r\n"
    "{\\colortbl;\\red0\\green0\\blue0;}\r\n"
    "\\paperw11905\\paperh16837\\margl1134\\margr1134\\margt1134\\margb1134"
    "\\sectd\\jexpand\r\n"
)

EPILOGUE = "\r\n}"

EMPTY_PARAGRAPH = LINE_PREAMBLE + "\\par}"


def utterance_line(speaker: str, speech: str) -> str:
    """An utterance the way F4 writes it, with the colon glued to the speaker."""
    return (
        LINE_PREAMBLE
        + LINE_PREAMBLE + speaker + ":}"
        + LINE_PREAMBLE + speech + "}"
        + "\\par}"
    )


def document(lines: List[str], preamble: str = PREAMBLE) -> str:
    """A whole transcript: header, CRLF-separated lines, closing brace."""
    return preamble + "\r\n".join(lines) + EPILOGUE


# ---------------------------------------------------------------------------
# Two consecutive interview segments
# ---------------------------------------------------------------------------

INTERVIEW_01_SPEECH = [
    ("I", "Was hat man fr\\'fcher so f\\'fcr Musik geh\\'f6rt #00:00:27-8#? "
          "So daheim und beim fortgehen meine ich. #00:00:31-6#"),
    ("Z", "Wir habens schon richtig hart krachen lassen bei den Punk-Konzerten "
          "damals #00:00:58-6#."),
    ("I", "War das da noch ein Ding? #00:00:58-9#"),
    ("Z", "Was soll das hei\\'dfen? #00:01:50-6#"),
    ("I", "Ja, so - #00:01:53-0# Der Punk ist halt tot, oder? #00:01:56-9#"),
    ("Z", "Ich glaub jetzt wei\\'df ich, worauf sie hinauswollen. #00:04:50-3#"),
]

INTERVIEW_02_SPEECH = [
    ("Z", "Zun\\'e4chst einmal ist der Punk nicht tot, ja? #00:00:27-8# "
          "So auditiv meine ich. #00:00:31-6#"),
    ("I", "Versteh ich nicht #00:00:58-6#."),
    ("Z", "Sie k\\'f6nnen den Punk voll noch wahrnehmen, verstehen Sie? #00:00:58-9#"),
    ("I", "Ich muss dann wieder los, ich hab noch was auf dem Herd. #00:01:50-6#"),
    ("Z", "Ja, ja. #00:01:56-9#"),
]


def _interview_01_lines() -> List[str]:
    lines = []
    for speaker, speech in INTERVIEW_01_SPEECH:
        lines.append(EMPTY_PARAGRAPH)
        lines.append(utterance_line(speaker, speech))
    return lines


def _interview_02_lines() -> List[str]:
    lines = []
    for speaker, speech in INTERVIEW_02_SPEECH:
        if lines:
            lines.append(EMPTY_PARAGRAPH)
        lines.append(utterance_line(speaker, speech))
    return lines


INTERVIEW_01_LINES = _interview_01_lines()
INTERVIEW_02_LINES = _interview_02_lines()
INTERVIEW_01 = document(INTERVIEW_01_LINES)
INTERVIEW_02 = document(INTERVIEW_02_LINES)

