"""Unit tests for the RTF line tokenizer.

WHY: The classifier trusts the token stream to tell wrapper markup from
interview text. Misreading an escape or a parameter shifts speaker and
speech boundaries.

HOW: Tests tokenize real F4 lines and small synthetic inputs and compare
token kinds and texts.
"""

from f4merge.core.rtf import RtfTokenizer, Token, TokenKind, tokenize


def _kinds_and_texts(line):
    return [(t.kind, t.text) for t in tokenize(line)]


def _text_runs(line):
    return [t.text for t in tokenize(line) if t.kind is TokenKind.TEXT]


class TestEmptyParagraph:
    """The empty line F4 writes between utterances."""

    def test_token_sequence(self):
        cw, p, d = TokenKind.CONTROL_WORD, TokenKind.PARAMETER, TokenKind.DELIMITER
        assert _kinds_and_texts("{\\f0 \\fs24 \\ul0 \\b0 \\i0 \\cf0 \\par}") == [
            (TokenKind.GROUP_START, "{"),
            (cw, "\\f"), (p, "0"), (d, " "),
            (cw, "\\fs"), (p, "24"), (d, " "),
            (cw, "\\ul"), (p, "0"), (d, " "),
            (cw, "\\b"), (p, "0"), (d, " "),
            (cw, "\\i"), (p, "0"), (d, " "),
            (cw, "\\cf"), (p, "0"), (d, " "),
            (cw, "\\par"),
            (TokenKind.GROUP_END, "}"),
        ]


class TestTextRuns:
    """Text runs between markup, escapes included."""

    def test_speaker_and_speech_in_separate_groups(self):
        line = (
            "{\\f0 \\fs24 \\ul0 \\b0 \\i0 \\cf0 {\\f0 \\fs24 \\ul0 \\b0 \\i0 \\cf0 I}"
            "{\\f0 \\fs24 \\ul0 \\b0 \\i0 \\cf0 : Mhm, genau. #00:00:19-0#}\\par}"
        )
        assert _text_runs(line) == ["I", ": Mhm, genau. #00:00:19-0#"]

    def test_escapes_stay_inside_text_run(self):
        line = (
            "{\\f0 \\fs24 \\ul0 \\b0 \\i0 \\cf0 {\\f0 \\fs24 \\ul0 \\b0 \\i0 \\cf0 Z}"
            "{\\f0 \\fs24 \\ul0 \\b0 \\i0 \\cf0 : Zur\\'fcck zu den Methoden #00:00:17-5#}\\par}"
        )
        assert _text_runs(line) == ["Z", ": Zur\\'fcck zu den Methoden #00:00:17-5#"]

    def test_escape_at_start_of_text(self):
        assert _kinds_and_texts("\\'fcber") == [(TokenKind.TEXT, "\\'fcber")]

    def test_plain_text(self):
        assert _kinds_and_texts("Hallo Welt") == [(TokenKind.TEXT, "Hallo Welt")]


class TestControls:
    """Control words, symbols, parameters and delimiters."""

    def test_negative_parameter(self):
        assert _kinds_and_texts("\\li-120 x") == [
            (TokenKind.CONTROL_WORD, "\\li"),
            (TokenKind.PARAMETER, "-120"),
            (TokenKind.DELIMITER, " "),
            (TokenKind.TEXT, "x"),
        ]

    def test_control_symbol(self):
        assert _kinds_and_texts("a\\~b") == [
            (TokenKind.TEXT, "a"),
            (TokenKind.CONTROL_SYMBOL, "\\~"),
            (TokenKind.DELIMITER, "b"),
        ]

    def test_control_word_at_end_of_line(self):
        assert _kinds_and_texts("x\\par") == [
            (TokenKind.TEXT, "x"),
            (TokenKind.CONTROL_WORD, "\\par"),
        ]

    def test_trailing_backslash_is_text(self):
        assert _kinds_and_texts("a\\") == [
            (TokenKind.TEXT, "a"),
            (TokenKind.TEXT, "\\"),
        ]

    def test_digit_after_delimiter_is_text(self):
        assert _kinds_and_texts("\\cf0 1990") == [
            (TokenKind.CONTROL_WORD, "\\cf"),
            (TokenKind.PARAMETER, "0"),
            (TokenKind.DELIMITER, " "),
            (TokenKind.TEXT, "1990"),
        ]


class TestTokenizer:
    """Iterator protocol and token offsets."""

    def test_empty_line(self):
        assert tokenize("") == []

    def test_tokens_cover_the_line(self):
        line = "{\\f1 \\fs24 Z:}{\\f0 Ich glaub wei\\'df ich.}\\par}"
        tokens = tokenize(line)
        assert "".join(t.text for t in tokens) == line
        for before, after in zip(tokens, tokens[1:]):
            assert before.end == after.start

    def test_is_lazy_iterator(self):
        tokenizer = RtfTokenizer("{}")
        assert iter(tokenizer) is tokenizer
        assert next(tokenizer).kind is TokenKind.GROUP_START
        assert next(tokenizer).kind is TokenKind.GROUP_END
        assert next(tokenizer, None) is None

    def test_token_slices_source(self):
        token = Token(TokenKind.TEXT, "abcdef", 2, 4)
        assert token.text == "cd"
        assert len(token) == 2
