"""Shared test fixtures for the f4merge test suite.

WHY: Merge, discovery and CLI tests need the sample interviews as real
files in a temporary folder.

HOW: Fixtures expose the sample documents from tests/samples.py as
strings and write them into tmp_path on demand.

RULES:
- File names sort in recording order (interview-000, interview-001)
- Files are written as UTF-8 bytes, untranslated CRLF line breaks
"""

import pytest

from tests.samples import INTERVIEW_01, INTERVIEW_02


@pytest.fixture
def interview_01_text():
    return INTERVIEW_01


@pytest.fixture
def interview_02_text():
    return INTERVIEW_02


@pytest.fixture
def interview_files(tmp_path):
    """Both segments as files, named so that sorting gives recording order."""
    first = tmp_path / "interview-000.rtf"
    second = tmp_path / "interview-001.rtf"
    first.write_bytes(INTERVIEW_01.encode("utf-8"))
    second.write_bytes(INTERVIEW_02.encode("utf-8"))
    return [first, second]
