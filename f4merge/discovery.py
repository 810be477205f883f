"""Finding transcripts and interview recordings on disk.

WHY: Users point the tool at a folder full of F4 exports, recordings
and unrelated files and expect it to pick the right ones, in the right
order. Segment files are numbered (``interview-000.rtf``,
``interview-001.rtf``, ...), so sorting paths gives recording order.

HOW: collect_transcripts() and collect_interviews() share one walker
that expands directories and filters files with a predicate. A
transcript is recognized by its ``.rtf`` suffix plus an F4 timestamp
near the start of the file; a recording by its suffix alone.

RULES:
- No inputs means the current working directory
- Directories contribute their files; subdirectories only if recursive
- Explicitly named files are filtered like any other file
- The result is sorted
- I/O errors while sniffing propagate
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterable, List

from f4merge import config
from f4merge.core.timestamp import Timestamp

logger = logging.getLogger(__name__)


def is_transcript(path: Path) -> bool:
    """Check whether a path looks like an F4 transcript.

    Raises:
        OSError: If the file exists but cannot be read.
    """
    if not path.is_file() or path.suffix.lower() != config.TRANSCRIPT_EXTENSION:
        return False
    return Timestamp.sniff_file(path, config.TRANSCRIPT_SNIFF_BYTES)


def is_sound_file(path: Path) -> bool:
    return path.suffix.lower() in config.SOUND_FILE_EXTENSIONS


def collect_transcripts(inputs: Iterable[str | Path], recursive: bool = False) -> List[Path]:
    """Sorted F4 transcripts found in the given files and directories."""
    return _find(inputs, recursive, is_transcript)


def collect_interviews(inputs: Iterable[str | Path], recursive: bool = False) -> List[Path]:
    """Sorted interview recordings found in the given files and directories."""
    return _find(inputs, recursive, is_sound_file)


def _find(
    inputs: Iterable[str | Path],
    recursive: bool,
    predicate: Callable[[Path], bool],
) -> List[Path]:
    roots = [Path(p) for p in inputs] or [Path.cwd()]
    found: List[Path] = []
    for root in roots:
        _add_matching(found, root, recursive, predicate)
    found.sort()
    logger.debug("Found %d matching files in %s", len(found), ", ".join(map(str, roots)))
    return found


def _add_matching(
    found: List[Path],
    path: Path,
    recursive: bool,
    predicate: Callable[[Path], bool],
) -> None:
    if path.is_dir():
        for entry in path.iterdir():
            if entry.is_file() or (recursive and entry.is_dir()):
                _add_matching(found, entry, recursive, predicate)
    elif path.is_file() and predicate(path):
        found.append(path)
