"""Command-line interface for f4merge.

WHY: The typical workflow is two steps around F4: split a long
interview recording into short segments, transcribe each segment in
F4, then merge the resulting transcripts back into one document. The
CLI offers exactly those two steps as ``f4merge split`` and
``f4merge merge``.

HOW: argparse with one subcommand per step. ``merge`` collects
transcripts from files and folders, loads them lazily (skipping the
ones that fail with a warning) and writes the merged document to stdout
or to a file. ``split`` hands each recording found to ffmpeg. Expected
failures are reported as ``error: ...`` on stderr with exit status 1.

RULES:
- No input paths means the current working directory
- ``merge`` without -o writes to stdout, so status goes to stderr only
- ``merge -o FILE`` refuses to overwrite FILE unless --force is given
- A failed merge never leaves a partial output file behind
- Each -v lowers the log level one step (WARNING -> INFO -> DEBUG)
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
import tempfile
from pathlib import Path
from typing import BinaryIO, List, Optional

from f4merge import __version__, config
from f4merge.core.merge import merge_transcript_files
from f4merge.discovery import collect_transcripts
from f4merge.errors import F4MergeError
from f4merge.split import split_interviews

logger = logging.getLogger(__name__)


class OutputFileExistsError(F4MergeError):
    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"output file {path} exists, use --force to overwrite")


def _status(msg: str) -> None:
    """Print a status message to stderr.

    Status output must not pollute stdout, where merged transcripts go.
    """
    print(msg, file=sys.stderr, flush=True)


def _log_level(verbose: int) -> int:
    base = logging.getLevelName(config.LOG_LEVEL)
    if not isinstance(base, int):
        base = logging.WARNING
    if verbose >= 2:
        return min(base, logging.DEBUG)
    if verbose == 1:
        return min(base, logging.INFO)
    return base


# ---------------------------------------------------------------------------
# merge
# ---------------------------------------------------------------------------


def _merge_into(paths: List[Path], sink: BinaryIO, encoding: str) -> int:
    merged = merge_transcript_files(paths, sink, encoding)
    sink.flush()
    return merged


def _merge_to_file(paths: List[Path], output: Path, force: bool, encoding: str) -> int:
    """Merge into a temporary file next to ``output`` and move it into place.

    RULES:
    - Existing output is an error unless force is set
    - The temporary file is removed on any failure
    """
    if output.exists() and not force:
        raise OutputFileExistsError(output)

    fd, tmp_name = tempfile.mkstemp(
        prefix=".{}.".format(output.name),
        suffix=".tmp",
        dir=str(output.parent),
    )
    try:
        with os.fdopen(fd, "wb") as sink:
            merged = _merge_into(paths, sink, encoding)
        os.replace(tmp_name, output)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise
    return merged


def _run_merge(args: argparse.Namespace) -> None:
    paths = collect_transcripts(args.inputs, args.recursive)
    logger.info("Found %d transcript candidates", len(paths))

    if args.output is None:
        _merge_into(paths, sys.stdout.buffer, args.encoding)
        return

    output = Path(args.output)
    merged = _merge_to_file(paths, output, args.force, args.encoding)
    _status("Merged {} transcript(s) into {}".format(merged, output))


# ---------------------------------------------------------------------------
# split
# ---------------------------------------------------------------------------


def _run_split(args: argparse.Namespace) -> None:
    interviews = split_interviews(
        args.inputs,
        recursive=args.recursive,
        output_dir=args.output_dir,
        ffmpeg=args.ffmpeg,
        segment_time=args.segment_time,
    )
    for interview in interviews:
        _status("  Split: {}".format(interview))
    _status("Done! Split {} recording(s)".format(len(interviews)))


# ---------------------------------------------------------------------------
# Parser and entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    Separate from main() so tests can inspect the parser without
    touching any files.

    RULES:
    - Global: -v/--verbose (repeatable), --version
    - merge: inputs..., -r/--recursive, -f/--force, -o/--output FILE, --encoding
    - split: inputs..., -r/--recursive, -o/--output-dir DIR, --segment-time,
      --ffmpeg
    """
    parser = argparse.ArgumentParser(
        prog="f4merge",
        description="Merge F4 interview transcripts and split interview recordings "
                    "into segments for transcription.",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Log more details to stderr (repeat for debug output).",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s {}".format(__version__),
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    merge = subparsers.add_parser(
        "merge",
        help="Merge transcripts of consecutive segments into one transcript.",
        description="Merge F4 transcripts in filename order, shifting timestamps "
                    "and joining speaker turns split across segments.",
    )
    merge.add_argument(
        "inputs",
        nargs="*",
        help="Transcript files or folders (default: current directory).",
    )
    merge.add_argument(
        "-r", "--recursive",
        action="store_true",
        help="Also search subfolders of the given folders.",
    )
    merge.add_argument(
        "-f", "--force",
        action="store_true",
        help="Overwrite the output file if it exists.",
    )
    merge.add_argument(
        "-o", "--output",
        default=None,
        help="File to write the merged transcript to (default: stdout).",
    )
    merge.add_argument(
        "--encoding",
        default=config.TRANSCRIPT_ENCODING,
        help="Text encoding of the transcripts (default: %(default)s).",
    )
    merge.set_defaults(handler=_run_merge)

    split = subparsers.add_parser(
        "split",
        help="Split interview recordings into segments with ffmpeg.",
        description="Split recordings into numbered segments next to the original "
                    "files, without re-encoding.",
    )
    split.add_argument(
        "inputs",
        nargs="*",
        help="Recordings or folders (default: current directory).",
    )
    split.add_argument(
        "-r", "--recursive",
        action="store_true",
        help="Also search subfolders of the given folders.",
    )
    split.add_argument(
        "-o", "--output-dir",
        default=None,
        help="Folder for the segments (default: next to each recording).",
    )
    split.add_argument(
        "--segment-time",
        default=config.SEGMENT_TIME,
        help="Segment length as HH:MM:SS (default: %(default)s).",
    )
    split.add_argument(
        "--ffmpeg",
        default=config.FFMPEG_EXECUTABLE,
        help="ffmpeg executable (default: %(default)s).",
    )
    split.set_defaults(handler=_run_split)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    - Returns the process exit status: 0 on success, 1 on expected
      failures, 130 when interrupted
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=_log_level(args.verbose),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    try:
        args.handler(args)
    except KeyboardInterrupt:
        _status("\nCancelled by user.")
        return 130
    except (F4MergeError, OSError) as e:
        logger.debug("Command failed", exc_info=True)
        print("error: {}".format(e), file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
