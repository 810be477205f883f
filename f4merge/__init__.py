"""f4merge: merge sliced F4 interview transcripts into one document.

WHY: Long interviews are easier to transcribe in short slices, but the
finished transcript should be one document with timestamps that count
from the start of the whole recording. This package splits recordings
into fixed-length segments and merges the per-segment F4 RTF transcripts
back together.

HOW: Four-stage core: timestamp codec, RTF tokenizer, line classifier and
a merge engine that stitches documents together while shifting their
timestamps. Discovery, ffmpeg splitting and the CLI are thin wrappers
around it.

RULES:
- The core never touches the filesystem except to load a transcript
- Merged output is byte-exact apart from rewritten timestamps and
  spliced speaker turns
"""

__version__ = "0.1.0"
