"""Core transcript model and merge logic.

WHY: The core package holds everything that touches transcript bytes:
the timestamp codec, the RTF tokenizer, the line classifier, the
document model and the merge engine. Discovery, splitting and the CLI
sit on top of it.

HOW: timestamp.py has no dependencies. rtf.py lexes single lines,
lines.py classifies them, transcript.py slices a whole document into
preamble and body, and merge.py stitches documents together.

RULES:
- Nothing in core touches the filesystem except Transcript.from_file
  and Timestamp.sniff_file
- Tokenizer and classifier never raise; malformed lines become Other
"""
