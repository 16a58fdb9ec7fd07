"""Input and output endpoints for the command line.

WHY: Every command reads one input and writes one output, and users
want to pass data inline, pipe it, or point at a file without a
different flag for each. One small convention covers all three.

HOW: An endpoint spec is a string. ``-`` means stdin/stdout and
``@path`` means a file. For input, anything else is the data itself,
taken as UTF-8; for output there is nothing to take literally, so a
bare path is a file too. OSError from the filesystem is wrapped in
IoError so the CLI reports it with its own exit status.

RULES:
- Input is always returned as bytes; callers decide how to read text
- Literal input is encoded as UTF-8; a literal that names an existing
  file or ends in a data-file extension is logged as a warning, since
  the user most likely forgot the ``@``
- Output to a file is written in binary mode, replacing the file
- ``@`` alone (no path) is rejected as InvalidInput
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import BinaryIO, Optional

from mbase.core.errors import InvalidInput, IoError

logger = logging.getLogger(__name__)

STDIO = "-"
FILE_PREFIX = "@"

DATA_FILE_SUFFIXES = (".txt", ".bin", ".dat", ".json", ".xml", ".csv", ".log")


def _file_path(spec: str) -> Path:
    path = spec[len(FILE_PREFIX):]
    if not path:
        raise InvalidInput("'@' must be followed by a file path")
    return Path(path).expanduser()


def looks_like_path(spec: str) -> bool:
    """True if literal input text is probably a file name missing its ``@``."""
    if not spec or any(c.isspace() for c in spec):
        return False
    if spec.lower().endswith(DATA_FILE_SUFFIXES):
        return True
    try:
        return Path(spec).expanduser().is_file()
    except (OSError, ValueError):
        return False


def read_input(spec: str, stdin: Optional[BinaryIO] = None) -> bytes:
    """Read the bytes named by an input spec.

    Args:
        spec: ``-``, ``@path``, or literal text.
        stdin: Binary stream used for ``-`` (defaults to sys.stdin.buffer).

    Raises:
        IoError: The file or stream could not be read.
    """
    if spec == STDIO:
        stream = stdin if stdin is not None else sys.stdin.buffer
        try:
            return stream.read()
        except OSError as exc:
            raise IoError(exc) from exc
    if spec.startswith(FILE_PREFIX):
        try:
            return _file_path(spec).read_bytes()
        except OSError as exc:
            raise IoError(exc) from exc
    if looks_like_path(spec):
        logger.warning(
            "Treating %r as literal data; use @%s to read the file", spec, spec
        )
    return spec.encode("utf-8")


def read_text(spec: str, stdin: Optional[BinaryIO] = None) -> str:
    """Read an input spec as text (UTF-8, undecodable bytes replaced)."""
    return read_input(spec, stdin).decode("utf-8", errors="replace")


def write_output(spec: str, data: bytes) -> None:
    """Write ``data`` to stdout (``-``) or a file (``@path`` or a bare path).

    Raises:
        IoError: The file could not be written.
        InvalidInput: ``spec`` is empty or a lone ``@``.
    """
    if spec == STDIO:
        sys.stdout.flush()
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()
        return
    if not spec:
        raise InvalidInput("output must be '-', '@path' or a file path")
    path = _file_path(spec) if spec.startswith(FILE_PREFIX) else Path(spec).expanduser()
    try:
        path.write_bytes(data)
    except OSError as exc:
        raise IoError(exc) from exc


def hex_preview(data: bytes, limit: int = 256) -> str:
    """Classic 16-bytes-per-line hex dump of the first ``limit`` bytes."""
    lines = []
    for offset in range(0, min(len(data), limit), 16):
        chunk = data[offset:offset + 16]
        hex_part = " ".join("{:02x}".format(b) for b in chunk)
        text_part = "".join(chr(b) if 32 <= b < 127 else "." for b in chunk)
        lines.append("{:08x}  {:<47}  |{}|".format(offset, hex_part, text_part))
    if len(data) > limit:
        lines.append("... ({} bytes total)".format(len(data)))
    return "\n".join(lines)
