"""Configuration constants and .env loading for the command line.

WHY: A handful of CLI defaults (which codec to use when --codec is
omitted, how many detection candidates to show, how chatty logging is)
are personal preferences. Keeping them here, overridable from the
environment or a .env file, means nobody has to edit code or repeat
flags to change them.

HOW: python-dotenv loads the .env file on import. Each setting is a
module-level constant read with os.getenv and a default. The core
library (mbase.core, mbase.codecs) never imports this module; only the
CLI does, and it passes the values down as explicit arguments.

RULES:
- Every setting has a working default; .env is optional
- Integer settings fall back to their default when unparsable
- MBASE_LOG_LEVEL accepts standard logging level names
"""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Load .env from the directory mbase is run from
load_dotenv()


def _int_env(name: str, default: int) -> int:
    """Read a non-negative integer setting, falling back to ``default``."""
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer", name, raw)
        return default
    if value < 0:
        logger.warning("Ignoring %s=%r: must not be negative", name, raw)
        return default
    return value


# ---------------------------------------------------------------------------
# CLI defaults
# ---------------------------------------------------------------------------

DEFAULT_CODEC = os.getenv("MBASE_DEFAULT_CODEC", "base64")
"""Codec used by enc/dec/verify/fmt/explain when --codec is omitted."""

DETECT_TOP = _int_env("MBASE_DETECT_TOP", 5)
"""Default number of candidates shown by ``mbase detect`` (0 = all)."""

DETECT_WORKERS = _int_env("MBASE_DETECT_WORKERS", 1)
"""Default thread count for detection scoring."""

LOG_LEVEL = os.getenv("MBASE_LOG_LEVEL", "WARNING").upper()

PREVIEW_CHARS = _int_env("MBASE_PREVIEW_CHARS", 60)
"""Input preview length in JSON reports."""

SCHEMA_VERSION = 1
"""Version stamped into detect/explain/verify JSON documents."""
