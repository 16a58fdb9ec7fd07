"""Shared test fixtures for the mbase test suite.

WHY: Round-trip, detection and CLI tests all need the same catalog and
the same spread of awkward payloads (empty, leading zeros, every byte
value, invalid UTF-8). Centralizing them here keeps every module
exercising identical edge cases.

HOW: PAYLOADS is a plain list so modules can parametrize over it at
collection time; fixtures hand out fresh registries and codec lookups.

RULES:
- Payloads cover: empty, single zero byte, leading zeros, odd lengths,
  all 256 byte values, invalid UTF-8, mixed whitespace, non-ASCII text
- The registry fixture is built fresh per test (build_registry), never
  the process-wide default
- SCHEMA_DIR points at the checked-in JSON Schemas
"""

import json
import random
from pathlib import Path
from typing import Any, Dict, List

import pytest

from mbase.codecs import CODECS
from mbase.core.registry import Registry, build_registry

SCHEMA_DIR = Path(__file__).resolve().parent.parent / "schemas"

# ---------------------------------------------------------------------------
# Payloads every codec must round-trip
# ---------------------------------------------------------------------------

PAYLOADS: List[bytes] = [
    b"",
    b"\x00",
    b"\x00\x00\x01",
    b"f",
    b"fo",
    b"foo",
    b"foobar",
    b"Hello, World!",
    b"SOS 1912",
    b"lower UPPER 0123456789 .,?!",
    b"tab\tnewline\ncrlf\r\nend ",
    "héllo wörld ☃".encode("utf-8"),
    b"\xff\xfe\x80\x00\xc3",
    bytes(range(256)),
    random.Random(20240517).randbytes(100),
]

PAYLOAD_IDS = [
    "empty", "zero", "leading-zeros", "f", "fo", "foo", "foobar", "hello",
    "morse-friendly", "mixed-case", "whitespace", "utf8", "invalid-utf8",
    "all-bytes", "random-100",
]

CODEC_IDS = [codec.name for codec in CODECS]


@pytest.fixture
def registry() -> Registry:
    """A freshly built registry over the full catalog."""
    return build_registry()


@pytest.fixture
def codec(registry):
    """Factory fixture: look a codec up by name or alias."""
    return registry.get


def load_schema(name: str) -> Dict[str, Any]:
    """Load ``schemas/<name>.schema.json``."""
    with open(SCHEMA_DIR / "{}.schema.json".format(name)) as f:
        return json.load(f)
