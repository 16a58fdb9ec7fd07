"""Braille codec: one Unicode braille pattern per byte.

WHY: The Unicode Braille Patterns block has exactly 256 cells, one for
every byte value, which makes it a compact, visually distinctive
binary-to-text encoding.

HOW: Byte N maps to chr(0x2800 + N); decoding subtracts the base. The
dot numbering of the Unicode block already matches the bit layout, so
no lookup table is needed.

RULES:
- Output is one character per byte, no separators
- Any character outside U+2800..U+28FF is invalid
"""

from __future__ import annotations

from mbase.codecs.base import BaseCodec
from mbase.core.types import CaseSensitivity, CodecMeta, PaddingRule

BRAILLE_BASE = 0x2800


class Braille(BaseCodec):
    decode_confidence = 0.90

    META = CodecMeta(
        name="braille",
        aliases=("braille-ascii",),
        alphabet="".join(chr(BRAILLE_BASE + i) for i in range(256)),
        multibase_code=None,
        padding=PaddingRule.NONE,
        case_sensitivity=CaseSensitivity.INSENSITIVE,
        description="Unicode braille patterns, one cell per byte",
    )

    def encode(self, data: bytes) -> str:
        return "".join(chr(BRAILLE_BASE + byte) for byte in data)

    def _decode(self, text: str) -> bytes:
        return bytes(ord(c) - BRAILLE_BASE for c in text)
