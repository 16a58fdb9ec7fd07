"""Base65536: two bytes per Unicode character.

WHY: Where length is counted in characters rather than bytes (tweets,
chat messages), packing 16 bits into each code point halves the size of
hex. Every code point used is a printable letter or symbol from a
block that survives normalization, so the text is safe to paste around.

HOW: Each byte pair (hi, lo) becomes code point BLOCK_STARTS[hi] + lo,
where BLOCK_STARTS lists 256 blocks of 256 safe code points. An odd
final byte uses the separate padding block at U+1800. Decoding maps
code points back through a table built on first use.

RULES:
- Output length is ceil(n / 2) characters
- A padding-block character is only valid in the final position
- LENIENT ignores ASCII whitespace; there is no case to fold
"""

from __future__ import annotations

from functools import lru_cache
from typing import Dict, List, Tuple

from mbase.codecs.base import BaseCodec
from mbase.core.errors import InvalidInput
from mbase.core.types import CaseSensitivity, CodecMeta, PaddingRule


def _blocks(first: int, last: int) -> List[int]:
    return list(range(first, last + 0x100, 0x100))


BLOCK_STARTS: Tuple[int, ...] = tuple(
    _blocks(0x03400, 0x04C00)
    + _blocks(0x04E00, 0x0D700)
    + _blocks(0x10000, 0x12500)
    + _blocks(0x13000, 0x13400)
    + _blocks(0x14400, 0x14600)
    + _blocks(0x16800, 0x16B00)
    + [0x16F00, 0x17000]
    + _blocks(0x18700, 0x18D00)
    + _blocks(0x1B000, 0x1B300)
    + [0x1BC00]
    + _blocks(0x1D000, 0x1D700)
    + [0x1E800, 0x1E900]
    + _blocks(0x1EC00, 0x1EE00)
    + _blocks(0x1F000, 0x1FB00)
    + [0x20000, 0x2A700, 0x2B700, 0x2B800]
)
PADDING_BLOCK_START = 0x01800

ALPHABET = "".join(
    chr(start + lo) for start in BLOCK_STARTS + (PADDING_BLOCK_START,) for lo in range(256)
)


@lru_cache(maxsize=None)
def _decode_table() -> Dict[str, int]:
    """Map each data character to its 16-bit value, padding to -1 - byte."""
    table = {}
    for hi, start in enumerate(BLOCK_STARTS):
        for lo in range(256):
            table[chr(start + lo)] = hi << 8 | lo
    for lo in range(256):
        table[chr(PADDING_BLOCK_START + lo)] = -1 - lo
    return table


class Base65536(BaseCodec):
    decode_confidence = 0.85

    META = CodecMeta(
        name="base65536",
        aliases=("b65536",),
        alphabet=ALPHABET,
        multibase_code=None,
        padding=PaddingRule.NONE,
        case_sensitivity=CaseSensitivity.SENSITIVE,
        description="Base65536: two bytes per Unicode character",
    )

    def encode(self, data: bytes) -> str:
        chars = [
            chr(BLOCK_STARTS[data[i]] + data[i + 1])
            for i in range(0, len(data) - 1, 2)
        ]
        if len(data) % 2:
            chars.append(chr(PADDING_BLOCK_START + data[-1]))
        return "".join(chars)

    def _decode(self, text: str) -> bytes:
        table = _decode_table()
        out = bytearray()
        last = len(text) - 1
        for position, char in enumerate(text):
            value = table[char]
            if value >= 0:
                out.extend((value >> 8, value & 0xFF))
            elif position == last:
                out.append(-1 - value)
            else:
                raise InvalidInput(
                    "padding character at position {} is not final".format(position)
                )
        return bytes(out)
