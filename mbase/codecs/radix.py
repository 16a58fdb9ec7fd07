"""Power-of-two radix codecs: binary, octal, and hexadecimal.

WHY: Binary, octal and hex dumps are the encodings people read by eye.
Their alphabets are tiny, so a successful decode is strong evidence;
these codecs score a successful decode above the base64 default.

HOW: Hex goes through ``bytes.hex()`` / ``bytes.fromhex()``; binary and
octal use the shared MSB-first bit packer (multibase base2/base8 style,
where octal packs 3 bits per symbol across byte boundaries).

RULES:
- Hex is case-insensitive; each variant folds to its own canonical case
- Octal length must be one an encoding produces (e.g. 3 symbols per byte
  for a single byte, 8 symbols per 3 bytes)
"""

from __future__ import annotations

from mbase.codecs.base import BaseCodec
from mbase.codecs.packing import check_group_length, pack_bits, unpack_bits
from mbase.core.types import CaseSensitivity, CodecMeta, PaddingRule


class Base2(BaseCodec):
    decode_confidence = 0.85

    META = CodecMeta(
        name="base2",
        aliases=("binary", "bin"),
        alphabet="01",
        multibase_code="0",
        padding=PaddingRule.NONE,
        case_sensitivity=CaseSensitivity.INSENSITIVE,
        description="Binary digits, 8 per byte",
    )

    def encode(self, data: bytes) -> str:
        return pack_bits(data, self.META.alphabet, 1)

    def _decode(self, text: str) -> bytes:
        return unpack_bits(text, self.META.alphabet, 1)


class Base8(BaseCodec):
    decode_confidence = 0.80

    META = CodecMeta(
        name="base8",
        aliases=("octal", "oct"),
        alphabet="01234567",
        multibase_code="7",
        padding=PaddingRule.NONE,
        case_sensitivity=CaseSensitivity.INSENSITIVE,
        description="Octal digits, 3 bits per symbol",
    )

    def encode(self, data: bytes) -> str:
        return pack_bits(data, self.META.alphabet, 3)

    def _decode(self, text: str) -> bytes:
        return unpack_bits(text, self.META.alphabet, 3)


class Base16Lower(BaseCodec):
    decode_confidence = 0.80

    META = CodecMeta(
        name="base16lower",
        aliases=("hex", "base16", "hexlower"),
        alphabet="0123456789abcdef",
        multibase_code="f",
        padding=PaddingRule.NONE,
        case_sensitivity=CaseSensitivity.INSENSITIVE,
        description="Hexadecimal, lowercase canonical form",
    )

    def encode(self, data: bytes) -> str:
        return data.hex()

    def _decode(self, text: str) -> bytes:
        check_group_length(len(text), 4)
        return bytes.fromhex(text)


class Base16Upper(Base16Lower):
    META = CodecMeta(
        name="base16upper",
        aliases=("hexupper", "HEX"),
        alphabet="0123456789ABCDEF",
        multibase_code="F",
        padding=PaddingRule.NONE,
        case_sensitivity=CaseSensitivity.INSENSITIVE,
        description="Hexadecimal, uppercase canonical form",
    )

    def encode(self, data: bytes) -> str:
        return data.hex().upper()
