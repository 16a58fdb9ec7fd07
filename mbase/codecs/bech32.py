"""Bech32 (BIP-173) and Bech32m (BIP-350) codecs.

WHY: Bech32 is the checksum-bearing encoding behind SegWit addresses and
many Cosmos/Lightning identifiers. Its BCH checksum detects any single
substitution, so it is the reference case for ChecksumMismatch.

HOW: Encoding converts the payload from 8-bit to 5-bit groups, prefixes
the fixed human-readable part ``"data"`` and the ``"1"`` separator, and
appends the six-symbol checksum computed by the BIP-173 polymod with the
variant's constant (1 for bech32, 0x2bc830a3 for bech32m). Decoding
accepts any human-readable part, verifies the checksum, and converts the
data symbols back to bytes.

RULES:
- The separator is the *last* "1" in the string
- The human-readable part must be non-empty; the checksum is six symbols
- STRICT rejects mixed-case input; either uniform case is accepted and
  folded to lower case in both modes
- Leftover conversion bits must be fewer than five and all zero
- A checksum computed with the other variant's constant is a mismatch
"""

from __future__ import annotations

from typing import Iterable, List

from mbase.codecs.base import BaseCodec
from mbase.core.alphabet import fold_case
from mbase.core.errors import (
    ChecksumMismatch,
    InvalidCharacter,
    InvalidInput,
    InvalidLength,
    LengthConstraint,
)
from mbase.core.scoring import MULTIBASE_MATCH, WEAK_MATCH
from mbase.core.types import CaseSensitivity, CodecMeta, Mode, PaddingRule

CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
DEFAULT_HRP = "data"
SEPARATOR = "1"
CHECKSUM_LENGTH = 6

BECH32_CONST = 1
BECH32M_CONST = 0x2BC830A3

_GENERATOR = (0x3B6A57B2, 0x26508E6D, 0x1EA119FA, 0x3D4233DD, 0x2A1462B3)

# Printable ASCII allowed in the human-readable part (case-folded to lower)
_HRP_CHARS = "".join(
    chr(c) for c in range(33, 127) if not "A" <= chr(c) <= "Z"
)


def polymod(values: Iterable[int]) -> int:
    chk = 1
    for value in values:
        top = chk >> 25
        chk = (chk & 0x1FFFFFF) << 5 ^ value
        for i, gen in enumerate(_GENERATOR):
            if (top >> i) & 1:
                chk ^= gen
    return chk


def hrp_expand(hrp: str) -> List[int]:
    return [ord(c) >> 5 for c in hrp] + [0] + [ord(c) & 31 for c in hrp]


def create_checksum(hrp: str, data: List[int], const: int) -> List[int]:
    values = hrp_expand(hrp) + data
    mod = polymod(values + [0] * CHECKSUM_LENGTH) ^ const
    return [(mod >> 5 * (5 - i)) & 31 for i in range(CHECKSUM_LENGTH)]


def convert_bits(data: Iterable[int], from_bits: int, to_bits: int, pad: bool) -> List[int]:
    """Regroup a bit stream, e.g. bytes (8) to bech32 symbols (5).

    Raises:
        InvalidInput: Without ``pad``, leftover bits are too many or non-zero.
    """
    acc = 0
    nbits = 0
    out = []
    maxv = (1 << to_bits) - 1
    for value in data:
        acc = (acc << from_bits) | value
        nbits += from_bits
        while nbits >= to_bits:
            nbits -= to_bits
            out.append((acc >> nbits) & maxv)
        acc &= (1 << nbits) - 1
    if pad:
        if nbits:
            out.append((acc << (to_bits - nbits)) & maxv)
    elif nbits >= from_bits or acc:
        raise InvalidInput("invalid padding bits in data part")
    return out


class Bech32Codec(BaseCodec):
    """Bech32; Bech32mCodec only swaps META and the checksum constant."""

    checksum_const = BECH32_CONST
    alphabet_confidence = WEAK_MATCH
    decode_confidence = MULTIBASE_MATCH
    decode_reason = "checksum valid"

    META = CodecMeta(
        name="bech32",
        aliases=(),
        alphabet=CHARSET,
        multibase_code=None,
        padding=PaddingRule.NONE,
        case_sensitivity=CaseSensitivity.INSENSITIVE,
        description="Bech32 (BIP-173) with human-readable part 'data'",
    )

    @property
    def symbols(self) -> str:
        return _HRP_CHARS

    def encode(self, data: bytes) -> str:
        values = convert_bits(data, 8, 5, pad=True)
        values += create_checksum(DEFAULT_HRP, values, self.checksum_const)
        return DEFAULT_HRP + SEPARATOR + "".join(CHARSET[v] for v in values)

    def normalize(self, text: str, mode: Mode) -> str:
        # BIP-173 allows an all-uppercase string in either mode
        return fold_case(super().normalize(text, mode), self.META)

    def decode(self, text: str, mode: Mode = Mode.STRICT) -> bytes:
        if mode is Mode.STRICT and text.lower() != text and text.upper() != text:
            raise InvalidInput("mixed-case bech32 string")
        return super().decode(text, mode)

    def _decode(self, text: str) -> bytes:
        pos = text.rfind(SEPARATOR)
        if pos < 1:
            raise InvalidInput("missing separator or empty human-readable part")
        hrp, data_part = text[:pos], text[pos + 1:]
        if len(data_part) < CHECKSUM_LENGTH:
            raise InvalidLength(
                LengthConstraint.at_least(CHECKSUM_LENGTH),
                len(data_part),
                "data part shorter than the checksum",
            )
        values = []
        for offset, char in enumerate(data_part):
            index = CHARSET.find(char)
            if index < 0:
                raise InvalidCharacter(char, pos + 1 + offset)
            values.append(index)
        if polymod(hrp_expand(hrp) + values) != self.checksum_const:
            raise ChecksumMismatch("{} checksum does not verify".format(self.name))
        return bytes(convert_bits(values[:-CHECKSUM_LENGTH], 5, 8, pad=False))


class Bech32mCodec(Bech32Codec):
    checksum_const = BECH32M_CONST

    META = CodecMeta(
        name="bech32m",
        aliases=(),
        alphabet=CHARSET,
        multibase_code=None,
        padding=PaddingRule.NONE,
        case_sensitivity=CaseSensitivity.INSENSITIVE,
        description="Bech32m (BIP-350) with human-readable part 'data'",
    )
