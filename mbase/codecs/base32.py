"""Base32 codecs: the eight RFC 4648 variants plus z-base-32, Crockford
and word-safe base32.

WHY: Base32 survives case-insensitive channels (DNS labels, file names,
spoken codes), so it comes in many flavours: standard and "extended hex"
alphabets, with or without padding, lower or upper canonical case, plus
the human-oriented z-base-32, Crockford and word-safe alphabets.

HOW: The RFC 4648 variants use the standard library ``base64`` module
(b32encode / b32hexencode); structure is checked first with the shared
padding and group-length helpers. z-base-32, Crockford and word-safe
use the shared bit packer with their own alphabets.

RULES:
- All variants except word-safe are case-insensitive and fold to their
  canonical case; word-safe uses both cases as distinct digits
- Unpadded variants treat "=" as an invalid character
- Crockford LENIENT additionally drops "-" and reads I/L as 1, O as 0
"""

from __future__ import annotations

import base64

from mbase.codecs.base import BaseCodec
from mbase.codecs.packing import (
    check_group_length,
    pack_bits,
    pad_text,
    strip_padding,
    unpack_bits,
)
from mbase.core.types import CaseSensitivity, CodecMeta, Mode, PaddingRule

RFC_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"
HEX_ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUV"
ZBASE32_ALPHABET = "ybndrfg8ejkmcpqxot1uwisza345h769"
CROCKFORD_ALPHABET = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"
WORDSAFE_ALPHABET = "23456789CFGHJMPQRVWXcfghjmpqrvwx"

_CROCKFORD_LENIENT = str.maketrans({"I": "1", "L": "1", "O": "0", "-": None})


def _meta(name, aliases, hexalpha, padded, lower, code):
    alphabet = HEX_ALPHABET if hexalpha else RFC_ALPHABET
    return CodecMeta(
        name=name,
        aliases=aliases,
        alphabet=alphabet.lower() if lower else alphabet,
        multibase_code=code,
        padding=PaddingRule.REQUIRED if padded else PaddingRule.NONE,
        case_sensitivity=CaseSensitivity.INSENSITIVE,
        description="RFC 4648 base32{}{}, {} canonical form".format(
            "hex" if hexalpha else "",
            " with padding" if padded else "",
            "lowercase" if lower else "uppercase",
        ),
    )


class Base32Family(BaseCodec):
    """RFC 4648 base32; subclasses set META, ``extended_hex`` and ``pad_char``."""

    extended_hex = False
    decode_confidence = 0.78

    def encode(self, data: bytes) -> str:
        if self.extended_hex:
            text = base64.b32hexencode(data).decode("ascii")
        else:
            text = base64.b32encode(data).decode("ascii")
        if not self.pad_char:
            text = text.rstrip("=")
        if self.META.alphabet.islower():
            text = text.lower()
        return text

    def _decode(self, text: str) -> bytes:
        body = strip_padding(text, 5, "=", required=True) if self.pad_char else text
        check_group_length(len(body), 5)
        padded = pad_text(body, 5, "=").upper()
        if self.extended_hex:
            return base64.b32hexdecode(padded)
        return base64.b32decode(padded)


class Base32Lower(Base32Family):
    META = _meta("base32lower", ("base32", "b32"), False, False, True, "b")


class Base32Upper(Base32Family):
    META = _meta("base32upper", ("B32",), False, False, False, "B")


class Base32PadLower(Base32Family):
    pad_char = "="
    META = _meta("base32padlower", ("base32pad", "b32pad"), False, True, True, "c")


class Base32PadUpper(Base32Family):
    pad_char = "="
    META = _meta("base32padupper", ("B32PAD",), False, True, False, "C")


class Base32HexLower(Base32Family):
    extended_hex = True
    META = _meta("base32hexlower", ("base32hex", "b32hex"), True, False, True, "v")


class Base32HexUpper(Base32Family):
    extended_hex = True
    META = _meta("base32hexupper", ("B32HEX",), True, False, False, "V")


class Base32HexPadLower(Base32Family):
    extended_hex = True
    pad_char = "="
    META = _meta(
        "base32hexpadlower", ("base32hexpad", "b32hexpad"), True, True, True, "t"
    )


class Base32HexPadUpper(Base32Family):
    extended_hex = True
    pad_char = "="
    META = _meta("base32hexpadupper", ("B32HEXPAD",), True, True, False, "T")


class ZBase32(BaseCodec):
    """z-base-32: a permuted alphabet chosen for easy reading and typing."""

    decode_confidence = 0.78

    META = CodecMeta(
        name="zbase32",
        aliases=("z32", "base32z"),
        alphabet=ZBASE32_ALPHABET,
        multibase_code="h",
        padding=PaddingRule.NONE,
        case_sensitivity=CaseSensitivity.INSENSITIVE,
        description="z-base-32 human-oriented base32",
    )

    def encode(self, data: bytes) -> str:
        return pack_bits(data, ZBASE32_ALPHABET, 5)

    def _decode(self, text: str) -> bytes:
        return unpack_bits(text, ZBASE32_ALPHABET, 5)


class Crockford32(BaseCodec):
    """Crockford's base32: no I, L, O or U; hyphens are decoration."""

    decode_confidence = 0.78

    META = CodecMeta(
        name="crockford32",
        aliases=("crockford", "cf32"),
        alphabet=CROCKFORD_ALPHABET,
        multibase_code=None,
        padding=PaddingRule.NONE,
        case_sensitivity=CaseSensitivity.INSENSITIVE,
        description="Crockford base32 (bit-packed, no check symbol)",
    )

    def normalize(self, text: str, mode: Mode) -> str:
        text = super().normalize(text, mode)
        if mode is Mode.LENIENT:
            text = text.translate(_CROCKFORD_LENIENT)
        return text

    def encode(self, data: bytes) -> str:
        return pack_bits(data, CROCKFORD_ALPHABET, 5)

    def _decode(self, text: str) -> bytes:
        return unpack_bits(text, CROCKFORD_ALPHABET, 5)


class Base32WordSafe(BaseCodec):
    """Word-safe base32: no vowels and no lookalike digits, so output
    cannot spell words and survives being read aloud.

    Upper and lower case letters are different digits, so unlike the
    other base32 codecs this one is case-sensitive.
    """

    decode_confidence = 0.78

    META = CodecMeta(
        name="base32wordsafe",
        aliases=("base32ws", "wordsafe"),
        alphabet=WORDSAFE_ALPHABET,
        multibase_code=None,
        padding=PaddingRule.NONE,
        case_sensitivity=CaseSensitivity.SENSITIVE,
        description="Word-safe base32 (no vowels, case-sensitive, bit-packed)",
    )

    def encode(self, data: bytes) -> str:
        return pack_bits(data, WORDSAFE_ALPHABET, 5)

    def _decode(self, text: str) -> bytes:
        return unpack_bits(text, WORDSAFE_ALPHABET, 5)
