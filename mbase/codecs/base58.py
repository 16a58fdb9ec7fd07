"""Base58 codecs: Bitcoin, Flickr and Ripple alphabets, plus Base58Check.

WHY: Base58 drops the look-alike symbols 0/O and I/l so identifiers can
be copied by hand. Base58Check (Bitcoin addresses, WIF keys) appends a
4-byte double-SHA-256 checksum so a mistyped character is caught
instead of silently producing a different payload.

HOW: The plain variants are IntegerCodec subclasses with their own
alphabets. Base58Check encodes ``payload + sha256(sha256(payload))[:4]``
with the Bitcoin alphabet; decoding splits off the last four bytes and
recomputes the checksum with ``hashlib``.

RULES:
- All variants are case-sensitive
- Base58Check decoding yields the payload only (checksum removed)
- A decoded body shorter than the checksum is InvalidLength
- A wrong checksum is ChecksumMismatch, never a silently different payload
"""

from __future__ import annotations

import hashlib

from mbase.codecs.bigint import IntegerCodec
from mbase.codecs.packing import int_decode, int_encode
from mbase.core.errors import ChecksumMismatch, InvalidLength, LengthConstraint
from mbase.core.scoring import CHECKSUM_MATCH
from mbase.core.types import CaseSensitivity, CodecMeta, PaddingRule

BTC_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
FLICKR_ALPHABET = "123456789abcdefghijkmnopqrstuvwxyzABCDEFGHJKLMNPQRSTUVWXYZ"
RIPPLE_ALPHABET = "rpshnaf39wBUDNEGHJKLM4PQRST7VWXYZ2bcdeCg65jkm8oFqi1tuvAxyz"

CHECKSUM_BYTES = 4


class Base58Btc(IntegerCodec):
    META = CodecMeta(
        name="base58btc",
        aliases=("base58", "b58"),
        alphabet=BTC_ALPHABET,
        multibase_code="z",
        padding=PaddingRule.NONE,
        case_sensitivity=CaseSensitivity.SENSITIVE,
        description="Base58 with the Bitcoin alphabet",
    )


class Base58Flickr(IntegerCodec):
    META = CodecMeta(
        name="base58flickr",
        aliases=(),
        alphabet=FLICKR_ALPHABET,
        multibase_code="Z",
        padding=PaddingRule.NONE,
        case_sensitivity=CaseSensitivity.SENSITIVE,
        description="Base58 with the Flickr alphabet",
    )


class Base58Ripple(IntegerCodec):
    META = CodecMeta(
        name="base58ripple",
        aliases=("base58xrp",),
        alphabet=RIPPLE_ALPHABET,
        multibase_code=None,
        padding=PaddingRule.NONE,
        case_sensitivity=CaseSensitivity.SENSITIVE,
        description="Base58 with the Ripple (XRP) alphabet",
    )


def checksum(payload: bytes) -> bytes:
    """First four bytes of the double SHA-256 of ``payload``."""
    return hashlib.sha256(hashlib.sha256(payload).digest()).digest()[:CHECKSUM_BYTES]


class Base58Check(IntegerCodec):
    """Base58 (Bitcoin alphabet) with a 4-byte double-SHA-256 checksum."""

    decode_confidence = CHECKSUM_MATCH
    decode_reason = "checksum valid"

    META = CodecMeta(
        name="base58check",
        aliases=("b58check",),
        alphabet=BTC_ALPHABET,
        multibase_code=None,
        padding=PaddingRule.NONE,
        case_sensitivity=CaseSensitivity.SENSITIVE,
        description="Base58Check: base58btc with a double-SHA-256 checksum",
    )

    def encode(self, data: bytes) -> str:
        return int_encode(data + checksum(data), BTC_ALPHABET)

    def _decode(self, text: str) -> bytes:
        raw = int_decode(text, BTC_ALPHABET)
        if len(raw) < CHECKSUM_BYTES:
            raise InvalidLength(
                LengthConstraint.at_least(CHECKSUM_BYTES),
                len(raw),
                "decoded bytes shorter than the checksum",
            )
        payload, check = raw[:-CHECKSUM_BYTES], raw[-CHECKSUM_BYTES:]
        expected = checksum(payload)
        if check != expected:
            raise ChecksumMismatch(
                "expected {}, found {}".format(expected.hex(), check.hex())
            )
        return payload
