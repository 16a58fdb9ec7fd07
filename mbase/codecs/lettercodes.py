"""Puzzle letter codes: A1Z26 letter numbers and the prisoners' tap code.

WHY: Both turn capital letters into small numbers and show up in
puzzle hunts, escape rooms and classroom exercises, usually as plain
digit strings nobody has labelled. Like the telegraph codes they only
know a handful of characters, so other bytes need an escape to keep the
codec contract.

HOW:

- A1Z26: A-Z become 1-26 and space becomes 0. Any other byte b (lower
  case included) becomes the number 100 + b, so escapes occupy 100-355
  and never collide with a letter. Numbers are joined with "-".
- Tap code: the 5x5 Polybius square without K. A letter becomes its
  row and column digit ("23" for H). Any other byte, K included, becomes
  a four-digit escape: the byte in base 5 written with digits 1-5.
  Tokens are separated by single spaces.

RULES:
- A1Z26 numbers must be written without leading zeros; 27-99 and
  anything above 355 are InvalidInput
- Tap tokens are two digits (a letter) or four digits (a byte no larger
  than 255); anything else is InvalidInput
- Both decode empty text to empty bytes
- Bare digit strings are ambiguous with other radices, so the stronger
  score needs the separator to be present
"""

from __future__ import annotations

from typing import List

from mbase.codecs.base import BaseCodec
from mbase.core.errors import InvalidInput
from mbase.core.scoring import ALPHABET_MATCH, PARTIAL_MATCH, Rule
from mbase.core.types import CaseSensitivity, CodecMeta, PaddingRule

_UPPER = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"

# ---------------------------------------------------------------------------
# A1Z26
# ---------------------------------------------------------------------------

A1Z26_ESCAPE_BASE = 100


def _letter_number(byte: int) -> str:
    char = chr(byte)
    if char == " ":
        return "0"
    if char in _UPPER:
        return str(_UPPER.index(char) + 1)
    return str(A1Z26_ESCAPE_BASE + byte)


class A1Z26(BaseCodec):
    alphabet_confidence = PARTIAL_MATCH
    decode_confidence = ALPHABET_MATCH

    META = CodecMeta(
        name="a1z26",
        aliases=("letternum", "alphanumeric"),
        alphabet="0123456789-",
        multibase_code=None,
        padding=PaddingRule.NONE,
        case_sensitivity=CaseSensitivity.SENSITIVE,
        description="Letter positions A=1 to Z=26, '-' separated, 0 for space",
    )

    def rules(self) -> List[Rule]:
        return super().rules() + [Rule(
            predicate=lambda p: p.full_coverage and "-" in p.normalized and p.decodes,
            confidence=0.85,
            reason="hyphen-separated letter numbers decode",
        )]

    def encode(self, data: bytes) -> str:
        return "-".join(_letter_number(byte) for byte in data)

    def _decode(self, text: str) -> bytes:
        if not text:
            return b""
        out = bytearray()
        for position, token in enumerate(text.split("-"), start=1):
            if not token or token != str(int(token)):
                raise InvalidInput(
                    "number {} ({!r}) is empty or has leading zeros".format(position, token)
                )
            value = int(token)
            if value == 0:
                out.append(0x20)
            elif value <= 26:
                out.append(ord(_UPPER[value - 1]))
            elif A1Z26_ESCAPE_BASE <= value <= A1Z26_ESCAPE_BASE + 255:
                out.append(value - A1Z26_ESCAPE_BASE)
            else:
                raise InvalidInput(
                    "number {} ({}) is neither a letter nor an escape".format(position, value)
                )
        return bytes(out)


# ---------------------------------------------------------------------------
# Tap code
# ---------------------------------------------------------------------------

TAP_SQUARE = "ABCDEFGHIJLMNOPQRSTUVWXYZ"
TAP_DIGITS = "12345"


def _tap_token(byte: int) -> str:
    char = chr(byte)
    if char in TAP_SQUARE:
        row, col = divmod(TAP_SQUARE.index(char), 5)
        return TAP_DIGITS[row] + TAP_DIGITS[col]
    digits = []
    for _ in range(4):
        byte, rem = divmod(byte, 5)
        digits.append(TAP_DIGITS[rem])
    return "".join(reversed(digits))


class TapCode(BaseCodec):
    token_separator = " "
    alphabet_confidence = PARTIAL_MATCH
    decode_confidence = ALPHABET_MATCH

    META = CodecMeta(
        name="tapcode",
        aliases=("tap", "knock"),
        alphabet=TAP_DIGITS + " ",
        multibase_code=None,
        padding=PaddingRule.NONE,
        case_sensitivity=CaseSensitivity.SENSITIVE,
        description="Tap code: row and column in a 5x5 square, space separated",
    )

    def rules(self) -> List[Rule]:
        return super().rules() + [Rule(
            predicate=lambda p: p.full_coverage and " " in p.normalized and p.decodes,
            confidence=0.85,
            reason="space-separated tap pairs decode",
        )]

    def encode(self, data: bytes) -> str:
        return " ".join(_tap_token(byte) for byte in data)

    def _decode(self, text: str) -> bytes:
        if not text:
            return b""
        out = bytearray()
        for position, token in enumerate(text.split(" "), start=1):
            value = 0
            for char in token:
                value = value * 5 + TAP_DIGITS.index(char)
            if len(token) == 2:
                out.append(ord(TAP_SQUARE[value]))
            elif len(token) == 4 and value <= 255:
                out.append(value)
            else:
                raise InvalidInput(
                    "tap token {} ({!r}) is not a letter pair or byte escape".format(
                        position, token
                    )
                )
        return bytes(out)
