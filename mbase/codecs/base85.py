"""Base85 codecs: Adobe Ascii85, ZeroMQ Z85, and the RFC 1924 alphabet
in chunked (git) and whole-integer (RFC 1924 proper) form.

WHY: Base85 packs four bytes into five characters (25% overhead versus
33% for base64). The common alphabets are incompatible, and the RFC 1924
alphabet is used two ways: git binary patches write it in 4-byte
groups, while RFC 1924 itself writes a whole 128-bit address as one
number. Each gets its own codec.

HOW: Ascii85 and the chunked form use the standard library
(``base64.a85encode`` / ``base64.b85encode``, unframed, with partial
final groups). Z85 has no standard library support and is implemented
here with the same partial-group convention, so it also accepts
payloads whose length is not a multiple of four. base85rfc1924 reads
the payload as one big-endian integer and writes it with the fixed
digit count for the payload length (20 digits for an IPv6 address).

RULES:
- A final group of k bytes encodes to k+1 characters
- A dangling single character (after expanding Ascii85 "z") is InvalidLength
- A group whose value exceeds 2**32 - 1 is InvalidInput
- Ascii85 "z" abbreviates a whole zero group and is invalid mid-group
- base85rfc1924: n bytes use the fewest d digits with 85**d >= 256**n;
  any other digit count is InvalidLength, a value >= 256**n InvalidInput
"""

from __future__ import annotations

import base64
import math

from mbase.codecs.base import BaseCodec
from mbase.codecs.packing import symbol_index
from mbase.core.errors import InvalidInput, InvalidLength, LengthConstraint
from mbase.core.scoring import ALPHABET_MATCH, PARTIAL_MATCH
from mbase.core.types import CaseSensitivity, CodecMeta, PaddingRule

ASCII85_ALPHABET = "".join(chr(c) for c in range(33, 118)) + "z"
Z85_ALPHABET = (
    "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ.-:+=^!/*?&<>()[]{}@%$#"
)
RFC1924_ALPHABET = (
    "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz!#$%&()*+-;<=>?@^_`{|}~"
)


def _check_dangling(length: int) -> None:
    if length % 5 == 1:
        raise InvalidLength(
            LengthConstraint.multiple_of(5), length, "dangling character"
        )


class Base85Family(BaseCodec):
    """Shared detection tuning: dense alphabets make coverage weak evidence."""

    alphabet_confidence = PARTIAL_MATCH
    decode_confidence = ALPHABET_MATCH


class Ascii85(Base85Family):
    META = CodecMeta(
        name="ascii85",
        aliases=("base85", "a85"),
        alphabet=ASCII85_ALPHABET,
        multibase_code=None,
        padding=PaddingRule.NONE,
        case_sensitivity=CaseSensitivity.SENSITIVE,
        description="Adobe Ascii85 without <~ ~> framing",
    )

    def encode(self, data: bytes) -> str:
        return base64.a85encode(data).decode("ascii")

    def _decode(self, text: str) -> bytes:
        _check_dangling(len(text.replace("z", "")))
        try:
            return base64.a85decode(text)
        except ValueError as exc:
            raise InvalidInput("ascii85: {}".format(exc)) from exc


class Base85Chunked(Base85Family):
    META = CodecMeta(
        name="base85chunked",
        aliases=("b85", "base85git"),
        alphabet=RFC1924_ALPHABET,
        multibase_code=None,
        padding=PaddingRule.NONE,
        case_sensitivity=CaseSensitivity.SENSITIVE,
        description="Base85 with the RFC 1924 alphabet in 4-byte groups (git style)",
    )

    def encode(self, data: bytes) -> str:
        return base64.b85encode(data).decode("ascii")

    def _decode(self, text: str) -> bytes:
        _check_dangling(len(text))
        try:
            return base64.b85decode(text)
        except ValueError as exc:
            raise InvalidInput("base85: {}".format(exc)) from exc


# ---------------------------------------------------------------------------
# RFC 1924 whole-integer form
# ---------------------------------------------------------------------------


def _digit_count(nbytes: int) -> int:
    """Fewest base-85 digits that can hold any ``nbytes``-byte value."""
    limit = 256 ** nbytes
    digits = math.ceil(nbytes * 8 / math.log2(85))
    while 85 ** digits < limit:
        digits += 1
    while digits and 85 ** (digits - 1) >= limit:
        digits -= 1
    return digits


def _byte_count(length: int) -> int:
    guess = int(length * math.log(85, 256))
    for nbytes in (guess, guess - 1, guess + 1):
        if nbytes >= 0 and _digit_count(nbytes) == length:
            return nbytes
    raise InvalidLength(
        LengthConstraint.exact(_digit_count(guess + 1)),
        length,
        "no payload length encodes to {} digits".format(length),
    )


class Base85Rfc1924(Base85Family):
    """RFC 1924: the whole payload as one fixed-width base-85 number."""

    META = CodecMeta(
        name="base85rfc1924",
        aliases=("rfc1924",),
        alphabet=RFC1924_ALPHABET,
        multibase_code=None,
        padding=PaddingRule.NONE,
        case_sensitivity=CaseSensitivity.SENSITIVE,
        description="RFC 1924 base85 big integer (20 digits per 128 bits)",
    )

    def encode(self, data: bytes) -> str:
        value = int.from_bytes(data, "big")
        digits = []
        for _ in range(_digit_count(len(data))):
            value, rem = divmod(value, 85)
            digits.append(RFC1924_ALPHABET[rem])
        return "".join(reversed(digits))

    def _decode(self, text: str) -> bytes:
        nbytes = _byte_count(len(text))
        index = symbol_index(RFC1924_ALPHABET)
        value = 0
        for char in text:
            value = value * 85 + index[char]
        if value >= 256 ** nbytes:
            raise InvalidInput("value does not fit in {} bytes".format(nbytes))
        return value.to_bytes(nbytes, "big")


class Z85(Base85Family):
    META = CodecMeta(
        name="z85",
        aliases=(),
        alphabet=Z85_ALPHABET,
        multibase_code=None,
        padding=PaddingRule.NONE,
        case_sensitivity=CaseSensitivity.SENSITIVE,
        description="ZeroMQ Z85 (partial final groups allowed)",
    )

    def encode(self, data: bytes) -> str:
        out = []
        for i in range(0, len(data), 4):
            chunk = data[i:i + 4]
            value = int.from_bytes(chunk.ljust(4, b"\x00"), "big")
            digits = []
            for _ in range(5):
                value, rem = divmod(value, 85)
                digits.append(Z85_ALPHABET[rem])
            out.append("".join(reversed(digits))[:len(chunk) + 1])
        return "".join(out)

    def _decode(self, text: str) -> bytes:
        _check_dangling(len(text))
        index = symbol_index(Z85_ALPHABET)
        out = bytearray()
        for i in range(0, len(text), 5):
            group = text[i:i + 5]
            value = 0
            for char in group.ljust(5, Z85_ALPHABET[-1]):
                value = value * 85 + index[char]
            if value > 0xFFFFFFFF:
                raise InvalidInput(
                    "group {!r} at position {} overflows 32 bits".format(group, i)
                )
            out.extend(value.to_bytes(4, "big")[:len(group) - 1])
        return bytes(out)
