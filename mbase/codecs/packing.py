"""Bit-packing, padding, and big-integer helpers shared by base-N codecs.

WHY: Most base-N encodings are one of two algorithms with a different
alphabet: fixed-width bit packing (base2/8/16/32/64 and friends) or
big-integer radix conversion (base36/58/62). Writing each algorithm
once keeps the per-codec classes down to metadata and a few calls.

HOW: pack_bits()/unpack_bits() move ``bits``-wide groups between bytes
and alphabet symbols. check_group_length() and strip_padding() enforce
the structural length rules of RFC 4648 style encodings.
int_encode()/int_decode() treat the payload as one big-endian integer
and preserve leading zero bytes as leading zero digits (base58 style).

RULES:
- A final partial group is zero-filled on encode and must be zero on decode
- Only lengths reachable by encoding are accepted
- Padding appears only at the end and only in the amount encoding produces
- Leading zero bytes map 1:1 to leading zero-value digits
"""

from __future__ import annotations

from functools import lru_cache
from math import gcd
from typing import Dict

from mbase.core.errors import InvalidInput, InvalidLength, LengthConstraint


@lru_cache(maxsize=None)
def symbol_index(alphabet: str) -> Dict[str, int]:
    """Map each alphabet symbol to its digit value."""
    return {c: i for i, c in enumerate(alphabet)}


def group_chars(bits: int) -> int:
    """Symbols per whole-byte group, e.g. 4 for base64, 8 for base32."""
    return 8 // gcd(8, bits) if bits < 8 else 1


def symbols_for(nbytes: int, bits: int) -> int:
    """Number of symbols an unpadded encoding of ``nbytes`` bytes uses."""
    return (nbytes * 8 + bits - 1) // bits


def check_group_length(length: int, bits: int) -> int:
    """Validate an unpadded symbol count and return the decoded byte count.

    Raises:
        InvalidLength: No byte string encodes to ``length`` symbols.
    """
    nbytes = length * bits // 8
    if symbols_for(nbytes, bits) != length:
        raise InvalidLength(
            LengthConstraint.multiple_of(group_chars(bits)),
            length,
            "incomplete final group",
        )
    return nbytes


def pad_text(text: str, bits: int, pad: str) -> str:
    """Append padding up to the next whole group."""
    return text + pad * (-len(text) % group_chars(bits))


def strip_padding(text: str, bits: int, pad: str, required: bool) -> str:
    """Check trailing padding and return the text without it.

    Args:
        text: Normalized encoded text.
        bits: Bits per symbol of the codec.
        pad: The padding character.
        required: True if padding must be present (PaddingRule.REQUIRED).

    Raises:
        InvalidLength: Missing, misplaced, or wrong amount of padding.
    """
    group = group_chars(bits)
    body = text.rstrip(pad)
    if pad in body:
        raise InvalidLength(
            LengthConstraint.multiple_of(group), len(text), "misplaced padding"
        )
    if not required and len(body) == len(text):
        return body
    if len(text) % group:
        raise InvalidLength(
            LengthConstraint.multiple_of(group),
            len(text),
            "padding required" if len(body) == len(text) else "bad padded length",
        )
    expected = -symbols_for(check_group_length(len(body), bits), bits) % group
    if len(text) - len(body) != expected:
        raise InvalidLength(
            LengthConstraint.multiple_of(group), len(text), "wrong amount of padding"
        )
    return body


def pack_bits(data: bytes, alphabet: str, bits: int) -> str:
    """Encode bytes as ``bits``-wide symbols, most significant bit first."""
    mask = (1 << bits) - 1
    out = []
    acc = 0
    nbits = 0
    for byte in data:
        acc = (acc << 8) | byte
        nbits += 8
        while nbits >= bits:
            nbits -= bits
            out.append(alphabet[(acc >> nbits) & mask])
        acc &= (1 << nbits) - 1
    if nbits:
        out.append(alphabet[(acc << (bits - nbits)) & mask])
    return "".join(out)


def unpack_bits(text: str, alphabet: str, bits: int) -> bytes:
    """Decode ``bits``-wide symbols back to bytes.

    Raises:
        InvalidLength: Symbol count no encoding produces.
        InvalidInput: Non-zero filler bits in the final symbol.
    """
    check_group_length(len(text), bits)
    index = symbol_index(alphabet)
    out = bytearray()
    acc = 0
    nbits = 0
    for char in text:
        acc = (acc << bits) | index[char]
        nbits += bits
        if nbits >= 8:
            nbits -= 8
            out.append((acc >> nbits) & 0xFF)
            acc &= (1 << nbits) - 1
    if acc:
        raise InvalidInput("non-zero trailing bits in final symbol")
    return bytes(out)


def int_encode(data: bytes, alphabet: str) -> str:
    """Encode bytes as a big-endian integer in radix ``len(alphabet)``."""
    base = len(alphabet)
    stripped = data.lstrip(b"\x00")
    zeros = len(data) - len(stripped)
    value = int.from_bytes(stripped, "big")
    digits = []
    while value:
        value, rem = divmod(value, base)
        digits.append(alphabet[rem])
    return alphabet[0] * zeros + "".join(reversed(digits))


def int_decode(text: str, alphabet: str) -> bytes:
    """Inverse of int_encode(); text must already be alphabet-checked."""
    base = len(alphabet)
    index = symbol_index(alphabet)
    body = text.lstrip(alphabet[0])
    zeros = len(text) - len(body)
    value = 0
    for char in body:
        value = value * base + index[char]
    payload = value.to_bytes((value.bit_length() + 7) // 8, "big")
    return b"\x00" * zeros + payload
