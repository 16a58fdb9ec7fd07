"""Big-integer radix codecs: base36, base37, base62 and base92.

WHY: Radices that are not powers of two cannot be bit-packed; the whole
payload is read as one big-endian integer and written out in the target
radix. Short IDs (URL shorteners, database keys) use these.

HOW: IntegerCodec wraps the shared int_encode()/int_decode() helpers
and sets the detection confidences for the whole big-integer family
(also used by mbase.codecs.base58).

RULES:
- Every alphabet-valid string decodes, so alphabet coverage alone is
  weak evidence (PARTIAL_MATCH) and a decode adds little on top
- Leading zero bytes are preserved as leading zero digits
"""

from __future__ import annotations

from mbase.codecs.base import BaseCodec
from mbase.codecs.packing import int_decode, int_encode
from mbase.core.scoring import ALPHABET_MATCH, PARTIAL_MATCH
from mbase.core.types import CaseSensitivity, CodecMeta, PaddingRule


class IntegerCodec(BaseCodec):
    """Base class for big-integer encodings; subclasses only set META."""

    alphabet_confidence = PARTIAL_MATCH
    decode_confidence = ALPHABET_MATCH

    def encode(self, data: bytes) -> str:
        return int_encode(data, self.META.alphabet)

    def _decode(self, text: str) -> bytes:
        return int_decode(text, self.META.alphabet)


class Base36Lower(IntegerCodec):
    META = CodecMeta(
        name="base36lower",
        aliases=("base36", "b36"),
        alphabet="0123456789abcdefghijklmnopqrstuvwxyz",
        multibase_code="k",
        padding=PaddingRule.NONE,
        case_sensitivity=CaseSensitivity.INSENSITIVE,
        description="Base36 big integer, lowercase canonical form",
    )


class Base36Upper(IntegerCodec):
    META = CodecMeta(
        name="base36upper",
        aliases=("B36",),
        alphabet="0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ",
        multibase_code="K",
        padding=PaddingRule.NONE,
        case_sensitivity=CaseSensitivity.INSENSITIVE,
        description="Base36 big integer, uppercase canonical form",
    )


class Base62(IntegerCodec):
    META = CodecMeta(
        name="base62",
        aliases=("b62",),
        alphabet="0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz",
        multibase_code=None,
        padding=PaddingRule.NONE,
        case_sensitivity=CaseSensitivity.SENSITIVE,
        description="Base62 big integer (digits, upper, lower)",
    )


class Base37(IntegerCodec):
    """Base36 plus space as digit 36; LENIENT keeps spaces since they are symbols."""

    META = CodecMeta(
        name="base37",
        aliases=("b37",),
        alphabet="0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ ",
        multibase_code=None,
        padding=PaddingRule.NONE,
        case_sensitivity=CaseSensitivity.INSENSITIVE,
        description="Base37 big integer (base36 digits plus space)",
    )


class Base92(IntegerCodec):
    META = CodecMeta(
        name="base92",
        aliases=("b92",),
        alphabet="".join(chr(c) for c in range(33, 127) if chr(c) not in "\"\\"),
        multibase_code=None,
        padding=PaddingRule.NONE,
        case_sensitivity=CaseSensitivity.SENSITIVE,
        description="Base92 big integer (printable ASCII minus quote and backslash)",
    )
