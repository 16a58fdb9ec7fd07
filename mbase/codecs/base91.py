"""basE91 codec (Joachim Henke's variable-width encoding).

HOW: The bit packing is delegated to the ``base91`` package: bits are
consumed 13 at a time, or 14 when the 13-bit value would be ambiguous
(<= 88), and each chunk is written as two base-91 digits. The package
silently skips unknown characters, so the alphabet check in
BaseCodec.decode() is what rejects them.

RULES:
- Every alphabet-valid string decodes; there is no length constraint
- Output uses 91 printable ASCII characters (no space, "-", "'" or "\\")
"""

from __future__ import annotations

import base91

from mbase.codecs.base import BaseCodec
from mbase.core.scoring import ALPHABET_MATCH, PARTIAL_MATCH
from mbase.core.types import CaseSensitivity, CodecMeta, PaddingRule

ALPHABET = (
    "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"
    "0123456789!#$%&()*+,./:;<=>?@[]^_`{|}~\""
)


class Base91(BaseCodec):
    alphabet_confidence = PARTIAL_MATCH
    decode_confidence = ALPHABET_MATCH

    META = CodecMeta(
        name="base91",
        aliases=("b91",),
        alphabet=ALPHABET,
        multibase_code=None,
        padding=PaddingRule.NONE,
        case_sensitivity=CaseSensitivity.SENSITIVE,
        description="basE91 variable-width encoding",
    )

    def encode(self, data: bytes) -> str:
        return base91.encode(data)

    def _decode(self, text: str) -> bytes:
        return bytes(base91.decode(text))
