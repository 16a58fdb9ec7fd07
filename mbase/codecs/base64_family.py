"""RFC 4648 base64 codecs: standard and URL-safe, with and without padding.

WHY: Base64 is by far the most common binary-to-text encoding, and the
four multibase variants differ only in two symbols and in padding. One
family class keeps them in lockstep.

HOW: Encoding uses the standard library ``base64`` module. Decoding
checks structure first (padding via strip_padding, group length via
check_group_length) so failures surface as InvalidLength with a useful
constraint, then hands the re-padded text to ``base64``.

RULES:
- Unpadded variants treat "=" as an invalid character
- Padded variants require exactly the padding encoding produces
- A single dangling symbol (length % 4 == 1) is InvalidLength
"""

from __future__ import annotations

import base64

from mbase.codecs.base import BaseCodec
from mbase.codecs.packing import check_group_length, pad_text, strip_padding
from mbase.core.types import CaseSensitivity, CodecMeta, PaddingRule

STANDARD_ALPHABET = (
    "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
)
URL_ALPHABET = (
    "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_"
)


class Base64Family(BaseCodec):
    """Shared implementation; subclasses set META, ``urlsafe`` and ``pad_char``."""

    urlsafe = False

    def encode(self, data: bytes) -> str:
        if self.urlsafe:
            text = base64.urlsafe_b64encode(data).decode("ascii")
        else:
            text = base64.b64encode(data).decode("ascii")
        return text if self.pad_char else text.rstrip("=")

    def _decode(self, text: str) -> bytes:
        body = strip_padding(text, 6, "=", required=True) if self.pad_char else text
        check_group_length(len(body), 6)
        padded = pad_text(body, 6, "=")
        if self.urlsafe:
            return base64.urlsafe_b64decode(padded)
        return base64.b64decode(padded, validate=True)


class Base64(Base64Family):
    META = CodecMeta(
        name="base64",
        aliases=("b64", "std64"),
        alphabet=STANDARD_ALPHABET,
        multibase_code="m",
        padding=PaddingRule.NONE,
        case_sensitivity=CaseSensitivity.SENSITIVE,
        description="RFC 4648 base64 without padding",
    )


class Base64Pad(Base64Family):
    pad_char = "="
    META = CodecMeta(
        name="base64pad",
        aliases=("b64pad",),
        alphabet=STANDARD_ALPHABET,
        multibase_code="M",
        padding=PaddingRule.REQUIRED,
        case_sensitivity=CaseSensitivity.SENSITIVE,
        description="RFC 4648 base64 with required padding",
    )


class Base64Url(Base64Family):
    urlsafe = True
    META = CodecMeta(
        name="base64url",
        aliases=("b64url", "url64"),
        alphabet=URL_ALPHABET,
        multibase_code="u",
        padding=PaddingRule.NONE,
        case_sensitivity=CaseSensitivity.SENSITIVE,
        description="RFC 4648 base64url without padding",
    )


class Base64UrlPad(Base64Family):
    urlsafe = True
    pad_char = "="
    META = CodecMeta(
        name="base64urlpad",
        aliases=("b64urlpad",),
        alphabet=URL_ALPHABET,
        multibase_code="U",
        padding=PaddingRule.REQUIRED,
        case_sensitivity=CaseSensitivity.SENSITIVE,
        description="RFC 4648 base64url with required padding",
    )
