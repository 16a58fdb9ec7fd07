"""Internet-standard text encodings: percent-encoding, quoted-printable,
uuencode, punycode, Unicode code point notation and IPv6 address text.

WHY: These are the encodings people meet in URLs, e-mail bodies, old
Usenet attachments, internationalized domain names, and character
tables. Unlike base-N codecs they leave plain ASCII mostly readable,
which makes them hard to detect, so their scorers only claim real
confidence when the tell-tale escapes are present.

HOW: Each codec delegates the algorithm to the standard library
(``urllib.parse``, ``binascii``, the ``punycode`` text codec,
``ipaddress``) and adds the structural checks the standard library
skips, so malformed escapes raise InvalidInput instead of being passed
through silently.

RULES:
- Escape sequences are validated before decoding (percent: %XX,
  quoted-printable: =XX or a soft line break "=\\n" / "=\\r\\n")
- uuencode lines must have exactly the length their count character
  declares
- punycode and unicode read bytes as UTF-8 with ``surrogateescape`` so
  invalid UTF-8 survives the round trip
- ipv6 accepts any address notation ``ipaddress`` parses but writes the
  compressed RFC 5952 form; the 0x80 end marker must sit in the last address
"""

from __future__ import annotations

import binascii
import ipaddress
import re
from typing import List
from urllib.parse import quote_from_bytes, unquote_to_bytes

from mbase.codecs.base import BaseCodec
from mbase.core.errors import InvalidInput, InvalidLength, LengthConstraint
from mbase.core.scoring import ALPHABET_MATCH, PARTIAL_MATCH, WEAK_MATCH, Rule
from mbase.core.types import CaseSensitivity, CodecMeta, PaddingRule

_HEX = "0123456789ABCDEFabcdef"
_PRINTABLE = "".join(chr(c) for c in range(33, 127))


def _hex_escape_error(text: str, marker: str, allow_soft_break: bool = False):
    """Return the position of the first malformed escape, or None."""
    pos = text.find(marker)
    while pos >= 0:
        following = text[pos + 1:pos + 3]
        if allow_soft_break and following[:1] == "\n":
            pos = text.find(marker, pos + 2)
            continue
        if allow_soft_break and following == "\r\n":
            pos = text.find(marker, pos + 3)
            continue
        if len(following) != 2 or any(c not in _HEX for c in following):
            return pos
        pos = text.find(marker, pos + 3)
    return None


# ---------------------------------------------------------------------------
# Percent-encoding
# ---------------------------------------------------------------------------


class UrlEncoding(BaseCodec):
    """RFC 3986 percent-encoding with every reserved character escaped."""

    alphabet_confidence = WEAK_MATCH
    decode_confidence = WEAK_MATCH
    ambiguity_warning = "plain alphanumeric text is also valid percent-encoding"

    META = CodecMeta(
        name="urlencoding",
        aliases=("url", "percent", "percentencoding"),
        alphabet=(
            "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_.~%"
        ),
        multibase_code=None,
        padding=PaddingRule.NONE,
        case_sensitivity=CaseSensitivity.SENSITIVE,
        description="Percent-encoding (RFC 3986), all reserved characters escaped",
    )

    def rules(self) -> List[Rule]:
        return super().rules() + [Rule(
            predicate=lambda p: p.full_coverage and "%" in p.normalized and p.decodes,
            confidence=0.80,
            reason="percent escapes decode",
        )]

    def encode(self, data: bytes) -> str:
        return quote_from_bytes(data, safe="")

    def _decode(self, text: str) -> bytes:
        bad = _hex_escape_error(text, "%")
        if bad is not None:
            raise InvalidInput(
                "malformed percent escape {!r} at position {}".format(text[bad:bad + 3], bad)
            )
        return unquote_to_bytes(text)


# ---------------------------------------------------------------------------
# Quoted-printable
# ---------------------------------------------------------------------------


class QuotedPrintable(BaseCodec):
    """RFC 2045 quoted-printable in binary mode (spaces, tabs, CR/LF escaped)."""

    alphabet_confidence = WEAK_MATCH
    decode_confidence = WEAK_MATCH
    ambiguity_warning = "printable ASCII text is also valid quoted-printable"

    META = CodecMeta(
        name="quoted-printable",
        aliases=("qp",),
        alphabet=_PRINTABLE + "\r\n",
        multibase_code=None,
        padding=PaddingRule.NONE,
        case_sensitivity=CaseSensitivity.SENSITIVE,
        description="Quoted-printable (RFC 2045), binary-safe form",
    )

    def rules(self) -> List[Rule]:
        return super().rules() + [Rule(
            predicate=lambda p: p.full_coverage and "=" in p.normalized and p.decodes,
            confidence=ALPHABET_MATCH,
            reason="quoted-printable escapes decode",
        )]

    def encode(self, data: bytes) -> str:
        return binascii.b2a_qp(data, quotetabs=True, istext=False).decode("ascii")

    def _decode(self, text: str) -> bytes:
        bad = _hex_escape_error(text, "=", allow_soft_break=True)
        if bad is not None:
            raise InvalidInput(
                "malformed '=' escape {!r} at position {}".format(text[bad:bad + 3], bad)
            )
        return binascii.a2b_qp(text.encode("ascii"))


# ---------------------------------------------------------------------------
# uuencode
# ---------------------------------------------------------------------------

UU_LINE_BYTES = 45


class UuEncode(BaseCodec):
    """uuencoded body lines (no begin/end framing), backtick for zero."""

    alphabet_confidence = PARTIAL_MATCH

    META = CodecMeta(
        name="uuencode",
        aliases=("uu",),
        alphabet="".join(chr(c) for c in range(33, 97)) + "\n",
        multibase_code=None,
        padding=PaddingRule.NONE,
        case_sensitivity=CaseSensitivity.SENSITIVE,
        description="uuencode body, 45 bytes per line",
    )

    def encode(self, data: bytes) -> str:
        return "".join(
            binascii.b2a_uu(data[i:i + UU_LINE_BYTES], backtick=True).decode("ascii")
            for i in range(0, len(data), UU_LINE_BYTES)
        )

    def _decode(self, text: str) -> bytes:
        lines = text.split("\n")
        if lines and lines[-1] == "":
            lines.pop()
        out = bytearray()
        for number, line in enumerate(lines, start=1):
            if not line:
                raise InvalidInput("empty uuencoded line {}".format(number))
            count = (ord(line[0]) - 32) & 63
            expected = 1 + (count + 2) // 3 * 4
            if len(line) != expected:
                raise InvalidLength(
                    LengthConstraint.exact(expected),
                    len(line),
                    "uuencoded line {}".format(number),
                )
            try:
                out.extend(binascii.a2b_uu(line))
            except binascii.Error as exc:
                raise InvalidInput("uuencoded line {}: {}".format(number, exc)) from exc
        return bytes(out)


# ---------------------------------------------------------------------------
# Punycode
# ---------------------------------------------------------------------------


class Punycode(BaseCodec):
    """RFC 3492 punycode over the UTF-8 text of the payload."""

    alphabet_confidence = WEAK_MATCH
    decode_confidence = WEAK_MATCH
    ambiguity_warning = "most ASCII text is also valid punycode"

    META = CodecMeta(
        name="punycode",
        aliases=("pcode",),
        alphabet="".join(chr(c) for c in range(128)),
        multibase_code=None,
        padding=PaddingRule.NONE,
        case_sensitivity=CaseSensitivity.SENSITIVE,
        description="Punycode (RFC 3492) of the UTF-8 payload",
    )

    def encode(self, data: bytes) -> str:
        text = data.decode("utf-8", "surrogateescape")
        return text.encode("punycode").decode("ascii")

    def _decode(self, text: str) -> bytes:
        try:
            decoded = text.encode("ascii").decode("punycode")
            return decoded.encode("utf-8", "surrogateescape")
        except UnicodeError as exc:
            raise InvalidInput("punycode: {}".format(exc)) from exc


# ---------------------------------------------------------------------------
# Unicode code points
# ---------------------------------------------------------------------------

_CODE_POINT = re.compile(r"U\+([0-9A-F]{1,6})\Z")


class UnicodeCodePoints(BaseCodec):
    """Space-separated ``U+XXXX`` code points of the UTF-8 payload."""

    token_separator = " "
    decode_confidence = 0.90

    META = CodecMeta(
        name="unicode",
        aliases=("codepoints", "u+"),
        alphabet="U+0123456789ABCDEF ",
        multibase_code=None,
        padding=PaddingRule.NONE,
        case_sensitivity=CaseSensitivity.INSENSITIVE,
        description="Unicode code points as space-separated U+XXXX tokens",
    )

    def encode(self, data: bytes) -> str:
        text = data.decode("utf-8", "surrogateescape")
        return " ".join("U+{:04X}".format(ord(c)) for c in text)

    def _decode(self, text: str) -> bytes:
        if not text:
            return b""
        chars = []
        for number, token in enumerate(text.split(" "), start=1):
            match = _CODE_POINT.match(token)
            if not match:
                raise InvalidInput(
                    "token {} ({!r}) is not a U+XXXX code point".format(number, token)
                )
            value = int(match.group(1), 16)
            if value > 0x10FFFF:
                raise InvalidInput("code point {} is beyond U+10FFFF".format(token))
            chars.append(chr(value))
        try:
            return "".join(chars).encode("utf-8", "surrogateescape")
        except UnicodeEncodeError as exc:
            raise InvalidInput("unpaired surrogate code point: {}".format(exc)) from exc


# ---------------------------------------------------------------------------
# IPv6 address notation
# ---------------------------------------------------------------------------

IPV6_END_MARKER = 0x80


class Ipv6Addresses(BaseCodec):
    """Payload written as a run of IPv6 addresses, 16 bytes per address.

    The payload is first padded ISO/IEC 7816-4 style (0x80, then zeros up
    to a multiple of 16), so every payload has an unambiguous length and
    the empty payload encodes to ``8000::``.
    """

    token_separator = " "
    alphabet_confidence = PARTIAL_MATCH
    decode_confidence = ALPHABET_MATCH

    META = CodecMeta(
        name="ipv6",
        aliases=("ipv6addr", "ipv6-addresses"),
        alphabet="0123456789abcdef:. ",
        multibase_code=None,
        padding=PaddingRule.NONE,
        case_sensitivity=CaseSensitivity.INSENSITIVE,
        description="Payload as space-separated IPv6 addresses (RFC 5952 text)",
    )

    def rules(self) -> List[Rule]:
        return super().rules() + [Rule(
            predicate=lambda p: p.full_coverage and ":" in p.normalized and p.decodes,
            confidence=0.85,
            reason="IPv6 addresses parse",
        )]

    def encode(self, data: bytes) -> str:
        padded = data + bytes([IPV6_END_MARKER]) + bytes(-(len(data) + 1) % 16)
        return " ".join(
            str(ipaddress.IPv6Address(padded[i:i + 16]))
            for i in range(0, len(padded), 16)
        )

    def _decode(self, text: str) -> bytes:
        out = bytearray()
        for number, token in enumerate(text.split(" "), start=1):
            try:
                out.extend(ipaddress.IPv6Address(token).packed)
            except ValueError as exc:
                raise InvalidInput("address {}: {}".format(number, exc)) from exc
        body = bytes(out).rstrip(b"\x00")
        if not body.endswith(bytes([IPV6_END_MARKER])) or len(out) - len(body) >= 16:
            raise InvalidInput("final address does not carry the 0x80 end marker")
        return body[:-1]
