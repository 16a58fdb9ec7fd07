"""Codec catalog — the closed, ordered set of every codec mbase ships.

WHY: The registry, the detection engine, and the CLI need one place that
lists every codec. A central tuple makes adding an encoding trivial
(write the class, import it here, add one line) and makes the catalog
size checkable by a test.

HOW: CODECS holds one *instance* per codec (codecs are stateless, so a
single shared instance is enough). The registry indexes this tuple;
nothing else should construct codecs.

RULES:
- Order is significant: it is the registry's declaration order and the
  detection engine's tie-break order, so the most widespread encodings
  come first
- Every codec listed here must be importable without side effects
- Names, aliases and multibase codes must be unique across the tuple
  (enforced when the registry is built)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Tuple

from mbase.codecs.base32 import (
    Base32HexLower,
    Base32HexPadLower,
    Base32HexPadUpper,
    Base32HexUpper,
    Base32Lower,
    Base32PadLower,
    Base32PadUpper,
    Base32Upper,
    Base32WordSafe,
    Crockford32,
    ZBase32,
)
from mbase.codecs.base45 import Base45
from mbase.codecs.base58 import Base58Btc, Base58Check, Base58Flickr, Base58Ripple
from mbase.codecs.base64_family import Base64, Base64Pad, Base64Url, Base64UrlPad
from mbase.codecs.base65536 import Base65536
from mbase.codecs.base85 import Ascii85, Base85Chunked, Base85Rfc1924, Z85
from mbase.codecs.base91 import Base91
from mbase.codecs.bech32 import Bech32Codec, Bech32mCodec
from mbase.codecs.bigint import Base36Lower, Base36Upper, Base37, Base62, Base92
from mbase.codecs.braille import Braille
from mbase.codecs.ciphers import Atbash, Rot13, Rot18, Rot47
from mbase.codecs.internet import (
    Ipv6Addresses,
    Punycode,
    QuotedPrintable,
    UnicodeCodePoints,
    UrlEncoding,
    UuEncode,
)
from mbase.codecs.lettercodes import A1Z26, TapCode
from mbase.codecs.pronounceable import BubbleBabble, Proquint
from mbase.codecs.radix import Base2, Base8, Base16Lower, Base16Upper
from mbase.codecs.telegraph import Baudot, Morse

if TYPE_CHECKING:
    from mbase.codecs.base import BaseCodec

CODECS: Tuple[BaseCodec, ...] = (
    # RFC 4648 base64
    Base64(),
    Base64Pad(),
    Base64Url(),
    Base64UrlPad(),
    # Hex
    Base16Lower(),
    Base16Upper(),
    # Base32
    Base32Lower(),
    Base32Upper(),
    Base32PadLower(),
    Base32PadUpper(),
    Base32HexLower(),
    Base32HexUpper(),
    Base32HexPadLower(),
    Base32HexPadUpper(),
    ZBase32(),
    Crockford32(),
    Base32WordSafe(),
    # Base58 and checksum-bearing codecs
    Base58Btc(),
    Base58Flickr(),
    Base58Ripple(),
    Base58Check(),
    Bech32Codec(),
    Bech32mCodec(),
    # Other big-integer radices
    Base36Lower(),
    Base36Upper(),
    Base37(),
    Base62(),
    Base92(),
    # Binary and octal
    Base2(),
    Base8(),
    # Dense printable encodings
    Base45(),
    Ascii85(),
    Z85(),
    Base85Chunked(),
    Base85Rfc1924(),
    Base91(),
    Base65536(),
    # Pronounceable
    Proquint(),
    BubbleBabble(),
    # Internet standards
    UrlEncoding(),
    QuotedPrintable(),
    UuEncode(),
    Punycode(),
    UnicodeCodePoints(),
    Ipv6Addresses(),
    Braille(),
    # Telegraph
    Morse(),
    Baudot(),
    # Puzzle letter codes
    A1Z26(),
    TapCode(),
    # Ciphers
    Rot13(),
    Rot47(),
    Rot18(),
    Atbash(),
)
