"""Base45 codec (RFC 9285), as used in QR-code payloads such as EU DCC.

HOW: Each pair of bytes is read as a 16-bit number and written as three
base-45 digits, least significant first; a trailing single byte becomes
two digits. Decoding reverses this and rejects digit triples above 65535
(pairs above 255).

RULES:
- The alphabet contains a space, so spaces are data, not whitespace noise
- Uppercase is canonical; lowercase input is folded
- A dangling single character (length % 3 == 1) is InvalidLength
"""

from __future__ import annotations

from mbase.codecs.base import BaseCodec
from mbase.codecs.packing import symbol_index
from mbase.core.errors import InvalidInput, InvalidLength, LengthConstraint
from mbase.core.types import CaseSensitivity, CodecMeta, PaddingRule

ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ $%*+-./:"


class Base45(BaseCodec):
    decode_confidence = 0.72

    META = CodecMeta(
        name="base45",
        aliases=("b45",),
        alphabet=ALPHABET,
        multibase_code=None,
        padding=PaddingRule.NONE,
        case_sensitivity=CaseSensitivity.INSENSITIVE,
        description="Base45 (RFC 9285) for QR alphanumeric mode",
    )

    def encode(self, data: bytes) -> str:
        out = []
        for i in range(0, len(data) - 1, 2):
            n = data[i] * 256 + data[i + 1]
            n, c = divmod(n, 45)
            e, d = divmod(n, 45)
            out.append(ALPHABET[c] + ALPHABET[d] + ALPHABET[e])
        if len(data) % 2:
            d, c = divmod(data[-1], 45)
            out.append(ALPHABET[c] + ALPHABET[d])
        return "".join(out)

    def _decode(self, text: str) -> bytes:
        if len(text) % 3 == 1:
            raise InvalidLength(
                LengthConstraint.multiple_of(3), len(text), "dangling character"
            )
        index = symbol_index(ALPHABET)
        out = bytearray()
        for i in range(0, len(text), 3):
            chunk = [index[c] for c in text[i:i + 3]]
            if len(chunk) == 3:
                n = chunk[0] + chunk[1] * 45 + chunk[2] * 45 * 45
                if n > 0xFFFF:
                    raise InvalidInput(
                        "group {!r} at position {} exceeds 65535".format(text[i:i + 3], i)
                    )
                out.extend(divmod(n, 256))
            else:
                n = chunk[0] + chunk[1] * 45
                if n > 0xFF:
                    raise InvalidInput(
                        "final group {!r} exceeds 255".format(text[i:i + 2])
                    )
                out.append(n)
        return bytes(out)
