"""Pronounceable codecs: proquints and Bubble Babble.

WHY: Some identifiers are meant to be read aloud or remembered —
IPv4 addresses as proquints ("lusab-babad"), SSH key fingerprints as
Bubble Babble ("xesef-disof-..."). Both alternate consonants and vowels
so every token is a pronounceable syllable.

HOW: Proquint maps each 16-bit word to consonant-vowel-consonant-vowel-
consonant (4+2+4+2+4 bits), words joined by "-". Bubble Babble encodes
byte pairs into five letters plus a "-" with a running seed that acts as
a weak (mod 36) checksum, and wraps the whole string in "x...x".

RULES:
- Proquint: an odd trailing byte becomes a three-letter half word
  (4 + 2 + 2 bits, the last consonant limited to b/d/f/g)
- Proquint: every word is 5 letters except an optional final half word
- Bubble Babble: length is always 6n + 5; a seed mismatch is
  ChecksumMismatch, but many substitutions still verify, so a decode
  is scored as an ordinary decode, not as a checksum match
- Both are case-insensitive with lowercase canonical form
"""

from __future__ import annotations

from mbase.codecs.base import BaseCodec
from mbase.core.errors import (
    ChecksumMismatch,
    InvalidCharacter,
    InvalidInput,
    InvalidLength,
    LengthConstraint,
)
from mbase.core.types import CaseSensitivity, CodecMeta, PaddingRule

# ---------------------------------------------------------------------------
# Proquint
# ---------------------------------------------------------------------------

PQ_CONSONANTS = "bdfghjklmnprstvz"
PQ_VOWELS = "aiou"


class Proquint(BaseCodec):
    decode_confidence = 0.85

    META = CodecMeta(
        name="proquint",
        aliases=("pq", "proq"),
        alphabet=PQ_CONSONANTS + PQ_VOWELS + "-",
        multibase_code=None,
        padding=PaddingRule.NONE,
        case_sensitivity=CaseSensitivity.INSENSITIVE,
        description="Proquints: pronounceable 16-bit words (CVCVC)",
    )

    def encode(self, data: bytes) -> str:
        words = []
        for i in range(0, len(data) - 1, 2):
            n = data[i] << 8 | data[i + 1]
            words.append(
                PQ_CONSONANTS[n >> 12 & 15]
                + PQ_VOWELS[n >> 10 & 3]
                + PQ_CONSONANTS[n >> 6 & 15]
                + PQ_VOWELS[n >> 4 & 3]
                + PQ_CONSONANTS[n & 15]
            )
        if len(data) % 2:
            n = data[-1]
            words.append(
                PQ_CONSONANTS[n >> 4 & 15]
                + PQ_VOWELS[n >> 2 & 3]
                + PQ_CONSONANTS[n & 3]
            )
        return "-".join(words)

    def _decode(self, text: str) -> bytes:
        if not text:
            return b""
        words = text.split("-")
        out = bytearray()
        offset = 0
        for number, word in enumerate(words):
            last = number == len(words) - 1
            if len(word) == 5:
                pattern = "cvcvc"
            elif len(word) == 3 and last:
                pattern = "cvc"
            else:
                raise InvalidLength(
                    LengthConstraint.exact(5),
                    len(word),
                    "proquint word {}".format(number + 1),
                )
            n = 0
            for position, (char, kind) in enumerate(zip(word, pattern)):
                table = PQ_CONSONANTS if kind == "c" else PQ_VOWELS
                digit = table.find(char)
                if digit < 0:
                    raise InvalidCharacter(char, offset + position)
                n = n << (4 if kind == "c" else 2) | digit
            if pattern == "cvcvc":
                out.extend(n.to_bytes(2, "big"))
            else:
                # Half word: the final consonant only carries 2 bits
                if n & 15 > 3:
                    raise InvalidInput(
                        "half word {!r} must end in one of 'bdfg'".format(word)
                    )
                out.append((n >> 4) << 2 | (n & 3))
            offset += len(word) + 1
        return bytes(out)


# ---------------------------------------------------------------------------
# Bubble Babble
# ---------------------------------------------------------------------------

BB_VOWELS = "aeiouy"
BB_CONSONANTS = "bcdfghklmnprstvzx"


class BubbleBabble(BaseCodec):
    decode_confidence = 0.80

    META = CodecMeta(
        name="bubblebabble",
        aliases=("bubble", "babble"),
        alphabet=BB_VOWELS + BB_CONSONANTS + "-",
        multibase_code=None,
        padding=PaddingRule.NONE,
        case_sensitivity=CaseSensitivity.INSENSITIVE,
        description="Bubble Babble pronounceable fingerprint encoding",
    )

    def encode(self, data: bytes) -> str:
        out = ["x"]
        seed = 1
        rounds = len(data) // 2 + 1
        for i in range(rounds):
            if i + 1 < rounds or len(data) % 2:
                b1 = data[2 * i]
                out.append(BB_VOWELS[((b1 >> 6 & 3) + seed) % 6])
                out.append(BB_CONSONANTS[b1 >> 2 & 15])
                out.append(BB_VOWELS[((b1 & 3) + seed // 6) % 6])
                if i + 1 < rounds:
                    b2 = data[2 * i + 1]
                    out.append(BB_CONSONANTS[b2 >> 4 & 15])
                    out.append("-")
                    out.append(BB_CONSONANTS[b2 & 15])
                    seed = (seed * 5 + b1 * 7 + b2) % 36
            else:
                out.append(BB_VOWELS[seed % 6] + "x" + BB_VOWELS[seed // 6])
        out.append("x")
        return "".join(out)

    def _decode(self, text: str) -> bytes:
        if len(text) < 5 or len(text) % 6 != 5:
            raise InvalidLength(
                LengthConstraint.multiple_of(6), len(text), "expected 6n+5 characters"
            )
        if text[0] != "x" or text[-1] != "x":
            raise InvalidInput("bubble babble must start and end with 'x'")

        out = bytearray()
        seed = 1
        body = text[1:-1]
        for start in range(0, len(body), 6):
            chunk = body[start:start + 6]
            position = start + 1
            if len(chunk) == 6:
                if chunk[4] != "-":
                    raise InvalidInput(
                        "expected '-' at position {}".format(position + 4)
                    )
                b1 = self._byte(chunk[:3], seed, position)
                hi = self._consonant(chunk[3], position + 3)
                lo = self._consonant(chunk[5], position + 5)
                b2 = hi << 4 | lo
                out.extend((b1, b2))
                seed = (seed * 5 + b1 * 7 + b2) % 36
            elif chunk[1] == "x":
                if (self._vowel(chunk[0], position) != seed % 6
                        or self._vowel(chunk[2], position + 2) != seed // 6):
                    raise ChecksumMismatch("bubble babble seed does not verify")
            else:
                out.append(self._byte(chunk, seed, position))
        return bytes(out)

    def _byte(self, triple: str, seed: int, position: int) -> int:
        high = (self._vowel(triple[0], position) - seed) % 6
        middle = self._consonant(triple[1], position + 1)
        low = (self._vowel(triple[2], position + 2) - seed // 6) % 6
        if high > 3 or low > 3:
            raise ChecksumMismatch("bubble babble seed does not verify")
        return high << 6 | middle << 2 | low

    @staticmethod
    def _vowel(char: str, position: int) -> int:
        digit = BB_VOWELS.find(char)
        if digit < 0:
            raise InvalidCharacter(char, position)
        return digit

    @staticmethod
    def _consonant(char: str, position: int) -> int:
        digit = BB_CONSONANTS.find(char)
        if digit < 0 or digit > 15:
            raise InvalidCharacter(char, position)
        return digit
