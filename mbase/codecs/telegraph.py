"""Telegraph codes: International Morse and Baudot (ITA2).

WHY: Morse and Baudot predate computers and only cover upper-case
letters, digits and a little punctuation. They are still common in
puzzles, ham radio logs, and teaching material, so the toolkit speaks
them, but the codec contract needs every byte string to round-trip.

HOW: Characters the code knows use their standard representation. Any
other byte (lower-case letters included) is written through an escape:

- Morse: the prosign ``........`` (eight dots, "error" / HH) followed by
  the byte's two hex digits as Morse digits/letters.
- Baudot: the unused null code ``00000`` followed by the byte as two
  5-bit groups (high 3 bits, low 5 bits).

Morse tokens are space-separated with ``/`` for the space character;
Baudot output is a continuous string of 5-bit groups, with LTRS (11111)
and FIGS (11011) shifts inserted only when the character set changes.

RULES:
- Morse LENIENT collapses whitespace runs to single separators
- Unknown Morse tokens and truncated escapes are InvalidInput
- Baudot length must be a multiple of 5
- Baudot starts in letters shift
"""

from __future__ import annotations

from mbase.codecs.base import BaseCodec
from mbase.core.errors import InvalidInput, InvalidLength, LengthConstraint
from mbase.core.scoring import ALPHABET_MATCH, PARTIAL_MATCH
from mbase.core.types import CaseSensitivity, CodecMeta, PaddingRule

# ---------------------------------------------------------------------------
# Morse
# ---------------------------------------------------------------------------

MORSE_CODE = {
    "A": ".-", "B": "-...", "C": "-.-.", "D": "-..", "E": ".", "F": "..-.",
    "G": "--.", "H": "....", "I": "..", "J": ".---", "K": "-.-", "L": ".-..",
    "M": "--", "N": "-.", "O": "---", "P": ".--.", "Q": "--.-", "R": ".-.",
    "S": "...", "T": "-", "U": "..-", "V": "...-", "W": ".--", "X": "-..-",
    "Y": "-.--", "Z": "--..",
    "0": "-----", "1": ".----", "2": "..---", "3": "...--", "4": "....-",
    "5": ".....", "6": "-....", "7": "--...", "8": "---..", "9": "----.",
    ".": ".-.-.-", ",": "--..--", "?": "..--..", "!": "-.-.--", "/": "-..-.",
    "@": ".--.-.", "=": "-...-", "'": ".----.", '"': ".-..-.", "(": "-.--.",
    ")": "-.--.-", "&": ".-...", ":": "---...", ";": "-.-.-.", "+": ".-.-.",
    "-": "-....-", "_": "..--.-", "$": "...-..-",
}
MORSE_DECODE = {code: char for char, code in MORSE_CODE.items()}

MORSE_SPACE = "/"
MORSE_ESCAPE = "........"
_HEX_DIGITS = "0123456789ABCDEF"


class Morse(BaseCodec):
    token_separator = " "
    decode_confidence = 0.85

    META = CodecMeta(
        name="morse",
        aliases=("morsecode",),
        alphabet=".-/ ",
        multibase_code=None,
        padding=PaddingRule.NONE,
        case_sensitivity=CaseSensitivity.INSENSITIVE,
        description="International Morse code, space-separated, '/' for space",
    )

    def encode(self, data: bytes) -> str:
        tokens = []
        for byte in data:
            char = chr(byte)
            if char == " ":
                tokens.append(MORSE_SPACE)
            elif char in MORSE_CODE:
                tokens.append(MORSE_CODE[char])
            else:
                tokens.append(MORSE_ESCAPE)
                tokens.append(MORSE_CODE[_HEX_DIGITS[byte >> 4]])
                tokens.append(MORSE_CODE[_HEX_DIGITS[byte & 15]])
        return " ".join(tokens)

    def _decode(self, text: str) -> bytes:
        if not text:
            return b""
        tokens = text.split(" ")
        out = bytearray()
        i = 0
        while i < len(tokens):
            token = tokens[i]
            if token == MORSE_SPACE:
                out.append(0x20)
            elif token == MORSE_ESCAPE:
                digits = [MORSE_DECODE.get(t, "") for t in tokens[i + 1:i + 3]]
                if len(digits) != 2 or any(d == "" or d not in _HEX_DIGITS for d in digits):
                    raise InvalidInput(
                        "escape at token {} must be followed by two hex digits".format(i + 1)
                    )
                out.append(int(digits[0] + digits[1], 16))
                i += 2
            elif token in MORSE_DECODE:
                out.append(ord(MORSE_DECODE[token]))
            else:
                raise InvalidInput(
                    "unknown morse sequence {!r} at token {}".format(token, i + 1)
                )
            i += 1
        return bytes(out)


# ---------------------------------------------------------------------------
# Baudot (ITA2)
# ---------------------------------------------------------------------------

BAUDOT_LETTERS = (
    "\0E\nA SIU\rDRJNFCKTZLWHYPQOBG\0MXV\0"
)
BAUDOT_FIGURES = (
    "\x003\n- '87\r$4\x07,!:(5\")2#6019?&\0./;\0"
)
LTRS = 0b11111
FIGS = 0b11011
ESCAPE = 0b00000

_LETTER_CODES = {c: i for i, c in enumerate(BAUDOT_LETTERS) if c != "\0"}
_FIGURE_CODES = {c: i for i, c in enumerate(BAUDOT_FIGURES) if c != "\0"}


class Baudot(BaseCodec):
    alphabet_confidence = PARTIAL_MATCH
    decode_confidence = ALPHABET_MATCH

    META = CodecMeta(
        name="baudot",
        aliases=("ita2", "baudot-ita2"),
        alphabet="01",
        multibase_code=None,
        padding=PaddingRule.NONE,
        case_sensitivity=CaseSensitivity.INSENSITIVE,
        description="Baudot ITA2 5-bit telegraph code as a bit string",
    )

    def encode(self, data: bytes) -> str:
        codes = []
        letters = True
        for byte in data:
            char = chr(byte)
            current, other = (
                (_LETTER_CODES, _FIGURE_CODES) if letters else (_FIGURE_CODES, _LETTER_CODES)
            )
            if char in current:
                codes.append(current[char])
            elif char in other:
                letters = not letters
                codes.append(LTRS if letters else FIGS)
                codes.append(other[char])
            else:
                codes.extend((ESCAPE, byte >> 5, byte & 31))
        return "".join(format(code, "05b") for code in codes)

    def _decode(self, text: str) -> bytes:
        if len(text) % 5:
            raise InvalidLength(LengthConstraint.multiple_of(5), len(text))
        codes = [int(text[i:i + 5], 2) for i in range(0, len(text), 5)]
        out = bytearray()
        table = BAUDOT_LETTERS
        i = 0
        while i < len(codes):
            code = codes[i]
            if code == LTRS:
                table = BAUDOT_LETTERS
            elif code == FIGS:
                table = BAUDOT_FIGURES
            elif code == ESCAPE:
                if i + 2 >= len(codes) or codes[i + 1] > 7:
                    raise InvalidInput(
                        "truncated or invalid escape at group {}".format(i + 1)
                    )
                out.append(codes[i + 1] << 5 | codes[i + 2])
                i += 2
            else:
                out.append(ord(table[code]))
            i += 1
        return bytes(out)
