"""Letter-substitution ciphers: ROT13, ROT47, ROT18, and Atbash.

WHY: These show up in puzzles, spoiler tags, and obfuscated strings.
They are not encryption (each is its own inverse and trivially
reversible), but users still want to apply and undo them.

HOW: Bytes are mapped 1:1 to Latin-1 characters, so any byte string is
representable and the round trip is exact. Each cipher is a
``str.maketrans`` table over that text; characters the cipher does not
touch (punctuation, control bytes, high Latin-1) pass through unchanged.

RULES:
- Every table is an involution, so decoding reuses the encode table
- Case is preserved (A-M <-> N-Z, a-m <-> n-z), so the codecs are
  case-sensitive even though the classic ciphers are "about letters"
- Whitespace is data here: LENIENT does not strip it
- Any Latin-1 text decodes, so detection never claims more than
  WEAK_MATCH and always warns about ambiguity
"""

from __future__ import annotations

import string

from mbase.codecs.base import BaseCodec
from mbase.core.scoring import WEAK_MATCH
from mbase.core.types import CaseSensitivity, CodecMeta, PaddingRule

LATIN1 = "".join(chr(i) for i in range(256))


def _rotate(alphabet: str, shift: int) -> str:
    return alphabet[shift:] + alphabet[:shift]


def _rot13_pairs():
    lower, upper = string.ascii_lowercase, string.ascii_uppercase
    return lower + upper, _rotate(lower, 13) + _rotate(upper, 13)


class CipherCodec(BaseCodec):
    """Byte-level substitution cipher; subclasses set META and TABLE."""

    TABLE: dict

    alphabet_confidence = WEAK_MATCH
    decode_confidence = WEAK_MATCH
    ambiguity_warning = "any text is valid input for a substitution cipher"

    def encode(self, data: bytes) -> str:
        return data.decode("latin-1").translate(self.TABLE)

    def _decode(self, text: str) -> bytes:
        return text.translate(self.TABLE).encode("latin-1")


def _meta(name, aliases, description):
    return CodecMeta(
        name=name,
        aliases=aliases,
        alphabet=LATIN1,
        multibase_code=None,
        padding=PaddingRule.NONE,
        case_sensitivity=CaseSensitivity.SENSITIVE,
        description=description,
    )


class Rot13(CipherCodec):
    TABLE = str.maketrans(*_rot13_pairs())
    META = _meta("rot13", ("rot-13",), "ROT13 letter rotation")


class Rot47(CipherCodec):
    _printable = "".join(chr(c) for c in range(33, 127))
    TABLE = str.maketrans(_printable, _rotate(_printable, 47))
    META = _meta("rot47", ("rot-47",), "ROT47 rotation of printable ASCII")


class Rot18(CipherCodec):
    TABLE = str.maketrans(
        _rot13_pairs()[0] + string.digits,
        _rot13_pairs()[1] + _rotate(string.digits, 5),
    )
    META = _meta("rot18", ("rot-18",), "ROT13 for letters plus ROT5 for digits")


class Atbash(CipherCodec):
    TABLE = str.maketrans(
        string.ascii_lowercase + string.ascii_uppercase,
        string.ascii_lowercase[::-1] + string.ascii_uppercase[::-1],
    )
    META = _meta("atbash", (), "Atbash mirrored alphabet (A<->Z)")
