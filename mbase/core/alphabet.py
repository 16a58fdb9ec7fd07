"""Mode normalization and alphabet-membership checks shared by all codecs.

WHY: Strict and lenient decoding must mean the same thing for every
codec. If each codec stripped whitespace or folded case its own way,
"lenient" would be a different promise per encoding and error positions
would be incomparable. Centralizing the rules here makes them uniform.

HOW: normalize() applies the mode rules once and returns the text every
later step (alphabet validation, decoding, error positions) works on.
validate_alphabet() walks the normalized text and raises
InvalidCharacter at the first foreign symbol. coverage() gives the
fraction of in-alphabet characters for detection scoring.

RULES:
- LENIENT folds ASCII letters of case-insensitive codecs to the
  canonical case of their alphabet; STRICT demands that exact case
- LENIENT removes ASCII whitespace that is not itself an alphabet symbol
- Tokenized codecs (e.g. morse) pass a separator: LENIENT then collapses
  whitespace runs to that separator instead of deleting them
- STRICT never touches whitespace, so stray whitespace fails validation
- Only ASCII letters are case-folded; non-ASCII text is left alone
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import FrozenSet, Optional

from mbase.core.errors import InvalidCharacter
from mbase.core.types import CaseSensitivity, CodecMeta, Mode

ASCII_WHITESPACE = " \t\n\r\x0b\x0c"

_WHITESPACE_RUN = re.compile("[ \t\n\r\x0b\x0c]+")
_TO_UPPER = str.maketrans(
    "abcdefghijklmnopqrstuvwxyz", "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
)
_TO_LOWER = str.maketrans(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz"
)


@lru_cache(maxsize=None)
def symbol_set(alphabet: str) -> FrozenSet[str]:
    """Frozen set of an alphabet's symbols, cached per alphabet string."""
    return frozenset(alphabet)


@lru_cache(maxsize=None)
def canonical_case(alphabet: str) -> Optional[str]:
    """Return ``"lower"`` or ``"upper"`` if the alphabet's letters share one case.

    Returns None for alphabets with no ASCII letters or with both cases,
    in which case no folding is possible.
    """
    has_lower = any("a" <= c <= "z" for c in alphabet)
    has_upper = any("A" <= c <= "Z" for c in alphabet)
    if has_lower and not has_upper:
        return "lower"
    if has_upper and not has_lower:
        return "upper"
    return None


def fold_case(text: str, meta: CodecMeta) -> str:
    """Fold ASCII letters to the codec's canonical case, if it has one."""
    if meta.case_sensitivity is not CaseSensitivity.INSENSITIVE:
        return text
    case = canonical_case(meta.alphabet)
    if case == "lower":
        return text.translate(_TO_LOWER)
    if case == "upper":
        return text.translate(_TO_UPPER)
    return text


def normalize(
    text: str,
    meta: CodecMeta,
    mode: Mode,
    separator: Optional[str] = None,
) -> str:
    """Apply the mode rules and return the text decoding will see.

    Args:
        text: Raw encoded text as supplied by the caller.
        meta: The codec's metadata (alphabet and case rule).
        mode: STRICT or LENIENT.
        separator: Token separator for whitespace-tokenized codecs.

    Returns:
        The normalized text. Error positions refer to this string.
    """
    if mode is not Mode.LENIENT:
        return text
    text = fold_case(text, meta)

    if separator is not None:
        return separator.join(
            part for part in _WHITESPACE_RUN.split(text) if part
        )

    symbols = symbol_set(meta.alphabet)
    return "".join(
        c for c in text if c not in ASCII_WHITESPACE or c in symbols
    )


def validate_alphabet(text: str, symbols: str) -> None:
    """Raise InvalidCharacter at the first character not in ``symbols``."""
    allowed = symbol_set(symbols)
    for position, char in enumerate(text):
        if char not in allowed:
            raise InvalidCharacter(char, position)


def coverage(text: str, symbols: str) -> float:
    """Fraction of characters of ``text`` that belong to ``symbols``.

    Empty text has no defined coverage; 0.0 is returned so callers never
    divide by zero.
    """
    if not text:
        return 0.0
    allowed = symbol_set(symbols)
    valid = sum(1 for c in text if c in allowed)
    return valid / len(text)
