"""Canonicalize encoded text and lay it out for humans.

WHY: The same payload can arrive with stray whitespace, the wrong case,
or line breaks from an email client. Decoding and re-encoding yields the
one canonical spelling; grouping and wrapping then make long strings
readable and easy to compare by eye.

RULES:
- reformat() always round-trips through bytes; it never edits text in place
- Grouping is applied before wrapping, so wrap width counts separators
- group/wrap of None or 0 leave the text unchanged
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from mbase.core.types import Mode

if TYPE_CHECKING:
    from mbase.codecs.base import BaseCodec


def _chunks(text: str, size: int):
    return [text[i:i + size] for i in range(0, len(text), size)]


def group(text: str, size: Optional[int], separator: str = " ") -> str:
    """Insert ``separator`` every ``size`` characters."""
    if not size:
        return text
    return separator.join(_chunks(text, size))


def wrap(text: str, width: Optional[int]) -> str:
    """Break ``text`` into lines of at most ``width`` characters."""
    if not width:
        return text
    return "\n".join(_chunks(text, width))


def reformat(
    codec: BaseCodec,
    text: str,
    mode: Mode = Mode.LENIENT,
    group_size: Optional[int] = None,
    wrap_width: Optional[int] = None,
    separator: str = " ",
) -> str:
    """Decode ``text`` and re-encode it in canonical form, then group and wrap.

    Raises:
        MbaseError: ``text`` does not decode under ``mode``.
    """
    canonical = codec.encode(codec.decode(text, mode))
    return wrap(group(canonical, group_size, separator), wrap_width)
