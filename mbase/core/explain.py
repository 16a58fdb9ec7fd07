"""Explain why a string does or does not decode under a given codec.

WHY: "invalid character '=' at position 7" tells a user what failed but
not what to do about it. Pasted strings usually fail for a handful of
mundane reasons (stray whitespace, the wrong case, padding on an
unpadded variant, a missing hex digit) and each has an obvious fix.

HOW: explain() runs a normal decode. On failure it keeps the structured
error, renders a caret context window around the offending character
(InvalidCharacter only), and derives suggestions from the error type and
the codec's metadata.

RULES:
- Never raises MbaseError for decode failures; they become the report
- Context windows index the normalized text, like error positions do
- Suggestions are advisory strings; an empty list is a valid answer
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional

from mbase.core.alphabet import ASCII_WHITESPACE
from mbase.core.errors import (
    ChecksumMismatch,
    InvalidCharacter,
    InvalidLength,
    MbaseError,
)
from mbase.core.registry import Registry, get_registry
from mbase.core.types import CaseSensitivity, Mode, PaddingRule

if TYPE_CHECKING:
    from mbase.codecs.base import BaseCodec

CONTEXT_WINDOW = 10


@dataclass
class ExplainReport:
    """Outcome of explain().

    Attributes:
        codec: Canonical name of the codec that was tried.
        valid: True if the input decodes under the requested mode.
        message: str() of the decode error, None when valid.
        error_type: Class name of the decode error, None when valid.
        position: Offending index in the normalized text (InvalidCharacter only).
        offending_char: The offending character (InvalidCharacter only).
        context: Two-line caret context (InvalidCharacter only).
        suggestions: Human-readable hints for fixing the input.
    """

    codec: str
    valid: bool
    message: Optional[str] = None
    error_type: Optional[str] = None
    position: Optional[int] = None
    offending_char: Optional[str] = None
    context: Optional[str] = None
    suggestions: List[str] = field(default_factory=list)


def context_window(text: str, position: int, window: int = CONTEXT_WINDOW) -> str:
    """Render ``text`` around ``position`` with a caret line underneath."""
    start = max(0, position - window)
    end = min(len(text), position + window + 1)
    return "{}\n{}^".format(text[start:end], " " * (position - start))


def _padded_variant(codec: BaseCodec, registry: Registry) -> Optional[str]:
    """Name of the padded sibling of an unpadded codec, if one is registered."""
    name = codec.name
    if codec.meta().padding != PaddingRule.NONE:
        return None
    candidate = "{}pad".format(name)
    for suffix in ("lower", "upper"):
        if name.endswith(suffix):
            candidate = "{}pad{}".format(name[: -len(suffix)], suffix)
    return candidate if candidate in registry else None


def suggest(
    codec: BaseCodec,
    error: MbaseError,
    text: str,
    mode: Mode,
    registry: Optional[Registry] = None,
) -> List[str]:
    """Derive fix-it hints from a decode error."""
    if registry is None:
        registry = get_registry()
    suggestions: List[str] = []
    meta = codec.meta()

    if isinstance(error, InvalidCharacter):
        char = error.char
        if char in ASCII_WHITESPACE and mode == Mode.STRICT:
            suggestions.append("Try --mode lenient to ignore whitespace")
        if (
            char.isascii()
            and char.isalpha()
            and char.swapcase() in codec.symbols
            and meta.case_sensitivity == CaseSensitivity.SENSITIVE
        ):
            suggestions.append(
                "{} is case-sensitive; check the case of {!r}".format(meta.name, char)
            )
        if (
            mode == Mode.STRICT
            and char.isascii()
            and char.isalpha()
            and char.swapcase() in codec.symbols
            and meta.case_sensitivity == CaseSensitivity.INSENSITIVE
        ):
            suggestions.append(
                "Strict mode expects {} in its canonical case; try --mode lenient".format(
                    meta.name
                )
            )
        if char == "=":
            variant = _padded_variant(codec, registry)
            if variant:
                suggestions.append(
                    "Padding character found; try a padded variant like {}".format(variant)
                )

    elif isinstance(error, InvalidLength):
        detail = error.detail or ""
        if "padding" in detail:
            variant = _padded_variant(codec, registry)
            if variant:
                suggestions.append("Try the {} variant for padded input".format(variant))
            else:
                suggestions.append("Input may have incorrect padding; check trailing '='")
        elif (
            error.expected.kind == "multiple_of"
            and error.expected.value == 2
            and "16" in meta.name
        ):
            suggestions.append("Hex input has odd length; may be missing a character")
        elif error.expected.kind == "multiple_of":
            suggestions.append(
                "Input length {} is not {} characters; it may be truncated".format(
                    error.actual, error.expected
                )
            )

    elif isinstance(error, ChecksumMismatch):
        suggestions.append("Checksum validation failed; data may be corrupted")
        suggestions.append("Verify the input was copied correctly")

    if text.startswith(("0x", "0X")):
        suggestions.append("Input has 0x prefix; remove it before decoding")

    return suggestions


def explain(
    codec: BaseCodec,
    text: str,
    mode: Mode = Mode.STRICT,
    registry: Optional[Registry] = None,
) -> ExplainReport:
    """Decode ``text`` with ``codec`` and describe the outcome."""
    trimmed = text.rstrip("\r\n")
    try:
        codec.decode(trimmed, mode)
    except MbaseError as exc:
        report = ExplainReport(
            codec=codec.name,
            valid=False,
            message=str(exc),
            error_type=type(exc).__name__,
            suggestions=suggest(codec, exc, trimmed, mode, registry),
        )
        if isinstance(exc, InvalidCharacter):
            report.position = exc.position
            report.offending_char = exc.char
            report.context = context_window(codec.normalize(trimmed, mode), exc.position)
        return report
    return ExplainReport(codec=codec.name, valid=True)
