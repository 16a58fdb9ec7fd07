"""Error taxonomy for decoding, lookup, and I/O failures.

WHY: A decode failure is only useful if the caller can tell *what* went
wrong (a stray character at a known position, a truncated group, a
corrupted checksum, or a typo in the codec name. The CLI maps each kind
to a distinct exit status, and the explain command turns them into
suggestions, so errors must carry structure, not just a message.

HOW: MbaseError is the common base (catch it to handle any user-facing
failure). Each subclass stores its structured fields as attributes and
builds a readable message for str(). RegistryError is deliberately
outside the hierarchy: a broken catalog is a programming error, not
something a caller should recover from.

RULES:
- InvalidCharacter.position indexes the *normalized* text (after
  lenient whitespace stripping / case folding), not the raw input
- Padding problems are InvalidLength, never a separate type
- ChecksumMismatch is raised only by checksum-bearing codecs
- IoError wraps OSError from collaborators; the core never raises it
- Never raise a bare MbaseError when a specific subclass applies
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class LengthConstraint:
    """Structural length requirement reported by InvalidLength.

    Attributes:
        kind: ``"exact"``, ``"multiple_of"``, or ``"range"``.
        value: The exact length, the group size, or the range minimum.
        maximum: Upper bound for ``"range"`` constraints.
    """

    kind: str
    value: int
    maximum: Optional[int] = None

    @classmethod
    def exact(cls, n: int) -> "LengthConstraint":
        return cls("exact", n)

    @classmethod
    def multiple_of(cls, n: int) -> "LengthConstraint":
        return cls("multiple_of", n)

    @classmethod
    def between(cls, low: int, high: int) -> "LengthConstraint":
        return cls("range", low, high)

    @classmethod
    def at_least(cls, low: int) -> "LengthConstraint":
        return cls("range", low)

    def __str__(self) -> str:
        if self.kind == "exact":
            return "exactly {}".format(self.value)
        if self.kind == "multiple_of":
            return "a multiple of {}".format(self.value)
        if self.maximum is None:
            return "at least {}".format(self.value)
        return "between {} and {}".format(self.value, self.maximum)


class MbaseError(Exception):
    """Base class for every user-facing mbase failure."""


class InvalidInput(MbaseError):
    """Input is malformed in a way no narrower error describes."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidCharacter(MbaseError):
    """A character outside the codec's effective alphabet.

    Attributes:
        char: The offending character.
        position: Index into the normalized text.
    """

    def __init__(self, char: str, position: int) -> None:
        self.char = char
        self.position = position
        super().__init__(
            "invalid character {!r} at position {}".format(char, position)
        )


class InvalidLength(MbaseError):
    """Input length is structurally impossible for the codec.

    Attributes:
        expected: The length constraint that was violated.
        actual: The offending length (characters, or groups for tokenized codecs).
        detail: Optional extra context, e.g. ``"misplaced padding"``.
    """

    def __init__(
        self,
        expected: LengthConstraint,
        actual: int,
        detail: Optional[str] = None,
    ) -> None:
        self.expected = expected
        self.actual = actual
        self.detail = detail
        message = "invalid length {}: expected {}".format(actual, expected)
        if detail:
            message = "{} ({})".format(message, detail)
        super().__init__(message)


class ChecksumMismatch(MbaseError):
    """Embedded checksum does not match the recomputed value."""

    def __init__(self, detail: Optional[str] = None) -> None:
        self.detail = detail
        message = "checksum mismatch"
        if detail:
            message = "{}: {}".format(message, detail)
        super().__init__(message)


class CodecNotFound(MbaseError):
    """Registry lookup miss.

    Attributes:
        name: The name or alias that was requested.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__("unknown codec: {}".format(name))


class IoError(MbaseError):
    """Passthrough wrapper for OSError raised while reading or writing."""

    def __init__(self, cause: OSError) -> None:
        self.cause = cause
        super().__init__("I/O error: {}".format(cause))


class RegistryError(Exception):
    """The codec catalog violates a uniqueness invariant.

    Raised once, at registry construction. Not an MbaseError: callers are
    not expected to catch it, and the registration test exists to make
    sure it never fires in a released build.
    """
