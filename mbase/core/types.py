"""Shared value types for codecs, the registry, and detection.

WHY: Every codec, the registry, the detection engine, and the CLI talk
about the same handful of concepts — codec metadata, decoding mode,
padding and case rules, detection candidates. Defining them once keeps
the whole toolkit speaking one vocabulary.

HOW: Enums inherit from str so their values serialize cleanly to JSON.
CodecMeta is a frozen dataclass (immutable once built); DetectCandidate
is a plain dataclass produced fresh for every detection call.

RULES:
- CodecMeta is immutable; codecs build it once at class level
- aliases is a tuple, never a list (hashable, immutable)
- For case-insensitive codecs, alphabet is written in the canonical case
- DetectCandidate.confidence is always within [0.0, 1.0]
- reasons and warnings keep insertion order (rule order)
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import List, Optional, Tuple


class Mode(str, enum.Enum):
    """Decoding discipline.

    RULES:
    - STRICT: exact alphabet membership, declared case rules, whitespace
      is invalid unless it is itself part of the alphabet
    - LENIENT: ASCII whitespace stripped first, case-insensitive codecs
      case-folded to their canonical case
    """

    STRICT = "strict"
    LENIENT = "lenient"


class PaddingRule(str, enum.Enum):
    """Whether a codec uses trailing filler characters."""

    NONE = "none"
    REQUIRED = "required"
    OPTIONAL = "optional"


class CaseSensitivity(str, enum.Enum):
    """Whether letter case in encoded text carries information."""

    SENSITIVE = "sensitive"
    INSENSITIVE = "insensitive"


@dataclass(frozen=True)
class CodecMeta:
    """Static description of one codec.

    Attributes:
        name: Unique canonical identifier, e.g. ``"base64url"``.
        aliases: Alternate identifiers, unique across the whole catalog.
        alphabet: Ordered symbols the encoded output is restricted to.
        multibase_code: Single-character multibase prefix, or None.
        padding: Padding rule for the encoded form.
        case_sensitivity: Whether case is significant when decoding.
        description: One-line human description.
    """

    name: str
    aliases: Tuple[str, ...]
    alphabet: str
    multibase_code: Optional[str]
    padding: PaddingRule
    case_sensitivity: CaseSensitivity
    description: str

    def to_dict(self) -> dict:
        """Serialization shape consumed by the JSON renderer."""
        return {
            "name": self.name,
            "aliases": list(self.aliases),
            "alphabet": self.alphabet,
            "multibase_code": self.multibase_code,
            "padding": self.padding.value,
            "case_sensitivity": self.case_sensitivity.value,
            "description": self.description,
        }


@dataclass
class DetectCandidate:
    """One codec's verdict on an unlabeled input.

    WHY: The detection engine needs a uniform result from every codec so
    it can merge and rank them, and users need to see *why* a codec was
    (or was not) considered likely.

    RULES:
    - codec: canonical codec name
    - confidence: max over all fired scoring rules, clamped to [0, 1]
    - reasons: one string per fired rule that raised confidence
    - warnings: caveats that did not raise confidence
    """

    codec: str
    confidence: float = 0.0
    reasons: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "codec": self.codec,
            "confidence": self.confidence,
            "reasons": list(self.reasons),
            "warnings": list(self.warnings),
        }
