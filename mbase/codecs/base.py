"""Abstract base codec — the contract every encoding implements.

WHY: The registry, the detection engine, and the CLI must treat base64,
bech32, morse, and rot13 identically. This base class pins down the
contract (meta, encode, decode, validate, detect_score) and implements
the parts that must behave the same everywhere: mode normalization,
alphabet validation, and the detection rule pipeline.

HOW: Subclasses declare a class-level META and implement two methods:
``encode()`` and ``_decode()``. The public ``decode()`` is a template:
normalize per mode, validate the alphabet, then hand the clean text to
``_decode()``. ``detect_score()`` builds an Observation, runs the codec's rule
list through scoring.evaluate(), and folds any unexpected failure into
a zero-confidence warning.

RULES:
- encode() is total: every byte string, including b"", encodes
- decode(encode(b), Mode.STRICT) == b for every b
- _decode() receives normalized, alphabet-checked text only
- Codecs are stateless; tables and metadata live at class level
- detect_score() never raises
- Tuning knobs are class attributes (confidences, pad_char,
  token_separator); override rules() only to add codec-specific signals

To add a new codec:
1. Create a module in mbase/codecs/ (or extend a family module)
2. Subclass BaseCodec, set META, implement encode() and _decode()
3. Add an instance to CODECS in mbase/codecs/__init__.py
4. Bump EXPECTED_CODEC_COUNT in tests/test_registry.py
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from functools import partial
from typing import List, Optional

from mbase.core.alphabet import coverage, fold_case, normalize, validate_alphabet
from mbase.core.scoring import (
    ALPHABET_MATCH,
    DECODE_MATCH,
    Observation,
    Rule,
    default_rules,
    evaluate,
)
from mbase.core.types import CodecMeta, DetectCandidate, Mode

logger = logging.getLogger(__name__)


class BaseCodec(ABC):
    """Abstract base for all codecs.

    Class attributes:
        META: Static codec metadata (required).
        pad_char: Padding symbol accepted in addition to the alphabet.
        token_separator: Separator for whitespace-tokenized output; LENIENT
                         collapses whitespace runs to it.
        alphabet_confidence: Proposed when every character is in-alphabet.
        decode_confidence: Proposed when a trial decode succeeds.
        decode_reason: Reason text for a successful trial decode.
        ambiguity_warning: Warning for codecs that accept almost any text.
    """

    META: CodecMeta

    pad_char: Optional[str] = None
    token_separator: Optional[str] = None
    alphabet_confidence: float = ALPHABET_MATCH
    decode_confidence: float = DECODE_MATCH
    decode_reason: str = "decodes successfully"
    ambiguity_warning: Optional[str] = None

    # ------------------------------------------------------------------
    # Contract
    # ------------------------------------------------------------------

    def meta(self) -> CodecMeta:
        return self.META

    @property
    def name(self) -> str:
        return self.META.name

    @property
    def symbols(self) -> str:
        """Every character that may appear in valid encoded text."""
        return self.META.alphabet + (self.pad_char or "")

    @abstractmethod
    def encode(self, data: bytes) -> str:
        """Encode bytes to text. Must never raise.

        Args:
            data: Arbitrary bytes, possibly empty.

        Returns:
            Encoded text using only ``symbols``.
        """

    @abstractmethod
    def _decode(self, text: str) -> bytes:
        """Decode normalized, alphabet-validated text.

        Raises:
            InvalidLength: Structurally impossible length or padding.
            InvalidInput: Well-formed characters in an invalid arrangement.
            ChecksumMismatch: Embedded checksum does not verify.
        """

    def normalize(self, text: str, mode: Mode) -> str:
        return normalize(text, self.META, mode, self.token_separator)

    def decode(self, text: str, mode: Mode = Mode.STRICT) -> bytes:
        """Decode text to bytes under the given mode.

        Raises:
            InvalidCharacter: Foreign symbol; position indexes the
                normalized text.
            InvalidLength, InvalidInput, ChecksumMismatch: See _decode().
        """
        normalized = self.normalize(text, mode)
        validate_alphabet(normalized, self.symbols)
        return self._decode(normalized)

    def validate(self, text: str, mode: Mode = Mode.STRICT) -> None:
        """Raise the decode error for invalid text; return None otherwise."""
        self.decode(text, mode)

    # ------------------------------------------------------------------
    # Detection
    # ------------------------------------------------------------------

    def rules(self) -> List[Rule]:
        """Ordered scoring rules for this codec."""
        return default_rules(
            self.META.multibase_code,
            alphabet_confidence=self.alphabet_confidence,
            decode_confidence=self.decode_confidence,
            decode_reason=self.decode_reason,
            ambiguity_warning=self.ambiguity_warning,
        )

    def observe(self, text: str) -> Observation:
        """Prepare the shared view of ``text`` that rule predicates read."""
        raw = text.strip()
        normalized = self.normalize(raw, Mode.LENIENT)
        code = self.META.multibase_code
        multibase = False
        if code and len(raw) > 1 and raw.startswith(code):
            rest = self.normalize(raw[len(code):], Mode.LENIENT)
            multibase = coverage(rest, self.symbols) >= 1.0
        return Observation(
            raw=raw,
            normalized=normalized,
            coverage=coverage(normalized, self.symbols),
            case_folded=fold_case(raw, self.META) != raw,
            multibase=multibase,
            decoder=partial(self.decode, mode=Mode.LENIENT),
        )

    def detect_score(self, text: str) -> DetectCandidate:
        """Score how likely ``text`` was produced by this codec. Never raises."""
        try:
            observation = self.observe(text)
            if not observation.normalized:
                return DetectCandidate(codec=self.name, reasons=["empty input"])
            return evaluate(self.name, self.rules(), observation)
        except Exception as exc:  # folded into the candidate, see RULES
            logger.debug("Scoring %s failed: %r", self.name, exc)
            return DetectCandidate(
                codec=self.name,
                warnings=["scoring failed: {}".format(exc)],
            )

    def __repr__(self) -> str:
        return "<{} {}>".format(type(self).__name__, self.name)
