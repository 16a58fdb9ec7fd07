"""Confidence policy for detection: constants, rules, and evaluation.

WHY: Detection must be reproducible. If every codec invented its own
arithmetic ("+0.2 for padding, x0.9 for odd length"), rankings would
drift whenever one codec changed and nobody could explain a score. A
single policy, written as data, keeps scores comparable across codecs.

HOW: A codec's scorer is an ordered list of Rule objects. Each rule has
a predicate over an Observation (the prepared view of the input), the
confidence it proposes, and a reason string. evaluate() fires every
rule in order: confidence rules append to ``reasons``, warning rules
append to ``warnings``. The emitted confidence is the maximum proposal,
clamped to [0, 1], never a sum.

RULES:
- Constants below are normative; codecs choose among them or declare a
  class-level alphabet/decode confidence, never ad hoc arithmetic
- Trial decoding runs only when alphabet coverage is 100% (predicates
  short-circuit on ``full_coverage`` before touching ``decodes``)
- A successful decode in the exact canonical case outranks one that
  needed case folding by CASE_FOLD_PENALTY
- Warning rules never raise confidence
- Empty input is handled before any rule runs (see BaseCodec.detect_score)
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from typing import Callable, List, Optional, Union

from mbase.core.errors import MbaseError
from mbase.core.types import DetectCandidate

# ---------------------------------------------------------------------------
# Confidence constants
# ---------------------------------------------------------------------------

MULTIBASE_MATCH = 0.95
ALPHABET_MATCH = 0.70
PARTIAL_MATCH = 0.50
WEAK_MATCH = 0.30

DECODE_MATCH = 0.75
"""Default confidence for a successful trial decode (above ALPHABET_MATCH)."""

CHECKSUM_MATCH = 0.90
"""Confidence for a decode whose embedded checksum verified."""

CASE_FOLD_PENALTY = 0.05
COVERAGE_THRESHOLD = 0.90


# ---------------------------------------------------------------------------
# Observation and Rule
# ---------------------------------------------------------------------------


class Observation:
    """Prepared view of one input from one codec's point of view.

    Attributes:
        raw: Input with surrounding whitespace removed.
        normalized: ``raw`` after LENIENT normalization for this codec.
        coverage: Fraction of normalized characters in the codec's symbols.
        case_folded: True if normalization changed letter case.
        multibase: True if ``raw`` starts with the codec's multibase code
                   and the remainder is non-empty and fully in-alphabet.
    """

    def __init__(
        self,
        raw: str,
        normalized: str,
        coverage: float,
        case_folded: bool,
        multibase: bool,
        decoder: Callable[[str], bytes],
    ) -> None:
        self.raw = raw
        self.normalized = normalized
        self.coverage = coverage
        self.case_folded = case_folded
        self.multibase = multibase
        self._decoder = decoder

    @property
    def full_coverage(self) -> bool:
        return bool(self.normalized) and self.coverage >= 1.0

    @property
    def partial_coverage(self) -> bool:
        return COVERAGE_THRESHOLD <= self.coverage < 1.0

    @cached_property
    def decode_error(self) -> Optional[MbaseError]:
        """The error from a LENIENT trial decode, or None if it succeeded."""
        try:
            self._decoder(self.raw)
        except MbaseError as exc:
            return exc
        return None

    @property
    def decodes(self) -> bool:
        return self.decode_error is None


Reason = Union[str, Callable[[Observation], str]]


@dataclass(frozen=True)
class Rule:
    """One scoring signal: (predicate, confidence, reason).

    Attributes:
        predicate: Returns True when the signal fires for an observation.
        confidence: Proposed confidence when fired (ignored for warnings).
        reason: Text appended when fired; a callable builds it from the observation.
        warning: If True, the text goes to ``warnings`` and confidence
                 is not raised.
    """

    predicate: Callable[[Observation], bool]
    confidence: float
    reason: Reason
    warning: bool = False

    def describe(self, observation: Observation) -> str:
        if callable(self.reason):
            return self.reason(observation)
        return self.reason


def evaluate(codec_name: str, rules: List[Rule], observation: Observation) -> DetectCandidate:
    """Fire every rule in order and fold the results into a candidate."""
    candidate = DetectCandidate(codec=codec_name)
    best = 0.0
    for rule in rules:
        if not rule.predicate(observation):
            continue
        text = rule.describe(observation)
        if rule.warning:
            candidate.warnings.append(text)
        else:
            candidate.reasons.append(text)
            best = max(best, rule.confidence)
    candidate.confidence = clamp(best)
    return candidate


def clamp(value: float) -> float:
    return min(1.0, max(0.0, value))


# ---------------------------------------------------------------------------
# The default rule list shared by every codec
# ---------------------------------------------------------------------------


def default_rules(
    multibase_code: Optional[str],
    alphabet_confidence: float = ALPHABET_MATCH,
    decode_confidence: float = DECODE_MATCH,
    decode_reason: str = "decodes successfully",
    ambiguity_warning: Optional[str] = None,
) -> List[Rule]:
    """Build the standard ordered rule list for one codec.

    Args:
        multibase_code: The codec's multibase prefix, or None.
        alphabet_confidence: Proposed when every character is in-alphabet.
        decode_confidence: Proposed when the LENIENT trial decode succeeds.
        decode_reason: Reason text for a successful decode.
        ambiguity_warning: Extra warning attached to a successful decode
                           for codecs that accept almost any text.

    Returns:
        Rules in evaluation order.
    """
    rules: List[Rule] = []

    if multibase_code:
        rules.append(Rule(
            predicate=lambda p: p.multibase,
            confidence=MULTIBASE_MATCH,
            reason="multibase prefix '{}' detected".format(multibase_code),
        ))

    rules.extend([
        Rule(
            predicate=lambda p: p.full_coverage,
            confidence=alphabet_confidence,
            reason="all characters valid",
        ),
        Rule(
            predicate=lambda p: p.partial_coverage,
            confidence=WEAK_MATCH,
            reason=lambda p: "{:.0f}% of characters valid".format(p.coverage * 100),
        ),
        Rule(
            predicate=lambda p: p.partial_coverage,
            confidence=0.0,
            reason=lambda p: "{:.0f}% invalid characters".format((1 - p.coverage) * 100),
            warning=True,
        ),
        Rule(
            predicate=lambda p: p.full_coverage and p.decodes and not p.case_folded,
            confidence=decode_confidence,
            reason=decode_reason,
        ),
        Rule(
            predicate=lambda p: p.full_coverage and p.decodes and p.case_folded,
            confidence=decode_confidence - CASE_FOLD_PENALTY,
            reason="{} after case folding".format(decode_reason),
        ),
        Rule(
            predicate=lambda p: p.full_coverage and not p.decodes,
            confidence=0.0,
            reason=lambda p: "does not decode: {}".format(p.decode_error),
            warning=True,
        ),
        Rule(
            predicate=lambda p: bool(p.normalized) and p.coverage < COVERAGE_THRESHOLD,
            confidence=0.0,
            reason="too many invalid characters",
            warning=True,
        ),
    ])

    if ambiguity_warning:
        rules.append(Rule(
            predicate=lambda p: p.full_coverage and p.decodes,
            confidence=0.0,
            reason=ambiguity_warning,
            warning=True,
        ))

    return rules
