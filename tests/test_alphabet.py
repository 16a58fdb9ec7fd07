"""Tests for mode normalization, alphabet checks and the scoring rules.

WHY: Every codec delegates whitespace handling, case folding and
alphabet validation to mbase.core.alphabet, and every detection score
comes out of mbase.core.scoring. A regression here changes the meaning
of STRICT/LENIENT or the confidence of every candidate at once.

HOW: Calls the helpers directly with real codec metadata from the
registry, then builds Observation objects by hand to check how rules fold into
a candidate.

RULES:
- Error positions refer to the normalized text
- Folding only touches ASCII letters of case-insensitive codecs
- Confidence is the maximum over fired rules, warnings never raise it
"""

import pytest

from mbase.core.alphabet import (
    canonical_case,
    coverage,
    fold_case,
    normalize,
    validate_alphabet,
)
from mbase.core.errors import InvalidCharacter, InvalidInput
from mbase.core.scoring import (
    ALPHABET_MATCH,
    CASE_FOLD_PENALTY,
    DECODE_MATCH,
    MULTIBASE_MATCH,
    Observation,
    Rule,
    clamp,
    default_rules,
    evaluate,
)
from mbase.core.types import Mode


def _observation(normalized="abc", cov=1.0, folded=False, multibase=False, decodes=True):
    def decoder(text):
        if not decodes:
            raise InvalidInput("nope")
        return b""

    return Observation(
        raw=normalized,
        normalized=normalized,
        coverage=cov,
        case_folded=folded,
        multibase=multibase,
        decoder=decoder,
    )


# =========================================================================
# Alphabet helpers
# =========================================================================

class TestCanonicalCase:
    """Which direction case-insensitive alphabets fold."""

    def test_lower(self):
        assert canonical_case("0123456789abcdef") == "lower"

    def test_upper(self):
        assert canonical_case("ABCDEFGHIJKLMNOPQRSTUVWXYZ234567") == "upper"

    def test_mixed_and_letterless(self):
        assert canonical_case("ABCabc") is None
        assert canonical_case("01") is None


class TestFoldCase:
    def test_insensitive_codec_folds(self, codec):
        assert fold_case("DeAdBeEf", codec("base16lower").meta()) == "deadbeef"
        assert fold_case("mzxw6", codec("base32upper").meta()) == "MZXW6"

    def test_sensitive_codec_untouched(self, codec):
        assert fold_case("SGVsbG8", codec("base64").meta()) == "SGVsbG8"

    def test_non_ascii_untouched(self, codec):
        assert fold_case("é", codec("base16lower").meta()) == "é"


class TestNormalize:
    """STRICT leaves whitespace alone, LENIENT strips or collapses it."""

    def test_strict_keeps_whitespace(self, codec):
        meta = codec("base64").meta()
        assert normalize(" SG Vs\n", meta, Mode.STRICT) == " SG Vs\n"

    def test_lenient_strips_ascii_whitespace(self, codec):
        meta = codec("base64").meta()
        assert normalize(" SG\tVs\r\n", meta, Mode.LENIENT) == "SGVs"

    def test_lenient_keeps_whitespace_in_alphabet(self, codec):
        meta = codec("base45").meta()
        assert normalize("%69 VD92EX0", meta, Mode.LENIENT) == "%69 VD92EX0"

    def test_lenient_collapses_runs_for_tokens(self, codec):
        meta = codec("morse").meta()
        assert normalize("  ...\n\n---   ... ", meta, Mode.LENIENT, " ") == "... --- ..."

    def test_strict_keeps_case(self, codec):
        meta = codec("base16upper").meta()
        assert normalize("ab cd", meta, Mode.STRICT) == "ab cd"

    def test_lenient_folds_case(self, codec):
        meta = codec("base16upper").meta()
        assert normalize("ab cd", meta, Mode.LENIENT) == "ABCD"


class TestValidateAlphabet:
    def test_accepts_valid(self):
        assert validate_alphabet("0110", "01") is None

    def test_reports_first_offender(self):
        with pytest.raises(InvalidCharacter) as exc:
            validate_alphabet("01x1y", "01")
        assert exc.value.char == "x"
        assert exc.value.position == 2
        assert "position 2" in str(exc.value)


class TestCoverage:
    def test_fraction(self):
        assert coverage("0a1b", "01") == 0.5

    def test_empty_is_zero(self):
        assert coverage("", "01") == 0.0


# =========================================================================
# Scoring
# =========================================================================

class TestEvaluate:
    """Rules fire in order; the candidate keeps the best confidence."""

    def test_max_over_fired_rules(self):
        rules = [
            Rule(predicate=lambda p: True, confidence=0.4, reason="low"),
            Rule(predicate=lambda p: True, confidence=0.8, reason="high"),
            Rule(predicate=lambda p: False, confidence=1.0, reason="never"),
        ]
        candidate = evaluate("x", rules, _observation())
        assert candidate.confidence == 0.8
        assert candidate.reasons == ["low", "high"]

    def test_warnings_do_not_raise_confidence(self):
        rules = [Rule(predicate=lambda p: True, confidence=1.0, reason="careful", warning=True)]
        candidate = evaluate("x", rules, _observation())
        assert candidate.confidence == 0.0
        assert candidate.warnings == ["careful"]
        assert candidate.reasons == []

    def test_callable_reason(self):
        rules = [Rule(predicate=lambda p: True, confidence=0.5,
                      reason=lambda p: "len {}".format(len(p.normalized)))]
        assert evaluate("x", rules, _observation("abcd")).reasons == ["len 4"]

    def test_clamp(self):
        assert clamp(1.5) == 1.0
        assert clamp(-0.1) == 0.0


class TestDefaultRules:
    """The shared rule list every codec starts from."""

    def test_decode_beats_alphabet(self):
        candidate = evaluate("x", default_rules(None), _observation())
        assert candidate.confidence == DECODE_MATCH
        assert candidate.reasons == ["all characters valid", "decodes successfully"]

    def test_case_fold_penalty(self):
        candidate = evaluate("x", default_rules(None), _observation(folded=True))
        assert candidate.confidence == pytest.approx(DECODE_MATCH - CASE_FOLD_PENALTY)

    def test_failed_decode_is_a_warning(self):
        candidate = evaluate("x", default_rules(None), _observation(decodes=False))
        assert candidate.confidence == ALPHABET_MATCH
        assert candidate.warnings == ["does not decode: nope"]

    def test_partial_coverage(self):
        candidate = evaluate("x", default_rules(None), _observation(cov=0.95))
        assert candidate.confidence == 0.30
        assert candidate.reasons == ["95% of characters valid"]
        assert candidate.warnings == ["5% invalid characters"]

    def test_low_coverage(self):
        candidate = evaluate("x", default_rules(None), _observation(cov=0.5))
        assert candidate.confidence == 0.0
        assert candidate.warnings == ["too many invalid characters"]

    def test_multibase(self):
        candidate = evaluate("x", default_rules("f"), _observation(multibase=True))
        assert candidate.confidence == MULTIBASE_MATCH
        assert candidate.reasons[0] == "multibase prefix 'f' detected"

    def test_ambiguity_warning(self):
        candidate = evaluate("x", default_rules(None, ambiguity_warning="vague"), _observation())
        assert candidate.warnings == ["vague"]

    def test_trial_decode_only_at_full_coverage(self):
        calls = []

        def decoder(text):
            calls.append(text)
            return b""

        observation = Observation(raw="ab", normalized="ab", coverage=0.5,
                      case_folded=False, multibase=False, decoder=decoder)
        evaluate("x", default_rules(None), observation)
        assert calls == []
