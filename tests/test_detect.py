"""Tests for the heuristic detection engine.

WHY: ``mbase detect`` is the command people reach for when they do not
know what they are looking at, so its ranking has to be stable and
explainable: the same input always gives the same order, a multibase
prefix wins outright, and a crashing codec never takes the whole
detection down with it.

HOW: Runs detect() over the real catalog with known samples, and over
small custom registries where a codec is forced to fail.

RULES:
- Confidence is always within [0, 1]
- Ties keep declaration order
- Threaded scoring returns exactly what serial scoring returns
- Zero-confidence candidates are dropped unless include_zero is set
"""

from dataclasses import replace

import pytest

from conftest import CODEC_IDS
from mbase.codecs import CODECS
from mbase.codecs.base64_family import Base64
from mbase.core.detect import detect
from mbase.core.registry import Registry
from mbase.core.scoring import ALPHABET_MATCH


def _names(candidates):
    return [c.codec for c in candidates]


class ExplodingCodec(Base64):
    """base64 clone whose scoring blows up."""

    def observe(self, text):
        raise RuntimeError("boom")


# =========================================================================
# Known samples
# =========================================================================

class TestSamples:
    """Representative inputs and where they must rank."""

    def test_unpadded_base64(self, registry):
        candidates = detect("SGVsbG8", registry)
        assert candidates[0].codec == "base64"
        assert candidates[0].confidence == pytest.approx(0.75)
        assert "decodes successfully" in candidates[0].reasons

    def test_hex(self, registry):
        candidates = detect("48656c6c6f", registry)
        assert candidates[0].codec == "base16lower"
        assert candidates[0].confidence == pytest.approx(0.80)

    def test_multibase_hex(self, registry):
        candidates = detect("f48656c6c6f", registry)
        assert candidates[0].codec == "base16lower"
        assert candidates[0].confidence == pytest.approx(0.95)
        assert "multibase prefix 'f' detected" in candidates[0].reasons

    def test_multibase_base58(self, registry):
        candidates = detect("zJxF12TrwUP45BMd", registry)
        assert candidates[0].codec == "base58btc"
        assert candidates[0].confidence == pytest.approx(0.95)

    def test_surrounding_whitespace_ignored(self, registry):
        assert _names(detect("  SGVsbG8\n", registry)) == _names(detect("SGVsbG8", registry))

    def test_bubblebabble_is_an_ordinary_decode(self, registry):
        top = detect("xesef-disof-gytuf-katof-movif-baxux", registry)[0]
        assert top.codec == "bubblebabble"
        assert top.confidence == pytest.approx(0.80)
        assert top.reasons == ["all characters valid", "decodes successfully"]

    def test_morse(self, registry):
        candidates = detect("... --- ...", registry)
        assert candidates[0].codec == "morse"

    @pytest.mark.parametrize("sample,expected", [
        ("23 15 31 31 34", "tapcode"),
        ("8-5-12-12-15", "a1z26"),
        ("2001:db8::1 8000::", "ipv6"),
        ("\u7642\u1841", "base65536"),
    ])
    def test_distinctive_samples(self, registry, sample, expected):
        top = detect(sample, registry)[0]
        assert top.codec == expected
        assert top.confidence == pytest.approx(0.85)

    def test_bare_digits_prefer_hex_over_tap_code(self, registry):
        by_name = {c.codec: c for c in detect("2315", registry)}
        assert by_name["base16lower"].confidence > by_name["tapcode"].confidence


# =========================================================================
# Ordering and filtering
# =========================================================================

class TestRanking:
    def test_sorted_descending(self, registry):
        confidences = [c.confidence for c in detect("SGVsbG8gV29ybGQ", registry)]
        assert confidences == sorted(confidences, reverse=True)

    def test_ties_keep_declaration_order(self, registry):
        names = _names(detect("SGVsbG8", registry))
        assert names.index("base64") < names.index("base64url")
        by_name = {c.codec: c for c in detect("SGVsbG8", registry)}
        assert by_name["base64"].confidence == by_name["base64url"].confidence

    def test_top(self, registry):
        assert len(detect("SGVsbG8", registry, top=3)) == 3
        assert detect("SGVsbG8", registry, top=0) == []

    def test_negative_top(self, registry):
        with pytest.raises(ValueError):
            detect("SGVsbG8", registry, top=-1)

    def test_zero_confidence_dropped(self, registry):
        assert all(c.confidence > 0.0 for c in detect("SGVsbG8", registry))

    def test_include_zero_keeps_every_codec(self, registry):
        candidates = detect("SGVsbG8", registry, include_zero=True)
        assert len(candidates) == len(CODECS)

    def test_bounds(self, registry):
        for sample in ("SGVsbG8", "zJxF12TrwUP45BMd", "xexax", "%%%", "⠀⣿"):
            for candidate in detect(sample, registry, include_zero=True):
                assert 0.0 <= candidate.confidence <= 1.0


class TestConfidencePolicy:
    @pytest.mark.parametrize("codec", CODECS, ids=CODEC_IDS)
    def test_decode_outweighs_alphabet(self, codec):
        """Only codecs that accept almost any text may score a decode below ALPHABET_MATCH."""
        if codec.ambiguity_warning is None:
            assert codec.decode_confidence >= ALPHABET_MATCH
            assert codec.decode_confidence >= codec.alphabet_confidence


class TestEmptyInput:
    def test_empty_has_no_candidates(self, registry):
        assert detect("", registry) == []
        assert detect("   \n", registry) == []

    def test_empty_with_include_zero(self, registry):
        candidates = detect("", registry, include_zero=True)
        assert len(candidates) == len(CODECS)
        assert all(c.confidence == 0.0 for c in candidates)
        assert all(c.reasons == ["empty input"] for c in candidates)


# =========================================================================
# Concurrency and fault isolation
# =========================================================================

class TestWorkers:
    @pytest.mark.parametrize("sample", ["SGVsbG8", "48656c6c6f", "... --- ..."])
    def test_threaded_matches_serial(self, registry, sample):
        serial = detect(sample, registry, include_zero=True)
        threaded = detect(sample, registry, workers=4, include_zero=True)
        assert [c.to_dict() for c in threaded] == [c.to_dict() for c in serial]


class TestFaultIsolation:
    def test_failing_scorer_becomes_warning(self):
        exploding = ExplodingCodec()
        registry = Registry([exploding])
        candidates = detect("SGVsbG8", registry, include_zero=True)
        assert len(candidates) == 1
        assert candidates[0].confidence == 0.0
        assert candidates[0].warnings == ["scoring failed: boom"]

    def test_failing_scorer_does_not_hide_others(self):
        class Broken(ExplodingCodec):
            META = replace(Base64.META, name="broken", aliases=(), multibase_code=None)

        registry = Registry([Broken(), Base64()])
        assert _names(detect("SGVsbG8", registry)) == ["base64"]
