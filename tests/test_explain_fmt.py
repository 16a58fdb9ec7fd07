"""Tests for error explanation and canonical reformatting.

WHY: ``mbase explain`` exists to turn a terse decode error into
something a person can act on ("remove the 0x prefix", "use the padded
variant"), and ``mbase fmt`` promises canonical output. Both are thin
layers over the codecs, so the tests pin the exact hints and layouts
users will see.

HOW: explain() is called on deliberately broken inputs and the report
fields are checked; group(), wrap() and reformat() are checked on small
strings with known layouts.

RULES:
- Positions and context refer to the normalized text
- A valid input yields valid=True and no suggestions
- reformat() output decodes back to the same bytes
"""

import pytest

from mbase.core.errors import InvalidCharacter
from mbase.core.explain import context_window, explain, suggest
from mbase.core.fmt import group, reformat, wrap
from mbase.core.types import Mode


# =========================================================================
# explain()
# =========================================================================

class TestExplain:
    """Reports and suggestions for common mistakes."""

    def test_valid_input(self, codec, registry):
        report = explain(codec("base64"), "SGVsbG8", registry=registry)
        assert report.valid is True
        assert report.message is None
        assert report.suggestions == []

    def test_whitespace_in_strict(self, codec, registry):
        report = explain(codec("base64"), "SG Vs", Mode.STRICT, registry)
        assert report.valid is False
        assert report.error_type == "InvalidCharacter"
        assert report.position == 2
        assert report.offending_char == " "
        assert report.context == "SG Vs\n  ^"
        assert "Try --mode lenient to ignore whitespace" in report.suggestions

    def test_lenient_has_no_whitespace_hint(self, codec, registry):
        assert explain(codec("base64"), "SG Vs", Mode.LENIENT, registry).valid is True

    def test_padding_on_unpadded_codec(self, codec, registry):
        report = explain(codec("base64"), "SGVsbG8=", registry=registry)
        assert report.position == 7
        assert report.suggestions == [
            "Padding character found; try a padded variant like base64pad",
        ]

    def test_padded_variant_keeps_case_suffix(self, codec, registry):
        report = explain(codec("base32lower"), "mzxw6===", registry=registry)
        assert "try a padded variant like base32padlower" in report.suggestions[0]

    def test_missing_padding(self, codec, registry):
        report = explain(codec("base64pad"), "SGVsbG8", registry=registry)
        assert report.error_type == "InvalidLength"
        assert report.suggestions == [
            "Input may have incorrect padding; check trailing '='",
        ]

    def test_odd_hex(self, codec, registry):
        report = explain(codec("hex"), "abc", registry=registry)
        assert report.suggestions == [
            "Hex input has odd length; may be missing a character",
        ]

    def test_truncated_group(self, codec, registry):
        report = explain(codec("base64"), "SGVsb", registry=registry)
        assert report.suggestions == [
            "Input length 5 is not a multiple of 4 characters; it may be truncated",
        ]

    def test_checksum(self, codec, registry):
        report = explain(codec("bubblebabble"), "xaxax", registry=registry)
        assert report.error_type == "ChecksumMismatch"
        assert report.suggestions == [
            "Checksum validation failed; data may be corrupted",
            "Verify the input was copied correctly",
        ]

    def test_hex_prefix(self, codec, registry):
        report = explain(codec("base16lower"), "0xab", registry=registry)
        assert report.position == 1
        assert report.suggestions == ["Input has 0x prefix; remove it before decoding"]

    def test_case_hint_for_sensitive_codec(self, codec, registry):
        report = explain(codec("base58btc"), "2NEpl", registry=registry)
        assert report.suggestions == ["base58btc is case-sensitive; check the case of 'l'"]

    def test_case_hint_for_insensitive_codec_in_strict(self, codec, registry):
        report = explain(codec("base16lower"), "ABCD", Mode.STRICT, registry)
        assert report.position == 0
        assert report.suggestions == [
            "Strict mode expects base16lower in its canonical case; try --mode lenient",
        ]

    def test_leading_whitespace_is_an_error_in_strict(self, codec, registry):
        report = explain(codec("base64"), " SGVsbG8", Mode.STRICT, registry)
        assert report.valid is False
        assert report.position == 0
        assert report.offending_char == " "

    def test_trailing_newline_ignored(self, codec, registry):
        assert explain(codec("base64"), "SGVsbG8\r\n", registry=registry).valid is True

    def test_suggest_directly(self, codec, registry):
        hints = suggest(codec("base64"), InvalidCharacter("\t", 0), "\tx", Mode.STRICT, registry)
        assert hints == ["Try --mode lenient to ignore whitespace"]


class TestContextWindow:
    def test_window_clipped_at_both_ends(self):
        assert context_window("Hello World Test", 6, 5) == "ello World \n     ^"

    def test_start_of_text(self):
        assert context_window("abc", 0) == "abc\n^"


# =========================================================================
# fmt
# =========================================================================

class TestGroupWrap:
    def test_group(self):
        assert group("ABCDEFGH", 4) == "ABCD EFGH"
        assert group("ABCDEFGHI", 4, "-") == "ABCD-EFGH-I"

    def test_wrap(self):
        assert wrap("ABCDEFGH", 4) == "ABCD\nEFGH"
        assert wrap("ABCDEFGHI", 4) == "ABCD\nEFGH\nI"

    def test_zero_or_none_is_identity(self):
        assert group("ABCD", None) == "ABCD"
        assert group("ABCD", 0) == "ABCD"
        assert wrap("ABCD", None) == "ABCD"


class TestReformat:
    """Decode, re-encode canonically, then lay out."""

    def test_canonical_case_and_whitespace(self, codec):
        assert reformat(codec("base16upper"), "de ad BE ef") == "DEADBEEF"

    def test_grouped(self, codec):
        assert reformat(codec("base16upper"), "deadbeef", group_size=2) == "DE AD BE EF"

    def test_grouped_then_wrapped(self, codec):
        out = reformat(codec("base16lower"), "DEADBEEF", group_size=2, wrap_width=5)
        assert out == "de ad\n be e\nf"

    def test_output_still_decodes(self, codec):
        hex_codec = codec("base16lower")
        out = reformat(hex_codec, "DE AD BE EF", group_size=4)
        assert hex_codec.decode(out, Mode.LENIENT) == b"\xde\xad\xbe\xef"

    def test_strict_rejects_whitespace(self, codec):
        with pytest.raises(InvalidCharacter):
            reformat(codec("base16upper"), "de ad", Mode.STRICT)
