"""Tests for the codec registry and catalog integrity.

WHY: Lookups by alias, multibase dispatch and detection tie-breaking all
assume the catalog is free of collisions. A duplicate alias would make
``--codec`` silently resolve to the wrong encoding, so the invariants
are checked on the shipped catalog and on deliberately broken ones.

HOW: The shipped catalog is inspected through build_registry(); broken
catalogs are assembled from small throwaway BaseCodec subclasses whose
metadata is set per instance.

RULES:
- EXPECTED_CODEC_COUNT must be bumped whenever a codec is added
- Every violation raises RegistryError at construction time
- Lookup is exact first, then lower-cased
"""

import pytest

from mbase.codecs import CODECS
from mbase.codecs.base import BaseCodec
from mbase.core.errors import CodecNotFound, MbaseError, RegistryError
from mbase.core.registry import Registry, build_registry, get_registry
from mbase.core.types import CaseSensitivity, CodecMeta, PaddingRule

EXPECTED_CODEC_COUNT = 54


class FakeCodec(BaseCodec):
    """Identity codec with per-instance metadata."""

    def __init__(self, name, aliases=(), code=None):
        self.META = CodecMeta(
            name=name,
            aliases=tuple(aliases),
            alphabet="ab",
            multibase_code=code,
            padding=PaddingRule.NONE,
            case_sensitivity=CaseSensitivity.SENSITIVE,
            description="test codec {}".format(name),
        )

    def encode(self, data):
        return data.decode("latin-1")

    def _decode(self, text):
        return text.encode("latin-1")


# =========================================================================
# The shipped catalog
# =========================================================================

class TestCatalog:
    """Invariants of the codecs mbase actually ships."""

    def test_codec_count(self, registry):
        assert len(registry) == EXPECTED_CODEC_COUNT
        assert len(registry.list()) == EXPECTED_CODEC_COUNT

    def test_names_unique(self, registry):
        names = [meta.name for meta in registry.list()]
        assert len(set(names)) == len(names)

    def test_aliases_unique_and_distinct_from_names(self, registry):
        names = {meta.name for meta in registry.list()}
        aliases = [alias for meta in registry.list() for alias in meta.aliases]
        assert len(set(aliases)) == len(aliases)
        assert not names & set(aliases)

    def test_multibase_codes_unique(self, registry):
        codes = [m.multibase_code for m in registry.list() if m.multibase_code]
        assert len(set(codes)) == len(codes)
        assert all(len(code) == 1 for code in codes)

    def test_multibase_map(self, registry):
        mapping = registry.multibase_map()
        assert mapping["z"] == "base58btc"
        assert mapping["f"] == "base16lower"
        assert mapping["m"] == "base64"
        assert registry.by_multibase("z").name == "base58btc"
        assert registry.by_multibase("!") is None

    def test_declaration_order(self, registry):
        assert [m.name for m in registry.list()] == [c.name for c in CODECS]
        assert registry.order_of("base64") == 0
        assert registry.order_of("base64") < registry.order_of("base64url")

    def test_case_insensitive_alphabets_have_canonical_case(self, registry):
        for meta in registry.list():
            if meta.case_sensitivity is CaseSensitivity.INSENSITIVE:
                letters = [c for c in meta.alphabet if c.isascii() and c.isalpha()]
                assert all(c.islower() for c in letters) or all(c.isupper() for c in letters), meta.name


# =========================================================================
# Lookup
# =========================================================================

class TestLookup:
    def test_alias_resolves_to_same_instance(self, registry):
        assert registry.get("b64") is registry.get("base64")
        assert registry.get("hex") is registry.get("base16lower")

    def test_exact_match_wins_over_lowercase(self, registry):
        assert registry.get("HEX").name == "base16upper"
        assert registry.get("B32").name == "base32upper"

    def test_lowercase_fallback(self, registry):
        assert registry.get("BASE64").name == "base64"
        assert registry.get("Morse").name == "morse"

    def test_unknown(self, registry):
        with pytest.raises(CodecNotFound) as exc:
            registry.get("base1000")
        assert exc.value.name == "base1000"
        assert isinstance(exc.value, MbaseError)

    def test_contains(self, registry):
        assert "rot13" in registry
        assert "ROT-13" in registry
        assert "nope" not in registry


# =========================================================================
# Broken catalogs
# =========================================================================

class TestRegistryErrors:
    """Construction fails fast on any uniqueness violation."""

    def test_duplicate_name(self):
        with pytest.raises(RegistryError, match="duplicate codec name"):
            Registry([FakeCodec("one"), FakeCodec("one")])

    def test_duplicate_alias(self):
        with pytest.raises(RegistryError, match="claimed by both"):
            Registry([FakeCodec("one", ["x"]), FakeCodec("two", ["x"])])

    def test_alias_collides_with_name(self):
        with pytest.raises(RegistryError, match="collides"):
            Registry([FakeCodec("one"), FakeCodec("two", ["one"])])

    def test_duplicate_multibase_code(self):
        with pytest.raises(RegistryError, match="multibase code"):
            Registry([FakeCodec("one", code="q"), FakeCodec("two", code="q")])

    def test_registry_error_is_not_user_facing(self):
        assert not issubclass(RegistryError, MbaseError)

    def test_valid_custom_catalog(self):
        registry = build_registry([FakeCodec("one", ["1"], "q"), FakeCodec("two")])
        assert len(registry) == 2
        assert registry.get("1").name == "one"
        assert registry.by_multibase("q").name == "one"


class TestDefaultRegistry:
    def test_singleton(self):
        assert get_registry() is get_registry()
        assert len(get_registry()) == EXPECTED_CODEC_COUNT
