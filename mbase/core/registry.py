"""Immutable codec registry with name/alias lookup and invariant checks.

WHY: Commands look codecs up by whatever the user typed — "base64",
"b64", "hex", "B32". Two codecs answering to the same name, or two
claiming the same multibase prefix, would make lookups and multibase
decoding ambiguous, so the catalog is validated once, up front, and
then frozen.

HOW: Registry.__init__ checks the invariants in order (names, then
aliases, then multibase codes), raising RegistryError on the first
violation, and builds a single dict from every name and alias to its
codec. build_registry() is the explicit construction step (tests use it
with custom codec lists); get_registry() lazily builds the process-wide
default from mbase.codecs.CODECS behind a lock.

RULES:
- Names unique; aliases unique and disjoint from names; multibase codes
  unique; any violation is fatal (RegistryError)
- get() tries an exact match first, then the lower-cased name
- list() preserves declaration order, the detection tie-break order
- After construction nothing is mutated; concurrent reads need no lock
"""

from __future__ import annotations

import logging
import threading
from types import MappingProxyType
from typing import TYPE_CHECKING, Dict, Iterable, Mapping, Optional, Tuple

from mbase.core.errors import CodecNotFound, RegistryError
from mbase.core.types import CodecMeta

if TYPE_CHECKING:
    from mbase.codecs.base import BaseCodec

logger = logging.getLogger(__name__)


class Registry:
    """Read-only catalog of codec instances.

    Attributes:
        codecs: Codec instances in declaration order.
    """

    def __init__(self, codecs: Iterable[BaseCodec]) -> None:
        self.codecs: Tuple[BaseCodec, ...] = tuple(codecs)

        by_name: Dict[str, BaseCodec] = {}
        for codec in self.codecs:
            name = codec.meta().name
            if name in by_name:
                raise RegistryError("duplicate codec name: {}".format(name))
            by_name[name] = codec

        index: Dict[str, BaseCodec] = dict(by_name)
        for codec in self.codecs:
            for alias in codec.meta().aliases:
                if alias in by_name:
                    raise RegistryError(
                        "alias {!r} of {} collides with a codec name".format(
                            alias, codec.meta().name
                        )
                    )
                if alias in index:
                    raise RegistryError(
                        "alias {!r} claimed by both {} and {}".format(
                            alias, index[alias].meta().name, codec.meta().name
                        )
                    )
                index[alias] = codec

        multibase: Dict[str, str] = {}
        for codec in self.codecs:
            meta = codec.meta()
            code = meta.multibase_code
            if code is None:
                continue
            if code in multibase:
                raise RegistryError(
                    "multibase code {!r} claimed by both {} and {}".format(
                        code, multibase[code], meta.name
                    )
                )
            multibase[code] = meta.name

        self._index: Mapping[str, BaseCodec] = MappingProxyType(index)
        self._multibase: Mapping[str, str] = MappingProxyType(multibase)
        self._order: Mapping[str, int] = MappingProxyType(
            {codec.meta().name: i for i, codec in enumerate(self.codecs)}
        )
        logger.debug(
            "Registry built: %d codecs, %d lookup keys, %d multibase codes",
            len(self.codecs), len(index), len(multibase),
        )

    def get(self, name_or_alias: str) -> BaseCodec:
        """Resolve a canonical name or alias to its codec.

        Raises:
            CodecNotFound: Neither the exact nor the lower-cased key exists.
        """
        codec = self._index.get(name_or_alias)
        if codec is None:
            codec = self._index.get(name_or_alias.lower())
        if codec is None:
            raise CodecNotFound(name_or_alias)
        return codec

    def list(self) -> Tuple[CodecMeta, ...]:
        """Snapshot of every codec's metadata in declaration order."""
        return tuple(codec.meta() for codec in self.codecs)

    def multibase_map(self) -> Mapping[str, str]:
        """Multibase prefix character -> canonical codec name."""
        return self._multibase

    def by_multibase(self, code: str) -> Optional[BaseCodec]:
        name = self._multibase.get(code)
        return self._index[name] if name else None

    def order_of(self, name: str) -> int:
        """Declaration index of a canonical name (the tie-break key)."""
        return self._order[name]

    def __len__(self) -> int:
        return len(self.codecs)

    def __contains__(self, name_or_alias: str) -> bool:
        try:
            self.get(name_or_alias)
        except CodecNotFound:
            return False
        return True


def build_registry(codecs: Optional[Iterable[BaseCodec]] = None) -> Registry:
    """Build a registry from ``codecs`` (default: the full mbase catalog)."""
    if codecs is None:
        from mbase.codecs import CODECS
        codecs = CODECS
    return Registry(codecs)


_registry: Optional[Registry] = None
_registry_lock = threading.Lock()


def get_registry() -> Registry:
    """Return the process-wide default registry, building it on first use."""
    global _registry
    if _registry is None:
        with _registry_lock:
            if _registry is None:
                _registry = build_registry()
    return _registry
