"""Detection engine — rank every codec's guess for an unknown string.

WHY: Users paste strings without saying what produced them. Asking each
codec "could this be yours?" and ranking the answers is the only
codec-agnostic way to guess, and it keeps detection logic inside the
codecs where the knowledge lives.

HOW: detect() strips the input, calls detect_score() on every registered
codec (sequentially, or over a thread pool when workers > 1), then sorts
the candidates by confidence descending. The sort is stable over the
registry's declaration order, so equal confidences keep catalog order.

RULES:
- Every codec is scored; nothing short-circuits on a strong match
- Ties are broken by declaration order, never by name
- Zero-confidence candidates are dropped unless include_zero=True
- top=None returns every remaining candidate
- detect_score() never raises, so one broken scorer cannot hide others
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

from mbase.core.registry import Registry, get_registry
from mbase.core.types import DetectCandidate

logger = logging.getLogger(__name__)


def detect(
    text: str,
    registry: Optional[Registry] = None,
    top: Optional[int] = None,
    workers: int = 1,
    include_zero: bool = False,
) -> List[DetectCandidate]:
    """Score ``text`` against every codec and return ranked candidates.

    Args:
        text: The unknown encoded string.
        registry: Registry to consult (defaults to the process-wide one).
        top: Keep at most this many candidates.
        workers: Thread count for scoring; 1 scores in the calling thread.
        include_zero: Keep candidates with confidence 0.0.

    Returns:
        Candidates sorted by confidence descending, ties in declaration order.
    """
    if registry is None:
        registry = get_registry()
    if top is not None and top < 0:
        raise ValueError("top must be non-negative, got {}".format(top))

    stripped = text.strip()
    codecs = registry.codecs

    if workers > 1:
        logger.debug("Scoring %d codecs on %d workers", len(codecs), workers)
        with ThreadPoolExecutor(max_workers=workers) as pool:
            candidates = list(pool.map(lambda c: c.detect_score(stripped), codecs))
    else:
        candidates = [codec.detect_score(stripped) for codec in codecs]

    # executor.map preserves input order, so this sort is stable over
    # declaration order in both branches.
    ranked = sorted(candidates, key=lambda c: c.confidence, reverse=True)
    if not include_zero:
        ranked = [c for c in ranked if c.confidence > 0.0]
    if top is not None:
        ranked = ranked[:top]

    logger.debug(
        "Detection over %d chars: %d candidates kept, best=%s",
        len(stripped),
        len(ranked),
        "{} ({:.2f})".format(ranked[0].codec, ranked[0].confidence) if ranked else "none",
    )
    return ranked
