"""Anchoring of extracted claims to offsets in the source text."""

import logging
from typing import List, Optional, Sequence, Set, Tuple

from ..models.claim import Claim, ExtractedClaim

logger = logging.getLogger(__name__)


def locate_anchor(text: str, exact_text: str) -> Optional[int]:
    """Offset of the last occurrence of ``exact_text`` in ``text``.

    The last occurrence wins when a phrase repeats, so claims extracted from
    the same repeated phrase all resolve to the same span.
    """
    if not exact_text:
        return None
    index = text.rfind(exact_text)
    return index if index >= 0 else None


def resolve_positions(
    text: str,
    extracted: Sequence[ExtractedClaim],
    max_claims: Optional[int] = None,
) -> List[Claim]:
    """Turn extracted claims into positioned claims.

    Claims whose anchor is not a verbatim substring of ``text`` are dropped
    and logged, as are repeats of an already positioned claim with the same
    span and restatement. Survivors get sequential 1-based ids in extraction
    order and are truncated to the first ``max_claims``. Overlapping spans
    are kept.

    Args:
        text: Source text the claims were extracted from
        extracted: Claims returned by the extractor
        max_claims: Maximum number of claims to return, ``None`` for no cap

    Returns:
        Positioned claims with pipeline fields at their defaults
    """
    claims: List[Claim] = []
    seen: Set[Tuple[int, int, str]] = set()
    dropped = 0
    duplicates = 0

    for item in extracted:
        start = locate_anchor(text, item.exact_text)
        if start is None:
            dropped += 1
            logger.warning(f"⚠️ Dropping claim, anchor not found in text: {item.exact_text[:80]!r}")
            continue

        end = start + len(item.exact_text)
        key = (start, end, item.claim)
        if key in seen:
            duplicates += 1
            logger.warning(f"⚠️ Dropping duplicate claim at {start}-{end}: {item.claim[:80]!r}")
            continue
        seen.add(key)

        claims.append(
            Claim(
                id=len(claims) + 1,
                exact_text=item.exact_text,
                claim_text=item.claim,
                start=start,
                end=end,
                search_query=item.search_query,
            )
        )

    if max_claims is not None and len(claims) > max_claims:
        logger.info(f"✂️ Truncating {len(claims)} positioned claims to {max_claims}")
        claims = claims[:max_claims]

    logger.info(f"📍 Positioned {len(claims)} claims ({dropped} dropped, {duplicates} duplicates)")
    return claims
