"""Merging of retrieved evidence with a verdict into the final claim."""

import logging
from typing import Dict, List, Optional, Sequence

from ..models.claim import Claim
from ..models.source import CitedSource, MergedSource, Source
from ..models.verification import VerificationResult

logger = logging.getLogger(__name__)

FALLBACK_SOURCE_URL = "https://example.com"


def fallback_source(source_number: int) -> Source:
    """Placeholder for a cited source number missing from the evidence set."""
    return Source(url=FALLBACK_SOURCE_URL, title=None, source_number=source_number, source_text="")


def merge_sources(
    raw_sources: Sequence[Source],
    cited_sources: Sequence[CitedSource],
) -> List[MergedSource]:
    """Join cited sources to retrieved ones on ``source_number``.

    Output follows the order of ``cited_sources``. A citation with no
    matching retrieved source is merged with a placeholder instead of
    being dropped.
    """
    by_number: Dict[int, Source] = {}
    for source in raw_sources:
        by_number.setdefault(source.source_number, source)

    merged: List[MergedSource] = []
    for cited in cited_sources:
        source = by_number.get(cited.source_number)
        if source is None:
            logger.warning(f"⚠️ Verifier cited unknown source {cited.source_number}, using placeholder")
            source = fallback_source(cited.source_number)
        merged.append(MergedSource.merge(source, cited))
    return merged


def assemble_claim(
    claim: Claim,
    raw_sources: Sequence[Source],
    verification: VerificationResult,
    error: Optional[str] = None,
) -> Claim:
    """Build the final claim from its positional data and verdict.

    The positional fields of ``claim`` are carried over unchanged; a new
    instance is returned.
    """
    return claim.model_copy(
        update={
            "status": verification.status,
            "confidence": verification.confidence,
            "explanation": verification.explanation,
            "suggested_fix": verification.suggested_fix,
            "sources": merge_sources(raw_sources, verification.cited_sources),
            "error": error,
        }
    )
