"""Service coordinating claim extraction, evidence retrieval and verification."""

import asyncio
import logging
from typing import Dict, List, Optional, Sequence

from ..errors import PipelineError
from ..models.claim import Claim, ClaimStatus
from ..models.source import Source
from ..ports.search_provider import SearchProvider
from ..ports.text_generator import TextGenerator
from .claim_extractor import ClaimExtractor
from .claim_verifier import ClaimVerifier
from .evidence_retriever import EvidenceRetriever
from .position_resolver import resolve_positions
from .result_assembler import assemble_claim

logger = logging.getLogger(__name__)


def describe_error(error: BaseException, brief: bool = False) -> str:
    """Human-readable description of an exception.

    With ``brief`` only the first line is kept, which drops the input dump
    of schema diagnostics.
    """
    if isinstance(error, asyncio.TimeoutError):
        return "timed out waiting for an external service"
    message = str(error).strip() or type(error).__name__
    return message.splitlines()[0] if brief else message


def summarize_claims(claims: Sequence[Claim]) -> Dict[str, int]:
    """Count claims per status for the overview scale."""
    summary = {"total": len(claims)}
    for status in ClaimStatus:
        summary[status.value] = 0
    for claim in claims:
        summary[claim.status.value] += 1
    summary["degraded"] = sum(1 for claim in claims if claim.is_degraded)
    return summary


class FactCheckingService:
    """Service for coordinating fact checking.

    ``extract_claims`` runs extraction and position resolution and fails as
    a whole. ``search_and_verify`` runs retrieval, verification and assembly
    once per claim, concurrently, and never lets one claim's failure affect
    another: a failed search leaves the claim with no evidence, a failed
    verification leaves it ``insufficient-information`` with ``error`` set.
    """

    def __init__(
        self,
        text_generator: TextGenerator,
        search_provider: SearchProvider,
        max_claims: Optional[int] = 5,
        results_per_claim: int = 3,
        excerpt_length: int = 300,
        search_field: str = "search_query",
        max_concurrency: int = 5,
        call_timeout: Optional[float] = 45.0,
    ):
        """Initialize the service.

        Args:
            text_generator: Structured text-generation service
            search_provider: Web-search service
            max_claims: Claims kept per submission after resolution
            results_per_claim: Sources retrieved per claim
            excerpt_length: Characters kept from each source
            search_field: Claim field used as the search query
            max_concurrency: Claims processed at the same time
            call_timeout: Seconds allowed per external call
        """
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")

        self.extractor = ClaimExtractor(text_generator)
        self.retriever = EvidenceRetriever(
            search_provider,
            results_per_claim=results_per_claim,
            excerpt_length=excerpt_length,
            search_field=search_field,
            call_timeout=call_timeout,
        )
        self.verifier = ClaimVerifier(text_generator)
        self._max_claims = max_claims
        self._max_concurrency = max_concurrency
        self._call_timeout = call_timeout
        logger.info("🔧 FactCheckingService initialized")

    async def extract_claims(self, text: str) -> List[Claim]:
        """Extract and position the claims in ``text``.

        Args:
            text: Source text

        Returns:
            Positioned claims with ids ascending

        Raises:
            PipelineError: If extraction fails or no claim can be anchored
        """
        logger.info(f"🔍 Starting claim extraction for text: {text[:100]}...")
        try:
            extracted = await asyncio.wait_for(
                self.extractor.extract(text),
                timeout=self._call_timeout,
            )
        except Exception as e:
            logger.error(f"❌ Claim extraction failed: {describe_error(e)}", exc_info=True)
            raise PipelineError("extraction", describe_error(e), e) from e

        claims = resolve_positions(text, extracted, max_claims=self._max_claims)
        if extracted and not claims:
            raise PipelineError(
                "extraction",
                "none of the extracted claims could be located in the text",
            )
        return claims

    async def search_and_verify(self, claims: Sequence[Claim]) -> List[Claim]:
        """Retrieve evidence for and verify every claim.

        Args:
            claims: Positioned claims

        Returns:
            Enriched claims, ordered by id
        """
        logger.info(f"🔍 Searching and verifying {len(claims)} claims")
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def run(claim: Claim) -> Claim:
            async with semaphore:
                return await self._process_claim(claim)

        results = await asyncio.gather(*(run(claim) for claim in claims), return_exceptions=True)

        final: List[Claim] = []
        for claim, result in zip(claims, results):
            if isinstance(result, Exception):
                logger.warning(f"⚠️ Claim {claim.id} failed unexpectedly: {describe_error(result)}")
                result = assemble_claim(
                    claim,
                    [],
                    self.verifier.degraded_result(describe_error(result)),
                    error=describe_error(result, brief=True),
                )
            elif isinstance(result, BaseException):
                raise result
            final.append(result)

        final.sort(key=lambda c: c.id)
        summary = summarize_claims(final)
        logger.info(f"✅ Search and verify complete: {summary}")
        return final

    async def search_claims(self, queries: Sequence[str]) -> List[List[Source]]:
        """Retrieve evidence only, one list per query in input order.

        A failed search yields an empty list for its query.
        """
        logger.info(f"🔍 Searching evidence for {len(queries)} claims")
        return await self.retriever.retrieve_all(queries)

    async def check_text(self, text: str) -> List[Claim]:
        """Run the whole pipeline on ``text``."""
        claims = await self.extract_claims(text)
        return await self.search_and_verify(claims)

    async def _process_claim(self, claim: Claim) -> Claim:
        """Retrieve, verify and assemble one claim."""
        error: Optional[str] = None

        try:
            sources = await self.retriever.retrieve_for_claim(claim)
        except Exception as e:
            error = f"Search failed: {describe_error(e, brief=True)}"
            logger.warning(f"⚠️ Claim {claim.id}: {error}, continuing without evidence")
            sources = []

        try:
            verification = await asyncio.wait_for(
                self.verifier.verify(claim.claim_text, claim.search_query, sources),
                timeout=self._call_timeout,
            )
        except Exception as e:
            error = f"Verification failed: {describe_error(e, brief=True)}"
            logger.warning(f"⚠️ Claim {claim.id}: {error}")
            verification = self.verifier.degraded_result(describe_error(e))
            sources = []

        return assemble_claim(claim, sources, verification, error=error)
