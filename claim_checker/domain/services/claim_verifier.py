"""Verification of a single claim against its evidence set."""

import json
import logging
from typing import Sequence

from ..models.claim import ClaimStatus
from ..models.source import Source
from ..models.verification import VerificationResult
from ..ports.text_generator import TextGenerator
from .citations import strip_citations

logger = logging.getLogger(__name__)

VERIFICATION_PROMPT = """You are an expert fact-checker. Given a claim and its sources, verify the claim comprehensively.

Instructions:
- Read the claim, the search query and every source carefully to understand the full context.
- Choose the status:
  - "supported" when multiple or credible sources directly confirm the claim.
  - "contradicted" when reliable sources directly disprove the claim. In that case "suggestedFix"
    is required: a corrected version of the claim, in neutral language, that incorporates the
    counter-evidence.
  - "debated" when credible sources conflict with each other.
  - "insufficient-information" when the sources do not provide adequate evidence either way.
- "confidence" (0-100) is your overall certainty in the verdict.
- Write the explanation citing sources inline with their number in double braces, e.g. {{{{1}}}}.
- List every cited source exactly once in "citedSources" with its "sourceNumber", its "stance"
  (support, contradict, not-relevant or unclear), "agreementPercentage" (0-100, how strongly it
  agrees with the claim), "pertinence" (0-100, topical relevance regardless of stance) and a
  verbatim "relevantSnippet" quoted from its text.
- Every {{{{n}}}} marker must match a citedSources entry and every entry must be cited in the explanation.
- Only cite the source numbers listed below.

Claim:
{claim}

Search Query Used:
{search_query}

Sources:
{sources}
"""

DEGRADED_EXPLANATION = "Verification could not be completed for this claim: {reason}"


class ClaimVerifier:
    """Produces a verdict for one claim from its evidence set."""

    def __init__(self, generator: TextGenerator):
        """Initialize the verifier.

        Args:
            generator: Structured text-generation service
        """
        self._generator = generator

    def build_prompt(self, claim_text: str, search_query: str, sources: Sequence[Source]) -> str:
        """Render the verification prompt."""
        sources_json = json.dumps(
            [source.model_dump(by_alias=True) for source in sources],
            indent=2,
            ensure_ascii=False,
        )
        return VERIFICATION_PROMPT.format(
            claim=claim_text,
            search_query=search_query,
            sources=sources_json,
        )

    async def verify(
        self,
        claim_text: str,
        search_query: str,
        sources: Sequence[Source],
    ) -> VerificationResult:
        """Verify a claim.

        Args:
            claim_text: Self-contained claim restatement
            search_query: Query the evidence was retrieved with
            sources: Evidence set for the claim

        Returns:
            Validated verdict

        Raises:
            GenerationError: If the service call fails
            SchemaViolationError: If the verdict breaks its contract
        """
        logger.info(f"🔍 Verifying claim against {len(sources)} sources: {claim_text[:80]}")
        result = await self._generator.generate_object(
            self.build_prompt(claim_text, search_query, sources),
            VerificationResult,
            schema_name="VerificationResult",
        )
        logger.info(f"✅ Verdict: {result.status.value} ({result.confidence}%)")
        return result

    @staticmethod
    def degraded_result(reason: str) -> VerificationResult:
        """Terminal placeholder verdict for a claim whose verification failed."""
        lines = (reason or "").strip().splitlines()
        summary = strip_citations(lines[0]) if lines else ""
        return VerificationResult(
            status=ClaimStatus.INSUFFICIENT_INFORMATION,
            confidence=0,
            explanation=DEGRADED_EXPLANATION.format(reason=summary[:300] or "unknown error"),
            suggested_fix=None,
            cited_sources=[],
        )
