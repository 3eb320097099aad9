"""Extraction of verifiable claims from free text."""

import logging
from typing import List

from ..models.claim import ExtractedClaim, ExtractionResult
from ..ports.text_generator import TextGenerator

logger = logging.getLogger(__name__)

EXTRACTION_PROMPT = """You are an expert at extracting claims from text.
Your task is to identify and list all claims present, true or false, in the given text.
Each claim should be a single, verifiable statement. If the content is very long, pick the major claims.

For each claim return an object with three keys:
- "claim": the assertion restated so it is fully self-contained. It must be understandable
  and verifiable without the source text: resolve every pronoun to its antecedent, never write
  "this technique" or "the company" without naming it, expand all abbreviations, make implicit
  subjects explicit and keep concrete numbers, dates and names. Vague claims are not allowed.
- "exactText": the exact, continuous substring of the original text that grounds the claim,
  copied character for character (5-25 words). Never paraphrase it, never fix typos in it and
  never join separate fragments.
- "searchQuery": a well-formed question starting with What, How, Does or Is that contains the
  concrete entities and numbers from the claim, written to find evidence that confirms or
  refutes it.

Do not filter claims on apparent truth value; verification decides accuracy.
Return only JSON of the form {{"claims": [...]}} with no commentary.

Here is the content:
{text}
"""


class ClaimExtractor:
    """Extracts claims by delegating to a text-generation service.

    Extraction is all-or-nothing: a single call covers the whole text, so
    any generation or schema error propagates to the caller.
    """

    def __init__(self, generator: TextGenerator):
        """Initialize the extractor.

        Args:
            generator: Structured text-generation service
        """
        self._generator = generator

    def build_prompt(self, text: str) -> str:
        """Render the extraction prompt for ``text``."""
        return EXTRACTION_PROMPT.format(text=text)

    async def extract(self, text: str) -> List[ExtractedClaim]:
        """Extract claims from ``text``.

        Args:
            text: Source text, non-empty

        Returns:
            Extracted claims in the order the service returned them

        Raises:
            ValueError: If ``text`` is blank
            GenerationError: If the service call fails
            SchemaViolationError: If the reply does not match the schema
        """
        if not text or not text.strip():
            raise ValueError("Text to extract claims from must not be empty")

        logger.info(f"📝 Extracting claims from {len(text)} chars of text")
        result = await self._generator.generate_object(
            self.build_prompt(text),
            ExtractionResult,
            schema_name="ExtractedClaims",
        )
        logger.info(f"✅ Extraction returned {len(result.claims)} claims")
        return list(result.claims)
