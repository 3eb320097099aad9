"""Retrieval of ranked evidence for claims."""

import asyncio
import logging
from typing import List, Optional, Sequence

from pydantic import ValidationError

from ..errors import SchemaViolationError
from ..models.claim import Claim
from ..models.source import Source
from ..ports.search_provider import SearchProvider

logger = logging.getLogger(__name__)

SEARCH_FIELDS = ("search_query", "claim_text")


class EvidenceRetriever:
    """Fetches a fixed-size evidence set per claim from a search service.

    Results keep the search service's ranking and are numbered from 1 in
    that order. Excerpts are cut to ``excerpt_length`` characters on receipt.
    """

    def __init__(
        self,
        search_provider: SearchProvider,
        results_per_claim: int = 3,
        excerpt_length: int = 300,
        search_field: str = "search_query",
        call_timeout: Optional[float] = None,
    ):
        """Initialize the retriever.

        Args:
            search_provider: Web-search service
            results_per_claim: Number of sources requested per claim
            excerpt_length: Maximum characters kept from each document
            search_field: Claim field used as the query
            call_timeout: Seconds before a search call counts as failed
        """
        if search_field not in SEARCH_FIELDS:
            raise ValueError(f"search_field must be one of {SEARCH_FIELDS}, got {search_field!r}")
        self._search = search_provider
        self._results_per_claim = results_per_claim
        self._excerpt_length = excerpt_length
        self._search_field = search_field
        self._call_timeout = call_timeout

    def query_for(self, claim: Claim) -> str:
        """Query string used for ``claim``, falling back to the claim text."""
        query = getattr(claim, self._search_field) or ""
        return query if query.strip() else claim.claim_text

    async def retrieve(self, query: str) -> List[Source]:
        """Retrieve the evidence set for one query.

        Raises:
            SearchError: If the search service fails
            SchemaViolationError: If a returned document is malformed
            asyncio.TimeoutError: If the call exceeds ``call_timeout``
        """
        documents = await asyncio.wait_for(
            self._search.search(query, num_results=self._results_per_claim),
            timeout=self._call_timeout,
        )

        sources: List[Source] = []
        for index, document in enumerate(documents[: self._results_per_claim]):
            data = {
                "url": document.url,
                "title": document.title,
                "sourceNumber": index + 1,
                "sourceText": (document.text or "")[: self._excerpt_length],
            }
            try:
                sources.append(Source.model_validate(data))
            except ValidationError as e:
                raise SchemaViolationError.from_validation_error("Source", data, e) from e

        logger.debug(f"🔎 {len(sources)} sources for query: {query[:80]}")
        return sources

    async def retrieve_for_claim(self, claim: Claim) -> List[Source]:
        """Retrieve the evidence set for one claim."""
        return await self.retrieve(self.query_for(claim))

    async def retrieve_all(self, queries: Sequence[str]) -> List[List[Source]]:
        """Retrieve evidence for several queries concurrently.

        A failed query yields an empty list in its slot; siblings are
        unaffected. Results are returned in input order.
        """
        results = await asyncio.gather(
            *(self.retrieve(query) for query in queries),
            return_exceptions=True,
        )

        evidence: List[List[Source]] = []
        for query, result in zip(queries, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                logger.warning(f"⚠️ Search failed for query {query[:80]!r}: {result}")
                evidence.append([])
            else:
                evidence.append(result)
        return evidence
