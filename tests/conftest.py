"""Test configuration and common fixtures."""

import asyncio
from typing import Dict, List, Optional, Type, Union

import pytest

from claim_checker.domain.models.claim import Claim, ExtractedClaim, ExtractionResult
from claim_checker.domain.models.source import CitedSource
from claim_checker.domain.models.verification import VerificationResult
from claim_checker.domain.ports.search_provider import SearchDocument

EIFFEL_TEXT = "The Eiffel Tower is 330 meters tall. It was completed in 1889."


class FakeTextGenerator:
    """Text generator returning canned objects per schema.

    Verdicts are chosen by the first key of ``verdicts`` that appears in the
    prompt; an ``Exception`` value is raised instead of returned.
    """

    def __init__(
        self,
        extraction: Union[ExtractionResult, Exception, None] = None,
        verdicts: Optional[Dict[str, Union[VerificationResult, Exception]]] = None,
        default_verdict: Union[VerificationResult, Exception, None] = None,
        delay: float = 0.0,
    ):
        self.extraction = extraction or ExtractionResult(claims=[])
        self.verdicts = verdicts or {}
        self.default_verdict = default_verdict or VerificationResult(
            status="insufficient-information",
            confidence=10,
            explanation="Nothing conclusive was found.",
        )
        self.delay = delay
        self.prompts: List[str] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self._initialized = True

    async def initialize(self) -> None:
        self._initialized = True

    async def shutdown(self) -> None:
        self._initialized = False

    async def generate_object(self, prompt: str, schema: Type, schema_name: Optional[str] = None):
        self.prompts.append(prompt)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if schema is ExtractionResult:
                result = self.extraction
            else:
                result = next(
                    (value for key, value in self.verdicts.items() if key in prompt),
                    self.default_verdict,
                )
            if isinstance(result, Exception):
                raise result
            return result
        finally:
            self.in_flight -= 1

    @property
    def provider_name(self) -> str:
        return "Fake"

    @property
    def is_available(self) -> bool:
        return self._initialized

    @property
    def capabilities(self) -> Dict[str, bool]:
        return {"structured_output": True}


class FakeSearchProvider:
    """Search provider returning canned documents per query."""

    def __init__(
        self,
        results: Optional[Dict[str, Union[List[SearchDocument], Exception]]] = None,
        default: Optional[List[SearchDocument]] = None,
        delay: float = 0.0,
    ):
        self.results = results or {}
        self.default = default if default is not None else []
        self.delay = delay
        self.queries: List[str] = []
        self._initialized = True

    async def initialize(self) -> None:
        self._initialized = True

    async def search(self, query: str, num_results: int = 3) -> List[SearchDocument]:
        self.queries.append(query)
        if self.delay:
            await asyncio.sleep(self.delay)
        result = self.results.get(query, self.default)
        if isinstance(result, Exception):
            raise result
        return list(result)

    async def shutdown(self) -> None:
        self._initialized = False

    @property
    def provider_name(self) -> str:
        return "FakeSearch"

    @property
    def is_available(self) -> bool:
        return self._initialized

    @property
    def capabilities(self) -> Dict[str, bool]:
        return {"web_search": True}


def make_documents(count: int, prefix: str = "doc") -> List[SearchDocument]:
    """Ranked documents with predictable urls and texts."""
    return [
        SearchDocument(
            url=f"https://{prefix}{n}.example.org",
            title=f"{prefix} {n}",
            text=f"{prefix} text {n} " * 50,
        )
        for n in range(1, count + 1)
    ]


def supported_verdict(*numbers: int) -> VerificationResult:
    """A supported verdict citing each of ``numbers``."""
    markers = " ".join(f"{{{{{n}}}}}" for n in numbers)
    return VerificationResult(
        status="supported",
        confidence=90,
        explanation=f"Sources confirm the claim {markers}.",
        cited_sources=[
            CitedSource(
                source_number=n,
                stance="support",
                agreement_percentage=95,
                pertinence=90,
                relevant_snippet=f"snippet {n}",
            )
            for n in numbers
        ],
    )


@pytest.fixture
def eiffel_text() -> str:
    """Two-sentence text used across pipeline tests."""
    return EIFFEL_TEXT


@pytest.fixture
def eiffel_extraction() -> ExtractionResult:
    """Extraction reply for ``EIFFEL_TEXT``."""
    return ExtractionResult(
        claims=[
            ExtractedClaim(
                claim="The Eiffel Tower's height is 330 meters.",
                exact_text="The Eiffel Tower is 330 meters tall.",
                search_query="What is the height of the Eiffel Tower in meters?",
            ),
            ExtractedClaim(
                claim="The Eiffel Tower was completed in 1889.",
                exact_text="It was completed in 1889.",
                search_query="When was the Eiffel Tower completed?",
            ),
        ]
    )


@pytest.fixture
def eiffel_claims() -> List[Claim]:
    """Positioned claims for ``EIFFEL_TEXT``."""
    return [
        Claim(
            id=1,
            exact_text="The Eiffel Tower is 330 meters tall.",
            claim_text="The Eiffel Tower's height is 330 meters.",
            start=0,
            end=36,
            search_query="What is the height of the Eiffel Tower in meters?",
        ),
        Claim(
            id=2,
            exact_text="It was completed in 1889.",
            claim_text="The Eiffel Tower was completed in 1889.",
            start=37,
            end=62,
            search_query="When was the Eiffel Tower completed?",
        ),
    ]


@pytest.fixture
def fake_generator() -> FakeTextGenerator:
    """Text generator with no canned extraction and an inconclusive verdict."""
    return FakeTextGenerator()


@pytest.fixture
def fake_search() -> FakeSearchProvider:
    """Search provider returning three documents for every query."""
    return FakeSearchProvider(default=make_documents(3))


@pytest.fixture
def fake_generator_cls() -> Type[FakeTextGenerator]:
    """Fake text-generator class for tests needing custom replies."""
    return FakeTextGenerator


@pytest.fixture
def fake_search_cls() -> Type[FakeSearchProvider]:
    """Fake search-provider class for tests needing custom results."""
    return FakeSearchProvider


@pytest.fixture
def build_documents():
    """Builder for ranked search documents."""
    return make_documents


@pytest.fixture
def build_verdict():
    """Builder for supported verdicts citing given source numbers."""
    return supported_verdict
