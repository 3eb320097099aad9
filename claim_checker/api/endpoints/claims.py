"""Claim checking API endpoints."""

import logging
from typing import Dict, List, Union

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ...domain.errors import PipelineError
from ...domain.models.claim import Claim
from ...domain.models.source import Source
from ...domain.models.submission import Submission
from ...domain.ports.submission_store import SubmissionStore
from ...domain.services.fact_checking_service import (
    FactCheckingService,
    describe_error,
    summarize_claims,
)
from ...infrastructure.config import PipelineConfig
from ...infrastructure.dependencies import (
    get_fact_checking_service,
    get_pipeline_config,
    get_submission_store,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["claims"])


class CamelModel(BaseModel):
    """Base model for request and response bodies using camelCase names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ExtractClaimsRequest(CamelModel):
    """Request model for claim extraction."""

    text: str = Field(..., description="Text to extract claims from")


class ClaimsResponse(CamelModel):
    """Response model carrying positioned or verified claims."""

    claims: List[Claim] = Field(default_factory=list)


class SearchAndVerifyRequest(CamelModel):
    """Request model for searching and verifying claims."""

    claims: List[Claim] = Field(..., description="Claims returned by extraction")


class SearchClaimItem(CamelModel):
    """One claim to search evidence for."""

    id: Union[int, str]
    claim: str = Field(..., min_length=1)


class SearchClaimsRequest(CamelModel):
    """Request model for evidence search without verification."""

    claims: List[SearchClaimItem]


class ClaimSources(CamelModel):
    """Evidence set of one claim."""

    claim_id: Union[int, str]
    sources: List[Source] = Field(default_factory=list)


class SearchClaimsResponse(CamelModel):
    """Response model for evidence search."""

    results: List[ClaimSources]


class ExaSearchRequest(CamelModel):
    """Request model for a single evidence search."""

    claim: str = Field(..., min_length=1, description="Query to search for")


class ExaSearchResponse(CamelModel):
    """Response model for a single evidence search."""

    results: List[Source]


class CreateSubmissionRequest(CamelModel):
    """Request model for storing submitted text."""

    content: str


class CreateSubmissionResponse(CamelModel):
    """Response model for a stored submission."""

    id: str


class CheckSubmissionResponse(CamelModel):
    """Response model for a checked submission."""

    claims: List[Claim]
    summary: Dict[str, int]


@router.post("/extractclaims", response_model=ClaimsResponse)
async def extract_claims(
    request: ExtractClaimsRequest,
    service: FactCheckingService = Depends(get_fact_checking_service),
    config: PipelineConfig = Depends(get_pipeline_config),
) -> ClaimsResponse:
    """Extract positioned claims from text.

    Raises:
        HTTPException: 400 if the text is empty or too long
    """
    if not request.text.strip():
        raise HTTPException(status_code=400, detail="Text is required.")
    if len(request.text) > config.max_text_length:
        raise HTTPException(
            status_code=400,
            detail=f"Text exceeds the {config.max_text_length} character limit.",
        )

    claims = await service.extract_claims(request.text)
    return ClaimsResponse(claims=claims)


@router.post("/searchandverify", response_model=ClaimsResponse)
async def search_and_verify(
    request: SearchAndVerifyRequest,
    service: FactCheckingService = Depends(get_fact_checking_service),
) -> ClaimsResponse:
    """Retrieve evidence for and verify each claim."""
    if not request.claims:
        return ClaimsResponse(claims=[])

    try:
        claims = await service.search_and_verify(request.claims)
    except Exception as e:
        raise PipelineError("search_and_verify", describe_error(e), e) from e
    return ClaimsResponse(claims=claims)


@router.post("/searchclaims", response_model=SearchClaimsResponse)
async def search_claims(
    request: SearchClaimsRequest,
    service: FactCheckingService = Depends(get_fact_checking_service),
) -> SearchClaimsResponse:
    """Retrieve evidence for several claims; failed searches yield no sources."""
    evidence = await service.search_claims([item.claim for item in request.claims])
    return SearchClaimsResponse(
        results=[
            ClaimSources(claim_id=item.id, sources=sources)
            for item, sources in zip(request.claims, evidence)
        ]
    )


@router.post("/exasearch", response_model=ExaSearchResponse)
async def exa_search(
    request: ExaSearchRequest,
    service: FactCheckingService = Depends(get_fact_checking_service),
) -> ExaSearchResponse:
    """Retrieve the evidence set for one query.

    Raises:
        HTTPException: 500 if the search service fails
    """
    try:
        sources = await service.retriever.retrieve(request.claim)
    except Exception as e:
        logger.error(f"❌ Search failed: {describe_error(e)}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Failed to perform search | {describe_error(e, brief=True)}",
        )
    return ExaSearchResponse(results=sources)


@router.post("/submissions", response_model=CreateSubmissionResponse, status_code=201)
async def create_submission(
    request: CreateSubmissionRequest,
    store: SubmissionStore = Depends(get_submission_store),
    config: PipelineConfig = Depends(get_pipeline_config),
) -> CreateSubmissionResponse:
    """Store submitted text for later checking.

    Raises:
        HTTPException: 400 if the content is too short or too long
    """
    content = request.content.strip()
    if len(content) < config.min_submission_length:
        raise HTTPException(status_code=400, detail="Content too short.")
    if len(content) > config.max_text_length:
        raise HTTPException(
            status_code=400,
            detail=f"Content exceeds the {config.max_text_length} character limit.",
        )

    submission = await store.save_submission(Submission.create(content))
    return CreateSubmissionResponse(id=submission.id)


@router.get("/submissions/{submission_id}", response_model=Submission)
async def get_submission(
    submission_id: str,
    store: SubmissionStore = Depends(get_submission_store),
) -> Submission:
    """Get a stored submission.

    Raises:
        HTTPException: 404 if the submission is unknown
    """
    submission = await store.get_submission(submission_id)
    if submission is None:
        raise HTTPException(status_code=404, detail="Submission not found.")
    return submission


@router.post("/submissions/{submission_id}/check", response_model=CheckSubmissionResponse)
async def check_submission(
    submission_id: str,
    service: FactCheckingService = Depends(get_fact_checking_service),
    store: SubmissionStore = Depends(get_submission_store),
) -> CheckSubmissionResponse:
    """Run the whole pipeline on a stored submission and keep its claims.

    Raises:
        HTTPException: 404 if the submission is unknown
    """
    submission = await store.get_submission(submission_id)
    if submission is None:
        raise HTTPException(status_code=404, detail="Submission not found.")

    claims = await service.check_text(submission.content)
    await store.save_claims(submission_id, claims)
    return CheckSubmissionResponse(claims=claims, summary=summarize_claims(claims))
