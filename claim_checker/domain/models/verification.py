"""Domain model for the verifier's verdict on one claim."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from ..services.citations import find_dangling_citations, find_orphan_sources
from .claim import ClaimStatus
from .source import CitedSource, normalize_token


class VerificationResult(BaseModel):
    """Verdict produced by the text-generation service for one claim.

    Besides field-level checks this enforces the cross-field contract:
    a contradicted claim carries a suggested fix, and every ``{{n}}``
    marker in the explanation matches exactly one cited source while
    every cited source is referenced at least once.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    status: ClaimStatus = Field(
        ...,
        description=(
            "supported: credible sources directly confirm the claim; "
            "contradicted: reliable sources directly disprove it; "
            "debated: credible sources conflict with each other; "
            "insufficient-information: the sources do not settle it either way"
        ),
    )
    confidence: int = Field(..., ge=0, le=100, description="Overall certainty in the verdict (0-100)")
    explanation: str = Field(
        ...,
        min_length=1,
        description="Reasoning behind the verdict, citing sources inline as {{1}}, {{2}}, ...",
    )
    suggested_fix: Optional[str] = Field(
        None,
        description=(
            "Required when contradicted: a neutral corrected version of the claim "
            "that incorporates the counter-evidence"
        ),
    )
    cited_sources: List[CitedSource] = Field(
        default_factory=list,
        description="One entry per source referenced in the explanation",
    )

    @field_validator("status", mode="before")
    @classmethod
    def _normalize_status(cls, value):
        return normalize_token(value)

    @model_validator(mode="after")
    def _check_contract(self) -> "VerificationResult":
        if self.status is ClaimStatus.NOT_YET_VERIFIED:
            raise ValueError("status must be a verdict, not 'not-yet-verified'")

        if self.status is ClaimStatus.CONTRADICTED and not (self.suggested_fix or "").strip():
            raise ValueError("suggestedFix is required when status is 'contradicted'")

        numbers = [cited.source_number for cited in self.cited_sources]
        duplicates = sorted({n for n in numbers if numbers.count(n) > 1})
        if duplicates:
            raise ValueError(f"citedSources lists source numbers more than once: {duplicates}")

        dangling = find_dangling_citations(self.explanation, numbers)
        if dangling:
            raise ValueError(f"explanation cites sources missing from citedSources: {dangling}")

        orphans = find_orphan_sources(self.explanation, numbers)
        if orphans:
            raise ValueError(f"citedSources entries never referenced in explanation: {orphans}")

        return self
