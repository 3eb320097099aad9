"""Domain models for factual claims."""

from enum import Enum
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .source import MergedSource, normalize_token


class ClaimStatus(str, Enum):
    """Lifecycle status of a claim."""

    NOT_YET_VERIFIED = "not-yet-verified"
    SUPPORTED = "supported"
    CONTRADICTED = "contradicted"
    DEBATED = "debated"
    INSUFFICIENT_INFORMATION = "insufficient-information"

    @property
    def is_terminal(self) -> bool:
        """Whether verification has produced this status."""
        return self is not ClaimStatus.NOT_YET_VERIFIED


class ExtractedClaim(BaseModel):
    """A claim as returned by extraction, before it is anchored to the text."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    claim: str = Field(
        ...,
        min_length=1,
        description=(
            "A self-contained restatement of the assertion. Resolve every pronoun, "
            "expand abbreviations and name the subject explicitly so the claim can be "
            "verified without reading the source text."
        ),
    )
    exact_text: str = Field(
        ...,
        min_length=1,
        description=(
            "The exact, continuous substring of the original text that contains the claim, "
            "copied verbatim (5-25 words). Never join separate fragments."
        ),
    )
    search_query: str = Field(
        ...,
        min_length=1,
        description=(
            "A question starting with What/How/Does/Is that includes the concrete "
            "entities and numbers of the claim, phrased to retrieve verifying evidence."
        ),
    )


class ExtractionResult(BaseModel):
    """Envelope for the claims returned by one extraction call."""

    claims: List[ExtractedClaim] = Field(
        default_factory=list,
        description="Every verifiable factual claim found in the text, in reading order",
    )


class Claim(BaseModel):
    """A claim anchored to its source text, optionally carrying its verdict."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "exactText": "The Eiffel Tower is 330 meters tall.",
                "claimText": "The Eiffel Tower's height is 330 meters.",
                "start": 0,
                "end": 36,
                "searchQuery": "What is the height of the Eiffel Tower in meters?",
                "status": "not-yet-verified",
                "confidence": None,
                "explanation": None,
                "sources": [],
            }
        },
    )

    id: int = Field(..., ge=1, description="1-based id, unique within a submission")
    exact_text: str = Field(..., min_length=1, description="Verbatim anchor in the source text")
    claim_text: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("claimText", "claim_text", "claim"),
        serialization_alias="claimText",
        description="Self-contained restatement of the assertion",
    )
    start: int = Field(..., ge=0, description="Offset of the anchor start")
    end: int = Field(..., ge=1, description="Offset one past the anchor end")
    search_query: str = Field(..., min_length=1, description="Question used to retrieve evidence")
    status: ClaimStatus = Field(default=ClaimStatus.NOT_YET_VERIFIED)
    confidence: Optional[int] = Field(default=None, ge=0, le=100)
    explanation: Optional[str] = Field(default=None, description="Verdict explanation with {{n}} markers")
    suggested_fix: Optional[str] = Field(default=None, description="Corrected claim when contradicted")
    sources: List[MergedSource] = Field(default_factory=list)
    error: Optional[str] = Field(default=None, description="Set when a stage failed for this claim")

    @field_validator("status", mode="before")
    @classmethod
    def _normalize_status(cls, value):
        return normalize_token(value)

    @model_validator(mode="after")
    def _check_span(self) -> "Claim":
        if self.start >= self.end:
            raise ValueError(f"start ({self.start}) must be less than end ({self.end})")
        if self.end - self.start != len(self.exact_text):
            raise ValueError("span length does not match exact_text length")
        return self

    @property
    def is_verified(self) -> bool:
        """Whether the claim has reached a terminal status."""
        return self.status.is_terminal

    @property
    def is_degraded(self) -> bool:
        """Whether a stage failed while processing this claim."""
        return self.error is not None
