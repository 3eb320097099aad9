"""Domain models for evidence sources."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def normalize_token(value):
    """Lowercase an enum token and join its words with hyphens."""
    if isinstance(value, str):
        return "-".join(value.strip().lower().replace("_", " ").split())
    return value


class SourceStance(str, Enum):
    """Relationship of one source to the claim it was retrieved for."""

    SUPPORT = "support"
    CONTRADICT = "contradict"
    NOT_RELEVANT = "not-relevant"
    UNCLEAR = "unclear"


class Source(BaseModel):
    """One search result, ranked within a single claim's evidence set."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    url: str = Field(..., min_length=1, description="Source URL")
    title: Optional[str] = Field(None, description="Page title if the search service returned one")
    source_number: int = Field(..., ge=1, description="1-based rank within this claim's evidence set")
    source_text: str = Field(default="", description="Truncated text excerpt")


class CitedSource(BaseModel):
    """A verifier's assessment of one source it cited."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    source_number: int = Field(..., ge=1, description="Number of the cited source, as used in {{n}} markers")
    stance: SourceStance = Field(
        ..., description="One of: support, contradict, not-relevant, unclear"
    )
    agreement_percentage: int = Field(
        ..., ge=0, le=100, description="How strongly this source agrees with the claim (0-100)"
    )
    pertinence: int = Field(
        ..., ge=0, le=100, description="Topical relevance of this source regardless of stance (0-100)"
    )
    relevant_snippet: str = Field(..., description="Verbatim quote from the source text")

    @field_validator("stance", mode="before")
    @classmethod
    def _normalize_stance(cls, value):
        return normalize_token(value)


class MergedSource(Source):
    """A retrieved source combined with the verifier's assessment of it."""

    stance: SourceStance
    agreement_percentage: int = Field(..., ge=0, le=100)
    pertinence: int = Field(..., ge=0, le=100)
    relevant_snippet: str = ""

    @classmethod
    def merge(cls, source: Source, cited: CitedSource) -> "MergedSource":
        """Combine raw source metadata with a cited assessment."""
        return cls(
            url=source.url,
            title=source.title,
            source_number=cited.source_number,
            source_text=source.source_text,
            stance=cited.stance,
            agreement_percentage=cited.agreement_percentage,
            pertinence=cited.pertinence,
            relevant_snippet=cited.relevant_snippet,
        )
