"""Pipeline configuration management."""

import logging
import os
from typing import Literal, Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


def _optional_int(value: Optional[str]) -> Optional[int]:
    if value is None or value.strip().lower() in ("", "none"):
        return None
    return int(value)


class PipelineConfig(BaseModel):
    """Configuration for the claim checking pipeline."""

    max_claims: Optional[int] = Field(default=5, ge=1, description="Claims kept per submission, None for no cap")
    results_per_claim: int = Field(default=3, ge=1, le=10, description="Sources retrieved per claim")
    excerpt_length: int = Field(default=300, ge=1, description="Characters kept from each source")
    max_concurrency: int = Field(default=5, ge=1, description="Claims processed at the same time")
    call_timeout: float = Field(default=45.0, gt=0, description="Seconds allowed per external call")
    search_field: Literal["search_query", "claim_text"] = Field(
        default="search_query", description="Claim field used as the search query"
    )
    max_text_length: int = Field(default=5000, ge=1, description="Maximum characters accepted for extraction")
    min_submission_length: int = Field(default=50, ge=1, description="Minimum characters for a stored submission")
    text_generator: str = Field(default="openai", description="Registered text-generation provider")
    search_provider: str = Field(default="exa", description="Registered search provider")
    submission_ttl: int = Field(default=86400, ge=1, description="Seconds a stored submission is kept")
    submission_maxsize: int = Field(default=1000, ge=1, description="Maximum stored submissions")

    @classmethod
    def from_env(cls) -> "PipelineConfig":
        """Create configuration from environment variables."""
        config = cls(
            max_claims=_optional_int(os.getenv("CLAIMS_MAX_PER_SUBMISSION", "5")),
            results_per_claim=int(os.getenv("CLAIMS_RESULTS_PER_CLAIM", "3")),
            excerpt_length=int(os.getenv("CLAIMS_EXCERPT_LENGTH", "300")),
            max_concurrency=int(os.getenv("CLAIMS_MAX_CONCURRENCY", "5")),
            call_timeout=float(os.getenv("CLAIMS_CALL_TIMEOUT", "45")),
            search_field=os.getenv("CLAIMS_SEARCH_FIELD", "search_query"),
            max_text_length=int(os.getenv("CLAIMS_MAX_TEXT_LENGTH", "5000")),
            min_submission_length=int(os.getenv("CLAIMS_MIN_SUBMISSION_LENGTH", "50")),
            text_generator=os.getenv("CLAIMS_TEXT_GENERATOR", "openai"),
            search_provider=os.getenv("CLAIMS_SEARCH_PROVIDER", "exa"),
            submission_ttl=int(os.getenv("CLAIMS_SUBMISSION_TTL", "86400")),
            submission_maxsize=int(os.getenv("CLAIMS_SUBMISSION_MAXSIZE", "1000")),
        )
        logger.info(
            f"⚙️ Pipeline config: max_claims={config.max_claims}, "
            f"results_per_claim={config.results_per_claim}, "
            f"max_concurrency={config.max_concurrency}, search_field={config.search_field}"
        )
        return config
