"""In-process submission store backed by a TTL cache."""

import logging
from typing import List, Optional

from cachetools import TTLCache

from ...domain.models.claim import Claim
from ...domain.models.submission import Submission
from ...domain.ports.submission_store import SubmissionStore

logger = logging.getLogger(__name__)


class InMemorySubmissionStore(SubmissionStore):
    """Keeps submissions in memory until they expire.

    Suitable for a single process; durable storage is provided elsewhere.
    """

    def __init__(self, maxsize: int = 1000, ttl: int = 86400):
        """Initialize the store.

        Args:
            maxsize: Maximum number of submissions kept
            ttl: Seconds a submission is kept
        """
        self._cache: TTLCache = TTLCache(maxsize=maxsize, ttl=ttl)

    async def save_submission(self, submission: Submission) -> Submission:
        """Persist a new submission."""
        self._cache[submission.id] = submission
        logger.info(f"💾 Stored submission {submission.id} ({len(submission.content)} chars)")
        return submission

    async def get_submission(self, submission_id: str) -> Optional[Submission]:
        """Get a submission by id, or ``None`` if unknown or expired."""
        return self._cache.get(submission_id)

    async def save_claims(self, submission_id: str, claims: List[Claim]) -> None:
        """Attach the latest checked claims to a submission."""
        submission = self._cache.get(submission_id)
        if submission is None:
            raise KeyError(f"Submission '{submission_id}' not found")
        self._cache[submission_id] = submission.model_copy(update={"claims": list(claims)})

    def __len__(self) -> int:
        return len(self._cache)
