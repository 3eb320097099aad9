"""Protocol for submission storage."""

from typing import List, Optional, Protocol

from ..models.claim import Claim
from ..models.submission import Submission


class SubmissionStore(Protocol):
    """Read/write access to submitted text."""

    async def save_submission(self, submission: Submission) -> Submission:
        """Persist a new submission."""
        ...

    async def get_submission(self, submission_id: str) -> Optional[Submission]:
        """Get a submission by id, or ``None`` if unknown."""
        ...

    async def save_claims(self, submission_id: str, claims: List[Claim]) -> None:
        """Attach the latest checked claims to a submission."""
        ...
