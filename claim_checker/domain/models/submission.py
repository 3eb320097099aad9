"""Domain model for submitted text."""

import re
from datetime import datetime
from typing import List
from uuid import uuid4

from pydantic import BaseModel, Field

from .claim import Claim

SENTENCE_PATTERN = re.compile(r"[^.!?]+[.!?]+")


def split_into_sentences(text: str) -> List[str]:
    """Split text on terminal punctuation, falling back to the whole text."""
    return SENTENCE_PATTERN.findall(text) or [text]


class Submission(BaseModel):
    """A piece of user-submitted text and the claims found in it."""

    id: str = Field(default_factory=lambda: str(uuid4()), description="Submission identifier")
    content: str = Field(..., min_length=1, description="Raw submitted text")
    sentences: List[str] = Field(default_factory=list, description="Content split into sentences")
    claims: List[Claim] = Field(default_factory=list, description="Claims from the latest check")
    created_at: datetime = Field(default_factory=datetime.utcnow)

    @classmethod
    def create(cls, content: str) -> "Submission":
        """Create a submission, splitting its content into sentences."""
        return cls(content=content, sentences=split_into_sentences(content))
