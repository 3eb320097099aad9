"""Scanner for the ``{{n}}`` citation markers embedded in explanations."""

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional

CITATION_PATTERN = re.compile(r"\{\{(\d+)\}\}")


@dataclass(frozen=True)
class ExplanationToken:
    """A literal run of text or a reference to a source."""

    text: str
    source_number: Optional[int] = None

    @property
    def is_citation(self) -> bool:
        return self.source_number is not None


def tokenize_explanation(explanation: str) -> List[ExplanationToken]:
    """Split an explanation into alternating literal and citation tokens.

    Empty literal runs are omitted, so ``"{{1}}{{2}}"`` yields two
    citation tokens and nothing else.
    """
    tokens: List[ExplanationToken] = []
    parts = CITATION_PATTERN.split(explanation or "")
    for index, part in enumerate(parts):
        if index % 2:
            tokens.append(ExplanationToken(text=f"{{{{{part}}}}}", source_number=int(part)))
        elif part:
            tokens.append(ExplanationToken(text=part))
    return tokens


def cited_numbers(explanation: str) -> List[int]:
    """Source numbers referenced in ``explanation``, in order of first use."""
    seen: List[int] = []
    for match in CITATION_PATTERN.finditer(explanation or ""):
        number = int(match.group(1))
        if number not in seen:
            seen.append(number)
    return seen


def find_dangling_citations(explanation: str, source_numbers: Iterable[int]) -> List[int]:
    """Markers in ``explanation`` with no matching source number."""
    available = set(source_numbers)
    return [n for n in cited_numbers(explanation) if n not in available]


def find_orphan_sources(explanation: str, source_numbers: Iterable[int]) -> List[int]:
    """Source numbers never referenced by a marker in ``explanation``."""
    referenced = set(cited_numbers(explanation))
    orphans: List[int] = []
    for number in source_numbers:
        if number not in referenced and number not in orphans:
            orphans.append(number)
    return orphans


def strip_citations(explanation: str) -> str:
    """Remove every marker, e.g. for plain-text output."""
    return " ".join(CITATION_PATTERN.sub("", explanation or "").split())
