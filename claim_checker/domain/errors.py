"""Exceptions raised by the claim checking pipeline."""

import json
from typing import Any, Optional

from pydantic import ValidationError


class ClaimCheckerError(Exception):
    """Base class for all claim checker errors."""


class SchemaViolationError(ClaimCheckerError):
    """Structured output failed validation against its expected shape."""

    def __init__(self, schema_name: str, data: Any, errors: list[dict]):
        self.schema_name = schema_name
        self.data = data
        self.errors = errors
        super().__init__(self._format())

    @classmethod
    def from_validation_error(
        cls, schema_name: str, data: Any, error: ValidationError
    ) -> "SchemaViolationError":
        """Build from a pydantic ``ValidationError``."""
        return cls(schema_name, data, error.errors(include_url=False))

    def _format(self) -> str:
        lines = []
        for error in self.errors:
            path = ".".join(str(part) for part in error.get("loc", ()))
            if path:
                value = _dump(error.get("input"))
                lines.append(f"Value at {path}: {value} - {error.get('msg')}")
            else:
                lines.append(f"undefined - {error.get('msg')}")
        return (
            f"Invalid {self.schema_name} format:\n"
            f"Input: {_dump(self.data, indent=2)}\n"
            f"Validation errors:\n" + "\n".join(lines)
        )


class GenerationError(ClaimCheckerError):
    """The text-generation service failed to produce output."""


class SearchError(ClaimCheckerError):
    """The web-search service failed."""


class PipelineError(ClaimCheckerError):
    """Terminal failure of a pipeline entry point.

    Args:
        stage: ``"extraction"`` or ``"search_and_verify"``
        cause: Human-readable description of the underlying failure
    """

    _PREFIXES = {
        "extraction": "Failed to extract claims | ",
        "search_and_verify": "Search and verify failed: ",
    }

    def __init__(self, stage: str, cause: str, original: Optional[BaseException] = None):
        self.stage = stage
        self.cause = cause
        self.original = original
        super().__init__(f"{self._PREFIXES.get(stage, f'{stage} failed: ')}{cause}")


def _dump(value: Any, indent: Optional[int] = None) -> str:
    try:
        return json.dumps(value, indent=indent, default=str)
    except (TypeError, ValueError):
        return repr(value)
