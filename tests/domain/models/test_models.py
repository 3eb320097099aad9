"""Tests for domain models."""

import pytest
from pydantic import ValidationError

from claim_checker.domain.models.claim import Claim, ClaimStatus
from claim_checker.domain.models.source import CitedSource, SourceStance
from claim_checker.domain.models.submission import Submission, split_into_sentences
from claim_checker.domain.models.verification import VerificationResult


def _cited(number: int) -> dict:
    return {
        "sourceNumber": number,
        "stance": "support",
        "agreementPercentage": 90,
        "pertinence": 80,
        "relevantSnippet": "quote",
    }


class TestClaim:
    """Tests for the positioned claim model."""

    def test_accepts_wire_names(self):
        """Test that camelCase and the short claim key are accepted."""
        claim = Claim.model_validate({
            "id": 1,
            "exactText": "The sky is blue.",
            "claim": "The daytime sky is blue.",
            "start": 0,
            "end": 16,
            "searchQuery": "Is the sky blue?",
        })

        assert claim.claim_text == "The daytime sky is blue."
        assert claim.status == ClaimStatus.NOT_YET_VERIFIED
        assert not claim.is_verified

    def test_serializes_camel_case(self, eiffel_claims):
        """Test the wire representation."""
        data = eiffel_claims[0].model_dump(by_alias=True, mode="json")

        assert data["claimText"] == "The Eiffel Tower's height is 330 meters."
        assert data["exactText"] == "The Eiffel Tower is 330 meters tall."
        assert data["searchQuery"].startswith("What is the height")
        assert data["status"] == "not-yet-verified"
        assert data["suggestedFix"] is None

    def test_rejects_bad_span(self):
        """Test that spans must match the anchor length."""
        with pytest.raises(ValidationError):
            Claim(id=1, exact_text="abc", claim_text="A.", start=0, end=5, search_query="q?")
        with pytest.raises(ValidationError):
            Claim(id=1, exact_text="abc", claim_text="A.", start=3, end=3, search_query="q?")

    def test_rejects_zero_id(self):
        """Test that ids are 1-based."""
        with pytest.raises(ValidationError):
            Claim(id=0, exact_text="abc", claim_text="A.", start=0, end=3, search_query="q?")

    def test_status_tokens_are_normalized(self):
        """Test that spaced or underscored status tokens are accepted."""
        claim = Claim(
            id=1, exact_text="abc", claim_text="A.", start=0, end=3, search_query="q?",
            status="Insufficient Information",
        )

        assert claim.status == ClaimStatus.INSUFFICIENT_INFORMATION
        assert claim.is_verified

    def test_is_frozen(self, eiffel_claims):
        """Test that claims are immutable."""
        with pytest.raises(ValidationError):
            eiffel_claims[0].status = ClaimStatus.SUPPORTED


class TestVerificationResult:
    """Tests for the verdict contract."""

    def test_valid_verdict(self):
        """Test a well-formed verdict."""
        result = VerificationResult.model_validate({
            "status": "supported",
            "confidence": 88,
            "explanation": "Confirmed by {{1}} and {{2}}.",
            "citedSources": [_cited(1), _cited(2)],
        })

        assert result.status == ClaimStatus.SUPPORTED
        assert result.cited_sources[0].stance == SourceStance.SUPPORT

    def test_contradicted_requires_fix(self):
        """Test that a contradicted verdict needs a suggested fix."""
        data = {
            "status": "contradicted",
            "confidence": 70,
            "explanation": "Refuted by {{1}}.",
            "citedSources": [_cited(1)],
        }
        with pytest.raises(ValidationError):
            VerificationResult.model_validate(data)

        result = VerificationResult.model_validate({**data, "suggestedFix": "Corrected claim."})
        assert result.suggested_fix == "Corrected claim."

    @pytest.mark.parametrize(
        "explanation,numbers",
        [
            ("Cites {{1}} and {{2}}.", [1]),
            ("Cites {{1}} only.", [1, 2]),
            ("Cites {{1}}.", [1, 1]),
        ],
    )
    def test_citation_contract(self, explanation, numbers):
        """Test dangling markers, orphan sources and duplicate numbers."""
        with pytest.raises(ValidationError):
            VerificationResult.model_validate({
                "status": "debated",
                "confidence": 50,
                "explanation": explanation,
                "citedSources": [_cited(n) for n in numbers],
            })

    def test_rejects_pending_status(self):
        """Test that a verdict cannot be not-yet-verified."""
        with pytest.raises(ValidationError):
            VerificationResult(status="not-yet-verified", confidence=0, explanation="x")

    def test_rejects_out_of_range_confidence(self):
        """Test confidence bounds."""
        with pytest.raises(ValidationError):
            VerificationResult(status="supported", confidence=101, explanation="x")

    def test_no_citations(self):
        """Test that a verdict may cite nothing."""
        result = VerificationResult(status="insufficient information", confidence=5, explanation="Nothing found.")

        assert result.status == ClaimStatus.INSUFFICIENT_INFORMATION
        assert result.cited_sources == []


def test_cited_source_stance_normalization():
    """Test that stance tokens are normalized."""
    cited = CitedSource.model_validate({**_cited(1), "stance": "Not Relevant"})

    assert cited.stance == SourceStance.NOT_RELEVANT


def test_split_into_sentences():
    """Test sentence splitting."""
    assert split_into_sentences("One. Two! Three?") == ["One.", " Two!", " Three?"]
    assert split_into_sentences("no punctuation") == ["no punctuation"]


def test_submission_create():
    """Test creating a submission from content."""
    submission = Submission.create("First sentence here. Second one follows!")

    assert submission.id
    assert submission.sentences == ["First sentence here.", " Second one follows!"]
    assert submission.claims == []
