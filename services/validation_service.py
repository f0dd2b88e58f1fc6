"""
Candidate validation.

Pure checks; a candidate with no violations may be upserted.
"""

from typing import Optional
import structlog

from models.perfume import PerfumeCandidate, RATING_MIN, RATING_MAX, PRICE_MAX
from models.ingest import Violation, RejectedRecord

logger = structlog.get_logger(__name__)

REQUIRED_FIELDS = ("name", "brand")
RATING_FIELDS = ("longevity", "sillage", "projection")


def validate_candidate(candidate: PerfumeCandidate) -> list[Violation]:
    """
    List every constraint the candidate violates.

    Checks:
        - name and brand present and non-blank
        - longevity / sillage / projection, when present, in [1, 5]
        - price, when present, in (0, 100000]

    Args:
        candidate: Mapped candidate record

    Returns:
        Violations (empty list when valid)
    """
    violations: list[Violation] = []

    for field_name in REQUIRED_FIELDS:
        value: Optional[str] = getattr(candidate, field_name)
        if not value or not value.strip():
            violations.append(Violation(
                field=field_name,
                constraint="required",
                message=f"{field_name.capitalize()} is required",
            ))

    for field_name in RATING_FIELDS:
        rating: Optional[int] = getattr(candidate, field_name)
        if rating is not None and not (RATING_MIN <= rating <= RATING_MAX):
            violations.append(Violation(
                field=field_name,
                constraint="range",
                message=f"{field_name.capitalize()} must be between {RATING_MIN} and {RATING_MAX}",
                value=rating,
            ))

    if candidate.price is not None and not (0 < candidate.price <= PRICE_MAX):
        violations.append(Violation(
            field="price",
            constraint="range",
            message=f"Price must be greater than 0 and at most {PRICE_MAX}",
            value=candidate.price,
        ))

    return violations


def partition_candidates(
    candidates: list[PerfumeCandidate],
    first_row: int = 1
) -> tuple[list[PerfumeCandidate], list[RejectedRecord]]:
    """
    Split candidates into valid records and rejections.

    Args:
        candidates: Candidates in source order
        first_row: Row number of the first candidate (2 for sheets with a header)

    Returns:
        (valid candidates, rejected records with their violations)
    """
    valid: list[PerfumeCandidate] = []
    rejected: list[RejectedRecord] = []

    for offset, candidate in enumerate(candidates):
        violations = validate_candidate(candidate)
        if not violations:
            valid.append(candidate)
            continue

        record = RejectedRecord(
            row=first_row + offset,
            name=candidate.name,
            violations=violations,
        )
        rejected.append(record)
        logger.warning(
            "candidate_rejected",
            row=record.row,
            name=candidate.name,
            reason=record.reason
        )

    return valid, rejected
