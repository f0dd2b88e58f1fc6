"""
Import run models.

Violations from validation, upsert outcomes and per-run summaries.
"""

from typing import Any, Optional
from enum import Enum
from pydantic import BaseModel, Field

from models.perfume import PerfumeCandidate


class Violation(BaseModel):
    """One constraint a candidate record failed."""

    field: str
    constraint: str = Field(description="required, range")
    message: str
    value: Optional[Any] = None


class RejectedRecord(BaseModel):
    """Candidate dropped by validation, kept for reporting."""

    row: int = Field(description="1-based position in the source")
    name: Optional[str] = None
    violations: list[Violation] = Field(default_factory=list)

    @property
    def reason(self) -> str:
        return "; ".join(v.message for v in self.violations)


class UpsertAction(str, Enum):
    """What the dispatcher did with a record."""
    INSERT = "insert"
    UPDATE = "update"
    FAILED = "failed"


class UpsertOutcome(BaseModel):
    """Result of upserting one candidate."""

    action: UpsertAction
    perfume_id: Optional[str] = None
    error: Optional[str] = None


class BatchReport(BaseModel):
    """Counts for one dispatched batch."""

    batch_number: int
    size: int = 0
    inserted: int = 0
    updated: int = 0
    failed: int = 0


class DispatchResult(BaseModel):
    """Totals across all batches of one dispatch."""

    inserted: int = 0
    updated: int = 0
    failed: int = 0
    batches: list[BatchReport] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)

    @property
    def processed(self) -> int:
        return self.inserted + self.updated + self.failed


class ImportSummary(BaseModel):
    """
    Summary printed at the end of a run and returned by the API.

    found: raw rows / result items seen
    mapped: candidates that passed validation
    skipped: rejected + failed
    """

    source: str
    dry_run: bool = False
    found: int = 0
    mapped: int = 0
    rejected: int = 0
    inserted: int = 0
    updated: int = 0
    failed: int = 0
    pages_failed: int = 0
    candidates: list[PerfumeCandidate] = Field(default_factory=list)
    rejections: list[RejectedRecord] = Field(default_factory=list)

    @property
    def skipped(self) -> int:
        return self.rejected + self.failed

    def apply_dispatch(self, result: DispatchResult) -> None:
        self.inserted += result.inserted
        self.updated += result.updated
        self.failed += result.failed

    def add(self, other: "ImportSummary") -> None:
        """Accumulate a per-query summary into a run total."""
        self.found += other.found
        self.mapped += other.mapped
        self.rejected += other.rejected
        self.inserted += other.inserted
        self.updated += other.updated
        self.failed += other.failed
        self.pages_failed += other.pages_failed
        self.candidates.extend(other.candidates)
        self.rejections.extend(other.rejections)

    def summary_line(self) -> str:
        return (
            f"Found={self.found}, mapped={self.mapped}, inserted={self.inserted}, "
            f"updated={self.updated}, skipped={self.skipped}"
            + (f", pages_failed={self.pages_failed}" if self.pages_failed else "")
            + (" (dry run)" if self.dry_run else "")
        )

    def to_dict(self) -> dict:
        """API response shape."""
        data = self.model_dump(mode="json", exclude={"candidates", "rejections"})
        data["skipped"] = self.skipped
        data["candidates"] = [
            c.model_dump(mode="json", exclude_none=True) for c in self.candidates
        ]
        data["rejections"] = [
            {"row": r.row, "name": r.name, "reason": r.reason} for r in self.rejections
        ]
        return data


class ImageRefreshSummary(BaseModel):
    """Counts for image refresh and override runs."""

    total: int = 0
    updated: int = 0
    skipped: int = 0
    not_found: int = 0
    failed: int = 0

    def summary_line(self) -> str:
        return (
            f"Updated {self.updated}/{self.total} "
            f"(skipped={self.skipped}, not_found={self.not_found}, failed={self.failed})"
        )
