"""
Review Data Models — Per-file review results, line changes and batch totals.
"""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field

from apiguard.models.rule_models import Severity, Violation


class ReviewStatus(str, Enum):
    APPROVED = "approved"
    NEEDS_CHANGES = "needs-changes"
    ERROR = "error"


class LineChange(BaseModel):
    """One entry of the line-index diff between original and remediated text."""

    kind: Literal["removed", "added", "modified"]
    line: int = Field(..., description="1-based line number")
    before: str | None = None
    after: str | None = None

    def __str__(self) -> str:
        if self.kind == "removed":
            return f"- Line {self.line}: {self.before}"
        if self.kind == "added":
            return f"+ Line {self.line}: {self.after}"
        return f"~ Line {self.line}: {self.before} -> {self.after}"


class ReviewResult(BaseModel):
    """Outcome of reviewing a single file."""

    file_path: str = ""
    status: ReviewStatus
    violations: list[Violation] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
    remediated_text: str | None = Field(
        default=None, description="Corrected source, present only when violations exist"
    )
    changes: list[LineChange] = Field(default_factory=list)
    explanation: str = ""

    @property
    def errors(self) -> list[Violation]:
        return [v for v in self.violations if v.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[Violation]:
        return [v for v in self.violations if v.severity == Severity.WARNING]

    @property
    def has_fix(self) -> bool:
        """True when remediation produced text different from the reviewed source."""
        return self.remediated_text is not None and bool(self.changes)


class BatchResult(BaseModel):
    """Aggregate statistics of a project-wide scan."""

    total_files: int = 0
    approved_count: int = 0
    violation_count: int = 0
    fixed_count: int = 0
    failed_count: int = 0
    failures: dict[str, str] = Field(
        default_factory=dict, description="Map of file path -> failure reason"
    )
    report: str = ""

    @property
    def success_rate(self) -> float | None:
        if self.total_files == 0:
            return None
        return self.approved_count / self.total_files * 100


class AuditEntry(BaseModel):
    """Audit metadata for a batch operation."""

    scan_id: str
    operation: Literal["scan", "fix"] = "scan"
    files_scanned: int = 0
    approved: int = 0
    violations_found: int = 0
    fixed: int = 0
    failed: int = 0
    duration_ms: float = 0.0
