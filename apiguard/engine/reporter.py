"""
Reporter — Line diffs and human-readable summaries.

The diff compares lines by index, not by content alignment: a transform
that inserts a line shifts every later line into a "modified" entry. It is
an audit trail for people, not a basis for correctness checks.
"""

from __future__ import annotations

from apiguard.models.review_models import BatchResult, LineChange
from apiguard.models.rule_models import Severity, Violation

APPROVED_MESSAGE = "Code follows all API development principles."


def diff_lines(original: str, corrected: str) -> list[LineChange]:
    """Index-by-index comparison of two texts."""
    before = original.split("\n")
    after = corrected.split("\n")
    changes: list[LineChange] = []

    for i in range(max(len(before), len(after))):
        old = before[i] if i < len(before) else None
        new = after[i] if i < len(after) else None
        if old == new:
            continue
        if new is None:
            changes.append(LineChange(kind="removed", line=i + 1, before=old))
        elif old is None:
            changes.append(LineChange(kind="added", line=i + 1, after=new))
        else:
            changes.append(LineChange(kind="modified", line=i + 1, before=old, after=new))

    return changes


def format_changes(changes: list[LineChange], limit: int = 10) -> str:
    lines = [f"  {change}" for change in changes[:limit]]
    if len(changes) > limit:
        lines.append(f"  ... and {len(changes) - limit} more changes")
    return "\n".join(lines)


def render_explanation(violations: list[Violation], suggestions: list[str]) -> str:
    """Summary of errors (with fixes), warnings and suggestions."""
    if not violations:
        return APPROVED_MESSAGE

    errors = [v for v in violations if v.severity == Severity.ERROR]
    warnings = [v for v in violations if v.severity == Severity.WARNING]

    parts = [f"Found {len(violations)} violation(s):"]

    if errors:
        parts.append("")
        parts.append(f"Errors ({len(errors)}):")
        for e in errors:
            parts.append(f"  • {e.message}")
            if e.fix:
                parts.append(f"    Fix: {e.fix}")

    if warnings:
        parts.append("")
        parts.append(f"Warnings ({len(warnings)}):")
        for w in warnings:
            parts.append(f"  • {w.message}")
            if w.fix:
                parts.append(f"    Fix: {w.fix}")

    if suggestions:
        parts.append("")
        parts.append("Suggestions:")
        for s in suggestions:
            parts.append(f"  • {s}")

    return "\n".join(parts) + "\n"


def format_batch_report(batch: BatchResult) -> str:
    rate = batch.success_rate
    lines = [
        "API Guardian Scan Complete:",
        "===========================",
        f"Total Files: {batch.total_files}",
        f"Approved: {batch.approved_count}",
        f"Violations: {batch.violation_count}",
        f"Auto-Fixed: {batch.fixed_count}",
        f"Failed: {batch.failed_count}",
        f"Success Rate: {'n/a' if rate is None else f'{rate:.1f}%'}",
    ]
    for path, reason in batch.failures.items():
        lines.append(f"  ! {path}: {reason}")
    return "\n".join(lines)
