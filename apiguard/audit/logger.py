"""
Audit Logger — JSON-lines trail of batch scans and write-backs.

One record per project scan or single-file auto-fix. Audit failures are
logged and swallowed: losing an audit line must never fail a scan.
"""

from __future__ import annotations

import json
import logging
import time
import uuid
from pathlib import Path

from apiguard.config import settings
from apiguard.models.review_models import AuditEntry, BatchResult

logger = logging.getLogger("apiguard.audit")


def new_scan_id() -> str:
    return str(uuid.uuid4())[:8]


class AuditLogger:
    """Appends AuditEntry records to a JSON-lines file."""

    def __init__(self, log_path: str | Path | None = None) -> None:
        self.log_path = Path(log_path or settings.audit_log_path)

    def log(self, entry: AuditEntry) -> None:
        record = {
            "timestamp": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
            **entry.model_dump(),
        }
        try:
            with open(self.log_path, "a", encoding="utf-8") as f:
                f.write(json.dumps(record) + "\n")
        except OSError as e:
            logger.error(f"Failed to write audit log {self.log_path}: {e}")

    def log_scan(self, scan_id: str, batch: BatchResult, duration_ms: float) -> AuditEntry:
        """Record the totals of a project scan."""
        entry = AuditEntry(
            scan_id=scan_id,
            operation="scan",
            files_scanned=batch.total_files,
            approved=batch.approved_count,
            violations_found=batch.violation_count,
            fixed=batch.fixed_count,
            failed=batch.failed_count,
            duration_ms=round(duration_ms, 2),
        )
        self.log(entry)
        return entry

    def log_fix(
        self,
        scan_id: str,
        violations_found: int,
        fixed: bool,
        duration_ms: float,
    ) -> AuditEntry:
        """Record a single-file auto-fix attempt."""
        entry = AuditEntry(
            scan_id=scan_id,
            operation="fix",
            files_scanned=1,
            approved=0 if violations_found else 1,
            violations_found=violations_found,
            fixed=1 if fixed else 0,
            duration_ms=round(duration_ms, 2),
        )
        self.log(entry)
        return entry

    def read_recent(self, count: int = 50, operation: str | None = None) -> list[dict]:
        """
        Most recent entries, oldest first.

        Corrupt lines are skipped. An unreadable or missing log reads as empty.
        """
        if count <= 0 or not self.log_path.exists():
            return []

        entries: list[dict] = []
        try:
            with open(self.log_path, encoding="utf-8") as f:
                for raw in f:
                    raw = raw.strip()
                    if not raw:
                        continue
                    try:
                        record = json.loads(raw)
                    except json.JSONDecodeError:
                        continue
                    if operation is None or record.get("operation") == operation:
                        entries.append(record)
        except OSError as e:
            logger.warning(f"Cannot read audit log {self.log_path}: {e}")
            return []

        return entries[-count:]
