"""
Batch Worker — Sequential project-wide review and write-back.

Pipeline per file:
1. Read the file (only when it is that file's turn)
2. Review it against the guardian's rule set and registry snapshot
3. Optionally write the remediated text back to the same path
4. Accumulate totals; a failing file is recorded and the batch continues

Files are never processed in parallel. The registry is a snapshot taken
before the batch started, and earlier write-backs in the same run must be
on disk before a later file is read.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path

from apiguard.audit.logger import AuditLogger, new_scan_id
from apiguard.config import settings
from apiguard.core.operations import normalize_path
from apiguard.core.registry import list_files
from apiguard.engine.guardian import APIGuardian, read_source
from apiguard.engine.reporter import format_batch_report
from apiguard.models.review_models import BatchResult, ReviewResult, ReviewStatus

logger = logging.getLogger("apiguard.worker")


class BatchWorker:
    """Runs the guardian over many files, one at a time."""

    def __init__(
        self,
        guardian: APIGuardian,
        audit_logger: AuditLogger | None = None,
        max_file_size_bytes: int | None = None,
    ) -> None:
        self.guardian = guardian
        self.audit_logger = audit_logger
        self.max_file_size_bytes = (
            guardian.max_file_size_bytes
            if max_file_size_bytes is None
            else max_file_size_bytes
        )

    def _read(self, path: Path) -> str:
        return read_source(path, self.max_file_size_bytes)

    def endpoint_files(self) -> list[Path]:
        return list_files(self.guardian.endpoint_dir, settings.endpoint_glob)

    def review_multiple(self, paths: list[str | Path]) -> dict[str, ReviewResult]:
        """
        Review each path in order.

        Unreadable or oversized files yield a result with status "error"
        instead of aborting the remaining files.
        """
        results: dict[str, ReviewResult] = {}
        for file_path in paths:
            path = Path(file_path)
            key = path.as_posix()
            try:
                code = self._read(path)
            except (OSError, ValueError) as e:
                logger.warning(f"Cannot review {key}: {e}")
                results[key] = ReviewResult(
                    file_path=key,
                    status=ReviewStatus.ERROR,
                    explanation=f"Failed to read file: {e}",
                )
                continue
            results[key] = self.guardian.review(code, key)
        return results

    def _write_back(self, path: Path, result: ReviewResult) -> bool:
        if result.status != ReviewStatus.NEEDS_CHANGES or not result.has_fix:
            return False
        path.write_text(result.remediated_text, encoding="utf-8")
        if self.guardian.cache is not None:
            self.guardian.cache.invalidate(normalize_path(path))
        logger.info(f"Wrote {len(result.changes)} line change(s) to {path.as_posix()}")
        return True

    def auto_fix(self, file_path: str | Path) -> bool:
        """
        Review a file and write the remediated text back.

        Returns:
            True iff a remediated version different from the original was written.

        Raises:
            OSError: if the file cannot be read or written.
            ValueError: if the file is not UTF-8 or exceeds the size limit.
        """
        start = time.monotonic()
        path = Path(file_path)
        result = self.guardian.review(self._read(path), path.as_posix())
        fixed = self._write_back(path, result)

        if self.audit_logger is not None:
            self.audit_logger.log_fix(
                new_scan_id(),
                violations_found=len(result.violations),
                fixed=fixed,
                duration_ms=(time.monotonic() - start) * 1000,
            )
        return fixed

    def scan_project(self, auto_fix: bool = False) -> BatchResult:
        """
        Review every endpoint file, optionally writing fixes back.

        Args:
            auto_fix: Write remediated text back for files that need changes

        Returns:
            BatchResult with totals and a formatted report.
        """
        scan_id = new_scan_id()
        start = time.monotonic()
        files = self.endpoint_files()
        batch = BatchResult(total_files=len(files))

        logger.info(f"[{scan_id}] Scanning {len(files)} files (auto_fix={auto_fix})")

        for path in files:
            key = path.as_posix()
            try:
                code = self._read(path)
                result = self.guardian.review(code, key)
                if result.status == ReviewStatus.APPROVED:
                    batch.approved_count += 1
                    continue
                batch.violation_count += 1
                if auto_fix and self._write_back(path, result):
                    batch.fixed_count += 1
            except (OSError, ValueError) as e:
                logger.warning(f"[{scan_id}] Failed on {key}: {e}")
                batch.failed_count += 1
                batch.failures[key] = str(e)

        batch.report = format_batch_report(batch)
        duration_ms = (time.monotonic() - start) * 1000
        logger.info(
            f"[{scan_id}] Scan complete: {batch.approved_count} approved, "
            f"{batch.violation_count} with violations, {batch.fixed_count} fixed, "
            f"{batch.failed_count} failed ({duration_ms:.1f}ms)"
        )

        if self.audit_logger is not None:
            self.audit_logger.log_scan(scan_id, batch, duration_ms)
        return batch
