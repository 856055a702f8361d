"""
Scan Routes — POST /scan, GET /stats, GET /audit

Scans walk the endpoint tree sequentially and may write to disk, so the
handlers are plain functions run in FastAPI's thread pool.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query

from apiguard.api.dependencies import get_audit_logger, get_batch_worker
from apiguard.audit.logger import AuditLogger
from apiguard.models.api_models import ScanRequest
from apiguard.models.review_models import BatchResult
from apiguard.workers.batch_worker import BatchWorker

logger = logging.getLogger("apiguard.api.scan")
router = APIRouter()


@router.post("/scan", response_model=BatchResult)
def scan_project(
    req: ScanRequest,
    worker: BatchWorker = Depends(get_batch_worker),
):
    """Review every endpoint file; write fixes back when auto_fix is set."""
    return worker.scan_project(auto_fix=req.auto_fix)


@router.get("/stats", response_model=BatchResult)
def project_stats(worker: BatchWorker = Depends(get_batch_worker)):
    """Project totals without any write-back."""
    return worker.scan_project(auto_fix=False)


@router.get("/audit")
def recent_audit(
    count: int = Query(default=50, ge=1, le=1000),
    operation: str | None = Query(default=None, pattern="^(scan|fix)$"),
    audit_logger: AuditLogger = Depends(get_audit_logger),
):
    """Most recent audit entries."""
    return {"entries": audit_logger.read_recent(count, operation)}
