"""
Review Routes — POST /review, POST /review/file, POST /fix
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from apiguard.api.dependencies import get_batch_worker, get_guardian
from apiguard.engine.guardian import APIGuardian, FileTooLargeError, check_size
from apiguard.models.api_models import FileRequest, FixResponse, ReviewRequest
from apiguard.models.review_models import ReviewResult
from apiguard.workers.batch_worker import BatchWorker

logger = logging.getLogger("apiguard.api.review")
router = APIRouter()


def _io_error(path: str, exc: Exception) -> HTTPException:
    if isinstance(exc, FileNotFoundError):
        return HTTPException(status_code=404, detail=f"File not found: {path}")
    if isinstance(exc, FileTooLargeError):
        return HTTPException(status_code=413, detail=f"File too large: {path}: {exc}")
    if isinstance(exc, UnicodeDecodeError):
        return HTTPException(status_code=422, detail=f"File is not valid UTF-8: {path}")
    logger.error(f"I/O failure on {path}: {exc}")
    return HTTPException(status_code=500, detail=f"Cannot access {path}: {exc}")


@router.post("/review", response_model=ReviewResult)
async def review_content(
    req: ReviewRequest,
    guardian: APIGuardian = Depends(get_guardian),
):
    """Review supplied source text. Nothing is written to disk."""
    try:
        check_size(len(req.content.encode("utf-8")), guardian.max_file_size_bytes)
    except FileTooLargeError as e:
        raise HTTPException(status_code=413, detail=str(e))
    return guardian.review(req.content, req.path)


@router.post("/review/file", response_model=ReviewResult)
def review_file(
    req: FileRequest,
    guardian: APIGuardian = Depends(get_guardian),
):
    """Review a file on disk."""
    try:
        return guardian.review_file(req.path)
    except (OSError, ValueError) as e:
        raise _io_error(req.path, e)


@router.post("/fix", response_model=FixResponse)
def fix_file(
    req: FileRequest,
    worker: BatchWorker = Depends(get_batch_worker),
):
    """Auto-fix a file on disk, writing the remediated text back."""
    try:
        fixed = worker.auto_fix(req.path)
    except (OSError, ValueError) as e:
        raise _io_error(req.path, e)
    return FixResponse(path=req.path, fixed=fixed)
