"""
FastAPI Dependencies — Shared singletons injected via Depends().

The guardian holds the registry snapshot; refreshing it means dropping the
cached instance so the next request builds a new one.
"""

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends

from apiguard.audit.logger import AuditLogger
from apiguard.cache.file_cache import FileCache
from apiguard.engine.guardian import APIGuardian
from apiguard.workers.batch_worker import BatchWorker


@lru_cache
def get_file_cache() -> FileCache:
    """Shared review cache singleton."""
    return FileCache()


@lru_cache
def get_audit_logger() -> AuditLogger:
    """Shared audit logger singleton."""
    return AuditLogger()


@lru_cache
def get_guardian() -> APIGuardian:
    """Shared engine singleton (rule set + registry snapshot)."""
    return APIGuardian(cache=get_file_cache())


def get_batch_worker(
    guardian: APIGuardian = Depends(get_guardian),
    audit_logger: AuditLogger = Depends(get_audit_logger),
) -> BatchWorker:
    """Batch worker bound to the current engine."""
    return BatchWorker(guardian, audit_logger=audit_logger)


def reset_guardian() -> APIGuardian:
    """Discard the current engine and cached reviews, then build a fresh one."""
    get_guardian.cache_clear()
    get_file_cache().clear()
    return get_guardian()
