"""
Health & Registry Routes — GET /health, POST /registry/refresh
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from apiguard.api.dependencies import get_guardian, reset_guardian
from apiguard.engine.guardian import APIGuardian
from apiguard.models.api_models import RegistryInfo

logger = logging.getLogger("apiguard.api.health")
router = APIRouter()

VERSION = "1.0.0"


def _registry_info(guardian: APIGuardian) -> RegistryInfo:
    return RegistryInfo(
        operations=guardian.registry.operation_count,
        services=guardian.registry.service_count,
        endpoint_dir=guardian.endpoint_dir.as_posix(),
        service_dir=guardian.service_dir.as_posix(),
    )


@router.get("/health")
async def health(guardian: APIGuardian = Depends(get_guardian)):
    """Health check endpoint."""
    return {
        "status": "ok",
        "version": VERSION,
        "registry": _registry_info(guardian).model_dump(),
        "cache": guardian.cache.stats() if guardian.cache is not None else None,
    }


@router.post("/registry/refresh", response_model=RegistryInfo)
def refresh_registry():
    """Rebuild the engine so the registry reflects the current file tree."""
    guardian = reset_guardian()
    info = _registry_info(guardian)
    logger.info(
        f"Registry refreshed: {info.operations} operations, {info.services} services"
    )
    return info
