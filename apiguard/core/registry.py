"""
Project Registry Builder — Snapshots declared endpoints and service methods.

Walks the endpoint tree and the service tree once and returns an immutable
ProjectRegistry. The registry is advisory: unreadable directories or files
degrade to "nothing known" instead of failing the build.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

from apiguard.core.operations import (
    ResourceStrategy,
    extract_operations,
    extract_service_methods,
    infer_resource,
    normalize_path,
    service_name_from_path,
)
from apiguard.models.registry_models import ProjectRegistry

logger = logging.getLogger("apiguard.core.registry")

TieBreak = Literal["last", "first"]


def list_files(root: str | Path, pattern: str = "**/*.ts") -> list[Path]:
    """
    Files under root matching pattern, in sorted path order.

    Returns an empty list when root is missing or cannot be walked.
    """
    root_path = Path(root)
    if not root_path.is_dir():
        logger.warning(f"Directory not found or not a directory: {root_path}")
        return []
    try:
        files = [p for p in root_path.glob(pattern) if p.is_file()]
    except OSError as e:
        logger.warning(f"Cannot walk {root_path}: {e}")
        return []
    return sorted(files, key=lambda p: p.as_posix())


def _read(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Skipping unreadable file {path}: {e}")
        return None


def scan_operations(
    endpoint_dir: str | Path,
    pattern: str = "**/*.ts",
    tie_break: TieBreak = "last",
    resource_strategy: ResourceStrategy = infer_resource,
) -> dict[str, str]:
    """Map OperationKey.key -> owning file path for every handler under endpoint_dir."""
    operations: dict[str, str] = {}
    for path in list_files(endpoint_dir, pattern):
        content = _read(path)
        if content is None:
            continue
        owner = normalize_path(path)
        for op in extract_operations(content, path.as_posix(), resource_strategy):
            previous = operations.get(op.key)
            if previous is not None and previous != owner:
                logger.debug(f"Operation {op.key} declared in {previous} and {owner}")
                if tie_break == "first":
                    continue
            operations[op.key] = owner
    return operations


def scan_services(
    service_dir: str | Path,
    pattern: str = "**/*.ts",
    suffix: str = ".service.ts",
) -> dict[str, list[str]]:
    """Map service name -> exposed method names for every file under service_dir."""
    services: dict[str, list[str]] = {}
    for path in list_files(service_dir, pattern):
        content = _read(path)
        if content is None:
            continue
        services[service_name_from_path(path, suffix)] = extract_service_methods(content)
    return services


def build_registry(
    endpoint_dir: str | Path,
    service_dir: str | Path,
    *,
    endpoint_glob: str = "**/*.ts",
    service_glob: str = "**/*.ts",
    service_suffix: str = ".service.ts",
    tie_break: TieBreak = "last",
    resource_strategy: ResourceStrategy = infer_resource,
) -> ProjectRegistry:
    """
    Build the read-only registry snapshot.

    Args:
        endpoint_dir: Root of endpoint handler files (conventionally under api/)
        service_dir: Root of service files (conventionally *.service.ts)
        endpoint_glob: Glob selecting endpoint files below endpoint_dir
        service_glob: Glob selecting service files below service_dir
        service_suffix: Suffix stripped from service file names
        tie_break: "last" keeps the later-enumerated owner of a duplicated key,
            "first" keeps the earlier one
        resource_strategy: Resource inference applied to endpoint paths

    Returns:
        ProjectRegistry with known operations and known services.
    """
    registry = ProjectRegistry(
        known_operations=scan_operations(
            endpoint_dir, endpoint_glob, tie_break, resource_strategy
        ),
        known_services=scan_services(service_dir, service_glob, service_suffix),
    )
    logger.info(
        f"Registry built: {registry.operation_count} operations from {endpoint_dir}, "
        f"{registry.service_count} services from {service_dir}"
    )
    return registry
