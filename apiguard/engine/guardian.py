"""
API Guardian — Review facade over the detector, remediation engine and reporter.

An APIGuardian instance owns one RuleSet and one ProjectRegistry snapshot,
both fixed at construction. Rebuilding the registry (to pick up new
endpoints) means constructing a new instance.
"""

from __future__ import annotations

import logging
from pathlib import Path

from apiguard.cache.file_cache import FileCache
from apiguard.config import settings
from apiguard.core.detector import detect
from apiguard.core.operations import ResourceStrategy, infer_resource, normalize_path
from apiguard.core.registry import build_registry
from apiguard.core.rule_set import DEFAULT_RULE_SET, load_rule_set
from apiguard.engine.remediation import (
    ServiceCallStrategy,
    default_service_call,
    remediate,
)
from apiguard.engine.reporter import diff_lines, format_changes, render_explanation
from apiguard.models.registry_models import ProjectRegistry
from apiguard.models.review_models import ReviewResult, ReviewStatus
from apiguard.models.rule_models import RuleSet

logger = logging.getLogger("apiguard.engine.guardian")


class FileTooLargeError(ValueError):
    """Raised when source text exceeds the configured review size limit."""


def check_size(size: int, max_bytes: int) -> None:
    if size > max_bytes:
        raise FileTooLargeError(f"{size} bytes exceeds limit of {max_bytes}")


def read_source(path: Path, max_bytes: int) -> str:
    """Read a UTF-8 source file, refusing files over max_bytes before reading."""
    check_size(path.stat().st_size, max_bytes)
    return path.read_text(encoding="utf-8")


class APIGuardian:
    """Reviews endpoint files against a fixed policy and registry snapshot."""

    def __init__(
        self,
        endpoint_dir: str | Path | None = None,
        service_dir: str | Path | None = None,
        rule_set: RuleSet | None = None,
        registry: ProjectRegistry | None = None,
        cache: FileCache | None = None,
        resource_strategy: ResourceStrategy = infer_resource,
        service_call: ServiceCallStrategy = default_service_call,
        max_file_size_bytes: int | None = None,
    ) -> None:
        self.endpoint_dir = Path(endpoint_dir or settings.endpoint_dir)
        self.service_dir = Path(service_dir or settings.service_dir)
        self.rule_set = rule_set or self._default_rule_set()
        self.resource_strategy = resource_strategy
        self.service_call = service_call
        self.cache = cache
        self.max_file_size_bytes = (
            settings.max_file_size_bytes
            if max_file_size_bytes is None
            else max_file_size_bytes
        )

        if registry is None:
            registry = build_registry(
                self.endpoint_dir,
                self.service_dir,
                endpoint_glob=settings.endpoint_glob,
                service_glob=settings.service_glob,
                service_suffix=settings.service_suffix,
                tie_break=settings.registry_tie_break,
                resource_strategy=resource_strategy,
            )
        self.registry = registry

    @staticmethod
    def _default_rule_set() -> RuleSet:
        if settings.rules_path:
            return load_rule_set(settings.rules_path)
        return DEFAULT_RULE_SET

    def review(self, code: str, file_path: str) -> ReviewResult:
        """
        Review one file's text.

        Never raises for well-formed (even if non-compliant) text. When
        violations exist the result carries the remediated text and the
        line changes it introduces.
        """
        cache_key = normalize_path(file_path)
        if self.cache is not None:
            cached = self.cache.get(cache_key, code)
            if cached is not None:
                logger.debug(f"Cache hit: {file_path}")
                return cached

        violations, suggestions = detect(
            code, file_path, self.rule_set, self.registry, self.resource_strategy
        )

        remediated_text: str | None = None
        changes = []
        if violations:
            status = ReviewStatus.NEEDS_CHANGES
            remediated_text = remediate(code, violations, service_call=self.service_call)
            changes = diff_lines(code, remediated_text)
            if changes:
                logger.debug(
                    f"Remediation changes for {file_path}:\n"
                    f"{format_changes(changes, settings.change_display_limit)}"
                )
        else:
            status = ReviewStatus.APPROVED

        result = ReviewResult(
            file_path=file_path,
            status=status,
            violations=violations,
            suggestions=suggestions,
            remediated_text=remediated_text,
            changes=changes,
            explanation=render_explanation(violations, suggestions),
        )
        logger.info(
            f"Reviewed {file_path}: {status.value} "
            f"({len(result.errors)} errors, {len(result.warnings)} warnings)"
        )

        if self.cache is not None:
            self.cache.put(cache_key, code, result)
        return result

    def review_file(self, file_path: str | Path) -> ReviewResult:
        """
        Read a file from disk and review it.

        Raises:
            OSError: if the file cannot be read.
            UnicodeDecodeError: if the file is not UTF-8.
            FileTooLargeError: if the file exceeds max_file_size_bytes.
        """
        path = Path(file_path)
        code = read_source(path, self.max_file_size_bytes)
        return self.review(code, path.as_posix())

    def remediate(self, code: str) -> str:
        """Remediate text directly, using this instance's naming strategy."""
        return remediate(code, service_call=self.service_call)
