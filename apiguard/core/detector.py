"""
Violation Detector — Applies a RuleSet and registry lookups to one file's text.

Pure pattern matching over raw source: no parsing, no I/O. A pattern that
fails to match simply contributes nothing, so malformed input never raises.
"""

from __future__ import annotations

from apiguard.core.operations import (
    HANDLER_BLOCK_RE,
    TRY_BLOCK_RE,
    ResourceStrategy,
    column_of,
    extract_operations,
    handler_body,
    infer_resource,
    line_of,
    normalize_path,
)
from apiguard.models.registry_models import ProjectRegistry
from apiguard.models.rule_models import RuleSet, Severity, Violation

ROUTE_CLIENT_FIX = "Use createRouteHandlerClient({ cookies }) in API routes"

# Substring of a forbidden match -> advisory fix. First hit wins.
FIX_SUGGESTIONS: dict[str, str] = {
    "createClientComponentClient()": ROUTE_CLIENT_FIX,
    "createSupabaseClient()": ROUTE_CLIENT_FIX,
    "supabase.from": "Move to service layer: call the equivalent service method, e.g. await userService.getUsers()",
    "console.log": "Use a logging facility or remove",
}

GENERIC_FIX = "Refactor to follow API patterns"

SERVICE_LAYER_SUGGESTION = "Create a service class to handle database operations"


def suggest_fix(matched: str) -> str:
    for needle, fix in FIX_SUGGESTIONS.items():
        if needle in matched:
            return fix
    return GENERIC_FIX


def handlers_without_try(code: str) -> list[tuple[str, int]]:
    """(handler name, line) for each exported handler whose body has no try block."""
    return [
        (m.group(2), line_of(code, m.start()))
        for m in HANDLER_BLOCK_RE.finditer(code)
        if not TRY_BLOCK_RE.search(handler_body(m))
    ]


def detect(
    code: str,
    file_path: str,
    rule_set: RuleSet,
    registry: ProjectRegistry,
    resource_strategy: ResourceStrategy = infer_resource,
) -> tuple[list[Violation], list[str]]:
    """
    Run every check against one file.

    Args:
        code: File contents
        file_path: Path the contents belong to (used for resource inference
            and registry ownership)
        rule_set: Policy to enforce
        registry: Snapshot of known operations and services

    Returns:
        (violations, suggestions) in check order: forbidden patterns,
        required patterns, structural checks, duplicate endpoints.
    """
    violations: list[Violation] = []
    suggestions: list[str] = []

    # ── 1. Forbidden patterns ──
    for rule in rule_set.forbidden_patterns:
        match = rule.pattern.search(code)
        if match is None:
            continue
        violations.append(
            Violation(
                severity=Severity.ERROR,
                message=f"Forbidden pattern found: {match.group(0)}",
                rule_id=rule.rule_id,
                line=line_of(code, match.start()),
                column=column_of(code, match.start()),
                fix=suggest_fix(match.group(0)),
            )
        )

    # ── 2. Required patterns ──
    for rule in rule_set.required_patterns:
        if rule.pattern.search(code) is None:
            violations.append(
                Violation(
                    severity=Severity.ERROR,
                    message=f"Required pattern missing: {rule.pattern.pattern}",
                    rule_id=rule.rule_id,
                )
            )

    # ── 3. Structural checks ──
    operations = extract_operations(code, file_path, resource_strategy)

    if rule_set.service_layer_required and rule_set.service_import_pattern.search(code) is None:
        violations.append(
            Violation(
                severity=Severity.WARNING,
                message="Should use service layer instead of direct database queries",
                rule_id="use-service-layer",
            )
        )
        suggestions.append(SERVICE_LAYER_SUGGESTION)

    if (
        rule_set.authentication_required
        and operations
        and rule_set.auth_client_pattern.search(code) is None
    ):
        violations.append(
            Violation(
                severity=Severity.WARNING,
                message="Handlers should set up the authenticated route-handler client",
                rule_id="require-authentication",
                fix=ROUTE_CLIENT_FIX,
            )
        )

    if rule_set.error_handling_required:
        for name, line in handlers_without_try(code):
            violations.append(
                Violation(
                    severity=Severity.WARNING,
                    message=f"Handler {name} has no try/catch error boundary",
                    rule_id="require-error-handling",
                    line=line,
                    fix="Wrap the handler body in try/catch and return a 500 response on failure",
                )
            )

    # ── 4. Duplicate endpoints ──
    own_path = normalize_path(file_path)
    reported: set[str] = set()
    for op in operations:
        if op.key in reported:
            continue
        owner = registry.owner_of(op)
        if owner is not None and owner != own_path:
            reported.add(op.key)
            violations.append(
                Violation(
                    severity=Severity.ERROR,
                    message=f"Duplicate API endpoint: {op.key} already exists in {owner}",
                    rule_id="no-duplicates",
                )
            )

    return violations, suggestions
