"""
Rule Set — Built-in API policy and loader for alternative policies.

The default policy needs no external file. An alternative policy can be
supplied as JSON with the same field names as RuleSet; any field left out
keeps its built-in value.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path

from pydantic import ValidationError

from apiguard.models.rule_models import PatternRule, RuleSet

logger = logging.getLogger("apiguard.core.rule_set")

HEADER_IMPORT_PATTERN = re.compile(
    r"""import\s*\{[^}]*\bcookies\b[^}]*\}\s*from\s*['"]next/headers['"]"""
)


class RuleSetError(ValueError):
    """Raised when a rule set file cannot be read or validated."""


DEFAULT_RULE_SET = RuleSet(
    forbidden_patterns=(
        PatternRule(
            rule_id="no-client-component-client",
            pattern=re.compile(r"createClientComponentClient\(\)"),
            description="Browser-side client constructed inside an API route",
        ),
        PatternRule(
            rule_id="no-supabase-client-factory",
            pattern=re.compile(r"createSupabaseClient\(\)"),
            description="Unauthenticated client factory used inside an API route",
        ),
        PatternRule(
            rule_id="no-raw-supabase-client",
            pattern=re.compile(r"new SupabaseClient"),
            description="Low-level client instantiated directly",
        ),
        PatternRule(
            rule_id="no-direct-supabase",
            pattern=re.compile(r"supabase\.(from|rpc|storage)\("),
            description="Direct data access bypassing the service layer",
        ),
        PatternRule(
            rule_id="no-console-log",
            pattern=re.compile(r"console\.log\("),
            description="Debug print left in handler code",
        ),
    ),
    required_patterns=(
        PatternRule(
            rule_id="require-next-server-import",
            pattern=re.compile(r"import.*NextRequest.*NextResponse.*from.*next/server"),
            description="Handlers must import NextRequest and NextResponse",
        ),
        PatternRule(
            rule_id="require-header-import",
            pattern=HEADER_IMPORT_PATTERN,
            description="Handlers must import the cookies request-context accessor",
        ),
    ),
    service_layer_required=True,
    authentication_required=True,
    error_handling_required=True,
)


def load_rule_set(path: str | Path) -> RuleSet:
    """
    Load a rule set from a JSON file, layered over the built-in defaults.

    Raises:
        RuleSetError: if the file is unreadable, not JSON, or fails validation.
    """
    rules_path = Path(path)
    try:
        raw = json.loads(rules_path.read_text(encoding="utf-8"))
    except OSError as e:
        raise RuleSetError(f"Cannot read rule set {rules_path}: {e}") from e
    except json.JSONDecodeError as e:
        raise RuleSetError(f"Rule set {rules_path} is not valid JSON: {e}") from e

    if not isinstance(raw, dict):
        raise RuleSetError(f"Rule set {rules_path} must be a JSON object")

    merged = {**DEFAULT_RULE_SET.model_dump(), **raw}
    try:
        rule_set = RuleSet.model_validate(merged)
    except ValidationError as e:
        raise RuleSetError(f"Invalid rule set {rules_path}: {e}") from e

    logger.info(
        f"Loaded rule set from {rules_path}: "
        f"{len(rule_set.forbidden_patterns)} forbidden, "
        f"{len(rule_set.required_patterns)} required"
    )
    return rule_set
