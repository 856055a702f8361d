"""
Remediation Engine — Deterministic source-to-source fixes for API route files.

Operates on source strings (in-memory), never on disk files. Steps run in a
fixed order and each one is a no-op when its precondition already holds,
so remediating compliant text returns it unchanged.
"""

from __future__ import annotations

import logging
import re
from functools import partial
from typing import Callable

from apiguard.core.operations import HANDLER_BLOCK_RE, TRY_BLOCK_RE, handler_body
from apiguard.core.rule_set import HEADER_IMPORT_PATTERN
from apiguard.models.rule_models import Violation

logger = logging.getLogger("apiguard.engine.remediation")

ROUTE_CLIENT = "createRouteHandlerClient"
ROUTE_CLIENT_CALL = "createRouteHandlerClient({ cookies })"

HEADER_IMPORT = "import { cookies } from 'next/headers';"
ROUTE_CLIENT_IMPORT = "import { createRouteHandlerClient } from '@supabase/auth-helpers-nextjs';"
NEXT_SERVER_IMPORT = "import { NextRequest, NextResponse } from 'next/server';"

CLIENT_CALL_RE = re.compile(r"\b(?:createClientComponentClient|createSupabaseClient)\(\s*\)")
AUTH_HELPERS_IMPORT_RE = re.compile(
    r"""import\s*\{([^}]*)\}\s*from\s*(['"]@supabase/auth-helpers-nextjs['"])"""
)
CLIENT_FACTORY_IMPORT_RE = re.compile(
    r"""^import\s*\{\s*createSupabaseClient\s*\}\s*from\s*['"][^'"]+['"];?[ \t]*\n""",
    re.MULTILINE,
)
ROUTE_CLIENT_IMPORT_RE = re.compile(r"import\s*\{[^}]*\bcreateRouteHandlerClient\b[^}]*\}\s*from")
NEXT_RESPONSE_IMPORT_RE = re.compile(
    r"""import\s*\{[^}]*\bNextResponse\b[^}]*\}\s*from\s*['"]next/server['"]"""
)

SELECT_CALL_RE = re.compile(r"""supabase\.from\(['"](\w+)['"]\)\.select\([^)]*\)""")
SERVICE_REF_RE = re.compile(r"(\w+)Service\.")

ServiceCallStrategy = Callable[[str], str]
RemediationStep = Callable[[str], str]


# ── Naming strategies ──

def singularize(table: str) -> str:
    return re.sub(r"s$", "", table)


def capitalize(name: str) -> str:
    return name[:1].upper() + name[1:]


def default_service_call(table: str) -> str:
    """users -> userService.getUsers()"""
    return f"{singularize(table)}Service.get{capitalize(table)}()"


# ── Steps ──

def _prepend(code: str, line: str) -> str:
    return f"{line}\n{code}"


def _rename_client_specifier(match: re.Match) -> str:
    names = [n.strip() for n in match.group(1).split(",") if n.strip()]
    if "createClientComponentClient" not in names:
        return match.group(0)
    renamed: list[str] = []
    for name in names:
        name = ROUTE_CLIENT if name == "createClientComponentClient" else name
        if name not in renamed:
            renamed.append(name)
    return f"import {{ {', '.join(renamed)} }} from {match.group(2)}"


def normalize_client(code: str) -> str:
    """Rewrite browser-side client construction to the route-handler client."""
    rewritten, count = CLIENT_CALL_RE.subn(ROUTE_CLIENT_CALL, code)
    if count == 0:
        return code

    rewritten = AUTH_HELPERS_IMPORT_RE.sub(_rename_client_specifier, rewritten)

    without_factory = CLIENT_FACTORY_IMPORT_RE.sub("", rewritten)
    if "createSupabaseClient" not in without_factory:
        rewritten = without_factory

    if not ROUTE_CLIENT_IMPORT_RE.search(rewritten):
        rewritten = _prepend(rewritten, ROUTE_CLIENT_IMPORT)
    return rewritten


def insert_header_import(code: str) -> str:
    """Prepend the cookies request-context import when it is missing."""
    if HEADER_IMPORT_PATTERN.search(code):
        return code
    return _prepend(code, HEADER_IMPORT)


def _wrap_handler(match: re.Match) -> str:
    signature, name, body = match.group(1), match.group(2), handler_body(match)
    if TRY_BLOCK_RE.search(body):
        return match.group(0)
    if "\n" not in body:
        body = f"\n  {body.strip()}"
    indented = "\n".join(f"  {line}" if line.strip() else line for line in body.split("\n"))
    return (
        f"{signature}{{\n"
        f"  try {{{indented}\n"
        f"  }} catch (error) {{\n"
        f"    console.error('Error in {name}:', error);\n"
        f"    return NextResponse.json(\n"
        f"      {{ error: 'Internal server error' }},\n"
        f"      {{ status: 500 }}\n"
        f"    );\n"
        f"  }}\n"
        f"}}"
    )


def wrap_error_boundaries(code: str) -> str:
    """Wrap every exported handler body lacking a try block in try/catch."""
    wrapped = HANDLER_BLOCK_RE.sub(_wrap_handler, code)
    if wrapped != code and not NEXT_RESPONSE_IMPORT_RE.search(wrapped):
        wrapped = _prepend(wrapped, NEXT_SERVER_IMPORT)
    return wrapped


def service_imports(code: str) -> list[str]:
    """One import per distinct <name>Service. reference, in first-seen order."""
    names: list[str] = []
    for match in SERVICE_REF_RE.finditer(code):
        if match.group(1) not in names:
            names.append(match.group(1))
    return [
        f"import {{ {name}Service }} from '@/lib/services/{name}.service';"
        for name in names
    ]


def convert_to_service_layer(
    code: str,
    service_call: ServiceCallStrategy = default_service_call,
) -> str:
    """
    Replace direct table reads with inferred service calls.

    Imports are synthesized only when the rewrite changed something and the
    text did not reference a Service before it.
    """
    rewritten = SELECT_CALL_RE.sub(lambda m: service_call(m.group(1)), code)
    if rewritten != code and "Service" not in code:
        imports = service_imports(rewritten)
        if imports:
            rewritten = _prepend(rewritten, "\n".join(imports))
    return rewritten


def remediate(
    code: str,
    violations: list[Violation] | None = None,
    *,
    service_call: ServiceCallStrategy = default_service_call,
) -> str:
    """
    Apply every remediation step in order.

    Args:
        code: Original file source
        violations: Violations that triggered remediation (for logging only;
            steps run unconditionally and self-guard)
        service_call: Table name -> service call expression strategy

    Returns:
        Corrected source. Equal to the input when no automatic fix applies.
    """
    steps: tuple[tuple[str, RemediationStep], ...] = (
        ("client_normalization", normalize_client),
        ("header_import", insert_header_import),
        ("error_boundary", wrap_error_boundaries),
        ("service_layer", partial(convert_to_service_layer, service_call=service_call)),
    )

    result = code
    applied: list[str] = []
    for name, step in steps:
        updated = step(result)
        if updated != result:
            applied.append(name)
        result = updated

    logger.debug(
        f"Remediation for {len(violations or [])} violation(s) applied steps: "
        f"{applied or 'none'}"
    )
    return result
