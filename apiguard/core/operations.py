"""
Operation Extraction — Text-level discovery of endpoint handlers and service methods.

Everything here is a closed-form string transform over raw source text.
The helpers are plain functions so callers can substitute stricter or
looser strategies without touching the registry or the detector.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Callable

from apiguard.models.registry_models import UNKNOWN_RESOURCE, OperationKey

HTTP_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH")

HANDLER_RE = re.compile(
    r"export\s+(?:async\s+)?function\s+(" + "|".join(HTTP_METHODS) + r")\b"
)

# Groups: signature up to the opening brace, handler name, then the body as
# either a block closed by a column-0 brace (3) or a single-line body (4).
# A block body never runs into the next top-level declaration.
HANDLER_BLOCK_RE = re.compile(
    r"(export\s+(?:async\s+)?function\s+(" + "|".join(HTTP_METHODS) + r")\s*"
    r"\([^)]*\)\s*(?::\s*[^{\n]+)?)\{"
    r"(?:((?:(?!\n(?:export|function|async|const|let|var|class)\b)[\s\S])*?)\n\}"
    r"|([^\n]*)\}[ \t]*$)",
    re.MULTILINE,
)

TRY_BLOCK_RE = re.compile(r"\btry\s*\{")

SERVICE_METHOD_RE = re.compile(r"(?:async\s+)?(\w+)\s*\([^)]*\)\s*(?::\s*[^{]+)?\s*\{")

EXCLUDED_METHOD_NAMES = frozenset({
    "constructor", "private", "protected",
    "if", "for", "while", "switch", "catch", "function", "return",
})

ResourceStrategy = Callable[[str | None], str]


def normalize_path(file_path: str | Path) -> str:
    """Canonical string form used for registry ownership comparisons."""
    return Path(file_path).resolve().as_posix()


def infer_resource(file_path: str | None) -> str:
    """
    Resource name from the directory after the last ``api`` segment, or the sentinel.

    The last segment is used so a checkout that itself sits under a directory
    named ``api`` still resolves to the route's own resource. A file placed
    directly in ``api/`` names no resource.
    """
    if not file_path:
        return UNKNOWN_RESOURCE
    parts = Path(file_path).as_posix().split("/")
    for i in range(len(parts) - 3, -1, -1):
        if parts[i] == "api" and parts[i + 1]:
            return parts[i + 1]
    return UNKNOWN_RESOURCE


def handler_body(match: re.Match) -> str:
    """Body text of a HANDLER_BLOCK_RE match, whichever form it took."""
    block = match.group(3)
    return block if block is not None else match.group(4)


def extract_operations(
    code: str,
    file_path: str | None = None,
    resource_strategy: ResourceStrategy = infer_resource,
) -> list[OperationKey]:
    """One OperationKey per exported HTTP-method handler declaration, in source order."""
    resource = resource_strategy(file_path)
    return [
        OperationKey(http_method=m.group(1), resource=resource, action=m.group(1).lower())
        for m in HANDLER_RE.finditer(code)
    ]


def extract_service_methods(code: str) -> list[str]:
    """Method-like declarations (name, parameter list, block), de-duplicated."""
    methods: list[str] = []
    for match in SERVICE_METHOD_RE.finditer(code):
        name = match.group(1)
        if name in EXCLUDED_METHOD_NAMES or name in methods:
            continue
        methods.append(name)
    return methods


def service_name_from_path(file_path: str | Path, suffix: str = ".service.ts") -> str:
    name = Path(file_path).name
    if suffix and name.endswith(suffix):
        return name[: -len(suffix)]
    return Path(name).stem


def line_of(code: str, offset: int) -> int:
    """1-based line number of a character offset."""
    return code.count("\n", 0, offset) + 1


def column_of(code: str, offset: int) -> int:
    """1-based column of a character offset."""
    return offset - (code.rfind("\n", 0, offset) + 1) + 1
