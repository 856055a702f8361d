"""
Rule Data Models — Rule sets, pattern rules and violations.
"""

from __future__ import annotations

import re
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class PatternRule(BaseModel):
    """A named regular expression checked against raw file text."""

    model_config = ConfigDict(frozen=True)

    rule_id: str = Field(..., description="Unique rule identifier, e.g. 'no-console-log'")
    pattern: re.Pattern = Field(..., description="Regex searched anywhere in the file")
    description: str = Field(default="", description="Human-readable rule summary")


class RuleSet(BaseModel):
    """
    Immutable policy consumed by the detector.

    Patterns accept plain strings on input, so alternative policies can be
    loaded from JSON without touching detection code.
    """

    model_config = ConfigDict(frozen=True)

    forbidden_patterns: tuple[PatternRule, ...] = ()
    required_patterns: tuple[PatternRule, ...] = ()
    service_layer_required: bool = True
    authentication_required: bool = True
    error_handling_required: bool = True
    service_import_pattern: re.Pattern = Field(
        default=re.compile(r"""import.*from.*['"]@/lib/services"""),
        description="Recognises an import from the services directory",
    )
    auth_client_pattern: re.Pattern = Field(
        default=re.compile(r"createRouteHandlerClient"),
        description="Recognises authenticated route-handler client setup",
    )


class Violation(BaseModel):
    """A single detected policy breach."""

    severity: Severity
    message: str = Field(..., description="Short human-readable description")
    rule_id: str = Field(..., description="Rule that produced this violation")
    line: int | None = Field(default=None, description="1-based line of the match")
    column: int | None = Field(default=None, description="1-based column of the match")
    fix: str | None = Field(default=None, description="Suggested fix text")

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR
