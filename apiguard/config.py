"""
API Guardian Configuration — pydantic-settings based.

All settings are read from APIGUARD_* environment variables or .env file.
Nothing is required: the defaults describe a conventional Next.js layout
(src/app/api for route handlers, src/lib/services for the service layer).
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application-wide settings sourced from environment variables."""

    # ── Project layout ──
    endpoint_dir: str = Field(
        default="src/app/api", description="Root directory of endpoint handler files"
    )
    service_dir: str = Field(
        default="src/lib/services", description="Root directory of service files"
    )
    endpoint_glob: str = Field(default="**/*.ts", description="Glob for endpoint files")
    service_glob: str = Field(default="**/*.ts", description="Glob for service files")
    service_suffix: str = Field(
        default=".service.ts",
        description="Conventional suffix stripped from service file names",
    )

    # ── Policy ──
    rules_path: str | None = Field(
        default=None,
        description="Optional JSON file overriding the built-in rule set",
    )
    registry_tie_break: Literal["last", "first"] = Field(
        default="last",
        description="Which file keeps a duplicated operation key during registry build",
    )

    # ── Review ──
    max_file_size_bytes: int = Field(
        default=500_000, description="Max file size to review (bytes)"
    )
    change_display_limit: int = Field(
        default=10, description="Max change-list entries rendered for display"
    )

    # ── Cache ──
    cache_ttl_seconds: int = Field(
        default=3600, description="Time-to-live for cached review results"
    )
    cache_max_entries: int = Field(
        default=1000, description="Max cached review results before the least recently used is evicted"
    )

    # ── Server ──
    port: int = Field(default=5001, description="Server port")
    host: str = Field(default="0.0.0.0", description="Server bind host")
    cors_origins: list[str] = Field(
        default=["*"], description="Allowed CORS origins"
    )

    # ── Audit ──
    audit_log_path: str = Field(
        default="audit.jsonl", description="Path to JSON-lines audit log file"
    )

    model_config = {
        "env_prefix": "APIGUARD_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


# Singleton instance, imported by other modules
settings = Settings()
