"""
Registry Data Models — Operation keys and the project registry snapshot.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

UNKNOWN_RESOURCE = "unknown"


class OperationKey(BaseModel):
    """Identity of an HTTP endpoint handler, used for duplicate detection."""

    model_config = ConfigDict(frozen=True)

    http_method: str
    resource: str = UNKNOWN_RESOURCE
    action: str

    @property
    def key(self) -> str:
        return f"{self.http_method}-{self.resource}-{self.action}"

    def __str__(self) -> str:
        return self.key


class ProjectRegistry(BaseModel):
    """
    Read-only snapshot of declared operations and service methods.

    Built once per engine instance; picking up file-system changes
    requires building a new registry.
    """

    model_config = ConfigDict(frozen=True)

    known_operations: dict[str, str] = Field(
        default_factory=dict,
        description="OperationKey.key -> normalized path of the owning file",
    )
    known_services: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Service name -> method names in declaration order",
    )

    def owner_of(self, op: OperationKey) -> str | None:
        """Path of the file that owns an operation key, if any."""
        return self.known_operations.get(op.key)

    def has_service(self, name: str) -> bool:
        return name in self.known_services

    @property
    def operation_count(self) -> int:
        return len(self.known_operations)

    @property
    def service_count(self) -> int:
        return len(self.known_services)
