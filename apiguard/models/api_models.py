"""
Request/Response Models — API contract schemas for the HTTP surface.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import AfterValidator, BaseModel, Field


def _reject_nul(value: str) -> str:
    if "\x00" in value:
        raise ValueError("path must not contain NUL bytes")
    return value


SourcePath = Annotated[str, AfterValidator(_reject_nul)]


class ReviewRequest(BaseModel):
    """Review supplied content as if it lived at path. Nothing is written."""

    path: SourcePath = Field(..., description="File path used for resource inference and ownership")
    content: str = Field(..., description="File source content")


class FileRequest(BaseModel):
    """Operate on a file already on disk."""

    path: SourcePath = Field(..., min_length=1, description="Path of an endpoint file")


class ScanRequest(BaseModel):
    auto_fix: bool = Field(default=False, description="Write remediated text back to disk")


class FixResponse(BaseModel):
    path: str
    fixed: bool


class RegistryInfo(BaseModel):
    """Sizes of the registry snapshot held by the current engine."""

    operations: int
    services: int
    endpoint_dir: str
    service_dir: str
