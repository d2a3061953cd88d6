"""
Data models for the Image Resizer.
This module contains the trigger event, size configuration and the
per-task and per-event result models.
"""

from typing import List, Optional, Any
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field


class StorageObjectEvent(BaseModel):
    """Storage object finalize event delivered by the platform."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    bucket: str
    name: str
    content_type: Optional[str] = Field(default=None, alias="contentType")


class SizeSpec(BaseModel):
    """Target dimensions for one named derivative."""
    model_config = ConfigDict(frozen=True)

    width: int = Field(gt=0)
    height: int = Field(gt=0)


class ObjectPath(BaseModel):
    """Object name split into directory, base name and extension."""
    model_config = ConfigDict(frozen=True)

    directory: str
    name: str
    extension: str


class ResizeJob(BaseModel):
    """A single resize-and-upload unit of work, consumed once."""

    bucket: str
    size_name: str
    source: Any  # decoded PIL image, shared read-only between jobs
    destination_path: str
    width: int
    height: int
    content_type: str


class ResizeResult(BaseModel):
    """Outcome of a single resize task."""
    size_name: str
    destination_path: str
    width: int
    height: int
    success: bool
    error: Optional[str] = None


class HandlerStatus(str, Enum):
    """Trigger handler outcome enum."""
    SKIPPED = "skipped"
    COMPLETED = "completed"


class SkipReason(str, Enum):
    """Reason an event was ignored."""
    NOT_AN_IMAGE = "not_an_image"
    NOT_ORIGINAL = "not_original"


class HandlerResult(BaseModel):
    """Outcome of handling one finalize event."""
    status: HandlerStatus
    source_path: str
    reason: Optional[SkipReason] = None
    results: List[ResizeResult] = []

    @property
    def succeeded(self) -> List[ResizeResult]:
        return [r for r in self.results if r.success]

    @property
    def failed(self) -> List[ResizeResult]:
        return [r for r in self.results if not r.success]
