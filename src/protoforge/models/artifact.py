"""Artifact and version models."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

GENERATING_PLACEHOLDER = "Generating..."
INITIAL_INSTRUCTIONS = "Initial generation"
UPDATE_INSTRUCTIONS = "Updated content"


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ContentType(StrEnum):
    GAME = "game"
    SVG = "svg"
    WEBDESIGN = "webdesign"
    DATAVIZ = "dataviz"
    DIAGRAM = "diagram"
    INFOGRAPHIC = "infographic"


class Visibility(StrEnum):
    PUBLIC = "public"
    PRIVATE = "private"
    UNLISTED = "unlisted"


class Artifact(BaseModel):
    """A generated deliverable and its current-version pointer.

    ``content`` and ``instructions`` mirror the version named by
    ``current_version`` so listings can render without a second read.
    """

    id: UUID = Field(default_factory=uuid4)
    name: str
    prompt: str
    content_type: ContentType = ContentType.GAME
    visibility: Visibility = Visibility.PUBLIC
    owner_id: str | None = None
    current_version: int = Field(default=1, ge=1)
    content: str = ""
    instructions: str | None = None
    deleted: bool = False
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=_utcnow)

    def can_view(self, viewer_id: str | None) -> bool:
        """Public and unlisted artifacts are open; private ones only to the owner."""
        if self.visibility is Visibility.PRIVATE:
            return viewer_id is not None and viewer_id == self.owner_id
        return True

    def is_listed_for(self, viewer_id: str | None) -> bool:
        """Galleries show public artifacts plus the viewer's own."""
        if self.visibility is Visibility.PUBLIC:
            return True
        return viewer_id is not None and viewer_id == self.owner_id


class Version(BaseModel):
    """An immutable, numbered snapshot of an artifact's content."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    artifact_id: UUID
    version_number: int = Field(ge=1)
    content: str
    instructions: str | None = None
    created_at: datetime = Field(default_factory=_utcnow)

    @property
    def is_placeholder(self) -> bool:
        return self.content == GENERATING_PLACEHOLDER
