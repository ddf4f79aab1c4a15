"""Project models grouping artifacts for a team."""

from __future__ import annotations

from datetime import UTC, datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Project(BaseModel):
    """A team-scoped container of artifacts."""

    id: UUID = Field(default_factory=uuid4)
    team_id: UUID
    name: str
    description: str = ""
    created_by: str
    created_at: datetime = Field(default_factory=_utcnow)


class ProjectArtifact(BaseModel):
    """Membership of an artifact in a project."""

    project_id: UUID
    artifact_id: UUID
    added_by: str
    added_at: datetime = Field(default_factory=_utcnow)
