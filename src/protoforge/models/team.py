"""Team, membership and invitation models."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(UTC)


class TeamRole(StrEnum):
    ADMIN = "admin"
    MEMBER = "member"


class Team(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    name: str
    description: str | None = None
    created_by: str
    created_at: datetime = Field(default_factory=_utcnow)


class TeamMember(BaseModel):
    """A user's membership in a team; one row per ``(team_id, user_id)``."""

    id: UUID = Field(default_factory=uuid4)
    team_id: UUID
    user_id: str
    role: TeamRole = TeamRole.MEMBER
    joined_at: datetime = Field(default_factory=_utcnow)


class TeamInvitation(BaseModel):
    """A reusable join code for a team."""

    id: UUID = Field(default_factory=uuid4)
    team_id: UUID
    invitation_code: str
    created_by: str
    created_at: datetime = Field(default_factory=_utcnow)
