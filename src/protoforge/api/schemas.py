"""API request/response Pydantic schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from protoforge.models.artifact import Artifact, ContentType, Version, Visibility
from protoforge.models.conversation import ConversationMessage
from protoforge.models.project import Project
from protoforge.models.team import Team, TeamInvitation, TeamMember, TeamRole


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str = ""


# ---------------------------------------------------------------------------
# Artifacts
# ---------------------------------------------------------------------------


class ArtifactCreateRequest(BaseModel):
    """Request body for POST /artifacts."""

    prompt: str = Field(min_length=1)
    content: str = Field(description="Generated markup or code for version 1")
    name: str | None = None
    content_type: ContentType = ContentType.GAME
    visibility: Visibility | None = None
    owner_id: str | None = None
    instructions: str | None = None
    image_url: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class ArtifactUpdateRequest(BaseModel):
    """Request body for PATCH /artifacts/{artifact_id}."""

    name: str | None = None
    visibility: Visibility | None = None


class ArtifactResponse(BaseModel):
    id: UUID
    name: str
    prompt: str
    content_type: ContentType
    visibility: Visibility
    owner_id: str | None
    current_version: int
    content: str
    instructions: str | None
    metadata: dict[str, Any]
    created_at: datetime

    @classmethod
    def from_model(cls, artifact: Artifact) -> ArtifactResponse:
        return cls(**artifact.model_dump(exclude={"deleted"}))


class ArtifactListResponse(BaseModel):
    artifacts: list[ArtifactResponse]


# ---------------------------------------------------------------------------
# Versions
# ---------------------------------------------------------------------------


class VersionResponse(BaseModel):
    id: UUID
    artifact_id: UUID
    version_number: int
    content: str
    instructions: str | None
    created_at: datetime

    @classmethod
    def from_model(cls, version: Version) -> VersionResponse:
        return cls(**version.model_dump())


class VersionListResponse(BaseModel):
    """Response for GET /artifacts/{artifact_id}/versions (newest first)."""

    current_version: int
    versions: list[VersionResponse]


class GenerationRequest(BaseModel):
    """Request body for POST /artifacts/{artifact_id}/versions."""

    content: str
    instructions: str | None = None


class RevertRequest(BaseModel):
    """Request body for POST /artifacts/{artifact_id}/revert.

    Exactly one of ``version_id`` / ``version_number`` must be given.
    """

    version_id: UUID | None = None
    version_number: int | None = Field(default=None, ge=1)

    @model_validator(mode="after")
    def _exactly_one_target(self) -> RevertRequest:
        if (self.version_id is None) == (self.version_number is None):
            raise ValueError("Provide exactly one of version_id or version_number")
        return self

    @property
    def target(self) -> UUID | int:
        return self.version_id if self.version_id is not None else self.version_number  # type: ignore[return-value]


class VersionCommitResponse(BaseModel):
    """The newly appended version and the artifact pointer after it."""

    version: VersionResponse
    current_version: int


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------


class MessageCreateRequest(BaseModel):
    message: str
    response: str | None = None
    model_type: str | None = None
    image_url: str | None = None
    is_system: bool = False


class MessageUpdateRequest(BaseModel):
    response: str


class MessageResponse(BaseModel):
    id: UUID
    artifact_id: UUID
    message: str
    response: str | None
    is_system: bool
    image_url: str | None
    model_type: str | None
    created_at: datetime

    @classmethod
    def from_model(cls, message: ConversationMessage) -> MessageResponse:
        return cls(**message.model_dump())


class MessageListResponse(BaseModel):
    messages: list[MessageResponse]


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------


class ProjectCreateRequest(BaseModel):
    team_id: UUID
    name: str = Field(min_length=1)
    description: str = ""
    created_by: str


class ProjectResponse(BaseModel):
    id: UUID
    team_id: UUID
    name: str
    description: str
    created_by: str
    created_at: datetime

    @classmethod
    def from_model(cls, project: Project) -> ProjectResponse:
        return cls(**project.model_dump())


class ProjectListResponse(BaseModel):
    projects: list[ProjectResponse]


class ProjectArtifactRequest(BaseModel):
    artifact_id: UUID
    added_by: str


# ---------------------------------------------------------------------------
# Teams
# ---------------------------------------------------------------------------


class TeamCreateRequest(BaseModel):
    name: str = Field(min_length=1)
    description: str | None = None
    created_by: str


class TeamResponse(BaseModel):
    id: UUID
    name: str
    description: str | None
    created_by: str
    created_at: datetime

    @classmethod
    def from_model(cls, team: Team) -> TeamResponse:
        return cls(**team.model_dump())


class TeamListResponse(BaseModel):
    teams: list[TeamResponse]


class TeamMemberRequest(BaseModel):
    """Request body for POST /teams/{team_id}/members."""

    user_id: str
    role: TeamRole = TeamRole.MEMBER


class TeamRoleRequest(BaseModel):
    role: TeamRole


class TeamMemberResponse(BaseModel):
    id: UUID
    team_id: UUID
    user_id: str
    role: TeamRole
    joined_at: datetime

    @classmethod
    def from_model(cls, member: TeamMember) -> TeamMemberResponse:
        return cls(**member.model_dump())


class TeamMemberListResponse(BaseModel):
    members: list[TeamMemberResponse]


class InvitationCreateRequest(BaseModel):
    created_by: str


class InvitationResponse(BaseModel):
    id: UUID
    team_id: UUID
    invitation_code: str
    created_by: str
    created_at: datetime

    @classmethod
    def from_model(cls, invitation: TeamInvitation) -> InvitationResponse:
        return cls(**invitation.model_dump())


class InvitationListResponse(BaseModel):
    invitations: list[InvitationResponse]


class JoinTeamRequest(BaseModel):
    """Request body for POST /teams/join."""

    invitation_code: str = Field(min_length=1)
    user_id: str
