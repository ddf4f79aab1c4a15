"""Pydantic domain models for Protoforge."""

from protoforge.models.artifact import Artifact, ContentType, Version, Visibility
from protoforge.models.conversation import ConversationMessage
from protoforge.models.errors import (
    ArtifactNotFoundError,
    InvalidStateError,
    InvitationNotFoundError,
    MessageNotFoundError,
    NoSuitableVersionError,
    NotFoundError,
    ProjectNotFoundError,
    ProtoforgeError,
    StorageError,
    TeamMemberNotFoundError,
    TeamNotFoundError,
    VersionConflictError,
    VersionNotFoundError,
)
from protoforge.models.project import Project, ProjectArtifact
from protoforge.models.team import Team, TeamInvitation, TeamMember, TeamRole

__all__ = [
    "Artifact",
    "ArtifactNotFoundError",
    "ContentType",
    "ConversationMessage",
    "InvalidStateError",
    "InvitationNotFoundError",
    "MessageNotFoundError",
    "NoSuitableVersionError",
    "NotFoundError",
    "Project",
    "ProjectArtifact",
    "ProjectNotFoundError",
    "ProtoforgeError",
    "StorageError",
    "Team",
    "TeamInvitation",
    "TeamMember",
    "TeamMemberNotFoundError",
    "TeamNotFoundError",
    "TeamRole",
    "Version",
    "VersionConflictError",
    "VersionNotFoundError",
    "Visibility",
]
