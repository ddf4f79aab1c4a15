"""Abstract repository interfaces for persistence."""

from __future__ import annotations

import builtins
from abc import ABC, abstractmethod
from uuid import UUID

from protoforge.models.artifact import Artifact, Version
from protoforge.models.conversation import ConversationMessage
from protoforge.models.project import Project, ProjectArtifact
from protoforge.models.team import Team, TeamInvitation, TeamMember


class ArtifactRepository(ABC):
    @abstractmethod
    async def create(self, artifact: Artifact) -> Artifact: ...

    @abstractmethod
    async def get(self, artifact_id: UUID) -> Artifact | None: ...

    @abstractmethod
    async def list(self, owner_id: str | None = None) -> builtins.list[Artifact]: ...

    @abstractmethod
    async def update(self, artifact: Artifact) -> Artifact: ...

    @abstractmethod
    async def delete(self, artifact_id: UUID) -> bool:
        """Hard-delete a row; only used to undo a half-finished create."""

    @abstractmethod
    async def set_pointer(
        self,
        artifact_id: UUID,
        version_number: int,
        content: str,
        instructions: str | None,
    ) -> Artifact:
        """Update ``current_version`` and the cached content fields."""


class VersionRepository(ABC):
    """Append-only version log.

    Implementations must reject a second row with the same
    ``(artifact_id, version_number)`` by raising ``VersionConflictError``.
    """

    @abstractmethod
    async def insert(self, version: Version) -> Version: ...

    @abstractmethod
    async def get(self, version_id: UUID) -> Version | None: ...

    @abstractmethod
    async def list(self, artifact_id: UUID) -> builtins.list[Version]: ...

    @abstractmethod
    async def max_version_number(self, artifact_id: UUID) -> int:
        """Highest stored number for *artifact_id*, or ``0`` when there is none."""


class MessageRepository(ABC):
    @abstractmethod
    async def create(self, message: ConversationMessage) -> ConversationMessage: ...

    @abstractmethod
    async def get(self, message_id: UUID) -> ConversationMessage | None: ...

    @abstractmethod
    async def list(self, artifact_id: UUID) -> builtins.list[ConversationMessage]: ...

    @abstractmethod
    async def update(self, message: ConversationMessage) -> ConversationMessage: ...


class ProjectRepository(ABC):
    @abstractmethod
    async def create(self, project: Project) -> Project: ...

    @abstractmethod
    async def get(self, project_id: UUID) -> Project | None: ...

    @abstractmethod
    async def list(self, team_id: UUID | None = None) -> builtins.list[Project]: ...

    @abstractmethod
    async def add_artifact(self, link: ProjectArtifact) -> ProjectArtifact: ...

    @abstractmethod
    async def remove_artifact(self, project_id: UUID, artifact_id: UUID) -> bool: ...

    @abstractmethod
    async def list_artifacts(self, project_id: UUID) -> builtins.list[ProjectArtifact]: ...


class TeamRepository(ABC):
    """Teams plus their members and invitations.

    Membership is unique per ``(team_id, user_id)``; adding an existing
    member returns the stored row unchanged.
    """

    @abstractmethod
    async def create(self, team: Team) -> Team: ...

    @abstractmethod
    async def get(self, team_id: UUID) -> Team | None: ...

    @abstractmethod
    async def list(self, member_id: str | None = None) -> builtins.list[Team]: ...

    @abstractmethod
    async def add_member(self, member: TeamMember) -> TeamMember: ...

    @abstractmethod
    async def get_member(self, team_id: UUID, user_id: str) -> TeamMember | None: ...

    @abstractmethod
    async def update_member(self, member: TeamMember) -> TeamMember: ...

    @abstractmethod
    async def remove_member(self, team_id: UUID, user_id: str) -> bool: ...

    @abstractmethod
    async def list_members(self, team_id: UUID) -> builtins.list[TeamMember]: ...

    @abstractmethod
    async def create_invitation(self, invitation: TeamInvitation) -> TeamInvitation: ...

    @abstractmethod
    async def find_invitation(self, code: str) -> TeamInvitation | None: ...

    @abstractmethod
    async def list_invitations(self, team_id: UUID) -> builtins.list[TeamInvitation]: ...

    @abstractmethod
    async def delete_invitation(self, invitation_id: UUID) -> bool: ...
