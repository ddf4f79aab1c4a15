"""In-memory storage implementation for development and testing."""

from __future__ import annotations

import builtins
from uuid import UUID

from protoforge.models.artifact import Artifact, Version
from protoforge.models.conversation import ConversationMessage
from protoforge.models.errors import ArtifactNotFoundError, VersionConflictError
from protoforge.models.project import Project, ProjectArtifact
from protoforge.models.team import Team, TeamInvitation, TeamMember
from protoforge.storage.repository import (
    ArtifactRepository,
    MessageRepository,
    ProjectRepository,
    TeamRepository,
    VersionRepository,
)


class InMemoryArtifactRepository(ArtifactRepository):
    """In-memory artifact repository.

    Rows are copied on the way in and out so callers never share a
    mutable model with the store.
    """

    def __init__(self) -> None:
        self._store: dict[UUID, Artifact] = {}

    async def create(self, artifact: Artifact) -> Artifact:
        self._store[artifact.id] = artifact.model_copy(deep=True)
        return artifact

    async def get(self, artifact_id: UUID) -> Artifact | None:
        artifact = self._store.get(artifact_id)
        return artifact.model_copy(deep=True) if artifact else None

    async def list(self, owner_id: str | None = None) -> builtins.list[Artifact]:
        artifacts = [a.model_copy(deep=True) for a in self._store.values()]
        if owner_id:
            artifacts = [a for a in artifacts if a.owner_id == owner_id]
        return artifacts

    async def update(self, artifact: Artifact) -> Artifact:
        if artifact.id not in self._store:
            raise ArtifactNotFoundError(artifact.id)
        self._store[artifact.id] = artifact.model_copy(deep=True)
        return artifact

    async def delete(self, artifact_id: UUID) -> bool:
        return self._store.pop(artifact_id, None) is not None

    async def set_pointer(
        self,
        artifact_id: UUID,
        version_number: int,
        content: str,
        instructions: str | None,
    ) -> Artifact:
        artifact = self._store.get(artifact_id)
        if artifact is None:
            raise ArtifactNotFoundError(artifact_id)
        updated = artifact.model_copy(
            update={
                "current_version": version_number,
                "content": content,
                "instructions": instructions,
            }
        )
        self._store[artifact_id] = updated
        return updated.model_copy(deep=True)


class InMemoryVersionRepository(VersionRepository):
    """In-memory version log with a unique ``(artifact_id, version_number)`` index."""

    def __init__(self) -> None:
        self._rows: builtins.list[Version] = []
        self._numbers: set[tuple[UUID, int]] = set()

    async def insert(self, version: Version) -> Version:
        key = (version.artifact_id, version.version_number)
        if key in self._numbers:
            raise VersionConflictError(version.artifact_id, version.version_number)
        self._insert_unchecked(version)
        return version

    def _insert_unchecked(self, version: Version) -> None:
        """Store a row without the uniqueness check (legacy data in tests)."""
        self._rows.append(version)
        self._numbers.add((version.artifact_id, version.version_number))

    async def get(self, version_id: UUID) -> Version | None:
        for version in self._rows:
            if version.id == version_id:
                return version
        return None

    async def list(self, artifact_id: UUID) -> builtins.list[Version]:
        return [v for v in self._rows if v.artifact_id == artifact_id]

    async def max_version_number(self, artifact_id: UUID) -> int:
        return max(
            (v.version_number for v in self._rows if v.artifact_id == artifact_id),
            default=0,
        )


class InMemoryMessageRepository(MessageRepository):
    """In-memory conversation message repository."""

    def __init__(self) -> None:
        self._store: dict[UUID, ConversationMessage] = {}

    async def create(self, message: ConversationMessage) -> ConversationMessage:
        self._store[message.id] = message.model_copy(deep=True)
        return message

    async def get(self, message_id: UUID) -> ConversationMessage | None:
        message = self._store.get(message_id)
        return message.model_copy(deep=True) if message else None

    async def list(self, artifact_id: UUID) -> builtins.list[ConversationMessage]:
        return [m.model_copy(deep=True) for m in self._store.values() if m.artifact_id == artifact_id]

    async def update(self, message: ConversationMessage) -> ConversationMessage:
        self._store[message.id] = message.model_copy(deep=True)
        return message


class InMemoryProjectRepository(ProjectRepository):
    """In-memory project repository."""

    def __init__(self) -> None:
        self._store: dict[UUID, Project] = {}
        self._links: dict[tuple[UUID, UUID], ProjectArtifact] = {}

    async def create(self, project: Project) -> Project:
        self._store[project.id] = project
        return project

    async def get(self, project_id: UUID) -> Project | None:
        return self._store.get(project_id)

    async def list(self, team_id: UUID | None = None) -> builtins.list[Project]:
        projects = list(self._store.values())
        if team_id is not None:
            projects = [p for p in projects if p.team_id == team_id]
        return projects

    async def add_artifact(self, link: ProjectArtifact) -> ProjectArtifact:
        key = (link.project_id, link.artifact_id)
        existing = self._links.get(key)
        if existing is not None:
            return existing
        self._links[key] = link
        return link

    async def remove_artifact(self, project_id: UUID, artifact_id: UUID) -> bool:
        return self._links.pop((project_id, artifact_id), None) is not None

    async def list_artifacts(self, project_id: UUID) -> builtins.list[ProjectArtifact]:
        return [link for (pid, _), link in self._links.items() if pid == project_id]


class InMemoryTeamRepository(TeamRepository):
    """In-memory teams, members and invitations."""

    def __init__(self) -> None:
        self._teams: dict[UUID, Team] = {}
        self._members: dict[tuple[UUID, str], TeamMember] = {}
        self._invitations: dict[UUID, TeamInvitation] = {}

    async def create(self, team: Team) -> Team:
        self._teams[team.id] = team
        return team

    async def get(self, team_id: UUID) -> Team | None:
        return self._teams.get(team_id)

    async def list(self, member_id: str | None = None) -> builtins.list[Team]:
        teams = list(self._teams.values())
        if member_id is not None:
            joined = {tid for (tid, uid) in self._members if uid == member_id}
            teams = [t for t in teams if t.id in joined]
        return teams

    async def add_member(self, member: TeamMember) -> TeamMember:
        key = (member.team_id, member.user_id)
        existing = self._members.get(key)
        if existing is not None:
            return existing
        self._members[key] = member
        return member

    async def get_member(self, team_id: UUID, user_id: str) -> TeamMember | None:
        return self._members.get((team_id, user_id))

    async def update_member(self, member: TeamMember) -> TeamMember:
        self._members[(member.team_id, member.user_id)] = member
        return member

    async def remove_member(self, team_id: UUID, user_id: str) -> bool:
        return self._members.pop((team_id, user_id), None) is not None

    async def list_members(self, team_id: UUID) -> builtins.list[TeamMember]:
        return [m for (tid, _), m in self._members.items() if tid == team_id]

    async def create_invitation(self, invitation: TeamInvitation) -> TeamInvitation:
        self._invitations[invitation.id] = invitation
        return invitation

    async def find_invitation(self, code: str) -> TeamInvitation | None:
        for invitation in self._invitations.values():
            if invitation.invitation_code == code:
                return invitation
        return None

    async def list_invitations(self, team_id: UUID) -> builtins.list[TeamInvitation]:
        return [i for i in self._invitations.values() if i.team_id == team_id]

    async def delete_invitation(self, invitation_id: UUID) -> bool:
        return self._invitations.pop(invitation_id, None) is not None
