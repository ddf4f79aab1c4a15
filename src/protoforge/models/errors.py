"""Domain errors for artifact versioning."""

from __future__ import annotations

from uuid import UUID


class ProtoforgeError(Exception):
    """Base class for all domain errors."""


class NotFoundError(ProtoforgeError, KeyError):
    """A referenced artifact, version, message or project does not exist."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep plain messages.
        return str(self.args[0]) if self.args else ""


class ArtifactNotFoundError(NotFoundError):
    def __init__(self, artifact_id: UUID) -> None:
        super().__init__(f"Artifact '{artifact_id}' not found")
        self.artifact_id = artifact_id


class VersionNotFoundError(NotFoundError):
    def __init__(self, artifact_id: UUID, ref: UUID | int) -> None:
        label = f"number {ref}" if isinstance(ref, int) else f"'{ref}'"
        super().__init__(f"Version {label} not found for artifact '{artifact_id}'")
        self.artifact_id = artifact_id
        self.ref = ref


class MessageNotFoundError(NotFoundError):
    def __init__(self, message_id: UUID) -> None:
        super().__init__(f"Message '{message_id}' not found")
        self.message_id = message_id


class ProjectNotFoundError(NotFoundError):
    def __init__(self, project_id: UUID) -> None:
        super().__init__(f"Project '{project_id}' not found")
        self.project_id = project_id


class TeamNotFoundError(NotFoundError):
    def __init__(self, team_id: UUID) -> None:
        super().__init__(f"Team '{team_id}' not found")
        self.team_id = team_id


class TeamMemberNotFoundError(NotFoundError):
    def __init__(self, team_id: UUID, user_id: str) -> None:
        super().__init__(f"User '{user_id}' is not a member of team '{team_id}'")
        self.team_id = team_id
        self.user_id = user_id


class InvitationNotFoundError(NotFoundError):
    def __init__(self, ref: UUID | str) -> None:
        if isinstance(ref, UUID):
            super().__init__(f"Invitation '{ref}' not found")
        else:
            super().__init__("Invalid invitation code")
        self.ref = ref


class InvalidStateError(ProtoforgeError):
    """The artifact has no version history to operate on."""


class NoSuitableVersionError(ProtoforgeError):
    """A conversation message could not be resolved to a version."""


class StorageError(ProtoforgeError):
    """An underlying persistence call failed."""


class VersionConflictError(StorageError):
    """``(artifact_id, version_number)`` is already taken."""

    def __init__(self, artifact_id: UUID, version_number: int) -> None:
        super().__init__(
            f"Version number {version_number} already exists for artifact '{artifact_id}'"
        )
        self.artifact_id = artifact_id
        self.version_number = version_number
