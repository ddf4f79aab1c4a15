"""Persistence interfaces and in-memory implementations."""

from protoforge.storage.memory_repo import (
    InMemoryArtifactRepository,
    InMemoryMessageRepository,
    InMemoryProjectRepository,
    InMemoryTeamRepository,
    InMemoryVersionRepository,
)
from protoforge.storage.repository import (
    ArtifactRepository,
    MessageRepository,
    ProjectRepository,
    TeamRepository,
    VersionRepository,
)

__all__ = [
    "ArtifactRepository",
    "InMemoryArtifactRepository",
    "InMemoryMessageRepository",
    "InMemoryProjectRepository",
    "InMemoryTeamRepository",
    "InMemoryVersionRepository",
    "MessageRepository",
    "ProjectRepository",
    "TeamRepository",
    "VersionRepository",
]
