"""Composition root wiring repositories, services and the event bus."""

from __future__ import annotations

from dataclasses import dataclass

from protoforge.service.artifacts import ArtifactService
from protoforge.service.conversation import ConversationService
from protoforge.service.correlator import MessageCorrelator
from protoforge.service.events import EventBus
from protoforge.service.projects import ProjectService
from protoforge.service.revert import RevertOperator
from protoforge.service.teams import TeamService
from protoforge.service.versioning import Clock, VersionService, utc_clock
from protoforge.settings import Settings
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


@dataclass
class ServiceContainer:
    """Everything one running application needs, owned in one place."""

    settings: Settings
    bus: EventBus
    versions: VersionService
    reverter: RevertOperator
    correlator: MessageCorrelator
    conversation: ConversationService
    artifacts: ArtifactService
    teams: TeamService
    projects: ProjectService

    @classmethod
    def build(
        cls,
        settings: Settings,
        *,
        artifact_repo: ArtifactRepository,
        version_repo: VersionRepository,
        message_repo: MessageRepository,
        project_repo: ProjectRepository,
        team_repo: TeamRepository,
        clock: Clock = utc_clock,
    ) -> ServiceContainer:
        bus = EventBus(history_size=settings.event_history_size)
        versions = VersionService(
            artifact_repo,
            version_repo,
            bus,
            clock=clock,
            max_retries=settings.append_max_retries,
        )
        reverter = RevertOperator(versions, bus)
        correlator = MessageCorrelator(
            versions, reverter, message_repo, fallback=settings.message_revert_fallback
        )
        conversation = ConversationService(message_repo, versions, clock=clock)
        artifacts = ArtifactService(
            artifact_repo,
            versions,
            conversation,
            bus,
            clock=clock,
            default_visibility=settings.default_visibility,
        )
        teams = TeamService(team_repo, clock=clock)
        projects = ProjectService(project_repo, artifact_repo, versions, teams, clock=clock)
        return cls(
            settings=settings,
            bus=bus,
            versions=versions,
            reverter=reverter,
            correlator=correlator,
            conversation=conversation,
            artifacts=artifacts,
            teams=teams,
            projects=projects,
        )

    @classmethod
    def in_memory(
        cls, settings: Settings | None = None, *, clock: Clock = utc_clock
    ) -> ServiceContainer:
        """Container backed by the in-memory repositories."""
        return cls.build(
            settings or Settings(),
            artifact_repo=InMemoryArtifactRepository(),
            version_repo=InMemoryVersionRepository(),
            message_repo=InMemoryMessageRepository(),
            project_repo=InMemoryProjectRepository(),
            team_repo=InMemoryTeamRepository(),
            clock=clock,
        )
