"""Shared test fixtures for Protoforge."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import pytest

from protoforge.service.container import ServiceContainer
from protoforge.settings import Settings
from protoforge.storage.memory_repo import (
    InMemoryArtifactRepository,
    InMemoryMessageRepository,
    InMemoryProjectRepository,
    InMemoryTeamRepository,
    InMemoryVersionRepository,
)

EPOCH = datetime(2024, 1, 1, tzinfo=UTC)

SNAKE_HTML = "<html><body><canvas id='snake'></canvas></body></html>"


def at(seconds: float) -> datetime:
    """Timestamp *seconds* after the test epoch."""
    return EPOCH + timedelta(seconds=seconds)


class FakeClock:
    """Settable clock; returns the same instant until moved."""

    def __init__(self, seconds: float = 0) -> None:
        self.now = at(seconds)

    def __call__(self) -> datetime:
        return self.now

    def set(self, seconds: float) -> None:
        self.now = at(seconds)


@dataclass
class Repos:
    artifacts: InMemoryArtifactRepository
    versions: InMemoryVersionRepository
    messages: InMemoryMessageRepository
    projects: InMemoryProjectRepository
    teams: InMemoryTeamRepository


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def repos() -> Repos:
    return Repos(
        artifacts=InMemoryArtifactRepository(),
        versions=InMemoryVersionRepository(),
        messages=InMemoryMessageRepository(),
        projects=InMemoryProjectRepository(),
        teams=InMemoryTeamRepository(),
    )


@pytest.fixture
def container(settings: Settings, repos: Repos, clock: FakeClock) -> ServiceContainer:
    return ServiceContainer.build(
        settings,
        artifact_repo=repos.artifacts,
        version_repo=repos.versions,
        message_repo=repos.messages,
        project_repo=repos.projects,
        team_repo=repos.teams,
        clock=clock,
    )
