"""Unit tests for forward-only revert."""

from __future__ import annotations

import uuid

import pytest

from protoforge.models.artifact import Artifact, Version
from protoforge.models.errors import ArtifactNotFoundError, InvalidStateError, VersionNotFoundError
from protoforge.service.container import ServiceContainer
from protoforge.service.events import VERSION_REVERTED
from protoforge.service.revert import revert_note
from tests.conftest import Repos, at


async def _five_versions(container: ServiceContainer) -> Artifact:
    artifact, _ = await container.artifacts.create_artifact("snake", "content-1")
    for n in range(2, 6):
        await container.artifacts.record_generation(artifact.id, f"content-{n}")
    return artifact


class TestRevertToVersion:
    async def test_revert_to_first_from_fifth(self, container: ServiceContainer) -> None:
        artifact = await _five_versions(container)
        new = await container.reverter.revert_to_version(artifact.id, 1)
        assert new.version_number == 6
        assert new.content == "content-1"
        assert new.instructions == "Reverted to version 1"

        history = await container.versions.list_versions(artifact.id)
        assert [v.version_number for v in history] == [6, 5, 4, 3, 2, 1]
        assert [v.content for v in history[1:]] == [f"content-{n}" for n in range(5, 0, -1)]

    async def test_pointer_follows_revert(self, container: ServiceContainer) -> None:
        artifact = await _five_versions(container)
        await container.reverter.revert_to_version(artifact.id, 3)
        stored = await container.versions.require_artifact(artifact.id)
        assert stored.current_version == 6
        assert stored.content == "content-3"
        assert stored.instructions == revert_note(3)

    async def test_revert_by_id(self, container: ServiceContainer) -> None:
        artifact, first = await container.artifacts.create_artifact("snake", "one")
        await container.artifacts.record_generation(artifact.id, "two")
        new = await container.reverter.revert_to_version(artifact.id, first.id)
        assert new.version_number == 3
        assert new.content == "one"
        assert new.id != first.id

    async def test_revert_to_current_still_appends(self, container: ServiceContainer) -> None:
        artifact, _ = await container.artifacts.create_artifact("snake", "one")
        await container.artifacts.record_generation(artifact.id, "two")
        new = await container.reverter.revert_to_version(artifact.id, 2)
        assert new.version_number == 3
        assert new.content == "two"

    async def test_numbering_skips_over_gaps(self, container: ServiceContainer, repos: Repos) -> None:
        artifact = Artifact(name="snake", prompt="snake")
        await repos.artifacts.create(artifact)
        repos.versions._insert_unchecked(
            Version(artifact_id=artifact.id, version_number=1, content="one", created_at=at(1))
        )
        repos.versions._insert_unchecked(
            Version(artifact_id=artifact.id, version_number=4, content="four", created_at=at(2))
        )
        new = await container.reverter.revert_to_version(artifact.id, 1)
        assert new.version_number == 5
        assert new.content == "one"
        assert new.instructions == revert_note(1)

    async def test_no_versions_is_invalid_state(
        self, container: ServiceContainer, repos: Repos
    ) -> None:
        artifact = Artifact(name="empty", prompt="empty")
        await repos.artifacts.create(artifact)
        with pytest.raises(InvalidStateError, match="no versions"):
            await container.reverter.revert_to_version(artifact.id, 1)
        assert await repos.versions.list(artifact.id) == []

    async def test_unknown_target(self, container: ServiceContainer, repos: Repos) -> None:
        artifact, _ = await container.artifacts.create_artifact("snake", "one")
        with pytest.raises(VersionNotFoundError):
            await container.reverter.revert_to_version(artifact.id, 7)
        with pytest.raises(VersionNotFoundError):
            await container.reverter.revert_to_version(artifact.id, uuid.uuid4())
        assert len(await repos.versions.list(artifact.id)) == 1

    async def test_missing_artifact(self, container: ServiceContainer) -> None:
        with pytest.raises(ArtifactNotFoundError):
            await container.reverter.revert_to_version(uuid.uuid4(), 1)

    async def test_publishes_revert_event(self, container: ServiceContainer) -> None:
        artifact = await _five_versions(container)
        await container.reverter.revert_to_version(artifact.id, 2)
        events = container.bus.history(VERSION_REVERTED)
        assert events[-1].payload == {
            "artifact_id": str(artifact.id),
            "source_version": 2,
            "version_number": 6,
        }

    async def test_source_version_untouched(self, container: ServiceContainer) -> None:
        artifact = await _five_versions(container)
        before = await container.versions.get_version(artifact.id, 1)
        await container.reverter.revert_to_version(artifact.id, 1)
        after = await container.versions.get_version(artifact.id, 1)
        assert after == before
