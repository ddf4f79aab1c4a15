"""Unit tests for the artifact lifecycle service."""

from __future__ import annotations

import logging
import uuid

import pytest

from protoforge.models.artifact import ContentType, Version, Visibility
from protoforge.models.conversation import ConversationMessage
from protoforge.models.errors import ArtifactNotFoundError, StorageError
from protoforge.service.artifacts import IMAGE_MESSAGE
from protoforge.service.container import ServiceContainer
from protoforge.service.events import ARTIFACT_CREATED, ARTIFACT_DELETED
from protoforge.settings import Settings
from protoforge.storage.memory_repo import InMemoryMessageRepository, InMemoryVersionRepository
from tests.conftest import SNAKE_HTML, FakeClock, Repos


class TestCreateArtifact:
    async def test_creates_first_version(self, container: ServiceContainer) -> None:
        artifact, version = await container.artifacts.create_artifact(
            "A snake game with neon colours", SNAKE_HTML, owner_id="alice"
        )
        assert version.version_number == 1
        assert version.instructions == "Initial generation"
        assert artifact.current_version == 1
        assert artifact.content == SNAKE_HTML
        assert artifact.owner_id == "alice"
        assert artifact.visibility is Visibility.PUBLIC

    async def test_name_defaults_to_prompt_prefix(self, container: ServiceContainer) -> None:
        prompt = "x" * 80
        artifact, _ = await container.artifacts.create_artifact(prompt, SNAKE_HTML)
        assert artifact.name == "x" * 50

    async def test_explicit_fields(self, container: ServiceContainer) -> None:
        artifact, version = await container.artifacts.create_artifact(
            "chart",
            "<svg/>",
            name="Sales chart",
            content_type=ContentType.DATAVIZ,
            visibility=Visibility.UNLISTED,
            instructions="First draft",
            metadata={"model": "smart"},
        )
        assert artifact.name == "Sales chart"
        assert artifact.content_type is ContentType.DATAVIZ
        assert artifact.visibility is Visibility.UNLISTED
        assert artifact.metadata == {"model": "smart"}
        assert version.instructions == "First draft"

    async def test_default_visibility_from_settings(self, repos: Repos, clock: FakeClock) -> None:
        container = ServiceContainer.build(
            Settings(_env_file=None, default_visibility="private"),
            artifact_repo=repos.artifacts,
            version_repo=repos.versions,
            message_repo=repos.messages,
            project_repo=repos.projects,
            team_repo=repos.teams,
            clock=clock,
        )
        artifact, _ = await container.artifacts.create_artifact("p", "c")
        assert artifact.visibility is Visibility.PRIVATE

    async def test_image_reference_recorded(self, container: ServiceContainer) -> None:
        artifact, _ = await container.artifacts.create_artifact(
            "snake", SNAKE_HTML, image_url="https://img.example/snake.png"
        )
        messages = await container.conversation.list_messages(artifact.id)
        assert len(messages) == 1
        assert messages[0].message == IMAGE_MESSAGE
        assert messages[0].is_system
        assert messages[0].image_url == "https://img.example/snake.png"

    async def test_image_reference_failure_is_not_fatal(
        self, repos: Repos, clock: FakeClock, caplog: pytest.LogCaptureFixture
    ) -> None:
        class BrokenMessages(InMemoryMessageRepository):
            async def create(self, message: ConversationMessage) -> ConversationMessage:
                raise TimeoutError("upstream timeout")

        container = ServiceContainer.build(
            Settings(_env_file=None),
            artifact_repo=repos.artifacts,
            version_repo=repos.versions,
            message_repo=BrokenMessages(),
            project_repo=repos.projects,
            team_repo=repos.teams,
            clock=clock,
        )
        with caplog.at_level(logging.WARNING, logger="protoforge.artifacts"):
            artifact, version = await container.artifacts.create_artifact(
                "snake", SNAKE_HTML, image_url="https://img.example/snake.png"
            )
        assert version.version_number == 1
        assert artifact.current_version == 1
        assert "Could not save image reference" in caplog.text

    async def test_failed_first_version_leaves_no_artifact(
        self, repos: Repos, clock: FakeClock, caplog: pytest.LogCaptureFixture
    ) -> None:
        class BrokenVersions(InMemoryVersionRepository):
            async def insert(self, version: Version) -> Version:
                raise OSError("disk full")

        container = ServiceContainer.build(
            Settings(_env_file=None),
            artifact_repo=repos.artifacts,
            version_repo=BrokenVersions(),
            message_repo=repos.messages,
            project_repo=repos.projects,
            team_repo=repos.teams,
            clock=clock,
        )
        with caplog.at_level(logging.WARNING, logger="protoforge.artifacts"):
            with pytest.raises(StorageError, match="disk full"):
                await container.artifacts.create_artifact("snake", SNAKE_HTML, owner_id="alice")
        assert await repos.artifacts.list() == []
        assert await container.artifacts.list_artifacts(viewer_id="alice") == []
        assert container.bus.history(ARTIFACT_CREATED) == []
        assert "Discarded artifact" in caplog.text

    async def test_publishes_created(self, container: ServiceContainer) -> None:
        artifact, _ = await container.artifacts.create_artifact("snake", SNAKE_HTML)
        events = container.bus.history(ARTIFACT_CREATED)
        assert events[-1].payload == {"artifact_id": str(artifact.id)}


class TestReadAndList:
    async def test_private_hidden_from_others(self, container: ServiceContainer) -> None:
        artifact, _ = await container.artifacts.create_artifact(
            "secret", SNAKE_HTML, owner_id="alice", visibility=Visibility.PRIVATE
        )
        assert (await container.artifacts.get_artifact(artifact.id, "alice")).id == artifact.id
        with pytest.raises(ArtifactNotFoundError):
            await container.artifacts.get_artifact(artifact.id, "bob")
        with pytest.raises(ArtifactNotFoundError):
            await container.artifacts.get_artifact(artifact.id)

    async def test_unlisted_viewable_by_anyone(self, container: ServiceContainer) -> None:
        artifact, _ = await container.artifacts.create_artifact(
            "link only", SNAKE_HTML, owner_id="alice", visibility=Visibility.UNLISTED
        )
        assert (await container.artifacts.get_artifact(artifact.id)).id == artifact.id

    async def test_list_newest_first_and_filters(
        self, container: ServiceContainer, clock: FakeClock
    ) -> None:
        clock.set(1)
        old, _ = await container.artifacts.create_artifact("old", "c", owner_id="alice")
        clock.set(2)
        new, _ = await container.artifacts.create_artifact(
            "new", "c", owner_id="alice", visibility=Visibility.PRIVATE
        )
        clock.set(3)
        await container.artifacts.create_artifact("bob's", "c", owner_id="bob")

        mine = await container.artifacts.list_artifacts(viewer_id="alice", owner_id="alice")
        assert [a.id for a in mine] == [new.id, old.id]
        public = await container.artifacts.list_artifacts(
            viewer_id="alice", owner_id="alice", visibility=Visibility.PUBLIC
        )
        assert [a.id for a in public] == [old.id]

    async def test_list_hides_other_users_non_public(self, container: ServiceContainer) -> None:
        public, _ = await container.artifacts.create_artifact("open", "c", owner_id="alice")
        secret, _ = await container.artifacts.create_artifact(
            "secret", "c", owner_id="alice", visibility=Visibility.PRIVATE
        )
        link, _ = await container.artifacts.create_artifact(
            "link", "c", owner_id="alice", visibility=Visibility.UNLISTED
        )
        for viewer in (None, "mallory"):
            rows = await container.artifacts.list_artifacts(viewer_id=viewer)
            assert [a.id for a in rows] == [public.id]
        own = await container.artifacts.list_artifacts(viewer_id="alice")
        assert {a.id for a in own} == {public.id, secret.id, link.id}

    async def test_deleted_excluded(self, container: ServiceContainer) -> None:
        artifact, _ = await container.artifacts.create_artifact("gone", "c")
        await container.artifacts.delete_artifact(artifact.id)
        assert await container.artifacts.list_artifacts() == []
        assert len(await container.artifacts.list_artifacts(include_deleted=True)) == 1


class TestUpdateAndDelete:
    async def test_rename_and_change_visibility(self, container: ServiceContainer) -> None:
        artifact, _ = await container.artifacts.create_artifact("snake", SNAKE_HTML)
        updated = await container.artifacts.update_artifact(
            artifact.id, name="Neon snake", visibility=Visibility.UNLISTED
        )
        assert updated.name == "Neon snake"
        assert updated.visibility is Visibility.UNLISTED
        assert updated.current_version == 1

    async def test_update_without_changes(self, container: ServiceContainer) -> None:
        artifact, _ = await container.artifacts.create_artifact("snake", SNAKE_HTML)
        same = await container.artifacts.update_artifact(artifact.id)
        assert same.name == artifact.name

    async def test_delete_is_tombstone(self, container: ServiceContainer, repos: Repos) -> None:
        artifact, _ = await container.artifacts.create_artifact("snake", SNAKE_HTML)
        await container.artifacts.delete_artifact(artifact.id)
        stored = await repos.artifacts.get(artifact.id)
        assert stored is not None and stored.deleted
        assert len(await repos.versions.list(artifact.id)) == 1
        with pytest.raises(ArtifactNotFoundError):
            await container.artifacts.get_artifact(artifact.id)
        with pytest.raises(ArtifactNotFoundError):
            await container.artifacts.delete_artifact(artifact.id)
        assert container.bus.history(ARTIFACT_DELETED)[-1].payload["artifact_id"] == str(
            artifact.id
        )

    async def test_update_missing(self, container: ServiceContainer) -> None:
        with pytest.raises(ArtifactNotFoundError):
            await container.artifacts.update_artifact(uuid.uuid4(), name="x")


class TestRecordGeneration:
    async def test_default_note(self, container: ServiceContainer) -> None:
        artifact, _ = await container.artifacts.create_artifact("snake", SNAKE_HTML)
        version = await container.artifacts.record_generation(artifact.id, "<html>v2</html>")
        assert version.version_number == 2
        assert version.instructions == "Updated content"
        stored = await container.artifacts.get_artifact(artifact.id)
        assert stored.content == "<html>v2</html>"
