"""Unit tests for the conversation log."""

from __future__ import annotations

import uuid

import pytest

from protoforge.models.errors import ArtifactNotFoundError, MessageNotFoundError
from protoforge.service.container import ServiceContainer
from tests.conftest import FakeClock, at


class TestConversation:
    async def test_post_and_list_oldest_first(
        self, container: ServiceContainer, clock: FakeClock
    ) -> None:
        artifact, _ = await container.artifacts.create_artifact("snake", "c")
        clock.set(5)
        second = await container.conversation.post_message(artifact.id, "second")
        clock.set(2)
        first = await container.conversation.post_message(
            artifact.id, "first", model_type="fast"
        )
        messages = await container.conversation.list_messages(artifact.id)
        assert [m.id for m in messages] == [first.id, second.id]
        assert messages[0].created_at == at(2)
        assert messages[0].model_type == "fast"

    async def test_set_response(self, container: ServiceContainer) -> None:
        artifact, _ = await container.artifacts.create_artifact("snake", "c")
        msg = await container.conversation.post_message(artifact.id, "make it red")
        updated = await container.conversation.set_response(
            artifact.id, msg.id, "Content updated successfully"
        )
        assert updated.response == "Content updated successfully"
        fetched = await container.conversation.get_message(artifact.id, msg.id)
        assert fetched.response == "Content updated successfully"

    async def test_message_scoped_to_artifact(self, container: ServiceContainer) -> None:
        a, _ = await container.artifacts.create_artifact("a", "c")
        b, _ = await container.artifacts.create_artifact("b", "c")
        msg = await container.conversation.post_message(a.id, "hello")
        with pytest.raises(MessageNotFoundError):
            await container.conversation.get_message(b.id, msg.id)
        assert await container.conversation.list_messages(b.id) == []

    async def test_unknown_artifact(self, container: ServiceContainer) -> None:
        with pytest.raises(ArtifactNotFoundError):
            await container.conversation.post_message(uuid.uuid4(), "hello")
