"""Conversation log attached to artifacts."""

from __future__ import annotations

from uuid import UUID

from protoforge.models.conversation import ConversationMessage
from protoforge.models.errors import MessageNotFoundError
from protoforge.service.versioning import Clock, VersionService, storage_errors, utc_clock
from protoforge.storage.repository import MessageRepository


class ConversationService:
    def __init__(
        self,
        messages: MessageRepository,
        versions: VersionService,
        *,
        clock: Clock = utc_clock,
    ) -> None:
        self._messages = messages
        self._versions = versions
        self._clock = clock

    async def post_message(
        self,
        artifact_id: UUID,
        message: str,
        *,
        response: str | None = None,
        model_type: str | None = None,
        image_url: str | None = None,
        is_system: bool = False,
    ) -> ConversationMessage:
        await self._versions.require_artifact(artifact_id)
        msg = ConversationMessage(
            artifact_id=artifact_id,
            message=message,
            response=response,
            model_type=model_type,
            image_url=image_url,
            is_system=is_system,
            created_at=self._clock(),
        )
        with storage_errors("message insert"):
            return await self._messages.create(msg)

    async def get_message(self, artifact_id: UUID, message_id: UUID) -> ConversationMessage:
        with storage_errors("message read"):
            msg = await self._messages.get(message_id)
        if msg is None or msg.artifact_id != artifact_id:
            raise MessageNotFoundError(message_id)
        return msg

    async def set_response(
        self, artifact_id: UUID, message_id: UUID, response: str
    ) -> ConversationMessage:
        msg = await self.get_message(artifact_id, message_id)
        updated = msg.model_copy(update={"response": response})
        with storage_errors("message update"):
            return await self._messages.update(updated)

    async def list_messages(self, artifact_id: UUID) -> list[ConversationMessage]:
        """Oldest first."""
        await self._versions.require_artifact(artifact_id)
        with storage_errors("message list"):
            rows = await self._messages.list(artifact_id)
        return sorted(rows, key=lambda m: m.created_at)
