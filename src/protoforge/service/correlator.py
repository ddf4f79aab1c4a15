"""Resolve "undo this chat message" to a concrete version.

Messages and versions share no key, only time.  The target is the
earliest version created strictly after the message, i.e. the version the
message produced.  When nothing is newer than the message the fallback
policy applies: ``"oldest"`` rewinds to the first version ever recorded,
``"none"`` refuses.
"""

from __future__ import annotations

from typing import Literal
from uuid import UUID

from protoforge.models.artifact import Version
from protoforge.models.conversation import ConversationMessage
from protoforge.models.errors import MessageNotFoundError, NoSuitableVersionError
from protoforge.service.revert import RevertOperator
from protoforge.service.versioning import VersionService, storage_errors
from protoforge.storage.repository import MessageRepository

FallbackPolicy = Literal["oldest", "none"]


def pick_target(
    versions: list[Version], message: ConversationMessage, fallback: FallbackPolicy = "oldest"
) -> Version:
    chronological = sorted(versions, key=lambda v: (v.created_at, v.version_number))
    after = [v for v in chronological if v.created_at > message.created_at]
    if after:
        return after[0]
    if chronological and fallback == "oldest":
        return chronological[0]
    raise NoSuitableVersionError(
        f"No suitable version found for message '{message.id}'"
    )


class MessageCorrelator:
    def __init__(
        self,
        versions: VersionService,
        reverter: RevertOperator,
        messages: MessageRepository,
        *,
        fallback: FallbackPolicy = "oldest",
    ) -> None:
        self._versions = versions
        self._reverter = reverter
        self._messages = messages
        self._fallback = fallback

    async def load_message(
        self, artifact_id: UUID, message: ConversationMessage | UUID
    ) -> ConversationMessage:
        if isinstance(message, ConversationMessage):
            found: ConversationMessage | None = message
        else:
            with storage_errors("message read"):
                found = await self._messages.get(message)
        if found is None or found.artifact_id != artifact_id:
            missing = message.id if isinstance(message, ConversationMessage) else message
            raise MessageNotFoundError(missing)
        return found

    async def resolve_target(
        self, artifact_id: UUID, message: ConversationMessage | UUID
    ) -> Version:
        msg = await self.load_message(artifact_id, message)
        versions = await self._versions.list_versions(artifact_id)
        return pick_target(versions, msg, self._fallback)

    async def revert_to_message_version(
        self, artifact_id: UUID, message: ConversationMessage | UUID
    ) -> Version:
        """Resolve the message's target and revert to it; no writes on failure."""
        target = await self.resolve_target(artifact_id, message)
        return await self._reverter.revert_to(target)
