"""Conversation messages attached to an artifact."""

from __future__ import annotations

from datetime import UTC, datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ConversationMessage(BaseModel):
    """A chat turn about an artifact.

    Messages never reference a version directly; they are matched to
    versions by ``created_at`` when a user asks to undo a change.
    """

    id: UUID = Field(default_factory=uuid4)
    artifact_id: UUID
    message: str
    response: str | None = None
    is_system: bool = False
    image_url: str | None = None
    model_type: str | None = None
    created_at: datetime = Field(default_factory=_utcnow)
