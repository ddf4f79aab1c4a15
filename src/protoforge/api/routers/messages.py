"""Conversation endpoints nested under an artifact."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Header

from protoforge.api.deps import get_container
from protoforge.api.errors import http_error
from protoforge.api.schemas import (
    MessageCreateRequest,
    MessageListResponse,
    MessageResponse,
    MessageUpdateRequest,
    VersionCommitResponse,
    VersionResponse,
)
from protoforge.models.errors import ProtoforgeError
from protoforge.service.container import ServiceContainer

router = APIRouter()


@router.get("/{artifact_id}/messages", response_model=MessageListResponse)
async def list_messages(
    artifact_id: UUID,
    x_user_id: str | None = Header(default=None),
    c: ServiceContainer = Depends(get_container),  # noqa: B008
) -> MessageListResponse:
    """Chat history, oldest first."""
    try:
        await c.artifacts.get_artifact(artifact_id, viewer_id=x_user_id)
        rows = await c.conversation.list_messages(artifact_id)
    except ProtoforgeError as exc:
        raise http_error(exc) from None
    return MessageListResponse(messages=[MessageResponse.from_model(m) for m in rows])


@router.post("/{artifact_id}/messages", response_model=MessageResponse, status_code=201)
async def post_message(
    artifact_id: UUID,
    body: MessageCreateRequest,
    x_user_id: str | None = Header(default=None),
    c: ServiceContainer = Depends(get_container),  # noqa: B008
) -> MessageResponse:
    try:
        await c.artifacts.get_artifact(artifact_id, viewer_id=x_user_id)
        msg = await c.conversation.post_message(
            artifact_id,
            body.message,
            response=body.response,
            model_type=body.model_type,
            image_url=body.image_url,
            is_system=body.is_system,
        )
    except ProtoforgeError as exc:
        raise http_error(exc) from None
    return MessageResponse.from_model(msg)


@router.patch("/{artifact_id}/messages/{message_id}", response_model=MessageResponse)
async def set_response(
    artifact_id: UUID,
    message_id: UUID,
    body: MessageUpdateRequest,
    x_user_id: str | None = Header(default=None),
    c: ServiceContainer = Depends(get_container),  # noqa: B008
) -> MessageResponse:
    """Attach the assistant's response to a message."""
    try:
        await c.artifacts.get_artifact(artifact_id, viewer_id=x_user_id)
        msg = await c.conversation.set_response(artifact_id, message_id, body.response)
    except ProtoforgeError as exc:
        raise http_error(exc) from None
    return MessageResponse.from_model(msg)


@router.post(
    "/{artifact_id}/messages/{message_id}/revert",
    response_model=VersionCommitResponse,
    status_code=201,
)
async def revert_to_message(
    artifact_id: UUID,
    message_id: UUID,
    x_user_id: str | None = Header(default=None),
    c: ServiceContainer = Depends(get_container),  # noqa: B008
) -> VersionCommitResponse:
    """Revert to the version correlated with a chat message."""
    try:
        await c.artifacts.get_artifact(artifact_id, viewer_id=x_user_id)
        version = await c.correlator.revert_to_message_version(artifact_id, message_id)
        artifact = await c.versions.require_artifact(artifact_id)
    except ProtoforgeError as exc:
        raise http_error(exc) from None
    return VersionCommitResponse(
        version=VersionResponse.from_model(version),
        current_version=artifact.current_version,
    )
