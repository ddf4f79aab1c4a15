"""Artifact lifecycle: create, read, list, update metadata, tombstone."""

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from protoforge.models.artifact import (
    INITIAL_INSTRUCTIONS,
    UPDATE_INSTRUCTIONS,
    Artifact,
    ContentType,
    Version,
    Visibility,
)
from protoforge.models.errors import ArtifactNotFoundError, ProtoforgeError, StorageError
from protoforge.service.conversation import ConversationService
from protoforge.service.events import ARTIFACT_CREATED, ARTIFACT_DELETED, EventBus
from protoforge.service.versioning import Clock, VersionService, storage_errors, utc_clock
from protoforge.storage.repository import ArtifactRepository

logger = logging.getLogger("protoforge.artifacts")

_NAME_FROM_PROMPT = 50
_IMAGE_URL_LIMIT = 500_000
IMAGE_MESSAGE = "Initial game image"


class ArtifactService:
    def __init__(
        self,
        artifacts: ArtifactRepository,
        versions: VersionService,
        conversation: ConversationService,
        bus: EventBus,
        *,
        clock: Clock = utc_clock,
        default_visibility: Visibility = Visibility.PUBLIC,
    ) -> None:
        self._artifacts = artifacts
        self._versions = versions
        self._conversation = conversation
        self._bus = bus
        self._clock = clock
        self._default_visibility = Visibility(default_visibility)

    async def create_artifact(
        self,
        prompt: str,
        content: str,
        *,
        name: str | None = None,
        content_type: ContentType = ContentType.GAME,
        visibility: Visibility | None = None,
        owner_id: str | None = None,
        instructions: str | None = None,
        image_url: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> tuple[Artifact, Version]:
        """Create an artifact and record its first version."""
        note = instructions or INITIAL_INSTRUCTIONS
        artifact = Artifact(
            name=name or prompt[:_NAME_FROM_PROMPT],
            prompt=prompt,
            content_type=content_type,
            visibility=visibility or self._default_visibility,
            owner_id=owner_id,
            content=content,
            instructions=note,
            metadata=metadata or {},
            created_at=self._clock(),
        )
        with storage_errors("artifact insert"):
            await self._artifacts.create(artifact)
        try:
            version = await self._versions.commit_version(artifact.id, content, note)
        except ProtoforgeError:
            await self._discard(artifact.id)
            raise
        logger.info("Created artifact %s (%s)", artifact.id, artifact.name)

        if image_url:
            try:
                await self._conversation.post_message(
                    artifact.id,
                    IMAGE_MESSAGE,
                    response=INITIAL_INSTRUCTIONS,
                    image_url=image_url[:_IMAGE_URL_LIMIT],
                    is_system=True,
                )
            except StorageError as exc:
                logger.warning("Could not save image reference for %s: %s", artifact.id, exc)

        await self._bus.publish(ARTIFACT_CREATED, {"artifact_id": str(artifact.id)})
        return await self._versions.require_artifact(artifact.id), version

    async def _discard(self, artifact_id: UUID) -> None:
        """Remove an artifact row whose first version could not be recorded."""
        try:
            with storage_errors("artifact delete"):
                await self._artifacts.delete(artifact_id)
        except StorageError:
            logger.error("Artifact %s left without a first version", artifact_id)
            return
        logger.warning("Discarded artifact %s after its first version failed", artifact_id)

    async def get_artifact(self, artifact_id: UUID, viewer_id: str | None = None) -> Artifact:
        artifact = await self._versions.require_artifact(artifact_id)
        if not artifact.can_view(viewer_id):
            # Private artifacts are indistinguishable from missing ones.
            raise ArtifactNotFoundError(artifact_id)
        return artifact

    async def list_artifacts(
        self,
        *,
        viewer_id: str | None = None,
        owner_id: str | None = None,
        visibility: Visibility | None = None,
        include_deleted: bool = False,
    ) -> list[Artifact]:
        """Artifacts *viewer_id* may browse, newest first.

        That is every public artifact plus the viewer's own, whatever their
        visibility.
        """
        with storage_errors("artifact list"):
            rows = await self._artifacts.list(owner_id=owner_id)
        rows = [a for a in rows if a.is_listed_for(viewer_id)]
        if not include_deleted:
            rows = [a for a in rows if not a.deleted]
        if visibility is not None:
            rows = [a for a in rows if a.visibility == visibility]
        return sorted(rows, key=lambda a: a.created_at, reverse=True)

    async def update_artifact(
        self,
        artifact_id: UUID,
        *,
        name: str | None = None,
        visibility: Visibility | None = None,
    ) -> Artifact:
        """Change metadata only; content changes go through versions."""
        artifact = await self._versions.require_artifact(artifact_id)
        changes: dict[str, Any] = {}
        if name is not None:
            changes["name"] = name
        if visibility is not None:
            changes["visibility"] = Visibility(visibility)
        if not changes:
            return artifact
        with storage_errors("artifact update"):
            return await self._artifacts.update(artifact.model_copy(update=changes))

    async def delete_artifact(self, artifact_id: UUID) -> None:
        artifact = await self._versions.require_artifact(artifact_id)
        with storage_errors("artifact update"):
            await self._artifacts.update(artifact.model_copy(update={"deleted": True}))
        logger.info("Deleted artifact %s", artifact_id)
        await self._bus.publish(ARTIFACT_DELETED, {"artifact_id": str(artifact_id)})

    async def record_generation(
        self, artifact_id: UUID, content: str, instructions: str | None = None
    ) -> Version:
        """Commit content produced by the generation pipeline or a chat edit."""
        return await self._versions.commit_version(
            artifact_id, content, instructions or UPDATE_INSTRUCTIONS
        )
