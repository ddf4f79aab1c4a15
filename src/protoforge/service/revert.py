"""Forward-only revert: restoring old content always appends a new version."""

from __future__ import annotations

import logging
from uuid import UUID

from protoforge.models.artifact import Version
from protoforge.models.errors import InvalidStateError, VersionNotFoundError
from protoforge.service.events import VERSION_REVERTED, EventBus
from protoforge.service.versioning import VersionService

logger = logging.getLogger("protoforge.versions")


def revert_note(version_number: int) -> str:
    return f"Reverted to version {version_number}"


class RevertOperator:
    """Turn "give me version N back" into a new head version."""

    def __init__(self, versions: VersionService, bus: EventBus) -> None:
        self._versions = versions
        self._bus = bus

    async def revert_to_version(self, artifact_id: UUID, target: UUID | int) -> Version:
        """Append a copy of *target* (a version id or number) as the new head.

        Reverting to the head itself still appends.  Raises
        :class:`InvalidStateError` when the artifact has no versions and
        :class:`VersionNotFoundError` when *target* does not exist; neither
        case writes anything.
        """
        history = await self._versions.list_versions(artifact_id)
        if not history:
            raise InvalidStateError(f"Artifact '{artifact_id}' has no versions to revert to")
        source = _find(history, target)
        if source is None:
            raise VersionNotFoundError(artifact_id, target)
        return await self.revert_to(source)

    async def revert_to(self, source: Version) -> Version:
        """Append a copy of an already-resolved *source* version."""
        new_version = await self._versions.commit_version(
            source.artifact_id, source.content, revert_note(source.version_number)
        )
        logger.info(
            "Artifact %s reverted to version %d as version %d",
            source.artifact_id, source.version_number, new_version.version_number,
        )
        await self._bus.publish(
            VERSION_REVERTED,
            {
                "artifact_id": str(source.artifact_id),
                "source_version": source.version_number,
                "version_number": new_version.version_number,
            },
        )
        return new_version


def _find(history: list[Version], target: UUID | int) -> Version | None:
    for version in history:
        if isinstance(target, int):
            if version.version_number == target:
                return version
        elif version.id == target:
            return version
    return None
