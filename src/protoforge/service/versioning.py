"""Version log and current-version pointer for artifacts.

Versions are append-only.  Numbers are assigned as ``max + 1`` against a
storage layer that rejects duplicate ``(artifact_id, version_number)``
pairs; a rejected insert re-reads the maximum and retries.  Appends for
the same artifact are additionally serialized in-process by
:meth:`VersionService.commit_version`.
"""

from __future__ import annotations

import asyncio
import logging
import weakref
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from uuid import UUID

from protoforge.models.artifact import Artifact, Version
from protoforge.models.errors import (
    ArtifactNotFoundError,
    ProtoforgeError,
    StorageError,
    VersionConflictError,
    VersionNotFoundError,
)
from protoforge.service.events import POINTER_RECONCILED, VERSION_APPENDED, EventBus
from protoforge.storage.repository import ArtifactRepository, VersionRepository

logger = logging.getLogger("protoforge.versions")

Clock = Callable[[], datetime]


def utc_clock() -> datetime:
    return datetime.now(UTC)


@contextmanager
def storage_errors(operation: str) -> Iterator[None]:
    """Re-raise unexpected repository failures as :class:`StorageError`."""
    try:
        yield
    except ProtoforgeError:
        raise
    except Exception as exc:
        logger.error("Storage failure during %s: %s", operation, exc)
        raise StorageError(f"{operation} failed: {exc}") from exc


def dedupe_versions(versions: Iterable[Version]) -> list[Version]:
    """One version per number, newest number first.

    When a number appears more than once the earliest-created row wins.
    """
    chosen: dict[int, Version] = {}
    for version in versions:
        seen = chosen.get(version.version_number)
        if seen is None or version.created_at < seen.created_at:
            chosen[version.version_number] = version
    return sorted(chosen.values(), key=lambda v: v.version_number, reverse=True)


class VersionService:
    """Append, list and point at versions of one or more artifacts."""

    def __init__(
        self,
        artifacts: ArtifactRepository,
        versions: VersionRepository,
        bus: EventBus,
        *,
        clock: Clock = utc_clock,
        max_retries: int = 3,
    ) -> None:
        self._artifacts = artifacts
        self._versions = versions
        self._bus = bus
        self._clock = clock
        self._max_retries = max(1, max_retries)
        self._locks: weakref.WeakValueDictionary[UUID, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def _lock(self, artifact_id: UUID) -> asyncio.Lock:
        # Entries vanish once no caller holds or waits on the lock.
        lock = self._locks.get(artifact_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[artifact_id] = lock
        return lock

    # -- artifact lookup -----------------------------------------------------

    async def require_artifact(self, artifact_id: UUID) -> Artifact:
        """Return the artifact, treating a tombstoned one as missing."""
        with storage_errors("artifact read"):
            artifact = await self._artifacts.get(artifact_id)
        if artifact is None or artifact.deleted:
            raise ArtifactNotFoundError(artifact_id)
        return artifact

    # -- version store -------------------------------------------------------

    async def append_version(
        self, artifact_id: UUID, content: str, instructions: str | None = None
    ) -> Version:
        """Append a snapshot as ``max + 1``.

        The artifact pointer is *not* moved; use :meth:`commit_version`
        for the combined operation.
        """
        await self.require_artifact(artifact_id)
        for attempt in range(1, self._max_retries + 1):
            with storage_errors("version number read"):
                number = await self._versions.max_version_number(artifact_id) + 1
            version = Version(
                artifact_id=artifact_id,
                version_number=number,
                content=content,
                instructions=instructions,
                created_at=self._clock(),
            )
            try:
                with storage_errors("version insert"):
                    stored = await self._versions.insert(version)
            except VersionConflictError:
                if attempt == self._max_retries:
                    logger.error(
                        "Giving up on artifact %s after %d version conflicts",
                        artifact_id, attempt,
                    )
                    raise
                logger.warning(
                    "Version %d of artifact %s already taken, retrying (%d/%d)",
                    number, artifact_id, attempt, self._max_retries,
                )
                continue
            logger.debug("Appended version %d to artifact %s", number, artifact_id)
            return stored
        raise AssertionError("unreachable")  # pragma: no cover

    async def list_versions(self, artifact_id: UUID) -> list[Version]:
        """All versions of an artifact, newest first, one per number."""
        await self.require_artifact(artifact_id)
        with storage_errors("version list"):
            rows = await self._versions.list(artifact_id)
        return dedupe_versions(rows)

    async def get_version(self, artifact_id: UUID, ref: UUID | int) -> Version:
        """Look a version up by id or by number."""
        for version in await self.list_versions(artifact_id):
            if isinstance(ref, int):
                if version.version_number == ref:
                    return version
            elif version.id == ref:
                return version
        raise VersionNotFoundError(artifact_id, ref)

    async def latest_contents(self, artifact_ids: Iterable[UUID]) -> dict[UUID, str]:
        """Newest non-empty content per artifact; missing artifacts are skipped."""
        out: dict[UUID, str] = {}
        for artifact_id in artifact_ids:
            with storage_errors("version list"):
                rows = await self._versions.list(artifact_id)
            versions = dedupe_versions(rows)
            if versions and versions[0].content:
                out[artifact_id] = versions[0].content
        return out

    # -- pointer -------------------------------------------------------------

    async def set_current_version(
        self,
        artifact_id: UUID,
        version_number: int,
        content: str,
        instructions: str | None = None,
    ) -> Artifact:
        """Move the artifact's pointer and cached content to *version_number*."""
        await self.require_artifact(artifact_id)
        with storage_errors("artifact pointer update"):
            return await self._artifacts.set_pointer(
                artifact_id, version_number, content, instructions
            )

    async def commit_version(
        self, artifact_id: UUID, content: str, instructions: str | None = None
    ) -> Version:
        """Append a version and advance the pointer to it.

        Serialized per artifact.  If the pointer write fails the version
        stays recorded; :meth:`reconcile_pointer` repairs the pointer.
        """
        async with self._lock(artifact_id):
            version = await self.append_version(artifact_id, content, instructions)
            try:
                await self.set_current_version(
                    artifact_id, version.version_number, version.content, version.instructions
                )
            except StorageError:
                logger.error(
                    "Version %d of artifact %s recorded but pointer not advanced",
                    version.version_number, artifact_id,
                )
                raise
        await self._bus.publish(
            VERSION_APPENDED,
            {
                "artifact_id": str(artifact_id),
                "version_id": str(version.id),
                "version_number": version.version_number,
            },
        )
        return version

    async def reconcile_pointer(self, artifact_id: UUID) -> Artifact:
        """Point the artifact at its highest stored version."""
        async with self._lock(artifact_id):
            artifact = await self.require_artifact(artifact_id)
            versions = await self.list_versions(artifact_id)
            if not versions:
                return artifact
            latest = versions[0]
            if (
                artifact.current_version == latest.version_number
                and artifact.content == latest.content
            ):
                return artifact
            logger.info(
                "Reconciling artifact %s pointer %d -> %d",
                artifact_id, artifact.current_version, latest.version_number,
            )
            updated = await self.set_current_version(
                artifact_id, latest.version_number, latest.content, latest.instructions
            )
        await self._bus.publish(
            POINTER_RECONCILED,
            {"artifact_id": str(artifact_id), "version_number": latest.version_number},
        )
        return updated
