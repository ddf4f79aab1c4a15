"""Read-side browsing state over an artifact's version list."""

from __future__ import annotations

from collections.abc import Sequence
from uuid import UUID

from protoforge.models.artifact import Version
from protoforge.models.errors import VersionNotFoundError
from protoforge.service.versioning import VersionService, dedupe_versions


class VersionSelector:
    """Holds the version list shown to a user and which entry is selected.

    The list is newest first and only ever grows at the front: a revert or
    new generation is prepended with :meth:`push` and becomes the selection.
    """

    def __init__(self, artifact_id: UUID, versions: Sequence[Version]) -> None:
        self.artifact_id = artifact_id
        self._versions = dedupe_versions(versions)
        self._selected_id: UUID | None = self._versions[0].id if self._versions else None

    @classmethod
    async def load(cls, service: VersionService, artifact_id: UUID) -> VersionSelector:
        return cls(artifact_id, await service.list_versions(artifact_id))

    @property
    def versions(self) -> tuple[Version, ...]:
        return tuple(self._versions)

    @property
    def current(self) -> Version | None:
        return self._versions[0] if self._versions else None

    @property
    def selected(self) -> Version | None:
        for version in self._versions:
            if version.id == self._selected_id:
                return version
        return None

    @property
    def is_generating(self) -> bool:
        """True while the newest version is still the generation placeholder."""
        current = self.current
        return current is not None and current.is_placeholder

    def select(self, ref: UUID | int) -> Version:
        """Select by version id or number."""
        for version in self._versions:
            if (isinstance(ref, int) and version.version_number == ref) or version.id == ref:
                self._selected_id = version.id
                return version
        raise VersionNotFoundError(self.artifact_id, ref)

    def preview(self, ref: UUID | int | None = None) -> str:
        """Content of *ref*, or of the selection when omitted; does not change it."""
        if ref is None:
            selected = self.selected
            if selected is None:
                raise VersionNotFoundError(self.artifact_id, 0)
            return selected.content
        for version in self._versions:
            if (isinstance(ref, int) and version.version_number == ref) or version.id == ref:
                return version.content
        raise VersionNotFoundError(self.artifact_id, ref)

    def is_selected_current(self) -> bool:
        current = self.current
        return current is not None and current.id == self._selected_id

    def push(self, version: Version) -> None:
        """Prepend a freshly committed version and select it."""
        if version.artifact_id != self.artifact_id:
            raise ValueError("Version belongs to a different artifact")
        if any(v.id == version.id for v in self._versions):
            self._selected_id = version.id
            return
        self._versions.insert(0, version)
        self._selected_id = version.id
