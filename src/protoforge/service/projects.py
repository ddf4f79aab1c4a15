"""Projects group artifacts for a team."""

from __future__ import annotations

from uuid import UUID

from protoforge.models.artifact import Artifact
from protoforge.models.errors import ProjectNotFoundError
from protoforge.models.project import Project, ProjectArtifact
from protoforge.service.teams import TeamService
from protoforge.service.versioning import Clock, VersionService, storage_errors, utc_clock
from protoforge.storage.repository import ArtifactRepository, ProjectRepository


class ProjectService:
    def __init__(
        self,
        projects: ProjectRepository,
        artifacts: ArtifactRepository,
        versions: VersionService,
        teams: TeamService,
        *,
        clock: Clock = utc_clock,
    ) -> None:
        self._projects = projects
        self._artifacts = artifacts
        self._versions = versions
        self._teams = teams
        self._clock = clock

    async def create_project(
        self, team_id: UUID, name: str, created_by: str, description: str = ""
    ) -> Project:
        """Create a project in an existing team."""
        await self._teams.get_team(team_id)
        project = Project(
            team_id=team_id,
            name=name,
            description=description,
            created_by=created_by,
            created_at=self._clock(),
        )
        with storage_errors("project insert"):
            return await self._projects.create(project)

    async def get_project(self, project_id: UUID) -> Project:
        with storage_errors("project read"):
            project = await self._projects.get(project_id)
        if project is None:
            raise ProjectNotFoundError(project_id)
        return project

    async def list_projects(self, team_id: UUID | None = None) -> list[Project]:
        if team_id is not None:
            await self._teams.get_team(team_id)
        with storage_errors("project list"):
            rows = await self._projects.list(team_id=team_id)
        return sorted(rows, key=lambda p: p.created_at, reverse=True)

    async def add_artifact(
        self, project_id: UUID, artifact_id: UUID, added_by: str
    ) -> ProjectArtifact:
        """Idempotent: adding an artifact twice returns the first link."""
        await self.get_project(project_id)
        await self._versions.require_artifact(artifact_id)
        link = ProjectArtifact(
            project_id=project_id,
            artifact_id=artifact_id,
            added_by=added_by,
            added_at=self._clock(),
        )
        with storage_errors("project link insert"):
            return await self._projects.add_artifact(link)

    async def remove_artifact(self, project_id: UUID, artifact_id: UUID) -> bool:
        await self.get_project(project_id)
        with storage_errors("project link delete"):
            return await self._projects.remove_artifact(project_id, artifact_id)

    async def list_project_artifacts(
        self, project_id: UUID, viewer_id: str | None = None
    ) -> list[Artifact]:
        """Artifacts in the project, most recently added first.

        Tombstoned artifacts and private ones *viewer_id* cannot see are skipped.
        """
        await self.get_project(project_id)
        with storage_errors("project link list"):
            links = await self._projects.list_artifacts(project_id)
        out: list[Artifact] = []
        for link in sorted(links, key=lambda link: link.added_at, reverse=True):
            with storage_errors("artifact read"):
                artifact = await self._artifacts.get(link.artifact_id)
            if artifact is not None and not artifact.deleted and artifact.can_view(viewer_id):
                out.append(artifact)
        return out
