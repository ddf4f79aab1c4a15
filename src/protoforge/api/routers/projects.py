"""Project endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Header, HTTPException

from protoforge.api.deps import get_container
from protoforge.api.errors import http_error
from protoforge.api.schemas import (
    ArtifactListResponse,
    ArtifactResponse,
    ProjectArtifactRequest,
    ProjectCreateRequest,
    ProjectListResponse,
    ProjectResponse,
)
from protoforge.models.errors import ProtoforgeError
from protoforge.service.container import ServiceContainer

router = APIRouter()


@router.post("", response_model=ProjectResponse, status_code=201)
async def create_project(
    body: ProjectCreateRequest,
    c: ServiceContainer = Depends(get_container),  # noqa: B008
) -> ProjectResponse:
    try:
        project = await c.projects.create_project(
            body.team_id, body.name, body.created_by, body.description
        )
    except ProtoforgeError as exc:
        raise http_error(exc) from None
    return ProjectResponse.from_model(project)


@router.get("", response_model=ProjectListResponse)
async def list_projects(
    team_id: UUID | None = None,
    c: ServiceContainer = Depends(get_container),  # noqa: B008
) -> ProjectListResponse:
    try:
        rows = await c.projects.list_projects(team_id)
    except ProtoforgeError as exc:
        raise http_error(exc) from None
    return ProjectListResponse(projects=[ProjectResponse.from_model(p) for p in rows])


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: UUID,
    c: ServiceContainer = Depends(get_container),  # noqa: B008
) -> ProjectResponse:
    try:
        project = await c.projects.get_project(project_id)
    except ProtoforgeError as exc:
        raise http_error(exc) from None
    return ProjectResponse.from_model(project)


@router.post("/{project_id}/artifacts", status_code=204)
async def add_artifact(
    project_id: UUID,
    body: ProjectArtifactRequest,
    c: ServiceContainer = Depends(get_container),  # noqa: B008
) -> None:
    try:
        await c.projects.add_artifact(project_id, body.artifact_id, body.added_by)
    except ProtoforgeError as exc:
        raise http_error(exc) from None


@router.get("/{project_id}/artifacts", response_model=ArtifactListResponse)
async def list_project_artifacts(
    project_id: UUID,
    x_user_id: str | None = Header(default=None),
    c: ServiceContainer = Depends(get_container),  # noqa: B008
) -> ArtifactListResponse:
    try:
        rows = await c.projects.list_project_artifacts(project_id, viewer_id=x_user_id)
    except ProtoforgeError as exc:
        raise http_error(exc) from None
    return ArtifactListResponse(artifacts=[ArtifactResponse.from_model(a) for a in rows])


@router.delete("/{project_id}/artifacts/{artifact_id}", status_code=204)
async def remove_artifact(
    project_id: UUID,
    artifact_id: UUID,
    c: ServiceContainer = Depends(get_container),  # noqa: B008
) -> None:
    try:
        removed = await c.projects.remove_artifact(project_id, artifact_id)
    except ProtoforgeError as exc:
        raise http_error(exc) from None
    if not removed:
        raise HTTPException(
            status_code=404, detail=f"Artifact '{artifact_id}' is not in project '{project_id}'"
        )
