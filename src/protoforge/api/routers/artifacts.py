"""Artifact endpoints: lifecycle, version history, revert."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Header

from protoforge.api.deps import get_container
from protoforge.api.errors import http_error
from protoforge.api.schemas import (
    ArtifactCreateRequest,
    ArtifactListResponse,
    ArtifactResponse,
    ArtifactUpdateRequest,
    GenerationRequest,
    RevertRequest,
    VersionCommitResponse,
    VersionListResponse,
    VersionResponse,
)
from protoforge.models.artifact import Version, Visibility
from protoforge.models.errors import ProtoforgeError
from protoforge.service.container import ServiceContainer

router = APIRouter()


async def _commit_response(c: ServiceContainer, version: Version) -> VersionCommitResponse:
    artifact = await c.versions.require_artifact(version.artifact_id)
    return VersionCommitResponse(
        version=VersionResponse.from_model(version),
        current_version=artifact.current_version,
    )


# -- artifact CRUD -----------------------------------------------------------


@router.post("", response_model=ArtifactResponse, status_code=201)
async def create_artifact(
    body: ArtifactCreateRequest,
    c: ServiceContainer = Depends(get_container),  # noqa: B008
) -> ArtifactResponse:
    """Create an artifact from a finished generation."""
    try:
        artifact, _ = await c.artifacts.create_artifact(
            body.prompt,
            body.content,
            name=body.name,
            content_type=body.content_type,
            visibility=body.visibility,
            owner_id=body.owner_id,
            instructions=body.instructions,
            image_url=body.image_url,
            metadata=body.metadata,
        )
    except ProtoforgeError as exc:
        raise http_error(exc) from None
    return ArtifactResponse.from_model(artifact)


@router.get("", response_model=ArtifactListResponse)
async def list_artifacts(
    owner_id: str | None = None,
    visibility: Visibility | None = None,
    x_user_id: str | None = Header(default=None),
    c: ServiceContainer = Depends(get_container),  # noqa: B008
) -> ArtifactListResponse:
    """Public artifacts plus the caller's own, newest first."""
    try:
        rows = await c.artifacts.list_artifacts(
            viewer_id=x_user_id, owner_id=owner_id, visibility=visibility
        )
    except ProtoforgeError as exc:
        raise http_error(exc) from None
    return ArtifactListResponse(artifacts=[ArtifactResponse.from_model(a) for a in rows])


@router.get("/{artifact_id}", response_model=ArtifactResponse)
async def get_artifact(
    artifact_id: UUID,
    x_user_id: str | None = Header(default=None),
    c: ServiceContainer = Depends(get_container),  # noqa: B008
) -> ArtifactResponse:
    try:
        artifact = await c.artifacts.get_artifact(artifact_id, viewer_id=x_user_id)
    except ProtoforgeError as exc:
        raise http_error(exc) from None
    return ArtifactResponse.from_model(artifact)


@router.patch("/{artifact_id}", response_model=ArtifactResponse)
async def update_artifact(
    artifact_id: UUID,
    body: ArtifactUpdateRequest,
    x_user_id: str | None = Header(default=None),
    c: ServiceContainer = Depends(get_container),  # noqa: B008
) -> ArtifactResponse:
    """Rename an artifact or change its visibility."""
    try:
        await c.artifacts.get_artifact(artifact_id, viewer_id=x_user_id)
        artifact = await c.artifacts.update_artifact(
            artifact_id, name=body.name, visibility=body.visibility
        )
    except ProtoforgeError as exc:
        raise http_error(exc) from None
    return ArtifactResponse.from_model(artifact)


@router.delete("/{artifact_id}", status_code=204)
async def delete_artifact(
    artifact_id: UUID,
    x_user_id: str | None = Header(default=None),
    c: ServiceContainer = Depends(get_container),  # noqa: B008
) -> None:
    """Tombstone an artifact; its versions are kept."""
    try:
        await c.artifacts.get_artifact(artifact_id, viewer_id=x_user_id)
        await c.artifacts.delete_artifact(artifact_id)
    except ProtoforgeError as exc:
        raise http_error(exc) from None


# -- versions ----------------------------------------------------------------


@router.get("/{artifact_id}/versions", response_model=VersionListResponse)
async def list_versions(
    artifact_id: UUID,
    x_user_id: str | None = Header(default=None),
    c: ServiceContainer = Depends(get_container),  # noqa: B008
) -> VersionListResponse:
    """Version history, newest first."""
    try:
        artifact = await c.artifacts.get_artifact(artifact_id, viewer_id=x_user_id)
        versions = await c.versions.list_versions(artifact_id)
    except ProtoforgeError as exc:
        raise http_error(exc) from None
    return VersionListResponse(
        current_version=artifact.current_version,
        versions=[VersionResponse.from_model(v) for v in versions],
    )


@router.post("/{artifact_id}/versions", response_model=VersionCommitResponse, status_code=201)
async def record_generation(
    artifact_id: UUID,
    body: GenerationRequest,
    x_user_id: str | None = Header(default=None),
    c: ServiceContainer = Depends(get_container),  # noqa: B008
) -> VersionCommitResponse:
    """Record new content from the generation pipeline as the next version."""
    try:
        await c.artifacts.get_artifact(artifact_id, viewer_id=x_user_id)
        version = await c.artifacts.record_generation(artifact_id, body.content, body.instructions)
        return await _commit_response(c, version)
    except ProtoforgeError as exc:
        raise http_error(exc) from None


@router.get("/{artifact_id}/versions/{version_number}", response_model=VersionResponse)
async def get_version(
    artifact_id: UUID,
    version_number: int,
    x_user_id: str | None = Header(default=None),
    c: ServiceContainer = Depends(get_container),  # noqa: B008
) -> VersionResponse:
    try:
        await c.artifacts.get_artifact(artifact_id, viewer_id=x_user_id)
        version = await c.versions.get_version(artifact_id, version_number)
    except ProtoforgeError as exc:
        raise http_error(exc) from None
    return VersionResponse.from_model(version)


@router.post("/{artifact_id}/revert", response_model=VersionCommitResponse, status_code=201)
async def revert_to_version(
    artifact_id: UUID,
    body: RevertRequest,
    x_user_id: str | None = Header(default=None),
    c: ServiceContainer = Depends(get_container),  # noqa: B008
) -> VersionCommitResponse:
    """Append a copy of an earlier version as the new current version."""
    try:
        await c.artifacts.get_artifact(artifact_id, viewer_id=x_user_id)
        version = await c.reverter.revert_to_version(artifact_id, body.target)
        return await _commit_response(c, version)
    except ProtoforgeError as exc:
        raise http_error(exc) from None


@router.post("/{artifact_id}/reconcile", response_model=ArtifactResponse)
async def reconcile_pointer(
    artifact_id: UUID,
    x_user_id: str | None = Header(default=None),
    c: ServiceContainer = Depends(get_container),  # noqa: B008
) -> ArtifactResponse:
    """Re-point the artifact at its highest recorded version."""
    try:
        await c.artifacts.get_artifact(artifact_id, viewer_id=x_user_id)
        artifact = await c.versions.reconcile_pointer(artifact_id)
    except ProtoforgeError as exc:
        raise http_error(exc) from None
    return ArtifactResponse.from_model(artifact)
