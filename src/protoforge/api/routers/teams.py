"""Team endpoints: membership and invitations."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException

from protoforge.api.deps import get_container
from protoforge.api.errors import http_error
from protoforge.api.schemas import (
    InvitationCreateRequest,
    InvitationListResponse,
    InvitationResponse,
    JoinTeamRequest,
    TeamCreateRequest,
    TeamListResponse,
    TeamMemberListResponse,
    TeamMemberRequest,
    TeamMemberResponse,
    TeamResponse,
    TeamRoleRequest,
)
from protoforge.models.errors import ProtoforgeError
from protoforge.service.container import ServiceContainer

router = APIRouter()


@router.post("", response_model=TeamResponse, status_code=201)
async def create_team(
    body: TeamCreateRequest,
    c: ServiceContainer = Depends(get_container),  # noqa: B008
) -> TeamResponse:
    """Create a team; the creator becomes its admin."""
    try:
        team = await c.teams.create_team(body.name, body.created_by, body.description)
    except ProtoforgeError as exc:
        raise http_error(exc) from None
    return TeamResponse.from_model(team)


@router.get("", response_model=TeamListResponse)
async def list_teams(
    user_id: str | None = None,
    c: ServiceContainer = Depends(get_container),  # noqa: B008
) -> TeamListResponse:
    try:
        rows = await c.teams.list_teams(user_id)
    except ProtoforgeError as exc:
        raise http_error(exc) from None
    return TeamListResponse(teams=[TeamResponse.from_model(t) for t in rows])


@router.post("/join", response_model=TeamMemberResponse)
async def join_team(
    body: JoinTeamRequest,
    c: ServiceContainer = Depends(get_container),  # noqa: B008
) -> TeamMemberResponse:
    """Join a team with an invitation code."""
    try:
        member = await c.teams.join_with_invitation(body.invitation_code, body.user_id)
    except ProtoforgeError as exc:
        raise http_error(exc) from None
    return TeamMemberResponse.from_model(member)


@router.get("/{team_id}", response_model=TeamResponse)
async def get_team(
    team_id: UUID,
    c: ServiceContainer = Depends(get_container),  # noqa: B008
) -> TeamResponse:
    try:
        team = await c.teams.get_team(team_id)
    except ProtoforgeError as exc:
        raise http_error(exc) from None
    return TeamResponse.from_model(team)


# -- members -----------------------------------------------------------------


@router.get("/{team_id}/members", response_model=TeamMemberListResponse)
async def list_members(
    team_id: UUID,
    c: ServiceContainer = Depends(get_container),  # noqa: B008
) -> TeamMemberListResponse:
    try:
        rows = await c.teams.list_members(team_id)
    except ProtoforgeError as exc:
        raise http_error(exc) from None
    return TeamMemberListResponse(members=[TeamMemberResponse.from_model(m) for m in rows])


@router.post("/{team_id}/members", response_model=TeamMemberResponse, status_code=201)
async def add_member(
    team_id: UUID,
    body: TeamMemberRequest,
    c: ServiceContainer = Depends(get_container),  # noqa: B008
) -> TeamMemberResponse:
    try:
        member = await c.teams.add_member(team_id, body.user_id, body.role)
    except ProtoforgeError as exc:
        raise http_error(exc) from None
    return TeamMemberResponse.from_model(member)


@router.patch("/{team_id}/members/{user_id}", response_model=TeamMemberResponse)
async def set_member_role(
    team_id: UUID,
    user_id: str,
    body: TeamRoleRequest,
    c: ServiceContainer = Depends(get_container),  # noqa: B008
) -> TeamMemberResponse:
    try:
        member = await c.teams.set_member_role(team_id, user_id, body.role)
    except ProtoforgeError as exc:
        raise http_error(exc) from None
    return TeamMemberResponse.from_model(member)


@router.delete("/{team_id}/members/{user_id}", status_code=204)
async def remove_member(
    team_id: UUID,
    user_id: str,
    c: ServiceContainer = Depends(get_container),  # noqa: B008
) -> None:
    try:
        removed = await c.teams.remove_member(team_id, user_id)
    except ProtoforgeError as exc:
        raise http_error(exc) from None
    if not removed:
        raise HTTPException(
            status_code=404, detail=f"User '{user_id}' is not a member of team '{team_id}'"
        )


# -- invitations -------------------------------------------------------------


@router.post("/{team_id}/invitations", response_model=InvitationResponse, status_code=201)
async def create_invitation(
    team_id: UUID,
    body: InvitationCreateRequest,
    c: ServiceContainer = Depends(get_container),  # noqa: B008
) -> InvitationResponse:
    try:
        invitation = await c.teams.create_invitation(team_id, body.created_by)
    except ProtoforgeError as exc:
        raise http_error(exc) from None
    return InvitationResponse.from_model(invitation)


@router.get("/{team_id}/invitations", response_model=InvitationListResponse)
async def list_invitations(
    team_id: UUID,
    c: ServiceContainer = Depends(get_container),  # noqa: B008
) -> InvitationListResponse:
    try:
        rows = await c.teams.list_invitations(team_id)
    except ProtoforgeError as exc:
        raise http_error(exc) from None
    return InvitationListResponse(invitations=[InvitationResponse.from_model(i) for i in rows])


@router.delete("/{team_id}/invitations/{invitation_id}", status_code=204)
async def delete_invitation(
    team_id: UUID,
    invitation_id: UUID,
    c: ServiceContainer = Depends(get_container),  # noqa: B008
) -> None:
    try:
        await c.teams.delete_invitation(team_id, invitation_id)
    except ProtoforgeError as exc:
        raise http_error(exc) from None
