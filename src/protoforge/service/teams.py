"""Teams: membership and join-by-invitation."""

from __future__ import annotations

import logging
import secrets
from uuid import UUID

from protoforge.models.errors import (
    InvitationNotFoundError,
    TeamMemberNotFoundError,
    TeamNotFoundError,
)
from protoforge.models.team import Team, TeamInvitation, TeamMember, TeamRole
from protoforge.service.versioning import Clock, storage_errors, utc_clock
from protoforge.storage.repository import TeamRepository

logger = logging.getLogger("protoforge.teams")


def _invitation_code() -> str:
    return secrets.token_hex(16)


class TeamService:
    def __init__(self, teams: TeamRepository, *, clock: Clock = utc_clock) -> None:
        self._teams = teams
        self._clock = clock

    async def create_team(
        self, name: str, created_by: str, description: str | None = None
    ) -> Team:
        """Create a team; its creator joins as admin."""
        team = Team(
            name=name, description=description, created_by=created_by, created_at=self._clock()
        )
        with storage_errors("team insert"):
            await self._teams.create(team)
        await self.add_member(team.id, created_by, TeamRole.ADMIN)
        logger.info("Created team %s (%s)", team.id, team.name)
        return team

    async def get_team(self, team_id: UUID) -> Team:
        with storage_errors("team read"):
            team = await self._teams.get(team_id)
        if team is None:
            raise TeamNotFoundError(team_id)
        return team

    async def list_teams(self, user_id: str | None = None) -> list[Team]:
        """Newest first; restricted to *user_id*'s teams when given."""
        with storage_errors("team list"):
            rows = await self._teams.list(member_id=user_id)
        return sorted(rows, key=lambda t: t.created_at, reverse=True)

    # -- members -------------------------------------------------------------

    async def add_member(
        self, team_id: UUID, user_id: str, role: TeamRole = TeamRole.MEMBER
    ) -> TeamMember:
        """Idempotent: an existing member keeps their current role."""
        await self.get_team(team_id)
        member = TeamMember(
            team_id=team_id, user_id=user_id, role=TeamRole(role), joined_at=self._clock()
        )
        with storage_errors("team member insert"):
            return await self._teams.add_member(member)

    async def set_member_role(self, team_id: UUID, user_id: str, role: TeamRole) -> TeamMember:
        await self.get_team(team_id)
        with storage_errors("team member read"):
            member = await self._teams.get_member(team_id, user_id)
        if member is None:
            raise TeamMemberNotFoundError(team_id, user_id)
        with storage_errors("team member update"):
            return await self._teams.update_member(
                member.model_copy(update={"role": TeamRole(role)})
            )

    async def remove_member(self, team_id: UUID, user_id: str) -> bool:
        await self.get_team(team_id)
        with storage_errors("team member delete"):
            return await self._teams.remove_member(team_id, user_id)

    async def list_members(self, team_id: UUID) -> list[TeamMember]:
        """Oldest membership first."""
        await self.get_team(team_id)
        with storage_errors("team member list"):
            rows = await self._teams.list_members(team_id)
        return sorted(rows, key=lambda m: m.joined_at)

    # -- invitations ---------------------------------------------------------

    async def create_invitation(self, team_id: UUID, created_by: str) -> TeamInvitation:
        await self.get_team(team_id)
        invitation = TeamInvitation(
            team_id=team_id,
            invitation_code=_invitation_code(),
            created_by=created_by,
            created_at=self._clock(),
        )
        with storage_errors("invitation insert"):
            return await self._teams.create_invitation(invitation)

    async def list_invitations(self, team_id: UUID) -> list[TeamInvitation]:
        """Newest first."""
        await self.get_team(team_id)
        with storage_errors("invitation list"):
            rows = await self._teams.list_invitations(team_id)
        return sorted(rows, key=lambda i: i.created_at, reverse=True)

    async def delete_invitation(self, team_id: UUID, invitation_id: UUID) -> None:
        await self.get_team(team_id)
        with storage_errors("invitation delete"):
            invitations = await self._teams.list_invitations(team_id)
            if not any(i.id == invitation_id for i in invitations):
                raise InvitationNotFoundError(invitation_id)
            await self._teams.delete_invitation(invitation_id)

    async def join_with_invitation(self, code: str, user_id: str) -> TeamMember:
        """Join the invitation's team as a member.

        Invitations are reusable.  Joining a team the user already belongs
        to returns the existing membership.
        """
        with storage_errors("invitation read"):
            invitation = await self._teams.find_invitation(code)
        if invitation is None:
            raise InvitationNotFoundError(code)
        member = await self.add_member(invitation.team_id, user_id)
        logger.info("User %s joined team %s", user_id, invitation.team_id)
        return member
