"""Guest and invitation read models - return DTOs, never ORM models."""

import abc
from dataclasses import replace
from functools import partial

from sqlalchemy import distinct, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.config.database import async_session_manager
from src.errors import GuestNotFoundError, InvitationNotFoundError
from src.guests.dtos import GuestDTO, InvitationDTO, InvitationStatsDTO
from src.guests.repository.orm_models import Guest, Invitation, RsvpResponse


class GuestReadModel(abc.ABC):
    @abc.abstractmethod
    async def list_guests(self) -> list[GuestDTO]:
        """All guests ordered by last name, with invitation and RSVP response."""
        raise NotImplementedError

    @abc.abstractmethod
    async def get_guest(self, guest_id: int) -> GuestDTO:
        """Single guest with relations. Raises GuestNotFoundError."""
        raise NotImplementedError

    @abc.abstractmethod
    async def list_guests_by_invitation(self, invitation_id: int) -> list[GuestDTO]:
        """Guests of one invitation ordered by last name, with RSVP response."""
        raise NotImplementedError

    @abc.abstractmethod
    async def search_guests_by_name(self, term: str) -> list[GuestDTO]:
        """
        Case-insensitive substring match on first or last name.
        Each guest carries its invitation (with that invitation's guests).
        """
        raise NotImplementedError

    @abc.abstractmethod
    async def list_unassigned_guests(self) -> list[GuestDTO]:
        """Guests without an invitation, ordered by last name then first name."""
        raise NotImplementedError


class SqlGuestReadModel(GuestReadModel):
    """SQL implementation of guest read model."""

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def list_guests(self) -> list[GuestDTO]:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            stmt = (
                select(Guest)
                .options(selectinload(Guest.invitation), selectinload(Guest.rsvp_response))
                .order_by(Guest.last_name.asc(), Guest.id.asc())
            )
            result = await session.execute(stmt)
            return [
                GuestDTO.from_guest(guest, include_invitation=True, include_rsvp_response=True)
                for guest in result.scalars().all()
            ]

    async def get_guest(self, guest_id: int) -> GuestDTO:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            stmt = (
                select(Guest)
                .options(selectinload(Guest.invitation), selectinload(Guest.rsvp_response))
                .where(Guest.id == guest_id)
            )
            result = await session.execute(stmt)
            guest = result.scalar_one_or_none()
            if guest is None:
                raise GuestNotFoundError(guest_id)
            return GuestDTO.from_guest(guest, include_invitation=True, include_rsvp_response=True)

    async def list_guests_by_invitation(self, invitation_id: int) -> list[GuestDTO]:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            stmt = (
                select(Guest)
                .options(selectinload(Guest.rsvp_response))
                .where(Guest.invitation_id == invitation_id)
                .order_by(Guest.last_name.asc(), Guest.id.asc())
            )
            result = await session.execute(stmt)
            return [
                GuestDTO.from_guest(guest, include_rsvp_response=True)
                for guest in result.scalars().all()
            ]

    async def search_guests_by_name(self, term: str) -> list[GuestDTO]:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            stmt = (
                select(Guest)
                .options(
                    selectinload(Guest.invitation)
                    .selectinload(Invitation.guests)
                    .selectinload(Guest.rsvp_response),
                    selectinload(Guest.rsvp_response),
                )
                .where(
                    or_(
                        Guest.first_name.icontains(term, autoescape=True),
                        Guest.last_name.icontains(term, autoescape=True),
                    )
                )
                .order_by(Guest.id.asc())
            )
            result = await session.execute(stmt)
            guests = []
            for guest in result.scalars().all():
                invitation = None
                if guest.invitation is not None:
                    invitation = InvitationDTO.from_invitation(
                        guest.invitation, include_guests=True
                    )
                guests.append(
                    replace(
                        GuestDTO.from_guest(guest, include_rsvp_response=True),
                        invitation=invitation,
                    )
                )
            return guests

    async def list_unassigned_guests(self) -> list[GuestDTO]:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            stmt = (
                select(Guest)
                .where(Guest.invitation_id.is_(None))
                .order_by(Guest.last_name.asc(), Guest.first_name.asc())
            )
            result = await session.execute(stmt)
            return [GuestDTO.from_guest(guest) for guest in result.scalars().all()]


class InvitationReadModel(abc.ABC):
    @abc.abstractmethod
    async def list_invitations(self) -> list[InvitationDTO]:
        """All invitations newest first, with guests and RSVP responses."""
        raise NotImplementedError

    @abc.abstractmethod
    async def get_invitation(self, invitation_id: int) -> InvitationDTO:
        """Single invitation with relations. Raises InvitationNotFoundError."""
        raise NotImplementedError

    @abc.abstractmethod
    async def get_stats(self) -> InvitationStatsDTO:
        """Response-rate counters for the admin dashboard."""
        raise NotImplementedError


class SqlInvitationReadModel(InvitationReadModel):
    """SQL implementation of invitation read model."""

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    @staticmethod
    def _with_relations(stmt):
        return stmt.options(
            selectinload(Invitation.guests).selectinload(Guest.rsvp_response),
            selectinload(Invitation.rsvp_responses),
        )

    async def list_invitations(self) -> list[InvitationDTO]:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            stmt = self._with_relations(select(Invitation)).order_by(
                Invitation.created_at.desc(), Invitation.id.desc()
            )
            result = await session.execute(stmt)
            return [
                InvitationDTO.from_invitation(
                    invitation, include_guests=True, include_rsvp_responses=True
                )
                for invitation in result.scalars().all()
            ]

    async def get_invitation(self, invitation_id: int) -> InvitationDTO:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            stmt = self._with_relations(select(Invitation)).where(Invitation.id == invitation_id)
            result = await session.execute(stmt)
            invitation = result.scalar_one_or_none()
            if invitation is None:
                raise InvitationNotFoundError(invitation_id)
            return InvitationDTO.from_invitation(
                invitation, include_guests=True, include_rsvp_responses=True
            )

    async def get_stats(self) -> InvitationStatsDTO:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            total_invitations = await session.scalar(select(func.count(Invitation.id)))
            total_guests = await session.scalar(select(func.count(Guest.id)))
            responded_invitations = await session.scalar(
                select(func.count(distinct(RsvpResponse.invitation_id)))
            )
            attending_count = await session.scalar(
                select(func.count(RsvpResponse.id)).where(RsvpResponse.is_attending.is_(True))
            )
            not_attending_count = await session.scalar(
                select(func.count(RsvpResponse.id)).where(RsvpResponse.is_attending.is_(False))
            )
            return InvitationStatsDTO(
                total_invitations=total_invitations or 0,
                total_guests=total_guests or 0,
                responded_invitations=responded_invitations or 0,
                attending_count=attending_count or 0,
                not_attending_count=not_attending_count or 0,
            )
