"""Guest and invitation write models - return DTOs, never ORM models."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from functools import partial
from typing import Any

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.config.database import async_session_manager
from src.errors import GuestNotFoundError, InvitationNotFoundError
from src.guests.dtos import GuestDTO, InvitationDTO
from src.guests.repository.orm_models import Guest, Invitation


async def _ensure_invitation_exists(session: AsyncSession, invitation_id: int | None) -> None:
    if invitation_id is None:
        return
    found = await session.scalar(select(Invitation.id).where(Invitation.id == invitation_id))
    if found is None:
        raise InvitationNotFoundError(invitation_id)


async def _assign_guests(
    session: AsyncSession, guest_ids: Sequence[int], invitation_id: int | None
) -> int:
    """Point every matching guest at the invitation; unknown ids are ignored."""
    result = await session.execute(
        update(Guest)
        .where(Guest.id.in_(list(guest_ids)))
        .values(invitation_id=invitation_id)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount


async def _load_guest(session: AsyncSession, guest_id: int) -> Guest | None:
    stmt = (
        select(Guest)
        .options(selectinload(Guest.invitation), selectinload(Guest.rsvp_response))
        .where(Guest.id == guest_id)
        .execution_options(populate_existing=True)
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def _load_invitation(session: AsyncSession, invitation_id: int) -> Invitation | None:
    stmt = (
        select(Invitation)
        .options(selectinload(Invitation.guests).selectinload(Guest.rsvp_response))
        .where(Invitation.id == invitation_id)
        .execution_options(populate_existing=True)
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


class GuestWriteModel(ABC):
    @abstractmethod
    async def create_guest(self, fields: dict[str, Any]) -> GuestDTO:
        """Create a guest, returned with its invitation attached."""
        raise NotImplementedError

    @abstractmethod
    async def update_guest(self, guest_id: int, fields: dict[str, Any]) -> GuestDTO:
        """
        Apply the given fields to a guest. Setting `invitation_id` to None
        unassigns the guest. Raises GuestNotFoundError.
        """
        raise NotImplementedError

    @abstractmethod
    async def delete_guest(self, guest_id: int) -> None:
        """Delete a guest and its RSVP response. Raises GuestNotFoundError."""
        raise NotImplementedError

    @abstractmethod
    async def bulk_delete_guests(self, guest_ids: Sequence[int]) -> int:
        """Delete all matching guests, ignoring unknown ids. Returns rows deleted."""
        raise NotImplementedError

    @abstractmethod
    async def bulk_assign_guests_to_invitation(
        self, guest_ids: Sequence[int], invitation_id: int
    ) -> int:
        """Move all matching guests onto the invitation. Returns rows updated."""
        raise NotImplementedError


class SqlGuestWriteModel(GuestWriteModel):
    """SQL implementation of guest write operations."""

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def create_guest(self, fields: dict[str, Any]) -> GuestDTO:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            await _ensure_invitation_exists(session, fields.get("invitation_id"))
            guest = Guest(**fields)
            session.add(guest)
            await session.flush()
            guest = await _load_guest(session, guest.id)
            return GuestDTO.from_guest(guest, include_invitation=True)

    async def update_guest(self, guest_id: int, fields: dict[str, Any]) -> GuestDTO:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            guest = await session.get(Guest, guest_id)
            if guest is None:
                raise GuestNotFoundError(guest_id)
            if "invitation_id" in fields:
                await _ensure_invitation_exists(session, fields["invitation_id"])
            for name, value in fields.items():
                setattr(guest, name, value)
            await session.flush()
            guest = await _load_guest(session, guest_id)
            return GuestDTO.from_guest(guest, include_invitation=True)

    async def delete_guest(self, guest_id: int) -> None:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            result = await session.execute(delete(Guest).where(Guest.id == guest_id))
            if result.rowcount == 0:
                raise GuestNotFoundError(guest_id)

    async def bulk_delete_guests(self, guest_ids: Sequence[int]) -> int:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            result = await session.execute(
                delete(Guest)
                .where(Guest.id.in_(list(guest_ids)))
                .execution_options(synchronize_session=False)
            )
            return result.rowcount

    async def bulk_assign_guests_to_invitation(
        self, guest_ids: Sequence[int], invitation_id: int
    ) -> int:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            await _ensure_invitation_exists(session, invitation_id)
            return await _assign_guests(session, guest_ids, invitation_id)


class InvitationWriteModel(ABC):
    @abstractmethod
    async def create_invitation(self, fields: dict[str, Any]) -> InvitationDTO:
        """Create an invitation, returned with its (empty) guest list."""
        raise NotImplementedError

    @abstractmethod
    async def update_invitation(self, invitation_id: int, fields: dict[str, Any]) -> InvitationDTO:
        """Apply the given fields to an invitation. Raises InvitationNotFoundError."""
        raise NotImplementedError

    @abstractmethod
    async def delete_invitation(self, invitation_id: int) -> None:
        """
        Delete an invitation together with its guests and RSVP responses.
        Raises InvitationNotFoundError.
        """
        raise NotImplementedError

    @abstractmethod
    async def create_invitation_with_guests(
        self, fields: dict[str, Any], guest_ids: Sequence[int]
    ) -> InvitationDTO:
        """Create an invitation and move the given guests onto it in one transaction."""
        raise NotImplementedError


class SqlInvitationWriteModel(InvitationWriteModel):
    """SQL implementation of invitation write operations."""

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def create_invitation(self, fields: dict[str, Any]) -> InvitationDTO:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            invitation = Invitation(**fields)
            session.add(invitation)
            await session.flush()
            invitation = await _load_invitation(session, invitation.id)
            return InvitationDTO.from_invitation(invitation, include_guests=True)

    async def update_invitation(self, invitation_id: int, fields: dict[str, Any]) -> InvitationDTO:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            invitation = await session.get(Invitation, invitation_id)
            if invitation is None:
                raise InvitationNotFoundError(invitation_id)
            for name, value in fields.items():
                setattr(invitation, name, value)
            await session.flush()
            invitation = await _load_invitation(session, invitation_id)
            return InvitationDTO.from_invitation(invitation, include_guests=True)

    async def delete_invitation(self, invitation_id: int) -> None:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            # guests and rsvp responses go with it through ON DELETE CASCADE
            result = await session.execute(delete(Invitation).where(Invitation.id == invitation_id))
            if result.rowcount == 0:
                raise InvitationNotFoundError(invitation_id)

    async def create_invitation_with_guests(
        self, fields: dict[str, Any], guest_ids: Sequence[int]
    ) -> InvitationDTO:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            invitation = Invitation(**fields)
            session.add(invitation)
            await session.flush()
            await _assign_guests(session, guest_ids, invitation.id)
            invitation = await _load_invitation(session, invitation.id)
            return InvitationDTO.from_invitation(invitation, include_guests=True)
