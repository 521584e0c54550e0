"""Tests for the invitation management endpoints."""

from sqlalchemy import func, select

from src.config.database import async_session_maker
from src.guests.dtos import InvitationDTO, InvitationStatsDTO
from src.guests.features.manage_invitations.router import get_invitation_read_model
from src.guests.repository.orm_models import Guest, Invitation, RsvpResponse
from src.guests.repository.read_models import InvitationReadModel
from src.guests.urls import (
    GUEST_URL,
    INVITATION_STATS_URL,
    INVITATION_URL,
    INVITATIONS_URL,
)


class InMemoryInvitationReadModel(InvitationReadModel):
    """In-memory read model for testing."""

    def __init__(self, stats: InvitationStatsDTO):
        self._stats = stats

    async def list_invitations(self) -> list[InvitationDTO]:
        return []

    async def get_invitation(self, invitation_id: int) -> InvitationDTO:
        raise NotImplementedError

    async def get_stats(self) -> InvitationStatsDTO:
        return self._stats


async def _add_household(session, address: str, answers: list[bool | None]) -> Invitation:
    """An invitation with one guest per answer; None means the guest has not replied."""
    invitation = Invitation(address=address)
    session.add(invitation)
    await session.flush()
    for n, answer in enumerate(answers):
        guest = Guest(first_name=f"Guest{n}", last_name=address, invitation_id=invitation.id)
        session.add(guest)
        await session.flush()
        if answer is not None:
            session.add(
                RsvpResponse(guest_id=guest.id, invitation_id=invitation.id, is_attending=answer)
            )
    return invitation


async def test_create_invitation(client):
    payload = {
        "address": "1 Main St",
        "city": "Springfield",
        "state": "IL",
        "zip": "62704",
        "phoneNumber": "555-0100",
        "tableNumber": 3,
        "plusOne": True,
    }

    response = await client.post(INVITATIONS_URL, json=payload)

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["id"] > 0
    assert data["address"] == "1 Main St"
    assert data["phoneNumber"] == "555-0100"
    assert data["tableNumber"] == 3
    assert data["plusOne"] is True
    assert data["saveTheDateSent"] is False
    assert data["inviteSent"] is False
    assert data["guests"] == []
    assert data["createdAt"] is not None


async def test_create_invitation_rejects_bad_table_number(client):
    response = await client.post(INVITATIONS_URL, json={"tableNumber": "near the band"})

    assert response.status_code == 400
    assert response.json()["success"] is False


async def test_list_invitations_newest_first(client):
    first = (await client.post(INVITATIONS_URL, json={"address": "First"})).json()["data"]
    second = (await client.post(INVITATIONS_URL, json={"address": "Second"})).json()["data"]

    response = await client.get(INVITATIONS_URL)

    assert response.status_code == 200
    assert [inv["id"] for inv in response.json()["data"]] == [second["id"], first["id"]]


async def test_get_invitation_with_guests_and_responses(client):
    async with async_session_maker() as session:
        invitation = await _add_household(session, "1 Main St", [True, None])
        await session.commit()

    response = await client.get(INVITATION_URL.format(invitation_id=invitation.id))

    assert response.status_code == 200
    data = response.json()["data"]
    assert len(data["guests"]) == 2
    assert len(data["rsvpResponses"]) == 1
    assert data["rsvpResponses"][0]["isAttending"] is True
    assert data["guests"][0]["rsvpResponse"]["isAttending"] is True
    assert data["guests"][1]["rsvpResponse"] is None


async def test_get_invitation_not_found(client):
    response = await client.get(INVITATION_URL.format(invitation_id=999))

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Invitation not found"}


async def test_update_invitation(client):
    created = (await client.post(INVITATIONS_URL, json={"address": "Old"})).json()["data"]

    response = await client.put(
        INVITATION_URL.format(invitation_id=created["id"]),
        json={"address": "New", "inviteSent": True, "notes": "Call first"},
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["address"] == "New"
    assert data["inviteSent"] is True
    assert data["notes"] == "Call first"
    assert data["saveTheDateSent"] is False


async def test_update_invitation_keeps_unsent_fields(client):
    created = (
        await client.post(INVITATIONS_URL, json={"address": "Keep", "city": "Boston"})
    ).json()["data"]

    response = await client.put(
        INVITATION_URL.format(invitation_id=created["id"]), json={"plusOne": True}
    )

    data = response.json()["data"]
    assert data["address"] == "Keep"
    assert data["city"] == "Boston"
    assert data["plusOne"] is True


async def test_update_invitation_not_found(client):
    response = await client.put(INVITATION_URL.format(invitation_id=999), json={"notes": "x"})

    assert response.status_code == 404
    assert response.json()["message"] == "Invitation not found"


async def test_delete_invitation_cascades(client):
    async with async_session_maker() as session:
        invitation = await _add_household(session, "1 Main St", [True, False, None])
        await session.commit()
        guest_ids = (
            await session.scalars(select(Guest.id).where(Guest.invitation_id == invitation.id))
        ).all()

    response = await client.delete(INVITATION_URL.format(invitation_id=invitation.id))

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Invitation deleted successfully"}
    for guest_id in guest_ids:
        missing = await client.get(GUEST_URL.format(guest_id=guest_id))
        assert missing.status_code == 404

    async with async_session_maker() as session:
        assert await session.scalar(select(func.count(Guest.id))) == 0
        assert await session.scalar(select(func.count(RsvpResponse.id))) == 0


async def test_delete_invitation_not_found(client):
    response = await client.delete(INVITATION_URL.format(invitation_id=999))

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Invitation not found"}


async def test_stats(client):
    async with async_session_maker() as session:
        await _add_household(session, "A", [True, True])
        await _add_household(session, "B", [False, None])
        await _add_household(session, "C", [None])
        await session.commit()

    response = await client.get(INVITATION_STATS_URL)

    assert response.status_code == 200
    assert response.json()["data"] == {
        "totalInvitations": 3,
        "totalGuests": 5,
        "respondedInvitations": 2,
        "attendingCount": 2,
        "notAttendingCount": 1,
        "pendingInvitations": 1,
    }


async def test_stats_empty_store(client):
    response = await client.get(INVITATION_STATS_URL)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["totalInvitations"] == 0
    assert data["pendingInvitations"] == 0


async def test_stats_with_in_memory_model(client_factory):
    stats = InvitationStatsDTO(
        total_invitations=10,
        total_guests=24,
        responded_invitations=4,
        attending_count=7,
        not_attending_count=2,
    )
    overrides = {get_invitation_read_model: lambda: InMemoryInvitationReadModel(stats)}

    async with client_factory(overrides) as client:
        response = await client.get(INVITATION_STATS_URL)

    assert response.status_code == 200
    assert response.json()["data"]["pendingInvitations"] == 6


class BrokenInvitationReadModel(InMemoryInvitationReadModel):
    async def get_stats(self) -> InvitationStatsDTO:
        raise RuntimeError("database unreachable")


async def test_stats_unexpected_error(client_factory):
    stats = InvitationStatsDTO(0, 0, 0, 0, 0)
    overrides = {get_invitation_read_model: lambda: BrokenInvitationReadModel(stats)}

    async with client_factory(overrides, raise_app_exceptions=False) as client:
        response = await client.get(INVITATION_STATS_URL)

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Internal server error"}
