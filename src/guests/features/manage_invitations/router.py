from fastapi import APIRouter, Depends

from src.guests.repository.read_models import InvitationReadModel, SqlInvitationReadModel
from src.guests.repository.write_models import InvitationWriteModel, SqlInvitationWriteModel
from src.guests.schemas import (
    ApiResponse,
    InvitationFields,
    InvitationResponse,
    InvitationStatsResponse,
    MessageResponse,
)
from src.guests.urls import INVITATION_STATS_URL, INVITATION_URL, INVITATIONS_URL

router = APIRouter()


def get_invitation_read_model() -> InvitationReadModel:
    """Dependency to get invitation read model instance."""
    return SqlInvitationReadModel()


def get_invitation_write_model() -> InvitationWriteModel:
    """Dependency to get invitation write model instance."""
    return SqlInvitationWriteModel()


@router.get(INVITATIONS_URL, response_model=ApiResponse[list[InvitationResponse]])
async def list_invitations(
    read_model: InvitationReadModel = Depends(get_invitation_read_model),
) -> ApiResponse[list[InvitationResponse]]:
    """All invitations, newest first, with guests and RSVP responses."""
    invitations = await read_model.list_invitations()
    return ApiResponse(
        data=[InvitationResponse.model_validate(invitation) for invitation in invitations]
    )


@router.get(INVITATION_STATS_URL, response_model=ApiResponse[InvitationStatsResponse])
async def get_invitation_stats(
    read_model: InvitationReadModel = Depends(get_invitation_read_model),
) -> ApiResponse[InvitationStatsResponse]:
    """Response counters for the admin dashboard."""
    stats = await read_model.get_stats()
    return ApiResponse(data=InvitationStatsResponse.model_validate(stats))


@router.get(INVITATION_URL, response_model=ApiResponse[InvitationResponse])
async def get_invitation(
    invitation_id: int,
    read_model: InvitationReadModel = Depends(get_invitation_read_model),
) -> ApiResponse[InvitationResponse]:
    invitation = await read_model.get_invitation(invitation_id)
    return ApiResponse(data=InvitationResponse.model_validate(invitation))


@router.post(INVITATIONS_URL, response_model=ApiResponse[InvitationResponse], status_code=201)
async def create_invitation(
    invitation_data: InvitationFields,
    write_model: InvitationWriteModel = Depends(get_invitation_write_model),
) -> ApiResponse[InvitationResponse]:
    invitation = await write_model.create_invitation(invitation_data.to_fields())
    return ApiResponse(data=InvitationResponse.model_validate(invitation))


@router.put(INVITATION_URL, response_model=ApiResponse[InvitationResponse])
async def update_invitation(
    invitation_id: int,
    invitation_data: InvitationFields,
    write_model: InvitationWriteModel = Depends(get_invitation_write_model),
) -> ApiResponse[InvitationResponse]:
    invitation = await write_model.update_invitation(invitation_id, invitation_data.to_fields())
    return ApiResponse(data=InvitationResponse.model_validate(invitation))


@router.delete(INVITATION_URL, response_model=MessageResponse)
async def delete_invitation(
    invitation_id: int,
    write_model: InvitationWriteModel = Depends(get_invitation_write_model),
) -> MessageResponse:
    """Delete an invitation. Its guests and RSVP responses are deleted with it."""
    await write_model.delete_invitation(invitation_id)
    return MessageResponse(message="Invitation deleted successfully")
