from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from eventinvites.events.dtos import GuestStatus, InvitationUnavailableError
from eventinvites.events.repository.read_models import InvitationReadModel, SqlInvitationReadModel
from eventinvites.events.schemas import EventResponse, GuestSchema
from eventinvites.events.urls import GET_INVITATION_URL

router = APIRouter()

INVALID_INVITATION_MESSAGE = (
    "The invitation link you clicked is not valid. "
    "Please check the link or contact the event organizer."
)


class InvitationResponse(BaseModel):
    guest: GuestSchema
    event: EventResponse
    response_options: list[GuestStatus]


def get_invitation_read_model() -> InvitationReadModel:
    """Dependency to get invitation read model instance."""
    return SqlInvitationReadModel()


@router.get(GET_INVITATION_URL, response_model=InvitationResponse)
async def get_invitation(
    event_id: UUID,
    guest_id: UUID,
    read_model: InvitationReadModel = Depends(get_invitation_read_model),
) -> InvitationResponse:
    """
    Get the invitation page data of a guest.
    Includes the RSVP options allowed by the event's features.
    """
    try:
        invitation = await read_model.get_invitation(event_id, guest_id)
    except InvitationUnavailableError as e:
        raise HTTPException(
            status_code=404, detail={"error_type": e.error_type, "message": e.message}
        )

    if not invitation:
        raise HTTPException(
            status_code=404,
            detail={"error_type": "INVALID_INVITATION", "message": INVALID_INVITATION_MESSAGE},
        )

    return InvitationResponse(
        guest=GuestSchema.from_dto(invitation.guest),
        event=EventResponse.from_dto(invitation.event),
        response_options=invitation.response_options,
    )
