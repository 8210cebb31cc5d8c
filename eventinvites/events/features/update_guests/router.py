from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from eventinvites.config.settings import settings
from eventinvites.dispatch.bulk import BulkInvitationDispatcher
from eventinvites.dispatch.dependencies import get_bulk_dispatcher
from eventinvites.events.dtos import (
    EventNotFoundError,
    GuestInputDTO,
    GuestListValidationError,
    InvitationType,
    InviteSelection,
    PersistenceError,
)
from eventinvites.events.features.send_invitations.router import get_send_invitations_write_model
from eventinvites.events.features.send_invitations.service import InvitationSender
from eventinvites.events.features.send_invitations.write_model import SendInvitationsWriteModel
from eventinvites.events.features.update_guests.write_model import (
    GuestListWriteModel,
    SqlGuestListWriteModel,
)
from eventinvites.events.schemas import GuestSchema, SendInvitationsResponse
from eventinvites.events.urls import UPDATE_GUESTS_URL

router = APIRouter()


class GuestEntry(BaseModel):
    id: str | None = None
    name: str
    email: str | None = None
    phone: str | None = None


class UpdateGuestsRequest(BaseModel):
    guests: list[GuestEntry]
    invitation_type: InviteSelection | None = None


class UpdateGuestsResponse(BaseModel):
    guests: list[GuestSchema]
    invitations: SendInvitationsResponse | None = None


def get_guest_list_write_model() -> GuestListWriteModel:
    """Dependency to get guest list write model instance."""
    return SqlGuestListWriteModel()


@router.put(UPDATE_GUESTS_URL, response_model=UpdateGuestsResponse)
async def update_guests(
    event_id: UUID,
    request: UpdateGuestsRequest,
    write_model: GuestListWriteModel = Depends(get_guest_list_write_model),
    invitations_write_model: SendInvitationsWriteModel = Depends(get_send_invitations_write_model),
    dispatcher: BulkInvitationDispatcher = Depends(get_bulk_dispatcher),
) -> UpdateGuestsResponse:
    """
    Replace the guest list of an event and optionally invite guests.

    invitation_type "all" invites every guest of the new list, "new" only
    the guests created by this request.
    """
    try:
        update = await write_model.update_guest_list(
            event_id, [GuestInputDTO(**guest.model_dump()) for guest in request.guests]
        )

        invitations = None
        if request.invitation_type is not None:
            if request.invitation_type == InviteSelection.NEW:
                targets = [g for g in update.guests if g.id in set(update.created_ids)]
            else:
                targets = update.guests

            event = await invitations_write_model.get_event(event_id)
            sender = InvitationSender(
                invitations_write_model, dispatcher, base_url=settings.frontend_url
            )
            invitations = await sender.send(event, targets, InvitationType.INVITATION)
    except GuestListValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except EventNotFoundError:
        raise HTTPException(status_code=404, detail="Event not found")
    except PersistenceError as e:
        raise HTTPException(status_code=500, detail=e.message)

    return UpdateGuestsResponse(
        guests=[GuestSchema.from_dto(guest) for guest in update.guests],
        invitations=invitations,
    )
