from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from eventinvites.config.settings import settings
from eventinvites.dispatch.bulk import BulkInvitationDispatcher
from eventinvites.dispatch.dependencies import get_bulk_dispatcher
from eventinvites.events.dtos import EventNotFoundError, InvitationType, PersistenceError
from eventinvites.events.features.send_invitations.service import InvitationSender
from eventinvites.events.features.send_invitations.write_model import (
    SendInvitationsWriteModel,
    SqlSendInvitationsWriteModel,
)
from eventinvites.events.schemas import SendInvitationsResponse
from eventinvites.events.urls import SEND_INVITATIONS_URL

router = APIRouter()


class SendInvitationsRequest(BaseModel):
    guest_ids: list[UUID] | None = None
    type: InvitationType = InvitationType.INVITATION


def get_send_invitations_write_model() -> SendInvitationsWriteModel:
    """Dependency to get send invitations write model instance."""
    return SqlSendInvitationsWriteModel()


@router.post(SEND_INVITATIONS_URL, response_model=SendInvitationsResponse)
async def send_invitations(
    event_id: UUID,
    request: SendInvitationsRequest,
    write_model: SendInvitationsWriteModel = Depends(get_send_invitations_write_model),
    dispatcher: BulkInvitationDispatcher = Depends(get_bulk_dispatcher),
) -> SendInvitationsResponse:
    """
    Send invitations or reminders to the guests of an event.

    Without guest_ids, invitations go to every guest not invited yet and
    reminders to every invited guest that has not responded.
    """
    try:
        event = await write_model.get_event(event_id)
        guests = await write_model.get_target_guests(event_id, request.type, request.guest_ids)
        sender = InvitationSender(write_model, dispatcher, base_url=settings.frontend_url)
        return await sender.send(event, guests, request.type)
    except EventNotFoundError:
        raise HTTPException(status_code=404, detail="Event not found")
    except PersistenceError as e:
        raise HTTPException(status_code=500, detail=e.message)
