from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from eventinvites.events.dtos import (
    EventNotFoundError,
    GuestNotFoundError,
    GuestStatus,
    PersistenceError,
    RSVPSubmissionDTO,
    RSVPValidationError,
)
from eventinvites.events.features.submit_rsvp.write_model import RSVPWriteModel, SqlRSVPWriteModel
from eventinvites.events.schemas import GuestSchema
from eventinvites.events.urls import SUBMIT_RSVP_BY_EMAIL_URL, SUBMIT_RSVP_URL

router = APIRouter()


class RSVPSubmit(BaseModel):
    """Attendee response to an invitation."""

    name: str
    email: str
    status: GuestStatus
    phone: str | None = None
    plus_ones: int = 0
    adults: int = 1
    children: int = 0
    notes: str | None = None

    def to_dto(self) -> RSVPSubmissionDTO:
        return RSVPSubmissionDTO(**self.model_dump())


def get_rsvp_write_model() -> RSVPWriteModel:
    """Dependency to get RSVP write model instance."""
    return SqlRSVPWriteModel()


async def _submit(
    write_model: RSVPWriteModel,
    event_id: UUID,
    guest_id: UUID | None,
    rsvp_data: RSVPSubmit,
) -> GuestSchema:
    try:
        guest = await write_model.submit_rsvp(
            event_id=event_id,
            guest_id=guest_id,
            submission=rsvp_data.to_dto(),
        )
    except RSVPValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except EventNotFoundError:
        raise HTTPException(status_code=404, detail="Event not found")
    except GuestNotFoundError:
        raise HTTPException(status_code=404, detail="Guest record not found")
    except PersistenceError as e:
        raise HTTPException(status_code=500, detail=e.message)

    return GuestSchema.from_dto(guest)


@router.put(SUBMIT_RSVP_URL, response_model=GuestSchema)
async def submit_rsvp(
    event_id: UUID,
    guest_id: UUID,
    rsvp_data: RSVPSubmit,
    write_model: RSVPWriteModel = Depends(get_rsvp_write_model),
) -> GuestSchema:
    """
    Submit or change the RSVP of an invited guest.

    Responding again overwrites the previous answer.
    """
    return await _submit(write_model, event_id, guest_id, rsvp_data)


@router.put(SUBMIT_RSVP_BY_EMAIL_URL, response_model=GuestSchema)
async def submit_rsvp_by_email(
    event_id: UUID,
    rsvp_data: RSVPSubmit,
    write_model: RSVPWriteModel = Depends(get_rsvp_write_model),
) -> GuestSchema:
    """Submit an RSVP for the guest of the event invited with the given email."""
    return await _submit(write_model, event_id, None, rsvp_data)
