import abc
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from eventinvites.config.database import async_session_manager
from eventinvites.events.dtos import (
    EventDTO,
    EventStatus,
    GuestDTO,
    InvitationDTO,
    InvitationUnavailableError,
)
from eventinvites.events.features.submit_rsvp.validation import selectable_statuses
from eventinvites.events.repository.orm_models import Event, Guest

UNAVAILABLE_EVENTS = {
    EventStatus.CANCELLED: (
        "EVENT_CANCELLED",
        "This event has been cancelled by the organizer. "
        "Please contact them for more information.",
    ),
    EventStatus.COMPLETED: (
        "EVENT_COMPLETED",
        "This event has already taken place and is no longer accepting RSVPs.",
    ),
}


class InvitationReadModel(abc.ABC):
    @abc.abstractmethod
    async def get_invitation(self, event_id: UUID, guest_id: UUID) -> InvitationDTO | None:
        """
        Get the invitation of a guest.

        Returns None for an unknown guest and raises InvitationUnavailableError
        when the event no longer takes responses.
        """
        raise NotImplementedError


def check_event_available(event: EventDTO) -> None:
    if event.status in UNAVAILABLE_EVENTS:
        error_type, message = UNAVAILABLE_EVENTS[event.status]
        raise InvitationUnavailableError(error_type, message)


class SqlInvitationReadModel(InvitationReadModel):
    """SQL implementation of the invitation read model."""

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def get_invitation(self, event_id: UUID, guest_id: UUID) -> InvitationDTO | None:
        async with async_session_manager(
            auto_commit=False, session_overwrite=self.session_overwrite
        ) as session:
            result = await session.execute(
                select(Guest, Event)
                .join(Event, Guest.event_id == Event.uuid)
                .where(Guest.uuid == guest_id)
                .where(Guest.event_id == event_id)
            )
            row = result.unique().first()
            if row is None:
                return None

            guest, event = row
            event_dto = EventDTO.from_event(
                event, host_name=event.host.name if event.host else None
            )
            guest_dto = GuestDTO.from_guest(guest)

        check_event_available(event_dto)
        return InvitationDTO(
            guest=guest_dto,
            event=event_dto,
            response_options=selectable_statuses(event_dto.features),
        )
