"""Write model applying an attendee's RSVP to their guest record."""

import logging
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from functools import partial
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from eventinvites.config.database import async_session_manager
from eventinvites.events.dtos import (
    RESPONSE_BY_STATUS,
    EventFeaturesDTO,
    EventNotFoundError,
    GuestDTO,
    GuestNotFoundError,
    GuestStatus,
    PersistenceError,
    RSVPSubmissionDTO,
)
from eventinvites.events.features.submit_rsvp.validation import (
    normalize_submission,
    party_size,
    validate_rsvp,
)
from eventinvites.events.repository.orm_models import Event, Guest

logger = logging.getLogger(__name__)


class RSVPWriteModel(ABC):
    @abstractmethod
    async def submit_rsvp(
        self,
        event_id: UUID,
        guest_id: UUID | None,
        submission: RSVPSubmissionDTO,
    ) -> GuestDTO:
        """
        Validate an attendee's response and store it on their guest record.

        The guest is found by guest_id, or by email when no id is given.
        Raises RSVPValidationError when the response breaks an event rule.
        """
        raise NotImplementedError


class SqlRSVPWriteModel(RSVPWriteModel):
    """SQL implementation of the RSVP write model. Returns DTOs, never ORM models."""

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def submit_rsvp(
        self,
        event_id: UUID,
        guest_id: UUID | None,
        submission: RSVPSubmissionDTO,
    ) -> GuestDTO:
        try:
            async with self.async_session_manager(
                session_overwrite=self.session_overwrite
            ) as session:
                event = await self._get_event(session, event_id)
                if event is None:
                    raise EventNotFoundError(event_id)
                features = EventFeaturesDTO.from_event(event)

                guest = await self._get_guest(session, event_id, guest_id, submission.email)
                if guest is None:
                    raise GuestNotFoundError(guest_id or submission.email)

                confirmed_headcount = 0
                if features.limit_event_capacity:
                    confirmed_headcount = await self._confirmed_headcount(
                        session, features, event_id, exclude_guest_id=guest.uuid
                    )

                validate_rsvp(features, submission, confirmed_headcount=confirmed_headcount)
                submission = normalize_submission(features, submission)

                guest.name = submission.name
                # email identifies the invitation, it is only filled in when missing
                if not guest.email:
                    guest.email = submission.email
                if submission.phone:
                    guest.phone = submission.phone
                guest.status = submission.status
                guest.response = RESPONSE_BY_STATUS[submission.status]
                guest.plus_ones = submission.plus_ones
                guest.adults = submission.adults
                guest.children = submission.children
                guest.notes = submission.notes
                guest.responded_at = datetime.now(UTC)
                await session.flush()

                guest_dto = GuestDTO.from_guest(guest)
        except SQLAlchemyError as e:
            logger.exception("Error updating guest response for event %s", event_id)
            raise PersistenceError("Failed to update guest response") from e

        logger.info(
            "Guest %s responded %s to event %s", guest_dto.id, guest_dto.status.value, event_id
        )
        return guest_dto

    async def _get_event(self, session, event_id: UUID) -> Event | None:
        result = await session.execute(select(Event).where(Event.uuid == event_id))
        return result.scalar_one_or_none()

    async def _get_guest(
        self, session, event_id: UUID, guest_id: UUID | None, email: str | None
    ) -> Guest | None:
        """Get a guest of the event by id, or by email when no id is given."""
        stmt = select(Guest).where(Guest.event_id == event_id)
        if guest_id is not None:
            stmt = stmt.where(Guest.uuid == guest_id)
        elif email and email.strip():
            stmt = stmt.where(func.lower(Guest.email) == email.strip().lower())
        else:
            return None
        result = await session.execute(stmt.limit(1))
        return result.scalar_one_or_none()

    async def _confirmed_headcount(
        self,
        session,
        features: EventFeaturesDTO,
        event_id: UUID,
        exclude_guest_id: UUID,
    ) -> int:
        """Sum the party sizes of every other confirmed guest of the event."""
        result = await session.execute(
            select(Guest.plus_ones, Guest.adults, Guest.children)
            .where(Guest.event_id == event_id)
            .where(Guest.status == GuestStatus.CONFIRMED)
            .where(Guest.uuid != exclude_guest_id)
        )
        return sum(
            party_size(features, plus_ones, adults, children)
            for plus_ones, adults, children in result.all()
        )
