"""Write model selecting invitation targets and marking them as invited.

Guests are marked as invited and committed before any message goes out, so
a slow or failing provider never leaves the guest list half updated.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import UTC, datetime
from functools import partial
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from eventinvites.config.database import async_session_manager
from eventinvites.events.dtos import (
    UNRESPONDED_STATUSES,
    EventDTO,
    EventNotFoundError,
    GuestDTO,
    GuestStatus,
    InvitationType,
    PersistenceError,
)
from eventinvites.events.repository.orm_models import Event, Guest

logger = logging.getLogger(__name__)


class SendInvitationsWriteModel(ABC):
    @abstractmethod
    async def get_event(self, event_id: UUID) -> EventDTO:
        """Raises EventNotFoundError for an unknown event."""
        raise NotImplementedError

    @abstractmethod
    async def get_target_guests(
        self,
        event_id: UUID,
        kind: InvitationType,
        guest_ids: Sequence[UUID] | None = None,
    ) -> list[GuestDTO]:
        """
        Select the guests of the event that should receive a message.

        Explicit guest_ids win. Otherwise invitations go to guests never
        invited and reminders to invited guests that have not responded.
        """
        raise NotImplementedError

    @abstractmethod
    async def mark_invited(
        self,
        event_id: UUID,
        guest_ids: Sequence[UUID],
        kind: InvitationType,
    ) -> list[GuestDTO]:
        """Flag the unresponded guests as INVITED and return all given guests."""
        raise NotImplementedError


class SqlSendInvitationsWriteModel(SendInvitationsWriteModel):
    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def get_event(self, event_id: UUID) -> EventDTO:
        async with self.async_session_manager(
            auto_commit=False, session_overwrite=self.session_overwrite
        ) as session:
            result = await session.execute(select(Event).where(Event.uuid == event_id))
            event = result.scalar_one_or_none()
            if event is None:
                raise EventNotFoundError(event_id)
            return EventDTO.from_event(event, host_name=event.host.name if event.host else None)

    async def get_target_guests(
        self,
        event_id: UUID,
        kind: InvitationType,
        guest_ids: Sequence[UUID] | None = None,
    ) -> list[GuestDTO]:
        stmt = select(Guest).where(Guest.event_id == event_id)
        if guest_ids:
            stmt = stmt.where(Guest.uuid.in_(list(guest_ids)))
        elif kind == InvitationType.INVITATION:
            stmt = stmt.where(Guest.invited_at.is_(None))
        else:
            stmt = stmt.where(Guest.invited_at.is_not(None)).where(
                Guest.status.in_(UNRESPONDED_STATUSES)
            )

        async with self.async_session_manager(
            auto_commit=False, session_overwrite=self.session_overwrite
        ) as session:
            result = await session.execute(stmt.order_by(Guest.created_at, Guest.name))
            return [GuestDTO.from_guest(guest) for guest in result.scalars().all()]

    async def mark_invited(
        self,
        event_id: UUID,
        guest_ids: Sequence[UUID],
        kind: InvitationType,
    ) -> list[GuestDTO]:
        if not guest_ids:
            return []

        now = datetime.now(UTC)
        try:
            async with self.async_session_manager(
                session_overwrite=self.session_overwrite
            ) as session:
                result = await session.execute(
                    select(Guest)
                    .where(Guest.event_id == event_id)
                    .where(Guest.uuid.in_(list(guest_ids)))
                )
                guests = {guest.uuid: guest for guest in result.scalars().all()}

                for guest in guests.values():
                    if GuestStatus(guest.status) not in UNRESPONDED_STATUSES:
                        continue
                    guest.status = GuestStatus.INVITED
                    # reminders keep the date of the first invitation
                    if kind == InvitationType.INVITATION or guest.invited_at is None:
                        guest.invited_at = now
                await session.flush()

                marked = [GuestDTO.from_guest(guests[gid]) for gid in guest_ids if gid in guests]
        except SQLAlchemyError as e:
            logger.exception("Error marking guests of event %s as invited", event_id)
            raise PersistenceError("Failed to update guest invitation status") from e

        logger.info("Marked %s guests of event %s as invited", len(marked), event_id)
        return marked
