"""Write model replacing the guest list of an event with the host's version."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from functools import partial
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from eventinvites.config.database import async_session_manager
from eventinvites.events.dtos import (
    UNRESPONDED_STATUSES,
    EventNotFoundError,
    GuestDTO,
    GuestInputDTO,
    GuestListValidationError,
    GuestStatus,
    PersistenceError,
)
from eventinvites.events.repository.orm_models import Event, Guest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GuestListUpdateDTO:
    guests: list[GuestDTO]
    created_ids: list[UUID] = field(default_factory=list)
    deleted_count: int = 0


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


def validate_guest_list(
    guests: Sequence[GuestInputDTO],
    limit_event_capacity: bool,
    max_event_capacity: int,
) -> None:
    seen_ids = set()
    for guest in guests:
        if not guest.is_new:
            if guest.id in seen_ids:
                raise GuestListValidationError("Each guest can only appear once in the guest list")
            seen_ids.add(guest.id)
        if not _clean(guest.name):
            raise GuestListValidationError("Guest name is required")
        if not _clean(guest.email) and not _clean(guest.phone):
            raise GuestListValidationError("Either email or phone number is required for guests")

    if limit_event_capacity and len(guests) > max_event_capacity:
        raise GuestListValidationError(
            f"Guest list exceeds the event capacity of {max_event_capacity} guests"
        )


def _parse_id(guest: GuestInputDTO) -> UUID | None:
    if guest.is_new:
        return None
    try:
        return UUID(guest.id)
    except ValueError:
        return None


class GuestListWriteModel(ABC):
    @abstractmethod
    async def update_guest_list(
        self, event_id: UUID, guests: Sequence[GuestInputDTO]
    ) -> GuestListUpdateDTO:
        """
        Make the event's guest list match the given one.

        Guests missing from the list are deleted, entries without a stored id
        are created. Raises GuestListValidationError for an invalid list.
        """
        raise NotImplementedError


class SqlGuestListWriteModel(GuestListWriteModel):
    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def update_guest_list(
        self, event_id: UUID, guests: Sequence[GuestInputDTO]
    ) -> GuestListUpdateDTO:
        try:
            async with self.async_session_manager(
                session_overwrite=self.session_overwrite
            ) as session:
                result = await session.execute(select(Event).where(Event.uuid == event_id))
                event = result.scalar_one_or_none()
                if event is None:
                    raise EventNotFoundError(event_id)

                validate_guest_list(guests, event.limit_event_capacity, event.max_event_capacity)

                result = await session.execute(select(Guest).where(Guest.event_id == event_id))
                existing = {guest.uuid: guest for guest in result.scalars().all()}

                kept_ids = {gid for gid in map(_parse_id, guests) if gid in existing}
                removed_ids = [gid for gid in existing if gid not in kept_ids]
                if removed_ids:
                    await session.execute(delete(Guest).where(Guest.uuid.in_(removed_ids)))

                stored = []
                created = []
                for entry in guests:
                    guest = existing.get(_parse_id(entry))
                    if guest is None:
                        guest = Guest(
                            event_id=event_id,
                            name=_clean(entry.name),
                            email=_clean(entry.email),
                            phone=_clean(entry.phone),
                            status=GuestStatus.PENDING,
                        )
                        session.add(guest)
                        created.append(guest)
                    elif GuestStatus(guest.status) in UNRESPONDED_STATUSES:
                        # answered guests keep the details they responded with
                        guest.name = _clean(entry.name)
                        guest.email = _clean(entry.email)
                        guest.phone = _clean(entry.phone)
                    stored.append(guest)
                await session.flush()

                update = GuestListUpdateDTO(
                    guests=[GuestDTO.from_guest(guest) for guest in stored],
                    created_ids=[guest.uuid for guest in created],
                    deleted_count=len(removed_ids),
                )
        except SQLAlchemyError as e:
            logger.exception("Error updating guest list of event %s", event_id)
            raise PersistenceError("Failed to update guests") from e

        logger.info(
            "Guest list of event %s updated: %s guests, %s new, %s removed",
            event_id,
            len(update.guests),
            len(update.created_ids),
            update.deleted_count,
        )
        return update
