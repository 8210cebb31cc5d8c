"""Builders for events and guests used across the event tests."""

from datetime import UTC, datetime
from uuid import UUID, uuid4

from eventinvites.events.dtos import (
    EventDTO,
    EventFeaturesDTO,
    EventStatus,
    GuestDTO,
    GuestStatus,
)
from eventinvites.events.repository.orm_models import Event, Guest
from eventinvites.models.user import User

EVENT_START = datetime(2026, 8, 15, 16, 0, tzinfo=UTC)


async def create_event(session, **fields) -> Event:
    """Add a host and a published event to the session and flush."""
    host = User(email=f"host-{uuid4().hex[:8]}@example.com", name="Alex Host")
    session.add(host)
    await session.flush()

    fields.setdefault("title", "Summer Party")
    fields.setdefault("start_date_time", EVENT_START)
    fields.setdefault("timezone", "Europe/Madrid")
    fields.setdefault("status", EventStatus.PUBLISHED)
    event = Event(host=host, **fields)
    session.add(event)
    await session.flush()
    return event


async def create_guest(session, event: Event, **fields) -> Guest:
    fields.setdefault("name", "Jamie Guest")
    fields.setdefault("email", f"guest-{uuid4().hex[:8]}@example.com")
    fields.setdefault("status", GuestStatus.PENDING)
    guest = Guest(event_id=event.uuid, **fields)
    session.add(guest)
    await session.flush()
    return guest


def make_event_dto(features: EventFeaturesDTO | None = None, **fields) -> EventDTO:
    fields.setdefault("id", uuid4())
    fields.setdefault("title", "Summer Party")
    fields.setdefault("start_date_time", EVENT_START)
    fields.setdefault("timezone", "Europe/Madrid")
    fields.setdefault("status", EventStatus.PUBLISHED)
    fields.setdefault("host_name", "Alex Host")
    return EventDTO(features=features or EventFeaturesDTO(), **fields)


def make_guest_dto(event_id: UUID | None = None, **fields) -> GuestDTO:
    fields.setdefault("id", uuid4())
    fields.setdefault("name", "Jamie Guest")
    fields.setdefault("email", "jamie@example.com")
    return GuestDTO(event_id=event_id or uuid4(), **fields)
