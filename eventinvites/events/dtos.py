from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from eventinvites.events.repository.orm_models import Event, Guest


class EventNotFoundError(Exception):
    """Raised when an event id does not resolve."""

    def __init__(self, event_id: UUID) -> None:
        self.event_id = event_id
        super().__init__(f"Event not found: {event_id}")


class GuestNotFoundError(Exception):
    """Raised when a guest cannot be found for the given event."""

    def __init__(self, identity: UUID | str) -> None:
        self.identity = identity
        super().__init__("Guest record not found")


class RSVPValidationError(Exception):
    """An attendee response breaks one of the event's RSVP rules."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class GuestListValidationError(Exception):
    """A host supplied guest list is not acceptable."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class PersistenceError(Exception):
    """Database failure, reported to callers with a generic message."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class FeatureUpdateError(PersistenceError):
    def __init__(self) -> None:
        super().__init__("Failed to update features")


class InvitationUnavailableError(Exception):
    """The invitation exists but its event no longer accepts responses."""

    def __init__(self, error_type: str, message: str) -> None:
        self.error_type = error_type
        self.message = message
        super().__init__(message)


class GuestStatus(str, Enum):
    PENDING = "PENDING"
    INVITED = "INVITED"
    CONFIRMED = "CONFIRMED"
    DECLINED = "DECLINED"
    MAYBE = "MAYBE"


class GuestResponse(str, Enum):
    YES = "YES"
    NO = "NO"
    MAYBE = "MAYBE"


# Statuses an attendee can answer with, and the response each one mirrors to
RESPONSE_BY_STATUS = {
    GuestStatus.CONFIRMED: GuestResponse.YES,
    GuestStatus.DECLINED: GuestResponse.NO,
    GuestStatus.MAYBE: GuestResponse.MAYBE,
}

# Guests in these states have not answered yet
UNRESPONDED_STATUSES = (GuestStatus.PENDING, GuestStatus.INVITED)


class EventStatus(str, Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


class InvitationType(str, Enum):
    INVITATION = "invitation"
    REMINDER = "reminder"


class InviteSelection(str, Enum):
    """Which guests of a guest-list update receive an invitation."""

    ALL = "all"
    NEW = "new"


@dataclass(frozen=True)
class EventFeaturesDTO:
    """Per-event RSVP feature flags and their limits."""

    private_guest_list: bool = False
    allow_plus_ones: bool = False
    allow_maybe_rsvp: bool = False
    allow_family_headcount: bool = False
    limit_event_capacity: bool = False
    max_event_capacity: int = 1
    max_plus_ones: int = 0

    @classmethod
    def from_event(cls, event: "Event") -> "EventFeaturesDTO":
        return cls(
            private_guest_list=event.private_guest_list,
            allow_plus_ones=event.allow_plus_ones,
            allow_maybe_rsvp=event.allow_maybe_rsvp,
            allow_family_headcount=event.allow_family_headcount,
            limit_event_capacity=event.limit_event_capacity,
            max_event_capacity=event.max_event_capacity,
            max_plus_ones=event.max_plus_ones,
        )


@dataclass(frozen=True)
class EventDTO:
    id: UUID
    title: str
    start_date_time: datetime
    features: EventFeaturesDTO
    description: str | None = None
    end_date_time: datetime | None = None
    timezone: str = "UTC"
    location_address: str | None = None
    location_unit: str | None = None
    show_map: bool = False
    status: EventStatus = EventStatus.DRAFT
    host_name: str | None = None

    @classmethod
    def from_event(cls, event: "Event", host_name: str | None = None) -> "EventDTO":
        return cls(
            id=event.uuid,
            title=event.title,
            start_date_time=event.start_date_time,
            features=EventFeaturesDTO.from_event(event),
            description=event.description,
            end_date_time=event.end_date_time,
            timezone=event.timezone or "UTC",
            location_address=event.location_address,
            location_unit=event.location_unit,
            show_map=event.show_map,
            status=EventStatus(event.status),
            host_name=host_name,
        )

    @property
    def location(self) -> str | None:
        if not self.location_address:
            return None
        if self.location_unit:
            return f"{self.location_address}, {self.location_unit}"
        return self.location_address


@dataclass(frozen=True)
class GuestDTO:
    id: UUID
    event_id: UUID
    name: str
    email: str | None = None
    phone: str | None = None
    status: GuestStatus = GuestStatus.PENDING
    response: GuestResponse | None = None
    plus_ones: int = 0
    adults: int = 1
    children: int = 0
    notes: str | None = None
    invited_at: datetime | None = None
    responded_at: datetime | None = None

    @classmethod
    def from_guest(cls, guest: "Guest") -> "GuestDTO":
        return cls(
            id=guest.uuid,
            event_id=guest.event_id,
            name=guest.name,
            email=guest.email,
            phone=guest.phone,
            status=GuestStatus(guest.status),
            response=GuestResponse(guest.response) if guest.response else None,
            plus_ones=guest.plus_ones,
            adults=guest.adults,
            children=guest.children,
            notes=guest.notes,
            invited_at=guest.invited_at,
            responded_at=guest.responded_at,
        )

    @property
    def contact(self) -> str | None:
        return self.email or self.phone


@dataclass(frozen=True)
class RSVPSubmissionDTO:
    """An attendee's answer to an invitation."""

    name: str
    email: str
    status: GuestStatus
    phone: str | None = None
    plus_ones: int = 0
    adults: int = 1
    children: int = 0
    notes: str | None = None


@dataclass(frozen=True)
class GuestInputDTO:
    """A guest entry as sent by the host when editing the guest list."""

    name: str
    id: str | None = None
    email: str | None = None
    phone: str | None = None

    @property
    def is_new(self) -> bool:
        return not self.id or self.id.startswith("temp-")


@dataclass(frozen=True)
class InvitationDTO:
    """Everything the public invitation page needs to render."""

    guest: GuestDTO
    event: EventDTO
    response_options: list[GuestStatus]
