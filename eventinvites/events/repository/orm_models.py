from datetime import datetime
from uuid import UUID

from sqlalchemy import Boolean, CheckConstraint, DateTime, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from eventinvites.config.table_names import TableNames
from eventinvites.events.dtos import EventStatus, GuestResponse, GuestStatus
from eventinvites.models.base import Base, TimeStamp
from eventinvites.models.user import User


def _enum_values(enum_class):
    return [e.value for e in enum_class]


class Event(Base, TimeStamp):
    __tablename__ = TableNames.EVENTS.value

    host_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.USERS.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    host: Mapped[User] = relationship(User, lazy="joined")

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=True)
    start_date_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_date_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    timezone: Mapped[str] = mapped_column(String(64), default="UTC", nullable=False)

    # Location
    location_address: Mapped[str] = mapped_column(String(500), nullable=True)
    location_unit: Mapped[str] = mapped_column(String(255), nullable=True)
    show_map: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    status: Mapped[str] = mapped_column(
        Enum(EventStatus, name="event_status_enum", values_callable=_enum_values),
        default=EventStatus.DRAFT,
        nullable=False,
    )

    # RSVP features
    private_guest_list: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    allow_plus_ones: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    allow_maybe_rsvp: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    allow_family_headcount: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    limit_event_capacity: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    max_event_capacity: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    max_plus_ones: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    __table_args__ = (
        CheckConstraint("max_event_capacity >= 1", name="ck_events_max_event_capacity"),
        CheckConstraint("max_plus_ones >= 0", name="ck_events_max_plus_ones"),
    )

    def __repr__(self) -> str:
        return f"<Event {self.title} on {self.start_date_time}>"


class Guest(Base, TimeStamp):
    __tablename__ = TableNames.GUESTS.value

    event_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.EVENTS.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=True, index=True)
    phone: Mapped[str] = mapped_column(String(50), nullable=True)

    # RSVP state
    status: Mapped[str] = mapped_column(
        Enum(GuestStatus, name="guest_status_enum", values_callable=_enum_values),
        default=GuestStatus.PENDING,
        nullable=False,
        index=True,
    )
    response: Mapped[str | None] = mapped_column(
        Enum(GuestResponse, name="guest_response_enum", values_callable=_enum_values),
        nullable=True,
    )
    invited_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    responded_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Headcount
    plus_ones: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    adults: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    children: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Additional notes left by the attendee
    notes: Mapped[str] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Guest {self.name} - {self.status}>"
