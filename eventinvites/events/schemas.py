"""Pydantic request/response bodies shared by the event routers."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from eventinvites.dispatch.messaging.base import DeliveryChannel
from eventinvites.events.dtos import (
    EventDTO,
    EventStatus,
    GuestDTO,
    GuestResponse,
    GuestStatus,
)


class EventFeatures(BaseModel):
    private_guest_list: bool
    allow_plus_ones: bool
    allow_maybe_rsvp: bool
    allow_family_headcount: bool
    limit_event_capacity: bool
    max_event_capacity: int
    max_plus_ones: int

    class Config:
        from_attributes = True


class EventResponse(BaseModel):
    id: UUID
    title: str
    description: str | None
    start_date_time: datetime
    end_date_time: datetime | None
    timezone: str
    location_address: str | None
    location_unit: str | None
    location: str | None
    show_map: bool
    status: EventStatus
    host_name: str | None
    features: EventFeatures

    class Config:
        from_attributes = True

    @classmethod
    def from_dto(cls, event: EventDTO) -> "EventResponse":
        return cls.model_validate(event)


class GuestSchema(BaseModel):
    id: UUID
    event_id: UUID
    name: str
    email: str | None
    phone: str | None
    status: GuestStatus
    response: GuestResponse | None
    plus_ones: int
    adults: int
    children: int
    notes: str | None
    invited_at: datetime | None
    responded_at: datetime | None

    class Config:
        from_attributes = True

    @classmethod
    def from_dto(cls, guest: GuestDTO) -> "GuestSchema":
        return cls.model_validate(guest)


class InvitationResultSchema(BaseModel):
    guest_id: UUID
    guest_name: str
    contact: str | None
    success: bool
    email_sent: bool
    sms_sent: bool
    channel: DeliveryChannel | None
    error: str | None

    class Config:
        from_attributes = True


class DispatchSummarySchema(BaseModel):
    total: int
    successful: int
    failed: int

    class Config:
        from_attributes = True


class SendInvitationsResponse(BaseModel):
    success: bool
    message: str
    results: list[InvitationResultSchema]
    summary: DispatchSummarySchema
