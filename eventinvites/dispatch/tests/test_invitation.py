"""Tests for InvitationDispatchService with in-memory transports."""

from datetime import UTC, datetime

import pytest

from eventinvites.dispatch.bulk import BulkInvitationDispatcher
from eventinvites.dispatch.invitation import (
    NO_CONTACT_ERROR,
    InvitationDispatchService,
    format_event_date,
    format_event_time,
    localize,
)
from eventinvites.dispatch.messaging import DeliveryChannel
from eventinvites.dispatch.messaging.twilio_service import TwilioMessagingService
from eventinvites.dispatch.tests.fakes import (
    InMemoryEmailService,
    InMemoryMessagingService,
    MockHttpClient,
    MockResponse,
)
from eventinvites.events.dtos import InvitationType
from eventinvites.events.tests.factories import make_event_dto, make_guest_dto

INVITATION_URL = "http://localhost:3000/events/e/invitation/g"


class TwilioSmsConfig:
    twilio_account_sid = "AC123"
    twilio_auth_token = "secret"
    twilio_phone_number = "+15005550006"
    twilio_whatsapp_number = ""
    twilio_status_callback_url = ""


@pytest.fixture
def email_service():
    return InMemoryEmailService()


@pytest.fixture
def messaging_service():
    return InMemoryMessagingService()


@pytest.fixture
def service(email_service, messaging_service):
    return InvitationDispatchService(email_service, messaging_service, default_region="US")


@pytest.fixture
def event():
    return make_event_dto(
        title="Summer Party",
        start_date_time=datetime(2026, 8, 15, 16, 0, tzinfo=UTC),
        timezone="Europe/Madrid",
        location_address="1 Beach Road",
        description="Drinks by the sea",
    )


def test_event_date_rendered_in_event_timezone():
    start = localize(datetime(2026, 8, 15, 16, 0, tzinfo=UTC), "Europe/Madrid")

    assert format_event_date(start) == "Saturday, August 15, 2026"
    assert format_event_time(start) == "6:00 PM CEST"


def test_naive_datetimes_are_treated_as_utc():
    start = localize(datetime(2026, 1, 10, 9, 30), "America/New_York")

    assert format_event_time(start) == "4:30 AM EST"


def test_unknown_timezone_falls_back_to_utc():
    start = localize(datetime(2026, 1, 10, 9, 30, tzinfo=UTC), "Mars/Olympus")

    assert format_event_time(start) == "9:30 AM UTC"


async def test_no_contact_information(service, email_service, messaging_service, event):
    guest = make_guest_dto(event_id=event.id, email=None, phone=None)

    result = await service.send_event_invitation(guest, event, INVITATION_URL)

    assert result.success is False
    assert result.error == NO_CONTACT_ERROR
    assert email_service.sent_emails == []
    assert messaging_service.sent_messages == []


async def test_email_only(service, email_service, messaging_service, event):
    guest = make_guest_dto(event_id=event.id, email="jamie@example.com", phone=None)

    result = await service.send_event_invitation(guest, event, INVITATION_URL)

    assert result.success is True
    assert result.email_sent is True
    assert result.sms_sent is False
    assert result.channel == DeliveryChannel.EMAIL
    assert messaging_service.sent_messages == []

    [email] = email_service.sent_emails
    assert email["to_address"] == "jamie@example.com"
    assert email["subject"] == "You're invited to Summer Party!"
    content = email["content"]
    assert content.button_label == "View Invitation & RSVP"
    assert content.button_url == INVITATION_URL
    assert content.event_details.date == "Saturday, August 15, 2026"
    assert content.event_details.time == "6:00 PM CEST"
    assert content.event_details.location == "1 Beach Road"
    assert content.event_details.event_description == "Drinks by the sea"
    assert "Alex Host" in content.subtitle


async def test_subtitle_escapes_user_values(service, email_service):
    event = make_event_dto(title="<b>Party</b>", host_name="Tom & Jerry")
    guest = make_guest_dto(event_id=event.id)

    await service.send_event_invitation(guest, event, INVITATION_URL)

    subtitle = email_service.sent_emails[0]["content"].subtitle
    assert "&lt;b&gt;Party&lt;/b&gt;" in subtitle
    assert "Tom &amp; Jerry" in subtitle


async def test_phone_only(service, email_service, messaging_service, event):
    guest = make_guest_dto(event_id=event.id, name="Sam", email=None, phone="(650) 253-0000")

    result = await service.send_event_invitation(guest, event, INVITATION_URL)

    assert result.success is True
    assert result.sms_sent is True
    assert result.channel == DeliveryChannel.SMS
    assert email_service.sent_emails == []

    [message] = messaging_service.sent_messages
    assert message["to"] == "+16502530000"
    assert message["message"] == (
        'Hi Sam! You\'re invited to "Summer Party" on Saturday, August 15, 2026 at '
        "6:00 PM CEST at 1 Beach Road. View details and RSVP: " + INVITATION_URL
    )


async def test_invalid_phone_is_skipped(service, messaging_service, event):
    guest = make_guest_dto(event_id=event.id, email=None, phone="12345")

    result = await service.send_event_invitation(guest, event, INVITATION_URL)

    assert result.success is False
    assert result.sms_error == "Phone number too short"
    assert messaging_service.sent_messages == []


async def test_email_failure_does_not_block_phone(messaging_service, event):
    email_service = InMemoryEmailService(error=RuntimeError("SMTP down"))
    service = InvitationDispatchService(email_service, messaging_service)
    guest = make_guest_dto(event_id=event.id, phone="+16502530000")

    result = await service.send_event_invitation(guest, event, INVITATION_URL)

    assert result.success is True
    assert result.email_sent is False
    assert result.email_error == "SMTP down"
    assert result.sms_sent is True
    assert len(messaging_service.sent_messages) == 1


async def test_all_channels_fail(event):
    email_service = InMemoryEmailService(error=RuntimeError("SMTP down"))
    messaging_service = InMemoryMessagingService(success=False, error="Landline or unreachable carrier")
    service = InvitationDispatchService(email_service, messaging_service)
    guest = make_guest_dto(event_id=event.id, phone="+16502530000")

    result = await service.send_event_invitation(guest, event, INVITATION_URL)

    assert result.success is False
    assert result.error == "SMTP down; Landline or unreachable carrier"


async def test_whatsapp_channel_reported(email_service, event):
    messaging_service = InMemoryMessagingService(channel=DeliveryChannel.WHATSAPP)
    service = InvitationDispatchService(email_service, messaging_service)
    guest = make_guest_dto(event_id=event.id, email=None, phone="+16502530000")

    result = await service.send_event_invitation(guest, event, INVITATION_URL)

    assert result.channel == DeliveryChannel.WHATSAPP


async def test_reminder_wording(service, email_service, messaging_service, event):
    guest = make_guest_dto(event_id=event.id, phone="+16502530000")

    await service.send_event_invitation(guest, event, INVITATION_URL, InvitationType.REMINDER)

    assert email_service.sent_emails[0]["subject"] == "Reminder: Summer Party"
    assert "Reminder: you're invited" in messaging_service.sent_messages[0]["message"]


class ExplodingMessagingService(InMemoryMessagingService):
    async def send_message(self, to: str, message: str):
        self.sent_messages.append({"to": to, "message": message})
        raise ValueError("No JSON body")


async def test_phone_transport_exception_keeps_email_result(email_service, event):
    service = InvitationDispatchService(email_service, ExplodingMessagingService())
    guest = make_guest_dto(event_id=event.id, phone="+16502530000")

    result = await service.send_event_invitation(guest, event, INVITATION_URL)

    assert result.success is True
    assert result.email_sent is True
    assert result.channel == DeliveryChannel.EMAIL
    assert result.sms_sent is False
    assert result.sms_error == "No JSON body"
    assert len(email_service.sent_emails) == 1


async def test_phone_transport_exception_without_email(event):
    service = InvitationDispatchService(InMemoryEmailService(), ExplodingMessagingService())
    guest = make_guest_dto(event_id=event.id, email=None, phone="+16502530000")

    result = await service.send_event_invitation(guest, event, INVITATION_URL)

    assert result.success is False
    assert result.error == "No JSON body"


async def test_unreadable_twilio_response_does_not_fail_emailed_guest(email_service, event):
    client = MockHttpClient(MockResponse(text="<html>", status_code=201))
    messaging_service = TwilioMessagingService(config=TwilioSmsConfig(), http_client_class=client)
    dispatcher = BulkInvitationDispatcher(
        InvitationDispatchService(email_service, messaging_service), delay_seconds=0
    )
    guest = make_guest_dto(event_id=event.id, phone="+16502530000")

    [result] = await dispatcher.send_bulk_event_invitations([guest], event, "http://localhost:3000")

    assert result.success is True
    assert result.email_sent is True
    assert result.sms_error == "Unreadable Twilio response (HTTP 201)"
