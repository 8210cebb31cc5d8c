from datetime import UTC, datetime
from uuid import uuid4

import pytest

from eventinvites.dispatch.bulk import BulkInvitationDispatcher
from eventinvites.dispatch.dependencies import get_bulk_dispatcher
from eventinvites.dispatch.invitation import InvitationDispatchService
from eventinvites.dispatch.tests.fakes import InMemoryEmailService, InMemoryMessagingService
from eventinvites.events.dtos import GuestStatus
from eventinvites.events.features.send_invitations.router import get_send_invitations_write_model
from eventinvites.events.features.send_invitations.tests.inmemory_models import (
    InMemorySendInvitationsWriteModel,
)
from eventinvites.events.tests.factories import make_event_dto, make_guest_dto
from eventinvites.events.urls import SEND_INVITATIONS_URL

FIRST_INVITE = datetime(2026, 6, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def event():
    return make_event_dto()


@pytest.fixture
def guests(event):
    return [
        make_guest_dto(event_id=event.id, name="Ana", email="ana@example.com"),
        make_guest_dto(event_id=event.id, name="Ben", email=None, phone="+16502530000"),
        make_guest_dto(
            event_id=event.id,
            name="Cleo",
            email="cleo@example.com",
            status=GuestStatus.INVITED,
            invited_at=FIRST_INVITE,
        ),
        make_guest_dto(
            event_id=event.id,
            name="Dan",
            email="dan@example.com",
            status=GuestStatus.CONFIRMED,
            invited_at=FIRST_INVITE,
        ),
    ]


@pytest.fixture
def write_model(event, guests):
    return InMemorySendInvitationsWriteModel(event, guests)


@pytest.fixture
def email_service():
    return InMemoryEmailService()


@pytest.fixture
def messaging_service():
    return InMemoryMessagingService()


@pytest.fixture
def overrides(write_model, email_service, messaging_service):
    dispatcher = BulkInvitationDispatcher(
        InvitationDispatchService(email_service, messaging_service), delay_seconds=0
    )
    return {
        get_send_invitations_write_model: lambda: write_model,
        get_bulk_dispatcher: lambda: dispatcher,
    }


async def test_send_invitations_to_uninvited_guests(
    client_factory, overrides, write_model, event, email_service, messaging_service
):
    async with client_factory(overrides) as client:
        response = await client.post(
            SEND_INVITATIONS_URL.format(event_id=event.id), json={"type": "invitation"}
        )

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["message"] == "Sent invitations to 2 guests"
    assert data["summary"] == {"total": 2, "successful": 2, "failed": 0}
    assert [r["guest_name"] for r in data["results"]] == ["Ana", "Ben"]
    assert data["results"][0]["channel"] == "EMAIL"
    assert data["results"][1]["channel"] == "SMS"

    assert [e["to_address"] for e in email_service.sent_emails] == ["ana@example.com"]
    assert [m["to"] for m in messaging_service.sent_messages] == ["+16502530000"]
    statuses = {g.name: g.status for g in write_model.guests.values()}
    assert statuses == {
        "Ana": GuestStatus.INVITED,
        "Ben": GuestStatus.INVITED,
        "Cleo": GuestStatus.INVITED,
        "Dan": GuestStatus.CONFIRMED,
    }


async def test_send_reminders(client_factory, overrides, write_model, event, email_service):
    async with client_factory(overrides) as client:
        response = await client.post(
            SEND_INVITATIONS_URL.format(event_id=event.id), json={"type": "reminder"}
        )

    data = response.json()
    assert data["message"] == "Sent reminders to 1 guests"
    assert [r["guest_name"] for r in data["results"]] == ["Cleo"]
    assert email_service.sent_emails[0]["subject"] == f"Reminder: {event.title}"
    cleo = next(g for g in write_model.guests.values() if g.name == "Cleo")
    assert cleo.invited_at == FIRST_INVITE


async def test_send_to_explicit_guests(client_factory, overrides, write_model, event, guests):
    async with client_factory(overrides) as client:
        response = await client.post(
            SEND_INVITATIONS_URL.format(event_id=event.id),
            json={"guest_ids": [str(guests[3].id)], "type": "invitation"},
        )

    data = response.json()
    assert data["summary"]["total"] == 1
    assert data["results"][0]["guest_id"] == str(guests[3].id)
    # answered guests keep their response
    assert write_model.guests[guests[3].id].status == GuestStatus.CONFIRMED


async def test_failures_are_reported_per_guest(client_factory, write_model, event):
    dispatcher = BulkInvitationDispatcher(
        InvitationDispatchService(
            InMemoryEmailService(error=RuntimeError("SMTP down")), InMemoryMessagingService()
        ),
        delay_seconds=0,
    )
    overrides = {
        get_send_invitations_write_model: lambda: write_model,
        get_bulk_dispatcher: lambda: dispatcher,
    }
    async with client_factory(overrides) as client:
        response = await client.post(
            SEND_INVITATIONS_URL.format(event_id=event.id), json={"type": "invitation"}
        )

    data = response.json()
    assert response.status_code == 200
    assert data["message"] == "Sent invitations to 1 guests, 1 failed"
    assert data["results"][0]["success"] is False
    assert data["results"][0]["error"] == "SMTP down"
    # marking is not rolled back for failed sends
    ana = next(g for g in write_model.guests.values() if g.name == "Ana")
    assert ana.status == GuestStatus.INVITED
    assert len(write_model.marked_batches) == 1


async def test_no_guests_to_invite(client_factory, event, email_service):
    write_model = InMemorySendInvitationsWriteModel(event, [])
    dispatcher = BulkInvitationDispatcher(
        InvitationDispatchService(email_service, InMemoryMessagingService()), delay_seconds=0
    )
    overrides = {
        get_send_invitations_write_model: lambda: write_model,
        get_bulk_dispatcher: lambda: dispatcher,
    }
    async with client_factory(overrides) as client:
        response = await client.post(
            SEND_INVITATIONS_URL.format(event_id=event.id), json={"type": "invitation"}
        )

    data = response.json()
    assert response.status_code == 200
    assert data["message"] == "No guests found to send invitations to"
    assert data["results"] == []
    assert write_model.marked_batches == []


async def test_unknown_event(client_factory, overrides):
    async with client_factory(overrides) as client:
        response = await client.post(
            SEND_INVITATIONS_URL.format(event_id=uuid4()), json={"type": "invitation"}
        )

    assert response.status_code == 404
    assert response.json()["detail"] == "Event not found"


async def test_invalid_type(client_factory, overrides, event):
    async with client_factory(overrides) as client:
        response = await client.post(
            SEND_INVITATIONS_URL.format(event_id=event.id), json={"type": "spam"}
        )

    assert response.status_code == 422
