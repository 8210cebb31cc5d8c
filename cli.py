"""CLI commands for event and invitation management."""

import asyncio
from datetime import datetime
from uuid import UUID

import typer
import uvicorn
from sqlalchemy import select

from eventinvites.config.database import async_session_manager
from eventinvites.config.logging import setup_logging
from eventinvites.config.settings import settings
from eventinvites.dispatch.dependencies import get_bulk_dispatcher
from eventinvites.events.dtos import (
    EventFeaturesDTO,
    EventNotFoundError,
    EventStatus,
    InvitationType,
)
from eventinvites.events.features.send_invitations.service import InvitationSender
from eventinvites.events.features.send_invitations.write_model import SqlSendInvitationsWriteModel
from eventinvites.events.features.update_features.write_model import SqlEventFeaturesWriteModel
from eventinvites.events.repository.orm_models import Event, Guest
from eventinvites.models.user import User

app = typer.Typer(help="CLI commands for event and invitation management")


async def _get_or_create_host(session, email: str, name: str | None) -> User:
    result = await session.execute(select(User).where(User.email == email))
    host = result.scalar_one_or_none()
    if host is None:
        host = User(email=email, name=name)
        session.add(host)
        await session.flush()
    return host


@app.command()
def create_event(
    title: str = typer.Argument(..., help="Event title"),
    start: datetime = typer.Option(
        ...,
        "--start",
        "-s",
        help="Start date and time, e.g. 2026-08-15T18:00:00+02:00",
    ),
    host_email: str = typer.Option(
        "host@event.example",
        "--host-email",
        help="Email of the hosting user, created when missing",
    ),
    host_name: str = typer.Option(None, "--host-name", help="Name of the hosting user"),
    timezone: str = typer.Option("UTC", "--timezone", "-t", help="IANA timezone of the event"),
    location: str = typer.Option(None, "--location", "-l", help="Location address"),
    description: str = typer.Option(None, "--description", "-d", help="Event description"),
):
    """Create a published event."""

    async def _create_event():
        async with async_session_manager() as session:
            host = await _get_or_create_host(session, host_email, host_name)
            event = Event(
                host_id=host.uuid,
                title=title,
                description=description,
                start_date_time=start,
                timezone=timezone,
                location_address=location,
                status=EventStatus.PUBLISHED,
            )
            session.add(event)
            await session.flush()
            return event.uuid

    event_id = asyncio.run(_create_event())

    typer.secho("Event created!", fg=typer.colors.GREEN)
    typer.secho(f"  Title: {title}", fg=typer.colors.BLUE)
    typer.secho(f"  Event ID: {event_id}", fg=typer.colors.CYAN)


@app.command()
def add_guest(
    event_id: str = typer.Argument(..., help="Event UUID"),
    name: str = typer.Argument(..., help="Guest name"),
    email: str = typer.Option(None, "--email", "-e", help="Guest email"),
    phone: str = typer.Option(None, "--phone", "-p", help="Guest phone number"),
):
    """Add a guest to an event."""
    if not email and not phone:
        typer.secho("Either --email or --phone is required", fg=typer.colors.RED)
        raise typer.Exit(1)

    async def _add_guest():
        async with async_session_manager() as session:
            result = await session.execute(select(Event).where(Event.uuid == UUID(event_id)))
            event = result.scalar_one_or_none()
            if not event:
                raise ValueError(f"Event not found: {event_id}")

            guest = Guest(event_id=event.uuid, name=name, email=email, phone=phone)
            session.add(guest)
            await session.flush()
            return guest.uuid

    try:
        guest_id = asyncio.run(_add_guest())
    except ValueError as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho("Guest added!", fg=typer.colors.GREEN)
    typer.secho(f"  Name: {name}", fg=typer.colors.BLUE)
    typer.secho(f"  Guest ID: {guest_id}", fg=typer.colors.CYAN)
    typer.secho(
        f"  Invitation URL: {settings.frontend_url}/events/{event_id}/invitation/{guest_id}",
        fg=typer.colors.CYAN,
    )


@app.command()
def send_invitations(
    event_id: str = typer.Argument(..., help="Event UUID"),
    reminder: bool = typer.Option(
        False, "--reminder", "-r", help="Send reminders to invited guests that have not responded"
    ),
):
    """Send invitations (or reminders) to the guests of an event."""
    kind = InvitationType.REMINDER if reminder else InvitationType.INVITATION

    async def _send():
        write_model = SqlSendInvitationsWriteModel()
        event = await write_model.get_event(UUID(event_id))
        guests = await write_model.get_target_guests(event.id, kind)
        sender = InvitationSender(write_model, get_bulk_dispatcher(), base_url=settings.frontend_url)
        return await sender.send(event, guests, kind)

    setup_logging()
    try:
        response = asyncio.run(_send())
    except EventNotFoundError as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho(response.message, fg=typer.colors.GREEN)
    for result in response.results:
        if result.success:
            channel = result.channel.value if result.channel else "unknown"
            typer.secho(f"  {result.guest_name}: sent via {channel}", fg=typer.colors.BLUE)
        else:
            typer.secho(f"  {result.guest_name}: {result.error}", fg=typer.colors.RED)


@app.command()
def set_features(
    event_id: str = typer.Argument(..., help="Event UUID"),
    private_guest_list: bool = typer.Option(False, "--private-guest-list/--public-guest-list"),
    allow_plus_ones: bool = typer.Option(False, "--plus-ones/--no-plus-ones"),
    allow_maybe_rsvp: bool = typer.Option(False, "--maybe/--no-maybe"),
    allow_family_headcount: bool = typer.Option(False, "--family-headcount/--no-family-headcount"),
    max_event_capacity: int = typer.Option(
        None, "--capacity", "-c", help="Limit the event to this many guests"
    ),
    max_plus_ones: int = typer.Option(0, "--max-plus-ones", help="Plus-ones allowed per guest"),
):
    """Replace the RSVP features of an event."""
    features = EventFeaturesDTO(
        private_guest_list=private_guest_list,
        allow_plus_ones=allow_plus_ones,
        allow_maybe_rsvp=allow_maybe_rsvp,
        allow_family_headcount=allow_family_headcount,
        limit_event_capacity=max_event_capacity is not None,
        max_event_capacity=max_event_capacity or 1,
        max_plus_ones=max_plus_ones,
    )

    try:
        event = asyncio.run(
            SqlEventFeaturesWriteModel().update_features(UUID(event_id), features)
        )
    except EventNotFoundError as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho(f"Features updated for {event.title}", fg=typer.colors.GREEN)
    for name, value in vars(event.features).items():
        typer.secho(f"  {name}: {value}", fg=typer.colors.BLUE)


@app.command()
def serve(
    host: str = typer.Option(settings.app_host, "--host", help="Interface to bind"),
    port: int = typer.Option(settings.app_port, "--port", "-p", help="Port to listen on"),
    reload: bool = typer.Option(False, "--reload", help="Restart on code changes"),
):
    """Run the API with uvicorn."""
    uvicorn.run("eventinvites.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
