import html
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import UUID
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from eventinvites.dispatch.email import EmailContent, EmailServiceBase, EventDetails
from eventinvites.dispatch.messaging import DeliveryChannel, MessagingServiceBase, validate_phone_number
from eventinvites.events.dtos import EventDTO, GuestDTO, InvitationType

logger = logging.getLogger(__name__)

NO_CONTACT_ERROR = "No contact information available"


@dataclass(frozen=True)
class InvitationDispatchResult:
    """Per-guest outcome of sending an invitation or reminder."""

    guest_id: UUID
    guest_name: str
    contact: str | None
    success: bool
    email_sent: bool = False
    sms_sent: bool = False
    channel: DeliveryChannel | None = None
    email_error: str | None = None
    sms_error: str | None = None
    error: str | None = None

    @classmethod
    def failed(cls, guest: GuestDTO, error: str) -> "InvitationDispatchResult":
        return cls(
            guest_id=guest.id,
            guest_name=guest.name,
            contact=guest.contact,
            success=False,
            error=error,
        )


def _event_zone(name: str | None) -> ZoneInfo:
    try:
        return ZoneInfo(name or "UTC")
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %s, falling back to UTC", name)
        return ZoneInfo("UTC")


def localize(moment: datetime, tz_name: str | None) -> datetime:
    # naive values are stored as UTC
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(_event_zone(tz_name))


def format_event_date(moment: datetime) -> str:
    return f"{moment:%A, %B} {moment.day}, {moment.year}"


def format_event_time(moment: datetime) -> str:
    return f"{moment.strftime('%I:%M %p').lstrip('0')} {moment.strftime('%Z')}"


class InvitationDispatchService:
    """Delivers one invitation to a guest over email and phone.

    Email and phone are independent: a failure on one channel is recorded
    and never stops the other. The result is successful when at least one
    channel delivered.
    """

    def __init__(
        self,
        email_service: EmailServiceBase,
        messaging_service: MessagingServiceBase,
        default_region: str = "US",
    ):
        self.email_service = email_service
        self.messaging_service = messaging_service
        self.default_region = default_region

    @staticmethod
    def build_email(
        guest: GuestDTO,
        event: EventDTO,
        invitation_url: str,
        kind: InvitationType = InvitationType.INVITATION,
    ) -> tuple[str, EmailContent]:
        start = localize(event.start_date_time, event.timezone)
        host_name = event.host_name or "The event host"

        if kind == InvitationType.REMINDER:
            subject = f"Reminder: {event.title}"
            title = "A friendly reminder"
            subtitle = (
                f"<strong>{html.escape(host_name)}</strong> is still waiting for your "
                f"response to <strong>{html.escape(event.title)}</strong>"
            )
        else:
            subject = f"You're invited to {event.title}!"
            title = "You're Invited!"
            subtitle = (
                f"<strong>{html.escape(host_name)}</strong> has invited you to attend "
                f"<strong>{html.escape(event.title)}</strong>"
            )

        content = EmailContent(
            title=title,
            subtitle=subtitle,
            description=(
                "Please click the button below to view the full invitation and RSVP to this event."
            ),
            button_label="View Invitation & RSVP",
            button_url=invitation_url,
            event_details=EventDetails(
                date=format_event_date(start),
                time=format_event_time(start),
                location=event.location,
                event_description=event.description,
            ),
        )
        return subject, content

    @staticmethod
    def build_text_message(
        guest: GuestDTO,
        event: EventDTO,
        invitation_url: str,
        kind: InvitationType = InvitationType.INVITATION,
    ) -> str:
        start = localize(event.start_date_time, event.timezone)
        when = f"{format_event_date(start)} at {format_event_time(start)}"
        where = f" at {event.location}" if event.location else ""
        lead = "Reminder: you're invited" if kind == InvitationType.REMINDER else "You're invited"
        return (
            f'Hi {guest.name}! {lead} to "{event.title}" on {when}{where}. '
            f"View details and RSVP: {invitation_url}"
        )

    async def _send_text(
        self, guest: GuestDTO, to: str, message: str, kind: InvitationType
    ) -> tuple[bool, DeliveryChannel | None, str | None]:
        try:
            delivery = await self.messaging_service.send_message(to=to, message=message)
        except Exception as e:
            logger.exception("Failed to send %s text message to %s (%s)", kind.value, guest.name, to)
            return False, None, str(e) or e.__class__.__name__

        if not delivery.success:
            logger.error(
                "Failed to send %s text message to %s (%s): %s",
                kind.value,
                guest.name,
                to,
                delivery.error,
            )
            return False, None, delivery.error

        logger.info(
            "Event %s sent to %s (%s) via %s", kind.value, guest.name, to, delivery.channel.value
        )
        return True, delivery.channel, None

    async def send_event_invitation(
        self,
        guest: GuestDTO,
        event: EventDTO,
        invitation_url: str,
        kind: InvitationType = InvitationType.INVITATION,
    ) -> InvitationDispatchResult:
        if not guest.email and not guest.phone:
            logger.warning("No contact info for guest %s (%s)", guest.name, guest.id)
            return InvitationDispatchResult.failed(guest, NO_CONTACT_ERROR)

        email_sent = False
        email_error = None
        if guest.email:
            subject, content = self.build_email(guest, event, invitation_url, kind)
            try:
                await self.email_service.send_email(
                    to_address=guest.email, subject=subject, content=content
                )
                email_sent = True
                logger.info("Event %s email sent to %s (%s)", kind.value, guest.name, guest.email)
            except Exception as e:
                email_error = str(e) or e.__class__.__name__
                logger.exception("Failed to send %s email to %s (%s)", kind.value, guest.name, guest.email)

        sms_sent = False
        sms_error = None
        channel = DeliveryChannel.EMAIL if email_sent else None
        if guest.phone:
            phone = validate_phone_number(guest.phone, self.default_region)
            if not phone.is_valid:
                sms_error = phone.error
                logger.warning(
                    "Skipping text message to %s, invalid phone %s: %s",
                    guest.name,
                    guest.phone,
                    phone.error,
                )
            else:
                message = self.build_text_message(guest, event, invitation_url, kind)
                sms_sent, sms_channel, sms_error = await self._send_text(
                    guest, phone.formatted, message, kind
                )
                if sms_sent:
                    channel = sms_channel

        success = email_sent or sms_sent
        error = None
        if not success:
            error = "; ".join(e for e in (email_error, sms_error) if e) or f"Failed to send {kind.value}"

        return InvitationDispatchResult(
            guest_id=guest.id,
            guest_name=guest.name,
            contact=guest.contact,
            success=success,
            email_sent=email_sent,
            sms_sent=sms_sent,
            channel=channel,
            email_error=email_error,
            sms_error=sms_error,
            error=error,
        )
