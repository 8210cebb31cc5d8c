from eventinvites.config.settings import settings
from eventinvites.dispatch.bulk import BulkInvitationDispatcher
from eventinvites.dispatch.email import get_email_service
from eventinvites.dispatch.invitation import InvitationDispatchService
from eventinvites.dispatch.messaging import get_messaging_service


def get_invitation_dispatch_service() -> InvitationDispatchService:
    return InvitationDispatchService(
        email_service=get_email_service(),
        messaging_service=get_messaging_service(),
        default_region=settings.default_phone_region,
    )


def get_bulk_dispatcher() -> BulkInvitationDispatcher:
    """Dependency to get the bulk invitation dispatcher."""
    return BulkInvitationDispatcher(
        dispatch_service=get_invitation_dispatch_service(),
        delay_seconds=settings.INVITATION_DELAY_SECONDS,
        timeout=settings.INVITATION_SEND_TIMEOUT_SECONDS,
    )
