import logging
from collections.abc import Sequence

from eventinvites.dispatch.bulk import BulkInvitationDispatcher, DispatchSummary
from eventinvites.events.dtos import EventDTO, GuestDTO, InvitationType
from eventinvites.events.features.send_invitations.write_model import SendInvitationsWriteModel
from eventinvites.events.schemas import (
    DispatchSummarySchema,
    InvitationResultSchema,
    SendInvitationsResponse,
)

logger = logging.getLogger(__name__)

NO_GUESTS_MESSAGE = "No guests found to send invitations to"


class InvitationSender:
    """Marks guests as invited, then sends them their invitation."""

    def __init__(
        self,
        write_model: SendInvitationsWriteModel,
        dispatcher: BulkInvitationDispatcher,
        base_url: str,
    ):
        self.write_model = write_model
        self.dispatcher = dispatcher
        self.base_url = base_url

    async def send(
        self,
        event: EventDTO,
        guests: Sequence[GuestDTO],
        kind: InvitationType,
    ) -> SendInvitationsResponse:
        if not guests:
            return SendInvitationsResponse(
                success=True,
                message=NO_GUESTS_MESSAGE,
                results=[],
                summary=DispatchSummarySchema(total=0, successful=0, failed=0),
            )

        # committed before anything is sent
        marked = await self.write_model.mark_invited(event.id, [g.id for g in guests], kind)

        results = await self.dispatcher.send_bulk_event_invitations(
            marked, event, self.base_url, kind
        )
        summary = DispatchSummary.from_results(results)
        if summary.failed:
            for result in results:
                if not result.success:
                    logger.warning(
                        "Could not send %s to guest %s (%s): %s",
                        kind.value,
                        result.guest_name,
                        result.guest_id,
                        result.error,
                    )

        return SendInvitationsResponse(
            success=True,
            message=summary.message(kind),
            results=[InvitationResultSchema.model_validate(r) for r in results],
            summary=DispatchSummarySchema.model_validate(summary),
        )
