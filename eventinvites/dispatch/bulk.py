import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass

from eventinvites.dispatch.invitation import InvitationDispatchResult, InvitationDispatchService
from eventinvites.events.dtos import EventDTO, GuestDTO, InvitationType

logger = logging.getLogger(__name__)


def invitation_url(base_url: str, event: EventDTO, guest: GuestDTO) -> str:
    return f"{base_url.rstrip('/')}/events/{event.id}/invitation/{guest.id}"


@dataclass(frozen=True)
class DispatchSummary:
    total: int
    successful: int
    failed: int

    @classmethod
    def from_results(cls, results: Sequence[InvitationDispatchResult]) -> "DispatchSummary":
        successful = sum(1 for r in results if r.success)
        return cls(total=len(results), successful=successful, failed=len(results) - successful)

    def message(self, kind: InvitationType) -> str:
        text = f"Sent {kind.value}s to {self.successful} guests"
        if self.failed:
            text += f", {self.failed} failed"
        return text


class BulkInvitationDispatcher:
    """Sends invitations to a list of guests one after another.

    Guests are processed in input order with a fixed pause between two
    consecutive sends, to stay under provider rate limits. Every guest gets
    exactly one result, whatever happens while sending to it.
    """

    def __init__(
        self,
        dispatch_service: InvitationDispatchService,
        delay_seconds: float = 0.5,
        timeout: float | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.dispatch_service = dispatch_service
        self.delay_seconds = delay_seconds
        self.timeout = timeout
        self._sleep = sleep

    async def _send_one(
        self,
        guest: GuestDTO,
        event: EventDTO,
        base_url: str,
        kind: InvitationType,
    ) -> InvitationDispatchResult:
        try:
            return await asyncio.wait_for(
                self.dispatch_service.send_event_invitation(
                    guest, event, invitation_url(base_url, event, guest), kind
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            logger.error("Timed out sending %s to guest %s", kind.value, guest.id)
            return InvitationDispatchResult.failed(guest, f"Timed out after {self.timeout} seconds")
        except Exception as e:
            logger.exception("Unexpected error sending %s to guest %s", kind.value, guest.id)
            return InvitationDispatchResult.failed(guest, str(e) or e.__class__.__name__)

    async def send_bulk_event_invitations(
        self,
        guests: Sequence[GuestDTO],
        event: EventDTO,
        base_url: str,
        kind: InvitationType = InvitationType.INVITATION,
    ) -> list[InvitationDispatchResult]:
        results = []
        for index, guest in enumerate(guests):
            if index and self.delay_seconds > 0:
                await self._sleep(self.delay_seconds)
            results.append(await self._send_one(guest, event, base_url, kind))

        summary = DispatchSummary.from_results(results)
        logger.info(
            "Bulk %s dispatch for event %s finished: %s", kind.value, event.id, summary.message(kind)
        )
        return results
