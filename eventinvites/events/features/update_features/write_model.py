"""Write model for the event feature configuration.

Feature flags are always replaced as a whole. The flags are normalised here,
at the write boundary, so the invariants hold for every caller (API, CLI,
scripts) and not only for the host UI.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import replace
from functools import partial
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from eventinvites.config.database import async_session_manager
from eventinvites.events.dtos import EventDTO, EventFeaturesDTO, EventNotFoundError, FeatureUpdateError
from eventinvites.events.repository.orm_models import Event

logger = logging.getLogger(__name__)


def normalize_features(features: EventFeaturesDTO) -> EventFeaturesDTO:
    """Clamp the limits and apply the implied family headcount flag.

    Plus-ones are counted on top of a family headcount, so turning plus-ones
    on always turns family headcount on as well.
    """
    return replace(
        features,
        allow_family_headcount=features.allow_family_headcount or features.allow_plus_ones,
        max_event_capacity=max(1, features.max_event_capacity),
        max_plus_ones=max(0, features.max_plus_ones),
    )


class EventFeaturesWriteModel(ABC):
    @abstractmethod
    async def update_features(self, event_id: UUID, features: EventFeaturesDTO) -> EventDTO:
        """Replace the full feature set of an event and return the updated event."""
        raise NotImplementedError


class SqlEventFeaturesWriteModel(EventFeaturesWriteModel):
    """SQL implementation of the event feature configuration."""

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def update_features(self, event_id: UUID, features: EventFeaturesDTO) -> EventDTO:
        features = normalize_features(features)

        try:
            async with self.async_session_manager(
                session_overwrite=self.session_overwrite
            ) as session:
                result = await session.execute(select(Event).where(Event.uuid == event_id))
                event = result.scalar_one_or_none()
                if event is None:
                    raise EventNotFoundError(event_id)

                event.private_guest_list = features.private_guest_list
                event.allow_plus_ones = features.allow_plus_ones
                event.allow_maybe_rsvp = features.allow_maybe_rsvp
                event.allow_family_headcount = features.allow_family_headcount
                event.limit_event_capacity = features.limit_event_capacity
                event.max_event_capacity = features.max_event_capacity
                event.max_plus_ones = features.max_plus_ones
                await session.flush()

                event_dto = EventDTO.from_event(
                    event, host_name=event.host.name if event.host else None
                )
        except SQLAlchemyError as e:
            logger.exception("Error updating features for event %s", event_id)
            raise FeatureUpdateError() from e

        logger.info("Updated features for event %s: %s", event_id, features)
        return event_dto
