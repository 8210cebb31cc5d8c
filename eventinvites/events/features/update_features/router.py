from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException

from eventinvites.events.dtos import EventFeaturesDTO, EventNotFoundError, FeatureUpdateError
from eventinvites.events.features.update_features.write_model import (
    EventFeaturesWriteModel,
    SqlEventFeaturesWriteModel,
)
from eventinvites.events.schemas import EventFeatures, EventResponse
from eventinvites.events.urls import UPDATE_FEATURES_URL

router = APIRouter()


def get_event_features_write_model() -> EventFeaturesWriteModel:
    """Dependency to get event features write model instance."""
    return SqlEventFeaturesWriteModel()


@router.patch(UPDATE_FEATURES_URL, response_model=EventResponse)
async def update_features(
    event_id: UUID,
    features: EventFeatures,
    write_model: EventFeaturesWriteModel = Depends(get_event_features_write_model),
) -> EventResponse:
    """
    Replace the RSVP feature set of an event.

    All flags and limits must be sent. Enabling plus-ones also enables the
    family headcount, and the limits are clamped to their minimum values.
    """
    try:
        event = await write_model.update_features(
            event_id=event_id,
            features=EventFeaturesDTO(**features.model_dump()),
        )
    except EventNotFoundError:
        raise HTTPException(status_code=404, detail="Event not found")
    except FeatureUpdateError as e:
        raise HTTPException(status_code=500, detail=e.message)

    return EventResponse.from_dto(event)
