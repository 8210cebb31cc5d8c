"""RSVP rules evaluated against an event's feature configuration."""

from eventinvites.events.dtos import (
    RESPONSE_BY_STATUS,
    EventFeaturesDTO,
    GuestStatus,
    RSVPSubmissionDTO,
    RSVPValidationError,
)


def selectable_statuses(features: EventFeaturesDTO) -> list[GuestStatus]:
    """Response options offered to an attendee, in display order."""
    options = [GuestStatus.CONFIRMED, GuestStatus.DECLINED]
    if features.allow_maybe_rsvp:
        options.append(GuestStatus.MAYBE)
    return options


def party_size(features: EventFeaturesDTO, plus_ones: int, adults: int, children: int) -> int:
    """Number of people a single guest's answer accounts for."""
    size = adults + children if features.allow_family_headcount else 1
    if features.allow_plus_ones:
        size += plus_ones
    return size


def normalize_submission(
    features: EventFeaturesDTO, submission: RSVPSubmissionDTO
) -> RSVPSubmissionDTO:
    """Reset the headcount fields of disabled features to their neutral values."""
    return RSVPSubmissionDTO(
        name=submission.name.strip(),
        email=submission.email.strip(),
        status=submission.status,
        phone=(submission.phone or "").strip() or None,
        plus_ones=submission.plus_ones if features.allow_plus_ones else 0,
        adults=submission.adults if features.allow_family_headcount else 1,
        children=submission.children if features.allow_family_headcount else 0,
        notes=(submission.notes or "").strip() or None,
    )


def validate_rsvp(
    features: EventFeaturesDTO,
    submission: RSVPSubmissionDTO,
    confirmed_headcount: int = 0,
) -> None:
    """Raise RSVPValidationError if the submission breaks one of the event rules.

    confirmed_headcount is the number of people already confirmed by the
    other guests of the event, used when the event capacity is limited.
    """
    if not submission.name or not submission.name.strip():
        raise RSVPValidationError("Name is required")
    if not submission.email or not submission.email.strip():
        raise RSVPValidationError("Email is required")
    if submission.status not in RESPONSE_BY_STATUS:
        raise RSVPValidationError("Please select your response (Accept/Decline/Maybe)")
    if submission.status not in selectable_statuses(features):
        raise RSVPValidationError("Maybe responses are not enabled for this event")

    if features.allow_plus_ones:
        if submission.plus_ones < 0:
            raise RSVPValidationError("Plus-ones count cannot be negative")
        if submission.plus_ones > features.max_plus_ones:
            raise RSVPValidationError(
                f"You can bring at most {features.max_plus_ones} plus-one(s)"
            )

    if features.allow_family_headcount:
        if submission.adults < 1:
            raise RSVPValidationError("At least 1 adult is required")
        if submission.children < 0:
            raise RSVPValidationError("Children count cannot be negative")

    if features.limit_event_capacity and submission.status == GuestStatus.CONFIRMED:
        size = party_size(
            features, submission.plus_ones, submission.adults, submission.children
        )
        if confirmed_headcount + size > features.max_event_capacity:
            raise RSVPValidationError(
                f"This response would exceed the event capacity of "
                f"{features.max_event_capacity} guests"
            )
