"""Tests for the RSVP rules."""

import pytest

from eventinvites.events.dtos import (
    EventFeaturesDTO,
    GuestStatus,
    RSVPSubmissionDTO,
    RSVPValidationError,
)
from eventinvites.events.features.submit_rsvp.validation import (
    normalize_submission,
    party_size,
    selectable_statuses,
    validate_rsvp,
)


def submission(**fields) -> RSVPSubmissionDTO:
    fields.setdefault("name", "Jamie Guest")
    fields.setdefault("email", "jamie@example.com")
    fields.setdefault("status", GuestStatus.CONFIRMED)
    return RSVPSubmissionDTO(**fields)


def test_selectable_statuses_without_maybe():
    assert selectable_statuses(EventFeaturesDTO()) == [GuestStatus.CONFIRMED, GuestStatus.DECLINED]


def test_selectable_statuses_with_maybe():
    features = EventFeaturesDTO(allow_maybe_rsvp=True)
    assert selectable_statuses(features) == [
        GuestStatus.CONFIRMED,
        GuestStatus.DECLINED,
        GuestStatus.MAYBE,
    ]


@pytest.mark.parametrize(
    "fields, message",
    [
        ({"name": "  "}, "Name is required"),
        ({"email": ""}, "Email is required"),
        ({"status": GuestStatus.PENDING}, "Please select your response (Accept/Decline/Maybe)"),
        ({"status": GuestStatus.INVITED}, "Please select your response (Accept/Decline/Maybe)"),
        ({"status": GuestStatus.MAYBE}, "Maybe responses are not enabled for this event"),
    ],
)
def test_validate_rsvp_rejects_basic_errors(fields, message):
    with pytest.raises(RSVPValidationError) as exc_info:
        validate_rsvp(EventFeaturesDTO(), submission(**fields))
    assert exc_info.value.message == message


def test_validate_rsvp_accepts_maybe_when_enabled():
    validate_rsvp(EventFeaturesDTO(allow_maybe_rsvp=True), submission(status=GuestStatus.MAYBE))


def test_validate_rsvp_plus_ones_limit():
    features = EventFeaturesDTO(allow_plus_ones=True, allow_family_headcount=True, max_plus_ones=2)

    validate_rsvp(features, submission(plus_ones=2))

    with pytest.raises(RSVPValidationError) as exc_info:
        validate_rsvp(features, submission(plus_ones=3))
    assert exc_info.value.message == "You can bring at most 2 plus-one(s)"

    with pytest.raises(RSVPValidationError) as exc_info:
        validate_rsvp(features, submission(plus_ones=-1))
    assert exc_info.value.message == "Plus-ones count cannot be negative"


def test_validate_rsvp_ignores_plus_ones_when_disabled():
    validate_rsvp(EventFeaturesDTO(), submission(plus_ones=10))


def test_validate_rsvp_family_headcount():
    features = EventFeaturesDTO(allow_family_headcount=True)

    with pytest.raises(RSVPValidationError) as exc_info:
        validate_rsvp(features, submission(adults=0))
    assert exc_info.value.message == "At least 1 adult is required"

    with pytest.raises(RSVPValidationError) as exc_info:
        validate_rsvp(features, submission(children=-2))
    assert exc_info.value.message == "Children count cannot be negative"


def test_validate_rsvp_headcount_checked_for_declines_too():
    features = EventFeaturesDTO(allow_family_headcount=True)
    with pytest.raises(RSVPValidationError):
        validate_rsvp(features, submission(status=GuestStatus.DECLINED, adults=0))


def test_validate_rsvp_capacity():
    features = EventFeaturesDTO(
        allow_family_headcount=True, limit_event_capacity=True, max_event_capacity=5
    )

    validate_rsvp(features, submission(adults=2, children=1), confirmed_headcount=2)

    with pytest.raises(RSVPValidationError) as exc_info:
        validate_rsvp(features, submission(adults=2, children=2), confirmed_headcount=2)
    assert exc_info.value.message == "This response would exceed the event capacity of 5 guests"


def test_validate_rsvp_capacity_only_counts_confirmations():
    features = EventFeaturesDTO(limit_event_capacity=True, max_event_capacity=1)
    validate_rsvp(features, submission(status=GuestStatus.DECLINED), confirmed_headcount=1)


def test_party_size():
    assert party_size(EventFeaturesDTO(), plus_ones=3, adults=4, children=2) == 1
    assert party_size(EventFeaturesDTO(allow_family_headcount=True), 3, 4, 2) == 6
    features = EventFeaturesDTO(allow_plus_ones=True, allow_family_headcount=True)
    assert party_size(features, 3, 4, 2) == 9


def test_normalize_submission_resets_disabled_fields():
    normalized = normalize_submission(
        EventFeaturesDTO(),
        submission(name=" Jamie ", plus_ones=2, adults=3, children=4, notes="  "),
    )

    assert normalized.name == "Jamie"
    assert normalized.plus_ones == 0
    assert normalized.adults == 1
    assert normalized.children == 0
    assert normalized.notes is None


def test_normalize_submission_keeps_enabled_fields():
    features = EventFeaturesDTO(allow_plus_ones=True, allow_family_headcount=True, max_plus_ones=3)
    normalized = normalize_submission(features, submission(plus_ones=2, adults=3, children=4))

    assert (normalized.plus_ones, normalized.adults, normalized.children) == (2, 3, 4)
