UPDATE_FEATURES_URL = "/api/v1/events/{event_id}/features"
SEND_INVITATIONS_URL = "/api/v1/events/{event_id}/send-invitations"
UPDATE_GUESTS_URL = "/api/v1/events/{event_id}/guests"

# Public, reached from the invitation link
GET_INVITATION_URL = "/api/v1/public/events/{event_id}/guests/{guest_id}"
SUBMIT_RSVP_URL = "/api/v1/public/events/{event_id}/guests/{guest_id}/rsvp"
SUBMIT_RSVP_BY_EMAIL_URL = "/api/v1/public/events/{event_id}/rsvp"
