from eventinvites.config.settings import settings
from eventinvites.dispatch.messaging.base import DeliveryChannel, DeliveryResult, MessagingServiceBase
from eventinvites.dispatch.messaging.classifier import (
    DeliveryOutcomeClassifier,
    TwilioOutcomeClassifier,
)
from eventinvites.dispatch.messaging.phone import validate_phone_number
from eventinvites.dispatch.messaging.twilio_service import TwilioMessagingService


def get_messaging_service() -> MessagingServiceBase:
    return TwilioMessagingService(config=settings)


__all__ = [
    "DeliveryChannel",
    "DeliveryOutcomeClassifier",
    "DeliveryResult",
    "MessagingServiceBase",
    "TwilioOutcomeClassifier",
    "get_messaging_service",
    "validate_phone_number",
]
