from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum


class DeliveryChannel(str, Enum):
    EMAIL = "EMAIL"
    SMS = "SMS"
    WHATSAPP = "WHATSAPP"


@dataclass(frozen=True)
class DeliveryResult:
    """Outcome of a single SMS or WhatsApp send as reported by the provider."""

    success: bool
    channel: DeliveryChannel
    status: str | None = None
    sid: str | None = None
    error_code: int | None = None
    error: str | None = None


class MessagingServiceBase(ABC):
    @abstractmethod
    async def send_message(self, to: str, message: str) -> DeliveryResult:
        """
        Deliver a text message to a phone number in E.164 format.

        Implementations never raise for provider failures, they report them
        in the returned DeliveryResult.
        """
        pass
