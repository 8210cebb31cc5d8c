from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class EventDetails:
    date: str | None = None
    time: str | None = None
    location: str | None = None
    event_description: str | None = None


@dataclass(frozen=True)
class EmailContent:
    """Structured body of a transactional email."""

    title: str
    subtitle: str | None = None
    description: str | None = None
    button_label: str | None = None
    button_url: str | None = None
    event_details: EventDetails | None = None


class EmailServiceBase(ABC):
    @abstractmethod
    async def send_email(
        self,
        to_address: str,
        subject: str,
        content: EmailContent,
    ) -> None:
        """Send an email. Raises on transport failure."""
        pass
