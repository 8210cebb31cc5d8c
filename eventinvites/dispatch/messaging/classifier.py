from abc import ABC, abstractmethod


class DeliveryOutcomeClassifier(ABC):
    """Decides from a provider response whether a message should count as failed."""

    @abstractmethod
    def is_failed(self, status: str | None, error_code: int | None) -> bool:
        pass

    @abstractmethod
    def describe_error(self, error_code: int | None, message: str | None) -> str:
        """Readable message for a provider error."""
        pass


class TwilioOutcomeClassifier(DeliveryOutcomeClassifier):
    FAILURE_STATUSES = frozenset(
        {
            "failed",
            "undelivered",
            "unknown",
            "canceled",
            "undeliverable",
            "rejected",
            "blocked",
            "invalid",
            "unreachable",
        }
    )

    FAILURE_ERROR_CODES = frozenset({21211, 21408, 21610, 30003, 30004, 30006, 63007})

    ERROR_MESSAGES = {
        21211: "Invalid phone number format",
        21408: "Permission denied to send to this number",
        21610: "Phone number is not opted in to receive messages",
        30003: "Message could not be delivered",
        30004: "Message blocked (spam filter)",
        30006: "Landline or unreachable carrier",
        63007: "Number is not a valid mobile number",
    }

    def is_failed(self, status: str | None, error_code: int | None) -> bool:
        if (status or "").lower() in self.FAILURE_STATUSES:
            return True
        return error_code is not None and error_code in self.FAILURE_ERROR_CODES

    def describe_error(self, error_code: int | None, message: str | None) -> str:
        if error_code in self.ERROR_MESSAGES:
            return self.ERROR_MESSAGES[error_code]
        return message or "Failed to send message"
