import logging
from typing import Protocol

import httpx

from eventinvites.dispatch.messaging.base import DeliveryChannel, DeliveryResult, MessagingServiceBase
from eventinvites.dispatch.messaging.classifier import (
    DeliveryOutcomeClassifier,
    TwilioOutcomeClassifier,
)

logger = logging.getLogger(__name__)

TWILIO_MESSAGES_URL = "https://api.twilio.com/2010-04-01/Accounts/{account_sid}/Messages.json"


class TwilioConfig(Protocol):
    twilio_account_sid: str
    twilio_auth_token: str
    twilio_phone_number: str
    twilio_whatsapp_number: str
    twilio_status_callback_url: str


class TwilioProviderError(Exception):
    def __init__(self, code: int | None, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(message)


class TwilioMessagingService(MessagingServiceBase):
    """SMS and WhatsApp delivery through the Twilio REST API.

    WhatsApp is tried first when a WhatsApp sender is configured. When it
    fails, according to the outcome classifier, the message is sent once
    more as a plain SMS.
    """

    def __init__(
        self,
        config: TwilioConfig,
        classifier: DeliveryOutcomeClassifier | None = None,
        http_client_class: type[httpx.AsyncClient] = httpx.AsyncClient,
    ):
        self._config = config
        self._classifier = classifier or TwilioOutcomeClassifier()
        self._http_client_class = http_client_class

    @property
    def sms_configured(self) -> bool:
        return bool(
            self._config.twilio_account_sid
            and self._config.twilio_auth_token
            and self._config.twilio_phone_number
        )

    @property
    def whatsapp_configured(self) -> bool:
        return self.sms_configured and bool(self._config.twilio_whatsapp_number)

    def _whatsapp_sender(self) -> str:
        sender = self._config.twilio_whatsapp_number
        return sender if sender.startswith("whatsapp:") else f"whatsapp:{sender}"

    async def _create_message(self, to: str, from_: str, body: str) -> dict:
        data = {"To": to, "From": from_, "Body": body}
        if self._config.twilio_status_callback_url:
            data["StatusCallback"] = self._config.twilio_status_callback_url

        async with self._http_client_class() as client:
            response = await client.post(
                TWILIO_MESSAGES_URL.format(account_sid=self._config.twilio_account_sid),
                auth=(self._config.twilio_account_sid, self._config.twilio_auth_token),
                data=data,
            )
            if response.status_code >= 400:
                try:
                    payload = response.json()
                except ValueError:
                    payload = {}
                raise TwilioProviderError(
                    code=payload.get("code"),
                    message=payload.get("message") or f"HTTP {response.status_code}",
                )
            try:
                return response.json()
            except ValueError as e:
                raise TwilioProviderError(
                    code=None, message=f"Unreadable Twilio response (HTTP {response.status_code})"
                ) from e

    async def send_sms(self, to: str, message: str) -> DeliveryResult:
        if not self.sms_configured:
            logger.warning("Twilio SMS is not configured, cannot send to %s", to)
            return DeliveryResult(
                success=False,
                channel=DeliveryChannel.SMS,
                error="Twilio SMS is not configured",
            )

        try:
            payload = await self._create_message(
                to=to, from_=self._config.twilio_phone_number, body=message
            )
        except (TwilioProviderError, httpx.HTTPError) as e:
            code = getattr(e, "code", None)
            logger.error("SMS failed for %s: code=%s message=%s", to, code, e)
            return DeliveryResult(
                success=False,
                channel=DeliveryChannel.SMS,
                error_code=code,
                error=self._classifier.describe_error(code, str(e)),
            )

        logger.info("SMS sent to %s. Status: %s, SID: %s", to, payload.get("status"), payload.get("sid"))
        return DeliveryResult(
            success=True,
            channel=DeliveryChannel.SMS,
            status=payload.get("status"),
            sid=payload.get("sid"),
        )

    async def send_whatsapp(self, to: str, message: str) -> DeliveryResult:
        if not self.whatsapp_configured:
            return DeliveryResult(
                success=False,
                channel=DeliveryChannel.WHATSAPP,
                error="WhatsApp is not configured",
            )

        try:
            payload = await self._create_message(
                to=f"whatsapp:{to}", from_=self._whatsapp_sender(), body=message
            )
        except (TwilioProviderError, httpx.HTTPError) as e:
            code = getattr(e, "code", None)
            logger.error("WhatsApp API error for %s: code=%s message=%s", to, code, e)
            return DeliveryResult(
                success=False,
                channel=DeliveryChannel.WHATSAPP,
                error_code=code,
                error=self._classifier.describe_error(code, str(e)),
            )

        status = payload.get("status")
        error_code = payload.get("error_code")
        failed = self._classifier.is_failed(status, error_code)
        logger.info(
            "WhatsApp response for %s: status=%s sid=%s failed=%s error_code=%s",
            to,
            status,
            payload.get("sid"),
            failed,
            error_code,
        )
        return DeliveryResult(
            success=not failed,
            channel=DeliveryChannel.WHATSAPP,
            status=status,
            sid=payload.get("sid"),
            error_code=error_code,
            error=f"WhatsApp delivery failed: {status} (Code: {error_code})" if failed else None,
        )

    async def send_message(self, to: str, message: str) -> DeliveryResult:
        if self.whatsapp_configured:
            result = await self.send_whatsapp(to, message)
            if result.success:
                return result
            logger.warning(
                "WhatsApp failed for %s, falling back to SMS. Status: %s", to, result.status
            )

        return await self.send_sms(to, message)
