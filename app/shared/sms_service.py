import logging
from typing import Optional, Protocol

import requests

from app.domains.otp.models import Delivered, DeliveryMode, Failed, Fallback
from app.shared.phone_utils import mask_code, mask_phone, to_e164

logger = logging.getLogger(__name__)


class ChannelUnavailable(Exception):
    """The SMS provider could not be reached."""


class ChannelError(Exception):
    """The SMS provider rejected the message."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class SMSChannel(Protocol):
    def send(self, destination: str, body: str) -> str:  # pragma: no cover - interface
        ...


class TwilioSMSAPI:
    def __init__(self, api_url, account_sid, auth_token, from_number, timeout=10.0):
        """Initialize the Twilio client with account credentials and sender number"""
        self.api_url = api_url.rstrip("/")
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.from_number = from_number
        self.timeout = timeout

    def send(self, destination: str, body: str) -> str:
        """Send an SMS and return the Twilio message SID."""
        url = f"{self.api_url}/Accounts/{self.account_sid}/Messages.json"
        payload = {"To": destination, "From": self.from_number, "Body": body}

        try:
            response = requests.post(
                url,
                data=payload,
                auth=(self.account_sid, self.auth_token),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise ChannelUnavailable(str(e)) from e

        if response.status_code >= 400:
            try:
                reason = response.json().get("message") or response.text
            except (ValueError, AttributeError):
                reason = response.text
            raise ChannelError(f"Twilio {response.status_code}: {reason}")

        try:
            sid = response.json().get("sid")
        except (ValueError, AttributeError) as e:
            raise ChannelError(f"Twilio returned an unreadable response: {response.text}") from e
        if not sid:
            raise ChannelError("Twilio response did not include a message sid")
        return sid


class SMSDelivery:
    """Turns a channel call into a DeliveryMode the issuer can consume without branching on errors."""

    def __init__(self, channel: Optional[SMSChannel], country_code: str = "+91"):
        self.channel = channel
        self.country_code = country_code

    @property
    def configured(self) -> bool:
        return self.channel is not None

    def dispatch(self, mobile: str, body: str, code: str) -> DeliveryMode:
        if self.channel is None:
            logger.info("Demo mode, OTP for %s is %s", mask_phone(mobile), mask_code(code))
            return Fallback(code=code)

        try:
            delivery_id = self.channel.send(to_e164(mobile, self.country_code), body)
        except (ChannelUnavailable, ChannelError) as e:
            logger.error("SMS delivery to %s failed: %s", mask_phone(mobile), e)
            return Failed(reason=str(e), code=code)

        logger.info("OTP sent to %s, MessageSID: %s", mask_phone(mobile), delivery_id)
        return Delivered(delivery_id=delivery_id)


def build_channel(settings) -> Optional[TwilioSMSAPI]:
    if not settings.twilio_configured:
        logger.info("Twilio credentials not found - running in demo mode")
        return None
    return TwilioSMSAPI(
        settings.twilio_api_url,
        settings.twilio_account_sid,
        settings.twilio_auth_token,
        settings.twilio_phone_number,
        timeout=settings.sms_timeout_seconds,
    )
