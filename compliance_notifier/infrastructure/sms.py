"""Send SMS messages through the Twilio REST API."""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass

import httpx

from compliance_notifier.config import get_settings

logger = logging.getLogger(__name__)

TWILIO_API_BASE_URL = "https://api.twilio.com/2010-04-01"
_PHONE_NOISE = re.compile(r"[\s\-()]")


@dataclass(frozen=True)
class SmsSendResult:
    success: bool
    message_id: str | None = None
    error: str | None = None


def format_nz_phone_number(phone: str) -> str:
    """Normalise a New Zealand phone number to E.164 (``+64...``)."""

    cleaned = _PHONE_NOISE.sub("", phone or "")
    if not cleaned:
        raise ValueError("Phone number is empty")
    if cleaned.startswith("0"):
        cleaned = "+64" + cleaned[1:]
    if not cleaned.startswith("+"):
        cleaned = "+64" + cleaned
    return cleaned


def _twilio_error_details(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text.strip() or response.reason_phrase
    if isinstance(payload, dict):
        message = payload.get("message")
        code = payload.get("code")
        if message and code:
            return f"{message} (code {code})"
        if message:
            return str(message)
    return response.reason_phrase


def send_sms(
    phone_number: str, message: str, *, client: httpx.Client | None = None
) -> SmsSendResult:
    """Send ``message`` to ``phone_number``.

    Without Twilio credentials the message is only logged and a mock id is
    returned, which keeps local environments usable.
    """

    settings = get_settings()
    account_sid = settings.twilio_account_sid
    auth_token = settings.twilio_auth_token
    from_number = settings.twilio_phone_number

    if not (account_sid and auth_token and from_number):
        logger.info("[SMS mock] to=%s message=%s", phone_number, message)
        return SmsSendResult(success=True, message_id=f"mock-{int(time.time() * 1000)}")

    try:
        to_number = format_nz_phone_number(phone_number)
    except ValueError as exc:
        return SmsSendResult(success=False, error=str(exc))

    url = f"{TWILIO_API_BASE_URL}/Accounts/{account_sid}/Messages.json"
    data = {"To": to_number, "From": from_number, "Body": message}
    owns_client = client is None
    http = client or httpx.Client(timeout=settings.twilio_timeout_seconds)
    try:
        response = http.post(url, data=data, auth=(account_sid, auth_token))
    except httpx.HTTPError as exc:
        logger.error("Failed to send SMS to %s: %s", to_number, exc)
        return SmsSendResult(success=False, error=f"SMS request failed: {exc}")
    finally:
        if owns_client:
            http.close()

    if response.status_code >= 400:
        details = _twilio_error_details(response)
        logger.error(
            "Twilio responded with status %s for %s: %s",
            response.status_code,
            to_number,
            details,
        )
        return SmsSendResult(success=False, error=details)

    sid = response.json().get("sid")
    return SmsSendResult(success=True, message_id=sid)


__all__ = ["SmsSendResult", "format_nz_phone_number", "send_sms"]
