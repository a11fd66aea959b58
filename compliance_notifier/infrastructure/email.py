"""Utility helpers for sending notification emails via SendGrid."""

from __future__ import annotations

import html
import json
import logging
from dataclasses import dataclass
from typing import Any

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from compliance_notifier.config import get_settings

logger = logging.getLogger(__name__)

BRAND_NAME = "RANZ Portal"


@dataclass(frozen=True)
class EmailSendResult:
    """Outcome of a provider call: a message id on success, an error otherwise."""

    id: str | None = None
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.error is None


def _extract_sendgrid_error_details(body: Any) -> str | None:
    """Return a human readable description for a SendGrid error payload."""

    if body in (None, ""):
        return None

    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            return None

    if isinstance(body, str):
        body = body.strip()
        if not body:
            return None
        try:
            parsed = json.loads(body)
        except json.JSONDecodeError:
            return body
    else:
        parsed = body

    if isinstance(parsed, dict):
        errors = parsed.get("errors")
        if isinstance(errors, list):
            messages: list[str] = []
            for item in errors:
                if not isinstance(item, dict):
                    continue
                message = item.get("message")
                field = item.get("field")
                if message and field:
                    messages.append(f"{field}: {message}")
                elif message:
                    messages.append(str(message))
            if messages:
                return "; ".join(messages)
        try:
            return json.dumps(parsed)
        except (TypeError, ValueError):
            return None

    if isinstance(parsed, list):
        return "; ".join(str(item) for item in parsed)

    return None


def _describe_sendgrid_exception(exc: Exception) -> str:
    """Log a SendGrid API error and return the message stored on the record."""

    status_code = getattr(exc, "status_code", None)
    details = _extract_sendgrid_error_details(getattr(exc, "body", None))

    if status_code and details:
        logger.error("SendGrid API request failed with status %s: %s", status_code, details)
        return f"SendGrid error {status_code}: {details}"
    if status_code:
        logger.error("SendGrid API request failed with status %s", status_code)
        return f"SendGrid error {status_code}"
    if details:
        logger.error("SendGrid API request failed: %s", details)
        return f"SendGrid error: {details}"
    logger.exception("Error sending email via SendGrid: %s", exc)
    return str(exc) or exc.__class__.__name__


def _extract_message_id(response: Any) -> str | None:
    headers = getattr(response, "headers", None)
    if headers is None:
        return None
    try:
        value = headers.get("X-Message-Id")
    except AttributeError:
        return None
    return str(value) if value else None


def send_email(subject: str, html_content: str, recipient: str) -> EmailSendResult:
    """Send an email using the configured SendGrid credentials."""

    settings = get_settings()
    if not (settings.sendgrid_api_key and settings.sendgrid_sender):
        logger.warning("SendGrid configuration incomplete; email to %s not sent", recipient)
        return EmailSendResult(error="Email delivery is not configured")

    message = Mail(
        from_email=settings.sendgrid_sender,
        to_emails=recipient,
        subject=subject,
        html_content=html_content,
    )

    try:
        client = SendGridAPIClient(settings.sendgrid_api_key)
        response = client.send(message)
    except Exception as exc:
        return EmailSendResult(error=_describe_sendgrid_exception(exc))

    status_code = getattr(response, "status_code", None)
    if not isinstance(status_code, int) or not 200 <= status_code < 300:
        details = _extract_sendgrid_error_details(getattr(response, "body", None))
        logger.error("SendGrid API responded with status %s: %s", status_code, details or "-")
        return EmailSendResult(
            error=f"SendGrid responded with status {status_code}"
            + (f": {details}" if details else "")
        )

    return EmailSendResult(id=_extract_message_id(response))


def render_notification_email(
    title: str, message: str, action_url: str | None = None
) -> str:
    """Render the standard notification email body.

    Layout: logo block, title, message (line breaks preserved), optional call
    to action and a footer linking to the preference settings page.
    """

    settings = get_settings()
    preferences_url = f"{settings.app_base_url.rstrip('/')}/settings/notifications"
    safe_title = html.escape(title)
    safe_message = html.escape(message)
    action_block = ""
    if action_url:
        action_block = (
            f'<a href="{html.escape(action_url, quote=True)}" '
            'style="display: inline-block; background: #2563eb; color: white; '
            'text-decoration: none; padding: 12px 24px; border-radius: 6px; '
            'font-weight: 500;">View Details</a>'
        )

    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{safe_title}</title>
</head>
<body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Arial, sans-serif; line-height: 1.6; color: #334155; max-width: 600px; margin: 0 auto; padding: 20px;">
  <div style="background: #f8fafc; border-radius: 8px; padding: 24px; margin-bottom: 24px;">
    <div style="margin-bottom: 16px;">
      <span style="display: inline-block; background: #2563eb; color: white; width: 40px; height: 40px; line-height: 40px; text-align: center; border-radius: 8px; font-weight: bold; font-size: 18px; margin-right: 12px;">R</span>
      <span style="font-size: 18px; font-weight: 600; color: #0f172a;">{BRAND_NAME}</span>
    </div>
    <h1 style="color: #0f172a; font-size: 20px; margin: 0 0 12px 0;">{safe_title}</h1>
    <p style="color: #475569; margin: 0 0 20px 0; white-space: pre-wrap;">{safe_message}</p>
    {action_block}
  </div>
  <p style="color: #94a3b8; font-size: 12px; text-align: center;">
    This email was sent by the RANZ Certified Business Portal.<br>
    <a href="{html.escape(preferences_url, quote=True)}" style="color: #64748b;">Manage notification preferences</a>
  </p>
</body>
</html>"""


__all__ = ["EmailSendResult", "render_notification_email", "send_email"]
