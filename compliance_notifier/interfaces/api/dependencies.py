"""FastAPI dependency utilities."""

import hmac
import logging

from fastapi import Depends, Header, HTTPException, Request, status

from compliance_notifier.config import Settings, get_settings

logger = logging.getLogger(__name__)


def _client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def verify_cron_request(
    request: Request, settings: Settings = Depends(get_settings)
) -> None:
    """Reject scheduler calls that do not carry ``Bearer <CRON_SECRET>``."""

    authorization = request.headers.get("authorization") or ""
    secret = settings.cron_secret
    expected = f"Bearer {secret}" if secret else None
    if expected is None or not hmac.compare_digest(authorization, expected):
        logger.warning(
            "Unauthorized cron attempt ip=%s user_agent=%s path=%s",
            _client_ip(request),
            request.headers.get("user-agent") or "unknown",
            request.url.path,
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing CRON_SECRET in Authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )


def get_current_user_id(x_user_id: str | None = Header(default=None)) -> str:
    """Return the caller identity forwarded by the identity gateway."""

    user_id = (x_user_id or "").strip()
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing user identity",
        )
    return user_id
