"""Client for the Licensed Building Practitioner public register."""

from __future__ import annotations

import logging
from urllib.parse import quote

import httpx

from compliance_notifier.config import get_settings
from compliance_notifier.domain.entities import (
    LBP_STATUS_CANCELLED,
    LBP_STATUS_CURRENT,
    LBP_STATUS_EXPIRED,
    LBP_STATUS_NOT_FOUND,
    LBP_STATUS_SUSPENDED,
)

logger = logging.getLogger(__name__)

_KNOWN_STATUSES = {
    LBP_STATUS_CURRENT,
    LBP_STATUS_SUSPENDED,
    LBP_STATUS_CANCELLED,
    LBP_STATUS_EXPIRED,
}


class LBPRegisterError(RuntimeError):
    """Raised when the register cannot be queried."""


class LBPRegisterClient:
    """Look up the current licence status of a practitioner."""

    def __init__(
        self,
        *,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        settings = get_settings()
        self.base_url = (base_url or settings.lbp_api_base_url).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.lbp_api_key
        self._client = client or httpx.Client(
            timeout=timeout or settings.lbp_timeout_seconds
        )

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def lookup_status(self, lbp_number: str) -> str:
        """Return the register status for ``lbp_number``.

        Unknown numbers map to ``NOT_FOUND``; transport and server errors raise
        :class:`LBPRegisterError`.
        """

        if not self.is_configured():
            raise LBPRegisterError("LBP register API key is not configured")

        url = f"{self.base_url}/practitioners/{quote(lbp_number, safe='')}"
        try:
            response = self._client.get(
                url,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Accept": "application/json",
                },
            )
        except httpx.HTTPError as exc:
            raise LBPRegisterError(f"LBP register request failed: {exc}") from exc

        if response.status_code == 404:
            return LBP_STATUS_NOT_FOUND
        if response.status_code >= 400:
            raise LBPRegisterError(
                f"LBP register error: {response.status_code} {response.reason_phrase}"
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise LBPRegisterError("LBP register returned invalid JSON") from exc
        if not isinstance(payload, dict):
            raise LBPRegisterError("LBP register returned an unexpected payload")
        status = str(payload.get("status") or "").upper()
        return status if status in _KNOWN_STATUSES else LBP_STATUS_NOT_FOUND

    def close(self) -> None:
        self._client.close()


__all__ = ["LBPRegisterClient", "LBPRegisterError"]
