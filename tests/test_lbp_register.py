from __future__ import annotations

import httpx
import pytest

from compliance_notifier.domain.entities import (
    LBP_STATUS_NOT_FOUND,
    LBP_STATUS_SUSPENDED,
)
from compliance_notifier.infrastructure.lbp_register import (
    LBPRegisterClient,
    LBPRegisterError,
)


def _client(handler, api_key="lbp-key"):
    return LBPRegisterClient(
        base_url="https://lbp.test/api/",
        api_key=api_key,
        client=httpx.Client(transport=httpx.MockTransport(handler)),
    )


def test_lookup_maps_register_status():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["Authorization"]
        return httpx.Response(200, json={"status": "suspended"})

    assert _client(handler).lookup_status("BP 100") == LBP_STATUS_SUSPENDED
    assert seen["url"] == "https://lbp.test/api/practitioners/BP%20100"
    assert seen["auth"] == "Bearer lbp-key"


def test_unknown_practitioner_is_not_found():
    client = _client(lambda request: httpx.Response(404))

    assert client.lookup_status("BP999") == LBP_STATUS_NOT_FOUND


def test_unrecognised_status_is_not_found():
    client = _client(lambda request: httpx.Response(200, json={"status": "retired"}))

    assert client.lookup_status("BP100") == LBP_STATUS_NOT_FOUND


def test_server_error_raises():
    client = _client(lambda request: httpx.Response(500))

    with pytest.raises(LBPRegisterError):
        client.lookup_status("BP100")


def test_unconfigured_client_refuses_lookup():
    client = _client(lambda request: httpx.Response(200, json={}), api_key="")

    assert client.is_configured() is False
    with pytest.raises(LBPRegisterError):
        client.lookup_status("BP100")


def test_non_object_payload_raises_register_error():
    client = _client(lambda request: httpx.Response(200, json=["unexpected"]))

    with pytest.raises(LBPRegisterError, match="unexpected payload"):
        client.lookup_status("BP100")
