import asyncio
import json

import httpx
import pytest

from tls_posture.errors import (
    DecodeError,
    InvalidRequest,
    RateLimited,
    ServiceOverloaded,
    ServiceUnavailable,
    TransportError,
    UnexpectedStatus,
)
from tls_posture.modules.analyze import AssessmentClient, build_analyze_params
from tls_posture.utils.http import HttpClient

BASE_URL = "https://api.test/api/v2"

READY_BODY = {
    "host": "example.com",
    "status": "READY",
    "endpoints": [
        {
            "ipAddress": "93.184.216.34",
            "statusMessage": "Ready",
            "grade": "A",
            "progress": 100,
            "details": {"protocols": [{"name": "TLS", "version": "1.3"}]},
        }
    ],
}


def _submit(handler, start_new=True):
    async def _run():
        http = HttpClient(transport=httpx.MockTransport(handler))
        try:
            return await AssessmentClient(http, base_url=BASE_URL).submit("example.com", start_new=start_new)
        finally:
            await http.close()

    return asyncio.run(_run())


def _json(status, payload):
    return lambda request: httpx.Response(status, content=json.dumps(payload).encode())


def test_build_analyze_params():
    assert build_analyze_params("example.com", True, True) == {
        "host": "example.com",
        "publish": "off",
        "startNew": "on",
        "all": "done",
    }
    assert build_analyze_params("example.com", False, True) == {"host": "example.com", "publish": "off", "all": "done"}


def test_submit_sends_query_and_decodes_snapshot():
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, json=READY_BODY)

    snapshot = _submit(handler)
    assert snapshot.status == "READY"
    assert snapshot.endpoints[0].grade == "A"
    url = requests[0].url
    assert url.path == "/api/v2/analyze"
    assert url.params["host"] == "example.com"
    assert url.params["publish"] == "off"
    assert url.params["startNew"] == "on"
    assert url.params["all"] == "done"
    assert requests[0].headers["user-agent"].startswith("tls-posture/")


def test_follow_up_polls_do_not_restart_job():
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, json=READY_BODY)

    _submit(handler, start_new=False)
    assert "startNew" not in requests[0].url.params


def test_structured_400_raises_invalid_request():
    body = {"errors": [{"field": "host", "message": "Invalid value"}]}
    with pytest.raises(InvalidRequest) as info:
        _submit(_json(400, body))
    assert info.value.field == "host"
    assert "host - Invalid value" in str(info.value)


def test_unstructured_400_raises_invalid_request():
    with pytest.raises(InvalidRequest, match="invalid parameters"):
        _submit(lambda request: httpx.Response(400, content=b"nope"))


@pytest.mark.parametrize(
    "status, error",
    [
        (429, RateLimited),
        (500, ServiceUnavailable),
        (503, ServiceUnavailable),
        (529, ServiceOverloaded),
        (418, UnexpectedStatus),
    ],
)
def test_service_status_codes_map_to_errors(status, error):
    with pytest.raises(error):
        _submit(lambda request: httpx.Response(status, content=b""))


def test_invalid_json_raises_decode_error():
    with pytest.raises(DecodeError):
        _submit(lambda request: httpx.Response(200, content=b"<html>"))


def test_wrong_shape_raises_decode_error():
    with pytest.raises(DecodeError):
        _submit(_json(200, {"host": "example.com", "endpoints": "many"}))


def test_connection_failure_raises_transport_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TransportError, match="connection error"):
        _submit(handler)


def test_request_timeout_raises_transport_error():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(TransportError, match="timed out"):
        _submit(handler)


def test_http_client_disables_redirects():
    async def _run():
        client = HttpClient(timeout_seconds=5)
        try:
            return client.follow_redirects, client.timeout.read
        finally:
            await client.close()

    assert asyncio.run(_run()) == (False, 5)


class _BrokenBody(httpx.AsyncByteStream):
    async def __aiter__(self):
        yield b'{"host": "exa'
        raise httpx.ReadError("connection reset mid-body")

    async def aclose(self):
        pass


def test_body_read_failure_raises_transport_error():
    with pytest.raises(TransportError, match="error reading response"):
        _submit(lambda request: httpx.Response(200, stream=_BrokenBody()))
