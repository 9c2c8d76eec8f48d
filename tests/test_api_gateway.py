from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from api_gateway import ApiGateway, cdn_url, normalize_response
from errors import ApiCallError

BASE = "https://api.test/api/apis/"


def _gateway(handler) -> ApiGateway:
    return ApiGateway(BASE, admin_id=3, timeout=5.0, transport=httpx.MockTransport(handler))


def test_login_posts_flat_body_and_normalizes():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"status": True, "result": {"user_token": "T1"}, "msg": "ok"})

    resp = asyncio.run(_gateway(handler).login("9876543210", "pw", "fcm"))
    assert seen["path"] == "/api/apis/Login"
    assert seen["body"] == {"UserName": "9876543210", "Password": "pw", "AdminId": 3, "TokenValue": "fcm"}
    assert resp == {"status": True, "result": {"user_token": "T1"}, "msg": "ok", "status_code": None}


def test_validate_mpin_body():
    seen = {}

    def handler(request):
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"status": "true", "result": "P1"})

    resp = asyncio.run(_gateway(handler).validate_mpin("T1", "1234"))
    assert seen["body"] == {"user_token": "T1", "Mpin": "1234", "TokenValue": ""}
    assert resp["status"] is True
    assert resp["result"] == "P1"


def test_authenticated_call_carries_both_tokens_and_extras():
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"status": True, "result": True})

    asyncio.run(_gateway(handler).post_authenticated("SetNotificationStatus", "T1", "P1", NotificationEnabled=False))
    assert seen["path"].endswith("/SetNotificationStatus")
    assert seen["body"] == {"user_token": "T1", "pin_token": "P1", "NotificationEnabled": False}


def test_status_code_in_body_is_returned_not_raised():
    def handler(request):
        return httpx.Response(200, json={"status": False, "msg": "Mpin expired", "status_code": 412})

    resp = asyncio.run(_gateway(handler).post_authenticated("GetMyBalance", "T1", "P1"))
    assert resp["status"] is False
    assert resp["status_code"] == 412


def test_http_401_raises_with_status_code():
    def handler(request):
        return httpx.Response(401, json={"status": False, "msg": "Unauthorized"})

    with pytest.raises(ApiCallError) as exc:
        asyncio.run(_gateway(handler).post_authenticated("GetMyBalance", "T1", "P1"))
    assert exc.value.status_code == 401
    assert exc.value.response["msg"] == "Unauthorized"


def test_http_error_without_json_body():
    def handler(request):
        return httpx.Response(502, text="Bad gateway")

    with pytest.raises(ApiCallError) as exc:
        asyncio.run(_gateway(handler).get_landing_data())
    assert exc.value.response == {"status": False, "result": None, "msg": "Bad gateway", "status_code": 502}


def test_transport_failure_is_network_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ApiCallError) as exc:
        asyncio.run(_gateway(handler).get_landing_data())
    assert exc.value.response["msg"] == "Network error"
    assert exc.value.status_code is None


def test_normalize_response_shapes():
    assert normalize_response(None)["status"] is False
    assert normalize_response({"status": 0, "message": "m", "statusCode": "401"}) == {
        "status": False, "result": None, "msg": "m", "status_code": 401,
    }


@pytest.mark.parametrize("raw, ok", [
    (True, True), (1, True), (1.0, True), ("true", True), ("True", True), ("1", True),
    (False, False), (0, False), (2, False), ("false", False), ("0", False), (None, False), ("", False),
])
def test_numeric_and_string_status_flags(raw, ok):
    assert normalize_response({"status": raw, "result": "x"})["status"] is ok


def test_status_one_login_is_accepted():
    gw = _gateway(lambda req: httpx.Response(200, json={"status": 1, "result": {"user_token": "T1"}}))
    resp = asyncio.run(gw.login("9876543210", "secret"))
    assert resp["status"] is True
    assert resp["result"]["user_token"] == "T1"


def test_cdn_url(monkeypatch):
    monkeypatch.setenv("PLAYMAX_ENV", "prod")
    assert cdn_url("/banners/a.png") == "https://www.playmaxx.club/UploadsFiles/banners/a.png"
    assert cdn_url("https://elsewhere/x.png") == "https://elsewhere/x.png"
