# api_gateway.py — PlayMax backend calls over httpx, normalized to one response shape
#
# Every call resolves to  {status: bool, result: Any, msg: str|None, status_code: int|None}
# HTTP error responses and transport failures raise ApiCallError carrying the same shape,
# so callers can treat a raised error exactly like a returned failure.
from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

import settings
from errors import ApiCallError, network_error_response, status_code_of

# ---------------- Endpoints ----------------
EP_LANDING = "LandingData"
EP_LOGIN = "Login"
EP_VALIDATE_MPIN = "ValidateMpin"
EP_BALANCE = "GetMyBalance"
EP_GAMES_MAIN = "TodayGames"
EP_GAMES_STARLINE = "TodayGames_Starline"
EP_GAMES_DELHI = "TodayGames_Delhi"
EP_CLEAR_LOGIN = "ClearLoginSession"
EP_CLEAR_MPIN = "ClearMpinSession"
EP_NOTIFICATIONS = "Notification"
EP_SET_NOTIFICATION = "SetNotificationStatus"


def _is_true(v: Any) -> bool:
    """Backends answer true, 1, "true" or "1" for success."""
    if isinstance(v, bool):
        return v
    if isinstance(v, (int, float)):
        return v == 1
    return str(v).strip().lower() in ("true", "1")


def normalize_response(body: Any) -> Dict[str, Any]:
    """Coerce whatever the backend sent into the uniform response dict."""
    if not isinstance(body, dict):
        return {"status": False, "result": None, "msg": "Unexpected response", "status_code": None}
    return {
        "status": _is_true(body.get("status")),
        "result": body.get("result"),
        "msg": body.get("msg") or body.get("message"),
        "status_code": status_code_of(body),
    }


def _json_or_none(r: httpx.Response) -> Any:
    try:
        return r.json()
    except ValueError:
        return None


class ApiGateway:
    """
    Thin async client for the `apis/` backend. One httpx.AsyncClient per call so the
    gateway can be driven from any event loop (Streamlit reruns call asyncio.run()).
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        admin_id: Optional[int] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url or settings.base_urls()["apis"]
        self.admin_id = admin_id if admin_id is not None else settings.admin_id()
        self.timeout = timeout if timeout is not None else settings.http_timeout()
        self._transport = transport

    async def _post(self, endpoint: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
                headers={"Content-Type": "application/json"},
            ) as client:
                r = await client.post(endpoint, json=payload)
        except httpx.HTTPError as e:
            # never print the payload: it can hold passwords / tokens
            print(f"[api_gateway] {endpoint} transport error: {type(e).__name__}")
            raise ApiCallError(network_error_response()) from e

        body = _json_or_none(r)
        if r.status_code >= 400:
            if isinstance(body, dict):
                resp = normalize_response(body)
                resp["status"] = False
            else:
                resp = {"status": False, "result": None, "msg": r.text or "Request failed", "status_code": None}
            if resp["status_code"] is None:
                resp["status_code"] = r.status_code
            raise ApiCallError(resp)

        return normalize_response(body)

    # ---------------- Unauthenticated ----------------
    async def get_landing_data(self) -> Dict[str, Any]:
        return await self._post(EP_LANDING, {"AdminId": self.admin_id})

    async def login(self, mobile: str, password: str, fcm_token: str = "") -> Dict[str, Any]:
        return await self._post(EP_LOGIN, {
            "UserName": mobile,
            "Password": password,
            "AdminId": self.admin_id,
            "TokenValue": fcm_token or "",
        })

    async def validate_mpin(self, user_token: str, mpin: str, fcm_token: str = "") -> Dict[str, Any]:
        return await self._post(EP_VALIDATE_MPIN, {
            "user_token": user_token,
            "Mpin": mpin,
            "TokenValue": fcm_token or "",
        })

    # ---------------- Authenticated ----------------
    async def post_authenticated(
        self,
        endpoint: str,
        user_token: str,
        pin_token: str,
        **extra: Any,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"user_token": user_token, "pin_token": pin_token}
        payload.update(extra)
        return await self._post(endpoint, payload)

    async def clear_login_session(self, user_token: str, pin_token: str) -> Dict[str, Any]:
        return await self.post_authenticated(EP_CLEAR_LOGIN, user_token, pin_token)

    async def clear_mpin_session(self, user_token: str, pin_token: str) -> Dict[str, Any]:
        return await self.post_authenticated(EP_CLEAR_MPIN, user_token, pin_token)


def cdn_url(path: str) -> str:
    """Absolute URL for an UploadsFiles path (banner images)."""
    p = str(path or "")
    if p.startswith("http://") or p.startswith("https://"):
        return p
    return settings.base_urls()["cdn"] + p.lstrip("/")
