# auth.py — login + MPIN session controller (sole writer of the SessionStore)
#
# Two credentials, two expiry signals:
#   user_token (Login)        -> 401 from any call = full logout, back to login
#   pin_token  (ValidateMpin) -> 412 from any call = MPIN-only clear, back to PIN entry
# No Streamlit in here; auth_gate.py wires this into the pages.
from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List, Optional, Tuple, Type

from api_gateway import EP_SET_NOTIFICATION
from errors import (
    NETWORK_ERROR_MSG,
    ApiCallError,
    ApiError,
    LoginSessionExpired,
    MpinSessionExpired,
    NetworkError,
    SessionError,
    ValidationError,
    classify_response,
    error_kind,
    network_error_response,
)
from route_guard import Screen, expiry_target
from session_store import SessionStore
from session_types import (
    Credentials,
    ElevatedSession,
    PrimarySession,
    SessionStage,
    derive_stage,
    normalize_pin_result,
    validate_pin,
)

Response = Dict[str, Any]
Result = Dict[str, Any]


# ---------------- Result helpers ----------------
def _ok(data: Any = None) -> Result:
    return {"success": True, "data": data}


def _fail(message: str, kind: Type[SessionError], **extra: Any) -> Result:
    out: Result = {"success": False, "message": message, "error": error_kind(kind)}
    out.update(extra)
    return out


def _failure_from(resp: Response, default_msg: str, *, expiry: bool = True) -> Result:
    """
    Turn a failed normalized response into a result dict for the caller.

    With expiry=False (calls that carry no session token: Login, LandingData) a
    401/412 is an ordinary failure and the backend msg is kept.
    """
    kind = classify_response(resp) if expiry else None
    if kind is LoginSessionExpired:
        return _fail(kind.default_message, kind, session_expired=True)
    if kind is MpinSessionExpired:
        return _fail(kind.default_message, kind, mpin_expired=True)
    msg = resp.get("msg")
    if resp.get("status_code") is None and msg == NETWORK_ERROR_MSG:
        return _fail(msg, NetworkError)
    return _fail(msg or default_msg, ApiError)


class AuthController:
    """
    Owns the in-memory session (primary + elevated + master config) and keeps it
    in step with the SessionStore. Construct once per browser session / process,
    call initialize(), then hand the instance to whatever needs it.

    Public operations never raise: they return {"success": bool, ...} dicts.

    Session mutations (login / validate_mpin / logout / clear_mpin_session) are not
    reentrant against each other; views disable their submit buttons while `busy`.
    The expiry handler (handle_api_signal) is the exception: any number of concurrent
    calls may report 401/412 and only the first one does anything.
    """

    def __init__(
        self,
        store: SessionStore,
        api: Any,
        *,
        navigate: Optional[Callable[[Screen], None]] = None,
    ):
        self.store = store
        self.api = api
        self.navigate = navigate

        self.primary_session: Optional[PrimarySession] = None
        self.elevated_session: Optional[ElevatedSession] = None
        self.master_config: Optional[Dict[str, Any]] = None

        self.initialized = False
        self.busy = False

    # ============================================================
    #  Derived state
    # ============================================================
    @property
    def stage(self) -> SessionStage:
        return derive_stage(self.primary_session, self.elevated_session)

    @property
    def user_token(self) -> Optional[str]:
        return self.primary_session.user_token if self.primary_session else None

    @property
    def pin_token(self) -> Optional[str]:
        return self.elevated_session.pin_token if self.elevated_session else None

    @property
    def banners(self) -> list:
        return list(self.elevated_session.banners) if self.elevated_session else []

    @property
    def user(self) -> Optional[Dict[str, str]]:
        p = self.primary_session
        if p is None:
            return None
        return {"name": p.name, "mobile": p.mobile}

    def is_verified(self) -> bool:
        return self.stage is SessionStage.VERIFIED

    def is_authenticated(self) -> bool:
        return self.stage is not SessionStage.ANONYMOUS

    # ============================================================
    #  Restore
    # ============================================================
    def initialize(self) -> SessionStage:
        """
        Restore the session from the store. No network. Safe to call again:
        it only re-reads what is on disk.
        """
        try:
            self.master_config = self.store.get_master_config()
            primary = self.store.get_primary_session()
            elevated = self.store.get_elevated_session()
            if primary is None and elevated is not None:
                # a PIN session can't outlive its login
                self.store.clear_elevated_only()
                elevated = None
            self.primary_session = primary
            self.elevated_session = elevated
        except Exception as e:
            print(f"[auth] initialize error: {e!r}")
            self.primary_session = None
            self.elevated_session = None
        finally:
            self.initialized = True
        return self.stage

    # ============================================================
    #  Backend plumbing
    # ============================================================
    async def _request(self, label: str, call: Callable[..., Any], *args: Any, **kwargs: Any) -> Response:
        """Await a gateway call; raised errors come back as normalized responses."""
        try:
            resp = await call(*args, **kwargs)
        except ApiCallError as e:
            return dict(e.response)
        except Exception as e:
            print(f"[auth] {label} error: {type(e).__name__}")
            return network_error_response()
        if not isinstance(resp, dict):
            return {"status": False, "result": None, "msg": "Unexpected response", "status_code": None}
        return resp

    async def _notify_backend(self, label: str, call: Callable[..., Any], user_token: str, pin_token: str) -> None:
        resp = await self._request(label, call, user_token, pin_token)
        if resp.get("status") is not True:
            print(f"[auth] {label} not acknowledged: {resp.get('msg')!r}")

    def _drop_login(self) -> Tuple[Optional[str], Optional[str], bool]:
        """
        Clear both records + memory, synchronously. Returns the dropped tokens and
        whether the store clear succeeded (memory is reset either way).
        """
        tokens = (self.user_token, self.pin_token)
        cleared = True
        try:
            self.store.clear_primary_and_elevated()
        except OSError as e:
            print(f"[auth] clear login session store error: {e!r}")
            cleared = False
        self.primary_session = None
        self.elevated_session = None
        return tokens[0], tokens[1], cleared

    def _drop_mpin(self) -> Tuple[Optional[str], Optional[str], bool]:
        tokens = (self.user_token, self.pin_token)
        cleared = True
        try:
            self.store.clear_elevated_only()
        except OSError as e:
            print(f"[auth] clear mpin session store error: {e!r}")
            cleared = False
        self.elevated_session = None
        return tokens[0], tokens[1], cleared

    # ============================================================
    #  Landing data
    # ============================================================
    async def load_landing_data(self) -> Result:
        resp = await self._request("landing", self.api.get_landing_data)
        config = resp.get("result")
        if resp.get("status") is True and config:
            if not isinstance(config, dict):
                return _fail("Failed to load data", ApiError)
            try:
                self.store.set_master_config(config)
            except OSError as e:
                print(f"[auth] master config store error: {e!r}")
            self.master_config = config
            return _ok(config)
        return _failure_from(resp, "Failed to load data", expiry=False)

    # ============================================================
    #  Login
    # ============================================================
    async def login(self, mobile: Optional[str], password: Optional[str]) -> Result:
        try:
            creds = Credentials.parse(mobile, password)
        except ValidationError as e:
            return _fail(e.message, ValidationError)

        self.busy = True
        try:
            resp = await self._request(
                "login", self.api.login, creds.mobile, creds.password, self.store.get_fcm_token()
            )
        finally:
            self.busy = False
            del creds

        if resp.get("status") is not True or not resp.get("result"):
            return _failure_from(resp, "Login failed", expiry=False)

        data = resp["result"]
        primary = PrimarySession.from_record(data)
        if primary is None:
            return _fail("Login failed: no user token received.", ApiError)

        try:
            # a previous user's PIN session must not survive a new login
            self.store.clear_primary_and_elevated()
            self.store.set_primary_session(primary)
        except OSError as e:
            print(f"[auth] login store error: {e!r}")
            return _fail("Could not save your session. Please try again.", SessionError)

        self.primary_session = primary
        self.elevated_session = None
        return _ok(data)

    # ============================================================
    #  MPIN
    # ============================================================
    async def validate_mpin(self, pin: Optional[str]) -> Result:
        try:
            mpin = validate_pin(pin)
        except ValidationError as e:
            return _fail(e.message, ValidationError)

        if self.primary_session is None:
            return _fail("Please login first", ValidationError)

        self.busy = True
        try:
            resp = await self._request(
                "validate_mpin",
                self.api.validate_mpin,
                self.primary_session.user_token,
                mpin,
                self.store.get_fcm_token(),
            )
        finally:
            self.busy = False

        if resp.get("status") is True:
            elevated = normalize_pin_result(resp.get("result"))
            if elevated is None:
                return _fail("MPIN validation failed", ApiError)
            if self.primary_session is None:
                # logged out while the call was in flight
                return _fail("Please login first", ValidationError)
            try:
                self.store.set_elevated_session(elevated)
            except OSError as e:
                print(f"[auth] mpin store error: {e!r}")
                return _fail("Could not save your session. Please try again.", SessionError)
            self.elevated_session = elevated
            return _ok(elevated.to_record())

        if classify_response(resp) is LoginSessionExpired:
            await self.handle_api_signal(resp)
            return _fail(LoginSessionExpired.default_message, LoginSessionExpired, session_expired=True)

        return _failure_from(resp, "MPIN validation failed")

    # ============================================================
    #  Logout
    # ============================================================
    async def logout(self) -> Result:
        """
        Full logout. Local state is gone before the backend is told, so nothing
        awaiting alongside us can pick up the old tokens.
        """
        self.busy = True
        try:
            user_token, pin_token, cleared = self._drop_login()
            if user_token:
                await self._notify_backend("clear_login_session", self.api.clear_login_session,
                                           user_token, pin_token or "")
        finally:
            self.busy = False
        if not cleared:
            return _fail("Logged out, but the saved session could not be removed.", SessionError)
        return _ok()

    async def clear_mpin_session(self) -> Result:
        """PIN-only logout: Verified -> Authenticated, login token untouched."""
        self.busy = True
        try:
            user_token, pin_token, cleared = self._drop_mpin()
            if user_token and pin_token:
                await self._notify_backend("clear_mpin_session", self.api.clear_mpin_session,
                                           user_token, pin_token)
        finally:
            self.busy = False
        if not cleared:
            return _fail("Could not remove the saved MPIN session.", SessionError)
        return _ok()

    # ============================================================
    #  Expiry signals (shared by every authenticated call)
    # ============================================================
    async def handle_api_signal(self, response: Any) -> Optional[Screen]:
        """
        Apply a 401 / 412 carried by `response`.

        Returns the screen to go to when this call performed the downgrade, None when
        there was nothing to do (no signal, or an earlier signal already handled it).
        The state check and the local clear happen before the first await, so concurrent
        callers that lose the race see the new stage and return None.
        """
        kind = classify_response(response)
        if kind is None:
            return None

        if kind is LoginSessionExpired:
            if self.primary_session is None:
                return None
            user_token, pin_token, _ = self._drop_login()
            label, notify = "clear_login_session", self.api.clear_login_session
        else:
            if self.elevated_session is None:
                return None
            user_token, pin_token, _ = self._drop_mpin()
            label, notify = "clear_mpin_session", self.api.clear_mpin_session

        target = expiry_target(kind)
        print(f"[auth] {kind.__name__}: redirecting to {target.value}")
        if self.navigate is not None:
            self.navigate(target)

        if user_token and pin_token:
            await self._notify_backend(label, notify, user_token, pin_token)
        return target

    async def call_authenticated(self, endpoint: str, **extra: Any) -> Response:
        """
        POST an authenticated endpoint with the current user_token + pin_token.
        Always returns a normalized response; 401/412 are applied before returning.
        """
        user_token, pin_token = self.user_token, self.pin_token
        if not user_token or not pin_token:
            return {"status": False, "result": None, "msg": "Session not verified", "status_code": None}
        resp = await self._request(endpoint, self.api.post_authenticated, endpoint, user_token, pin_token, **extra)
        await self.handle_api_signal(resp)
        return resp

    async def fan_out(self, *endpoints: str) -> List[Response]:
        """Run several authenticated calls at once; responses come back in order."""
        return list(await asyncio.gather(*(self.call_authenticated(ep) for ep in endpoints)))

    # ============================================================
    #  Settings carried in the session records
    # ============================================================
    async def set_notification_enabled(self, enabled: bool) -> Result:
        resp = await self.call_authenticated(EP_SET_NOTIFICATION, NotificationEnabled=bool(enabled))
        if resp.get("status") is not True:
            return _failure_from(resp, "Could not update notifications")

        value = bool(resp.get("result")) or bool(enabled)
        if self.primary_session is not None:
            self.primary_session.notification_enabled = value
            try:
                self.store.set_primary_session(self.primary_session)
            except OSError as e:
                print(f"[auth] notification flag store error: {e!r}")
        return _ok(value)

    def register_push_token(self, token: str) -> None:
        self.store.set_fcm_token(token)
