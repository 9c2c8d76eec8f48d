# conftest.py — fake backend + controller fixtures shared by the session tests
from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Tuple

import pytest

from auth import AuthController
from session_store import MemoryBackend, SessionStore
from session_types import ElevatedSession, PrimarySession

OK = {"status": True, "result": None, "msg": None, "status_code": None}


class CountingBackend(MemoryBackend):
    def __init__(self, initial=None):
        super().__init__(initial)
        self.writes = 0

    def set(self, key, value):
        self.writes += 1
        super().set(key, value)

    def remove(self, *keys):
        self.writes += 1
        super().remove(*keys)


class FakeGateway:
    """
    Stands in for ApiGateway. Responses are scripted per endpoint name; a scripted
    exception is raised instead of returned. Every call yields to the loop once so
    concurrent calls interleave the way real ones do.
    """

    def __init__(self):
        self.calls: List[Tuple[str, tuple, dict]] = []
        self.responses: Dict[str, Any] = {}

    def script(self, name: str, response: Any) -> None:
        self.responses[name] = response

    def names(self) -> List[str]:
        return [c[0] for c in self.calls]

    async def _answer(self, name: str, *args: Any, **kwargs: Any) -> Dict[str, Any]:
        self.calls.append((name, args, kwargs))
        await asyncio.sleep(0)
        r = self.responses.get(name, OK)
        if isinstance(r, BaseException):
            raise r
        return dict(r)

    async def get_landing_data(self):
        return await self._answer("LandingData")

    async def login(self, mobile, password, fcm_token=""):
        return await self._answer("Login", mobile, password, fcm_token)

    async def validate_mpin(self, user_token, mpin, fcm_token=""):
        return await self._answer("ValidateMpin", user_token, mpin, fcm_token)

    async def post_authenticated(self, endpoint, user_token, pin_token, **extra):
        return await self._answer(endpoint, user_token, pin_token, **extra)

    async def clear_login_session(self, user_token, pin_token):
        return await self._answer("ClearLoginSession", user_token, pin_token)

    async def clear_mpin_session(self, user_token, pin_token):
        return await self._answer("ClearMpinSession", user_token, pin_token)


@pytest.fixture
def backend():
    return CountingBackend()


@pytest.fixture
def store(backend):
    return SessionStore(backend)


@pytest.fixture
def api():
    return FakeGateway()


@pytest.fixture
def nav():
    return []


@pytest.fixture
def ctrl(store, api, nav):
    c = AuthController(store, api, navigate=nav.append)
    c.initialize()
    return c


@pytest.fixture
def verified_ctrl(store, api, nav):
    store.set_primary_session(PrimarySession(user_token="T1", name="Asha", mobile="9876543210"))
    store.set_elevated_session(ElevatedSession(pin_token="P1"))
    c = AuthController(store, api, navigate=nav.append)
    c.initialize()
    return c


@pytest.fixture
def authenticated_ctrl(store, api, nav):
    store.set_primary_session(PrimarySession(user_token="T1", name="Asha", mobile="9876543210"))
    c = AuthController(store, api, navigate=nav.append)
    c.initialize()
    return c
