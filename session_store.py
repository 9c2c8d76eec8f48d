# session_store.py — durable key/value records for the login + MPIN sessions
#
# Logical records (key names match what the mobile client has always used):
#   LoginTokenData  -> PrimarySession
#   mPinTokenData   -> ElevatedSession
#   AdminData       -> master config (landing data)
#   FCMToken / AppVersion / Language -> scalars
#
# Reads never raise for a missing or malformed key: absence is None.
from __future__ import annotations

import json
import os
import tempfile
import threading
from typing import Any, Dict, Optional

from session_types import ElevatedSession, PrimarySession

KEY_ADMIN_DATA = "AdminData"
KEY_LOGIN_TOKEN_DATA = "LoginTokenData"
KEY_MPIN_TOKEN_DATA = "mPinTokenData"
KEY_APP_VERSION = "AppVersion"
KEY_FCM_TOKEN = "FCMToken"
KEY_LANGUAGE = "Language"


# ============================================================
#  Backends
# ============================================================

class MemoryBackend:
    """Process-local backend. Used by tests and throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = dict(initial or {})

    def get(self, key: str) -> Any:
        return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def remove(self, *keys: str) -> None:
        for k in keys:
            self._data.pop(k, None)

    def snapshot(self) -> Dict[str, Any]:
        return dict(self._data)


class JsonFileBackend:
    """
    Whole store as one JSON document. Every write replaces the file via
    os.replace, so removing several keys lands as a single change on disk.
    """

    def __init__(self, path: str):
        self.path = path
        self._lock = threading.Lock()

    def _load(self) -> Dict[str, Any]:
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            print(f"[session_store] unreadable store {self.path}: {e!r}")
            return {}
        return data if isinstance(data, dict) else {}

    def _dump(self, data: Dict[str, Any]) -> None:
        folder = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(folder, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=".session-", suffix=".json", dir=folder)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh)
            os.replace(tmp, self.path)
        except BaseException:
            try:
                os.unlink(tmp)
            except OSError:
                pass
            raise

    def get(self, key: str) -> Any:
        with self._lock:
            return self._load().get(key)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            data = self._load()
            data[key] = value
            self._dump(data)

    def remove(self, *keys: str) -> None:
        with self._lock:
            data = self._load()
            if not any(k in data for k in keys):
                return
            for k in keys:
                data.pop(k, None)
            self._dump(data)

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            return self._load()


# ============================================================
#  SessionStore
# ============================================================

class SessionStore:
    """
    Typed view over a key/value backend. Only AuthController writes the
    session records; views read through the controller.
    """

    def __init__(self, backend=None):
        self.backend = backend if backend is not None else MemoryBackend()

    # ---------- primary ----------
    def get_primary_session(self) -> Optional[PrimarySession]:
        return PrimarySession.from_record(self.backend.get(KEY_LOGIN_TOKEN_DATA))

    def set_primary_session(self, session: PrimarySession) -> None:
        self.backend.set(KEY_LOGIN_TOKEN_DATA, session.to_record())

    # ---------- elevated ----------
    def get_elevated_session(self) -> Optional[ElevatedSession]:
        return ElevatedSession.from_record(self.backend.get(KEY_MPIN_TOKEN_DATA))

    def set_elevated_session(self, session: ElevatedSession) -> None:
        self.backend.set(KEY_MPIN_TOKEN_DATA, session.to_record())

    # ---------- clears ----------
    def clear_primary_and_elevated(self) -> None:
        self.backend.remove(KEY_LOGIN_TOKEN_DATA, KEY_MPIN_TOKEN_DATA)

    def clear_elevated_only(self) -> None:
        self.backend.remove(KEY_MPIN_TOKEN_DATA)

    # ---------- master config ----------
    def get_master_config(self) -> Optional[Dict[str, Any]]:
        data = self.backend.get(KEY_ADMIN_DATA)
        return data if isinstance(data, dict) else None

    def set_master_config(self, config: Dict[str, Any]) -> None:
        self.backend.set(KEY_ADMIN_DATA, dict(config))

    # ---------- scalars ----------
    def get_fcm_token(self) -> str:
        return str(self.backend.get(KEY_FCM_TOKEN) or "")

    def set_fcm_token(self, token: str) -> None:
        self.backend.set(KEY_FCM_TOKEN, str(token or ""))

    def get_app_version(self) -> str:
        return str(self.backend.get(KEY_APP_VERSION) or "1.0.0")

    def set_app_version(self, version: str) -> None:
        self.backend.set(KEY_APP_VERSION, str(version))

    def get_language(self) -> str:
        return str(self.backend.get(KEY_LANGUAGE) or "en")

    def set_language(self, language: str) -> None:
        self.backend.set(KEY_LANGUAGE, str(language))


def open_store(path: Optional[str] = None) -> SessionStore:
    """JSON file store when a path is configured, otherwise a private in-memory one."""
    if not path:
        return SessionStore(MemoryBackend())
    return SessionStore(JsonFileBackend(path))
