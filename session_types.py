# session_types.py — session records, stage derivation, PIN-result normalization
#
# Pure data: no Streamlit, no network, no storage. The persisted record shapes
# (LoginTokenData / mPinTokenData) are what the backend hands back, so the
# to_record()/from_record() pairs keep the backend's key names.
from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from errors import ValidationError

_MOBILE_RE = re.compile(r"^\d{10}$")
_PIN_RE = re.compile(r"^\d{4}$")


class SessionStage(str, Enum):
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"
    VERIFIED = "verified"


def _token(v: Any) -> Optional[str]:
    """Empty or missing tokens are absent, never a distinct 'empty' state."""
    if v is None:
        return None
    s = str(v).strip()
    return s or None


# ============================================================
#  Credentials (ephemeral)
# ============================================================

@dataclass(frozen=True)
class Credentials:
    mobile: str
    password: str = field(repr=False)

    @classmethod
    def parse(cls, mobile: Optional[str], password: Optional[str]) -> "Credentials":
        """Validate the login form. Raises ValidationError, never touches the network."""
        m = str(mobile or "").strip()
        p = str(password or "")
        if not m:
            raise ValidationError("Please enter mobile number")
        if not _MOBILE_RE.match(m):
            raise ValidationError("Please enter a valid 10-digit mobile number")
        if not p.strip():
            raise ValidationError("Please enter password")
        return cls(mobile=m, password=p)


def validate_pin(pin: Optional[str]) -> str:
    p = str(pin or "").strip()
    if not _PIN_RE.match(p):
        raise ValidationError("Please enter 4-digit MPIN")
    return p


# ============================================================
#  Primary session (LoginTokenData)
# ============================================================

@dataclass
class PrimarySession:
    user_token: str
    name: str = ""
    mobile: str = ""
    notification_enabled: bool = False
    # Everything else the Login endpoint returned, kept so the record round-trips.
    extra: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_record(cls, data: Any) -> Optional["PrimarySession"]:
        if not isinstance(data, dict):
            return None
        token = _token(data.get("user_token"))
        if token is None:
            return None
        known = {"user_token", "Name", "MobileNo", "NotificationEnabled"}
        return cls(
            user_token=token,
            name=str(data.get("Name") or ""),
            mobile=str(data.get("MobileNo") or ""),
            notification_enabled=bool(data.get("NotificationEnabled") or False),
            extra={k: v for k, v in data.items() if k not in known},
        )

    def to_record(self) -> Dict[str, Any]:
        rec = dict(self.extra)
        rec.update({
            "user_token": self.user_token,
            "Name": self.name,
            "MobileNo": self.mobile,
            "NotificationEnabled": bool(self.notification_enabled),
        })
        return rec


# ============================================================
#  Elevated session (mPinTokenData)
# ============================================================

@dataclass(frozen=True)
class Banner:
    id: Any
    title: str = ""
    image_path: str = ""

    @classmethod
    def from_raw(cls, raw: Any) -> Optional["Banner"]:
        if not isinstance(raw, dict):
            return None
        lowered = {str(k).lower(): v for k, v in raw.items()}
        return cls(
            id=lowered.get("id", lowered.get("bannerid")),
            title=str(lowered.get("title") or ""),
            image_path=str(lowered.get("imagepath") or lowered.get("image_path") or lowered.get("image") or ""),
        )

    def to_record(self) -> Dict[str, Any]:
        return {"id": self.id, "title": self.title, "imagePath": self.image_path}


@dataclass
class ElevatedSession:
    pin_token: str
    banners: List[Banner] = field(default_factory=list)

    @classmethod
    def from_record(cls, data: Any) -> Optional["ElevatedSession"]:
        if not isinstance(data, dict):
            return None
        token = _token(data.get("pin_token"))
        if token is None:
            return None
        raw_banners = data.get("banners") or []
        if not isinstance(raw_banners, list):
            raw_banners = []
        banners = [b for b in (Banner.from_raw(r) for r in raw_banners) if b is not None]
        return cls(pin_token=token, banners=banners)

    def to_record(self) -> Dict[str, Any]:
        return {"pin_token": self.pin_token, "banners": [b.to_record() for b in self.banners]}


def normalize_pin_result(result: Any) -> Optional[ElevatedSession]:
    """
    The ValidateMpin endpoint answers with either the bare pin token or an
    object holding pin_token + banners. This is the only place that looks at
    which one came back.
    """
    if isinstance(result, dict):
        return ElevatedSession.from_record(result)
    if isinstance(result, (str, int)) and not isinstance(result, bool):
        token = _token(result)
        return ElevatedSession(pin_token=token) if token else None
    return None


# ============================================================
#  Stage
# ============================================================

def derive_stage(
    primary: Optional[PrimarySession],
    elevated: Optional[ElevatedSession],
) -> SessionStage:
    if primary is None or not primary.user_token:
        return SessionStage.ANONYMOUS
    if elevated is None or not elevated.pin_token:
        return SessionStage.AUTHENTICATED
    return SessionStage.VERIFIED
