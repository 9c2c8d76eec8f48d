# route_guard.py — stage -> screen access rules (pure; one definition for every page)
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Type

from errors import ApiError, LoginSessionExpired, MpinSessionExpired
from session_types import SessionStage

__all__ = [
    "Screen",
    "ScreenClass",
    "RouteDecision",
    "PENDING",
    "screen_class",
    "allow",
    "landing_target",
    "expiry_target",
    "resolve",
]


class Screen(str, Enum):
    SPLASH = "/"
    LOGIN = "/login"
    MPIN = "/mpin"
    DASHBOARD = "/dashboard"
    PROFILE = "/profile"
    NOTIFICATIONS = "/notifications"


class ScreenClass(str, Enum):
    ENTRY = "entry"
    LOGIN_ONLY = "login_only"
    PIN_STEP = "pin_step"
    PROTECTED = "protected"


_CLASSES: Dict[Screen, ScreenClass] = {
    Screen.SPLASH: ScreenClass.ENTRY,
    Screen.LOGIN: ScreenClass.LOGIN_ONLY,
    Screen.MPIN: ScreenClass.PIN_STEP,
    Screen.DASHBOARD: ScreenClass.PROTECTED,
    Screen.PROFILE: ScreenClass.PROTECTED,
    Screen.NOTIFICATIONS: ScreenClass.PROTECTED,
}


@dataclass(frozen=True)
class RouteDecision:
    allowed: bool
    redirect_to: Optional[Screen] = None
    # True while the controller is still restoring: render nothing, redirect nowhere.
    pending: bool = False


PENDING = RouteDecision(allowed=False, redirect_to=None, pending=True)
_ALLOW = RouteDecision(allowed=True)


def _redirect(target: Screen) -> RouteDecision:
    return RouteDecision(allowed=False, redirect_to=target)


# (screen class, stage) -> decision
_TABLE: Dict[ScreenClass, Dict[SessionStage, RouteDecision]] = {
    ScreenClass.ENTRY: {
        SessionStage.ANONYMOUS: _ALLOW,
        SessionStage.AUTHENTICATED: _ALLOW,
        SessionStage.VERIFIED: _ALLOW,
    },
    ScreenClass.LOGIN_ONLY: {
        SessionStage.ANONYMOUS: _ALLOW,
        SessionStage.AUTHENTICATED: _redirect(Screen.MPIN),
        SessionStage.VERIFIED: _redirect(Screen.DASHBOARD),
    },
    ScreenClass.PIN_STEP: {
        SessionStage.ANONYMOUS: _redirect(Screen.LOGIN),
        SessionStage.AUTHENTICATED: _ALLOW,
        SessionStage.VERIFIED: _redirect(Screen.DASHBOARD),
    },
    ScreenClass.PROTECTED: {
        SessionStage.ANONYMOUS: _redirect(Screen.LOGIN),
        SessionStage.AUTHENTICATED: _redirect(Screen.MPIN),
        SessionStage.VERIFIED: _ALLOW,
    },
}


def screen_class(screen: Screen) -> ScreenClass:
    return _CLASSES[Screen(screen)]


def allow(screen: Screen, stage: SessionStage, initialized: bool = True) -> RouteDecision:
    """
    Decide whether `screen` may render for `stage`.

    Until the controller has finished initialize(), every screen gets PENDING so a
    page never flashes a redirect to login while the stored session is restored.
    """
    if not initialized:
        return PENDING
    return _TABLE[screen_class(screen)][SessionStage(stage)]


def landing_target(stage: SessionStage) -> Screen:
    """Where the splash screen sends a user once the session is restored."""
    stage = SessionStage(stage)
    if stage is SessionStage.VERIFIED:
        return Screen.DASHBOARD
    if stage is SessionStage.AUTHENTICATED:
        return Screen.MPIN
    return Screen.LOGIN


def expiry_target(kind: Type[ApiError]) -> Optional[Screen]:
    if kind is LoginSessionExpired:
        return Screen.LOGIN
    if kind is MpinSessionExpired:
        return Screen.MPIN
    return None


def resolve(path: Optional[str]) -> Screen:
    """Map a path to a screen; anything unknown falls back to the splash screen."""
    p = "/" + str(path or "").strip().strip("/")
    try:
        return Screen(p)
    except ValueError:
        return Screen.SPLASH
