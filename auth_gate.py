# auth_gate.py — Streamlit glue: one AuthController per browser session + page gate
#
# Every page calls require_screen(Screen.X) before rendering anything. The gate asks
# route_guard.allow() and either lets the page render, stops (still restoring), or
# switches page. Pages never re-derive the auth rules themselves.
from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Dict, Optional

import streamlit as st

import settings
from api_gateway import ApiGateway
from auth import AuthController
from route_guard import Screen, allow
from session_store import open_store

PAGE_FILES: Dict[Screen, str] = {
    Screen.SPLASH: "app.py",
    Screen.LOGIN: "pages/01_Login.py",
    Screen.MPIN: "pages/02_Mpin.py",
    Screen.DASHBOARD: "pages/03_Dashboard.py",
    Screen.PROFILE: "pages/04_Profile.py",
    Screen.NOTIFICATIONS: "pages/05_Notifications.py",
}

_CONTROLLER_KEY = "auth_controller"
_REDIRECT_KEY = "_pending_redirect"
_FLASH_KEY = "_flash_message"
_USER_CACHE_KEYS = ("dashboard_data", "notifications_data", "banner_carousel")

EXPIRY_MESSAGES = {
    Screen.LOGIN: "Session expired. Please login again.",
    Screen.MPIN: "MPIN session expired. Please enter your MPIN again.",
}


def _queue_redirect(screen: Screen) -> None:
    # called from inside the event loop; the switch happens once asyncio.run() returns
    st.session_state[_REDIRECT_KEY] = screen.value


def get_controller() -> AuthController:
    """Per-Streamlit-session controller, restored from the store on first use."""
    ctrl = st.session_state.get(_CONTROLLER_KEY)
    if ctrl is not None:
        return ctrl

    ctrl = AuthController(
        open_store(settings.store_path()),
        ApiGateway(),
        navigate=_queue_redirect,
    )
    ctrl.initialize()
    st.session_state[_CONTROLLER_KEY] = ctrl
    return ctrl


def go(screen: Screen) -> None:
    st.switch_page(PAGE_FILES[Screen(screen)])


def run(coro: Awaitable[Any]) -> Any:
    """
    Drive a controller coroutine from the script thread, then follow the redirect
    the expiry handler queued (if any). A redirect ends the current script run.
    """
    ctrl = get_controller()
    stage_before = ctrl.stage
    result = asyncio.run(coro)
    if ctrl.stage is not stage_before:
        clear_user_caches()
    target = st.session_state.pop(_REDIRECT_KEY, None)
    if target:
        screen = Screen(target)
        flash(EXPIRY_MESSAGES.get(screen, ""))
        go(screen)
    return result


def clear_user_caches() -> None:
    """
    Drop per-user view data (dashboard, notifications, banners) whenever the session
    stage changes, so nothing bleeds between users or survives a downgrade.
    """
    for key in _USER_CACHE_KEYS:
        st.session_state.pop(key, None)


def logout() -> None:
    """Full logout from any view, then the login screen."""
    res = run(get_controller().logout())
    if not res["success"]:
        flash(res["message"])
    go(Screen.LOGIN)


def flash(message: str) -> None:
    if message:
        st.session_state[_FLASH_KEY] = message


def show_flash() -> None:
    msg: Optional[str] = st.session_state.pop(_FLASH_KEY, None)
    if msg:
        st.warning(msg)


def _hide_sidebar_nav() -> None:
    """Hide the multipage nav until the session is fully verified."""
    st.markdown(
        """
        <style>
            section[data-testid="stSidebar"] [data-testid="stSidebarNav"] {
                display: none !important;
            }
        </style>
        """,
        unsafe_allow_html=True,
    )


def require_screen(screen: Screen) -> AuthController:
    """
    Gate for a page. Returns the controller when `screen` may render; otherwise
    stops the run (still restoring) or switches to the redirect target.
    """
    ctrl = get_controller()
    decision = allow(screen, ctrl.stage, ctrl.initialized)

    if decision.pending:
        st.stop()
    if decision.redirect_to is not None:
        go(decision.redirect_to)

    if not ctrl.is_verified():
        _hide_sidebar_nav()
    if settings.is_uat():
        st.caption("🔧 UAT Environment")
    show_flash()
    return ctrl
