# dashboard.py — data loaders for the dashboard / profile / notification screens
#
# All calls go through AuthController.call_authenticated / fan_out, so a 401 or 412
# from any of them downgrades the session exactly once. Loaders only shape data.
from __future__ import annotations

from typing import Any, Dict, List

from api_gateway import (
    EP_BALANCE,
    EP_GAMES_DELHI,
    EP_GAMES_MAIN,
    EP_GAMES_STARLINE,
    EP_NOTIFICATIONS,
)
from errors import classify_response

GAME_TABS = {
    "main": EP_GAMES_MAIN,
    "starline": EP_GAMES_STARLINE,
    "delhi": EP_GAMES_DELHI,
}


def parse_balance(result: Any) -> float:
    """GetMyBalance returns the balance directly in `result` (number or numeric string)."""
    if result is None or isinstance(result, bool):
        return 0.0
    if isinstance(result, (int, float)):
        return float(result)
    try:
        return float(str(result).strip())
    except ValueError:
        return 0.0


def _list_result(resp: Dict[str, Any]) -> List[Any]:
    if resp.get("status") is True and isinstance(resp.get("result"), list):
        return list(resp["result"])
    return []


def _expired(responses: List[Dict[str, Any]]) -> bool:
    return any(classify_response(r) is not None for r in responses)


async def load_dashboard(controller, include_notifications: bool = False) -> Dict[str, Any]:
    """
    Balance + the three game lists in parallel (plus notifications for "refresh all").

    Returns {"balance", "games": {tab: [...]}, "notifications"?, "expired"}; when
    `expired` is True the session was downgraded and the caller should follow
    the controller's redirect instead of rendering.
    """
    endpoints = [EP_BALANCE] + list(GAME_TABS.values())
    if include_notifications:
        endpoints.append(EP_NOTIFICATIONS)

    responses = await controller.fan_out(*endpoints)
    balance_resp = responses[0]
    game_resps = responses[1:1 + len(GAME_TABS)]

    out: Dict[str, Any] = {
        "balance": parse_balance(balance_resp.get("result")) if balance_resp.get("status") is True else None,
        "games": {tab: _list_result(r) for tab, r in zip(GAME_TABS, game_resps)},
        "expired": _expired(responses),
    }
    if include_notifications:
        out["notifications"] = _list_result(responses[-1])
    return out


async def load_balance(controller) -> Dict[str, Any]:
    resp = await controller.call_authenticated(EP_BALANCE)
    return {
        "balance": parse_balance(resp.get("result")) if resp.get("status") is True else None,
        "expired": classify_response(resp) is not None,
        "message": None if resp.get("status") is True else resp.get("msg"),
    }


async def load_notifications(controller) -> Dict[str, Any]:
    resp = await controller.call_authenticated(EP_NOTIFICATIONS)
    return {
        "notifications": _list_result(resp),
        "expired": classify_response(resp) is not None,
        "message": None if resp.get("status") is True else resp.get("msg"),
    }
