# sidebar.py — navigation menu for the verified screens

import streamlit as st

from auth_gate import go, logout
from route_guard import Screen

MENU_ITEMS = [
    ("🏠", "Home", Screen.DASHBOARD),
    ("👤", "Profile", Screen.PROFILE),
    ("🔔", "Notifications", Screen.NOTIFICATIONS),
]


def render_sidebar(ctrl):
    """
    Render the sidebar with user info, menu and logout.

    Call this at the top of every protected page after require_screen().
    """
    with st.sidebar:
        # ---------- Branding ----------
        st.markdown("## 🎲 PlayMax")

        # ---------- User Info ----------
        user = ctrl.user or {}
        st.caption(f"👤 {user.get('name') or 'User'}")
        if user.get("mobile"):
            st.caption(f"📱 {user['mobile']}")

        st.markdown("---")

        # ---------- Menu ----------
        for icon, label, screen in MENU_ITEMS:
            if st.button(f"{icon} {label}", key=f"menu_{screen.name}", use_container_width=True):
                go(screen)

        st.markdown("---")

        if st.button("🚪 Logout", key="menu_logout", use_container_width=True, disabled=ctrl.busy):
            logout()

        master = ctrl.master_config or {}
        if master.get("WhatsappNo"):
            st.markdown(f"[💬 WhatsApp support](https://wa.me/{master['WhatsappNo']})")
