# pages/04_Profile.py — account info, balance, notification toggle, logout

import streamlit as st
st.set_page_config(page_title="Profile | PlayMax", page_icon="👤", layout="centered")

from auth_gate import go, logout, require_screen, run
from dashboard import load_balance
from route_guard import Screen
from sidebar import render_sidebar

ctrl = require_screen(Screen.PROFILE)
render_sidebar(ctrl)

user = ctrl.user or {}
st.title(user.get("name") or "User")
st.caption(user.get("mobile") or "")

bal = run(load_balance(ctrl))
st.metric("Balance", f"₹ {bal['balance']:,.2f}" if bal["balance"] is not None else "—")

# ---------- Notifications ----------
current = bool(ctrl.primary_session and ctrl.primary_session.notification_enabled)
st.write(f"Push notifications: **{'On' if current else 'Off'}**")
if st.button("Turn off notifications" if current else "Turn on notifications", disabled=ctrl.busy):
    res = run(ctrl.set_notification_enabled(not current))
    if res["success"]:
        st.rerun()
    st.error(res["message"])

if st.button("🔔 Notifications", use_container_width=True):
    go(Screen.NOTIFICATIONS)

# ---------- Support ----------
master = ctrl.master_config or {}
if master.get("WhatsappNo"):
    st.markdown(f"[💬 WhatsApp support](https://wa.me/{master['WhatsappNo']})")
if master.get("MobileNo"):
    st.markdown(f"[📞 Call support](tel:{master['MobileNo']})")

st.markdown("---")
if st.button("🚪 Logout", type="primary", use_container_width=True, disabled=ctrl.busy):
    logout()
