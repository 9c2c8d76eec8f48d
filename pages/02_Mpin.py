# pages/02_Mpin.py — 4-digit MPIN verification (second step after login)

import streamlit as st
st.set_page_config(page_title="MPIN | PlayMax", page_icon="🎲", layout="centered")

from auth_gate import go, logout, require_screen, run
from route_guard import Screen

ctrl = require_screen(Screen.MPIN)

user = ctrl.user or {}
st.title("Enter MPIN")
st.write(f"Welcome back, {user.get('name') or 'User'}!")
if user.get("mobile"):
    st.caption(user["mobile"])

with st.form("mpin_form", clear_on_submit=True):
    pin = st.text_input("MPIN", type="password", max_chars=4, placeholder="••••")
    submitted = st.form_submit_button("Verify", type="primary", use_container_width=True, disabled=ctrl.busy)

if submitted:
    with st.spinner("Verifying..."):
        # a 401 here logs out and run() follows the redirect to login
        res = run(ctrl.validate_mpin(pin))
    if res["success"]:
        go(Screen.DASHBOARD)
    else:
        st.error(res["message"])

# "Switch account" at the PIN step is a full logout
if st.button("Not you? Login with another account", disabled=ctrl.busy):
    logout()
