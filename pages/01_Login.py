# pages/01_Login.py — mobile + password login

import streamlit as st
st.set_page_config(page_title="Login | PlayMax", page_icon="🎲", layout="centered")  # set FIRST

from auth_gate import go, require_screen, run
from route_guard import Screen

ctrl = require_screen(Screen.LOGIN)  # gate before anything renders

st.title("Welcome Back!")
st.caption("Login to continue")

with st.form("login_form"):
    mobile = st.text_input("Mobile Number", max_chars=10, placeholder="Enter 10-digit mobile number")
    password = st.text_input("Password", type="password", placeholder="Enter password")
    submitted = st.form_submit_button("Login", type="primary", use_container_width=True, disabled=ctrl.busy)

if submitted:
    with st.spinner("Signing in..."):
        res = run(ctrl.login(mobile, password))
    if res["success"]:
        go(Screen.MPIN)
    else:
        st.error(res["message"])

# ---------- Contact ----------
master = ctrl.master_config or {}
links = []
if master.get("WhatsappNo"):
    links.append(f"[💬 WhatsApp](https://wa.me/{master['WhatsappNo']})")
if master.get("TelegramLink"):
    links.append(f"[✈️ Telegram]({master['TelegramLink']})")
if master.get("MobileNo"):
    links.append(f"[📞 Call](tel:{master['MobileNo']})")
if links:
    st.markdown("Need help? " + " · ".join(links))
