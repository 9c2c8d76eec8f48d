# app.py — splash: restore session, load landing config, route to login / MPIN / home

import time

import streamlit as st

import settings

# ---- Page meta (run first) ----
env_suffix = " (UAT)" if settings.is_uat() else ""
st.set_page_config(
    page_title=f"PlayMax{env_suffix}",
    page_icon="🎲",
    layout="centered",
    initial_sidebar_state="collapsed",
)

from auth_gate import go, require_screen, run
from route_guard import Screen, landing_target

ctrl = require_screen(Screen.SPLASH)

st.markdown(
    """
    <div style="text-align:center;padding-top:4rem">
      <h1 style="letter-spacing:.2rem">PLAYMAX</h1>
    </div>
    """,
    unsafe_allow_html=True,
)

# ---- Master config: once per browser session, cached copy is fine on failure ----
if not st.session_state.get("_landing_loaded"):
    with st.spinner("Loading configuration..."):
        res = run(ctrl.load_landing_data())
    if not res["success"]:
        print(f"[app] landing data not refreshed: {res.get('message')!r}")
        if ctrl.master_config is None:
            st.error(res.get("message") or "Error loading. Please retry.")
            if st.button("Retry", type="primary"):
                st.rerun()
            st.stop()
    st.session_state["_landing_loaded"] = True
    time.sleep(1.0)

go(landing_target(ctrl.stage))
