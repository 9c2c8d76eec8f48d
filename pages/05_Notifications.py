# pages/05_Notifications.py — notification list

import streamlit as st
st.set_page_config(page_title="Notifications | PlayMax", page_icon="🔔", layout="centered")

from auth_gate import require_screen, run
from dashboard import load_notifications
from route_guard import Screen
from sidebar import render_sidebar

ctrl = require_screen(Screen.NOTIFICATIONS)
render_sidebar(ctrl)

st.title("Notifications")

if st.button("🔄 Refresh") or "notifications_data" not in st.session_state:
    st.session_state.notifications_data = run(load_notifications(ctrl))

data = st.session_state.notifications_data
if data.get("message"):
    st.error(data["message"])

items = data.get("notifications") or []
if not items:
    st.info("No notifications yet.")

for n in items:
    if not isinstance(n, dict):
        st.write(n)
        continue
    title = n.get("Title") or n.get("title") or "Notification"
    body = n.get("Message") or n.get("message") or n.get("Description") or ""
    when = n.get("CreatedDate") or n.get("created_at") or ""
    with st.container(border=True):
        st.markdown(f"**{title}**")
        if body:
            st.write(body)
        if when:
            st.caption(str(when))
