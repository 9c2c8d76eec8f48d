# pages/03_Dashboard.py — balance, banners and today's games (main / starline / delhi)

import streamlit as st
st.set_page_config(page_title="Home | PlayMax", page_icon="🎲", layout="wide")

import settings
from api_gateway import cdn_url
from auth_gate import require_screen, run
from banners import BannerCarousel
from dashboard import load_dashboard
from route_guard import Screen
from sidebar import render_sidebar

ctrl = require_screen(Screen.DASHBOARD)
render_sidebar(ctrl)

# ---------- Data ----------
refresh_all = st.button("🔄 Refresh all")
if refresh_all or "dashboard_data" not in st.session_state:
    with st.spinner("Loading..."):
        st.session_state.dashboard_data = run(load_dashboard(ctrl, include_notifications=refresh_all))

data = st.session_state.dashboard_data

col_bal, col_user = st.columns([1, 2])
with col_bal:
    bal = data.get("balance")
    st.metric("Balance", f"₹ {bal:,.2f}" if bal is not None else "—")
with col_user:
    st.subheader(f"Hi, {(ctrl.user or {}).get('name') or 'User'}")

# ---------- Banners ----------
if ctrl.banners:
    if "banner_carousel" not in st.session_state:
        st.session_state.banner_carousel = BannerCarousel(ctrl.banners, interval=settings.banner_seconds())
    carousel: BannerCarousel = st.session_state.banner_carousel

    # fragment reruns stop as soon as this page is no longer the one being shown
    @st.fragment(run_every=carousel.run_every())
    def _banner():
        b = carousel.current
        if b is not None and b.image_path:
            st.image(cdn_url(b.image_path), caption=b.title or None, use_container_width=True)
        carousel.advance()

    _banner()

# ---------- Games ----------
tabs = st.tabs(["Main Market", "Starline", "Delhi / Jackpot"])
for tab, key in zip(tabs, ("main", "starline", "delhi")):
    with tab:
        games = data["games"].get(key) or []
        if not games:
            st.info("No games available right now.")
            continue
        st.dataframe(games, use_container_width=True, hide_index=True)
