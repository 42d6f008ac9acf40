#!/usr/bin/env python3
"""Streamlit Behavioral Assessment Platform."""

from __future__ import annotations

import logging

import streamlit as st

from login import login
from modules.admin_dashboard import render as render_admin
from modules.questionnaire_editor import render as render_editor
from modules.recruiter_dashboard import render as render_recruiter
from modules.ui_state import get_data_source, get_settings, show_flash
from modules.user_dashboard import render as render_user
from services.data_source import DataSourceError

st.set_page_config(
    page_title="Behavioral Assessment Platform",
    layout="wide",
    initial_sidebar_state="expanded"
)

logger = logging.getLogger(__name__)

PAGES_BY_ROLE = {
    "admin": ["Admin Dashboard", "Questionnaire Editor", "Recruiter Dashboard", "Take Assessment"],
    "recruiter": ["Recruiter Dashboard"],
    "user": ["Take Assessment"],
}

RENDERERS = {
    "Admin Dashboard": render_admin,
    "Questionnaire Editor": render_editor,
    "Recruiter Dashboard": render_recruiter,
    "Take Assessment": render_user,
}


def unified_app() -> None:
    try:
        get_data_source()
    except DataSourceError as exc:
        st.error(f"Data source unavailable: {exc}")
        st.stop()

    if "user" not in st.session_state:
        login()
        st.stop()

    user = st.session_state.user
    pages = PAGES_BY_ROLE.get(user.role, PAGES_BY_ROLE["user"])

    with st.sidebar:
        st.markdown(f"**Logged in:** {user.full_name or user.email}")
        st.caption(f"Role: {user.role} | Data: {get_settings().data_source}")
        if st.button("Logout"):
            logger.info("User %s signed out", user.id)
            for key in ("user", "survey_session", "editor_draft", "latest_result"):
                st.session_state.pop(key, None)
            st.rerun()
        selection = st.selectbox("Navigation", pages)

    if selection != "Admin Dashboard":
        show_flash()
    RENDERERS[selection]()


if __name__ == "__main__":
    unified_app()
