#!/usr/bin/env python3
"""Session-scoped settings, data source and signed-in user."""

from __future__ import annotations

from dataclasses import replace
from typing import Sequence

import streamlit as st

from app_settings import AppSettings, configure_logging, load_settings
from services.data_source import DataSource, create_data_source
from survey_model import User


def get_settings() -> AppSettings:
    if "settings" not in st.session_state:
        settings = load_settings(st.secrets)
        configure_logging(settings.log_level)
        st.session_state.settings = settings
    return st.session_state.settings


def get_data_source() -> DataSource:
    if "data_source" not in st.session_state:
        st.session_state.data_source = create_data_source(get_settings())
    return st.session_state.data_source


def switch_data_source(name: str) -> DataSource:
    """Swap the backend for this session. Raises DataSourceError on bad config."""
    settings = replace(get_settings(), data_source=name)
    source = create_data_source(settings)
    st.session_state.settings = settings
    st.session_state.data_source = source
    return source


def current_user() -> User:
    return st.session_state.user


def require_role(roles: Sequence[str]) -> User:
    if "user" not in st.session_state:
        st.error("Login required.")
        st.stop()
    user = current_user()
    if user.role not in roles:
        st.error(f"{' or '.join(r.title() for r in roles)} access required.")
        st.stop()
    return user


def notify(message: str) -> None:
    st.session_state.flash = message


def show_flash() -> None:
    message = st.session_state.pop("flash", None)
    if message:
        st.success(message)
