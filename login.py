#!/usr/bin/env python3
"""Sign-in, registration and password reset screen."""

from __future__ import annotations

import logging

import streamlit as st

from modules.ui_state import get_data_source, get_settings
from services.data_source import DataSourceError
from survey_model import ValidationError

logger = logging.getLogger(__name__)

LOGIN_ERRORS = {
    "not_found": "No account found with that email.",
    "incorrect_password": "Incorrect password.",
}

RESET_ERRORS = {
    "invalid_token": "This reset link is invalid. Request a new one.",
    "expired_token": "This reset link has expired. Request a new one.",
}


def _sign_in_form() -> None:
    with st.form("login_form"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Login", use_container_width=True)
    if not submitted:
        return
    try:
        outcome = get_data_source().login(email, password)
    except DataSourceError as exc:
        st.error(f"Login failed: {exc}")
        return
    if outcome.ok:
        logger.info("User %s signed in", outcome.user.id)
        st.session_state.user = outcome.user
        st.rerun()
    st.error(LOGIN_ERRORS.get(outcome.error, "Invalid login"))


def _register_form() -> None:
    with st.form("register_form"):
        c1, c2, c3 = st.columns(3)
        first_name = c1.text_input("First name")
        middle_name = c2.text_input("Middle name (optional)")
        last_name = c3.text_input("Last name")
        email = st.text_input("Email", key="register_email")
        password = st.text_input("Password", type="password", key="register_password")
        confirm = st.text_input("Confirm password", type="password")
        submitted = st.form_submit_button("Create account", use_container_width=True)
    if not submitted:
        return
    if not first_name.strip() or not last_name.strip():
        st.error("First and last name are required.")
        return
    if password != confirm:
        st.error("Passwords do not match.")
        return
    try:
        user = get_data_source().register_user(first_name, last_name, email, password, middle_name)
    except (ValidationError, DataSourceError) as exc:
        st.error(str(exc))
        return
    st.session_state.user = user
    st.rerun()


def _forgot_password_form() -> None:
    with st.form("forgot_password_form"):
        email = st.text_input("Email", key="forgot_email")
        submitted = st.form_submit_button("Send reset link", use_container_width=True)
    if submitted:
        try:
            token = get_data_source().request_password_reset(email)
        except DataSourceError as exc:
            st.error(f"Could not request a reset: {exc}")
            return
        if token:
            # No mail service: the reset link goes to the server log.
            logger.info("Password reset link for %s: %s?resetToken=%s", email, get_settings().app_url, token)
        st.info("If an account exists for that email, a password reset link has been sent.")

    with st.form("reset_password_form"):
        token = st.text_input("Reset token", value=st.query_params.get("resetToken", ""))
        password = st.text_input("New password", type="password", key="reset_password")
        confirm = st.text_input("Confirm new password", type="password", key="reset_confirm")
        submitted = st.form_submit_button("Reset password", use_container_width=True)
    if not submitted:
        return
    if password != confirm:
        st.error("Passwords do not match.")
        return
    try:
        outcome = get_data_source().reset_password(token.strip(), password)
    except (ValidationError, DataSourceError) as exc:
        st.error(str(exc))
        return
    if outcome.ok:
        st.success("Password updated. You can now log in.")
    else:
        st.error(RESET_ERRORS.get(outcome.error, "Password reset failed."))


def login() -> None:
    st.title("Behavioral Assessment")
    st.caption("Sign in to take assessments, review candidates or manage questionnaires.")
    sign_in, register, forgot = st.tabs(["Login", "Register", "Forgot password"])
    with sign_in:
        _sign_in_form()
    with register:
        _register_form()
    with forgot:
        _forgot_password_form()
