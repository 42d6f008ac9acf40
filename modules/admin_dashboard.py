#!/usr/bin/env python3
"""Admin dashboard: questionnaires, results, users, certificate template, audit log, storage."""

from __future__ import annotations

from dataclasses import replace
from typing import Dict, List, Optional

import pandas as pd
import streamlit as st

from app_settings import DATA_SOURCES
from modules.ui_state import get_data_source, get_settings, notify, require_role, show_flash, switch_data_source
from services.analytics import results_frame
from services.data_source import DataSourceError
from services.exchange import QuestionnaireImportError, export_filename, export_questionnaire, import_questionnaire
from survey_model import USER_ROLES, CertificateTemplate, User, ValidationError


def _questionnaires_tab(admin: User) -> None:
    source = get_data_source()
    questionnaires = source.fetch_questionnaires()
    st.dataframe(
        pd.DataFrame(
            [{"ID": q.id, "Title": q.title, "Questions": len(q.questions), "Traits": ", ".join(q.traits)} for q in questionnaires],
            columns=["ID", "Title", "Questions", "Traits"],
        ),
        use_container_width=True,
        hide_index=True,
    )

    for q in questionnaires:
        c1, c2, c3 = st.columns([4, 1, 1])
        c1.markdown(f"**{q.title}** ({len(q.questions)} questions)")
        c2.download_button(
            "Export",
            data=export_questionnaire(q),
            file_name=export_filename(q),
            mime="application/json",
            key=f"export_{q.id}",
        )
        if c3.button("Delete", key=f"delete_q_{q.id}"):
            source.delete_questionnaire(q.id)
            source.record_audit_log("Delete Questionnaire", f"{q.title} ({q.id})", admin)
            notify(f"Deleted {q.title}.")
            st.rerun()

    st.markdown("#### Import questionnaire")
    uploaded = st.file_uploader("Questionnaire JSON", type=["json"])
    if uploaded is not None and st.button("Import"):
        try:
            questionnaire = import_questionnaire(uploaded.getvalue().decode("utf-8"))
        except (QuestionnaireImportError, UnicodeDecodeError) as exc:
            st.error(f"Import failed: {exc}")
            return
        source.save_questionnaire(questionnaire)
        source.record_audit_log("Import Questionnaire", f"{questionnaire.title} ({questionnaire.id})", admin)
        notify(f"Imported {questionnaire.title}.")
        st.rerun()


def _results_tab(admin: User) -> None:
    source = get_data_source()
    results = source.fetch_results()
    if not results:
        st.info("No results yet.")
        return
    st.dataframe(results_frame(results), use_container_width=True, hide_index=True)
    labels = {r.id: f"{r.user_name} | {r.questionnaire_title} | {r.id}" for r in results}
    chosen = st.selectbox("Result", list(labels), format_func=labels.get)
    if st.button("Delete result"):
        source.delete_result(chosen)
        source.record_audit_log("Delete Result", labels[chosen], admin)
        notify("Result deleted.")
        st.rerun()


def user_labels(users: List[User]) -> Dict[str, str]:
    return {u.id: f"{u.full_name} <{u.email}>" for u in users}


def find_user(users: List[User], user_id: Optional[str]) -> Optional[User]:
    return next((u for u in users if u.id == user_id), None)


def _users_tab(admin: User) -> None:
    source = get_data_source()
    users = source.fetch_users()
    st.dataframe(
        pd.DataFrame(
            [{"ID": u.id, "Name": u.full_name, "Email": u.email, "Role": u.role} for u in users],
            columns=["ID", "Name", "Email", "Role"],
        ),
        use_container_width=True,
        hide_index=True,
    )
    labels = user_labels(users)
    chosen = find_user(users, st.selectbox("User", list(labels), format_func=labels.get))
    if chosen is None:
        st.info("No users yet.")
        return
    is_self = chosen.id == admin.id

    role = st.selectbox("Role", USER_ROLES, index=USER_ROLES.index(chosen.role), disabled=is_self)
    c1, c2 = st.columns(2)
    if c1.button("Update role", disabled=is_self or role == chosen.role):
        source.update_user(replace(chosen, role=role))
        source.record_audit_log("Update User Role", f"{chosen.email}: {chosen.role} -> {role}", admin)
        notify(f"{chosen.full_name} is now {role}.")
        st.rerun()
    if c2.button("Delete user", disabled=is_self):
        source.delete_user(chosen.id)
        source.record_audit_log("Delete User", chosen.email, admin)
        notify(f"Deleted {chosen.email}.")
        st.rerun()
    if is_self:
        st.caption("You cannot change or delete your own account.")


def _template_tab(admin: User) -> None:
    source = get_data_source()
    current = source.fetch_certificate_template()
    with st.form("certificate_template"):
        c1, c2 = st.columns(2)
        show_overall = c1.checkbox("Show overall score", current.show_overall_score)
        show_traits = c1.checkbox("Show trait scores", current.show_trait_scores)
        show_logo = c1.checkbox("Show logo", current.show_logo)
        show_signature = c2.checkbox("Show signature", current.show_signature)
        show_watermark = c2.checkbox("Show watermark", current.show_watermark)
        message = st.text_area("Custom message", current.custom_message)
        logo_url = st.text_input("Logo URL", current.logo_url or "")
        signature_url = st.text_input("Signature URL", current.signature_url or "")
        watermark_text = st.text_input("Watermark text", current.watermark_text or "")
        submitted = st.form_submit_button("Save template")
    if submitted:
        source.save_certificate_template(
            CertificateTemplate(
                show_overall_score=show_overall,
                show_trait_scores=show_traits,
                show_logo=show_logo,
                show_signature=show_signature,
                custom_message=message,
                logo_url=logo_url.strip() or None,
                signature_url=signature_url.strip() or None,
                show_watermark=show_watermark,
                watermark_text=watermark_text.strip() or None,
            )
        )
        source.record_audit_log("Update Certificate Template", "", admin)
        notify("Certificate template saved.")
        st.rerun()


def _audit_tab() -> None:
    logs = get_data_source().fetch_audit_logs()
    if not logs:
        st.info("No admin activity recorded yet.")
        return
    st.dataframe(
        pd.DataFrame(
            [{"When": log.timestamp, "Admin": log.admin_name, "Action": log.action, "Details": log.details} for log in logs]
        ),
        use_container_width=True,
        hide_index=True,
    )


def _storage_tab(admin: User) -> None:
    settings = get_settings()
    st.markdown(f"Current data source: **{settings.data_source}**")
    choice = st.radio("Data source", DATA_SOURCES, index=DATA_SOURCES.index(settings.data_source), horizontal=True)
    if st.button("Switch data source", disabled=choice == settings.data_source):
        try:
            switch_data_source(choice)
        except DataSourceError as exc:
            st.error(str(exc))
            return
        get_data_source().record_audit_log("Switch Data Source", f"{settings.data_source} -> {choice}", admin)
        notify(f"Now using the {choice} data source.")
        st.rerun()

    st.markdown("---")
    confirm = st.checkbox("I understand this replaces all data with the sample set")
    if st.button("Reset data", disabled=not confirm):
        source = get_data_source()
        source.reset()
        source.record_audit_log("Reset Data", source.name, admin)
        notify("Data reset to the sample set.")
        st.rerun()


def render() -> None:
    admin = require_role(["admin"])
    st.title("Admin Dashboard")
    show_flash()
    tabs = st.tabs(["Questionnaires", "Results", "Users", "Certificate", "Audit Log", "Data Source"])
    try:
        with tabs[0]:
            _questionnaires_tab(admin)
        with tabs[1]:
            _results_tab(admin)
        with tabs[2]:
            _users_tab(admin)
        with tabs[3]:
            _template_tab(admin)
        with tabs[4]:
            _audit_tab()
        with tabs[5]:
            _storage_tab(admin)
    except (DataSourceError, ValidationError) as exc:
        st.error(f"Operation failed: {exc}")
