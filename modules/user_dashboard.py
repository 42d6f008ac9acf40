#!/usr/bin/env python3
"""User dashboard: take an assessment and review earned certificates."""

from __future__ import annotations

import logging
import random

import streamlit as st

from modules.certificate import render_certificate
from modules.ui_state import get_data_source, get_settings, require_role
from scoring_engine import percentage
from services.analytics import completed_datetime
from services.certificates import build_certificate
from services.data_source import DataSourceError
from survey_model import SurveyResult, ValidationError
from survey_session import IncompleteSubmissionError, SurveySession

logger = logging.getLogger(__name__)


def _show_certificate(result: SurveyResult) -> None:
    source = get_data_source()
    questionnaire = source.get_questionnaire(result.questionnaire_id)
    if questionnaire is None:
        st.warning("This certificate cannot be displayed because its questionnaire has been deleted.")
        return
    view = build_certificate(result, questionnaire, source.fetch_certificate_template(), get_settings().app_url)
    render_certificate(view)


def _survey_step(session: SurveySession) -> None:
    question = session.current_question
    st.subheader(session.questionnaire.title)
    st.progress(session.progress, text=f"Question {session.index + 1} of {session.total_questions}")
    st.markdown(f"#### {question.text}")

    labels = [option.text or str(option.score) for option in question.options]
    scores = [option.score for option in question.options]
    choice = st.radio(
        "Your answer",
        options=range(len(labels)),
        format_func=lambda i: labels[i],
        index=session.selected_option(question.id),
        key=f"answer_{session.questionnaire.id}_{question.id}",
    )
    if choice is not None:
        session.select(question.id, scores[choice], option_index=choice)

    c1, c2, c3 = st.columns([1, 1, 2])
    if c1.button("Previous", disabled=session.is_first, use_container_width=True):
        session.previous()
        st.rerun()
    if not session.is_last:
        if c2.button("Next", disabled=choice is None, use_container_width=True):
            session.next()
            st.rerun()
        return
    if c2.button("Submit", type="primary", disabled=not session.is_complete, use_container_width=True):
        try:
            result = get_data_source().save_result(session.submit())
        except IncompleteSubmissionError as exc:
            st.error(str(exc))
            return
        except DataSourceError as exc:
            st.error(f"Could not save your result: {exc}")
            return
        del st.session_state["survey_session"]
        st.session_state.latest_result = result
        st.rerun()
    if c3.button("Abandon survey", use_container_width=True):
        del st.session_state["survey_session"]
        st.rerun()


def _start_survey() -> None:
    user = st.session_state.user
    questionnaires = [q for q in get_data_source().fetch_questionnaires() if q.questions]
    if not questionnaires:
        st.info("No questionnaires are available yet.")
        return
    titles = {q.id: f"{q.title} ({len(q.questions)} questions)" for q in questionnaires}
    chosen = st.selectbox("Choose an assessment", list(titles), format_func=titles.get)
    if st.button("Start assessment", type="primary"):
        questionnaire = next(q for q in questionnaires if q.id == chosen)
        try:
            st.session_state.survey_session = SurveySession(questionnaire, user, rng=random.Random())
        except ValidationError as exc:
            st.error(str(exc))
            return
        logger.info("User %s started questionnaire %s", user.id, questionnaire.id)
        st.rerun()


def _past_results() -> None:
    user = st.session_state.user
    results = [r for r in get_data_source().fetch_results() if r.user_id == user.id]
    if not results:
        st.caption("You have not completed any assessments yet.")
        return
    results.sort(key=completed_datetime, reverse=True)
    labels = {
        r.id: f"{r.questionnaire_title} | {percentage(r.total_score, r.max_score)}% | "
        f"{completed_datetime(r):%Y-%m-%d}"
        for r in results
    }
    chosen = st.selectbox("Completed assessments", list(labels), format_func=labels.get)
    _show_certificate(next(r for r in results if r.id == chosen))


def render() -> None:
    user = require_role(["user", "admin"])
    st.title(f"Welcome, {user.first_name or user.email}")

    session = st.session_state.get("survey_session")
    if session is not None:
        _survey_step(session)
        return

    latest = st.session_state.pop("latest_result", None)
    if latest is not None:
        st.success("Assessment submitted. Here is your certificate.")
        _show_certificate(latest)
        st.markdown("---")

    try:
        st.subheader("Take an assessment")
        _start_survey()
        st.markdown("---")
        st.subheader("My certificates")
        _past_results()
    except DataSourceError as exc:
        st.error(f"Could not load data: {exc}")
