#!/usr/bin/env python3
"""Recruiter dashboard: pooled trait analysis, candidate hub and comparison."""

from __future__ import annotations

import streamlit as st

from modules.certificate import render_certificate
from modules.ui_state import get_data_source, get_settings, require_role
from services.analytics import ComparisonError, build_comparison, filter_results, results_frame, trait_analysis
from services.certificates import build_certificate
from services.charts import comparison_bar_chart, comparison_radar, trait_bar_chart
from services.data_source import DataSourceError

ALL = "__all__"


def _trait_analysis(results, questionnaires) -> None:
    st.subheader("Trait Analysis")
    options = {ALL: "All questionnaires"}
    options.update({q.id: q.title for q in questionnaires})
    scope = st.selectbox("Questionnaire", list(options), format_func=options.get, key="analysis_scope")
    df = trait_analysis(results, questionnaires, None if scope == ALL else scope)
    if df.empty:
        st.info("No completed results for this selection.")
        return
    st.plotly_chart(trait_bar_chart(df), use_container_width=True)
    st.dataframe(df, use_container_width=False, hide_index=True)


def _candidate_hub(results, questionnaires) -> None:
    st.subheader("Candidate Hub")
    options = {ALL: "All questionnaires"}
    options.update({q.id: q.title for q in questionnaires})

    c1, c2 = st.columns(2)
    search = c1.text_input("Search by name")
    scope = c2.selectbox("Questionnaire", list(options), format_func=options.get, key="hub_scope")
    c3, c4 = st.columns(2)
    low, high = c3.slider("Overall score (%)", 0, 100, (0, 100))
    dates = c4.date_input("Completed between", value=())
    start_date = dates[0] if len(dates) > 0 else None
    end_date = dates[1] if len(dates) > 1 else None

    matches = filter_results(
        results,
        search=search,
        questionnaire_id=None if scope == ALL else scope,
        min_percentage=low,
        max_percentage=high,
        start_date=start_date,
        end_date=end_date,
    )
    st.caption(f"{len(matches)} result(s)")
    if not matches:
        return
    st.dataframe(results_frame(matches), use_container_width=True, hide_index=True)

    labels = {r.id: f"{r.user_name} | {r.questionnaire_title} | {r.id}" for r in matches}
    selected_ids = st.multiselect("Select candidates", list(labels), format_func=labels.get)
    selected = [r for r in matches if r.id in selected_ids]

    if len(selected) == 1:
        result = selected[0]
        questionnaire = next((q for q in questionnaires if q.id == result.questionnaire_id), None)
        if questionnaire is None:
            st.warning("This certificate cannot be displayed because its questionnaire has been deleted.")
        else:
            source = get_data_source()
            view = build_certificate(result, questionnaire, source.fetch_certificate_template(), get_settings().app_url)
            render_certificate(view, show_share=False)
        return

    if len(selected) > 1 and st.button("Compare selected", type="primary"):
        try:
            comparison = build_comparison(selected, questionnaires)
        except ComparisonError as exc:
            st.error(str(exc))
            return
        st.markdown(f"#### {comparison.questionnaire.title}")
        radar, bars = st.tabs(["Radar", "Bars"])
        with radar:
            st.plotly_chart(comparison_radar(comparison), use_container_width=True)
        with bars:
            st.plotly_chart(comparison_bar_chart(comparison), use_container_width=True)
        st.dataframe(
            comparison.to_frame().pivot(index="Trait", columns="Candidate", values="Percentage").reindex(comparison.traits),
            use_container_width=True,
        )


def render() -> None:
    require_role(["recruiter", "admin"])
    st.title("Recruiter Dashboard")
    try:
        source = get_data_source()
        results = source.fetch_results()
        questionnaires = source.fetch_questionnaires()
    except DataSourceError as exc:
        st.error(f"Could not load data: {exc}")
        return

    m1, m2, m3 = st.columns(3)
    m1.metric("Completed assessments", len(results))
    m2.metric("Candidates", len({r.user_id for r in results}))
    m3.metric("Questionnaires", len(questionnaires))

    analysis_tab, hub_tab = st.tabs(["Trait Analysis", "Candidate Hub"])
    with analysis_tab:
        _trait_analysis(results, questionnaires)
    with hub_tab:
        _candidate_hub(results, questionnaires)
