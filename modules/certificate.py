#!/usr/bin/env python3
"""Certificate display shared by the user and recruiter dashboards."""

from __future__ import annotations

import streamlit as st

from scoring_engine import strength_tag
from services.certificates import CertificateView


def render_certificate(view: CertificateView, show_share: bool = True) -> None:
    template = view.template
    with st.container(border=True):
        if template.show_logo and template.logo_url:
            st.image(template.logo_url, width=120)
        if view.watermark:
            st.caption(f":grey[{view.watermark}]")
        st.markdown("### Certificate of Completion")
        st.markdown(f"This certifies that **{view.recipient}** has completed")
        st.markdown(f"## {view.questionnaire_title}")

        if template.show_overall_score:
            st.metric("Overall Score", f"{view.overall_percentage}%", f"{view.total_score}/{view.max_score} points")

        if template.show_trait_scores and view.traits:
            st.markdown("#### Trait Breakdown")
            for agg in view.traits:
                pct = agg.percentage
                st.markdown(f"**{agg.trait or 'Unassigned'}** {pct}% ({strength_tag(pct)})")
                st.progress(pct / 100)

        if template.custom_message:
            st.info(template.custom_message)
        if template.show_signature and template.signature_url:
            st.image(template.signature_url, width=160)

        st.caption(f"Completed on: {view.completed_on}")
        st.caption(f"Certificate ID: {view.certificate_id}")

    if show_share:
        c1, c2 = st.columns(2)
        c1.link_button("Share on LinkedIn", view.linkedin_url, use_container_width=True)
        c2.link_button("Share on Twitter", view.twitter_url, use_container_width=True)
