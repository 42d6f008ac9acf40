#!/usr/bin/env python3
"""Everything a completion certificate shows, derived from a stored result."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List
from urllib.parse import quote

from scoring_engine import TraitAggregate, percentage, result_breakdown
from services.analytics import completed_datetime
from survey_model import CertificateTemplate, Questionnaire, SurveyResult

LINKEDIN_SHARE = "https://www.linkedin.com/shareArticle?mini=true&url={url}&title={title}&summary={summary}"
TWITTER_SHARE = "https://twitter.com/intent/tweet?url={url}&text={text}"


@dataclass(frozen=True)
class CertificateView:
    certificate_id: str
    recipient: str
    questionnaire_title: str
    overall_percentage: int
    total_score: int
    max_score: int
    traits: List[TraitAggregate]
    completed_on: str
    template: CertificateTemplate
    share_text: str
    linkedin_url: str
    twitter_url: str

    @property
    def watermark(self) -> str:
        if not self.template.show_watermark:
            return ""
        return self.template.watermark_text or ""


def share_text(title: str, pct: int) -> str:
    return f'I just completed the "{title}" assessment and scored {pct}%! Find out your own professional strengths.'


def build_certificate(
    result: SurveyResult,
    questionnaire: Questionnaire,
    template: CertificateTemplate,
    app_url: str = "",
) -> CertificateView:
    """Assemble the certificate for ``result``.

    The overall score comes from the totals frozen on the result. Trait rows
    are regrouped against the questionnaire as it is now, so answers to
    questions removed since submission drop out of the breakdown.
    """
    pct = percentage(result.total_score, result.max_score)
    text = share_text(result.questionnaire_title, pct)
    return CertificateView(
        certificate_id=result.id,
        recipient=result.user_name,
        questionnaire_title=result.questionnaire_title,
        overall_percentage=pct,
        total_score=result.total_score,
        max_score=result.max_score,
        traits=list(result_breakdown(result, questionnaire).values()),
        completed_on=completed_datetime(result).strftime("%d %B %Y"),
        template=template,
        share_text=text,
        linkedin_url=LINKEDIN_SHARE.format(
            url=quote(app_url, safe=""),
            title=quote(result.questionnaire_title, safe=""),
            summary=quote(text, safe=""),
        ),
        twitter_url=TWITTER_SHARE.format(url=quote(app_url, safe=""), text=quote(text, safe="")),
    )
