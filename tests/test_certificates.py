from urllib.parse import parse_qs, urlparse

from sample_data import sample_questionnaires, sample_results
from services.certificates import build_certificate
from survey_model import CertificateTemplate, Question, Questionnaire


def _res1_and_q1():
    questionnaires = sample_questionnaires()
    return sample_results(questionnaires)[0], questionnaires[0]


def test_overall_score_uses_frozen_totals():
    result, questionnaire = _res1_and_q1()
    extra = Question(id="q1-new", text="New", trait="Creativity", options=questionnaire.questions[0].options)
    grown = Questionnaire(questionnaire.id, questionnaire.title, questionnaire.questions + (extra,))
    view = build_certificate(result, grown, CertificateTemplate())
    assert view.overall_percentage == 87
    assert (view.total_score, view.max_score) == (13, 15)
    assert [row.trait for row in view.traits] == ["Leadership", "Teamwork", "Problem Solving", "Creativity"]
    assert view.traits[-1].achieved == 0


def test_trait_rows_skip_removed_questions():
    result, questionnaire = _res1_and_q1()
    trimmed = Questionnaire(questionnaire.id, questionnaire.title, questionnaire.questions[:1])
    view = build_certificate(result, trimmed, CertificateTemplate())
    assert [(row.trait, row.achieved, row.possible) for row in view.traits] == [("Leadership", 4, 5)]


def test_share_links_and_metadata():
    result, questionnaire = _res1_and_q1()
    view = build_certificate(result, questionnaire, CertificateTemplate(), app_url="https://survey.example.com")
    assert view.share_text == (
        'I just completed the "Graduate Role Readiness" assessment and scored 87%! '
        "Find out your own professional strengths."
    )
    twitter = parse_qs(urlparse(view.twitter_url).query)
    assert twitter["url"] == ["https://survey.example.com"]
    assert twitter["text"] == [view.share_text]
    linkedin = parse_qs(urlparse(view.linkedin_url).query)
    assert linkedin["title"] == ["Graduate Role Readiness"]
    assert view.certificate_id == "res1"
    assert view.recipient == "Alex Doe"


def test_watermark_only_when_enabled():
    result, questionnaire = _res1_and_q1()
    hidden = build_certificate(result, questionnaire, CertificateTemplate(watermark_text="SAMPLE"))
    shown = build_certificate(result, questionnaire, CertificateTemplate(show_watermark=True, watermark_text="SAMPLE"))
    assert hidden.watermark == ""
    assert shown.watermark == "SAMPLE"
