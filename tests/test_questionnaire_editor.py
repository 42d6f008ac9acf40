import pytest

from modules.questionnaire_editor import blank_question, draft_to_questionnaire, move_question, new_draft
from sample_data import LIKERT_OPTIONS
from survey_model import ValidationError


def test_blank_question_defaults_to_likert():
    question = blank_question("Teamwork")
    assert question["trait"] == "Teamwork"
    assert [o["score"] for o in question["options"]] == [o.score for o in LIKERT_OPTIONS]


def test_move_question_swaps_within_bounds():
    questions = [{"id": "a"}, {"id": "b"}, {"id": "c"}]
    move_question(questions, 0, 1)
    assert [q["id"] for q in questions] == ["b", "a", "c"]
    move_question(questions, 0, -1)
    move_question(questions, 2, 1)
    assert [q["id"] for q in questions] == ["b", "a", "c"]


def test_draft_round_trip(leadership_survey):
    draft = new_draft(leadership_survey)
    draft["source_choice"] = leadership_survey.id
    assert draft["is_new"] is False
    assert draft_to_questionnaire(draft) == leadership_survey


def test_new_draft_needs_title():
    draft = new_draft()
    draft["questions"].append(blank_question("Focus"))
    with pytest.raises(ValidationError):
        draft_to_questionnaire(draft)
    draft["title"] = "Focus Check"
    assert len(draft_to_questionnaire(draft).questions) == 1
