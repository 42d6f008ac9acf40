import pytest

from survey_model import (
    Answer,
    CertificateTemplate,
    Option,
    Question,
    Questionnaire,
    SurveyResult,
    User,
    ValidationError,
    answers_from_mapping,
)


def _question(qid="q1", trait="Teamwork", options=(Option("Agree", 3),)):
    return Question(id=qid, text="I help others.", trait=trait, options=options)


def test_question_requires_options():
    with pytest.raises(ValidationError):
        _question(options=())


def test_option_score_rejects_bool_and_str():
    with pytest.raises(ValidationError):
        Option("Yes", True)
    with pytest.raises(ValidationError):
        Option("Yes", "3")


def test_question_coerces_options_to_tuple():
    question = _question(options=[Option("A", 1), Option("B", 2)])
    assert isinstance(question.options, tuple)
    assert question.max_score == 2
    assert question.offers(1) and not question.offers(5)


def test_questionnaire_rejects_duplicate_ids_and_blank_title():
    with pytest.raises(ValidationError):
        Questionnaire("x", "Title", (_question("q1"), _question("q1")))
    with pytest.raises(ValidationError):
        Questionnaire("x", "   ")


def test_questionnaire_traits_in_first_seen_order():
    questionnaire = Questionnaire(
        "x", "Title", (_question("a", "Lead"), _question("b", "Team"), _question("c", "Lead"))
    )
    assert questionnaire.traits == ("Lead", "Team")
    assert questionnaire.question("b").trait == "Team"
    assert questionnaire.question("missing") is None


def test_questionnaire_document_is_camel_case():
    questionnaire = Questionnaire("x", "Title", (_question("a"),))
    restored = Questionnaire.from_dict(questionnaire.to_dict())
    assert restored == questionnaire
    result = SurveyResult("r1", "u1", "Alex Doe", "x", "Title", (Answer("a", 3),), 3, 3, "2024-01-01T00:00:00+00:00")
    document = result.to_dict()
    assert document["questionnaireId"] == "x"
    assert document["answers"] == [{"questionId": "a", "score": 3}]
    assert SurveyResult.from_dict(document) == result


def test_from_dict_rejects_non_list_options():
    with pytest.raises(ValidationError):
        Question.from_dict({"id": "q1", "text": "t", "trait": "x", "options": "1-5"})


def test_user_role_and_full_name():
    user = User("u1", "Ada", "Lovelace", "ada@example.com", "pw", middle_name="King")
    assert user.full_name == "Ada Lovelace"
    with pytest.raises(ValidationError):
        User("u2", "Bob", "Smith", "bob@example.com", "pw", role="owner")


def test_certificate_template_defaults_survive_partial_document():
    template = CertificateTemplate.from_dict({"showSignature": True})
    assert template.show_signature is True
    assert template.show_overall_score is True
    assert template.custom_message == CertificateTemplate().custom_message


def test_answers_from_mapping_respects_order():
    answers = answers_from_mapping({"b": 2, "a": 1, "z": 9}, order=["a", "b"])
    assert [a.question_id for a in answers] == ["a", "b", "z"]


def test_user_document_carries_reset_fields():
    user = User(
        "u1", "Ada", "Lovelace", "ada@example.com", "pw",
        password_reset_token="tok", password_reset_expires="2024-01-01T01:00:00+00:00",
    )
    document = user.to_dict()
    assert document["passwordResetToken"] == "tok"
    assert User.from_dict(document) == user
    assert User.from_dict({"id": "u2", "email": "b@example.com"}).password_reset_token is None
