import json

import pytest

from sample_data import sample_questionnaires
from services.exchange import QuestionnaireImportError, export_filename, export_questionnaire, import_questionnaire
from survey_model import ValidationError


def _document(**overrides):
    document = {
        "id": "q1",
        "title": "Graduate Role Readiness",
        "questions": [
            {"id": "a", "text": "I lead.", "trait": "Leadership", "options": [{"text": "Yes", "score": 5}, {"text": "No", "score": 1}]},
        ],
    }
    document.update(overrides)
    return json.dumps(document)


def test_export_then_import_gets_fresh_id():
    original = sample_questionnaires()[0]
    imported = import_questionnaire(export_questionnaire(original))
    assert imported.id != original.id
    assert imported.id.startswith("q-")
    assert imported.title == original.title
    assert imported.questions == original.questions


def test_export_filename_replaces_whitespace():
    assert export_filename(sample_questionnaires()[3]) == "IT_Skills_and_Project_Management.json"


def test_import_never_reuses_document_id():
    ids = iter(["q1", "q-fresh"])
    imported = import_questionnaire(_document(), id_factory=lambda: next(ids))
    assert imported.id == "q-fresh"


@pytest.mark.parametrize(
    "text",
    [
        "{not json",
        json.dumps([1, 2]),
        json.dumps({"questions": []}),
        _document(title="   "),
        _document(title=42),
        _document(questions={"a": 1}),
        _document(questions=[{"id": "a", "text": "t", "trait": "x", "options": []}]),
        _document(questions=[{"id": "a", "text": "t", "trait": "x", "options": [{"text": "y", "score": "5"}]}]),
    ],
)
def test_import_rejects_malformed_documents(text):
    with pytest.raises(QuestionnaireImportError):
        import_questionnaire(text)


def test_import_rejects_duplicate_question_ids():
    question = {"id": "a", "text": "t", "trait": "x", "options": [{"text": "y", "score": 1}]}
    with pytest.raises(QuestionnaireImportError) as excinfo:
        import_questionnaire(_document(questions=[question, question]))
    assert isinstance(excinfo.value, ValidationError)


def test_import_accepts_empty_question_list():
    assert import_questionnaire(_document(questions=[])).questions == ()
