#!/usr/bin/env python3
"""Questionnaire JSON export and validated import."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable, List, Optional
import uuid

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, ValidationError as SchemaError, field_validator

from survey_model import Option, Question, Questionnaire, ValidationError

logger = logging.getLogger(__name__)


class QuestionnaireImportError(ValidationError):
    """The uploaded document cannot become a questionnaire."""


class OptionDocument(BaseModel):
    text: StrictStr = ""
    score: StrictInt


class QuestionDocument(BaseModel):
    id: StrictStr = Field(min_length=1)
    text: StrictStr = ""
    trait: StrictStr = ""
    behavior: Optional[StrictStr] = None
    options: List[OptionDocument] = Field(min_length=1)


class QuestionnaireDocument(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[Any] = None
    title: StrictStr
    questions: List[QuestionDocument]

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("title must not be empty")
        return value


def new_questionnaire_id() -> str:
    return f"q-{uuid.uuid4().hex[:12]}"


def export_questionnaire(questionnaire: Questionnaire) -> str:
    return json.dumps(questionnaire.to_dict(), indent=2, ensure_ascii=False)


def export_filename(questionnaire: Questionnaire) -> str:
    return re.sub(r"\s", "_", questionnaire.title) + ".json"


def _describe(exc: SchemaError) -> str:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "document"
        problems.append(f"{location}: {error.get('msg')}")
    return "; ".join(problems)


def import_questionnaire(text: str, id_factory: Optional[Callable[[], str]] = None) -> Questionnaire:
    """Parse an exported questionnaire and give it a fresh id.

    The document's own id is never reused. Any problem rejects the whole
    document with ``QuestionnaireImportError``.
    """
    try:
        raw = json.loads(text)
    except (TypeError, json.JSONDecodeError) as exc:
        raise QuestionnaireImportError(f"Invalid JSON file: {exc}") from exc
    if not isinstance(raw, dict):
        raise QuestionnaireImportError("Invalid questionnaire format: expected a JSON object.")
    if not isinstance(raw.get("title"), str) or not raw["title"].strip():
        raise QuestionnaireImportError("Invalid questionnaire format: a non-empty 'title' is required.")
    if not isinstance(raw.get("questions"), list):
        raise QuestionnaireImportError("Invalid questionnaire format: 'questions' must be an array.")

    try:
        document = QuestionnaireDocument.model_validate(raw)
    except SchemaError as exc:
        raise QuestionnaireImportError(f"Invalid questionnaire format: {_describe(exc)}") from exc

    make_id = id_factory or new_questionnaire_id
    new_id = make_id()
    while new_id == document.id:
        new_id = make_id()
    try:
        questionnaire = Questionnaire(
            id=new_id,
            title=document.title,
            questions=tuple(
                Question(
                    id=q.id,
                    text=q.text,
                    trait=q.trait,
                    behavior=q.behavior,
                    options=tuple(Option(text=o.text, score=o.score) for o in q.options),
                )
                for q in document.questions
            ),
        )
    except ValidationError as exc:
        raise QuestionnaireImportError(str(exc)) from exc
    logger.info("Imported questionnaire %r as %s (source id %r)", questionnaire.title, new_id, document.id)
    return questionnaire
