#!/usr/bin/env python3
"""Admin questionnaire editor with optional AI drafting."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional
import uuid

import streamlit as st

from modules.ui_state import get_data_source, get_settings, notify, require_role
from sample_data import BEHAVIORAL_TRAITS, LIKERT_OPTIONS
from services.data_source import DataSourceError
from services.question_generator import QuestionGenerationError, generate_questions
from survey_model import Questionnaire, ValidationError

logger = logging.getLogger(__name__)

Draft = Dict[str, Any]


def new_draft(questionnaire: Optional[Questionnaire] = None) -> Draft:
    if questionnaire is None:
        return {"id": f"q-{uuid.uuid4().hex[:12]}", "title": "", "questions": [], "is_new": True}
    draft = questionnaire.to_dict()
    draft["is_new"] = False
    return draft


def blank_question(trait: str = "") -> Dict[str, Any]:
    return {
        "id": f"qn-{uuid.uuid4().hex[:12]}",
        "text": "",
        "trait": trait,
        "options": [option.to_dict() for option in LIKERT_OPTIONS],
    }


def move_question(questions: List[Dict[str, Any]], index: int, offset: int) -> None:
    target = index + offset
    if 0 <= index < len(questions) and 0 <= target < len(questions):
        questions[index], questions[target] = questions[target], questions[index]


def draft_to_questionnaire(draft: Draft) -> Questionnaire:
    """Validate the draft; raises ValidationError with the first problem found."""
    return Questionnaire.from_dict({k: v for k, v in draft.items() if k not in ("is_new", "source_choice")})


def _question_row(questions: List[Dict[str, Any]], idx: int) -> None:
    question = questions[idx]
    qid = question["id"]
    with st.container(border=True):
        question["text"] = st.text_area(f"Question {idx + 1}", question.get("text", ""), key=f"text_{qid}")
        c1, c2 = st.columns(2)
        question["trait"] = c1.text_input("Trait", question.get("trait", ""), key=f"trait_{qid}")
        question["behavior"] = c2.text_input("Behavior (optional)", question.get("behavior") or "", key=f"beh_{qid}") or None

        for o_idx, option in enumerate(question["options"]):
            o1, o2 = st.columns([3, 1])
            option["text"] = o1.text_input(f"Option {o_idx + 1}", option.get("text", ""), key=f"opt_{qid}_{o_idx}")
            option["score"] = int(o2.number_input("Score", value=int(option.get("score", 0)), step=1, key=f"score_{qid}_{o_idx}"))

        b1, b2, b3, b4, b5 = st.columns(5)
        if b1.button("Up", key=f"up_{qid}", disabled=idx == 0):
            move_question(questions, idx, -1)
            st.rerun()
        if b2.button("Down", key=f"down_{qid}", disabled=idx == len(questions) - 1):
            move_question(questions, idx, 1)
            st.rerun()
        if b3.button("Add option", key=f"addopt_{qid}"):
            question["options"].append({"text": "", "score": 0})
            st.rerun()
        if b4.button("Remove option", key=f"rmopt_{qid}", disabled=len(question["options"]) <= 1):
            question["options"].pop()
            st.rerun()
        if b5.button("Delete question", key=f"del_{qid}"):
            questions.pop(idx)
            st.rerun()


def _ai_panel(draft: Draft) -> None:
    settings = get_settings()
    with st.expander("Generate questions with AI"):
        if not settings.ai_enabled:
            st.info("OpenAI API key not found. AI generation disabled.")
            return
        traits = st.multiselect("Traits", BEHAVIORAL_TRAITS, default=BEHAVIORAL_TRAITS[:3])
        extra = st.text_input("Other traits (comma separated)")
        traits += [t.strip() for t in extra.split(",") if t.strip()]
        count = st.number_input("Number of questions", min_value=1, max_value=30, value=5, step=1)
        if st.button("Generate"):
            try:
                with st.spinner("Generating questions..."):
                    questions = generate_questions(
                        draft["title"] or "Behavioral assessment",
                        traits,
                        int(count),
                        api_key=settings.openai_api_key,
                        model=settings.openai_model,
                    )
            except QuestionGenerationError as exc:
                st.error(str(exc))
                return
            draft["questions"].extend(q.to_dict() for q in questions)
            st.rerun()


def render() -> None:
    admin = require_role(["admin"])
    st.title("Questionnaire Editor")
    source = get_data_source()

    try:
        questionnaires = source.fetch_questionnaires()
    except DataSourceError as exc:
        st.error(f"Could not load questionnaires: {exc}")
        return
    choices = {"": "New questionnaire"}
    choices.update({q.id: q.title for q in questionnaires})
    editing = st.selectbox("Questionnaire", list(choices), format_func=choices.get, key="editor_choice")

    draft: Optional[Draft] = st.session_state.get("editor_draft")
    if draft is None or draft.get("source_choice") != editing:
        existing = next((q for q in questionnaires if q.id == editing), None)
        draft = new_draft(existing)
        draft["source_choice"] = editing
        st.session_state.editor_draft = draft

    draft["title"] = st.text_input("Title", draft["title"])
    questions = draft["questions"]
    for idx in range(len(questions)):
        _question_row(questions, idx)

    if st.button("Add question"):
        questions.append(blank_question())
        st.rerun()
    _ai_panel(draft)

    st.markdown("---")
    if st.button("Save questionnaire", type="primary"):
        try:
            questionnaire = draft_to_questionnaire(draft)
            source.save_questionnaire(questionnaire)
            action = "Create Questionnaire" if draft["is_new"] else "Update Questionnaire"
            source.record_audit_log(action, f"{questionnaire.title} ({questionnaire.id})", admin)
        except ValidationError as exc:
            st.error(str(exc))
            return
        except DataSourceError as exc:
            st.error(f"Could not save questionnaire: {exc}")
            return
        logger.info("Questionnaire %s saved by %s", questionnaire.id, admin.id)
        del st.session_state["editor_draft"]
        notify(f"Saved {questionnaire.title}.")
        st.rerun()
