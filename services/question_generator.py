#!/usr/bin/env python3
"""Draft questionnaire questions with OpenAI."""

from __future__ import annotations

import json
import logging
from typing import Any, List, Optional, Sequence
import uuid

from openai import OpenAI

from app_settings import DEFAULT_OPENAI_MODEL
from sample_data import LIKERT_OPTIONS
from survey_model import Question

logger = logging.getLogger(__name__)


class QuestionGenerationError(RuntimeError):
    pass


def _extract_json_array(raw_text: str) -> List[Any]:
    try:
        data = json.loads(raw_text)
    except json.JSONDecodeError:
        start = raw_text.find("[")
        end = raw_text.rfind("]")
        if start == -1 or end == -1 or end <= start:
            return []
        try:
            data = json.loads(raw_text[start : end + 1])
        except json.JSONDecodeError:
            return []
    if isinstance(data, dict):
        data = data.get("questions", [])
    return data if isinstance(data, list) else []


def build_prompt(title: str, traits: Sequence[str], count: int) -> str:
    return f"""
Generate a list of {count} behavioral survey questions for a questionnaire titled "{title}".
The survey is for job seekers.
The questions should assess the following behavioral traits: {", ".join(traits)}.

Output JSON only in format:
[{{"text": "I am comfortable ...", "trait": "Trait name"}}]

Rules:
- Phrase every question in the first person (e.g. "I am comfortable...", "I prefer...").
- Keep questions distinct and relevant to a professional work environment.
- Distribute the questions evenly among the listed traits.
- Use the trait names exactly as listed.
"""


def generate_questions(
    title: str,
    traits: Sequence[str],
    count: int,
    client: Optional[Any] = None,
    api_key: str = "",
    model: str = DEFAULT_OPENAI_MODEL,
) -> List[Question]:
    """Ask the model for ``count`` Likert questions spread over ``traits``.

    Items missing text or trait are dropped; an empty haul is an error.
    """
    traits = [t.strip() for t in traits if t and t.strip()]
    if not title.strip() or not traits or count < 1:
        raise QuestionGenerationError("A title, at least one trait and a positive count are required.")
    if client is None:
        if not api_key.strip():
            raise QuestionGenerationError("OpenAI API key is not configured.")
        client = OpenAI(api_key=api_key)

    try:
        response = client.responses.create(model=model, input=build_prompt(title, traits, count))
    except Exception as exc:
        raise QuestionGenerationError(f"Failed to generate questions: {exc}") from exc

    questions: List[Question] = []
    for item in _extract_json_array(response.output_text or ""):
        if not isinstance(item, dict):
            continue
        text = str(item.get("text", "")).strip()
        trait = str(item.get("trait", "")).strip()
        if not text or not trait:
            continue
        questions.append(
            Question(id=f"qt-{uuid.uuid4().hex[:12]}", text=text, trait=trait, options=LIKERT_OPTIONS)
        )
    if not questions:
        raise QuestionGenerationError("The model response did not contain any usable questions.")
    logger.info("Generated %s question(s) for %r with %s", len(questions), title, model)
    return questions[:count]
