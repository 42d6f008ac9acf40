#!/usr/bin/env python3
"""In-progress survey attempt: answer capture, navigation and submission."""

from __future__ import annotations

from datetime import datetime, timezone
import logging
import random
from typing import Dict, List, Optional
import uuid

from scoring_engine import compute_score
from survey_model import Question, Questionnaire, SurveyResult, User, ValidationError, answers_from_mapping

logger = logging.getLogger(__name__)


class IncompleteSubmissionError(ValidationError):
    def __init__(self, missing: List[str]) -> None:
        self.missing = list(missing)
        super().__init__(f"Answer every question before submitting ({len(self.missing)} unanswered).")


def new_result_id() -> str:
    return f"res-{uuid.uuid4().hex[:12]}"


class SurveySession:
    """A respondent's draft answers for one questionnaire snapshot.

    Nothing here is persisted. ``rng`` shuffles the presentation order only;
    scoring always walks the questionnaire in its authored order.
    """

    def __init__(self, questionnaire: Questionnaire, respondent: User, rng: Optional[random.Random] = None) -> None:
        if not questionnaire.questions:
            raise ValidationError(f"{questionnaire.title!r} has no questions to answer.")
        self.questionnaire = questionnaire
        self.respondent = respondent
        self.order: List[str] = [q.id for q in questionnaire.questions]
        if rng is not None:
            rng.shuffle(self.order)
        self.index = 0
        self.answers: Dict[str, int] = {}
        # Option positions, so repeated scores keep the clicked choice.
        self.choices: Dict[str, int] = {}

    @property
    def current_question(self) -> Question:
        return self.questionnaire.question(self.order[self.index])

    @property
    def total_questions(self) -> int:
        return len(self.order)

    @property
    def progress(self) -> float:
        return (self.index + 1) / self.total_questions

    @property
    def is_first(self) -> bool:
        return self.index == 0

    @property
    def is_last(self) -> bool:
        return self.index == self.total_questions - 1

    @property
    def missing_question_ids(self) -> List[str]:
        return [qid for qid in self.order if qid not in self.answers]

    @property
    def is_complete(self) -> bool:
        return not self.missing_question_ids

    def selected_score(self, question_id: Optional[str] = None) -> Optional[int]:
        return self.answers.get(question_id or self.current_question.id)

    def selected_option(self, question_id: Optional[str] = None) -> Optional[int]:
        return self.choices.get(question_id or self.current_question.id)

    def select(self, question_id: str, score: int, option_index: Optional[int] = None) -> None:
        question = self.questionnaire.question(question_id)
        if question is None:
            raise ValidationError(f"Question {question_id!r} is not part of {self.questionnaire.title!r}.")
        if not question.offers(score):
            raise ValidationError(f"Score {score!r} is not an option for question {question_id!r}.")
        if option_index is None:
            option_index = next(i for i, option in enumerate(question.options) if option.score == score)
        elif not 0 <= option_index < len(question.options) or question.options[option_index].score != score:
            raise ValidationError(f"Option {option_index!r} of question {question_id!r} does not score {score!r}.")
        self.answers[question_id] = score
        self.choices[question_id] = option_index

    def next(self) -> None:
        if self.current_question.id not in self.answers:
            raise ValidationError("Answer the current question before moving on.")
        if not self.is_last:
            self.index += 1

    def previous(self) -> None:
        if not self.is_first:
            self.index -= 1

    def submit(self, now: Optional[datetime] = None, result_id: Optional[str] = None) -> SurveyResult:
        missing = self.missing_question_ids
        if missing:
            raise IncompleteSubmissionError(missing)
        score = compute_score(self.questionnaire, self.answers)
        completed_at = (now or datetime.now(timezone.utc)).isoformat()
        result = SurveyResult(
            id=result_id or new_result_id(),
            user_id=self.respondent.id,
            user_name=self.respondent.full_name,
            questionnaire_id=self.questionnaire.id,
            questionnaire_title=self.questionnaire.title,
            answers=answers_from_mapping(self.answers, [q.id for q in self.questionnaire.questions]),
            total_score=score.total_score,
            max_score=score.max_score,
            completed_at=completed_at,
        )
        logger.info(
            "Result %s submitted by %s for %s: %s/%s",
            result.id,
            result.user_id,
            result.questionnaire_id,
            result.total_score,
            result.max_score,
        )
        return result
