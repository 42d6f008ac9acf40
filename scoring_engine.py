#!/usr/bin/env python3
"""Pure questionnaire scoring and trait aggregation shared by every page."""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
import math
from typing import Dict, Iterable, List, Mapping, Sequence, Union

from survey_model import Answer, Questionnaire, SurveyResult

AnswerInput = Union[Sequence[Answer], Mapping[str, int]]


@dataclass(frozen=True)
class ScoreResult:
    total_score: int
    max_score: int

    @property
    def percentage(self) -> int:
        return percentage(self.total_score, self.max_score)


@dataclass(frozen=True)
class TraitAggregate:
    trait: str
    achieved: int
    possible: int

    @property
    def percentage(self) -> int:
        return percentage(self.achieved, self.possible)

    def __add__(self, other: "TraitAggregate") -> "TraitAggregate":
        if other.trait != self.trait:
            raise ValueError(f"Cannot pool trait {other.trait!r} into {self.trait!r}.")
        return TraitAggregate(self.trait, self.achieved + other.achieved, self.possible + other.possible)


def percentage(achieved: int, possible: int) -> int:
    """Round-half-up percentage of achieved over possible; 0 when nothing is possible."""
    if possible == 0:
        return 0
    return math.floor(Fraction(100 * achieved, possible) + Fraction(1, 2))


def answer_map(answers: AnswerInput) -> Dict[str, int]:
    """Collapse answers to question id -> score. Later duplicates win."""
    if isinstance(answers, Mapping):
        return {str(qid): int(score) for qid, score in answers.items()}
    scores: Dict[str, int] = {}
    for answer in answers:
        scores[answer.question_id] = answer.score
    return scores


def max_score(questionnaire: Questionnaire) -> int:
    return sum(question.max_score for question in questionnaire.questions)


def compute_score(questionnaire: Questionnaire, answers: AnswerInput) -> ScoreResult:
    """Score an answer set against the whole questionnaire.

    Every question counts towards ``max_score`` whether or not it was answered.
    Unanswered questions earn zero; answers to question ids the questionnaire
    does not contain are ignored.
    """
    scores = answer_map(answers)
    total = 0
    for question in questionnaire.questions:
        total += scores.get(question.id, 0)
    return ScoreResult(total_score=total, max_score=max_score(questionnaire))


def aggregate_by_trait(questionnaire: Questionnaire, answers: AnswerInput) -> Dict[str, TraitAggregate]:
    """Group the score by trait, keeping traits in first-seen question order."""
    scores = answer_map(answers)
    achieved: Dict[str, int] = {}
    possible: Dict[str, int] = {}
    for question in questionnaire.questions:
        if question.trait not in possible:
            achieved[question.trait] = 0
            possible[question.trait] = 0
        achieved[question.trait] += scores.get(question.id, 0)
        possible[question.trait] += question.max_score
    return {
        trait: TraitAggregate(trait=trait, achieved=achieved[trait], possible=possible[trait])
        for trait in possible
    }


def pool_trait_aggregates(breakdowns: Iterable[Mapping[str, TraitAggregate]]) -> Dict[str, TraitAggregate]:
    """Sum achieved and possible per trait across several breakdowns.

    The pooled percentage is taken over the sums, so a result with a small
    denominator cannot dominate the average.
    """
    pooled: Dict[str, TraitAggregate] = {}
    for breakdown in breakdowns:
        for trait, aggregate in breakdown.items():
            if trait in pooled:
                pooled[trait] = pooled[trait] + aggregate
            else:
                pooled[trait] = aggregate
    return pooled


def trait_percentages(questionnaire: Questionnaire, answers: AnswerInput) -> Dict[str, int]:
    return {
        trait: aggregate.percentage
        for trait, aggregate in aggregate_by_trait(questionnaire, answers).items()
    }


def result_breakdown(result: SurveyResult, questionnaire: Questionnaire) -> Dict[str, TraitAggregate]:
    return aggregate_by_trait(questionnaire, result.answers)


def union_traits(breakdowns: Iterable[Mapping[str, object]]) -> List[str]:
    axis: Dict[str, None] = {}
    for breakdown in breakdowns:
        for trait in breakdown:
            axis.setdefault(trait, None)
    return list(axis)


def strength_tag(value: int) -> str:
    if value < 40:
        return "Very Weak"
    if value < 60:
        return "Developing"
    if value < 80:
        return "Proficient"
    return "Strong"
