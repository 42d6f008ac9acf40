#!/usr/bin/env python3
"""Recruiter-side analysis over stored results: pooled traits, candidate hub, comparison."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
import logging
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

import pandas as pd

from scoring_engine import (
    TraitAggregate,
    percentage,
    pool_trait_aggregates,
    result_breakdown,
    strength_tag,
    trait_percentages,
    union_traits,
)
from survey_model import Questionnaire, SurveyResult

logger = logging.getLogger(__name__)

TRAIT_COLUMNS = ["Trait", "Achieved", "Possible", "Percentage", "Tag"]
RESULT_COLUMNS = ["Result ID", "Candidate", "Questionnaire", "Score", "Percentage", "Completed"]


class ComparisonError(ValueError):
    """The selected results cannot be compared on one chart."""


def _index(questionnaires: Iterable[Questionnaire]) -> Dict[str, Questionnaire]:
    return {q.id: q for q in questionnaires}


def completed_datetime(result: SurveyResult) -> datetime:
    raw = result.completed_at.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        moment = datetime.fromisoformat(raw)
    except ValueError:
        return datetime.min.replace(tzinfo=timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def overall_percentage(result: SurveyResult) -> int:
    return percentage(result.total_score, result.max_score)


def pooled_trait_analysis(
    results: Sequence[SurveyResult],
    questionnaires: Iterable[Questionnaire],
    questionnaire_id: Optional[str] = None,
) -> Dict[str, TraitAggregate]:
    """Pool trait totals across results, optionally for one questionnaire only.

    Results whose questionnaire no longer exists are left out.
    """
    by_id = _index(questionnaires)
    breakdowns = []
    skipped = 0
    for result in results:
        if questionnaire_id and result.questionnaire_id != questionnaire_id:
            continue
        questionnaire = by_id.get(result.questionnaire_id)
        if questionnaire is None:
            skipped += 1
            continue
        breakdowns.append(result_breakdown(result, questionnaire))
    if skipped:
        logger.warning("Trait analysis skipped %s result(s) with a missing questionnaire", skipped)
    return pool_trait_aggregates(breakdowns)


def trait_frame(aggregates: Mapping[str, TraitAggregate]) -> pd.DataFrame:
    rows = [
        {
            "Trait": agg.trait,
            "Achieved": agg.achieved,
            "Possible": agg.possible,
            "Percentage": agg.percentage,
            "Tag": strength_tag(agg.percentage),
        }
        for agg in aggregates.values()
    ]
    df = pd.DataFrame(rows, columns=TRAIT_COLUMNS)
    return df.sort_values("Percentage", ascending=False, kind="stable").reset_index(drop=True)


def trait_analysis(
    results: Sequence[SurveyResult],
    questionnaires: Iterable[Questionnaire],
    questionnaire_id: Optional[str] = None,
) -> pd.DataFrame:
    return trait_frame(pooled_trait_analysis(results, questionnaires, questionnaire_id))


def filter_results(
    results: Sequence[SurveyResult],
    search: str = "",
    questionnaire_id: Optional[str] = None,
    min_percentage: Optional[int] = None,
    max_percentage: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> List[SurveyResult]:
    """Candidate hub filter. Bounds are inclusive; dates compare by whole day."""
    needle = search.strip().lower()
    kept = []
    for result in results:
        if needle and needle not in result.user_name.lower():
            continue
        if questionnaire_id and result.questionnaire_id != questionnaire_id:
            continue
        pct = overall_percentage(result)
        if min_percentage is not None and pct < min_percentage:
            continue
        if max_percentage is not None and pct > max_percentage:
            continue
        day = completed_datetime(result).date()
        if start_date is not None and day < start_date:
            continue
        if end_date is not None and day > end_date:
            continue
        kept.append(result)
    return sorted(kept, key=completed_datetime, reverse=True)


def results_frame(results: Sequence[SurveyResult]) -> pd.DataFrame:
    rows = [
        {
            "Result ID": r.id,
            "Candidate": r.user_name,
            "Questionnaire": r.questionnaire_title,
            "Score": f"{r.total_score}/{r.max_score}",
            "Percentage": overall_percentage(r),
            "Completed": completed_datetime(r).strftime("%Y-%m-%d %H:%M"),
        }
        for r in results
    ]
    return pd.DataFrame(rows, columns=RESULT_COLUMNS)


@dataclass(frozen=True)
class ComparisonSeries:
    result_id: str
    label: str
    scores: Dict[str, int]


@dataclass(frozen=True)
class Comparison:
    questionnaire: Questionnaire
    traits: List[str]
    series: List[ComparisonSeries]

    def to_frame(self) -> pd.DataFrame:
        rows = [
            {"Trait": trait, "Candidate": s.label, "Percentage": s.scores.get(trait, 0)}
            for s in self.series
            for trait in self.traits
        ]
        return pd.DataFrame(rows, columns=["Trait", "Candidate", "Percentage"])


def build_comparison(
    results: Sequence[SurveyResult],
    questionnaires: Iterable[Questionnaire],
) -> Comparison:
    """Per-candidate trait percentages on a shared axis.

    Requires at least two results that all belong to one questionnaire which
    still exists. A trait a result lacks reads as 0.
    """
    if len(results) < 2:
        raise ComparisonError("Select at least two candidates to compare.")
    questionnaire_ids = {r.questionnaire_id for r in results}
    if len(questionnaire_ids) > 1:
        raise ComparisonError("Candidates must have completed the same questionnaire to be compared.")
    questionnaire = _index(questionnaires).get(results[0].questionnaire_id)
    if questionnaire is None:
        raise ComparisonError(f"Questionnaire {results[0].questionnaire_id} no longer exists.")

    per_result = [trait_percentages(questionnaire, r.answers) for r in results]
    axis = union_traits(per_result)
    series = []
    used = set()
    for result, scores in zip(results, per_result):
        # Suffixes must not collide with a real name such as "Alex Doe (2)".
        label, n = result.user_name, 1
        while label in used:
            n += 1
            label = f"{result.user_name} ({n})"
        used.add(label)
        series.append(
            ComparisonSeries(
                result_id=result.id,
                label=label,
                scores={trait: scores.get(trait, 0) for trait in axis},
            )
        )
    return Comparison(questionnaire=questionnaire, traits=axis, series=series)
