import pytest

from scoring_engine import (
    TraitAggregate,
    aggregate_by_trait,
    answer_map,
    compute_score,
    percentage,
    pool_trait_aggregates,
    strength_tag,
    trait_percentages,
    union_traits,
)
from survey_model import Answer, Option, Question, Questionnaire

LIKERT = tuple(Option(str(s), s) for s in range(1, 6))


def _q(qid, trait, options=LIKERT):
    return Question(id=qid, text=qid, trait=trait, options=options)


def test_single_question_scores_selected_option():
    questionnaire = Questionnaire("a", "A", (_q("q1", "Focus"),))
    result = compute_score(questionnaire, [Answer("q1", 4)])
    assert (result.total_score, result.max_score) == (4, 5)
    assert result.percentage == 80


def test_trait_groups_answers_for_same_trait():
    questionnaire = Questionnaire("b", "B", (_q("q1", "Teamwork"), _q("q2", "Teamwork")))
    traits = aggregate_by_trait(questionnaire, [Answer("q1", 3), Answer("q2", 4)])
    assert traits == {"Teamwork": TraitAggregate("Teamwork", 7, 10)}
    assert traits["Teamwork"].percentage == 70


def test_missing_answer_counts_zero_but_keeps_max():
    questionnaire = Questionnaire("c", "C", (_q("q1", "X"), _q("q2", "X"), _q("q3", "Y")))
    result = compute_score(questionnaire, [Answer("q1", 5), Answer("q3", 2)])
    assert result.total_score == 7
    assert result.max_score == 15
    assert aggregate_by_trait(questionnaire, {"q1": 5})["Y"] == TraitAggregate("Y", 0, 5)


def test_pooling_sums_same_questionnaire_results():
    questionnaire = Questionnaire("d", "D", (_q("q1", "Lead"), _q("q2", "Team")))
    first = aggregate_by_trait(questionnaire, {"q1": 5, "q2": 1})
    second = aggregate_by_trait(questionnaire, {"q1": 2, "q2": 4})
    pooled = pool_trait_aggregates([first, second])
    assert pooled["Lead"] == TraitAggregate("Lead", 7, 10)
    assert pooled["Team"] == TraitAggregate("Team", 5, 10)
    assert pooled["Lead"].percentage == 70


def test_pooling_is_not_mean_of_percentages():
    long_form = Questionnaire("long", "Long", tuple(_q(f"l{i}", "Teamwork") for i in range(4)))
    short_form = Questionnaire("short", "Short", (_q("s1", "Teamwork"),))
    low = aggregate_by_trait(long_form, {"l0": 4, "l1": 3, "l2": 2, "l3": 1})
    high = aggregate_by_trait(short_form, {"s1": 5})
    assert low["Teamwork"].percentage == 50
    assert high["Teamwork"].percentage == 100
    pooled = pool_trait_aggregates([low, high])["Teamwork"]
    assert (pooled.achieved, pooled.possible) == (15, 25)
    assert pooled.percentage == 60


@pytest.mark.parametrize(
    "achieved, possible, expected",
    [(0, 0, 0), (5, 0, 0), (1, 8, 13), (5, 8, 63), (1, 3, 33), (2, 3, 67), (13, 15, 87), (15, 15, 100)],
)
def test_percentage_rounds_half_up(achieved, possible, expected):
    assert percentage(achieved, possible) == expected


def test_duplicate_answers_last_one_wins():
    assert answer_map([Answer("q1", 1), Answer("q1", 4)]) == {"q1": 4}
    questionnaire = Questionnaire("e", "E", (_q("q1", "X"),))
    assert compute_score(questionnaire, [Answer("q1", 1), Answer("q1", 4)]).total_score == 4


def test_unknown_question_ids_are_ignored():
    questionnaire = Questionnaire("f", "F", (_q("q1", "X"),))
    result = compute_score(questionnaire, {"q1": 3, "ghost": 5})
    assert (result.total_score, result.max_score) == (3, 5)
    assert "ghost" not in aggregate_by_trait(questionnaire, {"ghost": 5})


def test_max_score_uses_highest_option_regardless_of_order():
    options = (Option("High", 7), Option("Low", 0), Option("Mid", 3))
    questionnaire = Questionnaire("g", "G", (_q("q1", "X", options),))
    assert compute_score(questionnaire, {}).max_score == 7


def test_traits_keep_first_seen_order():
    questionnaire = Questionnaire(
        "h", "H", (_q("q1", "Zeal"), _q("q2", "Adapt"), _q("q3", "Zeal"), _q("q4", "Mind"))
    )
    assert list(aggregate_by_trait(questionnaire, {})) == ["Zeal", "Adapt", "Mind"]
    assert list(trait_percentages(questionnaire, {"q2": 5})) == ["Zeal", "Adapt", "Mind"]


def test_trait_names_are_case_sensitive():
    questionnaire = Questionnaire("i", "I", (_q("q1", "teamwork"), _q("q2", "Teamwork")))
    assert set(aggregate_by_trait(questionnaire, {})) == {"teamwork", "Teamwork"}


def test_empty_questionnaire_scores_zero():
    questionnaire = Questionnaire("j", "J")
    result = compute_score(questionnaire, {"q1": 5})
    assert (result.total_score, result.max_score, result.percentage) == (0, 0, 0)
    assert aggregate_by_trait(questionnaire, {}) == {}


def test_adding_different_traits_is_rejected():
    with pytest.raises(ValueError):
        TraitAggregate("A", 1, 5) + TraitAggregate("B", 1, 5)


def test_union_traits_keeps_first_seen_across_breakdowns():
    assert union_traits([{"A": 1, "B": 2}, {"C": 3, "A": 4}]) == ["A", "B", "C"]


@pytest.mark.parametrize("value, tag", [(0, "Very Weak"), (39, "Very Weak"), (40, "Developing"), (79, "Proficient"), (80, "Strong")])
def test_strength_tag_bands(value, tag):
    assert strength_tag(value) == tag


WEIGHTED = (Option("Never", 0), Option("Sometimes", 2), Option("Always", 7))
YES_NO = (Option("No", 0), Option("Yes", 1))

PROPERTY_QUESTIONNAIRES = [
    Questionnaire("likert", "Likert", (_q("a", "Lead"), _q("b", "Team"), _q("c", "Lead"))),
    Questionnaire(
        "mixed",
        "Mixed options",
        (_q("m1", "Focus", WEIGHTED), _q("m2", "Care"), _q("m3", "Focus", YES_NO), _q("m4", "Drive", WEIGHTED)),
    ),
    Questionnaire("single", "Single trait", tuple(_q(f"s{i}", "Grit", YES_NO) for i in range(4))),
]


def _answer_sets(questionnaire):
    top = {q.id: q.max_score for q in questionnaire.questions}
    low = {q.id: min(o.score for o in q.options) for q in questionnaire.questions}
    middle = {q.id: q.options[len(q.options) // 2].score for q in questionnaire.questions}
    partial = {q.id: q.max_score for q in questionnaire.questions[::2]}
    return [top, low, middle, partial, {}]


@pytest.mark.parametrize("questionnaire", PROPERTY_QUESTIONNAIRES, ids=lambda q: q.id)
def test_trait_sums_match_overall_score(questionnaire):
    for answers in _answer_sets(questionnaire):
        score = compute_score(questionnaire, answers)
        traits = aggregate_by_trait(questionnaire, answers).values()
        assert sum(t.achieved for t in traits) == score.total_score
        assert sum(t.possible for t in traits) == score.max_score


@pytest.mark.parametrize("questionnaire", PROPERTY_QUESTIONNAIRES, ids=lambda q: q.id)
def test_complete_answers_stay_within_bounds(questionnaire):
    for answers in _answer_sets(questionnaire)[:3]:
        assert len(answers) == len(questionnaire.questions)
        score = compute_score(questionnaire, answers)
        assert 0 <= score.total_score <= score.max_score
    assert compute_score(questionnaire, _answer_sets(questionnaire)[0]).percentage == 100


@pytest.mark.parametrize("questionnaire", PROPERTY_QUESTIONNAIRES, ids=lambda q: q.id)
def test_removing_answers_never_raises_total(questionnaire):
    answers = {q.id: q.max_score for q in questionnaire.questions}
    previous = compute_score(questionnaire, answers)
    for question in questionnaire.questions:
        del answers[question.id]
        current = compute_score(questionnaire, answers)
        assert current.max_score == previous.max_score
        assert current.total_score <= previous.total_score
        previous = current
    assert previous.total_score == 0
