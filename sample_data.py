#!/usr/bin/env python3
"""Seed questionnaires, accounts and results used by the demo data sources."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Tuple

from scoring_engine import compute_score
from survey_model import Answer, Option, Question, Questionnaire, SurveyResult, User

BEHAVIORAL_TRAITS = [
    "Teamwork",
    "Problem Solving",
    "Leadership",
    "Adaptability",
    "Communication",
    "Work Ethic",
    "Creativity",
    "Attention to Detail",
]

LIKERT_OPTIONS: Tuple[Option, ...] = (
    Option("Strongly Disagree", 1),
    Option("Disagree", 2),
    Option("Neutral", 3),
    Option("Agree", 4),
    Option("Strongly Agree", 5),
)

THREE_POINT_OPTIONS: Tuple[Option, ...] = (
    Option("Disagree", 1),
    Option("Neutral", 2),
    Option("Agree", 3),
)

WORKPLACE_STATEMENTS: Dict[str, List[str]] = {
    "Honesty": [
        "I always tell the truth even when it's difficult.",
        "If I make a mistake at work, I admit it rather than hide it.",
        "I act honestly, even when no one is watching.",
        "If a colleague asks me to cover up something improper, I would refuse.",
        "I follow through on ethical principles even under pressure.",
    ],
    "Reliability": [
        "I complete my tasks on or before the deadline.",
        "I consistently meet the commitments I make to my team.",
        "I maintain a high standard of work, even for routine tasks.",
        "When I say I'll do something, others can count on me.",
        "I manage my workload so that I don't miss important deadlines.",
    ],
    "Initiative": [
        "I proactively look for ways to improve how things are done.",
        "I volunteer for new tasks, even if they're not part of my usual role.",
        "When I spot a problem, I suggest solutions instead of waiting.",
        "I take action without being explicitly told what to do.",
        "I try to anticipate future challenges and address them beforehand.",
    ],
    "Adaptability": [
        "I handle changes in plans or priorities well.",
        "I am comfortable learning new tools or methods at work.",
        "I quickly adjust when working with different kinds of people.",
        "If a project direction changes, I shift my work without stress.",
        "I remain effective when unexpected challenges arise.",
    ],
    "Teamwork": [
        "I actively contribute during team discussions and meetings.",
        "I respect and consider different viewpoints when collaborating.",
        "I help my teammates when they need support.",
        "When conflicts arise, I work to find a constructive resolution.",
        "I communicate openly with my team to ensure we reach our goals.",
    ],
}


def _likert(qid: str, text: str, trait: str, behavior: Optional[str] = None) -> Question:
    return Question(id=qid, text=text, trait=trait, behavior=behavior, options=LIKERT_OPTIONS)


def _workplace_questions() -> Tuple[Question, ...]:
    questions: List[Question] = []
    for trait, statements in WORKPLACE_STATEMENTS.items():
        for text in statements:
            qid = f"q2-{len(questions) + 1}"
            questions.append(Question(id=qid, text=text, trait=trait, options=THREE_POINT_OPTIONS))
    return tuple(questions)


def sample_questionnaires() -> List[Questionnaire]:
    return [
        Questionnaire(
            id="q1",
            title="Graduate Role Readiness",
            questions=(
                _likert("q1-1", "I am comfortable taking the lead on a project.", "Leadership", "Initiative"),
                _likert("q1-2", "I enjoy collaborating with others to find a solution.", "Teamwork", "Collaboration"),
                _likert(
                    "q1-3",
                    "When faced with a complex problem, I break it down into smaller parts.",
                    "Problem Solving",
                    "Analytical Thinking",
                ),
            ),
        ),
        Questionnaire(id="q2", title="Professional Workplace Assessment", questions=_workplace_questions()),
        Questionnaire(
            id="q3",
            title="Core Competency Evaluation",
            questions=(
                _likert("q3-1", "I clearly articulate my ideas to my team members.", "Communication"),
                _likert("q3-2", "I am persistent in finding solutions to difficult problems.", "Problem Solving"),
                _likert("q3-3", "I take pride in producing high-quality work.", "Work Ethic"),
                _likert("q3-4", "I actively listen to others' perspectives before responding.", "Teamwork"),
            ),
        ),
        Questionnaire(
            id="q4",
            title="IT Skills and Project Management",
            questions=(
                _likert("q4-1", "I can quickly learn and adapt to new software and technologies.", "Adaptability"),
                _likert("q4-2", "I am proficient in documenting my work for others to understand.", "Communication"),
                _likert("q4-3", "I enjoy planning project timelines and deliverables.", "Leadership", "Planning"),
                _likert(
                    "q4-4",
                    "I am effective at debugging and solving technical problems under pressure.",
                    "Problem Solving",
                ),
                _likert("q4-5", "I prefer to work in a team to build complex systems.", "Teamwork"),
            ),
        ),
    ]


def sample_users() -> List[User]:
    return [
        User("admin-001", "Rakesh", "Doon", "rakesh.doon@gmail.com", "123456", role="admin"),
        User("user-001", "Alex", "Doe", "alex.doe@example.com", "password"),
        User("user-002", "Alice", "Smith", "alice.smith@example.com", "password"),
        User("user-003", "John", "Dev", "john.dev@example.com", "password"),
        User("rec-001", "Recruiter", "Person", "rec@foo.com", "123456", role="recruiter"),
    ]


def _result(
    rid: str,
    user: Tuple[str, str],
    questionnaire: Questionnaire,
    scores: List[int],
    days_ago: int,
    now: datetime,
) -> SurveyResult:
    answers = tuple(Answer(f"{questionnaire.id}-{idx + 1}", score) for idx, score in enumerate(scores))
    score = compute_score(questionnaire, answers)
    return SurveyResult(
        id=rid,
        user_id=user[0],
        user_name=user[1],
        questionnaire_id=questionnaire.id,
        questionnaire_title=questionnaire.title,
        answers=answers,
        total_score=score.total_score,
        max_score=score.max_score,
        completed_at=(now - timedelta(days=days_ago)).isoformat(),
    )


def sample_results(
    questionnaires: Optional[List[Questionnaire]] = None,
    now: Optional[datetime] = None,
) -> List[SurveyResult]:
    by_id = {q.id: q for q in (questionnaires or sample_questionnaires())}
    now = now or datetime.now(timezone.utc)
    workplace_scores = [3, 3, 2, 3, 3, 2, 3, 3, 2, 3, 3, 2, 3, 2, 3, 3, 3, 2, 3, 2, 3, 3, 2, 3, 3]
    return [
        _result("res1", ("user-001", "Alex Doe"), by_id["q1"], [4, 5, 4], 0, now),
        _result("res2", ("user-001", "Alex Doe"), by_id["q2"], workplace_scores, 1, now),
        _result("res3", ("user-002", "Alice Smith"), by_id["q3"], [4, 5, 4, 5], 2, now),
        _result("res4", ("user-003", "John Dev"), by_id["q4"], [5, 4, 4, 5, 3], 3, now),
    ]
