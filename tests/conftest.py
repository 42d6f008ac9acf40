from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from scoring_engine import compute_score
from services.data_source import InMemoryDataSource
from survey_model import Option, Question, Questionnaire, SurveyResult, User, answers_from_mapping

LIKERT = tuple(Option(str(score), score) for score in range(1, 6))


class FakeQuery:
    def __init__(self, client, table):
        self.client = client
        self.table = table
        self.op = "select"
        self.payload = None
        self.filters = []

    def select(self, columns="*"):
        self.op = "select"
        return self

    def upsert(self, row):
        self.op = "upsert"
        self.payload = dict(row)
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def neq(self, column, value):
        self.filters.append(lambda row: row.get(column) != value)
        return self

    def _matches(self, row):
        return all(check(row) for check in self.filters)

    def execute(self):
        if self.client.fail:
            raise RuntimeError("connection refused")
        rows = self.client.tables.setdefault(self.table, [])
        if self.op == "select":
            return SimpleNamespace(data=[dict(row) for row in rows if self._matches(row)])
        if self.op == "upsert":
            for idx, row in enumerate(rows):
                if row.get("id") == self.payload.get("id"):
                    rows[idx] = self.payload
                    break
            else:
                rows.append(self.payload)
            return SimpleNamespace(data=[self.payload])
        removed = [row for row in rows if self._matches(row)]
        self.client.tables[self.table] = [row for row in rows if not self._matches(row)]
        return SimpleNamespace(data=removed)


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.fail = False

    def table(self, name):
        return FakeQuery(self, name)


class FakeResponses:
    def __init__(self, output_text="", error=None):
        self.output_text = output_text
        self.error = error
        self.calls = []

    def create(self, model, input):
        self.calls.append({"model": model, "input": input})
        if self.error is not None:
            raise self.error
        return SimpleNamespace(output_text=self.output_text)


class FakeOpenAI:
    def __init__(self, output_text="", error=None):
        self.responses = FakeResponses(output_text, error)


def likert(qid, trait, text=""):
    return Question(id=qid, text=text or f"Statement {qid}", trait=trait, options=LIKERT)


@pytest.fixture
def fake_supabase():
    return FakeSupabase()


@pytest.fixture
def fake_openai():
    return FakeOpenAI


@pytest.fixture
def memory_source():
    return InMemoryDataSource()


@pytest.fixture
def respondent():
    return User("user-001", "Alex", "Doe", "alex.doe@example.com", "password")


@pytest.fixture
def leadership_survey():
    return Questionnaire(
        id="lead",
        title="Leadership Check",
        questions=(
            likert("l1", "Leadership"),
            likert("l2", "Teamwork"),
            likert("l3", "Leadership"),
            likert("l4", "Communication"),
        ),
    )


@pytest.fixture
def make_result():
    def _make(rid, questionnaire, scores, user_name="Alex Doe", completed_at=None, total=None, maximum=None):
        score = compute_score(questionnaire, scores)
        return SurveyResult(
            id=rid,
            user_id=f"uid-{user_name.lower().replace(' ', '-')}",
            user_name=user_name,
            questionnaire_id=questionnaire.id,
            questionnaire_title=questionnaire.title,
            answers=answers_from_mapping(scores),
            total_score=score.total_score if total is None else total,
            max_score=score.max_score if maximum is None else maximum,
            completed_at=completed_at or datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc).isoformat(),
        )

    return _make
