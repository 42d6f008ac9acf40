#!/usr/bin/env python3
"""Questionnaire, result and account records shared by every page."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

USER_ROLES = ("admin", "user", "recruiter")


class ValidationError(ValueError):
    """Raised when a record violates one of its construction invariants."""


def _require_int(value: Any, label: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{label} must be an integer, got {value!r}.")
    return value


def _require_text(value: Any, label: str, allow_empty: bool = False) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{label} must be a string.")
    if not allow_empty and not value.strip():
        raise ValidationError(f"{label} must not be empty.")
    return value


@dataclass(frozen=True)
class Option:
    text: str
    score: int

    def __post_init__(self) -> None:
        _require_text(self.text, "Option text", allow_empty=True)
        _require_int(self.score, "Option score")

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.text, "score": self.score}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Option":
        return cls(text=data.get("text", ""), score=data.get("score"))


@dataclass(frozen=True)
class Question:
    id: str
    text: str
    trait: str
    options: Tuple[Option, ...]
    behavior: Optional[str] = None

    def __post_init__(self) -> None:
        _require_text(self.id, "Question id")
        _require_text(self.text, "Question text", allow_empty=True)
        _require_text(self.trait, "Question trait", allow_empty=True)
        if self.behavior is not None:
            _require_text(self.behavior, "Question behavior", allow_empty=True)
        options = tuple(self.options)
        if not options:
            raise ValidationError(f"Question {self.id!r} must offer at least one option.")
        for option in options:
            if not isinstance(option, Option):
                raise ValidationError(f"Question {self.id!r} has an option that is not an Option.")
        object.__setattr__(self, "options", options)

    @property
    def max_score(self) -> int:
        return max(option.score for option in self.options)

    def offers(self, score: int) -> bool:
        return any(option.score == score for option in self.options)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "text": self.text,
            "trait": self.trait,
            "options": [option.to_dict() for option in self.options],
        }
        if self.behavior is not None:
            data["behavior"] = self.behavior
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Question":
        raw_options = data.get("options")
        if not isinstance(raw_options, (list, tuple)):
            raise ValidationError(f"Question {data.get('id')!r} options must be a list.")
        return cls(
            id=data.get("id"),
            text=data.get("text", ""),
            trait=data.get("trait", ""),
            behavior=data.get("behavior"),
            options=tuple(Option.from_dict(option) for option in raw_options),
        )


@dataclass(frozen=True)
class Questionnaire:
    id: str
    title: str
    questions: Tuple[Question, ...] = ()

    def __post_init__(self) -> None:
        _require_text(self.id, "Questionnaire id")
        _require_text(self.title, "Questionnaire title")
        questions = tuple(self.questions)
        seen = set()
        for question in questions:
            if not isinstance(question, Question):
                raise ValidationError("Questionnaire questions must be Question records.")
            if question.id in seen:
                raise ValidationError(f"Duplicate question id {question.id!r} in {self.title!r}.")
            seen.add(question.id)
        object.__setattr__(self, "questions", questions)

    def question(self, question_id: str) -> Optional[Question]:
        return next((q for q in self.questions if q.id == question_id), None)

    @property
    def traits(self) -> Tuple[str, ...]:
        ordered: Dict[str, None] = {}
        for question in self.questions:
            ordered.setdefault(question.trait, None)
        return tuple(ordered)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "questions": [question.to_dict() for question in self.questions],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Questionnaire":
        raw_questions = data.get("questions")
        if not isinstance(raw_questions, (list, tuple)):
            raise ValidationError("Questionnaire questions must be a list.")
        return cls(
            id=data.get("id"),
            title=data.get("title"),
            questions=tuple(Question.from_dict(q) for q in raw_questions),
        )


@dataclass(frozen=True)
class Answer:
    question_id: str
    score: int

    def __post_init__(self) -> None:
        _require_text(self.question_id, "Answer question id")
        _require_int(self.score, "Answer score")

    def to_dict(self) -> Dict[str, Any]:
        return {"questionId": self.question_id, "score": self.score}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Answer":
        return cls(question_id=data.get("questionId"), score=data.get("score"))


@dataclass(frozen=True)
class SurveyResult:
    """Outcome of one completed attempt. Scores are frozen at submission."""

    id: str
    user_id: str
    user_name: str
    questionnaire_id: str
    questionnaire_title: str
    answers: Tuple[Answer, ...]
    total_score: int
    max_score: int
    completed_at: str

    def __post_init__(self) -> None:
        _require_text(self.id, "Result id")
        _require_text(self.questionnaire_id, "Result questionnaire id")
        _require_int(self.total_score, "Result total score")
        _require_int(self.max_score, "Result max score")
        object.__setattr__(self, "answers", tuple(self.answers))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "userName": self.user_name,
            "questionnaireId": self.questionnaire_id,
            "questionnaireTitle": self.questionnaire_title,
            "answers": [answer.to_dict() for answer in self.answers],
            "totalScore": self.total_score,
            "maxScore": self.max_score,
            "completedAt": self.completed_at,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SurveyResult":
        return cls(
            id=data.get("id"),
            user_id=data.get("userId", ""),
            user_name=data.get("userName", ""),
            questionnaire_id=data.get("questionnaireId"),
            questionnaire_title=data.get("questionnaireTitle", ""),
            answers=tuple(Answer.from_dict(a) for a in data.get("answers") or []),
            total_score=data.get("totalScore"),
            max_score=data.get("maxScore"),
            completed_at=data.get("completedAt", ""),
        )


@dataclass(frozen=True)
class User:
    id: str
    first_name: str
    last_name: str
    email: str
    password: str
    role: str = "user"
    middle_name: str = ""
    password_reset_token: Optional[str] = None
    password_reset_expires: Optional[str] = None

    def __post_init__(self) -> None:
        _require_text(self.id, "User id")
        _require_text(self.email, "User email")
        if self.role not in USER_ROLES:
            raise ValidationError(f"Unknown role {self.role!r}; expected one of {', '.join(USER_ROLES)}.")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "firstName": self.first_name,
            "middleName": self.middle_name,
            "lastName": self.last_name,
            "email": self.email,
            "password": self.password,
            "role": self.role,
            "passwordResetToken": self.password_reset_token,
            "passwordResetExpires": self.password_reset_expires,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "User":
        return cls(
            id=data.get("id"),
            first_name=data.get("firstName", ""),
            middle_name=data.get("middleName", ""),
            last_name=data.get("lastName", ""),
            email=data.get("email"),
            password=data.get("password", ""),
            role=data.get("role", "user"),
            password_reset_token=data.get("passwordResetToken"),
            password_reset_expires=data.get("passwordResetExpires"),
        )


@dataclass(frozen=True)
class CertificateTemplate:
    show_overall_score: bool = True
    show_trait_scores: bool = True
    show_logo: bool = True
    show_signature: bool = False
    custom_message: str = (
        "Congratulations on your achievement! This certificate reflects your "
        "dedication and developing strengths."
    )
    logo_url: Optional[str] = None
    signature_url: Optional[str] = None
    show_watermark: bool = False
    watermark_text: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "showOverallScore": self.show_overall_score,
            "showTraitScores": self.show_trait_scores,
            "showLogo": self.show_logo,
            "showSignature": self.show_signature,
            "customMessage": self.custom_message,
            "logoUrl": self.logo_url,
            "signatureUrl": self.signature_url,
            "showWatermark": self.show_watermark,
            "watermarkText": self.watermark_text,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CertificateTemplate":
        defaults = cls()
        return cls(
            show_overall_score=bool(data.get("showOverallScore", defaults.show_overall_score)),
            show_trait_scores=bool(data.get("showTraitScores", defaults.show_trait_scores)),
            show_logo=bool(data.get("showLogo", defaults.show_logo)),
            show_signature=bool(data.get("showSignature", defaults.show_signature)),
            custom_message=data.get("customMessage", defaults.custom_message) or "",
            logo_url=data.get("logoUrl"),
            signature_url=data.get("signatureUrl"),
            show_watermark=bool(data.get("showWatermark", defaults.show_watermark)),
            watermark_text=data.get("watermarkText"),
        )


@dataclass(frozen=True)
class AuditLog:
    id: str
    timestamp: str
    admin_id: str
    admin_name: str
    action: str
    details: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "adminId": self.admin_id,
            "adminName": self.admin_name,
            "action": self.action,
            "details": self.details,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AuditLog":
        return cls(
            id=data.get("id", ""),
            timestamp=data.get("timestamp", ""),
            admin_id=data.get("adminId", ""),
            admin_name=data.get("adminName", ""),
            action=data.get("action", ""),
            details=data.get("details", ""),
        )


@dataclass(frozen=True)
class LoginResult:
    user: Optional[User] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.user is not None


@dataclass(frozen=True)
class PasswordResetResult:
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def answers_from_mapping(scores: Mapping[str, int], order: Sequence[str] = ()) -> Tuple[Answer, ...]:
    """Build Answer records from a question id -> score mapping, in ``order`` first."""
    ordered = [qid for qid in order if qid in scores]
    ordered.extend(qid for qid in scores if qid not in ordered)
    return tuple(Answer(question_id=qid, score=scores[qid]) for qid in ordered)
