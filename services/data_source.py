#!/usr/bin/env python3
"""Swappable storage for questionnaires, results, accounts and admin records."""

from __future__ import annotations

from abc import ABC, abstractmethod
import copy
from dataclasses import replace
from datetime import datetime, timedelta, timezone
import json
import logging
import os
import re
import secrets
import tempfile
from typing import Any, Callable, Dict, List, Optional
import uuid

from supabase import create_client

from app_settings import AppSettings
from sample_data import sample_questionnaires, sample_results, sample_users
from survey_model import (
    AuditLog,
    CertificateTemplate,
    LoginResult,
    PasswordResetResult,
    Questionnaire,
    SurveyResult,
    User,
    ValidationError,
)

logger = logging.getLogger(__name__)

QUESTIONNAIRES = "questionnaires"
RESULTS = "results"
USERS = "users"
AUDIT_LOGS = "audit_logs"
COLLECTIONS = (QUESTIONNAIRES, RESULTS, USERS, AUDIT_LOGS)
RESET_TOKEN_TTL = timedelta(hours=1)


class DataSourceError(RuntimeError):
    """A read or write against the backing store failed."""


class NotFoundError(DataSourceError):
    pass


def fresh_documents() -> Dict[str, Any]:
    questionnaires = sample_questionnaires()
    return {
        QUESTIONNAIRES: [q.to_dict() for q in questionnaires],
        RESULTS: [r.to_dict() for r in sample_results(questionnaires)],
        USERS: [u.to_dict() for u in sample_users()],
        AUDIT_LOGS: [],
        "certificate_template": CertificateTemplate().to_dict(),
    }


class DataSource(ABC):
    """Repository interface injected into the pages.

    Backends implement the document primitives; the record-level API below is
    shared. Every write is a single primitive call, so it either lands whole or
    raises ``DataSourceError``.
    """

    name = "abstract"

    @abstractmethod
    def _documents(self, collection: str) -> List[Dict[str, Any]]: ...

    @abstractmethod
    def _upsert(self, collection: str, document: Dict[str, Any]) -> None: ...

    @abstractmethod
    def _delete(self, collection: str, doc_id: str) -> None: ...

    @abstractmethod
    def _read_template(self) -> Optional[Dict[str, Any]]: ...

    @abstractmethod
    def _write_template(self, document: Dict[str, Any]) -> None: ...

    @abstractmethod
    def reset(self) -> None:
        """Restore the sample data set."""

    # Questionnaires

    def fetch_questionnaires(self) -> List[Questionnaire]:
        return [Questionnaire.from_dict(doc) for doc in self._documents(QUESTIONNAIRES)]

    def get_questionnaire(self, questionnaire_id: str) -> Optional[Questionnaire]:
        return next((q for q in self.fetch_questionnaires() if q.id == questionnaire_id), None)

    def save_questionnaire(self, questionnaire: Questionnaire) -> Questionnaire:
        self._upsert(QUESTIONNAIRES, questionnaire.to_dict())
        logger.info("Saved questionnaire %s (%s questions)", questionnaire.id, len(questionnaire.questions))
        return questionnaire

    def delete_questionnaire(self, questionnaire_id: str) -> None:
        self._delete(QUESTIONNAIRES, questionnaire_id)
        logger.info("Deleted questionnaire %s", questionnaire_id)

    # Results

    def fetch_results(self) -> List[SurveyResult]:
        return [SurveyResult.from_dict(doc) for doc in self._documents(RESULTS)]

    def save_result(self, result: SurveyResult) -> SurveyResult:
        if any(doc.get("id") == result.id for doc in self._documents(RESULTS)):
            raise DataSourceError(f"Result {result.id} already exists; results are immutable.")
        self._upsert(RESULTS, result.to_dict())
        logger.info("Saved result %s for questionnaire %s", result.id, result.questionnaire_id)
        return result

    def delete_result(self, result_id: str) -> None:
        self._delete(RESULTS, result_id)
        logger.info("Deleted result %s", result_id)

    # Users and auth

    def fetch_users(self) -> List[User]:
        return [User.from_dict(doc) for doc in self._documents(USERS)]

    def find_user_by_email(self, email: str) -> Optional[User]:
        needle = email.strip().lower()
        return next((u for u in self.fetch_users() if u.email.lower() == needle), None)

    def register_user(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        middle_name: str = "",
    ) -> User:
        if not email.strip() or not password:
            raise ValidationError("Email and password are required.")
        if self.find_user_by_email(email) is not None:
            raise ValidationError(f"An account with {email} already exists.")
        user = User(
            id=f"user-{uuid.uuid4().hex[:12]}",
            first_name=first_name.strip(),
            middle_name=middle_name.strip(),
            last_name=last_name.strip(),
            email=email.strip(),
            password=password,
            role="user",
        )
        self._upsert(USERS, user.to_dict())
        logger.info("Registered user %s", user.id)
        return user

    def update_user(self, user: User) -> User:
        if not any(doc.get("id") == user.id for doc in self._documents(USERS)):
            raise NotFoundError(f"User {user.id} not found for update.")
        self._upsert(USERS, user.to_dict())
        return user

    def delete_user(self, user_id: str) -> None:
        self._delete(USERS, user_id)
        logger.info("Deleted user %s", user_id)

    def login(self, email: str, password: str) -> LoginResult:
        user = self.find_user_by_email(email)
        if user is None:
            return LoginResult(error="not_found")
        if user.password != password:
            return LoginResult(error="incorrect_password")
        return LoginResult(user=user)

    def request_password_reset(self, email: str, now: Optional[datetime] = None) -> Optional[str]:
        """Issue a one-hour reset token for ``email``.

        Returns the token, or None when no account matches. Callers show the
        same message either way.
        """
        user = self.find_user_by_email(email)
        if user is None:
            logger.info("Password reset requested for unknown email")
            return None
        token = secrets.token_urlsafe(16)
        expires = (now or datetime.now(timezone.utc)) + RESET_TOKEN_TTL
        self.update_user(replace(user, password_reset_token=token, password_reset_expires=expires.isoformat()))
        logger.info("Password reset token issued for %s", user.id)
        return token

    def reset_password(self, token: str, new_password: str, now: Optional[datetime] = None) -> PasswordResetResult:
        if not new_password:
            raise ValidationError("A new password is required.")
        user = next((u for u in self.fetch_users() if token and u.password_reset_token == token), None)
        if user is None:
            return PasswordResetResult(error="invalid_token")
        try:
            expires = datetime.fromisoformat(user.password_reset_expires or "")
        except ValueError:
            expires = datetime.min.replace(tzinfo=timezone.utc)
        if expires.tzinfo is None:
            expires = expires.replace(tzinfo=timezone.utc)
        if expires < (now or datetime.now(timezone.utc)):
            return PasswordResetResult(error="expired_token")
        self.update_user(replace(user, password=new_password, password_reset_token=None, password_reset_expires=None))
        logger.info("Password reset completed for %s", user.id)
        return PasswordResetResult()

    # Certificate template

    def fetch_certificate_template(self) -> CertificateTemplate:
        document = self._read_template()
        return CertificateTemplate.from_dict(document) if document else CertificateTemplate()

    def save_certificate_template(self, template: CertificateTemplate) -> CertificateTemplate:
        self._write_template(template.to_dict())
        return template

    # Audit log

    def fetch_audit_logs(self) -> List[AuditLog]:
        logs = [AuditLog.from_dict(doc) for doc in self._documents(AUDIT_LOGS)]
        return sorted(logs, key=lambda log: log.timestamp, reverse=True)

    def record_audit_log(self, action: str, details: str, admin: User) -> AuditLog:
        entry = AuditLog(
            id=f"log-{uuid.uuid4().hex[:12]}",
            timestamp=datetime.now(timezone.utc).isoformat(),
            admin_id=admin.id,
            admin_name=admin.full_name,
            action=action,
            details=details,
        )
        self._upsert(AUDIT_LOGS, entry.to_dict())
        logger.info("Audit: %s by %s (%s)", action, admin.id, details)
        return entry


class _DocumentStore(DataSource):
    """Shared behaviour for backends holding all documents in one dict."""

    @abstractmethod
    def _load(self) -> Dict[str, Any]: ...

    @abstractmethod
    def _store(self, data: Dict[str, Any]) -> None: ...

    def _documents(self, collection: str) -> List[Dict[str, Any]]:
        return copy.deepcopy(self._load().get(collection, []))

    def _upsert(self, collection: str, document: Dict[str, Any]) -> None:
        data = self._load()
        documents = data.setdefault(collection, [])
        for idx, existing in enumerate(documents):
            if existing.get("id") == document["id"]:
                documents[idx] = copy.deepcopy(document)
                break
        else:
            documents.append(copy.deepcopy(document))
        self._store(data)

    def _delete(self, collection: str, doc_id: str) -> None:
        data = self._load()
        data[collection] = [doc for doc in data.get(collection, []) if doc.get("id") != doc_id]
        self._store(data)

    def _read_template(self) -> Optional[Dict[str, Any]]:
        return copy.deepcopy(self._load().get("certificate_template"))

    def _write_template(self, document: Dict[str, Any]) -> None:
        data = self._load()
        data["certificate_template"] = copy.deepcopy(document)
        self._store(data)


class InMemoryDataSource(_DocumentStore):
    """Simulated database seeded with the sample data; lost on restart."""

    name = "memory"

    def __init__(self, seed: Optional[Callable[[], Dict[str, Any]]] = None) -> None:
        self._seed = seed or fresh_documents
        self._data = self._seed()

    def _load(self) -> Dict[str, Any]:
        return self._data

    def _store(self, data: Dict[str, Any]) -> None:
        self._data = data

    def reset(self) -> None:
        self._data = self._seed()
        logger.info("In-memory data reset to sample set")


class LocalFileDataSource(_DocumentStore):
    """JSON file on disk, initialised with the sample data on first use."""

    name = "local"

    def __init__(self, path: str) -> None:
        self.path = path
        if not os.path.exists(path):
            self._store(fresh_documents())

    def _load(self) -> Dict[str, Any]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            data = fresh_documents()
        except (OSError, json.JSONDecodeError) as exc:
            raise DataSourceError(f"Could not read data file {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise DataSourceError(f"Data file {self.path} does not hold a JSON object.")
        return data

    def _store(self, data: Dict[str, Any]) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        fd, tmp_path = tempfile.mkstemp(prefix=".survey-", suffix=".json", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as exc:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise DataSourceError(f"Could not write data file {self.path}: {exc}") from exc

    def reset(self) -> None:
        self._store(fresh_documents())
        logger.info("Data file %s reset to sample set", self.path)


def _snake(key: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", key).lower()


def _camel(key: str) -> str:
    head, *rest = key.split("_")
    return head + "".join(part.title() for part in rest)


class SupabaseDataSource(DataSource):
    """Remote document store: one Supabase table per collection."""

    name = "supabase"
    TABLES = {
        QUESTIONNAIRES: "questionnaires",
        RESULTS: "survey_results",
        USERS: "users",
        AUDIT_LOGS: "audit_logs",
    }
    TEMPLATE_TABLE = "certificate_template"
    TEMPLATE_ROW_ID = 1

    def __init__(self, client: Any) -> None:
        self.client = client

    def _execute(self, action: str, query: Any) -> Any:
        try:
            return query.execute()
        except Exception as exc:
            raise DataSourceError(f"Supabase {action} failed: {exc}") from exc

    def _documents(self, collection: str) -> List[Dict[str, Any]]:
        table = self.TABLES[collection]
        response = self._execute(f"select on {table}", self.client.table(table).select("*"))
        return [{_camel(k): v for k, v in row.items()} for row in (response.data or [])]

    def _upsert(self, collection: str, document: Dict[str, Any]) -> None:
        table = self.TABLES[collection]
        row = {_snake(k): v for k, v in document.items()}
        self._execute(f"upsert on {table}", self.client.table(table).upsert(row))

    def _delete(self, collection: str, doc_id: str) -> None:
        table = self.TABLES[collection]
        self._execute(f"delete on {table}", self.client.table(table).delete().eq("id", doc_id))

    def _read_template(self) -> Optional[Dict[str, Any]]:
        query = self.client.table(self.TEMPLATE_TABLE).select("*").eq("id", self.TEMPLATE_ROW_ID)
        rows = self._execute("select on certificate_template", query).data or []
        if not rows:
            return None
        return {_camel(k): v for k, v in rows[0].items() if k != "id"}

    def _write_template(self, document: Dict[str, Any]) -> None:
        row = {_snake(k): v for k, v in document.items()}
        row["id"] = self.TEMPLATE_ROW_ID
        self._execute("upsert on certificate_template", self.client.table(self.TEMPLATE_TABLE).upsert(row))

    def reset(self) -> None:
        documents = fresh_documents()
        for collection in COLLECTIONS:
            table = self.TABLES[collection]
            self._execute(f"clear {table}", self.client.table(table).delete().neq("id", ""))
            for document in documents[collection]:
                self._upsert(collection, document)
        self._write_template(documents["certificate_template"])
        logger.info("Supabase tables reset to sample set")


def create_data_source(settings: AppSettings, client: Any = None) -> DataSource:
    if settings.data_source == "memory":
        return InMemoryDataSource()
    if settings.data_source == "local":
        return LocalFileDataSource(settings.data_file)
    if client is None:
        if not settings.supabase_url or not settings.supabase_key:
            raise DataSourceError("SUPABASE_URL and SUPABASE_KEY are required for the supabase data source.")
        client = create_client(settings.supabase_url, settings.supabase_key)
    return SupabaseDataSource(client)
