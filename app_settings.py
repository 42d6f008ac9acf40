#!/usr/bin/env python3
"""Runtime settings read from Streamlit secrets with environment fallback."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from typing import Any, Mapping, Optional

DATA_SOURCES = ("memory", "local", "supabase")
DEFAULT_DATA_FILE = os.path.join(os.path.dirname(__file__), "survey_data.json")
DEFAULT_OPENAI_MODEL = "gpt-4.1-mini"
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


@dataclass(frozen=True)
class AppSettings:
    data_source: str = "memory"
    data_file: str = DEFAULT_DATA_FILE
    supabase_url: str = ""
    supabase_key: str = ""
    openai_api_key: str = ""
    openai_model: str = DEFAULT_OPENAI_MODEL
    log_level: str = "INFO"
    app_url: str = ""

    def __post_init__(self) -> None:
        if self.data_source not in DATA_SOURCES:
            raise ValueError(
                f"Unknown data source {self.data_source!r}; expected one of {', '.join(DATA_SOURCES)}."
            )

    @property
    def ai_enabled(self) -> bool:
        return bool(self.openai_api_key.strip())


def _lookup(secrets: Optional[Mapping[str, Any]], env: Mapping[str, str], key: str, default: str) -> str:
    value: Any = None
    if secrets is not None:
        try:
            value = secrets.get(key)
        except Exception:
            # st.secrets raises when no secrets.toml exists.
            value = None
    if value is None or str(value).strip() == "":
        value = env.get(key, default)
    return str(value).strip()


def load_settings(
    secrets: Optional[Mapping[str, Any]] = None,
    env: Optional[Mapping[str, str]] = None,
) -> AppSettings:
    env = os.environ if env is None else env
    return AppSettings(
        data_source=_lookup(secrets, env, "SURVEY_DATA_SOURCE", "memory").lower(),
        data_file=_lookup(secrets, env, "SURVEY_DATA_FILE", DEFAULT_DATA_FILE),
        supabase_url=_lookup(secrets, env, "SUPABASE_URL", ""),
        supabase_key=_lookup(secrets, env, "SUPABASE_KEY", ""),
        openai_api_key=_lookup(secrets, env, "OPENAI_API_KEY", ""),
        openai_model=_lookup(secrets, env, "OPENAI_MODEL", DEFAULT_OPENAI_MODEL),
        log_level=_lookup(secrets, env, "LOG_LEVEL", "INFO").upper(),
        app_url=_lookup(secrets, env, "APP_URL", ""),
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
