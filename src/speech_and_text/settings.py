from __future__ import annotations

"""Runtime configuration helpers for speech-and-text."""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from .recognition.credentials import CredentialMode

DEFAULT_PORT = 80
DEFAULT_TIMEOUT_SECONDS = 300
DEFAULT_UPLOAD_MAX_BYTES = 10 * 1024 * 1024
DEFAULT_INLINE_LANGUAGE_CODES = ("ja-JP",)


class SettingsError(RuntimeError):
    """Raised when required process configuration is missing."""


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    value = env.get(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _env_list(env: Mapping[str, str], name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    value = env.get(name)
    if not value:
        return default
    return tuple(value.split(","))


@dataclass(frozen=True)
class ServerSettings:
    host: str
    port: int
    log_level: str


@dataclass(frozen=True)
class RecognitionSettings:
    project_id: str
    provider: str
    credential_mode: CredentialMode
    credentials: Optional[str]
    timeout_seconds: int
    inline_language_codes: tuple[str, ...]
    upload_max_bytes: int


@dataclass(frozen=True)
class Settings:
    environment: Optional[str]
    server: ServerSettings
    recognition: RecognitionSettings


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Build the process settings from environment variables.

    When ``ENV=local`` a ``.env`` file in the working directory is loaded
    first. Passing ``env`` skips both ``.env`` loading and ``os.environ``.
    """

    if env is None:
        if os.getenv("ENV") == "local":
            load_dotenv()
        env = os.environ

    project_id = (env.get("PROJECT_ID") or "").strip()
    if not project_id:
        raise SettingsError("PROJECT_ID environment variable is not set")

    environment = env.get("ENV")
    credential_mode = CredentialMode.LOCAL if environment == "local" else CredentialMode.SERVICE_ACCOUNT_JSON

    timeout_seconds = _env_int(env, "RECOGNITION_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS)
    if timeout_seconds <= 0:
        timeout_seconds = DEFAULT_TIMEOUT_SECONDS

    server_settings = ServerSettings(
        host=env.get("HOST", "0.0.0.0"),
        port=_env_int(env, "PORT", DEFAULT_PORT),
        log_level=env.get("LOG_LEVEL", "INFO").upper(),
    )

    recognition_settings = RecognitionSettings(
        project_id=project_id,
        provider=env.get("RECOGNITION_PROVIDER", "google"),
        credential_mode=credential_mode,
        credentials=env.get("GOOGLE_APPLICATION_CREDENTIALS") or None,
        timeout_seconds=timeout_seconds,
        inline_language_codes=_env_list(env, "INLINE_LANGUAGE_CODES", DEFAULT_INLINE_LANGUAGE_CODES),
        upload_max_bytes=_env_int(env, "UPLOAD_MAX_BYTES", DEFAULT_UPLOAD_MAX_BYTES),
    )

    return Settings(
        environment=environment,
        server=server_settings,
        recognition=recognition_settings,
    )


__all__ = [
    "Settings",
    "ServerSettings",
    "RecognitionSettings",
    "SettingsError",
    "load_settings",
]
