from __future__ import annotations

"""Credential strategies for the Speech-to-Text client."""

import enum
import json
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from google.oauth2 import service_account

from .errors import CredentialError

_SCOPES = ["https://www.googleapis.com/auth/cloud-platform"]


class CredentialMode(str, enum.Enum):
    LOCAL = "local"
    SERVICE_ACCOUNT_JSON = "service_account_json"


@dataclass(frozen=True)
class FileCredentials:
    """Service account key read from a file on disk."""

    path: str

    def load(self) -> service_account.Credentials:
        try:
            return service_account.Credentials.from_service_account_file(self.path, scopes=_SCOPES)
        except OSError as exc:
            raise CredentialError(f"cannot read credentials file {self.path}: {exc}") from exc
        except ValueError as exc:
            raise CredentialError(f"malformed credentials file {self.path}: {exc}") from exc


@dataclass(frozen=True)
class ServiceAccountInfoCredentials:
    """Service account key held in memory as a JSON document."""

    info: str

    def parsed(self) -> Dict[str, Any]:
        try:
            data = json.loads(self.info)
        except json.JSONDecodeError as exc:
            raise CredentialError(f"credentials are not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise CredentialError("credentials JSON must be an object")
        return data

    def load(self) -> service_account.Credentials:
        info = self.parsed()
        try:
            return service_account.Credentials.from_service_account_info(info, scopes=_SCOPES)
        except (KeyError, ValueError) as exc:
            raise CredentialError(f"malformed service account credentials: {exc}") from exc


CredentialSource = Union[FileCredentials, ServiceAccountInfoCredentials]


def credential_source_for(mode: CredentialMode, value: Optional[str]) -> CredentialSource:
    """Pick the credential strategy for ``mode``.

    ``value`` is the content of ``GOOGLE_APPLICATION_CREDENTIALS``: a file path
    in local mode, the JSON key itself otherwise.
    """

    if not value or not value.strip():
        raise CredentialError("GOOGLE_APPLICATION_CREDENTIALS environment variable is not set")
    if mode is CredentialMode.LOCAL:
        return FileCredentials(path=value)
    return ServiceAccountInfoCredentials(info=value)


__all__ = [
    "CredentialMode",
    "CredentialSource",
    "FileCredentials",
    "ServiceAccountInfoCredentials",
    "credential_source_for",
]
