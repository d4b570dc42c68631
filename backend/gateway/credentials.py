"""
Service-account credential loading.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dacite import Config, DaciteError, from_dict

logger = logging.getLogger(__name__)


class CredentialLoadError(Exception):
    """Raised when the service-account file is missing or malformed."""

    def __init__(self, path: str | Path, message: str):
        super().__init__(message)
        self.path = str(path)


@dataclass
class ServiceCredential:
    """Parsed Firebase service-account descriptor.

    Only ``project_id`` and ``client_email`` are displayed; the private key
    is checked for presence and otherwise passed through untouched in
    ``info``.
    """

    project_id: str
    client_email: str
    private_key: str = field(repr=False)
    type: str = "service_account"
    private_key_id: Optional[str] = field(default=None, repr=False)
    client_id: Optional[str] = None
    token_uri: Optional[str] = None
    info: dict = field(default_factory=dict, repr=False)


def load_service_credential(path: str | Path) -> ServiceCredential:
    """Read and validate a service-account JSON file."""
    path = Path(path)
    try:
        raw = path.read_bytes()
    except FileNotFoundError:
        raise CredentialLoadError(path, f"Cannot find file '{path}'") from None
    except OSError as exc:
        raise CredentialLoadError(path, f"Cannot read '{path}': {exc}") from exc

    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise CredentialLoadError(path, f"'{path}' is not valid UTF-8: {exc}") from exc

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise CredentialLoadError(path, f"Invalid JSON in '{path}': {exc}") from exc
    if not isinstance(data, dict):
        raise CredentialLoadError(path, f"'{path}' does not contain a JSON object")

    try:
        credential = from_dict(
            data_class=ServiceCredential,
            data={**data, "info": data},
            config=Config(check_types=True),
        )
    except DaciteError as exc:
        raise CredentialLoadError(
            path, f"Invalid service account in '{path}': {exc}"
        ) from exc

    if not credential.private_key.strip():
        raise CredentialLoadError(path, f"'{path}' has an empty private_key")

    logger.debug("Loaded service account for project %s", credential.project_id)
    return credential
