"""
Firebase setup diagnostics.

Checks run in a fixed order: environment variables, service-account
credential plus Admin SDK initialization, then a single bounded Firestore
read. Each step prints pass/fail lines and the run ends with one banner
derived from the aggregate result. Failures are reported, never raised.
"""

from __future__ import annotations

import asyncio
import enum
import logging
import os
import sys
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Sequence, TextIO

from google.api_core import exceptions as api_exceptions

from gateway.config import Settings
from gateway.credentials import CredentialLoadError, load_service_credential
from gateway.firebase import FirebaseHandle, FirebaseInitError, FirebaseInitializer
from shared.firebase_constants import FIREBASE_CONSOLE_URL, USERS_COLLECTION

logger = logging.getLogger(__name__)

REQUIRED_ENV = ("FIREBASE_DB_URL", "NODE_ENV")
PREVIEW_LENGTH = 50
DEFAULT_PROBE_TIMEOUT = 5.0

PASS = "✓"
FAIL = "✗"
RULE = "=" * 32


class ErrorKind(enum.Enum):
    PERMISSION_DENIED = "PERMISSION_DENIED"
    UNAUTHENTICATED = "UNAUTHENTICATED"
    TIMEOUT = "TIMEOUT"
    UNKNOWN = "UNKNOWN"


# Exception types raised by the Google client libraries, checked first.
STRUCTURED_ERRORS: tuple[tuple[type[BaseException], ErrorKind], ...] = (
    (api_exceptions.PermissionDenied, ErrorKind.PERMISSION_DENIED),
    (api_exceptions.Unauthenticated, ErrorKind.UNAUTHENTICATED),
    (api_exceptions.DeadlineExceeded, ErrorKind.TIMEOUT),
)

# Substring markers for errors without a structured type, first match wins.
ERROR_MARKERS: tuple[tuple[str, ErrorKind], ...] = (
    ("PERMISSION_DENIED", ErrorKind.PERMISSION_DENIED),
    ("UNAUTHENTICATED", ErrorKind.UNAUTHENTICATED),
    ("DEADLINE_EXCEEDED", ErrorKind.TIMEOUT),
)

CAUSES: dict[ErrorKind, str] = {
    ErrorKind.PERMISSION_DENIED: "Check your Firestore Security Rules",
    ErrorKind.UNAUTHENTICATED: "Check your service account credentials",
    ErrorKind.TIMEOUT: (
        "Firestore did not respond in time, check network access and "
        "FIREBASE_DB_URL"
    ),
}


def classify_message(message: str) -> ErrorKind:
    for marker, kind in ERROR_MARKERS:
        if marker in message:
            return kind
    return ErrorKind.UNKNOWN


def classify_error(error: BaseException) -> ErrorKind:
    for error_type, kind in STRUCTURED_ERRORS:
        if isinstance(error, error_type):
            return kind
    return classify_message(str(error))


@dataclass(frozen=True)
class ProbeResult:
    ok: bool
    count: Optional[int] = None
    kind: Optional[ErrorKind] = None
    message: Optional[str] = None

    @classmethod
    def success(cls, count: int) -> "ProbeResult":
        return cls(ok=True, count=count)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> "ProbeResult":
        return cls(ok=False, kind=kind, message=message)

    @property
    def cause(self) -> Optional[str]:
        """Human-readable cause; unknown errors echo the raw message."""
        if self.ok:
            return None
        return CAUSES.get(self.kind, self.message)


@dataclass
class EnvironmentReport:
    checked: list[str]
    present: dict[str, str] = field(default_factory=dict)
    missing: list[str] = field(default_factory=list)

    @property
    def all_present(self) -> bool:
        return not self.missing

    def lines(self, preview_length: int = PREVIEW_LENGTH) -> list[str]:
        lines = []
        for key in self.checked:
            if key in self.present:
                preview = self.present[key][:preview_length]
                lines.append(f"{PASS} {key}: {preview}...")
            else:
                lines.append(f"{FAIL} {key}: NOT SET")
        return lines


def inspect_environment(
    keys: Sequence[str] = REQUIRED_ENV,
    environ: Optional[Mapping[str, str]] = None,
) -> EnvironmentReport:
    """Check which of ``keys`` are set; empty values count as missing."""
    snapshot = dict(os.environ if environ is None else environ)
    report = EnvironmentReport(checked=list(keys))
    for key in keys:
        value = snapshot.get(key)
        if value:
            report.present[key] = value
        else:
            report.missing.append(key)
    return report


async def probe_connectivity(
    client: Any,
    collection: str = USERS_COLLECTION,
    limit: int = 1,
    timeout: float = DEFAULT_PROBE_TIMEOUT,
) -> ProbeResult:
    """Read at most ``limit`` documents from ``collection``.

    ``client`` is an async Firestore client (or anything exposing
    ``collection(name).limit(n).get()`` as a coroutine).
    """
    try:
        query = client.collection(collection).limit(limit)
        documents = await asyncio.wait_for(query.get(), timeout=timeout)
    except asyncio.TimeoutError:
        return ProbeResult.failure(
            ErrorKind.TIMEOUT, f"No response from Firestore after {timeout:g}s"
        )
    except Exception as exc:
        logger.debug("Firestore probe failed", exc_info=True)
        return ProbeResult.failure(classify_error(exc), str(exc))
    return ProbeResult.success(len(documents))


class ReporterState(enum.Enum):
    START = "START"
    ENV_CHECKED = "ENV_CHECKED"
    CRED_LOADING = "CRED_LOADING"
    CRED_FAILED = "CRED_FAILED"
    CLIENT_READY = "CLIENT_READY"
    PROBE_PENDING = "PROBE_PENDING"
    PROBE_SUCCESS = "PROBE_SUCCESS"
    PROBE_FAILED = "PROBE_FAILED"


ClientFactory = Callable[[FirebaseHandle], Any]


def _default_client_factory(handle: FirebaseHandle) -> Any:
    return handle.firestore_async()


class DiagnosticReporter:
    """Sequences the Firebase checks and prints the report."""

    def __init__(
        self,
        settings: Settings,
        initializer: Optional[FirebaseInitializer] = None,
        environ: Optional[Mapping[str, str]] = None,
        stream: Optional[TextIO] = None,
        client_factory: Optional[ClientFactory] = None,
        required_env: Sequence[str] = REQUIRED_ENV,
    ):
        self.settings = settings
        self.initializer = initializer or FirebaseInitializer()
        self.environ = environ
        self.stream = stream or sys.stdout
        self.client_factory = client_factory or _default_client_factory
        self.required_env = tuple(required_env)
        self.state = ReporterState.START
        self.environment: Optional[EnvironmentReport] = None
        self.probe_result: Optional[ProbeResult] = None

    def _print(self, line: str = "") -> None:
        print(line, file=self.stream)

    def _section(self, title: str) -> None:
        self._print()
        self._print(title)
        self._print("-" * len(title))

    async def run(self) -> bool:
        self._print(RULE)
        self._print("Firebase Connection Test")
        self._print(RULE)

        self._check_environment()

        handle = self._initialize_client()
        if handle is None:
            return self._finish(False)

        result = await self._check_connectivity(handle)
        return self._finish(result.ok)

    def _check_environment(self) -> EnvironmentReport:
        self._section("Test 1: Environment Variables")
        report = inspect_environment(self.required_env, self.environ)
        for line in report.lines():
            self._print(line)
        if not report.all_present:
            logger.info("Missing environment variables: %s", ", ".join(report.missing))
        self.environment = report
        self.state = ReporterState.ENV_CHECKED
        return report

    def _initialize_client(self) -> Optional[FirebaseHandle]:
        self._section("Test 2: Firebase Admin SDK")
        self.state = ReporterState.CRED_LOADING
        path = self.settings.firebase_service_account_path
        try:
            credential = load_service_credential(path)
        except CredentialLoadError as exc:
            self.state = ReporterState.CRED_FAILED
            self._print(f"{FAIL} {path} NOT found")
            self._print(f"  - Error: {exc}")
            self._print_remediation(path)
            return None

        self._print(f"{PASS} {path} loaded")
        self._print(f"  - Project ID: {credential.project_id}")
        self._print(f"  - Client Email: {credential.client_email}")

        already_initialized = self.initializer.initialized
        try:
            handle = self.initializer.initialize(
                credential, self.settings.firebase_db_url
            )
        except FirebaseInitError as exc:
            self.state = ReporterState.CRED_FAILED
            self._print(f"{FAIL} Firebase Admin SDK initialization failed")
            self._print(f"  - Error: {exc}")
            self._print_remediation(path)
            return None

        if already_initialized:
            self._print(f"{PASS} Firebase Admin SDK already initialized")
        else:
            self._print(f"{PASS} Firebase Admin SDK initialized")
        self.state = ReporterState.CLIENT_READY
        return handle

    def _print_remediation(self, path: str) -> None:
        self._print()
        self._print("To fix:")
        self._print(f"1. Go to {FIREBASE_CONSOLE_URL}")
        self._print("2. Select your project")
        self._print("3. Go to Settings → Service Accounts")
        self._print('4. Click "Generate New Private Key"')
        self._print(f"5. Save the JSON file as: {path}")

    async def _check_connectivity(self, handle: FirebaseHandle) -> ProbeResult:
        self._section("Test 3: Firestore Connection")
        self.state = ReporterState.PROBE_PENDING
        try:
            client = self.client_factory(handle)
        except Exception as exc:
            logger.debug("Could not create Firestore client", exc_info=True)
            result = ProbeResult.failure(classify_error(exc), str(exc))
        else:
            result = await probe_connectivity(
                client,
                collection=self.settings.firebase_probe_collection,
                timeout=self.settings.firebase_probe_timeout,
            )
        self.probe_result = result

        if result.ok:
            self.state = ReporterState.PROBE_SUCCESS
            self._print(f"{PASS} Firestore connection successful")
            self._print(
                f"  - Documents read from '{self.settings.firebase_probe_collection}': "
                f"{result.count}"
            )
        else:
            self.state = ReporterState.PROBE_FAILED
            self._print(f"{FAIL} Firestore connection failed")
            self._print(f"  - Error: {result.message}")
            if result.kind is ErrorKind.UNKNOWN:
                self._print(f"  - Cause: Unknown ({result.cause})")
            else:
                self._print(f"  - Cause: {result.cause}")
        return result

    def _finish(self, success: bool) -> bool:
        self._print()
        self._print(RULE)
        if success:
            self._print(f"{PASS} All tests passed!")
            self._print("Your Firebase setup is correct.")
        else:
            self._print(f"{FAIL} Some tests failed!")
            self._print("Please check the errors above.")
        self._print(RULE)
        return success
