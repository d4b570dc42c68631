import json
import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

from gateway.config import Settings
from gateway.credentials import ServiceCredential
from gateway.firebase import (
    FirebaseHandle,
    FirebaseInitError,
    FirebaseInitializer,
    bootstrap_firebase,
    create_default_app,
)


def make_credential(project_id="demo"):
    info = {
        "type": "service_account",
        "project_id": project_id,
        "client_email": "a@b.com",
        "private_key": "key",
    }
    return ServiceCredential(
        project_id=project_id, client_email="a@b.com", private_key="key", info=info
    )


class FirebaseInitializerTests(unittest.TestCase):
    def test_initialize_constructs_once(self):
        factory = MagicMock(return_value=MagicMock(name="app"))
        initializer = FirebaseInitializer(app_factory=factory)
        credential = make_credential()

        first = initializer.initialize(credential, "https://demo.firebaseio.com")
        second = initializer.initialize(credential, "https://demo.firebaseio.com")

        factory.assert_called_once_with(credential, "https://demo.firebaseio.com")
        self.assertIs(first, second)
        self.assertTrue(initializer.initialized)
        self.assertEqual(first.project_id, "demo")

    def test_not_initialized_before_first_call(self):
        initializer = FirebaseInitializer(app_factory=MagicMock())
        self.assertFalse(initializer.initialized)
        self.assertIsNone(initializer.handle)

    def test_factory_error_is_wrapped(self):
        factory = MagicMock(side_effect=ValueError("Invalid private key"))
        initializer = FirebaseInitializer(app_factory=factory)
        with self.assertRaises(FirebaseInitError) as ctx:
            initializer.initialize(make_credential())
        self.assertIn("Invalid private key", str(ctx.exception))
        self.assertFalse(initializer.initialized)

    @patch("gateway.firebase.firebase_admin")
    @patch("gateway.firebase.credentials")
    def test_default_factory_reuses_existing_app(self, credentials_mock, admin_mock):
        existing = MagicMock(name="existing")
        admin_mock.get_app.return_value = existing
        app = create_default_app(make_credential(), "https://demo.firebaseio.com")
        self.assertIs(app, existing)
        admin_mock.initialize_app.assert_not_called()

    @patch("gateway.firebase.firebase_admin")
    @patch("gateway.firebase.credentials")
    def test_default_factory_passes_database_url(self, credentials_mock, admin_mock):
        admin_mock.get_app.side_effect = ValueError("no app")
        credential = make_credential()
        create_default_app(credential, "https://demo.firebaseio.com")
        credentials_mock.Certificate.assert_called_once_with(credential.info)
        admin_mock.initialize_app.assert_called_once_with(
            credentials_mock.Certificate.return_value,
            {"databaseURL": "https://demo.firebaseio.com"},
        )


class FirebaseHandleTests(unittest.TestCase):
    @patch("gateway.firebase.auth")
    def test_verify_id_token_uses_handle_app(self, auth_mock):
        app = MagicMock()
        auth_mock.verify_id_token.return_value = {"uid": "u1"}
        handle = FirebaseHandle(app=app)
        self.assertEqual(handle.verify_id_token("tok"), {"uid": "u1"})
        auth_mock.verify_id_token.assert_called_once_with(
            "tok", app=app, check_revoked=False
        )

    def test_project_id_falls_back_to_app(self):
        app = MagicMock()
        app.project_id = "from-app"
        self.assertEqual(FirebaseHandle(app=app).project_id, "from-app")


class BootstrapFirebaseTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.cred_path = Path(self._tmp.name) / "firebase-service-account.json"

    def _settings(self, **kwargs):
        kwargs.setdefault("firebase_service_account_path", str(self.cred_path))
        return Settings(_env_file=None, **kwargs)

    def test_skipped_in_development(self):
        initializer = FirebaseInitializer(app_factory=MagicMock())
        with self.assertLogs("gateway.firebase", level="INFO") as logs:
            handle = bootstrap_firebase(
                self._settings(node_env="development"), initializer
            )
        self.assertIsNone(handle)
        self.assertFalse(initializer.initialized)
        self.assertIn("without Firebase authentication", logs.output[0])

    def test_missing_credential_degrades_with_warning(self):
        initializer = FirebaseInitializer(app_factory=MagicMock())
        with self.assertLogs("gateway.firebase", level="WARNING") as logs:
            handle = bootstrap_firebase(
                self._settings(node_env="production"), initializer
            )
        self.assertIsNone(handle)
        self.assertEqual(len(logs.records), 2)
        self.assertIn("not configured", logs.output[0])

    def test_use_firebase_forces_init_in_development(self):
        self.cred_path.write_text(
            json.dumps(make_credential().info), encoding="utf-8"
        )
        factory = MagicMock(return_value=MagicMock(name="app"))
        initializer = FirebaseInitializer(app_factory=factory)
        handle = bootstrap_firebase(
            self._settings(
                node_env="development",
                use_firebase=True,
                firebase_db_url="https://demo.firebaseio.com",
            ),
            initializer,
        )
        self.assertIsNotNone(handle)
        self.assertEqual(handle.project_id, "demo")
        factory.assert_called_once()

    def test_init_failure_degrades(self):
        self.cred_path.write_text(
            json.dumps(make_credential().info), encoding="utf-8"
        )
        initializer = FirebaseInitializer(
            app_factory=MagicMock(side_effect=ValueError("bad key"))
        )
        with self.assertLogs("gateway.firebase", level="WARNING"):
            handle = bootstrap_firebase(
                self._settings(node_env="production"), initializer
            )
        self.assertIsNone(handle)

    def test_undecodable_credential_degrades(self):
        self.cred_path.write_bytes(b'{"project_id": "\xff\xfe"}')
        initializer = FirebaseInitializer(app_factory=MagicMock())
        with self.assertLogs("gateway.firebase", level="WARNING"):
            handle = bootstrap_firebase(
                self._settings(node_env="production"), initializer
            )
        self.assertIsNone(handle)
        self.assertFalse(initializer.initialized)


if __name__ == "__main__":
    unittest.main()
