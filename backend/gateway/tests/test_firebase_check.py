import importlib.util
import io
import unittest
from pathlib import Path
from unittest.mock import AsyncMock, patch

from gateway.config import Settings

SCRIPT = Path(__file__).resolve().parents[2] / "scripts" / "firebase_check.py"


def load_script():
    spec = importlib.util.spec_from_file_location("firebase_check", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class FirebaseCheckCliTests(unittest.TestCase):
    def setUp(self):
        self.script = load_script()
        patches = [
            patch.object(
                self.script, "get_settings", return_value=Settings(_env_file=None)
            ),
            patch.object(self.script, "DiagnosticReporter"),
            patch.object(self.script.logging, "basicConfig"),
        ]
        for p in patches:
            p.start()
            self.addCleanup(p.stop)
        self.reporter_cls = self.script.DiagnosticReporter

    def _run(self, *args, ok):
        self.reporter_cls.return_value.run = AsyncMock(return_value=ok)
        with patch("sys.argv", ["firebase_check.py", *args]):
            return self.script.main()

    def test_exit_code_on_success(self):
        self.assertEqual(self._run(ok=True), 0)
        self.reporter_cls.return_value.run.assert_awaited_once()

    def test_exit_code_on_failure(self):
        self.assertEqual(self._run(ok=False), 1)

    def test_overrides_reach_reporter(self):
        self._run(
            "-c", "/tmp/sa.json", "--collection", "classes", "-t", "2.5", ok=True
        )
        settings = self.reporter_cls.call_args.args[0]
        self.assertEqual(settings.firebase_service_account_path, "/tmp/sa.json")
        self.assertEqual(settings.firebase_probe_collection, "classes")
        self.assertEqual(settings.firebase_probe_timeout, 2.5)

    def test_rejects_non_positive_timeout(self):
        for value in ("0", "-1", "soon"):
            with self.subTest(value=value):
                with patch("sys.stderr", new_callable=io.StringIO) as stderr:
                    with self.assertRaises(SystemExit) as ctx:
                        self._run("-t", value, ok=True)
                self.assertEqual(ctx.exception.code, 2)
                self.assertIn("--timeout", stderr.getvalue())
        self.reporter_cls.assert_not_called()


if __name__ == "__main__":
    unittest.main()
