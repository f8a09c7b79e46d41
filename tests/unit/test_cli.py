"""
Integration tests for CLI commands.

Tests command behavior end to end with the backend replaced by an
httpx.MockTransport and the user config directory pointed at tmp_path.
"""

import json
import re
from pathlib import Path

import httpx
import pytest
from typer.testing import CliRunner

import frumle.cli as cli_module
from frumle import __version__
from frumle.cli import app, main
from frumle.core.project_config import CONFIG_NAME
from frumle.core.user_config import CredentialStore
from frumle.infrastructure import FrumleApiClient

runner = CliRunner()

API_KEY = "frm_1234567890"


class FakeBackend:
    """Serves canned responses and records every request."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.body: dict = {"status": "processing", "fileCount": 2, "quota": {"remaining": 9}}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.body)


@pytest.fixture
def backend(monkeypatch):
    fake = FakeBackend()
    monkeypatch.setattr(
        cli_module,
        "create_api_client",
        lambda config=None: FrumleApiClient(
            "https://api.example.com", transport=httpx.MockTransport(fake.handler)
        ),
    )
    return fake


@pytest.fixture
def frumle_home(tmp_path: Path, monkeypatch) -> Path:
    home = tmp_path / "home"
    monkeypatch.setenv("FRUMLE_HOME", str(home))
    monkeypatch.setenv("HOME", str(tmp_path / "user"))
    return home


@pytest.fixture
def api_key(frumle_home: Path) -> str:
    CredentialStore(frumle_home).set_api_key(API_KEY)
    return API_KEY


@pytest.fixture
def project(tmp_path: Path) -> Path:
    root = tmp_path / "shop"
    (root / "src").mkdir(parents=True)
    (root / "src" / "Kernel.php").write_text("<?php\n")
    (root / "composer.json").write_text(json.dumps({"name": "acme/shop"}))
    (root / ".env").write_text("PORT=3000\n")
    return root


class TestCLIHelp:
    def test_main_help(self):
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        for command in ("analyze", "add-key", "login", "status"):
            assert command in result.output

    def test_analyze_help(self):
        result = runner.invoke(app, ["analyze", "--help"])

        assert result.exit_code == 0
        assert "--project-name" in result.output
        assert "--ignore" in result.output

    def test_version(self):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output


class TestAnalyze:
    def test_missing_directory(self, tmp_path: Path, api_key, backend):
        result = runner.invoke(app, ["analyze", str(tmp_path / "missing")])

        assert result.exit_code == 1
        assert "does not exist" in result.output
        assert backend.requests == []

    def test_no_api_key(self, project: Path, frumle_home, backend):
        result = runner.invoke(app, ["analyze", str(project)])

        assert result.exit_code == 1
        assert "No API key found" in result.output
        assert "frumle add-key" in result.output

    def test_empty_project_never_calls_backend(self, tmp_path: Path, api_key, backend):
        empty = tmp_path / "empty"
        (empty / "vendor").mkdir(parents=True)
        (empty / "vendor" / "Foo.php").write_text("<?php\n")

        result = runner.invoke(app, ["analyze", str(empty)])

        assert result.exit_code == 1
        assert "No files found to analyze" in result.output
        assert backend.requests == []

    def test_processing_response(self, project: Path, api_key, backend):
        result = runner.invoke(app, ["analyze", str(project)])

        assert result.exit_code == 0, result.output
        assert "Found 3 files" in result.output
        assert "Local URL detected: http://localhost:3000" in result.output
        assert "Add a production URL" in result.output
        assert "acme/shop" in result.output
        assert "Analysis Started" in result.output

        [request] = backend.requests
        assert request.headers["Authorization"] == f"Bearer {API_KEY}"
        payload = json.loads(request.content)
        assert payload["projectName"] == "acme/shop"
        assert (project / CONFIG_NAME).is_file()

    def test_completed_response(self, project: Path, api_key, backend):
        backend.body = {
            "status": "completed",
            "result": {
                "framework": "Laravel",
                "stats": {"totalFiles": 3, "analyzedFiles": 3, "totalChunks": 7},
                "summary": "A small shop.",
            },
        }

        result = runner.invoke(app, ["analyze", str(project)])

        assert result.exit_code == 0, result.output
        assert "Analysis Results" in result.output
        assert "Laravel" in result.output
        assert "A small shop." in result.output

    def test_bracketed_server_text_is_printed_literally(self, project: Path, api_key, backend):
        backend.body = {
            "status": "completed",
            "result": {
                "framework": "Slim [/x]",
                "stats": {"totalFiles": 3},
                "summary": "Routes: [/api/users] GET",
            },
        }

        result = runner.invoke(app, ["analyze", str(project), "--project-name", "shop [/x]"])

        assert result.exit_code == 0, result.output
        assert "Routes: [/api/users] GET" in result.output
        assert "Slim [/x]" in result.output
        assert "Project: shop [/x]" in result.output

    def test_malformed_result_still_renders(self, project: Path, api_key, backend):
        backend.body = {"status": "completed", "result": "done", "quota": "n/a"}

        result = runner.invoke(app, ["analyze", str(project)])

        assert result.exit_code == 0, result.output
        assert "Analysis Results" in result.output
        assert re.search(r"Total Files:\s+\?", result.output)

    def test_project_name_and_ignore_options(self, project: Path, api_key, backend):
        result = runner.invoke(
            app,
            ["analyze", str(project), "--project-name", "my-api", "--ignore", "src, tests"],
        )

        assert result.exit_code == 0, result.output
        payload = json.loads(backend.requests[0].content)
        assert payload["projectName"] == "my-api"
        assert payload["ignoreDirs"] == ["src", "tests"]
        assert "src/Kernel.php" not in {f["relativePath"] for f in payload["files"]}

    def test_unauthorized_suggests_add_key(self, project: Path, api_key, backend):
        backend.status_code = 401
        backend.body = {}

        result = runner.invoke(app, ["analyze", str(project)])

        assert result.exit_code == 1
        assert "Invalid API key" in result.output
        assert "frumle add-key" in result.output

    def test_quota_exceeded_suggests_status(self, project: Path, api_key, backend):
        backend.status_code = 429
        backend.body = {"message": "Quota exceeded for this month"}

        result = runner.invoke(app, ["analyze", str(project)])

        assert result.exit_code == 1
        assert "Quota exceeded for this month" in result.output
        assert "frumle status" in result.output

    def test_config_write_failure(self, project: Path, api_key, backend):
        (project / CONFIG_NAME).mkdir()

        result = runner.invoke(app, ["analyze", str(project)])

        assert result.exit_code == 1
        assert "Failed to save" in result.output
        assert backend.requests == []


class TestAddKey:
    def test_short_key_rejected(self, frumle_home: Path, backend):
        result = runner.invoke(app, ["add-key", "short"])

        assert result.exit_code == 1
        assert "Invalid API key format" in result.output
        assert backend.requests == []

    def test_key_verified_and_stored(self, frumle_home: Path, backend):
        backend.body = {"quota": {"analysesPerMonth": 10, "used": 1, "remaining": 9}}

        result = runner.invoke(app, ["add-key", f"  {API_KEY}  "])

        assert result.exit_code == 0, result.output
        assert "API key added successfully" in result.output
        assert CredentialStore(frumle_home).get_api_key() == API_KEY
        assert backend.requests[0].headers["Authorization"] == f"Bearer {API_KEY}"

    def test_rejected_key_not_stored(self, frumle_home: Path, backend):
        backend.status_code = 401

        result = runner.invoke(app, ["login", API_KEY])

        assert result.exit_code == 1
        assert "Failed to add API key" in result.output
        assert CredentialStore(frumle_home).get_api_key() is None

    def test_login_is_an_alias(self, frumle_home: Path, backend):
        result = runner.invoke(app, ["login", API_KEY])

        assert result.exit_code == 0, result.output
        assert CredentialStore(frumle_home).get_api_key() == API_KEY


class TestStatus:
    def test_without_key(self, frumle_home: Path, backend):
        result = runner.invoke(app, ["status"])

        assert result.exit_code == 1
        assert "No API key found" in result.output
        assert backend.requests == []

    def test_prints_quota_and_usage(self, api_key, backend):
        backend.body = {
            "apiKey": "frm_12",
            "quota": {"analysesPerMonth": 10, "used": 4, "remaining": 6},
            "usage": {"totalAnalyses": 4, "lastAnalysisAt": "2026-10-01T10:00:00Z"},
        }

        result = runner.invoke(app, ["status"])

        assert result.exit_code == 0, result.output
        assert "frm_12..." in result.output
        assert "Total Analyses" in result.output
        assert "2026-10-01T10:00:00Z" in result.output


class TestEntryPoint:
    def test_main_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])

        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out

    def test_main_defaults_to_analyze(self, project: Path, api_key, backend):
        with pytest.raises(SystemExit) as exc_info:
            main([str(project)])

        assert exc_info.value.code == 0
        assert len(backend.requests) == 1


class TestConfigOption:
    def test_settings_file_is_applied(self, tmp_path: Path, project: Path, api_key, backend):
        settings_file = tmp_path / "frumle.yaml"
        settings_file.write_text(
            "api:\n"
            "  dashboard_url: https://dash.example.test\n"
            "scan:\n"
            "  ignore_dirs: [src]\n"
        )

        result = runner.invoke(app, ["analyze", str(project), "--config", str(settings_file)])

        assert result.exit_code == 0, result.output
        assert "https://dash.example.test" in result.output
        payload = json.loads(backend.requests[0].content)
        assert payload["ignoreDirs"] == ["src"]
        assert "src/Kernel.php" not in {f["relativePath"] for f in payload["files"]}

    def test_invalid_settings_file_exits(self, tmp_path: Path, frumle_home: Path, backend):
        settings_file = tmp_path / "frumle.yaml"
        settings_file.write_text("api:\n  unknown_key: 1\n")

        result = runner.invoke(app, ["status", "--config", str(settings_file)])

        assert result.exit_code == 1
        assert "Invalid configuration" in result.output
        assert backend.requests == []

    def test_missing_settings_file_exits(self, tmp_path: Path, frumle_home: Path, backend):
        result = runner.invoke(app, ["add-key", API_KEY, "--config", str(tmp_path / "nope.yaml")])

        assert result.exit_code == 1
        assert "Invalid configuration" in result.output
        assert CredentialStore(frumle_home).get_api_key() is None
