# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import json
import unittest
from unittest.mock import patch

import pytest

from upcheck.cli import main as cli_main
from upcheck.cli.main import _parse_headers, build_parser, load_targets_file
from upcheck.config import HttpSettings, MonitorSettings
from upcheck.errors import NotFoundError, ValidationError
from upcheck.http.adapters import StubTransport
from upcheck.http.models import TransportResponse
from upcheck.models import ErrorCategory, HealthStatus
from upcheck.runtime import Upcheck


class ClosingStubTransport(StubTransport):
    def __init__(self, default=None):
        super().__init__(default)
        self.closed = False

    def close(self) -> None:
        self.closed = True


class TestUpcheckRuntime(unittest.TestCase):
    def make(self, transport=None):
        return Upcheck(
            transport or ClosingStubTransport(),
            settings=MonitorSettings(retry_base_backoff=0),
            http_settings=HttpSettings(),
        )

    def test_facade_operations_and_close(self):
        transport = ClosingStubTransport()
        with self.make(transport) as upcheck:
            target = upcheck.create_target({"name": "api", "url": "https://example.com", "max_retries": 0})
            self.assertEqual(upcheck.get_target(target.id), target)
            self.assertEqual(upcheck.list_targets(), [target])

            updated = upcheck.update_target(target.id, {"expected_status_max": 204})
            self.assertEqual(updated.expected_status_max, 204)

            result = upcheck.check_target(target.id, force=True)
            self.assertIs(result.status, HealthStatus.UP)
            self.assertEqual(upcheck.check_all(), 1)
            self.assertIn(target.id, upcheck.get_last_results())
            self.assertEqual(upcheck.get_summary().status_counts, {HealthStatus.UP: 1})

            self.assertTrue(upcheck.delete_target(target.id))
            self.assertFalse(upcheck.delete_target(target.id))
            with self.assertRaises(NotFoundError):
                upcheck.check_target(target.id)
        self.assertTrue(transport.closed)

    def test_invalid_config_raises(self):
        with self.make() as upcheck:
            with self.assertRaises(ValidationError):
                upcheck.create_target({"name": "api", "url": "example.com"})
            self.assertEqual(upcheck.list_targets(), [])

    def test_scheduler_start_and_stop(self):
        with self.make() as upcheck:
            scheduler = upcheck.start_scheduler(interval=60)
            self.assertTrue(scheduler.running)
            upcheck.stop_scheduler()
            self.assertFalse(scheduler.running)


def test_build_parser():
    parser = build_parser()
    args = parser.parse_args(["check", "https://example.com", "--json", "--expect-json", "--header", "X-Key: v"])
    assert args.command == "check"
    assert args.url == "https://example.com"
    assert args.json is True
    assert args.expect_json is True
    assert _parse_headers(args.header) == {"X-Key": "v"}

    serve = parser.parse_args(["serve", "--port", "9000"])
    assert serve.command == "serve"
    assert serve.port == 9000


def test_parse_headers_rejects_malformed():
    with pytest.raises(ValidationError):
        _parse_headers(["no-colon"])


def test_load_targets_file(tmp_path):
    path = tmp_path / "targets.json"
    path.write_text(json.dumps({"targets": [{"name": "a", "url": "https://a.example"}]}), encoding="utf-8")
    configs = load_targets_file(path)
    assert [c.name for c in configs] == ["a"]

    path.write_text(json.dumps(["oops"]), encoding="utf-8")
    with pytest.raises(ValidationError):
        load_targets_file(path)


def _patch_transport(monkeypatch, transport):
    monkeypatch.setattr(cli_main, "create_default_transport", lambda settings: transport)


def test_cli_check_json_output(monkeypatch, capsys):
    _patch_transport(monkeypatch, StubTransport(TransportResponse(status_code=200, body='{"ok": 1}', elapsed_ms=5)))
    exit_code = cli_main.main(["check", "https://example.com/health", "--json", "--expect-json"])

    payload = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert payload["status"] == "UP"
    assert payload["http_status"] == 200


def test_cli_check_pretty_output_for_failure(monkeypatch, capsys):
    _patch_transport(monkeypatch, StubTransport(TransportResponse(status_code=401, body="denied", elapsed_ms=5)))
    exit_code = cli_main.main(["check", "https://example.com/health"])

    output = capsys.readouterr().out
    assert exit_code == 1
    assert "Status: DOWN" in output
    assert f"Category: {ErrorCategory.AUTH_FAILURE.value}" in output
    assert "Reason: Authentication failed" in output


def test_cli_check_reports_validation_errors(capsys):
    assert cli_main.main(["check", "not-a-url"]) == 2
    assert "url must start with" in capsys.readouterr().err


def test_cli_serve_runs_uvicorn(monkeypatch, tmp_path):
    path = tmp_path / "targets.json"
    path.write_text(json.dumps([{"name": "a", "url": "https://a.example"}]), encoding="utf-8")
    monkeypatch.setattr(cli_main, "Upcheck", lambda: Upcheck(StubTransport()))

    with patch("uvicorn.run") as run:
        assert cli_main.main(["serve", "--targets", str(path), "--port", "9001"]) == 0
    app = run.call_args.args[0]
    assert run.call_args.kwargs == {"host": "127.0.0.1", "port": 9001}
    assert len(app.state.upcheck.list_targets()) == 1
