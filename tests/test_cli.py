import json

import httpx
import pytest
from typer.testing import CliRunner

from adapters.rest_client import RestClient
from cli import main as cli_main

runner = CliRunner()


@pytest.fixture
def patched_client(monkeypatch, recorder):
    def factory(settings):
        return RestClient(settings, transport=httpx.MockTransport(recorder))

    monkeypatch.setattr(cli_main, "RestClient", factory)
    return recorder


def test_send_post_json(patched_client):
    result = runner.invoke(
        cli_main.app,
        ["send", "post", "/users", "--base-url", "http://api.test", "-d", '{"name": "Ann"}', "-H", "X-Trace: t1"],
    )

    assert result.exit_code == 0, result.output
    sent = patched_client.last
    assert sent.method == "POST"
    assert str(sent.url) == "http://api.test/users"
    assert json.loads(sent.content) == {"name": "Ann"}
    assert sent.headers["X-Client-Id"] == "rms-ui"
    assert sent.headers["X-Trace"] == "t1"
    assert "HTTP 200" in result.output


def test_send_form_and_path_params(patched_client):
    result = runner.invoke(
        cli_main.app,
        [
            "send",
            "POST",
            "/items/{id}",
            "--base-url",
            "http://api.test",
            "--content-type",
            "",
            "--path-param",
            "id=42",
            "--form",
            "a=1",
            "--param",
            "b=2",
        ],
    )

    assert result.exit_code == 0, result.output
    sent = patched_client.last
    assert sent.url.path == "/items/42"
    assert sent.content == b"a=1"


def test_send_rejects_malformed_pairs(patched_client):
    result = runner.invoke(cli_main.app, ["send", "GET", "/x", "--query", "novalue"])

    assert result.exit_code != 0
    assert patched_client.requests == []


def test_send_reports_transport_errors(patched_client):
    def responder(request):
        raise httpx.ConnectError("refused", request=request)

    patched_client.responder = responder

    result = runner.invoke(cli_main.app, ["send", "GET", "/x", "--base-url", "http://api.test"])

    assert result.exit_code == 2
    assert "TransportError" in result.output


def test_validate_command(tmp_path):
    schema = tmp_path / "schema.json"
    schema.write_text('{"type": "object", "required": ["name"]}', encoding="utf-8")
    good = tmp_path / "good.json"
    good.write_text('{"name": "Ann"}', encoding="utf-8")
    bad = tmp_path / "bad.json"
    bad.write_text("{}", encoding="utf-8")

    ok = runner.invoke(cli_main.app, ["validate", str(good), str(schema)])
    assert ok.exit_code == 0
    assert "Valid" in ok.output

    failed = runner.invoke(cli_main.app, ["validate", str(bad), str(schema)])
    assert failed.exit_code == 1
    assert "required property" in failed.output


def test_profile_command(monkeypatch, tmp_path):
    fixtures = tmp_path / "fx"
    fixtures.mkdir()
    (fixtures / "p.json").write_text('{"a": {"x": 1}}', encoding="utf-8")
    monkeypatch.setenv("REST_HARNESS_RESOURCES_DIR", str(fixtures))

    result = runner.invoke(cli_main.app, ["profile", "/p.json", "a"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {"x": 1}

    missing = runner.invoke(cli_main.app, ["profile", "/nope.json", "a"])
    assert missing.exit_code == 2


def test_doctor_run_without_base_uri():
    result = runner.invoke(cli_main.app, ["doctor", "run"])

    assert result.exit_code == 0, result.output
    assert "MISSING" in result.output


def test_doctor_setup_writes_user_env(tmp_path):
    result = runner.invoke(cli_main.app, ["doctor", "setup"], input="https://qa.local\nqa-bot\n")

    assert result.exit_code == 0, result.output
    env_file = tmp_path / "xdg" / "rest-harness" / ".env"
    text = env_file.read_text(encoding="utf-8")
    assert "REST_HARNESS_ENV=https://qa.local" in text
    assert "REST_HARNESS_CLIENT_ID=qa-bot" in text


def test_send_form_params_with_default_content_type(patched_client):
    result = runner.invoke(
        cli_main.app,
        ["send", "POST", "/login", "--base-url", "http://api.test", "--form", "user=ann"],
    )

    assert result.exit_code == 0, result.output
    sent = patched_client.last
    assert sent.content == b"user=ann"
    assert sent.headers["Content-Type"] == "application/x-www-form-urlencoded"
