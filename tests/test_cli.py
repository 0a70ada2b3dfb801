from __future__ import annotations

import json
from pathlib import Path

import pytest

from bodytracer.cli import main


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "BODYTRACER_CAPTURE_BODY",
        "BODYTRACER_MAX_BODY_SIZE",
        "BODYTRACER_SENSITIVE_FIELDS",
        "BODYTRACER_CAPTURE_METADATA",
        "BODYTRACER_CAPTURE_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)


def _write(tmp_path: Path, content: bytes) -> Path:
    path = tmp_path / "body.bin"
    path.write_bytes(content)
    return path


def test_preview_json_output(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write(tmp_path, b'{"user": "a", "password": "p"}')

    assert main(["preview", str(path), "--json"]) == 0

    attributes = json.loads(capsys.readouterr().out)
    assert attributes == {
        "http.request.body": '{"user":"a","password":"[REDACTED]"}',
        "http.request.body.size": 30,
        "http.request.body.type": "json",
    }


def test_preview_extra_sensitive_field(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write(tmp_path, b"name=bob&otp_code=1234")

    code = main(
        [
            "preview",
            str(path),
            "--content-type",
            "application/x-www-form-urlencoded",
            "--sensitive-field",
            "otp",
            "--json",
        ]
    )

    assert code == 0
    body = json.loads(capsys.readouterr().out)["http.request.body"]
    assert body == '{"name":"bob","otp_code":"[REDACTED]"}'


def test_preview_text_output(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write(tmp_path, b"x" * 20)

    assert main(["preview", str(path), "--max-body-size", "10"]) == 0

    out = capsys.readouterr().out
    assert "Capture: json, 20 bytes, not captured ✗ (too large)" in out
    assert "http.request.body = [TOO LARGE: 20 bytes]" in out


def test_preview_unsupported_content_type(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    path = _write(tmp_path, b"hello")

    assert main(["preview", str(path), "--content-type", "text/plain", "--json"]) == 0
    assert json.loads(capsys.readouterr().out) == {}


def test_preview_missing_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["preview", str(tmp_path / "nope.json")]) == 1
    assert "file not found" in capsys.readouterr().err


def test_preview_invalid_budget(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write(tmp_path, b"{}")

    assert main(["preview", str(path), "--max-body-size", "0"]) == 1
    assert "invalid option" in capsys.readouterr().err


def test_config_command_reflects_environment(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setenv("BODYTRACER_CAPTURE_BODY", "true")
    monkeypatch.setenv("BODYTRACER_SENSITIVE_FIELDS", "iban")

    assert main(["config"]) == 0

    out = capsys.readouterr().out
    assert "enabled: True" in out
    assert "sensitive fields (20)" in out
    assert "iban" in out


def test_preview_ineligible_method_is_skipped(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    path = _write(tmp_path, b'{"password": "p"}')

    assert main(["preview", str(path), "--method", "get"]) == 0
    assert "Capture: skipped (GET requests are not captured)" in capsys.readouterr().out

    assert main(["preview", str(path), "--method", "GET", "--json"]) == 0
    assert json.loads(capsys.readouterr().out) == {}


def test_preview_put_is_captured(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write(tmp_path, b'{"a": 1}')

    assert main(["preview", str(path), "--method", "PUT", "--json"]) == 0
    assert json.loads(capsys.readouterr().out)["http.request.body"] == '{"a":1}'
