from __future__ import annotations

import importlib
import json
from types import ModuleType

import pytest


def _reload_logging(monkeypatch: pytest.MonkeyPatch, **env: str) -> ModuleType:
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    module = importlib.import_module("covgate.logging_config")
    return importlib.reload(module)


def test_text_logging_writes_to_stderr_with_extras(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.delenv("COVGATE_LOG_JSON", raising=False)
    logging_module = _reload_logging(monkeypatch)
    logging_module.configure_logging("INFO")
    logger = logging_module.get_logger("test.logger")

    logger.info("hello world", extra={"package": "example.com/mod"})

    captured = capsys.readouterr()
    output = captured.err.strip()
    assert captured.out == ""
    assert "hello world" in output
    assert "package=example.com/mod" in output
    assert output.startswith("20")


def test_json_logging_mode(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    logging_module = _reload_logging(monkeypatch, COVGATE_LOG_JSON="true")
    logging_module.configure_logging("INFO")
    logger = logging_module.get_logger("json.logger")

    logger.info("structured message", extra={"percent": 33.33})

    payload = json.loads(capsys.readouterr().err.strip())
    assert payload["message"] == "structured message"
    assert payload["logger"] == "json.logger"
    assert payload["level"] == "INFO"
    assert payload["percent"] == 33.33


def test_reconfiguring_replaces_handler_and_level(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.delenv("COVGATE_LOG_JSON", raising=False)
    logging_module = _reload_logging(monkeypatch)
    logging_module.configure_logging("DEBUG")
    logging_module.configure_logging("WARNING")
    logger = logging_module.get_logger("quiet.logger")

    logger.info("hidden")
    logger.warning("shown")

    output = capsys.readouterr().err
    assert "hidden" not in output
    assert output.count("shown") == 1
