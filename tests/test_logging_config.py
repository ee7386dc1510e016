import json
import logging
import sys

from backend.config import get_settings
from backend.main import _configure_logging


def test_settings_reads_log_format_from_env(monkeypatch) -> None:
    monkeypatch.setenv("LOG_FORMAT", "json")
    get_settings.cache_clear()

    settings = get_settings()

    assert settings.log_format == "json"


def test_configure_logging_uses_json_formatter(monkeypatch) -> None:
    monkeypatch.setenv("ENV", "prod")
    monkeypatch.setenv("LOG_FORMAT", "json")
    get_settings.cache_clear()

    _configure_logging()
    root = logging.getLogger()
    assert root.handlers
    formatter = root.handlers[0].formatter
    assert formatter is not None

    record = logging.LogRecord(
        name="test.logger",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="hello",
        args=(),
        exc_info=None,
    )
    rendered = formatter.format(record)
    payload = json.loads(rendered)

    assert payload["message"] == "hello"
    assert payload["name"] == "test.logger"
    assert payload["levelname"] == "INFO"


def test_json_formatter_includes_exception_text(monkeypatch) -> None:
    monkeypatch.setenv("LOG_FORMAT", "json")
    get_settings.cache_clear()

    _configure_logging()
    formatter = logging.getLogger().handlers[0].formatter
    assert formatter is not None

    try:
        raise ValueError("broken autosave")
    except ValueError:
        record = logging.LogRecord(
            name="backend.services.persistence",
            level=logging.WARNING,
            pathname=__file__,
            lineno=1,
            msg="Autosave failed for newsletter %s",
            args=("doc-1",),
            exc_info=sys.exc_info(),
        )
    payload = json.loads(formatter.format(record))

    assert payload["message"] == "Autosave failed for newsletter doc-1"
    assert "ValueError: broken autosave" in payload["exc_info"]


def test_text_format_is_default(monkeypatch) -> None:
    monkeypatch.delenv("LOG_FORMAT", raising=False)
    monkeypatch.setenv("ENV", "dev")
    get_settings.cache_clear()

    _configure_logging()
    root = logging.getLogger()

    assert root.level == logging.DEBUG
    assert root.handlers[0].formatter is not None
    assert not root.handlers[0].formatter.format(
        logging.LogRecord("x", logging.INFO, __file__, 1, "plain", (), None)
    ).startswith("{")
    get_settings.cache_clear()
