"""Tests for logging configuration.

Validates formatter output (human and JSON), contextual fields and
idempotent setup.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from icon_transcoder.utils.logging_config import (
    ContextFormatter,
    get_context,
    log_context,
    pop_context,
    push_context,
    setup_logging,
)


def _record(msg: str = "hello", level: int = logging.INFO) -> logging.LogRecord:
    return logging.LogRecord("icon_transcoder.test", level, __file__, 1, msg, None, None)


@pytest.fixture(autouse=True)
def clean_context() -> Iterator[None]:
    pop_context()
    yield
    pop_context()
    setup_logging(to_stderr=False, capture_warnings=False)


# ---------------------------------------------------------------------------
# Formatter
# ---------------------------------------------------------------------------


class TestFormatter:
    def test_human_includes_context(self) -> None:
        push_context(source="close.scene.yaml")
        line = ContextFormatter("human").format(_record())
        assert "INFO" in line
        assert "source=close.scene.yaml" in line
        assert line.endswith("| hello")

    def test_json_line(self) -> None:
        push_context(app="batch")
        payload = json.loads(ContextFormatter("json").format(_record("done")))
        assert payload["lvl"] == "INFO"
        assert payload["app"] == "batch"
        assert payload["msg"] == "done"

    def test_unknown_mode(self) -> None:
        with pytest.raises(ValueError, match="format mode"):
            ContextFormatter("xml")


# ---------------------------------------------------------------------------
# Context
# ---------------------------------------------------------------------------


class TestContext:
    def test_push_and_pop(self) -> None:
        push_context(a=1, b=2)
        pop_context(keys=["a"])
        assert get_context() == {"b": 2}

    def test_log_context_restores(self) -> None:
        push_context(app="batch")
        with log_context(source="x"):
            assert get_context() == {"app": "batch", "source": "x"}
        assert get_context() == {"app": "batch"}

    def test_log_context_restores_on_error(self) -> None:
        with pytest.raises(RuntimeError):
            with log_context(source="x"):
                raise RuntimeError("boom")
        assert get_context() == {}


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------


class TestSetup:
    def test_idempotent(self) -> None:
        first = setup_logging("INFO")
        second = setup_logging("INFO")
        root = logging.getLogger()
        assert len(first) == len(second) == 1
        assert first[0] not in root.handlers
        assert second[0] in root.handlers

    def test_level(self) -> None:
        setup_logging("WARNING", to_stderr=False)
        assert logging.getLogger().level == logging.WARNING

    def test_unknown_level(self) -> None:
        with pytest.raises(ValueError, match="Unknown log level"):
            setup_logging("LOUD")

    def test_file_handler(self, tmp_path: Path) -> None:
        log_file = tmp_path / "logs" / "transcode.log"
        setup_logging("INFO", str(log_file), json=True, to_stderr=False)
        logging.getLogger("icon_transcoder.test").info("written")
        for handler in logging.getLogger().handlers:
            handler.flush()
        line = log_file.read_text(encoding="utf-8").strip().splitlines()[-1]
        assert json.loads(line)["msg"] == "written"
