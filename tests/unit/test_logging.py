"""Tests for the gitsigns.logging module."""

from __future__ import annotations

import json
import logging
import os
from unittest.mock import patch

import pytest
import structlog

from gitsigns.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_default_level_is_warning(self) -> None:
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("GITSIGNS_LOG_LEVEL", None)
            configure_logging()

        assert logging.getLogger().level == logging.WARNING

    def test_custom_level(self) -> None:
        configure_logging(level=logging.DEBUG)
        assert logging.getLogger().level == logging.DEBUG

    def test_level_from_env(self) -> None:
        with patch.dict(os.environ, {"GITSIGNS_LOG_LEVEL": "info"}):
            configure_logging()
        assert logging.getLogger().level == logging.INFO

    def test_unknown_level_falls_back_to_warning(self) -> None:
        with patch.dict(os.environ, {"GITSIGNS_LOG_LEVEL": "chatty"}):
            configure_logging()
        assert logging.getLogger().level == logging.WARNING

    def test_single_handler_after_reconfigure(self) -> None:
        configure_logging()
        configure_logging()
        assert len(logging.getLogger().handlers) == 1

    def test_json_output_via_env(self, capsys: pytest.CaptureFixture[str]) -> None:
        with patch.dict(os.environ, {"GITSIGNS_LOG_FORMAT": "json"}):
            configure_logging(level=logging.INFO)

        get_logger("gitsigns.test").info("diff_finished", hunks=3)

        captured = capsys.readouterr()
        assert captured.out == ""
        record = json.loads(captured.err.strip().splitlines()[-1])
        assert record["event"] == "diff_finished"
        assert record["hunks"] == 3
        assert record["level"] == "info"
        assert record["logger"] == "gitsigns.test"

    def test_stdlib_records_share_renderer(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(force_json=True, level=logging.INFO)

        logging.getLogger("plain.stdlib").info("hello %s", "world")

        record = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert record["event"] == "hello world"


class TestContext:
    def test_bound_context_in_records(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(force_json=True, level=logging.INFO)
        bind_context(operation="run_blame", toplevel="/repo")
        try:
            get_logger("gitsigns.test").info("blame_started")
        finally:
            clear_context()

        record = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert record["operation"] == "run_blame"
        assert record["toplevel"] == "/repo"

    def test_clear_context(self) -> None:
        bind_context(path="a.txt")
        clear_context()
        assert structlog.contextvars.get_contextvars() == {}
