"""Tests for structlog configuration."""

import json
import logging

import pytest
import structlog

from foundry.logging_config import bind_run_context, clear_run_context, configure_logging


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    clear_run_context()
    structlog.reset_defaults()


class TestConfigureLogging:
    def test_single_handler_and_level(self):
        configure_logging("debug")

        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert root.level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self):
        configure_logging("chatty")
        assert logging.getLogger().level == logging.INFO

    def test_json_records_go_to_stderr_with_run_context(self, capsys):
        configure_logging("info", json_output=True)
        bind_run_context("acme", "svc")

        logging.getLogger("foundry.services").info("Environment %s created", "production")

        captured = capsys.readouterr()
        assert captured.out == ""
        record = json.loads(captured.err.strip().splitlines()[-1])
        assert record["event"] == "Environment production created"
        assert record["owner"] == "acme"
        assert record["repo"] == "svc"
        assert record["level"] == "info"

    def test_clear_run_context(self, capsys):
        configure_logging("info", json_output=True)
        bind_run_context("acme", "svc")
        clear_run_context()

        logging.getLogger("foundry").warning("done")

        record = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert "owner" not in record
