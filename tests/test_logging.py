"""Tests for logging.py – config-driven setup and per-run context."""
import logging
import sys

import pytest
import structlog

from src.pool_times.config import ScraperConfig
from src.pool_times.logging import bind_run_context, setup_logging


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    quiet = {name: logging.getLogger(name).level for name in ("asyncio", "playwright")}
    yield
    root.handlers, root.level = handlers, level
    for name, lvl in quiet.items():
        logging.getLogger(name).setLevel(lvl)
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()


class TestSetupLogging:
    def test_level_read_from_config(self):
        setup_logging(config=ScraperConfig(_env_file=None, log_level="ERROR"))
        assert logging.getLogger().level == logging.ERROR
        assert logging.getLogger("playwright").level == logging.ERROR

    def test_explicit_level_wins(self):
        setup_logging(log_level="DEBUG", config=ScraperConfig(_env_file=None, log_level="ERROR"))
        assert logging.getLogger().level == logging.DEBUG

    def test_third_party_quiet_at_info(self, config):
        setup_logging(log_level="INFO", config=config)
        assert logging.getLogger("asyncio").level == logging.WARNING
        assert logging.getLogger("playwright").level == logging.WARNING

    def test_third_party_verbose_when_debugging(self, config):
        setup_logging(log_level="DEBUG", config=config)
        assert logging.getLogger("asyncio").level == logging.DEBUG

    def test_handlers_write_to_stderr(self, config):
        setup_logging(config=config)
        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert handlers[0].stream is sys.stderr


class TestBindRunContext:
    def test_binds_url_and_extras(self):
        bind_run_context("https://example.test/cal", summary_only=True)
        assert structlog.contextvars.get_contextvars() == {
            "url": "https://example.test/cal",
            "summary_only": True,
        }

    def test_previous_run_dropped(self):
        bind_run_context("https://example.test/a", attempt=1)
        bind_run_context("https://example.test/b")
        assert structlog.contextvars.get_contextvars() == {"url": "https://example.test/b"}
