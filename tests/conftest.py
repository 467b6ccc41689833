"""Shared pytest fixtures for SyncFilter tests."""
import logging
import os
from pathlib import Path
from typing import List

import pytest

import syncfilter.core.config as config_module
import syncfilter.core.logging as logging_module
from syncfilter.core.logging import Logger, LogLevel, set_global_logger
from syncfilter.rules.chain import FilterChain


class ListHandler(logging.Handler):
    """Collect formatted log messages in memory."""

    def __init__(self):
        super().__init__()
        self.messages: List[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.messages.append(record.getMessage())


@pytest.fixture(autouse=True)
def isolated_globals(monkeypatch):
    """Reset the global logger/config and drop SYNCFILTER_* variables."""
    for key in list(os.environ):
        if key.startswith("SYNCFILTER_"):
            monkeypatch.delenv(key)
    monkeypatch.setattr(logging_module, "_global_logger", None)
    monkeypatch.setattr(config_module, "_global_config", None)


@pytest.fixture
def list_handler() -> ListHandler:
    """A logging handler that records messages."""
    return ListHandler()


@pytest.fixture
def log_messages() -> List[str]:
    """Install a DEBUG logger that records messages and return the list."""
    handler = ListHandler()
    set_global_logger(Logger(name="syncfilter.test", level=LogLevel.DEBUG, handlers=[handler]))
    return handler.messages


@pytest.fixture
def chain() -> FilterChain:
    """An empty filter chain."""
    return FilterChain()


@pytest.fixture
def sample_rules() -> str:
    """A valid rule file body."""
    return (
        "# ignore build artifacts and editor swap files\n"
        "-N:*.tmp\n"
        "\n"
        "-p:build/*\n"
        "+nr:^keep_.*$\n"
    )


@pytest.fixture
def rules_file(tmp_path: Path, sample_rules: str) -> Path:
    """A rule file on disk containing sample_rules."""
    path = tmp_path / ".syncignore"
    path.write_text(sample_rules, encoding="utf-8")
    return path
