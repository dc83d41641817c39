"""Tests for loguru setup."""

import sys

import pytest
from loguru import logger

from token_audit.utils.logger import setup_logger


@pytest.fixture(autouse=True)
def restore_logger():
    yield
    logger.remove()
    logger.add(sys.stderr)


def test_env_level_applies_by_default(monkeypatch, capsys):
    monkeypatch.setenv("LOG_LEVEL", "ERROR")
    setup_logger(level="DEBUG", log_dir=None)
    logger.warning("quiet warning")
    assert "quiet warning" not in capsys.readouterr().out


def test_explicit_level_beats_env(monkeypatch, capsys):
    monkeypatch.setenv("LOG_LEVEL", "ERROR")
    setup_logger(level="DEBUG", log_dir=None, respect_env=False)
    logger.debug("verbose detail")
    assert "verbose detail" in capsys.readouterr().out
