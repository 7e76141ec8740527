"""Tests for the package logging setup."""

import logging
from datetime import date

import pytest

from dpsbot.config import Config
from dpsbot.utils.logger import PACKAGE_LOGGER, log_file_path, setup_logger


@pytest.fixture
def fresh_package_logger():
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    saved = package_logger.handlers[:]
    package_logger.handlers.clear()
    yield package_logger
    for handler in package_logger.handlers:
        handler.close()
    package_logger.handlers[:] = saved


def test_log_file_name(tmp_path):
    assert log_file_path(tmp_path, date(2024, 1, 31)) == tmp_path / "dps_bot_20240131.log"


def test_service_records_reach_the_log_file(fresh_package_logger, tmp_path, monkeypatch):
    monkeypatch.setattr(Config, "LOG_DIR", str(tmp_path / "logs"))

    setup_logger("dpsbot.cogs.dps")
    service_logger = logging.getLogger("dpsbot.services.leaderboard")
    service_logger.info("DPS submitted: guild=1 user=2")
    for handler in fresh_package_logger.handlers:
        handler.flush()

    text = log_file_path(tmp_path / "logs").read_text(encoding="utf-8")
    assert "dpsbot.services.leaderboard - INFO - DPS submitted: guild=1 user=2" in text


def test_handlers_are_attached_once(fresh_package_logger, monkeypatch):
    monkeypatch.setattr(Config, "LOG_DIR", "")

    setup_logger("dpsbot.cogs.swords")
    setup_logger("dpsbot.cogs.dps")

    assert len(fresh_package_logger.handlers) == 1


def test_outside_names_are_nested_under_the_package(fresh_package_logger, monkeypatch):
    monkeypatch.setattr(Config, "LOG_DIR", "")
    assert setup_logger("__main__").name == "dpsbot.__main__"
    assert setup_logger("dpsbot").name == "dpsbot"
