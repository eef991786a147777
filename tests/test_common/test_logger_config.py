"""Tests for the console logging setup."""

import logging

import pytest
from rich.logging import RichHandler

from storefront.common.config.settings import settings
from storefront.common.logger_config import setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root_logger = logging.getLogger()
    handlers, level = list(root_logger.handlers), root_logger.level
    noisy_levels = {name: logging.getLogger(name).level for name in ("requests", "urllib3", "asyncio")}
    yield
    root_logger.handlers = handlers
    root_logger.setLevel(level)
    for name, noisy_level in noisy_levels.items():
        logging.getLogger(name).setLevel(noisy_level)


def test_setup_logging_uses_settings_level(mocker) -> None:
    mocker.patch.object(settings, "LOG_LEVEL", "debug")

    handler = setup_logging()

    assert isinstance(handler, RichHandler)
    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("urllib3").level == logging.WARNING


def test_setup_logging_twice_keeps_a_single_handler() -> None:
    setup_logging("warning")
    handler = setup_logging("error")

    assert logging.getLogger().handlers == [handler]
    assert logging.getLogger().level == logging.ERROR
    assert logging.getLogger("requests").level == logging.ERROR


def test_unknown_level_falls_back_to_info() -> None:
    setup_logging("chatty")

    assert logging.getLogger().level == logging.INFO
