"""Fixtures shared by all test packages."""

import logging

import pytest

from native_stage.common import PACKAGE_LOGGER


@pytest.fixture(autouse=True)
def restore_package_logger():
    """Undo handler and level changes made to the package logger by a test."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    handlers = list(logger.handlers)
    level = logger.level
    yield logger
    for handler in logger.handlers:
        if handler not in handlers:
            handler.close()
    logger.handlers[:] = handlers
    logger.setLevel(level)
