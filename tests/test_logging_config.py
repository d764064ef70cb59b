"""
Tests for the queue-based logging setup.
"""
import logging
import logging.handlers

import pytest

from recommendation_service.logging_config import (
    NOISY_LOGGERS,
    ThreadSafeLoggingConfig,
    get_logger,
)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    noisy_levels = {name: logging.getLogger(name).level for name in NOISY_LOGGERS}
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)
    for name, noisy_level in noisy_levels.items():
        logging.getLogger(name).setLevel(noisy_level)


def test_setup_installs_queue_handler(restore_root_logger):
    config = ThreadSafeLoggingConfig()
    try:
        config.setup_logging(debug=False)
        root = restore_root_logger
        assert config.active
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0], logging.handlers.QueueHandler)
        assert root.level == logging.INFO
        for name in NOISY_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING
    finally:
        config.stop()
    assert not config.active


def test_debug_mode_and_repeated_setup(restore_root_logger):
    config = ThreadSafeLoggingConfig()
    try:
        config.setup_logging(debug=True)
        config.setup_logging(debug=True)
        assert restore_root_logger.level == logging.DEBUG
        assert len(restore_root_logger.handlers) == 1
    finally:
        config.stop()


def test_get_logger_returns_named_logger():
    assert get_logger("recommendation_service.test").name == "recommendation_service.test"
