"""
Tests for logging helpers.
"""

import io
import logging

import pytest

from chainbind.utils.logging import (
    ROOT_LOGGER_NAME,
    configure_logging,
    disable_logging,
    enable_debug,
    get_logger,
    set_level,
)


@pytest.fixture(autouse=True)
def _restore_root_logger():
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    handlers = list(logger.handlers)
    level = logger.level
    yield
    logger.handlers = handlers
    logger.setLevel(level)
    logger.disabled = False


class TestGetLogger:
    def test_root(self) -> None:
        assert get_logger().name == "chainbind"
        assert get_logger("chainbind").name == "chainbind"

    def test_module_names(self) -> None:
        assert get_logger("chainbind.contract.binder").name == "chainbind.contract.binder"

    def test_foreign_names_nested(self) -> None:
        assert get_logger("myapp").name == "chainbind.myapp"

    def test_null_handler_installed(self) -> None:
        assert any(isinstance(h, logging.NullHandler) for h in get_logger().handlers)


class TestConfigureLogging:
    def test_writes_to_handler(self) -> None:
        stream = io.StringIO()
        configure_logging(logging.INFO, handler=logging.StreamHandler(stream))

        get_logger("chainbind.test").info("hello %s", "world")

        assert "hello world" in stream.getvalue()
        assert "[chainbind.test]" in stream.getvalue()

    def test_reconfigure_replaces_handler(self) -> None:
        first = io.StringIO()
        second = io.StringIO()
        configure_logging(handler=logging.StreamHandler(first))
        configure_logging(handler=logging.StreamHandler(second))

        get_logger().warning("only once")

        assert first.getvalue() == ""
        assert "only once" in second.getvalue()

    def test_set_level_and_enable_debug(self) -> None:
        set_level(logging.ERROR)
        assert get_logger().level == logging.ERROR

        enable_debug()
        assert get_logger().level == logging.DEBUG

    def test_disable_logging(self) -> None:
        stream = io.StringIO()
        configure_logging(handler=logging.StreamHandler(stream))

        disable_logging()
        get_logger().error("silenced")

        assert stream.getvalue() == ""
