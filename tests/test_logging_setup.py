"""Tests for stderr logging setup."""

import logging
import sys

import pytest

import lbprobe.logging_setup as ls


def _own_handlers(logger):
    # pytest attaches its own capture handlers, which subclass StreamHandler
    return [h for h in logger.handlers if type(h) is logging.StreamHandler]


@pytest.fixture
def logger():
    ls._CONFIGURED = False
    log = logging.getLogger("lbprobe")
    for handler in _own_handlers(log):
        log.removeHandler(handler)
    yield log
    for handler in _own_handlers(log):
        log.removeHandler(handler)
    ls._CONFIGURED = False


class TestSetupLogging:
    def test_writes_to_stderr_only(self, logger):
        ls.setup_logging()
        (handler,) = _own_handlers(logger)
        assert handler.stream is sys.stderr
        assert logger.level == logging.WARNING
        assert logger.propagate is False

    def test_repeat_calls_add_no_handlers(self, logger):
        for _ in range(3):
            ls.setup_logging()
        assert len(_own_handlers(logger)) == 1

    def test_verbose_call_lowers_level(self, logger):
        ls.setup_logging()
        ls.setup_logging(level=logging.DEBUG)
        assert len(_own_handlers(logger)) == 1
        assert logger.level == logging.DEBUG

    def test_child_loggers_share_handler(self, logger):
        ls.setup_logging(level=logging.INFO)
        child = logging.getLogger("lbprobe.plan")
        assert child.getEffectiveLevel() == logging.INFO
        assert not _own_handlers(child)
