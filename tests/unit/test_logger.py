import json
import logging

from page_matchers.utils import logger
from page_matchers.utils.config import LogLevel


def test_set_log_level_sets_namespace_level_only():
    log = logger.get_logger("page_matchers.core.runner")
    root = logging.getLogger(logger.ROOT)
    before = root.level
    try:
        logger.set_log_level("debug")
        assert root.level == logging.DEBUG
        assert log.isEnabledFor(logging.DEBUG)
        logger.set_log_level(LogLevel.ERROR)
        assert not log.isEnabledFor(logging.WARNING)
        assert all(h.level == logging.NOTSET for h in root.handlers)
    finally:
        root.setLevel(before)


def test_bound_context_lands_in_json_lines():
    record = logging.LogRecord("page_matchers.cli", logging.INFO, __file__, 1, "PASS [%d]", (1,), None)
    logger.bind(suite="checkout")
    try:
        assert logger._ContextFilter().filter(record)
    finally:
        logger.unbind("suite")

    line = json.loads(logger.JsonLinesFormatter().format(record))
    assert line["suite"] == "checkout"
    assert line["msg"] == "PASS [1]"
    assert line["level"] == "INFO"
    assert "suite" not in logger._context
