import logging

from features.proxy_monitor.infrastructure.logging_config import RedactingFormatter, configure_logging


def test_credentials_are_redacted():
    formatter = RedactingFormatter("%(message)s")
    record = logging.LogRecord("smtp", logging.INFO, __file__, 1, "login password=hunter2 ok", None, None)
    assert formatter.format(record) == "login password=[REDACTED] ok"


def test_configure_logging_installs_single_handler():
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        configure_logging("debug")
        configure_logging("warning")
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, RedactingFormatter)
        assert root.level == logging.WARNING
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
