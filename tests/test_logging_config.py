import io
import logging
from datetime import date

import pytest

from bizhub.core.logging_config import ColoredFormatter, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in list(root.handlers):
        root.removeHandler(handler)
        if handler not in handlers:
            handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


class TestSetupLogging:
    def test_console_only_by_default(self, restore_root_logger):
        stream = io.StringIO()
        setup_logging("warning", stream=stream)

        assert restore_root_logger.level == logging.WARNING
        assert len(restore_root_logger.handlers) == 1
        assert "Logging at" not in stream.getvalue()

        logging.getLogger("bizhub.test").warning("stock shortfall clamped")
        output = stream.getvalue()
        assert "stock shortfall clamped" in output
        # not a terminal, so no colour codes
        assert "\033[" not in output

    def test_unknown_level_falls_back_to_info(self, restore_root_logger):
        setup_logging("chatty", stream=io.StringIO())
        assert restore_root_logger.level == logging.INFO

    def test_errors_also_go_to_their_own_file(self, restore_root_logger, tmp_path):
        setup_logging("INFO", log_dir=str(tmp_path / "logs"), stream=io.StringIO())
        logger = logging.getLogger("bizhub.test")
        logger.info("order created")
        logger.error("journal append failed")
        for handler in restore_root_logger.handlers:
            handler.flush()

        today = date.today().isoformat()
        app_log = (tmp_path / "logs" / f"app_{today}.log").read_text(encoding="utf-8")
        error_log = (tmp_path / "logs" / f"error_{today}.log").read_text(encoding="utf-8")
        assert "order created" in app_log and "journal append failed" in app_log
        assert "journal append failed" in error_log
        assert "order created" not in error_log

    def test_noisy_library_loggers_are_quieted(self, restore_root_logger):
        setup_logging("DEBUG", stream=io.StringIO())
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING


class TestColoredFormatter:
    def test_colour_does_not_leak_into_other_handlers(self):
        record = logging.LogRecord("bizhub", logging.ERROR, __file__, 1, "boom", None, None)
        colored = ColoredFormatter("%(levelname)s %(message)s").format(record)
        plain = logging.Formatter("%(levelname)s %(message)s").format(record)
        assert colored.startswith("\033[31m")
        assert plain == "ERROR boom"
