import logging
import pytest
from logging.handlers import RotatingFileHandler

from msp_launcher.log import setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_console_only_by_default(monkeypatch):
    monkeypatch.setattr("msp_launcher.settings.LOG_FILE_PATH", None)
    setup_logging(logging.DEBUG)
    root = logging.getLogger()
    assert len(root.handlers) == 1
    assert root.handlers[0].level == logging.DEBUG


def test_repeated_setup_does_not_duplicate_handlers(monkeypatch):
    monkeypatch.setattr("msp_launcher.settings.LOG_FILE_PATH", None)
    setup_logging()
    setup_logging()
    assert len(logging.getLogger().handlers) == 1


def test_log_file_receives_records(tmp_path):
    log_file = tmp_path / "launcher.log"
    setup_logging(logging.WARNING, log_file=str(log_file))
    root = logging.getLogger()
    assert any(isinstance(h, RotatingFileHandler) for h in root.handlers)

    logging.getLogger("msp_launcher.test").debug("debug goes to the file")
    for handler in root.handlers:
        handler.flush()
    assert "debug goes to the file" in log_file.read_text(encoding="utf-8")
