import sys
import logging
from typing import Optional
from logging.handlers import RotatingFileHandler

from msp_launcher import settings

LOG_FORMAT = '%(asctime)s - %(levelname)-8s - [%(name)s] - %(message)s'


def setup_logging(console_level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    Configures the root logger for the launcher.
    This sets up a console handler and, when a log file is configured, a
    rotating file handler, clearing any previously configured handlers to
    prevent duplication.

    :param console_level: The logging level for the console output (e.g., logging.INFO).
    :param log_file: Path of the rotating log file. Defaults to settings.LOG_FILE_PATH.
    """
    root_logger = logging.getLogger()
    # Set root level to lowest to capture all messages for handler filtering
    root_logger.setLevel(logging.DEBUG)

    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT)

    # --- Console Handler ---
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # --- File Handler (conditional) ---
    log_file = log_file or settings.LOG_FILE_PATH
    if log_file:
        try:
            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=settings.LOG_FILE_MAX_BYTES,
                backupCount=settings.LOG_FILE_BACKUP_COUNT,
                encoding="utf-8",
            )
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
        except OSError as e:
            root_logger.error(f"Failed to initialize log file handler for '{log_file}': {e}")
