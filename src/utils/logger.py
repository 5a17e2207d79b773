"""
================================================================================
LOGGER - Unified Logging Configuration
================================================================================

Centralized logging infrastructure for all application contexts.

Logging Contexts:
    - 'cli' - Command-line interface operations
    - 'web' - HTTP server, API requests and the nightly reset scheduler
    - 'test' - Unit and integration tests
    - 'imported' - Library/module imports (minimal logging)

Log Destinations:
    1. File Logs - outputs/logs/{timestamp}.{context}.log
    2. Console Output - stdout
    3. Rotating Backups - 5MB max per file, 5 backup files

Log Format:
    {timestamp} {level} [{context}]: {message}
    Example: 2026-03-02 22:00:00 INFO [web]: Completed parts reset for all families

Usage:
    from src.utils.logger import set_run_context, logger

    set_run_context('web')
    logger.info('Server starting')

Configuration:
    Logger settings respect LOG_DIR from constants.py

================================================================================
"""

import sys
import logging
from datetime import datetime
from logging.handlers import RotatingFileHandler

LOGGER_NAME = "reading_tracker"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(run_context)s]: %(message)s"

logger = logging.getLogger(LOGGER_NAME)
logger.setLevel(logging.INFO)

# Global run context state
_RUN_CONTEXT = 'imported'


class RunContextFilter(logging.Filter):
    """
    Logging filter that adds run context to all log records
    Allows distinguishing between different execution contexts
    """

    def filter(self, record):
        record.run_context = _RUN_CONTEXT
        return True


def set_run_context(context: str, log_to_file: bool = True):
    """
    Set the execution context for logging

    Args:
        context: String identifier ('web', 'cli', 'test', etc)
        log_to_file: Also write a rotating log file under LOG_DIR
    """
    global _RUN_CONTEXT
    _RUN_CONTEXT = context

    # Clear existing handlers
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()

    if log_to_file:
        from src.utils.constants import LOG_DIR

        try:
            LOG_DIR.mkdir(parents=True, exist_ok=True)
            timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
            log_file = LOG_DIR / f"{timestamp}.{context}.log"

            file_handler = RotatingFileHandler(
                str(log_file),
                maxBytes=5_000_000,  # 5MB
                backupCount=5,
                encoding='utf-8'
            )
            file_handler.setLevel(logging.INFO)
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
            file_handler.addFilter(RunContextFilter())
            logger.addHandler(file_handler)
        except OSError as e:
            # Console logging below still works without a log directory
            print(f"Could not open log file in {LOG_DIR}: {e}", file=sys.stderr)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    console_handler.addFilter(RunContextFilter())
    logger.addHandler(console_handler)


def setup_logging(context: str = 'imported', log_to_file: bool = True):
    """
    Initialize logging for the application

    Args:
        context: Execution context identifier
        log_to_file: Whether to add the rotating file handler
    """
    set_run_context(context, log_to_file=log_to_file)
    return logger


def get_run_context() -> str:
    return _RUN_CONTEXT
