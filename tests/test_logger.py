"""
Logging setup tests: run context, rotating log file, console-only mode.
"""
from logging.handlers import RotatingFileHandler

from src.utils import constants
from src.utils.logger import get_run_context, logger, setup_logging


def test_setup_logging_writes_context_file():
    setup_logging('test')
    logger.info("hello from test")
    for handler in logger.handlers:
        handler.flush()

    log_files = list(constants.LOG_DIR.glob('*.test.log'))
    assert get_run_context() == 'test'
    assert len(log_files) == 1
    content = log_files[0].read_text(encoding='utf-8')
    assert "INFO [test]: hello from test" in content


def test_console_only_logging():
    setup_logging('cli', log_to_file=False)

    assert not any(isinstance(h, RotatingFileHandler) for h in logger.handlers)
    assert len(logger.handlers) == 1
    assert not constants.LOG_DIR.exists()


def test_repeated_setup_replaces_handlers():
    setup_logging('web')
    setup_logging('web')

    assert len(logger.handlers) == 2
