"""
================================================================================
UTILS MODULE - Shared Utilities and Helpers
================================================================================

Shared infrastructure used across all application components.

Exported Functions:
    Logging:
        - setup_logging() - Initialize logging infrastructure
        - set_run_context(context) - Set execution context
        - logger - Main application logger

    Configuration:
        - load_config() - Load configuration from config.json

    Constants:
        - File paths, corpus size, built-in family defaults, scheduler time

Usage:
    from src.utils import logger, load_config
    from src.utils.constants import TOTAL_PARTS

================================================================================
"""

from .logger import setup_logging, set_run_context, logger
from .config import load_config

__all__ = [
    'setup_logging',
    'set_run_context',
    'logger',
    'load_config',
]
