"""
================================================================================
CONSTANTS - System-Wide Configuration Values
================================================================================

Centralized repository for the hardcoded constants used by the reading
tracker. Organized by functional category.

Constant Categories:
    1. File Paths - Directory and file locations
    2. Reading Content - Corpus size and part delimiter
    3. Families - Built-in family names and admin passwords
    4. Scheduler - Nightly reset time
    5. Server - Default bind address

Key Constants:

    TOTAL_PARTS = 150
        Number of parts distributed by the round-robin engine

    PART_DELIMITER = 'part'
        Literal token preceding every part in the content file

    DEFAULT_RESET_TIME = '22:00'
        Local wall-clock time of the daily completion reset

File Path Constants:
    All paths are relative to BASE_DIR (current working directory)
    Supports monkeypatching for test isolation

Usage:
    from src.utils.constants import FAMILIES_FILE, TOTAL_PARTS

Note:
    Values in this file are STATIC. For runtime-configurable settings,
    use config.json via src.utils.config module.

================================================================================
"""

from pathlib import Path

# ==========================================
# FILE PATHS
# ==========================================
BASE_DIR = Path.cwd()
OUTPUT_DIR = BASE_DIR / 'outputs'
LOG_DIR = OUTPUT_DIR / 'logs'
CONFIG_FILE = BASE_DIR / 'configs' / 'config.json'
FAMILIES_FILE = BASE_DIR / 'families.json'
CONTENT_FILE = BASE_DIR / 'tehilim.txt'

# ==========================================
# READING CONTENT
# ==========================================
TOTAL_PARTS = 150  # Tehilim chapters
PART_DELIMITER = 'part'
CONTENT_ENCODING = 'utf-8'

# ==========================================
# FAMILIES
# ==========================================
DEFAULT_FAMILY_NAME = 'gueta'
DEFAULT_FAMILY_PASSWORD = 'gueta123'
LEGACY_FAMILY_NAME = 'original'
LEGACY_FAMILY_PASSWORD = 'admin123'

# Members whose whole share is marked complete by /setAutoCompleters
AUTO_COMPLETERS = ['דור', 'חנה', 'סימון', 'עפרה', 'ניתאי', 'אליה', 'יוסף', 'גיא']

# ==========================================
# SCHEDULER
# ==========================================
DEFAULT_RESET_TIME = '22:00'
RESET_INTERVAL_HOURS = 24
RESET_JOB_ID = 'nightly_reset'

# ==========================================
# SERVER
# ==========================================
SERVER_HOST = '0.0.0.0'
SERVER_PORT = 3002
