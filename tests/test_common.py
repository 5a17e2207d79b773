"""
================================================================================
TEST COMMON - Shared Test Infrastructure
================================================================================

Provides shared constants and helpers for all test suites.

Exported Utilities:
    FIXED_NOW - Frozen clock value for stores and schedulers
    read_data_file(path) - Parse a families JSON file
    write_data_file(path, data) - Write a families JSON file

Usage:
    from test_common import FIXED_NOW, read_data_file

================================================================================
"""
import json
from datetime import datetime
from pathlib import Path

FIXED_NOW = datetime(2026, 3, 2, 10, 30, 0)


def read_data_file(path: Path) -> dict:
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def write_data_file(path: Path, data: dict):
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, ensure_ascii=False)
