"""
================================================================================
SRC PACKAGE - Modular Source Code Organization
================================================================================

Top-level package of the family reading tracker.

Package Structure:
    src/core/      - Core logic (content loader, distribution, family store,
                     completion tracker)
    src/utils/     - Shared utilities (logging, config, constants)
    src/web/       - HTTP API and nightly reset scheduler

Design Principles:
    - Core has no web dependencies
    - One FamilyStore object owns all family state
    - Test-friendly architecture (injectable paths and clocks)

================================================================================
"""

__version__ = "2026.1"
