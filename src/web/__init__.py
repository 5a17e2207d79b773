"""
================================================================================
WEB MODULE - HTTP API and Scheduling
================================================================================

Components:
    server.py - Flask JSON API over the family store and completion tracker
    scheduler.py - Nightly completion reset (APScheduler)

Note:
    Server is imported directly by cli.py and by running server.py.
    No exports in __init__.py to avoid importing Flask for core-only use.

Usage:
    python cli.py web
    python src/web/server.py

================================================================================
"""

__all__ = []
