"""
================================================================================
CORE MODULE - Core Business Logic
================================================================================

Central package for part distribution, family records and completion state.

Exported Classes:
    Part - One numbered part of the reading text
    Family - Members, distribution, completion and admin password of a family
    FamilyStore - All families, persisted to one JSON file
    CompletionTracker - Mark complete / complete all / reset / status
    AlgorithmicSource, ExplicitSource - Distribution sources

Exported Functions:
    load_parts, load_parts_file - Split the content file into parts
    distribute - Round-robin distribution of part IDs

Usage:
    from src.core import FamilyStore, CompletionTracker
    from src.core.errors import NotFound

================================================================================
"""

from src.core.content import Part, load_parts, load_parts_file, parts_by_id
from src.core.distribution import (
    DEFAULT_DISTRIBUTION,
    AlgorithmicSource,
    ExplicitSource,
    distribute,
    distribution_overlaps,
)
from src.core.family_store import Family, FamilyStore
from src.core.tracker import CompletionTracker

__all__ = [
    'Part',
    'load_parts',
    'load_parts_file',
    'parts_by_id',
    'DEFAULT_DISTRIBUTION',
    'AlgorithmicSource',
    'ExplicitSource',
    'distribute',
    'distribution_overlaps',
    'Family',
    'FamilyStore',
    'CompletionTracker',
]
