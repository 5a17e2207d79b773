"""
================================================================================
FAMILY STORE - Families, Members and Part Assignments
================================================================================

Owns every Family record of the process and keeps the JSON data file in sync
with it.

Lifecycle:
    1. FamilyStore(data_file) loads the data file (missing file or parse
       failure -> empty store, logged)
    2. ensure_default_family() seeds the built-in family from the explicit
       distribution table
    3. Mutations (register, add/remove member, set distribution, completion
       changes made by CompletionTracker) each rewrite the whole file

Persistence:
    - Whole-store JSON rewrite after every mutation, no incremental writes
    - Atomic: temp file in the same directory, then os.replace()
    - Cross-process guard: filelock.FileLock on '<data_file>.lock'
    - A failed write is logged and raised as PersistenceError; the in-memory
      change is kept, so memory and disk differ until the next good write

File Format (camelCase field names, shared with existing data files):
    {
        "<family>": {
            "members": [...],
            "chapterDistribution": {"<member>": [ids]},
            "completedParts": {"<member>": [ids]},
            "adminPassword": "...",
            "createdAt": "2026-01-01T10:00:00"
        }
    }

Thread Safety:
    All mutations and the write that follows them run under self.lock
    (re-entrant). CompletionTracker and the nightly reset job take the same
    lock.

================================================================================
"""

import json
import os
import tempfile
import threading
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

import filelock

from src.core.distribution import (
    DEFAULT_DISTRIBUTION,
    AlgorithmicSource,
    Distribution,
    ExplicitSource,
    distribution_overlaps,
)
from src.core.errors import (
    DuplicateFamily,
    DuplicateMember,
    InvalidInput,
    NotFound,
    PersistenceError,
    Unauthorized,
)
from src.utils.constants import TOTAL_PARTS

logger = logging.getLogger("reading_tracker")

LOCK_TIMEOUT_SECONDS = 10


@dataclass
class Family:
    """A named group sharing one reading task."""
    name: str
    members: List[str] = field(default_factory=list)
    distribution: Distribution = field(default_factory=dict)
    completed: Distribution = field(default_factory=dict)
    admin_secret: str = ''
    created_at: Optional[str] = None

    def has_member(self, member: str) -> bool:
        return member in self.members

    def assigned(self, member: str) -> List[int]:
        return self.distribution.get(member, [])

    def clear_completed(self):
        """Empty every member's completed list and drop entries of non-members."""
        self.completed = {member: [] for member in self.members}

    def to_dict(self) -> dict:
        """Convert to the on-disk record."""
        data = {
            'members': list(self.members),
            'chapterDistribution': {m: list(ids) for m, ids in self.distribution.items()},
            'completedParts': {m: list(ids) for m, ids in self.completed.items()},
            'adminPassword': self.admin_secret,
        }
        if self.created_at is not None:
            data['createdAt'] = self.created_at
        return data

    @classmethod
    def from_dict(cls, name: str, data: dict) -> "Family":
        """Create Family from an on-disk record."""
        members = [str(m) for m in data.get('members', [])]
        distribution = {
            str(m): [int(i) for i in ids]
            for m, ids in (data.get('chapterDistribution') or {}).items()
        }
        raw_completed = data.get('completedParts') or {}
        completed = {}
        for m in members:
            ids = [int(i) for i in raw_completed.get(m, [])]
            assigned = set(distribution.get(m, []))
            completed[m] = [i for i in ids if i in assigned]
            if len(completed[m]) != len(ids):
                logger.warning(f"Family {name}: dropped completed parts of {m} "
                               f"not assigned to them: {sorted(set(ids) - assigned)}")
        return cls(
            name=name,
            members=members,
            distribution=distribution,
            completed=completed,
            admin_secret=str(data.get('adminPassword', '')),
            created_at=data.get('createdAt'),
        )

    def summary(self) -> dict:
        return {
            'name': self.name,
            'members': list(self.members),
            'chapterDistribution': {m: list(ids) for m, ids in self.distribution.items()},
        }


def _require_text(value, label: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidInput(f"{label} is required")
    return value


class FamilyStore:
    """
    In-memory table of families backed by one JSON file.
    """

    def __init__(self, data_file: Path, total_items: int = TOTAL_PARTS,
                 clock: Callable[[], datetime] = datetime.now):
        """
        Args:
            data_file: JSON file the store is loaded from and written to
            total_items: Number of parts handed out by round-robin distribution
            clock: Source of creation timestamps
        """
        self.data_file = Path(data_file)
        self.total_items = total_items
        self.clock = clock
        self.lock = threading.RLock()
        self._families: Dict[str, Family] = {}
        self._load()

    # ============ PERSISTENCE ============

    def _load(self):
        """Load families from the data file, empty store on any failure."""
        if not self.data_file.exists():
            logger.info(f"No families file at {self.data_file}; starting with an empty store")
            return

        try:
            with open(self.data_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.error(f"Error loading families data from {self.data_file}: {e}")
            return

        if not isinstance(data, dict):
            logger.error(f"Families file {self.data_file} does not hold a JSON object; ignoring it")
            return

        for name, record in data.items():
            try:
                self._families[name] = Family.from_dict(name, record)
            except (AttributeError, TypeError, ValueError) as e:
                logger.error(f"Skipping malformed family record {name!r}: {e}")

        logger.info(f"Loaded {len(self._families)} families from {self.data_file.name}")

    def save(self):
        """
        Write the whole store to the data file.

        Raises:
            PersistenceError: lock timeout or write failure
        """
        with self.lock:
            payload = {name: family.to_dict() for name, family in self._families.items()}
            target = self.data_file
            lock = filelock.FileLock(str(target) + '.lock', timeout=LOCK_TIMEOUT_SECONDS)
            try:
                target.parent.mkdir(parents=True, exist_ok=True)
                with lock:
                    fd, tmp_path = tempfile.mkstemp(dir=str(target.parent),
                                                    prefix=f".{target.name}.", suffix='.tmp')
                    try:
                        with os.fdopen(fd, 'w', encoding='utf-8') as f:
                            json.dump(payload, f, indent=2, ensure_ascii=False)
                        os.replace(tmp_path, target)
                    except BaseException:
                        if os.path.exists(tmp_path):
                            os.unlink(tmp_path)
                        raise
            except filelock.Timeout as e:
                logger.error(f"Failed to acquire lock for {target}")
                raise PersistenceError(f"Could not lock {target}") from e
            except (OSError, TypeError, ValueError) as e:
                logger.error(f"Error saving families data to {target}: {e}")
                raise PersistenceError(f"Could not save families data: {e}") from e

    # ============ QUERIES ============

    def __contains__(self, name) -> bool:
        with self.lock:
            return name in self._families

    def __len__(self) -> int:
        with self.lock:
            return len(self._families)

    def names(self) -> List[str]:
        with self.lock:
            return list(self._families)

    def families(self) -> List[Family]:
        with self.lock:
            return list(self._families.values())

    def get(self, name: str) -> Family:
        """
        Raises:
            NotFound: no family with that name
        """
        with self.lock:
            family = self._families.get(name)
        if family is None:
            raise NotFound("Family not found")
        return family

    def list_all(self) -> List[dict]:
        """Name, member count and creation time of every family."""
        now = self.clock().isoformat()
        with self.lock:
            return [
                {
                    'name': family.name,
                    'memberCount': len(family.members),
                    'createdAt': family.created_at or now,
                }
                for family in self._families.values()
            ]

    # ============ REGISTRATION / LOGIN ============

    def register(self, name: str, members: Sequence[str], admin_secret: str) -> Family:
        """
        Create a family with a round-robin distribution.

        Raises:
            InvalidInput: missing name/password, empty or malformed member list
            DuplicateFamily: name already taken
        """
        _require_text(name, "Family name")
        _require_text(admin_secret, "Admin password")
        if not isinstance(members, (list, tuple)) or not members:
            raise InvalidInput("Family name, members list, and admin password are required")
        for member in members:
            _require_text(member, "Member name")
        if len(set(members)) != len(members):
            raise InvalidInput("Member names must be unique")

        with self.lock:
            if name in self._families:
                raise DuplicateFamily("Family name already exists")

            members = list(members)
            family = Family(
                name=name,
                members=members,
                distribution=AlgorithmicSource(members, self.total_items).build(),
                admin_secret=admin_secret,
                created_at=self.clock().isoformat(),
            )
            family.clear_completed()
            self._families[name] = family
            logger.info(f"Registered family {name} with {len(members)} members")
            self.save()
            return family

    def login(self, name: str, secret: str) -> Family:
        """
        Raises:
            NotFound: unknown family
            Unauthorized: password mismatch
        """
        family = self.get(name)
        if family.admin_secret != secret:
            raise Unauthorized("Invalid password")
        return family

    def _authorize(self, name: str, secret: str) -> Family:
        family = self.get(name)
        if family.admin_secret != secret:
            raise Unauthorized("Invalid admin password")
        return family

    # ============ MEMBERSHIP ============

    def add_member(self, name: str, member: str, secret: str) -> Family:
        """
        Append a member, redistribute all parts and reset completion.

        Raises:
            NotFound, Unauthorized, InvalidInput, DuplicateMember
        """
        with self.lock:
            family = self._authorize(name, secret)
            _require_text(member, "Member name")
            if family.has_member(member):
                raise DuplicateMember("Member already exists")

            family.members.append(member)
            family.distribution = AlgorithmicSource(family.members, self.total_items).build()
            family.clear_completed()
            logger.info(f"Added member {member} to family {name}; parts redistributed and progress reset")
            self.save()
            return family

    def remove_member(self, name: str, member: str, secret: str) -> Family:
        """
        Remove a member. Remaining members get a fresh distribution and empty
        progress; removing the last member leaves an empty distribution.

        Raises:
            NotFound: unknown family or member
            Unauthorized: password mismatch
        """
        with self.lock:
            family = self._authorize(name, secret)
            if not family.has_member(member):
                raise NotFound("Member not found")

            family.members.remove(member)
            family.completed.pop(member, None)

            if family.members:
                family.distribution = AlgorithmicSource(family.members, self.total_items).build()
                family.clear_completed()
                logger.info(f"Removed member {member} from family {name}; parts redistributed and progress reset")
            else:
                family.distribution = {}
                logger.info(f"Removed last member {member} from family {name}")

            self.save()
            return family

    def set_distribution(self, name: str, distribution: Distribution, secret: str) -> Family:
        """
        Replace the distribution with an admin-supplied mapping, verbatim.

        Coverage and overlap are not checked. Progress is reset.

        Raises:
            NotFound, Unauthorized, InvalidInput (not a mapping of ID lists)
        """
        with self.lock:
            family = self._authorize(name, secret)
            if not isinstance(distribution, dict):
                raise InvalidInput("chapterDistribution must be an object of member -> part IDs")
            for member, ids in distribution.items():
                if not isinstance(ids, list) or not all(
                        isinstance(i, int) and not isinstance(i, bool) for i in ids):
                    raise InvalidInput(f"Part IDs for {member} must be a list of integers")

            family.distribution = {str(m): list(ids) for m, ids in distribution.items()}
            family.clear_completed()
            logger.info(f"Distribution for family {name} replaced by admin ({len(distribution)} entries)")
            self.save()
            return family

    # ============ BUILT-IN FAMILIES ============

    def ensure_default_family(self, name: str, admin_secret: str,
                              table: Optional[Distribution] = None) -> Family:
        """
        Seed the built-in family from the explicit distribution table.

        Runs at every startup. Members, distribution and admin password are
        overwritten. Completion of members still in the table is kept
        (limited to their assigned parts), new members start empty, entries
        of members no longer in the table are dropped.
        """
        source = ExplicitSource(table if table is not None else DEFAULT_DISTRIBUTION)

        with self.lock:
            existing = self._families.get(name)
            previous = existing.completed if existing else {}

            distribution = source.build()
            members = source.members
            completed = {}
            for member in members:
                assigned = set(distribution[member])
                completed[member] = [i for i in previous.get(member, []) if i in assigned]

            self._families[name] = Family(
                name=name,
                members=members,
                distribution=distribution,
                completed=completed,
                admin_secret=admin_secret,
                created_at=(existing.created_at if existing and existing.created_at
                            else self.clock().isoformat()),
            )

            overlaps = distribution_overlaps(distribution)
            if overlaps:
                logger.info(f"Family {name}: parts shared by several members: {sorted(overlaps)}")
            logger.info(f"Ensured built-in family {name} with {len(members)} members")
            self.save()
            return self._families[name]

    def ensure_legacy_family(self, name: str, admin_secret: str,
                             table: Optional[Distribution] = None) -> Optional[Family]:
        """
        Create the legacy family from the explicit table when no family other
        than the built-in one exists. Returns None when nothing was created.
        """
        source = ExplicitSource(table if table is not None else DEFAULT_DISTRIBUTION)

        with self.lock:
            if name in self._families or len(self._families) > 1:
                return None

            family = Family(
                name=name,
                members=source.members,
                distribution=source.build(),
                admin_secret=admin_secret,
                created_at=self.clock().isoformat(),
            )
            family.clear_completed()
            self._families[name] = family
            logger.info(f"Created legacy family {name}")
            self.save()
            return family
