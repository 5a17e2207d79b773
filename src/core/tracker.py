"""
Completion Tracker

Marks parts complete per member and resets progress. Works on Family records
owned by FamilyStore and persists through it; holds no state of its own.
"""

import logging
from datetime import datetime
from typing import Dict, Iterable, List, Union

from src.core.content import Part, parts_by_id
from src.core.errors import InvalidTarget
from src.core.family_store import Family, FamilyStore

logger = logging.getLogger("reading_tracker")

FamilyRef = Union[Family, str]


class CompletionTracker:
    """Per-member completion state on top of a FamilyStore."""

    def __init__(self, store: FamilyStore):
        self.store = store

    def _family(self, family: FamilyRef) -> Family:
        if isinstance(family, Family):
            return family
        return self.store.get(family)

    @staticmethod
    def _require_member(family: Family, member: str):
        if not family.has_member(member):
            raise InvalidTarget(f"User {member} not found in family {family.name}")

    def mark_complete(self, family: FamilyRef, member: str, part_id: int) -> bool:
        """
        Mark one part complete for a member.

        Returns:
            True if the part was newly marked, False if it already was

        Raises:
            InvalidTarget: member not in family, or part not assigned to member
        """
        with self.store.lock:
            family = self._family(family)
            if not family.has_member(member) or part_id not in family.assigned(member):
                raise InvalidTarget("Invalid user or part ID")

            completed = family.completed.setdefault(member, [])
            if part_id in completed:
                return False

            completed.append(part_id)
            self.store.save()
            return True

    def complete_all(self, family: FamilyRef, member: str) -> List[int]:
        """Set a member's completed parts to everything assigned to them."""
        with self.store.lock:
            family = self._family(family)
            self._require_member(family, member)

            family.completed[member] = list(family.assigned(member))
            self.store.save()
            return list(family.completed[member])

    def apply_auto_completers(self, family: FamilyRef, names: Iterable[str]) -> List[str]:
        """
        Complete all parts of each listed member who belongs to the family.

        Returns:
            Names that were applied, in the given order
        """
        with self.store.lock:
            family = self._family(family)
            applied = [name for name in names if family.has_member(name)]
            for name in applied:
                family.completed[name] = list(family.assigned(name))
            self.store.save()
            logger.info(f"Auto completers applied for family {family.name}: {applied}")
            return applied

    def reset_family(self, family: FamilyRef):
        with self.store.lock:
            family = self._family(family)
            family.clear_completed()
            self.store.save()
            logger.info(f"Completed parts reset for family {family.name} at {datetime.now():%Y-%m-%d %H:%M:%S}")

    def reset_all(self):
        with self.store.lock:
            for family in self.store.families():
                family.clear_completed()
            self.store.save()
            logger.info(f"Completed parts reset for all families at {datetime.now():%Y-%m-%d %H:%M:%S}")

    # ============ VIEWS ============

    def status(self, family: FamilyRef) -> Dict[str, dict]:
        """Completed part IDs and assigned count per member."""
        with self.store.lock:
            family = self._family(family)
            return {
                member: {
                    'completed': list(family.completed.get(member, [])),
                    'total': len(family.assigned(member)),
                }
                for member in family.members
            }

    def progress(self, family: FamilyRef) -> Dict[str, dict]:
        """Completed and assigned counts per member."""
        return {
            member: {'completedCount': len(entry['completed']), 'totalCount': entry['total']}
            for member, entry in self.status(family).items()
        }

    def member_parts(self, family: FamilyRef, member: str, parts: List[Part]) -> dict:
        """
        Parts assigned to a member, with their text, and the member's
        completed IDs.
        """
        with self.store.lock:
            family = self._family(family)
            self._require_member(family, member)
            assigned = sorted(set(family.assigned(member)))
            completed = list(family.completed.get(member, []))

        index = parts_by_id(parts)
        return {
            'userParts': [index[i].to_dict() for i in assigned if i in index],
            'completed': completed,
        }
