"""
Distribution Engine

Assigns part IDs to family members.

Two distribution sources exist:
    AlgorithmicSource - round-robin over an ordered member list. Item i
        (1-based) goes to members[(i - 1) % len(members)]. Any change to the
        member list changes the whole assignment; there is no incremental
        rebalancing.
    ExplicitSource - a fixed member -> part IDs table. Used for the built-in
        family. Lists may overlap; an overlapping part is tracked per member.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

Distribution = Dict[str, List[int]]


def distribute(members: Sequence[str], total_items: int) -> Distribution:
    """
    Round-robin distribution of items 1..total_items.

    Args:
        members: Ordered member names
        total_items: Number of items to hand out

    Returns:
        Mapping member -> ascending item IDs. Empty if members is empty.
    """
    if not members:
        return {}

    distribution: Distribution = {member: [] for member in members}
    for i in range(1, total_items + 1):
        distribution[members[(i - 1) % len(members)]].append(i)
    return distribution


@dataclass
class AlgorithmicSource:
    members: List[str]
    total_items: int

    def build(self) -> Distribution:
        return distribute(self.members, self.total_items)


@dataclass
class ExplicitSource:
    mapping: Distribution = field(default_factory=dict)

    @property
    def members(self) -> List[str]:
        return list(self.mapping)

    def build(self) -> Distribution:
        return {member: list(ids) for member, ids in self.mapping.items()}


def distribution_overlaps(mapping: Distribution) -> Dict[int, List[str]]:
    """Part IDs assigned to more than one member."""
    owners = defaultdict(list)
    for member, ids in mapping.items():
        for part_id in ids:
            if member not in owners[part_id]:
                owners[part_id].append(member)
    return {part_id: names for part_id, names in sorted(owners.items()) if len(names) > 1}


# Built-in table for the default family. Carried as-is: 28, 51, 65 and 127
# each belong to two members.
DEFAULT_DISTRIBUTION: Distribution = {
    'סבתא': [1, 119],
    'עופר': [2, 55, 108],
    'נועה': [3, 56, 109],
    'גלעד': [4, 57, 110],
    'רותם_ג': [111, 139],
    'עמית': [6, 112, 116],
    'עידן': [7, 113],
    'איתמר': [8, 61, 114],
    'שיר': [9, 62, 115],
    'טל': [10, 59, 63],
    'רועי': [11, 64, 117],
    'אייל': [12, 60, 77, 78, 118],
    'בת_שבע': [13, 50, 54, 66, 107],
    'יפעת': [14, 67, 120],
    'עידו': [15, 68, 129],
    'הילה': [16, 69, 122],
    'איריס': [5, 17, 70, 123],
    'אלי': [18, 71, 127],
    'מור': [19, 72, 104],
    'עדיאל': [73, 103, 126],
    'אליהו': [21, 74, 127],
    'שירה': [22, 75, 128],
    'גלי': [23, 121],
    'חגי': [130, 28],
    'רותם_ד': [25, 131],
    'לירז': [26, 79, 132],
    'לירון': [27, 80, 133],
    'סימון': [28, 81, 134],
    'לילך': [29, 82, 135],
    'גיא': [30, 83, 136],
    'מוריה': [31, 84, 137],
    'דור': [32, 85, 138],
    'חנה': [33, 86],
    'שגיא': [34, 87, 140],
    'אלה': [35, 88, 141],
    'עדי': [36, 47, 142],
    'יהלי': [37, 90, 143],
    'מעיין': [91, 144],
    'אלון': [39, 92, 145],
    'רויטל': [40, 93, 146],
    'סתיו': [41, 94, 147],
    'ליהי': [42, 95, 148],
    'אורי': [43, 96, 149],
    'כפיר': [44, 97, 150],
    'עפרה': [45, 98],
    'אליה': [46, 99],
    'ניתאי': [89, 100],
    'יוסף': [48, 101],
    'מאור': [49, 76, 102],
    'סמדר': [20, 24, 65],
    'נעם': [51, 125],
    'רוני': [52, 58, 105],
    'נווה': [53, 106],
    'הראל': [65, 51],
}
