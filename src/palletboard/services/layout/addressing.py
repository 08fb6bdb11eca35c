"""Location identifiers for the rack and the floor storage zone.

Rack ids follow ``A-{col}-{level}[-{subpos}]`` and floor ids ``ZA-{n}``.
The rack has nine columns; each column holds one slot at level 3, three
slots at level 0 (H, M, B), two at level 1 (H, B) and a single bottom slot
at level 2.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Literal, Optional

RACK_PREFIX = "A"
FLOOR_PREFIX = "ZA"
RACK_COLUMNS = tuple(range(1, 10))
FLOOR_SLOT_COUNT = 18

# Generation order of levels within a column.
LEVEL_ORDER = (0, 1, 2, 3)
LEVEL_SUBPOSITIONS: dict[int, tuple[str, ...]] = {
    0: ("H", "M", "B"),
    1: ("H", "B"),
    2: ("B",),
    3: (),
}

SUBPOSITION_PRIORITY = {"": -1, "B": 0, "M": 1, "H": 2}
SUBPOSITION_LABELS = {"H": "HAUT", "M": "MILIEU", "B": "BAS"}

GridSection = Literal["FULL", "SECTION_1", "SECTION_2", "SECTION_3"]
GRID_SECTIONS: dict[str, list[list[int]]] = {
    "FULL": [[9, 8, 7], [6, 5, 4], [3, 2, 1]],
    "SECTION_1": [[3, 2, 1]],
    "SECTION_2": [[6, 5, 4]],
    "SECTION_3": [[9, 8, 7]],
}
SECTION_CYCLE: tuple[str, ...] = ("FULL", "SECTION_1", "SECTION_2", "SECTION_3")

_RACK_PATTERN = re.compile(r"^A-(\d+)-(\d+)(?:-([HMB]))?$")
_FLOOR_PATTERN = re.compile(r"^ZA-(\d+)$")
_NATURAL_CHUNK = re.compile(r"(\d+)")


@dataclass(frozen=True, slots=True)
class ParsedLocation:
    zone: str
    col: Optional[int] = None
    level: Optional[int] = None
    subpos: Optional[str] = None
    index: Optional[int] = None

    @property
    def is_floor(self) -> bool:
        return self.zone == FLOOR_PREFIX


def rack_location_id(col: int, level: int, subpos: str | None = None) -> str:
    base = f"{RACK_PREFIX}-{col}-{level}"
    return f"{base}-{subpos}" if subpos else base


def floor_location_id(index: int) -> str:
    return f"{FLOOR_PREFIX}-{index}"


def generate_all_location_ids() -> list[str]:
    """Return every slot id of the board, rack first then floor."""
    ids: list[str] = []
    for col in RACK_COLUMNS:
        for level in LEVEL_ORDER:
            subpositions = LEVEL_SUBPOSITIONS[level]
            if not subpositions:
                ids.append(rack_location_id(col, level))
                continue
            ids.extend(rack_location_id(col, level, subpos) for subpos in subpositions)
    ids.extend(floor_location_id(index) for index in range(1, FLOOR_SLOT_COUNT + 1))
    return ids


def is_floor_zone(location_id: str) -> bool:
    return location_id.startswith(FLOOR_PREFIX)


def parse_location(location_id: str) -> ParsedLocation | None:
    """Decode a location id; returns ``None`` for anything not in the grammar."""
    if not isinstance(location_id, str):
        return None
    floor_match = _FLOOR_PATTERN.match(location_id)
    if floor_match:
        return ParsedLocation(zone=FLOOR_PREFIX, index=int(floor_match.group(1)))
    rack_match = _RACK_PATTERN.match(location_id)
    if rack_match:
        return ParsedLocation(
            zone=RACK_PREFIX,
            col=int(rack_match.group(1)),
            level=int(rack_match.group(2)),
            subpos=rack_match.group(3),
        )
    return None


def _natural_key(value: str) -> tuple:
    return tuple(int(chunk) if chunk.isdigit() else chunk.lower() for chunk in _NATURAL_CHUNK.split(value))


def location_sort_key(location_id: str) -> tuple:
    """Sort key placing floor ids last and rack subpositions in B, M, H order."""
    if is_floor_zone(location_id):
        return (1, _natural_key(location_id), -1)
    parts = location_id.split("-")
    base = "-".join(parts[:3])
    subpos = parts[3] if len(parts) > 3 else ""
    return (0, _natural_key(base), SUBPOSITION_PRIORITY.get(subpos, len(SUBPOSITION_PRIORITY)))


def sort_location_ids(location_ids: Iterable[str]) -> list[str]:
    return sorted(location_ids, key=location_sort_key)


def position_label(location_id: str) -> str:
    """Human label of the position inside a column (``HAUT``, ``BAS``, ``#3``)."""
    parsed = parse_location(location_id)
    if parsed is None:
        return ""
    if parsed.is_floor:
        return f"#{parsed.index}"
    if parsed.subpos is None:
        return str(parsed.level)
    # Level 2 only has a bottom slot, so its position is implicit.
    if parsed.level == 2:
        return ""
    return SUBPOSITION_LABELS[parsed.subpos]


def format_location(location_id: str) -> str:
    """Label used in tabular exports, e.g. ``A - 5 - 0 (BAS)`` or ``ZONE A - 3``."""
    if is_floor_zone(location_id):
        return location_id.replace(f"{FLOOR_PREFIX}-", "ZONE A - ", 1)
    parts = location_id.split("-")
    label = " - ".join(parts[:3])
    subpos = parts[3] if len(parts) > 3 else ""
    if subpos == "H":
        return f"{label} HAUT"
    if subpos in SUBPOSITION_LABELS:
        return f"{label} ({SUBPOSITION_LABELS[subpos]})"
    return label


def section_columns(section: str) -> list[list[int]]:
    try:
        return GRID_SECTIONS[section]
    except KeyError as exc:
        raise ValueError(f"Unknown grid section '{section}'.") from exc


def next_section(section: str) -> str:
    index = SECTION_CYCLE.index(section)
    return SECTION_CYCLE[(index + 1) % len(SECTION_CYCLE)]


def previous_section(section: str) -> str:
    index = SECTION_CYCLE.index(section)
    return SECTION_CYCLE[(index - 1) % len(SECTION_CYCLE)]


def column_location_ids(col: int) -> list[str]:
    """Slot ids of one rack column, top level first as drawn on the grid."""
    ids: list[str] = []
    for level in sorted(LEVEL_ORDER, reverse=True):
        subpositions = LEVEL_SUBPOSITIONS[level]
        if not subpositions:
            ids.append(rack_location_id(col, level))
            continue
        ids.extend(rack_location_id(col, level, subpos) for subpos in subpositions)
    return ids
