"""Slot addressing helpers."""

from .addressing import (
    ParsedLocation,
    format_location,
    generate_all_location_ids,
    is_floor_zone,
    location_sort_key,
    parse_location,
    position_label,
    sort_location_ids,
)

__all__ = [
    "ParsedLocation",
    "generate_all_location_ids",
    "parse_location",
    "is_floor_zone",
    "location_sort_key",
    "sort_location_ids",
    "position_label",
    "format_location",
]
