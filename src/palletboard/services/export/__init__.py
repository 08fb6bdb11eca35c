"""Export services."""

from .tsv import returns_to_tsv, sas_to_tsv, slot_line, slots_to_tsv

__all__ = [
    "slots_to_tsv",
    "slot_line",
    "returns_to_tsv",
    "sas_to_tsv",
]
