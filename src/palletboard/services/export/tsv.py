"""Tab-separated exports pasted into spreadsheets.

Fields are joined raw, without quoting, so the clipboard text matches what
operators type.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from ...models.domain import PalletSlot, ReturnItem, SasItem
from ..layout.addressing import format_location

SLOT_HEADERS = ["EMPLACEMENT", "N° COMMANDE", "FLUX", "NOM", "STATUT", "DATE", "COMMENTAIRE"]


def _write_rows(rows: Iterable[Sequence[str]]) -> str:
    return "\n".join("\t".join(row) for row in rows)


def slots_to_tsv(slots: Iterable[PalletSlot], *, include_header: bool = True) -> str:
    rows: list[Sequence[str]] = [SLOT_HEADERS] if include_header else []
    for slot in slots:
        order = slot.order
        rows.append(
            [
                format_location(slot.location_id),
                order.order_number if order else "",
                order.flux.value if order else "",
                order.client_name if order else "",
                slot.status.label,
                order.date if order else "",
                order.comment if order else "",
            ]
        )
    return _write_rows(rows)


def slot_line(slot: PalletSlot) -> str:
    """Single-row copy of an occupied slot: number, flux and client."""
    if slot.order is None:
        return ""
    order = slot.order
    return _write_rows([[order.order_number, order.flux.value, order.client_name]])


def returns_to_tsv(items: Iterable[ReturnItem]) -> str:
    return _write_rows([item.return_number, item.client_name] for item in items)


def sas_to_tsv(items: Iterable[SasItem]) -> str:
    return _write_rows([item.order_number, item.client_name, item.flux.value] for item in items)
