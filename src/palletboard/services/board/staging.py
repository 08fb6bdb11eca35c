"""Reception (SAS) and returns staging buffers.

Both buffers are ordered sequences of loosely-filled rows edited cell by
cell. After every edit the sequence is compacted: rows whose number and
client name are both blank are dropped.
"""

from __future__ import annotations

import re
from dataclasses import replace
from typing import ClassVar, Generic, Iterable, TypeVar

from ...models.domain import Flux, ReturnItem, SasItem
from .helpers import Clock, day_month_label, new_item_id, now_ms

_INVALID_NUMBER_CHARS = re.compile(r"[^A-Z0-9-]")

RowT = TypeVar("RowT", SasItem, ReturnItem)


def normalize_order_number(value: str) -> str:
    """Normalize a typed order or return number.

    Uppercases, keeps only ``A-Z``, digits and dashes, appends a dash after a
    four-character alphanumeric prefix and caps dashed values at 9 characters.
    """
    clean = _INVALID_NUMBER_CHARS.sub("", (value or "").upper())
    if len(clean) == 4 and "-" not in clean and not clean.isdigit():
        return clean + "-"
    if "-" in clean and len(clean) > 9:
        return clean[:9]
    return clean


def is_blank_row(row: SasItem | ReturnItem) -> bool:
    return not row.primary_number.strip() and not row.client_name.strip()


def compact(rows: Iterable[RowT]) -> list[RowT]:
    return [row for row in rows if not is_blank_row(row)]


def looks_like_return_number(number: str) -> bool:
    """Return numbers are dashed or start with a letter; delivery numbers are digits."""
    return "-" in number or bool(number[:1].isalpha())


class StagingBuffer(Generic[RowT]):
    """Shared edit protocol of the staging buffers."""

    number_field: ClassVar[str]
    field_aliases: ClassVar[dict[str, str]]

    def __init__(self, rows: Iterable[RowT] | None = None, clock: Clock = now_ms) -> None:
        self._rows: list[RowT] = list(rows or [])
        self._clock = clock

    @property
    def rows(self) -> list[RowT]:
        return list(self._rows)

    def __len__(self) -> int:
        return len(self._rows)

    def _new_row(self) -> RowT:
        raise NotImplementedError

    def _coerce(self, field: str, value: str):
        if field == self.number_field:
            return normalize_order_number(value)
        return value

    def resolve_field(self, field: str) -> str:
        try:
            return self.field_aliases[field]
        except KeyError as exc:
            raise ValueError(f"Field '{field}' cannot be edited in this buffer.") from exc

    def edit_cell(self, index: int, field: str, value: str) -> list[RowT]:
        """Write one cell; an index past the end materializes a new row."""
        if index < 0:
            raise IndexError(f"Row index {index} is out of range.")
        attribute = self.resolve_field(field)
        rows = list(self._rows)
        if index >= len(rows):
            rows.append(self._new_row())
            index = len(rows) - 1
        rows[index] = replace(rows[index], **{attribute: self._coerce(attribute, value)})
        self._rows = compact(rows)
        return self.rows

    def remove_row(self, index: int) -> RowT | None:
        if index < 0 or index >= len(self._rows):
            return None
        rows = list(self._rows)
        removed = rows.pop(index)
        self._rows = rows
        return removed

    def find(self, item_id: str) -> RowT | None:
        return next((row for row in self._rows if row.id == item_id), None)

    def remove_by_id(self, item_id: str) -> RowT | None:
        row = self.find(item_id)
        if row is not None:
            self._rows = [candidate for candidate in self._rows if candidate.id != item_id]
        return row

    def append(self, row: RowT) -> None:
        self._rows = [*self._rows, row]

    def clear(self) -> None:
        self._rows = []

    def replace_all(self, rows: Iterable[RowT]) -> None:
        self._rows = list(rows)

    def to_payload(self) -> list[dict]:
        return [row.to_dict() for row in self._rows]


class SasBuffer(StagingBuffer[SasItem]):
    number_field = "order_number"
    field_aliases = {
        "orderNumber": "order_number",
        "order_number": "order_number",
        "clientName": "client_name",
        "client_name": "client_name",
        "flux": "flux",
        "date": "date",
        "info": "info",
        "comment": "comment",
    }

    def _new_row(self) -> SasItem:
        return SasItem(id=new_item_id(), date=day_month_label(self._clock()))

    def _coerce(self, field: str, value: str):
        if field == "flux":
            return Flux.parse(value)
        return super()._coerce(field, value)

    def set_flux(self, index: int, flux: Flux | str) -> list[SasItem]:
        value = flux.value if isinstance(flux, Flux) else flux
        return self.edit_cell(index, "flux", value)

    def return_candidates(self) -> list[SasItem]:
        return [row for row in self._rows if row.flux is Flux.RET]

    def slot_candidates(self) -> list[SasItem]:
        return [row for row in self._rows if not looks_like_return_number(row.order_number)]

    def add_classified(self, order_number: str, client_name: str, flux: Flux) -> SasItem:
        """Place a scanned document into the first blank row, or append it."""
        row = SasItem(
            id=new_item_id(),
            order_number=order_number,
            client_name=client_name,
            flux=flux,
            date=day_month_label(self._clock()),
        )
        rows = list(self._rows)
        blank_index = next((index for index, candidate in enumerate(rows) if is_blank_row(candidate)), None)
        if blank_index is None:
            rows.append(row)
        else:
            rows[blank_index] = row
        self._rows = compact(rows)
        return row


class ReturnsBuffer(StagingBuffer[ReturnItem]):
    number_field = "return_number"
    field_aliases = {
        "returnNumber": "return_number",
        "return_number": "return_number",
        "clientName": "client_name",
        "client_name": "client_name",
        "date": "date",
    }

    def _new_row(self) -> ReturnItem:
        return ReturnItem(id=new_item_id(), date=day_month_label(self._clock()))

    def select(self, item_ids: Iterable[str] | None) -> list[ReturnItem]:
        """Rows matching ``item_ids``; all rows when nothing is selected."""
        wanted = set(item_ids or [])
        if not wanted:
            return self.rows
        return [row for row in self._rows if row.id in wanted]
