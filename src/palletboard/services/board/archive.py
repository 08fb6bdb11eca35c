"""Bounded, newest-first history of completed slot occupancy."""

from __future__ import annotations

from typing import Iterable

from ...config import settings
from ...models.domain import Order, OrderArchive


class ArchiveLog:
    def __init__(self, entries: Iterable[OrderArchive] | None = None, limit: int | None = None) -> None:
        self.limit = limit if limit is not None else settings.archive_limit
        self._entries: list[OrderArchive] = list(entries or [])[: self.limit]

    @property
    def entries(self) -> list[OrderArchive]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def record(self, order: Order, location_id: str, now: int) -> OrderArchive:
        """Prepend an entry for ``order`` leaving ``location_id`` at ``now``."""
        entry = OrderArchive(
            order_number=order.order_number,
            client_name=order.client_name,
            entry_time=order.created_at or now,
            exit_time=now,
            flux=order.flux.value,
            location_id=location_id,
        )
        self._entries = [entry, *self._entries][: self.limit]
        return entry

    def clear(self) -> None:
        self._entries = []

    def replace_all(self, entries: Iterable[OrderArchive]) -> None:
        self._entries = list(entries)[: self.limit]

    def search(self, query: str | None) -> list[OrderArchive]:
        if not query:
            return list(self._entries)
        needle = query.lower()
        return [
            entry
            for entry in self._entries
            if needle in entry.order_number.lower()
            or needle in entry.client_name.lower()
            or (entry.flux and needle in entry.flux.lower())
            or (entry.location_id and needle in entry.location_id.lower())
        ]

    def to_payload(self) -> list[dict]:
        return [entry.to_dict() for entry in self._entries]
