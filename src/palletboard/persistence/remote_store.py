"""Remote mirror of the board: one shared row in a Supabase table."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable

from ..config import settings
from ..db.supabase import get_supabase_client

logger = logging.getLogger(__name__)

SnapshotCallback = Callable[[dict], None]

_DEFAULT_CLIENT: Any = object()


@dataclass(slots=True)
class RemoteRow:
    payload: dict
    updated_at: str | None


class RemoteSubscription:
    """Polls the shared row and forwards every new version to ``on_change``.

    The current row is delivered on the first poll; afterwards a row is only
    forwarded when its ``updated_at`` changes.
    """

    def __init__(self, store: "RemoteStore", on_change: SnapshotCallback, interval: float) -> None:
        self.store = store
        self.on_change = on_change
        self.interval = interval
        self._last_seen: str | None = None
        self._delivered = False
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    def poll_once(self) -> bool:
        row = self.store.fetch()
        if row is None:
            return False
        if self._delivered and row.updated_at == self._last_seen:
            return False
        self._last_seen = row.updated_at
        self._delivered = True
        try:
            self.on_change(row.payload)
        except Exception as exc:
            logger.error(f"Remote snapshot handler failed: {exc}")
            return False
        return True

    def _run(self) -> None:
        while not self._stop.is_set():
            self.poll_once()
            self._stop.wait(self.interval)

    def start(self) -> "RemoteSubscription":
        if self._thread is None:
            self._thread = threading.Thread(target=self._run, name="remote-board-sync", daemon=True)
            self._thread.start()
        return self

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=self.interval + 1.0)
            self._thread = None

    @property
    def active(self) -> bool:
        return self._thread is not None and self._thread.is_alive()


class RemoteStore:
    def __init__(self, client: Any = _DEFAULT_CLIENT, table: str | None = None, row_id: int | None = None) -> None:
        self._client = get_supabase_client() if client is _DEFAULT_CLIENT else client
        self.table = table or settings.remote_table
        self.row_id = row_id if row_id is not None else settings.remote_row_id

    @property
    def enabled(self) -> bool:
        return self._client is not None

    def upsert(self, payload: dict) -> bool:
        """Write the full board payload; returns False instead of raising on failure."""
        if not self._client:
            return False
        try:
            self._client.table(self.table).upsert(
                {
                    "id": self.row_id,
                    "payload": payload,
                    "updated_at": datetime.now(timezone.utc).isoformat(),
                },
                on_conflict="id",
            ).execute()
            return True
        except Exception as e:
            logger.error(f"Failed to upsert board row {self.row_id} into '{self.table}': {e}")
            return False

    def fetch(self) -> RemoteRow | None:
        if not self._client:
            return None
        try:
            response = (
                self._client.table(self.table)
                .select("payload, updated_at")
                .eq("id", self.row_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.warning(f"Failed to fetch board row {self.row_id} from '{self.table}': {e}")
            return None
        rows = response.data or []
        if not rows or not rows[0].get("payload"):
            return None
        return RemoteRow(payload=rows[0]["payload"], updated_at=rows[0].get("updated_at"))

    def subscribe(self, on_change: SnapshotCallback, interval: float | None = None) -> RemoteSubscription | None:
        if not self.enabled:
            logger.info("Supabase not configured - remote board sync disabled")
            return None
        subscription = RemoteSubscription(
            self,
            on_change,
            interval if interval is not None else settings.remote_poll_interval_seconds,
        )
        return subscription.start()
