"""Dirty tracking, local persistence and remote mirroring of the board."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from ...models.domain import OrderArchive, PalletSlot, ReturnItem, SasItem
from ...persistence.local_store import ARCHIVES_KEY, RETURNS_KEY, SAS_KEY, SLOTS_KEY, LocalStore
from ...persistence.remote_store import RemoteStore, RemoteSubscription
from ...schemas.board import BoardSnapshot
from ..board.aggregate import Board
from ..board.helpers import Clock, now_ms
from ..board.store import SlotStore

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SaveResult:
    local_saved: bool
    remote_synced: bool
    saved_at: int


class SyncCoordinator:
    """Keeps one dirty flag over the board and moves it to and from storage.

    Every board mutation marks the board dirty, except loading from local
    storage and applying a remote snapshot. A remote snapshot replaces the parts
    it carries wholesale (last write wins).
    """

    def __init__(
        self,
        board: Board,
        local: LocalStore,
        remote: RemoteStore | None = None,
        clock: Clock = now_ms,
        lock: threading.RLock | None = None,
    ) -> None:
        self.board = board
        self.local = local
        self.remote = remote
        self.clock = clock
        self.lock = lock or threading.RLock()
        self.dirty = False
        self._revision = 0
        self.last_saved_at: int | None = None
        self.last_remote_applied_at: int | None = None
        self._subscription: RemoteSubscription | None = None
        board.add_listener(self.mark_dirty)

    def mark_dirty(self) -> None:
        self._revision += 1
        self.dirty = True

    @property
    def remote_enabled(self) -> bool:
        return self.remote is not None and self.remote.enabled

    @property
    def subscribed(self) -> bool:
        return self._subscription is not None and self._subscription.active

    def load(self) -> None:
        """Populate the board from local storage; absent keys keep defaults."""
        with self.lock:
            slots = self._load_slots()
            self.board.replace_from(
                slots=slots if slots is not None else SlotStore.initial().as_mapping(),
                sas=self._load_rows(SAS_KEY, SasItem),
                returns=self._load_rows(RETURNS_KEY, ReturnItem),
                archives=self._load_rows(ARCHIVES_KEY, OrderArchive),
            )
            self.dirty = False

    def _load_slots(self) -> dict[str, PalletSlot] | None:
        raw = self.local.get(SLOTS_KEY)
        if raw is None:
            return None
        if not isinstance(raw, dict):
            logger.error(f"Ignoring local '{SLOTS_KEY}': expected an object, got {type(raw).__name__}")
            return None
        try:
            return SlotStore.slots_from_payload(raw)
        except (ValueError, TypeError, AttributeError) as exc:
            logger.error(f"Ignoring unreadable local '{SLOTS_KEY}': {exc}")
            return None

    def _load_rows(self, key: str, record_type: Any) -> list:
        raw = self.local.get(key)
        if raw is None:
            return []
        if not isinstance(raw, list):
            logger.error(f"Ignoring local '{key}': expected a list, got {type(raw).__name__}")
            return []
        try:
            return [record_type.from_dict(item) for item in raw]
        except (ValueError, TypeError, AttributeError) as exc:
            logger.error(f"Ignoring unreadable local '{key}': {exc}")
            return []

    def _write_local(self) -> dict:
        snapshot = self.board.to_snapshot()
        self.local.set(SLOTS_KEY, snapshot["data"])
        self.local.set(RETURNS_KEY, snapshot["returns"])
        self.local.set(SAS_KEY, snapshot["sas"])
        self.local.set(ARCHIVES_KEY, snapshot["archives"])
        return snapshot

    def save(self) -> SaveResult:
        """Write the board locally, then try the remote mirror.

        A remote failure is logged and reported but never raised. The dirty
        flag stays set until the remote call resolves, and only clears if
        nothing changed the board in the meantime.
        """
        with self.lock:
            payload = self._write_local()
            saved_at = self.clock()
            payload["lastUpdated"] = saved_at
            revision = self._revision
            self.last_saved_at = saved_at

        remote_synced = False
        if self.remote_enabled:
            remote_synced = self.remote.upsert(payload)
            if not remote_synced:
                logger.warning("⚠️ Board saved locally but remote sync failed")

        with self.lock:
            if self._revision == revision:
                self.dirty = False
        if remote_synced:
            logger.info(f"✓ Board saved locally and mirrored remotely at {saved_at}")
        return SaveResult(local_saved=True, remote_synced=remote_synced, saved_at=saved_at)

    def apply_remote_snapshot(self, snapshot: dict) -> list[str]:
        """Replace every part present in ``snapshot`` and clear the dirty flag.

        Raises ``pydantic.ValidationError`` for malformed snapshots, leaving the
        board untouched.
        """
        try:
            parsed = BoardSnapshot.model_validate(snapshot)
        except ValidationError as exc:
            logger.error(f"Rejected malformed remote snapshot: {exc.error_count()} error(s)")
            raise

        slots = None
        if parsed.data is not None:
            slots = {location_id: model.to_domain(location_id) for location_id, model in parsed.data.items()}
        with self.lock:
            replaced = self.board.replace_from(
                slots=slots,
                sas=[item.to_domain() for item in parsed.sas] if parsed.sas is not None else None,
                returns=[item.to_domain() for item in parsed.returns] if parsed.returns is not None else None,
                archives=[item.to_domain() for item in parsed.archives] if parsed.archives is not None else None,
            )
            self.dirty = False
            self.last_remote_applied_at = self.clock()
        logger.info(f"Applied remote snapshot ({', '.join(replaced) or 'no parts'})")
        return replaced

    def start(self, interval: float | None = None) -> bool:
        if self._subscription is not None or self.remote is None:
            return self._subscription is not None
        self._subscription = self.remote.subscribe(self.apply_remote_snapshot, interval=interval)
        return self._subscription is not None

    def stop(self) -> None:
        if self._subscription is not None:
            self._subscription.stop()
            self._subscription = None
