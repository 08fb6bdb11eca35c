"""Process-wide board: one aggregate, one lock, local and remote storage."""

from __future__ import annotations

import functools
import logging
import threading
from pathlib import Path
from typing import Any, Callable, TypeVar

from ...persistence.local_store import THEME_KEY, LocalStore
from ...persistence.remote_store import RemoteStore
from ..classification.client import ClassificationResult, DocumentClassifier
from ..sync.coordinator import SaveResult, SyncCoordinator
from .aggregate import Board
from .commands import AddClassifiedSasItem, Command
from .helpers import Clock, now_ms

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_THEME = "light"


class BoardService:
    """Serializes every command and snapshot through a single lock.

    HTTP handlers run on a worker pool and remote snapshots arrive on the
    polling thread, so the lock plays the part of a single event queue.
    """

    def __init__(
        self,
        local: LocalStore | None = None,
        remote: RemoteStore | None = None,
        classifier_factory: Callable[[], DocumentClassifier] | None = None,
        clock: Clock = now_ms,
    ) -> None:
        self.lock = threading.RLock()
        self.local = local or LocalStore()
        self.board = Board(clock=clock)
        self.sync = SyncCoordinator(self.board, self.local, remote, clock=clock, lock=self.lock)
        self._classifier_factory = classifier_factory or DocumentClassifier
        self.sync.load()

    def execute(self, command: Command) -> Any:
        with self.lock:
            return self.board.dispatch(command)

    def read(self, reader: Callable[[Board], T]) -> T:
        with self.lock:
            return reader(self.board)

    def save(self) -> SaveResult:
        return self.sync.save()

    def apply_remote_snapshot(self, snapshot: dict) -> list[str]:
        return self.sync.apply_remote_snapshot(snapshot)

    def scan_document(self, image: bytes, mime_type: str = "image/jpeg") -> tuple[ClassificationResult, Any]:
        """Classify a captured note and stage it in the SAS buffer.

        The classification call runs outside the lock; nothing is staged when
        it fails.
        """
        classifier = self._classifier_factory()
        result = classifier.classify(image, mime_type)
        item = self.execute(AddClassifiedSasItem(result.order_number, result.client_name, result.flux))
        return result, item

    def start(self) -> bool:
        return self.sync.start()

    def stop(self) -> None:
        self.sync.stop()

    def get_theme(self) -> str:
        theme = self.local.get(THEME_KEY)
        return theme if theme in ("dark", "light") else DEFAULT_THEME

    def set_theme(self, theme: str) -> str:
        if theme not in ("dark", "light"):
            raise ValueError(f"Unknown theme '{theme}'.")
        self.local.set(THEME_KEY, theme)
        return theme


@functools.lru_cache(maxsize=1)
def get_board_service(root: Path | None = None) -> BoardService:
    """Lazily build the shared board service."""
    return BoardService(local=LocalStore(root), remote=RemoteStore())
