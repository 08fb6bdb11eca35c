"""Board persistence and remote synchronisation."""

from .coordinator import SaveResult, SyncCoordinator

__all__ = ["SaveResult", "SyncCoordinator"]
