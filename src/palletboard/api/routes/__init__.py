"""Route group exports."""

from . import archives, exports, health, preferences, returns, sas, slots, sync

__all__ = ["slots", "sas", "returns", "archives", "sync", "exports", "preferences", "health"]
