"""Small shared helpers for board mutations."""

from __future__ import annotations

import time
import uuid
from datetime import datetime
from typing import Callable

Clock = Callable[[], int]


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def new_item_id() -> str:
    return uuid.uuid4().hex[:9]


def day_month_label(timestamp_ms: int) -> str:
    """Format a timestamp as ``DD/MM`` in local time."""
    return datetime.fromtimestamp(timestamp_ms / 1000).strftime("%d/%m")
