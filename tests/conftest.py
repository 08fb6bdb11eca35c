from pathlib import Path

import pytest

from palletboard.models.domain import Flux, Order
from palletboard.persistence.local_store import LocalStore
from palletboard.services.board.aggregate import Board


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start: int = 1_700_000_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += int(seconds * 1000)


def make_order(number: str = "1512345678", client: str = "Jean Dupont", flux: Flux = Flux.CDC, **extra) -> Order:
    return Order(id=extra.pop("id", f"ord-{number}"), order_number=number, client_name=client, flux=flux, **extra)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def board(clock: FakeClock) -> Board:
    return Board(clock=clock, archive_limit=200, dedup_seconds=2.0)


@pytest.fixture
def local_store(tmp_path: Path) -> LocalStore:
    return LocalStore(root=tmp_path)
