from pathlib import Path

import pytest

from palletboard.persistence.local_store import LocalStore
from palletboard.persistence.remote_store import RemoteStore, RemoteSubscription


def test_local_store_round_trips_json(tmp_path: Path) -> None:
    store = LocalStore(root=tmp_path)

    store.set("pallet_archives", [{"orderNumber": "1512", "clientName": "Émile"}])

    assert store.has("pallet_archives")
    assert store.get("pallet_archives") == [{"orderNumber": "1512", "clientName": "Émile"}]
    assert (tmp_path / "state" / "pallet_archives.json").exists()
    assert not (tmp_path / "state" / "pallet_archives.json.tmp").exists()


def test_local_store_missing_and_corrupt_keys(tmp_path: Path) -> None:
    store = LocalStore(root=tmp_path)
    (tmp_path / "state" / "sas_items.json").write_text("{not json", encoding="utf-8")

    assert store.get("theme") is None
    assert store.get("sas_items") is None

    store.set("theme", "dark")
    store.delete("theme")
    assert not store.has("theme")


def test_local_store_rejects_path_like_keys(tmp_path: Path) -> None:
    store = LocalStore(root=tmp_path)

    with pytest.raises(ValueError):
        store.set("../escape", 1)


class FakeResponse:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    def __init__(self, table: "FakeTable") -> None:
        self.table = table
        self.filters: dict = {}

    def select(self, columns):
        self.table.calls.append(("select", columns))
        return self

    def eq(self, column, value):
        self.filters[column] = value
        return self

    def limit(self, count):
        return self

    def upsert(self, row, on_conflict=None):
        self.table.calls.append(("upsert", on_conflict))
        self.table.pending = row
        return self

    def execute(self):
        if self.table.fail:
            raise RuntimeError("network down")
        if self.table.pending is not None:
            self.table.row = self.table.pending
            self.table.pending = None
            return FakeResponse([self.table.row])
        rows = [self.table.row] if self.table.row and self.table.row["id"] == self.filters.get("id") else []
        return FakeResponse(rows)


class FakeTable:
    def __init__(self) -> None:
        self.row = None
        self.pending = None
        self.fail = False
        self.calls: list = []


class FakeSupabase:
    def __init__(self) -> None:
        self.tables: dict[str, FakeTable] = {}

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self.tables.setdefault(name, FakeTable()))


def test_remote_store_upsert_and_fetch() -> None:
    client = FakeSupabase()
    store = RemoteStore(client=client, table="app_state", row_id=1)

    assert store.upsert({"sas": [], "lastUpdated": 5}) is True

    row = store.fetch()
    assert row.payload == {"sas": [], "lastUpdated": 5}
    assert row.updated_at
    assert ("upsert", "id") in client.tables["app_state"].calls


def test_remote_store_failures_are_reported_not_raised() -> None:
    client = FakeSupabase()
    store = RemoteStore(client=client, table="app_state", row_id=1)
    client.table("app_state").table.fail = True

    assert store.upsert({"sas": []}) is False
    assert store.fetch() is None


def test_remote_store_without_client_is_disabled() -> None:
    store = RemoteStore(client=None)

    assert store.enabled is False
    assert store.upsert({}) is False
    assert store.fetch() is None
    assert store.subscribe(lambda payload: None) is None


def test_subscription_delivers_only_new_versions() -> None:
    client = FakeSupabase()
    store = RemoteStore(client=client, table="app_state", row_id=1)
    received: list[dict] = []
    subscription = RemoteSubscription(store, received.append, interval=0.01)

    assert subscription.poll_once() is False

    client.tables["app_state"].row = {"id": 1, "payload": {"sas": []}, "updated_at": "t1"}
    assert subscription.poll_once() is True
    assert subscription.poll_once() is False

    client.tables["app_state"].row = {"id": 1, "payload": {"returns": []}, "updated_at": "t2"}
    assert subscription.poll_once() is True
    assert received == [{"sas": []}, {"returns": []}]


def test_subscription_survives_handler_errors() -> None:
    client = FakeSupabase()
    store = RemoteStore(client=client, table="app_state", row_id=1)
    client.table("app_state").table.row = {"id": 1, "payload": {"data": {}}, "updated_at": "t1"}

    def explode(payload):
        raise ValueError("bad snapshot")

    subscription = RemoteSubscription(store, explode, interval=0.01)

    assert subscription.poll_once() is False
