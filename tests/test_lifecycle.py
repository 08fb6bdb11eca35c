import pytest

from palletboard.models.domain import NEW_DATE_SENTINEL, Flux, SasItem, SlotStatus
from palletboard.services.board.aggregate import Board
from palletboard.services.board.commands import (
    AssignSlot,
    CancelClipboard,
    ClearSlot,
    CopySlot,
    CutSlot,
    MoveToReturns,
    PasteSlot,
    PickFromSas,
    SaveSlot,
)
from palletboard.services.board.store import SlotStore

from conftest import make_order


def test_store_rejects_occupied_slot_without_order() -> None:
    store = SlotStore.initial()

    with pytest.raises(ValueError):
        store.set("A-1-3", SlotStatus.ROUGE)

    assert store.get("A-1-3").status is SlotStatus.EMPTY
    assert store.set("A-1-3", SlotStatus.EMPTY, make_order()).order is None


@pytest.mark.parametrize("status", list(SlotStatus))
def test_assigned_slot_has_order_iff_occupied(board: Board, status: SlotStatus) -> None:
    board.dispatch(AssignSlot("A-4-0-M", status, make_order()))

    slot = board.slots.get("A-4-0-M")
    assert slot.status is status
    assert (slot.order is not None) == (status is not SlotStatus.EMPTY)
    assert (slot.order is not None) == status.is_occupied


def test_assign_stamps_entry_time_once(board: Board, clock) -> None:
    slot = board.dispatch(AssignSlot("A-5-3", SlotStatus.JAUNE, make_order()))
    first_stamp = slot.order.created_at

    assert first_stamp == clock.now

    clock.advance(60)
    slot = board.dispatch(AssignSlot("A-5-3", SlotStatus.BLANC, slot.order))

    assert slot.status is SlotStatus.BLANC
    assert slot.order.created_at == first_stamp


def test_clearing_a_slot_archives_its_order(board: Board, clock) -> None:
    board.dispatch(AssignSlot("A-5-3", SlotStatus.JAUNE, make_order("1598765432", "Marie Curie")))
    entry_time = clock.now
    clock.advance(3600)

    slot = board.dispatch(ClearSlot("A-5-3"))

    assert slot.status is SlotStatus.EMPTY
    assert slot.order is None
    entries = board.archive.entries
    assert len(entries) == 1
    assert entries[0].order_number == "1598765432"
    assert entries[0].client_name == "Marie Curie"
    assert entries[0].location_id == "A-5-3"
    assert entries[0].entry_time == entry_time
    assert entries[0].exit_time == clock.now
    assert entries[0].flux == "CDC"


def test_clearing_an_empty_slot_archives_nothing(board: Board) -> None:
    board.dispatch(ClearSlot("A-2-0-B"))

    assert len(board.archive) == 0


def test_duplicate_archive_within_window_is_suppressed(board: Board, clock) -> None:
    board.dispatch(AssignSlot("A-1-3", SlotStatus.JAUNE, make_order("1500000001")))
    board.dispatch(AssignSlot("A-2-3", SlotStatus.JAUNE, make_order("1500000001")))

    board.dispatch(ClearSlot("A-1-3"))
    clock.advance(1)
    board.dispatch(ClearSlot("A-2-3"))

    assert len(board.archive) == 1
    assert board.slots.get("A-2-3").status is SlotStatus.EMPTY


def test_archive_allowed_again_after_window(board: Board, clock) -> None:
    board.dispatch(AssignSlot("A-1-3", SlotStatus.JAUNE, make_order("1500000001")))
    board.dispatch(ClearSlot("A-1-3"))
    clock.advance(2.5)
    board.dispatch(AssignSlot("A-1-3", SlotStatus.JAUNE, make_order("1500000001")))
    board.dispatch(ClearSlot("A-1-3"))

    assert len(board.archive) == 2


def test_different_orders_are_archived_back_to_back(board: Board) -> None:
    board.dispatch(AssignSlot("A-1-3", SlotStatus.JAUNE, make_order("1500000001")))
    board.dispatch(AssignSlot("A-2-3", SlotStatus.JAUNE, make_order("1500000002")))
    board.dispatch(ClearSlot("A-1-3"))
    board.dispatch(ClearSlot("A-2-3"))

    assert [entry.order_number for entry in board.archive.entries] == ["1500000002", "1500000001"]


def test_save_slot_keeps_identity_and_drops_tournee_unless_departing(board: Board) -> None:
    first = board.dispatch(SaveSlot("A-3-1-H", SlotStatus.JAUNE, make_order(tournee="T12")))
    assert first.order.tournee == ""

    edited = make_order(id="other-id", comment="client absent", tournee="T12")
    saved = board.dispatch(SaveSlot("A-3-1-H", SlotStatus.BLANC, edited))

    assert saved.order.id == first.order.id
    assert saved.order.created_at == first.order.created_at
    assert saved.order.tournee == "T12"
    assert saved.order.comment == "client absent"


def test_save_slot_requires_known_slot_and_order(board: Board) -> None:
    with pytest.raises(KeyError):
        board.dispatch(SaveSlot("A-99-0", SlotStatus.JAUNE, make_order()))
    with pytest.raises(ValueError):
        board.dispatch(SaveSlot("A-1-3", SlotStatus.JAUNE, None))


def test_move_to_returns_creates_row_and_clears_slot(board: Board, clock) -> None:
    board.dispatch(AssignSlot("ZA-4", SlotStatus.BLEU, make_order("8QAL-4MQ8", "Paul Martin", Flux.RET)))

    item = board.dispatch(MoveToReturns("ZA-4"))

    assert item.return_number == "8QAL-4MQ8"
    assert item.client_name == "Paul Martin"
    assert item.created_at == clock.now
    assert board.returns.rows == [item]
    assert board.slots.get("ZA-4").status is SlotStatus.EMPTY
    assert board.archive.entries[0].order_number == "8QAL-4MQ8"


def test_move_to_returns_on_empty_slot_is_a_no_op(board: Board) -> None:
    calls = []
    board.add_listener(lambda: calls.append(1))

    assert board.dispatch(MoveToReturns("A-1-3")) is None
    assert len(board.returns) == 0
    assert calls == []


def test_pick_from_sas_moves_row_into_slot(board: Board) -> None:
    board.sas.replace_all([SasItem(id="s1", order_number="1612345678", client_name="Ana Lopez", flux=Flux.LCD)])

    slot = board.dispatch(PickFromSas("A-6-0-M", "s1"))

    assert slot.status is SlotStatus.JAUNE
    assert slot.order.order_number == "1612345678"
    assert slot.order.flux is Flux.LCD
    assert slot.order.date == NEW_DATE_SENTINEL
    assert len(board.sas) == 0


def test_pick_from_sas_unknown_item_leaves_board_untouched(board: Board) -> None:
    with pytest.raises(KeyError):
        board.dispatch(PickFromSas("A-6-0-M", "missing"))

    assert board.slots.get("A-6-0-M").status is SlotStatus.EMPTY


def test_copy_paste_duplicates_order_with_new_id(board: Board) -> None:
    source = board.dispatch(AssignSlot("A-1-3", SlotStatus.ROUGE, make_order()))

    clipboard = board.dispatch(CopySlot("A-1-3"))
    pasted = board.dispatch(PasteSlot("A-2-3"))

    assert clipboard.is_cutting is False
    assert pasted.status is SlotStatus.ROUGE
    assert pasted.order.order_number == source.order.order_number
    assert pasted.order.id != source.order.id
    assert board.slots.get("A-1-3").status is SlotStatus.ROUGE
    assert board.lifecycle.clipboard is not None


def test_cut_paste_moves_order_and_empties_clipboard(board: Board) -> None:
    board.dispatch(AssignSlot("A-1-3", SlotStatus.ORANGE, make_order()))

    board.dispatch(CutSlot("A-1-3"))
    pasted = board.dispatch(PasteSlot("ZA-1"))

    assert pasted.status is SlotStatus.ORANGE
    assert board.slots.get("A-1-3").status is SlotStatus.EMPTY
    assert board.lifecycle.clipboard is None


def test_paste_without_clipboard_returns_none(board: Board) -> None:
    board.dispatch(CancelClipboard())

    assert board.dispatch(PasteSlot("A-1-3")) is None
    assert board.dispatch(CopySlot("A-1-3")) is None
