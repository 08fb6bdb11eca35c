import pytest

from palletboard.services.layout import addressing
from palletboard.services.layout.addressing import (
    format_location,
    generate_all_location_ids,
    next_section,
    parse_location,
    position_label,
    previous_section,
    sort_location_ids,
)


def test_generate_all_location_ids_covers_rack_and_floor() -> None:
    ids = generate_all_location_ids()

    assert len(ids) == 81
    assert len(set(ids)) == 81
    assert ids[:7] == ["A-1-0-H", "A-1-0-M", "A-1-0-B", "A-1-1-H", "A-1-1-B", "A-1-2-B", "A-1-3"]
    assert ids[-18:] == [f"ZA-{index}" for index in range(1, 19)]


def test_every_generated_id_parses() -> None:
    for location_id in generate_all_location_ids():
        parsed = parse_location(location_id)
        assert parsed is not None
        if location_id.startswith("ZA-"):
            assert parsed.is_floor
            assert addressing.floor_location_id(parsed.index) == location_id
        else:
            assert addressing.rack_location_id(parsed.col, parsed.level, parsed.subpos) == location_id


@pytest.mark.parametrize("value", ["", "B-1-0", "A-1", "A-1-0-X", "ZA-", "za-3", None])
def test_parse_location_rejects_unknown_shapes(value) -> None:
    assert parse_location(value) is None


def test_parse_location_fields() -> None:
    parsed = parse_location("A-5-1-H")

    assert (parsed.zone, parsed.col, parsed.level, parsed.subpos) == ("A", 5, 1, "H")
    assert parse_location("A-7-3").subpos is None
    assert parse_location("ZA-12").index == 12


def test_sort_puts_floor_last_and_bottom_first() -> None:
    shuffled = ["ZA-2", "A-10-0", "A-2-0-H", "ZA-10", "A-2-0-B", "A-2-0-M", "A-2-0", "ZA-1"]

    assert sort_location_ids(shuffled) == [
        "A-2-0",
        "A-2-0-B",
        "A-2-0-M",
        "A-2-0-H",
        "A-10-0",
        "ZA-1",
        "ZA-2",
        "ZA-10",
    ]


def test_format_location_labels() -> None:
    assert format_location("A-5-0-B") == "A - 5 - 0 (BAS)"
    assert format_location("A-5-0-M") == "A - 5 - 0 (MILIEU)"
    assert format_location("A-5-0-H") == "A - 5 - 0 HAUT"
    assert format_location("A-5-3") == "A - 5 - 3"
    assert format_location("ZA-3") == "ZONE A - 3"


def test_position_label() -> None:
    assert position_label("A-4-1-H") == "HAUT"
    assert position_label("A-4-2-B") == ""
    assert position_label("A-4-3") == "3"
    assert position_label("ZA-7") == "#7"
    assert position_label("nope") == ""


def test_section_cycle_wraps() -> None:
    assert next_section("SECTION_3") == "FULL"
    assert previous_section("FULL") == "SECTION_3"
    assert addressing.section_columns("SECTION_2") == [[6, 5, 4]]
    with pytest.raises(ValueError):
        addressing.section_columns("SECTION_9")


def test_column_location_ids_top_level_first() -> None:
    assert addressing.column_location_ids(2) == ["A-2-3", "A-2-2-B", "A-2-1-H", "A-2-1-B", "A-2-0-H", "A-2-0-M", "A-2-0-B"]
