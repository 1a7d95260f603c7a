from decimal import Decimal

import pytest
from pydantic import ValidationError

from seatflow.core.errors import (
    CapacityExceeded,
    SeatAlreadySelected,
    SeatNotAvailable,
    UnknownDeck,
    UnknownSeat,
    UnknownSegment,
    UnknownTraveler,
)
from seatflow.models.seatmap_models import CellClass, Deck, Seatmap, SeatStatus, SeatTrait
from seatflow.services.seatmap.engine import SeatmapEngine


@pytest.fixture
def engine(narrowbody_seatmap):
    return SeatmapEngine([narrowbody_seatmap], ["1", "2"])


@pytest.fixture
def three_seat_engine(make_seat):
    deck = Deck(seats=[
        make_seat("1A", 1, 0, codes=["W"]),
        make_seat("1B", 1, 1, codes=["A"]),
        make_seat("1C", 1, 2, status="OCCUPIED"),
    ])
    return SeatmapEngine([Seatmap(segment_id="S1", decks=[deck])], ["1"])


# --------------------------------------------------
# CABIN VIEW
# --------------------------------------------------
def test_cabin_view_shape(engine):
    view = engine.get_cabin_view(0)

    assert view.segment_id == "1"
    assert view.grid.row_count == 6
    assert view.grid.column_count == 7
    assert view.cabin_layout.sections == [["A", "B", "C"], ["D", "E", "F"]]
    assert view.cabin_layout.widebody is False
    assert view.row_numbers == [None, 10, 11, 12, 13, 14]
    assert view.exit_rows == [12]
    assert view.wing_rows == [11, 12, 13]


def test_cabin_view_classifies_aisle_and_facilities(engine):
    cells = engine.get_cabin_view(0).classified_cells

    assert all(row[3].cell_class == CellClass.AISLE for row in cells)
    assert cells[0][0].cell_class == CellClass.FACILITY
    assert cells[0][0].facility_code == "LA"
    assert cells[3][0].seat_number == "12A"
    assert SeatTrait.EXIT in cells[3][0].traits


def test_cabin_view_is_memoized(engine):
    assert engine.get_cabin_view(0, 0) == engine.get_cabin_view(0, 0)
    assert len(engine._views) == 1


def test_cabin_view_cannot_be_changed_by_callers(engine):
    view = engine.get_cabin_view(0)

    with pytest.raises(ValidationError):
        view.segment_id = "X"
    with pytest.raises(ValidationError):
        view.classified_cells[3][0].traits = []

    view.classified_cells[3].clear()
    view.exit_rows.append(99)

    fresh = engine.get_cabin_view(0)
    assert fresh.classified_cells[3][0].seat_number == "12A"
    assert fresh.exit_rows == [12]


def test_cabin_view_unknown_segment_and_deck(engine):
    with pytest.raises(UnknownSegment):
        engine.get_cabin_view(3)
    with pytest.raises(UnknownDeck):
        engine.get_cabin_view(0, 1)


# --------------------------------------------------
# STATUS
# --------------------------------------------------
def test_seat_statuses_from_pricing(engine):
    statuses = engine.get_seat_statuses(0)

    assert len(statuses) == 30
    assert statuses["10C"] == SeatStatus.OCCUPIED
    assert statuses["12A"] == SeatStatus.AVAILABLE


def test_seat_status_reflects_selection(engine):
    engine.select(0, "1", "12A")

    assert engine.get_seat_status(0, "12A") == SeatStatus.SELECTED
    assert engine.get_seat_statuses(0)["12A"] == SeatStatus.SELECTED


# --------------------------------------------------
# SELECTION
# --------------------------------------------------
def test_select_takes_travelers_price(engine):
    record = engine.select(0, "1", "12a")

    assert record.seat_number == "12A"
    assert record.segment_id == "1"
    assert record.price == Decimal("25.00")
    assert record.currency == "EUR"


def test_select_round_trip(three_seat_engine):
    engine = three_seat_engine

    engine.select(0, "1", "1A")

    assert engine.get_seat_status(0, "1A") == SeatStatus.SELECTED
    assert engine.get_seat_status(0, "1C") == SeatStatus.OCCUPIED
    total = engine.get_total()
    assert total.amount == Decimal("0")
    assert total.currency == "EUR"

    engine.select(0, "1", "1B")

    records = engine.get_selections()
    assert len(records) == 1
    assert records[0].seat_number == "1B"
    assert engine.get_seat_status(0, "1A") == SeatStatus.AVAILABLE


def test_window_and_aisle_traits_from_codes(three_seat_engine):
    cells = three_seat_engine.get_cabin_view(0).classified_cells

    assert SeatTrait.WINDOW in cells[0][0].traits
    assert SeatTrait.AISLE in cells[0][1].traits


def test_select_occupied_seat_is_rejected(engine):
    with pytest.raises(SeatNotAvailable) as exc:
        engine.select(0, "1", "10C")

    assert exc.value.status == "occupied"
    assert engine.get_selections() == []


def test_select_seat_held_by_other_traveler(engine):
    engine.select(0, "1", "12A")

    with pytest.raises(SeatAlreadySelected):
        engine.select(0, "2", "12A")


def test_reselect_same_seat_is_noop(engine):
    first = engine.select(0, "1", "12A")

    assert engine.select(0, "1", "12A") == first
    assert len(engine.get_selections()) == 1


def test_select_validates_inputs(engine):
    with pytest.raises(UnknownSegment):
        engine.select(2, "1", "12A")
    with pytest.raises(UnknownSeat):
        engine.select(0, "1", "99Z")
    with pytest.raises(UnknownTraveler):
        engine.select(0, "42", "12A")


def test_capacity_is_enforced(narrowbody_seatmap):
    engine = SeatmapEngine([narrowbody_seatmap], ["1", "2", "3"], max_selections=2)
    engine.select(0, "1", "11A")
    engine.select(0, "2", "11B")

    with pytest.raises(CapacityExceeded):
        engine.select(0, "3", "11C")

    assert len(engine.get_selections()) == 2


def test_deselect_paths(engine):
    engine.select(0, "1", "12A")
    engine.select(0, "2", "13F")

    assert engine.deselect(0, "1").seat_number == "12A"
    assert engine.deselect(0, "1") is None
    assert engine.deselect_by_seat(0, "13f").traveler_id == "2"
    assert engine.get_selections(0) == []


def test_total_sums_selected_prices(engine):
    engine.select(0, "1", "12A")
    engine.select(0, "2", "12B")

    total = engine.get_total()

    assert total.amount == Decimal("50.00")
    assert total.currency == "EUR"


# --------------------------------------------------
# SEGMENTS & METADATA
# --------------------------------------------------
def test_segment_summaries(engine):
    engine.select(0, "1", "12A")

    summary = engine.segment_summaries()[0]

    assert summary.segment_index == 0
    assert summary.origin == "FRA"
    assert summary.destination == "JFK"
    assert summary.deck_count == 1
    assert summary.selected_count == 1


def test_available_seat_count_from_pricing(engine):
    assert engine.available_seat_count(0) == 29


def test_available_seat_count_prefers_counters(narrowbody_seatmap):
    seatmap = narrowbody_seatmap.model_copy(update={"available_seats_counters": {"1": 7}})
    engine = SeatmapEngine([seatmap], ["1"])

    assert engine.available_seat_count(0) == 7


def test_describe_characteristics(narrowbody_seatmap):
    engine = SeatmapEngine(
        [narrowbody_seatmap], ["1"], seat_characteristics={"E": "Exit row seat"}
    )

    assert engine.describe_characteristics(["E", "XX"]) == ["Exit row seat", "XX"]


# --------------------------------------------------
# REFRESH
# --------------------------------------------------
def test_replace_seatmaps_drops_vanished_seats(engine, narrowbody_seatmap):
    engine.select(0, "1", "12A")
    engine.select(0, "2", "13B")

    deck = narrowbody_seatmap.decks[0]
    trimmed = deck.model_copy(update={"seats": [s for s in deck.seats if s.number != "12A"]})
    refreshed = narrowbody_seatmap.model_copy(update={"decks": [trimmed]})

    dropped = engine.replace_seatmaps([refreshed])

    assert [r.seat_number for r in dropped] == ["12A"]
    assert [r.seat_number for r in engine.get_selections()] == ["13B"]
    with pytest.raises(UnknownSeat):
        engine.get_seat_status(0, "12A")


def test_replace_seatmaps_drops_vanished_segments(engine, narrowbody_seatmap):
    engine.select(0, "1", "12A")

    other = narrowbody_seatmap.model_copy(update={"segment_id": "2"})
    dropped = engine.replace_seatmaps([other])

    assert len(dropped) == 1
    assert engine.get_selections() == []
