import random
from decimal import Decimal

import pytest

from seatflow.core.errors import CapacityExceeded, SeatAlreadySelected, UnknownTraveler
from seatflow.services.seatmap.selection_manager import SelectionManager


def test_select_creates_record():
    manager = SelectionManager(["1", "2"])

    record = manager.select("S1", "1", "12A", Decimal("25"), "EUR")

    assert record.seat_number == "12A"
    assert manager.get_selections() == [record]
    assert manager.holder_of("S1", "12A") == "1"


def test_reselect_replaces_previous_seat():
    manager = SelectionManager(["1"])
    manager.select("S1", "1", "12A", Decimal("25"), "EUR")

    manager.select("S1", "1", "14B", Decimal("30"), "EUR")

    records = manager.get_selections()
    assert len(records) == 1
    assert records[0].seat_number == "14B"
    assert manager.holder_of("S1", "12A") is None


def test_same_traveler_on_different_segments():
    manager = SelectionManager(["1"])

    manager.select("S1", "1", "12A")
    manager.select("S2", "1", "3C")

    assert len(manager) == 2
    assert [r.segment_id for r in manager.get_selections()] == ["S1", "S2"]
    assert manager.get_selections("S2")[0].seat_number == "3C"


def test_seat_held_by_other_traveler_is_rejected():
    manager = SelectionManager(["1", "2"])
    manager.select("S1", "1", "12A")

    with pytest.raises(SeatAlreadySelected) as exc:
        manager.select("S1", "2", "12A")

    assert exc.value.holder == "1"
    assert manager.record_for("S1", "2") is None
    assert manager.holder_of("S1", "12A") == "1"


def test_same_seat_on_other_segment_is_allowed():
    manager = SelectionManager(["1", "2"])
    manager.select("S1", "1", "12A")

    manager.select("S2", "2", "12A")

    assert manager.holder_of("S2", "12A") == "2"


def test_capacity_exceeded_leaves_state_unchanged():
    manager = SelectionManager(["1", "2", "3"], max_selections=2)
    manager.select("S1", "1", "1A")
    manager.select("S1", "2", "1B")
    before = manager.get_selections()

    with pytest.raises(CapacityExceeded) as exc:
        manager.select("S1", "3", "1C")

    assert exc.value.limit == 2
    assert manager.get_selections() == before


def test_reselect_at_capacity_is_allowed():
    manager = SelectionManager(["1", "2"], max_selections=2)
    manager.select("S1", "1", "1A")
    manager.select("S1", "2", "1B")

    manager.select("S1", "1", "2A")

    assert manager.record_for("S1", "1").seat_number == "2A"
    assert manager.count_for_segment("S1") == 2


def test_default_cap_is_one_seat_per_traveler():
    manager = SelectionManager(["1", "2"])

    assert manager.max_selections == 2


def test_cap_never_exceeds_traveler_count():
    manager = SelectionManager(["1"], max_selections=5)

    assert manager.max_selections == 1


def test_unknown_traveler_is_rejected():
    manager = SelectionManager(["1"])

    with pytest.raises(UnknownTraveler):
        manager.select("S1", "42", "1A")
    assert len(manager) == 0


def test_deselect_missing_record_is_noop():
    manager = SelectionManager(["1", "2"])
    manager.select("S1", "1", "1A")
    before = manager.get_selections()

    assert manager.deselect("S1", "2") is None
    assert manager.deselect("S9", "1") is None
    assert manager.get_selections() == before


def test_deselect_by_seat_removes_holder():
    manager = SelectionManager(["1", "2"])
    manager.select("S1", "1", "1A")
    manager.select("S1", "2", "1B")

    removed = manager.deselect_by_seat("S1", "1B")

    assert removed.traveler_id == "2"
    assert manager.record_for("S1", "2") is None
    assert manager.deselect_by_seat("S1", "1B") is None


def test_clear_single_segment():
    manager = SelectionManager(["1"])
    manager.select("S1", "1", "1A")
    manager.select("S2", "1", "2A")

    manager.clear("S1")

    assert [r.segment_id for r in manager.get_selections()] == ["S2"]
    manager.clear()
    assert len(manager) == 0


def test_prune_returns_dropped_records():
    manager = SelectionManager(["1", "2"])
    manager.select("S1", "1", "1A")
    manager.select("S1", "2", "1B")

    dropped = manager.prune(lambda record: record.seat_number != "1B")

    assert [r.seat_number for r in dropped] == ["1B"]
    assert manager.holder_of("S1", "1B") is None


def test_uniqueness_holds_for_random_call_sequences():
    rng = random.Random(7)
    travelers = ["1", "2", "3"]
    segments = ["S1", "S2"]
    seats = ["1A", "1B", "1C", "2A"]
    manager = SelectionManager(travelers, max_selections=2)

    for _ in range(500):
        action = rng.choice(["select", "select", "deselect", "deselect_by_seat"])
        segment = rng.choice(segments)
        try:
            if action == "select":
                manager.select(segment, rng.choice(travelers), rng.choice(seats))
            elif action == "deselect":
                manager.deselect(segment, rng.choice(travelers))
            else:
                manager.deselect_by_seat(segment, rng.choice(seats))
        except (CapacityExceeded, SeatAlreadySelected):
            pass

        records = manager.get_selections()
        seat_keys = [(r.segment_id, r.seat_number) for r in records]
        traveler_keys = [(r.segment_id, r.traveler_id) for r in records]
        assert len(seat_keys) == len(set(seat_keys))
        assert len(traveler_keys) == len(set(traveler_keys))
        for segment_id in segments:
            assert manager.count_for_segment(segment_id) <= 2
