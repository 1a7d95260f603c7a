import sys
from pathlib import Path
from decimal import Decimal
import pytest

# 1. Force backend/ into sys.path so `seatflow` imports without installing
ROOT_DIR = Path(__file__).resolve().parents[1]
BACKEND_DIR = ROOT_DIR / "backend"
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

# 2. Pin configuration for tests
import os
os.environ["SEATMAP_DEFAULT_CURRENCY"] = "EUR"
os.environ["SEATMAP_AISLE_OCCUPANCY_THRESHOLD"] = "0.10"
os.environ.pop("SEATMAP_MAX_SELECTIONS", None)

from seatflow.models.seatmap_models import (
    Coordinates, Deck, DeckConfiguration, Facility, Seat, Seatmap, TravelerPricingEntry
)
from seatflow.services.seatmap.session_store import clear_sessions


@pytest.fixture
def make_seat():
    """Seat factory: make_seat("1A", 1, 0, status="AVAILABLE", price="0", codes=["W"])"""
    def _make(number, x=None, y=None, status="AVAILABLE", price="0", currency="EUR",
              codes=None, travelers=("1",)):
        pricing = []
        if status is not None:
            pricing = [
                TravelerPricingEntry(
                    traveler_id=traveler_id,
                    availability=status,
                    price=Decimal(price) if price is not None else None,
                    currency=currency,
                )
                for traveler_id in travelers
            ]
        coordinates = Coordinates(x=x, y=y) if x is not None or y is not None else None
        return Seat(
            number=number,
            characteristics_codes=list(codes or []),
            coordinates=coordinates,
            traveler_pricing=pricing,
        )
    return _make


@pytest.fixture
def make_facility():
    def _make(code, x, y):
        return Facility(code=code, coordinates=Coordinates(x=x, y=y))
    return _make


@pytest.fixture
def narrowbody_deck(make_seat, make_facility):
    """
    Rows 10-14, A B C | aisle | D E F, physical columns 0-2 and 4-6.
    Row 12 is an exit row, 10C is occupied, a lavatory sits in front.
    """
    seats = []
    for x, row in enumerate(range(10, 15), start=1):
        for y, column in zip([0, 1, 2, 4, 5, 6], "ABCDEF"):
            codes = []
            if row == 12:
                codes.append("E")
            status = "OCCUPIED" if f"{row}{column}" == "10C" else "AVAILABLE"
            price = "25.00" if row == 12 else "0"
            seats.append(make_seat(f"{row}{column}", x, y, status=status, price=price,
                                   codes=codes, travelers=("1", "2")))
    facilities = [make_facility("LA", 0, 0), make_facility("GA", 0, 6)]
    return Deck(
        deck_type="MAIN",
        configuration=DeckConfiguration(start_wings_row=11, end_wings_row=13),
        seats=seats,
        facilities=facilities,
    )


@pytest.fixture
def narrowbody_seatmap(narrowbody_deck):
    return Seatmap(
        segment_id="1",
        carrier_code="LH",
        flight_number="400",
        origin="FRA",
        destination="JFK",
        aircraft_code="320",
        decks=[narrowbody_deck],
    )


@pytest.fixture(autouse=True)
def _reset_sessions():
    clear_sessions()
    yield
    clear_sessions()
