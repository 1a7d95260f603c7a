"""
Amadeus SeatMap Display yanıtlarını iç modellere dönüştüren mapper fonksiyonları.

Raw data dış sistemden gelir; beklenmeyen tipler atlanır, asla exception fırlatılmaz.
"""
import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from seatflow.models.seatmap_models import (
    Coordinates,
    Deck,
    DeckConfiguration,
    Facility,
    Seat,
    Seatmap,
    TravelerPricingEntry,
)

logger = logging.getLogger("SeatFlow-Mapper")


def map_amadeus_seatmaps(response: Any) -> List[Seatmap]:
    """
    Seatmap yanıtındaki tüm segmentleri dönüştürür.

    Hem `{"data": [...]}` zarfını hem de çıplak listeyi kabul eder.
    """
    if isinstance(response, dict):
        response = response.get("data")

    if not isinstance(response, list):
        return []

    seatmaps: List[Seatmap] = []
    for index, raw in enumerate(response):
        seatmap = map_amadeus_seatmap(raw, index=index)
        if seatmap is not None:
            seatmaps.append(seatmap)

    return seatmaps


def map_amadeus_seatmap(raw_seatmap: Any, index: int = 0) -> Optional[Seatmap]:
    """Tek bir segmentin ham seatmap verisini Seatmap modeline dönüştürür."""

    # 🛑 GUARD: input doğrulama
    if not isinstance(raw_seatmap, dict):
        return None

    decks: List[Deck] = []
    raw_decks = raw_seatmap.get("decks")
    if isinstance(raw_decks, list):
        for raw_deck in raw_decks:
            deck = _map_deck(raw_deck)
            if deck is not None:
                decks.append(deck)

    departure = _as_dict(raw_seatmap.get("departure"))
    arrival = _as_dict(raw_seatmap.get("arrival"))
    aircraft = _as_dict(raw_seatmap.get("aircraft"))

    return Seatmap(
        segment_id=str(raw_seatmap.get("segmentId") or f"segment-{index}"),
        carrier_code=raw_seatmap.get("carrierCode"),
        flight_number=raw_seatmap.get("number"),
        origin=departure.get("iataCode"),
        destination=arrival.get("iataCode"),
        departure_at=departure.get("at"),
        aircraft_code=aircraft.get("code"),
        cabin_class=raw_seatmap.get("class"),
        decks=decks,
        available_seats_counters=_map_counters(raw_seatmap.get("availableSeatsCounters")),
    )


def extract_seat_characteristics(response: Any) -> Dict[str, str]:
    """dictionaries.seatCharacteristics tablosunu (kod → açıklama) döndürür."""
    if not isinstance(response, dict):
        return {}

    dictionaries = _as_dict(response.get("dictionaries"))
    table = dictionaries.get("seatCharacteristics")
    if not isinstance(table, dict):
        return {}

    return {str(code): str(text) for code, text in table.items()}


def _map_deck(raw_deck: Any) -> Optional[Deck]:
    if not isinstance(raw_deck, dict):
        return None

    seats: List[Seat] = []
    seen_numbers = set()
    raw_seats = raw_deck.get("seats")
    if isinstance(raw_seats, list):
        for raw_seat in raw_seats:
            seat = _map_seat(raw_seat)
            if seat is None:
                continue
            if seat.number in seen_numbers:
                logger.warning(f"⚠️ Duplicate seat number {seat.number} in deck data")
            seen_numbers.add(seat.number)
            seats.append(seat)

    facilities: List[Facility] = []
    raw_facilities = raw_deck.get("facilities")
    if isinstance(raw_facilities, list):
        for raw_facility in raw_facilities:
            if not isinstance(raw_facility, dict):
                continue
            facilities.append(Facility(
                code=raw_facility.get("code"),
                column=_as_str(raw_facility.get("column")),
                row=_as_str(raw_facility.get("row")),
                position=raw_facility.get("position"),
                coordinates=_map_coordinates(raw_facility.get("coordinates")),
            ))

    return Deck(
        deck_type=raw_deck.get("deckType") or "MAIN",
        configuration=_map_configuration(raw_deck.get("deckConfiguration")),
        seats=seats,
        facilities=facilities,
    )


def _map_seat(raw_seat: Any) -> Optional[Seat]:
    if not isinstance(raw_seat, dict):
        return None

    number = raw_seat.get("number")
    if not isinstance(number, str) or not number.strip():
        logger.warning("⚠️ Seat without number skipped")
        return None

    codes = raw_seat.get("characteristicsCodes")
    if not isinstance(codes, list):
        codes = []

    pricing: List[TravelerPricingEntry] = []
    raw_pricing = raw_seat.get("travelerPricing")
    if isinstance(raw_pricing, list):
        for entry in raw_pricing:
            if not isinstance(entry, dict):
                continue
            price = _as_dict(entry.get("price"))
            pricing.append(TravelerPricingEntry(
                traveler_id=_as_str(entry.get("travelerId")),
                availability=entry.get("seatAvailabilityStatus"),
                price=parse_amount(price.get("total")),
                currency=price.get("currency"),
            ))

    amenities = raw_seat.get("amenities")
    if not isinstance(amenities, list):
        amenities = []

    return Seat(
        number=number.strip().upper(),
        cabin=raw_seat.get("cabin"),
        characteristics_codes=[str(c) for c in codes],
        coordinates=_map_coordinates(raw_seat.get("coordinates")),
        traveler_pricing=pricing,
        amenities=[a for a in amenities if isinstance(a, dict)],
    )


def _map_configuration(raw_config: Any) -> Optional[DeckConfiguration]:
    if not isinstance(raw_config, dict):
        return None

    exit_rows_x = raw_config.get("exitRowsX")
    if not isinstance(exit_rows_x, list):
        exit_rows_x = []

    return DeckConfiguration(
        width=_as_int(raw_config.get("width")),
        length=_as_int(raw_config.get("length")),
        start_seat_row=_as_int(raw_config.get("startSeatRow")),
        end_seat_row=_as_int(raw_config.get("endSeatRow")),
        start_wings_row=_as_int(raw_config.get("startWingsRow")),
        end_wings_row=_as_int(raw_config.get("endWingsRow")),
        start_wings_x=_as_int(raw_config.get("startWingsX")),
        end_wings_x=_as_int(raw_config.get("endWingsX")),
        exit_rows_x=[x for x in (_as_int(v) for v in exit_rows_x) if x is not None],
    )


def _map_coordinates(raw: Any) -> Optional[Coordinates]:
    if not isinstance(raw, dict):
        return None
    return Coordinates(x=_as_int(raw.get("x")), y=_as_int(raw.get("y")))


def _map_counters(raw: Any) -> Dict[str, int]:
    if not isinstance(raw, list):
        return {}

    counters: Dict[str, int] = {}
    for entry in raw:
        if not isinstance(entry, dict):
            continue
        traveler_id = _as_str(entry.get("travelerId"))
        value = _as_int(entry.get("value"))
        if traveler_id is not None and value is not None:
            counters[traveler_id] = value
    return counters


def parse_amount(value: Any) -> Optional[Decimal]:
    if value is None:
        return None
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None


def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value)
    return None


def _as_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)
