"""
Seat status resolver - fiyat girişleri + canlı seçimlerden tek bir durum üretir.

Kural sırası:
    1. Segmentte bu koltuk için seçim varsa -> selected
    2. Yolcunun fiyat girişindeki availability -> occupied / blocked / available
    3. Hiç fiyat girişi yoksa -> blocked (seçilemez ama sınıflandırılır)
"""
from typing import Iterable, Optional

from seatflow.models.seatmap_models import (
    Seat,
    SeatAvailability,
    SeatStatus,
    SelectionRecord,
    TravelerPricingEntry,
)

_AVAILABILITY_TO_STATUS = {
    SeatAvailability.AVAILABLE.value: SeatStatus.AVAILABLE,
    SeatAvailability.OCCUPIED.value: SeatStatus.OCCUPIED,
    SeatAvailability.BLOCKED.value: SeatStatus.BLOCKED,
}


def pricing_entry_for(seat: Seat, traveler_id: Optional[str] = None) -> Optional[TravelerPricingEntry]:
    """
    The traveler's own pricing entry, or the first entry when no traveler
    is given or the seat carries no entry for them.
    """
    if not seat.traveler_pricing:
        return None

    if traveler_id is not None:
        for entry in seat.traveler_pricing:
            if entry.traveler_id == traveler_id:
                return entry

    return seat.traveler_pricing[0]


def availability_status(seat: Seat, traveler_id: Optional[str] = None) -> SeatStatus:
    """Status from pricing data alone, ignoring selections."""
    entry = pricing_entry_for(seat, traveler_id)
    if entry is None or not entry.availability:
        return SeatStatus.BLOCKED

    return _AVAILABILITY_TO_STATUS.get(entry.availability.upper(), SeatStatus.BLOCKED)


def resolve_seat_status(
    seat: Seat,
    selections: Iterable[SelectionRecord],
    segment_id: Optional[str] = None,
    traveler_id: Optional[str] = None,
) -> SeatStatus:
    for record in selections:
        if record.seat_number != seat.number:
            continue
        if segment_id is None or record.segment_id == segment_id:
            return SeatStatus.SELECTED

    return availability_status(seat, traveler_id)
